"""Walk normalized AST tokens and emit flat leaf :class:`Block` values.

Every structural token either is a leaf, emitting one or more blocks, or
is descended into with its own :class:`BlockPathEntry` appended to the
breadcrumb:

- heading -> ``h1``..``h6`` block
- paragraph -> ``p`` block (``blockquote`` when inside a block quote)
- block_quote -> children visited; an empty quote is a ``blockquote`` leaf
- list -> one ``li`` block per item, nested lists visited after their item
- block_code -> group of ``code`` chunks with precomputed tokens
- thematic_break -> ``hr`` block
- table -> one ``table_row`` block per row (delegate to tables.py)
- block_math -> ``math_block`` block
- footnote_def -> ``footnote_def`` block
- html_block -> loose text paragraph

The walk never raises on malformed input: recognition problems fall back
to paragraphs and text.
"""

from __future__ import annotations

from collections.abc import Callable as _Callable
from typing import Any

from mdblocks.config import MdBlocksConfig
from mdblocks.converter.code import CodeTokenizer, language_from_info, prepare_code
from mdblocks.converter.inline import build_inlines
from mdblocks.converter.tables import build_table_rows, table_to_plain_text
from mdblocks.models import Block, BlockPathEntry, BlockTag, InlineNode, InlineType

Path = tuple[BlockPathEntry, ...]

_LIST_TAGS: frozenset[str] = frozenset({"ol", "ul"})

_NEWLINE = InlineNode(InlineType.TEXT.value, text="\n")
_EMPTY_ITEM: tuple[InlineNode, ...] = (InlineNode(InlineType.TEXT.value, text=""),)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_blocks(
    tokens: list[dict],
    config: MdBlocksConfig,
) -> list[Block]:
    """Convert normalized AST tokens to a flat list of leaf blocks.

    Parameters
    ----------
    tokens:
        List of canonical AST tokens from :class:`ASTNormalizer`.
    config:
        Decomposition configuration.

    Returns
    -------
    list[Block]
        Leaf blocks in reading order.  Ids and ``globalIndex`` values
        count from zero for every call.
    """
    state = _WalkState(config)
    _visit_tokens(tokens, (), state)
    return state.blocks


class _WalkState:
    """Call-scoped counters and stacks for one walk."""

    __slots__ = ("blocks", "config", "global_index", "id_counter", "list_stack", "tokenizer")

    def __init__(self, config: MdBlocksConfig) -> None:
        self.config = config
        self.blocks: list[Block] = []
        self.id_counter = 0
        self.global_index = 0
        # One slot per open list: a running counter for ordered lists,
        # None for unordered ones.
        self.list_stack: list[int | None] = []
        self.tokenizer = CodeTokenizer(config.metrics)

    def emit(self, path: Path, tag: str, meta: dict[str, Any] | None = None, **fields: Any) -> Block:
        """Append a block with the next id and ``globalIndex``."""
        block_meta = dict(meta or {})
        block_meta["globalIndex"] = self.global_index
        block = Block(
            id=f"b{self.id_counter}",
            path=path,
            block_tag=tag,
            meta=block_meta,
            **fields,
        )
        self.id_counter += 1
        self.global_index += 1
        self.blocks.append(block)
        return block


# ---------------------------------------------------------------------------
# Token dispatch
# ---------------------------------------------------------------------------

def _visit_tokens(tokens: list[dict], path: Path, state: _WalkState) -> None:
    for token in tokens:
        _visit_token(token, path, state)


def _visit_token(token: dict, path: Path, state: _WalkState) -> None:
    token_type = token.get("type", "")
    handler = _BLOCK_HANDLERS.get(token_type)
    if handler is not None:
        handler(token, path, state)
        return

    # Unknown structural token: descend, or keep its raw text.
    children = token.get("children")
    if children:
        _visit_tokens(children, (*path, BlockPathEntry(token_type or "div")), state)
    elif token.get("raw"):
        _emit_loose_text(token["raw"], path, state)


def _inside_blockquote(path: Path) -> bool:
    return any(entry.tag == BlockTag.BLOCKQUOTE.value for entry in path)


def _paragraph_tag(path: Path) -> str:
    if _inside_blockquote(path):
        return BlockTag.BLOCKQUOTE.value
    return BlockTag.PARAGRAPH.value


# ---------------------------------------------------------------------------
# Leaf builders
# ---------------------------------------------------------------------------

def _build_heading(token: dict, path: Path, state: _WalkState) -> None:
    level = token.get("attrs", {}).get("level", 1)
    tag = BlockTag.heading(level).value
    state.emit(
        (*path, BlockPathEntry(tag)),
        tag,
        inlines=build_inlines(token.get("children", []), state.config),
    )


def _build_paragraph(token: dict, path: Path, state: _WalkState) -> None:
    state.emit(
        (*path, BlockPathEntry(BlockTag.PARAGRAPH.value)),
        _paragraph_tag(path),
        inlines=build_inlines(token.get("children", []), state.config),
    )


def _emit_loose_text(raw: str, path: Path, state: _WalkState) -> None:
    text = raw.strip()
    if not text:
        return
    state.emit(
        (*path, BlockPathEntry(BlockTag.PARAGRAPH.value)),
        _paragraph_tag(path),
        inlines=(InlineNode(InlineType.TEXT.value, text=text),),
    )


def _build_html_block(token: dict, path: Path, state: _WalkState) -> None:
    _emit_loose_text(token.get("raw", ""), path, state)


def _build_block_quote(token: dict, path: Path, state: _WalkState) -> None:
    quote_path = (*path, BlockPathEntry(BlockTag.BLOCKQUOTE.value))
    children = token.get("children", [])
    if not children:
        state.emit(quote_path, BlockTag.BLOCKQUOTE.value)
        return
    _visit_tokens(children, quote_path, state)


def _build_divider(token: dict, path: Path, state: _WalkState) -> None:
    state.emit((*path, BlockPathEntry(BlockTag.HR.value)), BlockTag.HR.value)


def _build_block_math(token: dict, path: Path, state: _WalkState) -> None:
    state.emit(
        (*path, BlockPathEntry(BlockTag.MATH_BLOCK.value)),
        BlockTag.MATH_BLOCK.value,
        math=token.get("raw", "").strip(),
    )


def _build_footnote_def(token: dict, path: Path, state: _WalkState) -> None:
    state.emit(
        (*path, BlockPathEntry(BlockTag.FOOTNOTE_DEF.value)),
        BlockTag.FOOTNOTE_DEF.value,
        inlines=build_inlines(token.get("children", []), state.config),
        footnote_id=token.get("attrs", {}).get("key", ""),
        is_footnote_definition=True,
    )


def _build_code_block(token: dict, path: Path, state: _WalkState) -> None:
    """Emit one ``code`` block per chunk of the code element.

    Chunks share a ``codeBlockGroupId`` named after the id counter at the
    first chunk, plus the full text and longest line of the element.
    """
    code_path = (*path, BlockPathEntry("pre"))
    language = language_from_info(token.get("attrs", {}).get("info"))
    group = prepare_code(token.get("raw", ""), state.config.code_chunk_lines)
    group_id = f"codeGroup{state.id_counter}"
    total = len(group.chunks)

    for index, chunk in enumerate(group.chunks):
        is_first = index == 0
        is_last = index == total - 1
        tokens = (
            state.tokenizer.tokenize(chunk, language)
            if state.config.highlight_code
            else None
        )
        state.emit(
            code_path,
            BlockTag.CODE.value,
            {
                "codeBlockGroupId": group_id,
                "isFirstInGroup": is_first,
                "isLastInGroup": is_last,
                "isMiddleInGroup": not is_first and not is_last,
                "blockIndex": index,
                "totalBlocks": total,
                "fullCodeContent": group.full_content,
                "fullCodeLongestLine": group.longest_line,
            },
            raw_code=chunk,
            code_language=language,
            is_code_block=True,
            code_tokens=tokens,
        )


def _build_table(token: dict, path: Path, state: _WalkState) -> None:
    table_path = (*path, BlockPathEntry("table"))
    rows = build_table_rows(token, state.config)
    if rows is None:
        _emit_loose_text(table_to_plain_text(token), path, state)
        return

    row_path = (*table_path, BlockPathEntry("tr"))
    for row_index, row in enumerate(rows):
        meta: dict[str, Any] = {
            "isHeader": row.is_header,
            "rowIndex": row_index,
            "columnCount": len(row.cells),
        }
        if row.cell_align:
            meta["cellAlign"] = list(row.cell_align)
        state.emit(row_path, BlockTag.TABLE_ROW.value, meta, table_cells=row.cells)


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

def _build_list(token: dict, path: Path, state: _WalkState) -> None:
    """Visit a list's items with a fresh counter slot pushed."""
    attrs = token.get("attrs", {})
    ordered = bool(attrs.get("ordered"))
    entry_attrs = None
    start = attrs.get("start")
    if ordered and start is not None and start != 1:
        entry_attrs = {"start": start}

    list_path = (*path, BlockPathEntry("ol" if ordered else "ul", entry_attrs))
    state.list_stack.append(0 if ordered else None)
    try:
        _visit_tokens(token.get("children", []), list_path, state)
    finally:
        state.list_stack.pop()


def _build_list_item(token: dict, path: Path, state: _WalkState) -> None:
    """Emit one ``li`` block, then visit the item's nested lists.

    Everything in the item except its direct sub-lists is flattened into
    the item's inline content.
    """
    list_type = "ul"
    for entry in reversed(path):
        if entry.tag in _LIST_TAGS:
            list_type = entry.tag
            break

    meta: dict[str, Any] = {"listType": list_type}
    if list_type == "ol" and state.list_stack and state.list_stack[-1] is not None:
        state.list_stack[-1] += 1
        meta["order"] = state.list_stack[-1]
    meta["depth"] = sum(1 for entry in path if entry.tag in _LIST_TAGS)

    content: list[dict] = []
    nested_lists: list[dict] = []
    for child in token.get("children", []):
        if child.get("type") == "list":
            nested_lists.append(child)
        else:
            content.append(child)

    item_path = (*path, BlockPathEntry(BlockTag.LIST_ITEM.value))
    state.emit(
        item_path,
        BlockTag.LIST_ITEM.value,
        meta,
        inlines=gather_list_item_inlines(content, state.config),
    )

    for nested in nested_lists:
        _build_list(nested, item_path, state)


def gather_list_item_inlines(
    children: list[dict],
    config: MdBlocksConfig,
) -> tuple[InlineNode, ...]:
    """Flatten a list item's block children into one inline sequence.

    Pieces are separated by a ``"\\n"`` text node.  An item with no
    content yields a single empty text node.
    """
    out: list[InlineNode] = []

    def piece(nodes: tuple[InlineNode, ...] | list[InlineNode]) -> None:
        if out:
            out.append(_NEWLINE)
        out.extend(nodes)

    def walk(token: dict) -> None:
        token_type = token.get("type", "")
        if token_type in ("paragraph", "heading", "footnote_def"):
            piece(build_inlines(token.get("children", []), config))
        elif token_type == "block_code":
            piece([InlineNode(InlineType.CODE.value, text=token.get("raw", "").rstrip("\n"))])
        elif token_type == "block_math":
            piece([InlineNode(InlineType.MATH.value, text=token.get("raw", "").strip())])
        elif token_type == "table":
            text = table_to_plain_text(token)
            if text:
                piece([InlineNode(InlineType.TEXT.value, text=text)])
        elif token.get("children"):
            for child in token["children"]:
                walk(child)
        elif token.get("raw") and token["raw"].strip():
            piece([InlineNode(InlineType.TEXT.value, text=token["raw"].strip())])

    for child in children:
        walk(child)
    return tuple(out) if out else _EMPTY_ITEM


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------

_BlockHandler = _Callable[[dict, Path, _WalkState], None]

_BLOCK_HANDLERS: dict[str, _BlockHandler] = {
    "heading": _build_heading,
    "paragraph": _build_paragraph,
    "block_quote": _build_block_quote,
    "list": _build_list,
    "list_item": _build_list_item,
    "block_code": _build_code_block,
    "thematic_break": _build_divider,
    "table": _build_table,
    "block_math": _build_block_math,
    "footnote_def": _build_footnote_def,
    "html_block": _build_html_block,
}
