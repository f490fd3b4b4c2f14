"""JSON-safe wire format for :class:`Block` sequences.

The wire structure is made only of string-keyed dicts, lists, strings,
numbers, booleans and ``None``, so it can cross a worker boundary or be
stored as JSON.  A block encodes as::

    {
        "id": "b3",
        "blockTag": "code",
        "path": [{"tag": "pre"}],
        "rawCode": "print(1)",
        "codeLanguage": "python",
        "isCodeBlock": true,
        "meta": {"codeBlockGroupId": "codeGroup3", "globalIndex": 3, ...},
        "codeTok": [{"t": "print", "c": "nb"}, {"t": "(", "c": "p"}, ...]
    }

Other keys are ``inlines`` (list of ``{type, text?, data?, children?}``),
``tableCells`` (list of inline lists), ``math``, ``footnoteId`` and
``footDef``.  ``None``, ``False`` and empty defaults are omitted;
``tableCells`` and ``codeTok`` are omitted only when ``None``.  Decoding
restores every omitted field to its default, so
``decode_block(encode_block(b)) == b`` for every block.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from mdblocks.errors import MdBlocksDecodeError
from mdblocks.models import Block, BlockPathEntry, CodeToken, InlineNode

# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def encode_path_entry(entry: BlockPathEntry) -> dict[str, Any]:
    out: dict[str, Any] = {"tag": entry.tag}
    if entry.attributes is not None:
        out["attributes"] = dict(entry.attributes)
    return out


def encode_inline(node: InlineNode) -> dict[str, Any]:
    out: dict[str, Any] = {"type": node.type}
    if node.text is not None:
        out["text"] = node.text
    if node.data is not None:
        out["data"] = dict(node.data)
    if node.children:
        out["children"] = [encode_inline(child) for child in node.children]
    return out


def encode_code_token(token: CodeToken) -> dict[str, Any]:
    out: dict[str, Any] = {"t": token.text}
    if token.class_name is not None:
        out["c"] = token.class_name
    return out


def encode_block(block: Block) -> dict[str, Any]:
    """Encode one block to its wire dict."""
    out: dict[str, Any] = {
        "id": block.id,
        "blockTag": block.block_tag,
        "path": [encode_path_entry(entry) for entry in block.path],
    }
    if block.inlines:
        out["inlines"] = [encode_inline(node) for node in block.inlines]
    if block.raw_code is not None:
        out["rawCode"] = block.raw_code
    if block.code_language is not None:
        out["codeLanguage"] = block.code_language
    if block.is_code_block:
        out["isCodeBlock"] = True
    if block.meta is not None:
        out["meta"] = _copy_json(block.meta)
    if block.table_cells is not None:
        out["tableCells"] = [
            [encode_inline(node) for node in cell] for cell in block.table_cells
        ]
    if block.math is not None:
        out["math"] = block.math
    if block.footnote_id is not None:
        out["footnoteId"] = block.footnote_id
    if block.is_footnote_definition:
        out["footDef"] = True
    if block.code_tokens is not None:
        out["codeTok"] = [encode_code_token(token) for token in block.code_tokens]
    return out


def encode_blocks(blocks: list[Block] | tuple[Block, ...]) -> list[dict[str, Any]]:
    """Encode a block sequence, preserving order."""
    return [encode_block(block) for block in blocks]


def _copy_json(value: Any) -> Any:
    """Deep-copy dicts and lists; tuples become lists."""
    if isinstance(value, Mapping):
        return {str(key): _copy_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_copy_json(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _fail(message: str, field: str, index: int | None, cause: Exception | None = None) -> MdBlocksDecodeError:
    context: dict[str, Any] = {"field": field}
    if index is not None:
        context["index"] = index
    return MdBlocksDecodeError(message, context=context, cause=cause)


def _expect(payload: Mapping[str, Any], key: str, kind: type | tuple[type, ...], index: int | None, *, required: bool = False) -> Any:
    if key not in payload or payload[key] is None:
        if required:
            raise _fail(f"missing required field {key!r}", key, index)
        return None
    value = payload[key]
    if not isinstance(value, kind):
        raise _fail(
            f"field {key!r} has unexpected type {type(value).__name__}", key, index,
        )
    return value


def decode_path_entry(payload: Any, index: int | None = None) -> BlockPathEntry:
    if not isinstance(payload, Mapping):
        raise _fail("path entry is not a mapping", "path", index)
    tag = _expect(payload, "tag", str, index, required=True)
    attributes = _expect(payload, "attributes", Mapping, index)
    return BlockPathEntry(tag, dict(attributes) if attributes is not None else None)


def decode_inline(payload: Any, index: int | None = None) -> InlineNode:
    if not isinstance(payload, Mapping):
        raise _fail("inline node is not a mapping", "inlines", index)
    node_type = _expect(payload, "type", str, index, required=True)
    data = _expect(payload, "data", Mapping, index)
    children = _expect(payload, "children", list, index) or []
    return InlineNode(
        type=node_type,
        text=_expect(payload, "text", str, index),
        data=dict(data) if data is not None else None,
        children=tuple(decode_inline(child, index) for child in children),
    )


def decode_code_token(payload: Any, index: int | None = None) -> CodeToken:
    if not isinstance(payload, Mapping):
        raise _fail("code token is not a mapping", "codeTok", index)
    return CodeToken(
        text=_expect(payload, "t", str, index, required=True),
        class_name=_expect(payload, "c", str, index),
    )


def decode_block(payload: Any, index: int | None = None) -> Block:
    """Rebuild a :class:`Block` from its wire dict.

    Raises
    ------
    MdBlocksDecodeError
        If *payload* is not a mapping, lacks ``id``, ``blockTag`` or
        ``path``, or holds a field of the wrong type.  The error context
        names the offending ``field`` and, when known, the block ``index``.
    """
    if not isinstance(payload, Mapping):
        raise _fail("block is not a mapping", "block", index)

    block_id = _expect(payload, "id", str, index, required=True)
    block_tag = _expect(payload, "blockTag", str, index, required=True)
    path = _expect(payload, "path", list, index, required=True)

    inlines = _expect(payload, "inlines", list, index) or []
    meta = _expect(payload, "meta", Mapping, index)
    cells = _expect(payload, "tableCells", list, index)
    tokens = _expect(payload, "codeTok", list, index)

    table_cells = None
    if cells is not None:
        if not all(isinstance(cell, list) for cell in cells):
            raise _fail("tableCells entries must be lists", "tableCells", index)
        table_cells = tuple(
            tuple(decode_inline(node, index) for node in cell) for cell in cells
        )

    return Block(
        id=block_id,
        path=tuple(decode_path_entry(entry, index) for entry in path),
        block_tag=block_tag,
        inlines=tuple(decode_inline(node, index) for node in inlines),
        raw_code=_expect(payload, "rawCode", str, index),
        code_language=_expect(payload, "codeLanguage", str, index),
        is_code_block=bool(_expect(payload, "isCodeBlock", bool, index)),
        meta=_copy_json(meta) if meta is not None else None,
        table_cells=table_cells,
        math=_expect(payload, "math", str, index),
        footnote_id=_expect(payload, "footnoteId", str, index),
        is_footnote_definition=bool(_expect(payload, "footDef", bool, index)),
        code_tokens=(
            tuple(decode_code_token(token, index) for token in tokens)
            if tokens is not None
            else None
        ),
    )


def decode_blocks(payload: Any) -> list[Block]:
    """Decode a wire list produced by :func:`encode_blocks`."""
    if not isinstance(payload, list):
        raise _fail("block payload is not a list", "blocks", None)
    return [decode_block(item, index) for index, item in enumerate(payload)]


# ---------------------------------------------------------------------------
# JSON text
# ---------------------------------------------------------------------------

def dumps(blocks: list[Block] | tuple[Block, ...], **kwargs: Any) -> str:
    """Serialize *blocks* to JSON text.  *kwargs* go to :func:`json.dumps`."""
    kwargs.setdefault("ensure_ascii", False)
    return json.dumps(encode_blocks(blocks), **kwargs)


def loads(text: str | bytes) -> list[Block]:
    """Parse JSON text produced by :func:`dumps`."""
    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise _fail(f"invalid JSON: {exc}", "json", None, cause=exc) from exc
    return decode_blocks(payload)
