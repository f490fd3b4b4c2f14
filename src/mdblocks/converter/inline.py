"""Convert normalized inline AST tokens to :class:`InlineNode` trees.

Mapping (canonical token type → ``InlineNode.type``)::

    text                  → text
    emphasis              → em        (children kept)
    strong                → strong    (children kept)
    strikethrough         → del       (children kept)
    codespan              → code      (raw text, no nested formatting)
    link                  → link      (data: href, title; children = label)
    image                 → image     (data: src, alt, title; no children)
    inline_math           → math      (raw source)
    footnote_ref          → footnote_ref (raw label)
    softbreak, linebreak  → text "\\n"
    html_inline           → text      (raw HTML as text)
    anything else         → passthrough node with the same type

Adjacent text nodes are merged, so each run of plain text is one node.
When the inline-math grammar rule is disabled, merged text is split by
:func:`split_inline_math` instead.
"""

from __future__ import annotations

from mdblocks.config import MdBlocksConfig
from mdblocks.models import InlineNode, InlineType

NEWLINE = InlineNode(InlineType.TEXT.value, text="\n")


# ---------------------------------------------------------------------------
# Fallback math scanner
# ---------------------------------------------------------------------------

def split_inline_math(text: str) -> list[InlineNode]:
    """Split *text* into text and ``math`` nodes on unescaped ``$``.

    * ``\\$`` is a literal dollar: the backslash is dropped in text, kept
      in math source.
    * ``$$`` is two literal dollars, inside or outside a span; it never
      opens or closes one.
    * A span still open at the end of *text* is emitted as ``math``.
      Pairing is best effort; ``"cost $5"`` becomes text ``"cost "`` and
      math ``"5"``.

    >>> [(n.type, n.text) for n in split_inline_math("a $x$ b")]
    [('text', 'a '), ('math', 'x'), ('text', ' b')]
    """
    nodes: list[InlineNode] = []
    buffer: list[str] = []
    in_math = False

    def flush(kind: InlineType) -> None:
        if buffer:
            nodes.append(InlineNode(kind.value, text="".join(buffer)))
            buffer.clear()

    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < length else ""

        if ch == "\\" and nxt == "$":
            buffer.append("\\$" if in_math else "$")
            i += 2
        elif ch == "$" and nxt == "$":
            buffer.append("$$")
            i += 2
        elif ch == "$":
            if in_math:
                flush(InlineType.MATH)
            else:
                flush(InlineType.TEXT)
            in_math = not in_math
            i += 1
        else:
            buffer.append(ch)
            i += 1

    flush(InlineType.MATH if in_math else InlineType.TEXT)
    return nodes


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_inlines(
    children: list[dict],
    config: MdBlocksConfig,
) -> tuple[InlineNode, ...]:
    """Convert inline AST tokens to a tuple of :class:`InlineNode`.

    Parameters
    ----------
    children:
        Normalized inline AST tokens.
    config:
        Decomposition configuration; ``inline_math_extension`` selects
        between the grammar rule and the fallback scanner.

    Returns
    -------
    tuple[InlineNode, ...]
        Nodes in rendering order with adjacent text merged.
    """
    nodes: list[InlineNode] = []

    for token in children:
        token_type = token.get("type", "")

        if token_type == "text":
            raw = token.get("raw", "")
            if raw:
                nodes.append(InlineNode(InlineType.TEXT.value, text=raw))

        elif token_type in ("softbreak", "linebreak"):
            nodes.append(NEWLINE)

        elif token_type == "emphasis":
            nodes.append(_container(InlineType.EM.value, token, config))

        elif token_type == "strong":
            nodes.append(_container(InlineType.STRONG.value, token, config))

        elif token_type == "strikethrough":
            nodes.append(_container(InlineType.DEL.value, token, config))

        elif token_type == "codespan":
            nodes.append(InlineNode(InlineType.CODE.value, text=token.get("raw", "")))

        elif token_type == "link":
            attrs = token.get("attrs", {})
            data = {"href": attrs.get("url", "")}
            if attrs.get("title"):
                data["title"] = attrs["title"]
            nodes.append(InlineNode(
                InlineType.LINK.value,
                data=data,
                children=build_inlines(token.get("children", []), config),
            ))

        elif token_type == "image":
            attrs = token.get("attrs", {})
            alt = "".join(
                node.plain_text()
                for node in build_inlines(token.get("children", []), config)
            )
            data = {"src": attrs.get("url", ""), "alt": alt}
            if attrs.get("title"):
                data["title"] = attrs["title"]
            nodes.append(InlineNode(InlineType.IMAGE.value, data=data))

        elif token_type == "inline_math":
            nodes.append(InlineNode(InlineType.MATH.value, text=token.get("raw", "")))

        elif token_type == "footnote_ref":
            nodes.append(InlineNode(InlineType.FOOTNOTE_REF.value, text=token.get("raw", "")))

        elif token_type == "html_inline":
            raw = token.get("raw", "")
            if raw:
                nodes.append(InlineNode(InlineType.TEXT.value, text=raw))

        elif token_type:
            nodes.append(InlineNode(
                token_type,
                text=token.get("raw"),
                children=build_inlines(token.get("children", []), config),
            ))

    merged = merge_text_nodes(nodes)
    if config.enable_math and not config.inline_math_extension:
        merged = _split_text_math(merged)
    return tuple(merged)


def merge_text_nodes(nodes: list[InlineNode]) -> list[InlineNode]:
    """Join runs of adjacent ``text`` nodes into single nodes."""
    merged: list[InlineNode] = []
    for node in nodes:
        if (
            merged
            and node.type == InlineType.TEXT.value
            and merged[-1].type == InlineType.TEXT.value
            and not node.children
            and not merged[-1].children
        ):
            merged[-1] = InlineNode(
                InlineType.TEXT.value,
                text=(merged[-1].text or "") + (node.text or ""),
            )
        else:
            merged.append(node)
    return merged


def plain_text(nodes: tuple[InlineNode, ...] | list[InlineNode]) -> str:
    """Concatenate the raw text of *nodes* depth-first."""
    return "".join(node.plain_text() for node in nodes)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _container(node_type: str, token: dict, config: MdBlocksConfig) -> InlineNode:
    return InlineNode(
        node_type,
        children=build_inlines(token.get("children", []), config),
    )


def _split_text_math(nodes: list[InlineNode]) -> list[InlineNode]:
    result: list[InlineNode] = []
    for node in nodes:
        if node.type == InlineType.TEXT.value and node.text and "$" in node.text:
            result.extend(split_inline_math(node.text))
        else:
            result.append(node)
    return result
