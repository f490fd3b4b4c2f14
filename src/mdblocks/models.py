"""Public data models for mdblocks.

Every value produced by a decomposition is one of the frozen dataclasses
below.  They are created fresh on every call, never mutated afterwards,
and carry no references back to their parents: a :class:`Block` owns its
breadcrumb path, its inline tree, its table cells and its code tokens.

Sequences are stored as tuples.  Attribute, data and meta maps are plain
dicts that consumers must treat as read-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BlockTag(str, Enum):
    """Leaf tags a :class:`Block` can carry."""

    PARAGRAPH = "p"
    H1 = "h1"
    H2 = "h2"
    H3 = "h3"
    H4 = "h4"
    H5 = "h5"
    H6 = "h6"
    HR = "hr"
    BLOCKQUOTE = "blockquote"
    LIST_ITEM = "li"
    TABLE_ROW = "table_row"
    CODE = "code"
    MATH_BLOCK = "math_block"
    FOOTNOTE_DEF = "footnote_def"

    @classmethod
    def heading(cls, level: int) -> BlockTag:
        """Return the heading tag for *level*, clamped to 1..6."""
        return cls(f"h{min(max(level, 1), 6)}")


class InlineType(str, Enum):
    """Recognised inline node kinds.

    Any other ``InlineNode.type`` string is a generic passthrough node
    (tag kept, children mapped) left to the renderer's default handling.
    """

    TEXT = "text"
    EM = "em"
    STRONG = "strong"
    CODE = "code"
    LINK = "link"
    IMAGE = "image"
    DEL = "del"
    MATH = "math"
    FOOTNOTE_REF = "footnote_ref"


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BlockPathEntry:
    """One structural ancestor in a block's breadcrumb.

    Attributes
    ----------
    tag:
        Semantic structural name (``blockquote``, ``ol``, ``ul``, ``li``,
        ``p``, ``h1``..``h6``, ``pre``, ``table``, ``tr``, ...).
    attributes:
        Optional attribute map, e.g. ``{"start": 3}`` on an ordered list
        that does not start at 1.
    """

    tag: str
    attributes: dict[str, Any] | None = None


@dataclass(frozen=True)
class InlineNode:
    """A unit of rich inline content.

    Attributes
    ----------
    type:
        An :class:`InlineType` value or a passthrough tag.
    text:
        Raw text for ``text``, ``code``, ``math`` and ``footnote_ref``.
    data:
        Auxiliary data: ``href``/``title`` for links, ``src``/``alt`` for
        images.
    children:
        Child nodes in rendering order.
    """

    type: str
    text: str | None = None
    data: dict[str, Any] | None = None
    children: tuple[InlineNode, ...] = ()

    def plain_text(self) -> str:
        """Concatenate raw text depth-first."""
        own = self.text or ""
        return own + "".join(child.plain_text() for child in self.children)


@dataclass(frozen=True)
class CodeToken:
    """A classified span of source code.

    Concatenating the ``text`` of every token of a chunk reproduces the
    chunk's raw code exactly.  ``class_name`` is ``None`` for unclassified
    text.
    """

    text: str
    class_name: str | None = None


@dataclass(frozen=True)
class Block:
    """One leaf block of a decomposed Markdown document.

    Attributes
    ----------
    id:
        Unique id (``"b<N>"``), assigned in emission order.
    path:
        Breadcrumb from the document root to the block's origin.
    block_tag:
        A :class:`BlockTag` value.
    inlines:
        Inline content.  Empty for ``code``, ``table_row``, ``math_block``
        and ``hr`` blocks.
    raw_code:
        The chunk text of a ``code`` block.
    code_language:
        The fence info word of a ``code`` block, if any.
    is_code_block:
        ``True`` for ``code`` blocks.
    meta:
        Structural metadata (``listType``, ``order``, ``depth``,
        ``globalIndex``, table-row and code-group keys).
    table_cells:
        Per-cell inline sequences; present iff ``block_tag`` is
        ``table_row``.
    math:
        Source of a ``math_block``.
    footnote_id:
        Id of a footnote definition.
    is_footnote_definition:
        ``True`` for ``footnote_def`` blocks.
    code_tokens:
        Precomputed highlighted tokens of a ``code`` block.
    """

    id: str
    path: tuple[BlockPathEntry, ...]
    block_tag: str
    inlines: tuple[InlineNode, ...] = ()
    raw_code: str | None = None
    code_language: str | None = None
    is_code_block: bool = False
    meta: dict[str, Any] | None = None
    table_cells: tuple[tuple[InlineNode, ...], ...] | None = None
    math: str | None = None
    footnote_id: str | None = None
    is_footnote_definition: bool = False
    code_tokens: tuple[CodeToken, ...] | None = field(default=None)

    def plain_text(self) -> str:
        """Return the block's inline content as plain text."""
        return "".join(node.plain_text() for node in self.inlines)

    def __str__(self) -> str:
        crumbs = ">".join(entry.tag for entry in self.path)
        return f"Block(tag: {self.block_tag}, meta: {self.meta}, path: {crumbs})"
