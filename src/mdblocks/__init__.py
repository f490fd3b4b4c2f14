"""mdblocks: decompose Markdown into flat, self-contained leaf blocks.

Public re-exports
-----------------

* **Entry points:** :func:`markdown_to_blocks`,
  :class:`MarkdownToBlocksConverter`, :func:`markdown_to_blocks_async`,
  :class:`AsyncBlockDecomposer`
* **Configuration:** :class:`MdBlocksConfig`
* **Errors:** Every :class:`MdBlocksError` subclass and :class:`ErrorCode`
* **Models:** :class:`Block` and its supporting value types
* **Wire format:** :func:`encode_blocks`, :func:`decode_blocks`,
  :func:`dumps`, :func:`loads`
* **Rendering helpers:** :class:`CodeWidthRegistry`

Usage::

    from mdblocks import markdown_to_blocks

    for block in markdown_to_blocks("# Title\\n\\n- one\\n- two"):
        print(block.id, block.block_tag, block.plain_text())
"""

from __future__ import annotations

# ── Entry points ───────────────────────────────────────────────────────
from mdblocks.async_client import (
    AsyncBlockDecomposer,
    decompose_to_wire,
    markdown_to_blocks_async,
)

# ── Configuration ───────────────────────────────────────────────────────
from mdblocks.config import DEFAULT_CODE_CHUNK_LINES, MdBlocksConfig
from mdblocks.converter.md_to_blocks import MarkdownToBlocksConverter, markdown_to_blocks

# ── Errors ──────────────────────────────────────────────────────────────
from mdblocks.errors import (
    ErrorCode,
    MdBlocksDecodeError,
    MdBlocksError,
    MdBlocksWorkerError,
)

# ── Models ──────────────────────────────────────────────────────────────
from mdblocks.models import (
    Block,
    BlockPathEntry,
    BlockTag,
    CodeToken,
    InlineNode,
    InlineType,
)

# ── Wire format ─────────────────────────────────────────────────────────
from mdblocks.serializer import (
    decode_block,
    decode_blocks,
    dumps,
    encode_block,
    encode_blocks,
    loads,
)

# ── Rendering helpers ───────────────────────────────────────────────────
from mdblocks.widths import CodeWidthRegistry

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Entry points
    "markdown_to_blocks",
    "MarkdownToBlocksConverter",
    "markdown_to_blocks_async",
    "AsyncBlockDecomposer",
    "decompose_to_wire",
    # Configuration
    "MdBlocksConfig",
    "DEFAULT_CODE_CHUNK_LINES",
    # Errors
    "MdBlocksError",
    "ErrorCode",
    "MdBlocksDecodeError",
    "MdBlocksWorkerError",
    # Models
    "Block",
    "BlockPathEntry",
    "BlockTag",
    "CodeToken",
    "InlineNode",
    "InlineType",
    # Wire format
    "encode_block",
    "encode_blocks",
    "decode_block",
    "decode_blocks",
    "dumps",
    "loads",
    # Rendering helpers
    "CodeWidthRegistry",
]
