"""Configuration for mdblocks.

:class:`MdBlocksConfig` is a plain dataclass that captures every tuneable
knob of the decomposition pipeline.  Instances are passed to
:class:`MarkdownToBlocksConverter` and :class:`AsyncBlockDecomposer`, and
cross the worker boundary unchanged, so every field must stay picklable.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

DEFAULT_CODE_CHUNK_LINES: int = 8
"""Number of source lines per virtualized code chunk."""


@dataclass
class MdBlocksConfig:
    """Complete configuration for a Markdown decomposition.

    Every parameter has a default, so ``MdBlocksConfig()`` is a valid
    configuration.

    Parameters
    ----------
    code_chunk_lines:
        Number of lines per ``code`` block chunk.  Long fenced code is
        split into groups of chunks this size for virtualized rendering.
    highlight_code:
        Precompute syntax-highlighted :class:`CodeToken` sequences for
        every code chunk.  When ``False`` ``code_tokens`` stays ``None``.
    enable_tables:
        Recognise GFM pipe tables and emit ``table_row`` blocks.  When
        ``False`` tables are parsed as ordinary paragraphs.
    enable_math:
        Recognise ``$$`` block math and ``$...$`` inline math.
    inline_math_extension:
        Recognise inline math with a grammar rule.  When ``False`` the
        escape-aware fallback scanner splits plain text instead.  Ignored
        when ``enable_math`` is ``False``.
    enable_footnotes:
        Recognise ``[^id]:`` definitions and ``[^id]`` references.
    enable_strikethrough:
        Recognise ``~~deleted~~`` spans.
    max_workers:
        Worker count for an executor created by
        :class:`AsyncBlockDecomposer` when none is supplied.  ``None``
        uses the event loop's default executor.
    metrics:
        Optional :class:`MetricsHook` implementation.
    debug_dump_ast:
        Write the normalized Mistune AST to *stderr* on each conversion.
    debug_dump_blocks:
        Write the encoded block list to *stderr* on each conversion.
    """

    # ── Code ────────────────────────────────────────────────────────────
    code_chunk_lines: int = DEFAULT_CODE_CHUNK_LINES

    highlight_code: bool = True

    # ── Grammar ─────────────────────────────────────────────────────────
    enable_tables: bool = True

    enable_math: bool = True

    inline_math_extension: bool = True

    enable_footnotes: bool = True

    enable_strikethrough: bool = True

    # ── Async ───────────────────────────────────────────────────────────
    max_workers: int | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_ast: bool = False

    debug_dump_blocks: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.code_chunk_lines < 1:
            raise ValueError(f"code_chunk_lines must be >= 1, got {self.code_chunk_lines}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    def worker_copy(self) -> MdBlocksConfig:
        """Return a copy that is safe to ship to a worker process.

        The metrics hook stays with the caller; workers never report
        metrics themselves.
        """
        return dataclasses.replace(self, metrics=None)
