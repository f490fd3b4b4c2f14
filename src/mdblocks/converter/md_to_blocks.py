"""Full Markdown-to-blocks decomposition pipeline.

:class:`MarkdownToBlocksConverter` orchestrates the three-stage pipeline:

1. **Parse**: Mistune parses raw Markdown into an AST, with the math and
   footnote grammar rules installed.
2. **Normalize**: :class:`ASTNormalizer` maps token types to canonical names.
3. **Build**: :func:`build_blocks` walks the normalized tokens and emits
   flat leaf :class:`Block` values.
"""

from __future__ import annotations

import json
import sys
import time

from mdblocks.config import MdBlocksConfig
from mdblocks.converter.ast_normalizer import ASTNormalizer
from mdblocks.converter.block_builder import build_blocks
from mdblocks.models import Block
from mdblocks.observability import get_logger, resolve_metrics

log = get_logger("mdblocks.converter")


class MarkdownToBlocksConverter:
    """Convert Markdown text to an ordered list of leaf blocks.

    A converter may be reused for any number of documents; every call to
    :meth:`convert` starts from fresh ids, counters and stacks.

    Parameters
    ----------
    config:
        Decomposition configuration.  Defaults to ``MdBlocksConfig()``.

    Examples
    --------
    >>> converter = MarkdownToBlocksConverter()
    >>> blocks = converter.convert("# Hello\\n\\nWorld")
    >>> [b.block_tag for b in blocks]
    ['h1', 'p']
    >>> blocks[1].id
    'b1'
    """

    def __init__(self, config: MdBlocksConfig | None = None) -> None:
        self._config = config or MdBlocksConfig()
        self._normalizer = ASTNormalizer(self._config)
        self._metrics = resolve_metrics(self._config.metrics)

    @property
    def config(self) -> MdBlocksConfig:
        return self._config

    def convert(self, markdown: str) -> list[Block]:
        """Full pipeline: parse -> normalize -> build blocks.

        Parameters
        ----------
        markdown:
            Raw Markdown text.  ``\\r\\n`` and ``\\r`` line endings are
            normalized to ``\\n``.

        Returns
        -------
        list[Block]
            Leaf blocks in reading order.
        """
        start = time.monotonic()

        # Stage 1 & 2: Parse and normalize
        tokens = self._normalizer.parse(markdown)

        if self._config.debug_dump_ast:
            print(
                "[mdblocks] Normalized AST:",
                json.dumps(tokens, indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        # Stage 3: Walk
        blocks = build_blocks(tokens, self._config)

        if self._config.debug_dump_blocks:
            from mdblocks.serializer import encode_blocks
            print(
                "[mdblocks] Blocks:",
                json.dumps(encode_blocks(blocks), indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        elapsed_ms = (time.monotonic() - start) * 1000
        code_groups = sum(
            1 for block in blocks
            if block.is_code_block and block.meta and block.meta.get("isFirstInGroup")
        )
        self._metrics.increment("mdblocks.blocks_emitted_total", len(blocks))
        self._metrics.increment("mdblocks.code_groups_total", code_groups)
        self._metrics.timing("mdblocks.convert_duration_ms", elapsed_ms)
        log.debug(
            "markdown decomposed",
            extra={"extra_fields": {
                "op": "convert",
                "source_length": len(markdown),
                "blocks": len(blocks),
                "code_groups": code_groups,
                "duration_ms": round(elapsed_ms, 3),
            }},
        )
        return blocks


def markdown_to_blocks(markdown: str, config: MdBlocksConfig | None = None) -> list[Block]:
    """Decompose *markdown* into leaf blocks with a one-off converter."""
    return MarkdownToBlocksConverter(config).convert(markdown)
