"""Markdown → leaf block decomposition pipeline.

Public API:

- :class:`MarkdownToBlocksConverter`: Markdown → ordered leaf blocks.
- :func:`markdown_to_blocks`: one-off synchronous decomposition.
- :class:`ASTNormalizer`: parse and normalize Markdown to canonical AST.
- :func:`build_blocks`: walk normalized AST into leaf blocks.
- :func:`build_inlines`: convert inline AST tokens to inline nodes.
- :func:`split_inline_math`: escape-aware ``$`` scanner for plain text.
- :class:`CodeTokenizer`: classify code into flat tokens.
"""

from mdblocks.converter.ast_normalizer import ASTNormalizer
from mdblocks.converter.block_builder import build_blocks
from mdblocks.converter.code import CodeTokenizer, normalize_language, tokenize_code
from mdblocks.converter.inline import build_inlines, split_inline_math
from mdblocks.converter.md_to_blocks import MarkdownToBlocksConverter, markdown_to_blocks

__all__ = [
    "ASTNormalizer",
    "CodeTokenizer",
    "MarkdownToBlocksConverter",
    "build_blocks",
    "build_inlines",
    "markdown_to_blocks",
    "normalize_language",
    "split_inline_math",
    "tokenize_code",
]
