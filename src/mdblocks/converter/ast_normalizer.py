"""Parse Markdown and normalize to canonical AST tokens.

This module wraps mistune v3's AST renderer, installs the math and
footnote grammar rules selected by :class:`MdBlocksConfig`, and
normalises the raw token stream into a well-defined set of canonical
types used by the block builder.

Canonical block tokens:
    heading, paragraph, block_quote, list, list_item, block_code, table,
    thematic_break, block_math, footnote_def, html_block

Canonical inline tokens:
    text, strong, emphasis, codespan, strikethrough, link, image,
    inline_math, footnote_ref, softbreak, linebreak, html_inline

Tokens of any other type are kept with their type, attributes and
children so consumers can pass them through.
"""

from __future__ import annotations

from typing import Any

import mistune

from mdblocks.config import MdBlocksConfig
from mdblocks.converter.footnotes import footnotes
from mdblocks.converter.math import block_math, inline_math, preserve_escaped_dollar

# ---------------------------------------------------------------------------
# Mistune-to-canonical type mapping
# ---------------------------------------------------------------------------

_BLOCK_TYPE_MAP: dict[str, str] = {
    "heading": "heading",
    "paragraph": "paragraph",
    "block_quote": "block_quote",
    "list": "list",
    "list_item": "list_item",
    "block_code": "block_code",
    "table": "table",
    "thematic_break": "thematic_break",
    "block_math": "block_math",
    "footnote_def": "footnote_def",
    "block_html": "html_block",
    # Tight list items wrap their text in block_text
    "block_text": "paragraph",
}

_INLINE_TYPE_MAP: dict[str, str] = {
    "text": "text",
    "strong": "strong",
    "emphasis": "emphasis",
    "codespan": "codespan",
    "strikethrough": "strikethrough",
    "link": "link",
    "image": "image",
    "inline_math": "inline_math",
    "footnote_ref": "footnote_ref",
    "softbreak": "softbreak",
    "linebreak": "linebreak",
    "inline_html": "html_inline",
}

_RAW_TYPES: frozenset[str] = frozenset({
    "block_code", "block_math", "html_block",
    "text", "codespan", "inline_math", "footnote_ref", "html_inline",
})

# Types that should be silently skipped during normalization
_SKIP_TYPES: frozenset[str] = frozenset({
    "blank_line",
})


def build_plugins(config: MdBlocksConfig) -> list[Any]:
    """Return the mistune plugin list for *config*."""
    plugins: list[Any] = []
    if config.enable_strikethrough:
        plugins.append("strikethrough")
    if config.enable_tables:
        plugins.append("table")
    if config.enable_math:
        plugins.append(block_math)
        if config.inline_math_extension:
            plugins.append(inline_math)
        else:
            plugins.append(preserve_escaped_dollar)
    if config.enable_footnotes:
        plugins.append(footnotes)
    return plugins


class ASTNormalizer:
    """Parse Markdown and normalize to canonical AST tokens.

    Parameters
    ----------
    config:
        Selects the grammar rules installed in the underlying parser.
        Defaults to ``MdBlocksConfig()``.
    """

    def __init__(self, config: MdBlocksConfig | None = None) -> None:
        self._config = config or MdBlocksConfig()
        self._parser = mistune.create_markdown(
            renderer="ast",
            plugins=build_plugins(self._config),
        )

    def parse(self, markdown: str) -> list[dict]:
        """Parse markdown and return normalized AST token list."""
        raw_tokens = self._parser(markdown)
        if isinstance(raw_tokens, str):
            return []
        return self._normalize_tokens(raw_tokens)

    def _normalize_tokens(self, tokens: list[dict]) -> list[dict]:
        """Walk the token tree and normalize every node."""
        result: list[dict] = []
        for token in tokens:
            normalized = self._normalize_token(token)
            if normalized is not None:
                result.append(normalized)
        return result

    def _normalize_token(self, token: dict) -> dict | None:
        """Normalize a single token, returning None if it should be skipped."""
        raw_type = token.get("type", "")

        if not raw_type or raw_type in _SKIP_TYPES:
            return None

        if raw_type in _BLOCK_TYPE_MAP:
            canonical = _BLOCK_TYPE_MAP[raw_type]
        elif raw_type in _INLINE_TYPE_MAP:
            canonical = _INLINE_TYPE_MAP[raw_type]
        else:
            # Table parts and unknown tokens keep their own type.
            canonical = raw_type

        result: dict = {"type": canonical}

        attrs = token.get("attrs")
        if attrs:
            result["attrs"] = dict(attrs)

        if canonical == "list":
            result["tight"] = token.get("tight", True)

        if canonical in _RAW_TYPES or "raw" in token:
            result["raw"] = token.get("raw", "")
            if canonical in _RAW_TYPES:
                return result

        children = token.get("children")
        if children:
            result["children"] = self._normalize_tokens(children)

        return result
