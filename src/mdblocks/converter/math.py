"""Math grammar rules for the Mistune parser.

Block math::

    $$ E = mc^2 $$          single line; trimmed line longer than 4 chars

    $$                      multi line; runs until a line that is exactly
    \\int_0^1 f(x)\\,dx        ``$$`` once trimmed, or to the end of input
    $$

Both forms produce a ``{"type": "block_math", "raw": <inner source>}``
token.  Text after an opening ``$$`` that has no closing ``$$`` on the
same line is dropped; only the following lines are content.

Inline math ``$x^2$`` produces ``{"type": "inline_math", "raw": "x^2"}``.
A delimiter preceded by a backslash, or adjoining another ``$``, does not
open or close a span, so ``$$`` never starts inline math.

When inline math is disabled, :func:`preserve_escaped_dollar` keeps
``\\$`` intact through Mistune's escape handling so the fallback scanner
in :mod:`mdblocks.converter.inline` can still tell escaped dollars apart.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Match

if TYPE_CHECKING:
    from mistune import Markdown
    from mistune.block_parser import BlockParser
    from mistune.core import BlockState, InlineState
    from mistune.inline_parser import InlineParser

BLOCK_MATH_PATTERN = r"^[ \t]*\$\$[^\n]*"

INLINE_MATH_PATTERN = (
    r"(?<![\\$])\$(?!\$)(?P<inline_math_text>[^\n]+?)(?<![\\$])\$(?!\$)"
)

ESCAPED_DOLLAR_PATTERN = r"\\\$"

_SINGLE_LINE_RE = re.compile(r"^\s*\$\$.*\$\$\s*$")
_OPEN_FENCE_RE = re.compile(r"^\s*\$\$")
_CLOSE_FENCE_RE = re.compile(r"\$\$\s*$")


# ---------------------------------------------------------------------------
# Block math
# ---------------------------------------------------------------------------

def parse_block_math(block: BlockParser, m: Match[str], state: BlockState) -> int:
    """Consume a ``$$`` block starting at the matched line."""
    first_line = m.group(0).rstrip()
    pos = m.end()
    if pos < state.cursor_max and state.src[pos] == "\n":
        pos += 1

    if _SINGLE_LINE_RE.match(first_line) and len(first_line.strip()) > 4:
        inner = _CLOSE_FENCE_RE.sub("", _OPEN_FENCE_RE.sub("", first_line, count=1), count=1)
        state.append_token({"type": "block_math", "raw": inner.strip()})
        return pos

    buffer: list[str] = []

    while pos < state.cursor_max:
        line = state.get_line(pos)
        pos += len(line)
        content = line.rstrip()
        if content.strip() == "$$":
            break
        buffer.append(content)

    state.append_token({"type": "block_math", "raw": "\n".join(buffer).strip()})
    return pos


# ---------------------------------------------------------------------------
# Inline math
# ---------------------------------------------------------------------------

def parse_inline_math(inline: InlineParser, m: Match[str], state: InlineState) -> int | None:
    text = m.group("inline_math_text")
    if not text.strip():
        # Leave blank spans to the text rule.
        return None
    state.append_token({"type": "inline_math", "raw": text})
    return m.end()


def parse_escaped_dollar(inline: InlineParser, m: Match[str], state: InlineState) -> int:
    state.append_token({"type": "text", "raw": m.group(0)})
    return m.end()


# ---------------------------------------------------------------------------
# Plugins
# ---------------------------------------------------------------------------

def block_math(md: Markdown) -> None:
    """Mistune plugin: ``$$`` block math at document level, in block
    quotes and in list items."""
    md.block.register("block_math", BLOCK_MATH_PATTERN, parse_block_math, before="list")
    md.block.insert_rule(md.block.block_quote_rules, "block_math", before="list")
    md.block.insert_rule(md.block.list_rules, "block_math", before="list")


def inline_math(md: Markdown) -> None:
    """Mistune plugin: ``$...$`` inline math."""
    md.inline.register("inline_math", INLINE_MATH_PATTERN, parse_inline_math, before="codespan")


def preserve_escaped_dollar(md: Markdown) -> None:
    """Mistune plugin: keep ``\\$`` verbatim for the fallback scanner."""
    md.inline.register("escaped_dollar", ESCAPED_DOLLAR_PATTERN, parse_escaped_dollar, before="escape")
