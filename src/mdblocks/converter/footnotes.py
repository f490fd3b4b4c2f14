"""Footnote grammar rules for the Mistune parser.

Definitions stay in document order where they appear, unlike Mistune's
bundled ``footnotes`` plugin which collects them at the end::

    [^note]: First line of the note
        continued on an indented line

produces ``{"type": "footnote_def", "text": "First line of the note\\n
continued on an indented line", "attrs": {"key": "note"}}``.  Continuation
lines start with four spaces or a tab; one such prefix is removed.

References ``[^note]`` produce ``{"type": "footnote_ref", "raw": "note"}``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Match

if TYPE_CHECKING:
    from mistune import Markdown
    from mistune.block_parser import BlockParser
    from mistune.core import BlockState, InlineState
    from mistune.inline_parser import InlineParser

FOOTNOTE_KEY = r"[A-Za-z0-9_-]+"

FOOTNOTE_DEF_PATTERN = (
    r"^\[\^(?P<footnote_def_key>" + FOOTNOTE_KEY + r")\]:[ \t]+"
    r"(?P<footnote_def_text>[^\n]*)"
)

FOOTNOTE_REF_PATTERN = r"\[\^(?P<footnote_ref_key>" + FOOTNOTE_KEY + r")\]"

_CONTINUATION_RE = re.compile(r"^(?:    |\t)")


def parse_footnote_def(block: BlockParser, m: Match[str], state: BlockState) -> int:
    key = m.group("footnote_def_key")
    lines = [m.group("footnote_def_text").rstrip()]

    pos = m.end()
    if pos < state.cursor_max and state.src[pos] == "\n":
        pos += 1

    while pos < state.cursor_max:
        line = state.get_line(pos)
        if not _CONTINUATION_RE.match(line):
            break
        lines.append(_CONTINUATION_RE.sub("", line.rstrip("\n"), count=1))
        pos += len(line)

    state.append_token({
        "type": "footnote_def",
        "text": "\n".join(lines),
        "attrs": {"key": key},
    })
    return pos


def parse_footnote_ref(inline: InlineParser, m: Match[str], state: InlineState) -> int:
    state.append_token({"type": "footnote_ref", "raw": m.group("footnote_ref_key")})
    return m.end()


def footnotes(md: Markdown) -> None:
    """Mistune plugin: in-place footnote definitions and references."""
    md.block.register("footnote_def", FOOTNOTE_DEF_PATTERN, parse_footnote_def, before="ref_link")
    md.block.insert_rule(md.block.block_quote_rules, "footnote_def", before="ref_link")
    md.block.insert_rule(md.block.list_rules, "footnote_def", before="ref_link")
    # "footnote" is the name Mistune's inline scanner knows to trigger on "[".
    md.inline.register("footnote", FOOTNOTE_REF_PATTERN, parse_footnote_ref, before="link")
