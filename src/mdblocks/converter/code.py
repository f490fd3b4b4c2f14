"""Code tokenizer and chunker.

Fenced and indented code is split into fixed-size line chunks
(:func:`prepare_code`) and each chunk is classified into flat
:class:`~mdblocks.models.CodeToken` spans (:class:`CodeTokenizer`).

Classification uses Pygments.  A span's class is the short CSS class of
its token type, or of the nearest ancestor type that has one
(``Token.Keyword.Constant`` gives ``"kc"``); plain text is unclassified.
Classification never raises: an unknown language, a lexer error or a
token stream that does not concatenate back to the input all degrade to
a single unclassified token covering the whole chunk.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.token import STANDARD_TYPES, _TokenType
from pygments.util import ClassNotFound

from mdblocks.models import CodeToken
from mdblocks.observability import get_logger, resolve_metrics
from mdblocks.utils.chunk import chunk_lines, longest_line

log = get_logger("mdblocks.converter")

PLAINTEXT = "plaintext"

LANGUAGE_ALIASES: dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "c++": "cpp",
    "sh": "bash",
    "md": "markdown",
    "markdown": "markdown",
    "yml": "yaml",
}


# ---------------------------------------------------------------------------
# Language hints
# ---------------------------------------------------------------------------

def language_from_info(info: str | None) -> str | None:
    """Return the first word of a fence info string, or ``None``."""
    if not info:
        return None
    words = info.split()
    return words[0] if words else None


def normalize_language(hint: str | None) -> str:
    """Map a fence language hint to a classifier grammar name.

    >>> normalize_language("PY")
    'python'
    >>> normalize_language("")
    'plaintext'
    """
    lang = (hint or "").strip().lower()
    if not lang:
        return PLAINTEXT
    return LANGUAGE_ALIASES.get(lang, lang)


# ---------------------------------------------------------------------------
# Chunking
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CodeGroup:
    """A code element prepared for chunked emission.

    Attributes
    ----------
    chunks:
        Chunk texts in order.  Never empty: empty code yields one ``""``
        chunk.
    full_content:
        All lines rejoined, without trailing empty lines.
    longest_line:
        The longest line by character count; first occurrence wins.
    """

    chunks: tuple[str, ...]
    full_content: str
    longest_line: str


def prepare_code(raw: str, chunk_size: int) -> CodeGroup:
    """Split *raw* code into chunks of at most *chunk_size* lines.

    Trailing empty lines (including the fence's final newline) are dropped
    before splitting, so they never produce an extra chunk.
    """
    lines = raw.split("\n")
    while lines and lines[-1] == "":
        lines.pop()

    chunks = tuple("\n".join(chunk) for chunk in chunk_lines(lines, chunk_size))
    return CodeGroup(
        chunks=chunks or ("",),
        full_content="\n".join(lines),
        longest_line=longest_line(lines),
    )


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def token_class(ttype: _TokenType) -> str | None:
    """Return the short class of *ttype* or its nearest classed ancestor."""
    while ttype is not None:
        short = STANDARD_TYPES.get(ttype)
        if short is not None:
            return short or None
        ttype = ttype.parent
    return None


class CodeTokenizer:
    """Classify code chunks into flat :class:`CodeToken` sequences.

    One instance serves one decomposition: lexers are cached per grammar
    name on the instance, never across calls.

    Parameters
    ----------
    metrics:
        Optional :class:`MetricsHook`; ``mdblocks.highlight_fallback_total``
        is incremented whenever classification degrades.
    """

    def __init__(self, metrics: Any | None = None) -> None:
        self._metrics = resolve_metrics(metrics)
        self._lexers: dict[str, Lexer | None] = {}

    def tokenize(self, code: str, language: str | None = None) -> tuple[CodeToken, ...]:
        """Classify *code* written in *language* (a raw fence hint).

        The returned tokens concatenate to *code* exactly.  Empty *code*
        yields no tokens.
        """
        if not code:
            return ()

        grammar = normalize_language(language)
        if grammar == PLAINTEXT:
            return (CodeToken(code),)

        lexer = self._lexer_for(grammar)
        if lexer is None:
            return self._fallback(code, grammar, "unknown_language")

        try:
            tokens = _merge_spans(lexer.get_tokens(code))
        except Exception as exc:
            return self._fallback(code, grammar, type(exc).__name__)

        if "".join(token.text for token in tokens) != code:
            return self._fallback(code, grammar, "text_mismatch")
        return tokens

    # -- internals ----------------------------------------------------------

    def _lexer_for(self, grammar: str) -> Lexer | None:
        if grammar not in self._lexers:
            try:
                self._lexers[grammar] = get_lexer_by_name(
                    grammar, stripnl=False, stripall=False, ensurenl=False,
                )
            except ClassNotFound:
                self._lexers[grammar] = None
        return self._lexers[grammar]

    def _fallback(self, code: str, grammar: str, reason: str) -> tuple[CodeToken, ...]:
        log.debug(
            "code classification fell back to plain text",
            extra={"extra_fields": {"language": grammar, "reason": reason}},
        )
        self._metrics.increment(
            "mdblocks.highlight_fallback_total", tags={"reason": reason},
        )
        return (CodeToken(code),)


def _merge_spans(stream: Any) -> tuple[CodeToken, ...]:
    """Flatten a Pygments token stream, merging equal-class neighbours."""
    tokens: list[CodeToken] = []
    for ttype, value in stream:
        if not value:
            continue
        cls = token_class(ttype)
        if tokens and tokens[-1].class_name == cls:
            tokens[-1] = CodeToken(tokens[-1].text + value, cls)
        else:
            tokens.append(CodeToken(value, cls))
    return tuple(tokens)


def tokenize_code(code: str, language: str | None = None) -> tuple[CodeToken, ...]:
    """Convenience wrapper: classify one chunk with a throwaway tokenizer."""
    return CodeTokenizer().tokenize(code, language)
