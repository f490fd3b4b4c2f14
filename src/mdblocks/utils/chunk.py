"""Split source lines into fixed-size chunks for virtualized rendering.

Long fenced code is emitted as a group of ``code`` blocks of at most
``code_chunk_lines`` lines each, so a renderer can lay out and recycle
them independently.
"""

from __future__ import annotations

from typing import Sequence


def chunk_lines(lines: Sequence[str], size: int) -> list[list[str]]:
    """Split *lines* into consecutive runs of at most *size* lines.

    Parameters
    ----------
    lines:
        The source lines, without line terminators.
    size:
        Maximum number of lines per chunk.

    Returns
    -------
    list[list[str]]
        Consecutive sublists covering *lines* in order.  Every chunk but
        the last holds exactly *size* lines.  An empty input returns an
        empty list (not ``[[]]``).

    Raises
    ------
    ValueError
        If *size* is less than 1.

    Examples
    --------
    >>> chunk_lines(["a", "b", "c"], 2)
    [['a', 'b'], ['c']]
    """
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")

    if not lines:
        return []

    return [list(lines[i : i + size]) for i in range(0, len(lines), size)]


def longest_line(lines: Sequence[str]) -> str:
    """Return the longest of *lines*; the first one wins a tie.

    An empty input returns ``""``.
    """
    longest = ""
    for line in lines:
        if len(line) > len(longest):
            longest = line
    return longest
