"""Tests for utility functions: chunk_lines, longest_line."""

import pytest

from mdblocks.utils import chunk_lines, longest_line

# =========================================================================
# chunk_lines tests
# =========================================================================

class TestChunkLines:
    def test_empty(self):
        assert chunk_lines([], 8) == []

    def test_under_size(self):
        assert chunk_lines(["a", "b"], 8) == [["a", "b"]]

    def test_exact_size(self):
        lines = [str(i) for i in range(8)]
        assert chunk_lines(lines, 8) == [lines]

    def test_remainder_in_last_chunk(self):
        lines = [str(i) for i in range(20)]
        chunks = chunk_lines(lines, 8)
        assert [len(c) for c in chunks] == [8, 8, 4]
        assert [line for chunk in chunks for line in chunk] == lines

    def test_size_one(self):
        assert chunk_lines(["a", "b"], 1) == [["a"], ["b"]]

    def test_accepts_tuple(self):
        assert chunk_lines(("a", "b", "c"), 2) == [["a", "b"], ["c"]]

    def test_empty_lines_kept(self):
        assert chunk_lines(["", "", "x"], 2) == [["", ""], ["x"]]

    @pytest.mark.parametrize("size", [0, -3])
    def test_invalid_size(self, size):
        with pytest.raises(ValueError, match="size must be >= 1"):
            chunk_lines(["a"], size)


# =========================================================================
# longest_line tests
# =========================================================================

class TestLongestLine:
    def test_empty(self):
        assert longest_line([]) == ""

    def test_picks_longest(self):
        assert longest_line(["a", "abc", "ab"]) == "abc"

    def test_first_wins_tie(self):
        assert longest_line(["xy", "ab", "c"]) == "xy"

    def test_counts_characters_not_bytes(self):
        assert longest_line(["ééé", "abcd"]) == "abcd"

    def test_whitespace_counts(self):
        assert longest_line(["    x", "yy"]) == "    x"
