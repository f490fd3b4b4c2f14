from .chunk import chunk_lines, longest_line

__all__ = [
    "chunk_lines",
    "longest_line",
]
