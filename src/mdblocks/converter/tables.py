"""Table flattening: Markdown table AST to ``table_row`` data.

The table AST produced by mistune's ``table`` plugin (after
normalization) looks like::

    {
        "type": "table",
        "children": [
            {
                "type": "table_head",
                "children": [
                    {"type": "table_cell", "attrs": {"align": null, "head": true},
                     "children": [inline tokens...]},
                    ...
                ]
            },
            {
                "type": "table_body",
                "children": [
                    {"type": "table_row", "children": [table_cell, ...]},
                    ...
                ]
            }
        ]
    }

Header and body sections are unified into one ordered row sequence; a
section may also hold rows directly, and ``table_row`` tokens may appear
directly under the table.  Each row becomes one :class:`TableRowData`,
which the block builder turns into a ``table_row`` block.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mdblocks.config import MdBlocksConfig
from mdblocks.converter.inline import build_inlines
from mdblocks.models import InlineNode
from mdblocks.observability import get_logger

log = get_logger("mdblocks.converter")


@dataclass(frozen=True)
class TableRowData:
    """One flattened table row.

    Attributes
    ----------
    cells:
        Per-cell inline sequences in column order.
    is_header:
        ``True`` iff the row has cells and every cell is a header cell.
    cell_align:
        ``"left"``, ``"center"`` or ``"right"`` per cell.
    """

    cells: tuple[tuple[InlineNode, ...], ...]
    is_header: bool
    cell_align: tuple[str, ...]


def build_table_rows(
    token: dict[str, Any],
    config: MdBlocksConfig,
) -> list[TableRowData] | None:
    """Flatten a table AST token into ordered rows.

    Parameters
    ----------
    token:
        Normalized table AST token with ``type="table"``.
    config:
        Decomposition configuration, passed to the inline converter.

    Returns
    -------
    list[TableRowData] | None
        The rows in document order, or ``None`` when the token does not
        have the expected shape.  Callers fall back to a plain paragraph
        (see :func:`table_to_plain_text`).
    """
    try:
        return [
            _build_row(cells, config)
            for cells in _iter_row_cells(token.get("children", []))
        ]
    except (KeyError, TypeError, IndexError, AttributeError, ValueError) as exc:
        log.debug(
            "table flattening failed, falling back to paragraph",
            extra={"extra_fields": {"error": type(exc).__name__, "detail": str(exc)}},
        )
        return None


def _iter_row_cells(children: list[dict[str, Any]]):
    """Yield each row's list of cell tokens, header rows first."""
    for child in children:
        child_type = child.get("type", "")

        if child_type == "table_row":
            yield child.get("children", [])

        elif child_type in ("table_head", "table_body"):
            section = child.get("children", [])
            if section and all(c.get("type") == "table_cell" for c in section):
                # mistune's head section holds its cells directly.
                yield section
            else:
                for row in section:
                    if row.get("type") == "table_row":
                        yield row.get("children", [])


def _build_row(cells: list[dict[str, Any]], config: MdBlocksConfig) -> TableRowData:
    row_cells: list[tuple[InlineNode, ...]] = []
    aligns: list[str] = []
    heads: list[bool] = []

    for cell in cells:
        attrs = cell.get("attrs") or {}
        row_cells.append(build_inlines(cell.get("children", []), config))
        aligns.append(cell_align(attrs))
        heads.append(bool(attrs.get("head")))

    return TableRowData(
        cells=tuple(row_cells),
        is_header=bool(heads) and all(heads),
        cell_align=tuple(aligns),
    )


def cell_align(attrs: dict[str, Any]) -> str:
    """Infer a cell's alignment from its ``align`` or ``style`` attribute."""
    hint = " ".join(
        str(attrs[key]) for key in ("align", "style") if attrs.get(key)
    ).lower()
    if "center" in hint:
        return "center"
    if "right" in hint:
        return "right"
    return "left"


def table_to_plain_text(token: Any) -> str:
    """Extract the raw text of a (possibly malformed) table token.

    Rows are separated by newlines and cells by ``" | "``.  Anything that
    is not a dict or list is ignored.
    """
    rows: list[str] = []
    children = token.get("children", []) if isinstance(token, dict) else []
    for child in children if isinstance(children, list) else []:
        if not isinstance(child, dict):
            continue
        if child.get("type") == "table_body":
            for row in child.get("children") or []:
                text = _row_text(row)
                if text:
                    rows.append(text)
        else:
            text = _row_text(child)
            if text:
                rows.append(text)
    return "\n".join(rows)


def _row_text(row: Any) -> str:
    if not isinstance(row, dict):
        return ""
    cells = row.get("children")
    if not isinstance(cells, list):
        return ""
    return " | ".join(_raw_text(cell) for cell in cells)


def _raw_text(node: Any) -> str:
    if isinstance(node, list):
        return "".join(_raw_text(item) for item in node)
    if not isinstance(node, dict):
        return ""
    raw = node.get("raw")
    if isinstance(raw, str):
        return raw
    return _raw_text(node.get("children"))
