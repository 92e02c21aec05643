"""
Table cell addressing helpers.

Every line of a table cell ends with a newline tagged ``table-cell-line``:

    {"cell": "<rowId>-<cellIndex>", "row": "<rowId>", "colspan": "1", "rowspan": "1"}

Cell indexes are 1-based. Merged cells are not supported, so the spans are
always the string ``"1"``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from delta.mdast import LINE_BREAK_PATTERN, Node
from delta.ops import Op, is_newline, newline_op

logger = logging.getLogger(__name__)

CELL_SPAN = "1"
UNALIGNED = "left"


def column_placeholders(column_count: int, width: int) -> list[Op]:
    """One ``table-col`` newline per column, declared before any row content."""
    return [newline_op({"table-col": {"width": width}}) for _ in range(column_count)]


def cell_identity(row_id: str, cell_index: int) -> dict[str, str]:
    return {
        "cell": f"{row_id}-{cell_index}",
        "row": row_id,
        "colspan": CELL_SPAN,
        "rowspan": CELL_SPAN,
    }


def resolve_alignment(align: Sequence[str | None] | None, cell_index: int) -> dict[str, str]:
    """
    Alignment attribute for a 1-based cell index.

    ``left`` is the editor default and is not recorded. A missing alignment
    array or a cell beyond it degrades to no attribute.
    """
    if not align:
        return {}
    if cell_index > len(align):
        logger.warning(f"Table cell {cell_index} has no column alignment entry ({len(align)} columns declared)")
        return {}
    value = align[cell_index - 1]
    if not value or value == UNALIGNED:
        return {}
    return {"align": value}


def count_line_breaks(node: Node) -> int:
    """Number of ``break`` nodes anywhere under ``node``."""
    count = 0
    stack = list(node.children or ())
    while stack:
        current = stack.pop()
        if current.type == "break":
            count += 1
        stack.extend(current.children or ())
    return count


def split_cell_source(source: str) -> list[str]:
    """
    Split a cell's raw Markdown on ``<br>``, ``<br/>`` and ``<br />``.

    This is purely textual: markers inside code spans or behind a backslash
    escape are split too. Callers compare the fragment count with
    `count_line_breaks` before trusting the result.
    """
    return [fragment.strip() for fragment in LINE_BREAK_PATTERN.split(source)]


def cell_line_attributes(identity: dict[str, str], alignment: dict[str, str]) -> dict[str, Any]:
    attributes: dict[str, Any] = dict(alignment)
    attributes["table-cell-line"] = dict(identity)
    return attributes


def tag_cell_lines(ops: list[Op], identity: dict[str, str], alignment: dict[str, str]) -> list[Op]:
    """
    Re-tag every newline in ``ops`` as a line of the given cell.

    A ``list`` line keeps its list type with the cell identity nested inside it;
    any other block attribute (header, code-block, indent) stays beside
    ``table-cell-line``. Non-newline ops are returned unchanged.
    """
    tagged: list[Op] = []
    for op in ops:
        if not is_newline(op):
            tagged.append(op)
            continue

        attributes = dict(op.get("attributes", {}))
        list_type = attributes.pop("list", None)
        if list_type is not None:
            nested = {"list": list_type}
            nested.update(identity)
            attributes["list"] = nested
            attributes.update(alignment)
        else:
            attributes.update(cell_line_attributes(identity, alignment))
        tagged.append(newline_op(attributes))
    return tagged
