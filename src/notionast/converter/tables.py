"""Simple tables: ``table`` records and their ``table_row`` children.

A table record names its columns in ``format``::

    {
        "type": "table",
        "format": {
            "table_block_column_order": ["title", "xq{k", ...],
            "table_block_column_header": true,
            "table_block_row_header": false
        },
        "content": ["<row id>", ...]
    }

and each row stores one styled string per column id::

    {"type": "table_row", "properties": {"title": [["A1"]], "xq{k": [["B1"]]}}

Rows are transformed before their table, so a row only knows its own
column ids.  :func:`align_rows` re-orders every row to the table's column
order once the table is built, padding missing cells with ``()``.
"""

from __future__ import annotations

import dataclasses

from notionast.converter.records import parse_styled_string
from notionast.models import Node, RawBlockRecord, TableRowNode


def column_order(record: RawBlockRecord) -> tuple[str, ...]:
    """Column ids declared by a table record, or ``()`` when absent."""
    order = record.get_format("table_block_column_order")
    if not isinstance(order, list):
        return ()
    return tuple(column for column in order if isinstance(column, str))


def row_cells(record: RawBlockRecord) -> tuple[tuple[str, ...], tuple]:
    """Column ids and cell runs of a row record, in property order."""
    if record.properties is None:
        return (), ()
    column_ids: list[str] = []
    cells: list[tuple] = []
    for column_id, value in record.properties.items():
        column_ids.append(column_id)
        cells.append(parse_styled_string(value))
    return tuple(column_ids), tuple(cells)


def align_rows(
    children: tuple[Node, ...],
    order: tuple[str, ...],
) -> tuple[tuple[Node, ...], tuple[str, ...]]:
    """Re-order the cells of every row child to *order*.

    Parameters
    ----------
    children:
        The table's transformed children.  Non-row children are kept as is.
    order:
        The table's column order.  When empty, the order in which column
        ids first appear across the rows is used.

    Returns
    -------
    tuple
        The aligned children and the effective column order.
    """
    if not order:
        seen: dict[str, None] = {}
        for child in children:
            if isinstance(child, TableRowNode):
                seen.update(dict.fromkeys(child.column_ids))
        order = tuple(seen)

    aligned: list[Node] = []
    for child in children:
        if not isinstance(child, TableRowNode):
            aligned.append(child)
            continue
        by_column = dict(zip(child.column_ids, child.cells))
        aligned.append(dataclasses.replace(
            child,
            column_ids=order,
            cells=tuple(by_column.get(column, ()) for column in order),
        ))
    return tuple(aligned), order
