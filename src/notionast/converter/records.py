"""Loading raw block records and parsing styled strings.

The Notion service returns blocks inside a *record map*::

    {
        "block": {
            "<id>": {"role": "reader", "value": {"id": "<id>", "type": "text", ...}},
            ...
        }
    }

:func:`records_from_record_map` unwraps that envelope (or accepts a flat
``id -> value`` mapping) into :class:`RawBlockRecord` instances keyed by
dash id.  :func:`parse_styled_string` turns a property value such as::

    [["Hello ", [["b"]]], ["world", [["a", "https://example.com"]]]]

into a tuple of :class:`StyledRun`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from notionast.models import RawBlockRecord, StyledRun, StyleMarker
from notionast.utils.urls import to_dash_id


def _unwrap(entry: Any) -> dict | None:
    """Return the block value of a record-map entry, or ``None``."""
    if not isinstance(entry, dict):
        return None
    value = entry.get("value")
    if isinstance(value, dict):
        return value
    return entry


def _normalize_record(record: RawBlockRecord, key: str) -> RawBlockRecord:
    """Put the ids of a caller-built record into dash form."""
    block_id = to_dash_id(record.id or key)
    content = tuple(to_dash_id(c) for c in record.content)
    parent_id = to_dash_id(record.parent_id) if record.parent_id else record.parent_id
    if (block_id, content, parent_id) == (record.id, record.content, record.parent_id):
        return record
    return replace(record, id=block_id, content=content, parent_id=parent_id)


def records_from_record_map(
    record_map: Mapping[str, Any],
) -> dict[str, RawBlockRecord]:
    """Build ``dash id -> RawBlockRecord`` from a record map.

    Parameters
    ----------
    record_map:
        Either the service envelope (a mapping with a ``"block"`` key) or a
        flat mapping of id to block value, record-map entry, or
        :class:`RawBlockRecord`.

    Returns
    -------
    dict[str, RawBlockRecord]
        Records keyed by dash id.  Entries that are not mappings are
        dropped.
    """
    block_table = record_map.get("block")
    if isinstance(block_table, Mapping):
        record_map = block_table

    records: dict[str, RawBlockRecord] = {}
    for key, entry in record_map.items():
        if isinstance(entry, RawBlockRecord):
            record = _normalize_record(entry, key)
            records[record.id] = record
            continue
        value = _unwrap(entry)
        if value is None:
            continue
        if not value.get("id"):
            value = {**value, "id": key}
        record = RawBlockRecord.from_dict(value)
        records[record.id] = record
    return records


def child_index(records: Mapping[str, RawBlockRecord]) -> dict[str, list[str]]:
    """Derive ``parent id -> child ids`` from each record's ``content``."""
    return {
        record_id: list(record.content)
        for record_id, record in records.items()
        if record.content
    }


# ---------------------------------------------------------------------------
# Styled strings
# ---------------------------------------------------------------------------

def _parse_marker(raw: Any) -> StyleMarker | None:
    if not isinstance(raw, list) or not raw or not isinstance(raw[0], str):
        return None
    payload = raw[1] if len(raw) > 1 else None
    return StyleMarker(code=raw[0], payload=payload)


def parse_styled_string(raw: Any) -> tuple[StyledRun, ...]:
    """Parse a property value into styled runs.

    Malformed runs are skipped.  A run without a marker list has no
    markers.  ``None`` and non-list values yield ``()``.
    """
    if not isinstance(raw, list):
        return ()

    runs: list[StyledRun] = []
    for item in raw:
        if not isinstance(item, list) or not item or not isinstance(item[0], str):
            continue
        markers: list[StyleMarker] = []
        if len(item) > 1 and isinstance(item[1], list):
            for raw_marker in item[1]:
                marker = _parse_marker(raw_marker)
                if marker is not None:
                    markers.append(marker)
        runs.append(StyledRun(text=item[0], markers=tuple(markers)))
    return tuple(runs)


def plain_text(runs: tuple[StyledRun, ...]) -> str:
    """Concatenate the text of *runs*, dropping all styling."""
    return "".join(run.text for run in runs)
