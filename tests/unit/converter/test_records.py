"""Tests for record loading and styled-string parsing."""

from notionast.converter.records import (
    child_index,
    parse_styled_string,
    plain_text,
    records_from_record_map,
)
from notionast.models import RawBlockRecord, StyledRun, StyleMarker

DASH_ID = "0eeee000-cccc-bbbb-aaaa-123450000000"
NO_DASH_ID = "0eeee000ccccbbbbaaaa123450000000"


class TestParseStyledString:
    def test_runs_and_markers(self):
        runs = parse_styled_string([
            ["Hello ", [["b"]]],
            ["world", [["a", "https://example.com"], ["i"]]],
        ])
        assert runs == (
            StyledRun("Hello ", (StyleMarker("b"),)),
            StyledRun("world", (StyleMarker("a", "https://example.com"), StyleMarker("i"))),
        )

    def test_run_without_markers(self):
        assert parse_styled_string([["plain"]]) == (StyledRun("plain"),)

    def test_none_and_non_list(self):
        assert parse_styled_string(None) == ()
        assert parse_styled_string("text") == ()

    def test_malformed_runs_skipped(self):
        assert parse_styled_string([["ok"], 5, [], [3]]) == (StyledRun("ok"),)

    def test_malformed_markers_skipped(self):
        runs = parse_styled_string([["x", [["b"], [], "i", [7]]]])
        assert runs == (StyledRun("x", (StyleMarker("b"),)),)

    def test_date_payload_kept(self):
        runs = parse_styled_string([["‣", [["d", {"start_date": "2020-01-01"}]]]])
        assert runs[0].markers[0].payload == {"start_date": "2020-01-01"}

    def test_plain_text(self):
        runs = parse_styled_string([["a", [["b"]]], ["b"]])
        assert plain_text(runs) == "ab"


class TestRecordsFromRecordMap:
    def test_flat_map(self):
        records = records_from_record_map({DASH_ID: {"id": DASH_ID, "type": "text"}})
        assert records[DASH_ID].type == "text"

    def test_envelope_unwrapped(self):
        record_map = {
            "block": {
                DASH_ID: {"role": "reader", "value": {"id": DASH_ID, "type": "page"}},
            },
        }
        records = records_from_record_map(record_map)
        assert records[DASH_ID].type == "page"

    def test_no_dash_ids_normalized(self):
        records = records_from_record_map({
            NO_DASH_ID: {"id": NO_DASH_ID, "type": "text", "content": [NO_DASH_ID]},
        })
        assert DASH_ID in records
        assert records[DASH_ID].content == (DASH_ID,)

    def test_missing_id_taken_from_key(self):
        records = records_from_record_map({"b1": {"type": "text"}})
        assert records["b1"].id == "b1"

    def test_record_instances_pass_through(self):
        record = RawBlockRecord(id="b1", type="divider")
        assert records_from_record_map({"b1": record})["b1"] is record

    def test_record_instance_ids_normalized(self):
        record = RawBlockRecord(
            id=NO_DASH_ID, type="page", content=(NO_DASH_ID,), parent_id=NO_DASH_ID,
        )
        normalized = records_from_record_map({NO_DASH_ID: record})[DASH_ID]
        assert normalized.id == DASH_ID
        assert normalized.content == (DASH_ID,)
        assert normalized.parent_id == DASH_ID

    def test_non_mapping_entries_dropped(self):
        assert records_from_record_map({"b1": None, "b2": "x"}) == {}

    def test_child_index(self):
        records = records_from_record_map({
            "p": {"id": "p", "type": "page", "content": ["a", "b"]},
            "a": {"id": "a", "type": "text"},
        })
        assert child_index(records) == {"p": ["a", "b"]}


class TestRawBlockRecord:
    def test_wrong_shapes_treated_as_absent(self):
        record = RawBlockRecord.from_dict({
            "id": "b1",
            "type": "text",
            "properties": "nope",
            "format": 3,
            "content": "nope",
            "created_time": "yesterday",
        })
        assert record.properties is None
        assert record.format is None
        assert record.content == ()
        assert record.created_time is None

    def test_alive_flag(self):
        assert RawBlockRecord.from_dict({"id": "b", "type": "text"}).alive
        assert not RawBlockRecord.from_dict({"id": "b", "type": "text", "alive": False}).alive

    def test_first_text(self):
        record = RawBlockRecord.from_dict({
            "id": "b", "type": "to_do", "properties": {"checked": [["Yes"]]},
        })
        assert record.first_text("checked") == "Yes"
        assert record.first_text("title") is None

    def test_get_format_default(self):
        record = RawBlockRecord(id="b", type="text")
        assert record.get_format("block_color", "x") == "x"
