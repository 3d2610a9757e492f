"""Row Codec — tests for sheet header matching and cell coercion.

Tests cover:
    - Headers matched case-insensitively with whitespace removed
    - Missing/non-numeric/non-finite cells default to level 1, xp 0, health 100
    - Out-of-range cells clamped (level >= 1, xp >= 0, health 0–100)
    - Missing machine_id column raises MissingColumnError; blank ids skipped
    - Date parsing: ISO, Z suffix, sheet slash formats, garbage → None
    - Log rows: skipped when id/action missing, processed flag, date fallback
    - Undated log rows stay out of maintenance history
    - Only engine-owned cells are encoded; A1 column letters
"""

from datetime import datetime, timezone

import pytest

from fleetpet.core.classify_status import classify, most_recent_maintenance
from fleetpet.core.errors import MissingColumnError
from fleetpet.core.row_codec import (
    coerce_int, column_letter, decode_equipment_rows, decode_log_rows,
    encode_record_cells, format_timestamp, header_index, history_from_log,
    normalize_header, parse_timestamp,
)
from fleetpet.core.equipment_record import EquipmentRecord
from fleetpet.core.domain_types import EquipmentId, HealthStatus

RECEIVED = datetime(2025, 9, 9, 12, 0, tzinfo=timezone.utc)
ACTION = "作業内容"


# ─── headers ───────────────────────────────────────────────────

def test_normalize_header_lowercases_and_strips_whitespace():
    assert normalize_header(" Machine ID ") == "machineid"
    assert normalize_header("Last_Cared_Date") == "last_cared_date"
    assert normalize_header("作業 内容") == "作業内容"
    assert normalize_header(None) == ""


def test_header_index_first_occurrence_wins():
    assert header_index(["machine_id", "XP", "xp"]) == {"machine_id": 0, "xp": 1}


# ─── cell coercion ─────────────────────────────────────────────

@pytest.mark.parametrize("value,expected", [
    (5, 5),
    (5.9, 5),
    ("12", 12),
    (" 7 ", 7),
    ("3.0", 3),
    ("", 1),
    ("abc", 1),
    ("inf", 1),
    ("-inf", 1),
    ("1e400", 1),
    ("nan", 1),
    (float("inf"), 1),
    (float("nan"), 1),
    (None, 1),
    (True, 1),
])
def test_coerce_int(value, expected):
    assert coerce_int(value, 1) == expected


@pytest.mark.parametrize("value,expected", [
    ("2025-09-01T10:00:00+00:00", datetime(2025, 9, 1, 10, 0, tzinfo=timezone.utc)),
    ("2025-09-01T10:00:00Z", datetime(2025, 9, 1, 10, 0, tzinfo=timezone.utc)),
    ("2025-09-01", datetime(2025, 9, 1, tzinfo=timezone.utc)),
    ("2025/09/01", datetime(2025, 9, 1, tzinfo=timezone.utc)),
    ("2025/09/01 08:30", datetime(2025, 9, 1, 8, 30, tzinfo=timezone.utc)),
    ("2025/09/01 08:30:15", datetime(2025, 9, 1, 8, 30, 15, tzinfo=timezone.utc)),
])
def test_parse_timestamp_formats(value, expected):
    assert parse_timestamp(value) == expected


@pytest.mark.parametrize("value", ["", "   ", "not a date", None, 42])
def test_parse_timestamp_unparseable_is_none(value):
    assert parse_timestamp(value) is None


def test_format_timestamp():
    assert format_timestamp(None) == ""
    assert format_timestamp(datetime(2025, 9, 1, 10, 0)) == "2025-09-01T10:00:00+00:00"


# ─── equipment rows ────────────────────────────────────────────

def test_decode_equipment_rows_with_messy_headers():
    values = [
        [" Machine_ID", "Machine_Name", "LEVEL", "Xp ", "health", "Last_Cared_Date "],
        ["EQ-1", "Forklift", "3", "40", "80", "2025/09/01"],
    ]
    [row] = decode_equipment_rows(values)
    assert row.row_number == 2
    record = row.record
    assert record.id == "EQ-1"
    assert record.name == "Forklift"
    assert (record.level, record.xp, record.health) == (3, 40, 80)
    assert record.last_cared_at == datetime(2025, 9, 1, tzinfo=timezone.utc)


def test_missing_cells_take_defaults():
    values = [["machine_id", "level", "xp", "health"], ["EQ-1"]]
    record = decode_equipment_rows(values)[0].record
    assert (record.level, record.xp, record.health) == (1, 0, 100)
    assert record.last_cared_at is None
    assert record.name is None


def test_absent_columns_take_defaults():
    record = decode_equipment_rows([["machine_id"], ["EQ-1"]])[0].record
    assert (record.level, record.xp, record.health) == (1, 0, 100)


def test_non_numeric_cells_take_defaults():
    values = [["machine_id", "level", "xp", "health"], ["EQ-1", "high", "lots", "ok"]]
    record = decode_equipment_rows(values)[0].record
    assert (record.level, record.xp, record.health) == (1, 0, 100)


def test_non_finite_cells_take_defaults():
    values = [["machine_id", "level", "xp", "health"], ["EQ-1", "inf", "1e400", "-inf"]]
    record = decode_equipment_rows(values)[0].record
    assert (record.level, record.xp, record.health) == (1, 0, 100)


def test_out_of_range_cells_are_clamped():
    values = [["machine_id", "level", "xp", "health"], ["EQ-1", "0", "-5", "150"]]
    record = decode_equipment_rows(values)[0].record
    assert (record.level, record.xp, record.health) == (1, 0, 100)
    values = [["machine_id", "health"], ["EQ-1", "-20"]]
    assert decode_equipment_rows(values)[0].record.health == 0


def test_blank_ids_are_skipped_but_row_numbers_kept():
    values = [["machine_id"], ["EQ-1"], [""], [], ["EQ-2"]]
    rows = decode_equipment_rows(values)
    assert [(r.row_number, r.record.id) for r in rows] == [(2, "EQ-1"), (5, "EQ-2")]


def test_missing_id_column_raises():
    with pytest.raises(MissingColumnError) as exc:
        decode_equipment_rows([["name", "level"], ["x", "1"]], "equipment")
    assert exc.value.column == "machine_id"
    assert exc.value.sheet == "equipment"


def test_empty_sheet_raises():
    with pytest.raises(MissingColumnError):
        decode_equipment_rows([])


def test_encode_record_cells_only_targets_present_columns():
    index = header_index(["machine_id", "machine_name", "level", "xp", "notes"])
    record = EquipmentRecord(id=EquipmentId("EQ-1"), level=4, xp=12, health=90)
    assert encode_record_cells(record, index) == {2: 4, 3: 12}


def test_encode_record_cells_writes_last_cared_as_iso():
    index = header_index(["machine_id", "health", "last_cared_date"])
    record = EquipmentRecord(
        id=EquipmentId("EQ-1"), health=100,
        last_cared_at=datetime(2025, 9, 1, 10, 0, tzinfo=timezone.utc),
    )
    assert encode_record_cells(record, index) == {
        1: 100, 2: "2025-09-01T10:00:00+00:00",
    }


@pytest.mark.parametrize("index,letters", [
    (0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"), (52, "BA"), (701, "ZZ"), (702, "AAA"),
])
def test_column_letter(index, letters):
    assert column_letter(index) == letters


# ─── log rows ──────────────────────────────────────────────────

def test_decode_log_rows():
    values = [
        ["machine_id", ACTION, "date", "processed"],
        ["EQ-1", "給油", "2025/09/01 08:00", ""],
        ["EQ-2", "洗車", "", "2025-09-02T00:00:00+00:00"],
        ["", "給油", "2025/09/01", ""],
        ["EQ-3", "  ", "2025/09/01", ""],
        ["EQ-4", "修理"],
    ]
    rows = decode_log_rows(values, ACTION, RECEIVED)
    assert [r.row_number for r in rows] == [2, 3, 6]
    first, second, third = rows
    assert first.event.equipment_id == "EQ-1"
    assert first.event.action_kind == "給油"
    assert first.event.occurred_at == datetime(2025, 9, 1, 8, 0, tzinfo=timezone.utc)
    assert first.event.source_ref == "2"
    assert not first.processed
    assert second.processed
    assert second.event.occurred_at == RECEIVED
    assert third.event.occurred_at == RECEIVED
    assert not third.processed


def test_log_without_processed_column_is_all_pending():
    values = [["machine_id", ACTION], ["EQ-1", "給油"]]
    assert not decode_log_rows(values, ACTION, RECEIVED)[0].processed


def test_log_action_column_matched_loosely():
    values = [["Machine_ID", " 作業 内容 "], ["EQ-1", "給油"]]
    assert decode_log_rows(values, ACTION, RECEIVED)[0].event.action_kind == "給油"


@pytest.mark.parametrize("headers,missing", [
    (["machine_id", "date"], ACTION),
    ([ACTION, "date"], "machine_id"),
])
def test_log_missing_required_column_raises(headers, missing):
    with pytest.raises(MissingColumnError) as exc:
        decode_log_rows([headers], ACTION, RECEIVED)
    assert exc.value.column == missing


def test_history_from_log_filters_by_id():
    values = [
        ["machine_id", ACTION, "date"],
        ["EQ-1", "給油", "2025/09/01"],
        ["EQ-2", "洗車", "2025/09/02"],
        ["EQ-1", "修理", "2025/09/03"],
    ]
    history = history_from_log(decode_log_rows(values, ACTION, RECEIVED), "EQ-1")
    assert [e.action for e in history] == ["給油", "修理"]


def test_undated_rows_are_events_but_not_history():
    values = [
        ["machine_id", ACTION, "date"],
        ["EQ-1", "給油", ""],
        ["EQ-1", "洗車", "garbage"],
        ["EQ-1", "修理", "2025/08/01"],
    ]
    rows = decode_log_rows(values, ACTION, RECEIVED)
    assert [r.dated for r in rows] == [False, False, True]
    assert [r.event.occurred_at for r in rows[:2]] == [RECEIVED, RECEIVED]

    history = history_from_log(rows, "EQ-1")
    assert [e.action for e in history] == ["修理"]


def test_undated_only_history_classifies_as_neglected():
    rows = decode_log_rows([["machine_id", ACTION], ["EQ-1", "給油"]], ACTION, RECEIVED)
    last = most_recent_maintenance(history_from_log(rows, "EQ-1"))
    assert last is None
    assert classify(last, RECEIVED) == HealthStatus.NEGLECTED
