"""Row Codec — spreadsheet rows ↔ records, per the sheet column contract.

Invariants:
    - Header names are lower-cased and stripped of all whitespace before matching
    - machine_id is the only required equipment column; its absence raises MissingColumnError
    - Absent or non-numeric level/xp/health default to 1/0/100; level < 1 becomes 1,
      xp < 0 becomes 0, health is clamped to 0–100
    - Rows with an empty machine_id are skipped, never turned into records
    - Log rows missing machine_id or action text are skipped, never turned into events
    - Unparseable dates become None (treated as never cared)
    - Non-finite numbers ("inf", "1e400", NaN) are non-numeric and take the default
    - Undated log rows are pending events but never maintenance history

Design Decisions:
    - Pure functions over raw cell lists: the Sheets adapter stays a thin IO wrapper
    - Row numbers returned alongside records: writes target the original sheet row
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence

from fleetpet.core.domain_types import EquipmentId, MAX_HEALTH, MIN_LEVEL
from fleetpet.core.elapsed_time import as_utc
from fleetpet.core.equipment_record import (
    EquipmentRecord, MaintenanceEntry, MaintenanceEvent,
)
from fleetpet.core.errors import MissingColumnError


ID_COLUMN = "machine_id"
NAME_COLUMN = "machine_name"
LEVEL_COLUMN = "level"
XP_COLUMN = "xp"
HEALTH_COLUMN = "health"
LAST_CARED_COLUMN = "last_cared_date"
LOG_DATE_COLUMN = "date"
PROCESSED_COLUMN = "processed"

_WHITESPACE = re.compile(r"\s+")

_SHEET_DATE_FORMATS: tuple[str, ...] = (
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
)


@dataclass(frozen=True)
class SheetRow:
    """A decoded row plus its 1-based sheet row number."""
    row_number: int
    record: EquipmentRecord


def normalize_header(name: Any) -> str:
    if name is None:
        return ""
    return _WHITESPACE.sub("", str(name)).lower()


def header_index(headers: Sequence[Any]) -> dict[str, int]:
    """Map normalized header → column index. First occurrence wins."""
    index: dict[str, int] = {}
    for i, h in enumerate(headers):
        index.setdefault(normalize_header(h), i)
    return index


def coerce_int(value: Any, default: int) -> int:
    """Number-ish cell → int, anything else → default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
        return int(number) if math.isfinite(number) else default
    return default


def parse_timestamp(value: Any) -> datetime | None:
    """Cell → aware UTC datetime, or None when empty/unparseable."""
    if isinstance(value, datetime):
        return as_utc(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass
    for fmt in _SHEET_DATE_FORMATS:
        try:
            return as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    return None


def format_timestamp(value: datetime | None) -> str:
    return as_utc(value).isoformat() if value is not None else ""


def _cell(row: Sequence[Any], index: dict[str, int], column: str) -> Any:
    i = index.get(column)
    if i is None or i >= len(row):
        return None
    return row[i]


def decode_equipment_row(
    row: Sequence[Any], index: dict[str, int],
) -> EquipmentRecord | None:
    raw_id = _cell(row, index, ID_COLUMN)
    machine_id = str(raw_id).strip() if raw_id is not None else ""
    if not machine_id:
        return None
    name = _cell(row, index, NAME_COLUMN)
    return EquipmentRecord(
        id=EquipmentId(machine_id),
        level=max(coerce_int(_cell(row, index, LEVEL_COLUMN), MIN_LEVEL), MIN_LEVEL),
        xp=max(coerce_int(_cell(row, index, XP_COLUMN), 0), 0),
        health=min(max(coerce_int(_cell(row, index, HEALTH_COLUMN), MAX_HEALTH), 0), MAX_HEALTH),
        last_cared_at=parse_timestamp(_cell(row, index, LAST_CARED_COLUMN)),
        name=str(name).strip() if name not in (None, "") else None,
    )


def decode_equipment_rows(
    values: Sequence[Sequence[Any]], sheet: str = "equipment",
) -> list[SheetRow]:
    """Decode a full value range (header row first)."""
    if not values:
        raise MissingColumnError(ID_COLUMN, sheet)
    index = header_index(values[0])
    if ID_COLUMN not in index:
        raise MissingColumnError(ID_COLUMN, sheet)
    rows = []
    for offset, row in enumerate(values[1:]):
        record = decode_equipment_row(row, index)
        if record is not None:
            rows.append(SheetRow(row_number=offset + 2, record=record))
    return rows


def encode_record_cells(
    record: EquipmentRecord, index: dict[str, int],
) -> dict[int, Any]:
    """Column index → new cell value for the engine-owned columns present in the sheet."""
    values = {
        LEVEL_COLUMN: record.level,
        XP_COLUMN: record.xp,
        HEALTH_COLUMN: record.health,
        LAST_CARED_COLUMN: format_timestamp(record.last_cared_at),
    }
    return {index[col]: v for col, v in values.items() if col in index}


def column_letter(index: int) -> str:
    """0-based column index → A1 column letters (0 → A, 26 → AA)."""
    letters = ""
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


@dataclass(frozen=True)
class LogRow:
    row_number: int
    event: MaintenanceEvent
    processed: bool
    dated: bool = True  # False when occurred_at is the read time, not a sheet date


def decode_log_rows(
    values: Sequence[Sequence[Any]],
    action_column: str,
    received_at: datetime,
    sheet: str = "log",
) -> list[LogRow]:
    """Decode the maintenance log. Rows without a date take received_at and dated=False."""
    if not values:
        raise MissingColumnError(ID_COLUMN, sheet)
    index = header_index(values[0])
    action_key = normalize_header(action_column)
    for column in (ID_COLUMN, action_key):
        if column not in index:
            raise MissingColumnError(column, sheet)

    rows = []
    for offset, row in enumerate(values[1:]):
        raw_id = _cell(row, index, ID_COLUMN)
        raw_action = _cell(row, index, action_key)
        machine_id = str(raw_id).strip() if raw_id is not None else ""
        action = str(raw_action).strip() if raw_action is not None else ""
        if not machine_id or not action:
            continue
        row_number = offset + 2
        logged_at = parse_timestamp(_cell(row, index, LOG_DATE_COLUMN))
        rows.append(LogRow(
            row_number=row_number,
            event=MaintenanceEvent(
                equipment_id=EquipmentId(machine_id),
                action_kind=action,
                occurred_at=logged_at or as_utc(received_at),
                source_ref=str(row_number),
            ),
            processed=bool(str(_cell(row, index, PROCESSED_COLUMN) or "").strip()),
            dated=logged_at is not None,
        ))
    return rows


def history_from_log(
    rows: Sequence[LogRow], equipment_id: str,
) -> list[MaintenanceEntry]:
    return [
        MaintenanceEntry(action=r.event.action_kind, performed_at=r.event.occurred_at)
        for r in rows if r.dated and r.event.equipment_id == equipment_id
    ]
