"""Google Sheets Equipment Store — EquipmentStore over the fleet spreadsheet.

Sheets used:
    - equipment sheet: header row with machine_id, level, xp, health, last_cared_date, ...
    - log sheet: header row with machine_id, the action column, optional date, processed

Invariants:
    - Header matching goes through row_codec (case-insensitive, whitespace-stripped)
    - Only the engine-owned cells of a row are written; other columns are never touched
    - A log row counts as processed once its processed cell is non-empty
    - googleapiclient HttpError is mapped to StoreError; no retries here

Design Decisions:
    - googleapiclient is synchronous: every request runs in asyncio.to_thread so the
      event loop is never blocked
    - Credentials arrive as base64 service-account JSON (single env var on PaaS hosts)
    - Sheet reads are whole-sheet (no column bound): the fleet is small, row numbers
      stay exact, and a processed column appended past Z is still read back
    - Undated log rows feed pending events only; history needs a real date
"""

import asyncio
import base64
import json
import logging
import re
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from fleetpet.core.equipment_record import (
    EquipmentRecord, MaintenanceEntry, MaintenanceEvent,
)
from fleetpet.core.errors import EquipmentNotFoundError, StoreError
from fleetpet.core.row_codec import (
    ID_COLUMN, LOG_DATE_COLUMN, PROCESSED_COLUMN,
    column_letter, decode_equipment_rows, decode_log_rows, encode_record_cells,
    format_timestamp, header_index, history_from_log, normalize_header,
)

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
_UPDATED_ROW = re.compile(r"![A-Z]+(\d+)")


def decode_credentials(credentials_base64: str) -> dict:
    """Base64 service-account JSON → dict."""
    try:
        return json.loads(base64.b64decode(credentials_base64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError) as e:
        raise StoreError(f"invalid service account credentials ({e})", "authenticate")


def build_sheets_service(credentials_base64: str):
    if not credentials_base64:
        raise StoreError("GOOGLE_CREDENTIALS_BASE64 is not set", "authenticate")
    creds = service_account.Credentials.from_service_account_info(
        decode_credentials(credentials_base64), scopes=SCOPES,
    )
    return build("sheets", "v4", credentials=creds, cache_discovery=False)


class SheetsEquipmentStore:
    """EquipmentStore backed by two sheets of one spreadsheet."""

    def __init__(
        self,
        service: Any,
        spreadsheet_id: str,
        equipment_sheet: str,
        log_sheet: str,
        action_column: str,
    ):
        self.service = service
        self.spreadsheet_id = spreadsheet_id
        self.equipment_sheet = equipment_sheet
        self.log_sheet = log_sheet
        self.action_column = action_column

    # ─── low-level IO ───────────────────────────────────────────

    async def _execute(self, request: Any, operation: str) -> dict:
        try:
            return await asyncio.to_thread(request.execute)
        except HttpError as e:
            logger.error(f"Sheets {operation} failed: {e}")
            raise StoreError(f"Google Sheets API error ({e.resp.status})", operation)

    def _range(self, sheet: str, a1: str | None = None) -> str:
        """No a1 → the whole sheet, however many columns it grows to."""
        return f"'{sheet}'!{a1}" if a1 else f"'{sheet}'"

    async def _read(self, sheet: str) -> list[list[Any]]:
        values = self.service.spreadsheets().values()
        result = await self._execute(
            values.get(spreadsheetId=self.spreadsheet_id, range=self._range(sheet)),
            "read",
        )
        return result.get("values", [])

    async def _write_cells(self, sheet: str, cells: dict[str, Any]) -> None:
        """cells: A1 address → value."""
        if not cells:
            return
        body = {
            "valueInputOption": "USER_ENTERED",
            "data": [
                {"range": self._range(sheet, a1), "values": [[v]]}
                for a1, v in cells.items()
            ],
        }
        values = self.service.spreadsheets().values()
        await self._execute(
            values.batchUpdate(spreadsheetId=self.spreadsheet_id, body=body),
            "write",
        )

    async def _log_rows(self):
        return decode_log_rows(
            await self._read(self.log_sheet), self.action_column,
            received_at=datetime.now(timezone.utc), sheet=self.log_sheet,
        )

    # ─── EquipmentStore ─────────────────────────────────────────

    async def fetch_all_records(self) -> list[EquipmentRecord]:
        rows = decode_equipment_rows(
            await self._read(self.equipment_sheet), self.equipment_sheet,
        )
        return [r.record for r in rows]

    async def fetch_record(self, equipment_id: str) -> EquipmentRecord | None:
        for record in await self.fetch_all_records():
            if record.id == equipment_id:
                return record
        return None

    async def persist_record(self, record: EquipmentRecord) -> None:
        values = await self._read(self.equipment_sheet)
        rows = decode_equipment_rows(values, self.equipment_sheet)
        target = next((r for r in rows if r.record.id == record.id), None)
        if target is None:
            raise EquipmentNotFoundError(record.id)
        cells = encode_record_cells(record, header_index(values[0]))
        await self._write_cells(self.equipment_sheet, {
            f"{column_letter(col)}{target.row_number}": v for col, v in cells.items()
        })

    async def fetch_pending_maintenance_events(self) -> list[MaintenanceEvent]:
        return [r.event for r in await self._log_rows() if not r.processed]

    async def mark_events_processed(self, events: list[MaintenanceEvent]) -> None:
        row_numbers = [int(e.source_ref) for e in events if e.source_ref is not None]
        if not row_numbers:
            return
        values = await self._read(self.log_sheet)
        headers = values[0] if values else []
        index = header_index(headers)
        cells: dict[str, Any] = {}
        if PROCESSED_COLUMN not in index:
            col = column_letter(len(headers))
            cells[f"{col}1"] = PROCESSED_COLUMN
        else:
            col = column_letter(index[PROCESSED_COLUMN])
        stamp = format_timestamp(datetime.now(timezone.utc))
        for n in row_numbers:
            cells[f"{col}{n}"] = stamp
        await self._write_cells(self.log_sheet, cells)

    async def append_maintenance(self, event: MaintenanceEvent) -> MaintenanceEvent:
        values = await self._read(self.log_sheet)
        headers = values[0] if values else []
        index = header_index(headers)
        by_column = {
            ID_COLUMN: event.equipment_id,
            normalize_header(self.action_column): event.action_kind,
            LOG_DATE_COLUMN: format_timestamp(event.occurred_at),
        }
        row = [""] * len(headers)
        for column, value in by_column.items():
            if column in index:
                row[index[column]] = value
        result = await self._execute(
            self.service.spreadsheets().values().append(
                spreadsheetId=self.spreadsheet_id,
                range=self._range(self.log_sheet, "A1"),
                valueInputOption="USER_ENTERED",
                insertDataOption="INSERT_ROWS",
                body={"values": [row]},
            ),
            "append",
        )
        match = _UPDATED_ROW.search(result.get("updates", {}).get("updatedRange", ""))
        return replace(event, source_ref=match.group(1) if match else None)

    async def fetch_history(self, equipment_id: str) -> list[MaintenanceEntry]:
        return history_from_log(await self._log_rows(), equipment_id)

    async def fetch_all_histories(self) -> dict[str, list[MaintenanceEntry]]:
        rows = await self._log_rows()
        return {
            machine_id: history_from_log(rows, machine_id)
            for machine_id in {r.event.equipment_id for r in rows if r.dated}
        }

    async def ping(self) -> bool:
        try:
            await self._execute(
                self.service.spreadsheets().get(
                    spreadsheetId=self.spreadsheet_id, fields="spreadsheetId",
                ),
                "ping",
            )
            return True
        except StoreError:
            return False
