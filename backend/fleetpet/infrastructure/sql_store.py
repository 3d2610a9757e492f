"""SQL Equipment Store — EquipmentStore implemented on the SQLAlchemy async session.

Invariants:
    - Every write commits before returning (one record per call, no batching)
    - Timestamps read back from the DB are normalized to aware UTC
    - persist_record updates an existing row only; it never creates equipment
    - source_ref of a stored event is the maintenance_logs.id as a string

Design Decisions:
    - Thin mapping layer: ORM rows ↔ frozen core records, no rules applied here
    - Session injected from db_manager.session(), store owns no engine
"""

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timezone

from sqlalchemy import select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from fleetpet.core.domain_types import EquipmentId
from fleetpet.core.elapsed_time import as_utc
from fleetpet.core.equipment_record import (
    EquipmentRecord, MaintenanceEntry, MaintenanceEvent,
)
from fleetpet.core.errors import EquipmentNotFoundError
from fleetpet.models.equipment import Equipment
from fleetpet.models.maintenance_log import MaintenanceLog

logger = logging.getLogger(__name__)


def _to_record(row: Equipment) -> EquipmentRecord:
    return EquipmentRecord(
        id=EquipmentId(row.machine_id),
        level=row.level,
        xp=row.xp,
        health=row.health,
        last_cared_at=as_utc(row.last_cared_date) if row.last_cared_date else None,
        name=row.machine_name,
    )


def _to_event(row: MaintenanceLog) -> MaintenanceEvent:
    return MaintenanceEvent(
        equipment_id=EquipmentId(row.machine_id),
        action_kind=row.action,
        occurred_at=as_utc(row.performed_at),
        source_ref=str(row.id),
    )


def _to_entry(row: MaintenanceLog) -> MaintenanceEntry:
    return MaintenanceEntry(action=row.action, performed_at=as_utc(row.performed_at))


class SqlEquipmentStore:
    """EquipmentStore backed by the equipment / maintenance_logs tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_record(self, equipment_id: str) -> EquipmentRecord | None:
        row = await self.db.get(Equipment, equipment_id)
        return _to_record(row) if row else None

    async def fetch_all_records(self) -> list[EquipmentRecord]:
        result = await self.db.execute(
            select(Equipment).order_by(Equipment.machine_id),
        )
        return [_to_record(r) for r in result.scalars().all()]

    async def persist_record(self, record: EquipmentRecord) -> None:
        row = await self.db.get(Equipment, record.id)
        if row is None:
            raise EquipmentNotFoundError(record.id)
        row.level = record.level
        row.xp = record.xp
        row.health = record.health
        row.last_cared_date = record.last_cared_at
        await self.db.commit()

    async def fetch_pending_maintenance_events(self) -> list[MaintenanceEvent]:
        result = await self.db.execute(
            select(MaintenanceLog)
            .where(MaintenanceLog.processed_at.is_(None))
            .order_by(MaintenanceLog.performed_at, MaintenanceLog.id),
        )
        return [_to_event(r) for r in result.scalars().all()]

    async def mark_events_processed(self, events: list[MaintenanceEvent]) -> None:
        ids = [int(e.source_ref) for e in events if e.source_ref is not None]
        if not ids:
            return
        await self.db.execute(
            update(MaintenanceLog)
            .where(MaintenanceLog.id.in_(ids))
            .values(processed_at=datetime.now(timezone.utc)),
        )
        await self.db.commit()

    async def append_maintenance(self, event: MaintenanceEvent) -> MaintenanceEvent:
        row = MaintenanceLog(
            machine_id=event.equipment_id,
            action=event.action_kind,
            performed_at=event.occurred_at,
        )
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return replace(event, source_ref=str(row.id))

    async def fetch_history(self, equipment_id: str) -> list[MaintenanceEntry]:
        result = await self.db.execute(
            select(MaintenanceLog).where(MaintenanceLog.machine_id == equipment_id),
        )
        return [_to_entry(r) for r in result.scalars().all()]

    async def fetch_all_histories(self) -> dict[str, list[MaintenanceEntry]]:
        result = await self.db.execute(select(MaintenanceLog))
        histories: dict[str, list[MaintenanceEntry]] = defaultdict(list)
        for row in result.scalars().all():
            histories[row.machine_id].append(_to_entry(row))
        return dict(histories)

    async def ping(self) -> bool:
        try:
            await self.db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"SQL store ping failed: {e}")
            return False
