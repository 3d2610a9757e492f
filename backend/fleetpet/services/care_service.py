"""Care Service — logs maintenance actions and runs them through the progression engine.

Invariants:
    - A care action for an unknown machine_id raises EquipmentNotFoundError and writes nothing
    - Each event is applied to a freshly fetched record (events for the same item chain)
    - An event is marked processed only after its record has been persisted
    - Pending events for unknown ids stay pending and are reported as skipped

Design Decisions:
    - Read → pure apply_maintenance → write: the store never sees XP arithmetic
    - Events applied in the order the store returns them (log order); items are independent
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from fleetpet.core.apply_maintenance import apply_maintenance
from fleetpet.core.equipment_record import EquipmentRecord, MaintenanceEvent
from fleetpet.core.errors import EquipmentNotFoundError
from fleetpet.core.progression_policy import ProgressionPolicy
from fleetpet.core.repository_protocols import EquipmentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CareResult:
    record: EquipmentRecord
    leveled_up: bool
    xp_gained: int
    event: MaintenanceEvent


@dataclass
class ProcessReport:
    applied: list[CareResult] = field(default_factory=list)
    skipped: list[MaintenanceEvent] = field(default_factory=list)


async def _apply_and_persist(
    store: EquipmentStore,
    record: EquipmentRecord,
    event: MaintenanceEvent,
    policy: ProgressionPolicy,
) -> CareResult:
    updated, leveled_up = apply_maintenance(record, event, policy)
    await store.persist_record(updated)
    await store.mark_events_processed([event])
    xp_gained = policy.xp_for(event.action_kind)
    logger.info(
        f"Care applied to {updated.id}: Lv.{updated.level} "
        f"xp={updated.xp} (+{xp_gained})",
        extra={
            "equipment_id": updated.id, "action": event.action_kind,
            "level": updated.level, "xp": updated.xp, "xp_gained": xp_gained,
        },
    )
    if leveled_up:
        logger.info(
            f"{updated.id} leveled up {record.level} → {updated.level}",
            extra={"equipment_id": updated.id, "level": updated.level},
        )
    return CareResult(
        record=updated, leveled_up=leveled_up, xp_gained=xp_gained, event=event,
    )


async def record_care(
    store: EquipmentStore,
    equipment_id: str,
    action: str,
    policy: ProgressionPolicy,
    now: datetime,
) -> CareResult:
    """Log one care action for an item and apply it immediately."""
    record = await store.fetch_record(equipment_id)
    if record is None:
        raise EquipmentNotFoundError(equipment_id)
    event = await store.append_maintenance(MaintenanceEvent(
        equipment_id=record.id, action_kind=action, occurred_at=now,
    ))
    return await _apply_and_persist(store, record, event, policy)


async def process_pending_events(
    store: EquipmentStore, policy: ProgressionPolicy,
) -> ProcessReport:
    """Apply every pending log entry once."""
    report = ProcessReport()
    for event in await store.fetch_pending_maintenance_events():
        record = await store.fetch_record(event.equipment_id)
        if record is None:
            logger.warning(
                f"Machine ID '{event.equipment_id}' not found in the equipment list",
                extra={"equipment_id": event.equipment_id, "action": event.action_kind},
            )
            report.skipped.append(event)
            continue
        report.applied.append(
            await _apply_and_persist(store, record, event, policy),
        )
    return report
