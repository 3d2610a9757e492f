"""Equipment Status — read model combining a record with its history-derived label.

Invariants:
    - build_status never changes the record; it only reads it
    - rank_by_level orders by level desc, then xp desc, then id asc (total order)

Design Decisions:
    - Separate from the engines: this is presentation, computed on read
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from fleetpet.core.classify_status import classify, most_recent_maintenance
from fleetpet.core.domain_types import HealthStatus
from fleetpet.core.equipment_record import EquipmentRecord, MaintenanceEntry


@dataclass(frozen=True)
class EquipmentStatus:
    record: EquipmentRecord
    health_status: HealthStatus
    last_maintenance: MaintenanceEntry | None


def build_status(
    record: EquipmentRecord,
    history: Iterable[MaintenanceEntry],
    now: datetime,
) -> EquipmentStatus:
    last = most_recent_maintenance(history)
    return EquipmentStatus(
        record=record,
        health_status=classify(last, now),
        last_maintenance=last,
    )


def rank_by_level(statuses: Iterable[EquipmentStatus]) -> list[EquipmentStatus]:
    return sorted(
        statuses,
        key=lambda s: (-s.record.level, -s.record.xp, s.record.id),
    )
