"""Status Classifier — coarse health label from days since the last maintenance.

Invariants:
    - No history → Neglected
    - Band upper bounds are inclusive: <= 7 Healthy, <= 14 Normal, <= 30 Sick, else Neglected
    - Independent of the numeric health score kept by the decay engine

Design Decisions:
    - Bands as an ordered tuple: one table, no if-ladder to keep in sync
"""

from datetime import datetime
from typing import Iterable

from fleetpet.core.domain_types import HealthStatus
from fleetpet.core.elapsed_time import as_utc, elapsed_days
from fleetpet.core.equipment_record import MaintenanceEntry


STATUS_BANDS: tuple[tuple[float, HealthStatus], ...] = (
    (7, HealthStatus.HEALTHY),
    (14, HealthStatus.NORMAL),
    (30, HealthStatus.SICK),
)


def most_recent_maintenance(
    history: Iterable[MaintenanceEntry],
) -> MaintenanceEntry | None:
    """Latest entry by timestamp. Ties may return any of the tied entries."""
    return max(history, key=lambda e: as_utc(e.performed_at), default=None)


def classify(
    last_maintenance: MaintenanceEntry | None, now: datetime,
) -> HealthStatus:
    if last_maintenance is None:
        return HealthStatus.NEGLECTED
    days = elapsed_days(last_maintenance.performed_at, now)
    for upper_bound, status in STATUS_BANDS:
        if days <= upper_bound:
            return status
    return HealthStatus.NEGLECTED
