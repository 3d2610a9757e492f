"""Decay Engine — erodes health of items left unmaintained past the neglect window.

Invariants:
    - Records with health == 0 or no last_cared_at are returned unchanged
    - Health drops by decrease_amount only when elapsed days > neglect_threshold_days
    - Health never goes below 0
    - last_cared_at is never touched, so every call inside the same neglect window
      subtracts again — callers run one tick per item per scheduling period
    - Records are independent: decay_all has no ordering or cross-record effects

Design Decisions:
    - DecayRule holds the two knobs so they come from configuration, not module constants
    - decay_all reports changed flags so the shell writes only rows that moved
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable

from fleetpet.core.elapsed_time import elapsed_days
from fleetpet.core.equipment_record import EquipmentRecord
from fleetpet.core.errors import InvalidPolicyError


NEGLECT_THRESHOLD_DAYS: float = 7
HEALTH_DECREASE_AMOUNT: int = 10


@dataclass(frozen=True)
class DecayRule:
    neglect_threshold_days: float = NEGLECT_THRESHOLD_DAYS
    decrease_amount: int = HEALTH_DECREASE_AMOUNT

    def __post_init__(self):
        if self.neglect_threshold_days < 0 or self.decrease_amount < 0:
            raise InvalidPolicyError(
                "Decay rule values must be >= 0 "
                f"(days={self.neglect_threshold_days}, amount={self.decrease_amount})",
            )


@dataclass(frozen=True)
class DecayOutcome:
    record: EquipmentRecord
    previous_health: int

    @property
    def changed(self) -> bool:
        return self.record.health != self.previous_health


def decay(
    record: EquipmentRecord,
    now: datetime,
    rule: DecayRule = DecayRule(),
) -> EquipmentRecord:
    """Apply one decay tick to a single record. Pure — no state mutation."""
    if record.health == 0 or record.last_cared_at is None:
        return record
    if elapsed_days(record.last_cared_at, now) <= rule.neglect_threshold_days:
        return record
    return replace(record, health=max(0, record.health - rule.decrease_amount))


def decay_all(
    records: Iterable[EquipmentRecord],
    now: datetime,
    rule: DecayRule = DecayRule(),
) -> list[DecayOutcome]:
    """Apply one decay tick to each record independently."""
    return [
        DecayOutcome(record=decay(r, now, rule), previous_health=r.health)
        for r in records
    ]
