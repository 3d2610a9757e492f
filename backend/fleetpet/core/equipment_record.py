"""Equipment Record — immutable snapshots passed between store and engines.

Invariants:
    - Records are frozen: engines return new records via dataclasses.replace
    - id never changes once the store has created the record
    - last_cared_at is None for items that have never been cared for
    - Timestamps are timezone-aware (UTC) once they enter the core

Design Decisions:
    - Frozen dataclasses over dicts: the store owns the row layout, the core owns the shape
    - name is carried through untouched so read models do not need a second lookup
"""

from dataclasses import dataclass
from datetime import datetime

from fleetpet.core.domain_types import EquipmentId, MAX_HEALTH, MIN_LEVEL


@dataclass(frozen=True)
class EquipmentRecord:
    """One physical equipment item and its progression state."""
    id: EquipmentId
    level: int = MIN_LEVEL
    xp: int = 0
    health: int = MAX_HEALTH
    last_cared_at: datetime | None = None
    name: str | None = None


@dataclass(frozen=True)
class MaintenanceEvent:
    """A logged care action waiting to be applied to a record."""
    equipment_id: EquipmentId
    action_kind: str
    occurred_at: datetime
    source_ref: str | None = None  # store-side row key, used to mark it processed


@dataclass(frozen=True)
class MaintenanceEntry:
    """One element of an item's maintenance history."""
    action: str
    performed_at: datetime
