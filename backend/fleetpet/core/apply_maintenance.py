"""Progression Engine — turns one maintenance event into new level/xp/health.

Invariants:
    - On exit xp < policy.threshold(level), for any xp on entry (excess is carried
      into as many level-ups as it covers)
    - Each loop iteration subtracts the threshold of the level *before* the increment
    - health is reset to MAX_HEALTH and last_cared_at to event.occurred_at, always
    - Never raises: unknown action text earns the policy's default reward

Design Decisions:
    - Pure function returning (record, leveled_up): persisting belongs to the caller
    - Policy injected per call instead of module constants (two schemes coexist)
"""

from dataclasses import replace

from fleetpet.core.domain_types import MAX_HEALTH, MIN_LEVEL
from fleetpet.core.equipment_record import EquipmentRecord, MaintenanceEvent
from fleetpet.core.progression_policy import ProgressionPolicy


def carry_over(
    level: int, xp: int, policy: ProgressionPolicy,
) -> tuple[int, int]:
    """Spend xp on level-ups until the remainder is below the current threshold."""
    level = max(level, MIN_LEVEL)
    xp = max(xp, 0)
    while xp >= policy.threshold(level):
        xp -= policy.threshold(level)
        level += 1
    return level, xp


def apply_maintenance(
    record: EquipmentRecord,
    event: MaintenanceEvent,
    policy: ProgressionPolicy,
) -> tuple[EquipmentRecord, bool]:
    """Apply one care action. Pure — returns the new record and whether it leveled up."""
    level, xp = carry_over(
        record.level, record.xp + policy.xp_for(event.action_kind), policy,
    )
    updated = replace(
        record,
        level=level,
        xp=xp,
        health=MAX_HEALTH,
        last_cared_at=event.occurred_at,
    )
    return updated, level > record.level
