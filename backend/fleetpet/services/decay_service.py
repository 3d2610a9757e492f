"""Decay Service — one scheduled decay tick over every record.

Invariants:
    - Only records whose health changed are written back
    - Calling run_decay_tick twice in one period decays twice: the scheduler must
      run it at most once per item per period

Design Decisions:
    - Records are decayed independently; write order carries no meaning
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from fleetpet.core.decay_health import DecayRule, decay_all
from fleetpet.core.equipment_record import EquipmentRecord
from fleetpet.core.repository_protocols import EquipmentStore

logger = logging.getLogger(__name__)


@dataclass
class DecayReport:
    checked: int = 0
    changed: list[EquipmentRecord] = field(default_factory=list)


async def run_decay_tick(
    store: EquipmentStore, now: datetime, rule: DecayRule,
) -> DecayReport:
    records = await store.fetch_all_records()
    report = DecayReport(checked=len(records))
    for outcome in decay_all(records, now, rule):
        if not outcome.changed:
            continue
        await store.persist_record(outcome.record)
        report.changed.append(outcome.record)
        logger.info(
            f"Health for {outcome.record.id} decreased to {outcome.record.health}",
            extra={"equipment_id": outcome.record.id, "health": outcome.record.health},
        )
    logger.info(
        f"Health check complete: {len(report.changed)}/{report.checked} decayed",
        extra={"records_changed": len(report.changed)},
    )
    return report
