"""Decay Tick Job — one decay pass over the fleet, meant for a daily scheduler.

Usage:
    python -m fleetpet.jobs.decay_tick

Invariants:
    - Runs exactly one tick per invocation; schedule it once per period
    - Uses the same settings, store selection and rule as the API

Design Decisions:
    - Standalone asyncio.run entry point: cron/PaaS schedulers need no running API
"""

import asyncio
import logging
from datetime import datetime, timezone

from fleetpet.bootstrap import decay_rule_from_settings, sheets_store_from_settings
from fleetpet.config import Settings, get_settings
from fleetpet.core.domain_types import StoreBackend
from fleetpet.infrastructure.database import DatabaseSessionManager
from fleetpet.infrastructure.observability import setup_logging
from fleetpet.infrastructure.sql_store import SqlEquipmentStore
from fleetpet.services.decay_service import DecayReport, run_decay_tick

logger = logging.getLogger(__name__)


async def run_once(settings: Settings, now: datetime | None = None) -> DecayReport:
    now = now or datetime.now(timezone.utc)
    rule = decay_rule_from_settings(settings)
    if settings.store_backend == StoreBackend.SHEETS:
        return await run_decay_tick(sheets_store_from_settings(settings), now, rule)

    manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    try:
        async with manager.session() as db:
            return await run_decay_tick(SqlEquipmentStore(db), now, rule)
    finally:
        await manager.dispose()


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    report = asyncio.run(run_once(settings))
    logger.info(f"Decay tick finished: {len(report.changed)}/{report.checked} decayed")


if __name__ == "__main__":
    main()
