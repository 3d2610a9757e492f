"""API Dependencies — wires settings into stores, policies and rules per request.

Invariants:
    - store_backend selects the EquipmentStore implementation; routes never branch on it
    - Policy/rule objects are rebuilt from settings per request (cheap, immutable)

Design Decisions:
    - FastAPI Depends over module globals: tests override get_store / get_policy directly
    - db_manager read at call time (module attribute) so tests can swap it
"""

from typing import AsyncGenerator

from fleetpet.bootstrap import (
    decay_rule_from_settings, policy_from_settings, sheets_store_from_settings,
)
from fleetpet.config import get_settings
from fleetpet.core.decay_health import DecayRule
from fleetpet.core.domain_types import StoreBackend
from fleetpet.core.progression_policy import ProgressionPolicy
from fleetpet.core.repository_protocols import EquipmentStore
from fleetpet.infrastructure import database
from fleetpet.infrastructure.sql_store import SqlEquipmentStore


async def get_store() -> AsyncGenerator[EquipmentStore, None]:
    """Yield the configured store; the SQL session lives for the request."""
    settings = get_settings()
    if settings.store_backend == StoreBackend.SHEETS:
        yield sheets_store_from_settings(settings)
        return
    if not database.db_manager:
        raise RuntimeError("Database not initialized")
    async with database.db_manager.session() as db:
        yield SqlEquipmentStore(db)


def get_policy() -> ProgressionPolicy:
    return policy_from_settings(get_settings())


def get_decay_rule() -> DecayRule:
    return decay_rule_from_settings(get_settings())
