"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but the engines that consume their results are never async themselves —
      the shell orchestrates the async calls around the pure logic
    - fetch_record returns None for unknown ids; turning that into
      EquipmentNotFoundError is the service's decision
"""

from typing import Protocol

from fleetpet.core.equipment_record import (
    EquipmentRecord, MaintenanceEntry, MaintenanceEvent,
)


class EquipmentStore(Protocol):
    """Contract for equipment + maintenance log persistence — implemented by shell."""
    async def fetch_record(self, equipment_id: str) -> EquipmentRecord | None: ...
    async def fetch_all_records(self) -> list[EquipmentRecord]: ...
    async def persist_record(self, record: EquipmentRecord) -> None: ...
    async def fetch_pending_maintenance_events(self) -> list[MaintenanceEvent]: ...
    async def mark_events_processed(self, events: list[MaintenanceEvent]) -> None: ...
    async def append_maintenance(self, event: MaintenanceEvent) -> MaintenanceEvent: ...
    async def fetch_history(self, equipment_id: str) -> list[MaintenanceEntry]: ...
    async def fetch_all_histories(self) -> dict[str, list[MaintenanceEntry]]: ...
    async def ping(self) -> bool: ...
