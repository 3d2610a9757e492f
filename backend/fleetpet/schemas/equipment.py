"""Equipment Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - CareRequest.action: 1-200 chars, stripped, non-empty (any label is accepted;
      unknown labels earn the default tier downstream)
    - Response models are built from core dataclasses via from_status/from_result

Design Decisions:
    - field_validator for side-effect-free transforms (strip) — keeps models pure
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from fleetpet.core.domain_types import HealthStatus
from fleetpet.core.equipment_status import EquipmentStatus
from fleetpet.services.care_service import CareResult, ProcessReport
from fleetpet.services.decay_service import DecayReport


class CareRequest(BaseModel):
    """Care action submitted for one item."""
    action: str = Field(min_length=1, max_length=200)

    @field_validator("action")
    @classmethod
    def strip_action(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("action cannot be empty or whitespace")
        return v


class MaintenanceEntryResponse(BaseModel):
    action: str
    date: datetime


class EquipmentResponse(BaseModel):
    """Equipment with its derived health status."""
    id: str
    name: str | None
    level: int
    xp: int
    health: int
    last_cared_at: datetime | None
    health_status: HealthStatus
    last_maintenance: MaintenanceEntryResponse | None

    @classmethod
    def from_status(cls, status: EquipmentStatus) -> "EquipmentResponse":
        r = status.record
        last = status.last_maintenance
        return cls(
            id=r.id, name=r.name, level=r.level, xp=r.xp, health=r.health,
            last_cared_at=r.last_cared_at,
            health_status=status.health_status,
            last_maintenance=(
                MaintenanceEntryResponse(action=last.action, date=last.performed_at)
                if last else None
            ),
        )


class CareResponse(BaseModel):
    message: str = "Maintenance recorded successfully"
    equipment_id: str
    action: MaintenanceEntryResponse
    leveled_up: bool
    xp_gained: int
    new_level: int
    new_xp: int
    health: int

    @classmethod
    def from_result(cls, result: CareResult) -> "CareResponse":
        return cls(
            equipment_id=result.record.id,
            action=MaintenanceEntryResponse(
                action=result.event.action_kind, date=result.event.occurred_at,
            ),
            leveled_up=result.leveled_up,
            xp_gained=result.xp_gained,
            new_level=result.record.level,
            new_xp=result.record.xp,
            health=result.record.health,
        )


class ProcessResponse(BaseModel):
    applied: int
    skipped: int
    leveled_up: list[str]
    skipped_equipment_ids: list[str]

    @classmethod
    def from_report(cls, report: ProcessReport) -> "ProcessResponse":
        return cls(
            applied=len(report.applied),
            skipped=len(report.skipped),
            leveled_up=[r.record.id for r in report.applied if r.leveled_up],
            skipped_equipment_ids=[e.equipment_id for e in report.skipped],
        )


class DecayResponse(BaseModel):
    checked: int
    decayed: int
    records: list[dict]

    @classmethod
    def from_report(cls, report: DecayReport) -> "DecayResponse":
        return cls(
            checked=report.checked,
            decayed=len(report.changed),
            records=[{"id": r.id, "health": r.health} for r in report.changed],
        )
