"""Maintenance Routes — batch triggers for the log processor and the decay tick.

Invariants:
    - POST /decay/run applies exactly one decay tick per call; schedulers must call
      it once per period (it is not idempotent)
    - POST /maintenance/process applies each pending log entry once
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from fleetpet.api.dependencies import get_decay_rule, get_policy, get_store
from fleetpet.core.decay_health import DecayRule
from fleetpet.core.progression_policy import ProgressionPolicy
from fleetpet.core.repository_protocols import EquipmentStore
from fleetpet.schemas.equipment import DecayResponse, ProcessResponse
from fleetpet.services.care_service import process_pending_events
from fleetpet.services.decay_service import run_decay_tick

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["maintenance"])


@router.post("/maintenance/process", response_model=ProcessResponse)
async def process_maintenance_log(
    store: EquipmentStore = Depends(get_store),
    policy: ProgressionPolicy = Depends(get_policy),
):
    report = await process_pending_events(store, policy)
    return ProcessResponse.from_report(report)


@router.post("/decay/run", response_model=DecayResponse)
async def run_decay(
    store: EquipmentStore = Depends(get_store),
    rule: DecayRule = Depends(get_decay_rule),
):
    report = await run_decay_tick(store, datetime.now(timezone.utc), rule)
    return DecayResponse.from_report(report)
