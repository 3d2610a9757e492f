"""Equipment Routes — list, ranking, single item and care action.

Invariants:
    - Reads are classified against the request time (UTC now)
    - Unknown machine_id → 404 via EquipmentNotFoundError (global handler)
    - /ranking is declared before /{equipment_id} so it is not captured as an id
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from fleetpet.api.dependencies import get_policy, get_store
from fleetpet.core.progression_policy import ProgressionPolicy
from fleetpet.core.repository_protocols import EquipmentStore
from fleetpet.schemas.equipment import CareRequest, CareResponse, EquipmentResponse
from fleetpet.services.care_service import record_care
from fleetpet.services.status_service import (
    get_equipment_status, level_ranking, list_equipment_status,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/equipment", tags=["equipment"])


@router.get("", response_model=list[EquipmentResponse])
async def list_equipment(store: EquipmentStore = Depends(get_store)):
    """All equipment with health status and last maintenance."""
    statuses = await list_equipment_status(store, datetime.now(timezone.utc))
    return [EquipmentResponse.from_status(s) for s in statuses]


@router.get("/ranking", response_model=list[EquipmentResponse])
async def ranking(store: EquipmentStore = Depends(get_store)):
    """Equipment sorted by level, highest first."""
    statuses = await level_ranking(store, datetime.now(timezone.utc))
    return [EquipmentResponse.from_status(s) for s in statuses]


@router.get("/{equipment_id}", response_model=EquipmentResponse)
async def get_equipment(
    equipment_id: str, store: EquipmentStore = Depends(get_store),
):
    status_ = await get_equipment_status(
        store, equipment_id, datetime.now(timezone.utc),
    )
    return EquipmentResponse.from_status(status_)


@router.post(
    "/{equipment_id}/care", response_model=CareResponse,
    status_code=status.HTTP_201_CREATED,
)
async def care_for_equipment(
    equipment_id: str,
    body: CareRequest,
    store: EquipmentStore = Depends(get_store),
    policy: ProgressionPolicy = Depends(get_policy),
):
    """Log a care action and apply its XP immediately."""
    result = await record_care(
        store, equipment_id, body.action, policy, datetime.now(timezone.utc),
    )
    return CareResponse.from_result(result)
