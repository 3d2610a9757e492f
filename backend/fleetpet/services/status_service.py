"""Status Service — read models for the equipment list and the level ranking."""

from datetime import datetime

from fleetpet.core.equipment_status import EquipmentStatus, build_status, rank_by_level
from fleetpet.core.errors import EquipmentNotFoundError
from fleetpet.core.repository_protocols import EquipmentStore


async def list_equipment_status(
    store: EquipmentStore, now: datetime,
) -> list[EquipmentStatus]:
    records = await store.fetch_all_records()
    histories = await store.fetch_all_histories()
    return [build_status(r, histories.get(r.id, []), now) for r in records]


async def get_equipment_status(
    store: EquipmentStore, equipment_id: str, now: datetime,
) -> EquipmentStatus:
    record = await store.fetch_record(equipment_id)
    if record is None:
        raise EquipmentNotFoundError(equipment_id)
    return build_status(record, await store.fetch_history(equipment_id), now)


async def level_ranking(
    store: EquipmentStore, now: datetime,
) -> list[EquipmentStatus]:
    return rank_by_level(await list_equipment_status(store, now))
