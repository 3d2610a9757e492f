"""Maintenance Routes — batch log processing and decay tick over HTTP."""

from datetime import timedelta

from fleetpet.models import MaintenanceLog


async def test_run_decay(client, seed_equipment):
    response = await client.post("/api/v1/decay/run")
    assert response.status_code == 200
    assert response.json() == {
        "checked": 3, "decayed": 1, "records": [{"id": "EQ-OLD", "health": 40}],
    }
    after = (await client.get("/api/v1/equipment/EQ-OLD")).json()
    assert after["health"] == 40


async def test_process_maintenance_log(client, test_db, seed_equipment, now):
    test_db.add_all([
        MaintenanceLog(machine_id="EQ-FRESH", action="修理", performed_at=now - timedelta(hours=2)),
        MaintenanceLog(machine_id="EQ-MISSING", action="給油", performed_at=now - timedelta(hours=1)),
    ])
    await test_db.commit()

    response = await client.post("/api/v1/maintenance/process")
    assert response.status_code == 200
    assert response.json() == {
        "applied": 1,
        "skipped": 1,
        "leveled_up": ["EQ-FRESH"],
        "skipped_equipment_ids": ["EQ-MISSING"],
    }

    again = (await client.post("/api/v1/maintenance/process")).json()
    assert again["applied"] == 0
    assert again["skipped_equipment_ids"] == ["EQ-MISSING"]
