"""ORM Models — SQLAlchemy declarative models for the equipment row-store.

Invariants:
    - All models inherit from Base (db/base.py)
    - Column names mirror the spreadsheet contract (machine_id, level, xp, health,
      last_cared_date)

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from fleetpet.models.equipment import Equipment  # noqa: F401
from fleetpet.models.maintenance_log import MaintenanceLog  # noqa: F401
