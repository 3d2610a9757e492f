"""Equipment ORM — one row per physical item.

Invariants:
    - machine_id is the primary key and never changes
    - level >= 1, xp >= 0, health 0–100 (enforced by the engines, not the DB)
    - last_cared_date is NULL until the first maintenance

Design Decisions:
    - String primary key: machine ids are assigned by the fleet owner, not generated
    - cascade delete for logs: equipment owns its maintenance history
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleetpet.db.base import Base


class Equipment(Base):
    """Equipment entity — the "pet"."""
    __tablename__ = "equipment"

    machine_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    machine_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    health: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    last_cared_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    logs: Mapped[list["MaintenanceLog"]] = relationship(
        "MaintenanceLog", back_populates="equipment",
        cascade="all, delete-orphan", lazy="noload",
    )
