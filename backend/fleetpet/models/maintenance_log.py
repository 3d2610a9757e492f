"""MaintenanceLog ORM — one row per logged care action.

Invariants:
    - Always belongs to an Equipment row (machine_id FK)
    - processed_at is NULL while the event is pending for the progression engine
    - action is free text; it is never validated against the tier table

Design Decisions:
    - processed_at instead of deleting rows: the log doubles as maintenance history
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleetpet.db.base import Base


class MaintenanceLog(Base):
    """Maintenance log entry."""
    __tablename__ = "maintenance_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    machine_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("equipment.machine_id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    action: Mapped[str] = mapped_column(String(200), nullable=False)
    performed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    equipment: Mapped["Equipment"] = relationship(
        "Equipment", back_populates="logs",
    )
