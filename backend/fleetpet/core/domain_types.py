"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - EquipmentId wraps the sheet's machine_id string — never a row index
    - Health is bounded 0–100, Level is >= 1, Xp is >= 0
    - All valid states encoded as Enums — no raw string matching outside the label table

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

EquipmentId = NewType("EquipmentId", str)


# ─── Value Types ─────────────────────────────────────────────────

Level = NewType("Level", int)     # >= 1
Xp = NewType("Xp", int)           # >= 0
Health = NewType("Health", int)   # 0–100

MAX_HEALTH: int = 100
MIN_LEVEL: int = 1


# ─── Enums ───────────────────────────────────────────────────────

class HealthStatus(str, Enum):
    """Coarse, read-only label derived from time since last maintenance."""
    HEALTHY = "Healthy"
    NORMAL = "Normal"
    SICK = "Sick"
    NEGLECTED = "Neglected"


class CareTier(str, Enum):
    """XP reward tiers for logged maintenance actions."""
    DAILY = "daily"
    WEEKLY = "weekly"
    WEEKLY_PLUS = "weekly_plus"
    SPECIAL = "special"
    OTHER = "other"


class ProgressionScheme(str, Enum):
    """Named progression presets selectable from configuration."""
    TIERED = "tiered"
    FLAT = "flat"


class StoreBackend(str, Enum):
    """Row-store implementations the shell can be wired to."""
    SQL = "sql"
    SHEETS = "sheets"
