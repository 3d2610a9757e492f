"""Error Hierarchy — typed, categorized exceptions for FleetPet failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; store errors (500-level) are critical
    - The engines never raise for data they can default (unknown action, bad numbers)
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with FleetPetError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORE = "store"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    equipment_id: str | None = None
    action: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class FleetPetError(Exception):
    """Base exception for all FleetPet errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "equipment_id": self.context.equipment_id,
                    "action": self.context.action,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class EquipmentNotFoundError(FleetPetError):
    """No record exists for the requested machine_id."""
    def __init__(self, equipment_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.equipment_id = equipment_id
        super().__init__(
            f"Equipment '{equipment_id}' not found",
            "EQUIPMENT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.equipment_id = equipment_id


class MissingColumnError(FleetPetError):
    """A required column is absent from a sheet header row."""
    def __init__(self, column: str, sheet: str, context: ErrorContext | None = None):
        super().__init__(
            f"Required column '{column}' not found in sheet '{sheet}'",
            "MISSING_COLUMN", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 422,
        )
        self.column = column
        self.sheet = sheet


class InvalidPolicyError(FleetPetError):
    """Progression or decay configuration cannot produce a valid policy."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_POLICY", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreError(FleetPetError):
    """Row-store read or write failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_ERROR", ErrorCategory.STORE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
