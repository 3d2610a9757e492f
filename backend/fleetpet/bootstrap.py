"""Bootstrap — builds policies, rules and stores from Settings.

Invariants:
    - The only place that turns configuration values into core strategy objects
    - The Sheets service client is built once per credentials value and reused

Design Decisions:
    - Shared by the API dependencies and the scheduled jobs so both apply the same rules
"""

from functools import lru_cache

from fleetpet.config import Settings
from fleetpet.core.decay_health import DecayRule
from fleetpet.core.progression_policy import ProgressionPolicy, build_policy
from fleetpet.infrastructure.sheets_store import SheetsEquipmentStore, build_sheets_service


def policy_from_settings(settings: Settings) -> ProgressionPolicy:
    return build_policy(
        settings.progression_scheme,
        flat_xp_per_action=settings.flat_xp_per_action,
        flat_xp_threshold=settings.flat_xp_threshold,
        scaling_base=settings.scaling_threshold_base,
        scaling_step=settings.scaling_threshold_step,
        tier_xp=settings.tier_xp,
        care_action_tiers=settings.care_action_tiers,
    )


def decay_rule_from_settings(settings: Settings) -> DecayRule:
    return DecayRule(
        neglect_threshold_days=settings.neglect_threshold_days,
        decrease_amount=settings.health_decrease_amount,
    )


@lru_cache
def _sheets_service(credentials_base64: str):
    return build_sheets_service(credentials_base64)


def sheets_store_from_settings(settings: Settings) -> SheetsEquipmentStore:
    return SheetsEquipmentStore(
        _sheets_service(settings.google_credentials_base64),
        spreadsheet_id=settings.spreadsheet_id,
        equipment_sheet=settings.equipment_sheet_name,
        log_sheet=settings.log_sheet_name,
        action_column=settings.log_action_column,
    )
