"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Progression scheme, tier XP values and the action label table are configuration,
      never constants inside the engines

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - care_action_tiers is a dict setting: JSON in the environment overrides the default table
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fleetpet.core.domain_types import ProgressionScheme, StoreBackend
from fleetpet.core.progression_policy import DEFAULT_CARE_ACTION_TIERS


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Store
    store_backend: StoreBackend = StoreBackend.SQL

    # Database
    database_url: str = (
        "postgresql+asyncpg://fleetpet:fleetpet@db:5432/fleetpet"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Google Sheets
    spreadsheet_id: str = ""
    equipment_sheet_name: str = "全機材・車両リスト"
    log_sheet_name: str = "点検・修理ログ"
    log_action_column: str = "作業内容"
    google_credentials_base64: str = ""

    # Progression
    progression_scheme: ProgressionScheme = ProgressionScheme.TIERED
    flat_xp_per_action: int = 25
    flat_xp_threshold: int = 100
    scaling_threshold_base: int = 100
    scaling_threshold_step: int = 10
    tier_xp: dict[str, int] = {
        "daily": 10,
        "weekly": 30,
        "weekly_plus": 50,
        "special": 100,
        "other": 5,
    }
    care_action_tiers: dict[str, str] = dict(DEFAULT_CARE_ACTION_TIERS)

    # Decay
    neglect_threshold_days: float = 7
    health_decrease_amount: int = 10

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
