"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrition_engine.services.grading import GIAdjustmentConfig

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fdc_api_key: str
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    off_base_url: str = "https://world.openfoodfacts.org"
    off_user_agent: str = "nutrition-engine/0.1 (nutrition-engine@example.com)"
    edamam_app_id: str
    edamam_app_key: str
    edamam_base_url: str = "https://api.edamam.com/api/food-database/v2"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    cache_backend: str = "supabase"
    cache_table: str = "nutrition_cache"
    cache_ttl_days: int = 30
    fallback_cache_ttl_days: int = 7
    usda_concurrency: int = 3
    off_concurrency: int = 2
    edamam_concurrency: int = 3
    request_timeout_seconds: float = 15
    source_retry_attempts: int = 0
    source_retry_delay_seconds: float = 0.3
    gi_min_confidence: float = 0.6
    gi_low_bonus_max: float = 15
    gi_medium_offset_max: float = 5
    gi_high_penalty_min: float = -5
    gi_max_magnitude: int = 15
    admin_token: str
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def gi_adjustment(self) -> GIAdjustmentConfig:
        """Build the glycemic adjustment constants for the grader."""
        return GIAdjustmentConfig(
            min_confidence=self.gi_min_confidence,
            low_bonus_max=self.gi_low_bonus_max,
            medium_offset_max=self.gi_medium_offset_max,
            high_penalty_min=self.gi_high_penalty_min,
            max_magnitude=self.gi_max_magnitude,
        )
