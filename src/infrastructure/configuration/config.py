"""
Configuration management for the pricing engine
"""


import threading

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.infrastructure.utilities.constants import BusinessSettings, CacheSettings

FEE_STRATEGIES = ("flat", "distance")


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Database configuration
    database_url: str = Field(
        default="sqlite:///data/pricing.db", description="Database connection URL"
    )

    # Application settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")
    environment: str = Field(
        default="development", description="Application environment"
    )

    # Pricing settings
    currency: str = Field(
        default=BusinessSettings.DEFAULT_CURRENCY,
        description="Currency code",
        min_length=3,
        max_length=3,
    )
    free_delivery_minimum: float = Field(
        default=BusinessSettings.FREE_DELIVERY_MINIMUM,
        ge=0,
        description="Subtotal from which delivery is free",
    )
    default_delivery_fee: float = Field(
        default=BusinessSettings.DEFAULT_DELIVERY_FEE,
        ge=0,
        description="Fee charged for vendors missing from the vendor lookup",
    )
    fee_strategy: str = Field(
        default=BusinessSettings.DEFAULT_FEE_STRATEGY,
        description="Per-vendor delivery fee strategy: flat or distance",
    )

    # Cache settings
    coupon_cache_ttl_seconds: int = Field(
        default=CacheSettings.COUPON_CATALOG_TTL_SECONDS,
        ge=0,
        description="How long the coupon catalog stays fresh",
    )

    @field_validator("fee_strategy")
    @classmethod
    def _validate_fee_strategy(cls, value: str) -> str:
        value = value.lower()
        if value not in FEE_STRATEGIES:
            raise ValueError(f"fee_strategy must be one of {', '.join(FEE_STRATEGIES)}")
        return value

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_config() -> Settings:
    """Get the global settings instance, ensuring thread safety."""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = Settings()
    return _settings_instance


def reset_config() -> None:
    """Drop the cached settings so the next call re-reads the environment"""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None
