"""
Configuration management for Funding Rate Service
"""

from decimal import Decimal
from typing import Annotated, List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from funding_rate_service.models.funding_record import Exchange


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    service_port: int = 8000
    service_host: str = "0.0.0.0"
    log_level: str = "INFO"
    http_log_level: str = "WARNING"
    log_to_file: bool = False

    # Sources (order matters: first entry is the first comparison source)
    enabled_sources: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: [Exchange.BINANCE.value, Exchange.MEXC.value],
        description="Exchanges to aggregate, in comparison order",
    )
    ticker_only_sources: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: [Exchange.MEXC.value],
        description="Exchanges treated as having no funding-rate endpoint",
    )
    quote_currency: str = "USDT"

    # Timeouts
    source_timeout_seconds: float = 25.0
    request_timeout_seconds: int = 10

    # Batching (politeness against upstream rate limits)
    snapshot_batch_size: int = Field(10, gt=0)
    snapshot_batch_delay_seconds: float = Field(0.1, ge=0)
    ticker_batch_size: int = Field(5, gt=0)
    ticker_batch_delay_seconds: float = Field(0.2, ge=0)
    ticker_only_max_instruments: int = Field(50, gt=0)

    # Interval inference
    history_lookup_cap: int = Field(20, ge=0)
    history_lookup_limit: int = Field(2, ge=2)

    # Comparison (percent units)
    comparison_high_threshold: Decimal = Decimal("0.05")
    comparison_medium_threshold: Decimal = Decimal("0.01")
    comparison_fallback_top_n: int = Field(20, gt=0)

    @field_validator("enabled_sources", "ticker_only_sources", mode="before")
    @classmethod
    def _split_sources(cls, value: List[str] | str | None) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [source.strip().lower() for source in value.split(",") if source.strip()]
        return [source.lower() for source in value]

    @field_validator("quote_currency")
    @classmethod
    def _upper_quote(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _check_thresholds(self) -> "Settings":
        if self.comparison_medium_threshold > self.comparison_high_threshold:
            raise ValueError(
                "comparison_medium_threshold must not exceed comparison_high_threshold"
            )
        return self


# Global settings instance
settings = Settings()
