import logging
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # The Odds API (quote provider)
    odds_api_key: Optional[str] = Field(
        None, description="API key for The Odds API. Requests fail without it."
    )
    odds_api_base_url: str = Field(
        "https://api.the-odds-api.com/v4", description="Base URL for The Odds API."
    )
    odds_api_regions: str = Field("us", description="Bookmaker region filter.")
    odds_api_sports: List[str] = Field(
        default_factory=lambda: [
            "americanfootball_nfl",
            "basketball_nba",
            "icehockey_nhl",
        ],
        description="Sport keys fetched by get_all_odds.",
    )
    odds_api_min_request_interval: float = Field(
        2.0, ge=0, description="Minimum seconds between Odds API requests."
    )
    odds_api_cache_ttl: float = Field(
        300.0, ge=0, description="Seconds an Odds API response stays cached."
    )

    # Sportsbet (scrape provider)
    sportsbet_base_url: str = Field(
        "https://www.sportsbet.com.au", description="Base URL for Sportsbet pages."
    )
    sportsbet_sports: List[str] = Field(
        default_factory=lambda: ["afl", "nrl", "nba"],
        description="Sportsbet sport keys scraped by get_all_odds.",
    )
    sportsbet_min_scrape_interval: float = Field(
        30.0, ge=0, description="Minimum seconds between Sportsbet scrapes."
    )
    sportsbet_cache_ttl: float = Field(
        120.0, ge=0, description="Seconds a scraped page stays cached."
    )
    sportsbet_placeholder_fallback: bool = Field(
        True,
        description="Substitute placeholder events when a page yields no fixtures.",
    )

    # Retry policy for provider requests
    retry_max_attempts: int = Field(4, ge=1, description="Total attempts per request.")
    retry_backoff_multiplier: float = Field(1.0, ge=0)
    retry_backoff_min: float = Field(1.0, ge=0)
    retry_backoff_max: float = Field(10.0, ge=0)

    request_timeout: float = Field(30.0, gt=0, description="HTTP timeout in seconds.")
    source_timeout: Optional[float] = Field(
        180.0,
        gt=0,
        description="Upper bound on one provider's share of an aggregation request.",
    )
    update_interval_seconds: int = Field(
        120, gt=0, description="Advertised refresh interval for aggregated odds."
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
