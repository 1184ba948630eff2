"""Application settings and configuration management using Pydantic."""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

SCREENING_PROFILES = ("strict", "moderate", "lenient")


class Settings(BaseSettings):
    """Leapscan settings, read from the environment and ``.env``."""

    # Environment and deployment
    environment: str = "development"
    debug: bool = False

    # API settings
    endpoint_host: str = "0.0.0.0"
    endpoint_port: int = 8000
    api_reload: bool = False
    api_log_level: str = "INFO"

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "structured"  # 'structured' or 'plain'
    log_file_enabled: bool = False
    log_file_path: str = "data/leapscan.log"
    log_max_file_size: str = "10MB"
    log_backup_count: int = 5

    # Market data providers
    alpha_vantage_api_key: Optional[str] = None
    twelve_data_api_key: Optional[str] = None
    polygon_api_key: Optional[str] = None
    request_timeout_seconds: float = 10.0

    # Caching and throttling
    market_data_cache_seconds: int = 300
    options_cache_seconds: int = 600
    market_data_batch_size: int = 5
    market_data_batch_delay_seconds: float = 12.0

    # Screening
    screening_profile: str = "moderate"
    max_results: int = 50
    leaps_analysis_limit: int = 10

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        valid_environments = ["development", "testing", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v.lower()

    @field_validator("endpoint_port")
    @classmethod
    def validate_port(cls, v):
        """Validate port number is in valid range."""
        if v < 1 or v > 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("log_level", "api_log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        valid_formats = ["structured", "plain"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    @field_validator(
        "market_data_cache_seconds", "options_cache_seconds", "market_data_batch_size"
    )
    @classmethod
    def validate_at_least_one(cls, v):
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v

    @field_validator("market_data_batch_delay_seconds")
    @classmethod
    def validate_batch_delay(cls, v):
        if v < 0:
            raise ValueError("Batch delay cannot be negative")
        return v

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("Request timeout must be positive")
        return v

    @field_validator("screening_profile")
    @classmethod
    def validate_screening_profile(cls, v):
        """Validate the threshold profile name."""
        if v.lower() not in SCREENING_PROFILES:
            raise ValueError(f"Screening profile must be one of: {list(SCREENING_PROFILES)}")
        return v.lower()

    @field_validator("max_results")
    @classmethod
    def validate_max_results(cls, v):
        if v < 1 or v > 500:
            raise ValueError("max_results must be between 1 and 500")
        return v

    @field_validator("leaps_analysis_limit")
    @classmethod
    def validate_leaps_analysis_limit(cls, v):
        if v < 0:
            raise ValueError("leaps_analysis_limit cannot be negative")
        return v

    def has_live_market_data(self) -> bool:
        """Check whether any fundamentals provider key is configured."""
        return bool(self.alpha_vantage_api_key or self.twelve_data_api_key)

    def is_development(self) -> bool:
        return self.environment == "development"

    def is_production(self) -> bool:
        return self.environment == "production"

    def is_testing(self) -> bool:
        return self.environment == "testing"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
