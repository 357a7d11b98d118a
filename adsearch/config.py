from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VERSION = "1.0.1"

ATTRIBUTION_URL = "https://api-adservices.apple.com/api/v1"


class Settings(BaseSettings):
    """Runtime configuration for the attribution client and relay service."""

    model_config = SettingsConfigDict(env_prefix="ADSEARCH_", extra="ignore")

    endpoint_url: str = ATTRIBUTION_URL
    request_timeout_seconds: float = 120.0
    user_agent: str = f"adsearch/{VERSION}"
    log_level: str = "INFO"
    log_format: str = "json"  # options: json, console

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = ["json", "console"]
        if v not in valid_formats:
            raise ValueError(f"log_format must be one of {valid_formats}")
        return v


settings = Settings()
