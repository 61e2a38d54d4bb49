"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kmb_eta.adapters.kmb_api.constants import (
    DEFAULT_ALTERNATE_SERVICE_TYPES,
    KMB_BASE_URL,
    LANGUAGES,
)
from kmb_eta.adapters.kmb_api.http_client import RetryPolicy


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # KMB API configuration
    api_base_url: str = Field(default=KMB_BASE_URL, description="Base URL of the KMB API")
    request_timeout_seconds: float = Field(
        default=10, description="Timeout for a single API request attempt in seconds"
    )

    # Retry configuration
    catalog_max_attempts: int = Field(
        default=3, description="Attempts for route catalog and stop sequence requests"
    )
    catalog_retry_delay_seconds: float = Field(
        default=2.0, description="Pause between route catalog/stop sequence attempts"
    )
    lookup_max_attempts: int = Field(
        default=5, description="Attempts for stop name and arrival estimate requests"
    )
    lookup_retry_delay_seconds: float = Field(
        default=3.0, description="Pause between stop name/arrival estimate attempts"
    )

    # Arrival reconciliation
    alternate_service_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALTERNATE_SERVICE_TYPES),
        description="Service types tried, in order, when the default one has fewer than 3 arrivals",
    )
    max_concurrent_lookups: int = Field(
        default=8, description="Maximum stop name requests in flight for one route"
    )

    # Display configuration
    language: str = Field(default="tc", description="Language for names and messages: tc, sc or en")
    timezone: str = Field(
        default="Asia/Hong_Kong",
        description="Timezone for displaying arrival times (IANA timezone name)",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    config_file: str | None = Field(
        default=None,
        description="Optional TOML file with [api], [retry] and [display] tables",
    )

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Validate language is one the API provides."""
        if v.lower() not in LANGUAGES:
            raise ValueError(f"language must be one of {', '.join(LANGUAGES)}")
        return v.lower()

    @field_validator("catalog_max_attempts", "lookup_max_attempts", "max_concurrent_lookups")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate counts are at least 1."""
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("catalog_retry_delay_seconds", "lookup_retry_delay_seconds")
    @classmethod
    def validate_delay(cls, v: float) -> float:
        """Validate delays are not negative."""
        if v < 0:
            raise ValueError("retry delay must not be negative")
        return v

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended."""
        return v.rstrip("/")

    def load_toml(self) -> dict[str, Any]:
        """Load the TOML file named by config_file and apply its settings.

        Returns the parsed TOML data, or an empty dict when no file is configured.
        """
        if not self.config_file:
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        api = toml_data.get("api", {})
        if "base_url" in api:
            self.api_base_url = self.strip_trailing_slash(api["base_url"])
        if "request_timeout_seconds" in api:
            self.request_timeout_seconds = api["request_timeout_seconds"]
        if "alternate_service_types" in api:
            self.alternate_service_types = [str(t) for t in api["alternate_service_types"]]
        if "max_concurrent_lookups" in api:
            self.max_concurrent_lookups = self.validate_positive(api["max_concurrent_lookups"])

        retry = toml_data.get("retry", {})
        if "catalog_max_attempts" in retry:
            self.catalog_max_attempts = self.validate_positive(retry["catalog_max_attempts"])
        if "catalog_retry_delay_seconds" in retry:
            self.catalog_retry_delay_seconds = self.validate_delay(
                retry["catalog_retry_delay_seconds"]
            )
        if "lookup_max_attempts" in retry:
            self.lookup_max_attempts = self.validate_positive(retry["lookup_max_attempts"])
        if "lookup_retry_delay_seconds" in retry:
            self.lookup_retry_delay_seconds = self.validate_delay(
                retry["lookup_retry_delay_seconds"]
            )

        display = toml_data.get("display", {})
        if "language" in display:
            self.language = self.validate_language(display["language"])
        if "timezone" in display:
            self.timezone = display["timezone"]

        return toml_data

    @property
    def catalog_retry_policy(self) -> RetryPolicy:
        """Retry policy for route catalog and stop sequence requests."""
        return RetryPolicy(self.catalog_max_attempts, self.catalog_retry_delay_seconds)

    @property
    def lookup_retry_policy(self) -> RetryPolicy:
        """Retry policy for stop name and arrival estimate requests."""
        return RetryPolicy(self.lookup_max_attempts, self.lookup_retry_delay_seconds)
