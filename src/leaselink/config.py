"""
LeaseLink - Client Configuration

Holds the API endpoints, credentials and logging preferences shared by the
API client, the facade and the response models.

Environment variables read by `LeaseLinkConfig.from_env()`:

    LEASELINK_API_KEY        - API key issued by LeaseLink (required for calls)
    LEASELINK_API_URL        - Production base URL
    LEASELINK_TEST_API_URL   - Test environment base URL
    LEASELINK_TEST_MODE      - Use the test environment (1/true/yes/on)
    LEASELINK_DEBUG          - Enable debug log entries (1/true/yes/on)
    LEASELINK_LOG_FILE       - Log file used by FileLogger.from_config()
    LEASELINK_LOG_LEVEL      - Minimum log level (default: info)
    LEASELINK_TIMEOUT_SEC    - Request timeout in seconds (default: 15)
"""

import os
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .enums import LogLevel
from .exceptions import LeaseLinkApiException


DEFAULT_API_URL = "https://online.leaselink.pl"
DEFAULT_TEST_API_URL = "https://onlinetest.leaselink.pl"
DEFAULT_LOG_FILE = "logs/leaselink.log"
DEFAULT_TIMEOUT = 15.0  # seconds

_TRUTHY = {"1", "true", "yes", "on"}


class LeaseLinkConfig(BaseModel):
    """
    Immutable LeaseLink settings.

    `base_url` and `api_url` are derived on every access from `is_test`
    and the two configured hosts.
    """

    model_config = ConfigDict(frozen=True)

    api_url_prod: str = Field(DEFAULT_API_URL, description="Production base URL")
    api_url_test: str = Field(DEFAULT_TEST_API_URL, description="Test base URL")
    api_key: Optional[str] = Field(None, description="LeaseLink API key")
    is_test: bool = Field(False, description="Use the test environment")
    debug: bool = Field(False, description="Emit debug log entries")
    log_file: str = Field(DEFAULT_LOG_FILE, description="Path used by FileLogger")
    log_level: LogLevel = Field(LogLevel.INFO, description="Minimum log level")
    timeout: Optional[float] = Field(
        DEFAULT_TIMEOUT,
        description="Request timeout in seconds; None waits indefinitely",
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise LeaseLinkApiException.from_validation_error(e) from e

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> LogLevel:
        return LogLevel.from_string(v)

    @property
    def base_url(self) -> str:
        return self.api_url_test if self.is_test else self.api_url_prod

    @property
    def api_url(self) -> str:
        return self.base_url + "/api"

    @classmethod
    def from_env(cls, **overrides: Any) -> "LeaseLinkConfig":
        """Build a config from LEASELINK_* environment variables."""
        values: dict = {
            "api_url_prod": os.getenv("LEASELINK_API_URL", DEFAULT_API_URL),
            "api_url_test": os.getenv("LEASELINK_TEST_API_URL", DEFAULT_TEST_API_URL),
            "api_key": os.getenv("LEASELINK_API_KEY") or None,
            "is_test": _env_flag("LEASELINK_TEST_MODE"),
            "debug": _env_flag("LEASELINK_DEBUG"),
            "log_file": os.getenv("LEASELINK_LOG_FILE", DEFAULT_LOG_FILE),
            "log_level": os.getenv("LEASELINK_LOG_LEVEL", LogLevel.INFO.value),
        }

        timeout_raw = os.getenv("LEASELINK_TIMEOUT_SEC", str(DEFAULT_TIMEOUT)).strip()
        try:
            values["timeout"] = float(timeout_raw)
        except ValueError as e:
            raise LeaseLinkApiException(
                f"LEASELINK_TIMEOUT_SEC must be a number, got '{timeout_raw}'."
            ) from e

        values.update(overrides)
        return cls(**values)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY
