"""Runtime configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_MAX_CHAIN_DEPTH = 64
DEFAULT_MAX_AGE = 150
DEFAULT_EXTERNAL_API_BASE_URL = "https://api.example.com"
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
DEFAULT_HTTP_MAX_RETRIES = 0
DEFAULT_HTTP_BACKOFF_SECONDS = 1.0


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    return float(raw)


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw)


def redact_secret(secret: str) -> str:
    """Return a non-recoverable placeholder for sensitive values."""
    if not secret:
        return "<empty>"
    return "<redacted>"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for chain traversal and the bundled collaborators."""

    max_chain_depth: int
    max_age: int
    external_api_base_url: str
    external_api_token: str
    http_timeout_seconds: float
    http_max_retries: int
    http_backoff_seconds: float

    def __post_init__(self) -> None:
        if self.max_chain_depth <= 0:
            raise ValueError("max_chain_depth must be positive")
        if self.max_age < 0:
            raise ValueError("max_age must be >= 0")

    def safe_for_logging(self) -> dict[str, str | int | float]:
        """Return settings safe for logs."""
        return {
            "max_chain_depth": self.max_chain_depth,
            "max_age": self.max_age,
            "external_api_base_url": self.external_api_base_url,
            "external_api_token": redact_secret(self.external_api_token),
            "http_timeout_seconds": self.http_timeout_seconds,
            "http_max_retries": self.http_max_retries,
            "http_backoff_seconds": self.http_backoff_seconds,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from the environment."""
    return Settings(
        max_chain_depth=_get_int_env("ERRCHAIN_MAX_CHAIN_DEPTH", DEFAULT_MAX_CHAIN_DEPTH),
        max_age=_get_int_env("ERRCHAIN_MAX_AGE", DEFAULT_MAX_AGE),
        external_api_base_url=os.getenv("ERRCHAIN_EXTERNAL_API_BASE_URL", DEFAULT_EXTERNAL_API_BASE_URL),
        external_api_token=os.getenv("ERRCHAIN_EXTERNAL_API_TOKEN", ""),
        http_timeout_seconds=_get_float_env("ERRCHAIN_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS),
        http_max_retries=_get_int_env("ERRCHAIN_HTTP_MAX_RETRIES", DEFAULT_HTTP_MAX_RETRIES),
        http_backoff_seconds=_get_float_env("ERRCHAIN_HTTP_BACKOFF_SECONDS", DEFAULT_HTTP_BACKOFF_SECONDS),
    )
