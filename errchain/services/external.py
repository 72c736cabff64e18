"""HTTP client for external service calls that reports failures as APIError values."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Mapping
from http import HTTPStatus
import logging
import random
import time
from typing import Any
from urllib.parse import quote

import requests

from errchain.core.config import Settings
from errchain.core.errors import APIError
from errchain.core.result import Err
from errchain.core.result import Ok
from errchain.core.result import Result

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def _status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Request failed"


class ExternalServiceClient:
    """Call endpoints of an external service with bounded retry/backoff behavior."""

    def __init__(
        self,
        *,
        base_url: str,
        api_token: str = "",
        timeout_seconds: float = 30.0,
        max_retries: int = 0,
        backoff_seconds: float = 1.0,
        session: requests.Session | None = None,
        sleep_fn: Callable[[float], None] = time.sleep,
        jitter_fn: Callable[[], float] = random.random,
    ) -> None:
        normalized = base_url.rstrip("/")
        if not normalized:
            raise ValueError("base_url is required")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if backoff_seconds <= 0:
            raise ValueError("backoff_seconds must be positive")

        self._base_url = normalized
        self._api_token = api_token
        self._timeout_seconds = timeout_seconds
        self._max_retries = max_retries
        self._backoff_seconds = backoff_seconds
        self._session = session or requests.Session()
        self._sleep_fn = sleep_fn
        self._jitter_fn = jitter_fn

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> ExternalServiceClient:
        """Build a client from runtime settings."""
        return cls(
            base_url=settings.external_api_base_url,
            api_token=settings.external_api_token,
            timeout_seconds=settings.http_timeout_seconds,
            max_retries=settings.http_max_retries,
            backoff_seconds=settings.http_backoff_seconds,
            **kwargs,
        )

    def call(self, endpoint: str) -> Result[str]:
        """Fetch ``endpoint`` and return the response body."""
        if not endpoint:
            return Err(
                APIError(
                    code=400,
                    message="Bad Request",
                    details={"field": "endpoint", "issue": "cannot be empty"},
                )
            )

        url = f"{self._base_url}/{quote(endpoint.lstrip('/'), safe='/')}"

        attempts = 0
        while True:
            attempts += 1
            last_attempt = attempts > self._max_retries
            try:
                response = self._session.get(
                    url,
                    headers=self._headers(),
                    timeout=self._timeout_seconds,
                )
            except requests.Timeout:
                if not last_attempt:
                    self._retry(endpoint, attempts, "timeout")
                    continue
                return Err(
                    APIError(
                        code=408,
                        message="Request Timeout",
                        details={"timeout": f"{self._timeout_seconds:g}s", "retry": True},
                    )
                )
            except requests.ConnectionError:
                if not last_attempt:
                    self._retry(endpoint, attempts, "connection error")
                    continue
                return Err(
                    APIError(
                        code=503,
                        message="Service Unavailable",
                        details={"endpoint": endpoint, "retry": True},
                    )
                )
            except requests.RequestException as exc:
                return Err(
                    APIError(
                        code=502,
                        message="Bad Gateway",
                        details={"endpoint": endpoint, "issue": str(exc) or type(exc).__name__},
                    )
                )

            status_code = response.status_code
            if status_code in RETRYABLE_STATUS_CODES and not last_attempt:
                self._retry(endpoint, attempts, f"status {status_code}", response.headers)
                continue

            if status_code >= 400:
                return Err(
                    APIError(
                        code=status_code,
                        message=response.reason or _status_phrase(status_code),
                        details={"endpoint": endpoint, "retry": status_code in RETRYABLE_STATUS_CODES},
                    )
                )

            return Ok(response.text)

    def _retry(
        self,
        endpoint: str,
        attempts: int,
        reason: str,
        headers: Mapping[str, Any] | None = None,
    ) -> None:
        delay = self._retry_delay(attempts - 1, headers)
        logger.info(
            "Retrying external call endpoint=%s after %s (attempt %d, delay %.2fs)",
            endpoint,
            reason,
            attempts,
            delay,
        )
        self._sleep_fn(delay)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": "errchain/0.1",
        }
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    def _retry_delay(
        self,
        attempt: int,
        headers: Mapping[str, Any] | None = None,
    ) -> float:
        base = self._backoff_seconds * (2**attempt)
        jitter = self._jitter_fn() * self._backoff_seconds
        delay = base + jitter

        if headers:
            retry_after = headers.get("Retry-After")
            if retry_after is not None:
                try:
                    delay = max(delay, float(retry_after))
                except (TypeError, ValueError):
                    pass
        return delay
