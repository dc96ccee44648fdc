"""Shopify Admin GraphQL client with retry/backoff handling."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import httpx

from ..config.settings import Settings
from .rate_limit import RateLimitPolicy, throttle_wait_seconds

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class AdminApiError(RuntimeError):
    """Raised when the Admin API cannot produce a usable response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        errors: Sequence[Any] = (),
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = list(errors)


@dataclass(frozen=True)
class GraphQLResponse:
    data: Mapping[str, Any]
    extensions: Mapping[str, Any] = field(default_factory=dict)
    status_code: int = 200
    attempts: int = 1
    duration_ms: float = 0.0


def _is_throttled(errors: Sequence[Any]) -> bool:
    for error in errors:
        if not isinstance(error, Mapping):
            continue
        extensions = error.get("extensions")
        if isinstance(extensions, Mapping) and extensions.get("code") == "THROTTLED":
            return True
    return False


def _error_messages(errors: Sequence[Any]) -> str:
    messages = []
    for error in errors:
        if isinstance(error, Mapping) and error.get("message"):
            messages.append(str(error["message"]))
        else:
            messages.append(str(error))
    return "; ".join(messages)


class AdminGraphQLClient:
    def __init__(
        self,
        endpoint: str,
        access_token: str,
        policy: RateLimitPolicy,
        *,
        user_agent: str,
        timeout: float,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.policy = policy
        self.user_agent = user_agent
        self._access_token = access_token
        self._http_client = http_client or httpx.Client(timeout=timeout)
        self._last_attempts = 0

    @classmethod
    def from_settings(
        cls, settings: Settings, *, http_client: httpx.Client | None = None
    ) -> "AdminGraphQLClient":
        policy = RateLimitPolicy(
            max_retries=settings.max_retries,
            backoff_base=settings.backoff_base,
            backoff_max=settings.backoff_max,
            jitter=settings.jitter,
        )
        return cls(
            settings.admin_graphql_url,
            settings.admin_token,
            policy,
            user_agent=settings.user_agent,
            timeout=settings.request_timeout,
            http_client=http_client,
        )

    def __enter__(self) -> "AdminGraphQLClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def close(self) -> None:
        closeable = getattr(self._http_client, "close", None)
        if callable(closeable):
            closeable()

    @property
    def last_attempts(self) -> int:
        return self._last_attempts

    def execute(
        self, query: str, variables: Mapping[str, Any] | None = None
    ) -> GraphQLResponse:
        """Run one GraphQL document and return its ``data``.

        Throttling, 429/5xx responses and transport failures are retried with
        backoff; everything else, including GraphQL ``errors``, raises
        :class:`AdminApiError`.
        """

        attempts = self.policy.max_retries + 1
        body = {"query": query, "variables": dict(variables or {})}
        start = time.monotonic()
        self._last_attempts = 0
        for attempt in range(attempts):
            self._last_attempts = attempt + 1
            last_attempt = attempt == attempts - 1
            logger.debug("Admin GraphQL request %s attempt=%s", self.endpoint, attempt)
            try:
                response = self._http_client.post(
                    self.endpoint, json=body, headers=self._build_headers()
                )
            except httpx.TransportError as exc:
                logger.warning(
                    "Admin GraphQL transport error on attempt %s: %s", attempt, exc
                )
                if last_attempt:
                    raise AdminApiError(f"Admin API unreachable: {exc}") from exc
                time.sleep(self.policy.next_backoff(attempt, {}))
                continue
            except httpx.RequestError as exc:
                raise AdminApiError(f"Admin API request failed: {exc}") from exc

            headers = dict(response.headers)
            if response.status_code in _RETRYABLE_STATUS and not last_attempt:
                delay = self.policy.next_backoff(attempt, headers)
                logger.warning(
                    "Admin API status %s (attempt=%s) waiting %.1fs",
                    response.status_code,
                    attempt,
                    delay,
                )
                time.sleep(delay)
                continue
            if response.status_code >= 400:
                raise AdminApiError(
                    "Admin API error %s: %s" % (response.status_code, response.text),
                    status_code=response.status_code,
                )

            try:
                payload = response.json()
            except ValueError as exc:
                raise AdminApiError(
                    "Admin API returned non-JSON body",
                    status_code=response.status_code,
                ) from exc
            if not isinstance(payload, Mapping):
                raise AdminApiError(
                    "Admin API returned unexpected payload",
                    status_code=response.status_code,
                )

            errors = payload.get("errors") or []
            if not isinstance(errors, list):
                errors = [errors]
            extensions = payload.get("extensions")
            if errors and _is_throttled(errors) and not last_attempt:
                delay = self.policy.next_backoff(
                    attempt, headers, throttle_hint=throttle_wait_seconds(extensions)
                )
                logger.warning(
                    "Admin GraphQL throttled (attempt=%s) waiting %.1fs", attempt, delay
                )
                time.sleep(delay)
                continue
            if errors:
                raise AdminApiError(
                    "GraphQL errors: %s" % _error_messages(errors),
                    status_code=response.status_code,
                    errors=errors,
                )

            data = payload.get("data")
            duration_ms = (time.monotonic() - start) * 1000.0
            logger.debug(
                "Admin GraphQL ok attempts=%s duration_ms=%.1f",
                self._last_attempts,
                duration_ms,
            )
            return GraphQLResponse(
                data=data if isinstance(data, Mapping) else {},
                extensions=extensions if isinstance(extensions, Mapping) else {},
                status_code=response.status_code,
                attempts=self._last_attempts,
                duration_ms=duration_ms,
            )
        raise AdminApiError("Admin API exhausted retries")

    def _build_headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self._access_token:
            headers["X-Shopify-Access-Token"] = self._access_token
        return headers
