"""Rate limit helpers for Admin API clients."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Mapping

logger = logging.getLogger(__name__)

# Shopify refills the GraphQL cost bucket at this rate on standard plans.
DEFAULT_RESTORE_RATE = 50.0


@dataclass(frozen=True)
class RateLimitPolicy:
    max_retries: int
    backoff_base: float
    backoff_max: float
    jitter: float

    def next_backoff(
        self,
        attempt: int,
        headers: Mapping[str, str],
        *,
        throttle_hint: float | None = None,
    ) -> float:
        retry = parse_retry_after(headers)
        if retry is None:
            retry = throttle_hint
        if retry is not None:
            base = retry
            jitter = 0.0
            delay = max(0.0, retry)
        else:
            base = min(self.backoff_base * (2**attempt), self.backoff_max)
            if self.jitter > 0:
                jitter = random.uniform(-self.jitter, self.jitter)
            else:
                jitter = 0.0
            delay = max(0.0, base + jitter)
        logger.debug(
            "Computed rate-limit backoff (attempt=%s base=%s jitter=%s) -> %s",
            attempt,
            base,
            jitter,
            delay,
        )
        return delay


def _lower_keys(headers: Mapping[str, str]) -> Mapping[str, str]:
    return {key.lower(): value for key, value in headers.items()}


def parse_retry_after(headers: Mapping[str, str]) -> float | None:
    candidate = _lower_keys(headers).get("retry-after")
    if not candidate:
        return None
    candidate = candidate.strip()
    if not candidate:
        return None
    try:
        return float(candidate)
    except ValueError:
        try:
            parsed = parsedate_to_datetime(candidate)
        except (TypeError, ValueError, OverflowError):
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        delta = (parsed - datetime.now(timezone.utc)).total_seconds()
        return max(0.0, delta)


def throttle_wait_seconds(extensions: Any) -> float | None:
    """Seconds until the GraphQL cost bucket covers the last requested cost.

    Reads ``extensions.cost`` from a GraphQL response; returns ``None`` when
    the cost block is missing or malformed.
    """

    if not isinstance(extensions, Mapping):
        return None
    cost = extensions.get("cost")
    if not isinstance(cost, Mapping):
        return None
    status = cost.get("throttleStatus")
    requested = cost.get("requestedQueryCost")
    if not isinstance(status, Mapping) or not isinstance(requested, (int, float)):
        return None
    available = status.get("currentlyAvailable")
    restore_rate = status.get("restoreRate") or DEFAULT_RESTORE_RATE
    if not isinstance(available, (int, float)) or not isinstance(restore_rate, (int, float)):
        return None
    missing = float(requested) - float(available)
    if missing <= 0:
        return 0.0
    return missing / float(restore_rate)
