"""Heuristic classification of delivery zone and method names."""

from __future__ import annotations

# The Admin API has no method type for local delivery, so names are matched
# against this table. Entries are compared after case folding.
LOCAL_DELIVERY_KEYWORDS: tuple[str, ...] = (
    "local",
    "local delivery",
    "localdelivery",
    "same-day",
    "sameday",
    "same day",
    "ローカル",
    "当日",
    "近距離",
    "半径",
    "地域配達",
)


def is_local_delivery_label(text: object) -> bool:
    """Return True when a zone or method name looks like local delivery."""

    if not isinstance(text, str):
        return False
    normalized = text.strip().casefold()
    if not normalized:
        return False
    return any(keyword in normalized for keyword in LOCAL_DELIVERY_KEYWORDS)


__all__ = ["LOCAL_DELIVERY_KEYWORDS", "is_local_delivery_label"]
