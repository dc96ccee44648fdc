"""Flatten GraphQL connection payloads into plain lists."""

from __future__ import annotations

from typing import Any, Mapping, Sequence


def _as_sequence(value: object) -> Sequence[Any] | None:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value
    return None


def to_list(connection: object) -> list[Mapping[str, Any]]:
    """Return the items of a connection.

    Accepts the materialized ``{"nodes": [...]}`` form first and falls back to
    ``{"edges": [{"node": ...}]}``. Anything else yields an empty list.
    """

    if not isinstance(connection, Mapping):
        return []
    nodes = _as_sequence(connection.get("nodes"))
    if nodes is not None:
        return [node for node in nodes if isinstance(node, Mapping)]
    edges = _as_sequence(connection.get("edges"))
    if edges is not None:
        items: list[Mapping[str, Any]] = []
        for edge in edges:
            if not isinstance(edge, Mapping):
                continue
            node = edge.get("node")
            if isinstance(node, Mapping):
                items.append(node)
        return items
    return []


__all__ = ["to_list"]
