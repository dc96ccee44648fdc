"""Derive per-location shipping / local delivery flags from delivery profiles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from .connections import to_list
from .keywords import is_local_delivery_label
from .models import CapabilityFlags

logger = logging.getLogger(__name__)


class RateProviderKind(Enum):
    # Carrier-calculated or third-party rates.
    PARTICIPANT = "DeliveryParticipant"
    # Merchant-defined flat or custom rates.
    RATE_DEFINITION = "DeliveryRateDefinition"


@dataclass(frozen=True)
class MethodDefinition:
    name: str
    provider: RateProviderKind

    @classmethod
    def from_node(cls, node: Mapping[str, Any]) -> "MethodDefinition | None":
        """Return the method when it is active and carries a known provider."""

        if node.get("active") is not True:
            return None
        provider = node.get("rateProvider")
        if not isinstance(provider, Mapping):
            return None
        try:
            kind = RateProviderKind(provider.get("__typename"))
        except ValueError:
            return None
        name = node.get("name")
        return cls(name=name if isinstance(name, str) else "", provider=kind)

    def capabilities(self) -> CapabilityFlags:
        local = is_local_delivery_label(self.name)
        if self.provider is RateProviderKind.PARTICIPANT:
            return CapabilityFlags(has_shipping=True, has_local_delivery=local)
        return CapabilityFlags(has_shipping=not local, has_local_delivery=local)


def _group_location_ids(group: Mapping[str, Any]) -> list[str]:
    location_group = group.get("locationGroup")
    if not isinstance(location_group, Mapping):
        return []
    ids = []
    for node in to_list(location_group.get("locations")):
        location_id = node.get("id")
        if isinstance(location_id, str) and location_id:
            ids.append(location_id)
    return ids


def _zone_capabilities(zone_node: Mapping[str, Any]) -> CapabilityFlags:
    zone = zone_node.get("zone")
    zone_name = zone.get("name") if isinstance(zone, Mapping) else None
    flags = CapabilityFlags(has_local_delivery=is_local_delivery_label(zone_name))
    for node in to_list(zone_node.get("methodDefinitions")):
        method = MethodDefinition.from_node(node)
        if method is not None:
            flags = flags.merge(method.capabilities())
    return flags


def _profiles(graph: object) -> Iterable[Mapping[str, Any]]:
    if not isinstance(graph, Mapping):
        return []
    return to_list(graph.get("deliveryProfiles"))


def _location_groups(profile: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    groups = profile.get("profileLocationGroups")
    # Older API versions return a plain list, newer ones a connection.
    if isinstance(groups, list):
        return [group for group in groups if isinstance(group, Mapping)]
    return to_list(groups)


def aggregate_delivery_capabilities(graph: object) -> dict[str, CapabilityFlags]:
    """Build ``locationId -> CapabilityFlags``; a missing graph yields ``{}``."""

    capabilities: dict[str, CapabilityFlags] = {}
    group_count = 0
    for profile in _profiles(graph):
        for group in _location_groups(profile):
            group_count += 1
            location_ids = _group_location_ids(group)
            flags = CapabilityFlags()
            for zone_node in to_list(group.get("locationGroupZones")):
                flags = flags.merge(_zone_capabilities(zone_node))
            logger.debug(
                "delivery group locations=%s shipping=%s local_delivery=%s",
                location_ids,
                flags.has_shipping,
                flags.has_local_delivery,
            )
            for location_id in location_ids:
                current = capabilities.get(location_id, CapabilityFlags())
                capabilities[location_id] = current.merge(flags)
    logger.debug(
        "aggregated delivery capabilities groups=%s locations=%s",
        group_count,
        len(capabilities),
    )
    return capabilities


__all__ = [
    "MethodDefinition",
    "RateProviderKind",
    "aggregate_delivery_capabilities",
]
