"""Admin listing of every shop location with its overrides and capabilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..config import constants
from .models import NO_CAPABILITIES, CapabilityFlags, ResolvedConfig


@dataclass(frozen=True)
class ShopLocation:
    location_id: str
    name: str
    fulfills_online_orders: bool
    pickup_enabled: bool


@dataclass(frozen=True)
class LocationOverviewRow:
    location_id: str
    shopify_name: str
    fulfills_online_orders: bool
    has_shipping: bool
    has_local_delivery: bool
    store_pickup_enabled: bool
    enabled: bool
    public_name: str
    sort_order: float
    from_config: bool
    region_group_id: str
    exclude_from_nearby: bool

    def to_json(self) -> dict[str, Any]:
        return {
            "locationId": self.location_id,
            "shopifyName": self.shopify_name,
            "fulfillsOnlineOrders": self.fulfills_online_orders,
            "hasShipping": self.has_shipping,
            "hasLocalDelivery": self.has_local_delivery,
            "storePickupEnabled": self.store_pickup_enabled,
            "enabled": self.enabled,
            "publicName": self.public_name,
            "sortOrder": self.sort_order,
            "fromConfig": self.from_config,
            "regionGroupId": self.region_group_id,
            "excludeFromNearby": self.exclude_from_nearby,
        }


def build_location_overview(
    locations: Iterable[ShopLocation],
    config: ResolvedConfig,
    capability_map: Mapping[str, CapabilityFlags],
) -> list[LocationOverviewRow]:
    # Disabled locations stay listed here so the admin can re-enable them.
    records = {record.location_id: record for record in config.locations}
    rows = []
    for location in locations:
        record = records.get(location.location_id)
        flags = capability_map.get(location.location_id, NO_CAPABILITIES)
        rows.append(
            LocationOverviewRow(
                location_id=location.location_id,
                shopify_name=location.name,
                fulfills_online_orders=location.fulfills_online_orders,
                has_shipping=flags.has_shipping,
                has_local_delivery=flags.has_local_delivery,
                store_pickup_enabled=location.pickup_enabled,
                enabled=record.enabled if record else True,
                public_name=(record.public_name if record else "") or location.name,
                sort_order=record.sort_order if record else constants.UNRANKED_SORT_ORDER,
                from_config=record is not None,
                region_group_id=(record.region_group_id or "") if record else "",
                exclude_from_nearby=record.exclude_from_nearby if record else False,
            )
        )
    rows.sort(key=lambda row: (row.sort_order, row.shopify_name, row.location_id))
    return rows


__all__ = ["LocationOverviewRow", "ShopLocation", "build_location_overview"]
