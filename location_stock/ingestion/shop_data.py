"""Fetch and parse the shop data the stock service needs."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..availability.config_resolver import is_number
from ..availability.connections import to_list
from ..availability.models import InventorySnapshot
from ..availability.overview import ShopLocation
from . import queries
from .admin_client import AdminGraphQLClient

logger = logging.getLogger(__name__)

VARIANT_GID_PREFIX = "gid://shopify/ProductVariant/"
UNKNOWN_LOCATION_NAME = "Unknown location"


@dataclass(frozen=True)
class VariantInventory:
    variant_id: str
    title: str | None
    snapshots: tuple[InventorySnapshot, ...] = ()
    config_value: str | None = None


@dataclass(frozen=True)
class ShopConfig:
    shop_id: str | None
    config_value: str | None


@dataclass(frozen=True)
class ShopLocations:
    shop: ShopConfig
    locations: tuple[ShopLocation, ...] = field(default_factory=tuple)


def variant_gid(variant_id: str) -> str:
    variant_id = variant_id.strip()
    if variant_id.startswith("gid://"):
        return variant_id
    return f"{VARIANT_GID_PREFIX}{variant_id}"


def _metafield_value(shop: object) -> str | None:
    if not isinstance(shop, Mapping):
        return None
    metafield = shop.get("metafield")
    if not isinstance(metafield, Mapping):
        return None
    value = metafield.get("value")
    return value if isinstance(value, str) else None


def _available_quantity(level: Mapping[str, Any]) -> int | float:
    quantities = level.get("quantities")
    if not isinstance(quantities, list):
        return 0
    for entry in quantities:
        if isinstance(entry, Mapping) and entry.get("name") == "available":
            quantity = entry.get("quantity")
            return quantity if is_number(quantity) else 0
    return 0


def parse_inventory_snapshots(variant: object) -> list[InventorySnapshot]:
    """Turn ``productVariant.inventoryItem.inventoryLevels`` into snapshots."""

    if not isinstance(variant, Mapping):
        return []
    item = variant.get("inventoryItem")
    if not isinstance(item, Mapping):
        return []
    snapshots = []
    for level in to_list(item.get("inventoryLevels")):
        location = level.get("location")
        if not isinstance(location, Mapping):
            continue
        location_id = location.get("id")
        if not isinstance(location_id, str) or not location_id:
            logger.debug("skipping inventory level without location id")
            continue
        name = location.get("name")
        address = location.get("address")
        snapshots.append(
            InventorySnapshot(
                location_id=location_id,
                location_name=name if isinstance(name, str) and name else UNKNOWN_LOCATION_NAME,
                quantity_available=_available_quantity(level),
                supports_online_fulfillment=location.get("fulfillsOnlineOrders") is True,
                pickup_enabled=isinstance(location.get("localPickupSettingsV2"), Mapping),
                address=address if isinstance(address, Mapping) else None,
            )
        )
    return snapshots


def fetch_variant_inventory(
    client: AdminGraphQLClient,
    variant_id: str,
    *,
    namespace: str,
    key: str,
) -> VariantInventory:
    response = client.execute(
        queries.VARIANT_INVENTORY_WITH_CONFIG,
        {"id": variant_gid(variant_id), "namespace": namespace, "key": key},
    )
    variant = response.data.get("productVariant")
    config_value = _metafield_value(response.data.get("shop"))
    if not isinstance(variant, Mapping):
        logger.info("variant %s not found", variant_id)
        return VariantInventory(variant_id=variant_id, title=None, config_value=config_value)
    title = variant.get("title")
    snapshots = parse_inventory_snapshots(variant)
    logger.debug("variant %s has %s inventory levels", variant_id, len(snapshots))
    return VariantInventory(
        variant_id=variant_id,
        title=title if isinstance(title, str) else None,
        snapshots=tuple(snapshots),
        config_value=config_value,
    )


def fetch_delivery_graph(client: AdminGraphQLClient) -> Mapping[str, Any]:
    response = client.execute(queries.DELIVERY_PROFILES_FOR_LOCATIONS)
    logger.debug(
        "delivery profiles fetched count=%s",
        len(to_list(response.data.get("deliveryProfiles"))),
    )
    return response.data


def _shop_config(shop: object) -> ShopConfig:
    shop_id = shop.get("id") if isinstance(shop, Mapping) else None
    return ShopConfig(
        shop_id=shop_id if isinstance(shop_id, str) and shop_id else None,
        config_value=_metafield_value(shop),
    )


def fetch_shop_config(client: AdminGraphQLClient, *, namespace: str, key: str) -> ShopConfig:
    response = client.execute(
        queries.LOCATION_STOCK_CONFIG, {"namespace": namespace, "key": key}
    )
    return _shop_config(response.data.get("shop"))


def parse_shop_locations(connection: object) -> list[ShopLocation]:
    locations = []
    for node in to_list(connection):
        location_id = node.get("id")
        if not isinstance(location_id, str) or not location_id:
            continue
        name = node.get("name")
        locations.append(
            ShopLocation(
                location_id=location_id,
                name=name if isinstance(name, str) and name else UNKNOWN_LOCATION_NAME,
                fulfills_online_orders=node.get("fulfillsOnlineOrders") is True,
                pickup_enabled=isinstance(node.get("localPickupSettingsV2"), Mapping),
            )
        )
    return locations


def fetch_shop_locations(
    client: AdminGraphQLClient, *, namespace: str, key: str
) -> ShopLocations:
    response = client.execute(
        queries.LOCATIONS_AND_CONFIG, {"namespace": namespace, "key": key}
    )
    return ShopLocations(
        shop=_shop_config(response.data.get("shop")),
        locations=tuple(parse_shop_locations(response.data.get("locations"))),
    )


def save_config(
    client: AdminGraphQLClient,
    shop_id: str,
    config: Mapping[str, Any],
    *,
    namespace: str,
    key: str,
) -> list[dict[str, Any]]:
    """Persist ``config`` on the shop metafield; returns metafieldsSet user errors."""

    variables = {
        "metafields": [
            {
                "ownerId": shop_id,
                "namespace": namespace,
                "key": key,
                "type": "json",
                "value": json.dumps(config, ensure_ascii=False),
            }
        ]
    }
    response = client.execute(queries.SET_LOCATION_STOCK_CONFIG, variables)
    result = response.data.get("metafieldsSet")
    errors = result.get("userErrors") if isinstance(result, Mapping) else None
    user_errors = [dict(error) for error in errors or [] if isinstance(error, Mapping)]
    if user_errors:
        logger.error("metafieldsSet userErrors: %s", user_errors)
    else:
        logger.info("saved %s.%s for %s", namespace, key, shop_id)
    return user_errors
