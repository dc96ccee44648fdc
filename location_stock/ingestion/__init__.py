"""Admin API ingestion helpers for location stock services."""

from .admin_client import AdminApiError, AdminGraphQLClient, GraphQLResponse
from .rate_limit import RateLimitPolicy
from .shop_data import (
    ShopConfig,
    ShopLocations,
    VariantInventory,
    fetch_delivery_graph,
    fetch_shop_config,
    fetch_shop_locations,
    fetch_variant_inventory,
    save_config,
)

__all__ = [
    "AdminApiError",
    "AdminGraphQLClient",
    "GraphQLResponse",
    "RateLimitPolicy",
    "ShopConfig",
    "ShopLocations",
    "VariantInventory",
    "fetch_delivery_graph",
    "fetch_shop_config",
    "fetch_shop_locations",
    "fetch_variant_inventory",
    "save_config",
]
