"""Shared runtime constants for location-stock services."""

SERVICE_NAMES = [
    "stock_api",
]
DEFAULT_SERVICE_PORTS: dict[str, int] = {"stock_api": 8000}

DEFAULT_SHOP_DOMAIN = ""
DEFAULT_ADMIN_API_VERSION = "2025-01"
DEFAULT_USER_AGENT = "location-stock/0.1"
DEFAULT_REQUEST_TIMEOUT = 15.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_BASE = 1.0
DEFAULT_BACKOFF_MAX = 30.0
DEFAULT_JITTER = 0.5

DEFAULT_METAFIELD_NAMESPACE = "location_stock"
DEFAULT_METAFIELD_KEY = "config"

UNRANKED_SORT_ORDER = 999999
REGION_KEY_PINNED = "pinned"
REGION_KEY_UNSET = "__unset__"

INVENTORY_LEVELS_PAGE_SIZE = 50
LOCATIONS_PAGE_SIZE = 100
DELIVERY_PROFILES_PAGE_SIZE = 50
