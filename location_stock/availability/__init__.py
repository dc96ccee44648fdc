"""Per-location stock availability: config resolution, decoration, ordering."""

from .config_resolver import default_config, load_raw_config, resolve_config
from .config_writer import (
    LocationSettingsUpdate,
    merge_display_settings,
    merge_location_settings,
)
from .connections import to_list
from .decorator import decorate_stocks
from .delivery import aggregate_delivery_capabilities
from .keywords import is_local_delivery_label
from .models import (
    CapabilityFlags,
    DecoratedStockRow,
    InventorySnapshot,
    LocationStockPayload,
    ResolvedConfig,
    SortMode,
)
from .overview import LocationOverviewRow, ShopLocation, build_location_overview
from .pipeline import build_location_stock
from .sorter import sort_stocks, stock_status

__all__ = [
    "CapabilityFlags",
    "DecoratedStockRow",
    "InventorySnapshot",
    "LocationOverviewRow",
    "LocationSettingsUpdate",
    "LocationStockPayload",
    "ResolvedConfig",
    "ShopLocation",
    "SortMode",
    "aggregate_delivery_capabilities",
    "build_location_overview",
    "build_location_stock",
    "decorate_stocks",
    "default_config",
    "is_local_delivery_label",
    "load_raw_config",
    "merge_display_settings",
    "merge_location_settings",
    "resolve_config",
    "sort_stocks",
    "stock_status",
    "to_list",
]
