from __future__ import annotations

from typing import Iterable

from .config_resolver import resolve_config
from .decorator import decorate_stocks
from .delivery import aggregate_delivery_capabilities
from .models import InventorySnapshot, LocationStockPayload
from .sorter import sort_stocks


def build_location_stock(
    snapshots: Iterable[InventorySnapshot],
    raw_config: object,
    delivery_graph: object | None = None,
) -> LocationStockPayload:
    """Resolve config, derive capabilities, decorate and sort one variant's stock.

    A missing delivery graph means no location has shipping or local delivery.
    """

    config = resolve_config(raw_config)
    capability_map = aggregate_delivery_capabilities(delivery_graph)
    rows = decorate_stocks(
        snapshots,
        config.locations,
        capability_map,
        config.pinned_location_id,
        config.region_groups,
    )
    stocks = sort_stocks(
        rows,
        config.sort_mode,
        config.pinned_location_id,
        thresholds=config.thresholds,
    )
    return LocationStockPayload(config=config, stocks=tuple(stocks))


__all__ = ["build_location_stock"]
