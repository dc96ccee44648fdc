"""Ordering of decorated stock rows for the storefront list."""

from __future__ import annotations

import unicodedata
from typing import Callable, Sequence

from .models import DecoratedStockRow, SortMode, StockStatus, Thresholds

_STATUS_RANK = {
    StockStatus.IN_STOCK: 0,
    StockStatus.LOW_STOCK: 1,
    StockStatus.OUT_OF_STOCK: 2,
}


def collation_key(name: str) -> tuple[str, str]:
    """Case- and width-insensitive key for display names."""

    return unicodedata.normalize("NFKC", name).casefold(), name


def stock_status(quantity: float, thresholds: Thresholds) -> StockStatus:
    if quantity <= thresholds.out_of_stock_max:
        return StockStatus.OUT_OF_STOCK
    if quantity >= thresholds.in_stock_min:
        return StockStatus.IN_STOCK
    return StockStatus.LOW_STOCK


def _name_key(row: DecoratedStockRow) -> tuple[tuple[str, str], str]:
    return collation_key(row.display_name), row.location_id


def _sort_key(mode: SortMode, thresholds: Thresholds) -> Callable[[DecoratedStockRow], tuple]:
    if mode is SortMode.NAME_ASCENDING:
        return lambda row: _name_key(row)
    if mode is SortMode.QUANTITY_DESCENDING:
        return lambda row: (-row.quantity, _name_key(row))
    if mode is SortMode.QUANTITY_ASCENDING:
        return lambda row: (row.quantity, _name_key(row))
    if mode is SortMode.IN_STOCK_FIRST:
        return lambda row: (
            _STATUS_RANK[stock_status(row.quantity, thresholds)],
            _name_key(row),
        )
    if mode is SortMode.STORE_PICKUP_FIRST:
        return lambda row: (not row.store_pickup_enabled, _name_key(row))
    if mode is SortMode.SHIPPING_FIRST:
        return lambda row: (not row.has_shipping, _name_key(row))
    if mode is SortMode.LOCAL_DELIVERY_FIRST:
        return lambda row: (not row.has_local_delivery, _name_key(row))
    raise ValueError(f"no sort key for {mode}")


def sort_stocks(
    rows: Sequence[DecoratedStockRow],
    sort_mode: SortMode | str | None,
    pinned_location_id: str | None,
    thresholds: Thresholds | None = None,
) -> list[DecoratedStockRow]:
    """Put the pinned row first and order the rest by ``sort_mode``.

    Unknown modes behave like ``none``: the incoming order, which the
    decorator already arranged by declared sort order, is kept.
    """

    mode = SortMode.parse(sort_mode) or SortMode.NONE
    pinned: DecoratedStockRow | None = None
    pool: list[DecoratedStockRow] = []
    for row in rows:
        if pinned is None and pinned_location_id and row.location_id == pinned_location_id:
            pinned = row
            continue
        pool.append(row)

    if mode is not SortMode.NONE:
        pool = sorted(pool, key=_sort_key(mode, thresholds or Thresholds()))

    return [pinned, *pool] if pinned is not None else pool


__all__ = ["collation_key", "sort_stocks", "stock_status"]
