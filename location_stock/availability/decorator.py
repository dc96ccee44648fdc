"""Join inventory snapshots with location overrides and delivery flags."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from ..config import constants
from .models import (
    NO_CAPABILITIES,
    CapabilityFlags,
    DecoratedStockRow,
    InventorySnapshot,
    LocationRecord,
    RegionGroup,
)
from .sorter import collation_key


def _region_key(
    location_id: str,
    record: LocationRecord | None,
    pinned_location_id: str | None,
    group_names: Mapping[str, str],
) -> str:
    if pinned_location_id and location_id == pinned_location_id:
        return constants.REGION_KEY_PINNED
    if record is not None and record.region_group_id in group_names:
        return group_names[record.region_group_id]
    return constants.REGION_KEY_UNSET


def decorate_stocks(
    snapshots: Iterable[InventorySnapshot],
    location_records: Sequence[LocationRecord],
    capability_map: Mapping[str, CapabilityFlags],
    pinned_location_id: str | None,
    region_groups: Sequence[RegionGroup],
) -> list[DecoratedStockRow]:
    """Apply location overrides and return rows in declared sort order.

    Snapshots without an override stay visible with the unranked sort order;
    snapshots whose override is disabled are dropped.
    """

    records = {record.location_id: record for record in location_records}
    group_names = {group.id: group.name for group in region_groups}
    rows: list[DecoratedStockRow] = []
    for snapshot in snapshots:
        record = records.get(snapshot.location_id)
        if record is not None and not record.enabled:
            continue
        flags = capability_map.get(snapshot.location_id, NO_CAPABILITIES)
        if record is None:
            display_name = snapshot.location_name
            sort_order = constants.UNRANKED_SORT_ORDER
            exclude_from_nearby = False
        else:
            display_name = record.public_name or snapshot.location_name
            sort_order = record.sort_order
            exclude_from_nearby = record.exclude_from_nearby
        rows.append(
            DecoratedStockRow(
                location_id=snapshot.location_id,
                location_name=snapshot.location_name,
                display_name=display_name,
                quantity=snapshot.quantity_available,
                sort_order=sort_order,
                from_config=record is not None,
                region_key=_region_key(
                    snapshot.location_id, record, pinned_location_id, group_names
                ),
                exclude_from_nearby=exclude_from_nearby,
                has_shipping=flags.has_shipping,
                has_local_delivery=flags.has_local_delivery,
                store_pickup_enabled=snapshot.pickup_enabled,
                fulfills_online_orders=snapshot.supports_online_fulfillment,
            )
        )
    rows.sort(
        key=lambda row: (
            row.sort_order,
            collation_key(row.display_name),
            row.location_id,
        )
    )
    return rows


__all__ = ["decorate_stocks"]
