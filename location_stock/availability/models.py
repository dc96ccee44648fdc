from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence, TypeVar

from ..config import constants

Number = int | float

_E = TypeVar("_E", bound=Enum)


def _lookup_choice(enum_cls: type[_E], value: object, aliases: Mapping[str, _E]) -> _E | None:
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    key = value.strip()
    try:
        return enum_cls(key)
    except ValueError:
        return aliases.get(key)


class SortMode(Enum):
    NONE = "none"
    NAME_ASCENDING = "location_name_asc"
    QUANTITY_DESCENDING = "quantity_desc"
    QUANTITY_ASCENDING = "quantity_asc"
    IN_STOCK_FIRST = "in_stock_first"
    STORE_PICKUP_FIRST = "store_pickup_first"
    SHIPPING_FIRST = "shipping_first"
    LOCAL_DELIVERY_FIRST = "local_delivery_first"

    @classmethod
    def parse(cls, value: object) -> "SortMode | None":
        return _lookup_choice(cls, value, _SORT_MODE_ALIASES)


_SORT_MODE_ALIASES = {
    "nameAscending": SortMode.NAME_ASCENDING,
    "quantityDescending": SortMode.QUANTITY_DESCENDING,
    "quantityAscending": SortMode.QUANTITY_ASCENDING,
    "inStockFirst": SortMode.IN_STOCK_FIRST,
    "storePickupFirst": SortMode.STORE_PICKUP_FIRST,
    "shippingFirst": SortMode.SHIPPING_FIRST,
    "localDeliveryFirst": SortMode.LOCAL_DELIVERY_FIRST,
}


class LocationsMode(Enum):
    ALL = "all"
    ONLINE_ONLY = "online_only"
    CUSTOM_FROM_APP = "custom_from_app"

    @classmethod
    def parse(cls, value: object) -> "LocationsMode | None":
        return _lookup_choice(cls, value, _LOCATIONS_MODE_ALIASES)


_LOCATIONS_MODE_ALIASES = {
    "onlineOnly": LocationsMode.ONLINE_ONLY,
    "customFromApp": LocationsMode.CUSTOM_FROM_APP,
}


class ClickAction(Enum):
    NONE = "none"
    OPEN_MAP = "open_map"
    OPEN_URL = "open_url"

    @classmethod
    def parse(cls, value: object) -> "ClickAction | None":
        return _lookup_choice(cls, value, _CLICK_ACTION_ALIASES)


_CLICK_ACTION_ALIASES = {
    "openMap": ClickAction.OPEN_MAP,
    "openUrl": ClickAction.OPEN_URL,
}


class RowContentMode(Enum):
    SYMBOL_AND_LABEL = "symbol_and_label"
    SYMBOL_ONLY = "symbol_only"
    LABEL_ONLY = "label_only"

    @classmethod
    def parse(cls, value: object) -> "RowContentMode | None":
        return _lookup_choice(cls, value, _ROW_CONTENT_MODE_ALIASES)


_ROW_CONTENT_MODE_ALIASES = {
    "symbolAndLabel": RowContentMode.SYMBOL_AND_LABEL,
    "symbolOnly": RowContentMode.SYMBOL_ONLY,
    "labelOnly": RowContentMode.LABEL_ONLY,
}


class StockStatus(Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


@dataclass(frozen=True)
class Thresholds:
    out_of_stock_max: Number = 0
    in_stock_min: Number = 5

    def to_json(self) -> dict[str, Any]:
        return {"outOfStockMax": self.out_of_stock_max, "inStockMin": self.in_stock_min}


@dataclass(frozen=True)
class QuantityDisplay:
    label: str
    wrapper_before: str
    wrapper_after: str
    row_content_mode: RowContentMode
    show_quantity: bool
    show_quantity_label: bool

    def to_json(self) -> dict[str, Any]:
        return {
            "quantityLabel": self.label,
            "wrapperBefore": self.wrapper_before,
            "wrapperAfter": self.wrapper_after,
            "rowContentMode": self.row_content_mode.value,
            "showQuantity": self.show_quantity,
            "showQuantityLabel": self.show_quantity_label,
        }


@dataclass(frozen=True)
class StatusTexts:
    """Per-status strings; used for both symbols and labels."""

    in_stock: str
    low_stock: str
    out_of_stock: str

    def to_json(self) -> dict[str, Any]:
        return {
            "inStock": self.in_stock,
            "lowStock": self.low_stock,
            "outOfStock": self.out_of_stock,
        }


@dataclass(frozen=True)
class LocationsModeConfig:
    mode: LocationsMode
    use_public_name: bool

    def to_json(self) -> dict[str, Any]:
        return {"mode": self.mode.value, "usePublicName": self.use_public_name}


@dataclass(frozen=True)
class ClickConfig:
    action: ClickAction
    map_url_template: str
    url_template: str

    def to_json(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "mapUrlTemplate": self.map_url_template,
            "urlTemplate": self.url_template,
        }


@dataclass(frozen=True)
class Messages:
    loading: str
    empty: str
    error: str

    def to_json(self) -> dict[str, Any]:
        return {"loading": self.loading, "empty": self.empty, "error": self.error}


@dataclass(frozen=True)
class Notice:
    text: str

    def to_json(self) -> dict[str, Any]:
        return {"text": self.text}


@dataclass(frozen=True)
class RegionGroup:
    id: str
    name: str
    sort_order: Number

    def to_json(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "sortOrder": self.sort_order}


@dataclass(frozen=True)
class FutureFlags:
    group_by_region: bool
    region_accordion_enabled: bool
    nearby_first_enabled: bool
    nearby_other_collapsible: bool
    nearby_other_heading: str
    show_order_pick_button: bool
    order_pick_button_label: str
    order_pick_redirect_to_checkout: bool
    region_unset_label: str

    def to_json(self) -> dict[str, Any]:
        return {
            "groupByRegion": self.group_by_region,
            "regionAccordionEnabled": self.region_accordion_enabled,
            "nearbyFirstEnabled": self.nearby_first_enabled,
            "nearbyOtherCollapsible": self.nearby_other_collapsible,
            "nearbyOtherHeading": self.nearby_other_heading,
            "showOrderPickButton": self.show_order_pick_button,
            "orderPickButtonLabel": self.order_pick_button_label,
            "orderPickRedirectToCheckout": self.order_pick_redirect_to_checkout,
            "regionUnsetLabel": self.region_unset_label,
        }


@dataclass(frozen=True)
class LocationRecord:
    location_id: str
    enabled: bool = True
    public_name: str = ""
    sort_order: Number = constants.UNRANKED_SORT_ORDER
    region_group_id: str | None = None
    exclude_from_nearby: bool = False

    def to_json(self) -> dict[str, Any]:
        row: dict[str, Any] = {
            "locationId": self.location_id,
            "enabled": self.enabled,
            "publicName": self.public_name,
            "sortOrder": self.sort_order,
            "excludeFromNearby": self.exclude_from_nearby,
        }
        if self.region_group_id is not None:
            row["regionGroupId"] = self.region_group_id
        return row


@dataclass(frozen=True)
class ResolvedConfig:
    thresholds: Thresholds
    quantity_display: QuantityDisplay
    symbols: StatusTexts
    labels: StatusTexts
    locations_mode: LocationsModeConfig
    click: ClickConfig
    sort_mode: SortMode
    messages: Messages
    notice: Notice | None
    pinned_location_id: str | None
    region_groups: tuple[RegionGroup, ...]
    future: FutureFlags
    locations: tuple[LocationRecord, ...] = ()

    def to_json(self) -> dict[str, Any]:
        """Serialize back into the persisted wire shape."""

        return {
            "thresholds": self.thresholds.to_json(),
            "quantity": self.quantity_display.to_json(),
            "symbols": self.symbols.to_json(),
            "labels": self.labels.to_json(),
            "locationsMode": self.locations_mode.to_json(),
            "click": self.click.to_json(),
            "sort": {"mode": self.sort_mode.value},
            "messages": self.messages.to_json(),
            "notice": self.notice.to_json() if self.notice else None,
            "pinnedLocationId": self.pinned_location_id,
            "regionGroups": [group.to_json() for group in self.region_groups],
            "locations": [record.to_json() for record in self.locations],
            "future": self.future.to_json(),
        }


@dataclass(frozen=True)
class InventorySnapshot:
    location_id: str
    location_name: str
    quantity_available: Number
    supports_online_fulfillment: bool
    pickup_enabled: bool = False
    address: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class CapabilityFlags:
    has_shipping: bool = False
    has_local_delivery: bool = False

    def merge(self, other: "CapabilityFlags") -> "CapabilityFlags":
        return CapabilityFlags(
            has_shipping=self.has_shipping or other.has_shipping,
            has_local_delivery=self.has_local_delivery or other.has_local_delivery,
        )


NO_CAPABILITIES = CapabilityFlags()


@dataclass(frozen=True)
class DecoratedStockRow:
    location_id: str
    location_name: str
    display_name: str
    quantity: Number
    sort_order: Number
    from_config: bool
    region_key: str
    exclude_from_nearby: bool
    has_shipping: bool
    has_local_delivery: bool
    store_pickup_enabled: bool
    fulfills_online_orders: bool

    def to_json(self) -> dict[str, Any]:
        return {
            "locationId": self.location_id,
            "locationName": self.location_name,
            "displayName": self.display_name,
            "quantity": self.quantity,
            "sortOrder": self.sort_order,
            "fromConfig": self.from_config,
            "regionKey": self.region_key,
            "excludeFromNearby": self.exclude_from_nearby,
            "hasShipping": self.has_shipping,
            "hasLocalDelivery": self.has_local_delivery,
            "storePickupEnabled": self.store_pickup_enabled,
            "fulfillsOnlineOrders": self.fulfills_online_orders,
        }


@dataclass(frozen=True)
class LocationStockPayload:
    config: ResolvedConfig
    stocks: Sequence[DecoratedStockRow] = field(default_factory=tuple)

    def to_json(self) -> dict[str, Any]:
        return {
            "config": self.config.to_json(),
            "stocks": [row.to_json() for row in self.stocks],
        }
