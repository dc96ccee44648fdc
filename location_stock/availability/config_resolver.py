"""Resolve the persisted ``location_stock.config`` blob into a canonical config.

The stored JSON is edited by hand-rolled admin forms across several app
versions, so any key may be missing or carry the wrong type. Every leaf is
validated on its own and replaced by its default when unusable; a bad key
never discards its valid siblings.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from ..config import constants
from .models import (
    ClickAction,
    ClickConfig,
    FutureFlags,
    LocationRecord,
    LocationsMode,
    LocationsModeConfig,
    Messages,
    Notice,
    QuantityDisplay,
    RegionGroup,
    ResolvedConfig,
    RowContentMode,
    SortMode,
    StatusTexts,
    Thresholds,
)

logger = logging.getLogger(__name__)

_MISSING = object()


def is_string(value: object) -> bool:
    return isinstance(value, str)


def is_boolean(value: object) -> bool:
    return isinstance(value, bool)


def is_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def is_non_blank_string(value: object) -> bool:
    return isinstance(value, str) and value.strip() != ""


@dataclass(frozen=True)
class FieldSpec:
    """One leaf of the schema: where to look, what to accept, what to fall back to."""

    paths: tuple[tuple[str, ...], ...]
    check: Callable[[object], bool]
    default: Any
    convert: Callable[[Any], Any] | None = None

    def resolve(self, source: object) -> Any:
        for path in self.paths:
            value = dig(source, path)
            if value is _MISSING or not self.check(value):
                continue
            if self.convert is None:
                return value
            converted = self.convert(value)
            if converted is not None:
                return converted
        return self.default


def dig(source: object, path: Sequence[str]) -> Any:
    current = source
    for key in path:
        if not isinstance(current, Mapping) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _leaf(*paths: str, check: Callable[[object], bool], default: Any, convert=None) -> FieldSpec:
    return FieldSpec(
        paths=tuple(tuple(path.split(".")) for path in paths),
        check=check,
        default=default,
        convert=convert,
    )


def _choice(parse: Callable[[object], Any]) -> Callable[[object], bool]:
    return lambda value: parse(value) is not None


def _trimmed_or_none(value: str) -> str | None:
    stripped = value.strip()
    return stripped or None


def resolve_fields(source: object, fields: Mapping[str, FieldSpec]) -> dict[str, Any]:
    return {name: spec.resolve(source) for name, spec in fields.items()}


DEFAULT_MAP_URL_TEMPLATE = "https://maps.google.com/?q={location_name}"
DEFAULT_URL_TEMPLATE = "/pages/store-{location_id}"
DEFAULT_ORDER_PICK_BUTTON_LABEL = "この店舗で受け取る"
DEFAULT_REGION_UNSET_LABEL = "その他"

THRESHOLD_FIELDS = {
    "out_of_stock_max": _leaf("thresholds.outOfStockMax", check=is_number, default=0),
    "in_stock_min": _leaf("thresholds.inStockMin", check=is_number, default=5),
}

QUANTITY_FIELDS = {
    "label": _leaf(
        "quantity.quantityLabel", "quantityDisplay.label", check=is_string, default="在庫"
    ),
    "wrapper_before": _leaf(
        "quantity.wrapperBefore", "quantityDisplay.wrapperBefore", check=is_string, default="("
    ),
    "wrapper_after": _leaf(
        "quantity.wrapperAfter", "quantityDisplay.wrapperAfter", check=is_string, default=")"
    ),
    "row_content_mode": _leaf(
        "quantity.rowContentMode",
        "quantityDisplay.rowContentMode",
        check=_choice(RowContentMode.parse),
        default=RowContentMode.SYMBOL_AND_LABEL,
        convert=RowContentMode.parse,
    ),
    "show_quantity": _leaf(
        "quantity.showQuantity", "quantityDisplay.showQuantity", check=is_boolean, default=True
    ),
    "show_quantity_label": _leaf(
        "quantity.showQuantityLabel",
        "quantityDisplay.showQuantityLabel",
        check=is_boolean,
        default=True,
    ),
}

SYMBOL_FIELDS = {
    "in_stock": _leaf("symbols.inStock", check=is_string, default="◯"),
    "low_stock": _leaf("symbols.lowStock", check=is_string, default="△"),
    "out_of_stock": _leaf("symbols.outOfStock", check=is_string, default="✕"),
}

LABEL_FIELDS = {
    "in_stock": _leaf("labels.inStock", check=is_string, default="在庫あり"),
    "low_stock": _leaf("labels.lowStock", check=is_string, default="残りわずか"),
    "out_of_stock": _leaf("labels.outOfStock", check=is_string, default="在庫なし"),
}

LOCATIONS_MODE_FIELDS = {
    "mode": _leaf(
        "locationsMode.mode",
        check=_choice(LocationsMode.parse),
        default=LocationsMode.ALL,
        convert=LocationsMode.parse,
    ),
    "use_public_name": _leaf("locationsMode.usePublicName", check=is_boolean, default=True),
}

CLICK_FIELDS = {
    "action": _leaf(
        "click.action",
        check=_choice(ClickAction.parse),
        default=ClickAction.NONE,
        convert=ClickAction.parse,
    ),
    "map_url_template": _leaf(
        "click.mapUrlTemplate", check=is_string, default=DEFAULT_MAP_URL_TEMPLATE
    ),
    "url_template": _leaf("click.urlTemplate", check=is_string, default=DEFAULT_URL_TEMPLATE),
}

SORT_MODE_FIELD = _leaf(
    "sort.mode", check=_choice(SortMode.parse), default=SortMode.NONE, convert=SortMode.parse
)

MESSAGE_FIELDS = {
    "loading": _leaf("messages.loading", check=is_string, default="在庫を読み込み中..."),
    "empty": _leaf(
        "messages.empty",
        check=is_string,
        default="現在、この商品の店舗在庫はありません。",
    ),
    "error": _leaf(
        "messages.error",
        check=is_string,
        default="在庫情報の取得に失敗しました。時間をおいて再度お試しください。",
    ),
}

NOTICE_TEXT_FIELD = _leaf(
    "notice.text", check=is_non_blank_string, default=None, convert=_trimmed_or_none
)

PINNED_LOCATION_FIELD = _leaf(
    "pinnedLocationId", check=is_string, default=None, convert=_trimmed_or_none
)

FUTURE_FIELDS = {
    "group_by_region": _leaf("future.groupByRegion", check=is_boolean, default=False),
    "region_accordion_enabled": _leaf(
        "future.regionAccordionEnabled", check=is_boolean, default=False
    ),
    "nearby_first_enabled": _leaf("future.nearbyFirstEnabled", check=is_boolean, default=False),
    "nearby_other_collapsible": _leaf(
        "future.nearbyOtherCollapsible", check=is_boolean, default=False
    ),
    "nearby_other_heading": _leaf(
        "future.nearbyOtherHeading", check=is_string, default="", convert=str.strip
    ),
    "show_order_pick_button": _leaf(
        "future.showOrderPickButton", check=is_boolean, default=False
    ),
    "order_pick_button_label": _leaf(
        "future.orderPickButtonLabel", check=is_string, default=DEFAULT_ORDER_PICK_BUTTON_LABEL
    ),
    "order_pick_redirect_to_checkout": _leaf(
        "future.orderPickRedirectToCheckout", check=is_boolean, default=False
    ),
    "region_unset_label": _leaf(
        "future.regionUnsetLabel",
        check=is_non_blank_string,
        default=DEFAULT_REGION_UNSET_LABEL,
        convert=_trimmed_or_none,
    ),
}

# Paths are relative to one entry of ``locations``.
LOCATION_RECORD_FIELDS = {
    "enabled": _leaf("enabled", check=is_boolean, default=True),
    "public_name": _leaf("publicName", check=is_string, default=""),
    "sort_order": _leaf(
        "sortOrder", check=is_number, default=constants.UNRANKED_SORT_ORDER
    ),
    "region_group_id": _leaf(
        "regionGroupId", check=is_string, default=None, convert=_trimmed_or_none
    ),
    "exclude_from_nearby": _leaf("excludeFromNearby", check=is_boolean, default=False),
}


def _mapping_entries(entries: object) -> list[Mapping[str, Any]]:
    if isinstance(entries, Sequence) and not isinstance(entries, (str, bytes)):
        return [entry for entry in entries if isinstance(entry, Mapping)]
    return []


def resolve_region_groups(entries: object) -> tuple[RegionGroup, ...]:
    """Keep named groups, default their rank to position, order by rank then id.

    A repeated id keeps the first position and takes the last value.
    """

    by_id: dict[str, Mapping[str, Any]] = {}
    for entry in _mapping_entries(entries):
        if is_non_blank_string(entry.get("id")) and is_non_blank_string(entry.get("name")):
            by_id[entry["id"]] = entry
    groups = []
    for position, entry in enumerate(by_id.values(), start=1):
        sort_order = entry.get("sortOrder")
        groups.append(
            RegionGroup(
                id=entry["id"],
                name=entry["name"],
                sort_order=sort_order if is_number(sort_order) else position,
            )
        )
    return tuple(sorted(groups, key=lambda group: (group.sort_order, group.id)))


def resolve_location_records(entries: object) -> tuple[LocationRecord, ...]:
    by_id: dict[str, LocationRecord] = {}
    for entry in _mapping_entries(entries):
        location_id = entry.get("locationId")
        if not is_non_blank_string(location_id):
            continue
        # Re-assigning keeps the first position and takes the last value.
        by_id[location_id] = LocationRecord(
            location_id=location_id, **resolve_fields(entry, LOCATION_RECORD_FIELDS)
        )
    return tuple(by_id.values())


def resolve_config(raw: object) -> ResolvedConfig:
    """Build a fully populated config from an untrusted raw value. Never raises."""

    thresholds = Thresholds(**resolve_fields(raw, THRESHOLD_FIELDS))
    if thresholds.out_of_stock_max >= thresholds.in_stock_min:
        logger.warning(
            "inverted stock thresholds outOfStockMax=%s inStockMin=%s; "
            "out-of-stock takes precedence",
            thresholds.out_of_stock_max,
            thresholds.in_stock_min,
        )
    notice_text = NOTICE_TEXT_FIELD.resolve(raw)
    return ResolvedConfig(
        thresholds=thresholds,
        quantity_display=QuantityDisplay(**resolve_fields(raw, QUANTITY_FIELDS)),
        symbols=StatusTexts(**resolve_fields(raw, SYMBOL_FIELDS)),
        labels=StatusTexts(**resolve_fields(raw, LABEL_FIELDS)),
        locations_mode=LocationsModeConfig(**resolve_fields(raw, LOCATIONS_MODE_FIELDS)),
        click=ClickConfig(**resolve_fields(raw, CLICK_FIELDS)),
        sort_mode=SORT_MODE_FIELD.resolve(raw),
        messages=Messages(**resolve_fields(raw, MESSAGE_FIELDS)),
        notice=Notice(text=notice_text) if notice_text is not None else None,
        pinned_location_id=PINNED_LOCATION_FIELD.resolve(raw),
        region_groups=resolve_region_groups(dig(raw, ("regionGroups",))),
        future=FutureFlags(**resolve_fields(raw, FUTURE_FIELDS)),
        locations=resolve_location_records(dig(raw, ("locations",))),
    )


def default_config() -> ResolvedConfig:
    return resolve_config(None)


def load_raw_config(value: str | None) -> dict[str, Any]:
    """Parse a stored metafield value; anything unusable becomes ``{}``."""

    if value is None or not value.strip():
        return {}
    try:
        parsed = json.loads(value)
    except (ValueError, RecursionError) as exc:
        logger.warning("failed to parse location_stock config JSON: %s", exc)
        return {}
    if not isinstance(parsed, dict):
        logger.warning(
            "location_stock config is %s, expected an object", type(parsed).__name__
        )
        return {}
    return parsed


__all__ = [
    "FieldSpec",
    "default_config",
    "load_raw_config",
    "resolve_config",
    "resolve_fields",
    "resolve_location_records",
    "resolve_region_groups",
]
