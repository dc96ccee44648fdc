"""Write-path merges for the persisted config.

Admin edits only touch the sections they own; every other key of the stored
object, including keys this version does not know about, is carried over.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

from .config_resolver import (
    CLICK_FIELDS,
    FUTURE_FIELDS,
    LABEL_FIELDS,
    LOCATIONS_MODE_FIELDS,
    MESSAGE_FIELDS,
    QUANTITY_FIELDS,
    SYMBOL_FIELDS,
    THRESHOLD_FIELDS,
    FieldSpec,
    is_number,
    resolve_location_records,
    resolve_region_groups,
)
from .models import SortMode

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

DISPLAY_SECTIONS: dict[str, Mapping[str, FieldSpec]] = {
    "thresholds": THRESHOLD_FIELDS,
    "quantity": QUANTITY_FIELDS,
    "symbols": SYMBOL_FIELDS,
    "labels": LABEL_FIELDS,
    "locationsMode": LOCATIONS_MODE_FIELDS,
    "click": CLICK_FIELDS,
    "messages": MESSAGE_FIELDS,
}


def _wire_leaves(section: str, fields: Mapping[str, FieldSpec]) -> dict[str, FieldSpec]:
    leaves = {}
    for spec in fields.values():
        section_name, key = spec.paths[0]
        if section_name == section:
            leaves[key] = spec
    return leaves


def _section(config: Mapping[str, Any], name: str) -> dict[str, Any]:
    value = config.get(name)
    return dict(value) if isinstance(value, Mapping) else {}


def _coerce_threshold(value: object, default: Any) -> Any:
    if is_number(value):
        return max(0, int(value))
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return max(0, int(match.group(1)))
    return default


def _merge_leaf(
    section: str,
    spec: FieldSpec,
    value: object,
    existing: object,
) -> tuple[bool, Any]:
    """Return ``(apply, value)`` for one submitted leaf."""

    if value is None:
        return False, None
    if section == "thresholds":
        return True, _coerce_threshold(value, spec.default)
    if isinstance(spec.default, Enum):
        # Enum leaves are stored by their wire value.
        parsed = spec.convert(value) if spec.check(value) else None
        return True, (parsed or spec.default).value
    if isinstance(value, str) and isinstance(spec.default, str):
        text = value.strip()
        if text:
            return True, text
        if section == "messages" and isinstance(existing, str) and existing.strip():
            return True, existing
        return True, spec.default
    if spec.check(value):
        return True, value
    return False, None


def merge_display_settings(
    raw: Mapping[str, Any], update: Mapping[str, Any]
) -> dict[str, Any]:
    """Overlay the display sections of ``update`` (wire shape) onto ``raw``.

    Omitted or ``None`` leaves keep the stored value; blank strings fall back
    to the default, except messages which first keep the stored text.
    """

    next_config = copy.deepcopy(dict(raw))
    for section, fields in DISPLAY_SECTIONS.items():
        submitted = update.get(section)
        if not isinstance(submitted, Mapping):
            continue
        merged = _section(next_config, section)
        for key, spec in _wire_leaves(section, fields).items():
            if key not in submitted:
                continue
            apply, value = _merge_leaf(section, spec, submitted[key], merged.get(key))
            if apply:
                merged[key] = value
        next_config[section] = merged

    notice = update.get("notice")
    if isinstance(notice, Mapping) and "text" in notice:
        text = notice.get("text")
        merged_notice = _section(next_config, "notice")
        merged_notice["text"] = text.strip() if isinstance(text, str) else ""
        next_config["notice"] = merged_notice
    return next_config


@dataclass(frozen=True)
class LocationSettingsUpdate:
    locations: Sequence[Mapping[str, Any]] = ()
    sort_mode: str | None = None
    pinned_location_id: str | None = None
    region_groups: Sequence[Mapping[str, Any]] | None = None
    future: Mapping[str, Any] = field(default_factory=dict)


def _merge_future(existing: dict[str, Any], submitted: Mapping[str, Any]) -> dict[str, Any]:
    leaves = _wire_leaves("future", FUTURE_FIELDS)
    for key, value in submitted.items():
        spec = leaves.get(key)
        if spec is None:
            continue
        if isinstance(value, str) and isinstance(spec.default, str):
            existing[key] = value.strip() or spec.default
        elif spec.check(value):
            existing[key] = value
    return existing


def merge_location_settings(
    raw: Mapping[str, Any], update: LocationSettingsUpdate
) -> dict[str, Any]:
    """Replace the location-owned keys of ``raw`` with the submitted ones."""

    next_config = copy.deepcopy(dict(raw))
    next_config["locations"] = [
        record.to_json() for record in resolve_location_records(update.locations)
    ]

    sort_section = _section(next_config, "sort")
    sort_section["mode"] = (SortMode.parse(update.sort_mode) or SortMode.NONE).value
    next_config["sort"] = sort_section

    pinned = update.pinned_location_id
    next_config["pinnedLocationId"] = (
        pinned.strip() if isinstance(pinned, str) and pinned.strip() else None
    )

    groups_source = (
        update.region_groups
        if update.region_groups is not None
        else next_config.get("regionGroups")
    )
    next_config["regionGroups"] = [
        group.to_json() for group in resolve_region_groups(groups_source)
    ]

    next_config["future"] = _merge_future(_section(next_config, "future"), update.future)
    return next_config


__all__ = [
    "DISPLAY_SECTIONS",
    "LocationSettingsUpdate",
    "merge_display_settings",
    "merge_location_settings",
]
