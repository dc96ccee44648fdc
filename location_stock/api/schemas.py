"""Pydantic API schemas for location stock endpoints.

Field names are snake_case in Python and camelCase on the wire so the theme
script can read responses as-is.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EnvelopeResponse(CamelModel):
    ok: bool
    error: Optional[str] = None
    message: Optional[str] = None


class LocationStockResponse(EnvelopeResponse):
    variant_id: Optional[str] = None
    variant_title: Optional[str] = None
    config: Optional[Dict[str, object]] = None
    stocks: Optional[List[Dict[str, object]]] = None


class SettingsResponse(EnvelopeResponse):
    shop_id: Optional[str] = None
    config: Optional[Dict[str, object]] = None


class LocationOverviewResponse(EnvelopeResponse):
    shop_id: Optional[str] = None
    rows: Optional[List[Dict[str, object]]] = None
    config: Optional[Dict[str, object]] = None


class DisplaySettingsRequest(CamelModel):
    thresholds: Optional[Dict[str, object]] = None
    quantity: Optional[Dict[str, object]] = None
    symbols: Optional[Dict[str, object]] = None
    labels: Optional[Dict[str, object]] = None
    locations_mode: Optional[Dict[str, object]] = None
    click: Optional[Dict[str, object]] = None
    messages: Optional[Dict[str, object]] = None
    notice: Optional[Dict[str, object]] = None


class LocationSettingsRequest(CamelModel):
    locations: List[Dict[str, object]] = Field(default_factory=list)
    sort_mode: Optional[str] = None
    pinned_location_id: Optional[str] = None
    region_groups: Optional[List[Dict[str, object]]] = None
    future: Dict[str, object] = Field(default_factory=dict)
