"""FastAPI surface for the storefront stock list and its admin settings."""

from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI

from ..config import constants, settings
from .schemas import (
    DisplaySettingsRequest,
    LocationOverviewResponse,
    LocationSettingsRequest,
    LocationStockResponse,
    SettingsResponse,
)
from .services import LocationStockService

app = FastAPI(title="Location Stock API", version="0.1.0")
service = LocationStockService()


@app.get("/healthz")
def healthz() -> dict[str, str]:
    cfg = settings.get_settings()
    return {
        "status": "ok",
        "shop": cfg.shop_domain or "unset",
        "api_version": cfg.admin_api_version,
    }


@app.get("/v1/meta/services")
def list_services() -> dict[str, List[str]]:
    return {"services": constants.SERVICE_NAMES}


# Errors are reported in the body with HTTP 200 so the storefront proxy
# never swaps in its own error page.
@app.get("/apps/location-stock", response_model=LocationStockResponse)
def location_stock(variant_id: Optional[str] = None) -> LocationStockResponse:
    return service.location_stock(variant_id)


@app.get("/v1/admin/settings", response_model=SettingsResponse)
def display_settings() -> SettingsResponse:
    return service.display_settings()


@app.post("/v1/admin/settings", response_model=SettingsResponse)
def save_display_settings(request: DisplaySettingsRequest) -> SettingsResponse:
    return service.save_display_settings(request)


@app.get("/v1/admin/locations", response_model=LocationOverviewResponse)
def location_overview() -> LocationOverviewResponse:
    return service.location_overview()


@app.post("/v1/admin/locations", response_model=SettingsResponse)
def save_location_settings(request: LocationSettingsRequest) -> SettingsResponse:
    return service.save_location_settings(request)


def get_app() -> FastAPI:
    return app
