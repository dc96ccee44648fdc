"""Service layer behind the location stock routes.

Every public method returns an envelope; failures are reported as
``ok=False`` with an :class:`ErrorKind` instead of raising into the route.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Mapping

from ..availability.config_resolver import load_raw_config, resolve_config
from ..availability.config_writer import (
    LocationSettingsUpdate,
    merge_display_settings,
    merge_location_settings,
)
from ..availability.delivery import aggregate_delivery_capabilities
from ..availability.overview import build_location_overview
from ..availability.pipeline import build_location_stock
from ..config.settings import Settings, get_settings
from ..ingestion.admin_client import AdminApiError, AdminGraphQLClient
from ..ingestion.shop_data import (
    fetch_delivery_graph,
    fetch_shop_config,
    fetch_shop_locations,
    fetch_variant_inventory,
    save_config,
)
from .schemas import (
    DisplaySettingsRequest,
    LocationOverviewResponse,
    LocationSettingsRequest,
    LocationStockResponse,
    SettingsResponse,
)

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    MISSING_VARIANT_ID = "missing_variant_id"
    MISSING_SHOP_ID = "missing_shop_id"
    GRAPHQL_ERROR = "graphql_error"
    SAVE_FAILED = "save_failed"
    INTERNAL_ERROR = "internal_error"


_MESSAGES = {
    ErrorKind.MISSING_VARIANT_ID: "variant_id is required",
    ErrorKind.MISSING_SHOP_ID: "shop id could not be resolved for metafieldsSet",
    ErrorKind.GRAPHQL_ERROR: "failed to load data from the Admin API",
    ErrorKind.SAVE_FAILED: "metafieldsSet rejected the config",
    ErrorKind.INTERNAL_ERROR: "unexpected error",
}


class LocationStockService:
    def __init__(
        self,
        settings: Settings | None = None,
        client_factory: Callable[[], AdminGraphQLClient] | None = None,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def _client(self) -> AdminGraphQLClient:
        if self._client_factory is not None:
            return self._client_factory()
        return AdminGraphQLClient.from_settings(self.settings)

    @property
    def _metafield(self) -> dict[str, str]:
        return {
            "namespace": self.settings.metafield_namespace,
            "key": self.settings.metafield_key,
        }

    def location_stock(self, variant_id: str | None) -> LocationStockResponse:
        if variant_id is None or not variant_id.strip():
            return self._failure(LocationStockResponse, ErrorKind.MISSING_VARIANT_ID)
        variant_id = variant_id.strip()
        try:
            with self._client() as client:
                inventory = fetch_variant_inventory(client, variant_id, **self._metafield)
                graph = self._delivery_graph(client)
            payload = build_location_stock(
                inventory.snapshots, load_raw_config(inventory.config_value), graph
            )
        except AdminApiError as exc:
            logger.error("variant inventory query failed for %s: %s", variant_id, exc)
            return self._failure(LocationStockResponse, ErrorKind.GRAPHQL_ERROR)
        except Exception as exc:
            logger.exception("location stock lookup failed for %s", variant_id)
            return self._failure(LocationStockResponse, ErrorKind.INTERNAL_ERROR, str(exc))
        body = payload.to_json()
        return LocationStockResponse(
            ok=True,
            variant_id=variant_id,
            variant_title=inventory.title,
            config=body["config"],
            stocks=body["stocks"],
        )

    def display_settings(self) -> SettingsResponse:
        try:
            with self._client() as client:
                shop = fetch_shop_config(client, **self._metafield)
        except AdminApiError as exc:
            logger.error("settings query failed: %s", exc)
            return self._failure(SettingsResponse, ErrorKind.GRAPHQL_ERROR)
        except Exception as exc:
            logger.exception("settings lookup failed")
            return self._failure(SettingsResponse, ErrorKind.INTERNAL_ERROR, str(exc))
        config = resolve_config(load_raw_config(shop.config_value))
        return SettingsResponse(ok=True, shop_id=shop.shop_id, config=config.to_json())

    def save_display_settings(self, request: DisplaySettingsRequest) -> SettingsResponse:
        update = request.model_dump(by_alias=True, exclude_none=True)
        return self._save(lambda raw: merge_display_settings(raw, update))

    def location_overview(self) -> LocationOverviewResponse:
        try:
            with self._client() as client:
                shop_locations = fetch_shop_locations(client, **self._metafield)
                graph = self._delivery_graph(client)
            config = resolve_config(load_raw_config(shop_locations.shop.config_value))
            rows = build_location_overview(
                shop_locations.locations,
                config,
                aggregate_delivery_capabilities(graph),
            )
        except AdminApiError as exc:
            logger.error("locations query failed: %s", exc)
            return self._failure(LocationOverviewResponse, ErrorKind.GRAPHQL_ERROR)
        except Exception as exc:
            logger.exception("location overview failed")
            return self._failure(
                LocationOverviewResponse, ErrorKind.INTERNAL_ERROR, str(exc)
            )
        return LocationOverviewResponse(
            ok=True,
            shop_id=shop_locations.shop.shop_id,
            rows=[row.to_json() for row in rows],
            config=config.to_json(),
        )

    def save_location_settings(self, request: LocationSettingsRequest) -> SettingsResponse:
        update = LocationSettingsUpdate(
            locations=request.locations,
            sort_mode=request.sort_mode,
            pinned_location_id=request.pinned_location_id,
            region_groups=request.region_groups,
            future=request.future,
        )
        return self._save(lambda raw: merge_location_settings(raw, update))

    def _save(
        self, merge: Callable[[Mapping[str, Any]], dict[str, Any]]
    ) -> SettingsResponse:
        try:
            with self._client() as client:
                shop = fetch_shop_config(client, **self._metafield)
                if shop.shop_id is None:
                    return self._failure(SettingsResponse, ErrorKind.MISSING_SHOP_ID)
                next_config = merge(load_raw_config(shop.config_value))
                user_errors = save_config(
                    client, shop.shop_id, next_config, **self._metafield
                )
        except AdminApiError as exc:
            logger.error("saving config failed: %s", exc)
            return self._failure(SettingsResponse, ErrorKind.GRAPHQL_ERROR)
        except Exception as exc:
            logger.exception("saving config failed")
            return self._failure(SettingsResponse, ErrorKind.INTERNAL_ERROR, str(exc))
        if user_errors:
            message = "; ".join(str(error.get("message", error)) for error in user_errors)
            return self._failure(SettingsResponse, ErrorKind.SAVE_FAILED, message)
        return SettingsResponse(
            ok=True,
            shop_id=shop.shop_id,
            config=resolve_config(next_config).to_json(),
        )

    def _delivery_graph(self, client: AdminGraphQLClient) -> Mapping[str, Any] | None:
        """Delivery profiles are optional; failures degrade to no capabilities."""

        try:
            graph = fetch_delivery_graph(client)
        except AdminApiError as exc:
            logger.warning(
                "deliveryProfiles query failed (missing read_shipping scope?): %s", exc
            )
            return None
        if self.settings.debug_delivery:
            for location_id, flags in sorted(aggregate_delivery_capabilities(graph).items()):
                logger.info(
                    "delivery capabilities %s shipping=%s local_delivery=%s",
                    location_id,
                    flags.has_shipping,
                    flags.has_local_delivery,
                )
        return graph

    @staticmethod
    def _failure(response_cls, kind: ErrorKind, message: str | None = None):
        return response_cls(ok=False, error=kind.value, message=message or _MESSAGES[kind])


__all__ = ["ErrorKind", "LocationStockService"]
