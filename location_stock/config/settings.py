"""Settings resolved from the environment with sane defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass

from . import constants


def _get_env_str(env_name: str, default: str) -> str:
    raw = os.getenv(env_name)
    if raw is None:
        return default
    return raw


def _get_env_alias(env_names: tuple[str, ...], default: str) -> str:
    for env_name in env_names:
        raw = os.getenv(env_name)
        if raw is not None and raw != "":
            return raw
    return default


def _parse_env_int(env_name: str, default: int) -> int:
    raw = os.getenv(env_name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_env_float(env_name: str, default: float) -> float:
    raw = os.getenv(env_name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_env_bool(env_name: str, default: bool) -> bool:
    raw = os.getenv(env_name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_service_ports() -> dict[str, int]:
    raw = os.getenv("LOCATION_STOCK_SERVICE_PORTS")
    ports = dict(constants.DEFAULT_SERVICE_PORTS)
    if not raw:
        return ports
    for entry in raw.split(","):
        pair = entry.strip().split("=")
        if len(pair) != 2:
            continue
        name, value = pair
        try:
            ports[name.strip()] = int(value.strip())
        except ValueError:
            continue
    return ports


def _normalize_shop_domain(raw: str) -> str:
    domain = raw.strip()
    for prefix in ("https://", "http://"):
        if domain.startswith(prefix):
            domain = domain[len(prefix):]
    return domain.rstrip("/")


def _read_file_trimmed(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return handle.read().strip()
    except OSError as exc:
        raise ValueError(f"unable to read admin token file {path!r}: {exc}") from exc


def _resolve_admin_token() -> str:
    env_token = os.getenv("LOCATION_STOCK_ADMIN_TOKEN", "").strip()
    file_path = (os.getenv("LOCATION_STOCK_ADMIN_TOKEN_FILE") or "").strip()
    if not file_path:
        return env_token
    try:
        token = _read_file_trimmed(file_path)
    except ValueError:
        return env_token
    return token or env_token


@dataclass(frozen=True)
class Settings:
    shop_domain: str
    admin_token: str
    admin_api_version: str
    user_agent: str
    request_timeout: float
    max_retries: int
    backoff_base: float
    backoff_max: float
    jitter: float
    metafield_namespace: str
    metafield_key: str
    service_ports: dict[str, int]
    debug_delivery: bool

    @property
    def admin_graphql_url(self) -> str:
        return (
            f"https://{self.shop_domain}/admin/api/"
            f"{self.admin_api_version}/graphql.json"
        )

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            shop_domain=_normalize_shop_domain(
                _get_env_alias(
                    ("LOCATION_STOCK_SHOP_DOMAIN", "SHOPIFY_SHOP_DOMAIN"),
                    constants.DEFAULT_SHOP_DOMAIN,
                )
            ),
            admin_token=_resolve_admin_token(),
            admin_api_version=_get_env_alias(
                ("LOCATION_STOCK_API_VERSION", "SHOPIFY_API_VERSION"),
                constants.DEFAULT_ADMIN_API_VERSION,
            ),
            user_agent=_get_env_str(
                "LOCATION_STOCK_USER_AGENT", constants.DEFAULT_USER_AGENT
            ),
            request_timeout=_parse_env_float(
                "LOCATION_STOCK_REQUEST_TIMEOUT",
                constants.DEFAULT_REQUEST_TIMEOUT,
            ),
            max_retries=_parse_env_int(
                "LOCATION_STOCK_MAX_RETRIES", constants.DEFAULT_MAX_RETRIES
            ),
            backoff_base=_parse_env_float(
                "LOCATION_STOCK_BACKOFF_BASE", constants.DEFAULT_BACKOFF_BASE
            ),
            backoff_max=_parse_env_float(
                "LOCATION_STOCK_BACKOFF_MAX", constants.DEFAULT_BACKOFF_MAX
            ),
            jitter=_parse_env_float("LOCATION_STOCK_JITTER", constants.DEFAULT_JITTER),
            metafield_namespace=_get_env_alias(
                ("LOCATION_STOCK_METAFIELD_NAMESPACE",),
                constants.DEFAULT_METAFIELD_NAMESPACE,
            ),
            metafield_key=_get_env_alias(
                ("LOCATION_STOCK_METAFIELD_KEY",),
                constants.DEFAULT_METAFIELD_KEY,
            ),
            service_ports=_parse_service_ports(),
            debug_delivery=_parse_env_bool("LOCATION_STOCK_DEBUG_DELIVERY", False),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


__all__ = ["Settings", "get_settings"]
