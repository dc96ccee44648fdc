"""FastAPI gateway for the storefront stock list"""

from __future__ import annotations

import logging
from typing import Sequence

import uvicorn

from ..api.app import get_app
from ..config import settings as config_settings

logger = logging.getLogger(__name__)

SERVICE_NAME = "stock_api"


def main(argv: Sequence[str] | None = None) -> None:
    cfg = config_settings.get_settings()
    port = cfg.service_ports.get(SERVICE_NAME, None)
    logger.info(
        "%s starting on port %s (shop=%s api_version=%s metafield=%s.%s)",
        SERVICE_NAME,
        port,
        cfg.shop_domain or "unset",
        cfg.admin_api_version,
        cfg.metafield_namespace,
        cfg.metafield_key,
    )
    if not cfg.admin_token:
        logger.warning("no Admin API token configured; upstream calls will be rejected")
    app = get_app()
    uvicorn.run(app, host="0.0.0.0", port=port or 8000, log_level="info")
