"""API package for location stock services."""

from .app import get_app
from .services import ErrorKind, LocationStockService

__all__ = ["get_app", "ErrorKind", "LocationStockService"]
