"""Location stock runtime package."""

from . import availability
from .config import constants, settings

__all__ = [
    "availability",
    "config",
    "constants",
    "settings",
]

__version__ = "0.1.0"
