"""
gqlplug Configuration

Environment-facing settings and the per-mount configuration built from them.
"""

from .plug_config import PlugConfig
from .schemas import DEFAULT_NO_QUERY_MESSAGE, DEFAULT_PATH, PlugSettings

__all__ = [
    "PlugConfig",
    "PlugSettings",
    "DEFAULT_NO_QUERY_MESSAGE",
    "DEFAULT_PATH",
]
