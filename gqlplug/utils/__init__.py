"""
gqlplug utilities.
"""

from .imports import import_string, resolve_hook

__all__ = [
    "import_string",
    "resolve_hook",
]
