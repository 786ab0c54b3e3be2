"""
Import helpers for string-configured hooks.

Settings name codecs, pipeline builders and provider builders as import
paths so they can come from the environment. Two spellings are accepted:

    "package.module:attribute"
    "package.module.attribute"
"""
from __future__ import annotations

import importlib
import logging
from typing import Any

logger = logging.getLogger(__name__)


def import_string(path: str) -> Any:
    """
    Import an attribute from a dotted or colon-separated path.

    Args:
        path: "module:attr" or "module.attr"

    Returns:
        The imported object

    Raises:
        ImportError: If the module or attribute cannot be found
    """
    if ":" in path:
        module_path, _, attribute = path.partition(":")
    else:
        module_path, _, attribute = path.rpartition(".")

    if not module_path or not attribute:
        raise ImportError(f"'{path}' is not a valid import path")

    module = importlib.import_module(module_path)
    try:
        target = module
        for part in attribute.split("."):
            target = getattr(target, part)
    except AttributeError as e:
        raise ImportError(
            f"Module '{module_path}' has no attribute '{attribute}'"
        ) from e

    logger.debug(f"Resolved import path {path} -> {target!r}")
    return target


def resolve_hook(value: Any) -> Any:
    """Resolve an import path to its target; pass other values through."""
    if isinstance(value, str):
        return import_string(value)
    return value
