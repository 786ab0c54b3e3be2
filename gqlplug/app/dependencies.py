"""
Settings access for the gqlplug application.

Settings come from GQLPLUG_* environment variables and are read once.
"""
from __future__ import annotations

import json
import logging
import os
from functools import lru_cache

from gqlplug.config import DEFAULT_NO_QUERY_MESSAGE, DEFAULT_PATH, PlugSettings

logger = logging.getLogger(__name__)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache()
def get_settings() -> PlugSettings:
    """
    Get mount settings from environment.

    Uses lru_cache for singleton pattern.
    """
    return PlugSettings(
        # Mount
        path=os.getenv("GQLPLUG_PATH", DEFAULT_PATH),
        no_query_message=os.getenv("GQLPLUG_NO_QUERY_MESSAGE", DEFAULT_NO_QUERY_MESSAGE),
        # Hooks
        schema_path=os.getenv("GQLPLUG_SCHEMA") or None,
        json_codec=os.getenv("GQLPLUG_JSON_CODEC") or None,
        json_codec_options=json.loads(os.getenv("GQLPLUG_JSON_CODEC_OPTIONS") or "{}"),
        pipeline=os.getenv("GQLPLUG_PIPELINE") or None,
        document_providers=os.getenv("GQLPLUG_DOCUMENT_PROVIDERS") or None,
        # Application
        debug=os.getenv("GQLPLUG_DEBUG", "false").lower() == "true",
        cors_origins=_split_csv(os.getenv("GQLPLUG_CORS_ORIGINS", "*")),
    )
