"""
Configuration Schemas for gqlplug.

Pydantic model for the settings a mount can take from the environment.
Hooks (codec, pipeline builder, provider list) are given as import paths
here and resolved when a PlugConfig is built from the settings.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PATH = "/graphql"
DEFAULT_NO_QUERY_MESSAGE = "No query document supplied"


class PlugSettings(BaseModel):
    """
    Settings for one GraphQL mount.

    Example:
        settings = PlugSettings(
            path="/api/graphql",
            json_codec="myapp.codecs:OrjsonCodec",
            document_providers="myapp.graphql:document_providers",
        )
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Mount
    path: str = Field(DEFAULT_PATH, description="URL path the endpoint is mounted on")
    no_query_message: str = Field(
        DEFAULT_NO_QUERY_MESSAGE,
        description="Body of the 400 response sent when no document was supplied",
    )

    # Schema
    schema_path: str | None = Field(
        None, description="Import path of the GraphQLSchema to serve (application entry point)"
    )

    # Codec
    json_codec: str | None = Field(
        None, description="Import path of a JSON codec class or instance"
    )
    json_codec_options: dict[str, Any] = Field(
        default_factory=dict, description="Keyword options for the codec class"
    )

    # Hooks
    pipeline: str | None = Field(
        None, description="Import path of a pipeline builder (config, options) -> phases"
    )
    document_providers: str | None = Field(
        None, description="Import path of a provider list or a builder (config) -> providers"
    )

    # Application
    debug: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
