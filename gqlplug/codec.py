"""
JSON codecs for gqlplug.

A codec decodes the `variables` request field and encodes response bodies.
Any object with `decode` and `encode` methods can be plugged in; the
default wraps the standard library json module and produces compact output.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from .errors import CodecError
from .utils import import_string

logger = logging.getLogger(__name__)


@runtime_checkable
class JSONCodec(Protocol):
    """Pluggable JSON encode/decode capability."""

    def decode(self, text: str | bytes) -> Any:
        """
        Decode JSON text.

        Raises:
            CodecError: If the text is not valid JSON
        """
        ...

    def encode(self, value: Any, **options: Any) -> str:
        """Encode a value as JSON text."""
        ...


class StdlibJSONCodec:
    """
    Codec backed by the standard library json module.

    Output is compact (no whitespace between tokens) so identical results
    encode to byte-identical bodies.

    Example:
        codec = StdlibJSONCodec(sort_keys=True)
        codec.encode({"data": {"b": 1, "a": 2}})  # '{"data":{"a":2,"b":1}}'
    """

    DEFAULT_OPTIONS: dict[str, Any] = {
        "separators": (",", ":"),
        "ensure_ascii": False,
    }

    def __init__(self, **options: Any):
        self._options = {**self.DEFAULT_OPTIONS, **options}

    @property
    def options(self) -> dict[str, Any]:
        return dict(self._options)

    def decode(self, text: str | bytes) -> Any:
        try:
            return json.loads(text)
        except (TypeError, ValueError) as e:
            raise CodecError(f"Invalid JSON: {e}") from e

    def encode(self, value: Any, **options: Any) -> str:
        return json.dumps(value, **{**self._options, **options})

    def __repr__(self) -> str:
        return f"StdlibJSONCodec(options={self._options})"


def resolve_codec(selection: Any = None) -> JSONCodec:
    """
    Turn a codec selection into a codec instance.

    Accepted forms:
        None                          -> StdlibJSONCodec()
        "module:Attr"                 -> imported, then resolved again
        CodecClass                    -> CodecClass()
        codec_instance                -> used as is
        (selection, {"opt": value})   -> selection built with options

    Raises:
        TypeError: If the selection does not produce a codec
    """
    if selection is None:
        return StdlibJSONCodec()

    options: Mapping[str, Any] = {}
    if isinstance(selection, tuple):
        selection, options = selection

    if isinstance(selection, str):
        selection = import_string(selection)

    if isinstance(selection, type):
        codec = selection(**options)
    elif options:
        raise TypeError(
            f"Codec options can only be applied to a codec class, got {selection!r}"
        )
    else:
        codec = selection

    if not isinstance(codec, JSONCodec):
        raise TypeError(f"{codec!r} does not implement decode/encode")

    logger.debug(f"Using JSON codec: {codec!r}")
    return codec
