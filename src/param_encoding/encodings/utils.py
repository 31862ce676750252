"""
Low-level helpers for moving parameter values between bytes and text.

Conversions use the "surrogateescape" error handler so that invalid byte
sequences survive a bytes -> str -> bytes round trip unchanged. Nothing here
transcodes: a value is only re-labelled.
"""

import logging
from typing import Union

from .enums import Encoding, EncodingTag

logger = logging.getLogger(__name__)

ERROR_HANDLER = "surrogateescape"


def codec_name(encoding: Encoding) -> str:
    """Return the codec name behind a tag ("utf-8" for EncodingTag.UTF_8)."""
    if isinstance(encoding, EncodingTag):
        return encoding.value
    return str(encoding)


def is_binary(encoding: Encoding) -> bool:
    """True when the tag means raw bytes (EncodingTag.BINARY or the "binary" name)."""
    return codec_name(encoding).lower() in ("binary", "ascii-8bit")


def to_bytes(value: Union[str, bytes, bytearray]) -> bytes:
    """
    Return the raw bytes behind a parameter value.

    Text parameters arrive already decoded as UTF-8 by the request parser, so
    their bytes are recovered by encoding back with the same codec.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return value.encode(EncodingTag.TEXT_DEFAULT.value, ERROR_HANDLER)


def to_text(value: Union[str, bytes, bytearray], codec: str) -> str:
    """Decode the raw bytes of a value with codec."""
    return to_bytes(value).decode(codec, ERROR_HANDLER)
