"""
This module contains tools to re-label request parameter values with an encoding.

Retagging never transcodes: a binary tag exposes the value's raw bytes, a text
tag decodes the same bytes with the tag's codec.
"""

import logging
from typing import Any, Protocol

from .enums import Encoding
from .utils import codec_name, is_binary, to_bytes, to_text

logger = logging.getLogger(__name__)


class Retagger(Protocol):
    """Retagger takes a parameter value and an encoding tag and returns the re-labelled value.

    Args:
        value: Parameter value as produced by the request parser
        encoding: Tag to apply (EncodingTag or codec name)

    Returns:
        Any: bytes for binary tags, str for text tags, other values unchanged
    """

    def __call__(self, value: Any, encoding: Encoding) -> Any: ...


def retag(value: Any, encoding: Encoding) -> Any:
    """Re-label a single parameter value with encoding.

    Only str and bytes-like values are touched. Anything else (None, numbers,
    uploaded file objects) is returned as-is.

    Raises:
        LookupError: If encoding names a codec Python does not know.
    """
    if not isinstance(value, (str, bytes, bytearray)):
        return value
    if is_binary(encoding):
        return to_bytes(value)
    return to_text(value, codec_name(encoding))


def retag_nested(
    value: Any, encoding: Encoding, retagger: Retagger = retag
) -> Any:
    """Apply retagger to every leaf of nested lists, tuples and dicts.

    Container shapes are preserved; dict keys are left alone.
    """
    if isinstance(value, dict):
        return {k: retag_nested(v, encoding, retagger) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(retag_nested(v, encoding, retagger) for v in value)
    return retagger(value, encoding)

