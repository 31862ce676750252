"""
Encodings package: tags, retagging, and their registries for config loading.
"""

from .enums import ENCODING_REGISTRY, Encoding, EncodingTag, parse_encoding
from .retag import Retagger, retag, retag_nested

__all__ = [
    "ENCODING_REGISTRY",
    "Encoding",
    "EncodingTag",
    "Retagger",
    "parse_encoding",
    "retag",
    "retag_nested",
]
