from enum import Enum
from typing import Hashable, Union


class EncodingTag(Enum):
    """Encoding a request parameter value is tagged with."""

    BINARY = "binary"  # Raw bytes, no text codec applied
    UTF_8 = "utf-8"  # Default text encoding for parameters
    ASCII = "ascii"
    LATIN_1 = "latin-1"

    TEXT_DEFAULT = "utf-8"  # Alias of UTF_8


# Tags are opaque to the registry: anything hashable (usually a codec name) works.
Encoding = Union[EncodingTag, Hashable]


def parse_encoding(name: str) -> Encoding:
    """Map a config name to an EncodingTag, or return the name unchanged.

    Matches both member values ("utf-8") and member names ("UTF_8", "text_default").
    Unknown names are codec names used as-is.
    """
    normalized = name.strip()
    for tag in EncodingTag:
        if normalized.lower() == tag.value:
            return tag
    member = ENCODING_REGISTRY.get(normalized.lower().replace("-", "_"))
    if member is not None:
        return member
    return normalized


# Registry for config loader: maps YAML encoding names to tags.
ENCODING_REGISTRY: dict[str, EncodingTag] = {
    name.lower(): tag for name, tag in EncodingTag.__members__.items()
}
