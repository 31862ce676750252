"""Unit tests for encodings.enums (EncodingTag and parse_encoding)."""

import pytest

from param_encoding.encodings.enums import ENCODING_REGISTRY, EncodingTag, parse_encoding


class TestEncodingTag:
    """Tests for the EncodingTag enum."""

    def test_text_default_is_alias_of_utf_8(self) -> None:
        """TEXT_DEFAULT and UTF_8 are the same member."""
        assert EncodingTag.TEXT_DEFAULT is EncodingTag.UTF_8

    def test_registry_contains_aliases(self) -> None:
        """ENCODING_REGISTRY maps lower-cased member names, aliases included."""
        assert ENCODING_REGISTRY["binary"] is EncodingTag.BINARY
        assert ENCODING_REGISTRY["text_default"] is EncodingTag.UTF_8


class TestParseEncoding:
    """Tests for parse_encoding."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("binary", EncodingTag.BINARY),
            ("BINARY", EncodingTag.BINARY),
            ("utf-8", EncodingTag.UTF_8),
            ("UTF_8", EncodingTag.UTF_8),
            ("text_default", EncodingTag.UTF_8),
            (" latin-1 ", EncodingTag.LATIN_1),
        ],
    )
    def test_known_names_map_to_tags(self, name: str, expected: EncodingTag) -> None:
        """Values and member names resolve to EncodingTag members."""
        assert parse_encoding(name) is expected

    def test_unknown_name_passes_through(self) -> None:
        """Unknown names are returned unchanged as codec names."""
        assert parse_encoding("shift_jis") == "shift_jis"
