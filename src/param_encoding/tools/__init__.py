"""Developer tools for inspecting parameter encoding declarations."""

from .encoding_report import (
    build_report,
    format_report,
    serialize_report,
    write_report,
)

__all__ = [
    "build_report",
    "format_report",
    "serialize_report",
    "write_report",
]
