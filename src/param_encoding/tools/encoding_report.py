"""
Encoding report for parameter encoding declaration files.

Loads a declaration file, resolves the encoding of each requested parameter on
each requested action, and outputs results in human-readable or YAML format.
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TypedDict

import aiofiles
import yaml

from ..controller.registry import (
    EncodingConfigError,
    EncodingRegistry,
    load_encoding_registry,
)
from ..encodings import Encoding, EncodingTag

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1"


class ActionEntryDict(TypedDict):
    """Single action entry in report dict output."""

    templated: bool
    params: dict[str, str]


class ReportMetaDict(TypedDict):
    """Report metadata."""

    config: str
    timestamp: str


class ReportDict(TypedDict):
    """Top-level dict structure returned by _report_to_dict."""

    format_version: str
    report: ReportMetaDict
    actions: dict[str, ActionEntryDict]


@dataclass
class ActionReport:
    """Resolved encodings of one action. params is empty when not templated."""

    action: str
    templated: bool
    params: dict[str, Encoding] = field(default_factory=dict)


@dataclass
class EncodingReport:
    """Result of resolving a set of actions and parameters."""

    config: str
    actions: list[ActionReport] = field(default_factory=list)


def _tag_name(encoding: Encoding) -> str:
    if isinstance(encoding, EncodingTag):
        return encoding.value
    return str(encoding)


def build_report(
    registry: EncodingRegistry,
    actions: list[str],
    params: list[str],
    *,
    config: str = "",
) -> EncodingReport:
    """
    Resolve params on each action of registry.

    Args:
        registry: Registry to query.
        actions: Action names to report on.
        params: Parameter names to resolve on every templated action.
        config: Name of the declaration file, for display.

    Returns:
        EncodingReport with one ActionReport per action, in the given order.
    """
    report = EncodingReport(config=config)
    for action in actions:
        templated = registry.is_templated(action)
        resolved: dict[str, Encoding] = {}
        if templated:
            resolved = {param: registry.resolve(action, param) for param in params}
        report.actions.append(
            ActionReport(action=action, templated=templated, params=resolved)
        )
    logger.debug("Built encoding report for %d actions", len(report.actions))
    return report


def format_report(report: EncodingReport) -> str:
    """
    Format report as human-readable table.

    Untemplated actions get a single placeholder row (default handling applies).
    """
    lines: list[str] = [f"Parameter encodings: {report.config}", ""]
    if not report.actions:
        lines.append("(no actions)")
        return "\n".join(lines)

    header = f"{'Action':<16} {'Param':<20} Encoding"
    lines.append(header)
    lines.append("-" * 16 + " " + "-" * 20 + " " + "-" * 10)
    for entry in report.actions:
        if not entry.templated:
            lines.append(f"{entry.action:<16} {'*':<20} —")
            continue
        for param, encoding in entry.params.items():
            lines.append(f"{entry.action:<16} {param:<20} {_tag_name(encoding)}")
    return "\n".join(lines)


def _report_to_dict(report: EncodingReport) -> ReportDict:
    """Convert EncodingReport to a dict suitable for YAML serialization."""
    actions: dict[str, ActionEntryDict] = {}
    for entry in report.actions:
        actions[entry.action] = {
            "templated": entry.templated,
            "params": {p: _tag_name(e) for p, e in entry.params.items()},
        }
    return {
        "format_version": FORMAT_VERSION,
        "report": {
            "config": report.config,
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        },
        "actions": actions,
    }


def serialize_report(report: EncodingReport) -> str:
    """Serialize report to YAML string."""
    return yaml.safe_dump(
        _report_to_dict(report),
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )


async def write_report(path: Path, report: EncodingReport) -> None:
    """Write report to a YAML file."""
    content = serialize_report(report)
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(content)


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Show the resolved parameter encodings of a declaration file."
    )
    parser.add_argument("config", help="Declaration file name without .yaml")
    parser.add_argument(
        "--config-dir",
        type=str,
        metavar="DIR",
        help="Directory holding the file (default: bundled configs)",
    )
    parser.add_argument(
        "-a",
        "--action",
        dest="actions",
        action="append",
        required=True,
        help="Action to report on (repeatable)",
    )
    parser.add_argument(
        "-p",
        "--param",
        dest="params",
        action="append",
        default=[],
        help="Parameter to resolve (repeatable)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        metavar="FILE",
        help="Write report to file (YAML format)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


async def _main_async(argv: Optional[list[str]] = None) -> int:
    """Async main logic. Returns exit code."""
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    config_dir = Path(args.config_dir) if args.config_dir else None
    try:
        registry = load_encoding_registry(args.config, config_dir)
    except EncodingConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    report = build_report(registry, args.actions, args.params, config=args.config)
    if args.output:
        out_path = Path(args.output)
        await write_report(out_path, report)
        print(f"Wrote report to {out_path}")
    else:
        print(format_report(report))
    return 0


def main() -> None:
    """CLI entry point."""
    exit_code = asyncio.run(_main_async())
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
