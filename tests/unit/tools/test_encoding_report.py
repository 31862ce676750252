"""Unit tests for the encoding report tool."""

from pathlib import Path

import pytest
import yaml

from param_encoding.controller.registry import EncodingRegistry
from param_encoding.encodings import EncodingTag
from param_encoding.tools.encoding_report import (
    FORMAT_VERSION,
    _main_async,
    build_report,
    format_report,
    serialize_report,
    write_report,
)


@pytest.fixture
def files_registry() -> EncodingRegistry:
    registry = EncodingRegistry()
    registry.skip_encoding(["show"])
    registry.set_param_encoding("show", "repo_name", EncodingTag.UTF_8)
    return registry


class TestBuildReport:
    """Tests for build_report."""

    def test_resolves_templated_actions_only(self, files_registry: EncodingRegistry) -> None:
        report = build_report(
            files_registry, ["show", "index"], ["file_path", "repo_name"], config="files"
        )
        assert report.config == "files"
        show, index = report.actions
        assert show.templated is True
        assert show.params == {
            "file_path": EncodingTag.BINARY,
            "repo_name": EncodingTag.UTF_8,
        }
        assert index.templated is False
        assert index.params == {}


class TestFormatReport:
    """Tests for format_report and serialize_report."""

    def test_table_lists_each_param(self, files_registry: EncodingRegistry) -> None:
        report = build_report(files_registry, ["show", "index"], ["file_path"])
        output = format_report(report)
        assert "show" in output
        assert "binary" in output
        lines = output.splitlines()
        assert any(line.startswith("index") and line.rstrip().endswith("—") for line in lines)

    def test_empty_report(self) -> None:
        report = build_report(EncodingRegistry(), [], [])
        assert "(no actions)" in format_report(report)

    def test_serialize_is_parseable_yaml(self, files_registry: EncodingRegistry) -> None:
        report = build_report(files_registry, ["show"], ["file_path"], config="files")
        data = yaml.safe_load(serialize_report(report))
        assert data["format_version"] == FORMAT_VERSION
        assert data["report"]["config"] == "files"
        assert data["actions"] == {
            "show": {"templated": True, "params": {"file_path": "binary"}}
        }

    def test_opaque_tags_serialized_by_name(self) -> None:
        registry = EncodingRegistry()
        registry.set_param_encoding("search", "q", "shift_jis")
        data = yaml.safe_load(serialize_report(build_report(registry, ["search"], ["q"])))
        assert data["actions"]["search"]["params"] == {"q": "shift_jis"}


class TestWriteReport:
    """Tests for write_report and the CLI entry point."""

    async def test_write_report(self, files_registry: EncodingRegistry, tmp_path: Path) -> None:
        out = tmp_path / "report.yaml"
        await write_report(out, build_report(files_registry, ["show"], ["repo_name"]))
        data = yaml.safe_load(out.read_text(encoding="utf-8"))
        assert data["actions"]["show"]["params"] == {"repo_name": "utf-8"}

    async def test_main_prints_table(
        self, config_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = await _main_async(
            ["repository", "--config-dir", str(config_dir), "-a", "show", "-p", "file_path"]
        )
        assert code == 0
        out = capsys.readouterr().out
        assert "file_path" in out
        assert "binary" in out

    async def test_main_writes_output_file(self, config_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.yaml"
        code = await _main_async(
            [
                "repository",
                "--config-dir",
                str(config_dir),
                "-a",
                "show",
                "-p",
                "repo_name",
                "-o",
                str(out),
            ]
        )
        assert code == 0
        assert yaml.safe_load(out.read_text())["actions"]["show"]["params"] == {
            "repo_name": "utf-8"
        }

    async def test_main_reports_config_errors(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = await _main_async(["missing", "--config-dir", str(tmp_path), "-a", "show"])
        assert code == 1
        assert "Error:" in capsys.readouterr().err
