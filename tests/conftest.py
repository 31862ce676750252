"""Shared pytest fixtures for param-encoding tests."""

from pathlib import Path

import pytest

from param_encoding.controller.api import ParameterEncodingController
from param_encoding.controller.registry import EncodingRegistry


@pytest.fixture
def registry() -> EncodingRegistry:
    """Fresh registry with no declarations."""
    return EncodingRegistry()


@pytest.fixture
def controller_cls() -> type[ParameterEncodingController]:
    """Controller class defined per test, so declarations never leak between tests."""

    class RepositoryController(ParameterEncodingController):
        pass

    return RepositoryController


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Directory with a declaration file named 'repository'."""
    (tmp_path / "repository.yaml").write_text(
        "declarations:\n"
        "  - skip: [show]\n"
        "  - action: show\n"
        "    param: repo_name\n"
        "    encoding: utf-8\n",
        encoding="utf-8",
    )
    return tmp_path
