from __future__ import annotations

from pathlib import Path

import pytest

from friendly_fs.config import SandboxConfig
from friendly_fs.security import PathGuard
from friendly_fs.tools import FilesystemTools


@pytest.fixture
def root(tmp_path: Path) -> Path:
    allowed = tmp_path / "allowed"
    allowed.mkdir()
    return allowed


@pytest.fixture
def outside(tmp_path: Path) -> Path:
    other = tmp_path / "outside"
    other.mkdir()
    return other


@pytest.fixture
def config(root: Path) -> SandboxConfig:
    return SandboxConfig.from_roots([str(root)])


@pytest.fixture
def guard(config: SandboxConfig) -> PathGuard:
    return PathGuard(config)


@pytest.fixture
def tools(config: SandboxConfig) -> FilesystemTools:
    return FilesystemTools(config)
