from __future__ import annotations

import dataclasses
import os
from pathlib import Path

import pytest

from friendly_fs.config import ALLOWED_ENV, FOLLOW_SYMLINKS_ENV, SandboxConfig, load_config, roots_from_env
from friendly_fs.errors import ConfigurationError


def test_roots_normalized_and_deduplicated(tmp_path: Path) -> None:
    config = SandboxConfig.from_roots([str(tmp_path / "a" / ".." / "b"), str(tmp_path / "b"), str(tmp_path / "c")])
    assert config.allowed_roots == (tmp_path / "b", tmp_path / "c")


def test_empty_roots_rejected() -> None:
    with pytest.raises(ConfigurationError):
        SandboxConfig.from_roots([])
    with pytest.raises(ConfigurationError):
        SandboxConfig.from_roots([""])


def test_relative_root_rejected() -> None:
    with pytest.raises(ConfigurationError):
        SandboxConfig(allowed_roots=(Path("relative/dir"),))


def test_config_is_immutable(tmp_path: Path) -> None:
    config = SandboxConfig.from_roots([str(tmp_path)])
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.allowed_roots = ()  # type: ignore[misc]


def test_load_config_prefers_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ALLOWED_ENV, str(tmp_path / "env"))
    config = load_config([str(tmp_path / "cli")])
    assert config.allowed_roots == (tmp_path / "cli",)


def test_load_config_falls_back_to_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ALLOWED_ENV, os.pathsep.join([str(tmp_path / "one"), str(tmp_path / "two")]))
    monkeypatch.setenv(FOLLOW_SYMLINKS_ENV, "yes")
    config = load_config([])
    assert config.allowed_roots == (tmp_path / "one", tmp_path / "two")
    assert config.follow_symlinks_outside is True


def test_load_config_without_roots_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ALLOWED_ENV, raising=False)
    with pytest.raises(ConfigurationError):
        load_config(None)


def test_roots_from_env_skips_blank_entries() -> None:
    assert roots_from_env(os.pathsep.join(["/a", "", "  ", "/b"])) == ["/a", "/b"]
