from __future__ import annotations

import os
from pathlib import Path

import pytest

from friendly_fs.config import SandboxConfig
from friendly_fs.errors import InvalidPath, OutsideAllowedRoots
from friendly_fs.security import PathGuard, assert_allowed, is_within, normalize_path


def test_traversal_outside_denied(tmp_path: Path) -> None:
    allowed = [normalize_path(str(tmp_path))]
    target = normalize_path(str(tmp_path / ".." / "elsewhere" / "file.txt"))
    with pytest.raises(OutsideAllowedRoots):
        assert_allowed(target, allowed)


def test_dot_segments_normalized(guard: PathGuard, root: Path) -> None:
    raw = f"{root}/a/./b/../c.txt"
    assert guard.validate(raw) == root / "a" / "c.txt"


def test_root_itself_allowed(guard: PathGuard, root: Path) -> None:
    assert guard.validate(str(root)) == root


def test_nested_directory_allowed(guard: PathGuard, root: Path) -> None:
    nested = root / "nested" / "child"
    assert guard.validate(str(nested)) == nested


def test_sibling_prefix_denied(tmp_path: Path) -> None:
    root = tmp_path / "matt"
    root.mkdir()
    guard = PathGuard(SandboxConfig.from_roots([str(root)]))
    with pytest.raises(OutsideAllowedRoots) as info:
        guard.validate(str(tmp_path / "mattX" / "file.txt"))
    assert info.value.path == str(tmp_path / "mattX" / "file.txt")


def test_is_within_separator_boundary() -> None:
    assert is_within(Path("/a/b"), Path("/a/b"))
    assert is_within(Path("/a/b/c"), Path("/a/b"))
    assert not is_within(Path("/a/bc"), Path("/a/b"))
    assert not is_within(Path("/a"), Path("/a/b"))
    assert is_within(Path("/anything"), Path("/"))


def test_sibling_directory_denied(guard: PathGuard, outside: Path) -> None:
    with pytest.raises(OutsideAllowedRoots):
        guard.validate(str(outside / "note.txt"))


def test_dotdot_escape_denied(guard: PathGuard, root: Path) -> None:
    with pytest.raises(OutsideAllowedRoots):
        guard.validate(f"{root}/../outside/secret.txt")


@pytest.mark.parametrize("raw", ["", "   ", None, 42, ["a"], "bad\x00path"])
def test_invalid_input_rejected(guard: PathGuard, raw) -> None:
    with pytest.raises(InvalidPath):
        guard.validate(raw)


def test_relative_path_resolves_against_cwd(guard: PathGuard, root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(root)
    assert guard.validate("sub/file.txt") == root / "sub" / "file.txt"


def test_any_of_several_roots(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    guard = PathGuard(SandboxConfig.from_roots([str(first), str(second)]))
    assert guard.validate(str(second / "x")) == second / "x"
    with pytest.raises(OutsideAllowedRoots):
        guard.validate(str(tmp_path / "third"))


def test_symlink_escape_denied(root: Path, outside: Path) -> None:
    (outside / "data.txt").write_text("secret", encoding="utf-8")
    sneaky = root / "link_out"
    sneaky.symlink_to(outside)

    guard = PathGuard(SandboxConfig.from_roots([str(root)]))
    with pytest.raises(OutsideAllowedRoots):
        guard.validate(str(sneaky / "data.txt"))
    with pytest.raises(OutsideAllowedRoots):
        guard.validate(str(sneaky / "not-yet-created.txt"))


def test_symlink_escape_allowed_when_configured(root: Path, outside: Path) -> None:
    sneaky = root / "link_out"
    sneaky.symlink_to(outside)

    guard = PathGuard(SandboxConfig.from_roots([str(root)], follow_symlinks_outside=True))
    assert guard.validate(str(sneaky / "data.txt")) == sneaky / "data.txt"


def test_symlink_inside_root_allowed(guard: PathGuard, root: Path) -> None:
    (root / "real").mkdir()
    (root / "alias").symlink_to(root / "real")
    assert guard.validate(str(root / "alias" / "f.txt")) == root / "alias" / "f.txt"


def test_symlinked_root_still_contains_children(tmp_path: Path) -> None:
    real = tmp_path / "real"
    real.mkdir()
    link = tmp_path / "link"
    link.symlink_to(real)

    guard = PathGuard(SandboxConfig.from_roots([str(link)]))
    assert guard.validate(str(link / "child")) == link / "child"


def test_tilde_expanded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    assert normalize_path("~/docs") == Path(os.path.join(str(tmp_path), "docs"))

