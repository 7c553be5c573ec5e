from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable

from .config import SandboxConfig
from .errors import InvalidPath, OutsideAllowedRoots

logger = logging.getLogger(__name__)


def normalize_path(user_path: Any) -> Path:
    """
    Convert an incoming user path to an absolute, lexically normalized Path.

    Expands ~ and collapses `.`/`..` segments without touching the
    filesystem, so paths that do not exist yet can still be validated.
    """
    if isinstance(user_path, os.PathLike):
        user_path = os.fspath(user_path)
    if not isinstance(user_path, str) or not user_path.strip():
        raise InvalidPath("Invalid path (empty or non-string)")
    if "\x00" in user_path:
        raise InvalidPath("Invalid path (contains NUL byte)")

    return Path(os.path.abspath(os.path.expanduser(user_path)))


def is_within(path: Path, root: Path) -> bool:
    """True if path equals root or is a separator-delimited descendant of it."""
    path_str = str(path)
    root_str = str(root)
    if path_str == root_str:
        return True
    # "/" and drive roots already end with a separator.
    prefix = root_str if root_str.endswith(os.sep) else root_str + os.sep
    return path_str.startswith(prefix) and len(path_str) > len(prefix)


def assert_allowed(path: Path, allowed_roots: Iterable[Path]) -> None:
    """Ensure the path is within at least one allowed root (inclusive)."""
    roots = list(allowed_roots)
    if any(is_within(path, root) for root in roots):
        return

    allowed_str = ", ".join(str(r) for r in roots)
    raise OutsideAllowedRoots(
        f"Path is outside allowed roots: {path} (allowed: [{allowed_str}])",
        path=path,
    )


class PathGuard:
    """Validates caller-supplied paths against the configured allowed roots."""

    def __init__(self, config: SandboxConfig) -> None:
        self._config = config

    def allowed_roots(self) -> list[Path]:
        return list(self._config.allowed_roots)

    def validate(self, raw: Any) -> Path:
        path = normalize_path(raw)
        try:
            assert_allowed(path, self._config.allowed_roots)
            if not self._config.follow_symlinks_outside:
                self._assert_real_path_allowed(path)
        except OutsideAllowedRoots:
            logger.warning("Rejected path outside allowed roots: %s", path)
            raise
        return path

    def _assert_real_path_allowed(self, path: Path) -> None:
        # realpath resolves as far as the path exists, so targets that do
        # not exist yet are checked through their deepest existing parent.
        real = Path(os.path.realpath(path))
        real_roots = [Path(os.path.realpath(root)) for root in self._config.allowed_roots]
        if any(is_within(real, root) for root in real_roots):
            return
        raise OutsideAllowedRoots(
            f"Path is outside allowed roots: {path} (resolves through a symlink to {real})",
            path=path,
        )
