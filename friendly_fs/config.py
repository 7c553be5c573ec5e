"""Configuration for the friendly-fs sandbox."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)

ALLOWED_ENV = "FRIENDLY_FS_ALLOWED"
FOLLOW_SYMLINKS_ENV = "FRIENDLY_FS_FOLLOW_SYMLINKS"
LOG_LEVEL_ENV = "FRIENDLY_FS_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SEARCH_LIMIT = 100

_TRUTHY = {"1", "true", "yes", "on"}


def normalize_root(raw_root: str) -> Path:
    """Expand ~ and turn a configured root into an absolute, normalized path."""
    if not raw_root or not str(raw_root).strip():
        raise ConfigurationError("Allowed root cannot be empty.")
    return Path(os.path.abspath(os.path.expanduser(str(raw_root).strip())))


@dataclass(frozen=True)
class SandboxConfig:
    """Immutable set of allowed roots shared by every component.

    Built once at startup and passed to each component, so tests can run
    several sandboxes with different roots side by side.
    """

    allowed_roots: Tuple[Path, ...]
    follow_symlinks_outside: bool = False

    def __post_init__(self) -> None:
        if not self.allowed_roots:
            raise ConfigurationError("At least one allowed root is required.")
        for root in self.allowed_roots:
            if not root.is_absolute():
                raise ConfigurationError(f"Allowed root must be absolute: {root}", path=root)

    @classmethod
    def from_roots(cls, raw_roots: Iterable[str], follow_symlinks_outside: bool = False) -> "SandboxConfig":
        roots: list[Path] = []
        for raw in raw_roots:
            root = normalize_root(raw)
            if root in roots:
                continue
            if not root.is_dir():
                logger.warning("Allowed root does not exist or is not a directory: %s", root)
            roots.append(root)
        return cls(allowed_roots=tuple(roots), follow_symlinks_outside=follow_symlinks_outside)


def roots_from_env(value: Optional[str] = None) -> list[str]:
    """Split FRIENDLY_FS_ALLOWED (os.pathsep separated) into raw root strings."""
    raw = value if value is not None else os.getenv(ALLOWED_ENV, "")
    return [item for item in raw.split(os.pathsep) if item.strip()]


def follow_symlinks_from_env() -> bool:
    return os.getenv(FOLLOW_SYMLINKS_ENV, "").strip().lower() in _TRUTHY


def log_level_from_env() -> str:
    return os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()


def load_config(
    cli_roots: Optional[Iterable[str]] = None,
    follow_symlinks_outside: Optional[bool] = None,
) -> SandboxConfig:
    """Build the config from CLI roots, falling back to the environment."""
    raw_roots = list(cli_roots or []) or roots_from_env()
    if not raw_roots:
        raise ConfigurationError(
            f"No allowed roots configured. Pass --allowed <dir> ... or set {ALLOWED_ENV}."
        )
    if follow_symlinks_outside is None:
        follow_symlinks_outside = follow_symlinks_from_env()
    return SandboxConfig.from_roots(raw_roots, follow_symlinks_outside=follow_symlinks_outside)
