"""
Sandboxed filesystem MCP server.
"""

from .config import SandboxConfig, load_config
from .errors import (
    ConfigurationError,
    DeleteError,
    DeleteValidationError,
    DirectoryCreateError,
    DirectoryReadError,
    FriendlyFsError,
    InvalidPath,
    MoveError,
    OutsideAllowedRoots,
    PathValidationError,
)
from .security import PathGuard, assert_allowed, is_within, normalize_path

__all__ = [
    "ConfigurationError",
    "DeleteError",
    "DeleteValidationError",
    "DirectoryCreateError",
    "DirectoryReadError",
    "FriendlyFsError",
    "InvalidPath",
    "MoveError",
    "OutsideAllowedRoots",
    "PathGuard",
    "PathValidationError",
    "SandboxConfig",
    "assert_allowed",
    "is_within",
    "load_config",
    "normalize_path",
]
