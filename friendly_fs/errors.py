from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class FriendlyFsError(Exception):
    """Base class for every failure reported by the sandbox."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None


class ConfigurationError(FriendlyFsError):
    """Raised at startup when the allowed roots are missing or unusable."""


class PathValidationError(FriendlyFsError):
    """Raised when a caller-supplied path cannot be used."""


class InvalidPath(PathValidationError):
    """The path is empty, not a string, or otherwise malformed."""


class OutsideAllowedRoots(PathValidationError):
    """The resolved path is not inside any configured root."""


class DeleteValidationError(PathValidationError):
    """Validation failed before a delete touched the filesystem."""


class DirectoryReadError(FriendlyFsError):
    pass


class DirectoryCreateError(FriendlyFsError):
    pass


class MoveError(FriendlyFsError):
    pass


class DeleteError(FriendlyFsError):
    pass
