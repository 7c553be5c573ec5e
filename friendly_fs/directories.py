from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from .errors import DirectoryCreateError, DirectoryReadError
from .models import DirectoryEntry, DirectoryListing
from .security import PathGuard

logger = logging.getLogger(__name__)


def read_entries(directory: Path) -> List[os.DirEntry]:
    """Return the children of a directory sorted by name.

    Sorting keeps results stable across platforms whose native
    enumeration order differs.
    """
    with os.scandir(directory) as it:
        return sorted(it, key=lambda entry: entry.name)


def entry_kind(entry: os.DirEntry) -> str:
    """Classify an entry without following symlinks."""
    try:
        if entry.is_symlink():
            return "symlink"
        if entry.is_dir(follow_symlinks=False):
            return "directory"
        if entry.is_file(follow_symlinks=False):
            return "file"
    except OSError:
        pass
    return "other"


class DirectoryLister:
    """Lists immediate children of a directory inside the sandbox."""

    def __init__(self, guard: PathGuard) -> None:
        self._guard = guard

    def list(self, path: Any) -> DirectoryListing:
        target = self._guard.validate(path)
        try:
            entries = read_entries(target)
        except OSError as exc:
            raise DirectoryReadError(
                f"Error reading directory {target}: {exc.strerror or exc}", path=target
            ) from exc

        items: list[DirectoryEntry] = []
        for entry in entries:
            kind = entry_kind(entry)
            items.append(
                DirectoryEntry(
                    name=entry.name,
                    isDirectory=kind == "directory",
                    isFile=kind == "file",
                    isSymlink=kind == "symlink",
                )
            )
        return DirectoryListing(path=str(target), entries=items)


class DirectoryCreator:
    """mkdir -p inside the sandbox; an existing directory is not an error."""

    def __init__(self, guard: PathGuard) -> None:
        self._guard = guard

    def make_dir(self, path: Any) -> Dict[str, str]:
        target = self._guard.validate(path)
        existed = target.is_dir()
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DirectoryCreateError(
                f"Error creating directory {target}: {exc.strerror or exc}", path=target
            ) from exc

        if not existed:
            logger.info("Created directory %s", target)
        return {"created": str(target)}
