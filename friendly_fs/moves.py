from __future__ import annotations

import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import Iterable

from .errors import FriendlyFsError, MoveError
from .models import MoveReport, MoveRequest, MoveResult
from .security import PathGuard, is_within

logger = logging.getLogger(__name__)


def _remove_existing(target: Path) -> None:
    """Clear the destination so the move replaces it instead of merging."""
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    else:
        target.unlink()


def _set_aside(target: Path) -> Path:
    """Rename an existing destination next to itself so it can be restored."""
    backup = target.with_name(f".{target.name}.friendly-fs-{uuid.uuid4().hex[:8]}")
    os.rename(target, backup)
    return backup


def _restore(backup: Path, target: Path) -> None:
    if os.path.lexists(target):
        _remove_existing(target)
    os.rename(backup, target)


def _same_entry(first: Path, second: Path) -> bool:
    try:
        return os.path.samestat(os.lstat(first), os.lstat(second))
    except OSError:
        return False


class BatchMover:
    """Moves many (from, to) pairs, reporting each one independently.

    A failing item never aborts the batch: every error is captured into
    that item's MoveResult and the loop continues with the next request.
    An existing destination is overwritten.
    """

    def __init__(self, guard: PathGuard) -> None:
        self._guard = guard

    def move_all(self, requests: Iterable[MoveRequest]) -> MoveReport:
        report = MoveReport()
        for request in requests:
            try:
                self.move_one(request.source, request.destination)
            except (FriendlyFsError, OSError) as exc:
                message = exc.message if isinstance(exc, FriendlyFsError) else str(exc)
                logger.warning("Move %s -> %s failed: %s", request.source, request.destination, message)
                report.details.append(
                    MoveResult(source=request.source, destination=request.destination, status="error", error=message)
                )
                report.failed += 1
                continue

            report.details.append(MoveResult(source=request.source, destination=request.destination, status="ok"))
            report.moved += 1
        return report

    def move_one(self, source: str, destination: str) -> None:
        src = self._guard.validate(source)
        dst = self._guard.validate(destination)

        if not os.path.lexists(src):
            raise MoveError(f"Source not found: {src}", path=src)
        if src == dst:
            raise MoveError(f"Source and destination must not be the same: {src}", path=src)
        if src.is_dir() and not src.is_symlink() and is_within(dst, src):
            raise MoveError(f"Cannot move directory {src} into itself: {dst}", path=dst)
        if is_within(src, dst):
            raise MoveError(f"Destination {dst} contains the source {src}; give the full target path", path=dst)

        dst.parent.mkdir(parents=True, exist_ok=True)

        # On case-insensitive filesystems a rename that only changes case
        # sees the source itself at the destination.
        backup = None
        if os.path.lexists(dst) and not _same_entry(src, dst):
            logger.info("Overwriting existing destination %s", dst)
            backup = _set_aside(dst)

        try:
            shutil.move(str(src), str(dst))
        except OSError:
            if backup is not None:
                logger.warning("Move failed, restoring previous destination %s", dst)
                _restore(backup, dst)
            raise

        if backup is not None:
            try:
                _remove_existing(backup)
            except OSError as exc:
                logger.warning("Could not remove replaced destination %s: %s", backup, exc)
        logger.info("Moved %s -> %s", src, dst)
