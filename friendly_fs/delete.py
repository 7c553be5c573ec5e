from __future__ import annotations

import logging
import os
import shutil
import stat
from typing import Any

from .errors import DeleteError, DeleteValidationError, PathValidationError
from .models import DeleteOutcome
from .security import PathGuard

logger = logging.getLogger(__name__)


class PathDeleter:
    """Deletes a single file or a whole directory tree inside the sandbox.

    Only validation failures raise. A missing path or an entry that is
    neither a regular file nor a directory is reported in the outcome.
    Directories are removed recursively with no confirmation step, which
    is why the path is validated before anything is touched.
    """

    def __init__(self, guard: PathGuard) -> None:
        self._guard = guard

    def delete(self, path: Any) -> DeleteOutcome:
        try:
            target = self._guard.validate(path)
        except PathValidationError as exc:
            raise DeleteValidationError(exc.message, path=exc.path) from exc

        try:
            st = os.stat(target)
        except FileNotFoundError:
            return DeleteOutcome(deleted=False, reason="not_found", path=str(target))
        except OSError as exc:
            raise DeleteError(f"Error deleting path {target}: {exc.strerror or exc}", path=target) from exc

        if stat.S_ISDIR(st.st_mode):
            kind = "directory"
        elif stat.S_ISREG(st.st_mode):
            kind = "file"
        else:
            return DeleteOutcome(deleted=False, reason="unsupported_type", type="other", path=str(target))

        try:
            if target.is_symlink():
                # Remove the link only, never what it points at.
                target.unlink()
            elif kind == "directory":
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as exc:
            raise DeleteError(f"Error deleting path {target}: {exc.strerror or exc}", path=target) from exc

        logger.info("Deleted %s %s", kind, target)
        return DeleteOutcome(deleted=True, type=kind, path=str(target))
