"""
Tool handlers shared by the MCP server.

Every handler returns an envelope dict and never raises:
  {"ok": True, "summary": <text>, "data": <payload>}
  {"ok": False, "summary": <text>, "error": {"type", "message", "path"}}
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .config import DEFAULT_SEARCH_LIMIT, SandboxConfig
from .delete import PathDeleter
from .directories import DirectoryCreator, DirectoryLister
from .errors import FriendlyFsError
from .models import MoveRequest, SearchFilter
from .moves import BatchMover
from .search import PathSearcher
from .security import PathGuard


def _ok(summary: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return {"ok": True, "summary": summary, "data": data}


def format_error(prefix: str, err: Exception) -> Dict[str, Any]:
    if isinstance(err, FriendlyFsError):
        message, path = err.message, err.path
    else:
        message, path = str(err), getattr(err, "filename", None)
    return {
        "ok": False,
        "summary": f"{prefix}: {message}",
        "error": {"type": type(err).__name__, "message": message, "path": path},
    }


def _dump(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


class FilesystemTools:
    """Wires the sandbox components to one immutable config."""

    def __init__(self, config: SandboxConfig) -> None:
        self.guard = PathGuard(config)
        self.lister = DirectoryLister(self.guard)
        self.creator = DirectoryCreator(self.guard)
        self.searcher = PathSearcher(self.guard)
        self.mover = BatchMover(self.guard)
        self.deleter = PathDeleter(self.guard)

    def move_files(self, moves: Iterable[Any]) -> Dict[str, Any]:
        try:
            requests = [m if isinstance(m, MoveRequest) else MoveRequest.model_validate(m) for m in moves]
        except ValidationError as exc:
            return format_error("Invalid move request", exc)
        if not requests:
            return format_error("Invalid move request", ValueError("moves must not be empty"))

        report = self.mover.move_all(requests)
        data = report.model_dump(by_alias=True)
        return _ok(_dump(data), data)

    def list_dir(self, path: str) -> Dict[str, Any]:
        try:
            listing = self.lister.list(path)
        except (FriendlyFsError, OSError) as exc:
            return format_error("Error listing directory", exc)
        data = listing.model_dump()
        return _ok(_dump(data), data)

    def make_dir(self, path: str) -> Dict[str, Any]:
        try:
            data = self.creator.make_dir(path)
        except (FriendlyFsError, OSError) as exc:
            return format_error("Error creating directory", exc)
        return _ok(f"Created directory: {data['created']}", data)

    def get_allowed_roots(self) -> Dict[str, Any]:
        roots = [str(root) for root in self.guard.allowed_roots()]
        return _ok("Allowed roots:\n" + "\n".join(roots), {"allowedRoots": roots})

    def search_paths(
        self,
        root: str,
        searchFiles: bool = True,
        searchDirectories: bool = False,
        extensions: Optional[List[str]] = None,
        names: Optional[List[str]] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> Dict[str, Any]:
        try:
            search_filter = SearchFilter(
                searchFiles=searchFiles,
                searchDirectories=searchDirectories,
                extensions=extensions or [],
                names=names or [],
                limit=limit,
            )
        except ValidationError as exc:
            return format_error("Invalid search filter", exc)

        try:
            report = self.searcher.search(root, search_filter)
        except (FriendlyFsError, OSError) as exc:
            return format_error("Error searching paths", exc)
        data = report.model_dump()
        return _ok(_dump(data), data)

    def delete_path(self, path: str) -> Dict[str, Any]:
        try:
            outcome = self.deleter.delete(path)
        except (FriendlyFsError, OSError) as exc:
            return format_error("Error deleting path", exc)

        data = outcome.model_dump(exclude_none=True)
        if outcome.deleted:
            summary = f"Deleted {outcome.type}: {outcome.path}"
        elif outcome.reason == "not_found":
            summary = f"Path does not exist: {outcome.path}"
        else:
            summary = f"Path is not a file or directory: {outcome.path}"
        return _ok(summary, data)
