"""
Recursive path search with file/directory filters and a result cap.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterator, List, Optional

from .directories import entry_kind, read_entries
from .errors import DirectoryReadError
from .models import SearchFilter, SearchMatch, SearchReport
from .security import PathGuard

logger = logging.getLogger(__name__)


def matches_extension(name: str, extensions: List[str]) -> bool:
    """Case-insensitive suffix match; an empty filter matches everything."""
    if not extensions:
        return True
    lower = name.lower()
    return any(lower.endswith(ext) for ext in extensions)


def matches_name(name: str, names: set[str]) -> bool:
    """Case-insensitive exact name match; an empty filter matches everything."""
    return not names or name.lower() in names


class PathSearcher:
    """Depth-first search under a sandboxed root.

    The walk keeps an explicit stack of directory iterators instead of
    recursing, so deeply nested trees cannot exhaust the interpreter stack.
    Visitation order is pre-order: a directory's match comes before
    anything found inside it, and its subtree is finished before the
    next sibling.
    """

    def __init__(self, guard: PathGuard) -> None:
        self._guard = guard

    def search(self, root: Any, search_filter: Optional[SearchFilter] = None) -> SearchReport:
        search_filter = search_filter or SearchFilter()
        base = self._guard.validate(root)

        try:
            first_level = read_entries(base)
        except OSError as exc:
            raise DirectoryReadError(
                f"Search root must be a readable directory: {base} ({exc.strerror or exc})",
                path=base,
            ) from exc

        extensions = search_filter.extension_filters()
        names = search_filter.name_filters()
        limit = search_filter.limit

        matches: list[SearchMatch] = []
        skipped: list[str] = []
        stack: list[Iterator[os.DirEntry]] = [iter(first_level)]

        while stack and len(matches) < limit:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            kind = entry_kind(entry)
            full_path = entry.path

            if kind == "directory":
                if search_filter.searchDirectories and matches_name(entry.name, names):
                    matches.append(SearchMatch(path=full_path, type="directory"))
                    if len(matches) >= limit:
                        break
                try:
                    stack.append(iter(read_entries(Path(full_path))))
                except OSError as exc:
                    logger.warning("Skipping unreadable directory %s: %s", full_path, exc)
                    skipped.append(full_path)
                continue

            if kind == "file" and search_filter.searchFiles:
                if matches_extension(entry.name, extensions):
                    matches.append(SearchMatch(path=full_path, type="file"))

        truncated_at = limit if len(matches) >= limit else None
        logger.debug(
            "Search under %s found %s matches (limit=%s, truncated=%s)",
            base,
            len(matches),
            limit,
            truncated_at is not None,
        )
        return SearchReport(
            root=str(base),
            searchFiles=search_filter.searchFiles,
            searchDirectories=search_filter.searchDirectories,
            extensions=list(search_filter.extensions),
            names=list(search_filter.names),
            count=len(matches),
            results=matches,
            truncatedAt=truncated_at,
            skipped=skipped,
        )
