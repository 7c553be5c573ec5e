from __future__ import annotations

import argparse
import asyncio
import functools
import logging
import sys
from typing import Any, Callable, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from .config import DEFAULT_SEARCH_LIMIT, SandboxConfig, load_config, log_level_from_env
from .errors import ConfigurationError
from .models import MoveRequest
from .tools import FilesystemTools, format_error

logger = logging.getLogger(__name__)

SERVER_NAME = "friendly-fs"


def _guarded(prefix: str, handler: Callable[..., Dict[str, Any]]) -> Callable[..., Dict[str, Any]]:
    """Convert any unexpected exception into an error envelope."""

    @functools.wraps(handler)
    def wrapper(*args: Any, **kwargs: Any) -> Dict[str, Any]:
        try:
            return handler(*args, **kwargs)
        except Exception as exc:
            logger.exception("%s failed", handler.__name__)
            return format_error(prefix, exc)

    return wrapper


async def _in_thread(handler: Callable[..., Dict[str, Any]], *args: Any, **kwargs: Any) -> Dict[str, Any]:
    """Run a blocking filesystem handler off the event loop."""
    return await asyncio.to_thread(handler, *args, **kwargs)


def build_server(config: SandboxConfig) -> FastMCP:
    """Create a FastMCP server whose tools are bound to the given sandbox config."""
    tools = FilesystemTools(config)
    server = FastMCP(SERVER_NAME)

    move = _guarded("Error moving files", tools.move_files)
    list_ = _guarded("Error listing directory", tools.list_dir)
    mkdir = _guarded("Error creating directory", tools.make_dir)
    roots = _guarded("Error reading allowed roots", tools.get_allowed_roots)
    search = _guarded("Error searching paths", tools.search_paths)
    delete = _guarded("Error deleting path", tools.delete_path)

    @server.tool()
    async def move_files(moves: List[MoveRequest]) -> dict:
        """
        Move multiple files or directories. Each item is {"from": ..., "to": ...}.
        An existing destination is overwritten; failures are reported per item.
        """
        return await _in_thread(move, moves)

    @server.tool()
    async def list_dir(path: str) -> dict:
        """List directory contents (absolute path or relative under allowed roots)."""
        return await _in_thread(list_, path)

    @server.tool()
    async def make_dir(path: str) -> dict:
        """Create a directory and any missing parents; succeeds if it already exists."""
        return await _in_thread(mkdir, path)

    @server.tool()
    async def get_allowed_roots() -> dict:
        """Return the directories this server may access."""
        return await _in_thread(roots)

    @server.tool()
    async def search_paths(
        root: str,
        searchFiles: bool = True,
        searchDirectories: bool = False,
        extensions: Optional[List[str]] = None,
        names: Optional[List[str]] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> dict:
        """
        Search for files and/or directories under a root.
        extensions (e.g. ['.png']) filter files; names filter directories
        (case-insensitive). At most `limit` results are returned.
        """
        return await _in_thread(
            search,
            root,
            searchFiles=searchFiles,
            searchDirectories=searchDirectories,
            extensions=extensions,
            names=names,
            limit=limit,
        )

    @server.tool()
    async def delete_path(path: str) -> dict:
        """Delete a file or directory (directories recursively); must be within allowed roots."""
        return await _in_thread(delete, path)

    return server


def configure_logging(level: str) -> None:
    # stdout carries the MCP protocol, logs go to stderr.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sandboxed filesystem MCP server (stdio).")
    parser.add_argument(
        "--allowed",
        "--allow",
        nargs="+",
        action="extend",
        dest="allowed",
        default=[],
        metavar="DIR",
        help="Directory to allow (repeatable). Falls back to FRIENDLY_FS_ALLOWED.",
    )
    parser.add_argument(
        "--follow-symlinks",
        action="store_true",
        default=None,
        help="Allow symlinks inside a root to point outside of it.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: FRIENDLY_FS_LOG_LEVEL or INFO).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level or log_level_from_env())

    try:
        config = load_config(args.allowed, follow_symlinks_outside=args.follow_symlinks)
    except ConfigurationError as exc:
        logger.error("%s", exc.message)
        parser.error(exc.message)

    logger.info("Allowed roots: %s", ", ".join(str(root) for root in config.allowed_roots))
    if config.follow_symlinks_outside:
        logger.warning("Symlinks may point outside the allowed roots")

    build_server(config).run("stdio")


if __name__ == "__main__":
    main()
