from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_SEARCH_LIMIT


class DirectoryEntry(BaseModel):
    name: str
    isDirectory: bool
    isFile: bool
    isSymlink: bool = False


class DirectoryListing(BaseModel):
    path: str
    entries: list[DirectoryEntry] = Field(default_factory=list)


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(..., alias="from", description="Source path (absolute or under allowed roots)")
    destination: str = Field(..., alias="to", description="Destination path (absolute or under allowed roots)")


class MoveResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(..., alias="from")
    destination: str = Field(..., alias="to")
    status: Literal["ok", "error"]
    error: Optional[str] = None


class MoveReport(BaseModel):
    moved: int = 0
    failed: int = 0
    details: list[MoveResult] = Field(default_factory=list)


class SearchFilter(BaseModel):
    searchFiles: bool = True
    searchDirectories: bool = False
    extensions: list[str] = Field(default_factory=list)
    names: list[str] = Field(default_factory=list)
    limit: int = Field(DEFAULT_SEARCH_LIMIT, gt=0)

    def extension_filters(self) -> list[str]:
        return [ext.lower() for ext in self.extensions]

    def name_filters(self) -> set[str]:
        return {name.lower() for name in self.names}


class SearchMatch(BaseModel):
    path: str
    type: Literal["file", "directory"]


class SearchReport(BaseModel):
    root: str
    searchFiles: bool
    searchDirectories: bool
    extensions: list[str]
    names: list[str]
    count: int
    results: list[SearchMatch]
    truncatedAt: Optional[int] = None
    skipped: list[str] = Field(default_factory=list)


class DeleteOutcome(BaseModel):
    deleted: bool
    path: str
    reason: Optional[Literal["not_found", "unsupported_type"]] = None
    type: Optional[Literal["file", "directory", "other"]] = None
