"""Data models for scanned files and the directory tree."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PriorityTier(str, Enum):
    """Relevance tier of a file."""

    P0 = "P0"  # Always included in full (docs, migrations, schemas)
    P1 = "P1"  # Core logic, full when small
    P2 = "P2"  # Everything else, skeleton only


class Representation(str, Enum):
    """How a file's content appears in the digest."""

    FULL = "full"
    SKELETAL = "skel"


class FileRecord(BaseModel):
    """A regular file discovered by the walker."""

    model_config = ConfigDict(frozen=True)

    path: str  # absolute path, the record's identity
    rel_path: str  # POSIX path relative to the scan root
    size: int = 0
    extension: str = ""  # lowercased, including the dot

    @property
    def name(self) -> str:
        return self.rel_path.rsplit("/", 1)[-1]


class FileNode(BaseModel):
    """A node in the display tree."""

    name: str
    path: str
    type: str  # "file" or "dir"
    size: int | None = None
    children: list[FileNode] = Field(default_factory=list)

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"


class SizedPath(BaseModel):
    """A relative path with its size in bytes."""

    path: str
    size: int


class FileStats(BaseModel):
    """Aggregate statistics over every walked file."""

    total_files: int = 0
    total_bytes: int = 0
    by_extension: dict[str, int] = Field(default_factory=dict)
    largest_files: list[SizedPath] = Field(default_factory=list)
    priority_breakdown: dict[str, int] = Field(
        default_factory=lambda: {"p0": 0, "p1": 0, "p2": 0}
    )
