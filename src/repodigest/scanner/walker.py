"""Directory traversal - builds the display tree and the flat file list."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from repodigest.config import WalkerConfig
from repodigest.exceptions import ScanError
from repodigest.scanner.classifier import priority_breakdown
from repodigest.scanner.models import FileNode, FileRecord, FileStats, SizedPath

logger = logging.getLogger("repodigest.walker")


@dataclass
class WalkResult:
    """Output of a directory walk."""

    tree: FileNode
    files: list[FileRecord] = field(default_factory=list)


def walk_directory(root: str | Path, config: WalkerConfig | None = None) -> WalkResult:
    """Walk `root` into a display tree plus a flat list of FileRecords.

    Directories come before files, then names sort lexicographically, so the
    result is stable across runs. The flat list follows depth-first
    pre-order: a directory's subdirectories are fully enumerated before its
    own files.

    Raises ScanError if the root is missing, not a directory or unreadable.
    Any failure below the root is absorbed: an unreadable directory has no
    children and an unstat-able file has size 0.
    """
    config = config or WalkerConfig()
    root = Path(root).resolve()
    if not root.exists():
        raise ScanError(str(root), "path does not exist")
    if not root.is_dir():
        raise ScanError(str(root), "not a directory")
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise ScanError(str(root), str(e)) from e

    ignored = set(config.ignored_dirs)
    allowed_dotfiles = set(config.allowed_dotfiles)

    tree = FileNode(name=root.name or str(root), path=str(root), type="dir")
    files: list[FileRecord] = []

    # Work items: ("dir", path, node, depth) expands a directory,
    # ("emit", records) appends a directory's files once its subtree is done.
    stack: list[tuple] = [("dir", root, tree, 0)]
    while stack:
        item = stack.pop()
        if item[0] == "emit":
            files.extend(item[1])
            continue

        _, dir_path, node, depth = item
        entries = _list_entries(dir_path)

        subdirs: list[tuple] = []
        dir_files: list[FileRecord] = []
        for entry in entries:
            if entry.name.startswith(".") and entry.name not in allowed_dotfiles:
                continue
            if _is_dir(entry):
                if entry.name in ignored or depth + 1 > config.max_depth:
                    continue
                child = FileNode(name=entry.name, path=entry.path, type="dir")
                node.children.append(child)
                subdirs.append(("dir", Path(entry.path), child, depth + 1))
            elif _is_file(entry):
                size = _file_size(entry)
                node.children.append(
                    FileNode(name=entry.name, path=entry.path, type="file", size=size)
                )
                dir_files.append(
                    FileRecord(
                        path=entry.path,
                        rel_path=Path(entry.path).relative_to(root).as_posix(),
                        size=size,
                        extension=Path(entry.name).suffix.lower(),
                    )
                )

        stack.append(("emit", dir_files))
        stack.extend(reversed(subdirs))

    return WalkResult(tree=tree, files=files)


def _list_entries(dir_path: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(dir_path) as it:
            entries = list(it)
    except OSError as e:
        logger.debug("Cannot list %s: %s", dir_path, e)
        return []
    entries.sort(key=lambda e: (not _is_dir(e), e.name))
    return entries


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _is_file(entry: os.DirEntry) -> bool:
    try:
        return entry.is_file(follow_symlinks=False)
    except OSError:
        return False


def _file_size(entry: os.DirEntry) -> int:
    try:
        return entry.stat(follow_symlinks=False).st_size
    except OSError as e:
        logger.debug("Cannot stat %s: %s", entry.path, e)
        return 0


def collect_file_stats(files: list[FileRecord], largest: int = 10) -> FileStats:
    """Aggregate counts, sizes and tier breakdown over the walked files."""
    by_extension: dict[str, int] = {}
    total_bytes = 0
    for f in files:
        total_bytes += f.size
        key = f.extension or "(no extension)"
        by_extension[key] = by_extension.get(key, 0) + 1

    largest_files = sorted(files, key=lambda f: f.size, reverse=True)[:largest]

    return FileStats(
        total_files=len(files),
        total_bytes=total_bytes,
        by_extension=by_extension,
        largest_files=[SizedPath(path=f.rel_path, size=f.size) for f in largest_files],
        priority_breakdown=priority_breakdown(files),
    )
