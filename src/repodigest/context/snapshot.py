"""Project snapshot construction - the single entry point for a scan."""

from __future__ import annotations

import codecs
import logging
import time
from pathlib import Path
from typing import Callable

from repodigest.config import CONFIG_FILE_NAMES, DigestConfig
from repodigest.context.models import ProjectSnapshot
from repodigest.context.sampler import FileReader, read_utf8, sample_files
from repodigest.scanner.classifier import detect_entry_points
from repodigest.scanner.models import FileRecord
from repodigest.scanner.tree import project_tree_string
from repodigest.scanner.walker import collect_file_stats, walk_directory
from repodigest.stack.detector import detect_stack
from repodigest.stack.rules import is_manifest_file

logger = logging.getLogger("repodigest.snapshot")


def build_project_snapshot(
    project_path: str | Path,
    config: DigestConfig | None = None,
    read_file: FileReader = read_utf8,
) -> ProjectSnapshot:
    """Scan a project directory into a ProjectSnapshot.

    Raises ScanError if the project path cannot be scanned at all. Every
    other filesystem failure is absorbed by the component that meets it.
    """
    config = config or DigestConfig()
    start_time = time.time()
    root = Path(project_path).resolve()

    walk = walk_directory(root, config.walker)
    files = walk.files
    logger.debug("Walked %d files under %s", len(files), root)

    config_files = read_capped_files(
        files, lambda p: Path(p).name in CONFIG_FILE_NAMES, config.walker.config_file_cap_bytes
    )
    dep_files = read_capped_files(files, is_manifest_file, config.walker.config_file_cap_bytes)

    stack = detect_stack(files, dep_files, root.name, config.stack)
    samples = sample_files(files, config.sampler, config.skeleton, read_file=read_file)
    logger.debug(
        "Sampled %d files, %d/%d bytes",
        len(samples),
        samples.summary.budget_used_bytes,
        samples.summary.budget_bytes,
    )

    return ProjectSnapshot(
        project_path=str(root),
        project_name=root.name,
        tree=walk.tree,
        tree_text=project_tree_string(walk.tree, limit=config.walker.tree_char_limit),
        files=files,
        stats=collect_file_stats(files),
        stack=stack,
        config_files=config_files,
        dep_files=dep_files,
        entry_points=detect_entry_points(files, config.walker.max_entry_points),
        samples=samples,
        scan_time_ms=round((time.time() - start_time) * 1000, 1),
    )


def read_capped_files(
    files: list[FileRecord],
    predicate: Callable[[str], bool],
    cap: int,
) -> dict[str, str]:
    """Read at most `cap` bytes of each file matching `predicate`.

    A multi-byte character cut by the cap is dropped rather than replaced.
    Keys are relative paths in enumeration order. Unreadable files are left out.
    """
    result: dict[str, str] = {}
    for f in files:
        if not predicate(f.rel_path):
            continue
        try:
            with open(f.path, "rb") as fh:
                data = fh.read(cap)
        except OSError as e:
            logger.debug("Cannot read %s: %s", f.rel_path, e)
            continue
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        result[f.rel_path] = decoder.decode(data, final=False).replace("\r\n", "\n")
    return result

