"""Directory walking and path-based file classification."""

from repodigest.scanner.classifier import classify, is_entry_point, is_test_file
from repodigest.scanner.models import FileNode, FileRecord, FileStats, PriorityTier, Representation
from repodigest.scanner.tree import format_bytes, project_tree_string
from repodigest.scanner.walker import WalkResult, collect_file_stats, walk_directory

__all__ = [
    "FileNode",
    "FileRecord",
    "FileStats",
    "PriorityTier",
    "Representation",
    "WalkResult",
    "classify",
    "collect_file_stats",
    "format_bytes",
    "is_entry_point",
    "is_test_file",
    "project_tree_string",
    "walk_directory",
]
