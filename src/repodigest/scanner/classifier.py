"""Path-based file classification: relevance tier, test files, entry points.

Everything here is a pure function of the path string, so the sampler and
the renderer always agree on a file's tier.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

from repodigest.scanner.models import FileRecord, PriorityTier

# Base names (without extension) starting with these are design documents
P0_DOC_STEMS: tuple[str, ...] = (
    "architecture",
    "adr",
    "design",
    "decision",
    "rfc",
    "domain-model",
    "data-model",
    "erd",
)

_P0_DOC_PATTERN = re.compile(
    r"^(" + "|".join(re.escape(s) for s in P0_DOC_STEMS) + r")([-_.\s\d]|$)"
)

# Directory segments that hold schema migrations
P0_MIGRATION_DIRS: frozenset[str] = frozenset({
    "migrations",
    "migration",
    "migrate",
    "alembic",
    "flyway",
    "liquibase",
    "changelog",
})

# File names that are schema definitions on their own
P0_SCHEMA_FILES: frozenset[str] = frozenset({
    "schema.prisma",
    "schema.graphql",
    "schema.gql",
    "schema.rb",
    "schema.sql",
    "structure.sql",
    "openapi.yaml",
    "openapi.yml",
    "openapi.json",
    "swagger.yaml",
    "swagger.yml",
    "swagger.json",
})

P0_SCHEMA_EXTENSIONS: frozenset[str] = frozenset({".sql", ".prisma", ".graphql", ".gql", ".proto"})

_P1_PATTERN = re.compile(
    r"controller|service|repository|repo$|auth|middleware|handler|guard|"
    r"interceptor|provider|context|resolver|router|routes|gateway|usecase|"
    r"use-case|use_case",
    re.IGNORECASE,
)

TEST_DIRS: frozenset[str] = frozenset({
    "test",
    "tests",
    "__tests__",
    "spec",
    "specs",
    "e2e",
    "cypress",
    "playwright",
    "__mocks__",
    "testing",
})

_TEST_NAME_PATTERN = re.compile(
    r"(\.|_|-)(test|spec|e2e|cy)\.[a-z0-9]+$|^test_.*\.py$|_test\.(go|py|rb|exs)$|"
    r"(Test|Tests|Spec|IT)\.(java|kt|scala|cs|swift)$"
)

ENTRY_POINT_STEMS: frozenset[str] = frozenset({"index", "main", "app", "server", "cli", "start", "entry"})

SOURCE_EXTENSIONS: frozenset[str] = frozenset({
    ".ts", ".tsx", ".js", ".jsx", ".mts", ".mjs", ".cjs", ".py", ".go",
    ".rs", ".java", ".rb", ".php", ".cs", ".cpp", ".c", ".h", ".hpp",
    ".swift", ".kt", ".kts", ".scala", ".vue", ".svelte", ".astro",
    ".ex", ".exs", ".hs", ".clj", ".cljs", ".dart", ".lua", ".sh",
})


def _split(path: str) -> tuple[list[str], str, str]:
    """Split a path into lowercase directory segments, base name and stem."""
    posix = PurePosixPath(path.replace("\\", "/"))
    dirs = [part.lower() for part in posix.parts[:-1]]
    name = posix.name
    stem = name.split(".", 1)[0] if not name.startswith(".") else name
    return dirs, name, stem.lower()


def classify(path: str) -> PriorityTier:
    """Assign a relevance tier from the path alone."""
    dirs, name, stem = _split(path)
    lower_name = name.lower()
    ext = PurePosixPath(lower_name).suffix

    if _P0_DOC_PATTERN.match(stem):
        return PriorityTier.P0
    if lower_name in P0_SCHEMA_FILES or ext in P0_SCHEMA_EXTENSIONS:
        return PriorityTier.P0
    if any(d in P0_MIGRATION_DIRS for d in dirs):
        return PriorityTier.P0

    if _P1_PATTERN.search(name.rsplit(".", 1)[0] if "." in name else name):
        return PriorityTier.P1

    return PriorityTier.P2


def is_test_file(path: str) -> bool:
    """Whether a file lives in a test directory or follows a test naming convention."""
    dirs, name, _ = _split(path)
    if any(d in TEST_DIRS for d in dirs):
        return True
    return bool(_TEST_NAME_PATTERN.search(name))


def is_source_file(path: str) -> bool:
    return PurePosixPath(path.lower()).suffix in SOURCE_EXTENSIONS


def is_entry_point(path: str) -> bool:
    _, name, stem = _split(path)
    return stem in ENTRY_POINT_STEMS and is_source_file(name)


def detect_entry_points(records: list[FileRecord], limit: int) -> list[str]:
    """Relative paths of likely entry points, in enumeration order."""
    return [r.rel_path for r in records if is_entry_point(r.rel_path)][:limit]


def priority_breakdown(records: list[FileRecord]) -> dict[str, int]:
    """Count files per tier."""
    counts = {"p0": 0, "p1": 0, "p2": 0}
    for record in records:
        counts[classify(record.rel_path).value.lower()] += 1
    return counts
