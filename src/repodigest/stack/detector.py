"""Stack detection - languages, frameworks and services from files and manifests."""

from __future__ import annotations

import re
from collections import Counter
from pathlib import PurePosixPath

from repodigest.config import StackConfig
from repodigest.scanner.classifier import classify, is_test_file
from repodigest.scanner.models import FileRecord, PriorityTier
from repodigest.stack.models import LanguageShare, Service, ServiceType, StackProfile
from repodigest.stack.rules import (
    BACKEND_DIR_PATTERN,
    COMPILED_FRAMEWORK_RULES,
    COMPILED_INFRA_FILE_RULES,
    COMPILED_OBSERVABILITY_RULES,
    DATABASE_LABELS,
    ECOSYSTEM_DEFAULT_ROLE,
    ECOSYSTEM_LANGUAGE,
    FRONTEND_DIR_PATTERN,
    INFRA_DIR_PATTERN,
    LANGUAGE_BY_EXTENSION,
    LIBRARY_DIR_PATTERN,
    MOBILE_DIR_PATTERN,
    MONOREPO_CONTENT_MARKERS,
    MONOREPO_FILES,
    NODE_BACKEND_LABELS,
    NODE_FRONTEND_LABELS,
    NODE_MOBILE_LABELS,
    SERVICE_DIR_BLACKLIST,
    is_manifest_file,
    manifest_ecosystem,
)

# Not counted as source when computing language shares
_NON_SOURCE_LANGUAGES = {"SQL"}


def detect_stack(
    files: list[FileRecord],
    manifests: dict[str, str],
    project_name: str = "",
    config: StackConfig | None = None,
) -> StackProfile:
    """Infer the technology stack of a project.

    Args:
        files: Every walked file, in enumeration order.
        manifests: Relative manifest path -> (possibly truncated) text content.
        project_name: Used to name the root service of a single-project repo.
        config: Service depth and language count limits.
    """
    config = config or StackConfig()
    manifest_paths = [f.rel_path for f in files if is_manifest_file(f.rel_path)]

    frameworks = detect_frameworks(manifests)
    for label in detect_infra_markers(files):
        if label not in frameworks:
            frameworks.append(label)

    services = detect_services(files, manifests, project_name, config.max_service_depth)

    return StackProfile(
        languages=detect_languages(files, config.top_languages),
        frameworks=frameworks,
        services=services,
        manifests=manifest_paths,
        is_monorepo=_is_monorepo(files, manifests, services, manifest_paths),
        has_database=_has_database(files, frameworks),
        has_infrastructure=_has_infrastructure(files),
        has_tests=any(is_test_file(f.rel_path) for f in files),
    )


def detect_languages(files: list[FileRecord], top: int) -> list[LanguageShare]:
    """Top languages by source file count, with their percentage of source files."""
    counts: Counter[str] = Counter()
    for f in files:
        language = LANGUAGE_BY_EXTENSION.get(f.extension)
        if language and language not in _NON_SOURCE_LANGUAGES:
            counts[language] += 1

    total = sum(counts.values())
    if not total:
        return []

    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[:top]
    return [
        LanguageShare(name=name, file_count=count, percentage=round(count / total * 100, 1))
        for name, count in ranked
    ]


def detect_frameworks(manifests: dict[str, str]) -> list[str]:
    """Framework and tool labels declared by manifests, in first-seen order."""
    found: list[str] = []
    for path in sorted(manifests):
        for label in _manifest_labels(path, manifests[path]):
            if label not in found:
                found.append(label)
    return found


def detect_infra_markers(files: list[FileRecord]) -> list[str]:
    """Infra, CI and cloud labels inferred from file names."""
    found: list[str] = []
    for f in files:
        for pattern, label in COMPILED_INFRA_FILE_RULES:
            if label not in found and pattern.search(f.rel_path):
                found.append(label)
    return found


def _manifest_labels(path: str, content: str) -> list[str]:
    ecosystem = manifest_ecosystem(path)
    rules = COMPILED_FRAMEWORK_RULES.get(ecosystem, []) if ecosystem else []
    labels = [label for pattern, label in rules if pattern.search(content)]
    labels.extend(label for pattern, label in COMPILED_OBSERVABILITY_RULES if pattern.search(content))
    return labels


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

def detect_services(
    files: list[FileRecord],
    manifests: dict[str, str],
    project_name: str = "",
    max_depth: int = 2,
) -> list[Service]:
    """Group manifests by their directory and classify each directory's role.

    Only directories within `max_depth` segments of the root are considered,
    and none whose path contains a blacklisted segment. The root directory
    counts as a service only when no nested service exists.
    """
    manifests_by_dir: dict[str, list[str]] = {}
    for f in files:
        if not is_manifest_file(f.rel_path):
            continue
        parent = PurePosixPath(f.rel_path).parent.as_posix()
        manifests_by_dir.setdefault(parent, []).append(f.rel_path)

    services: list[Service] = []
    for directory in sorted(d for d in manifests_by_dir if d != "."):
        parts = directory.split("/")
        if len(parts) > max_depth:
            continue
        if any(p.lower() in SERVICE_DIR_BLACKLIST for p in parts):
            continue
        name = parts[-1]
        if INFRA_DIR_PATTERN.search(name.lower()):
            continue
        paths = manifests_by_dir[directory]
        services.append(
            Service(
                name=name,
                path=directory,
                type=classify_service_role(name, paths, manifests),
                language=_service_language(directory, files, paths),
            )
        )

    if not services and "." in manifests_by_dir:
        paths = manifests_by_dir["."]
        name = project_name or "root"
        services.append(
            Service(
                name=name,
                path=".",
                type=classify_service_role(name, paths, manifests),
                language=_service_language(".", files, paths),
            )
        )

    return services


def classify_service_role(
    dir_name: str, manifest_paths: list[str], manifests: dict[str, str]
) -> ServiceType:
    """Coarse role of a service directory.

    Library names win over everything else so shared packages are never
    reported as deployable services; then mobile, frontend and backend name
    families; then the manifest-type default.
    """
    name = dir_name.lower()
    if LIBRARY_DIR_PATTERN.search(name):
        return ServiceType.LIBRARY
    if MOBILE_DIR_PATTERN.search(name):
        return ServiceType.MOBILE
    if FRONTEND_DIR_PATTERN.search(name):
        return ServiceType.FRONTEND
    if BACKEND_DIR_PATTERN.search(name):
        return ServiceType.BACKEND
    return _manifest_default_role(manifest_paths, manifests)


def _manifest_default_role(manifest_paths: list[str], manifests: dict[str, str]) -> ServiceType:
    for path in manifest_paths:
        ecosystem = manifest_ecosystem(path)
        if ecosystem is None:
            continue
        if ecosystem == "node":
            labels = set(_manifest_labels(path, manifests.get(path, "")))
            if labels & NODE_MOBILE_LABELS:
                return ServiceType.MOBILE
            if labels & NODE_FRONTEND_LABELS:
                return ServiceType.FRONTEND
            if labels & NODE_BACKEND_LABELS:
                return ServiceType.BACKEND
            continue
        return ServiceType(ECOSYSTEM_DEFAULT_ROLE.get(ecosystem, "unknown"))
    return ServiceType.UNKNOWN


def _service_language(directory: str, files: list[FileRecord], manifest_paths: list[str]) -> str:
    """Dominant source language under a directory, else the manifest's language."""
    prefix = "" if directory == "." else directory + "/"
    counts: Counter[str] = Counter()
    for f in files:
        if not f.rel_path.startswith(prefix):
            continue
        language = LANGUAGE_BY_EXTENSION.get(f.extension)
        if language and language not in _NON_SOURCE_LANGUAGES:
            counts[language] += 1
    if counts:
        return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[0][0]

    for path in manifest_paths:
        ecosystem = manifest_ecosystem(path)
        if ecosystem:
            return ECOSYSTEM_LANGUAGE.get(ecosystem, "")
    return ""


# ---------------------------------------------------------------------------
# Project-wide flags
# ---------------------------------------------------------------------------

def _is_monorepo(
    files: list[FileRecord],
    manifests: dict[str, str],
    services: list[Service],
    manifest_paths: list[str],
) -> bool:
    if len(services) >= 2 or len(manifest_paths) >= 3:
        return True
    if any(f.name in MONOREPO_FILES for f in files):
        return True
    for path, content in manifests.items():
        marker = MONOREPO_CONTENT_MARKERS.get(PurePosixPath(path).name)
        if marker and re.search(marker, content, re.MULTILINE):
            return True
    return False


def _has_database(files: list[FileRecord], frameworks: list[str]) -> bool:
    if any(label in DATABASE_LABELS for label in frameworks):
        return True
    for f in files:
        if classify(f.rel_path) != PriorityTier.P0:
            continue
        if f.extension in (".sql", ".prisma") or "migration" in f.rel_path.lower():
            return True
    return False


def _has_infrastructure(files: list[FileRecord]) -> bool:
    if detect_infra_markers(files):
        return True
    for f in files:
        parts = f.rel_path.lower().split("/")[:-1]
        if any(INFRA_DIR_PATTERN.search(p) for p in parts):
            return True
    return False
