"""Configuration management for RepoDigest."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from repodigest.exceptions import ConfigError

REPODIGEST_DIR = ".repodigest"
CONFIG_FILE = "config.json"

# Sampling
CONTEXT_BUDGET_BYTES = 100_000
FULL_READ_THRESHOLD_BYTES = 4 * 1024
MAX_TEST_FILES = 3
MAX_SAMPLE_FILE_BYTES = 500 * 1024

# Walking / rendering
MAX_DEPTH = 8
TREE_CHAR_LIMIT = 6000
CONFIG_FILE_CAP_BYTES = 8 * 1024
MAX_ENTRY_POINTS = 8
EXAMPLE_ENV_FILE = ".env.example"

# Skeletons
MAX_IMPORT_LINES = 10
FALLBACK_HEAD_LINES = 20
FALLBACK_TAIL_LINES = 5
FALLBACK_MIN_LINES = 25

# Stack detection
MAX_SERVICE_DEPTH = 2
TOP_LANGUAGES = 8

IGNORED_DIRS: frozenset[str] = frozenset({
    "node_modules", ".git", "dist", "build", ".next", "__pycache__", "target",
    "vendor", ".turbo", ".cache", "coverage", ".nyc_output", "out", ".svelte-kit",
    "venv", ".venv", "env", ".env", ".expo", "android", "ios",
})

CONFIG_FILE_NAMES: frozenset[str] = frozenset({
    "tsconfig.json", "tsconfig.base.json", "jsconfig.json",
    "docker-compose.yml", "docker-compose.yaml", "Dockerfile", "Makefile",
    "setup.cfg", ".eslintrc.json", ".eslintrc.js", ".eslintrc.cjs",
    "eslint.config.js", "eslint.config.mjs", ".prettierrc", ".prettierrc.json",
    "prettier.config.js", "vite.config.ts", "vite.config.js",
    "webpack.config.js", "webpack.config.ts", "next.config.js", "next.config.ts",
    "nuxt.config.ts", "svelte.config.js", "tailwind.config.js", "tailwind.config.ts",
    "jest.config.js", "jest.config.ts", "vitest.config.ts", ".babelrc",
    "babel.config.js", "babel.config.json", ".env.example", "compose.yml",
    "compose.yaml", "kubernetes.yaml", "k8s.yaml", "app.config.ts", "app.config.js",
})

MANIFEST_FILE_NAMES: frozenset[str] = frozenset({
    "package.json", "requirements.txt", "Pipfile", "pyproject.toml", "setup.py",
    "Cargo.toml", "go.mod", "pom.xml", "build.gradle", "build.gradle.kts",
    "Gemfile", "composer.json", "mix.exs", "stack.yaml", "project.clj",
    "deps.edn", "pubspec.yaml",
})

# Manifests recognised by suffix rather than exact name
MANIFEST_SUFFIXES: tuple[str, ...] = (".csproj", ".fsproj", ".cabal")


class WalkerConfig(BaseModel):
    """Directory traversal configuration."""

    max_depth: int = MAX_DEPTH
    ignored_dirs: list[str] = Field(default_factory=lambda: sorted(IGNORED_DIRS))
    allowed_dotfiles: list[str] = Field(default_factory=lambda: [EXAMPLE_ENV_FILE])
    tree_char_limit: int = TREE_CHAR_LIMIT
    config_file_cap_bytes: int = CONFIG_FILE_CAP_BYTES
    max_entry_points: int = MAX_ENTRY_POINTS


class SamplerConfig(BaseModel):
    """Budget sampler configuration."""

    context_budget_bytes: int = CONTEXT_BUDGET_BYTES
    full_read_threshold_bytes: int = FULL_READ_THRESHOLD_BYTES
    max_test_files: int = MAX_TEST_FILES
    max_file_size_bytes: int = MAX_SAMPLE_FILE_BYTES  # larger P1/P2 files are never read


class SkeletonConfig(BaseModel):
    """Skeleton extraction configuration."""

    max_import_lines: int = MAX_IMPORT_LINES
    fallback_head_lines: int = FALLBACK_HEAD_LINES
    fallback_tail_lines: int = FALLBACK_TAIL_LINES
    fallback_min_lines: int = FALLBACK_MIN_LINES


class StackConfig(BaseModel):
    """Stack detection configuration."""

    max_service_depth: int = MAX_SERVICE_DEPTH
    top_languages: int = TOP_LANGUAGES


class DigestConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    root_path: str = "."
    walker: WalkerConfig = Field(default_factory=WalkerConfig)
    sampler: SamplerConfig = Field(default_factory=SamplerConfig)
    skeleton: SkeletonConfig = Field(default_factory=SkeletonConfig)
    stack: StackConfig = Field(default_factory=StackConfig)


def get_repodigest_dir(root: Path) -> Path:
    """Get the .repodigest directory for a project root."""
    return root / REPODIGEST_DIR


def load_config(root: Path) -> DigestConfig:
    """Load configuration from .repodigest/config.json, or defaults if absent."""
    config_path = get_repodigest_dir(root) / CONFIG_FILE
    if not config_path.exists():
        return DigestConfig(name=root.name, root_path=str(root))
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        return DigestConfig(**data)
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


def save_config(root: Path, config: DigestConfig) -> None:
    """Save configuration to .repodigest/config.json."""
    rd_dir = get_repodigest_dir(root)
    rd_dir.mkdir(parents=True, exist_ok=True)
    config_path = rd_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2), encoding="utf-8")


def get_config_value(config: DigestConfig, key: str) -> Any:
    """Read a nested config value using dot notation (e.g., 'sampler.max_test_files')."""
    value: Any = config.model_dump()
    for part in key.split("."):
        if not isinstance(value, dict) or part not in value:
            raise KeyError(f"Invalid config key: {key}")
        value = value[part]
    return value


def set_config_value(config: DigestConfig, key: str, value: Any) -> DigestConfig:
    """Set a nested config value using dot notation (e.g., 'sampler.context_budget_bytes')."""
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    return DigestConfig(**data)
