"""Tests for snapshot construction and context rendering."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from repodigest.config import DigestConfig
from repodigest.context.models import SourceSample
from repodigest.context.renderer import render_project_context, render_sample
from repodigest.context.snapshot import build_project_snapshot, read_capped_files
from repodigest.exceptions import ScanError
from repodigest.scanner.models import PriorityTier, Representation
from repodigest.scanner.walker import walk_directory


class TestBuildSnapshot:
    def test_snapshot_fields(self, tmp_project: Path):
        snapshot = build_project_snapshot(tmp_project)

        assert snapshot.project_name == "acme"
        assert snapshot.project_path == str(tmp_project.resolve())
        assert snapshot.stats.total_files == len(snapshot.files) == 19
        assert snapshot.entry_points == [
            "apps/web/src/App.tsx",
            "apps/web/src/index.tsx",
            "services/api/src/server.ts",
        ]
        assert list(snapshot.config_files) == [".env.example", "Dockerfile", "tsconfig.json"]
        assert list(snapshot.dep_files) == [
            "apps/web/package.json",
            "packages/shared/package.json",
            "services/api/package.json",
            "package.json",
        ]
        assert snapshot.tree_text.startswith("acme/\n")
        assert snapshot.stack.is_monorepo
        assert len(snapshot.samples) == 10
        assert snapshot.scan_time_ms >= 0

    def test_config_overrides(self, tmp_project: Path):
        config = DigestConfig()
        config.walker.tree_char_limit = 30
        config.walker.max_entry_points = 1
        config.sampler.context_budget_bytes = 0
        snapshot = build_project_snapshot(tmp_project, config)

        assert len(snapshot.tree_text) == 30
        assert snapshot.entry_points == ["apps/web/src/App.tsx"]
        assert snapshot.samples.paths() == ["db/migrations/2024_init.sql", "docs/ARCHITECTURE.md"]

    def test_snapshot_is_frozen(self, tmp_project: Path):
        snapshot = build_project_snapshot(tmp_project)
        with pytest.raises(ValidationError):
            snapshot.tree_text = "(omitted)"
        copy = snapshot.model_copy(update={"tree_text": "(omitted)"})
        assert copy.tree_text == "(omitted)"
        assert snapshot.tree_text.startswith("acme/")

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(ScanError):
            build_project_snapshot(tmp_path / "missing")

    def test_injected_reader(self, tmp_project: Path):
        snapshot = build_project_snapshot(tmp_project, read_file=lambda path: "// stub\n")
        sql = next(s for s in snapshot.samples.samples if s.path.endswith(".sql"))
        assert sql.content == "// stub\n"

    def test_read_capped_files(self, tmp_project: Path):
        files = walk_directory(tmp_project).files
        capped = read_capped_files(files, lambda p: p.endswith("tsconfig.json"), 5)
        assert capped == {"tsconfig.json": "{\n  \""}

    def test_read_capped_files_cuts_on_bytes(self, tmp_path: Path):
        (tmp_path / "notes.txt").write_bytes("ab\u00e9c".encode("utf-8"))
        files = walk_directory(tmp_path).files
        assert read_capped_files(files, lambda p: True, 3) == {"notes.txt": "ab"}
        assert read_capped_files(files, lambda p: True, 4) == {"notes.txt": "ab\u00e9"}


class TestRenderer:
    def test_sections(self, tmp_project: Path):
        text = build_project_snapshot(tmp_project).render()

        headings = [line for line in text.splitlines() if line.startswith("## ")]
        assert headings == [
            "## Project Structure: acme",
            "## Configuration Files",
            "## Dependencies",
            "## Source Code Samples",
        ]
        for section in ("### File Tree", "### Statistics", "### Technology Stack", "### Services", "### File Types"):
            assert section in text

    def test_statistics_and_stack(self, tmp_project: Path):
        text = build_project_snapshot(tmp_project).render()
        assert "- Total files: 19" in text
        assert "- Entry points: apps/web/src/App.tsx, apps/web/src/index.tsx, services/api/src/server.ts" in text
        assert "- Priority breakdown: P0 2, P1 1, P2 16" in text
        assert "- Languages: TypeScript (100.0%, 10 files)" in text
        assert "- Frameworks & tools: React, Next.js, Express, PostgreSQL, Docker" in text
        assert "- Monorepo: yes" in text
        assert "- web (frontend, TypeScript): apps/web" in text
        assert "- shared (library, TypeScript): packages/shared" in text
        assert "  .ts: 8" in text

    def test_sample_labels(self, tmp_project: Path):
        text = build_project_snapshot(tmp_project).render()
        assert "### db/migrations/2024_init.sql [P0|full]" in text
        assert "### docs/ARCHITECTURE.md [P0|full]" in text
        assert "### services/api/src/auth.service.ts [P1|skel]" in text
        assert "### services/api/src/__tests__/case0.spec.ts [P2|skel]" in text
        assert "case3.spec.ts" not in text.split("## Source Code Samples", 1)[1]
        assert "### apps/web/package.json" in text
        assert "### tsconfig.json" in text

    def test_render_sample(self):
        sample = SourceSample(
            path="db/migrations/1.sql",
            tier=PriorityTier.P0,
            representation=Representation.FULL,
            content="SELECT 1;\n",
        )
        assert render_sample(sample) == "### db/migrations/1.sql [P0|full]\n```sql\nSELECT 1;\n```"

    def test_fence_outgrows_backticks_in_content(self):
        content = "# Usage\n\n```bash\nrepodigest scan .\n```\n"
        sample = SourceSample(
            path="docs/ARCHITECTURE.md", tier=PriorityTier.P0, representation=Representation.FULL, content=content
        )
        assert render_sample(sample) == (
            "### docs/ARCHITECTURE.md [P0|full]\n````md\n" + content.rstrip() + "\n````"
        )

    def test_render_sample_without_extension(self):
        sample = SourceSample(
            path="Makefile", tier=PriorityTier.P2, representation=Representation.SKELETAL, content="all:"
        )
        assert render_sample(sample).startswith("### Makefile [P2|skel]\n```text\n")

    def test_empty_project(self, tmp_path: Path):
        text = render_project_context(build_project_snapshot(tmp_path))
        assert "_No configuration files detected_" in text
        assert "_No dependency files detected_" in text
        assert "_No source code samples available_" in text
        assert "_No services detected_" in text
        assert "- Languages: none detected" in text

    def test_deterministic(self, tmp_project: Path):
        assert build_project_snapshot(tmp_project).render() == build_project_snapshot(tmp_project).render()
