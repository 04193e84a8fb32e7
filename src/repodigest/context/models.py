"""Data models for sampled context and the project snapshot."""

from __future__ import annotations

from dataclasses import dataclass, replace

from pydantic import BaseModel, ConfigDict, Field

from repodigest.scanner.models import FileNode, FileRecord, FileStats, PriorityTier, Representation
from repodigest.stack.models import StackProfile


def byte_size(text: str) -> int:
    """Size of text in bytes once encoded as UTF-8."""
    return len(text.encode("utf-8"))


class SourceSample(BaseModel):
    """A file selected into the digest."""

    model_config = ConfigDict(frozen=True)

    path: str  # relative to the scan root
    tier: PriorityTier
    representation: Representation
    content: str
    is_test: bool = False

    @property
    def size(self) -> int:
        return byte_size(self.content)


class SampleSummary(BaseModel):
    """Counters describing one sampling run."""

    p0_count: int = 0
    p1_count: int = 0
    p2_count: int = 0
    full_count: int = 0
    skeletal_count: int = 0
    test_count: int = 0
    budget_used_bytes: int = 0
    budget_bytes: int = 0
    candidates: int = 0
    dropped_over_budget: int = 0
    skipped_tests: int = 0
    skipped_oversized: int = 0
    read_failures: int = 0

    @property
    def budget_used_pct(self) -> float:
        return round(self.budget_used_bytes / max(self.budget_bytes, 1) * 100, 1)


class SampleSet(BaseModel):
    """The ordered samples chosen by the budget sampler."""

    samples: list[SourceSample] = Field(default_factory=list)
    summary: SampleSummary = Field(default_factory=SampleSummary)

    def __len__(self) -> int:
        return len(self.samples)

    def paths(self) -> list[str]:
        return [s.path for s in self.samples]


@dataclass(frozen=True)
class BudgetLedger:
    """Bytes and test files consumed so far in one sampling run.

    Immutable: every admission returns a new ledger.
    """

    budget: int
    used_bytes: int = 0
    test_files: int = 0

    @property
    def exhausted(self) -> bool:
        return self.used_bytes >= self.budget

    def fits(self, size: int) -> bool:
        return self.used_bytes + size <= self.budget

    def charge(self, size: int, is_test: bool = False) -> BudgetLedger:
        return replace(
            self,
            used_bytes=self.used_bytes + size,
            test_files=self.test_files + (1 if is_test else 0),
        )


class ProjectSnapshot(BaseModel):
    """Everything known about one scanned project."""

    model_config = ConfigDict(frozen=True)

    project_path: str
    project_name: str
    tree: FileNode
    tree_text: str = ""
    files: list[FileRecord] = Field(default_factory=list)
    stats: FileStats = Field(default_factory=FileStats)
    stack: StackProfile = Field(default_factory=StackProfile)
    config_files: dict[str, str] = Field(default_factory=dict)
    dep_files: dict[str, str] = Field(default_factory=dict)
    entry_points: list[str] = Field(default_factory=list)
    samples: SampleSet = Field(default_factory=SampleSet)
    scan_time_ms: float = 0.0

    def render(self) -> str:
        """Render the snapshot as the Markdown context for an LLM prompt."""
        from repodigest.context.renderer import render_project_context

        return render_project_context(self)
