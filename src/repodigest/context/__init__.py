"""Budgeted context assembly.

Selects, reduces and renders repository files into a digest that never
exceeds a byte budget (design documents and schemas excepted).

Usage:
    from repodigest.context import build_project_snapshot

    snapshot = build_project_snapshot("path/to/repo")
    print(snapshot.render())
"""

from repodigest.context.models import ProjectSnapshot, SampleSet, SampleSummary, SourceSample
from repodigest.context.renderer import render_project_context
from repodigest.context.sampler import order_candidates, sample_files
from repodigest.context.snapshot import build_project_snapshot

__all__ = [
    "ProjectSnapshot",
    "SampleSet",
    "SampleSummary",
    "SourceSample",
    "build_project_snapshot",
    "order_candidates",
    "render_project_context",
    "sample_files",
]
