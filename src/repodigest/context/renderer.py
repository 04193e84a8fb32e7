"""Context rendering - serializes a ProjectSnapshot into sectioned Markdown."""

from __future__ import annotations

import re
from pathlib import PurePosixPath

from repodigest.context.models import ProjectSnapshot, SourceSample
from repodigest.scanner.classifier import classify
from repodigest.scanner.tree import format_bytes

TOP_EXTENSIONS = 10


def render_project_context(snapshot: ProjectSnapshot) -> str:
    """Render the snapshot as Markdown for an LLM prompt.

    Output is a pure function of the snapshot. Sample tier tags come from
    the same classifier the sampler used, so labels match selection.
    """
    tree_text = snapshot.tree_text.rstrip("\n")
    tree_fence = _fence(tree_text)
    sections = [
        f"## Project Structure: {snapshot.project_name}",
        "",
        "### File Tree",
        tree_fence,
        tree_text,
        tree_fence,
        "",
        "### Statistics",
        _render_stats(snapshot),
        "",
        "### Technology Stack",
        _render_stack(snapshot),
        "",
        "### Services",
        _render_services(snapshot),
        "",
        "### File Types",
        _render_extensions(snapshot),
        "",
        "## Configuration Files",
        _render_files(snapshot.config_files) or "_No configuration files detected_",
        "",
        "## Dependencies",
        _render_files(snapshot.dep_files) or "_No dependency files detected_",
        "",
        "## Source Code Samples",
        "\n\n".join(render_sample(s) for s in snapshot.samples.samples)
        or "_No source code samples available_",
    ]
    return "\n".join(sections) + "\n"


def render_sample(sample: SourceSample) -> str:
    """A labeled, fenced block for one sample."""
    tier = classify(sample.path).value
    lang = _fence_language(sample.path)
    content = sample.content.rstrip()
    fence = _fence(content)
    return f"### {sample.path} [{tier}|{sample.representation.value}]\n{fence}{lang}\n{content}\n{fence}"


def _render_stats(snapshot: ProjectSnapshot) -> str:
    stats = snapshot.stats
    summary = snapshot.samples.summary
    breakdown = stats.priority_breakdown
    return "\n".join([
        f"- Total files: {stats.total_files}",
        f"- Total size: {format_bytes(stats.total_bytes)}",
        f"- Entry points: {', '.join(snapshot.entry_points) or 'none detected'}",
        f"- Priority breakdown: P0 {breakdown.get('p0', 0)}, "
        f"P1 {breakdown.get('p1', 0)}, P2 {breakdown.get('p2', 0)}",
        f"- Samples: {len(snapshot.samples)} "
        f"(P0 {summary.p0_count}, P1 {summary.p1_count}, P2 {summary.p2_count}; "
        f"full {summary.full_count}, skeletal {summary.skeletal_count})",
        f"- Budget used: {format_bytes(summary.budget_used_bytes)} of "
        f"{format_bytes(summary.budget_bytes)} ({summary.budget_used_pct:.0f}%)",
    ])


def _render_stack(snapshot: ProjectSnapshot) -> str:
    stack = snapshot.stack
    languages = ", ".join(
        f"{lang.name} ({lang.percentage:.1f}%, {lang.file_count} files)" for lang in stack.languages
    )
    return "\n".join([
        f"- Languages: {languages or 'none detected'}",
        f"- Frameworks & tools: {', '.join(stack.frameworks) or 'none detected'}",
        f"- Monorepo: {_yes_no(stack.is_monorepo)}",
        f"- Database: {_yes_no(stack.has_database)}",
        f"- Infrastructure: {_yes_no(stack.has_infrastructure)}",
        f"- Tests: {_yes_no(stack.has_tests)}",
    ])


def _render_services(snapshot: ProjectSnapshot) -> str:
    if not snapshot.stack.services:
        return "_No services detected_"
    return "\n".join(
        f"- {svc.name} ({svc.type.value}, {svc.language or 'unknown language'}): {svc.path}"
        for svc in snapshot.stack.services
    )


def _render_extensions(snapshot: ProjectSnapshot) -> str:
    ranked = sorted(snapshot.stats.by_extension.items(), key=lambda kv: (-kv[1], kv[0]))
    return "\n".join(f"  {ext}: {count}" for ext, count in ranked[:TOP_EXTENSIONS])


def _render_files(files: dict[str, str]) -> str:
    blocks = []
    for path, content in files.items():
        content = content.rstrip()
        fence = _fence(content)
        blocks.append(f"### {path}\n{fence}\n{content}\n{fence}")
    return "\n\n".join(blocks)


def _fence(content: str) -> str:
    """A backtick fence longer than any backtick run inside `content`."""
    longest = max((len(run) for run in re.findall(r"`+", content)), default=0)
    return "`" * max(3, longest + 1)


def _fence_language(path: str) -> str:
    return PurePosixPath(path).suffix.lstrip(".") or "text"


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"
