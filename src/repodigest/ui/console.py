"""Rich-powered console output for RepoDigest."""

from __future__ import annotations

import logging

from rich.console import Console as RichConsole
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from repodigest import __version__
from repodigest.context.models import ProjectSnapshot, SampleSet
from repodigest.scanner.models import FileNode
from repodigest.scanner.tree import format_bytes
from repodigest.stack.models import StackProfile


class Console:
    """Terminal output for RepoDigest using Rich."""

    def __init__(self, stderr: bool = False) -> None:
        self.console = RichConsole(stderr=stderr)

    def banner(self) -> None:
        """Show the RepoDigest banner."""
        self.console.print(
            Panel(
                f"[bold cyan]RepoDigest[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Budgeted, priority-aware repository digests[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def show_stats(self, snapshot: ProjectSnapshot) -> None:
        """Display file statistics in a table."""
        stats = snapshot.stats
        table = Table(title=f"Project Statistics: {snapshot.project_name}", border_style="cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right", style="cyan")

        table.add_row("Files", str(stats.total_files))
        table.add_row("Total size", format_bytes(stats.total_bytes))
        table.add_row("Entry points", str(len(snapshot.entry_points)))
        for tier, count in stats.priority_breakdown.items():
            table.add_row(f"  {tier.upper()} files", str(count))

        if stats.by_extension:
            table.add_section()
            ranked = sorted(stats.by_extension.items(), key=lambda kv: (-kv[1], kv[0]))
            for ext, count in ranked[:10]:
                table.add_row(f"  {ext}", str(count))

        self.console.print(table)

    def show_stack(self, stack: StackProfile) -> None:
        """Display detected languages, frameworks and services."""
        table = Table(title="Technology Stack", border_style="cyan")
        table.add_column("Language", style="bold")
        table.add_column("Files", justify="right")
        table.add_column("Share", justify="right", style="cyan")
        for lang in stack.languages:
            table.add_row(lang.name, str(lang.file_count), f"{lang.percentage:.1f}%")
        self.console.print(table)

        if stack.frameworks:
            self.console.print(f"[bold]Frameworks:[/bold] {', '.join(stack.frameworks)}")

        flags = {
            "monorepo": stack.is_monorepo,
            "database": stack.has_database,
            "infrastructure": stack.has_infrastructure,
            "tests": stack.has_tests,
        }
        self.console.print(
            "[bold]Flags:[/bold] "
            + ", ".join(f"{name}={'yes' if value else 'no'}" for name, value in flags.items())
        )

        if stack.services:
            tree = Tree("[bold cyan]Services[/bold cyan]")
            for svc in stack.services:
                tree.add(
                    f"[bold]{svc.name}[/bold] [dim]({svc.type.value}, "
                    f"{svc.language or 'unknown'})[/dim] at [cyan]{svc.path}[/cyan]"
                )
            self.console.print(tree)

    def show_samples(self, samples: SampleSet) -> None:
        """Display the sampled files with their tier, form and size."""
        summary = samples.summary
        table = Table(title="Sampled Files", border_style="cyan")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Path")
        table.add_column("Tier", justify="center")
        table.add_column("Form", justify="center")
        table.add_column("Size", justify="right", style="cyan")

        tier_colors = {"P0": "red", "P1": "yellow", "P2": "dim"}
        for i, sample in enumerate(samples.samples, 1):
            color = tier_colors.get(sample.tier.value, "white")
            table.add_row(
                str(i),
                sample.path + (" [dim](test)[/dim]" if sample.is_test else ""),
                f"[{color}]{sample.tier.value}[/{color}]",
                sample.representation.value,
                format_bytes(sample.size),
            )
        self.console.print(table)
        self.console.print(
            f"Budget: {format_bytes(summary.budget_used_bytes)} / "
            f"{format_bytes(summary.budget_bytes)} ({summary.budget_used_pct:.0f}%), "
            f"{summary.dropped_over_budget} dropped, {summary.skipped_tests} tests capped, "
            f"{summary.skipped_oversized} oversized, "
            f"{summary.read_failures} unreadable"
        )

    def show_tree(self, root: FileNode, max_entries: int = 200) -> None:
        """Display the directory tree."""
        tree = Tree(f"[bold cyan]{root.name}/[/bold cyan]")
        remaining = [max_entries]

        def _add(node: FileNode, parent: Tree) -> None:
            for child in node.children:
                if remaining[0] <= 0:
                    return
                remaining[0] -= 1
                if child.is_dir:
                    _add(child, parent.add(f"[bold]{child.name}/[/bold]"))
                else:
                    parent.add(f"{child.name} [dim]{format_bytes(child.size or 0)}[/dim]")

        _add(root, tree)
        self.console.print(tree)


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through Rich; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=RichConsole(stderr=True), show_path=False)],
        force=True,
    )
