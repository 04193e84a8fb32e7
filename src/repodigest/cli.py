"""Command-line interface for RepoDigest."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.markup import escape

from repodigest import __version__
from repodigest.config import (
    DigestConfig,
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from repodigest.exceptions import RepoDigestError
from repodigest.ui.console import Console, configure_logging

# Status and tables go to stderr so stdout carries only the digest.
console = Console(stderr=True)


def _get_project_root(path: str) -> Path:
    """Resolve the project root or error."""
    root = Path(path).resolve()
    if not root.exists():
        console.error(f"Path does not exist: {path}")
        sys.exit(1)
    return root


def _load_config(root: Path) -> DigestConfig:
    try:
        return load_config(root)
    except RepoDigestError as e:
        console.error(escape(str(e)))
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="repodigest")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """RepoDigest - budgeted, priority-aware repository digests for LLM prompts."""
    configure_logging(verbose)


# =====================================================================
# scan
# =====================================================================


@main.command()
@click.argument("path", default=".", type=click.Path())
@click.option("--budget", "-b", type=int, default=None, help="Sample budget in bytes")
@click.option("--depth", "-d", type=int, default=None, help="Maximum directory depth")
@click.option("--max-tests", type=int, default=None, help="Maximum test files to sample")
@click.option("--no-tree", is_flag=True, help="Omit the file tree from the digest")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write the digest to a file")
def scan(
    path: str,
    budget: int | None,
    depth: int | None,
    max_tests: int | None,
    no_tree: bool,
    output: str | None,
):
    """Scan a repository and print its Markdown digest."""
    from repodigest.context.snapshot import build_project_snapshot

    root = _get_project_root(path)
    config = _load_config(root)

    if budget is not None:
        if budget < 0:
            console.error("--budget must not be negative")
            sys.exit(1)
        config.sampler.context_budget_bytes = budget
    if depth is not None:
        config.walker.max_depth = depth
    if max_tests is not None:
        config.sampler.max_test_files = max_tests

    try:
        snapshot = build_project_snapshot(root, config)
    except RepoDigestError as e:
        console.error(escape(str(e)))
        sys.exit(1)

    failures = snapshot.samples.summary.read_failures
    if failures:
        console.warning(f"Skipped {failures} unreadable file(s)")

    if no_tree:
        snapshot = snapshot.model_copy(update={"tree_text": "(omitted)"})

    rendered = snapshot.render()
    if output:
        Path(output).write_text(rendered, encoding="utf-8")
        console.success(
            f"Wrote digest of {snapshot.project_name} to {output} "
            f"({len(snapshot.samples)} samples, {snapshot.scan_time_ms:.0f}ms)"
        )
    else:
        click.echo(rendered, nl=False)


# =====================================================================
# stats
# =====================================================================


@main.command()
@click.argument("path", default=".", type=click.Path())
@click.option("--samples/--no-samples", default=True, help="Show the sampled file table")
@click.option("--tree", "show_tree", is_flag=True, help="Also show the directory tree")
def stats(path: str, samples: bool, show_tree: bool):
    """Show file statistics, detected stack and sampling decisions."""
    from repodigest.context.snapshot import build_project_snapshot

    root = _get_project_root(path)
    config = _load_config(root)

    try:
        snapshot = build_project_snapshot(root, config)
    except RepoDigestError as e:
        console.error(escape(str(e)))
        sys.exit(1)

    console.banner()
    console.show_stats(snapshot)
    console.show_stack(snapshot.stack)
    if samples:
        console.show_samples(snapshot.samples)
    if show_tree:
        console.show_tree(snapshot.tree)
    console.info(f"Scanned in {snapshot.scan_time_ms:.0f}ms")


# =====================================================================
# config
# =====================================================================


@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=".", type=click.Path(), help="Project root path")
def config_cmd(action: str, key: str | None, value: str | None, path: str):
    """Manage RepoDigest configuration.

    Keys use dot notation, e.g. sampler.context_budget_bytes.
    """
    root = _get_project_root(path)
    config = _load_config(root)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(), indent=2))

    elif action == "get":
        if not key:
            console.error("Key required for 'get'")
            sys.exit(1)
        try:
            data = get_config_value(config, key)
        except KeyError:
            console.error(f"Key not found: {key}")
            sys.exit(1)
        console.console.print(f"{key} = {data}")

    elif action == "set":
        if not key or value is None:
            console.error("Key and value required for 'set'")
            sys.exit(1)
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            parsed = value
        try:
            config = set_config_value(config, key, parsed)
        except KeyError:
            console.error(f"Key not found: {key}")
            sys.exit(1)
        except ValidationError as e:
            console.error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
            sys.exit(1)
        save_config(root, config)
        console.success(f"Set {key} = {parsed}")


if __name__ == "__main__":
    main()
