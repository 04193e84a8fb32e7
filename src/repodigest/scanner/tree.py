"""Text rendering of the display tree."""

from __future__ import annotations

from repodigest.scanner.models import FileNode


def format_bytes(size: int) -> str:
    """Human-readable byte count (B, KB, MB, GB)."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    if size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    return f"{size / (1024 * 1024 * 1024):.1f} GB"


def project_tree_string(root: FileNode, limit: int | None = None) -> str:
    """Render the tree with box-drawing connectors, optionally capped at `limit` chars."""
    lines = [f"{root.name}/"]

    def _generate_lines_recursive(node: FileNode, prefix: str) -> None:
        for i, child in enumerate(node.children):
            is_last = i == len(node.children) - 1
            connector = "└── " if is_last else "├── "
            label = child.name
            if child.is_dir:
                label += "/"
            elif child.size is not None:
                label += f"  ({format_bytes(child.size)})"
            lines.append(f"{prefix}{connector}{label}")

            if child.children:
                _generate_lines_recursive(child, prefix + ("    " if is_last else "│   "))

    _generate_lines_recursive(root, "")
    text = "\n".join(lines) + "\n"
    if limit is not None:
        text = text[:limit]
    return text
