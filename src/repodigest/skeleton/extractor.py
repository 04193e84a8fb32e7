"""Skeleton extraction - lossy structural reduction of source files.

Brace languages go through a small line-scanning automaton driven by a
LanguageProfile:

  TOP           scope whose lines are kept (module level, class bodies)
  IMPORT_BLOCK  inside a multi-line import statement
  TYPE_BLOCK    inside an interface/type declaration, kept verbatim
  MEMBER_BODY   inside a function or method body, elided

The scanner counts braces outside string literals and comments. It is
a heuristic, not a parser: output may not compile, but declarations and
signatures survive while implementation bodies collapse to a placeholder.

Every other language falls back to head/tail truncation. SQL is returned
unchanged.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath

from repodigest.config import SkeletonConfig
from repodigest.skeleton.profiles import ImportBlock, LanguageProfile, profile_for

SKELETON_MARKER = "// [repodigest:skeleton] structure only, bodies elided"
BODY_PLACEHOLDER = "{ /* ... */ }"

_PASSTHROUGH_EXTENSIONS = frozenset({".sql"})


class ScanState(str, Enum):
    TOP = "top"
    IMPORT_BLOCK = "import_block"
    TYPE_BLOCK = "type_block"
    MEMBER_BODY = "member_body"


def is_skeleton(content: str) -> bool:
    """Whether content was produced by `skeletonize`."""
    return content.startswith(SKELETON_MARKER)


def skeletonize(content: str, path: str, config: SkeletonConfig | None = None) -> str:
    """Reduce a file's text to its declarative structure.

    Args:
        content: Full text of the file.
        path: File path; only the extension is used to pick the strategy.
        config: Import cap and fallback window sizes.

    Returns:
        The reduced text prefixed with SKELETON_MARKER, or the content
        unchanged for SQL files.
    """
    config = config or SkeletonConfig()
    extension = PurePosixPath(path).suffix.lower()
    if extension in _PASSTHROUGH_EXTENSIONS:
        return content

    profile = profile_for(extension)
    if profile is not None:
        body = _BraceScanner(profile, config).run(content)
    else:
        body = _head_tail(content, config)
    return f"{SKELETON_MARKER}\n{body}"


def _head_tail(content: str, config: SkeletonConfig) -> str:
    """Keep the first and last lines of a long file."""
    lines = content.splitlines()
    if len(lines) <= config.fallback_min_lines:
        return content
    head = lines[: config.fallback_head_lines]
    tail = lines[-config.fallback_tail_lines:] if config.fallback_tail_lines else []
    elided = len(lines) - len(head) - len(tail)
    return "\n".join([*head, f"... [{elided} lines elided] ...", *tail])


class _BraceScanner:
    """One pass of the skeleton automaton over a brace-delimited source file."""

    def __init__(self, profile: LanguageProfile, config: SkeletonConfig) -> None:
        self.profile = profile
        self.max_imports = config.max_import_lines
        self.out: list[str] = []
        self.state = ScanState.TOP
        self.depth = 0
        self.return_depth = 0  # depth at which TYPE_BLOCK / MEMBER_BODY ends
        self.in_comment = False
        self.imports_seen = 0
        self.imports_elided = 0
        self.import_anchor = -1  # out index just after the last kept import line
        self.block: ImportBlock | None = None
        self.block_kept = False
        self.pending_scope: ScanState | None = None  # scope a bare `{` on the next line opens

    def run(self, content: str) -> str:
        for raw in content.splitlines():
            self._feed(raw.rstrip())

        while self.out and not self.out[-1]:
            self.out.pop()
        if self.imports_elided:
            note = f"{self.profile.line_comment} ... {self.imports_elided} more imports"
            self.out.insert(self.import_anchor, note)
        return "\n".join(self.out)

    # -- line dispatch -----------------------------------------------------

    def _feed(self, raw: str) -> None:
        stripped = raw.strip()
        code = self._code(stripped)

        if self.state == ScanState.TYPE_BLOCK:
            self._emit(raw)
            self._move(code)
            if self.depth <= self.return_depth:
                self.state = ScanState.TOP
            return
        if stripped and not code:
            return

        if self.state == ScanState.IMPORT_BLOCK:
            self._import_block_line(raw, code)
        elif self.state == ScanState.MEMBER_BODY:
            self._move(code)
            if self.depth <= self.return_depth:
                self.state = ScanState.TOP
        else:
            self._top_line(raw, code)

    def _top_line(self, raw: str, stripped: str) -> None:
        if not stripped:
            if self.out and self.out[-1]:
                self.out.append("")
            return

        pending, self.pending_scope = self.pending_scope, None
        start_depth = self.depth

        if pending is not None and stripped.startswith("{"):
            # Opening brace of the declaration on the previous line
            self._emit(raw)
            self._move(stripped)
            if pending == ScanState.TYPE_BLOCK and self.depth > start_depth:
                self.state = ScanState.TYPE_BLOCK
                self.return_depth = start_depth
            return

        if self.depth == 0:
            for block in self.profile.import_blocks:
                if block.open.match(stripped):
                    self._start_import_block(raw, block)
                    return
            if self.profile.import_pattern.match(stripped):
                self._import_line(raw)
                return

        opens, closes = self._braces(stripped)
        delta = opens - closes
        is_container = bool(self.profile.container_pattern.search(stripped))

        if self.profile.type_block_pattern.match(stripped):
            self._emit(raw)
            self._move(stripped)
            if delta > 0:
                self.state = ScanState.TYPE_BLOCK
                self.return_depth = start_depth
            elif opens == 0 and not stripped.endswith(";"):
                self.pending_scope = ScanState.TYPE_BLOCK
            return

        if delta > 0:
            if is_container:
                self._emit(raw)
                self._move(stripped)
                return
            self._emit(_signature(raw))
            self._move(stripped)
            self.state = ScanState.MEMBER_BODY
            self.return_depth = start_depth
            return

        if is_container and opens == 0 and not stripped.endswith(";"):
            self.pending_scope = ScanState.TOP
        self._emit(raw)
        self._move(stripped)

    # -- imports -----------------------------------------------------------

    def _import_line(self, raw: str) -> bool:
        self.imports_seen += 1
        if self.imports_seen > self.max_imports:
            self.imports_elided += 1
            return False
        self._emit(raw)
        self.import_anchor = len(self.out)
        return True

    def _start_import_block(self, raw: str, block: ImportBlock) -> None:
        self.block = block
        self.state = ScanState.IMPORT_BLOCK
        if block.lines_are_imports:
            # The opener is syntax only; each inner line is counted
            self.block_kept = True
            self._emit(raw)
        else:
            self.block_kept = self._import_line(raw)

    def _import_block_line(self, raw: str, stripped: str) -> None:
        block = self.block
        assert block is not None
        if block.close.search(stripped):
            if self.block_kept:
                self._emit(raw)
                if not block.lines_are_imports:
                    self.import_anchor = len(self.out)
            self.state = ScanState.TOP
            self.block = None
            return
        if block.lines_are_imports:
            if stripped:
                self._import_line(raw)
        elif self.block_kept:
            self._emit(raw)

    # -- helpers -----------------------------------------------------------

    def _emit(self, line: str) -> None:
        self.out.append(line)

    def _code(self, stripped: str) -> str:
        """The part of a line outside block comments that start it, or "" for a comment line."""
        if self.in_comment:
            end = stripped.find("*/")
            if end < 0:
                return ""
            self.in_comment = False
            stripped = stripped[end + 2 :].lstrip()
        while stripped.startswith("/*"):
            end = stripped.find("*/", 2)
            if end < 0:
                self.in_comment = True
                return ""
            stripped = stripped[end + 2 :].lstrip()
        if stripped.startswith(self.profile.comment_prefixes):
            return ""
        return stripped

    def _braces(self, stripped: str) -> tuple[int, int]:
        code = self.profile.string_pattern.sub("", stripped)
        comment_at = code.find(self.profile.line_comment)
        if comment_at >= 0:
            code = code[:comment_at]
        return code.count("{"), code.count("}")

    def _move(self, stripped: str) -> None:
        opens, closes = self._braces(stripped)
        self.depth = max(0, self.depth + opens - closes)


def _signature(raw: str) -> str:
    """Cut a line at its last opening brace and close it with the placeholder."""
    cut = raw.rfind("{")
    if cut < 0:
        return raw
    head = raw[:cut].rstrip()
    return f"{head} {BODY_PLACEHOLDER}" if head.strip() else f"{head}{BODY_PLACEHOLDER}"
