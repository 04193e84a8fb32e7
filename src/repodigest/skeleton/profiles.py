"""Language profiles that parameterise the skeleton line scanner.

A profile only describes syntax: how imports look, which declarations are
pure contracts kept with their whole body, and which declarations open a
scope whose members are scanned rather than elided. Supporting a new brace
language is a new LanguageProfile, not new scanner logic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_STRING_LITERAL = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'|`(?:\\.|[^`\\])*`')


@dataclass(frozen=True)
class ImportBlock:
    """A multi-line import statement, e.g. Go's `import (` ... `)`."""

    open: re.Pattern[str]
    close: re.Pattern[str]
    lines_are_imports: bool = False  # each inner line is its own import


@dataclass(frozen=True)
class LanguageProfile:
    name: str
    extensions: frozenset[str]
    import_pattern: re.Pattern[str]
    type_block_pattern: re.Pattern[str]
    container_pattern: re.Pattern[str]
    import_blocks: tuple[ImportBlock, ...] = ()
    line_comment: str = "//"
    comment_prefixes: tuple[str, ...] = ("//",)
    string_pattern: re.Pattern[str] = _STRING_LITERAL


_MODIFIERS = (
    r"(?:(?:public|private|protected|internal|export|sealed|abstract|static|final|"
    r"open|data|partial|pub(?:\([\w:]+\))?|typedef)\s+)*"
)

C_FAMILY = LanguageProfile(
    name="c-family",
    extensions=frozenset({
        ".java", ".kt", ".kts", ".scala", ".cs", ".go", ".rs", ".swift",
        ".c", ".h", ".cc", ".cpp", ".hpp", ".php", ".dart", ".groovy",
    }),
    import_pattern=re.compile(
        r"^(package\b|import\b|using\s+[\w.:=\s]+;|use\s|namespace\s+[\w.\\]+\s*;|"
        r"#include\b|#import\b|extern\s+crate\b|(pub\s+)?mod\s+\w+\s*;|"
        r"require(_once)?\b|include(_once)?\b)"
    ),
    import_blocks=(
        ImportBlock(re.compile(r"^import\s*\($"), re.compile(r"^\)"), lines_are_imports=True),
        ImportBlock(re.compile(r"^(pub\s+)?use\b[^;]*\{[^}]*$"), re.compile(r"\}\s*;")),
    ),
    type_block_pattern=re.compile(
        r"^" + _MODIFIERS
        + r"(?:@interface|interface|annotation\s+class|protocol|trait|struct|"
        r"type\s+\w+(?:\[[^\]]*\])?\s+(?:interface|struct))\b"
    ),
    container_pattern=re.compile(
        r"^" + _MODIFIERS
        + r"(?:inner\s+|companion\s+|case\s+|enum\s+|value\s+)?"
        r"(?:class|enum|object|impl|namespace|module|mod|extension|record)\b"
    ),
)

TYPESCRIPT = LanguageProfile(
    name="typescript",
    extensions=frozenset({".ts", ".tsx", ".mts", ".cts", ".js", ".jsx", ".mjs", ".cjs"}),
    import_pattern=re.compile(
        r"^(import\b|export\s+(type\s+)?(\*|\{[^}]*\})\s+from\b|"
        r"(const|let|var)\s+[^=]+=\s*require\(|require\(|"
        r"[\"']use (strict|client|server)[\"'])"
    ),
    import_blocks=(
        ImportBlock(
            re.compile(r"^(import\b[^;{]*\{[^}]*|export\s+(type\s+)?\{[^}]*)$"),
            re.compile(r"\}"),
        ),
    ),
    type_block_pattern=re.compile(
        r"^(?:export\s+)?(?:default\s+)?"
        r"(?:declare\s+(?:module|global|namespace)\b|(?:declare\s+)?(?:interface|type\s+\w+|(?:const\s+)?enum)\b)"
    ),
    container_pattern=re.compile(
        r"^(?:export\s+)?(?:default\s+)?(?:declare\s+)?(?:abstract\s+)?class\b|^(?:export\s+)?namespace\b"
    ),
)

PROFILES: tuple[LanguageProfile, ...] = (TYPESCRIPT, C_FAMILY)


def profile_for(extension: str) -> LanguageProfile | None:
    """The brace-language profile for a file extension, if any."""
    extension = extension.lower()
    for profile in PROFILES:
        if extension in profile.extensions:
            return profile
    return None
