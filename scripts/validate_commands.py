#!/usr/bin/env python3
"""
Toolkit CI Validation - Command Validator

Validates command markdown files are non-empty and that their cross-references
resolve:
1. `/command` references must name an existing commands/<slug>.md
2. agents/<slug>.md references must name an existing agent file
3. skills/<slug>/ references should name an existing skill directory (warning only)

Fenced code blocks and lines describing files a command would create are not
scanned for references.

Usage:
    uv run python scripts/validate_commands.py
    ROOT_DIR=/path/to/toolkit uv run python scripts/validate_commands.py --verbose

Environment:
    ROOT_DIR  Toolkit root containing commands/, agents/ and skills/ (default: <repo>)

Exit codes:
    0 - All checks passed (or no commands directory)
    1 - ERROR issues found
"""

from __future__ import annotations

import re
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from ci_validation_common import (
    ValidationReport,
    build_arg_parser,
    env_path,
    finish,
    list_markdown_slugs,
    list_subdirectories,
    read_text_file,
    repo_root,
)

# =============================================================================
# Regex Patterns for Cross-Reference Detection
# =============================================================================

# Fenced code blocks, matched lazily across lines
CODE_FENCE_PATTERN = re.compile(r"```[\s\S]*?```")

# Lines that describe a file the command would create; the artifact they
# name is not expected to exist yet
CREATION_CUE_PATTERN = re.compile(r"creates:|would create", re.IGNORECASE)

# `/command-name` in inline code
COMMAND_REF_PATTERN = re.compile(r"`/([a-z][-a-z0-9]*)`")

# agents/agent-name.md
AGENT_REF_PATTERN = re.compile(r"agents/([a-z][-a-z0-9]*)\.md")

# skills/skill-name/
SKILL_REF_PATTERN = re.compile(r"skills/([a-z][-a-z0-9]*)/")

ReferenceKind = Literal["command", "agent", "skill"]


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class ReferenceToken:
    """A reference found in a command body.

    Attributes:
        kind: What the reference points at (command, agent or skill)
        name: Slug of the referenced artifact
        source_file: File the reference was found in
    """

    kind: ReferenceKind
    name: str
    source_file: str


@dataclass(frozen=True)
class Registry:
    """Known artifact names that references are resolved against."""

    commands: frozenset[str] = frozenset()
    agents: frozenset[str] = frozenset()
    skills: frozenset[str] = frozenset()

    @classmethod
    def from_root(cls, root: Path) -> Registry:
        """Build the registry by listing commands/, agents/ and skills/ under root."""
        return cls(
            commands=frozenset(list_markdown_slugs(root / "commands")),
            agents=frozenset(list_markdown_slugs(root / "agents")),
            skills=frozenset(list_subdirectories(root / "skills")),
        )

    def contains(self, token: ReferenceToken) -> bool:
        """Check whether a reference resolves to a known artifact."""
        if token.kind == "command":
            return token.name in self.commands
        if token.kind == "agent":
            return token.name in self.agents
        return token.name in self.skills


# =============================================================================
# Reference Scanning
# =============================================================================


def strip_code_fences(content: str) -> str:
    """Remove fenced code blocks so example snippets are not checked."""
    return CODE_FENCE_PATTERN.sub("", content)


def extract_references(content: str, source_file: str) -> list[ReferenceToken]:
    """Extract command, agent and skill references from a document body.

    Command references are collected line by line, then agent references,
    then skill references, each in document order.

    Args:
        content: Full document text
        source_file: File name recorded on each token

    Returns:
        List of ReferenceToken in reporting order
    """
    lines = [line for line in strip_code_fences(content).split("\n") if not CREATION_CUE_PATTERN.search(line)]
    body = "\n".join(lines)

    tokens: list[ReferenceToken] = []
    for line in lines:
        for match in COMMAND_REF_PATTERN.finditer(line):
            tokens.append(ReferenceToken("command", match.group(1), source_file))
    for match in AGENT_REF_PATTERN.finditer(body):
        tokens.append(ReferenceToken("agent", match.group(1), source_file))
    for match in SKILL_REF_PATTERN.finditer(body):
        tokens.append(ReferenceToken("skill", match.group(1), source_file))
    return tokens


def check_references(tokens: Iterable[ReferenceToken], registry: Registry, report: ValidationReport) -> None:
    """Report references that do not resolve.

    Unknown commands and agents are errors; unknown skills are warnings.
    """
    for token in tokens:
        if registry.contains(token):
            report.passed(f"reference to {token.kind} '{token.name}' is valid", token.source_file)
        elif token.kind == "command":
            report.error(f"references non-existent command /{token.name}", token.source_file)
        elif token.kind == "agent":
            report.error(f"references non-existent agent agents/{token.name}.md", token.source_file)
        else:
            report.warning(f"references skill directory skills/{token.name}/ (not found)", token.source_file)


def validate_command_content(content: str, filename: str, registry: Registry, report: ValidationReport) -> None:
    """Validate a single command document against the registry."""
    if not content.strip():
        report.error("Empty command file", filename)
        return

    check_references(extract_references(content, filename), registry, report)


# =============================================================================
# Main Validation Function
# =============================================================================


def validate_commands(root: Path) -> ValidationReport:
    """Validate every command file under root/commands.

    Args:
        root: Toolkit root containing commands/, agents/ and skills/

    Returns:
        ValidationReport with all results
    """
    report = ValidationReport()
    commands_dir = root / "commands"

    if not commands_dir.is_dir():
        report.info("No commands directory found, skipping")
        return report

    registry = Registry.from_root(root)
    command_files = sorted(p for p in commands_dir.glob("*.md") if p.is_file())
    for command_file in command_files:
        content = read_text_file(command_file, report, command_file.name)
        if content is not None:
            validate_command_content(content, command_file.name, registry, report)

    report.validated = len(command_files)
    report.summary = f"Validated {report.validated} command files"
    return report


def main() -> int:
    """Main entry point."""
    parser = build_arg_parser("Validate command markdown files and their cross-references")
    args = parser.parse_args()

    report = validate_commands(env_path("ROOT_DIR", repo_root()))
    return finish(report, args)


if __name__ == "__main__":
    sys.exit(main())
