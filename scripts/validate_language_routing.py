#!/usr/bin/env python3
"""
Toolkit CI Validation - Language Routing Validator

Validates that C#/.NET and TypeScript/React routing references remain wired
into the agents, runtime asset map and installers. Every listed token must
appear verbatim in its file; a missing file is an error.

Usage:
    uv run python scripts/validate_language_routing.py
    ROOT_DIR=/path/to/toolkit uv run python scripts/validate_language_routing.py

Environment:
    ROOT_DIR  Toolkit root the checked paths are relative to (default: <repo>)

Exit codes:
    0 - All checks passed
    1 - ERROR issues found
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ci_validation_common import (
    ValidationReport,
    build_arg_parser,
    env_path,
    finish,
    read_text_file,
    repo_root,
)

CSHARP_SKILL = "csharp-dotnet/SKILL.md"
TYPESCRIPT_SKILL = "typescript/SKILL.md"
NUNIT_NAMING = "[Action]_When[Scenario]_Then[Expectation]"
REACT_GUIDE = "typescript/references/react-next.md"
CLAUDE_GLOBAL = "~/.claude/CLAUDE.md"
ROUTING_BLOCK_START = 'ROUTING_BLOCK_START="<!-- BEGIN nhat-dev-toolkit:language-routing -->"'


@dataclass(frozen=True)
class RoutingCheck:
    """A file and the literal tokens it must contain."""

    file: str
    must_include: tuple[str, ...]


ROUTING_CHECKS: tuple[RoutingCheck, ...] = (
    RoutingCheck(
        "agents/pair-implementer.md",
        (CSHARP_SKILL, TYPESCRIPT_SKILL, NUNIT_NAMING, CLAUDE_GLOBAL),
    ),
    RoutingCheck(
        "agents/pair-reviewer.md",
        (CSHARP_SKILL, TYPESCRIPT_SKILL, CLAUDE_GLOBAL),
    ),
    RoutingCheck(
        "agents/sonar-analyst.md",
        (CSHARP_SKILL, TYPESCRIPT_SKILL, CLAUDE_GLOBAL),
    ),
    RoutingCheck(
        "agents/code-reviewer.md",
        (CSHARP_SKILL, TYPESCRIPT_SKILL, NUNIT_NAMING, REACT_GUIDE, CLAUDE_GLOBAL),
    ),
    RoutingCheck(
        "agents/pair-programmer.md",
        (CSHARP_SKILL, TYPESCRIPT_SKILL, NUNIT_NAMING, REACT_GUIDE, CLAUDE_GLOBAL),
    ),
    RoutingCheck(
        "metadata/runtime-asset-map.yaml",
        (
            "language_rule_routing:",
            "csharp_dotnet:",
            "typescript_react:",
            f'required_test_method_naming: "{NUNIT_NAMING}"',
        ),
    ),
    RoutingCheck(
        "install-codex.sh",
        (
            'GLOBAL_AGENTS_FILE="$CODEX_DIR/AGENTS.md"',
            ROUTING_BLOCK_START,
            CSHARP_SKILL,
            TYPESCRIPT_SKILL,
            "react-next.md",
            NUNIT_NAMING,
        ),
    ),
    RoutingCheck(
        "install.sh",
        (
            'GLOBAL_CLAUDE_FILE="$CLAUDE_DIR/CLAUDE.md"',
            ROUTING_BLOCK_START,
            CSHARP_SKILL,
            TYPESCRIPT_SKILL,
            "react-next.md",
            NUNIT_NAMING,
        ),
    ),
)


def missing_tokens(content: str, tokens: Sequence[str]) -> list[str]:
    """Return the tokens that do not occur as substrings of content, in order."""
    return [token for token in tokens if token not in content]


def validate_routing_check(root: Path, check: RoutingCheck, report: ValidationReport) -> None:
    """Validate one routing table entry."""
    full_path = root / check.file
    if not full_path.is_file():
        report.error(f"Missing file: {check.file}")
        return

    content = read_text_file(full_path, report, check.file)
    if content is None:
        return

    absent = missing_tokens(content, check.must_include)
    for token in absent:
        report.error(f"{check.file} missing required token: {token}")
    if not absent:
        report.passed("all routing tokens present", check.file)


def validate_language_routing(root: Path, checks: Sequence[RoutingCheck] = ROUTING_CHECKS) -> ValidationReport:
    """Validate every routing check relative to root.

    Args:
        root: Toolkit root directory
        checks: Routing table to apply

    Returns:
        ValidationReport with all results
    """
    report = ValidationReport()
    for check in checks:
        validate_routing_check(root, check, report)

    report.validated = len(checks)
    report.summary = f"Validated language routing across {report.validated} files"
    return report


def main() -> int:
    """Main entry point."""
    parser = build_arg_parser("Validate language routing references remain wired")
    args = parser.parse_args()

    report = validate_language_routing(env_path("ROOT_DIR", repo_root()))
    return finish(report, args)


if __name__ == "__main__":
    sys.exit(main())
