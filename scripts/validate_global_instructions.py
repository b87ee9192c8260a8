#!/usr/bin/env python3
"""
Toolkit CI Validation - Global Instructions Validator

Validates the global Codex/Claude instruction files include the language
routing rules. Each requirement passes when any one of its alternative
snippets occurs in the file.

By default, missing files are skipped to keep CI portable.
Set REQUIRE_GLOBAL_INSTRUCTION_FILES=true to fail when files are missing.

Usage:
    uv run python scripts/validate_global_instructions.py
    REQUIRE_GLOBAL_INSTRUCTION_FILES=1 uv run python scripts/validate_global_instructions.py

Environment:
    CODEX_HOME                        Codex home (default: ~/.codex)
    CLAUDE_HOME                       Claude home (default: ~/.claude)
    CODEX_GLOBAL_AGENTS_PATH          Codex instructions (default: $CODEX_HOME/AGENTS.md)
    CLAUDE_GLOBAL_CLAUDE_PATH         Claude instructions (default: $CLAUDE_HOME/CLAUDE.md)
    REQUIRE_GLOBAL_INSTRUCTION_FILES  1/true/yes to treat missing files as errors

Exit codes:
    0 - All checks passed (or files skipped)
    1 - ERROR issues found
"""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from ci_validation_common import (
    ValidationReport,
    build_arg_parser,
    env_flag,
    env_path,
    finish,
    read_text_file,
)


@dataclass(frozen=True)
class Requirement:
    """A named rule satisfied by any one of its literal alternatives."""

    name: str
    any_of: tuple[str, ...]


@dataclass(frozen=True)
class InstructionCheck:
    """An instruction file and the requirements it must meet."""

    label: str
    file: Path
    requirements: tuple[Requirement, ...]


ROUTING_REQUIREMENTS = (
    Requirement("C# skill routing", ("csharp-dotnet/SKILL.md",)),
    Requirement("TypeScript skill routing", ("typescript/SKILL.md",)),
    Requirement("React guidance routing", ("react-next.md",)),
    Requirement("NUnit naming convention", ("[Action]_When[Scenario]_Then[Expectation]",)),
)


def build_checks(environ: Mapping[str, str] | None = None) -> list[InstructionCheck]:
    """Resolve the instruction file locations from the environment."""
    home = Path.home()
    codex_home = env_path("CODEX_HOME", home / ".codex", environ)
    claude_home = env_path("CLAUDE_HOME", home / ".claude", environ)
    return [
        InstructionCheck(
            "Codex global instructions",
            env_path("CODEX_GLOBAL_AGENTS_PATH", codex_home / "AGENTS.md", environ),
            ROUTING_REQUIREMENTS,
        ),
        InstructionCheck(
            "Claude global instructions",
            env_path("CLAUDE_GLOBAL_CLAUDE_PATH", claude_home / "CLAUDE.md", environ),
            ROUTING_REQUIREMENTS,
        ),
    ]


def unmet_requirements(content: str, requirements: Sequence[Requirement]) -> list[Requirement]:
    """Return the requirements none of whose alternatives occur in content."""
    return [req for req in requirements if not any(token in content for token in req.any_of)]


def validate_global_instructions(checks: Sequence[InstructionCheck], require_files: bool = False) -> ValidationReport:
    """Validate each instruction file against its requirements.

    Args:
        checks: Files and requirements to check
        require_files: Treat a missing file as an error instead of skipping it

    Returns:
        ValidationReport; `validated` counts the files actually read
    """
    report = ValidationReport()

    for check in checks:
        if not check.file.is_file():
            message = f"{check.label} not found: {check.file}"
            if require_files:
                report.error(message)
            else:
                report.info(f"Skipping: {message}")
            continue

        location = f"{check.label} ({check.file})"
        content = read_text_file(check.file, report, location)
        if content is None:
            continue

        for requirement in unmet_requirements(content, check.requirements):
            report.error(
                f"{location} missing {requirement.name}; expected one of: {', '.join(requirement.any_of)}"
            )

        report.validated += 1

    report.summary = f"Validated global instruction routing in {report.validated} file(s)"
    return report


def main() -> int:
    """Main entry point."""
    parser = build_arg_parser("Validate global instruction files include language routing rules")
    args = parser.parse_args()

    report = validate_global_instructions(build_checks(), env_flag("REQUIRE_GLOBAL_INSTRUCTION_FILES"))
    return finish(report, args)


if __name__ == "__main__":
    sys.exit(main())
