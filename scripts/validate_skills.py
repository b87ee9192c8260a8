#!/usr/bin/env python3
"""
Toolkit CI Validation - Skill Validator

Validates every skill directory has a non-empty SKILL.md.

Usage:
    uv run python scripts/validate_skills.py
    SKILLS_DIR=path/to/skills uv run python scripts/validate_skills.py

Environment:
    SKILLS_DIR  Directory of skill subdirectories (default: <repo>/skills)

Exit codes:
    0 - All checks passed (or no skills directory)
    1 - ERROR issues found
"""

from __future__ import annotations

import sys
from pathlib import Path

from ci_validation_common import (
    ValidationReport,
    build_arg_parser,
    env_path,
    finish,
    list_subdirectories,
    read_text_file,
    repo_root,
)

SKILL_FILE = "SKILL.md"


def validate_skill_dir(skills_dir: Path, name: str, report: ValidationReport) -> bool:
    """Validate a single skill directory.

    Returns:
        True if the skill has a non-empty SKILL.md
    """
    skill_md = skills_dir / name / SKILL_FILE
    if not skill_md.is_file():
        report.error(f"Missing {SKILL_FILE}", f"{name}/")
        return False

    filename = f"{name}/{SKILL_FILE}"
    content = read_text_file(skill_md, report, filename)
    if content is None:
        return False

    if not content.strip():
        report.error("Empty file", filename)
        return False

    report.passed("SKILL.md present", filename)
    return True


def validate_skills_directory(skills_dir: Path) -> ValidationReport:
    """Validate all skill directories. Only valid skills count toward the summary."""
    report = ValidationReport()

    if not skills_dir.is_dir():
        report.info("No skills directory found, skipping")
        return report

    for name in list_subdirectories(skills_dir):
        if validate_skill_dir(skills_dir, name, report):
            report.validated += 1

    report.summary = f"Validated {report.validated} skill directories"
    return report


def main() -> int:
    """Main entry point."""
    parser = build_arg_parser("Validate skill directories have non-empty SKILL.md files")
    args = parser.parse_args()

    report = validate_skills_directory(env_path("SKILLS_DIR", repo_root() / "skills"))
    return finish(report, args)


if __name__ == "__main__":
    sys.exit(main())
