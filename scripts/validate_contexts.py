#!/usr/bin/env python3
"""
Toolkit CI Validation - Context Validator

Validates context markdown files have valid frontmatter with required fields.

Usage:
    uv run python scripts/validate_contexts.py
    CONTEXTS_DIR=path/to/contexts uv run python scripts/validate_contexts.py

Environment:
    CONTEXTS_DIR  Directory of context .md files (default: <repo>/contexts)

Exit codes:
    0 - All checks passed (or no contexts directory)
    1 - ERROR issues found
"""

from __future__ import annotations

import sys
from pathlib import Path

from ci_validation_common import (
    ValidationReport,
    build_arg_parser,
    check_required_fields,
    env_path,
    extract_frontmatter,
    finish,
    read_text_file,
    repo_root,
)

REQUIRED_FIELDS = ("name", "description")


def validate_context_content(content: str, filename: str, report: ValidationReport) -> None:
    """Validate the frontmatter of a single context document."""
    check_required_fields(
        extract_frontmatter(content),
        REQUIRED_FIELDS,
        report,
        filename,
        missing_message="Missing or malformed frontmatter",
    )


def validate_contexts_directory(contexts_dir: Path) -> ValidationReport:
    """Validate all context files in a directory."""
    report = ValidationReport()

    if not contexts_dir.is_dir():
        report.info("No contexts directory found, skipping")
        return report

    context_files = sorted(p for p in contexts_dir.glob("*.md") if p.is_file())
    for context_file in context_files:
        content = read_text_file(context_file, report, context_file.name)
        if content is not None:
            validate_context_content(content, context_file.name, report)

    report.validated = len(context_files)
    report.summary = f"Validated {report.validated} context files"
    return report


def main() -> int:
    """Main entry point."""
    parser = build_arg_parser("Validate context markdown files have required frontmatter")
    args = parser.parse_args()

    report = validate_contexts_directory(env_path("CONTEXTS_DIR", repo_root() / "contexts"))
    return finish(report, args)


if __name__ == "__main__":
    sys.exit(main())
