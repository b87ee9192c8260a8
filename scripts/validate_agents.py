#!/usr/bin/env python3
"""
Toolkit CI Validation - Agent Validator

Validates agent markdown files have the required frontmatter fields and a
supported model.

Usage:
    uv run python scripts/validate_agents.py
    AGENTS_DIR=path/to/agents uv run python scripts/validate_agents.py --verbose
    uv run python scripts/validate_agents.py --json

Environment:
    AGENTS_DIR  Directory of agent .md files (default: <repo>/agents)

Exit codes:
    0 - All checks passed (or no agents directory)
    1 - ERROR issues found
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from ci_validation_common import (
    VALID_MODELS,
    ValidationReport,
    build_arg_parser,
    check_enum_field,
    check_required_fields,
    env_path,
    extract_frontmatter,
    finish,
    read_text_file,
    repo_root,
)

# Fields every agent must define
REQUIRED_FIELDS = ("model", "tools")


@dataclass
class AgentValidationReport(ValidationReport):
    """Validation report for an agents directory, extends base ValidationReport with agents_dir."""

    agents_dir: str = ""

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        base = super().to_dict()
        base["agents_dir"] = self.agents_dir
        return base


def validate_agent_content(content: str, filename: str, report: ValidationReport) -> None:
    """Validate the frontmatter of a single agent document."""
    frontmatter = extract_frontmatter(content)
    check_required_fields(frontmatter, REQUIRED_FIELDS, report, filename)

    if frontmatter is not None:
        check_enum_field(frontmatter, "model", VALID_MODELS, report, filename)


def validate_agents_directory(agents_dir: Path) -> AgentValidationReport:
    """Validate all agent files in a directory.

    Args:
        agents_dir: Path to the agents/ directory

    Returns:
        AgentValidationReport with all results
    """
    report = AgentValidationReport(agents_dir=str(agents_dir))

    if not agents_dir.is_dir():
        report.info("No agents directory found, skipping")
        return report

    agent_files = sorted(p for p in agents_dir.glob("*.md") if p.is_file())
    for agent_file in agent_files:
        content = read_text_file(agent_file, report, agent_file.name)
        if content is None:
            continue
        validate_agent_content(content, agent_file.name, report)

    report.validated = len(agent_files)
    report.summary = f"Validated {report.validated} agent files"
    return report


def main() -> int:
    """Main entry point."""
    parser = build_arg_parser("Validate agent markdown files have required frontmatter")
    args = parser.parse_args()

    agents_dir = env_path("AGENTS_DIR", repo_root() / "agents")
    report = validate_agents_directory(agents_dir)
    return finish(report, args)


if __name__ == "__main__":
    sys.exit(main())
