#!/usr/bin/env python3
"""
Toolkit CI Validation - Hook Validator

Validates the hooks.json schema: event type keys mapping to arrays of matcher
blocks, each holding a 'matcher' and an array of hooks with 'type' and
'command'. The root may be {"hooks": {...}} or the event mapping itself.

Usage:
    uv run python scripts/validate_hooks.py
    HOOKS_FILE=path/to/hooks.json uv run python scripts/validate_hooks.py --json

Environment:
    HOOKS_FILE  Hook configuration file (default: <repo>/hooks/hooks.json)

Exit codes:
    0 - All checks passed (or no hooks.json)
    1 - ERROR issues found, invalid JSON, or wrong top-level shape
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ci_validation_common import (
    FatalValidationError,
    ValidationReport,
    build_arg_parser,
    env_path,
    finish,
    print_fatal,
    repo_root,
)

# All valid hook event types
VALID_HOOK_EVENTS = (
    "PreToolUse",
    "PostToolUse",
    "PreCompact",
    "SessionStart",
    "SessionEnd",
    "Stop",
    "Notification",
    "SubagentStop",
)


@dataclass
class HookValidationReport(ValidationReport):
    """Hook validation report with hook-specific metadata."""

    hook_path: str = ""

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        base = super().to_dict()
        base["hook_path"] = self.hook_path
        return base


def is_missing(value: Any) -> bool:
    """Check for an absent field: JSON null, false, 0 and "" all count as missing."""
    return value is None or value is False or value == 0 or value == ""


def load_hooks_json(hook_path: Path) -> Any:
    """Parse hooks.json, raising FatalValidationError on malformed JSON."""
    try:
        return json.loads(hook_path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise FatalValidationError(f"hooks.json is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise FatalValidationError(f"Invalid JSON in hooks.json: {e}") from e


def unwrap_hooks(data: Any) -> dict[str, Any]:
    """Return the event mapping from either {"hooks": {...}} or a bare mapping.

    Raises:
        FatalValidationError: if the event mapping is not a JSON object
    """
    hooks = data
    if isinstance(data, dict) and not is_missing(data.get("hooks")):
        hooks = data["hooks"]

    if not isinstance(hooks, dict):
        raise FatalValidationError("hooks.json must be an object with event type keys")
    return hooks


def validate_hook_entry(hook: Any, label: str, report: ValidationReport) -> None:
    """Validate a single hook definition (type and command)."""
    if not isinstance(hook, dict):
        report.error(f"{label} must be an object")
        return

    hook_type = hook.get("type")
    if not isinstance(hook_type, str) or not hook_type:
        report.error(f"{label} missing or invalid 'type' field")

    command = hook.get("command")
    if is_missing(command) or not isinstance(command, (str, list)):
        report.error(f"{label} missing or invalid 'command' field")


def validate_matcher_block(matcher_block: Any, label: str, report: ValidationReport) -> None:
    """Validate a matcher block (contains matcher and hooks array)."""
    if not isinstance(matcher_block, dict):
        report.error(f"{label} must be an object")
        return

    if is_missing(matcher_block.get("matcher")):
        report.error(f"{label} missing 'matcher' field")

    hooks = matcher_block.get("hooks")
    if not isinstance(hooks, list):
        report.error(f"{label} missing 'hooks' array")
        return

    for j, hook in enumerate(hooks):
        validate_hook_entry(hook, f"{label}.hooks[{j}]", report)


def validate_hook_config(hooks: dict[str, Any], report: ValidationReport) -> int:
    """Validate every event in an unwrapped hook mapping.

    An unknown event key is reported and skipped; the remaining keys are
    still checked.

    Returns:
        Number of matcher blocks seen across all valid events
    """
    total_matchers = 0
    for event_name, matchers in hooks.items():
        if event_name not in VALID_HOOK_EVENTS:
            report.error(f"Invalid event type: {event_name}")
            continue

        if not isinstance(matchers, list):
            report.error(f"{event_name} must be an array")
            continue

        for i, matcher_block in enumerate(matchers):
            validate_matcher_block(matcher_block, f"{event_name}[{i}]", report)
            total_matchers += 1

        report.passed(f"Checked {len(matchers)} matcher block(s) for {event_name}")

    return total_matchers


def validate_hooks(hook_path: Path) -> HookValidationReport:
    """Validate a complete hooks.json file.

    Args:
        hook_path: Path to the hooks.json file

    Returns:
        HookValidationReport with all results

    Raises:
        FatalValidationError: on malformed JSON or a non-object event mapping
    """
    report = HookValidationReport(hook_path=str(hook_path))

    if not hook_path.is_file():
        report.info("No hooks.json found, skipping")
        return report

    hooks = unwrap_hooks(load_hooks_json(hook_path))
    report.validated = validate_hook_config(hooks, report)
    report.summary = f"Validated {report.validated} hook matchers"
    return report


def main() -> int:
    """Main entry point."""
    parser = build_arg_parser("Validate the hooks.json schema")
    args = parser.parse_args()

    hook_path = env_path("HOOKS_FILE", repo_root() / "hooks" / "hooks.json")
    try:
        report = validate_hooks(hook_path)
    except FatalValidationError as e:
        print_fatal(str(e))
        return 1

    return finish(report, args)


if __name__ == "__main__":
    sys.exit(main())
