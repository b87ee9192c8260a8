#!/usr/bin/env python3
"""Tests for validate_hooks.py - hooks.json schema validation."""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

from ci_validation_common import FatalValidationError, ValidationReport
from validate_hooks import unwrap_hooks, validate_hook_config, validate_hooks

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SCRIPT_PATH = PROJECT_ROOT / "scripts" / "validate_hooks.py"

VALID_CONFIG = {"hooks": {"PreToolUse": [{"matcher": "*", "hooks": [{"type": "command", "command": "lint"}]}]}}


def run_validator(hooks_file: Path, *args: str) -> subprocess.CompletedProcess[str]:
    """Run validate_hooks.py against hooks_file and return result."""
    env = {**os.environ, "HOOKS_FILE": str(hooks_file)}
    cmd = [sys.executable, str(SCRIPT_PATH)] + list(args)
    return subprocess.run(cmd, capture_output=True, text=True, timeout=30, env=env)


def write_hooks(tmp_path: Path, data: Any) -> Path:
    """Write data as hooks.json and return its path."""
    path = tmp_path / "hooks.json"
    path.write_text(json.dumps(data))
    return path


def check(hooks: dict[str, Any]) -> tuple[ValidationReport, int]:
    """Validate an unwrapped hook mapping and return the report and matcher count."""
    report = ValidationReport()
    count = validate_hook_config(hooks, report)
    return report, count


class TestUnwrapHooks:
    """Tests for root unwrapping."""

    def test_wrapped_root(self) -> None:
        """{"hooks": {...}} is unwrapped."""
        assert unwrap_hooks(VALID_CONFIG) == VALID_CONFIG["hooks"]

    def test_bare_root(self) -> None:
        """A bare event mapping is used as-is."""
        assert unwrap_hooks(VALID_CONFIG["hooks"]) == VALID_CONFIG["hooks"]

    def test_empty_wrapped_mapping_is_used(self) -> None:
        """An empty hooks object is still the event mapping."""
        assert unwrap_hooks({"hooks": {}}) == {}

    @pytest.mark.parametrize("data", [[], [VALID_CONFIG], "hooks", 3, None, {"hooks": []}])
    def test_non_object_is_fatal(self, data: Any) -> None:
        """Arrays, scalars and null cannot hold event keys."""
        with pytest.raises(FatalValidationError, match="must be an object with event type keys"):
            unwrap_hooks(data)


class TestHookConfig:
    """Tests for the structural checks."""

    def test_valid_config(self) -> None:
        """The canonical example validates with one matcher."""
        report, count = check(VALID_CONFIG["hooks"])
        assert not report.has_errors
        assert count == 1

    def test_bad_event_only_skips_that_key(self) -> None:
        """An unknown event is one error; other events are still checked."""
        hooks = {
            "BadEvent": [{"matcher": "*", "hooks": [{"type": "command", "command": "lint"}]}],
            "Stop": [{"matcher": "*", "hooks": [{"type": "command", "command": ["a", "b"]}]}],
        }
        report, count = check(hooks)
        assert [r.message for r in report.get_errors()] == ["Invalid event type: BadEvent"]
        assert count == 1

    def test_renamed_event_single_error(self) -> None:
        """Changing PreToolUse to BadEvent produces exactly one error."""
        report, count = check({"BadEvent": VALID_CONFIG["hooks"]["PreToolUse"]})
        assert len(report.get_errors()) == 1
        assert count == 0

    def test_event_value_must_be_array(self) -> None:
        """A non-list event value is reported."""
        report, _ = check({"Stop": {"matcher": "*"}})
        assert [r.message for r in report.get_errors()] == ["Stop must be an array"]

    def test_matcher_entry_fields(self) -> None:
        """Missing matcher and hooks are both reported, and the entry still counts."""
        report, count = check({"SessionStart": [{"matcher": ""}]})
        assert [r.message for r in report.get_errors()] == [
            "SessionStart[0] missing 'matcher' field",
            "SessionStart[0] missing 'hooks' array",
        ]
        assert count == 1

    def test_hook_entry_fields(self) -> None:
        """Hook type must be a non-empty string; command a string or list."""
        hooks = {
            "PostToolUse": [
                {
                    "matcher": "Edit",
                    "hooks": [
                        {"type": "", "command": "fmt"},
                        {"type": "command", "command": 42},
                        {"type": "command"},
                        {"type": 7, "command": ["node", "x.js"]},
                    ],
                }
            ]
        }
        report, _ = check(hooks)
        assert [r.message for r in report.get_errors()] == [
            "PostToolUse[0].hooks[0] missing or invalid 'type' field",
            "PostToolUse[0].hooks[1] missing or invalid 'command' field",
            "PostToolUse[0].hooks[2] missing or invalid 'command' field",
            "PostToolUse[0].hooks[3] missing or invalid 'type' field",
        ]

    def test_counts_matchers_across_events(self) -> None:
        """Every matcher entry of every valid event is counted."""
        entry = {"matcher": "*", "hooks": [{"type": "command", "command": "x"}]}
        report, count = check({"PreToolUse": [entry, entry], "Stop": [entry], "Notification": []})
        assert not report.has_errors
        assert count == 3


class TestValidateHooksFile:
    """Tests for reading hooks.json from disk."""

    def test_missing_file_is_skipped(self, tmp_path: Path) -> None:
        """No hooks.json means nothing to validate."""
        report = validate_hooks(tmp_path / "hooks.json")
        assert report.exit_code == 0
        assert report.results[0].message == "No hooks.json found, skipping"

    def test_invalid_json_is_fatal(self, tmp_path: Path) -> None:
        """Malformed JSON raises with the parser message."""
        path = tmp_path / "hooks.json"
        path.write_text("{not json")
        with pytest.raises(FatalValidationError, match="Invalid JSON in hooks.json"):
            validate_hooks(path)

    def test_invalid_utf8_is_fatal(self, tmp_path: Path) -> None:
        """Bytes that do not decode as UTF-8 raise instead of escaping as UnicodeDecodeError."""
        path = tmp_path / "hooks.json"
        path.write_bytes(b'{"Stop": "\xff"}')
        with pytest.raises(FatalValidationError, match="hooks.json is not valid UTF-8"):
            validate_hooks(path)

    def test_summary(self, tmp_path: Path) -> None:
        """The summary counts matchers."""
        report = validate_hooks(write_hooks(tmp_path, VALID_CONFIG))
        assert report.summary == "Validated 1 hook matchers"


class TestHooksCLI:
    """Tests for the command line entry point."""

    def test_valid_file(self, tmp_path: Path) -> None:
        """A valid file exits 0 with the summary."""
        result = run_validator(write_hooks(tmp_path, VALID_CONFIG))
        assert result.returncode == 0
        assert "Validated 1 hook matchers" in result.stdout

    def test_invalid_json_exits_one_without_report(self, tmp_path: Path) -> None:
        """Invalid JSON prints one fatal line and exits 1."""
        path = tmp_path / "hooks.json"
        path.write_text("[1, 2,")
        result = run_validator(path)
        assert result.returncode == 1
        assert result.stderr.strip().startswith("ERROR: Invalid JSON in hooks.json:")
        assert result.stdout == ""

    def test_array_root_exits_one(self, tmp_path: Path) -> None:
        """A top-level array is a fatal shape error."""
        result = run_validator(write_hooks(tmp_path, []))
        assert result.returncode == 1
        assert "ERROR: hooks.json must be an object with event type keys" in result.stderr

    def test_bad_event_exits_one(self, tmp_path: Path) -> None:
        """An unknown event fails the run."""
        data = {"hooks": {"BadEvent": VALID_CONFIG["hooks"]["PreToolUse"]}}
        result = run_validator(write_hooks(tmp_path, data))
        assert result.returncode == 1
        assert "ERROR: Invalid event type: BadEvent" in result.stderr

    def test_invalid_utf8_exits_one_without_traceback(self, tmp_path: Path) -> None:
        """Undecodable bytes give one fatal diagnostic line, not a crash."""
        path = tmp_path / "hooks.json"
        path.write_bytes(b'{"hooks": {"Stop": [{"matcher": "\xff", "hooks": []}]}}')
        result = run_validator(path)
        assert result.returncode == 1
        assert "Traceback" not in result.stderr
        lines = result.stderr.strip().splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("ERROR: hooks.json is not valid UTF-8:")
