#!/usr/bin/env python3
"""
Toolkit CI Validation - Common Module

Shared validation infrastructure for all toolkit CI validators.
This module contains:
- Type definitions (Level, ValidationResult, ValidationReport)
- Frontmatter extraction and field checks
- Environment configuration helpers
- Report rendering and exit codes

All individual validators should import from this module to ensure consistency.
"""

from __future__ import annotations

import argparse
import json
import os
import re
import sys
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, TextIO

# =============================================================================
# Type Definitions
# =============================================================================

# Validation result severity levels
# - ERROR: always blocks (non-zero exit code)
# - WARNING: never blocks, always reported (blocks only in --strict mode)
# - INFO: informational, always printed
# - PASSED: check passed, shown in verbose mode
Level = Literal["ERROR", "WARNING", "INFO", "PASSED"]

# Parsed frontmatter: field name -> raw trimmed value, in document order.
# A document without a frontmatter block is represented by None.
FrontmatterBlock = dict[str, str]

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_OK = 0  # All checks passed (or only WARNING/INFO/PASSED)
EXIT_ERROR = 1  # ERROR issues found, or a fatal setup error

# =============================================================================
# Common Constants
# =============================================================================

# Values of boolean-like environment variables that count as "on"
TRUTHY_ENV_VALUES = {"1", "true", "yes"}

# Valid model values for agents
VALID_MODELS = ("haiku", "sonnet", "opus")

# Frontmatter block at the very start of a document: a '---' line, the
# captured content, then another '---' line. Back-to-back delimiters are not a block.
FRONTMATTER_PATTERN = re.compile(r"\A---\r?\n(.*?)\r?\n---(?:\r?\n|\Z)", re.DOTALL)

LINE_SPLIT_PATTERN = re.compile(r"\r?\n")

# =============================================================================
# Exceptions
# =============================================================================


class FatalValidationError(Exception):
    """Raised when input cannot be validated at all (malformed JSON, wrong root shape).

    Unlike accumulated validation results, a fatal error aborts the run
    immediately with a single diagnostic and no partial report.
    """


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ValidationResult:
    """Single validation check result.

    Attributes:
        level: Severity level (ERROR, WARNING, INFO, PASSED)
        message: Human-readable description of the result
        file: Optional file path related to the result
    """

    level: Level
    message: str
    file: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        result = {"level": self.level, "message": self.message}
        if self.file is not None:
            result["file"] = self.file
        return result


@dataclass
class ValidationReport:
    """Complete validation report with results collection.

    This is the base class that all validators should use (or extend).
    Results are kept in the order they were recorded; nothing is sorted
    or deduplicated, so a run prints issues as files and lines were read.

    Attributes:
        results: Every recorded result, in encounter order
        validated: Number of items counted for the summary line
        summary: Summary line printed when the run passes
    """

    results: list[ValidationResult] = field(default_factory=list)
    validated: int = 0
    summary: str = ""

    def add(self, level: Level, message: str, file: str | None = None) -> None:
        """Add a validation result."""
        self.results.append(ValidationResult(level, message, file))

    def passed(self, message: str, file: str | None = None) -> None:
        """Add a passed check."""
        self.add("PASSED", message, file)

    def info(self, message: str, file: str | None = None) -> None:
        """Add an info message."""
        self.add("INFO", message, file)

    def warning(self, message: str, file: str | None = None) -> None:
        """Add a warning — always reported, blocks only in --strict mode."""
        self.add("WARNING", message, file)

    def error(self, message: str, file: str | None = None) -> None:
        """Add an error."""
        self.add("ERROR", message, file)

    @property
    def has_errors(self) -> bool:
        """Check if any ERROR issues exist."""
        return any(r.level == "ERROR" for r in self.results)

    @property
    def has_warnings(self) -> bool:
        """Check if any WARNING issues exist."""
        return any(r.level == "WARNING" for r in self.results)

    @property
    def exit_code(self) -> int:
        """Get the exit code for the run. WARNING never affects it here."""
        if self.has_errors:
            return EXIT_ERROR
        return EXIT_OK

    def exit_code_strict(self) -> int:
        """Get exit code for --strict mode (WARNING also blocks)."""
        if self.has_errors or self.has_warnings:
            return EXIT_ERROR
        return EXIT_OK

    def get_errors(self) -> list[ValidationResult]:
        """Get all ERROR results in encounter order."""
        return [r for r in self.results if r.level == "ERROR"]

    def get_warnings(self) -> list[ValidationResult]:
        """Get all WARNING results in encounter order."""
        return [r for r in self.results if r.level == "WARNING"]

    def count_by_level(self) -> dict[str, int]:
        """Get count of results by level."""
        counts: dict[str, int] = {"ERROR": 0, "WARNING": 0, "INFO": 0, "PASSED": 0}
        for r in self.results:
            counts[r.level] = counts.get(r.level, 0) + 1
        return counts

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "exit_code": self.exit_code,
            "validated": self.validated,
            "counts": self.count_by_level(),
            "results": [r.to_dict() for r in self.results],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert report to JSON string.

        Args:
            indent: JSON indentation level (default 2)

        Returns:
            JSON string representation of the report
        """
        return json.dumps(self.to_dict(), indent=indent)


# =============================================================================
# Frontmatter
# =============================================================================


def extract_frontmatter(content: str) -> FrontmatterBlock | None:
    """Extract the leading '---' delimited key: value block from a document.

    A leading byte-order mark is ignored. Each line of the block is split on
    its first colon; lines without a colon, or starting with one, are skipped.
    Keys and values are trimmed and kept as raw strings (no YAML typing).

    Args:
        content: Full document text

    Returns:
        Mapping of field name to value, or None if the document has no
        frontmatter block. A block without any 'key: value' line gives {}.
    """
    match = FRONTMATTER_PATTERN.match(content.removeprefix("\ufeff"))
    if match is None:
        return None

    frontmatter: FrontmatterBlock = {}
    for line in LINE_SPLIT_PATTERN.split(match.group(1) or ""):
        idx = line.find(":")
        if idx > 0:
            frontmatter[line[:idx].strip()] = line[idx + 1 :].strip()
    return frontmatter


def check_required_fields(
    frontmatter: FrontmatterBlock | None,
    required: Iterable[str],
    report: ValidationReport,
    filename: str,
    missing_message: str = "Missing frontmatter",
) -> bool:
    """Report required frontmatter fields that are absent or blank.

    Args:
        frontmatter: Parsed block, or None when the document had none
        required: Field names that must carry a non-blank value
        report: Report to add results to
        filename: File name used in messages
        missing_message: Message used when there is no frontmatter at all

    Returns:
        False if the document had no frontmatter (callers skip further
        field checks), True otherwise.
    """
    if frontmatter is None:
        report.error(missing_message, filename)
        return False

    for name in required:
        if not frontmatter.get(name, "").strip():
            report.error(f"Missing required field: {name}", filename)
    return True


def check_enum_field(
    frontmatter: FrontmatterBlock,
    name: str,
    allowed: Sequence[str],
    report: ValidationReport,
    filename: str,
) -> None:
    """Report a present field whose value is not in a fixed allow-list.

    Absence is left to check_required_fields, so both checks may report
    against the same document.
    """
    value = frontmatter.get(name)
    if not value:
        return

    if value not in allowed:
        report.error(f"Invalid {name} '{value}'. Must be one of: {', '.join(allowed)}", filename)
    else:
        report.passed(f"'{name}' field valid: {value}", filename)


# =============================================================================
# Configuration
# =============================================================================


def repo_root() -> Path:
    """Get the repository root directory (parent of scripts/).

    Returns:
        Path to the repository root, assuming this module lives in scripts/.
    """
    return Path(__file__).resolve().parent.parent


def env_path(name: str, default: Path, environ: Mapping[str, str] | None = None) -> Path:
    """Return the path named by environment variable `name`, else `default`."""
    env = os.environ if environ is None else environ
    value = env.get(name)
    if value:
        return Path(value)
    return default


def env_flag(name: str, environ: Mapping[str, str] | None = None) -> bool:
    """Return True if environment variable `name` is set to 1, true or yes (any case)."""
    env = os.environ if environ is None else environ
    return env.get(name, "").strip().lower() in TRUTHY_ENV_VALUES


# =============================================================================
# File System Access
# =============================================================================


def read_text_file(path: Path, report: ValidationReport, filename: str) -> str | None:
    """Read a UTF-8 text file, recording an error if it cannot be decoded.

    Args:
        path: File to read
        report: Report to add results to
        filename: File name used in messages

    Returns:
        File content, or None if the file is not valid UTF-8
    """
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        report.error(f"File is not valid UTF-8: {e}", filename)
        return None


def list_markdown_slugs(directory: Path) -> list[str]:
    """Get sorted names of *.md files in a directory, without the extension.

    Returns an empty list when the directory does not exist.
    """
    if not directory.is_dir():
        return []
    return sorted(p.stem for p in directory.glob("*.md") if p.is_file())


def list_subdirectories(directory: Path) -> list[str]:
    """Get sorted names of the immediate subdirectories of a directory.

    Returns an empty list when the directory does not exist.
    """
    if not directory.is_dir():
        return []
    return sorted(p.name for p in directory.iterdir() if p.is_dir())


# =============================================================================
# Color Formatting (for terminal output)
# =============================================================================

# ANSI color codes
COLORS = {
    "ERROR": "\033[91m",  # Red
    "WARNING": "\033[95m",  # Magenta — never blocks, always reported
    "INFO": "\033[90m",  # Gray
    "PASSED": "\033[92m",  # Green
    "RESET": "\033[0m",  # Reset
}

# Line prefixes used in CI logs
PREFIXES = {
    "ERROR": "ERROR: ",
    "WARNING": "WARN: ",
    "INFO": "",
    "PASSED": "PASSED: ",
}


def colorize(text: str, level: str, stream: TextIO) -> str:
    """Apply color to text based on level, only when writing to a terminal."""
    isatty = getattr(stream, "isatty", None)
    if not (isatty and isatty()):
        return text
    return f"{COLORS.get(level, '')}{text}{COLORS['RESET']}"


def format_result(result: ValidationResult) -> str:
    """Format a single validation result as a CI log line (without color)."""
    if result.file:
        return f"{PREFIXES[result.level]}{result.file} - {result.message}"
    return f"{PREFIXES[result.level]}{result.message}"


def print_results(report: ValidationReport, verbose: bool = False) -> None:
    """Print validation results in encounter order.

    Errors go to stderr; warnings and info to stdout; passed checks only
    in verbose mode. The summary line is printed when there are no errors.
    """
    for result in report.results:
        if result.level == "PASSED" and not verbose:
            continue
        stream = sys.stderr if result.level == "ERROR" else sys.stdout
        print(colorize(format_result(result), result.level, stream), file=stream)

    if not report.has_errors and report.summary:
        print(report.summary)


def print_fatal(message: str) -> None:
    """Print a fatal setup error to stderr."""
    print(colorize(f"ERROR: {message}", "ERROR", sys.stderr), file=sys.stderr)


# =============================================================================
# CLI Helpers
# =============================================================================


def build_arg_parser(description: str) -> argparse.ArgumentParser:
    """Create the argument parser shared by every validator.

    Validators take no positional arguments; locations come from the
    environment.
    """
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show all results including passed checks",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--strict", action="store_true", help="Strict mode — warnings also block validation")
    return parser


def finish(report: ValidationReport, args: argparse.Namespace) -> int:
    """Render a report according to the CLI flags and return the exit code."""
    if args.json:
        print(report.to_json())
    else:
        print_results(report, args.verbose)

    if args.strict:
        return report.exit_code_strict()
    return report.exit_code
