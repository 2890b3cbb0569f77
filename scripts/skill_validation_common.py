#!/usr/bin/env python3
"""
Agent Skill Toolkit - Common Module

Shared infrastructure for the frontmatter validators and the copy scorer.
This module contains:
- Type definitions (Level, Finding, ValidationReport, PatternRule)
- Common constants (name/description limits, exit codes)
- Utility functions (kebab-case helpers, report formatting)

Every validator imports from this module so that findings, exit codes and
terminal output look the same across the agent, skill and prompt tools.
"""

from __future__ import annotations

import json
import re
import sys
from dataclasses import dataclass, field
from typing import Iterable, Literal

# =============================================================================
# Type Definitions
# =============================================================================

# Finding severity levels
# - ERROR: must fix, always fails validation
# - WARNING: advisory; fails only where a validator maps warn-only to its own exit code
# - INFO: informational, never affects the exit code
Level = Literal["ERROR", "WARNING", "INFO"]

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_OK = 0  # No errors (and no warnings, for validators with a warn-only status)
EXIT_ERRORS = 1  # At least one ERROR finding, or a fatal condition
EXIT_WARNINGS = 2  # Warnings only (prompt validator)

# =============================================================================
# Validation Name Patterns
# =============================================================================

# Kebab-case: lowercase alphanumerics separated by single hyphens
NAME_PATTERN = re.compile(r"^[a-z0-9](-?[a-z0-9])*$")
NAME_CHARSET_PATTERN = re.compile(r"^[a-z0-9-]+$")

MAX_NAME_LENGTH = 64
MIN_DESCRIPTION_LENGTH = 20
MAX_DESCRIPTION_LENGTH = 1024

# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class Finding:
    """Single validation finding.

    Attributes:
        level: Severity level (ERROR, WARNING, INFO)
        message: Human-readable description of the finding
    """

    level: Level
    message: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"level": self.level, "message": self.message}


@dataclass
class ValidationReport:
    """Validation report collecting findings in the order rules produced them.

    Rules never stop at the first problem: every finding is accumulated so a
    single run surfaces the complete error set. The ``errors``, ``warnings``
    and ``info`` views keep insertion order within each level.
    """

    results: list[Finding] = field(default_factory=list)
    source: str = ""

    def add(self, level: Level, message: str) -> None:
        """Add a finding."""
        self.results.append(Finding(level, message))

    def error(self, message: str) -> None:
        """Add a blocking error."""
        self.add("ERROR", message)

    def warning(self, message: str) -> None:
        """Add an advisory warning."""
        self.add("WARNING", message)

    def info(self, message: str) -> None:
        """Add an informational line."""
        self.add("INFO", message)

    def _messages(self, level: Level) -> list[str]:
        return [r.message for r in self.results if r.level == level]

    @property
    def errors(self) -> list[str]:
        return self._messages("ERROR")

    @property
    def warnings(self) -> list[str]:
        return self._messages("WARNING")

    @property
    def info_lines(self) -> list[str]:
        return self._messages("INFO")

    @property
    def has_errors(self) -> bool:
        """Check if any ERROR findings exist."""
        return any(r.level == "ERROR" for r in self.results)

    @property
    def has_warnings(self) -> bool:
        """Check if any WARNING findings exist."""
        return any(r.level == "WARNING" for r in self.results)

    def exit_code(self, warn_only_code: int = EXIT_OK) -> int:
        """Get the exit code for this report.

        Args:
            warn_only_code: Code to use when there are warnings but no errors.
                The agent and skill validators pass EXIT_OK, the prompt
                validator passes EXIT_WARNINGS.
        """
        if self.has_errors:
            return EXIT_ERRORS
        if self.has_warnings:
            return warn_only_code
        return EXIT_OK

    def count_by_level(self) -> dict[str, int]:
        """Get count of findings by level."""
        counts: dict[str, int] = {"ERROR": 0, "WARNING": 0, "INFO": 0}
        for r in self.results:
            counts[r.level] = counts.get(r.level, 0) + 1
        return counts

    def to_dict(self, warn_only_code: int = EXIT_OK) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source": self.source,
            "exit_code": self.exit_code(warn_only_code),
            "counts": self.count_by_level(),
            "errors": self.errors,
            "warnings": self.warnings,
            "info": self.info_lines,
        }

    def to_json(self, warn_only_code: int = EXIT_OK, indent: int = 2) -> str:
        """Convert report to JSON string."""
        return json.dumps(self.to_dict(warn_only_code), indent=indent)


@dataclass(frozen=True)
class PatternRule:
    """One entry of a regex catalogue: a matcher plus the text reported for it.

    Catalogues are plain ordered lists of these, evaluated top to bottom, so
    each rule can be tested on its own and new rules are a one-line addition.

    Attributes:
        pattern: Compiled regex; flags belong to the pattern
        label: Short name reported when the rule matches
        suggestion: Human-readable advice for fixing the match
    """

    pattern: re.Pattern[str]
    label: str
    suggestion: str = ""

    def search(self, text: str) -> re.Match[str] | None:
        return self.pattern.search(text)

    def count(self, text: str) -> int:
        return sum(1 for _ in self.pattern.finditer(text))


def match_rules(rules: Iterable[PatternRule], text: str) -> list[tuple[PatternRule, re.Match[str]]]:
    """Return (rule, first match) for every rule in the catalogue that matches text."""
    matches: list[tuple[PatternRule, re.Match[str]]] = []
    for rule in rules:
        match = rule.search(text)
        if match:
            matches.append((rule, match))
    return matches


# =============================================================================
# Exceptions
# =============================================================================


class ScaffoldError(Exception):
    """A scaffolder refused to write its target (e.g. it already exists)."""


# =============================================================================
# Utility Functions
# =============================================================================


def is_valid_kebab_case(name: str) -> bool:
    """Check if name follows kebab-case convention."""
    return bool(NAME_PATTERN.match(name))


def to_kebab_case(text: str) -> str:
    """Normalize arbitrary text to a kebab-case name ("My Tool!" -> "my-tool")."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def unique(items: Iterable[str]) -> list[str]:
    """Drop repeated items, keeping first-seen order."""
    return list(dict.fromkeys(items))


# =============================================================================
# Color Formatting (for terminal output)
# =============================================================================

# ANSI color codes
COLORS = {
    "ERROR": "\033[91m",  # Red
    "WARNING": "\033[93m",  # Yellow
    "INFO": "\033[90m",  # Gray
    "PASSED": "\033[92m",  # Green
    "RESET": "\033[0m",  # Reset
    "BOLD": "\033[1m",  # Bold
}


def colorize(text: str, level: str) -> str:
    """Apply color to text based on level, only when stdout is a terminal."""
    if not sys.stdout.isatty():
        return text
    color = COLORS.get(level, "")
    return f"{color}{text}{COLORS['RESET']}"


def print_report(report: ValidationReport, title: str, warn_only_code: int = EXIT_OK) -> None:
    """Print a report as info / errors / warnings sections with a result line."""
    errors = report.errors
    warnings = report.warnings
    info_lines = report.info_lines

    print("")
    print(colorize(title, "BOLD"))
    print("=" * 50)

    if info_lines:
        print("\nInfo:")
        for line in info_lines:
            print(f"  {line}")

    if errors:
        print(colorize("\nErrors (must fix):", "ERROR"))
        for message in errors:
            print(f"  [x] {message}")

    if warnings:
        print(colorize("\nWarnings (review recommended):", "WARNING"))
        for message in warnings:
            print(f"  [!] {message}")

    print("")
    exit_code = report.exit_code(warn_only_code)
    if errors:
        print(colorize(f"Result: FAILED ({len(errors)} errors, {len(warnings)} warnings)", "ERROR"))
    elif warnings and exit_code == EXIT_WARNINGS:
        print(colorize(f"Result: PASSED with warnings ({len(warnings)})", "WARNING"))
    elif warnings:
        print(colorize(f"Result: PASSED ({len(warnings)} warnings, no errors)", "PASSED"))
    else:
        print(colorize("Result: PASSED - all checks passed", "PASSED"))


def print_json(report: ValidationReport, warn_only_code: int = EXIT_OK) -> None:
    """Print validation results as JSON."""
    print(report.to_json(warn_only_code))


def fail(message: str) -> int:
    """Report a fatal condition on stderr and return the error exit code."""
    print(f"Error: {message}", file=sys.stderr)
    return EXIT_ERRORS
