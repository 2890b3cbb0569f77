#!/usr/bin/env python3
"""
Agent Skill Toolkit - Frontmatter Rule Engine

One rule engine shared by the agent, skill and prompt validators. Each
validator describes itself with a ValidatorProfile (required and allowed
fields, description limits, body checks, size limit, path checks) and calls
validate_document(). Rules run in a fixed order:

1. parse (a missing header block is the only finding reported)
2. required fields, then unexpected fields
3. name and description shape
4. body checks
5. size advisory
6. context checks (filename, path and whole-document statistics)

Rules are pure functions of the parsed document; running the same input
twice yields identical reports.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from frontmatter_parser import parse_frontmatter
from skill_validation_common import (
    EXIT_OK,
    MAX_NAME_LENGTH,
    MIN_DESCRIPTION_LENGTH,
    NAME_CHARSET_PATTERN,
    ValidationReport,
)

# Trigger-scenario markers
USE_WHEN_PATTERN = re.compile(r"use (when|for)", re.IGNORECASE)
NUMBERED_SCENARIO_PATTERN = re.compile(r"\(\d\)")


@dataclass
class DocumentContext:
    """Everything a rule may look at for one document."""

    content: str
    frontmatter: dict[str, Any]
    body: str
    source: Path | None = None
    directory: Path | None = None


# A body check returns the warnings it wants reported (possibly none)
BodyCheck = Callable[[str], list[str]]

# A context check reports directly; used for rules that need paths or raw content
ContextCheck = Callable[[DocumentContext, ValidationReport], None]


def has_use_when_trigger(description: str) -> bool:
    """Check for a "use when" / "use for" trigger phrase, any case."""
    return bool(USE_WHEN_PATTERN.search(description))


def has_numbered_trigger(description: str) -> bool:
    """Check for a numbered trigger scenario like "(1)"."""
    return bool(NUMBERED_SCENARIO_PATTERN.search(description))


def require_cue(matches: Callable[[str], bool], message: str) -> BodyCheck:
    """Build a body check that warns with message when matches(body) is false."""

    def check(body: str) -> list[str]:
        return [] if matches(body) else [message]

    return check


def after_context(body_check: BodyCheck) -> ContextCheck:
    """Run a body check among the context checks, keeping its warnings in that position."""

    def check(ctx: DocumentContext, report: ValidationReport) -> None:
        for message in body_check(ctx.body):
            report.warning(message)

    return check


def contains_any(*phrases: str) -> Callable[[str], bool]:
    """Case-insensitive substring test against any of phrases."""
    lowered = [p.lower() for p in phrases]

    def matches(text: str) -> bool:
        text = text.lower()
        return any(p in text for p in lowered)

    return matches


def matches_pattern(pattern: re.Pattern[str]) -> Callable[[str], bool]:
    """Regex search test."""

    def matches(text: str) -> bool:
        return bool(pattern.search(text))

    return matches


@dataclass(frozen=True)
class ValidatorProfile:
    """Configuration of one validator variant.

    Attributes:
        kind: Variant name, used in report titles ("agent", "skill", "prompt")
        document_label: How the document is called in size messages
        required_fields: Fields that must be present and non-empty, in report order
        allowed_fields: Permitted top-level fields, or None for unrestricted
        name_must_match_dir: Require ``name`` to equal the containing directory name
        description_max_length: Upper bound on description length, or None
        forbid_angle_brackets: Reject ``<`` / ``>`` in the description
        has_trigger: Predicate deciding whether the description names trigger scenarios
        trigger_warning: Warning reported when has_trigger is false
        body_checks: Ordered body checks
        max_lines: Line count above which a size warning is reported, or None
        context_checks: Ordered checks on the whole document or its path, run last
        warn_only_exit_code: Exit code for reports with warnings but no errors
    """

    kind: str
    document_label: str
    required_fields: tuple[str, ...]
    allowed_fields: tuple[str, ...] | None = None
    name_must_match_dir: bool = False
    description_max_length: int | None = None
    forbid_angle_brackets: bool = False
    has_trigger: Callable[[str], bool] = has_use_when_trigger
    trigger_warning: str = 'Description should include trigger scenarios (e.g., "Use when...")'
    body_checks: tuple[BodyCheck, ...] = ()
    max_lines: int | None = None
    context_checks: tuple[ContextCheck, ...] = ()
    warn_only_exit_code: int = EXIT_OK


# =============================================================================
# Field Rules
# =============================================================================


def check_required_fields(frontmatter: dict[str, Any], profile: ValidatorProfile, report: ValidationReport) -> None:
    """Report every required field that is missing or empty."""
    for name in profile.required_fields:
        if not frontmatter.get(name):
            report.error(f"Missing required field: {name}")


def check_allowed_fields(frontmatter: dict[str, Any], profile: ValidatorProfile, report: ValidationReport) -> None:
    """Report fields outside the profile's allowed set."""
    if profile.allowed_fields is None:
        return
    allowed = ", ".join(profile.allowed_fields)
    for key in frontmatter:
        if key not in profile.allowed_fields:
            report.error(f'Unexpected frontmatter property: "{key}". Allowed: {allowed}')


def check_name(ctx: DocumentContext, profile: ValidatorProfile, report: ValidationReport) -> None:
    """Validate the 'name' field when present."""
    value = ctx.frontmatter.get("name")
    if not value:
        return
    name = str(value)

    if profile.name_must_match_dir and ctx.directory is not None:
        dir_name = ctx.directory.name
        if name != dir_name:
            report.error(f'Name "{name}" doesn\'t match directory "{dir_name}"')

    if not NAME_CHARSET_PATTERN.match(name):
        report.error("Name must be kebab-case (lowercase letters, numbers, hyphens only)")

    if "--" in name:
        report.error("Name cannot contain consecutive hyphens (--)")

    if name.startswith("-") or name.endswith("-"):
        report.error("Name cannot start or end with a hyphen")

    if len(name) > MAX_NAME_LENGTH:
        report.error(f"Name too long ({len(name)} chars, max {MAX_NAME_LENGTH})")


def check_description(frontmatter: dict[str, Any], profile: ValidatorProfile, report: ValidationReport) -> None:
    """Validate the 'description' field when present."""
    value = frontmatter.get("description")
    if not value:
        return
    desc = str(value)

    if len(desc) < MIN_DESCRIPTION_LENGTH:
        report.error(f"Description too short ({len(desc)} chars, minimum {MIN_DESCRIPTION_LENGTH})")

    if profile.description_max_length is not None and len(desc) > profile.description_max_length:
        report.error(f"Description too long ({len(desc)} chars, max {profile.description_max_length})")

    if profile.forbid_angle_brackets and ("<" in desc or ">" in desc):
        report.error("Description cannot contain angle brackets (< or >)")

    if not profile.has_trigger(desc):
        report.warning(profile.trigger_warning)


def check_size(ctx: DocumentContext, profile: ValidatorProfile, report: ValidationReport) -> None:
    """Warn when the document is longer than the profile's line limit."""
    if profile.max_lines is None:
        return
    line_count = len(ctx.content.split("\n"))
    if line_count > profile.max_lines:
        report.warning(
            f"{profile.document_label} is {line_count} lines (recommended < {profile.max_lines}). "
            "Consider moving content to references/"
        )


# =============================================================================
# Entry Point
# =============================================================================


def validate_document(
    content: str,
    profile: ValidatorProfile,
    source: Path | None = None,
    directory: Path | None = None,
) -> ValidationReport:
    """Validate one document against a profile.

    Args:
        content: Full document text
        profile: Validator variant configuration
        source: Path the content was read from, for filename rules
        directory: Containing directory, for name and path rules

    Returns:
        ValidationReport with errors first, then warnings, in rule order
    """
    report = ValidationReport(source=str(source) if source is not None else "")

    parsed = parse_frontmatter(content)
    if parsed.frontmatter is None:
        report.error(parsed.error or "Missing YAML frontmatter")
        return report

    ctx = DocumentContext(
        content=content,
        frontmatter=parsed.frontmatter,
        body=parsed.body,
        source=source,
        directory=directory,
    )

    check_required_fields(ctx.frontmatter, profile, report)
    check_allowed_fields(ctx.frontmatter, profile, report)
    check_name(ctx, profile, report)
    check_description(ctx.frontmatter, profile, report)

    for body_check in profile.body_checks:
        for message in body_check(ctx.body):
            report.warning(message)

    check_size(ctx, profile, report)

    for context_check in profile.context_checks:
        context_check(ctx, report)

    return report


def validate_file(path: Path, profile: ValidatorProfile, directory: Path | None = None) -> ValidationReport:
    """Read a document as UTF-8 and validate it.

    A file that is not valid UTF-8 yields a report with that single error.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        report = ValidationReport(source=str(path))
        report.error(f"File is not valid UTF-8: {path} (invalid byte at position {exc.start})")
        return report
    return validate_document(content, profile, source=path, directory=directory)
