#!/usr/bin/env python3
"""
Agent Skill Toolkit - Skill Validator

Validates a skill directory: SKILL.md frontmatter (allowed properties, name
matching the directory, description limits), size, referenced files under
references/, and empty scripts/ or references/ directories.

Usage:
    python scripts/validate_skill.py path/to/skill/
    python scripts/validate_skill.py path/to/skill/SKILL.md
    python scripts/validate_skill.py path/to/skill/ --json

Exit codes:
    0 - No errors (warnings are advisory)
    1 - Errors found (must fix), or SKILL.md does not exist
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path

from frontmatter_rules import (
    DocumentContext,
    ValidatorProfile,
    has_numbered_trigger,
    has_use_when_trigger,
    validate_document,
    validate_file,
)
from skill_validation_common import (
    EXIT_OK,
    MAX_DESCRIPTION_LENGTH,
    ValidationReport,
    fail,
    print_json,
    print_report,
    unique,
)

SKILL_FILENAME = "SKILL.md"

# Maximum recommended SKILL.md line count
MAX_SKILL_LINES = 500

# Allowed top-level frontmatter properties, in the order they are listed
ALLOWED_PROPERTIES = ("name", "description", "license", "allowed-tools", "metadata")

# Inline code references to bundled reference files, e.g. `references/api.md`
REFERENCE_PATTERN = re.compile(r"`(references/[^`]+)`")


def has_skill_trigger(description: str) -> bool:
    """Numbered scenarios are the skill convention; a "Use when" phrase also counts."""
    return has_numbered_trigger(description) or has_use_when_trigger(description)


def validate_referenced_files(ctx: DocumentContext, report: ValidationReport) -> None:
    """Warn for each `references/...` path mentioned in the body that does not exist."""
    if ctx.directory is None:
        return
    for ref_path in unique(REFERENCE_PATTERN.findall(ctx.body)):
        if not (ctx.directory / ref_path).exists():
            report.warning(f"Referenced file not found: {ref_path}")


def validate_directory_structure(ctx: DocumentContext, report: ValidationReport) -> None:
    """Warn when scripts/ or references/ exist but hold nothing useful."""
    if ctx.directory is None:
        return

    scripts_dir = ctx.directory / "scripts"
    if scripts_dir.is_dir() and not any(scripts_dir.iterdir()):
        report.warning("scripts/ directory is empty")

    references_dir = ctx.directory / "references"
    if references_dir.is_dir() and not any(p.is_file() for p in references_dir.iterdir()):
        report.warning("references/ directory is empty (excluding subdirs)")


SKILL_PROFILE = ValidatorProfile(
    kind="skill",
    document_label=SKILL_FILENAME,
    required_fields=("name", "description"),
    allowed_fields=ALLOWED_PROPERTIES,
    name_must_match_dir=True,
    description_max_length=MAX_DESCRIPTION_LENGTH,
    forbid_angle_brackets=True,
    has_trigger=has_skill_trigger,
    trigger_warning='Description missing numbered trigger scenarios (e.g., "(1) Creating..., (2) Editing...")',
    max_lines=MAX_SKILL_LINES,
    context_checks=(validate_referenced_files, validate_directory_structure),
)


def resolve_skill_dir(path: Path) -> Path:
    """Accept either the skill directory or its SKILL.md."""
    if path.is_file() and path.name == SKILL_FILENAME:
        return path.parent
    return path


def validate_skill_content(content: str, skill_path: Path) -> ValidationReport:
    """Validate SKILL.md content for the skill rooted at skill_path."""
    return validate_document(
        content,
        SKILL_PROFILE,
        source=skill_path / SKILL_FILENAME,
        directory=skill_path,
    )


def validate_skill(skill_path: Path) -> ValidationReport:
    """Validate a complete skill directory.

    Args:
        skill_path: Path to the skill directory (SKILL.md must exist)

    Returns:
        ValidationReport with all findings
    """
    return validate_file(skill_path / SKILL_FILENAME, SKILL_PROFILE, directory=skill_path)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Validate a skill directory")
    parser.add_argument("skill_path", help="Path to the skill directory (or its SKILL.md)")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    args = parser.parse_args()

    given = Path(args.skill_path)
    if not given.exists():
        return fail(f"{given} does not exist")

    skill_path = resolve_skill_dir(given.resolve())
    if not (skill_path / SKILL_FILENAME).is_file():
        return fail(f"Missing {SKILL_FILENAME} file in {skill_path}")

    report = validate_skill(skill_path)

    if args.json:
        print_json(report, EXIT_OK)
    else:
        print_report(report, f"Validating skill: {skill_path}", EXIT_OK)

    return report.exit_code(EXIT_OK)


if __name__ == "__main__":
    sys.exit(main())
