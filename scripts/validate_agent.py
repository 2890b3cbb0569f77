#!/usr/bin/env python3
"""
Agent Skill Toolkit - Agent Validator

Validates agent markdown files: frontmatter, description trigger language,
role / output-format / constraints cues in the prompt body, and the filename.

Usage:
    python scripts/validate_agent.py path/to/agent.md
    python scripts/validate_agent.py path/to/agent/  # validate all agents in dir
    python scripts/validate_agent.py path/to/agent.md --json

Exit codes:
    0 - No errors (warnings are advisory)
    1 - Errors found (must fix), or the path does not exist
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from frontmatter_rules import (
    DocumentContext,
    ValidatorProfile,
    contains_any,
    has_use_when_trigger,
    require_cue,
    validate_file,
)
from skill_validation_common import (
    EXIT_OK,
    NAME_CHARSET_PATTERN,
    ValidationReport,
    fail,
    print_json,
    print_report,
)


def validate_filename(ctx: DocumentContext, report: ValidationReport) -> None:
    """Warn when the agent filename is not kebab-case."""
    if ctx.source is None:
        return
    stem = ctx.source.stem
    if not NAME_CHARSET_PATTERN.match(stem):
        report.warning(f"Filename should be kebab-case: {stem}.md")


AGENT_PROFILE = ValidatorProfile(
    kind="agent",
    document_label="Agent",
    required_fields=("description",),
    has_trigger=has_use_when_trigger,
    trigger_warning='Description should include trigger scenarios (e.g., "Use when...")',
    body_checks=(
        require_cue(
            contains_any("output format", "# output", "## output"),
            "Agent prompt should specify output format for structured results",
        ),
        require_cue(
            contains_any("constraint", "do not", "don't"),
            "Consider adding constraints to prevent unwanted behaviors",
        ),
        require_cue(
            contains_any("you are"),
            'Agent prompt should define role (e.g., "You are a...")',
        ),
    ),
    context_checks=(validate_filename,),
)


def validate_agent(agent_path: Path) -> ValidationReport:
    """Validate a single agent file.

    Args:
        agent_path: Path to the agent .md file (must exist)

    Returns:
        ValidationReport with all findings
    """
    return validate_file(agent_path, AGENT_PROFILE, directory=agent_path.parent)


def validate_agents_directory(agents_dir: Path) -> list[ValidationReport]:
    """Validate every .md agent file in a directory, sorted by name."""
    return [validate_agent(path) for path in sorted(agents_dir.glob("*.md"))]


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Validate an agent file or directory")
    parser.add_argument("path", help="Path to agent .md file or agent/ directory")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    args = parser.parse_args()

    path = Path(args.path)

    if not path.exists():
        return fail(f"Agent file not found: {path}")

    if path.is_dir():
        reports = validate_agents_directory(path)
        if not reports:
            return fail(f"No agent definition files (.md) found in {path}")
    else:
        reports = [validate_agent(path)]

    if args.json:
        if len(reports) == 1:
            print_json(reports[0])
        else:
            combined = {
                "agents": [r.to_dict() for r in reports],
                "overall_exit_code": max(r.exit_code() for r in reports),
            }
            print(json.dumps(combined, indent=2))
    else:
        for report in reports:
            print_report(report, f"Validating agent: {report.source}", EXIT_OK)

    return max(r.exit_code() for r in reports)


if __name__ == "__main__":
    sys.exit(main())
