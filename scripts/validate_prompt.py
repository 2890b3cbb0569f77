#!/usr/bin/env python3
"""
Agent Skill Toolkit - Prompt Validator

Validates a prompt file for structure, content, and quality: required
frontmatter, role / instructions / output sections, vague or passive
instructions, unclosed XML-like tags, undocumented {{variables}}, token
budget, examples and guardrails.

Usage:
    python scripts/validate_prompt.py prompts/summarize-article.md
    python scripts/validate_prompt.py prompts/summarize-article.md --json

Exit codes:
    0 - All checks passed
    1 - Errors found (must fix), or the file does not exist
    2 - Warnings only (review recommended)
"""

from __future__ import annotations

import argparse
import math
import re
import sys
from pathlib import Path

from frontmatter_rules import (
    DocumentContext,
    ValidatorProfile,
    after_context,
    has_use_when_trigger,
    matches_pattern,
    require_cue,
    validate_file,
)
from skill_validation_common import (
    EXIT_WARNINGS,
    PatternRule,
    ValidationReport,
    fail,
    match_rules,
    print_json,
    print_report,
    unique,
)

# (section name, pattern) pairs; a section counts as present when its pattern matches
REQUIRED_SECTIONS = [
    ("role/identity", re.compile(r"<role>|^#\s*Role|^You are", re.IGNORECASE | re.MULTILINE)),
    ("instructions", re.compile(r"<instructions>|^#\s*Instructions|^##\s*Instructions", re.IGNORECASE | re.MULTILINE)),
    ("output format", re.compile(r"<output>|^#\s*Output|^##\s*Output", re.IGNORECASE | re.MULTILINE)),
]

VAGUE_PATTERNS = [
    PatternRule(re.compile(r"make it good", re.IGNORECASE), "Vague instruction detected", "Be more specific."),
    PatternRule(re.compile(r"be helpful", re.IGNORECASE), "Vague instruction detected", "Be more specific."),
    PatternRule(re.compile(r"do your best", re.IGNORECASE), "Vague instruction detected", "Be more specific."),
    PatternRule(re.compile(r"as needed", re.IGNORECASE), "Vague instruction detected", "Be more specific."),
    PatternRule(re.compile(r"when appropriate", re.IGNORECASE), "Vague instruction detected", "Be more specific."),
    PatternRule(re.compile(r"if necessary", re.IGNORECASE), "Vague instruction detected", "Be more specific."),
]

PASSIVE_PATTERNS = [
    PatternRule(re.compile(r"should be \w+ed", re.IGNORECASE), "Passive voice detected", "Use imperative voice."),
    PatternRule(re.compile(r"are to be", re.IGNORECASE), "Passive voice detected", "Use imperative voice."),
    PatternRule(re.compile(r"needs to be", re.IGNORECASE), "Passive voice detected", "Use imperative voice."),
    PatternRule(re.compile(r"must be \w+ed", re.IGNORECASE), "Passive voice detected", "Use imperative voice."),
]

OPEN_TAG_PATTERN = re.compile(r"<(\w+)>")
VARIABLE_PATTERN = re.compile(r"\{\{[^}]+\}\}")

# Characters of context on each side of a {{variable}} searched for a description
VARIABLE_CONTEXT_CHARS = 100
VARIABLE_DOC_PATTERN = re.compile(r"\([^)]*\)|:.*(?:format|type|contains|represents)", re.IGNORECASE)

EXAMPLES_PATTERN = re.compile(r"<example>|^###?\s*Example", re.IGNORECASE | re.MULTILINE)
GUARDRAILS_PATTERN = re.compile(
    r"<guardrails>|^###?\s*Guardrails|^###?\s*Edge|^###?\s*Constraints", re.IGNORECASE | re.MULTILINE
)

# Token budget thresholds
RECOMMENDED_TOKENS = 4000
MAX_TOKENS = 6000

PUNCTUATION_PATTERN = re.compile(r"[.,!?;:'\"()\[\]{}]")


def estimate_tokens(text: str) -> int:
    """Approximate tokenizer output: ~1.3 tokens per word plus half a token per punctuation mark."""
    words = text.split()
    punctuation = len(PUNCTUATION_PATTERN.findall(text))
    return math.ceil(len(words) * 1.3 + punctuation * 0.5)


def find_sections(body: str) -> tuple[list[str], list[str]]:
    """Split REQUIRED_SECTIONS into (found, missing) names."""
    found: list[str] = []
    missing: list[str] = []
    for name, pattern in REQUIRED_SECTIONS:
        if pattern.search(body):
            found.append(name)
        else:
            missing.append(name)
    return found, missing


def check_required_sections(body: str) -> list[str]:
    _, missing = find_sections(body)
    return [
        f"Missing recommended section: {section}. Consider adding <{section.split('/')[0]}> block."
        for section in missing
    ]


def check_vague_instructions(body: str) -> list[str]:
    return [f'{rule.label}: "{match.group(0)}". {rule.suggestion}' for rule, match in match_rules(VAGUE_PATTERNS, body)]


def check_passive_voice(body: str) -> list[str]:
    return [f'{rule.label}: "{match.group(0)}". {rule.suggestion}' for rule, match in match_rules(PASSIVE_PATTERNS, body)]


def check_unclosed_tags(body: str) -> list[str]:
    """Warn once for every <tag> whose </tag> never appears."""
    warnings = []
    for tag_name in unique(OPEN_TAG_PATTERN.findall(body)):
        if f"</{tag_name}>" not in body:
            warnings.append(f"Unclosed XML tag: <{tag_name}>")
    return warnings


def check_undocumented_variables(body: str) -> list[str]:
    """Warn once per {{variable}} with no description near its first use."""
    warnings = []
    for variable in unique(VARIABLE_PATTERN.findall(body)):
        index = body.index(variable)
        start = max(0, index - VARIABLE_CONTEXT_CHARS)
        end = min(len(body), index + len(variable) + VARIABLE_CONTEXT_CHARS)
        if not VARIABLE_DOC_PATTERN.search(body[start:end]):
            warnings.append(f"Variable {variable} may be undocumented. Consider adding description.")
    return warnings


def check_token_budget(ctx: DocumentContext, report: ValidationReport) -> None:
    """Report size statistics and warn when the prompt is expensive."""
    found, _ = find_sections(ctx.body)
    token_count = estimate_tokens(ctx.content)

    report.info(f"File size: {len(ctx.content)} characters")
    report.info(f"Sections found: {', '.join(found) or 'none'}")
    report.info(f"Estimated tokens: {token_count}")

    if token_count > MAX_TOKENS:
        report.warning(
            f"High token count ({token_count}). Consider splitting or simplifying. Recommended: <{RECOMMENDED_TOKENS}."
        )
    elif token_count > RECOMMENDED_TOKENS:
        report.warning(
            f"Token count ({token_count}) exceeds recommended limit of {RECOMMENDED_TOKENS}. Review for efficiency."
        )


PROMPT_PROFILE = ValidatorProfile(
    kind="prompt",
    document_label="Prompt",
    required_fields=("name", "description"),
    has_trigger=has_use_when_trigger,
    trigger_warning='Description should include trigger scenarios (e.g., "Use when...")',
    body_checks=(
        check_required_sections,
        check_vague_instructions,
        check_passive_voice,
        check_unclosed_tags,
        check_undocumented_variables,
    ),
    context_checks=(
        check_token_budget,
        after_context(
            require_cue(
                matches_pattern(EXAMPLES_PATTERN),
                "No examples found. Consider adding <examples> section for better results.",
            )
        ),
        after_context(
            require_cue(
                matches_pattern(GUARDRAILS_PATTERN),
                "No guardrails/edge case handling found. Consider adding <guardrails> section.",
            )
        ),
    ),
    warn_only_exit_code=EXIT_WARNINGS,
)


def validate_prompt(file_path: Path) -> ValidationReport:
    """Validate a prompt file.

    Args:
        file_path: Path to the prompt .md file (must exist)

    Returns:
        ValidationReport with errors, warnings and info lines
    """
    return validate_file(file_path, PROMPT_PROFILE, directory=file_path.parent)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Validate a prompt file")
    parser.add_argument("path", help="Path to the prompt .md file")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    args = parser.parse_args()

    file_path = Path(args.path)
    if not file_path.is_file():
        return fail(f"File not found: {file_path}")

    report = validate_prompt(file_path)

    if args.json:
        print_json(report, EXIT_WARNINGS)
    else:
        print_report(report, f"Validating: {file_path.name}", EXIT_WARNINGS)

    return report.exit_code(EXIT_WARNINGS)


if __name__ == "__main__":
    sys.exit(main())
