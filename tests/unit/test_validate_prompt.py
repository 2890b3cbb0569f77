#!/usr/bin/env python3
"""Tests for validate_prompt.py - prompt file validator with three-way exit codes."""

import json
import subprocess
import sys
from pathlib import Path

import pytest

from frontmatter_parser import NO_FRONTMATTER_ERROR
from validate_prompt import (
    check_passive_voice,
    check_undocumented_variables,
    check_unclosed_tags,
    check_vague_instructions,
    estimate_tokens,
    validate_prompt,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SCRIPT_PATH = PROJECT_ROOT / "scripts" / "validate_prompt.py"

GOOD_PROMPT = """---
name: summarize-article
description: Summarizes news articles into bullets. Use when condensing long articles.
---

<role>
You are a summarization assistant.
</role>

<instructions>
Summarize the article in three bullet points.
The input {{article}} (plain text of the article) follows.
</instructions>

<output>
Return a markdown list.
</output>

<example>
- Point one
</example>

<guardrails>
Refuse to summarize empty content.
</guardrails>
"""


def run_validator(*args: str) -> subprocess.CompletedProcess[str]:
    """Run validate_prompt.py with given args and return result."""
    cmd = [sys.executable, str(SCRIPT_PATH)] + list(args)
    return subprocess.run(cmd, capture_output=True, text=True, timeout=30)


@pytest.fixture
def write_prompt(tmp_path: Path):
    """Write prompt content to a file and return its path."""

    def _write(content: str, filename: str = "summarize-article.md") -> Path:
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")
        return path

    return _write


class TestBodyChecks:
    """Tests for the individual prompt body checks."""

    def test_vague_phrase_reported_with_match(self) -> None:
        warnings = check_vague_instructions("Be helpful and do your best. Be helpful again.")
        assert warnings == [
            'Vague instruction detected: "Be helpful". Be more specific.',
            'Vague instruction detected: "do your best". Be more specific.',
        ]

    def test_passive_voice(self) -> None:
        warnings = check_passive_voice("The output should be formatted as JSON.")
        assert warnings == ['Passive voice detected: "should be formatted". Use imperative voice.']

    def test_unclosed_tag_warned_once(self) -> None:
        body = "<context>\nfirst\n<context>\nsecond\n<rules>x</rules>\n"
        assert check_unclosed_tags(body) == ["Unclosed XML tag: <context>"]

    def test_undocumented_variable_warned_once(self) -> None:
        body = "Summarize {{text}} now. Then summarize {{text}} again."
        assert check_undocumented_variables(body) == [
            "Variable {{text}} may be undocumented. Consider adding description."
        ]

    def test_documented_variable(self) -> None:
        assert check_undocumented_variables("Read {{text}} (the raw article body).") == []
        assert check_undocumented_variables("{{date}}: string in ISO format") == []

    def test_estimate_tokens(self) -> None:
        # 3 words * 1.3 + 1 punctuation * 0.5 = 4.4
        assert estimate_tokens("one two three.") == 5


class TestValidatePrompt:
    """Tests for whole-file prompt validation."""

    def test_complete_prompt_is_clean(self, write_prompt) -> None:
        report = validate_prompt(write_prompt(GOOD_PROMPT))
        assert report.errors == []
        assert report.warnings == []
        assert report.exit_code(2) == 0

    def test_info_lines(self, write_prompt) -> None:
        report = validate_prompt(write_prompt(GOOD_PROMPT))
        assert report.info_lines[0] == f"File size: {len(GOOD_PROMPT)} characters"
        assert report.info_lines[1] == "Sections found: role/identity, instructions, output format"
        assert report.info_lines[2].startswith("Estimated tokens: ")

    def test_missing_sections(self, write_prompt) -> None:
        content = "---\nname: p\ndescription: Answers questions. Use when asked.\n---\nJust answer.\n"
        report = validate_prompt(write_prompt(content))
        assert report.warnings[:3] == [
            "Missing recommended section: role/identity. Consider adding <role> block.",
            "Missing recommended section: instructions. Consider adding <instructions> block.",
            "Missing recommended section: output format. Consider adding <output format> block.",
        ]
        assert "No examples found. Consider adding <examples> section for better results." in report.warnings
        assert "No guardrails/edge case handling found. Consider adding <guardrails> section." in report.warnings

    def test_name_is_required(self, write_prompt) -> None:
        content = GOOD_PROMPT.replace("name: summarize-article\n", "")
        report = validate_prompt(write_prompt(content))
        assert report.errors == ["Missing required field: name"]

    def test_missing_frontmatter_single_error(self, write_prompt) -> None:
        report = validate_prompt(write_prompt("You are a helper.\n"))
        assert report.errors == [NO_FRONTMATTER_ERROR]
        assert report.warnings == []
        assert report.info_lines == []

    def test_token_budget_warnings(self, write_prompt) -> None:
        report = validate_prompt(write_prompt(GOOD_PROMPT + "word " * 3200))
        assert any("exceeds recommended limit of 4000" in w for w in report.warnings)

        report = validate_prompt(write_prompt(GOOD_PROMPT + "word " * 5000))
        assert any(w.startswith("High token count") for w in report.warnings)

    def test_token_budget_warning_precedes_examples_and_guardrails(self, write_prompt) -> None:
        content = GOOD_PROMPT.replace("<example>\n- Point one\n</example>\n\n", "").replace(
            "<guardrails>\nRefuse to summarize empty content.\n</guardrails>\n", ""
        )
        report = validate_prompt(write_prompt(content + "word " * 3200))
        assert report.warnings == [
            f"Token count ({estimate_tokens(content + 'word ' * 3200)}) exceeds recommended limit of 4000. "
            "Review for efficiency.",
            "No examples found. Consider adding <examples> section for better results.",
            "No guardrails/edge case handling found. Consider adding <guardrails> section.",
        ]


class TestPromptCli:
    """Tests for the three-way exit status of the CLI."""

    def test_clean_exits_zero(self, write_prompt) -> None:
        result = run_validator(str(write_prompt(GOOD_PROMPT)))
        assert result.returncode == 0
        assert "Info:" in result.stdout

    def test_warnings_only_exit_two(self, write_prompt) -> None:
        content = GOOD_PROMPT.replace("<guardrails>\nRefuse to summarize empty content.\n</guardrails>\n", "")
        result = run_validator(str(write_prompt(content)))
        assert result.returncode == 2
        assert "Result: PASSED with warnings (1)" in result.stdout

    def test_errors_exit_one(self, write_prompt) -> None:
        content = GOOD_PROMPT.replace("Summarizes news articles into bullets. Use when condensing long articles.", "Sums")
        result = run_validator(str(write_prompt(content)))
        assert result.returncode == 1
        assert "Description too short (4 chars, minimum 20)" in result.stdout

    def test_json_reports_prompt_exit_code(self, write_prompt) -> None:
        content = GOOD_PROMPT.replace("Summarize the article", "Be helpful and summarize the article")
        result = run_validator(str(write_prompt(content)), "--json")
        data = json.loads(result.stdout)
        assert result.returncode == 2
        assert data["exit_code"] == 2
        assert data["warnings"] == ['Vague instruction detected: "Be helpful". Be more specific.']

    def test_missing_file_is_fatal(self, tmp_path: Path) -> None:
        result = run_validator(str(tmp_path / "missing.md"))
        assert result.returncode == 1
        assert result.stdout == ""
        assert "Error: File not found" in result.stderr

    def test_non_utf8_file_is_reported(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.md"
        path.write_bytes(GOOD_PROMPT.encode("utf-8") + b"\xff\xfe\n")
        result = run_validator(str(path))
        assert result.returncode == 1
        assert "File is not valid UTF-8" in result.stdout
        assert "Traceback" not in result.stderr
