#!/usr/bin/env python3
"""Tests for validate_copy.py - marketing copy scorer."""

import json
import subprocess
import sys
from pathlib import Path

from validate_copy import (
    FourUs,
    detect_red_flags,
    detect_weak_patterns,
    score_four_us,
    validate_copy,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SCRIPT_PATH = PROJECT_ROOT / "scripts" / "validate_copy.py"

STRONG_COPY = "Save 40% and cut 2 hours of reporting work today. Start now."


def run_scorer(*args: str) -> subprocess.CompletedProcess[str]:
    """Run validate_copy.py with given args and return result."""
    cmd = [sys.executable, str(SCRIPT_PATH)] + list(args)
    return subprocess.run(cmd, capture_output=True, text=True, timeout=30)


class TestDetection:
    """Tests for the red-flag and weak-pattern catalogues."""

    def test_red_flags_in_catalogue_order(self) -> None:
        flags = detect_red_flags("Our innovative solution will transform your workflow")
        assert [f["word"] for f in flags] == ["innovative solution", "transform your", "innovative"]
        assert flags[1]["suggestion"] == "What changes concretely? Show the before/after."

    def test_red_flags_reported_once_each(self) -> None:
        flags = detect_red_flags("Leverage synergy. Leverage synergy again.")
        assert [f["word"] for f in flags] == ["leverage", "synergy"]

    def test_clean_text_has_no_flags(self) -> None:
        assert detect_red_flags(STRONG_COPY) == []

    def test_weak_patterns(self) -> None:
        issues = detect_weak_patterns("A really fast and cheap and simple and small tool")
        assert [i["issue"] for i in issues] == ["Weak intensifier", "Too many 'and's (3+)"]


class TestFourUs:
    """Tests for the heuristic 4 U's score bands."""

    def test_baseline_scores(self) -> None:
        assert score_four_us("A tool for teams.") == FourUs(useful=2, urgent=1, unique=3, ultra_specific=1)

    def test_top_bands(self) -> None:
        four_us = score_four_us(STRONG_COPY)
        assert four_us.useful == 4
        assert four_us.urgent == 4
        assert four_us.ultra_specific == 4

    def test_generic_words_lower_uniqueness(self) -> None:
        assert score_four_us("The best trusted partner").unique == 1
        assert score_four_us("A trusted partner").unique == 2


class TestValidateCopy:
    """Tests for the final score and pass rule."""

    def test_red_flags_fail(self) -> None:
        result = validate_copy("Our innovative solution will transform your workflow")
        assert result.passed is False
        assert len(result.red_flags) == 3
        # average 1.75 minus 0.75 penalty, floored at 1.0
        assert result.score == 1.0

    def test_strong_copy_passes(self) -> None:
        result = validate_copy(STRONG_COPY)
        assert result.red_flags == []
        assert result.score >= 2.5
        assert result.passed is True

    def test_penalty_is_capped(self) -> None:
        text = "Save 40% and cut 2 hours today, now. Innovative, seamless, revolutionary, world-class synergy."
        result = validate_copy(text)
        assert len(result.red_flags) >= 5
        assert result.score == round(result.four_us.average - 1.0, 1)

    def test_recommendations_limited(self) -> None:
        result = validate_copy("Innovative synergy. Leverage world-class, revolutionary tools. Very nice.")
        assert 0 < len(result.recommendations) <= 5

    def test_metrics(self) -> None:
        result = validate_copy("First sentence here. Second one!\n\nNew paragraph.")
        assert result.metrics.word_count == 7
        assert result.metrics.sentence_count == 3
        assert result.metrics.paragraph_count == 2
        assert result.metrics.longest_paragraph_words == 5

    def test_to_dict_uses_pass_key(self) -> None:
        data = validate_copy(STRONG_COPY).to_dict()
        assert data["pass"] is True
        assert "passed" not in data
        assert data["max_score"] == 4


class TestCopyCli:
    """Tests for the CLI input forms and exit codes."""

    def test_passing_copy_exits_zero(self) -> None:
        result = run_scorer(STRONG_COPY)
        assert result.returncode == 0
        assert json.loads(result.stdout)["pass"] is True

    def test_failing_copy_exits_one(self) -> None:
        result = run_scorer("Our", "innovative", "solution")
        assert result.returncode == 1
        assert json.loads(result.stdout)["red_flags"][0]["word"] == "innovative solution"

    def test_file_input(self, tmp_path: Path) -> None:
        copy_file = tmp_path / "copy.txt"
        copy_file.write_text(STRONG_COPY, encoding="utf-8")
        result = run_scorer("--file", str(copy_file))
        assert result.returncode == 0

    def test_unreadable_file_is_fatal(self, tmp_path: Path) -> None:
        result = run_scorer("--file", str(tmp_path / "missing.txt"))
        assert result.returncode == 1
        assert result.stdout == ""
        assert "Error: Cannot read file" in result.stderr

    def test_no_input_prints_usage(self) -> None:
        result = run_scorer()
        assert result.returncode == 1
        assert "usage:" in result.stderr
