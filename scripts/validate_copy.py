#!/usr/bin/env python3
"""
Agent Skill Toolkit - Copy Validator

Scores marketing copy against the copywriting skill's quality criteria:
red-flag phrases, weak patterns, and a heuristic "4 U's" score (useful,
urgent, unique, ultra-specific).

Usage:
    python scripts/validate_copy.py "Your headline or copy here"
    python scripts/validate_copy.py --file path/to/copy.txt

Output:
    JSON with score, red flags, weak patterns, metrics and recommendations.

Exit codes:
    0 - Copy passes (score >= 2.5 and no red flags)
    1 - Copy fails, or the input could not be read
"""

from __future__ import annotations

import argparse
import json
import re
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path

from skill_validation_common import EXIT_ERRORS, EXIT_OK, PatternRule, fail, match_rules

# Phrases that trigger an automatic rewrite
RED_FLAGS = [
    PatternRule(
        re.compile(r"\binnovative\s+solution\b", re.IGNORECASE),
        "innovative solution",
        "What specifically is new? Replace with concrete proof.",
    ),
    PatternRule(
        re.compile(r"\bbest[\s-]in[\s-]class\b", re.IGNORECASE),
        "best in class",
        "Prove it with specifics. Who says so?",
    ),
    PatternRule(
        re.compile(r"\bseamless(\s+experience)?\b", re.IGNORECASE),
        "seamless",
        "What does the user actually see? Be concrete.",
    ),
    PatternRule(
        re.compile(r"\btransform\s+your\b", re.IGNORECASE),
        "transform your",
        "What changes concretely? Show the before/after.",
    ),
    PatternRule(
        re.compile(r"\bcutting[\s-]edge\b", re.IGNORECASE),
        "cutting-edge",
        "What technology specifically? Replace with proof.",
    ),
    PatternRule(re.compile(r"\bleverage\b", re.IGNORECASE), "leverage", 'Use "use" instead.'),
    PatternRule(re.compile(r"\bsynergy\b", re.IGNORECASE), "synergy", "What's the actual benefit? Be specific."),
    PatternRule(
        re.compile(r"\brevolutionary\b", re.IGNORECASE),
        "revolutionary",
        "What's the specific innovation? Prove it.",
    ),
    PatternRule(
        re.compile(r"\bworld[\s-]class\b", re.IGNORECASE),
        "world-class",
        "Who says so? Add credentials or proof.",
    ),
    PatternRule(re.compile(r"\bend[\s-]to[\s-]end\b", re.IGNORECASE), "end-to-end", "List what's actually included."),
    PatternRule(re.compile(r"\binnovative\b", re.IGNORECASE), "innovative", "What's new? Replace with specific proof."),
    PatternRule(
        re.compile(r"\bstate[\s-]of[\s-]the[\s-]art\b", re.IGNORECASE),
        "state-of-the-art",
        "What technology? Be specific.",
    ),
    PatternRule(
        re.compile(r"\bgame[\s-]chang(er|ing)\b", re.IGNORECASE),
        "game-changer",
        "How does it change things? Show concrete impact.",
    ),
    PatternRule(
        re.compile(r"\bnext[\s-]generation\b", re.IGNORECASE),
        "next-generation",
        "What's different from current? Be specific.",
    ),
]

WEAK_PATTERNS = [
    PatternRule(
        re.compile(r"\b(very|really|extremely|highly|incredibly|absolutely)\s+\w+", re.IGNORECASE),
        "Weak intensifier",
        "Remove the intensifier or use a stronger word.",
    ),
    PatternRule(
        re.compile(r"\band\b.*\band\b.*\band\b", re.IGNORECASE),
        "Too many 'and's (3+)",
        "Break into separate points. Focus on one benefit.",
    ),
    PatternRule(
        re.compile(
            r"\b(amazing|incredible|powerful|innovative|revolutionary|cutting-edge|seamless|robust)\s+"
            r"(amazing|incredible|powerful|innovative|revolutionary|cutting-edge|seamless|robust)\b",
            re.IGNORECASE,
        ),
        "Multiple adjectives",
        "Hiding weak nouns. Pick one strong descriptor or use proof.",
    ),
]

# Keyword families for the 4 U's
BENEFIT_WORDS = PatternRule(
    re.compile(
        r"\b(save|get|learn|discover|achieve|earn|grow|improve|boost|increase|double|triple|cut|reduce|free|bonus)\b",
        re.IGNORECASE,
    ),
    "useful",
)
URGENCY_WORDS = PatternRule(
    re.compile(
        r"\b(now|today|tonight|tomorrow|this week|limited|hurry|fast|quick|instant|deadline|ends?|last chance"
        r"|before|only \d+)\b",
        re.IGNORECASE,
    ),
    "urgent",
)
GENERIC_WORDS = PatternRule(
    re.compile(r"\b(best|leading|top|premier|quality|professional|trusted|reliable)\b", re.IGNORECASE),
    "unique",
)
SPECIFIC_PATTERNS = PatternRule(
    re.compile(
        r"\b(\d+%|\d+x|\$\d+|\d+ (days?|hours?|minutes?|seconds?|weeks?|months?)|\d{1,3}(,\d{3})*\+?)\b",
        re.IGNORECASE,
    ),
    "ultra_specific",
)

MAX_SCORE = 4
PASS_SCORE = 2.5
RED_FLAG_PENALTY = 0.25
MAX_RED_FLAG_PENALTY = 1.0
MIN_SCORE = 1.0

WORDS_PER_MINUTE = 200
MAX_AVG_SENTENCE_WORDS = 25
MAX_PARAGRAPH_WORDS = 50
MAX_RECOMMENDATIONS = 5


@dataclass
class FourUs:
    useful: int
    urgent: int
    unique: int
    ultra_specific: int

    @property
    def average(self) -> float:
        return (self.useful + self.urgent + self.unique + self.ultra_specific) / 4


@dataclass
class CopyMetrics:
    word_count: int
    sentence_count: int
    avg_words_per_sentence: float
    reading_time_seconds: float
    paragraph_count: int
    longest_paragraph_words: int


@dataclass
class CopyResult:
    score: float
    max_score: int
    passed: bool
    red_flags: list[dict[str, str]]
    weak_patterns: list[dict[str, str]]
    metrics: CopyMetrics
    four_us: FourUs
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["pass"] = data.pop("passed")
        return data


def count_words(text: str) -> int:
    return len(text.split())


def count_sentences(text: str) -> int:
    sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
    return max(len(sentences), 1)


def count_paragraphs(text: str) -> tuple[int, int]:
    """Return (paragraph count, words in the longest paragraph)."""
    paragraphs = [p for p in re.split(r"\n\s*\n", text) if p.strip()]
    longest = max((count_words(p) for p in paragraphs), default=0)
    return max(len(paragraphs), 1), longest


def detect_red_flags(text: str) -> list[dict[str, str]]:
    return [{"word": rule.label, "suggestion": rule.suggestion} for rule, _ in match_rules(RED_FLAGS, text)]


def detect_weak_patterns(text: str) -> list[dict[str, str]]:
    return [{"issue": rule.label, "suggestion": rule.suggestion} for rule, _ in match_rules(WEAK_PATTERNS, text)]


def _band(matches: int, top: int, mid: int, base: int) -> int:
    if matches >= 2:
        return top
    if matches >= 1:
        return mid
    return base


def score_four_us(text: str) -> FourUs:
    """Heuristic 4 U's scoring from keyword-family counts; a rough approximation."""
    generic = GENERIC_WORDS.count(text)
    if generic >= 2:
        unique = 1
    elif generic == 0:
        unique = 3
    else:
        unique = 2

    return FourUs(
        useful=_band(BENEFIT_WORDS.count(text), top=4, mid=3, base=2),
        urgent=_band(URGENCY_WORDS.count(text), top=4, mid=3, base=1),
        unique=unique,
        ultra_specific=_band(SPECIFIC_PATTERNS.count(text), top=4, mid=3, base=1),
    )


def build_metrics(text: str) -> CopyMetrics:
    word_count = count_words(text)
    sentence_count = count_sentences(text)
    paragraph_count, longest_paragraph_words = count_paragraphs(text)
    return CopyMetrics(
        word_count=word_count,
        sentence_count=sentence_count,
        avg_words_per_sentence=round(word_count / sentence_count, 1),
        reading_time_seconds=round(word_count / WORDS_PER_MINUTE * 60, 1),
        paragraph_count=paragraph_count,
        longest_paragraph_words=longest_paragraph_words,
    )


def generate_recommendations(
    four_us: FourUs,
    red_flags: list[dict[str, str]],
    weak_patterns: list[dict[str, str]],
    metrics: CopyMetrics,
) -> list[str]:
    """Pick the most useful fixes, at most MAX_RECOMMENDATIONS."""
    recommendations: list[str] = []

    if four_us.useful < 3:
        recommendations.append("Add clear benefit. What does the reader get?")
    if four_us.urgent < 2:
        recommendations.append("Add urgency. Why should they act now? (deadline, limited spots, etc.)")
    if four_us.unique < 3:
        recommendations.append("Make it unique. Could a competitor say this? Find your specific angle.")
    if four_us.ultra_specific < 3:
        recommendations.append("Add specifics. Include numbers, timeframes, or concrete details.")

    for flag in red_flags[:3]:
        recommendations.append(f'Replace "{flag["word"]}": {flag["suggestion"]}')

    for pattern in weak_patterns[:2]:
        recommendations.append(f"{pattern['issue']}: {pattern['suggestion']}")

    if metrics.avg_words_per_sentence > MAX_AVG_SENTENCE_WORDS:
        recommendations.append("Sentences too long. Break up for readability (aim for 15-20 words avg).")
    if metrics.longest_paragraph_words > MAX_PARAGRAPH_WORDS:
        recommendations.append("Paragraphs too long. Keep under 2 lines (~40-50 words) for scannability.")

    return recommendations[:MAX_RECOMMENDATIONS]


def validate_copy(text: str) -> CopyResult:
    """Score a piece of copy.

    The score is the 4 U's average minus 0.25 per red flag (at most 1 point),
    floored at 1.0. Copy passes with a score of at least 2.5 and no red flags.
    """
    metrics = build_metrics(text)
    red_flags = detect_red_flags(text)
    weak_patterns = detect_weak_patterns(text)
    four_us = score_four_us(text)

    penalty = min(len(red_flags) * RED_FLAG_PENALTY, MAX_RED_FLAG_PENALTY)
    score = max(four_us.average - penalty, MIN_SCORE)

    return CopyResult(
        score=round(score, 1),
        max_score=MAX_SCORE,
        passed=score >= PASS_SCORE and not red_flags,
        red_flags=red_flags,
        weak_patterns=weak_patterns,
        metrics=metrics,
        four_us=four_us,
        recommendations=generate_recommendations(four_us, red_flags, weak_patterns, metrics),
    )


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Validate copy against copywriting quality criteria")
    parser.add_argument("text", nargs="*", help="Copy to validate (joined with spaces)")
    parser.add_argument("--file", type=Path, help="Read the copy from a file instead")
    args = parser.parse_args()

    if args.file is not None:
        try:
            text = args.file.read_text(encoding="utf-8")
        except OSError:
            return fail(f"Cannot read file: {args.file}")
    elif args.text:
        text = " ".join(args.text)
    else:
        parser.print_usage(sys.stderr)
        return EXIT_ERRORS

    result = validate_copy(text)
    print(json.dumps(result.to_dict(), indent=2))

    return EXIT_OK if result.passed else EXIT_ERRORS


if __name__ == "__main__":
    sys.exit(main())
