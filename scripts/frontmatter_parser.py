#!/usr/bin/env python3
"""
Agent Skill Toolkit - Frontmatter Parser

Reads the ``---`` delimited header at the top of agent, skill and prompt
markdown files. Only the flat subset those files use is understood:

- ``key: value`` pairs, keys matching ``\\w[\\w-]*``
- ``true`` / ``false`` booleans (case-sensitive)
- ``"double"`` and ``'single'`` quoted strings
- ``>`` and ``|`` block scalars, both folded into one space-joined line
- a bare ``key:`` followed by indented lines (folded the same way) or by
  nothing, which yields an empty mapping placeholder

Sequences and nested mappings are not parsed, and a later duplicate key
silently replaces the earlier one.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any

DELIMITER = "---"

NO_FRONTMATTER_ERROR = "Missing YAML frontmatter: no frontmatter block found (file must start with ---)"

KEY_VALUE_PATTERN = re.compile(r"^(\w[\w-]*)\s*:\s*(.*)$")
INDENTED_PATTERN = re.compile(r"^\s+")

BLOCK_INDICATORS = {">", "|"}
BOOLEAN_LITERALS = {"true": True, "false": False}


class FoldState(enum.Enum):
    """State of the multi-line continuation scanner."""

    IDLE = "idle"
    ACCUMULATING = "accumulating"


@dataclass
class ParsedDocument:
    """Result of splitting a document into frontmatter and body.

    Attributes:
        frontmatter: Parsed key/value mapping, or None when no header block exists
        body: Text after the closing delimiter (the whole document when absent)
        error: Parse error message when the header block is missing
    """

    frontmatter: dict[str, Any] | None
    body: str
    error: str | None = None


@dataclass
class _HeaderScanner:
    """Line-by-line scanner for the header block.

    While ACCUMULATING, ``key`` names the field being folded and ``parts``
    holds its stripped continuation lines; ``empty_default`` is what the key
    gets if no continuation line ever arrives.
    """

    mapping: dict[str, Any] = field(default_factory=dict)
    state: FoldState = FoldState.IDLE
    key: str = ""
    parts: list[str] = field(default_factory=list)
    empty_default: Any = ""

    def feed(self, line: str) -> None:
        if not line.strip():
            return

        if self.state is FoldState.ACCUMULATING and INDENTED_PATTERN.match(line):
            self.parts.append(line.strip())
            return

        self.flush()

        match = KEY_VALUE_PATTERN.match(line)
        if not match:
            return
        key, raw_value = match.group(1), match.group(2).strip()

        if raw_value in BLOCK_INDICATORS:
            self._begin(key, empty_default="")
        elif raw_value == "":
            self._begin(key, empty_default={})
        else:
            self.mapping[key] = parse_scalar(raw_value)

    def flush(self) -> None:
        if self.state is not FoldState.ACCUMULATING:
            return
        if self.parts:
            self.mapping[self.key] = " ".join(self.parts)
        else:
            self.mapping[self.key] = self.empty_default
        self.state = FoldState.IDLE
        self.key = ""
        self.parts = []

    def _begin(self, key: str, empty_default: Any) -> None:
        self.state = FoldState.ACCUMULATING
        self.key = key
        self.parts = []
        self.empty_default = empty_default


def parse_scalar(value: str) -> str | bool:
    """Resolve a single-line value: boolean, quoted string, or bare string."""
    if value in BOOLEAN_LITERALS:
        return BOOLEAN_LITERALS[value]
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def split_frontmatter(document: str) -> tuple[list[str] | None, str]:
    """Split a document into header lines and body.

    The first line must be exactly ``---``; the header ends at the next line
    that is exactly ``---``. Returns (None, document) when either is missing.
    """
    lines = document.replace("\r\n", "\n").split("\n")
    if lines[0].rstrip() != DELIMITER:
        return None, document

    for index in range(1, len(lines)):
        if lines[index].rstrip() == DELIMITER:
            return lines[1:index], "\n".join(lines[index + 1 :])

    return None, document


def parse_header(lines: list[str]) -> dict[str, Any]:
    """Parse header lines into an ordered key/value mapping."""
    scanner = _HeaderScanner()
    for line in lines:
        scanner.feed(line)
    scanner.flush()
    return scanner.mapping


def parse_frontmatter(document: str) -> ParsedDocument:
    """Parse frontmatter from a markdown document.

    Returns:
        ParsedDocument with the mapping and body, or with ``frontmatter=None``,
        the untouched document as body and an error message when the document
        does not open with a complete ``---`` block.
    """
    header, body = split_frontmatter(document)
    if header is None:
        return ParsedDocument(frontmatter=None, body=document, error=NO_FRONTMATTER_ERROR)
    return ParsedDocument(frontmatter=parse_header(header), body=body)
