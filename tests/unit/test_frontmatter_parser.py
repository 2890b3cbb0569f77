#!/usr/bin/env python3
"""Tests for frontmatter_parser.py - restricted header block parser."""

from frontmatter_parser import NO_FRONTMATTER_ERROR, parse_frontmatter, parse_scalar, split_frontmatter


class TestSplitFrontmatter:
    """Tests for locating the --- delimited header block."""

    def test_header_and_body_are_separated(self) -> None:
        """Lines between the delimiters form the header, the rest is the body."""
        header, body = split_frontmatter("---\nname: x\n---\n# Title\n")
        assert header == ["name: x"]
        assert body == "# Title\n"

    def test_missing_opening_delimiter(self) -> None:
        """A document that does not open with --- has no header."""
        document = "# Title\n---\nname: x\n---\n"
        header, body = split_frontmatter(document)
        assert header is None
        assert body == document

    def test_missing_closing_delimiter(self) -> None:
        """An unterminated header block is treated as no header at all."""
        header, _ = split_frontmatter("---\nname: x\ndescription: y\n")
        assert header is None

    def test_closing_delimiter_at_end_of_file(self) -> None:
        """The closing --- may be the last line with no body after it."""
        header, body = split_frontmatter("---\nname: x\n---")
        assert header == ["name: x"]
        assert body == ""

    def test_crlf_line_endings(self) -> None:
        """Windows line endings are normalized before scanning."""
        parsed = parse_frontmatter("---\r\nname: x\r\n---\r\nbody\r\n")
        assert parsed.frontmatter == {"name": "x"}
        assert parsed.body == "body\n"


class TestParseScalar:
    """Tests for single-line value resolution."""

    def test_booleans(self) -> None:
        assert parse_scalar("true") is True
        assert parse_scalar("false") is False

    def test_booleans_are_case_sensitive(self) -> None:
        assert parse_scalar("True") == "True"

    def test_matching_quotes_are_stripped(self) -> None:
        assert parse_scalar('"my-tool"') == "my-tool"
        assert parse_scalar("'my-tool'") == "my-tool"

    def test_mismatched_quotes_are_kept(self) -> None:
        assert parse_scalar("\"my-tool'") == "\"my-tool'"


class TestParseFrontmatter:
    """Tests for the header state machine."""

    def test_folded_block_scalar(self) -> None:
        """A > block folds its indented lines into one space-joined string."""
        parsed = parse_frontmatter("---\ndescription: >\n  foo\n  bar\n---\nbody")
        assert parsed.frontmatter == {"description": "foo bar"}
        assert parsed.body == "body"
        assert parsed.error is None

    def test_literal_block_scalar_is_folded_too(self) -> None:
        parsed = parse_frontmatter("---\ndescription: |\n  first line\n  second line\n---\n")
        assert parsed.frontmatter == {"description": "first line second line"}

    def test_block_indicator_without_lines_is_empty_string(self) -> None:
        parsed = parse_frontmatter("---\ndescription: >\nname: x\n---\n")
        assert parsed.frontmatter == {"description": "", "name": "x"}

    def test_bare_key_without_lines_is_empty_mapping(self) -> None:
        """A bare key with nothing indented under it becomes an empty mapping placeholder."""
        parsed = parse_frontmatter("---\nname: x\nmetadata:\n---\n")
        assert parsed.frontmatter == {"name": "x", "metadata": {}}

    def test_bare_key_with_indented_lines_folds_to_string(self) -> None:
        parsed = parse_frontmatter("---\ntools:\n  write: false\n  edit: false\n---\n")
        assert parsed.frontmatter == {"tools": "write: false edit: false"}

    def test_blank_lines_do_not_end_a_fold(self) -> None:
        parsed = parse_frontmatter("---\ndescription: >\n  foo\n\n  bar\n---\n")
        assert parsed.frontmatter == {"description": "foo bar"}

    def test_duplicate_key_last_value_wins(self) -> None:
        parsed = parse_frontmatter("---\nname: first\nname: second\n---\n")
        assert parsed.frontmatter == {"name": "second"}

    def test_key_order_is_preserved(self) -> None:
        parsed = parse_frontmatter("---\nzeta: 1\nalpha: 2\nallowed-tools: Read\n---\n")
        assert list(parsed.frontmatter) == ["zeta", "alpha", "allowed-tools"]

    def test_unrecognized_lines_are_ignored(self) -> None:
        parsed = parse_frontmatter("---\nname: x\n- list item\n  # comment\n---\n")
        assert parsed.frontmatter == {"name": "x"}

    def test_value_containing_colons_is_kept_whole(self) -> None:
        parsed = parse_frontmatter("---\ndescription: Use when: (1) editing\n---\n")
        assert parsed.frontmatter == {"description": "Use when: (1) editing"}

    def test_missing_frontmatter_reports_error(self) -> None:
        """Without a header the whole document is the body and an error is set."""
        document = "# Just a heading\n\nSome text.\n"
        parsed = parse_frontmatter(document)
        assert parsed.frontmatter is None
        assert parsed.body == document
        assert parsed.error == NO_FRONTMATTER_ERROR

    def test_body_is_verbatim(self) -> None:
        parsed = parse_frontmatter("---\nname: x\n---\n\n# Title\n\n  indented\n")
        assert parsed.body == "\n# Title\n\n  indented\n"
