"""
Tests for frontmatter extraction and stripping.

Tests verify that:
- Well-formed blocks are parsed into key/value pairs
- Absent, unterminated and garbled blocks degrade to an empty mapping
- Stripping removes the block and leaves the body intact
"""

import pytest as _pytest

import skillbook.skills.frontmatter as frontmatter

DOCUMENT = """---
name: condition-based-waiting
description: Use when tests are flaky
---

# Condition-Based Waiting

Body text.
"""


class TestExtractFrontmatter:
    """Tests for extract_frontmatter."""

    def test_parses_key_value_pairs(self) -> None:
        """Every key: value line inside the block is returned."""
        meta = frontmatter.extract_frontmatter(DOCUMENT)
        assert meta == {
            "name": "condition-based-waiting",
            "description": "Use when tests are flaky",
        }

    def test_value_keeps_inner_colons(self) -> None:
        """Only the first colon separates key from value."""
        text = "---\ndescription: Use when: things break\n---\nbody\n"
        meta = frontmatter.extract_frontmatter(text)
        assert meta["description"] == "Use when: things break"

    def test_strips_matching_quotes(self) -> None:
        """A quoted value loses one pair of surrounding quotes."""
        text = "---\nname: \"quoted\"\nother: 'single'\nmixed: \"a'\n---\n"
        meta = frontmatter.extract_frontmatter(text)
        assert meta["name"] == "quoted"
        assert meta["other"] == "single"
        assert meta["mixed"] == "\"a'"

    def test_ignores_unparsable_lines(self) -> None:
        """Lines that are not key: value do not fail the parse."""
        text = (
            "---\n"
            "name: good\n"
            "just some words\n"
            "  indented: continuation\n"
            "- list item\n"
            "description: still parsed\n"
            "---\n"
        )
        meta = frontmatter.extract_frontmatter(text)
        assert meta == {"name": "good", "description": "still parsed"}

    def test_empty_value(self) -> None:
        """A key with no value maps to an empty string."""
        meta = frontmatter.extract_frontmatter("---\nlicense:\n---\n")
        assert meta == {"license": ""}

    def test_no_opening_delimiter_returns_empty(self) -> None:
        """Documents without a leading delimiter have no frontmatter."""
        assert frontmatter.extract_frontmatter("# Title\n\nname: nope\n") == {}

    def test_delimiter_not_on_first_line_returns_empty(self) -> None:
        """The block must start the document."""
        text = "\n---\nname: late\n---\n"
        assert frontmatter.extract_frontmatter(text) == {}

    def test_unclosed_block_returns_empty(self) -> None:
        """An opening delimiter that is never closed yields no metadata."""
        assert frontmatter.extract_frontmatter("---\nname: open\nbody\n") == {}

    def test_empty_input(self) -> None:
        """Empty input yields an empty mapping."""
        assert frontmatter.extract_frontmatter("") == {}

    def test_tolerates_bom_and_crlf(self) -> None:
        """A UTF-8 BOM and Windows line endings are accepted."""
        text = "\ufeff---\r\nname: windows\r\n---\r\nbody\r\n"
        assert frontmatter.extract_frontmatter(text) == {"name": "windows"}


class TestStripFrontmatter:
    """Tests for strip_frontmatter."""

    def test_removes_block_and_leading_blank_lines(self) -> None:
        """Body starts at the first non-blank line after the block."""
        body = frontmatter.strip_frontmatter(DOCUMENT)
        assert body == "# Condition-Based Waiting\n\nBody text.\n"

    def test_no_delimiter_lines_remain(self) -> None:
        """Stripped output of a well-formed document has no delimiters."""
        body = frontmatter.strip_frontmatter(DOCUMENT)
        assert all(line.strip() != "---" for line in body.splitlines())

    def test_keeps_later_horizontal_rules(self) -> None:
        """Delimiter-looking lines in the body are content."""
        text = "---\nname: x\n---\nIntro\n\n---\n\nMore\n"
        assert frontmatter.strip_frontmatter(text) == "Intro\n\n---\n\nMore\n"

    def test_preserves_body_whitespace(self) -> None:
        """Indentation and trailing blank lines in the body are kept."""
        text = "---\nname: x\n---\n\n    code\n\n\n"
        assert frontmatter.strip_frontmatter(text) == "    code\n\n\n"

    @_pytest.mark.parametrize(
        "text",
        [
            "",
            "# Just markdown\n\nNo metadata.\n",
            "---\nname: unclosed\n\nBody without closing delimiter\n",
            "\n---\nname: late\n---\n",
        ],
    )
    def test_returns_input_without_block(self, text: str) -> None:
        """Without a complete block the text is returned unchanged."""
        assert frontmatter.strip_frontmatter(text) == text
        assert frontmatter.strip_frontmatter(frontmatter.strip_frontmatter(text)) == text

    def test_block_only_document(self) -> None:
        """A document with nothing but frontmatter has an empty body."""
        assert frontmatter.strip_frontmatter("---\nname: x\n---\n") == ""


class TestSplitFrontmatter:
    """Tests for split_frontmatter."""

    def test_returns_both_parts(self) -> None:
        """Metadata and body come back together."""
        meta, body = frontmatter.split_frontmatter(DOCUMENT)
        assert meta["name"] == "condition-based-waiting"
        assert body.startswith("# Condition-Based Waiting")
