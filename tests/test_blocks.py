"""Tests for splitting a markdown buffer into top-level blocks."""

import pytest

from steadymark.blocks import BlockKind, classify_line, parse_markdown_into_blocks

DOCUMENT = (
    "# Title\n"
    "\n"
    "First paragraph with **bold**.\n"
    "\n"
    "- item one\n"
    "- item two\n"
    "\n"
    "```python\n"
    "print('hi')\n"
    "```\n"
    "\n"
    "Last line."
)


class TestClassifyLine:
    @pytest.mark.parametrize(
        "line,kind",
        [
            ("# Heading", BlockKind.HEADING),
            ("###", BlockKind.HEADING),
            ("```js", BlockKind.FENCE),
            ("~~~", BlockKind.FENCE),
            ("---", BlockKind.BREAK),
            ("* * *", BlockKind.BREAK),
            ("$$", BlockKind.MATH),
            ("$$x^2$$", BlockKind.MATH),
            ("$$x$$ is the", BlockKind.PARAGRAPH),
            ("- item", BlockKind.LIST),
            ("12. item", BlockKind.LIST),
            ("> quote", BlockKind.QUOTE),
            ("| a | b |", BlockKind.TABLE),
            ("#hashtag", BlockKind.PARAGRAPH),
            ("plain text", BlockKind.PARAGRAPH),
        ],
    )
    def test_kinds(self, line, kind):
        assert classify_line(line) is kind


class TestParagraphs:
    def test_empty_buffer(self):
        assert parse_markdown_into_blocks("") == []

    def test_blank_line_separates_paragraphs(self):
        assert parse_markdown_into_blocks("para one\n\npara two") == [
            "para one\n\n",
            "para two",
        ]

    def test_single_block(self):
        text = "line one\nline two\nline three"
        assert parse_markdown_into_blocks(text) == [text]

    def test_leading_blank_lines_join_first_block(self):
        assert parse_markdown_into_blocks("\n\nHello") == ["\n\nHello"]

    def test_only_blank_lines(self):
        assert parse_markdown_into_blocks("\n\n") == ["\n\n"]

    def test_trailing_partial_line_stays_in_last_block(self):
        assert parse_markdown_into_blocks("a\n\nb\nc") == ["a\n\n", "b\nc"]


class TestHeadingsAndBreaks:
    def test_heading_then_text(self):
        assert parse_markdown_into_blocks("# Title\nSome text") == [
            "# Title\n",
            "Some text",
        ]

    def test_consecutive_headings(self):
        assert parse_markdown_into_blocks("# A\n## B") == ["# A\n", "## B"]

    def test_setext_heading(self):
        assert parse_markdown_into_blocks("Title\n---\nbody") == [
            "Title\n---\n",
            "body",
        ]

    def test_thematic_break(self):
        assert parse_markdown_into_blocks("a\n\n***\n\nb") == [
            "a\n\n",
            "***\n\n",
            "b",
        ]

    def test_bare_hash_starts_heading(self):
        assert parse_markdown_into_blocks("text\n#") == ["text\n", "#"]
        assert parse_markdown_into_blocks("text\n#x") == ["text\n#x"]


class TestFencedBlocks:
    def test_closed_fence(self):
        assert parse_markdown_into_blocks("```\ncode\n```\nafter") == [
            "```\ncode\n```\n",
            "after",
        ]

    def test_open_fence_absorbs_blank_lines(self):
        text = "intro\n\n```py\na = 1\n\n\nb = 2\n"
        assert parse_markdown_into_blocks(text) == [
            "intro\n\n",
            "```py\na = 1\n\n\nb = 2\n",
        ]

    def test_markdown_inside_fence_is_not_split(self):
        text = "~~~\n# not a heading\n- not a list\n~~~\n"
        assert parse_markdown_into_blocks(text) == [text]

    def test_fence_interrupts_paragraph(self):
        assert parse_markdown_into_blocks("text\n```\nx") == ["text\n", "```\nx"]

    def test_math_block(self):
        assert parse_markdown_into_blocks("$$\nx\n\ny\n$$\nafter") == [
            "$$\nx\n\ny\n$$\n",
            "after",
        ]

    def test_single_line_math(self):
        assert parse_markdown_into_blocks("$$x^2$$\ntext") == ["$$x^2$$\n", "text"]

    def test_paragraph_starting_with_inline_math(self):
        text = "$$x$$ is the\nformula we use"
        assert parse_markdown_into_blocks(text) == [text]


class TestContainers:
    def test_paragraph_then_list(self):
        assert parse_markdown_into_blocks("Intro:\n- a\n- b") == [
            "Intro:\n",
            "- a\n- b",
        ]

    def test_loose_list_is_one_block(self):
        assert parse_markdown_into_blocks("- one\n\n- two\n\nAfter") == [
            "- one\n\n- two\n\n",
            "After",
        ]

    def test_list_with_indented_fence(self):
        text = "- item\n  ```\n  code\n\n  more\n  ```\n- next"
        assert parse_markdown_into_blocks(text) == [text]

    def test_block_quote(self):
        assert parse_markdown_into_blocks("> a\n> b\n\nc") == ["> a\n> b\n\n", "c"]

    def test_lazy_quote_continuation(self):
        assert parse_markdown_into_blocks("> a\nlazy") == ["> a\nlazy"]

    def test_table(self):
        text = "| a | b |\n|---|---|\n| 1 | 2 |\n\nafter"
        assert parse_markdown_into_blocks(text) == [
            "| a | b |\n|---|---|\n| 1 | 2 |\n\n",
            "after",
        ]


class TestProperties:
    @pytest.mark.parametrize(
        "text",
        [
            DOCUMENT,
            "para one\n\npara two",
            "- a\n  - b\n\n  more\n\nend",
            "```\nunclosed\n\n",
            "> q\n\n| t |\n|---|\n\n---\n",
            "\t\n \nx",
            "$$x$$ is the\nformula we use",
        ],
    )
    def test_partition(self, text):
        assert "".join(parse_markdown_into_blocks(text)) == text

    def test_every_prefix_is_a_partition(self):
        for end in range(len(DOCUMENT) + 1):
            prefix = DOCUMENT[:end]
            assert "".join(parse_markdown_into_blocks(prefix)) == prefix

    def test_finished_blocks_do_not_change(self):
        """Every block but the last one of a prefix is final."""
        final = parse_markdown_into_blocks(DOCUMENT)
        assert len(final) == 5
        for end in range(len(DOCUMENT) + 1):
            blocks = parse_markdown_into_blocks(DOCUMENT[:end])
            assert blocks[:-1] == final[: len(blocks) - 1]
