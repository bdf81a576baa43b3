from MockupText import markdown_parser
from MockupText.markdown_parser import segment
from MockupText.model import Block, BlockKind


def test_parse_blocks_in_order():
    md_text = """# Release notes

Text with *emphasis* and **bold**
continued on a second line.

- First item
- Second item

1. One
2. Two

> quoted line
> second quoted line

---

| Name | Value |
| --- | --- |
| a | 1 |

```py
print("hi")
```
"""
    blocks = segment(md_text)
    assert [block.kind for block in blocks] == [
        BlockKind.HEADING,
        BlockKind.PARAGRAPH,
        BlockKind.LIST,
        BlockKind.LIST,
        BlockKind.BLOCKQUOTE,
        BlockKind.HR,
        BlockKind.TABLE,
        BlockKind.CODE,
    ]
    heading, paragraph, bullets, numbers, quote, _, table, code = blocks
    assert heading.level == 1 and heading.text == "Release notes"
    assert paragraph.text == "Text with *emphasis* and **bold** continued on a second line."
    assert bullets.ordered is False and bullets.items == ("First item", "Second item")
    assert numbers.ordered is True and numbers.items == ("One", "Two")
    assert quote.text == "quoted line\nsecond quoted line"
    assert table.rows == (("Name", "Value"), ("a", "1"))
    assert code.language == "py" and code.text == 'print("hi")'


def test_only_kind_payload_is_populated():
    heading, paragraph, hr = segment("## Title\ntext\n***")
    assert heading.level == 2 and heading.items is None and heading.rows is None and heading.language is None
    assert paragraph.level is None and paragraph.ordered is None
    assert hr.kind is BlockKind.HR and hr.text is None and hr.level is None


def test_heading_levels_and_marker_space():
    blocks = segment("###### six\n####### seven\n#hashtag")
    assert blocks[0] == Block.heading(6, "six", raw_lines=["###### six"])
    assert blocks[1].kind is BlockKind.PARAGRAPH
    assert blocks[1].text == "####### seven #hashtag"


def test_unterminated_fence_consumes_rest():
    blocks = segment("```js\nconsole.log(1)")
    assert len(blocks) == 1
    assert blocks[0].kind is BlockKind.CODE
    assert blocks[0].language == "js"
    assert blocks[0].text == "console.log(1)"


def test_fence_without_language_is_plain_and_keeps_markers_verbatim():
    blocks = segment("```\n# not a heading\n- not a list\n```\nafter")
    assert blocks[0].language == "plain"
    assert blocks[0].text == "# not a heading\n- not a list"
    assert blocks[1] == Block.paragraph("after", raw_lines=["after"])


def test_table_with_ragged_row():
    blocks = segment("a|b\n--|--\nx|")
    assert len(blocks) == 1
    assert blocks[0].rows == (("a", "b"), ("x",))


def test_table_row_without_pipe_ends_table():
    blocks = segment("a|b\n--|--\nx")
    assert [block.kind for block in blocks] == [BlockKind.TABLE, BlockKind.PARAGRAPH]
    assert blocks[0].rows == (("a", "b"),)
    assert blocks[0].raw_lines == ("a|b", "--|--")
    assert blocks[1].text == "x"


def test_table_needs_separator_row():
    blocks = segment("a | b\nc | d")
    assert [block.kind for block in blocks] == [BlockKind.PARAGRAPH]


def test_table_ends_at_line_without_separator():
    blocks = segment("a|b\n|:-|-:|\n1|2\nplain text")
    assert blocks[0].rows == (("a", "b"), ("1", "2"))
    assert blocks[0].raw_lines == ("a|b", "|:-|-:|", "1|2")
    assert blocks[1].text == "plain text"


def test_list_style_switch_ends_run():
    blocks = segment("- a\n* b\n1. c\n2. d\n+ e")
    assert [(block.ordered, block.items) for block in blocks] == [
        (False, ("a", "b")),
        (True, ("c", "d")),
        (False, ("e",)),
    ]


def test_paragraph_stops_at_other_constructs():
    blocks = segment("intro\n> quote\nmore\n# Heading\nend\n```\ncode")
    assert [block.kind for block in blocks] == [
        BlockKind.PARAGRAPH,
        BlockKind.BLOCKQUOTE,
        BlockKind.PARAGRAPH,
        BlockKind.HEADING,
        BlockKind.PARAGRAPH,
        BlockKind.CODE,
    ]


def test_paragraph_stops_at_list_rule_and_table():
    blocks = segment("intro\n- a\nmore\n---\ntext\nh|k\n--|--")
    assert [block.kind for block in blocks] == [
        BlockKind.PARAGRAPH,
        BlockKind.LIST,
        BlockKind.PARAGRAPH,
        BlockKind.HR,
        BlockKind.PARAGRAPH,
        BlockKind.TABLE,
    ]
    assert [block.text for block in blocks if block.kind is BlockKind.PARAGRAPH] == ["intro", "more", "text"]
    assert blocks[1].items == ("a",)
    assert blocks[5].rows == (("h", "k"),)


def test_horizontal_rule_variants():
    blocks = segment("---\n***\n___\n-*-")
    assert [block.kind for block in blocks[:3]] == [BlockKind.HR] * 3
    assert blocks[3].kind is BlockKind.PARAGRAPH


def test_blank_lines_are_skipped_and_split_paragraphs():
    blocks = segment("\n\nfirst\n\n\nsecond\n")
    assert [block.text for block in blocks] == ["first", "second"]


def test_raw_lines_partition_document():
    text = "\n# Title\n\nbody one\nbody two\n\n- a\n- b\n\n```\nx\n\ny\n```\n| h |\n|---|\n| c |\n"
    blocks = segment(text)
    covered = [line for block in blocks for line in block.raw_lines]
    assert covered == text.split("\n")


def test_segment_is_pure():
    text = "# T\n\n- a\n- b\n\n> q"
    assert segment(text) == segment(text)


def test_empty_document():
    assert segment("") == []
    assert segment("\n  \n") == []


def test_windows_line_endings():
    blocks = segment("# Title\r\nbody\r\n")
    assert blocks[0].text == "Title"
    assert blocks[1].text == "body"


def test_parse_markdown_metadata():
    document = markdown_parser.parse_markdown("# A\n\ntext")
    assert len(document.blocks) == 2
    assert document.metadata == {"source": "markdown", "line_count": 3}
