import logging
from pathlib import Path

from docx import Document as DocxReader

from MockupText.config import RenderOptions
from MockupText.dispatcher import HEADING_STYLES, dispatch, dispatch_document, dispatch_spans
from MockupText.markdown_parser import segment
from MockupText.model import Block, BlockKind, Span, SpanKind, Variant
from MockupText.renderer_docx import render_document, render_markdown_docx
from MockupText.renderer_html import render_html, render_markdown_html, safe_href

SAMPLE = """# Weekly sync

Shipped **search** and [docs](https://example.com/docs).

- item with `code`
- second

| Metric | Value |
|---|---|
| p95 | 120ms |

```python
total = sum(values)
```
"""


def test_heading_levels_get_distinct_treatments():
    nodes = [dispatch(Block.heading(level, "T")) for level in range(1, 7)]
    assert [node.tag for node in nodes] == ["h1", "h2", "h3", "h4", "h5", "h6"]
    treatments = {(node.attrs["size"], tuple(node.classes)) for node in nodes}
    assert len(treatments) == 6
    assert set(HEADING_STYLES) == {1, 2, 3, 4, 5, 6}


def test_variant_changes_classes_not_content():
    block = Block.paragraph("hello *there*")
    full = dispatch(block, Variant.FULL)
    compact = dispatch(block, Variant.COMPACT)
    assert full.classes != compact.classes
    assert full.plain_text() == compact.plain_text() == "hello there"


def test_code_blocks_are_not_inline_formatted():
    node = dispatch(Block.code("a = *b*", language="plain"))
    assert node.tag == "figure"
    assert node.find_all("em") == [] and node.find_all("strong") == []
    lines = node.find_all("line")
    assert [line.attrs["number"] for line in lines] == [1]
    assert "".join(token.text for token in lines[0].find_all("token")) == "a = *b*"


def test_hr_has_no_children():
    assert dispatch(Block.hr()).children == []


def test_list_and_table_cells_are_tokenized():
    blocks = segment(SAMPLE)
    root = dispatch_document(blocks)
    ul = root.find_all("ul")[0]
    assert ul.children[0].find_all("code")[0].plain_text() == "code"
    table = root.find_all("table")[0]
    assert [th.plain_text() for th in table.find_all("th")] == ["Metric", "Value"]
    assert [td.plain_text() for td in table.find_all("td")] == ["p95", "120ms"]


def test_math_spans_typeset_and_fall_back(caplog):
    class Failing:
        def typeset(self, expression, display):
            raise ValueError("bad")

    spans = [Span(SpanKind.MATH_INLINE, r"\pi r^2"), Span(SpanKind.MATH_DISPLAY, "x")]
    ok = dispatch_spans(spans)
    assert ok[0].text == "π r²" and ok[0].attrs == {"latex": r"\pi r^2", "display": False}
    assert ok[1].attrs["display"] is True
    with caplog.at_level(logging.WARNING):
        failed = dispatch_spans(spans, Failing())
    assert failed[0].text == r"\pi r^2"
    assert "math-error" in failed[0].classes


def test_math_option_extracts_before_emphasis():
    node = dispatch(Block.paragraph("area $a*b*c$"), options=RenderOptions(math=True))
    math = node.find_all("math")
    assert len(math) == 1 and math[0].attrs["latex"] == "a*b*c"
    assert node.find_all("em") == []


def test_one_bad_block_does_not_stop_siblings(caplog):
    bad = Block(kind=BlockKind.HEADING, raw_lines=("####### oops",), text="oops", level=7)
    with caplog.at_level(logging.ERROR):
        root = dispatch_document([Block.paragraph("before"), bad, Block.paragraph("after")])
    assert [child.tag for child in root.children] == ["p", "pre", "p"]
    assert root.children[1].text == "####### oops"
    assert "Failed to render heading block" in caplog.text


def test_render_html_document():
    html = render_markdown_html(SAMPLE)
    assert html.startswith('<article class="document variant-full"')
    assert "<h1" in html and "Weekly sync</h1>" in html
    assert "<strong>search</strong>" in html
    assert '<a href="https://example.com/docs" target="_blank" rel="noopener noreferrer">docs</a>' in html
    assert 'data-language="python"' in html
    assert '<button class="copy-button" type="button"' in html
    assert "<hr" not in html


def test_render_html_escapes_text_and_rejects_script_links():
    html = render_markdown_html("<b>hi</b> [x](javascript:alert(1)")
    assert "&lt;b&gt;hi&lt;/b&gt;" in html
    assert "javascript:" not in html
    assert safe_href("javascript:alert(1)") == "#"
    assert safe_href("https://example.com/a b") == "https://example.com/a%20b"


def test_render_html_math_markup():
    html = render_markdown_html("so $E=mc^2$", RenderOptions(math=True))
    assert '<span class="math-inline" data-latex="E=mc^2">E=mc²</span>' in html


def test_render_creates_docx(tmp_path: Path):
    output_file = tmp_path / "report.docx"
    render_markdown_docx(SAMPLE, output_file)
    assert output_file.exists()
    assert output_file.stat().st_size > 0

    reader = DocxReader(output_file)
    texts = [p.text for p in reader.paragraphs]
    assert "Weekly sync" in texts
    assert "Shipped search and docs." in texts
    assert any("total = sum(values)" in text for text in texts)
    assert len(reader.tables) == 1
    assert reader.tables[0].cell(1, 1).text == "120ms"
    bold_runs = [run.text for p in reader.paragraphs for run in p.runs if run.bold]
    assert "search" in bold_runs


def test_docx_ragged_table_and_display_math(tmp_path: Path):
    root = dispatch_document(segment("a|b\n--|--\nx|\n\n$$S = \\pi r^2$$"), RenderOptions(math=True))
    out = tmp_path / "eq.docx"
    render_document(root, out)
    reader = DocxReader(out)
    table = reader.tables[0]
    assert table.cell(1, 0).text == "x"
    assert table.cell(1, 1).text == ""
    xml = "\n".join(p._p.xml for p in reader.paragraphs)
    assert "<m:oMath" in xml
    assert "π" in xml
