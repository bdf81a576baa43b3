from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from docx import Document as DocxDocument
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Cm, Pt, RGBColor

from . import docx_format
from .config import RenderOptions
from .dispatcher import dispatch_document
from .markdown_parser import segment
from .model import Variant, VisualNode

HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}


@dataclass
class RenderState:
    variant: Variant = Variant.FULL


def render_markdown_docx(text: str, output_path: str | Path, options: RenderOptions | None = None) -> None:
    render_document(dispatch_document(segment(text), options), output_path)


def render_document(root: VisualNode, output_path: str | Path) -> None:
    output_path = Path(output_path)
    state = RenderState(variant=Variant(root.attrs.get("variant", Variant.FULL.value)))
    docx = DocxDocument()
    docx_format.apply_page_layout(docx)

    for node in root.children:
        _dispatch_node(docx, node, state)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    docx.save(output_path)


def _dispatch_node(docx: DocxDocument, node: VisualNode, state: RenderState) -> None:
    if node.tag in HEADING_TAGS:
        _render_heading(docx, node, state)
    elif node.tag == "p":
        _render_paragraph(docx, node, state)
    elif node.tag == "blockquote":
        _render_blockquote(docx, node, state)
    elif node.tag in ("ul", "ol"):
        _render_list(docx, node, state)
    elif node.tag == "hr":
        _render_horizontal_rule(docx)
    elif node.tag == "table":
        _render_table(docx, node, state)
    elif node.tag == "figure":
        _render_code_block(docx, node, state)
    elif node.tag == "pre":
        _render_preformatted(docx, node.plain_text(), state)


def _render_heading(docx: DocxDocument, node: VisualNode, state: RenderState) -> None:
    paragraph = docx.add_paragraph()
    _add_inline(paragraph, node.children, bold=True)
    docx_format.apply_heading_format(paragraph, size_pt=node.attrs.get("size", docx_format.FONT_SIZE_PT), variant=state.variant)


def _render_paragraph(docx: DocxDocument, node: VisualNode, state: RenderState) -> None:
    paragraph = docx.add_paragraph()
    _add_inline(paragraph, node.children)
    docx_format.apply_body_paragraph_format(paragraph, state.variant)


def _render_blockquote(docx: DocxDocument, node: VisualNode, state: RenderState) -> None:
    paragraph = docx.add_paragraph()
    _set_left_border(paragraph)
    _add_inline(paragraph, node.children, italic=True)
    for run in paragraph.runs:
        run.font.color.rgb = docx_format.QUOTE_COLOR
    docx_format.apply_body_paragraph_format(paragraph, state.variant)
    paragraph.paragraph_format.left_indent = Cm(0.75)


def _render_list(docx: DocxDocument, node: VisualNode, state: RenderState) -> None:
    ordered = node.tag == "ol"
    items = [child for child in node.children if child.tag == "li"]
    for idx, item in enumerate(items, start=1):
        paragraph = docx.add_paragraph()
        prefix = paragraph.add_run(f"{idx}. " if ordered else "• ")
        docx_format.set_run_font(prefix)
        _add_inline(paragraph, item.children)
        docx_format.apply_body_paragraph_format(paragraph, state.variant)
        paragraph.paragraph_format.left_indent = Cm(0.75)
        paragraph.paragraph_format.first_line_indent = Cm(-0.5)
        if idx < len(items):
            paragraph.paragraph_format.space_after = Pt(0)


def _render_horizontal_rule(docx: DocxDocument) -> None:
    paragraph = docx.add_paragraph()
    run = paragraph.add_run("—" * 20)
    docx_format.set_run_font(run)
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    paragraph.paragraph_format.first_line_indent = Cm(0)


def _render_table(docx: DocxDocument, node: VisualNode, state: RenderState) -> None:
    rows: list[tuple[bool, list[VisualNode]]] = []
    for section in node.children:
        for tr in section.children:
            rows.append((section.tag == "thead", tr.children))
    col_count = max((len(cells) for _, cells in rows), default=1) or 1
    table = docx.add_table(rows=len(rows), cols=col_count)
    table.style = "Table Grid"
    table.alignment = WD_TABLE_ALIGNMENT.LEFT
    # ragged rows leave the trailing cells empty
    for r_idx, (is_header, cells) in enumerate(rows):
        for c_idx, cell_node in enumerate(cells):
            paragraph = table.cell(r_idx, c_idx).paragraphs[0]
            _add_inline(paragraph, cell_node.children, bold=is_header)
            paragraph.paragraph_format.first_line_indent = Cm(0)
            paragraph.paragraph_format.space_after = Pt(0)

    spacer = docx.add_paragraph("")
    docx_format.apply_body_paragraph_format(spacer, state.variant)


def _render_code_block(docx: DocxDocument, node: VisualNode, state: RenderState) -> None:
    header = next((child for child in node.children if child.tag == "div"), None)
    pre = next((child for child in node.children if child.tag == "pre"), None)
    if header is not None:
        labels = [
            child.text
            for child in header.children
            if child.text and ("code-filename" in child.classes or "code-language" in child.classes)
        ]
        if labels:
            caption = docx.add_paragraph()
            run = caption.add_run("  ·  ".join(labels))
            docx_format.set_run_font(run, code=True, size_pt=8)
            run.font.color.rgb = docx_format.LINE_NUMBER_COLOR
            caption.paragraph_format.space_after = Pt(0)
    if pre is None:
        return

    paragraph = docx.add_paragraph()
    lines = pre.children
    width = len(str(len(lines)))
    for idx, line in enumerate(lines):
        for child in line.children:
            if child.tag == "token":
                run = paragraph.add_run(child.text or "")
                docx_format.set_run_font(
                    run,
                    code=True,
                    bold=bool(child.attrs.get("bold")),
                    italic=bool(child.attrs.get("italic")),
                )
                color = child.attrs.get("color")
                if color:
                    run.font.color.rgb = RGBColor.from_string(color.lstrip("#").upper())
            elif "line-number" in child.classes:
                run = paragraph.add_run(f"{(child.text or '').rjust(width)}  ")
                docx_format.set_run_font(run, code=True)
                run.font.color.rgb = docx_format.LINE_NUMBER_COLOR
        if idx < len(lines) - 1:
            paragraph.add_run().add_break()
    docx_format.apply_code_paragraph_format(paragraph, state.variant)


def _render_preformatted(docx: DocxDocument, text: str, state: RenderState) -> None:
    paragraph = docx.add_paragraph()
    run = paragraph.add_run(text)
    docx_format.set_run_font(run, code=True)
    docx_format.apply_code_paragraph_format(paragraph, state.variant)


def _add_inline(
    paragraph,
    nodes: Iterable[VisualNode],
    bold: bool = False,
    italic: bool = False,
    code: bool = False,
    strike: bool = False,
) -> None:
    for node in nodes:
        if node.tag == "text":
            run = paragraph.add_run(node.text or "")
            docx_format.set_run_font(run, bold=bold, italic=italic, code=code, strike=strike)
        elif node.tag == "strong":
            _add_inline(paragraph, node.children, True, italic, code, strike)
        elif node.tag == "em":
            _add_inline(paragraph, node.children, bold, True, code, strike)
        elif node.tag == "del":
            _add_inline(paragraph, node.children, bold, italic, code, True)
        elif node.tag == "code":
            _add_inline(paragraph, node.children, bold, italic, True, strike)
        elif node.tag == "a":
            for child in node.children:
                run = paragraph.add_run(child.plain_text())
                docx_format.set_run_font(run, bold=bold, italic=italic, code=code, strike=strike)
                run.font.underline = True
                run.font.color.rgb = docx_format.LINK_COLOR
        elif node.tag == "math":
            if node.attrs.get("display"):
                _append_math(paragraph, node.text or "")
            else:
                run = paragraph.add_run(node.text or "")
                docx_format.set_run_font(run, bold=bold, italic=True)


def _append_math(paragraph, text: str) -> None:
    """Insert a centred Word math object into the paragraph."""
    omath_para = OxmlElement("m:oMathPara")
    omath_para_pr = OxmlElement("m:oMathParaPr")
    jc = OxmlElement("m:jc")
    jc.set(qn("m:val"), "center")
    omath_para_pr.append(jc)
    omath_para.append(omath_para_pr)
    omath = OxmlElement("m:oMath")

    run = OxmlElement("m:r")
    text_el = OxmlElement("m:t")
    text_el.text = text
    run.append(text_el)
    omath.append(run)
    omath_para.append(omath)
    paragraph._p.append(omath_para)


def _set_left_border(paragraph) -> None:
    p_pr = paragraph._p.get_or_add_pPr()
    borders = OxmlElement("w:pBdr")
    left = OxmlElement("w:left")
    left.set(qn("w:val"), "single")
    left.set(qn("w:sz"), "12")
    left.set(qn("w:space"), "8")
    left.set(qn("w:color"), "D1D5DB")
    borders.append(left)
    p_pr.append(borders)
