from __future__ import annotations

from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Cm, Pt, RGBColor

from .model import Variant

A4_WIDTH_MM = 210
A4_HEIGHT_MM = 297

FONT_NAME = "Calibri"
CODE_FONT_NAME = "Consolas"
FONT_SIZE_PT = 11
CODE_FONT_SIZE_PT = 9.5
LINE_SPACING_PT = 15

MARGIN_CM = 2.0

# Space after each block, per presentation variant.
BLOCK_SPACING_PT = {
    Variant.FULL: 12,
    Variant.COMPACT: 4,
    Variant.MINIMAL: 2,
}

LINK_COLOR = RGBColor(0x25, 0x63, 0xEB)
QUOTE_COLOR = RGBColor(0x4B, 0x55, 0x63)
LINE_NUMBER_COLOR = RGBColor(0x9C, 0xA3, 0xAF)


def apply_page_layout(doc) -> None:
    """Apply A4 page setup with even margins."""
    section = doc.sections[0]
    section.page_height = Cm(A4_HEIGHT_MM / 10)
    section.page_width = Cm(A4_WIDTH_MM / 10)
    section.left_margin = Cm(MARGIN_CM)
    section.right_margin = Cm(MARGIN_CM)
    section.top_margin = Cm(MARGIN_CM)
    section.bottom_margin = Cm(MARGIN_CM)


def set_run_font(
    run,
    bold: bool = False,
    italic: bool = False,
    code: bool = False,
    strike: bool = False,
    size_pt: float | None = None,
) -> None:
    run.font.name = CODE_FONT_NAME if code else FONT_NAME
    run.font.size = Pt(size_pt or (CODE_FONT_SIZE_PT if code else FONT_SIZE_PT))
    run.bold = bold
    run.italic = italic
    run.font.strike = strike


def apply_body_paragraph_format(paragraph, variant: Variant = Variant.FULL) -> None:
    paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
    paragraph.paragraph_format.space_before = Pt(0)
    paragraph.paragraph_format.space_after = Pt(BLOCK_SPACING_PT[variant])
    paragraph.paragraph_format.line_spacing = Pt(LINE_SPACING_PT)
    paragraph.paragraph_format.first_line_indent = Cm(0)


def apply_heading_format(paragraph, size_pt: float, variant: Variant = Variant.FULL) -> None:
    paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
    paragraph.paragraph_format.space_before = Pt(BLOCK_SPACING_PT[variant])
    paragraph.paragraph_format.space_after = Pt(BLOCK_SPACING_PT[variant] / 2)
    paragraph.paragraph_format.first_line_indent = Cm(0)
    paragraph.paragraph_format.keep_with_next = True
    for run in paragraph.runs:
        run.font.size = Pt(size_pt)
        run.bold = True


def apply_code_paragraph_format(paragraph, variant: Variant = Variant.FULL) -> None:
    paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
    paragraph.paragraph_format.first_line_indent = Cm(0)
    paragraph.paragraph_format.left_indent = Cm(0.5)
    paragraph.paragraph_format.line_spacing = 1.0
    paragraph.paragraph_format.space_before = Pt(0)
    paragraph.paragraph_format.space_after = Pt(BLOCK_SPACING_PT[variant])
