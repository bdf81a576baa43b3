from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .code_block import CopyButtonState, render_code
from .collaborators import Clipboard, MathTypesetter, Scheduler, UnicodeMathTypesetter
from .config import RenderOptions
from .highlighter import Highlighter
from .inline_parser import tokenize
from .math_parser import tokenize_with_math
from .model import Block, BlockKind, Span, SpanKind, Variant, VisualNode, text_node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeadingStyle:
    size_pt: int
    weight: str


HEADING_STYLES = {
    1: HeadingStyle(size_pt=18, weight="bold"),
    2: HeadingStyle(size_pt=16, weight="bold"),
    3: HeadingStyle(size_pt=14, weight="semibold"),
    4: HeadingStyle(size_pt=13, weight="semibold"),
    5: HeadingStyle(size_pt=12, weight="semibold"),
    6: HeadingStyle(size_pt=12, weight="medium"),
}

SPACING = {
    Variant.FULL: "space-lg",
    Variant.COMPACT: "space-sm",
    Variant.MINIMAL: "space-xs",
}

SPAN_TAGS = {
    SpanKind.BOLD: "strong",
    SpanKind.ITALIC: "em",
    SpanKind.STRIKETHROUGH: "del",
    SpanKind.CODE: "code",
}


def dispatch_document(
    blocks: Iterable[Block],
    options: RenderOptions | None = None,
    typesetter: MathTypesetter | None = None,
    highlighter: Highlighter | None = None,
) -> VisualNode:
    """Render every block under one root node.

    A block that fails to render is replaced by its raw source so the rest of
    the document still renders.
    """
    options = options or RenderOptions()
    typesetter = typesetter or UnicodeMathTypesetter()
    variant = options.variant
    classes = ("document", f"variant-{variant.value}")
    if variant is Variant.MINIMAL:
        classes += ("prose",)
    root = VisualNode(tag="article", classes=classes, attrs={"variant": variant.value})
    for block in blocks:
        try:
            root.children.append(dispatch(block, variant, options, typesetter=typesetter, highlighter=highlighter))
        except Exception:
            logger.exception("Failed to render %s block; falling back to raw text", block.kind.value)
            root.children.append(_fallback_node(block))
    return root


def dispatch(
    block: Block,
    variant: Variant = Variant.FULL,
    options: RenderOptions | None = None,
    typesetter: MathTypesetter | None = None,
    highlighter: Highlighter | None = None,
    copied: bool = False,
    filename: str | None = None,
) -> VisualNode:
    options = options or RenderOptions()
    typesetter = typesetter or UnicodeMathTypesetter()
    spacing = SPACING[variant]

    def inline(text: str) -> List[VisualNode]:
        return dispatch_spans(inline_spans(text, options), typesetter)

    if block.kind is BlockKind.HEADING:
        level = block.level or 1
        style = HEADING_STYLES[level]
        return VisualNode(
            tag=f"h{level}",
            classes=("heading", f"heading-{level}", style.weight, spacing),
            children=inline(block.text or ""),
            attrs={"level": level, "size": style.size_pt},
        )
    if block.kind is BlockKind.PARAGRAPH:
        return VisualNode(tag="p", classes=("paragraph", spacing), children=inline(block.text or ""))
    if block.kind is BlockKind.BLOCKQUOTE:
        return VisualNode(tag="blockquote", classes=("blockquote", spacing), children=inline(block.text or ""))
    if block.kind is BlockKind.LIST:
        items = [VisualNode(tag="li", children=inline(item)) for item in block.items or ()]
        tag = "ol" if block.ordered else "ul"
        return VisualNode(tag=tag, classes=("list", spacing), children=items)
    if block.kind is BlockKind.TABLE:
        return _table_node(block.rows or (), spacing, inline)
    if block.kind is BlockKind.HR:
        return VisualNode(tag="hr", classes=("rule",))
    if block.kind is BlockKind.CODE:
        return _code_node(block, variant, options, highlighter, copied, filename)
    raise ValueError(f"Unsupported block kind: {block.kind}")


def inline_spans(text: str, options: RenderOptions) -> List[Span]:
    if options.math:
        return tokenize_with_math(text, options.marker_set)
    return tokenize(text, options.marker_set)


def dispatch_spans(spans: Sequence[Span], typesetter: MathTypesetter | None = None) -> List[VisualNode]:
    typesetter = typesetter or UnicodeMathTypesetter()
    nodes: List[VisualNode] = []
    for span in spans:
        if span.kind is SpanKind.TEXT:
            nodes.append(text_node(span.content))
        elif span.kind is SpanKind.LINK:
            nodes.append(VisualNode(tag="a", children=[text_node(span.content)], attrs={"href": span.href}))
        elif span.kind in (SpanKind.MATH_INLINE, SpanKind.MATH_DISPLAY):
            nodes.append(_math_node(span, typesetter))
        else:
            nodes.append(VisualNode(tag=SPAN_TAGS[span.kind], children=[text_node(span.content)]))
    return nodes


def _math_node(span: Span, typesetter: MathTypesetter) -> VisualNode:
    display = span.kind is SpanKind.MATH_DISPLAY
    classes: tuple[str, ...] = ("math-display" if display else "math-inline",)
    try:
        rendered = typesetter.typeset(span.content, display)
    except Exception:
        logger.warning("Could not typeset %r; showing the raw expression", span.content, exc_info=True)
        rendered = span.content
        classes += ("math-error",)
    return VisualNode(tag="math", classes=classes, text=rendered, attrs={"latex": span.content, "display": display})


def _table_node(rows, spacing: str, inline) -> VisualNode:
    header, body = (rows[0], rows[1:]) if rows else ((), ())
    head = VisualNode(
        tag="thead",
        children=[VisualNode(tag="tr", children=[VisualNode(tag="th", children=inline(cell)) for cell in header])],
    )
    tbody = VisualNode(
        tag="tbody",
        children=[VisualNode(tag="tr", children=[VisualNode(tag="td", children=inline(cell)) for cell in row]) for row in body],
    )
    return VisualNode(tag="table", classes=("table", spacing), children=[head, tbody], attrs={"columns": len(header)})


def _code_node(
    block: Block,
    variant: Variant,
    options: RenderOptions,
    highlighter: Highlighter | None,
    copied: bool,
    filename: str | None = None,
) -> VisualNode:
    code = block.text or ""
    rendered = render_code(block.language, code, options.code_theme, dark=options.dark, highlighter=highlighter)
    header = VisualNode(tag="div", classes=("code-header",))
    if filename:
        header.children.append(VisualNode(tag="span", classes=("code-filename",), text=filename))
    header.children.append(VisualNode(tag="span", classes=("code-language",), text=block.language))
    if options.show_copy_button:
        header.children.append(
            VisualNode(
                tag="button",
                classes=("copy-button", "copied") if copied else ("copy-button",),
                text="Copied!" if copied else "Copy code",
                attrs={"data-code": code},
            )
        )
    lines: List[VisualNode] = []
    for line in rendered.lines:
        children: List[VisualNode] = []
        if options.line_numbers:
            children.append(VisualNode(tag="span", classes=("line-number",), text=str(line.number)))
        for token in line.tokens:
            children.append(
                VisualNode(
                    tag="token",
                    text=token.text,
                    attrs={"type": token.type, "color": token.color, "bold": token.bold, "italic": token.italic},
                )
            )
        lines.append(VisualNode(tag="line", children=children, attrs={"number": line.number}))
    pre = VisualNode(tag="pre", classes=("code", "text-xs" if variant is Variant.COMPACT else "text-sm"), children=lines)
    return VisualNode(
        tag="figure",
        classes=("code-block", SPACING[variant]),
        children=[header, pre],
        attrs={"language": rendered.language, "theme": rendered.theme, "dark": options.dark},
    )


def _fallback_node(block: Block) -> VisualNode:
    return VisualNode(tag="pre", classes=("render-error",), text="\n".join(block.raw_lines))


class CodeBlockView:
    """A rendered code block that owns its copy acknowledgement."""

    def __init__(
        self,
        block: Block,
        clipboard: Clipboard,
        options: RenderOptions | None = None,
        scheduler: Scheduler | None = None,
        highlighter: Highlighter | None = None,
        filename: str | None = None,
    ) -> None:
        if block.kind is not BlockKind.CODE:
            raise ValueError(f"CodeBlockView needs a code block, got {block.kind.value}")
        self.block = block
        self.options = options or RenderOptions()
        self.highlighter = highlighter
        self.filename = filename
        self.copy_state = CopyButtonState(block.text or "", clipboard, scheduler, delay=self.options.copy_delay)

    @property
    def copied(self) -> bool:
        return self.copy_state.copied

    def copy(self) -> None:
        self.copy_state.copy()

    def dispose(self) -> None:
        self.copy_state.dispose()

    def render(self) -> VisualNode:
        return dispatch(
            self.block,
            self.options.variant,
            self.options,
            highlighter=self.highlighter,
            copied=self.copy_state.copied,
            filename=self.filename,
        )
