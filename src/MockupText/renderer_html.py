from __future__ import annotations

from typing import Iterable

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml

from .config import RenderOptions
from .dispatcher import dispatch_document
from .markdown_parser import segment
from .model import VisualNode

VOID_TAGS = {"hr"}

# Pure-tree tags that have no HTML element of their own.
TAG_MAP = {
    "line": "div",
    "token": "span",
}

_links = MarkdownIt("commonmark")


def render_markdown_html(text: str, options: RenderOptions | None = None) -> str:
    """Segment, dispatch and serialise ``text`` in one call."""
    return render_html(dispatch_document(segment(text), options))


def render_html(node: VisualNode) -> str:
    if node.tag == "text":
        return escapeHtml(node.text or "")
    if node.tag == "math":
        return _render_math(node)
    if node.tag == "a":
        return _render_link(node)

    tag = TAG_MAP.get(node.tag, node.tag)
    attrs = _node_attrs(node)
    if node.tag in VOID_TAGS:
        return f"<{tag}{attrs}>"
    return f"<{tag}{attrs}>{_render_children(node)}</{tag}>"


def safe_href(url: str | None) -> str:
    """Normalise a link target, refusing schemes such as ``javascript:``."""
    if not url:
        return "#"
    normalized = _links.normalizeLink(url.strip())
    if not _links.validateLink(normalized):
        return "#"
    return normalized


def _render_children(node: VisualNode) -> str:
    if node.children:
        return "".join(render_html(child) for child in node.children)
    return escapeHtml(node.text or "")


def _render_link(node: VisualNode) -> str:
    href = safe_href(node.attrs.get("href"))
    return (
        f'<a href="{escapeHtml(href)}" target="_blank" rel="noopener noreferrer">'
        f"{_render_children(node)}</a>"
    )


def _render_math(node: VisualNode) -> str:
    tag = "div" if node.attrs.get("display") else "span"
    pairs = [("class", " ".join(node.classes)), ("data-latex", node.attrs.get("latex", ""))]
    return f"<{tag}{_format_attrs(pairs)}>{escapeHtml(node.text or '')}</{tag}>"


def _node_attrs(node: VisualNode) -> str:
    pairs: list[tuple[str, object]] = []
    if node.classes:
        pairs.append(("class", " ".join(node.classes)))
    if node.tag == "token":
        style = _token_style(node)
        if style:
            pairs.append(("style", style))
    elif node.tag == "line":
        pairs.append(("class", "code-line"))
        pairs.append(("data-line", node.attrs.get("number")))
    elif node.tag == "button":
        pairs.append(("type", "button"))
        pairs.append(("data-code", node.attrs.get("data-code", "")))
    elif node.tag == "figure":
        pairs.append(("data-language", node.attrs.get("language")))
        pairs.append(("data-theme", node.attrs.get("theme")))
    return _format_attrs(pairs)


def _token_style(node: VisualNode) -> str:
    rules = []
    if node.attrs.get("color"):
        rules.append(f"color:{node.attrs['color']}")
    if node.attrs.get("bold"):
        rules.append("font-weight:bold")
    if node.attrs.get("italic"):
        rules.append("font-style:italic")
    return ";".join(rules)


def _format_attrs(pairs: Iterable[tuple[str, object]]) -> str:
    return "".join(f' {name}="{escapeHtml(str(value))}"' for name, value in pairs if value is not None)
