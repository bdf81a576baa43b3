from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, Sequence


class BlockKind(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    CODE = "code"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    HR = "hr"
    TABLE = "table"


class SpanKind(str, Enum):
    TEXT = "text"
    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"
    LINK = "link"
    MATH_INLINE = "math-inline"
    MATH_DISPLAY = "math-display"


class Variant(str, Enum):
    """Presentation density of a rendered document."""

    FULL = "full"
    COMPACT = "compact"
    MINIMAL = "minimal"


PLAIN_LANGUAGE = "plain"


@dataclass(frozen=True)
class Block:
    """Structural unit of a document.

    Only the payload belonging to ``kind`` is populated; everything else stays
    ``None``. ``raw_lines`` holds the source lines the block was built from.
    """

    kind: BlockKind
    raw_lines: tuple[str, ...] = ()
    text: str | None = None
    level: int | None = None
    language: str | None = None
    ordered: bool | None = None
    items: tuple[str, ...] | None = None
    rows: tuple[tuple[str, ...], ...] | None = None

    @classmethod
    def paragraph(cls, text: str, raw_lines: Sequence[str] = ()) -> "Block":
        return cls(BlockKind.PARAGRAPH, tuple(raw_lines), text=text)

    @classmethod
    def heading(cls, level: int, text: str, raw_lines: Sequence[str] = ()) -> "Block":
        if not 1 <= level <= 6:
            raise ValueError(f"Heading level must be between 1 and 6, got {level}")
        return cls(BlockKind.HEADING, tuple(raw_lines), text=text, level=level)

    @classmethod
    def code(cls, code: str, language: str | None = None, raw_lines: Sequence[str] = ()) -> "Block":
        return cls(BlockKind.CODE, tuple(raw_lines), text=code, language=language or PLAIN_LANGUAGE)

    @classmethod
    def blockquote(cls, text: str, raw_lines: Sequence[str] = ()) -> "Block":
        return cls(BlockKind.BLOCKQUOTE, tuple(raw_lines), text=text)

    @classmethod
    def list_block(cls, items: Sequence[str], ordered: bool, raw_lines: Sequence[str] = ()) -> "Block":
        return cls(BlockKind.LIST, tuple(raw_lines), ordered=ordered, items=tuple(items))

    @classmethod
    def hr(cls, raw_lines: Sequence[str] = ()) -> "Block":
        return cls(BlockKind.HR, tuple(raw_lines))

    @classmethod
    def table(cls, rows: Sequence[Sequence[str]], raw_lines: Sequence[str] = ()) -> "Block":
        return cls(BlockKind.TABLE, tuple(raw_lines), rows=tuple(tuple(row) for row in rows))

    def with_raw_lines(self, raw_lines: Sequence[str]) -> "Block":
        return replace(self, raw_lines=tuple(raw_lines))


@dataclass
class Document:
    blocks: List[Block]
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True)
class Span:
    """Inline fragment of a block's text. ``href`` is only set for links."""

    kind: SpanKind
    content: str
    href: str | None = None

    @classmethod
    def text(cls, content: str) -> "Span":
        return cls(SpanKind.TEXT, content)

    @classmethod
    def link(cls, content: str, href: str) -> "Span":
        return cls(SpanKind.LINK, content, href=href)


@dataclass
class VisualNode:
    """Backend-neutral element of a rendered tree.

    Leaf text uses ``tag == "text"`` with the content in ``text``.
    """

    tag: str
    classes: tuple[str, ...] = ()
    children: List["VisualNode"] = field(default_factory=list)
    text: str | None = None
    attrs: dict[str, Any] = field(default_factory=dict)

    def plain_text(self) -> str:
        if self.text is not None and not self.children:
            return self.text
        return "".join(child.plain_text() for child in self.children)

    def find_all(self, tag: str) -> list["VisualNode"]:
        found = [self] if self.tag == tag else []
        for child in self.children:
            found.extend(child.find_all(tag))
        return found


def text_node(text: str) -> VisualNode:
    return VisualNode(tag="text", text=text)
