"""Pygments integration for code blocks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol

from pygments.lexers import ClassNotFound, TextLexer, get_lexer_by_name
from pygments.styles import get_style_by_name

from .model import PLAIN_LANGUAGE


@dataclass(frozen=True)
class CodeToken:
    type: str
    text: str
    color: str | None = None
    bold: bool = False
    italic: bool = False


TokenLines = List[List[CodeToken]]


class Highlighter(Protocol):
    def highlight(self, language: str, code: str, theme: str) -> TokenLines: ...


class PygmentsHighlighter:
    """Split source into styled tokens, one list per source line."""

    def highlight(self, language: str, code: str, theme: str) -> TokenLines:
        lexer = self._lexer(language)
        style = get_style_by_name(theme)
        lines: TokenLines = [[]]
        for token_type, value in lexer.get_tokens(code):
            token_style = style.style_for_token(token_type)
            color = token_style.get("color")
            for idx, part in enumerate(value.split("\n")):
                if idx:
                    lines.append([])
                if part:
                    lines[-1].append(
                        CodeToken(
                            type=str(token_type),
                            text=part,
                            color=f"#{color}" if color else None,
                            bold=bool(token_style.get("bold")),
                            italic=bool(token_style.get("italic")),
                        )
                    )
        return lines

    @staticmethod
    def _lexer(language: str):
        # keep leading/trailing newlines so line numbers match the source
        options = {"stripnl": False, "ensurenl": False}
        if not language or language == PLAIN_LANGUAGE:
            return TextLexer(**options)
        try:
            return get_lexer_by_name(language, **options)
        except ClassNotFound:
            return TextLexer(**options)


def plain_lines(code: str) -> TokenLines:
    """Unstyled fallback used when highlighting fails."""
    return [[CodeToken(type="Token.Text", text=line)] if line else [] for line in code.split("\n")]


__all__ = ["CodeToken", "Highlighter", "PygmentsHighlighter", "TokenLines", "plain_lines"]
