from __future__ import annotations

import re
from typing import List

from .inline_parser import CHAT_MARKERS, MarkerSet, tokenize
from .model import Span, SpanKind

# Longer delimiters first so `$$` is never read as two inline dollars.
MATH_RE = re.compile(r"(\$\$[\s\S]+?\$\$|\\\[[\s\S]+?\\\]|\$[^$\n]+\$|\\\([\s\S]+?\\\))")

_DELIMITERS = (
    ("$$", "$$", SpanKind.MATH_DISPLAY),
    ("\\[", "\\]", SpanKind.MATH_DISPLAY),
    ("$", "$", SpanKind.MATH_INLINE),
    ("\\(", "\\)", SpanKind.MATH_INLINE),
)


def extract_math(text: str) -> List[Span]:
    """Split text into literal ``text`` spans and math spans.

    Supports ``$...$`` and ``\\(...\\)`` for inline math and ``$$...$$`` and
    ``\\[...\\]`` for display math. Delimiters are stripped and the expression
    trimmed; unmatched delimiters stay in the surrounding text.
    """
    spans: List[Span] = []
    last = 0
    for match in MATH_RE.finditer(text):
        if match.start() > last:
            spans.append(Span.text(text[last : match.start()]))
        spans.append(_math_span(match.group(1)))
        last = match.end()
    if last < len(text):
        spans.append(Span.text(text[last:]))
    return spans


def tokenize_with_math(text: str, markers: MarkerSet = CHAT_MARKERS) -> List[Span]:
    """Extract math first, then run the inline tokenizer over the remaining text."""
    spans: List[Span] = []
    for span in extract_math(text):
        if span.kind is SpanKind.TEXT:
            spans.extend(tokenize(span.content, markers))
        else:
            spans.append(span)
    return spans


def _math_span(source: str) -> Span:
    for opening, closing, kind in _DELIMITERS:
        if source.startswith(opening) and source.endswith(closing):
            return Span(kind, source[len(opening) : len(source) - len(closing)].strip())
    return Span.text(source)
