from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Sequence

from .model import Span, SpanKind

URL_RE = re.compile(r"(https?://[^\s<>\[\]]+)")


@dataclass(frozen=True)
class MarkerPattern:
    kind: SpanKind
    regex: re.Pattern[str]


@dataclass(frozen=True)
class MarkerSet:
    """Ordered inline markers; earlier patterns win ties on start position."""

    name: str
    patterns: tuple[MarkerPattern, ...]
    autolink: bool = True


def _marker(kind: SpanKind, pattern: str) -> MarkerPattern:
    return MarkerPattern(kind=kind, regex=re.compile(pattern))


LINK = _marker(SpanKind.LINK, r"\[([^\]]+)\]\(([^)]+)\)")
INLINE_CODE = _marker(SpanKind.CODE, r"`([^`]+)`")

# Chat bubbles: *bold*, _italic_, ~strike~ (doubled markers accepted too).
CHAT_MARKERS = MarkerSet(
    name="chat",
    patterns=(
        LINK,
        INLINE_CODE,
        _marker(SpanKind.BOLD, r"\*\*([^*]+)\*\*|\*([^*]+)\*"),
        _marker(SpanKind.ITALIC, r"_([^_]+)_"),
        _marker(SpanKind.STRIKETHROUGH, r"~~([^~]+)~~|~([^~]+)~"),
    ),
)

# Markdown prose: **bold**, *italic* or _italic_, ~~strike~~.
MARKDOWN_MARKERS = MarkerSet(
    name="markdown",
    patterns=(
        LINK,
        INLINE_CODE,
        _marker(SpanKind.BOLD, r"\*\*([^*]+)\*\*"),
        _marker(SpanKind.ITALIC, r"\*([^*]+)\*|_([^_]+)_"),
        _marker(SpanKind.STRIKETHROUGH, r"~~([^~]+)~~"),
    ),
)

PLAIN_MARKERS = MarkerSet(name="plain", patterns=())

MARKER_SETS = {marker_set.name: marker_set for marker_set in (CHAT_MARKERS, MARKDOWN_MARKERS, PLAIN_MARKERS)}


def get_marker_set(name: str) -> MarkerSet:
    try:
        return MARKER_SETS[name]
    except KeyError:
        known = ", ".join(sorted(MARKER_SETS))
        raise ValueError(f"Unknown marker set '{name}'. Expected one of: {known}") from None


def tokenize(text: str, markers: MarkerSet = CHAT_MARKERS) -> List[Span]:
    """Split ``text`` into typed inline spans.

    Each step picks the marker whose match starts earliest in the remaining
    text. Captured content is emitted literally, markers never nest.
    """
    spans: List[Span] = []
    remaining = text
    while remaining:
        earliest = _earliest_match(remaining, markers.patterns)
        if earliest is None:
            spans.extend(_plain(remaining, markers))
            break
        pattern, match = earliest
        if match.start() > 0:
            spans.extend(_plain(remaining[: match.start()], markers))
        spans.append(_span_from_match(pattern, match))
        remaining = remaining[match.end() :]
    return spans


def autolink(text: str) -> List[Span]:
    """Turn bare ``http(s)://`` URLs into link spans; everything else stays text."""
    spans: List[Span] = []
    for idx, part in enumerate(URL_RE.split(text)):
        if not part:
            continue
        # split() with one capturing group puts the URLs at odd positions
        if idx % 2 == 1:
            spans.append(Span.link(part, part))
        else:
            spans.append(Span.text(part))
    return spans


def spans_to_text(spans: Sequence[Span]) -> str:
    return "".join(span.content for span in spans)


def _plain(text: str, markers: MarkerSet) -> List[Span]:
    if markers.autolink:
        return autolink(text)
    return [Span.text(text)]


def _earliest_match(text: str, patterns: Sequence[MarkerPattern]) -> tuple[MarkerPattern, re.Match[str]] | None:
    best: tuple[MarkerPattern, re.Match[str]] | None = None
    for pattern in patterns:
        match = pattern.regex.search(text)
        if match is None:
            continue
        if best is None or match.start() < best[1].start():
            best = (pattern, match)
    return best


def _span_from_match(pattern: MarkerPattern, match: re.Match[str]) -> Span:
    if pattern.kind is SpanKind.LINK:
        return Span.link(match.group(1), match.group(2))
    content = next(group for group in match.groups() if group is not None)
    return Span(pattern.kind, content)
