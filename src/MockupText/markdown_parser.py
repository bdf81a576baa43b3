from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Sequence

from .model import Block, Document

logger = logging.getLogger(__name__)

FENCE = "```"
HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
HR_RE = re.compile(r"^(?:-{3,}|\*{3,}|_{3,})$")
UNORDERED_ITEM_RE = re.compile(r"^[-*+]\s")
ORDERED_ITEM_RE = re.compile(r"^\d+\.\s")
TABLE_SEPARATOR_CHARS = frozenset("|-: \t")

# A rule starts at lines[i] (only the table rule peeks at lines[i + 1]) and
# returns the block plus the index of the first line it did not consume.
Rule = Callable[[Sequence[str], int], Optional[tuple[Block, int]]]


def parse_markdown(text: str) -> Document:
    lines = _split_lines(text)
    blocks = segment(text)
    logger.debug("Segmented %d lines into %d blocks", len(lines), len(blocks))
    return Document(blocks=blocks, metadata={"source": "markdown", "line_count": len(lines)})


def segment(text: str) -> List[Block]:
    """Partition a document into blocks in a single forward pass.

    Malformed input never raises: unterminated fences run to the end of the
    document and anything unrecognised becomes a paragraph. Blank lines end
    paragraphs and are kept in the ``raw_lines`` of the preceding block.
    """
    lines = _split_lines(text)
    entries: list[tuple[Block, list[str]]] = []
    leading_blank: list[str] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if not line.strip():
            if entries:
                entries[-1][1].append(line)
            else:
                leading_blank.append(line)
            i += 1
            continue
        block, end = _match_rule(lines, i) or _parse_paragraph(lines, i)
        entries.append((block, list(lines[i:end])))
        i = end

    if entries and leading_blank:
        entries[0][1][:0] = leading_blank
    return [block.with_raw_lines(raw) for block, raw in entries]


def _split_lines(text: str) -> list[str]:
    return text.replace("\r\n", "\n").split("\n")


def _match_rule(lines: Sequence[str], i: int) -> tuple[Block, int] | None:
    for rule in RULES:
        result = rule(lines, i)
        if result is not None:
            return result
    return None


def _parse_fence(lines: Sequence[str], i: int) -> tuple[Block, int] | None:
    line = lines[i]
    if not line.startswith(FENCE):
        return None
    language = line[len(FENCE) :].strip()
    code_lines: list[str] = []
    i += 1
    while i < len(lines) and not lines[i].startswith(FENCE):
        code_lines.append(lines[i])
        i += 1
    if i < len(lines):
        i += 1  # closing fence
    return Block.code("\n".join(code_lines), language=language or None), i


def _parse_heading(lines: Sequence[str], i: int) -> tuple[Block, int] | None:
    match = HEADING_RE.match(lines[i])
    if match is None:
        return None
    return Block.heading(len(match.group(1)), match.group(2).strip()), i + 1


def _parse_hr(lines: Sequence[str], i: int) -> tuple[Block, int] | None:
    if HR_RE.match(lines[i].strip()) is None:
        return None
    return Block.hr(), i + 1


def _parse_blockquote(lines: Sequence[str], i: int) -> tuple[Block, int] | None:
    if not lines[i].startswith(">"):
        return None
    quote_lines: list[str] = []
    while i < len(lines) and lines[i].startswith(">"):
        quote_lines.append(lines[i][1:].strip())
        i += 1
    return Block.blockquote("\n".join(quote_lines)), i


def _parse_list(lines: Sequence[str], i: int) -> tuple[Block, int] | None:
    if UNORDERED_ITEM_RE.match(lines[i]):
        item_re, ordered = UNORDERED_ITEM_RE, False
    elif ORDERED_ITEM_RE.match(lines[i]):
        item_re, ordered = ORDERED_ITEM_RE, True
    else:
        return None
    items: list[str] = []
    while i < len(lines) and item_re.match(lines[i]):
        items.append(item_re.sub("", lines[i], count=1))
        i += 1
    return Block.list_block(items, ordered=ordered), i


def _parse_table(lines: Sequence[str], i: int) -> tuple[Block, int] | None:
    if "|" not in lines[i] or i + 1 >= len(lines) or not _is_table_separator(lines[i + 1]):
        return None
    rows: list[list[str]] = [_split_cells(lines[i])]
    i += 2
    while i < len(lines) and "|" in lines[i]:
        if not _is_table_separator(lines[i]):
            rows.append(_split_cells(lines[i]))
        i += 1
    return Block.table(rows), i


def _parse_paragraph(lines: Sequence[str], i: int) -> tuple[Block, int]:
    # Always consumes the first line, even if it was rejected by every rule.
    para_lines = [lines[i].strip()]
    i += 1
    while i < len(lines) and lines[i].strip() and not _starts_block(lines, i):
        para_lines.append(lines[i].strip())
        i += 1
    return Block.paragraph(" ".join(para_lines)), i


def _starts_block(lines: Sequence[str], i: int) -> bool:
    return any(rule(lines, i) is not None for rule in RULES)


def _is_table_separator(line: str) -> bool:
    stripped = line.strip()
    return "|" in stripped and "-" in stripped and set(stripped) <= TABLE_SEPARATOR_CHARS


def _split_cells(line: str) -> list[str]:
    return [cell.strip() for cell in line.split("|") if cell.strip()]


RULES: tuple[Rule, ...] = (
    _parse_fence,
    _parse_heading,
    _parse_hr,
    _parse_blockquote,
    _parse_list,
    _parse_table,
)
