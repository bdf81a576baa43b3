"""Clipboard, timer and math typesetting seams used by the renderers."""

from __future__ import annotations

import re
import threading
from typing import Callable, List, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ThreadingScheduler:
    """Runs callbacks on daemon ``threading.Timer`` threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class Clipboard(Protocol):
    def write(self, text: str) -> None:
        """Store ``text``; raise on failure."""


class MemoryClipboard:
    def __init__(self) -> None:
        self.history: List[str] = []

    @property
    def text(self) -> str | None:
        return self.history[-1] if self.history else None

    def write(self, text: str) -> None:
        self.history.append(text)


class MathTypesetter(Protocol):
    def typeset(self, expression: str, display: bool) -> str: ...


LATEX_TO_UNICODE = {
    r"\alpha": "α",
    r"\beta": "β",
    r"\gamma": "γ",
    r"\delta": "δ",
    r"\epsilon": "ε",
    r"\theta": "θ",
    r"\lambda": "λ",
    r"\mu": "μ",
    r"\pi": "π",
    r"\sigma": "σ",
    r"\phi": "φ",
    r"\omega": "ω",
    r"\Delta": "Δ",
    r"\Sigma": "Σ",
    r"\Omega": "Ω",
    r"\infty": "∞",
    r"\times": "×",
    r"\cdot": "·",
    r"\pm": "±",
    r"\leq": "≤",
    r"\geq": "≥",
    r"\neq": "≠",
    r"\approx": "≈",
    r"\sum": "∑",
    r"\int": "∫",
    r"\sqrt": "√",
    r"\rightarrow": "→",
    r"\to": "→",
}

SUPERSCRIPTS = str.maketrans("0123456789+-=()n", "⁰¹²³⁴⁵⁶⁷⁸⁹⁺⁻⁼⁽⁾ⁿ")
SUBSCRIPTS = str.maketrans("0123456789+-=()", "₀₁₂₃₄₅₆₇₈₉₊₋₌₍₎")

_SCRIPT_RE = re.compile(r"([_^])(\{[^{}]*\}|[0-9n+\-=()])")
_COMMAND_RE = re.compile(r"\\[A-Za-z]+")


class UnicodeMathTypesetter:
    """Approximate a small subset of LaTeX with Unicode glyphs.

    Unknown commands raise ``ValueError`` when ``strict`` is set; otherwise they
    are left in the output.
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    def typeset(self, expression: str, display: bool) -> str:
        text = expression.strip()
        for latex, glyph in LATEX_TO_UNICODE.items():
            text = re.sub(re.escape(latex) + r"(?![A-Za-z])", glyph, text)
        if self.strict:
            leftover = _COMMAND_RE.search(text)
            if leftover:
                raise ValueError(f"Unsupported LaTeX command: {leftover.group(0)}")
        text = _SCRIPT_RE.sub(_replace_script, text)
        return text


def _replace_script(match: re.Match[str]) -> str:
    marker, body = match.group(1), match.group(2).strip("{}")
    table = SUPERSCRIPTS if marker == "^" else SUBSCRIPTS
    if not body or any(ord(char) not in table for char in body):
        # no glyph for this script, keep the LaTeX form
        return match.group(0)
    return body.translate(table)
