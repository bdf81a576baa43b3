from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import List

from .collaborators import Clipboard, Scheduler, ThreadingScheduler, TimerHandle
from .highlighter import CodeToken, Highlighter, PygmentsHighlighter, plain_lines
from .model import PLAIN_LANGUAGE

logger = logging.getLogger(__name__)

COPY_RESET_DELAY = 2.0

LANGUAGE_ALIASES = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "rb": "ruby",
    "sh": "bash",
    "shell": "bash",
    "yml": "yaml",
    "md": "markdown",
    "json5": "json",
    "plaintext": PLAIN_LANGUAGE,
    "text": PLAIN_LANGUAGE,
}

# Named themes as (light, dark) Pygments styles.
CODE_THEMES = {
    "vscode": ("vs", "native"),
    "github": ("friendly", "github-dark"),
    "dracula": ("dracula", "dracula"),
    "monokai": ("monokai", "monokai"),
}
DEFAULT_THEMES = CODE_THEMES["vscode"]


@dataclass(frozen=True)
class CodeLine:
    number: int
    tokens: List[CodeToken]

    @property
    def text(self) -> str:
        return "".join(token.text for token in self.tokens)


@dataclass(frozen=True)
class RenderedCode:
    language: str
    theme: str
    lines: List[CodeLine]
    highlighted: bool = True


def normalize_language(tag: str | None) -> str:
    """Map a fence language tag to a highlighter language name."""
    lowered = (tag or "").strip().lower()
    if not lowered:
        return PLAIN_LANGUAGE
    return LANGUAGE_ALIASES.get(lowered, lowered)


def resolve_theme(name: str | None, dark: bool = True) -> str:
    light_style, dark_style = CODE_THEMES.get((name or "").lower(), DEFAULT_THEMES)
    return dark_style if dark else light_style


def render_code(
    language_tag: str | None,
    code: str,
    theme_name: str | None = None,
    dark: bool = True,
    highlighter: Highlighter | None = None,
) -> RenderedCode:
    """Highlight ``code`` and number its lines from 1.

    Surrounding blank lines are dropped; blank lines inside the code keep
    their number. Highlighter failures fall back to unstyled lines.
    """
    language = normalize_language(language_tag)
    theme = resolve_theme(theme_name, dark=dark)
    source = code.strip("\r\n")
    highlighter = highlighter or PygmentsHighlighter()
    highlighted = True
    try:
        token_lines = highlighter.highlight(language, source, theme)
    except Exception:
        logger.warning("Highlighting failed for language '%s'; rendering plain text", language, exc_info=True)
        token_lines = plain_lines(source)
        highlighted = False
    lines = [CodeLine(number=idx, tokens=tokens) for idx, tokens in enumerate(token_lines, start=1)]
    return RenderedCode(language=language, theme=theme, lines=lines, highlighted=highlighted)


class CopyButtonState:
    """``idle``/``copied`` acknowledgement for a code block's copy button.

    ``copy()`` always moves to ``copied`` and (re)starts the revert timer, so
    the revert is timed from the last copy. ``dispose()`` cancels the pending
    revert; the state ignores copies after disposal.
    """

    def __init__(
        self,
        code: str,
        clipboard: Clipboard,
        scheduler: Scheduler | None = None,
        delay: float = COPY_RESET_DELAY,
    ) -> None:
        self.code = code
        self.clipboard = clipboard
        self.scheduler = scheduler or ThreadingScheduler()
        self.delay = delay
        self.copied = False
        self.copy_failed = False
        self.disposed = False
        self._timer: TimerHandle | None = None
        self._generation = 0
        self._lock = threading.RLock()

    @property
    def state(self) -> str:
        return "copied" if self.copied else "idle"

    def copy(self) -> None:
        with self._lock:
            if self.disposed:
                return
            try:
                self.clipboard.write(self.code)
                self.copy_failed = False
            except Exception:
                logger.warning("Failed to copy code to clipboard", exc_info=True)
                self.copy_failed = True
            self.copied = True
            self._cancel_timer()
            self._generation += 1
            generation = self._generation
            self._timer = self.scheduler.call_later(self.delay, lambda: self._reset(generation))

    def dispose(self) -> None:
        with self._lock:
            self.disposed = True
            self._cancel_timer()

    def _reset(self, generation: int) -> None:
        with self._lock:
            # stale timer from an earlier copy
            if generation != self._generation or self.disposed:
                return
            self._timer = None
            self.copied = False

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
