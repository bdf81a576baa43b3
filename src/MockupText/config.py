from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from .code_block import COPY_RESET_DELAY
from .inline_parser import MARKER_SETS, MarkerSet, get_marker_set
from .model import Variant


@dataclass(frozen=True)
class RenderOptions:
    variant: Variant = Variant.FULL
    markers: str = "markdown"
    math: bool = False
    code_theme: str | None = None
    dark: bool = True
    show_copy_button: bool = True
    line_numbers: bool = True
    copy_delay: float = COPY_RESET_DELAY

    @property
    def marker_set(self) -> MarkerSet:
        return get_marker_set(self.markers)

    def merged(self, **overrides: Any) -> "RenderOptions":
        """Return a copy with every non-``None`` override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return _coerce(values, base=self)


# Consumer presets: chat bubbles, AI assistant replies and full Markdown.
PRESETS = {
    "chat": RenderOptions(variant=Variant.COMPACT, markers="chat", show_copy_button=False),
    "ai": RenderOptions(markers="chat", math=True),
    "markdown": RenderOptions(),
}


def load_options(text: str, base: RenderOptions | None = None) -> RenderOptions:
    """Parse render options from a YAML mapping.

    Unknown keys are ignored; a ``preset`` key selects the starting point that
    the remaining keys override.
    """
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError("YAML root must be a mapping of render options.")
    start = base or RenderOptions()
    preset = data.pop("preset", None)
    if preset is not None:
        if preset not in PRESETS:
            raise ValueError(f"Unknown preset '{preset}'. Expected one of: {', '.join(sorted(PRESETS))}")
        start = PRESETS[preset]
    return _coerce(data, base=start)


def load_options_file(path: str | Path, base: RenderOptions | None = None) -> RenderOptions:
    return load_options(Path(path).read_text(encoding="utf-8"), base=base)


def _coerce(values: Mapping[str, Any], base: RenderOptions) -> RenderOptions:
    known = {field.name for field in fields(RenderOptions)}
    changes: dict[str, Any] = {}
    for key, value in values.items():
        if key not in known:
            continue
        if key == "variant":
            changes[key] = _variant(value)
        elif key == "markers":
            if not isinstance(value, str) or value not in MARKER_SETS:
                raise ValueError(f"Unknown marker set '{value}'. Expected one of: {', '.join(sorted(MARKER_SETS))}")
            changes[key] = str(value)
        elif key in {"math", "dark", "show_copy_button", "line_numbers"}:
            if not isinstance(value, bool):
                raise ValueError(f"Option '{key}' must be true or false, got {value!r}")
            changes[key] = value
        elif key == "copy_delay":
            try:
                delay = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"Option 'copy_delay' must be a number, got {value!r}") from None
            if delay < 0:
                raise ValueError("Option 'copy_delay' must not be negative")
            changes[key] = delay
        elif key == "code_theme":
            changes[key] = None if value is None else str(value)
    return replace(base, **changes)


def _variant(value: Any) -> Variant:
    if isinstance(value, Variant):
        return value
    try:
        return Variant(str(value).lower())
    except ValueError:
        known = ", ".join(v.value for v in Variant)
        raise ValueError(f"Unknown variant '{value}'. Expected one of: {known}") from None
