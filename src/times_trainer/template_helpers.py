"""Common Jinja helpers and filters for Times Trainer templates."""

from __future__ import annotations

from typing import Any

from .facts import FactRecord


def cell_title(a: int, b: int, record: FactRecord) -> str:
    """Native hover tooltip for a matrix cell."""
    if record.attempts > 0:
        return f"{a}×{b} – ✓{record.correct} ✗{record.wrong}"
    return f"{a}×{b} – not practiced"


def popover_text(a: int, b: int, record: FactRecord) -> str:
    """Long-press popover text for touch devices."""
    if record.attempts > 0:
        return f"{a}×{b}  ✓ {record.correct}  ✗ {record.wrong}"
    return f"{a}×{b}  not practiced yet"


def filter_label(tag: Any) -> str:
    if tag == "all":
        return "All"
    return f"{tag}×"


def register_template_filters(env: Any) -> None:
    """Attach shared filters to a Jinja environment exactly once."""
    env.filters.setdefault("filter_label", filter_label)
    env.globals.setdefault("cell_title", cell_title)
