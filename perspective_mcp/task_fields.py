"""Per-task text fragments and list helpers shared by every renderer."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from perspective_mcp.task_model import TaskRecord

TREE_NOTE_BUDGET = 60
FLAT_NOTE_BUDGET = 100
ELLIPSIS = "..."
TAG_SEPARATOR = ", "

DONE_MARKER = "[done]"
IMPORTANT_MARKER = "[important]"

GLYPH_DONE = "✅"
GLYPH_FLAGGED = "🔶"
GLYPH_PLAIN = "○"


def format_task_name(task: TaskRecord) -> str:
    name = f"**{task.name}**"
    if task.completed:
        return f"~~{name}~~ {DONE_MARKER}"
    if task.flagged:
        return f"{IMPORTANT_MARKER} {name}"
    return name


def status_glyph(task: TaskRecord) -> str:
    if task.completed:
        return GLYPH_DONE
    if task.flagged:
        return GLYPH_FLAGGED
    return GLYPH_PLAIN


def format_estimate(minutes: int | None, *, compact: bool = False) -> str | None:
    """Render an estimate as ``1h 30m``, ``2h`` or ``45m``.

    ``compact`` drops the space between the hour and minute parts.
    """
    if not minutes:
        return None
    hours, rest = divmod(minutes, 60)
    if hours == 0:
        return f"{rest}m"
    if rest == 0:
        return f"{hours}h"
    separator = "" if compact else " "
    return f"{hours}h{separator}{rest}m"


def _parse_timestamp(raw: str) -> datetime | None:
    value = raw.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    # Aware timestamps are shown in the local timezone.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed


def format_due_date(raw: str | None) -> str | None:
    if not raw:
        return None
    parsed = _parse_timestamp(raw)
    if parsed is None:
        return raw
    return parsed.date().isoformat()


def format_short_due_date(raw: str | None) -> str | None:
    if not raw:
        return None
    parsed = _parse_timestamp(raw)
    if parsed is None:
        return raw
    return f"{parsed:%b} {parsed.day}"


def note_preview(note: str | None, budget: int) -> str | None:
    """Return at most ``budget`` characters of the note, marking truncation."""
    if not note or not note.strip():
        return None
    stripped = note.strip()
    if len(stripped) <= budget:
        return stripped
    return stripped[:budget] + ELLIPSIS


def format_task_details(task: TaskRecord, note_budget: int = TREE_NOTE_BUDGET) -> list[str]:
    details: list[str] = []

    if task.project:
        details.append(f"Project: {task.project}")

    if task.tags:
        details.append(f"Tags: {TAG_SEPARATOR.join(task.tags)}")

    due = format_due_date(task.due_date)
    if due:
        details.append(f"Due: {due}")

    estimate = format_estimate(task.estimated_minutes)
    if estimate:
        details.append(f"Estimate: {estimate}")

    preview = note_preview(task.note, note_budget)
    if preview:
        details.append(f"Note: {preview}")

    return details


def apply_limit(tasks: Sequence[TaskRecord], limit: int | None) -> list[TaskRecord]:
    """Keep the first ``limit`` tasks; a missing or non-positive limit keeps all."""
    if limit and limit > 0:
        return list(tasks[:limit])
    return list(tasks)
