"""Flat numbered rendering of a perspective."""

from __future__ import annotations

from collections.abc import Sequence

from perspective_mcp.task_fields import (
    FLAT_NOTE_BUDGET,
    IMPORTANT_MARKER,
    TAG_SEPARATOR,
    apply_limit,
    format_due_date,
    format_estimate,
    note_preview,
)
from perspective_mcp.task_links import format_task_link
from perspective_mcp.task_model import TaskRecord

INDENT = "   "


def _format_task_block(position: int, task: TaskRecord) -> str:
    lines = [f"{position}. **{task.name}**"]

    if task.project:
        lines.append(f"{INDENT}Project: {task.project}")

    if task.tags:
        lines.append(f"{INDENT}Tags: {TAG_SEPARATOR.join(task.tags)}")

    due = format_due_date(task.due_date)
    if due:
        lines.append(f"{INDENT}Due: {due}")

    if task.flagged:
        lines.append(f"{INDENT}{IMPORTANT_MARKER}")

    estimate = format_estimate(task.estimated_minutes)
    if estimate:
        lines.append(f"{INDENT}Estimate: {estimate}")

    preview = note_preview(task.note, FLAT_NOTE_BUDGET)
    if preview:
        lines.append(f"{INDENT}Note: {preview}")

    link = format_task_link(task.id)
    if link:
        lines.append(f"{INDENT}{link}")
    return "\n".join(lines)


def format_flat_tasks(
    perspective_name: str,
    tasks: Sequence[TaskRecord],
    limit: int | None,
    total_count: int,
) -> str:
    display_tasks = apply_limit(tasks, limit)
    body = "\n\n".join(
        _format_task_block(position, task)
        for position, task in enumerate(display_tasks, start=1)
    )

    header = f"**Perspective tasks: {perspective_name}** ({len(display_tasks)} tasks)\n\n"
    footer = ""
    if total_count > len(display_tasks):
        footer = f"\n\nNote: found {total_count} tasks, showing {len(display_tasks)}"
    return header + body + footer
