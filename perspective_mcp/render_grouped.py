"""Project-grouped rendering of a perspective."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from perspective_mcp.task_fields import (
    apply_limit,
    format_estimate,
    format_short_due_date,
    status_glyph,
)
from perspective_mcp.task_links import format_task_link
from perspective_mcp.task_model import TaskRecord

INBOX_HEADING = "📥 Inbox"
PROJECT_ICON = "📁"


class ProjectBuckets:
    """Tasks grouped by project, ordered by first appearance."""

    def __init__(self) -> None:
        self._buckets: list[tuple[str, list[TaskRecord]]] = []
        self._index: dict[str, int] = {}

    def add(self, project: str, task: TaskRecord) -> None:
        position = self._index.get(project)
        if position is None:
            position = len(self._buckets)
            self._index[project] = position
            self._buckets.append((project, []))
        self._buckets[position][1].append(task)

    def __iter__(self) -> Iterator[tuple[str, list[TaskRecord]]]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)


def _bucket_by_project(
    tasks: Sequence[TaskRecord],
) -> tuple[ProjectBuckets, list[TaskRecord]]:
    buckets = ProjectBuckets()
    inbox: list[TaskRecord] = []
    for task in tasks:
        if task.project:
            buckets.add(task.project, task)
        else:
            inbox.append(task)
    return buckets, inbox


def format_task_for_group(task: TaskRecord) -> str:
    line = f"- {status_glyph(task)} **{task.name}**"

    if task.tags:
        line += " " + " ".join(f"`{tag}`" for tag in task.tags)

    due = format_short_due_date(task.due_date)
    if due:
        line += f" 📅 {due}"

    estimate = format_estimate(task.estimated_minutes, compact=True)
    if estimate:
        line += f" ⏱️ {estimate}"

    link = format_task_link(task.id)
    if link:
        line += f" {link}"
    return line


def format_grouped_by_project(
    perspective_name: str,
    tasks: Sequence[TaskRecord],
    limit: int | None,
    total_count: int,
) -> str:
    display_tasks = apply_limit(tasks, limit)
    buckets, inbox = _bucket_by_project(display_tasks)

    lines: list[str] = []
    for project, project_tasks in buckets:
        lines.append(f"\n### {PROJECT_ICON} {project}")
        lines.append("")
        lines.extend(format_task_for_group(task) for task in project_tasks)

    if inbox:
        lines.append(f"\n### {INBOX_HEADING}")
        lines.append("")
        lines.extend(format_task_for_group(task) for task in inbox)

    header = (
        f"## Perspective tasks: {perspective_name}\n\n"
        f"**{len(display_tasks)} tasks, {len(buckets)} projects**"
    )
    footer = ""
    if total_count > len(display_tasks):
        footer = (
            f"\n\n---\n💡 *Found {total_count} tasks, showing {len(display_tasks)}*"
        )
    return header + "\n".join(lines) + footer
