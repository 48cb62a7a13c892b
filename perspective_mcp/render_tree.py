"""Hierarchical (parent/child) rendering of a perspective."""

from __future__ import annotations

import logging
from typing import NamedTuple

from perspective_mcp.task_fields import format_task_details, format_task_name
from perspective_mcp.task_links import format_task_link
from perspective_mcp.task_model import TaskMap, TaskRecord

logger = logging.getLogger(__name__)

MID_CONNECTOR = "├─ "
LAST_CONNECTOR = "└─ "
CONTINUATION = "│  "
PADDING = "   "


class _Frame(NamedTuple):
    task: TaskRecord
    prefix: str
    is_last: bool
    path: frozenset[str]


def format_hierarchical_tasks(
    perspective_name: str, task_map: TaskMap, hide_completed: bool
) -> str:
    header = f"**Perspective tasks: {perspective_name}** (hierarchy view)\n\n"

    roots = task_map.roots()
    if hide_completed:
        roots = [task for task in roots if not task.completed]

    if not roots:
        qualifier = "incomplete " if hide_completed else ""
        return header + f"No {qualifier}root tasks."

    lines: list[str] = []
    stack: list[_Frame] = [
        _Frame(root, "", index == len(roots) - 1, frozenset())
        for index, root in reversed(list(enumerate(roots)))
    ]
    while stack:
        frame = stack.pop()
        # Pushed in reverse so the first child is rendered first.
        stack.extend(reversed(_render_task_node(frame, task_map, hide_completed, lines)))
    return header + "\n".join(lines)


def _render_task_node(
    frame: _Frame, task_map: TaskMap, hide_completed: bool, lines: list[str]
) -> list[_Frame]:
    """Emit one node with its detail lines and return the frames of its children."""
    task = frame.task
    connector = LAST_CONNECTOR if frame.is_last else MID_CONNECTOR
    line = frame.prefix + connector + format_task_name(task)
    link = format_task_link(task.id)
    if link:
        line += f" {link}"
    lines.append(line)

    # Details and children share the prefix one level below this node.
    child_prefix = frame.prefix + (PADDING if frame.is_last else CONTINUATION)
    for detail in format_task_details(task):
        lines.append(child_prefix + detail)

    path = frame.path | {task.id}
    children = [
        child
        for child in task_map.children_of(task)
        if not (hide_completed and child.completed)
    ]
    cyclic = [child.id for child in children if child.id in path]
    if cyclic:
        logger.debug("Skipping cyclic child references %s under task %s", cyclic, task.id)
        children = [child for child in children if child.id not in path]
    return [
        _Frame(child, child_prefix, index == len(children) - 1, path)
        for index, child in enumerate(children)
    ]
