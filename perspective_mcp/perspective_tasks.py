"""Fetch a custom perspective and render its tasks as text."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from perspective_mcp.errors import McpError, format_error_text
from perspective_mcp.render_flat import format_flat_tasks
from perspective_mcp.render_grouped import format_grouped_by_project
from perspective_mcp.render_tree import format_hierarchical_tasks
from perspective_mcp.task_model import decode_query_result

logger = logging.getLogger(__name__)

PERSPECTIVE_SCRIPT = "@getCustomPerspectiveTasks.js"

PerspectiveQuery = Callable[[str, dict[str, Any]], Awaitable[Any]]


class RenderMode(str, Enum):
    HIERARCHY = "hierarchy"
    GROUPED = "grouped"
    FLAT = "flat"


@dataclass(frozen=True)
class PerspectiveOptions:
    hide_completed: bool = True
    limit: int = 1000
    show_hierarchy: bool = False
    group_by_project: bool = True


def resolve_render_mode(options: PerspectiveOptions) -> RenderMode:
    """Pick exactly one mode; hierarchy wins over grouping, grouping over flat."""
    if options.show_hierarchy:
        return RenderMode.HIERARCHY
    if options.group_by_project:
        return RenderMode.GROUPED
    return RenderMode.FLAT


async def get_custom_perspective_tasks(
    perspective_name: str,
    options: PerspectiveOptions,
    query: PerspectiveQuery,
) -> str:
    """Render the tasks of a custom perspective.

    Never raises: every failure is logged and returned as error text.
    """
    if not perspective_name or not perspective_name.strip():
        return format_error_text("Perspective name must not be empty")

    try:
        result = await query(PERSPECTIVE_SCRIPT, {"perspectiveName": perspective_name})
        decoded = decode_query_result(result)
        task_map = decoded.task_map

        tasks = list(task_map.values())
        if options.hide_completed:
            tasks = [task for task in tasks if not task.completed]

        if not tasks:
            qualifier = "incomplete " if options.hide_completed else ""
            return f"**Perspective tasks: {perspective_name}**\n\nNo {qualifier}tasks."

        # The collaborator counts completed tasks too; report what survived the filter.
        total_count = len(tasks)
        if decoded.count is not None:
            hidden = len(task_map) - len(tasks)
            total_count = max(decoded.count - hidden, len(tasks))
        mode = resolve_render_mode(options)
        if mode is RenderMode.HIERARCHY:
            return format_hierarchical_tasks(
                perspective_name, task_map, options.hide_completed
            )
        if mode is RenderMode.GROUPED:
            return format_grouped_by_project(
                perspective_name, tasks, options.limit, total_count
            )
        return format_flat_tasks(perspective_name, tasks, options.limit, total_count)
    except McpError as exc:
        logger.exception(
            "Perspective query failed for %r (%s)", perspective_name, exc.error.code
        )
        return format_error_text(str(exc))
    except Exception as exc:
        logger.exception("Unexpected error rendering perspective %r", perspective_name)
        return format_error_text(str(exc) or type(exc).__name__)
