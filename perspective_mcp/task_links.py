"""Deep links back into OmniFocus."""

from __future__ import annotations

TASK_URL_TEMPLATE = "omnifocus:///task/{task_id}"


def format_task_link(task_id: str | None) -> str:
    """Return a markdown link that opens the task in OmniFocus."""
    if not task_id:
        return ""
    return f"[Open]({TASK_URL_TEMPLATE.format(task_id=task_id)})"
