"""Perspective-related MCP endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import Request

from perspective_mcp.errors import McpError, success_response
from perspective_mcp.mcp_payload import (
    _ensure_payload_dict,
    _read_bool_field,
    _read_int_field,
    _reject_unknown_fields,
)
from perspective_mcp.mcp_router import mcp_router
from perspective_mcp.perspective_tasks import (
    PerspectiveOptions,
    PerspectiveQuery,
    get_custom_perspective_tasks,
    resolve_render_mode,
)

PERSPECTIVE_FIELDS = {
    "perspectiveName",
    "hideCompleted",
    "limit",
    "showHierarchy",
    "groupByProject",
}


def _options_from_payload(payload: dict[str, Any]) -> PerspectiveOptions:
    defaults = PerspectiveOptions()
    return PerspectiveOptions(
        hide_completed=_read_bool_field(
            payload, "hideCompleted", default=defaults.hide_completed
        ),
        limit=_read_int_field(payload, "limit", default=defaults.limit),
        show_hierarchy=_read_bool_field(
            payload, "showHierarchy", default=defaults.show_hierarchy
        ),
        group_by_project=_read_bool_field(
            payload, "groupByProject", default=defaults.group_by_project
        ),
    )


def get_request_query(request: Request) -> PerspectiveQuery:
    query = getattr(request.app.state, "perspective_query", None)
    if query is None:
        raise McpError(
            "NOT_CONFIGURED",
            "Perspective query runner is not configured.",
            {},
        )
    return query


@mcp_router.post("/tool:get_custom_perspective_tasks")
async def get_perspective_tasks(
    payload: dict[str, Any], request: Request
) -> dict[str, Any]:
    """Render the tasks of an OmniFocus custom perspective."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, PERSPECTIVE_FIELDS)

    if "perspectiveName" not in payload:
        raise McpError(
            "MISSING_FIELDS",
            "perspectiveName is required.",
            {"fields": ["perspectiveName"]},
        )
    perspective_name = payload["perspectiveName"]
    if not isinstance(perspective_name, str):
        raise McpError(
            "INVALID_TYPE",
            "perspectiveName must be a string.",
            {"perspectiveName": str(perspective_name)},
        )

    options = _options_from_payload(payload)
    text = await get_custom_perspective_tasks(
        perspective_name, options, get_request_query(request)
    )
    return success_response(
        {
            "perspectiveName": perspective_name,
            "mode": resolve_render_mode(options).value,
            "text": text,
        }
    )
