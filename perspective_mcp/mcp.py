"""MCP handler registration."""

# ruff: noqa: F401

from __future__ import annotations

from fastapi import FastAPI

from perspective_mcp.mcp_router import mcp_router

# Import modules to register routes with the shared router.
from perspective_mcp import mcp_perspectives, mcp_tools_endpoint

# Re-export endpoints for tests and direct imports.
from perspective_mcp.mcp_perspectives import get_perspective_tasks
from perspective_mcp.mcp_tools_endpoint import list_tool_schemas


def register_mcp_handlers(app: FastAPI) -> None:
    """Attach MCP routes to the FastAPI application."""
    app.include_router(mcp_router)
