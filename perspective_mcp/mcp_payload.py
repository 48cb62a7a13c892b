"""Payload validation helpers for MCP endpoints."""

from __future__ import annotations

from typing import Any

from perspective_mcp.errors import McpError


def _ensure_payload_dict(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise McpError(
            "INVALID_TYPE",
            "Payload must be an object.",
            {"type": type(payload).__name__},
        )
    return payload


def _reject_unknown_fields(payload: dict[str, Any], allowed_fields: set[str]) -> None:
    unknown_fields = sorted(set(payload) - allowed_fields)
    if unknown_fields:
        raise McpError(
            "UNKNOWN_FIELD",
            "Unknown fields are not allowed.",
            {"fields": unknown_fields},
        )


def _read_bool_field(payload: dict[str, Any], key: str, *, default: bool) -> bool:
    value = payload.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise McpError(
            "INVALID_TYPE",
            f"{key} must be a boolean.",
            {key: str(value)},
        )
    return value


def _read_int_field(payload: dict[str, Any], key: str, *, default: int) -> int:
    value = payload.get(key)
    if value is None:
        return default
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise McpError(
            "INVALID_TYPE",
            f"{key} must be a non-negative integer.",
            {key: str(value)},
        )
    return value
