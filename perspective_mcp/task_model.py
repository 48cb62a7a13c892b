"""Typed task records decoded from a perspective query result."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from perspective_mcp.errors import DECODE_ERROR, INVALID_TASK, QUERY_FAILED, McpError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskRecord:
    """One task returned by the perspective query."""

    id: str
    name: str
    completed: bool = False
    flagged: bool = False
    project: str | None = None
    tags: tuple[str, ...] = ()
    due_date: str | None = None
    estimated_minutes: int | None = None
    note: str | None = None
    parent: str | None = None
    children: tuple[str, ...] = ()


class TaskMap(Mapping[str, TaskRecord]):
    """Read-only id -> TaskRecord mapping built once per query result."""

    def __init__(self, records: Mapping[str, TaskRecord] | None = None) -> None:
        self._records = MappingProxyType(dict(records or {}))

    def __getitem__(self, task_id: str) -> TaskRecord:
        return self._records[task_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"TaskMap({len(self._records)} tasks)"

    def roots(self) -> list[TaskRecord]:
        return [record for record in self._records.values() if record.parent is None]

    def children_of(self, record: TaskRecord) -> list[TaskRecord]:
        """Resolve child ids in listed order, dropping ids missing from the map."""
        return [
            self._records[child_id]
            for child_id in record.children
            if child_id in self._records
        ]


@dataclass(frozen=True)
class QueryResult:
    success: bool
    error: str | None
    task_map: TaskMap
    count: int | None


def _optional_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value if value.strip() else None


def _str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _optional_minutes(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        return None
    return value


def decode_task_record(task_id: str, raw: Any) -> TaskRecord:
    """Decode one raw task object, mapping missing or mistyped fields to defaults."""
    if not isinstance(raw, dict):
        raise McpError(
            INVALID_TASK,
            f"Task {task_id} must be an object.",
            {"id": task_id, "type": type(raw).__name__},
        )

    name = raw.get("name")
    if not isinstance(name, str):
        raise McpError(
            INVALID_TASK,
            f"Task {task_id} is missing a name.",
            {"id": task_id},
        )

    record_id = raw.get("id")
    if not isinstance(record_id, str) or not record_id:
        record_id = task_id

    parent = raw.get("parent")
    return TaskRecord(
        id=record_id,
        name=name,
        completed=raw.get("completed") is True,
        flagged=raw.get("flagged") is True,
        project=_optional_str(raw.get("project")),
        tags=_str_tuple(raw.get("tags")),
        due_date=_optional_str(raw.get("dueDate")),
        estimated_minutes=_optional_minutes(raw.get("estimatedMinutes")),
        note=_optional_str(raw.get("note")),
        parent=parent if isinstance(parent, str) and parent else None,
        children=_str_tuple(raw.get("children")),
    )


def build_task_map(raw: Any) -> TaskMap:
    if raw is None:
        return TaskMap()
    if not isinstance(raw, dict):
        raise McpError(
            DECODE_ERROR,
            f"taskMap must be an object, got {type(raw).__name__}.",
            {"type": type(raw).__name__},
        )
    records: dict[str, TaskRecord] = {}
    for task_id, value in raw.items():
        try:
            records[str(task_id)] = decode_task_record(str(task_id), value)
        except McpError as exc:
            # Undecodable tasks behave like ids missing from the map.
            logger.debug("Dropping task %s: %s", task_id, exc)
    return TaskMap(records)


def decode_query_result(result: Any) -> QueryResult:
    """Normalize the raw value returned by the perspective query.

    The value may be an encoded JSON payload or an already-decoded object.
    Raises McpError when it cannot be interpreted or reports failure.
    """
    if isinstance(result, bytes):
        result = result.decode("utf-8", errors="replace")

    if isinstance(result, str):
        try:
            data = json.loads(result)
        except json.JSONDecodeError as exc:
            raise McpError(
                DECODE_ERROR,
                f"Failed to parse script result: {result}",
                {"raw": result},
            ) from exc
    elif isinstance(result, dict):
        data = result
    else:
        raise McpError(
            DECODE_ERROR,
            f"Script returned an invalid result type: {type(result).__name__}, value: {result}",
            {"type": type(result).__name__},
        )

    if not isinstance(data, dict):
        raise McpError(
            DECODE_ERROR,
            f"Script result must be an object, got {type(data).__name__}.",
            {"type": type(data).__name__},
        )

    if not data.get("success"):
        message = data.get("error")
        if not isinstance(message, str) or not message:
            message = "Unknown error occurred"
        raise McpError(QUERY_FAILED, message, {})

    task_map = build_task_map(data.get("taskMap"))
    count = data.get("count")
    if isinstance(count, bool) or not isinstance(count, int):
        count = None

    return QueryResult(success=True, error=None, task_map=task_map, count=count)
