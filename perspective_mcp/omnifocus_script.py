"""Run bundled OmniFocus automation scripts through osascript."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from perspective_mcp.config import AppConfig
from perspective_mcp.errors import McpError

logger = logging.getLogger(__name__)


class OmniFocusScriptRunner:
    """Async callable executing one JXA script and returning its stdout."""

    def __init__(self, config: AppConfig) -> None:
        self.scripts_path = config.scripts_path
        self.osascript_path = config.osascript_path
        self.timeout = config.script_timeout

    def resolve_script(self, script_name: str) -> Path:
        name = script_name.removeprefix("@")
        if not name or "/" in name or "\\" in name or name in {".", ".."}:
            raise McpError(
                "INVALID_SCRIPT",
                "Script name must be a bare file name.",
                {"script": script_name},
            )
        script_path = self.scripts_path / name
        if not script_path.is_file():
            raise McpError(
                "SCRIPT_NOT_FOUND",
                f"Script not found: {name}",
                {"script": name},
            )
        return script_path

    async def __call__(self, script_name: str, args: dict[str, Any]) -> str:
        script_path = self.resolve_script(script_name)
        logger.debug("Running %s with %s", script_path.name, args)

        process = await asyncio.create_subprocess_exec(
            self.osascript_path,
            "-l",
            "JavaScript",
            str(script_path),
            json.dumps(args),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.warning("%s timed out after %ss", script_path.name, self.timeout)
            raise McpError(
                "SCRIPT_TIMEOUT",
                f"Script timed out after {self.timeout} seconds.",
                {"script": script_path.name},
            ) from None

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            logger.warning(
                "%s exited with %s: %s", script_path.name, process.returncode, message
            )
            raise McpError(
                "SCRIPT_FAILED",
                message or f"Script exited with status {process.returncode}.",
                {"script": script_path.name, "returncode": process.returncode},
            )

        return stdout.decode("utf-8", errors="replace").strip()
