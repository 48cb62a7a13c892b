"""FastAPI entrypoint for the OmniFocus perspective MCP server."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from perspective_mcp.config import load_config
from perspective_mcp.errors import ErrorResponse, McpError, error_response
from perspective_mcp.logging_setup import setup_logging
from perspective_mcp.mcp import register_mcp_handlers
from perspective_mcp.omnifocus_script import OmniFocusScriptRunner

SERVICE_TOKEN_HEADER = "X-Omnifocus-Service-Token"
AUTH_EXEMPT_PATHS = {"/health"}
DEFAULT_PROCESS_HOST = "127.0.0.1"
DEFAULT_PROCESS_PORT = "8765"


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        config = load_config()
        setup_logging(config.log_level)
        app.state.config = config
        if getattr(app.state, "perspective_query", None) is None:
            app.state.perspective_query = OmniFocusScriptRunner(config)
        yield

    app = FastAPI(lifespan=lifespan)

    @app.middleware("http")
    async def enforce_service_token(request: Request, call_next):
        if request.url.path in AUTH_EXEMPT_PATHS:
            return await call_next(request)

        config = getattr(request.app.state, "config", None)
        service_token = getattr(config, "service_token", None)
        if service_token:
            supplied_token = request.headers.get(SERVICE_TOKEN_HEADER)
            if supplied_token != service_token:
                error = ErrorResponse(
                    code="AUTH_FORBIDDEN",
                    message="Invalid service token.",
                    details={"header": SERVICE_TOKEN_HEADER},
                )
                return JSONResponse(
                    status_code=403, content=error_response(error)
                )

        return await call_next(request)

    @app.exception_handler(McpError)
    def handle_mcp_error(request: Request, exc: McpError) -> JSONResponse:
        return JSONResponse(status_code=400, content=error_response(exc.error))

    @app.get("/health", status_code=200)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    register_mcp_handlers(app)
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on PROCESS_HOST:PROCESS_PORT."""
    host = os.getenv("PROCESS_HOST", DEFAULT_PROCESS_HOST).strip() or DEFAULT_PROCESS_HOST
    port = os.getenv("PROCESS_PORT", DEFAULT_PROCESS_PORT).strip() or DEFAULT_PROCESS_PORT
    uvicorn.run("perspective_mcp.main:app", host=host, port=int(port))
