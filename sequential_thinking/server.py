"""FastAPI server exposing the MCP JSON-RPC endpoint."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from . import __version__
from .config import ServerConfig, configure_logging
from .jsonrpc.dispatcher import Dispatcher
from .jsonrpc.models import ErrorCode, JSONRPCError, JSONRPCResponse
from .registry import ToolRegistry
from .tools import build_default_registry

logger = logging.getLogger(__name__)

SERVER_NAME = "Sequential Thinking MCP Server"
SERVER_DESCRIPTION = (
    "A server for AI sequential thinking processes using thought branching "
    "and dynamic hypothesis generation"
)
MCP_PATH = "/api/mcp"
HEALTH_PATH = "/health"

# HTTP status returned alongside each JSON-RPC error code
HTTP_STATUS_BY_CODE = {
    ErrorCode.PARSE_ERROR: 400,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.INVALID_PARAMS: 400,
    ErrorCode.METHOD_NOT_FOUND: 404,
    ErrorCode.INTERNAL_ERROR: 500,
}


def http_status_for(response: JSONRPCResponse) -> int:
    if response.error is None:
        return 200
    return HTTP_STATUS_BY_CODE.get(response.error.code, 500)


def create_app(
    config: Optional[ServerConfig] = None,
    registry: Optional[ToolRegistry] = None,
) -> FastAPI:
    """Create the FastAPI app.

    Args:
        config: Server settings; read from the environment when omitted
        registry: Tools to serve; the built-in tools when omitted
    """
    config = config or ServerConfig.from_env()
    registry = registry if registry is not None else build_default_registry()
    dispatcher = Dispatcher(registry, tool_timeout=config.tool_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifecycle manager for FastAPI app."""
        base_url = f"http://localhost:{config.port}"
        logger.info(f"Server running on port {config.port}")
        logger.info(f"Log level: {config.log_level}")
        logger.info(f"Environment: {config.environment}")
        logger.info(f"Registered {len(registry)} MCP tools")
        logger.info(f"Health check available at {base_url}{HEALTH_PATH}")
        logger.info(f"MCP API available at {base_url}{MCP_PATH}")
        yield
        logger.info("Shutting down MCP server...")

    app = FastAPI(
        title=SERVER_NAME,
        description=SERVER_DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.registry = registry
    app.state.dispatcher = dispatcher

    @app.post(MCP_PATH)
    async def mcp_endpoint(request: Request):
        """MCP JSON-RPC 2.0 endpoint."""
        try:
            payload = await request.json()
        except ValueError as e:
            logger.warning(f"Unparseable request body: {e}")
            response = JSONRPCResponse(
                id=None,
                error=JSONRPCError(code=ErrorCode.PARSE_ERROR, message="Parse error"),
            )
        else:
            response = await dispatcher.handle(payload)

        try:
            return JSONResponse(
                status_code=http_status_for(response),
                content=jsonable_encoder(response.to_wire()),
            )
        except (TypeError, ValueError) as e:
            logger.error(f"Unserializable response for id={response.id!r}: {e}", exc_info=True)
            fallback = JSONRPCResponse(
                id=jsonable_encoder(response.id),
                error=JSONRPCError(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Internal error",
                    data="Tool result is not JSON serializable",
                ),
            )
            return JSONResponse(status_code=500, content=fallback.to_wire())

    @app.get(HEALTH_PATH)
    async def health_check():
        """Health check endpoint."""
        logger.debug("Health check requested")
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "logLevel": config.log_level,
            "environment": config.environment,
        }

    @app.get("/")
    async def server_info():
        """Server info endpoint."""
        logger.debug("Server info requested")
        return {
            "name": SERVER_NAME,
            "version": __version__,
            "description": SERVER_DESCRIPTION,
            "endpoints": {"health": HEALTH_PATH, "mcp": MCP_PATH},
            "tools": registry.names(),
            "configuration": {
                "logLevel": config.log_level,
                "environment": config.environment,
            },
        }

    return app


def main() -> None:
    """Run the server with uvicorn; uvicorn handles SIGINT/SIGTERM shutdown."""
    config = ServerConfig.from_env()
    configure_logging(config)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=logging.getLevelName(config.logging_level).lower(),
    )


if __name__ == "__main__":
    main()
