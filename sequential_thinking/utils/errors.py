"""Custom exception classes for the MCP server."""
from typing import Any, Optional

from ..jsonrpc.models import ErrorCode, JSONRPCError


class MCPError(Exception):
    """Base exception for MCP-related errors."""

    pass


class ConfigError(MCPError):
    """Invalid server configuration."""

    pass


class SchemaError(MCPError):
    """A tool parameter schema could not be compiled."""

    pass


class DuplicateToolError(MCPError):
    """A tool with the same name is already registered."""

    def __init__(self, name: str):
        super().__init__(f"Tool already registered: {name}")
        self.name = name


class ProtocolError(MCPError):
    """An outcome that maps onto a JSON-RPC error response.

    Subclasses fix the error code and the standard message. The dispatcher
    builds these as values and converts them with ``to_error`` rather than
    raising them.
    """

    code: int = ErrorCode.INTERNAL_ERROR
    message: str = "Internal error"

    def __init__(self, detail: Optional[str] = None, data: Any = None):
        super().__init__(detail or self.message)
        self.detail = detail
        self.data = data

    def to_error(self) -> JSONRPCError:
        return JSONRPCError(code=self.code, message=self.message, data=self.data)


class MalformedEnvelope(ProtocolError):
    code = ErrorCode.INVALID_REQUEST
    message = "Invalid Request"


class UnknownMethod(ProtocolError):
    code = ErrorCode.METHOD_NOT_FOUND
    message = "Method not found"


class UnknownTool(ProtocolError):
    code = ErrorCode.METHOD_NOT_FOUND
    message = "Tool not found"


class ParamValidationFailed(ProtocolError):
    code = ErrorCode.INVALID_PARAMS
    message = "Invalid params"


class HandlerFault(ProtocolError):
    """A tool handler raised or timed out.

    ``data`` is the fault description string; tracebacks stay in the log.
    """

    code = ErrorCode.INTERNAL_ERROR
    message = "Internal error"
