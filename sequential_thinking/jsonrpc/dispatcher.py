"""JSON-RPC 2.0 dispatcher for MCP tool requests."""
import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..registry import Tool, ToolRegistry
from ..utils.errors import (
    HandlerFault,
    MalformedEnvelope,
    ParamValidationFailed,
    ProtocolError,
    UnknownMethod,
    UnknownTool,
)
from .models import JSONRPC_VERSION, JSONRPCRequest, JSONRPCResponse

logger = logging.getLogger(__name__)

TOOLS_LIST = "tools/list"
TOOLS_CALL = "tools/call"


@dataclass(frozen=True)
class ToolResult:
    """Successful outcome of a tool invocation."""

    value: Any


class Dispatcher:
    """Handles one JSON-RPC request at a time and always returns a response.

    The registry is injected and only read, so a single dispatcher can serve
    concurrent requests.
    """

    def __init__(self, registry: ToolRegistry, tool_timeout: Optional[float] = None):
        """
        Args:
            registry: Tools available to ``tools/call`` and ``tools/list``
            tool_timeout: Seconds to wait for a tool result; None runs
                handlers inline and waits indefinitely
        """
        self.registry = registry
        self.tool_timeout = tool_timeout

    async def handle(self, payload: Any) -> JSONRPCResponse:
        """Handle a decoded JSON-RPC request body.

        Args:
            payload: The decoded JSON value of the request body

        Returns:
            JSONRPCResponse with result or error
        """
        request = self._parse_envelope(payload)
        if isinstance(request, ProtocolError):
            return self._error_response(None, request)

        logger.debug(f"MCP request received: method={request.method} id={request.id!r}")

        try:
            if request.method == TOOLS_LIST:
                logger.info("Tools list requested")
                return JSONRPCResponse(id=request.id, result=self.registry.list_all())

            if request.method == TOOLS_CALL:
                return await self._call_tool(request)

            logger.warning(f"Method not found: {request.method}")
            return self._error_response(request.id, UnknownMethod(request.method))

        except Exception as e:
            logger.error(f"Internal error handling {request.method}: {e}", exc_info=True)
            return self._error_response(request.id, HandlerFault(data=_describe(e)))

    def _parse_envelope(self, payload: Any) -> Union[JSONRPCRequest, ProtocolError]:
        if not isinstance(payload, dict):
            logger.warning(f"Invalid JSON-RPC request: body is {type(payload).__name__}")
            return MalformedEnvelope("Request body is not an object")

        if payload.get("jsonrpc") != JSONRPC_VERSION:
            logger.warning(
                f"Invalid JSON-RPC request: jsonrpc={payload.get('jsonrpc')!r} "
                f"method={payload.get('method')!r} id={payload.get('id')!r}"
            )
            return MalformedEnvelope("Unsupported jsonrpc version")

        # Past the version check the id is always echoed; a bad method or
        # params falls through to method/tool resolution instead.
        method = payload.get("method")
        params = payload.get("params")
        return JSONRPCRequest(
            method=method if isinstance(method, str) else None,
            params=params if isinstance(params, dict) else None,
            id=payload.get("id"),
        )

    async def _call_tool(self, request: JSONRPCRequest) -> JSONRPCResponse:
        params = request.params

        tool = self._resolve_tool(params)
        if isinstance(tool, ProtocolError):
            return self._error_response(request.id, tool)

        failure = self._validate_params(tool, params)
        if failure is not None:
            return self._error_response(request.id, failure)

        outcome = await self._invoke(tool, params)
        if isinstance(outcome, ProtocolError):
            return self._error_response(request.id, outcome)

        return JSONRPCResponse(id=request.id, result=outcome.value)

    def _resolve_tool(self, params: Optional[Dict[str, Any]]) -> Union[Tool, ProtocolError]:
        tool_name = params.get("toolName") if params is not None else None
        tool = self.registry.find(tool_name)
        if tool is None:
            logger.warning(f"Tool not found: {tool_name}")
            return UnknownTool(str(tool_name))
        return tool

    def _validate_params(
        self, tool: Tool, params: Optional[Dict[str, Any]]
    ) -> Optional[ProtocolError]:
        validator = self.registry.validator(tool.name)
        if validator is None or params is None:
            return None

        result = validator.validate(params)
        if result.valid:
            return None

        logger.warning(
            f"Invalid parameters for tool {tool.name}: "
            + "; ".join(error.message for error in result.errors)
        )
        return ParamValidationFailed(data=result.errors_as_data())

    async def _invoke(
        self, tool: Tool, params: Optional[Dict[str, Any]]
    ) -> Union[ToolResult, ProtocolError]:
        logger.info(f"Tool called: {tool.name}")
        arguments = params if params is not None else {}
        try:
            if self.tool_timeout is None:
                value = tool.handler(arguments)
                if inspect.isawaitable(value):
                    value = await value
            else:
                value = await self._run_with_timeout(tool, arguments)
        except HandlerFault as fault:
            return fault
        except Exception as e:
            logger.error(f"Tool {tool.name} failed: {e}", exc_info=True)
            return HandlerFault(data=_describe(e))
        return ToolResult(value)

    async def _run_with_timeout(self, tool: Tool, arguments: Dict[str, Any]) -> Any:
        """Run the handler bounded by ``tool_timeout``.

        Synchronous handlers run in a worker thread so they cannot block the
        event loop. A timed-out thread is abandoned, not interrupted.
        """
        if inspect.iscoroutinefunction(tool.handler):
            call = tool.handler(arguments)
        else:
            call = self._call_in_thread(tool.handler, arguments)
        try:
            return await asyncio.wait_for(call, timeout=self.tool_timeout)
        except asyncio.TimeoutError:
            logger.error(f"Tool {tool.name} timed out after {self.tool_timeout} seconds")
            raise HandlerFault(
                data=f"Tool execution timed out after {self.tool_timeout} seconds"
            )

    @staticmethod
    async def _call_in_thread(handler: Any, arguments: Dict[str, Any]) -> Any:
        value = await asyncio.to_thread(handler, arguments)
        if inspect.isawaitable(value):
            value = await value
        return value

    @staticmethod
    def _error_response(request_id: Any, fault: ProtocolError) -> JSONRPCResponse:
        return JSONRPCResponse(id=request_id, error=fault.to_error())


def _describe(exc: BaseException) -> str:
    message = str(exc)
    return message if message else type(exc).__name__
