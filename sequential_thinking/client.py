"""MCP client for the Sequential Thinking server via JSON-RPC 2.0."""
import httpx
import logging
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class MCPTool:
    """Represents an MCP tool."""
    name: str
    description: str
    parameters: Optional[Dict[str, Any]]


class MCPClientError(Exception):
    """JSON-RPC error returned by the server."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(f"JSON-RPC Error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


class MCPClient:
    """Client for interacting with the MCP server via JSON-RPC 2.0."""

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize MCP client.

        Args:
            base_url: Base URL of the MCP server (e.g., http://localhost:3000)
            timeout: Request timeout in seconds
            http_client: Existing httpx client to send requests with; the
                caller keeps ownership of it
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.request_id = 0
        self.tools: Dict[str, MCPTool] = {}
        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(timeout=timeout)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def close(self):
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self.client.close()

    def _get_next_id(self) -> int:
        """Get next request ID for JSON-RPC."""
        self.request_id += 1
        return self.request_id

    def _jsonrpc_request(self, method: str, params: Optional[Dict] = None) -> Any:
        """Make a JSON-RPC 2.0 request.

        Args:
            method: JSON-RPC method name (e.g., "tools/list")
            params: Method parameters

        Returns:
            The response ``result`` value

        Raises:
            MCPClientError: If the server returns a JSON-RPC error
            httpx.HTTPError: On transport failure or a non-JSON error response
            ValueError: If a successful response body is not JSON
        """
        request_payload = {
            "jsonrpc": "2.0",
            "id": self._get_next_id(),
            "method": method,
        }
        if params is not None:
            request_payload["params"] = params

        try:
            response = self.client.post(
                f"{self.base_url}/api/mcp",
                json=request_payload
            )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during JSON-RPC request: {e}")
            raise

        # Error responses carry a JSON-RPC body alongside a 4xx/5xx status
        try:
            result = response.json()
        except ValueError:
            response.raise_for_status()
            raise

        if "error" in result:
            error = result["error"]
            raise MCPClientError(error["code"], error["message"], error.get("data"))

        return result.get("result")

    def list_tools(self) -> List[MCPTool]:
        """List all available tools from the MCP server.

        Returns:
            List of MCPTool objects
        """
        data = self._jsonrpc_request("tools/list")

        tools = []
        for tool_data in data or []:
            tool = MCPTool(
                name=tool_data["name"],
                description=tool_data.get("description", ""),
                parameters=tool_data.get("parameters")
            )
            tools.append(tool)
            self.tools[tool.name] = tool

        logger.info(f"Loaded {len(tools)} tools from MCP server")
        return tools

    def call_tool(self, tool_name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Call a tool on the MCP server.

        Args:
            tool_name: Name of the tool to call
            arguments: Tool parameters, sent alongside ``toolName``

        Returns:
            Dictionary with 'success' (bool) and 'result' or 'error' (str)

        Example:
            >>> client = MCPClient("http://localhost:3000")
            >>> result = client.call_tool("dynamic_thought_branching", {"thought": "x"})
            >>> if result['success']:
            ...     print(result['result'])
        """
        try:
            result = self._jsonrpc_request(
                "tools/call",
                {"toolName": tool_name, **arguments}
            )
        except (MCPClientError, httpx.HTTPError) as e:
            logger.error(f"Failed to call tool {tool_name}: {e}")
            return {
                "success": False,
                "error": str(e)
            }

        logger.info(f"Tool {tool_name} executed successfully")
        return {
            "success": True,
            "result": result
        }

    def server_info(self) -> Dict[str, Any]:
        """Fetch the server info document from ``/``."""
        response = self.client.get(f"{self.base_url}/")
        response.raise_for_status()
        return response.json()

    def health_check(self) -> bool:
        """Check if the MCP server is healthy.

        Returns:
            True if server is healthy, False otherwise

        Note:
            This uses the /health endpoint which is not part of JSON-RPC.
        """
        try:
            response = self.client.get(f"{self.base_url}/health")
            response.raise_for_status()
            data = response.json()
            is_healthy = data.get("status") == "healthy"
            if is_healthy:
                logger.info(f"Server healthy, version: {data.get('version', 'unknown')}")
            return is_healthy
        except httpx.HTTPError as e:
            logger.error(f"Health check failed: {e}")
            return False
