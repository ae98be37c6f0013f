"""Sequential Thinking MCP server: JSON-RPC 2.0 tool dispatch."""

__version__ = "1.0.0"
