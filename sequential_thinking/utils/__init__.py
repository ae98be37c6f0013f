"""Shared utilities for the MCP server."""
