"""Example of calling the Sequential Thinking MCP server."""
import logging
import os
import uuid

from sequential_thinking.client import MCPClient


def main():
    """Run a simple example."""
    logging.basicConfig(level=logging.INFO)
    base_url = os.getenv("MCP_SERVER_URL", "http://localhost:3000")

    print("=== MCP Client Example ===\n")

    print("1. Connecting to MCP server...")
    with MCPClient(base_url=base_url) as mcp:
        if mcp.health_check():
            print("   ✓ MCP server is healthy\n")
        else:
            print("   ✗ MCP server is not responding")
            return

        print("2. Loading available tools...")
        tools = mcp.list_tools()
        print(f"   ✓ Found {len(tools)} tools:")
        for tool in tools:
            print(f"     - {tool.name}: {tool.description}")

        # Extra params are ignored by the tool schema
        print("\n3. Example: Branching a thought...")
        result = mcp.call_tool("dynamic_thought_branching", {
            "thought": "Analyzing market trends",
            "branch_id": str(uuid.uuid4()),
            "confidence_score": 0.8
        })

        if result["success"]:
            print(f"   ✓ {result['result']}")
        else:
            print(f"   ✗ Error: {result.get('error')}")

        print("\n4. Example: Generating a hypothesis...")
        result = mcp.call_tool("hypothesis_generation", {
            "context": "Quarterly sales dropped in the northern region"
        })

        if result["success"]:
            print(f"   ✓ {result['result']}")
        else:
            print(f"   ✗ Error: {result.get('error')}")

    print("\n=== Example Complete ===")


if __name__ == "__main__":
    main()
