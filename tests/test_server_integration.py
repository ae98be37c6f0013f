"""Integration tests for the MCP HTTP server."""
import pytest
from fastapi.testclient import TestClient

from sequential_thinking import __version__
from sequential_thinking.config import ServerConfig
from sequential_thinking.registry import Tool, ToolRegistry
from sequential_thinking.server import create_app


@pytest.fixture(scope="module")
def client():
    """Create a test client serving the built-in tools."""
    app = create_app(ServerConfig(log_level="debug", environment="test"))
    with TestClient(app) as c:
        yield c


def test_health_endpoint(client):
    """Test health check endpoint."""
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == __version__
    assert data["logLevel"] == "debug"
    assert data["environment"] == "test"
    assert "timestamp" in data


def test_server_info(client):
    """Test server info endpoint."""
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Sequential Thinking MCP Server"
    assert data["endpoints"] == {"health": "/health", "mcp": "/api/mcp"}
    assert data["tools"] == ["dynamic_thought_branching", "hypothesis_generation"]


def test_tools_list(client):
    """Test JSON-RPC tools/list method."""
    response = client.post("/api/mcp", json={"jsonrpc": "2.0", "method": "tools/list", "id": 1})

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == 1
    assert [tool["name"] for tool in data["result"]] == [
        "dynamic_thought_branching",
        "hypothesis_generation",
    ]


def test_tools_call(client):
    """Test the thought branching scenario over HTTP."""
    response = client.post("/api/mcp", json={
        "jsonrpc": "2.0",
        "method": "tools/call",
        "params": {
            "toolName": "dynamic_thought_branching",
            "thought": "Analyzing market trends",
        },
        "id": 1,
    })

    assert response.status_code == 200
    assert response.json() == {
        "jsonrpc": "2.0",
        "result": "Branching thought: Analyzing market trends",
        "id": 1,
    }


def test_invalid_params(client):
    """Test the missing context scenario over HTTP."""
    response = client.post("/api/mcp", json={
        "jsonrpc": "2.0",
        "method": "tools/call",
        "params": {"toolName": "hypothesis_generation"},
        "id": 2,
    })

    assert response.status_code == 400
    data = response.json()
    assert data["error"]["code"] == -32602
    assert data["id"] == 2
    assert "result" not in data


def test_invalid_request(client):
    """Test the wrong version scenario over HTTP."""
    response = client.post("/api/mcp", json={"jsonrpc": "1.0", "method": "tools/list", "id": 3})

    assert response.status_code == 400
    assert response.json() == {
        "jsonrpc": "2.0",
        "error": {"code": -32600, "message": "Invalid Request"},
        "id": None,
    }


def test_method_not_found(client):
    """Test JSON-RPC with non-existent method."""
    response = client.post("/api/mcp", json={"jsonrpc": "2.0", "method": "ping", "id": 7})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == -32601


def test_tool_not_found(client):
    """Test tools/call with a non-existent tool."""
    response = client.post("/api/mcp", json={
        "jsonrpc": "2.0",
        "method": "tools/call",
        "params": {"toolName": "nonexistent_tool"},
        "id": "x",
    })

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == {"code": -32601, "message": "Tool not found"}
    assert data["id"] == "x"


def test_parse_error(client):
    """Test that a non-JSON body is a parse error."""
    response = client.post(
        "/api/mcp",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    data = response.json()
    assert data["error"]["code"] == -32700
    assert data["id"] is None


def test_non_object_body(client):
    """Test that a JSON array body is an invalid request."""
    response = client.post("/api/mcp", json=[{"jsonrpc": "2.0", "method": "tools/list", "id": 1}])

    assert response.status_code == 400
    assert response.json()["error"]["code"] == -32600


def test_internal_error():
    """Test that handler faults are HTTP 500 with a JSON-RPC body."""
    registry = ToolRegistry()

    def crash(params):
        raise RuntimeError("disk on fire")

    registry.register(Tool(name="crash", handler=crash))
    app = create_app(ServerConfig(), registry=registry)

    with TestClient(app) as c:
        response = c.post("/api/mcp", json={
            "jsonrpc": "2.0",
            "method": "tools/call",
            "params": {"toolName": "crash"},
            "id": 11,
        })

    assert response.status_code == 500
    assert response.json() == {
        "jsonrpc": "2.0",
        "error": {"code": -32603, "message": "Internal error", "data": "disk on fire"},
        "id": 11,
    }


def test_apps_have_separate_registries():
    """Test that injected registries are not shared between apps."""
    registry = ToolRegistry()
    registry.register(Tool(name="only_here", handler=lambda params: "here"))

    custom = create_app(ServerConfig(), registry=registry)
    default = create_app(ServerConfig())

    with TestClient(custom) as c:
        assert c.get("/").json()["tools"] == ["only_here"]
    with TestClient(default) as c:
        assert "only_here" not in c.get("/").json()["tools"]


@pytest.mark.parametrize("value", [object(), float("nan")])
def test_unserializable_result(value):
    """Test that a result that cannot be encoded is a JSON-RPC internal error."""
    registry = ToolRegistry()
    registry.register(Tool(name="odd", handler=lambda params: value))
    app = create_app(ServerConfig(), registry=registry)

    with TestClient(app) as c:
        response = c.post("/api/mcp", json={
            "jsonrpc": "2.0",
            "method": "tools/call",
            "params": {"toolName": "odd"},
            "id": 21,
        })

    assert response.status_code == 500
    data = response.json()
    assert data["error"]["code"] == -32603
    assert data["error"]["data"] == "Tool result is not JSON serializable"
    assert data["id"] == 21


def test_malformed_method_echoes_id(client):
    """Test that a non-string method over HTTP is method not found with the id."""
    response = client.post("/api/mcp", json={"jsonrpc": "2.0", "method": 7, "id": 12})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == -32601
    assert response.json()["id"] == 12
