"""Unit tests for JSON-RPC models and the error taxonomy."""
from sequential_thinking.jsonrpc.models import (
    ErrorCode,
    JSONRPCError,
    JSONRPCRequest,
    JSONRPCResponse,
)
from sequential_thinking.utils.errors import (
    HandlerFault,
    MalformedEnvelope,
    ParamValidationFailed,
    UnknownMethod,
    UnknownTool,
)


def test_error_codes():
    """Test that error codes are correctly defined."""
    assert ErrorCode.PARSE_ERROR == -32700
    assert ErrorCode.INVALID_REQUEST == -32600
    assert ErrorCode.METHOD_NOT_FOUND == -32601
    assert ErrorCode.INVALID_PARAMS == -32602
    assert ErrorCode.INTERNAL_ERROR == -32603


def test_request_defaults():
    """Test that params and id are optional."""
    request = JSONRPCRequest(method="tools/list")

    assert request.jsonrpc == "2.0"
    assert request.params is None
    assert request.id is None


def test_success_wire_shape():
    """Test that a success response carries result and id only."""
    response = JSONRPCResponse(id="abc", result={"tools": []})

    assert response.to_wire() == {"jsonrpc": "2.0", "result": {"tools": []}, "id": "abc"}
    assert not response.is_error


def test_error_wire_shape_keeps_null_id():
    """Test that error responses keep a null id and drop empty data."""
    response = JSONRPCResponse(
        id=None,
        error=JSONRPCError(code=ErrorCode.INVALID_REQUEST, message="Invalid Request"),
    )

    assert response.to_wire() == {
        "jsonrpc": "2.0",
        "error": {"code": -32600, "message": "Invalid Request"},
        "id": None,
    }
    assert response.is_error


def test_protocol_errors_map_to_codes():
    """Test each protocol error's code and message."""
    cases = [
        (MalformedEnvelope(), -32600, "Invalid Request"),
        (UnknownMethod("x"), -32601, "Method not found"),
        (UnknownTool("x"), -32601, "Tool not found"),
        (ParamValidationFailed(data=[]), -32602, "Invalid params"),
        (HandlerFault(data="boom"), -32603, "Internal error"),
    ]

    for fault, code, message in cases:
        error = fault.to_error()
        assert error.code == code
        assert error.message == message


def test_handler_fault_carries_description():
    """Test that handler faults put the description in data."""
    error = HandlerFault(data="division by zero").to_error()

    assert error.data == "division by zero"
