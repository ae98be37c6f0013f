"""JSON-RPC 2.0 request/response models."""
from pydantic import BaseModel
from typing import Any, Dict, Optional, Literal

JSONRPC_VERSION = "2.0"


class JSONRPCRequest(BaseModel):
    """JSON-RPC 2.0 request model."""

    jsonrpc: Literal["2.0"] = "2.0"
    method: Optional[str] = None
    params: Optional[Dict[str, Any]] = None
    id: Any = None


class JSONRPCError(BaseModel):
    """JSON-RPC 2.0 error model."""

    code: int
    message: str
    data: Optional[Any] = None


class JSONRPCResponse(BaseModel):
    """JSON-RPC 2.0 response model.

    Exactly one of ``result``/``error`` is meaningful: a response without an
    error is a success, even when ``result`` is ``None``.
    """

    jsonrpc: Literal["2.0"] = "2.0"
    id: Any = None
    result: Optional[Any] = None
    error: Optional[JSONRPCError] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the JSON-RPC wire shape.

        ``id`` is always present (possibly ``null``) and ``result`` is kept on
        success even when it is ``null``.
        """
        if self.error is not None:
            error = {"code": self.error.code, "message": self.error.message}
            if self.error.data is not None:
                error["data"] = self.error.data
            return {"jsonrpc": self.jsonrpc, "error": error, "id": self.id}
        return {"jsonrpc": self.jsonrpc, "result": self.result, "id": self.id}


class ErrorCode:
    """JSON-RPC 2.0 standard error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
