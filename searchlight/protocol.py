"""
JSON-RPC 2.0 envelopes.

InboundMessage is the validated form of a decoded request or notification.
Responses are plain dicts so they can be relayed without re-shaping.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from searchlight.constants import (
    JSONRPC_VERSION,
    MCP_PROTOCOL_VERSION,
    NOTIFICATION_PREFIX,
    SERVER_NAME,
    SERVER_VERSION,
)
from searchlight.exceptions import InvalidMessageError


@dataclass
class InboundMessage:
    """A decoded JSON-RPC request or notification."""

    method: str
    id: Any = None
    params: Any = None
    jsonrpc: str = JSONRPC_VERSION
    has_id: bool = False
    raw: dict = field(default_factory=dict)

    @property
    def is_notification(self) -> bool:
        return self.method.startswith(NOTIFICATION_PREFIX)

    @classmethod
    def from_dict(cls, data: Any) -> "InboundMessage":
        """
        Validate a decoded JSON value as a JSON-RPC message.

        Raises:
            InvalidMessageError: data is not an object or has no string method
        """
        if not isinstance(data, dict):
            raise InvalidMessageError(
                f"Expected a JSON object, got {type(data).__name__}"
            )

        request_id = data.get("id")
        method = data.get("method")
        if method is None:
            raise InvalidMessageError("Missing 'method'", request_id=request_id)
        if not isinstance(method, str):
            raise InvalidMessageError(
                f"'method' must be a string, got {type(method).__name__}",
                request_id=request_id,
            )

        return cls(
            method=method,
            id=request_id,
            params=data.get("params"),
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
            has_id="id" in data,
            raw=data,
        )


def make_result(request_id: Any, result: Any) -> dict:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def make_error(request_id: Any, code: int, message: str, data: Any = None) -> dict:
    """Build a JSON-RPC error response. data is omitted when None."""
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def initialize_result() -> dict:
    """Static MCP initialize payload. Client capabilities are not negotiated."""
    return {
        "protocolVersion": MCP_PROTOCOL_VERSION,
        "capabilities": {
            "tools": {},
        },
        "serverInfo": {
            "name": SERVER_NAME,
            "version": SERVER_VERSION,
        },
    }


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def decode_json(text: str | bytes) -> Any:
    """
    Parse strict JSON.

    NaN, Infinity and -Infinity are rejected rather than decoded to floats.

    Raises:
        ValueError: text is not valid JSON
    """
    return json.loads(text, parse_constant=_reject_constant)


def encode_json(message: Any) -> str:
    """Serialize compactly. Non-ASCII is escaped so lone surrogates survive."""
    return json.dumps(message, separators=(",", ":"), allow_nan=False)


def encode_line(message: dict) -> bytes:
    """Serialize a response as one compact UTF-8 line."""
    return (encode_json(message) + "\n").encode("utf-8")
