"""JSON-RPC 2.0 messages used by the Model Context Protocol."""

from __future__ import annotations

import itertools
import json
import threading
import time
import uuid
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

JSONRPC_VERSION = "2.0"


class ErrorCode(IntEnum):
    """Error codes defined by the JSON-RPC 2.0 specification."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


def _dumps(obj: Any) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


@dataclass
class RpcError:
    """The error member of a JSON-RPC response."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form, omitting absent data."""
        out: dict[str, Any] = {"code": int(self.code), "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


@dataclass
class Request:
    """A JSON-RPC request; one without an id is a notification."""

    method: str
    params: dict[str, Any] | None = None
    id: Any = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form, omitting an absent id and empty params."""
        out: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.id is not None:
            out["id"] = self.id
        out["method"] = self.method
        if self.params:
            out["params"] = self.params
        return out

    def to_json(self) -> str:
        """Serialize to compact JSON."""
        return _dumps(self.to_dict())

    def is_notification(self) -> bool:
        """True when the request carries no id."""
        return self.id is None


@dataclass
class Response:
    """A JSON-RPC response carrying either a result or an error."""

    id: Any = None
    result: Any = None
    error: RpcError | None = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form, omitting absent members."""
        out: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.id is not None:
            out["id"] = self.id
        if self.result is not None:
            out["result"] = self.result
        if self.error is not None:
            out["error"] = self.error.to_dict()
        return out

    def to_json(self) -> str:
        """Serialize to compact JSON."""
        return _dumps(self.to_dict())

    def has_error(self) -> bool:
        """True when the response carries an error."""
        return self.error is not None


_GENERATE = object()


def new_request(
    method: str,
    params: dict[str, Any] | None = None,
    request_id: Any = _GENERATE,
) -> Request:
    """Build a request; without ``request_id`` a fresh UUID is used.

    Passing ``request_id=None`` explicitly yields a notification.
    """
    if request_id is _GENERATE:
        request_id = str(uuid.uuid4())
    return Request(method=method, params=params, id=request_id)


def success_response(request_id: Any, result: Any) -> Response:
    """Build a successful response."""
    return Response(id=request_id, result=result)


def error_response(request_id: Any, code: int, message: str, data: Any = None) -> Response:
    """Build an error response."""
    return Response(id=request_id, error=RpcError(code=code, message=message, data=data))


def parse_error(request_id: Any, message: str) -> Response:
    """Build a parse error response."""
    return error_response(request_id, ErrorCode.PARSE_ERROR, message)


def invalid_request(request_id: Any, message: str) -> Response:
    """Build an invalid request error response."""
    return error_response(request_id, ErrorCode.INVALID_REQUEST, message)


def method_not_found(request_id: Any, method: str) -> Response:
    """Build a method-not-found error response."""
    return error_response(request_id, ErrorCode.METHOD_NOT_FOUND, f"Method not found: {method}")


def invalid_params(request_id: Any, message: str) -> Response:
    """Build an invalid params error response."""
    return error_response(request_id, ErrorCode.INVALID_PARAMS, message)


def internal_error(request_id: Any, message: str, data: Any = None) -> Response:
    """Build an internal error response."""
    return error_response(request_id, ErrorCode.INTERNAL_ERROR, message, data)


def _load_object(data: str | bytes, what: str) -> dict[str, Any]:
    try:
        obj = json.loads(data)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"unmarshal {what}: {exc}") from exc
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"unmarshal {what}: expected a JSON object")
    return obj


def _field(obj: dict[str, Any], key: str, kind: type, what: str, default: Any) -> Any:
    value = obj.get(key)
    if value is None:
        return default
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"unmarshal {what}: field {key!r} has the wrong type")
    return value


def parse_request(data: str | bytes) -> Request:
    """Decode a JSON-RPC request; raises ValueError on malformed input."""
    obj = _load_object(data, "request")
    return Request(
        method=_field(obj, "method", str, "request", ""),
        params=_field(obj, "params", dict, "request", None),
        id=obj.get("id"),
        jsonrpc=_field(obj, "jsonrpc", str, "request", ""),
    )


def parse_response(data: str | bytes) -> Response:
    """Decode a JSON-RPC response; raises ValueError on malformed input."""
    obj = _load_object(data, "response")
    raw_error = _field(obj, "error", dict, "response", None)
    error = None
    if raw_error is not None:
        error = RpcError(
            code=_field(raw_error, "code", int, "response", 0),
            message=_field(raw_error, "message", str, "response", ""),
            data=raw_error.get("data"),
        )
    return Response(
        id=obj.get("id"),
        result=obj.get("result"),
        error=error,
        jsonrpc=_field(obj, "jsonrpc", str, "response", ""),
    )


class UUIDGenerator:
    """Generates random UUID strings as request ids."""

    def generate(self) -> str:
        return str(uuid.uuid4())


class IncrementingIDGenerator:
    """Generates 1, 2, 3, ... as request ids; safe across threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count(1)

    def generate(self) -> int:
        with self._lock:
            return next(self._counter)


class TimestampedIDGenerator:
    """Generates the current time in nanoseconds as request ids."""

    def generate(self) -> int:
        return time.time_ns()