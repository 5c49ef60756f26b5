"""An interactive, multi-turn session with the agent CLI over a transport."""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, runtime_checkable

from agentsdk.errors import CLIConnectionError, ControlProtocolError
from agentsdk.logger import Logger
from agentsdk.messages import Message, ResultMessage
from agentsdk.parser import parse_message

NOT_CONNECTED = "not connected - call Connect() first"
STDIO_PROMPT_TOOL = "stdio"


@dataclass
class AgentOptions:
    """Configuration for a client session."""

    model: str | None = None
    system_prompt: str | None = None
    allowed_tools: list[str] = field(default_factory=list)
    max_turns: int | None = None
    permission_mode: str | None = None
    cli_path: str | None = None
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    verbose: bool = False
    resume: str | None = None
    can_use_tool: Callable[..., Any] | None = None
    permission_prompt_tool_name: str | None = None


@runtime_checkable
class Transport(Protocol):
    """The byte pipe between a client and the CLI.

    ``read_messages`` yields raw messages (JSON text or already-decoded
    objects) in arrival order; ``get_error`` reports an error the transport
    detected on its own, such as an unknown session.
    """

    def connect(self) -> None:
        """Open the connection."""
        ...

    def write(self, data: str) -> None:
        """Send one line of JSON."""
        ...

    def read_messages(self) -> Iterable[Any]:
        """Return the stream of incoming raw messages."""
        ...

    def get_error(self) -> Exception | None:
        """Return an error detected by the transport, if any."""
        ...

    def close(self) -> None:
        """Close the connection."""
        ...


def _dumps(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _decode(raw: Any) -> Any:
    if isinstance(raw, (str, bytes, bytearray)) and raw:
        try:
            obj = json.loads(raw)
        except ValueError:
            return raw
        return obj if isinstance(obj, dict) else raw
    return raw


def _is_control(raw: Any) -> bool:
    if not isinstance(raw, Mapping):
        return False
    kind = raw.get("type")
    return isinstance(kind, str) and kind.startswith("control_")


class Client:
    """A persistent session supporting several query/response cycles.

    Create it, call :meth:`connect`, send prompts with :meth:`query` and
    read each answer with :meth:`receive_response`, then :meth:`close`.
    Used as a context manager it connects on entry and closes on exit.
    """

    def __init__(self, transport: Transport, options: AgentOptions | None = None) -> None:
        options = options if options is not None else AgentOptions()
        if options.can_use_tool is not None and options.permission_prompt_tool_name is not None:
            raise ValueError(
                "can_use_tool callback cannot be used with permission_prompt_tool_name"
            )
        if options.can_use_tool is not None:
            options.permission_prompt_tool_name = STDIO_PROMPT_TOOL
        self.options = options
        self._transport = transport
        self._logger = Logger(verbose=options.verbose)
        self._lock = threading.Lock()
        self._connected = False
        self._stream: Iterator[Any] | None = None

    def connect(self) -> None:
        """Open the session; raises if already connected or the transport fails."""
        with self._lock:
            if self._connected:
                raise ControlProtocolError("client already connected")
            self._logger.info("Connecting to Claude CLI...")
            try:
                self._transport.connect()
            except Exception as exc:
                self._logger.error("Failed to connect transport: %s", exc)
                raise CLIConnectionError("failed to connect to Claude CLI") from exc
            self._logger.debug("Transport connected successfully")

            error = self._transport.get_error()
            if error is not None:
                self._logger.error("Transport error detected during connection: %s", error)
                self._close_transport_quietly()
                raise error

            self._stream = iter(self._transport.read_messages())
            self._connected = True
            self._logger.info("Successfully connected to Claude")

    def _close_transport_quietly(self) -> None:
        try:
            self._transport.close()
        except Exception as exc:
            self._logger.warning("Error closing transport: %s", exc)

    def _require_connected(self) -> None:
        with self._lock:
            if not self._connected:
                raise CLIConnectionError(NOT_CONNECTED)

    def _send_user(self, content: Any) -> None:
        message = {
            "type": "user",
            "message": {"role": "user", "content": content},
            "parent_tool_use_id": None,
            "session_id": "default",
        }
        try:
            data = _dumps(message)
        except (TypeError, ValueError) as exc:
            raise ControlProtocolError("failed to marshal query") from exc
        self._transport.write(data)

    def query(self, prompt: str) -> None:
        """Send a text prompt in the current session."""
        self._require_connected()
        if prompt == "":
            raise ValueError("prompt cannot be empty")
        self._send_user(prompt)

    def query_with_content(self, content: Any) -> None:
        """Send structured content, such as text and image blocks."""
        self._require_connected()
        if content is None:
            raise ValueError("content cannot be None")
        self._send_user(content)

    def receive_response(self) -> Iterator[Message]:
        """Yield messages of the current response, ending after the result message."""
        with self._lock:
            if not self._connected or self._stream is None:
                return
            stream = self._stream
        for raw in stream:
            decoded = _decode(raw)
            if _is_control(decoded):
                continue
            message = parse_message(decoded)
            yield message
            if isinstance(message, ResultMessage):
                return

    def interrupt(self) -> None:
        """Ask the CLI to stop the task that is running."""
        self._require_connected()
        request = {
            "type": "control_request",
            "request_id": f"interrupt-{time.time_ns()}",
            "request": {"subtype": "interrupt"},
        }
        try:
            data = _dumps(request)
        except (TypeError, ValueError) as exc:
            raise ControlProtocolError("failed to marshal interrupt message") from exc
        self._transport.write(data)

    def close(self) -> None:
        """End the session; a no-op when not connected.

        The client is marked disconnected even if closing fails; the first
        failure is then raised.
        """
        with self._lock:
            if not self._connected:
                return
            self._logger.info("Closing Claude connection...")
            self._stream = None
            self._connected = False
            try:
                self._transport.close()
            except Exception as exc:
                self._logger.warning("Error closing transport: %s", exc)
                raise
            finally:
                self._logger.debug("Connection closed")

    def is_connected(self) -> bool:
        """True while the session is open."""
        with self._lock:
            return self._connected

    def __enter__(self) -> Client:
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()