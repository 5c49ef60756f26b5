"""Typed messages and content blocks exchanged with the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class TextBlock:
    """Plain text content."""

    text: str
    type: str = field(default="text", init=False)


@dataclass
class ThinkingBlock:
    """Model reasoning content with its signature."""

    thinking: str
    signature: str = ""
    type: str = field(default="thinking", init=False)


@dataclass
class ToolUseBlock:
    """A request by the model to run a tool."""

    id: str
    name: str
    input: dict[str, Any] = field(default_factory=dict)
    type: str = field(default="tool_use", init=False)


@dataclass
class ToolResultBlock:
    """The result of a tool run; content is text or a list of parts."""

    tool_use_id: str
    content: str | list[Any] | None = None
    is_error: bool | None = None
    type: str = field(default="tool_result", init=False)


ContentBlock = Union[TextBlock, ThinkingBlock, ToolUseBlock, ToolResultBlock]


@dataclass
class UserMessage:
    """A user turn; content is a string or a list of content blocks."""

    content: str | list[ContentBlock]
    parent_tool_use_id: str | None = None
    type: str = field(default="user", init=False)


@dataclass
class AssistantMessage:
    """A model turn made of content blocks."""

    content: list[ContentBlock] = field(default_factory=list)
    model: str = ""
    parent_tool_use_id: str | None = None
    type: str = field(default="assistant", init=False)


@dataclass
class SystemMessage:
    """A system notification with a subtype and free-form data."""

    subtype: str
    data: dict[str, Any] = field(default_factory=dict)
    type: str = field(default="system", init=False)


@dataclass
class ResultMessage:
    """The final message of a response, with timing, cost and usage."""

    subtype: str
    duration_ms: int = 0
    duration_api_ms: int = 0
    is_error: bool = False
    num_turns: int = 0
    session_id: str = ""
    total_cost_usd: float | None = None
    usage: dict[str, Any] | None = None
    result: str | None = None
    type: str = field(default="result", init=False)


@dataclass
class StreamEvent:
    """A partial streaming event from the API."""

    uuid: str
    session_id: str
    event: dict[str, Any] = field(default_factory=dict)
    parent_tool_use_id: str | None = None
    type: str = field(default="stream_event", init=False)


Message = Union[UserMessage, AssistantMessage, SystemMessage, ResultMessage, StreamEvent]


def as_user(msg: Any) -> UserMessage | None:
    """Return ``msg`` if it is a user message, else None."""
    return msg if isinstance(msg, UserMessage) else None


def as_assistant(msg: Any) -> AssistantMessage | None:
    """Return ``msg`` if it is an assistant message, else None."""
    return msg if isinstance(msg, AssistantMessage) else None


def as_system(msg: Any) -> SystemMessage | None:
    """Return ``msg`` if it is a system message, else None."""
    return msg if isinstance(msg, SystemMessage) else None


def as_result(msg: Any) -> ResultMessage | None:
    """Return ``msg`` if it is a result message, else None."""
    return msg if isinstance(msg, ResultMessage) else None


def as_stream_event(msg: Any) -> StreamEvent | None:
    """Return ``msg`` if it is a stream event, else None."""
    return msg if isinstance(msg, StreamEvent) else None