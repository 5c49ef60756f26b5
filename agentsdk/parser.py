"""Turn raw JSON from the CLI into typed messages and content blocks."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Union

from agentsdk.errors import CLIJSONDecodeError, MessageParseError
from agentsdk.messages import (
    AssistantMessage,
    ContentBlock,
    Message,
    ResultMessage,
    StreamEvent,
    SystemMessage,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)

RawJSON = Union[str, bytes, bytearray, Mapping[str, Any]]

_SNIPPET_LEN = 200


def truncate_string(text: str, max_len: int) -> str:
    """Cut ``text`` to ``max_len`` characters, adding ``...`` when cut."""
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def _load_object(data: RawJSON, what: str) -> dict[str, Any]:
    if isinstance(data, Mapping):
        return dict(data)
    if not data:
        raise MessageParseError(f"cannot parse empty {what} data")
    text = data.decode("utf-8", errors="replace") if isinstance(data, (bytes, bytearray)) else data
    try:
        obj = json.loads(text)
    except ValueError as exc:
        raise CLIJSONDecodeError(
            f"failed to decode {what} JSON: {exc}", truncate_string(text, _SNIPPET_LEN)
        ) from exc
    if not isinstance(obj, dict):
        raise MessageParseError(f"{what} must be a JSON object")
    return obj


def extract_type(data: str | bytes | bytearray) -> str:
    """Return the string ``type`` field of a JSON object.

    Raises ValueError when the JSON is invalid or the field is missing or not a string.
    """
    try:
        obj = json.loads(data)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"failed to unmarshal JSON for type extraction: {exc}") from exc
    if not isinstance(obj, dict) or "type" not in obj:
        raise ValueError("missing type field")
    type_value = obj["type"]
    if not isinstance(type_value, str):
        raise ValueError("type field is not a string")
    return type_value


def _type_of(obj: dict[str, Any], what: str) -> str:
    if "type" not in obj:
        raise MessageParseError(f"missing type field in {what}")
    type_value = obj["type"]
    if not isinstance(type_value, str):
        raise MessageParseError(f"type field in {what} is not a string")
    return type_value


def _field(
    obj: Mapping[str, Any],
    key: str,
    kinds: tuple[type, ...],
    type_name: str,
    *,
    default: Any = None,
    required: bool = False,
) -> Any:
    value = obj.get(key)
    if value is None:
        if required:
            raise MessageParseError(f"missing required field {key!r} in {type_name}", type_name)
        return default
    if not isinstance(value, kinds) or (isinstance(value, bool) and bool not in kinds):
        raise MessageParseError(f"field {key!r} in {type_name} has the wrong type", type_name)
    return value


def _text_block(obj: dict[str, Any]) -> TextBlock:
    return TextBlock(text=_field(obj, "text", (str,), "text", required=True))


def _thinking_block(obj: dict[str, Any]) -> ThinkingBlock:
    return ThinkingBlock(
        thinking=_field(obj, "thinking", (str,), "thinking", required=True),
        signature=_field(obj, "signature", (str,), "thinking", default=""),
    )


def _tool_use_block(obj: dict[str, Any]) -> ToolUseBlock:
    return ToolUseBlock(
        id=_field(obj, "id", (str,), "tool_use", required=True),
        name=_field(obj, "name", (str,), "tool_use", required=True),
        input=dict(_field(obj, "input", (dict,), "tool_use", default={})),
    )


def _tool_result_block(obj: dict[str, Any]) -> ToolResultBlock:
    return ToolResultBlock(
        tool_use_id=_field(obj, "tool_use_id", (str,), "tool_result", required=True),
        content=_field(obj, "content", (str, list), "tool_result"),
        is_error=_field(obj, "is_error", (bool,), "tool_result"),
    )


_BLOCK_PARSERS: dict[str, Callable[[dict[str, Any]], ContentBlock]] = {
    "text": _text_block,
    "thinking": _thinking_block,
    "tool_use": _tool_use_block,
    "tool_result": _tool_result_block,
}


def parse_content_block(data: RawJSON) -> ContentBlock:
    """Parse one content block (text, thinking, tool_use or tool_result)."""
    obj = _load_object(data, "content block")
    block_type = _type_of(obj, "content block")
    parser = _BLOCK_PARSERS.get(block_type)
    if parser is None:
        raise MessageParseError(f"unknown content block type: {block_type}", block_type)
    return parser(obj)


def parse_content_blocks(blocks: Iterable[RawJSON]) -> list[ContentBlock]:
    """Parse a sequence of content blocks; errors name the failing index."""
    result: list[ContentBlock] = []
    for index, raw in enumerate(blocks):
        try:
            result.append(parse_content_block(raw))
        except (MessageParseError, CLIJSONDecodeError) as exc:
            raise MessageParseError(
                f"failed to parse content block at index {index}: {exc}",
                getattr(exc, "message_type", None),
            ) from exc
    return result


def _body(obj: dict[str, Any]) -> Mapping[str, Any]:
    # The CLI may nest the payload under "message"; flat objects are accepted too.
    nested = obj.get("message")
    if "content" not in obj and isinstance(nested, dict):
        return nested
    return obj


def _user_message(obj: dict[str, Any]) -> UserMessage:
    body = _body(obj)
    content = _field(body, "content", (str, list), "user", required=True)
    if isinstance(content, list):
        content = parse_content_blocks(content)
    return UserMessage(
        content=content,
        parent_tool_use_id=_field(obj, "parent_tool_use_id", (str,), "user"),
    )


def _assistant_message(obj: dict[str, Any]) -> AssistantMessage:
    body = _body(obj)
    return AssistantMessage(
        content=parse_content_blocks(_field(body, "content", (list,), "assistant", default=[])),
        model=_field(body, "model", (str,), "assistant", default=""),
        parent_tool_use_id=_field(obj, "parent_tool_use_id", (str,), "assistant"),
    )


def _system_message(obj: dict[str, Any]) -> SystemMessage:
    data = obj.get("data")
    if not isinstance(data, dict):
        data = {k: v for k, v in obj.items() if k not in ("type", "subtype")}
    return SystemMessage(
        subtype=_field(obj, "subtype", (str,), "system", required=True),
        data=dict(data),
    )


def _result_message(obj: dict[str, Any]) -> ResultMessage:
    return ResultMessage(
        subtype=_field(obj, "subtype", (str,), "result", required=True),
        duration_ms=_field(obj, "duration_ms", (int,), "result", default=0),
        duration_api_ms=_field(obj, "duration_api_ms", (int,), "result", default=0),
        is_error=_field(obj, "is_error", (bool,), "result", default=False),
        num_turns=_field(obj, "num_turns", (int,), "result", default=0),
        session_id=_field(obj, "session_id", (str,), "result", default=""),
        total_cost_usd=_field(obj, "total_cost_usd", (int, float), "result"),
        usage=_field(obj, "usage", (dict,), "result"),
        result=_field(obj, "result", (str,), "result"),
    )


def _stream_event(obj: dict[str, Any]) -> StreamEvent:
    return StreamEvent(
        uuid=_field(obj, "uuid", (str,), "stream_event", required=True),
        session_id=_field(obj, "session_id", (str,), "stream_event", required=True),
        event=dict(_field(obj, "event", (dict,), "stream_event", required=True)),
        parent_tool_use_id=_field(obj, "parent_tool_use_id", (str,), "stream_event"),
    )


_MESSAGE_PARSERS: dict[str, Callable[[dict[str, Any]], Message]] = {
    "user": _user_message,
    "assistant": _assistant_message,
    "system": _system_message,
    "result": _result_message,
    "stream_event": _stream_event,
}


def parse_message(data: RawJSON) -> Message:
    """Parse a message from the CLI, dispatching on its ``type`` field.

    Raises MessageParseError for empty, untyped, unknown or ill-shaped messages
    and CLIJSONDecodeError for text that is not JSON.
    """
    obj = _load_object(data, "message")
    message_type = _type_of(obj, "message")
    parser = _MESSAGE_PARSERS.get(message_type)
    if parser is None:
        raise MessageParseError(f"unknown message type: {message_type}", message_type)
    return parser(obj)