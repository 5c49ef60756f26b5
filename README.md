# agentsdk

A Python library for working with an agent command-line program's
line-delimited JSON streaming protocol. It has no third-party runtime
dependencies.

It provides:

- **Typed messages** (`agentsdk.messages`): `UserMessage`,
  `AssistantMessage`, `SystemMessage`, `ResultMessage` and `StreamEvent`.
  It also provides the content blocks `TextBlock`, `ThinkingBlock`,
  `ToolUseBlock` and `ToolResultBlock`.
- **A parser** (`agentsdk.parser`) that turns raw JSON into those types.
- **A multi-turn client** (`agentsdk.client.Client`) that runs over a
  `Transport` you supply.
- **In-process MCP tool servers** (`agentsdk.sdk_server`) that answer
  JSON-RPC 2.0 requests.
- **JSON-RPC 2.0 helpers** (`agentsdk.protocol`).
- **Permission results and policies** (`agentsdk.permissions`).
- **A stderr logger** (`agentsdk.logger`).

## What this package does not do

The package does not find, start or manage the agent program itself. There
is no built-in subprocess transport. You connect a `Client` to a `Transport`
object that you write.

The client sends prompts and interrupt requests, and it reads messages.
It does not act on control requests that arrive from the other side. Any
incoming message whose type starts with `control_` is skipped. This means a
`can_use_tool` callback in `AgentOptions` is only checked for consistency and
is never invoked by the client. Hooks and MCP server routing are not wired
into the client either.

## Parsing messages

```python
from agentsdk.parser import parse_message
from agentsdk.messages import as_assistant, TextBlock

msg = parse_message(raw_line)  # str, bytes, or an already-decoded dict
assistant = as_assistant(msg)
if assistant is not None:
    for block in assistant.content:
        if isinstance(block, TextBlock):
            print(block.text)
```

`parse_message` chooses the message class from the `type` field: `user`,
`assistant`, `system`, `result` or `stream_event`. It raises these errors
(both come from `agentsdk.errors`):

- `CLIJSONDecodeError` for text that is not JSON.
- `MessageParseError` for empty input, a missing or non-string `type`, an
  unknown type, or fields of the wrong shape.

Unknown extra fields are ignored.

`parse_content_block` parses a single block. `parse_content_blocks` parses a
sequence of blocks. When a block fails, its error message names the failing
index, for example `at index 1`.

`extract_type` returns the string `type` field of a JSON object and raises
`ValueError` otherwise. `truncate_string(text, max_len)` cuts text and adds
`...` when it is longer than `max_len`.

The accessors `as_user`, `as_assistant`, `as_system`, `as_result` and
`as_stream_event` return the message when it has the matching type, and
`None` when it does not.

## Interactive sessions

A transport needs five methods:

- `connect()`
- `write(data)`, which sends one JSON line.
- `read_messages()`, which returns an iterable of raw messages (JSON text or
  dicts).
- `get_error()`
- `close()`

```python
from agentsdk.client import AgentOptions, Client
from agentsdk.messages import AssistantMessage, ResultMessage, TextBlock

client = Client(my_transport, AgentOptions(verbose=True))

with client:  # connects on entry, closes on exit
    client.query("What is 2 + 2?")
    for msg in client.receive_response():
        if isinstance(msg, AssistantMessage):
            for block in msg.content:
                if isinstance(block, TextBlock):
                    print("Claude:", block.text)
        elif isinstance(msg, ResultMessage):
            print("done")
```

`receive_response()` yields messages up to and including the next
`ResultMessage`. You can call `query` and `receive_response` again on the
same session.

`query_with_content(content)` sends structured content, such as a list of
text and image blocks. `interrupt()` writes an `interrupt` control request.
`is_connected()` reports the session state.

The client raises these errors:

- The constructor raises `ValueError` when both `can_use_tool` and
  `permission_prompt_tool_name` are set. If only `can_use_tool` is set, it
  fills in `permission_prompt_tool_name = "stdio"`.
- `connect()` raises `ControlProtocolError` if the client is already
  connected.
- `connect()` raises `CLIConnectionError` if the transport fails to connect.
  If the transport reports an error through `get_error()`, `connect()`
  raises that error.
- `query`, `query_with_content` and `interrupt` raise `CLIConnectionError`
  before the client is connected.
- An empty prompt or `None` content raises `ValueError`.
- `close()` does nothing when the client is not connected, so it may be
  called any number of times. If the transport fails to close, the client is
  still marked disconnected and the error is raised.

## In-process tool servers

```python
from agentsdk.sdk_server import McpTool, create_sdk_mcp_server

add = McpTool(
    name="add",
    description="Add two numbers",
    input_schema={"type": "object", "properties": {"a": {}, "b": {}}},
    handler=lambda args: {"content": [{"type": "text", "text": str(args["a"] + args["b"])}]},
)

config = create_sdk_mcp_server("calculator", "2.0.0", [add])
server = config.instance
reply = server.handle_message({
    "jsonrpc": "2.0", "id": 1, "method": "tools/call",
    "params": {"name": "add", "arguments": {"a": 2, "b": 3}},
})
print(reply["result"])
```

`SdkMcpServer.handle_message` answers `initialize`, `tools/list` and
`tools/call`. A message without a string `method` raises `ValueError`.
Other failures come back as JSON-RPC error responses:

- An unknown method or tool returns `-32601`.
- Missing params, tool name or arguments return `-32602`.
- A tool handler that raises returns `-32603`.

Tool results are round-tripped through JSON, and dataclasses are converted
to dicts.

`add_tool` raises `ValueError` for a duplicate name. `remove_tool` raises
`KeyError` for an unknown one. `tools()` returns the tools in the order they
were registered.

## JSON-RPC helpers

`agentsdk.protocol` contains these pieces:

**Messages**
- `Request`, which has `to_dict`, `to_json` and `is_notification`.
- `Response`, which has `to_dict`, `to_json` and `has_error`.
- `RpcError`.
- `ErrorCode`.

**Constructors**
- `new_request(method, params, request_id)`. Leave `request_id` out to get a
  fresh UUID, or pass `None` to get a notification.
- `success_response` and `error_response`.
- The shortcuts `parse_error`, `invalid_request`, `method_not_found`,
  `invalid_params` and `internal_error`.

**Parsing**
- `parse_request` and `parse_response`. Both raise `ValueError` on malformed
  input.

**ID generators**
- `UUIDGenerator`
- `IncrementingIDGenerator`, which counts 1, 2, 3 and so on and is safe
  across threads.
- `TimestampedIDGenerator`, which uses nanoseconds.

## Permissions

```python
from agentsdk.permissions import is_risky_command, policy_permission_handler

is_risky_command("rm -rf /tmp/build")              # True
policy_permission_handler("Write", {}).to_dict()
# {'behavior': 'deny', 'message': 'Write operations are disabled', 'interrupt': False}
```

`policy_permission_handler` applies a fixed policy:

- `Read` is allowed.
- `Write` is denied.
- `Bash` is allowed unless the command is risky.
- Any other tool is denied.

`interactive_permission_callback(tool_name, tool_input, context, ask)`
makes its decision in this order:

1. `Read`, `Glob` and `Grep` are allowed outright.
2. Writes under `/etc/` or `/usr/` are denied outright.
3. Shell commands that contain dangerous patterns are denied outright.
4. Everything else is put to the user through `ask`, which defaults to
   `input`. An answer of `y` or `yes` allows the tool.
5. An approved write outside `/tmp/` and `./` is redirected into
   `./safe_output/`, returned as `updated_input`.

Both functions return `PermissionResultAllow` or `PermissionResultDeny`.

## Logging

`Logger(verbose=False, stream=None)` writes lines prefixed `[SDK DEBUG]`,
`[SDK INFO]`, `[SDK WARNING]` or `[SDK ERROR]` to stderr, or to `stream` if
one is given.

- `debug` and `info` print only when the logger is verbose.
- `warning` and `error` always print.