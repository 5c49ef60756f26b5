import pytest

from agentsdk.errors import (
    CLIConnectionError,
    CLIJSONDecodeError,
    ControlProtocolError,
    MessageParseError,
    SDKError,
)


@pytest.mark.parametrize(
    "cls",
    [MessageParseError, CLIJSONDecodeError, CLIConnectionError, ControlProtocolError],
)
def test_all_errors_are_sdk_errors(cls):
    err = cls("something went wrong")
    assert isinstance(err, SDKError)
    assert isinstance(err, Exception)
    assert str(err) == "something went wrong"
    assert err.message == "something went wrong"


def test_control_protocol_error_message():
    err = ControlProtocolError("client already connected")
    assert str(err) == "client already connected"
    assert err.message == "client already connected"


def test_connection_error_is_not_protocol_error():
    err = CLIConnectionError("not connected - call Connect() first")
    assert err.message == "not connected - call Connect() first"
    assert str(err) == "not connected - call Connect() first"
    assert not isinstance(err, ControlProtocolError)
    assert not isinstance(err, MessageParseError)


def test_message_parse_error_keeps_type():
    err = MessageParseError("failed to parse message", "assistant")
    assert err.message_type == "assistant"
    assert MessageParseError("cannot parse empty message data").message_type is None


def test_json_decode_error_keeps_line():
    err = CLIJSONDecodeError("failed to unmarshal user message", '{"type":')
    assert err.line == '{"type":'
    assert CLIJSONDecodeError("x").line == ""


def test_cause_is_chained():
    cause = ValueError("bad json")
    err = MessageParseError("failed to parse message", "user")
    assert err.message_type == "user"
    assert err.message == "failed to parse message"
    with pytest.raises(MessageParseError) as info:
        raise err from cause
    assert info.value is err
    assert info.value.__cause__ is cause