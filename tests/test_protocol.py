import json
import threading
import uuid

import pytest

from agentsdk.protocol import (
    ErrorCode,
    IncrementingIDGenerator,
    Request,
    Response,
    RpcError,
    TimestampedIDGenerator,
    UUIDGenerator,
    error_response,
    internal_error,
    invalid_params,
    invalid_request,
    method_not_found,
    new_request,
    parse_error,
    parse_request,
    parse_response,
    success_response,
)


@pytest.mark.parametrize(
    "response, code",
    [
        (parse_error(1, "m"), -32700),
        (invalid_request(1, "m"), -32600),
        (method_not_found(1, "m"), -32601),
        (invalid_params(1, "m"), -32602),
        (internal_error(1, "m"), -32603),
    ],
)
def test_error_code_values(response, code):
    wire = json.loads(response.to_json())
    assert wire["error"]["code"] == code


def test_new_request_generates_uuid():
    req = new_request("tools/list")
    assert req.jsonrpc == "2.0"
    assert uuid.UUID(req.id).version == 4
    assert not req.is_notification()


def test_new_request_ids_are_unique():
    ids = {new_request("a").id for _ in range(50)}
    assert len(ids) == 50


def test_new_request_with_explicit_id():
    req = new_request("initialize", {"x": 1}, 7)
    assert req.id == 7
    assert req.params == {"x": 1}
    assert req.method == "initialize"


def test_notification_without_id():
    req = new_request("notify", request_id=None)
    assert req.is_notification()
    assert "id" not in req.to_dict()


def test_request_wire_form():
    assert Request(method="ping", id=1).to_json() == '{"jsonrpc":"2.0","id":1,"method":"ping"}'


def test_empty_params_omitted():
    assert "params" not in Request(method="m", params={}, id=1).to_dict()
    assert Request(method="m", params={"a": 1}, id=1).to_dict()["params"] == {"a": 1}


def test_request_round_trip():
    req = new_request("tools/call", {"name": "add", "arguments": {"a": 1}}, "abc")
    assert parse_request(req.to_json()) == req


def test_request_round_trip_bytes():
    req = Request(method="m", id=3)
    assert parse_request(req.to_json().encode()) == req


def test_success_response_round_trip():
    resp = success_response(5, {"tools": []})
    assert not resp.has_error()
    parsed = parse_response(resp.to_json())
    assert parsed == resp
    assert parsed.result == {"tools": []}


def test_error_response_round_trip():
    resp = error_response("r1", ErrorCode.INVALID_PARAMS, "bad", {"field": "x"})
    assert resp.has_error()
    parsed = parse_response(resp.to_json())
    assert parsed.error == RpcError(code=-32602, message="bad", data={"field": "x"})
    assert parsed.result is None


def test_error_data_omitted_when_absent():
    wire = json.loads(error_response(1, -1, "m").to_json())
    assert wire["error"] == {"code": -1, "message": "m"}
    assert "result" not in wire


@pytest.mark.parametrize(
    "factory, code",
    [
        (parse_error, ErrorCode.PARSE_ERROR),
        (invalid_request, ErrorCode.INVALID_REQUEST),
        (invalid_params, ErrorCode.INVALID_PARAMS),
        (internal_error, ErrorCode.INTERNAL_ERROR),
    ],
)
def test_error_factories(factory, code):
    resp = factory(9, "msg")
    assert resp.id == 9
    assert resp.error.code == code
    assert resp.error.message == "msg"


def test_internal_error_data():
    resp = internal_error(1, "failed", "details")
    assert resp.error.data == "details"


def test_method_not_found_message():
    resp = method_not_found(2, "tools/run")
    assert resp.error.code == ErrorCode.METHOD_NOT_FOUND
    assert resp.error.message == "Method not found: tools/run"


@pytest.mark.parametrize("data", ["{invalid", "[1, 2]", '"text"'])
def test_parse_request_rejects_bad_input(data):
    with pytest.raises(ValueError, match="unmarshal request"):
        parse_request(data)


def test_parse_request_rejects_wrong_field_type():
    with pytest.raises(ValueError, match="unmarshal request"):
        parse_request('{"jsonrpc":"2.0","method":123}')


def test_parse_response_rejects_bad_input():
    with pytest.raises(ValueError, match="unmarshal response"):
        parse_response("{")
    with pytest.raises(ValueError, match="unmarshal response"):
        parse_response('{"error":{"code":"x","message":"m"}}')


def test_parse_request_missing_id_is_notification():
    assert parse_request('{"jsonrpc":"2.0","method":"n"}').is_notification()


def test_response_has_error_flag():
    assert Response(id=1, result=1).has_error() is False
    assert Response(id=1, error=RpcError(1, "x")).has_error() is True


def test_incrementing_generator_sequence():
    gen = IncrementingIDGenerator()
    assert [gen.generate() for _ in range(3)] == [1, 2, 3]


def test_incrementing_generator_threads_unique():
    gen = IncrementingIDGenerator()
    results = []
    lock = threading.Lock()

    def work():
        for _ in range(100):
            value = gen.generate()
            with lock:
                results.append(value)

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(results) == list(range(1, 801))
    assert gen.generate() == 801


def test_uuid_generator():
    gen = UUIDGenerator()
    a, b = gen.generate(), gen.generate()
    assert uuid.UUID(a).version == 4
    assert a != b


def test_timestamped_generator_non_decreasing():
    gen = TimestampedIDGenerator()
    first = gen.generate()
    second = gen.generate()
    assert isinstance(first, int) and first > 0
    assert second >= first