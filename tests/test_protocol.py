import json

import pytest

from remote_protocol import (
    FRAME_DELIMITER,
    ErrorCode,
    FrameDecodeError,
    Message,
    MsgType,
    ProtocolError,
    decode_frame,
    encode_message,
    validate_msg,
)


def test_encode_decode_roundtrip():
    msg = Message.create(MsgType.REMOTE_CONTROL_DATA, {"script": "demo", "password": "", "login": ""}, is_async=True)
    encoded = encode_message(msg)
    assert encoded.endswith(FRAME_DELIMITER)
    decoded = decode_frame(encoded[: -len(FRAME_DELIMITER)])
    assert decoded == msg


def test_wire_shape_uses_async_field():
    msg = Message.create("run_task", {"name": "x"})
    body = json.loads(encode_message(msg)[: -len(FRAME_DELIMITER)])
    assert set(body) == {"data", "type", "async", "id"}
    assert body["async"] is False
    assert 100000 <= body["id"] <= 999999


def test_message_is_immutable():
    msg = Message.create("ping")
    with pytest.raises(Exception):
        msg.type = "pong"


def test_decode_keeps_unknown_fields_and_null_data():
    msg = decode_frame('{"type":"thread_start","data":null,"id":42,"async":true,"extra":"x"}')
    assert msg.type == "thread_start"
    assert msg.data == {}
    assert msg.async_ is True
    assert msg.id == 42
    assert msg.to_dict()["extra"] == "x"


def test_decode_rejects_invalid_json():
    with pytest.raises(FrameDecodeError) as info:
        decode_frame("{not json")
    assert info.value.frame == "{not json"
    assert info.value.code is ErrorCode.FRAME_INVALID


def test_decode_rejects_schema_violation():
    with pytest.raises(FrameDecodeError) as info:
        decode_frame('{"data": {}}')
    assert info.value.code is ErrorCode.SCHEMA_INVALID


def test_validate_msg_accepts_minimal_envelope():
    validate_msg({"type": "ping"})


def test_encode_rejects_unserializable_payload():
    with pytest.raises(ProtocolError):
        encode_message(Message.create("bad", {"value": object()}))


def test_decode_rejects_deeply_nested_frame():
    with pytest.raises(FrameDecodeError) as info:
        decode_frame("[" * 100000)
    assert info.value.code is ErrorCode.FRAME_INVALID


def test_decode_rejects_replacement_characters():
    with pytest.raises(FrameDecodeError):
        decode_frame("\ufffd\ufffd")
