from __future__ import annotations

import codecs
import json
from typing import List, Union

from .constants import ENCODING, FRAME_DELIMITER, MAX_PAYLOAD_SIZE
from .errors import ErrorCode, FrameDecodeError, ProtocolError, StatusCode
from .messages import Message
from .validator import normalize_payload, validate_msg


def encode_message(message: Message) -> str:
    """Encode a message into wire text (JSON + delimiter)."""
    try:
        json_str = json.dumps(message.to_dict(), ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise ProtocolError(StatusCode.BAD_REQUEST, message=f"Encode failed: {exc}") from exc

    if len(json_str.encode(ENCODING)) > MAX_PAYLOAD_SIZE:
        raise ProtocolError(StatusCode.BAD_REQUEST, message="Payload too large for control channel")
    return json_str + FRAME_DELIMITER


def decode_frame(frame: str) -> Message:
    """Decode one delimited frame (without the delimiter) into a Message."""
    try:
        raw = json.loads(frame)
    except (ValueError, RecursionError) as exc:
        raise FrameDecodeError(frame, f"Decode failed: {exc}") from exc
    try:
        validate_msg(raw)
        return Message.from_dict(normalize_payload(raw))
    except ProtocolError as exc:
        raise FrameDecodeError(frame, exc.message, code=exc.code or ErrorCode.FRAME_INVALID) from exc


class FrameAssembler:
    """
    Accumulates inbound chunks and cuts them into delimiter-bounded frames.

    Text after the last delimiter seen so far stays buffered until a later
    chunk completes it. Binary chunks go through an incremental decoder so a
    multi-byte character split between two chunks is not mangled; invalid
    bytes become U+FFFD and fail later as an undecodable frame.
    """

    def __init__(self, delimiter: str = FRAME_DELIMITER) -> None:
        if not delimiter:
            raise ValueError("delimiter must not be empty")
        self.delimiter = delimiter
        self._buffer = ""
        self._decoder = codecs.getincrementaldecoder(ENCODING)(errors="replace")

    @property
    def pending(self) -> str:
        return self._buffer

    def feed(self, chunk: Union[str, bytes]) -> List[str]:
        """Append a chunk and return the complete frames it finished, in order."""
        if isinstance(chunk, (bytes, bytearray)):
            chunk = self._decoder.decode(bytes(chunk))
        self._buffer += chunk
        pieces = self._buffer.split(self.delimiter)
        self._buffer = pieces.pop()
        return [piece for piece in pieces if piece]

    def reset(self) -> None:
        self._buffer = ""
        self._decoder.reset()


__all__ = ["encode_message", "decode_frame", "FrameAssembler"]
