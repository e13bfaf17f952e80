"""
Protocol package for the remote-control transport: message model, framing
helpers, validation and the error taxonomy shared by the client.
"""

from .commands import MsgType, normalize_command
from .constants import DEFAULT_HOST, ENCODING, FRAME_DELIMITER, MAX_RETRIES, RETRY_DELAY
from .errors import ErrorCode, FrameDecodeError, NotConnected, ProtocolError, StatusCode
from .framing import FrameAssembler, decode_frame, encode_message
from .messages import Message
from .validator import load_schema, validate_msg

__all__ = [
    "MsgType",
    "normalize_command",
    "DEFAULT_HOST",
    "ENCODING",
    "FRAME_DELIMITER",
    "MAX_RETRIES",
    "RETRY_DELAY",
    "ErrorCode",
    "FrameDecodeError",
    "NotConnected",
    "ProtocolError",
    "StatusCode",
    "FrameAssembler",
    "decode_frame",
    "encode_message",
    "Message",
    "load_schema",
    "validate_msg",
]
