from __future__ import annotations

from enum import IntEnum
from typing import Optional


class StatusCode(IntEnum):
    """HTTP-like status codes attached to transport errors."""

    BAD_REQUEST = 400
    SERVICE_UNAVAILABLE = 503
    INTERNAL_ERROR = 500


class ErrorCode(IntEnum):
    """Domain specific error codes."""

    FRAME_INVALID = 2001
    SCHEMA_INVALID = 2002
    RETRIES_EXHAUSTED = 2003
    CLIENT_CLOSED = 2004


class ProtocolError(Exception):
    """Structured protocol exception carrying status + code + message."""

    def __init__(self, status: StatusCode, code: Optional[ErrorCode] = None, message: str = "") -> None:
        self.status = status
        self.code = code
        self.message = message
        super().__init__(f"{status.name} ({int(status)}): {message} (code={code.name if code else 'n/a'})")


class NotConnected(ProtocolError):
    """Raised by ``start`` when no connection could be established."""

    def __init__(self, message: str = "Socket is not connected", code: ErrorCode = ErrorCode.RETRIES_EXHAUSTED) -> None:
        super().__init__(StatusCode.SERVICE_UNAVAILABLE, code, message)


class FrameDecodeError(ProtocolError):
    """A delimited frame could not be turned into a Message."""

    def __init__(self, frame: str, message: str = "", code: ErrorCode = ErrorCode.FRAME_INVALID) -> None:
        self.frame = frame
        super().__init__(StatusCode.BAD_REQUEST, code, message)


__all__ = ["StatusCode", "ErrorCode", "ProtocolError", "NotConnected", "FrameDecodeError"]
