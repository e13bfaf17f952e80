from __future__ import annotations

from enum import StrEnum
from typing import Union


class MsgType(StrEnum):
    """Message types the transport itself produces."""

    REMOTE_CONTROL_DATA = "remote_control_data"


def normalize_command(command: Union[str, MsgType]) -> str:
    """Return the wire text for a message type."""
    if isinstance(command, MsgType):
        return command.value
    return str(command).strip()


__all__ = ["MsgType", "normalize_command"]
