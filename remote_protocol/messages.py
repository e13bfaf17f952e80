from __future__ import annotations

import random
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .commands import MsgType, normalize_command
from .errors import ProtocolError, StatusCode


def _default_id() -> int:
    return random.randint(100000, 999999)


class Message(BaseModel):
    """Envelope exchanged with the remote-control endpoint."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    data: Dict[str, Any] = Field(default_factory=dict, description="Type specific payload")
    type: str = Field(..., description="Message type tag such as remote_control_data")
    async_: bool = Field(default=False, alias="async", description="Remote side may defer the reply")
    id: int = Field(default_factory=_default_id, description="Random identifier")

    @classmethod
    def create(cls, msg_type: Union[MsgType, str], data: Optional[Dict[str, Any]] = None, is_async: bool = False) -> "Message":
        return cls(type=normalize_command(msg_type), data=dict(data or {}), async_=is_async)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ProtocolError(StatusCode.BAD_REQUEST, message=f"Message validation failed: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = ["Message"]
