from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from .errors import ErrorCode, ProtocolError, StatusCode

SCHEMA_DIR = Path(__file__).parent / "schemas"
MESSAGE_SCHEMA = "message.json"


@lru_cache(maxsize=4)
def load_schema(filename: str = MESSAGE_SCHEMA) -> dict:
    """Load a JSON schema shipped with the package."""
    with (SCHEMA_DIR / filename).open("r", encoding="utf-8") as fp:
        return json.load(fp)


def validate_msg(msg: Any, schema: Optional[dict] = None) -> None:
    """Check a decoded message against the envelope schema."""
    if schema is None:
        schema = load_schema()
    try:
        jsonschema.validate(instance=msg, schema=schema)
    except jsonschema.ValidationError as exc:
        raise ProtocolError(StatusCode.BAD_REQUEST, ErrorCode.SCHEMA_INVALID, f"Schema validation failed: {exc.message}") from exc


def normalize_payload(msg: Dict[str, Any]) -> Dict[str, Any]:
    # inbound frames may carry "data": null
    if msg.get("data") is None:
        return {**msg, "data": {}}
    return msg


__all__ = ["load_schema", "validate_msg", "normalize_payload"]
