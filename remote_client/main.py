from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
from typing import Optional

from remote_client.config import CLIENT_CONFIG, Options, get, load_config
from remote_client.core import ConnectionManager
from remote_protocol import Message, ProtocolError

logger = logging.getLogger("remote_client")


def _log_message(message: Message) -> None:
    logger.info("Received %s (id=%s): %s", message.type, message.id, message.data)


def _log_error(exc: ProtocolError) -> None:
    logger.error("Bad frame: %s", exc)


async def run_client(port: Optional[int] = None) -> None:
    load_config()
    logging.basicConfig(level=CLIENT_CONFIG["log_level"])
    logging.getLogger("websockets").setLevel(logging.WARNING)

    port = port or get("port")
    if not port:
        raise SystemExit("usage: python -m remote_client.main <port> (or set BAS_PORT)")

    manager = ConnectionManager(Options.from_config())
    manager.on_message.subscribe(_log_message)
    manager.on_error.subscribe(_log_error)
    try:
        await manager.start(port)
        await manager.wait_closed()
    finally:
        await manager.close()


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run_client(int(sys.argv[1]) if len(sys.argv) > 1 else None))
