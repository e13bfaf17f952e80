from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from functools import partial
from typing import Any, Dict, Optional, Union

from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK, InvalidHandshake
from websockets.frames import CloseCode

from remote_client.config import CLIENT_CONFIG, Options
from remote_client.core.events import Event
from remote_protocol import framing
from remote_protocol.commands import MsgType
from remote_protocol.errors import ErrorCode, FrameDecodeError, NotConnected, ProtocolError
from remote_protocol.framing import FrameAssembler
from remote_protocol.messages import Message

logger = logging.getLogger(__name__)

Connector = Callable[[str], Awaitable[Any]]

CONNECT_ERRORS = (OSError, asyncio.TimeoutError, InvalidHandshake)


class ConnectionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    RETRYING = "retrying"
    CLOSED = "closed"


class ConnectionManager:
    """WebSocket client for the local control endpoint.

    A single background task owns the whole lifecycle: connect, read, and
    retry after an unclean close. Outgoing frames go through one queue and one
    writer task per socket, so the handshake queued on open is always the
    first frame on the wire.
    """

    def __init__(
        self,
        options: Options,
        config: Optional[Dict[str, Any]] = None,
        connector: Optional[Connector] = None,
    ) -> None:
        self.options = options
        self.config = config or CLIENT_CONFIG
        self.host: str = self.config["host"]
        self.max_retries: int = int(self.config["max_retries"])
        self.retry_delay: float = float(self.config["retry_delay"])
        self.open_timeout: float = float(self.config["open_timeout"])
        self._connector: Connector = connector or partial(connect, open_timeout=self.open_timeout, max_size=None)

        self.on_open = Event("open")
        self.on_close = Event("close")
        self.on_message = Event("message")
        self.on_error = Event("error")

        self.port: Optional[int] = None
        self.state = ConnectionState.IDLE
        self._assembler = FrameAssembler()
        self._socket: Optional[Any] = None
        self._outbox: Optional[asyncio.Queue[str]] = None
        self._tries = 0
        self._closed = False
        self._started: Optional[asyncio.Future[None]] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}"

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.OPEN

    @property
    def retries(self) -> int:
        return self._tries

    async def start(self, port: int) -> None:
        """Connect to the endpoint on ``port`` and wait until the socket is open.

        Raises NotConnected when the retry bound is exhausted or the manager is
        closed first. A second call while the session runs waits on the same
        result instead of opening another connection; once the session has
        ended a call opens a fresh one.
        """
        if self._closed:
            raise NotConnected("Connection manager is closed", ErrorCode.CLIENT_CLOSED)
        if self._task is None or self._task.done():
            self.port = int(port)
            self._tries = 0
            self._started = asyncio.get_running_loop().create_future()
            self._task = asyncio.create_task(self._run(), name="remote-control-connection")
        await asyncio.shield(self._started)

    def send(self, msg_type: Union[MsgType, str], payload: Optional[Dict[str, Any]] = None, is_async: bool = False) -> None:
        self.send_message(Message.create(msg_type, payload, is_async))

    def send_message(self, message: Message) -> None:
        """Queue a message for the current socket; transport failures are only logged."""
        frame = framing.encode_message(message)
        if self._outbox is None:
            logger.warning("Dropping %s message, socket is not open", message.type)
            return
        self._outbox.put_nowait(frame)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        socket, self._socket = self._socket, None
        task = self._task
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._fail(NotConnected("Connection manager closed", ErrorCode.CLIENT_CLOSED))
        self.state = ConnectionState.CLOSED
        if socket is not None:
            await socket.close()
            logger.info("Connection to %s closed", self.url)
            await self.on_close.emit()

    async def wait_closed(self) -> None:
        """Wait until the session has ended for good."""
        if self._task is not None:
            await asyncio.wait({self._task})

    async def _run(self) -> None:
        try:
            while not self._closed:
                self.state = ConnectionState.CONNECTING
                try:
                    socket = await self._connector(self.url)
                except CONNECT_ERRORS as exc:
                    logger.warning("Connect attempt to %s failed: %s", self.url, exc)
                    clean = False
                else:
                    clean = await self._serve(socket)

                if self._closed:
                    return
                await self.on_close.emit()
                if clean:
                    logger.info("Connection to %s closed by remote", self.url)
                    break

                self._tries += 1
                if self._tries >= self.max_retries:
                    logger.error("Giving up on %s after %s failed attempts", self.url, self._tries)
                    self._fail(NotConnected(f"Could not connect to {self.url} after {self._tries} attempts"))
                    break
                self.state = ConnectionState.RETRYING
                await asyncio.sleep(self.retry_delay)
        except Exception as exc:
            logger.exception("Connection task for %s crashed: %s", self.url, exc)
            self._fail(exc)
        finally:
            self.state = ConnectionState.CLOSED
            self._fail(NotConnected("Connection closed before it was established", ErrorCode.CLIENT_CLOSED))

    async def _serve(self, socket: Any) -> bool:
        """Drive one open socket until it closes; True means the close was clean."""
        self._socket = socket
        self._tries = 0
        self._assembler.reset()
        self._outbox = asyncio.Queue()
        writer = asyncio.create_task(self._write_loop(socket, self._outbox), name="remote-control-writer")
        self.state = ConnectionState.OPEN
        logger.info("Connected to %s", self.url)
        try:
            self._send_handshake()
            if self._started is not None and not self._started.done():
                self._started.set_result(None)
            await self.on_open.emit()
            async for chunk in socket:
                await self._on_data(chunk)
        except ConnectionClosedOK:
            return True
        except ConnectionClosed as exc:
            logger.warning("Connection to %s lost: %s", self.url, exc)
            return False
        except Exception as exc:
            logger.exception("Connection to %s failed: %s", self.url, exc)
            await socket.close(code=CloseCode.INTERNAL_ERROR)
            return False
        finally:
            writer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await writer
            self._socket = None
            self._outbox = None
        return True

    async def _write_loop(self, socket: Any, outbox: asyncio.Queue[str]) -> None:
        while True:
            frame = await outbox.get()
            try:
                await socket.send(frame)
            except (ConnectionClosed, OSError) as exc:
                logger.warning("Send to %s failed: %s", self.url, exc)
                return
            except Exception as exc:
                # closing unclean hands the socket back to the reconnect path
                logger.exception("Send to %s failed: %s", self.url, exc)
                await socket.close(code=CloseCode.INTERNAL_ERROR)
                return
            logger.debug("--> %s", frame)

    def _send_handshake(self) -> None:
        self.send(
            MsgType.REMOTE_CONTROL_DATA,
            {
                "script": self.options.script_name,
                "password": self.options.password,
                "login": self.options.login,
            },
        )

    async def _on_data(self, chunk: Union[str, bytes]) -> None:
        logger.debug("<-- %s", chunk)
        for frame in self._assembler.feed(chunk):
            try:
                message = framing.decode_frame(frame)
            except FrameDecodeError as exc:
                await self._report(exc)
                continue
            await self.on_message.emit(message)

    async def _report(self, exc: ProtocolError) -> None:
        if len(self.on_error):
            await self.on_error.emit(exc)
        else:
            logger.error("Undecodable frame from %s: %s", self.url, exc)

    def _fail(self, exc: BaseException) -> None:
        if self._started is not None and not self._started.done():
            self._started.set_exception(exc)


__all__ = ["ConnectionManager", "ConnectionState", "Connector", "CONNECT_ERRORS"]
