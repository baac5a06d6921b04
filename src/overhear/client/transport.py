"""
Websocket transport for the live transcription client.

The transport owns the socket and all of its I/O. Callers interact with it synchronously:
`send` queues a frame for a background writer, and lifecycle changes are reported through
four assignable callbacks, in the manner of a browser WebSocket.
"""

import asyncio
import contextlib
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Protocol

import websockets
from websockets.asyncio.client import ClientConnection
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, WebSocketException
from websockets.typing import Subprotocol

from overhear.common import get_logger

type Payload = str | bytes


class ReadyState(IntEnum):
  """Connection readiness, numbered like the WebSocket `readyState` attribute."""

  CONNECTING = 0
  OPEN = 1
  CLOSING = 2
  CLOSED = 3


@dataclass(frozen=True)
class CloseInfo:
  """Why the connection closed. `code` is None when no close frame was received."""

  code: int | None
  reason: str = ""


@dataclass(frozen=True)
class ErrorInfo:
  """Payload of the error event."""

  message: str
  event: Any = None
  """The raw frame or event that triggered the error, if any."""

  error: BaseException | None = None


@dataclass(frozen=True)
class _CloseRequest:
  code: int
  reason: str


def _ignore(*_: Any) -> None:
  pass


class Transport(Protocol):
  """What the live client needs from a bidirectional connection."""

  on_open: Callable[[], None]
  on_close: Callable[[CloseInfo], None]
  on_error: Callable[[ErrorInfo], None]
  on_message: Callable[[Payload], None]

  @property
  def ready_state(self) -> ReadyState: ...

  def start(self) -> None: ...

  def send(self, payload: Payload) -> None: ...

  def close(self, code: int = 1000, reason: str = "") -> None: ...


type TransportFactory = Callable[[str, list[str]], Transport]


class WebSocketTransport:
  """
  `Transport` implementation on top of the `websockets` asyncio client.

  Frames sent while the connection is still opening are held and flushed, in order, once it
  opens. Frames sent after `close()` or after the remote end closed are dropped.
  """

  def __init__(self, url: str, subprotocols: list[str] | None = None, **connect_kwargs: Any):
    """
    :param url: Websocket URL to connect to
    :param subprotocols: Values offered in the Sec-WebSocket-Protocol header
    :param connect_kwargs: Extra keyword arguments for `websockets.connect`
    """
    self.url = url
    self.subprotocols = [Subprotocol(p) for p in subprotocols or []]
    self.connect_kwargs = connect_kwargs

    self.on_open: Callable[[], None] = _ignore
    self.on_close: Callable[[CloseInfo], None] = _ignore
    self.on_error: Callable[[ErrorInfo], None] = _ignore
    self.on_message: Callable[[Payload], None] = _ignore

    self.logger = get_logger("ws/transport")
    self._state = ReadyState.CONNECTING
    self._outbox: asyncio.Queue[Payload | _CloseRequest] = asyncio.Queue()
    self._close_request: _CloseRequest | None = None
    self._task: asyncio.Task[None] | None = None

  @property
  def ready_state(self) -> ReadyState:
    return self._state

  def start(self) -> None:
    """Begin connecting. Must be called from a running event loop."""
    if self._task is not None:
      raise RuntimeError("Transport already started")
    self._task = asyncio.get_running_loop().create_task(self._run())

  def send(self, payload: Payload) -> None:
    """Queue a frame for sending."""
    if self._state in (ReadyState.CLOSING, ReadyState.CLOSED):
      self.logger.warning("Dropping frame, connection is closing", state=self._state.name)
      return
    self._outbox.put_nowait(payload)

  def close(self, code: int = 1000, reason: str = "") -> None:
    """Close the connection once the frames already queued have been sent."""
    if self._state in (ReadyState.CLOSING, ReadyState.CLOSED):
      return

    if self._task is None:
      self._state = ReadyState.CLOSED
      return

    self._close_request = _CloseRequest(code, reason)
    self._state = ReadyState.CLOSING
    self._outbox.put_nowait(self._close_request)

  async def _run(self) -> None:
    try:
      ws = await websockets.connect(
        self.url, subprotocols=self.subprotocols or None, **self.connect_kwargs
      )
    except (OSError, TimeoutError, WebSocketException) as e:
      self.logger.error("Could not connect", error=str(e))
      self._state = ReadyState.CLOSED
      self.on_error(ErrorInfo(message=f"Could not connect: {e}", error=e))
      self.on_close(CloseInfo(code=None, reason=str(e)))
      return

    if self._close_request is not None:
      # The close request is queued behind any frames sent while connecting
      await self._drain_outbox(ws)
      self._state = ReadyState.CLOSED
      self.on_close(CloseInfo(code=ws.close_code, reason=ws.close_reason or ""))
      return

    self._state = ReadyState.OPEN
    self.logger.info("Connected", subprotocol=ws.subprotocol)
    self.on_open()

    writer = asyncio.create_task(self._drain_outbox(ws))
    try:
      async for message in ws:
        self.on_message(message)
    except ConnectionClosedError as e:
      self.on_error(ErrorInfo(message="Connection closed abnormally", event=e.rcvd, error=e))
    except Exception as e:
      self.logger.exception("Message handling error")
      self.on_error(ErrorInfo(message=f"Message handling error: {e}", error=e))
      await ws.close(1011, "client error")
    finally:
      writer.cancel()
      with contextlib.suppress(asyncio.CancelledError):
        await writer
      self._state = ReadyState.CLOSED

    self.logger.info("Disconnected", code=ws.close_code, reason=ws.close_reason)
    self.on_close(CloseInfo(code=ws.close_code, reason=ws.close_reason or ""))

  async def _drain_outbox(self, ws: ClientConnection) -> None:
    while True:
      item = await self._outbox.get()
      try:
        if isinstance(item, _CloseRequest):
          await ws.close(item.code, item.reason)
          return
        await ws.send(item)
      except ConnectionClosed:
        self.logger.debug("Connection closed with frames still queued")
        return
      except Exception:
        self.logger.exception("Error sending frame, skipping it")
