"""
LiveClient: relays a live transcription websocket as typed local events.

Outbound calls become JSON control messages or audio frames; inbound JSON frames are parsed
into event models and emitted to listeners registered with `on`.
"""

import asyncio
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from overhear.client.emitter import EventEmitter, LiveTranscriptionEvents
from overhear.client.options import ClientOptions, LiveOptions
from overhear.client.transport import (
  CloseInfo,
  ErrorInfo,
  Payload,
  ReadyState,
  TransportFactory,
  WebSocketTransport,
)
from overhear.client.url import build_request_url
from overhear.common import get_logger
from overhear.wire import (
  CloseStreamMessage,
  ConfigureMessage,
  KeepAliveMessage,
  deserialize_event,
  serialize_message,
)

PARSE_ERROR_MESSAGE = "Unable to parse `data` as JSON."
ZERO_BYTE_WARNING = (
  "Zero-byte detected, skipping. Send `CloseStream` if trying to close the connection."
)


class SendOutcome(StrEnum):
  """Result of `LiveClient.send`."""

  SENT = "sent"
  EMPTY_SKIPPED = "empty_skipped"
  CONNECTION_NOT_OPEN = "connection_not_open"

  @property
  def ok(self) -> bool:
    return self is SendOutcome.SENT


class LiveClient:
  """
  Client for one live transcription session.

  The connection starts opening as soon as the client is constructed; listen for
  `LiveTranscriptionEvents.Open` (or await `wait_open()`) before sending audio. A client is
  good for a single connection and is discarded once it closes.
  """

  namespace = "listen"

  def __init__(
    self,
    options: ClientOptions,
    transcription_options: LiveOptions | Mapping[str, Any] | None = None,
    endpoint: str = ":version/listen",
    *,
    transport_factory: TransportFactory = WebSocketTransport,
  ):
    """
    :param options: Service URL, API version and key
    :param transcription_options: Options sent as query parameters
    :param endpoint: Endpoint path template relative to the service URL
    :param transport_factory: Called with the request URL and sub-protocols
    """
    if not isinstance(transcription_options, LiveOptions):
      transcription_options = LiveOptions.model_validate(transcription_options or {})

    self.options = options
    self.transcription_options = transcription_options
    self.logger = get_logger("live")

    self._emitter = EventEmitter()
    self._settled = asyncio.Event()
    self._closed = asyncio.Event()
    self._close_info: CloseInfo | None = None

    self.request_url = build_request_url(
      options.url, options.version, endpoint, {}, transcription_options.to_query()
    )
    self.logger.debug("Opening live connection", url=self.request_url)

    self._socket = transport_factory(self.request_url, ["token", options.api_key])
    self._socket.on_open = self._handle_open
    self._socket.on_close = self._handle_close
    self._socket.on_error = self._handle_error
    self._socket.on_message = self._handle_message
    self._socket.start()

  # Subscriptions
  @property
  def on(self):
    """Register a listener; see `EventEmitter.on`."""
    return self._emitter.on

  @property
  def once(self):
    return self._emitter.once

  @property
  def off(self):
    return self._emitter.off

  # Transport callbacks
  def _handle_open(self) -> None:
    self._settled.set()
    self._emitter.emit(LiveTranscriptionEvents.Open, self)

  def _handle_close(self, info: CloseInfo) -> None:
    self._close_info = info
    self._settled.set()
    self._closed.set()
    self._emitter.emit(LiveTranscriptionEvents.Close, info)

  def _handle_error(self, info: ErrorInfo) -> None:
    self._emitter.emit(LiveTranscriptionEvents.Error, info)

  def _handle_message(self, data: Payload) -> None:
    try:
      event = deserialize_event(data)
    except ValueError as e:
      self.logger.warning("Unparseable frame", error=str(e))
      self._emitter.emit(
        LiveTranscriptionEvents.Error,
        ErrorInfo(message=PARSE_ERROR_MESSAGE, event=data, error=e),
      )
      return

    if event is None:
      self.logger.debug("Ignoring unhandled frame")
      return

    self._emitter.emit(LiveTranscriptionEvents(event.type), event)

  # Outbound
  def configure(self, config: Mapping[str, Any]) -> None:
    """Change processing options mid-stream."""
    self._socket.send(serialize_message(ConfigureMessage(processors=dict(config))))

  def keep_alive(self) -> None:
    """Keep the connection open while no audio is being sent."""
    self._socket.send(serialize_message(KeepAliveMessage()))

  def send(self, data: str | bytes | bytearray | memoryview) -> SendOutcome:
    """
    Send audio (or text) to the service.

    Zero-length buffers are not sent: some audio sources flush one when they stop, and the
    service would read it as the end of the stream. A warning event is emitted instead; use
    `finish()` to end the stream.

    :param data: Text, or a bytes-like object of audio
    :returns: Whether the data was sent, skipped, or refused because the connection is not open
    :raises TypeError: `data` is neither text nor bytes-like
    """
    if self._socket.ready_state != ReadyState.OPEN:
      return SendOutcome.CONNECTION_NOT_OPEN

    if isinstance(data, str):
      self._socket.send(data)
      return SendOutcome.SENT

    if not isinstance(data, (bytes, bytearray, memoryview)):
      raise TypeError(f"Cannot send {type(data).__name__}; expected str or a bytes-like object")

    if memoryview(data).nbytes == 0:
      self._emitter.emit(LiveTranscriptionEvents.Warning, ZERO_BYTE_WARNING)
      return SendOutcome.EMPTY_SKIPPED

    self._socket.send(data if isinstance(data, bytes) else bytes(data))
    return SendOutcome.SENT

  def finish(self) -> None:
    """
    Tell the service no more audio is coming. It sends its remaining results and then closes
    the connection.
    """
    self._socket.send(serialize_message(CloseStreamMessage()))

  def close(self, code: int = 1000, reason: str = "") -> None:
    """Close the connection without waiting for outstanding results."""
    self._socket.close(code, reason)

  def get_ready_state(self) -> ReadyState:
    return self._socket.ready_state

  @property
  def ready_state(self) -> ReadyState:
    return self._socket.ready_state

  @property
  def close_info(self) -> CloseInfo | None:
    return self._close_info

  # Awaitables
  async def wait_open(self) -> None:
    """
    Wait for the connection to open.

    :raises ConnectionError: The connection closed before opening
    """
    await self._settled.wait()
    if self.ready_state != ReadyState.OPEN:
      raise ConnectionError(f"Connection closed before opening: {self._close_info}")

  async def wait_closed(self) -> CloseInfo | None:
    """Wait for the connection to close and return why it closed."""
    await self._closed.wait()
    return self._close_info

  async def __aenter__(self) -> "LiveClient":
    await self.wait_open()
    return self

  async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
    if self.ready_state == ReadyState.OPEN:
      if exc_type is None:
        self.finish()
      else:
        self.close(1011, "client error")
    await self.wait_closed()
