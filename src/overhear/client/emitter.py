"""
Typed publish/subscribe registry for live transcription events.

Each event kind has a fixed payload type; the overloads on `EventEmitter.on` and `once` tie them
together so a type checker can verify listeners.
"""

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Literal, overload

from overhear.common import get_logger
from overhear.wire import MetadataEvent, SpeechStartedEvent, TranscriptEvent, UtteranceEndEvent

if TYPE_CHECKING:
  from overhear.client.live import LiveClient
  from overhear.client.transport import CloseInfo, ErrorInfo


class LiveTranscriptionEvents(StrEnum):
  """Events emitted by a live transcription client."""

  Open = "open"
  Close = "close"
  Error = "error"
  Warning = "warning"

  Metadata = "Metadata"
  Transcript = "Transcript"
  UtteranceEnd = "UtteranceEnd"
  SpeechStarted = "SpeechStarted"


type Listener = Callable[[Any], None]


@dataclass
class _Registration:
  callback: Listener
  once: bool


class EventEmitter:
  """Registry of listeners keyed by event kind."""

  def __init__(self) -> None:
    self._listeners: dict[LiveTranscriptionEvents, list[_Registration]] = defaultdict(list)
    self.logger = get_logger("emitter")

  @overload
  def on(
    self, event: Literal[LiveTranscriptionEvents.Open], callback: Callable[["LiveClient"], None]
  ) -> None: ...
  @overload
  def on(
    self, event: Literal[LiveTranscriptionEvents.Close], callback: Callable[["CloseInfo"], None]
  ) -> None: ...
  @overload
  def on(
    self, event: Literal[LiveTranscriptionEvents.Error], callback: Callable[["ErrorInfo"], None]
  ) -> None: ...
  @overload
  def on(
    self, event: Literal[LiveTranscriptionEvents.Warning], callback: Callable[[str], None]
  ) -> None: ...
  @overload
  def on(
    self,
    event: Literal[LiveTranscriptionEvents.Metadata],
    callback: Callable[[MetadataEvent], None],
  ) -> None: ...
  @overload
  def on(
    self,
    event: Literal[LiveTranscriptionEvents.Transcript],
    callback: Callable[[TranscriptEvent], None],
  ) -> None: ...
  @overload
  def on(
    self,
    event: Literal[LiveTranscriptionEvents.UtteranceEnd],
    callback: Callable[[UtteranceEndEvent], None],
  ) -> None: ...
  @overload
  def on(
    self,
    event: Literal[LiveTranscriptionEvents.SpeechStarted],
    callback: Callable[[SpeechStartedEvent], None],
  ) -> None: ...
  def on(self, event: LiveTranscriptionEvents, callback: Listener) -> None:
    """Register a listener that runs every time `event` is emitted."""
    self._listeners[LiveTranscriptionEvents(event)].append(_Registration(callback, once=False))

  @overload
  def once(
    self, event: Literal[LiveTranscriptionEvents.Open], callback: Callable[["LiveClient"], None]
  ) -> None: ...
  @overload
  def once(
    self, event: Literal[LiveTranscriptionEvents.Close], callback: Callable[["CloseInfo"], None]
  ) -> None: ...
  @overload
  def once(
    self, event: Literal[LiveTranscriptionEvents.Error], callback: Callable[["ErrorInfo"], None]
  ) -> None: ...
  @overload
  def once(
    self, event: Literal[LiveTranscriptionEvents.Warning], callback: Callable[[str], None]
  ) -> None: ...
  @overload
  def once(
    self,
    event: Literal[LiveTranscriptionEvents.Metadata],
    callback: Callable[[MetadataEvent], None],
  ) -> None: ...
  @overload
  def once(
    self,
    event: Literal[LiveTranscriptionEvents.Transcript],
    callback: Callable[[TranscriptEvent], None],
  ) -> None: ...
  @overload
  def once(
    self,
    event: Literal[LiveTranscriptionEvents.UtteranceEnd],
    callback: Callable[[UtteranceEndEvent], None],
  ) -> None: ...
  @overload
  def once(
    self,
    event: Literal[LiveTranscriptionEvents.SpeechStarted],
    callback: Callable[[SpeechStartedEvent], None],
  ) -> None: ...
  def once(self, event: LiveTranscriptionEvents, callback: Listener) -> None:
    """Register a listener that runs the next time `event` is emitted, then is removed."""
    self._listeners[LiveTranscriptionEvents(event)].append(_Registration(callback, once=True))

  def off(self, event: LiveTranscriptionEvents, callback: Listener) -> None:
    """Remove every registration of `callback` for `event`. Unknown callbacks are ignored."""
    registrations = self._listeners[LiveTranscriptionEvents(event)]
    registrations[:] = [r for r in registrations if r.callback != callback]

  def listener_count(self, event: LiveTranscriptionEvents) -> int:
    return len(self._listeners[LiveTranscriptionEvents(event)])

  def emit(self, event: LiveTranscriptionEvents, payload: Any) -> bool:
    """
    Call the listeners of `event` in registration order.

    A listener that raises is logged and skipped; the remaining listeners still run.

    :param event: Event kind to emit
    :param payload: Value passed to each listener
    :returns: Whether any listener was registered
    """
    registrations = self._listeners[LiveTranscriptionEvents(event)]
    if not registrations:
      return False

    snapshot = list(registrations)
    registrations[:] = [r for r in registrations if not r.once]

    for registration in snapshot:
      try:
        registration.callback(payload)
      except Exception:
        self.logger.exception("Listener failed", event=str(event))

    return True
