"""
Frame codec for the live transcription protocol.

Converts outbound control messages to JSON text and inbound JSON text to typed event
models, hiding the Pydantic details from the client.
"""

import json
from typing import Annotated

from pydantic import Field, TypeAdapter

from .control import CloseStreamMessage, ConfigureMessage, KeepAliveMessage
from .events import MetadataEvent, SpeechStartedEvent, TranscriptEvent, UtteranceEndEvent

type ControlMessage = ConfigureMessage | KeepAliveMessage | CloseStreamMessage

type InboundEvent = MetadataEvent | TranscriptEvent | UtteranceEndEvent | SpeechStartedEvent

_inbound_adapter: TypeAdapter[InboundEvent] = TypeAdapter(
  Annotated[
    MetadataEvent | TranscriptEvent | UtteranceEndEvent | SpeechStartedEvent,
    Field(discriminator="type"),
  ]
)

EVENT_TYPES: frozenset[str] = frozenset(
  {"Metadata", "Transcript", "UtteranceEnd", "SpeechStarted"}
)
"""Discriminators the client forwards. The service never sends a frame matching two of them."""


def serialize_message(message: ControlMessage) -> str:
  """
  Serialize a control message to a JSON string.

  Args:
      message: Any outbound control message instance

  Returns:
      Compact JSON representation of the message
  """
  adapter = TypeAdapter(type(message))
  return adapter.dump_json(message).decode("utf-8")


def deserialize_event(data: str | bytes) -> InboundEvent | None:
  """
  Deserialize an inbound frame to a typed event.

  Args:
      data: Frame payload, as text or UTF-8 encoded bytes

  Returns:
      The event model, or None when the frame's `type` is missing or not forwarded

  Raises:
      ValueError: The frame is not valid JSON, or a known event has malformed fields
  """
  if isinstance(data, (bytes, bytearray, memoryview)):
    data = bytes(data).decode("utf-8")

  try:
    frame = json.loads(data)
  except RecursionError as e:
    raise ValueError("Frame is nested too deeply to parse") from e

  if not isinstance(frame, dict) or frame.get("type") not in EVENT_TYPES:
    return None

  return _inbound_adapter.validate_python(frame)
