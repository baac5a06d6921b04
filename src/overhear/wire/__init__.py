"""
Overhear wire protocol package.

Contains the control messages sent to the live transcription service and the event types
it sends back.
"""

from .codec import EVENT_TYPES, ControlMessage, InboundEvent, deserialize_event, serialize_message
from .control import CloseStreamMessage, ConfigureMessage, KeepAliveMessage
from .events import (
  Alternative,
  Channel,
  MetadataEvent,
  ModelInfo,
  ResultMetadata,
  SpeechStartedEvent,
  TranscriptEvent,
  UtteranceEndEvent,
  WireModel,
  Word,
)

__all__ = [
  "EVENT_TYPES",
  "Alternative",
  "Channel",
  "CloseStreamMessage",
  "ConfigureMessage",
  "ControlMessage",
  "InboundEvent",
  "KeepAliveMessage",
  "MetadataEvent",
  "ModelInfo",
  "ResultMetadata",
  "SpeechStartedEvent",
  "TranscriptEvent",
  "UtteranceEndEvent",
  "WireModel",
  "Word",
  "deserialize_event",
  "serialize_message",
]
