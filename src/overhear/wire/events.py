"""
Inbound event models for the live transcription protocol.

Every frame the service sends is a JSON object carrying a `type` discriminator. The models
below declare the fields the service documents for each event kind; all of them are
optional so that partial frames still parse, and any undocumented keys are preserved on the
model instance.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
  """Base for inbound payloads. Unknown keys are kept so nothing in a frame is lost."""

  model_config = ConfigDict(extra="allow", protected_namespaces=())

  def to_frame(self) -> dict:
    """Return the payload as it appeared on the wire."""
    return self.model_dump(exclude_unset=True)


class ModelInfo(WireModel):
  name: str | None = None
  version: str | None = None
  arch: str | None = None


class Word(WireModel):
  word: str
  """The recognised word, lowercased and without punctuation."""

  start: float
  """Start of the word in seconds from the beginning of the stream."""

  end: float
  """End of the word in seconds from the beginning of the stream."""

  confidence: float = Field(ge=0.0, le=1.0)
  """Recognition confidence, from 0.0 to 1.0."""

  punctuated_word: str | None = None
  """The word with casing and punctuation applied, when smart formatting is enabled."""

  speaker: int | None = None
  """Speaker index, when diarization is enabled."""


class Alternative(WireModel):
  transcript: str = ""
  confidence: float | None = None
  words: list[Word] = Field(default_factory=list)


class Channel(WireModel):
  alternatives: list[Alternative] = Field(default_factory=list)


class ResultMetadata(WireModel):
  request_id: str | None = None
  model_uuid: str | None = None
  model_info: ModelInfo | None = None


class MetadataEvent(WireModel):
  """Describes the session; sent once the service has finished with the stream."""

  type: Literal["Metadata"]
  transaction_key: str | None = None
  request_id: str | None = None
  sha256: str | None = None
  created: str | None = None
  duration: float | None = None
  channels: int | None = None
  models: list[str] | None = None
  model_info: dict[str, ModelInfo] | None = None


class TranscriptEvent(WireModel):
  """A transcription result for a window of audio, interim or final."""

  type: Literal["Transcript"]
  channel_index: list[int] | None = None
  duration: float | None = None
  start: float | None = None
  is_final: bool | None = None
  speech_final: bool | None = None
  from_finalize: bool | None = None
  channel: Channel | None = None
  metadata: ResultMetadata | None = None

  @property
  def transcript(self) -> str:
    """Text of the most likely alternative, or an empty string."""
    if self.channel is None or not self.channel.alternatives:
      return ""
    return self.channel.alternatives[0].transcript


class UtteranceEndEvent(WireModel):
  """Sent when the service detects a gap in speech after the last finalized word."""

  type: Literal["UtteranceEnd"]
  channel: list[int] | None = None
  last_word_end: float | None = None


class SpeechStartedEvent(WireModel):
  """Sent when voice activity detection notices the start of speech."""

  type: Literal["SpeechStarted"]
  channel: list[int] | None = None
  timestamp: float | None = None
