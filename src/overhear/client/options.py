"""
Connection and transcription options for the live client.
"""

import os
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, validate_call
from pydantic.types import FilePath

from overhear.common import Pretty, get_logger

logger = get_logger("cfg")

DEFAULT_URL = "wss://api.deepgram.com"
DEFAULT_VERSION = "v1"
API_KEY_ENV = "DEEPGRAM_API_KEY"


class ClientOptions(BaseModel):
  """Where to connect and how to authenticate."""

  api_key: str = Field(
    default_factory=lambda: os.getenv(API_KEY_ENV, ""), validate_default=True, repr=False
  )
  """API key, sent as the websocket sub-protocol token. Defaults to $DEEPGRAM_API_KEY."""

  url: str = DEFAULT_URL
  """Base URL of the service. http(s) URLs are converted to ws(s)."""

  version: str = DEFAULT_VERSION
  """API version substituted for `:version` in endpoint paths."""

  @field_validator("api_key")
  @classmethod
  def require_api_key(cls, value: str) -> str:
    if not value.strip():
      raise ValueError(f"An API key is required. Pass api_key or set {API_KEY_ENV}.")
    return value.strip()


class LiveOptions(BaseModel):
  """
  Transcription options, sent as query parameters when the connection opens.

  The common options are declared for validation; any other option the service accepts can
  be passed as an extra keyword and is forwarded unchanged.
  """

  model_config = ConfigDict(extra="allow")

  model: str | None = None
  language: str | None = None
  encoding: str | None = None
  sample_rate: int | None = Field(default=None, gt=0)
  channels: int | None = Field(default=None, gt=0)
  multichannel: bool | None = None
  interim_results: bool | None = None
  punctuate: bool | None = None
  smart_format: bool | None = None
  diarize: bool | None = None
  endpointing: int | bool | None = None
  utterance_end_ms: int | None = Field(default=None, gt=0)
  vad_events: bool | None = None
  keywords: list[str] | None = None
  tag: list[str] | None = None

  def to_query(self) -> dict[str, Any]:
    """Return the options that were set, ready to be encoded as query parameters."""
    return self.model_dump(exclude_none=True)


@validate_call
def load_live_options_from_file(options_path: FilePath) -> LiveOptions:
  """Load and validate transcription options from a YAML file."""

  logger.info("Loading transcription options", path=str(options_path))

  try:
    with open(options_path, "r", encoding="utf-8") as file:
      options_data = yaml.safe_load(file)
  except yaml.YAMLError as e:
    raise ValueError(f"Invalid YAML in options file: {e}") from e
  except OSError as e:
    raise ValueError(f"Error reading options file: {e}") from e

  if options_data is None:
    raise ValueError("Options file is empty")

  if not isinstance(options_data, dict):
    raise ValueError("Options file must contain a YAML dictionary")

  options = LiveOptions.model_validate(options_data)
  logger.debug("Transcription options loaded", options=Pretty(options.to_query()))
  return options
