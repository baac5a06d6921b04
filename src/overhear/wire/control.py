"""
Outbound control messages.

Control messages are JSON text frames sent alongside the audio stream. Each one is complete
on its own; the client keeps no state between them.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ConfigureMessage(BaseModel):
  """Changes processing options for the remainder of the stream."""

  type: Literal["Configure"] = "Configure"
  processors: dict[str, Any] = Field(description="Processing options to apply")


class KeepAliveMessage(BaseModel):
  """Keeps the connection open while no audio is being sent."""

  type: Literal["KeepAlive"] = "KeepAlive"


class CloseStreamMessage(BaseModel):
  """Tells the service no more audio is coming. It flushes results and closes the socket."""

  type: Literal["CloseStream"] = "CloseStream"
