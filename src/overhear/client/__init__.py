"""
Overhear client library.

Python client for streaming audio to a live transcription service.
"""

from overhear.client.emitter import EventEmitter, LiveTranscriptionEvents
from overhear.client.live import LiveClient, SendOutcome
from overhear.client.options import ClientOptions, LiveOptions, load_live_options_from_file
from overhear.client.transport import (
  CloseInfo,
  ErrorInfo,
  ReadyState,
  Transport,
  WebSocketTransport,
)
from overhear.client.url import build_request_url

__all__ = [
  "ClientOptions",
  "CloseInfo",
  "ErrorInfo",
  "EventEmitter",
  "LiveClient",
  "LiveOptions",
  "LiveTranscriptionEvents",
  "ReadyState",
  "SendOutcome",
  "Transport",
  "WebSocketTransport",
  "build_request_url",
  "load_live_options_from_file",
]
