#!/usr/bin/env python3
"""
Stream an audio file to the live transcription service and print what it hears.
"""

import argparse
import asyncio
import sys
import time
from pathlib import Path

from pydantic import ValidationError

from overhear.client.emitter import LiveTranscriptionEvents
from overhear.client.live import LiveClient, SendOutcome
from overhear.client.options import ClientOptions, LiveOptions, load_live_options_from_file
from overhear.client.transport import ErrorInfo
from overhear.common import Seconds, get_logger, setup_logging
from overhear.wire import TranscriptEvent

logger = get_logger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
  parser = argparse.ArgumentParser(
    description="Stream an audio file to a live transcription service"
  )
  parser.add_argument("audio_file", type=Path, help="Audio file to stream")
  parser.add_argument("--options", type=Path, help="YAML file of transcription options")
  parser.add_argument(
    "--chunk-size", type=int, default=8192, help="Bytes sent per frame (default: 8192)"
  )
  parser.add_argument(
    "--interval",
    type=float,
    default=0.1,
    help="Seconds to wait between frames (default: 0.1)",
  )
  parser.add_argument("--interim", action="store_true", help="Print interim results too")
  parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")
  parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")

  args = parser.parse_args(argv)
  if args.chunk_size <= 0:
    parser.error("--chunk-size must be positive")
  if args.interval < 0:
    parser.error("--interval cannot be negative")
  return args


def _print_transcript(event: TranscriptEvent, interim: bool) -> None:
  text = event.transcript.strip()
  if not text:
    return
  if event.is_final:
    print(text)
  elif interim:
    print(f"… {text}")
  sys.stdout.flush()


def _log_error(info: ErrorInfo) -> None:
  logger.error(info.message, error=str(info.error) if info.error else None)


async def stream_file(
  client: LiveClient, audio_file: Path, chunk_size: int, interval: float
) -> int:
  """Stream `audio_file` through an open client. Returns the number of bytes sent."""
  sent = 0
  started = time.monotonic()

  with open(audio_file, "rb") as f:
    while chunk := f.read(chunk_size):
      if client.send(chunk) is SendOutcome.CONNECTION_NOT_OPEN:
        logger.warning("Connection closed while streaming", bytes_sent=sent)
        break
      sent += len(chunk)
      await asyncio.sleep(interval)

  logger.info("Finished streaming", bytes_sent=sent, elapsed=Seconds(time.monotonic() - started))
  return sent


async def run(args: argparse.Namespace, options: ClientOptions, live_options: LiveOptions) -> int:
  client = LiveClient(options, live_options)
  client.on(LiveTranscriptionEvents.Transcript, lambda e: _print_transcript(e, args.interim))
  client.on(LiveTranscriptionEvents.Error, _log_error)
  client.on(LiveTranscriptionEvents.Warning, lambda message: logger.warning(message))

  try:
    async with client:
      await stream_file(client, args.audio_file, args.chunk_size, args.interval)
  except ConnectionError as e:
    logger.error("Could not open connection", error=str(e))
    return 1

  close_info = client.close_info
  logger.info("Connection closed", code=close_info.code if close_info else None)
  return 0


def main(argv: list[str] | None = None) -> None:
  args = parse_args(argv)
  setup_logging(level=args.log_level.upper(), json_output=args.json_logs)

  if not args.audio_file.is_file():
    sys.exit(f"Audio file not found: {args.audio_file}")

  try:
    options = ClientOptions()
    live_options = load_live_options_from_file(args.options) if args.options else LiveOptions()
  except (ValidationError, ValueError) as e:
    sys.exit(f"Invalid configuration: {e}")

  try:
    sys.exit(asyncio.run(run(args, options, live_options)))
  except KeyboardInterrupt:
    sys.exit(130)


if __name__ == "__main__":
  main()
