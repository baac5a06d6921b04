"""Centralized logging configuration for Overhear using structlog."""

import logging
import os
import time
from typing import Any

import structlog
from structlog.dev import BRIGHT, DIM, RESET_ALL, Column, ConsoleRenderer, KeyValueColumnFormatter
from structlog.typing import EventDict, Processor, WrappedLogger

_PROGRAM_START_TIME = time.time()

_RESET = "\x1b[0m"


def hex_to_ansi_fg(hex_color: int) -> str:
  """Convert hex color (e.g., 0xad8a89) to ANSI 24-bit foreground escape code."""
  r = (hex_color >> 16) & 0xFF
  g = (hex_color >> 8) & 0xFF
  b = hex_color & 0xFF
  return f"\x1b[38;2;{r};{g};{b}m"


_LEVEL_LABELS = {
  "debug": ("dbug", 0x908CAA, 0x827E99),
  "info": ("info", 0x9CCFD8, 0x8CBAC2),
  "warning": ("warn", 0xF6C177, 0xDDAE6B),
  "error": ("eror", 0xEB6F92, 0xD46483),
  "exception": ("exc!", 0xEB6F92, 0xD46483),
  "critical": ("crit", 0xEB6F92, 0xD46483),
}


class FloatPrecisionProcessor:
  """
  A structlog processor that rounds floats, both as single values and inside (nested) lists
  and dicts. Confidence scores and timestamps from the service carry far more digits than
  are useful in a log line.
  """

  def __init__(self, digits: int = 3, not_fields: frozenset[str] = frozenset()):
    """
    :param digits: The number of digits to round to
    :param not_fields: Fields that are left untouched
    """
    self.digits = digits
    self.not_fields = not_fields

  def _round(self, value: Any) -> Any:
    if isinstance(value, float):
      return round(value, self.digits)
    if isinstance(value, list):
      return [self._round(item) for item in value]
    if isinstance(value, dict):
      return {k: self._round(v) for k, v in value.items()}
    return value

  def __call__(self, _: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    for key, value in event_dict.items():
      if key in self.not_fields or isinstance(value, bool):
        continue
      event_dict[key] = self._round(value)
    return event_dict


def _relative_time_processor(_logger: WrappedLogger, _method_name: str, event_dict: EventDict):
  """Add a timestamp relative to program start, formatted as [h:][m:]ss.mmm."""
  elapsed = time.time() - _PROGRAM_START_TIME

  hours = int(elapsed // 3600)
  minutes = int((elapsed % 3600) // 60)
  seconds = elapsed % 60

  gray = "\x1b[2m"
  dark_gray = "\x1b[90m"
  separator = f"{gray}:{_RESET}"

  hours_str = f"{gray}{hours:02d}{_RESET}{separator}" if hours != 0 else ""
  minutes_str = f"{gray}{minutes:02d}{_RESET}{separator}" if minutes != 0 or hours != 0 else ""
  seconds_str = f"{gray}{seconds:06.3f}{_RESET}"

  event_dict["timestamp"] = f"{dark_gray}+{_RESET}{hours_str}{minutes_str}{seconds_str}"
  return event_dict


def _compact_level_processor(_logger: WrappedLogger, _method_name: str, event_dict: EventDict):
  """Convert log levels to a compact, colored 4-character label."""
  level = event_dict.get("level")
  if level in _LEVEL_LABELS:
    label, text_color, bracket_color = _LEVEL_LABELS[level]
    bracket = hex_to_ansi_fg(bracket_color)
    text = f"{hex_to_ansi_fg(text_color)}{label}{_RESET}"
    event_dict["level"] = f"{bracket}[{_RESET}{text}{bracket}]{_RESET}"
  return event_dict


def _console_renderer() -> ConsoleRenderer:
  logger_name_formatter = KeyValueColumnFormatter(
    key_style=None,
    value_style=hex_to_ansi_fg(0x7D6B95),
    reset_style=RESET_ALL,
    value_repr=str,
    prefix="[",
    postfix="]",
  )

  return ConsoleRenderer(
    colors=True,
    columns=[
      Column(
        "",
        KeyValueColumnFormatter(
          key_style=hex_to_ansi_fg(0x6E6A86),
          value_style=hex_to_ansi_fg(0xF6C177),
          reset_style=RESET_ALL,
          value_repr=str,
        ),
      ),
      Column(
        "timestamp",
        KeyValueColumnFormatter(
          key_style=None, value_style=DIM, reset_style=RESET_ALL, value_repr=str
        ),
      ),
      Column(
        "level",
        KeyValueColumnFormatter(
          key_style=None, value_style="", reset_style=RESET_ALL, value_repr=str
        ),
      ),
      Column("logger_name", logger_name_formatter),
      Column("logger", logger_name_formatter),
      Column(
        "event",
        KeyValueColumnFormatter(
          key_style=None, value_style=BRIGHT, reset_style=RESET_ALL, value_repr=str, width=30
        ),
      ),
    ],
  )


def setup_logging(
  level: str = "INFO", json_output: bool = False, correlation_id: str | None = None
) -> None:
  """Configure structured logging for the application."""

  shared_processors: list[Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
  ]
  if not json_output:
    shared_processors.append(_compact_level_processor)
  shared_processors += [
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.stdlib.ExtraAdder(),
    FloatPrecisionProcessor(digits=3),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
  ]

  if correlation_id:
    shared_processors.insert(0, structlog.contextvars.merge_contextvars)
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

  if json_output:
    shared_processors.append(structlog.processors.TimeStamper(fmt="iso"))
    log_renderer: Processor = structlog.processors.JSONRenderer()
  else:
    shared_processors.append(_relative_time_processor)
    log_renderer = _console_renderer()

  structlog.configure(
    processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
  )

  formatter = structlog.stdlib.ProcessorFormatter(
    foreign_pre_chain=shared_processors,
    processors=[
      structlog.stdlib.ProcessorFormatter.remove_processors_meta,
      log_renderer,
    ],
  )

  handler = logging.StreamHandler()
  handler.setFormatter(formatter)
  root_logger = logging.getLogger()
  root_logger.addHandler(handler)
  root_logger.setLevel(level)

  # Propagate websockets' logs, but only the noteworthy ones
  websockets_logger = logging.getLogger("websockets")
  websockets_logger.handlers.clear()
  websockets_logger.setLevel(logging.WARNING)
  websockets_logger.propagate = True


def get_logger(
  name: str | None = None, *args: Any, **initial_values: Any
) -> structlog.stdlib.BoundLogger:
  """Get a structured logger instance."""
  return structlog.get_logger(*([name] + list(args)), **initial_values)


def setup_logging_from_env() -> None:
  """Setup logging using environment variables."""
  log_level = os.getenv("LOG_LEVEL", "INFO").upper()
  json_output = os.getenv("JSON_LOGS", "false").lower() in ("true", "1", "yes", "on")
  correlation_id = os.getenv("CORRELATION_ID")

  setup_logging(level=log_level, json_output=json_output, correlation_id=correlation_id)
