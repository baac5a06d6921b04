"""Tests for logging helpers."""

from overhear.common import Pretty, Seconds
from overhear.common.logs import FloatPrecisionProcessor, hex_to_ansi_fg


class TestFloatPrecisionProcessor:
  """Test float rounding in log events."""

  def test_rounds_nested_values(self):
    processor = FloatPrecisionProcessor(digits=2)
    event = {
      "event": "transcript",
      "confidence": 0.98765,
      "words": [{"start": 0.12345, "end": [1.23456]}],
      "final": True,
      "count": 3,
    }

    result = processor(None, "info", event)

    assert result == {
      "event": "transcript",
      "confidence": 0.99,
      "words": [{"start": 0.12, "end": [1.23]}],
      "final": True,
      "count": 3,
    }

  def test_skips_excluded_fields(self):
    processor = FloatPrecisionProcessor(digits=1, not_fields=frozenset({"exact"}))
    assert processor(None, "info", {"exact": 1.2345, "rough": 1.2345}) == {
      "exact": 1.2345,
      "rough": 1.2,
    }


def test_hex_to_ansi_fg():
  assert hex_to_ansi_fg(0xFF8000) == "\x1b[38;2;255;128;0m"


def test_format_helpers():
  assert str(Seconds(1.23456)) == "1.235s"
  assert str(Pretty({"a": 1})) == "{'a': 1}"
