"""Tests for the wire codec."""

import json

import pytest

from overhear.wire import (
  CloseStreamMessage,
  ConfigureMessage,
  KeepAliveMessage,
  MetadataEvent,
  TranscriptEvent,
  UtteranceEndEvent,
  deserialize_event,
  serialize_message,
)

TRANSCRIPT_FRAME = {
  "type": "Transcript",
  "channel_index": [0, 1],
  "duration": 1.02,
  "start": 0.0,
  "is_final": True,
  "speech_final": False,
  "channel": {
    "alternatives": [
      {
        "transcript": "hello world",
        "confidence": 0.98,
        "words": [
          {"word": "hello", "start": 0.1, "end": 0.4, "confidence": 0.99},
          {
            "word": "world",
            "start": 0.5,
            "end": 0.9,
            "confidence": 0.97,
            "punctuated_word": "world.",
          },
        ],
      }
    ]
  },
  "metadata": {"request_id": "req-1", "model_info": {"name": "general", "version": "2024"}},
}


class TestSerializeMessage:
  """Test control message serialization."""

  def test_keep_alive(self):
    assert serialize_message(KeepAliveMessage()) == '{"type":"KeepAlive"}'

  def test_close_stream(self):
    assert serialize_message(CloseStreamMessage()) == '{"type":"CloseStream"}'

  def test_configure_nests_processors(self):
    message = ConfigureMessage(processors={"keywords": ["alpha", "beta"], "numerals": False})

    assert json.loads(serialize_message(message)) == {
      "type": "Configure",
      "processors": {"keywords": ["alpha", "beta"], "numerals": False},
    }

  def test_configure_type_comes_first(self):
    assert serialize_message(ConfigureMessage(processors={})).startswith('{"type":"Configure"')


class TestDeserializeEvent:
  """Test inbound frame parsing."""

  def test_full_transcript(self):
    event = deserialize_event(json.dumps(TRANSCRIPT_FRAME))

    assert isinstance(event, TranscriptEvent)
    assert event.transcript == "hello world"
    assert event.is_final is True
    assert event.channel.alternatives[0].words[1].punctuated_word == "world."
    assert event.metadata.model_info.name == "general"
    assert event.to_frame() == TRANSCRIPT_FRAME

  def test_transcript_without_alternatives_is_empty(self):
    event = deserialize_event('{"type":"Transcript","channel":{"alternatives":[]}}')
    assert event.transcript == ""

  def test_unknown_keys_are_kept(self):
    event = deserialize_event('{"type":"Metadata","request_id":"r","brand_new":{"a":1}}')

    assert isinstance(event, MetadataEvent)
    assert event.to_frame() == {"type": "Metadata", "request_id": "r", "brand_new": {"a": 1}}

  def test_accepts_bytes(self):
    event = deserialize_event(b'{"type":"UtteranceEnd","channel":[0,1],"last_word_end":3.1}')

    assert isinstance(event, UtteranceEndEvent)
    assert event.last_word_end == 3.1

  @pytest.mark.parametrize("frame", ['{"type":"Results"}', "{}", "null", '"Transcript"', "[]"])
  def test_unforwarded_frames_return_none(self, frame):
    assert deserialize_event(frame) is None

  @pytest.mark.parametrize("frame", ["not-json", "{", b"\xff\xfe"])
  def test_invalid_frames_raise_value_error(self, frame):
    with pytest.raises(ValueError):
      deserialize_event(frame)

  def test_word_missing_required_fields_fails(self):
    frame = {
      "type": "Transcript",
      "channel": {"alternatives": [{"transcript": "hi", "words": [{"word": "hi"}]}]},
    }
    with pytest.raises(ValueError):
      deserialize_event(json.dumps(frame))

  def test_deeply_nested_frame_raises_value_error(self):
    frame = '{"type":"Transcript","channel":' + "[" * 100_000 + "]" * 100_000 + "}"
    with pytest.raises(ValueError, match="nested too deeply"):
      deserialize_event(frame)
