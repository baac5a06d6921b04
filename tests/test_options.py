"""Tests for client and transcription options."""

import pytest

from overhear.client.options import (
  API_KEY_ENV,
  ClientOptions,
  LiveOptions,
  load_live_options_from_file,
)


@pytest.fixture
def fake_filesystem(fs):
  """Variable name 'fs' causes a pylint warning. Provide a longer name
  acceptable to pylint for use in tests.
  """
  yield fs


class TestClientOptions:
  """Test ClientOptions defaults and validation."""

  def test_defaults(self, monkeypatch):
    monkeypatch.setenv(API_KEY_ENV, "env-key")
    options = ClientOptions()

    assert options.api_key == "env-key"
    assert options.url == "wss://api.deepgram.com"
    assert options.version == "v1"

  def test_explicit_key_wins(self, monkeypatch):
    monkeypatch.setenv(API_KEY_ENV, "env-key")
    assert ClientOptions(api_key="explicit").api_key == "explicit"

  def test_missing_key_raises(self, monkeypatch):
    monkeypatch.delenv(API_KEY_ENV, raising=False)
    with pytest.raises(ValueError, match="An API key is required"):
      ClientOptions()

  def test_key_is_not_in_repr(self):
    assert "secret-value" not in repr(ClientOptions(api_key="secret-value"))


class TestLiveOptions:
  """Test LiveOptions validation and query rendering."""

  def test_to_query_omits_unset(self):
    options = LiveOptions(model="nova-2", smart_format=True)
    assert options.to_query() == {"model": "nova-2", "smart_format": True}

  def test_extra_options_are_forwarded(self):
    options = LiveOptions.model_validate({"model": "nova-2", "filler_words": True})
    assert options.to_query() == {"model": "nova-2", "filler_words": True}

  def test_endpointing_accepts_bool_or_int(self):
    assert LiveOptions(endpointing=False).endpointing is False
    assert LiveOptions(endpointing=300).endpointing == 300

  def test_positive_values(self):
    with pytest.raises(ValueError):
      LiveOptions(sample_rate=0)

    with pytest.raises(ValueError):
      LiveOptions(channels=-1)

    with pytest.raises(ValueError):
      LiveOptions(utterance_end_ms=0)


class TestLoadLiveOptionsFromFile:
  """Test loading options from YAML."""

  def test_load(self, fake_filesystem):
    fake_filesystem.create_file(
      "/etc/overhear/live.yaml",
      contents="model: nova-2\ninterim_results: true\nkeywords:\n  - alpha\n  - beta\n",
    )

    options = load_live_options_from_file("/etc/overhear/live.yaml")

    assert options.model == "nova-2"
    assert options.interim_results is True
    assert options.keywords == ["alpha", "beta"]

  def test_missing_file(self, fake_filesystem):
    with pytest.raises(ValueError):
      load_live_options_from_file("/nope.yaml")

  def test_empty_file(self, fake_filesystem):
    fake_filesystem.create_file("/empty.yaml", contents="")
    with pytest.raises(ValueError, match="Options file is empty"):
      load_live_options_from_file("/empty.yaml")

  def test_not_a_dictionary(self, fake_filesystem):
    fake_filesystem.create_file("/list.yaml", contents="- model\n- language\n")
    with pytest.raises(ValueError, match="must contain a YAML dictionary"):
      load_live_options_from_file("/list.yaml")

  def test_invalid_yaml(self, fake_filesystem):
    fake_filesystem.create_file("/bad.yaml", contents="model: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
      load_live_options_from_file("/bad.yaml")

  def test_invalid_values(self, fake_filesystem):
    fake_filesystem.create_file("/bad-values.yaml", contents="sample_rate: -5\n")
    with pytest.raises(ValueError):
      load_live_options_from_file("/bad-values.yaml")
