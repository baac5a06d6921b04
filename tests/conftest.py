import pytest

from overhear.client.live import LiveClient
from overhear.client.options import ClientOptions

from .mocks import EventRecorder, MockTransport


class LiveHarness:
  """A LiveClient wired to a MockTransport, with every event recorded."""

  def __init__(self, transcription_options=None, endpoint: str = ":version/listen"):
    self.transports: list[MockTransport] = []
    self.client = LiveClient(
      ClientOptions(api_key="test-key"),
      transcription_options,
      endpoint,
      transport_factory=self._factory,
    )
    self.transport = self.transports[0]
    self.recorder = EventRecorder(self.client)

  def _factory(self, url: str, subprotocols: list[str]) -> MockTransport:
    transport = MockTransport(url, subprotocols)
    self.transports.append(transport)
    return transport


@pytest.fixture
def harness() -> LiveHarness:
  return LiveHarness()


@pytest.fixture
def open_harness(harness: LiveHarness) -> LiveHarness:
  harness.transport.open()
  harness.recorder.events.clear()
  return harness
