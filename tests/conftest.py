import dataclasses
import time
import typing

import mido
import pytest

import midimcp.activity_log
import midimcp.playback
import midimcp.ports


OUTPUT_NAMES = ["Dummy MIDI", "Second MIDI"]
INPUT_NAMES = ["Dummy MIDI In"]


@dataclasses.dataclass
class SentMessage:

	"""One message captured by a fake output."""

	port: str
	data: typing.List[int]
	time: float


class FakeMidiBus:

	"""Records everything sent to fake outputs, in global order, with timestamps."""

	def __init__ (self) -> None:

		self.sent: typing.List[SentMessage] = []
		self.opened: typing.List[typing.Tuple[str, str]] = []
		self.inputs: typing.Dict[str, "FakeMidiIn"] = {}
		self.failing_sends: typing.Set[str] = set()

	def messages (self, port: typing.Optional[str] = None) -> typing.List[typing.List[int]]:

		"""Return the raw bytes sent, optionally for one port only."""

		return [m.data for m in self.sent if port is None or m.port == port]

	def statuses (self, port: typing.Optional[str] = None) -> typing.List[int]:

		return [data[0] for data in self.messages(port)]


class FakeMidiOut:

	"""Minimal MIDI output stub that records to the bus."""

	def __init__ (self, name: str, bus: FakeMidiBus) -> None:

		self.name = name
		self.bus = bus
		self.closed = False

	def send (self, message: mido.Message) -> None:

		if self.name in self.bus.failing_sends:
			raise OSError("device disconnected")

		self.bus.sent.append(SentMessage(port=self.name, data=message.bytes(), time=time.perf_counter()))

	def close (self) -> None:

		self.closed = True


class FakeMidiIn:

	"""Minimal MIDI input stub for tests."""

	def __init__ (self, callback: typing.Optional[typing.Callable] = None) -> None:

		"""Store the callback for injecting test messages."""

		self.callback = callback
		self.closed = False

	def close (self) -> None:

		self.closed = True

	def inject (self, message: mido.Message) -> None:

		"""Simulate receiving a MIDI message by calling the stored callback."""

		if self.callback is not None:
			self.callback(message)


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> FakeMidiBus:

	"""Patch mido so only the fake devices exist; opening any other name fails."""

	bus = FakeMidiBus()

	def _open_output (name: str, **kwargs: typing.Any) -> FakeMidiOut:

		if name not in OUTPUT_NAMES:
			raise OSError(f"unknown port {name!r}")

		bus.opened.append((name, "output"))
		return FakeMidiOut(name, bus)

	def _open_input (name: str, callback: typing.Optional[typing.Callable] = None, **kwargs: typing.Any) -> FakeMidiIn:

		if name not in INPUT_NAMES:
			raise OSError(f"unknown port {name!r}")

		bus.opened.append((name, "input"))
		fake = FakeMidiIn(callback=callback)
		bus.inputs[name] = fake
		return fake

	monkeypatch.setattr(mido, "get_output_names", lambda: list(OUTPUT_NAMES))
	monkeypatch.setattr(mido, "get_input_names", lambda: list(INPUT_NAMES))
	monkeypatch.setattr(mido, "open_output", _open_output)
	monkeypatch.setattr(mido, "open_input", _open_input)

	return bus


@pytest.fixture
def playback (patch_midi: FakeMidiBus) -> midimcp.playback.Playback:

	"""A playback façade over the fake devices."""

	return midimcp.playback.Playback(midimcp.ports.PortRegistry(), midimcp.activity_log.ActivityLog())
