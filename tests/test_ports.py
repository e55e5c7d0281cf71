import typing

import mido
import pytest

import conftest
import midimcp.errors
import midimcp.ports


def test_list_ports (patch_midi: conftest.FakeMidiBus) -> None:

	registry = midimcp.ports.PortRegistry()

	assert [info.to_dict() for info in registry.list_ports()] == [
		{"name": "Dummy MIDI In", "type": "input"},
		{"name": "Dummy MIDI", "type": "output"},
		{"name": "Second MIDI", "type": "output"},
	]


def test_output_is_opened_once_and_reused (patch_midi: conftest.FakeMidiBus) -> None:

	registry = midimcp.ports.PortRegistry()

	registry.send("Dummy MIDI", [0x90, 60, 64])
	registry.send("Dummy MIDI", [0x80, 60, 64])

	assert patch_midi.opened == [("Dummy MIDI", "output")]
	assert registry.get_or_open("Dummy MIDI", midimcp.ports.OUTPUT) is registry.get_or_open("Dummy MIDI", midimcp.ports.OUTPUT)
	assert registry.is_open("Dummy MIDI", midimcp.ports.OUTPUT)
	assert not registry.is_open("Second MIDI", midimcp.ports.OUTPUT)


def test_open_failure_names_port_and_direction (patch_midi: conftest.FakeMidiBus) -> None:

	registry = midimcp.ports.PortRegistry()

	with pytest.raises(midimcp.errors.PortOpenError) as info:
		registry.get_or_open("Ghost", midimcp.ports.OUTPUT)

	assert str(info.value) == "Cannot open MIDI output port 'Ghost'"
	assert not registry.is_open("Ghost", midimcp.ports.OUTPUT)


def test_unknown_direction (patch_midi: conftest.FakeMidiBus) -> None:

	with pytest.raises(ValueError):
		midimcp.ports.PortRegistry().get_or_open("Dummy MIDI", "sideways")


def test_send_failure_raises_port_send_error (patch_midi: conftest.FakeMidiBus) -> None:

	registry = midimcp.ports.PortRegistry()
	patch_midi.failing_sends.add("Dummy MIDI")

	with pytest.raises(midimcp.errors.PortSendError) as info:
		registry.send("Dummy MIDI", [0x90, 60, 64])

	assert info.value.port == "Dummy MIDI"
	assert "device disconnected" in str(info.value)


def test_subscribe_fans_out_to_every_callback (patch_midi: conftest.FakeMidiBus) -> None:

	"""A failing callback does not stop the others from receiving the message."""

	registry = midimcp.ports.PortRegistry()
	received: typing.List[typing.List[int]] = []

	def _broken (data: typing.List[int]) -> None:
		raise RuntimeError("boom")

	registry.subscribe("Dummy MIDI In", _broken)
	registry.subscribe("Dummy MIDI In", received.append)

	patch_midi.inputs["Dummy MIDI In"].inject(mido.Message("note_on", channel=3, note=50, velocity=70))

	assert received == [[0x93, 50, 70]]
	assert patch_midi.opened == [("Dummy MIDI In", "input")]


def test_subscribe_to_missing_input (patch_midi: conftest.FakeMidiBus) -> None:

	registry = midimcp.ports.PortRegistry()

	with pytest.raises(midimcp.errors.PortOpenError) as info:
		registry.subscribe("Ghost In", lambda data: None)

	assert info.value.direction == midimcp.ports.INPUT


def test_close_closes_every_handle (patch_midi: conftest.FakeMidiBus) -> None:

	registry = midimcp.ports.PortRegistry()

	output = registry.get_or_open("Dummy MIDI", midimcp.ports.OUTPUT)
	registry.subscribe("Dummy MIDI In", lambda data: None)

	registry.close()

	assert output.closed
	assert patch_midi.inputs["Dummy MIDI In"].closed
	assert not registry.is_open("Dummy MIDI", midimcp.ports.OUTPUT)

	# A closed registry reopens on demand.
	registry.send("Dummy MIDI", [0xC0, 1])

	assert patch_midi.opened.count(("Dummy MIDI", "output")) == 2
