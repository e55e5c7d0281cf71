import json

import pytest

import midimcp.errors
import midimcp.playback
import midimcp.reference
import midimcp.resources


def test_note_names () -> None:

	assert midimcp.reference.note_name(60) == "C4"
	assert midimcp.reference.note_name(0) == "C-1"
	assert midimcp.reference.note_name(61) == "C#4"
	assert midimcp.reference.note_name(127) == "G9"


def test_note_frequency () -> None:

	assert midimcp.reference.note_frequency(69) == 440.0
	assert midimcp.reference.note_frequency(81) == pytest.approx(880.0)


@pytest.mark.asyncio
async def test_notes_resource (playback: midimcp.playback.Playback) -> None:

	notes = json.loads(await midimcp.resources.read(midimcp.resources.NOTES, playback))

	assert len(notes) == 128
	assert notes[60] == {"number": 60, "name": "C4", "frequency": 261.63}
	assert notes[69]["frequency"] == 440.0


@pytest.mark.asyncio
async def test_general_midi_resource (playback: midimcp.playback.Playback) -> None:

	instruments = json.loads(await midimcp.resources.read(midimcp.resources.GENERAL_MIDI, playback))

	assert len(instruments) == 128
	assert instruments["0"] == "Acoustic Grand Piano"


@pytest.mark.asyncio
async def test_controllers_resource (playback: midimcp.playback.Playback) -> None:

	controllers = json.loads(await midimcp.resources.read(midimcp.resources.CONTROLLERS, playback))

	assert "7" in controllers
	assert "64" in controllers


@pytest.mark.asyncio
async def test_ports_resource (playback: midimcp.playback.Playback) -> None:

	ports = json.loads(await midimcp.resources.read(midimcp.resources.PORTS, playback))

	assert {"name": "Dummy MIDI", "type": "output"} in ports


@pytest.mark.asyncio
async def test_logs_resource (playback: midimcp.playback.Playback) -> None:

	assert await midimcp.resources.read(midimcp.resources.LOGS, playback) == ""

	await playback.note_on({"port": "Dummy MIDI", "note": 60, "velocity": 100})

	text = await midimcp.resources.read(midimcp.resources.LOGS, playback)

	assert text.endswith("OUT Dummy MIDI: 0x90 0x3C 0x64")


@pytest.mark.asyncio
async def test_unknown_resource (playback: midimcp.playback.Playback) -> None:

	with pytest.raises(midimcp.errors.UnknownResourceError) as info:
		await midimcp.resources.read("midi://nope", playback)

	assert str(info.value) == "Resource not found: 'midi://nope'"


@pytest.mark.asyncio
async def test_debug_prompt_includes_ports_and_recent_logs (playback: midimcp.playback.Playback) -> None:

	for note in range(12):
		await playback.note_on({"port": "Dummy MIDI", "note": note})

	text = await midimcp.resources.debug_prompt(playback)

	assert "Available Ports:" in text
	assert "Dummy MIDI In" in text
	assert text.count("OUT Dummy MIDI") == midimcp.resources.DEBUG_LOG_LINES
