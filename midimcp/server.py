"""MCP server glue: tools, resources and prompts over a ``Playback`` instance.

The tool functions only describe parameters for the client and forward them
to ``Playback.dispatch()``.  Validation, defaults and scheduling all live in
the playback layer, and errors raised there reach the client as tool errors.
"""

import contextlib
import logging
import typing

from mcp.server.fastmcp import FastMCP

import midimcp.playback
import midimcp.resources


logger = logging.getLogger(__name__)


def _arguments (**kwargs: typing.Any) -> typing.Dict[str, typing.Any]:

	"""Drop parameters the client left out so the playback defaults apply."""

	return {key: value for key, value in kwargs.items() if value is not None}


def create_mcp_app (playback: midimcp.playback.Playback, name: str = "midi-mcp-server") -> FastMCP:

	"""Create the FastMCP app and register every tool, resource and prompt."""

	@contextlib.asynccontextmanager
	async def lifespan (server: FastMCP) -> typing.AsyncIterator[None]:

		try:
			yield
		finally:
			# Pending play_note releases must still reach the device.
			await playback.scheduler.drain()

	mcp = FastMCP(name, lifespan=lifespan)

	# --- Tools ---

	@mcp.tool(name="midi_list_ports")
	async def midi_list_ports () -> str:
		"""List available MIDI input and output ports."""
		return await playback.dispatch("midi_list_ports")

	@mcp.tool(name="midi_send")
	async def midi_send (port: str, bytes: typing.List[int]) -> str:
		"""Send a raw MIDI message to a specific output port.

		bytes: the MIDI bytes to send (0-255 each), e.g. [144, 60, 100] for Note On.
		Only complete, valid MIDI messages are accepted (data bytes 0-127; SysEx framed by 240 ... 247).
		"""
		return await playback.dispatch("midi_send", _arguments(port=port, bytes=bytes))

	@mcp.tool(name="midi_note_on")
	async def midi_note_on (port: str, note: int, velocity: typing.Optional[int] = None, channel: typing.Optional[int] = None) -> str:
		"""Send a Note On message. The note sustains until you send Note Off.

		note: MIDI note number 0-127 (60 = Middle C). velocity: 0-127, default 64.
		channel: 1-16, default 1.
		"""
		return await playback.dispatch("midi_note_on", _arguments(port=port, note=note, velocity=velocity, channel=channel))

	@mcp.tool(name="midi_note_off")
	async def midi_note_off (port: str, note: int, velocity: typing.Optional[int] = None, channel: typing.Optional[int] = None) -> str:
		"""Send a Note Off message to stop a playing note.

		velocity is the release velocity (0-127, default 64). channel: 1-16, default 1.
		"""
		return await playback.dispatch("midi_note_off", _arguments(port=port, note=note, velocity=velocity, channel=channel))

	@mcp.tool(name="midi_play_note")
	async def midi_play_note (
		port: str,
		note: int,
		velocity: typing.Optional[int] = None,
		duration: typing.Optional[int] = None,
		channel: typing.Optional[int] = None
	) -> str:
		"""Play a note for a duration in milliseconds (default 500).

		Non-blocking: returns once the note starts, so several notes can overlap.
		"""
		return await playback.dispatch(
			"midi_play_note",
			_arguments(port=port, note=note, velocity=velocity, duration=duration, channel=channel)
		)

	@mcp.tool(name="midi_control_change")
	async def midi_control_change (port: str, controller: int, value: int, channel: typing.Optional[int] = None) -> str:
		"""Send a Control Change (CC) message.

		controller: 0-127 (1 = Mod Wheel, 7 = Volume, 64 = Sustain). value: 0-127.
		"""
		return await playback.dispatch(
			"midi_control_change",
			_arguments(port=port, controller=controller, value=value, channel=channel)
		)

	@mcp.tool(name="midi_program_change")
	async def midi_program_change (port: str, program: int, channel: typing.Optional[int] = None) -> str:
		"""Send a Program Change message to select an instrument/preset (program 0-127)."""
		return await playback.dispatch("midi_program_change", _arguments(port=port, program=program, channel=channel))

	@mcp.tool(name="midi_pitch_bend")
	async def midi_pitch_bend (port: str, value: int, channel: typing.Optional[int] = None) -> str:
		"""Send a Pitch Bend message (value -8192 to 8191, 0 = no bend)."""
		return await playback.dispatch("midi_pitch_bend", _arguments(port=port, value=value, channel=channel))

	@mcp.tool(name="midi_play_sequence")
	async def midi_play_sequence (port: str, notes: typing.List[typing.Dict[str, typing.Any]], channel: typing.Optional[int] = None) -> str:
		"""Play notes one after another; each finishes before the next begins.

		notes: list of {"note": 0-127, "velocity": 0-127 (default 64), "duration": ms (default 500)}.
		"""
		return await playback.dispatch("midi_play_sequence", _arguments(port=port, notes=notes, channel=channel))

	@mcp.tool(name="midi_play_chord")
	async def midi_play_chord (
		port: str,
		notes: typing.List[int],
		velocity: typing.Optional[int] = None,
		duration: typing.Optional[int] = None,
		channel: typing.Optional[int] = None
	) -> str:
		"""Play multiple notes simultaneously as a chord for a duration in ms (default 500)."""
		return await playback.dispatch(
			"midi_play_chord",
			_arguments(port=port, notes=notes, velocity=velocity, duration=duration, channel=channel)
		)

	@mcp.tool(name="midi_play_song")
	async def midi_play_song (port: str, tracks: typing.List[typing.Dict[str, typing.Any]], bpm: typing.Optional[float] = None) -> str:
		"""Play a song: several tracks in parallel with musical timing.

		bpm: 20-300, default 120. Each track: {"notes": [...], "port"?: str,
		"channel"?: 1-16, "instrument"?: 0-127 program sent once, "loop"?: >= 1}.
		Each note: {"note": number or list of numbers for a chord,
		"duration": "whole" | "half" | "quarter" | "eighth" | "sixteenth" or a number of beats,
		"velocity"?: 0-127, "cc"?: {"controller": 0-127, "value": 0-127}}.
		"""
		return await playback.dispatch("midi_play_song", _arguments(port=port, tracks=tracks, bpm=bpm))

	@mcp.tool(name="midi_panic")
	async def midi_panic (port: str) -> str:
		"""Silence a port: All Notes Off and All Sound Off on every channel."""
		return await playback.dispatch("midi_panic", _arguments(port=port))

	# --- Resources ---

	def _reader (uri: str) -> typing.Callable[[], typing.Awaitable[str]]:

		async def read () -> str:
			return await midimcp.resources.read(uri, playback)

		return read

	for resource in midimcp.resources.RESOURCES:
		mcp.resource(
			resource.uri,
			name = resource.name,
			description = resource.description,
			mime_type = resource.mime_type
		)(_reader(resource.uri))

	# --- Prompts ---

	@mcp.prompt(name="midi_debug", description="Help the user debug their MIDI setup")
	async def midi_debug () -> str:
		return await midimcp.resources.debug_prompt(playback)

	logger.info(f"MCP app {name!r} ready with {len(playback.operations)} tools")

	return mcp
