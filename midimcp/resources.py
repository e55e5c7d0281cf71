"""Read-only resources: the activity log, the port list and the reference tables.

Resources are addressed by ``midi://`` URIs.  Reading one never touches a
device beyond listing ports.
"""

import dataclasses
import json
import typing

import midimcp.errors
import midimcp.playback
import midimcp.reference


LOGS = "midi://logs"
PORTS = "midi://ports"
NOTES = "midi://reference/notes"
CONTROLLERS = "midi://reference/controllers"
GENERAL_MIDI = "midi://reference/general-midi"

DEBUG_LOG_LINES = 10


@dataclasses.dataclass(frozen=True)
class Resource:

	uri: str
	name: str
	mime_type: str
	description: str


RESOURCES: typing.Tuple[Resource, ...] = (
	Resource(LOGS, "Recent MIDI Logs", "text/plain", "A log of the last 100 MIDI messages sent or received"),
	Resource(PORTS, "Available MIDI Ports", "application/json", "List of all available MIDI input and output ports"),
	Resource(NOTES, "MIDI Note Reference", "application/json", "Reference table of MIDI note numbers to musical notes"),
	Resource(CONTROLLERS, "MIDI Controller Reference", "application/json", "Reference table of common MIDI control change (CC) numbers"),
	Resource(GENERAL_MIDI, "General MIDI Instrument List", "application/json", "List of General MIDI program numbers and instrument names"),
)


async def read (uri: str, playback: midimcp.playback.Playback) -> str:

	"""Return the text content of a resource.

	Raises ``UnknownResourceError`` for any URI not in ``RESOURCES``.
	"""

	if uri == LOGS:
		return playback.activity_log.render()

	if uri == PORTS:
		return await playback.list_ports()

	if uri == NOTES:
		return json.dumps(midimcp.reference.note_table(), indent=2)

	if uri == CONTROLLERS:
		return json.dumps(midimcp.reference.controller_table(), indent=2)

	if uri == GENERAL_MIDI:
		return json.dumps(midimcp.reference.instrument_table(), indent=2)

	raise midimcp.errors.UnknownResourceError(uri)


async def debug_prompt (playback: midimcp.playback.Playback) -> str:

	"""Build the text of the ``midi_debug`` prompt from live ports and recent traffic."""

	ports = await playback.list_ports()
	logs = playback.activity_log.render(limit=DEBUG_LOG_LINES)

	return (
		"I need help debugging my MIDI setup. Here is the current state:\n"
		"\n"
		f"Available Ports:\n{ports}\n"
		"\n"
		f"Recent Logs:\n{logs}\n"
		"\n"
		"Please analyze the ports and logs and tell me if anything looks wrong."
	)
