"""The playback façade: every operation a client can invoke.

Each operation validates its payload, applies the documented defaults,
converts the client's 1-16 channel to the wire's 0-15, and either sends
immediately or hands a plan to the scheduler.  Every successful send is
mirrored into the activity log.

Two shapes of call exist:

- ``play_note`` is fire-and-continue.  It returns straight after the note-on,
  and the note-off is sent later by a detached task.  Overlapping notes are
  fine.
- Everything else completes after its send, or after its whole plan
  (``play_sequence``, ``play_chord``, ``play_song``).

``dispatch()`` maps MCP tool names to these methods::

    await playback.dispatch("midi_play_chord", {"port": "Synth", "notes": [60, 64, 67]})
"""

import json
import logging
import typing

import midimcp.activity_log
import midimcp.codec
import midimcp.constants
import midimcp.constants.controllers
import midimcp.constants.durations
import midimcp.constants.velocity
import midimcp.errors
import midimcp.ports
import midimcp.scheduler
import midimcp.song
import midimcp.timing
import midimcp.validation


logger = logging.getLogger(__name__)

Payload = typing.Mapping[str, typing.Any]


def _channel (payload: Payload) -> int:

	"""Read the optional client channel (1-16, default 1)."""

	return midimcp.validation.integer(
		payload, "channel",
		midimcp.constants.MIN_CHANNEL,
		midimcp.constants.MAX_CHANNEL,
		default = midimcp.constants.DEFAULT_CHANNEL
	)


def _data (payload: Payload, field: str, default: typing.Any = midimcp.validation.REQUIRED) -> int:

	"""Read a 7-bit data field (note, velocity, controller, value, program)."""

	return midimcp.validation.integer(
		payload, field,
		midimcp.constants.MIN_DATA_VALUE,
		midimcp.constants.MAX_DATA_VALUE,
		default = default
	)


def _velocity (payload: Payload) -> int:

	return _data(payload, "velocity", default=midimcp.constants.velocity.DEFAULT_VELOCITY)


def _duration_ms (payload: Payload) -> int:

	return midimcp.validation.integer(payload, "duration", 1, default=midimcp.constants.durations.DEFAULT_DURATION_MS)


def song_timelines (song: midimcp.song.Song) -> typing.List[midimcp.scheduler.Timeline]:

	"""Resolve a song's musical timing into one scheduler timeline per track."""

	beat_ms = song.beat_ms
	timelines: typing.List[midimcp.scheduler.Timeline] = []

	for track in song.tracks:

		steps = [
			midimcp.scheduler.Step(
				pitches = event.pitches,
				hold_ms = midimcp.timing.resolve(event.duration, beat_ms),
				velocity = event.velocity,
				cc = (event.cc.controller, event.cc.value) if event.cc is not None else None
			)
			for event in track.events
		]

		timelines.append(midimcp.scheduler.Timeline(
			port = song.port_for(track),
			channel = midimcp.codec.to_internal_channel(track.channel),
			steps = steps,
			program = track.instrument,
			loops = track.loop
		))

	return timelines


class Playback:

	"""
	Validated MIDI operations over a port registry and an activity log.
	"""

	def __init__ (
		self,
		registry: midimcp.ports.PortRegistry,
		activity_log: typing.Optional[midimcp.activity_log.ActivityLog] = None
	) -> None:

		self.registry = registry
		self.activity_log = activity_log if activity_log is not None else midimcp.activity_log.ActivityLog()
		self.scheduler = midimcp.scheduler.Scheduler(self._send)
		self._listening: typing.Set[str] = set()

		self._operations: typing.Dict[str, typing.Callable[[Payload], typing.Awaitable[str]]] = {
			"midi_list_ports": self.list_ports,
			"midi_send": self.send_raw,
			"midi_note_on": self.note_on,
			"midi_note_off": self.note_off,
			"midi_play_note": self.play_note,
			"midi_control_change": self.control_change,
			"midi_program_change": self.program_change,
			"midi_pitch_bend": self.pitch_bend,
			"midi_play_sequence": self.play_sequence,
			"midi_play_chord": self.play_chord,
			"midi_play_song": self.play_song,
			"midi_panic": self.panic,
		}

	@property
	def operations (self) -> typing.List[str]:

		return list(self._operations)

	async def dispatch (self, operation: str, arguments: typing.Optional[Payload] = None) -> str:

		"""Invoke an operation by its tool name."""

		handler = self._operations.get(operation)

		if handler is None:
			raise midimcp.errors.UnknownOperationError(operation)

		logger.debug(f"Dispatching {operation} with {arguments!r}")

		return await handler(arguments or {})

	def _send (self, port: str, data: typing.Sequence[int]) -> None:

		"""Deliver one message and record it as outgoing traffic."""

		self.registry.send(port, data)
		self.activity_log.record(midimcp.activity_log.OUT, port, data)

	# Input monitoring

	def listen (self, port: str) -> None:

		"""Mirror every message received on an input port into the activity log."""

		if port in self._listening:
			return

		def _on_input (data: typing.List[int]) -> None:
			self.activity_log.record(midimcp.activity_log.IN, port, data)

		self.registry.subscribe(port, _on_input)
		self._listening.add(port)

		logger.info(f"Listening to MIDI input: {port}")

	def listen_all_inputs (self) -> typing.List[str]:

		"""Subscribe to every available input; ports that fail to open are skipped."""

		for info in self.registry.list_ports():

			if info.type != midimcp.ports.INPUT:
				continue

			try:
				self.listen(info.name)
			except midimcp.errors.PortOpenError as exc:
				logger.warning(f"Failed to listen to {info.name!r}: {exc}")

		return sorted(self._listening)

	# Read surfaces

	async def list_ports (self, payload: typing.Optional[Payload] = None) -> str:

		"""Return the available ports as a JSON list of ``{name, type}``."""

		return json.dumps([info.to_dict() for info in self.registry.list_ports()], indent=2)

	# Immediate-mode operations

	async def send_raw (self, payload: Payload) -> str:

		port = midimcp.validation.require_port(payload)
		data = midimcp.validation.byte_list(payload, "bytes")

		self._send(port, data)

		return f"Sent MIDI message to {port}"

	async def note_on (self, payload: Payload) -> str:

		port = midimcp.validation.require_port(payload)
		note = _data(payload, "note")
		velocity = _velocity(payload)
		channel = _channel(payload)

		self._send(port, midimcp.codec.note_on(midimcp.codec.to_internal_channel(channel), note, velocity))

		return f"Note On: note {note}, velocity {velocity}, channel {channel}"

	async def note_off (self, payload: Payload) -> str:

		port = midimcp.validation.require_port(payload)
		note = _data(payload, "note")
		velocity = _velocity(payload)
		channel = _channel(payload)

		self._send(port, midimcp.codec.note_off(midimcp.codec.to_internal_channel(channel), note, velocity))

		return f"Note Off: note {note}, velocity {velocity}, channel {channel}"

	async def control_change (self, payload: Payload) -> str:

		port = midimcp.validation.require_port(payload)
		controller = _data(payload, "controller")
		value = _data(payload, "value")
		channel = _channel(payload)

		self._send(port, midimcp.codec.control_change(midimcp.codec.to_internal_channel(channel), controller, value))

		return f"CC: controller {controller}, value {value}, channel {channel}"

	async def program_change (self, payload: Payload) -> str:

		port = midimcp.validation.require_port(payload)
		program = _data(payload, "program")
		channel = _channel(payload)

		self._send(port, midimcp.codec.program_change(midimcp.codec.to_internal_channel(channel), program))

		return f"Program Change: program {program}, channel {channel}"

	async def pitch_bend (self, payload: Payload) -> str:

		port = midimcp.validation.require_port(payload)
		value = midimcp.validation.integer(payload, "value", midimcp.constants.MIN_PITCH_BEND, midimcp.constants.MAX_PITCH_BEND)
		channel = _channel(payload)

		self._send(port, midimcp.codec.pitch_bend(midimcp.codec.to_internal_channel(channel), value))

		return f"Pitch Bend: {value}, channel {channel}"

	async def panic (self, payload: Payload) -> str:

		"""Send All Notes Off and All Sound Off on all 16 channels of a port."""

		port = midimcp.validation.require_port(payload)

		logger.info(f"Panic: sending all notes off to {port!r}")

		for channel in range(midimcp.constants.MAX_CHANNEL):
			self._send(port, midimcp.codec.control_change(channel, midimcp.constants.controllers.ALL_NOTES_OFF, 0))
			self._send(port, midimcp.codec.control_change(channel, midimcp.constants.controllers.ALL_SOUND_OFF, 0))

		return f"Panic: all notes off on {midimcp.constants.MAX_CHANNEL} channels of {port}"

	# Scheduled operations

	async def play_note (self, payload: Payload) -> str:

		"""Send a note-on now and schedule its note-off; return without waiting for it."""

		port = midimcp.validation.require_port(payload)
		note = _data(payload, "note")
		velocity = _velocity(payload)
		duration = _duration_ms(payload)
		channel = _channel(payload)
		wire_channel = midimcp.codec.to_internal_channel(channel)

		self._send(port, midimcp.codec.note_on(wire_channel, note, velocity))
		self.scheduler.release_later(port, [midimcp.codec.note_off(wire_channel, note, velocity)], duration)

		return f"Playing note {note} for {duration}ms (velocity {velocity}, channel {channel})"

	async def play_sequence (self, payload: Payload) -> str:

		"""Play notes one after another, each released before the next begins."""

		port = midimcp.validation.require_port(payload)
		notes = midimcp.validation.non_empty_list(payload, "notes")
		channel = _channel(payload)

		steps: typing.List[midimcp.scheduler.Step] = []

		for index, item in enumerate(notes):
			item = midimcp.validation.mapping(item, f"notes[{index}]")
			try:
				steps.append(midimcp.scheduler.Step(
					pitches = (_data(item, "note"),),
					hold_ms = _duration_ms(item),
					velocity = _velocity(item)
				))
			except midimcp.errors.ValidationError as exc:
				raise midimcp.errors.ValidationError(f"notes[{index}].{exc.field}", f"notes[{index}]: {exc}") from None

		timeline = midimcp.scheduler.Timeline(port=port, channel=midimcp.codec.to_internal_channel(channel), steps=steps)
		total_ms = await self.scheduler.run(timeline)

		return f"Played sequence of {len(steps)} notes ({total_ms:.0f}ms total) on channel {channel}"

	async def play_chord (self, payload: Payload) -> str:

		"""Sound every note together for the duration, then release them all."""

		port = midimcp.validation.require_port(payload)
		notes = midimcp.validation.non_empty_list(payload, "notes")
		pitches = tuple(_data({"notes": note}, "notes") for note in notes)
		velocity = _velocity(payload)
		duration = _duration_ms(payload)
		channel = _channel(payload)

		step = midimcp.scheduler.Step(pitches=pitches, hold_ms=duration, velocity=velocity)
		timeline = midimcp.scheduler.Timeline(port=port, channel=midimcp.codec.to_internal_channel(channel), steps=[step])

		await self.scheduler.run(timeline)

		return f"Played chord with {len(pitches)} notes for {duration}ms on channel {channel}"

	async def play_song (self, payload: Payload) -> str:

		"""Play every track of a song concurrently and wait for the last to finish."""

		song = midimcp.song.parse_song(payload)

		longest = max(track.beats() for track in song.tracks)

		logger.info(f"Playing song: {len(song.tracks)} track(s) at {song.bpm:g} BPM, longest {longest:g} beats")

		await self.scheduler.run_all(song_timelines(song))

		return f"Played song with {len(song.tracks)} tracks at {song.bpm:g} BPM"

	async def close (self) -> None:

		"""Let pending note releases fire, then close every port."""

		await self.scheduler.drain()
		self.registry.close()
