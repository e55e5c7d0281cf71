"""Song data model and payload parsing.

A song is a tempo and a set of tracks that start together.  Each track is an
ordered list of note events, optionally looped, routed to its own port and
channel::

    {
        "port": "Synth",
        "bpm": 96,
        "tracks": [
            {"channel": 1, "instrument": 0, "loop": 2, "notes": [
                {"note": [60, 64, 67], "duration": "half", "velocity": 90},
                {"note": 62, "duration": 1.5, "cc": {"controller": 1, "value": 40}}
            ]},
            {"channel": 10, "port": "Drums", "notes": [{"note": 36, "duration": "quarter"}]}
        ]
    }

Parsing validates every field up front, so a malformed song fails before a
single message is sent.  A note given as a number and a note given as a list
are both normalised to a tuple of pitches here and never inspected again.
"""

import contextlib
import dataclasses
import typing

import midimcp.constants
import midimcp.constants.durations
import midimcp.constants.velocity
import midimcp.errors
import midimcp.timing
import midimcp.validation


@dataclasses.dataclass(frozen=True)
class ControlChange:

	"""A single CC change fired at the onset of a note event."""

	controller: int
	value: int


@dataclasses.dataclass(frozen=True)
class NoteEvent:

	"""One note or chord with a musical duration.

	Attributes:
		pitches: MIDI note numbers sounded together (one for a single note).
		duration: A name from ``NAMED_DURATIONS`` or a beat count.
		velocity: Attack velocity, also used as the release velocity.
		cc: Optional control change sent before the note-ons.
	"""

	pitches: typing.Tuple[int, ...]
	duration: midimcp.timing.Duration
	velocity: int = midimcp.constants.velocity.DEFAULT_VELOCITY
	cc: typing.Optional[ControlChange] = None


@dataclasses.dataclass(frozen=True)
class Track:

	"""An independent timeline within a song.

	``channel`` is client-facing (1-16).  ``port`` is None when the track
	plays on the song's port.  ``loop`` repeats the whole event list.
	"""

	events: typing.Tuple[NoteEvent, ...]
	channel: int = midimcp.constants.DEFAULT_CHANNEL
	port: typing.Optional[str] = None
	instrument: typing.Optional[int] = None
	loop: int = 1

	def beats (self) -> float:

		"""Total length in beats, loops included."""

		return sum(midimcp.timing.beats(event.duration) for event in self.events) * self.loop


@dataclasses.dataclass(frozen=True)
class Song:

	"""A tempo and the tracks that play concurrently at it."""

	port: str
	tracks: typing.Tuple[Track, ...]
	bpm: float = midimcp.constants.durations.DEFAULT_BPM

	@property
	def beat_ms (self) -> float:

		return midimcp.timing.beat_duration_ms(self.bpm)

	def port_for (self, track: Track) -> str:

		"""Return the port a track sends to."""

		return track.port if track.port is not None else self.port


@contextlib.contextmanager
def _within (prefix: str) -> typing.Iterator[None]:

	"""Prefix validation errors raised inside the block with the item's position."""

	try:
		yield
	except midimcp.errors.ValidationError as exc:
		raise midimcp.errors.ValidationError(f"{prefix}.{exc.field}", f"{prefix}: {exc}") from None


def parse_pitches (value: typing.Any) -> typing.Tuple[int, ...]:

	"""Accept a single note number or a non-empty list of them."""

	items = value if isinstance(value, (list, tuple)) else [value]

	if not items:
		raise midimcp.errors.ValidationError("note", "note must contain at least one note number")

	return tuple(
		midimcp.validation.integer({"note": item}, "note", midimcp.constants.MIN_DATA_VALUE, midimcp.constants.MAX_DATA_VALUE)
		for item in items
	)


def parse_duration (value: typing.Any) -> midimcp.timing.Duration:

	"""Accept a duration name or a positive beat count.

	Any string is accepted here; unknown names play as a quarter note.
	"""

	if value is None:
		raise midimcp.errors.ValidationError("duration", "Missing required argument: duration")

	if isinstance(value, str):
		return value

	if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
		raise midimcp.errors.ValidationError("duration", f"duration must be a duration name or a positive number of beats, got {value!r}")

	return value


def parse_note_event (payload: typing.Any) -> NoteEvent:

	payload = midimcp.validation.mapping(payload, "note event")

	cc: typing.Optional[ControlChange] = None

	if payload.get("cc") is not None:
		with _within("cc"):
			cc_payload = midimcp.validation.mapping(payload["cc"], "cc")
			cc = ControlChange(
				controller = midimcp.validation.integer(cc_payload, "controller", 0, 127),
				value = midimcp.validation.integer(cc_payload, "value", 0, 127)
			)

	if payload.get("note") is None:
		raise midimcp.errors.ValidationError("note", "Missing required argument: note")

	return NoteEvent(
		pitches = parse_pitches(payload["note"]),
		duration = parse_duration(payload.get("duration")),
		velocity = midimcp.validation.integer(
			payload, "velocity",
			midimcp.constants.velocity.MIN_VELOCITY,
			midimcp.constants.velocity.MAX_VELOCITY,
			default = midimcp.constants.velocity.DEFAULT_VELOCITY
		),
		cc = cc
	)


def parse_track (payload: typing.Any) -> Track:

	payload = midimcp.validation.mapping(payload, "track")
	notes = midimcp.validation.non_empty_list(payload, "notes")

	events: typing.List[NoteEvent] = []

	for index, note in enumerate(notes):
		with _within(f"notes[{index}]"):
			events.append(parse_note_event(note))

	port = payload.get("port")

	if port is not None:
		port = midimcp.validation.require_port(payload)

	instrument = payload.get("instrument")

	if instrument is not None:
		instrument = midimcp.validation.integer(payload, "instrument", 0, 127)

	return Track(
		events = tuple(events),
		channel = midimcp.validation.integer(
			payload, "channel",
			midimcp.constants.MIN_CHANNEL,
			midimcp.constants.MAX_CHANNEL,
			default = midimcp.constants.DEFAULT_CHANNEL
		),
		port = port,
		instrument = instrument,
		loop = midimcp.validation.integer(payload, "loop", 1, default=1)
	)


def parse_song (payload: typing.Mapping[str, typing.Any]) -> Song:

	"""Build a ``Song`` from a request payload, validating every field."""

	port = midimcp.validation.require_port(payload)
	track_payloads = midimcp.validation.non_empty_list(payload, "tracks")

	bpm = midimcp.validation.number(
		payload, "bpm",
		midimcp.constants.durations.MIN_BPM,
		midimcp.constants.durations.MAX_BPM,
		default = midimcp.constants.durations.DEFAULT_BPM
	)

	tracks: typing.List[Track] = []

	for index, track in enumerate(track_payloads):
		with _within(f"tracks[{index}]"):
			tracks.append(parse_track(track))

	return Song(port=port, tracks=tuple(tracks), bpm=bpm)
