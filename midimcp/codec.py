"""Mapping between semantic MIDI operations and raw wire bytes.

The encoders take an **internal** channel (0-15) and return the message as a
list of ints, the form that is logged and sent.  ``mido`` does the byte layout,
so what is encoded here is exactly what the transport will put on the wire::

    note_on(0, 60, 100)    # [0x90, 60, 100]
    pitch_bend(0, 0)       # [0xE0, 0x00, 0x40]

Inputs are validated by the playback layer before they reach these
functions.
"""

import dataclasses
import typing

import mido

import midimcp.constants
import midimcp.errors


RawMessage = typing.List[int]


@dataclasses.dataclass(frozen=True)
class DecodedMessage:

	"""
	A raw message split back into its kind, channel and data fields.
	"""

	kind: str
	channel: typing.Optional[int]
	params: typing.Dict[str, typing.Any]


def to_internal_channel (channel: int) -> int:

	"""Convert a client-facing channel (1-16) to the wire channel (0-15)."""

	return channel - midimcp.constants.MIN_CHANNEL


def note_on (channel: int, note: int, velocity: int) -> RawMessage:

	return mido.Message('note_on', channel=channel, note=note, velocity=velocity).bytes()


def note_off (channel: int, note: int, velocity: int) -> RawMessage:

	return mido.Message('note_off', channel=channel, note=note, velocity=velocity).bytes()


def control_change (channel: int, controller: int, value: int) -> RawMessage:

	return mido.Message('control_change', channel=channel, control=controller, value=value).bytes()


def program_change (channel: int, program: int) -> RawMessage:

	return mido.Message('program_change', channel=channel, program=program).bytes()


def pitch_bend (channel: int, value: int) -> RawMessage:

	"""Encode a signed bend (-8192..8191, 0 = centre) as ``[0xE0+ch, lsb, msb]``.

	The wire value is ``value + 8192`` split into two 7-bit halves, least
	significant first.
	"""

	return mido.Message('pitchwheel', channel=channel, pitch=value).bytes()


def to_message (data: typing.Sequence[int]) -> mido.Message:

	"""Parse raw bytes into a ``mido.Message`` for the transport.

	Raises ``ValidationError`` when the bytes do not form one complete MIDI
	message (wrong length for the status byte, data byte above 127, ...).
	"""

	try:
		return mido.Message.from_bytes(list(data))
	except (ValueError, TypeError) as exc:
		hex_bytes = format_bytes(data)
		raise midimcp.errors.ValidationError("bytes", f"Invalid MIDI message [{hex_bytes}]: {exc}") from exc


def decode (data: typing.Sequence[int]) -> DecodedMessage:

	"""Split a raw message back into kind, internal channel and parameters.

	Pitch bend values come back signed, so ``decode(pitch_bend(c, v))``
	reports ``v``.
	"""

	fields = to_message(data).dict()
	kind = fields.pop('type')
	channel = fields.pop('channel', None)
	fields.pop('time', None)

	return DecodedMessage(kind=kind, channel=channel, params=fields)


def describe (data: typing.Sequence[int]) -> str:

	"""Summarise a raw message for logs, e.g. ``note_on ch 1 note=60 velocity=100``."""

	decoded = decode(data)
	parts = [decoded.kind]

	if decoded.channel is not None:
		parts.append(f"ch {decoded.channel + 1}")

	parts.extend(f"{key}={value}" for key, value in decoded.params.items())

	return " ".join(parts)


def format_bytes (data: typing.Sequence[int]) -> str:

	"""Format bytes as upper-case, zero-padded hex: ``0x90 0x3C 0x40``."""

	return " ".join(f"0x{byte:02X}" for byte in data)
