import pytest

import midimcp.codec
import midimcp.constants
import midimcp.errors


@pytest.mark.parametrize("channel", range(1, 17))
def test_channel_stays_in_status_nibble (channel: int) -> None:

	"""Every client channel maps to 0-15 and only changes the low nibble of the status byte."""

	wire = midimcp.codec.to_internal_channel(channel)

	assert wire == channel - 1

	messages = [
		midimcp.codec.note_on(wire, 60, 100),
		midimcp.codec.note_off(wire, 60, 100),
		midimcp.codec.control_change(wire, 7, 100),
		midimcp.codec.program_change(wire, 5),
		midimcp.codec.pitch_bend(wire, 0),
	]

	statuses = (
		midimcp.constants.NOTE_ON,
		midimcp.constants.NOTE_OFF,
		midimcp.constants.CONTROL_CHANGE,
		midimcp.constants.PROGRAM_CHANGE,
		midimcp.constants.PITCH_BEND,
	)

	for message, base in zip(messages, statuses):
		assert message[0] & 0xF0 == base
		assert message[0] & 0x0F == wire


def test_channel_voice_layout () -> None:

	"""Encoders produce the standard status/data byte layout."""

	assert midimcp.codec.note_on(0, 60, 100) == [0x90, 60, 100]
	assert midimcp.codec.note_off(2, 64, 64) == [0x82, 64, 64]
	assert midimcp.codec.control_change(15, 1, 127) == [0xBF, 1, 127]
	assert midimcp.codec.program_change(9, 0) == [0xC9, 0]


def test_pitch_bend_endpoints () -> None:

	"""Pitch bend splits value + 8192 into 7-bit LSB then MSB."""

	assert midimcp.codec.pitch_bend(0, -8192) == [0xE0, 0x00, 0x00]
	assert midimcp.codec.pitch_bend(0, 0) == [0xE0, 0x00, 0x40]
	assert midimcp.codec.pitch_bend(0, 8191) == [0xE0, 0x7F, 0x7F]
	assert midimcp.codec.pitch_bend(3, 1) == [0xE3, 0x01, 0x40]

	center = midimcp.constants.PITCH_BEND_CENTER

	assert midimcp.codec.pitch_bend(0, 0)[1:] == [center & 0x7F, center >> 7]


def test_decode_reports_kind_channel_and_signed_bend () -> None:

	"""Decoding recovers the semantic fields, with pitch bend back in signed form."""

	decoded = midimcp.codec.decode([0x91, 60, 100])

	assert decoded.kind == "note_on"
	assert decoded.channel == 1
	assert decoded.params == {"note": 60, "velocity": 100}

	bend = midimcp.codec.decode(midimcp.codec.pitch_bend(4, -100))

	assert bend.kind == "pitchwheel"
	assert bend.channel == 4
	assert bend.params == {"pitch": -100}


def test_describe_uses_client_channel () -> None:

	assert midimcp.codec.describe([0x91, 60, 100]) == "note_on ch 2 note=60 velocity=100"
	assert midimcp.codec.describe([0xF8]) == "clock"


def test_to_message_rejects_incomplete_bytes () -> None:

	"""A note-on status byte with a single data byte is not a valid message."""

	with pytest.raises(midimcp.errors.ValidationError) as info:
		midimcp.codec.to_message([0x90, 60])

	assert info.value.field == "bytes"
	assert "0x90 0x3C" in str(info.value)


def test_format_bytes_upper_case_zero_padded () -> None:

	assert midimcp.codec.format_bytes([0x90, 0x0A, 0xFF]) == "0x90 0x0A 0xFF"
