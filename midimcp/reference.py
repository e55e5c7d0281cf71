"""Reference tables served to clients as read-only resources.

Note names use sharps and the convention **C4 = 60** (Middle C), so MIDI note
0 is ``C-1`` and 127 is ``G9``.  Frequencies assume equal temperament with
A4 (note 69) at 440 Hz::

    note_name(60)          # "C4"
    note_frequency(69)     # 440.0
"""

import typing

import midimcp.constants.controllers
import midimcp.constants.general_midi


NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

A4_NOTE = 69
A4_FREQUENCY = 440.0


def note_name (note: int) -> str:

	return f"{NOTE_NAMES[note % 12]}{note // 12 - 1}"


def note_frequency (note: int) -> float:

	"""Equal-tempered frequency in Hz: ``440 * 2 ** ((note - 69) / 12)``."""

	return A4_FREQUENCY * 2 ** ((note - A4_NOTE) / 12)


def note_table () -> typing.List[typing.Dict[str, typing.Any]]:

	"""All 128 notes with name and frequency (rounded to 2 decimals)."""

	return [
		{"number": note, "name": note_name(note), "frequency": round(note_frequency(note), 2)}
		for note in range(128)
	]


def controller_table () -> typing.Dict[int, str]:

	return dict(midimcp.constants.controllers.CONTROLLER_NAMES)


def instrument_table () -> typing.Dict[int, str]:

	"""General MIDI program number to instrument name."""

	return dict(enumerate(midimcp.constants.general_midi.GM_INSTRUMENTS))
