"""Musical duration to milliseconds.

Song events express length in musical terms: a named value (``"quarter"``)
or a number of beats (``1.5``).  Both scale with the song tempo::

    beat_ms = beat_duration_ms(120)    # 500.0
    resolve("eighth", beat_ms)         # 250.0
    resolve(2, beat_ms)                # 1000.0

A name that is not recognised plays as a quarter note.  One mistyped field
should not abort a long song, so this is a default and never an error.
"""

import logging
import typing

import midimcp.constants.durations


logger = logging.getLogger(__name__)


Duration = typing.Union[str, int, float]


def beat_duration_ms (bpm: float) -> float:

	"""Return the length of one beat (a quarter note) in milliseconds."""

	if not bpm > 0:
		raise ValueError("BPM must be positive")

	return (60.0 / bpm) * 1000.0


def beats (duration: Duration) -> float:

	"""Return the beat count of a numeric or named duration."""

	if isinstance(duration, (int, float)) and not isinstance(duration, bool):
		return float(duration)

	named = midimcp.constants.durations.NAMED_DURATIONS.get(duration) if isinstance(duration, str) else None

	if named is None:
		logger.debug(f"Unknown duration {duration!r}, using a quarter note")
		return midimcp.constants.durations.FALLBACK_DURATION

	return named


def resolve (duration: Duration, beat_ms: float) -> float:

	"""Return the duration in milliseconds for a beat of ``beat_ms``."""

	return beats(duration) * beat_ms
