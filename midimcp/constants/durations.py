"""Beat-based duration constants for song note timing.

All values are in **beats**, where 1.0 = one quarter note.  Song note events
name their length with one of the keys of ``NAMED_DURATIONS`` or give a beat
count directly::

    {"note": 60, "duration": "eighth"}   # 0.5 beats
    {"note": 60, "duration": 3}          # 3 beats

The millisecond value of a beat depends on the song tempo; see
``midimcp.timing``.
"""

SIXTEENTH = 0.25
EIGHTH = 0.5
QUARTER = 1.0
HALF = 2.0
WHOLE = 4.0

NAMED_DURATIONS = {
	"whole": WHOLE,
	"half": HALF,
	"quarter": QUARTER,
	"eighth": EIGHTH,
	"sixteenth": SIXTEENTH,
}

# Unrecognised names play as a quarter note rather than failing the song.
FALLBACK_DURATION = QUARTER

# Immediate-mode defaults (milliseconds) and tempo bounds.

DEFAULT_DURATION_MS = 500
DEFAULT_BPM = 120
MIN_BPM = 20
MAX_BPM = 300
