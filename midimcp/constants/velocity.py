"""MIDI velocity constants.

Velocity is the MIDI attack strength (0-127).  Every note-bearing operation
falls back to ``DEFAULT_VELOCITY`` when the client leaves it out, and note-off
messages reuse the note-on velocity as their release velocity.
"""

DEFAULT_VELOCITY = 64

# MIDI standard range
MIN_VELOCITY = 0
MAX_VELOCITY = 127
