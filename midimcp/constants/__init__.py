"""Constants for midimcp.

This package contains the static data the server works from:

- ``midimcp.constants.durations`` - Beat values of the named note durations and timing defaults
- ``midimcp.constants.velocity`` - MIDI velocity constants
- ``midimcp.constants.controllers`` - Standard control change (CC) numbers and names
- ``midimcp.constants.general_midi`` - The 128 General MIDI Level 1 program names

Channel and status constants shared by the codec are defined here.
"""

# Channel voice status bytes (high nibble). The low nibble carries the channel.

NOTE_OFF = 0x80
NOTE_ON = 0x90
CONTROL_CHANGE = 0xB0
PROGRAM_CHANGE = 0xC0
PITCH_BEND = 0xE0

# Channels as the client sees them (1-16) and as they appear on the wire (0-15).

MIN_CHANNEL = 1
MAX_CHANNEL = 16
DEFAULT_CHANNEL = 1

MIN_DATA_VALUE = 0
MAX_DATA_VALUE = 127

MIN_PITCH_BEND = -8192
MAX_PITCH_BEND = 8191
PITCH_BEND_CENTER = 8192
