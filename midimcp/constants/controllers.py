"""Standard MIDI control change (CC) numbers.

Named constants for the controllers most instruments respond to, plus
``CONTROLLER_NAMES``, the lookup table served as the
``midi://reference/controllers`` resource::

    import midimcp.constants.controllers as cc

    playback.control_change(port, controller=cc.MODULATION_WHEEL, value=90)
"""

import typing


BANK_SELECT = 0
MODULATION_WHEEL = 1
CHANNEL_VOLUME = 7
PAN = 10
EXPRESSION = 11
SUSTAIN_PEDAL = 64
ALL_SOUND_OFF = 120
RESET_ALL_CONTROLLERS = 121
ALL_NOTES_OFF = 123


CONTROLLER_NAMES: typing.Dict[int, str] = {
	BANK_SELECT: "Bank Select (MSB)",
	MODULATION_WHEEL: "Modulation Wheel",
	2: "Breath Controller",
	4: "Foot Controller",
	5: "Portamento Time",
	6: "Data Entry (MSB)",
	CHANNEL_VOLUME: "Channel Volume",
	8: "Balance",
	PAN: "Pan",
	EXPRESSION: "Expression Controller",
	12: "Effect Control 1",
	13: "Effect Control 2",
	SUSTAIN_PEDAL: "Sustain Pedal (Damper)",
	65: "Portamento On/Off",
	66: "Sostenuto",
	67: "Soft Pedal",
	68: "Legato Footswitch",
	69: "Hold 2",
	70: "Sound Controller 1 (Sound Variation)",
	71: "Sound Controller 2 (Timbre/Harmonic Content)",
	72: "Sound Controller 3 (Release Time)",
	73: "Sound Controller 4 (Attack Time)",
	74: "Sound Controller 5 (Brightness)",
	84: "Portamento Control",
	91: "Effects 1 Depth (Reverb)",
	92: "Effects 2 Depth (Tremolo)",
	93: "Effects 3 Depth (Chorus)",
	94: "Effects 4 Depth (Detune)",
	95: "Effects 5 Depth (Phaser)",
	96: "Data Increment",
	97: "Data Decrement",
	ALL_SOUND_OFF: "All Sound Off",
	RESET_ALL_CONTROLLERS: "Reset All Controllers",
	122: "Local Control On/Off",
	ALL_NOTES_OFF: "All Notes Off",
	124: "Omni Mode Off",
	125: "Omni Mode On",
	126: "Mono Mode On",
	127: "Poly Mode On",
}
