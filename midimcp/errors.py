"""Exception taxonomy for midimcp.

Every error is terminal for the call that raised it: nothing is retried and
no fallback port is chosen.  Messages are written for the person reading the
tool result, so each one names the field, port, operation or resource at fault.
"""

import typing


class MidiError (Exception):

	"""Base class for all errors raised by midimcp."""


class ValidationError (MidiError):

	"""A required field is missing or a value is outside its declared range.

	Raised before any device interaction.
	"""

	def __init__ (self, field: str, message: str) -> None:

		self.field = field
		super().__init__(message)


class PortOpenError (MidiError):

	"""The transport could not open the named port."""

	def __init__ (self, port: str, direction: str) -> None:

		self.port = port
		self.direction = direction
		super().__init__(f"Cannot open MIDI {direction} port {port!r}")


class PortSendError (MidiError):

	"""An open output port rejected a message (device unplugged, driver error)."""

	def __init__ (self, port: str, reason: str) -> None:

		self.port = port
		super().__init__(f"Failed to send MIDI message to {port!r}: {reason}")


class UnknownOperationError (MidiError):

	"""Dispatch received an operation name that is not registered."""

	def __init__ (self, name: str) -> None:

		self.name = name
		super().__init__(f"Unknown operation: {name!r}")


class UnknownResourceError (MidiError):

	"""A read request referenced a resource URI that does not exist."""

	def __init__ (self, uri: str) -> None:

		self.uri = uri
		super().__init__(f"Resource not found: {uri!r}")


class SongPlaybackError (MidiError):

	"""One or more tracks of a song failed.

	Raised only after every track has finished or failed.  ``failures`` maps
	the zero-based track index to the exception that stopped that track.
	"""

	def __init__ (self, failures: typing.Dict[int, BaseException]) -> None:

		self.failures = dict(sorted(failures.items()))

		details = "; ".join(f"track {index}: {exc}" for index, exc in self.failures.items())
		count = len(self.failures)
		noun = "track" if count == 1 else "tracks"

		super().__init__(f"Song playback failed on {count} {noun} ({details})")
