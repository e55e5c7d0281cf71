"""MIDI port discovery and the process-wide open-handle cache.

Opening a hardware port is not free, and two concurrent requests for the same
port must end up sharing one handle.  ``PortRegistry`` is constructed once at
start-up and handed to the playback layer; every send and subscription goes
through ``get_or_open()``, which opens a port the first time its name is seen
and reuses the handle afterwards.

Port names are the only identity.  Backends renumber ports as devices come
and go, so numeric indexes are never stored.
"""

import dataclasses
import logging
import threading
import typing

import mido

import midimcp.codec
import midimcp.errors


logger = logging.getLogger(__name__)

INPUT = "input"
OUTPUT = "output"

InputCallback = typing.Callable[[typing.List[int]], None]


@dataclasses.dataclass(frozen=True)
class PortInfo:

	"""A port as reported by the backend."""

	name: str
	type: str

	def to_dict (self) -> typing.Dict[str, str]:

		return {"name": self.name, "type": self.type}


class PortRegistry:

	"""Open-or-reuse cache of MIDI input and output handles.

	Input messages are delivered on the backend's callback thread.  Each open
	input fans out to every callback subscribed to it; callbacks receive the
	raw message bytes.
	"""

	def __init__ (self, backend: typing.Optional[str] = None) -> None:

		"""Select the mido backend (e.g. ``"mido.backends.rtmidi"``) when one is given."""

		if backend:
			mido.set_backend(backend)
			logger.info(f"MIDI backend: {backend}")

		self._outputs: typing.Dict[str, typing.Any] = {}
		self._inputs: typing.Dict[str, typing.Any] = {}
		self._subscribers: typing.Dict[str, typing.List[InputCallback]] = {}
		self._lock = threading.Lock()

	def list_ports (self) -> typing.List[PortInfo]:

		"""Return every available input followed by every available output."""

		inputs = [PortInfo(name=name, type=INPUT) for name in mido.get_input_names()]
		outputs = [PortInfo(name=name, type=OUTPUT) for name in mido.get_output_names()]

		return inputs + outputs

	def get_or_open (self, name: str, direction: str) -> typing.Any:

		"""Return the cached handle for ``name``, opening it on first use.

		Raises ``PortOpenError`` naming the port and direction when the backend
		refuses to open it.
		"""

		if direction not in (INPUT, OUTPUT):
			raise ValueError(f"Unknown port direction: {direction!r}")

		cache = self._outputs if direction == OUTPUT else self._inputs

		with self._lock:

			port = cache.get(name)

			if port is not None:
				return port

			try:
				if direction == OUTPUT:
					port = mido.open_output(name)
				else:
					port = mido.open_input(name, callback=self._make_input_handler(name))

			except Exception as exc:
				logger.error(f"Failed to open MIDI {direction} {name!r}: {exc}")
				raise midimcp.errors.PortOpenError(name, direction) from exc

			cache[name] = port

		logger.info(f"Opened MIDI {direction}: {name}")

		return port

	def send (self, name: str, data: typing.Sequence[int]) -> None:

		"""Send one raw message to the named output."""

		message = midimcp.codec.to_message(data)
		port = self.get_or_open(name, OUTPUT)

		try:
			port.send(message)
		except Exception as exc:
			logger.error(f"MIDI send to {name!r} failed: {exc}")
			raise midimcp.errors.PortSendError(name, str(exc)) from exc

	def subscribe (self, name: str, callback: InputCallback) -> None:

		"""Open the named input (if needed) and deliver its messages to ``callback``."""

		with self._lock:
			self._subscribers.setdefault(name, []).append(callback)

		try:
			self.get_or_open(name, INPUT)
		except midimcp.errors.PortOpenError:
			with self._lock:
				self._subscribers[name].remove(callback)
			raise

	def is_open (self, name: str, direction: str) -> bool:

		cache = self._outputs if direction == OUTPUT else self._inputs

		with self._lock:
			return name in cache

	def close (self) -> None:

		"""Close every cached handle."""

		with self._lock:
			ports = list(self._outputs.items()) + list(self._inputs.items())
			self._outputs.clear()
			self._inputs.clear()
			self._subscribers.clear()

		for name, port in ports:
			try:
				port.close()
			except Exception as exc:
				logger.warning(f"Failed to close MIDI port {name!r}: {exc}")

		if ports:
			logger.info(f"Closed {len(ports)} MIDI port(s)")

	def _make_input_handler (self, name: str) -> typing.Callable[[mido.Message], None]:

		"""Build the backend callback that fans an input's messages out to subscribers."""

		def _on_message (message: mido.Message) -> None:

			data = message.bytes()

			with self._lock:
				callbacks = list(self._subscribers.get(name, []))

			for callback in callbacks:
				try:
					callback(data)
				except Exception:
					logger.exception(f"MIDI input callback for {name!r} failed")

		return _on_message
