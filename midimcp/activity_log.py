"""Bounded log of recent MIDI traffic.

Every message the server sends, and every message it hears on a subscribed
input, is recorded here newest first.  Once the log holds ``capacity``
entries the oldest is dropped on each insert.

Input callbacks arrive on the MIDI backend's thread, so all access goes
through a lock.
"""

import collections
import dataclasses
import datetime
import logging
import threading
import typing

import midimcp.codec


logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100

IN = "IN"
OUT = "OUT"


@dataclasses.dataclass(frozen=True)
class LogEntry:

	"""One message seen on a port."""

	direction: str
	port: str
	timestamp: datetime.datetime
	data: typing.Tuple[int, ...]

	def format (self) -> str:

		"""Render as ``[2024-01-01T12:00:00.000Z] OUT Synth: 0x90 0x3C 0x40``."""

		stamp = self.timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")

		return f"[{stamp}] {self.direction} {self.port}: {midimcp.codec.format_bytes(self.data)}"


class ActivityLog:

	"""Fixed-capacity ring of ``LogEntry`` items, newest at index 0."""

	def __init__ (self, capacity: int = DEFAULT_CAPACITY) -> None:

		if capacity <= 0:
			raise ValueError("Activity log capacity must be positive")

		self.capacity = capacity
		self._entries: typing.Deque[LogEntry] = collections.deque(maxlen=capacity)
		self._lock = threading.Lock()

	def record (self, direction: str, port: str, data: typing.Sequence[int]) -> LogEntry:

		"""Insert an entry at the head, evicting the oldest past capacity."""

		entry = LogEntry(
			direction = direction,
			port = port,
			timestamp = datetime.datetime.now(datetime.timezone.utc),
			data = tuple(data)
		)

		with self._lock:
			self._entries.appendleft(entry)

		if logger.isEnabledFor(logging.DEBUG):
			logger.debug(f"{entry.format()} ({midimcp.codec.describe(entry.data)})")

		return entry

	def entries (self, limit: typing.Optional[int] = None) -> typing.List[LogEntry]:

		"""Return a snapshot of the entries, newest first."""

		with self._lock:
			snapshot = list(self._entries)

		return snapshot if limit is None else snapshot[:limit]

	def render (self, limit: typing.Optional[int] = None) -> str:

		"""Return the formatted entries joined by newlines."""

		return "\n".join(entry.format() for entry in self.entries(limit))

	def clear (self) -> None:

		with self._lock:
			self._entries.clear()

	def __len__ (self) -> int:

		with self._lock:
			return len(self._entries)
