"""The event scheduler: timed note playback on the asyncio loop.

A ``Timeline`` is one strictly ordered run of ``Step`` events on a single
port and channel.  Running a step sends its control change (if any), then
every note-on back to back, waits for the step's hold time, then sends every
note-off back to back in the same order.  That wait is the only point where a
timeline yields to the event loop; sends themselves never suspend.

``run_all()`` starts several timelines at the same instant and joins them.
Timelines do not synchronise beyond that shared start: a short track
finishes and goes idle while a longer one carries on.  A failing timeline
does not cancel its siblings.  Failures are collected per timeline and raised
together once every timeline has finished.

Sends are delegated to a callable, ``send(port, data)``, supplied by the
playback layer.  It delivers the bytes and records them in the activity log.
"""

import asyncio
import dataclasses
import logging
import time
import typing

import midimcp.codec
import midimcp.errors


logger = logging.getLogger(__name__)


SendFn = typing.Callable[[str, typing.Sequence[int]], None]


@dataclasses.dataclass(frozen=True)
class Step:

	"""
	One scheduled event: pitches sounded together for ``hold_ms``.
	"""

	pitches: typing.Tuple[int, ...]
	hold_ms: float
	velocity: int
	cc: typing.Optional[typing.Tuple[int, int]] = None


@dataclasses.dataclass
class Timeline:

	"""An ordered list of steps bound to one port and channel.

	Parameters:
		port: Output port name.
		channel: Wire channel (0-15).
		steps: Events in play order.
		program: Program change sent once before the first loop.
		loops: Number of times the full step list is played.
	"""

	port: str
	channel: int
	steps: typing.List[Step]
	program: typing.Optional[int] = None
	loops: int = 1

	def duration_ms (self) -> float:

		"""Total scheduled hold time, loops included."""

		return sum(step.hold_ms for step in self.steps) * self.loops


class Scheduler:

	"""
	Runs timelines against a send function and tracks detached note releases.
	"""

	def __init__ (self, send: SendFn) -> None:

		self._send = send
		self._detached: typing.Set[asyncio.Task] = set()

	async def run (self, timeline: Timeline) -> float:

		"""Play a timeline to completion and return its scheduled duration in ms.

		A failed send aborts the rest of the timeline.  Notes already switched
		on are left sounding (a warning names them) and the error propagates.
		"""

		started = time.perf_counter()

		if timeline.program is not None:
			self._send(timeline.port, midimcp.codec.program_change(timeline.channel, timeline.program))

		for _ in range(timeline.loops):
			for step in timeline.steps:
				await self.play_step(timeline.port, timeline.channel, step)

		elapsed_ms = (time.perf_counter() - started) * 1000.0
		logger.debug(f"Timeline on {timeline.port!r} ch {timeline.channel + 1} finished in {elapsed_ms:.0f}ms")

		return timeline.duration_ms()

	async def play_step (self, port: str, channel: int, step: Step) -> None:

		"""Send a step's CC and note-ons, hold, then send its note-offs."""

		sounding: typing.List[int] = []

		try:

			if step.cc is not None:
				controller, value = step.cc
				self._send(port, midimcp.codec.control_change(channel, controller, value))

			for pitch in step.pitches:
				self._send(port, midimcp.codec.note_on(channel, pitch, step.velocity))
				sounding.append(pitch)

			await asyncio.sleep(step.hold_ms / 1000.0)

			for pitch in step.pitches:
				self._send(port, midimcp.codec.note_off(channel, pitch, step.velocity))
				sounding.remove(pitch)

		except midimcp.errors.MidiError:

			if sounding:
				logger.warning(
					f"Playback on {port!r} ch {channel + 1} aborted with notes still sounding: {sounding}"
				)

			raise

	async def run_all (self, timelines: typing.Sequence[Timeline]) -> typing.List[float]:

		"""Start every timeline together and wait for all of them.

		Returns the scheduled duration of each timeline.  If any failed, raises
		``SongPlaybackError`` mapping each failed timeline's index to its error,
		after the others have run to completion.
		"""

		results = await asyncio.gather(
			*(self.run(timeline) for timeline in timelines),
			return_exceptions = True
		)

		failures: typing.Dict[int, BaseException] = {}
		durations: typing.List[float] = []

		for index, result in enumerate(results):

			if isinstance(result, asyncio.CancelledError):
				raise result

			if isinstance(result, BaseException):
				logger.warning(f"Timeline {index} on {timelines[index].port!r} failed: {result}")
				failures[index] = result
				durations.append(0.0)

			else:
				durations.append(result)

		if failures:
			raise midimcp.errors.SongPlaybackError(failures)

		return durations

	def release_later (self, port: str, messages: typing.Sequence[typing.Sequence[int]], delay_ms: float) -> asyncio.Task:

		"""Send ``messages`` after ``delay_ms`` without blocking the caller.

		The task is detached: the caller cannot join it and its failures are
		logged rather than raised.
		"""

		task = asyncio.create_task(self._release(port, messages, delay_ms))
		self._detached.add(task)
		task.add_done_callback(self._detached.discard)

		return task

	async def _release (self, port: str, messages: typing.Sequence[typing.Sequence[int]], delay_ms: float) -> None:

		await asyncio.sleep(delay_ms / 1000.0)

		try:
			for data in messages:
				self._send(port, data)

		except midimcp.errors.MidiError as exc:
			logger.warning(f"Deferred release on {port!r} failed: {exc}")

	@property
	def pending (self) -> int:

		"""Number of detached releases that have not fired yet."""

		return len(self._detached)

	async def drain (self) -> None:

		"""Wait for every outstanding detached release."""

		while self._detached:
			await asyncio.gather(*list(self._detached), return_exceptions=True)
