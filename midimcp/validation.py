"""Field checks for request payloads.

Payloads arrive as JSON-decoded dicts.  Each helper reads one field, applies
its default when the field is absent (or ``None``), checks type and range, and
raises ``ValidationError`` naming the field otherwise.  Booleans are rejected
wherever a number is expected, even though ``bool`` subclasses ``int``.
"""

import math
import typing

import midimcp.errors


REQUIRED: typing.Any = object()


def _fail (field: str, message: str) -> typing.NoReturn:

	raise midimcp.errors.ValidationError(field, message)


def _is_number (value: typing.Any) -> bool:

	return isinstance(value, (int, float)) and not isinstance(value, bool)


def require_port (payload: typing.Mapping[str, typing.Any], field: str = "port") -> str:

	"""Return the port name, which must be a non-empty string."""

	value = payload.get(field)

	if value is None or value == "":
		_fail(field, f"Missing required argument: {field}")

	if not isinstance(value, str):
		_fail(field, f"{field} must be a port name string, got {value!r}")

	return value


def integer (
	payload: typing.Mapping[str, typing.Any],
	field: str,
	low: int,
	high: typing.Optional[int] = None,
	default: typing.Any = REQUIRED
) -> int:

	"""Return an integer field within ``low..high`` (inclusive; no upper bound when ``high`` is None).

	Whole floats such as ``64.0`` are accepted and converted.
	"""

	value = payload.get(field)

	if value is None:
		if default is REQUIRED:
			_fail(field, f"Missing required argument: {field}")
		return typing.cast(int, default)

	if not _is_number(value) or (isinstance(value, float) and not value.is_integer()):
		_fail(field, f"{field} must be an integer, got {value!r}")

	value = int(value)

	if value < low or (high is not None and value > high):
		bounds = f"{low}-{high}" if high is not None else f">= {low}"
		_fail(field, f"{field} must be {bounds}, got {value}")

	return value


def number (
	payload: typing.Mapping[str, typing.Any],
	field: str,
	low: float,
	high: float,
	default: typing.Any = REQUIRED
) -> float:

	"""Return a numeric field within ``low..high`` (inclusive)."""

	value = payload.get(field)

	if value is None:
		if default is REQUIRED:
			_fail(field, f"Missing required argument: {field}")
		return typing.cast(float, default)

	if not _is_number(value) or not math.isfinite(value):
		_fail(field, f"{field} must be a number, got {value!r}")

	if not low <= value <= high:
		_fail(field, f"{field} must be {low:g}-{high:g}, got {value:g}")

	return value


def non_empty_list (payload: typing.Mapping[str, typing.Any], field: str) -> typing.List[typing.Any]:

	"""Return a list field that must hold at least one item."""

	value = payload.get(field)

	if value is None:
		_fail(field, f"Missing required argument: {field}")

	if not isinstance(value, (list, tuple)):
		_fail(field, f"{field} must be a list, got {type(value).__name__}")

	if not value:
		_fail(field, f"{field} must contain at least one item")

	return list(value)


def mapping (value: typing.Any, field: str) -> typing.Mapping[str, typing.Any]:

	"""Check that a nested item is an object."""

	if not isinstance(value, typing.Mapping):
		_fail(field, f"{field} must be an object, got {value!r}")

	return value


def byte_list (payload: typing.Mapping[str, typing.Any], field: str = "bytes") -> typing.List[int]:

	"""Return a non-empty list of integers 0-255."""

	values = non_empty_list(payload, field)

	for index, value in enumerate(values):
		if not _is_number(value) or not 0 <= value <= 255 or int(value) != value:
			_fail(field, f"{field}[{index}] must be an integer 0-255, got {value!r}")

	return [int(value) for value in values]
