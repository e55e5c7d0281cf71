"""Server settings loaded from YAML.

All keys are optional::

    server:
      name: midi-mcp-server
    logging:
      level: INFO
    activity_log:
      capacity: 100
    midi:
      backend: mido.backends.rtmidi
      listen_inputs: true
"""

import dataclasses
import logging
import os
import typing

import yaml

import midimcp.activity_log


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MIDIMCP_CONFIG"
DEFAULT_CONFIG_PATH = "config.yaml"


@dataclasses.dataclass
class Settings:

	"""Resolved settings with defaults for every key."""

	server_name: str = "midi-mcp-server"
	log_level: str = "INFO"
	log_capacity: int = midimcp.activity_log.DEFAULT_CAPACITY
	midi_backend: typing.Optional[str] = None
	listen_inputs: bool = True


def load_config (config_path: typing.Optional[str] = None) -> Settings:

	"""
	Load settings from a YAML file, falling back to defaults when it is absent.

	The path defaults to ``$MIDIMCP_CONFIG`` and then ``config.yaml``.
	"""

	path = config_path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH

	if not os.path.exists(path):
		logger.warning(f"Config file {path} not found. Using defaults.")
		return Settings()

	with open(path, 'r') as f:
		data = yaml.safe_load(f) or {}

	if not isinstance(data, dict):
		raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

	return settings_from_dict(data)


def settings_from_dict (data: typing.Mapping[str, typing.Any]) -> Settings:

	"""Build ``Settings`` from the nested config mapping."""

	defaults = Settings()

	server = data.get('server') or {}
	logging_section = data.get('logging') or {}
	activity = data.get('activity_log') or {}
	midi = data.get('midi') or {}

	capacity = int(activity.get('capacity', defaults.log_capacity))

	if capacity <= 0:
		raise ValueError("activity_log.capacity must be positive")

	log_level = str(logging_section.get('level', defaults.log_level)).upper()

	if not isinstance(logging.getLevelName(log_level), int):
		raise ValueError(f"logging.level must be a standard level name, got {log_level!r}")

	return Settings(
		server_name = str(server.get('name', defaults.server_name)),
		log_level = log_level,
		log_capacity = capacity,
		midi_backend = midi.get('backend', defaults.midi_backend),
		listen_inputs = bool(midi.get('listen_inputs', defaults.listen_inputs))
	)
