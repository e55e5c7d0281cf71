import argparse
import logging
import typing

import midimcp.activity_log
import midimcp.config
import midimcp.playback
import midimcp.ports
import midimcp.server


logger = logging.getLogger(__name__)


def main (argv: typing.Optional[typing.List[str]] = None) -> None:

	"""
	Main entry point: load settings, open the port registry and serve MCP over stdio.
	"""

	parser = argparse.ArgumentParser(prog="midimcp", description="MIDI MCP server")
	parser.add_argument("--config", default=None, help="Path to a YAML config file (default: $MIDIMCP_CONFIG or config.yaml)")
	args = parser.parse_args(argv)

	# stdout carries the MCP stream, so logging goes to stderr (basicConfig's default).
	logging.basicConfig(level=logging.INFO)

	settings = midimcp.config.load_config(args.config)
	logging.getLogger().setLevel(settings.log_level)

	logger.info("MIDI MCP server starting...")

	registry = midimcp.ports.PortRegistry(backend=settings.midi_backend)
	activity_log = midimcp.activity_log.ActivityLog(capacity=settings.log_capacity)
	playback = midimcp.playback.Playback(registry, activity_log)

	if settings.listen_inputs:
		playback.listen_all_inputs()

	mcp = midimcp.server.create_mcp_app(playback, name=settings.server_name)

	try:
		mcp.run(transport="stdio")
	except KeyboardInterrupt:
		logger.info("Stopping...")
	finally:
		registry.close()


if __name__ == "__main__":
	main()
