import pytest

import midimcp.playback
import midimcp.resources
import midimcp.server


@pytest.mark.asyncio
async def test_every_operation_is_exposed_as_a_tool (playback: midimcp.playback.Playback) -> None:

	mcp = midimcp.server.create_mcp_app(playback)

	tools = await mcp.list_tools()

	assert sorted(tool.name for tool in tools) == sorted(playback.operations)


@pytest.mark.asyncio
async def test_resources_and_prompt_are_registered (playback: midimcp.playback.Playback) -> None:

	mcp = midimcp.server.create_mcp_app(playback, name="test-server")

	resources = await mcp.list_resources()
	prompts = await mcp.list_prompts()

	assert sorted(str(resource.uri).rstrip("/") for resource in resources) == sorted(r.uri for r in midimcp.resources.RESOURCES)
	assert [prompt.name for prompt in prompts] == ["midi_debug"]


def test_arguments_drop_missing_values () -> None:

	assert midimcp.server._arguments(port="Synth", velocity=None, channel=2) == {"port": "Synth", "channel": 2}
