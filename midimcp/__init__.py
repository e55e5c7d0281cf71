"""
midimcp - play hardware MIDI instruments from an MCP client.

The server exposes a MIDI interface to a tool-calling client through a small
set of operations: single notes, chords, sequences and multi-track songs with
musical timing, plus immediate-mode messages (note on/off, CC, program change,
pitch bend, raw bytes).

What it does:

- **Musical timing.** Songs are written in BPM and note values
  (``"quarter"``, ``"eighth"``, or a beat count).  The scheduler turns them
  into correctly ordered, correctly paced note-on/note-off pairs.
- **Parallel tracks.** Every track of a song runs its own timeline on the
  asyncio loop, with its own port, channel, instrument and loop count.
  The call returns when the longest track finishes.
- **Safe concurrency.** Many requests can play at once.  Each timeline owns
  its note pairing, and ports are opened once and shared.
- **Traffic log.** The last 100 messages in and out are kept for the
  ``midi://logs`` resource.

Running it:

    ```
    midimcp --config config.yaml
    ```

Using the playback layer directly:

    ```python
    import midimcp

    playback = midimcp.Playback(midimcp.PortRegistry())
    await playback.play_chord({"port": "Synth", "notes": [60, 64, 67], "duration": 800})
    ```

Package-level exports: ``Playback``, ``PortRegistry``, ``ActivityLog``, ``create_mcp_app``.
"""

import midimcp.activity_log
import midimcp.playback
import midimcp.ports
import midimcp.server


ActivityLog = midimcp.activity_log.ActivityLog
Playback = midimcp.playback.Playback
PortRegistry = midimcp.ports.PortRegistry
create_mcp_app = midimcp.server.create_mcp_app
