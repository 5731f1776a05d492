"""
clipmark - mark and export clips from the media playing in mpv

This package provides the pieces behind an interactive clip exporter:
- A session state machine tracking the clip mode and its in/out marks
- A catalog of encoder profiles selectable while the mode is engaged
- ffmpeg command synthesis for stream-copy and re-encode exports
- Background export execution that never blocks the player
- mpv key-binding and on-screen-message glue

Exports run through the external ffmpeg tool; ffprobe is consulted to
tag HEVC stream copies so the resulting MP4 files play everywhere.
"""

__version__ = "0.1.0"
