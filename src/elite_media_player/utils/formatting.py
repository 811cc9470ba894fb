"""Presentation helpers for UI bindings.

Keeps icons and labels out of the domain enums so the session logic never
depends on how a mode or source is drawn.
"""

from __future__ import annotations

import math

from ..domain.music.value_objects import PlaybackMode, PlaybackSource, PlaybackStatus

MODE_SYMBOLS: dict[PlaybackMode, str] = {
    PlaybackMode.NORMAL: "repeat",
    PlaybackMode.REPEAT_ONE: "repeat.1",
    PlaybackMode.SHUFFLE: "shuffle",
}

MODE_LABELS: dict[PlaybackMode, str] = {
    PlaybackMode.NORMAL: "Repeat All",
    PlaybackMode.REPEAT_ONE: "Repeat One",
    PlaybackMode.SHUFFLE: "Shuffle",
}

SOURCE_LABELS: dict[PlaybackSource, str] = {
    PlaybackSource.LOCAL: "Local Library",
    PlaybackSource.STREAMING: "Premium Streaming",
    PlaybackSource.RADIO: "Internet Radio",
}

STATUS_LABELS: dict[PlaybackStatus, str] = {
    PlaybackStatus.IDLE: "Stopped",
    PlaybackStatus.LOADING: "Loading",
    PlaybackStatus.PLAYING: "Playing",
    PlaybackStatus.PAUSED: "Paused",
}

NO_TRACK_TITLE = "No Track Selected"
UNKNOWN_ARTIST = "Unknown Artist"


def format_time(seconds: float | None) -> str:
    """Format a playhead position as M:SS; NaN, inf and None show as 0:00."""
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return "0:00"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def mode_symbol(mode: PlaybackMode) -> str:
    """Icon name for the playback-mode button."""
    return MODE_SYMBOLS[mode]


def mode_label(mode: PlaybackMode) -> str:
    return MODE_LABELS[mode]


def source_label(source: PlaybackSource) -> str:
    return SOURCE_LABELS[source]


def status_label(status: PlaybackStatus) -> str:
    return STATUS_LABELS[status]


def play_pause_symbol(status: PlaybackStatus) -> str:
    return "pause.fill" if status.is_playing else "play.fill"
