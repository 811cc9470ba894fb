"""
Music Domain

Tracks, the playback queue, transport/mode value objects and the events a
playback session publishes.
"""

from elite_media_player.domain.music.entities import PlaybackQueue, QueueRemoval, Track
from elite_media_player.domain.music.events import (
    LoadFailed,
    SessionEvent,
    StatusChanged,
    TrackChanged,
    TrackReady,
)
from elite_media_player.domain.music.value_objects import (
    FeedbackKind,
    PlaybackMode,
    PlaybackSource,
    PlaybackStatus,
    TrackId,
)

__all__ = [
    # Entities
    "Track",
    "PlaybackQueue",
    "QueueRemoval",
    # Value Objects
    "TrackId",
    "PlaybackStatus",
    "PlaybackMode",
    "PlaybackSource",
    "FeedbackKind",
    # Events
    "SessionEvent",
    "TrackChanged",
    "StatusChanged",
    "TrackReady",
    "LoadFailed",
]
