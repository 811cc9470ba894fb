"""Domain events published by a playback session.

Each event corresponds to exactly one logical state change; UI bindings
subscribe to the ones they render.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from elite_media_player.domain.music.value_objects import (
    OptionalTrackIdField,
    PlaybackMode,
    PlaybackSource,
    PlaybackStatus,
    TrackIdField,
)
from elite_media_player.domain.shared.events import DomainEvent
from elite_media_player.domain.shared.types import (
    NonEmptyStr,
    NonNegativeInt,
    PositiveSeconds,
    QueueIndex,
    Seconds,
)

if TYPE_CHECKING:
    from .entities import Track


class SessionEvent(DomainEvent):
    """Base class for everything a playback session publishes."""


class TrackChanged(SessionEvent):
    track_id: OptionalTrackIdField = None
    track_title: str = ""
    queue_index: QueueIndex | None = None

    @classmethod
    def from_track(cls, track: Track | None, queue_index: int | None) -> TrackChanged:
        """Create event from a Track entity (or its absence)."""
        if track is None:
            return cls(queue_index=queue_index)
        return cls(track_id=track.id, track_title=track.title, queue_index=queue_index)


class StatusChanged(SessionEvent):
    old_status: PlaybackStatus
    new_status: PlaybackStatus


class TrackReady(SessionEvent):
    track_id: TrackIdField
    duration_seconds: Seconds


class LoadFailed(SessionEvent):
    track_id: TrackIdField
    reason: NonEmptyStr
    timed_out: bool = False


class PositionChanged(SessionEvent):
    current_time: Seconds
    duration_seconds: Seconds


class PlaybackModeChanged(SessionEvent):
    old_mode: PlaybackMode
    new_mode: PlaybackMode


class PlaybackSourceChanged(SessionEvent):
    old_source: PlaybackSource
    new_source: PlaybackSource


class LikeToggled(SessionEvent):
    track_id: TrackIdField
    liked: bool


class QueueChanged(SessionEvent):
    queue_length: NonNegativeInt
    current_index: QueueIndex | None = None


class FavoriteRequested(SessionEvent):
    track_id: TrackIdField


class DownloadRequested(SessionEvent):
    track_id: TrackIdField
    source_url: NonEmptyStr


class SleepTimerFired(SessionEvent):
    after_seconds: PositiveSeconds
    paused_track_id: OptionalTrackIdField = None


class SessionClosed(SessionEvent):
    pass
