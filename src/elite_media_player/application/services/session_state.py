"""Read model handed to UI bindings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import Track
from ...domain.music.value_objects import PlaybackMode, PlaybackSource, PlaybackStatus
from ...domain.shared.types import NonNegativeInt, QueueIndex, Seconds


class SessionSnapshot(BaseModel):
    """Immutable view of a playback session at one instant."""

    model_config = ConfigDict(frozen=True)

    current_track: Track | None = None
    current_index: QueueIndex | None = None
    status: PlaybackStatus = PlaybackStatus.IDLE
    current_time: Seconds = 0.0
    duration: Seconds = 0.0
    mode: PlaybackMode = PlaybackMode.NORMAL
    liked: bool = False
    scrubbing: bool = False
    source: PlaybackSource = PlaybackSource.STREAMING
    queue_length: NonNegativeInt = 0

    @property
    def is_playing(self) -> bool:
        return self.status.is_playing

    @property
    def progress(self) -> float:
        """Fraction of the track played, 0.0 when the duration is unknown."""
        if self.duration <= 0:
            return 0.0
        return min(self.current_time / self.duration, 1.0)
