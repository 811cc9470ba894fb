"""Immutable value objects for the music domain."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import PlainSerializer, PlainValidator

from elite_media_player.domain.shared.messages import ErrorMessages


@dataclass(frozen=True)
class TrackId:
    """Catalog identifier of a track; the track's identity."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError(ErrorMessages.EMPTY_TRACK_ID)

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)

    @classmethod
    def coerce(cls, value: TrackId | str) -> TrackId:
        """Accept either a TrackId or its raw string form."""
        return value if isinstance(value, TrackId) else cls(str(value))


# Pydantic-compatible type aliases for TrackId fields.
# Serializes as plain string in JSON, stores as TrackId in the model.
TrackIdField = Annotated[
    TrackId,
    PlainValidator(TrackId.coerce),
    PlainSerializer(lambda v: v.value, return_type=str),
]

OptionalTrackIdField = Annotated[
    TrackId | None,
    PlainValidator(lambda v: None if v is None else TrackId.coerce(v)),
    PlainSerializer(lambda v: v.value if v is not None else None, return_type=str | None),
]


class PlaybackStatus(Enum):
    """Transport status with enforced transitions.

    State transitions:
    - IDLE -> LOADING (track selected)
    - LOADING -> PLAYING (engine ready, playback auto-starts)
    - LOADING -> IDLE (load failed or queue emptied)
    - PLAYING <-> PAUSED (toggle)
    - PLAYING/PAUSED -> LOADING (another track selected)
    - Any -> IDLE (close/cleanup)
    """

    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"

    def can_transition_to(self, target: PlaybackStatus) -> bool:
        """Check if transition to target status is valid."""
        valid_transitions = {
            PlaybackStatus.IDLE: {PlaybackStatus.LOADING},
            PlaybackStatus.LOADING: {PlaybackStatus.PLAYING, PlaybackStatus.IDLE},
            PlaybackStatus.PLAYING: {
                PlaybackStatus.PAUSED,
                PlaybackStatus.LOADING,
                PlaybackStatus.IDLE,
            },
            PlaybackStatus.PAUSED: {
                PlaybackStatus.PLAYING,
                PlaybackStatus.LOADING,
                PlaybackStatus.IDLE,
            },
        }
        return target in valid_transitions.get(self, set())

    @property
    def has_track(self) -> bool:
        return self != PlaybackStatus.IDLE

    @property
    def is_loaded(self) -> bool:
        """True once the engine has the asset ready (playing or paused)."""
        return self in {PlaybackStatus.PLAYING, PlaybackStatus.PAUSED}

    @property
    def is_playing(self) -> bool:
        return self == PlaybackStatus.PLAYING


class PlaybackMode(Enum):
    """How the next track is chosen. Presentation lives in utils.formatting."""

    NORMAL = "normal"
    REPEAT_ONE = "repeat_one"
    SHUFFLE = "shuffle"

    def next_mode(self) -> PlaybackMode:
        """Cycle to next playback mode."""
        modes = list(PlaybackMode)
        current_index = modes.index(self)
        next_index = (current_index + 1) % len(modes)
        return modes[next_index]


class PlaybackSource(Enum):
    """Where the session's catalog comes from."""

    LOCAL = "local"
    STREAMING = "streaming"
    RADIO = "radio"


class FeedbackKind(Enum):
    """Haptic feedback styles the session may request."""

    SUCCESS = "success"
    IMPACT = "impact"
