"""Core domain entities: the track value and the playback queue."""

from __future__ import annotations

import random
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from elite_media_player.domain.music.value_objects import PlaybackMode, TrackId, TrackIdField
from elite_media_player.domain.shared.exceptions import (
    BusinessRuleViolationError,
    ValidationError,
)
from elite_media_player.domain.shared.messages import ErrorMessages
from elite_media_player.domain.shared.types import (
    NonEmptyStr,
    QueueIndex,
    Seconds,
    TrackTitleStr,
)


class Track(BaseModel):
    """Immutable value object representing a playable track.

    Two tracks are equal when their ids are equal, whatever the metadata.
    """

    model_config = ConfigDict(frozen=True)

    id: TrackIdField
    title: TrackTitleStr
    artist: NonEmptyStr = "Unknown Artist"
    duration_seconds: Seconds = 0.0
    artwork: str | None = None
    source_url: NonEmptyStr

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Track):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def duration_formatted(self) -> str:
        """Format duration as M:SS or H:MM:SS."""
        hours, remainder = divmod(int(self.duration_seconds), 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"


class QueueRemoval(BaseModel):
    """Outcome of removing a track from the queue."""

    model_config = ConfigDict(frozen=True)

    track: Track
    index: QueueIndex
    removed_current: bool


class PlaybackQueue(BaseModel):
    """Ordered track list plus the current-position pointer.

    ``current_index`` is ``None`` exactly when the queue is empty; otherwise
    it is always in ``[0, length)``. Shuffle picks never reorder ``tracks``.
    """

    tracks: list[Track] = Field(default_factory=list)
    current_index: QueueIndex | None = None

    _rng: random.Random = PrivateAttr(default_factory=random.Random)

    @model_validator(mode="after")
    def _check_invariants(self) -> PlaybackQueue:
        _ensure_unique(self.tracks)
        if not self.tracks:
            self.current_index = None
        elif self.current_index is None:
            self.current_index = 0
        elif self.current_index >= len(self.tracks):
            raise ValueError(
                ErrorMessages.INVALID_QUEUE_POSITION.format(
                    position=self.current_index, length=len(self.tracks)
                )
            )
        return self

    def use_random(self, rng: random.Random) -> None:
        """Replace the random source used for shuffle picks."""
        self._rng = rng

    # ── Queries ────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self.tracks)

    @property
    def length(self) -> int:
        return len(self.tracks)

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    @property
    def current_track(self) -> Track | None:
        if self.current_index is None:
            return None
        return self.tracks[self.current_index]

    def index_of(self, track_id: TrackId | str) -> int | None:
        wanted = TrackId.coerce(track_id)
        for index, track in enumerate(self.tracks):
            if track.id == wanted:
                return index
        return None

    def track_at(self, index: int) -> Track:
        self._check_index(index)
        return self.tracks[index]

    # ── Selection ──────────────────────────────────────────────────

    def random_index(self) -> int | None:
        """Uniform pick over the whole queue; may return the current index."""
        if not self.tracks:
            return None
        return self._rng.randrange(len(self.tracks))

    def next_index(self, mode: PlaybackMode, current: int | None = None) -> int | None:
        if not self.tracks:
            return None
        if mode == PlaybackMode.SHUFFLE:
            return self.random_index()
        base = self._resolve_current(current)
        return (base + 1) % len(self.tracks)

    def previous_index(self, mode: PlaybackMode, current: int | None = None) -> int | None:
        if not self.tracks:
            return None
        if mode == PlaybackMode.SHUFFLE:
            return self.random_index()
        base = self._resolve_current(current)
        return (base - 1 + len(self.tracks)) % len(self.tracks)

    def set_current(self, index: int) -> Track:
        self._check_index(index)
        self.current_index = index
        return self.tracks[index]

    # ── Mutation ───────────────────────────────────────────────────

    def replace(self, tracks: Iterable[Track]) -> None:
        new_tracks = list(tracks)
        _ensure_unique(new_tracks)
        self.tracks = new_tracks
        self.current_index = 0 if new_tracks else None

    def insert(self, track: Track, position: int | None = None) -> int:
        """Insert a track (append when ``position`` is None) and return its index."""
        if self.index_of(track.id) is not None:
            raise BusinessRuleViolationError(
                rule="NO_DUPLICATES",
                message=ErrorMessages.DUPLICATE_TRACK.format(title=track.title),
            )

        if position is None:
            position = len(self.tracks)
        elif not 0 <= position <= len(self.tracks):
            raise ValidationError(
                ErrorMessages.INVALID_QUEUE_POSITION.format(
                    position=position, length=len(self.tracks)
                ),
                field="position",
            )

        self.tracks.insert(position, track)
        if self.current_index is None:
            self.current_index = 0
        elif position <= self.current_index:
            self.current_index += 1
        return position

    def remove(self, track_id: TrackId | str) -> QueueRemoval | None:
        index = self.index_of(track_id)
        if index is None:
            return None

        track = self.tracks.pop(index)
        removed_current = index == self.current_index

        if not self.tracks:
            self.current_index = None
        elif self.current_index is not None and index < self.current_index:
            self.current_index -= 1
        elif removed_current:
            # The next track slid into this slot; clamp when the tail was removed.
            self.current_index = min(index, len(self.tracks) - 1)

        return QueueRemoval(track=track, index=index, removed_current=removed_current)

    # ── Helpers ────────────────────────────────────────────────────

    def _resolve_current(self, current: int | None) -> int:
        if current is None:
            return self.current_index or 0
        self._check_index(current)
        return current

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.tracks):
            raise ValidationError(
                ErrorMessages.INVALID_QUEUE_POSITION.format(
                    position=index, length=len(self.tracks)
                ),
                field="index",
            )


def _ensure_unique(tracks: list[Track]) -> None:
    seen: set[TrackId] = set()
    for track in tracks:
        if track.id in seen:
            raise BusinessRuleViolationError(
                rule="NO_DUPLICATES",
                message=ErrorMessages.DUPLICATE_TRACK.format(title=track.title),
            )
        seen.add(track.id)
