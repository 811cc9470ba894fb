# ruff: noqa: N999
"""
Domain Layer

Contains pure playback logic:
- shared/: Cross-cutting exceptions, types and the event bus
- music/: Track, queue, transport status and playback mode
"""

from elite_media_player.domain.music import PlaybackQueue, Track, TrackId
from elite_media_player.domain.shared.exceptions import DomainError

__all__ = [
    "Track",
    "TrackId",
    "PlaybackQueue",
    "DomainError",
]
