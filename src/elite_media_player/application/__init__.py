"""
Application Layer

The playback session that orchestrates the queue, the media engine and the
optional platform capabilities.
"""

from elite_media_player.application.services.playback_session import PlaybackSession
from elite_media_player.application.services.session_state import SessionSnapshot

__all__ = [
    "PlaybackSession",
    "SessionSnapshot",
]
