"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the playback core and
platform adapters. These are the "ports" in hexagonal architecture.
"""

from elite_media_player.application.interfaces.media_engine import MediaEngine
from elite_media_player.application.interfaces.platform import (
    EqualizerPresenter,
    HapticFeedback,
    RoutePicker,
)

__all__ = [
    "MediaEngine",
    "HapticFeedback",
    "RoutePicker",
    "EqualizerPresenter",
]
