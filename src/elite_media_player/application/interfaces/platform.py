"""Port interfaces for optional platform capabilities.

The session calls these when they are injected and skips them otherwise,
so the core runs without a platform runtime.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from elite_media_player.domain.music.value_objects import FeedbackKind


class HapticFeedback(ABC):
    """Interface for device haptics."""

    @abstractmethod
    def notify(self, kind: FeedbackKind) -> None:
        """Fire a haptic of the given kind."""
        ...


class RoutePicker(ABC):
    """Interface for the audio output route picker (AirPlay and similar)."""

    @abstractmethod
    def present(self) -> None: ...


class EqualizerPresenter(ABC):
    """Interface for showing the platform equalizer."""

    @abstractmethod
    def present(self) -> None: ...
