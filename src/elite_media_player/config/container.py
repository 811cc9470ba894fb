"""Dependency Injection Container

Wires settings, the event bus and platform adapters into the single
playback session that every UI consumer binds to. Components are created on
first access and cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.media_engine import MediaEngine
    from ..application.interfaces.platform import (
        EqualizerPresenter,
        HapticFeedback,
        RoutePicker,
    )
    from ..application.services.playback_session import PlaybackSession
    from ..domain.shared.events import EventBus
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Holds the one media engine and the one session built around it, so the
    player screen, the playlist sheet and every playlist row share a single
    session instance.
    """

    settings: Settings
    media_engine: MediaEngine
    haptics: HapticFeedback | None = None
    route_picker: RoutePicker | None = None
    equalizer: EqualizerPresenter | None = None

    _event_bus: EventBus | None = None
    _playback_session: PlaybackSession | None = None

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    @property
    def playback_session(self) -> PlaybackSession:
        if self._playback_session is None:
            from ..application.services.playback_session import PlaybackSession

            self._playback_session = PlaybackSession(
                engine=self.media_engine,
                player_settings=self.settings.player,
                sleep_timer_settings=self.settings.sleep_timer,
                event_bus=self.event_bus,
                haptics=self.haptics,
                route_picker=self.route_picker,
                equalizer=self.equalizer,
            )
            logger.debug("Created playback session")
        return self._playback_session

    # === Lifecycle ===

    def initialize(self) -> None:
        """Configure logging from settings. The host app calls this once at startup."""
        from ..utils.logging import setup_logging

        setup_logging(self.settings.log_level)
        logger.info("Container initialized, log level %s", self.settings.log_level)

    def shutdown(self) -> None:
        """Close the session if one was created."""
        if self._playback_session is not None:
            self._playback_session.close()
            self._playback_session = None
        if self._event_bus is not None:
            self._event_bus.clear()


def create_container(
    settings: Settings | None = None,
    *,
    media_engine: MediaEngine,
    haptics: HapticFeedback | None = None,
    route_picker: RoutePicker | None = None,
    equalizer: EqualizerPresenter | None = None,
) -> Container:
    """Create a container, loading settings from the environment when omitted."""
    if settings is None:
        from .settings import get_settings

        settings = get_settings()

    return Container(
        settings=settings,
        media_engine=media_engine,
        haptics=haptics,
        route_picker=route_picker,
        equalizer=equalizer,
    )
