"""Port interface for the platform media engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

PositionTickCallback = Callable[[float], None]
CompletedCallback = Callable[[], None]


class MediaEngine(ABC):
    """Opaque playback engine owned exclusively by one playback session.

    Transport calls are fire-and-forget. The engine reports progress through
    the callbacks registered with ``set_on_position_tick`` (periodic, about
    2 Hz) and ``set_on_completed`` (once per playback-through). Callbacks may
    be invoked from any thread; the session marshals them onto its loop.
    """

    @abstractmethod
    async def load(self, url: str) -> float:
        """Replace the current item with ``url`` and wait until it is ready.

        Returns the asset duration in seconds (NaN or inf when unknown).
        Raises ``MediaLoadError`` (or any exception) when the asset cannot
        be prepared.
        """
        ...

    @abstractmethod
    def play(self) -> None:
        """Start or resume playback of the loaded item."""
        ...

    @abstractmethod
    def pause(self) -> None:
        """Pause playback of the loaded item."""
        ...

    @abstractmethod
    def seek(self, time: float) -> None:
        """Move the playhead to ``time`` seconds with zero tolerance."""
        ...

    @abstractmethod
    def set_on_position_tick(self, callback: PositionTickCallback | None) -> None:
        """Set (or clear, with None) the periodic position callback."""
        ...

    @abstractmethod
    def set_on_completed(self, callback: CompletedCallback | None) -> None:
        """Set (or clear, with None) the played-to-end callback."""
        ...
