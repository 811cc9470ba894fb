"""Playback Session - the transport state machine and queue driver.

A session owns the current track, transport status, playhead and mode. It
decides what plays next, drives the single media engine it owns, and
publishes one domain event per logical state change.

All mutation happens on the asyncio loop the session was started on. User
commands are expected to be issued from that loop; engine ticks and
completion events are marshalled onto it with ``call_soon_threadsafe``.
"""

from __future__ import annotations

import asyncio
import logging
import math
import random
from collections import deque
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from ...config.settings import PlayerSettings, SleepTimerSettings
from ...domain.music.entities import PlaybackQueue, Track
from ...domain.music.events import (
    DownloadRequested,
    FavoriteRequested,
    LikeToggled,
    LoadFailed,
    PlaybackModeChanged,
    PlaybackSourceChanged,
    PositionChanged,
    QueueChanged,
    SessionClosed,
    SleepTimerFired,
    StatusChanged,
    TrackChanged,
    TrackReady,
)
from ...domain.music.value_objects import (
    FeedbackKind,
    PlaybackMode,
    PlaybackSource,
    PlaybackStatus,
    TrackId,
)
from ...domain.shared.events import DomainEvent, EventBus
from ...domain.shared.exceptions import InvalidOperationError, ValidationError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from .session_state import SessionSnapshot

if TYPE_CHECKING:
    from ..interfaces.media_engine import MediaEngine
    from ..interfaces.platform import EqualizerPresenter, HapticFeedback, RoutePicker

logger = logging.getLogger(__name__)


class PlaybackSession:
    """Transport state machine over a playback queue and a media engine."""

    def __init__(
        self,
        *,
        engine: MediaEngine,
        player_settings: PlayerSettings | None = None,
        sleep_timer_settings: SleepTimerSettings | None = None,
        event_bus: EventBus | None = None,
        haptics: HapticFeedback | None = None,
        route_picker: RoutePicker | None = None,
        equalizer: EqualizerPresenter | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._engine = engine
        self._settings = player_settings or PlayerSettings()
        self._sleep_settings = sleep_timer_settings or SleepTimerSettings()
        self._bus = event_bus or EventBus()
        self._haptics = haptics
        self._route_picker = route_picker
        self._equalizer = equalizer

        self._queue = PlaybackQueue()
        if rng is not None:
            self._queue.use_random(rng)

        self._current_track: Track | None = None
        self._status = PlaybackStatus.IDLE
        self._current_time = 0.0
        self._duration = 0.0
        self._mode = self._settings.default_mode
        self._source = self._settings.default_source
        self._liked = False
        self._scrubbing = False

        self._loop: asyncio.AbstractEventLoop | None = None
        self._load_task: asyncio.Task[None] | None = None
        self._sleep_handle: asyncio.TimerHandle | None = None
        self._closed = False
        self._outbox: deque[DomainEvent] = deque()
        self._publishing = False

    # ── Lifecycle ──────────────────────────────────────────────────

    def start(self, tracks: Iterable[Track] = ()) -> None:
        """Bind to the running loop, subscribe to the engine and load the catalog."""
        if self._loop is not None:
            raise InvalidOperationError(
                operation="start",
                current_state="started",
                message=ErrorMessages.SESSION_ALREADY_STARTED,
            )
        self._loop = asyncio.get_running_loop()
        self._engine.set_on_position_tick(self._post_tick)
        self._engine.set_on_completed(self._post_completed)

        catalog = list(tracks)
        if catalog:
            self._queue.replace(catalog)
            self._publish_queue_changed()
        logger.info(LogTemplates.SESSION_STARTED, len(catalog))

    def close(self) -> None:
        """Tear down the engine subscription and return to idle."""
        if self._closed:
            return
        self._closed = True
        self.cancel_sleep_timer()
        self._engine.set_on_position_tick(None)
        self._engine.set_on_completed(None)
        self._unload()
        self._publish(SessionClosed())
        logger.info(LogTemplates.SESSION_CLOSED)

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ── Observation ────────────────────────────────────────────────

    @property
    def events(self) -> EventBus:
        return self._bus

    def subscribe(self, event_type: type[DomainEvent], handler: Callable[[Any], Any]) -> None:
        self._bus.subscribe(event_type, handler)

    def unsubscribe(self, event_type: type[DomainEvent], handler: Callable[[Any], Any]) -> None:
        self._bus.unsubscribe(event_type, handler)

    @property
    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            current_track=self._current_track,
            current_index=self._queue.current_index,
            status=self._status,
            current_time=self._current_time,
            duration=self._duration,
            mode=self._mode,
            liked=self._liked,
            scrubbing=self._scrubbing,
            source=self._source,
            queue_length=self._queue.length,
        )

    @property
    def status(self) -> PlaybackStatus:
        return self._status

    @property
    def current_track(self) -> Track | None:
        return self._current_track

    @property
    def current_index(self) -> int | None:
        return self._queue.current_index

    @property
    def current_time(self) -> float:
        return self._current_time

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def mode(self) -> PlaybackMode:
        return self._mode

    @property
    def source(self) -> PlaybackSource:
        return self._source

    @property
    def is_liked(self) -> bool:
        return self._liked

    @property
    def is_scrubbing(self) -> bool:
        return self._scrubbing

    @property
    def tracks(self) -> tuple[Track, ...]:
        return tuple(self._queue.tracks)

    @property
    def sleep_timer_active(self) -> bool:
        return self._sleep_handle is not None

    # ── Track selection ────────────────────────────────────────────

    def select_track(self, track: Track | TrackId | str) -> bool:
        """Make ``track`` current and start loading it; playback auto-starts when ready.

        Any load still in flight is cancelled, and its late result is ignored.
        Returns False when the track is not in the queue.
        """
        loop = self._require_loop("select track")
        track_id = track.id if isinstance(track, Track) else TrackId.coerce(track)
        index = self._queue.index_of(track_id)
        if index is None:
            logger.warning(LogTemplates.TRACK_NOT_IN_QUEUE, track_id)
            return False

        self._cancel_load()
        selected = self._queue.set_current(index)
        previous = self._current_track

        self._current_track = selected
        self._liked = False
        self._duration = 0.0
        pending = [self._update_time(0.0)]
        if previous is None or previous.id != selected.id:
            pending.append(TrackChanged.from_track(selected, index))
        pending.append(self._set_status(PlaybackStatus.LOADING))

        task = loop.create_task(self._load(selected))
        task.add_done_callback(self._on_load_task_done)
        self._load_task = task
        logger.info(LogTemplates.TRACK_SELECTED, selected.title, index)

        self._publish(*pending)
        return True

    async def _load(self, track: Track) -> None:
        timeout = self._settings.load_timeout_seconds
        try:
            duration = await asyncio.wait_for(self._engine.load(track.source_url), timeout)
        except asyncio.CancelledError:
            logger.debug(LogTemplates.LOAD_CANCELLED, track.title)
            raise
        except TimeoutError:
            self.on_engine_failed(
                track.id, ErrorMessages.LOAD_TIMED_OUT.format(timeout=timeout), timed_out=True
            )
            return
        except Exception as e:
            self.on_engine_failed(track.id, e)
            return

        self.on_engine_ready(track.id, duration)

    def _on_load_task_done(self, task: asyncio.Task[None]) -> None:
        if self._load_task is task:
            self._load_task = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unexpected error completing load", exc_info=exc)

    def _cancel_load(self) -> None:
        task, self._load_task = self._load_task, None
        # A load task reporting its own failure must be allowed to finish.
        if task is not None and task is not asyncio.current_task(self._loop):
            task.cancel()

    def on_engine_ready(self, track_id: TrackId | str, duration: float) -> bool:
        """Apply a load result; stale results for superseded tracks are ignored."""
        track = self._pending_track(track_id)
        if track is None:
            logger.debug(LogTemplates.STALE_LOAD_IGNORED, "ready", track_id)
            return False

        self._duration = self._resolve_duration(track, duration)
        logger.info(LogTemplates.TRACK_READY, track.title, self._duration)
        self._engine.play()
        pending = [
            self._set_status(PlaybackStatus.PLAYING),
            TrackReady(track_id=track.id, duration_seconds=self._duration),
        ]
        self._publish(*pending)
        return True

    def on_engine_failed(
        self, track_id: TrackId | str, error: BaseException | str, *, timed_out: bool = False
    ) -> bool:
        """Surface a load failure and fall back to idle without touching the queue position."""
        track = self._pending_track(track_id)
        if track is None:
            logger.debug(LogTemplates.STALE_LOAD_IGNORED, "failure", track_id)
            return False

        reason = str(error) or type(error).__name__
        logger.warning(LogTemplates.LOAD_FAILED, track.title, reason)
        pending = self._clear_track()
        pending.append(LoadFailed(track_id=track.id, reason=reason, timed_out=timed_out))
        self._publish(*pending)
        return True

    def _pending_track(self, track_id: TrackId | str) -> Track | None:
        track = self._current_track
        if track is None or self._status != PlaybackStatus.LOADING:
            return None
        if track.id != TrackId.coerce(track_id):
            return None
        return track

    @staticmethod
    def _resolve_duration(track: Track, reported: float) -> float:
        if reported is None or not math.isfinite(reported) or reported < 0:
            logger.info(LogTemplates.TRACK_DURATION_UNKNOWN, track.title)
            return track.duration_seconds
        return float(reported)

    # ── Transport ──────────────────────────────────────────────────

    def toggle_play_pause(self) -> bool:
        if self._status == PlaybackStatus.PLAYING:
            self._engine.pause()
            self._transition_to(PlaybackStatus.PAUSED)
            return True
        if self._status == PlaybackStatus.PAUSED:
            self._engine.play()
            self._transition_to(PlaybackStatus.PLAYING)
            return True

        logger.debug(LogTemplates.TOGGLE_IGNORED, self._status.value)
        return False

    def next_track(self) -> bool:
        index = self._queue.next_index(self._mode)
        if index is None:
            logger.debug(LogTemplates.QUEUE_EMPTY)
            return False
        return self.select_track(self._queue.track_at(index))

    def previous_track(self) -> bool:
        """Go back one track, or restart the current one when past the threshold."""
        if self._queue.is_empty:
            logger.debug(LogTemplates.QUEUE_EMPTY)
            return False

        if (
            self._current_track is not None
            and self._current_time > self._settings.restart_threshold_seconds
        ):
            logger.debug(LogTemplates.RESTART_CURRENT, self._current_track.title, self._current_time)
            return self.seek(0.0)

        index = self._queue.previous_index(self._mode)
        if index is None:
            return False
        return self.select_track(self._queue.track_at(index))

    def seek(self, time: float) -> bool:
        """Move the playhead, clamped into ``[0, duration]``. Status is unchanged."""
        if self._current_track is None:
            return False

        target = self._clamp_time(time)
        logger.debug(LogTemplates.SEEK, target, time)
        self._engine.seek(target)
        self._set_time(target)
        return True

    def set_scrubbing(self, scrubbing: bool, *, commit: bool = True) -> None:
        """Suspend engine ticks while the user drags; releasing commits a seek."""
        if scrubbing == self._scrubbing:
            return
        self._scrubbing = scrubbing
        if not scrubbing and commit:
            self.seek(self._current_time)

    def scrub_to(self, time: float) -> bool:
        """Move the displayed playhead during a drag without touching the engine."""
        if not self._scrubbing or self._current_track is None:
            return False
        self._set_time(self._clamp_time(time))
        return True

    def _clamp_time(self, time: float) -> float:
        if math.isnan(time):
            return 0.0
        return max(0.0, min(time, self._duration))

    def _set_time(self, time: float) -> None:
        self._publish(self._update_time(time))

    def _update_time(self, time: float) -> PositionChanged | None:
        if time == self._current_time:
            return None
        self._current_time = time
        return PositionChanged(current_time=time, duration_seconds=self._duration)

    # ── Engine events ──────────────────────────────────────────────

    def _post_tick(self, time: float) -> None:
        if self._closed or self._loop is None:
            logger.debug(LogTemplates.SESSION_IGNORING_CLOSED, "position tick")
            return
        self._loop.call_soon_threadsafe(self.on_engine_tick, time)

    def _post_completed(self) -> None:
        if self._closed or self._loop is None:
            logger.debug(LogTemplates.SESSION_IGNORING_CLOSED, "completion")
            return
        self._loop.call_soon_threadsafe(self.on_engine_completed)

    def on_engine_tick(self, time: float) -> None:
        """Record the engine playhead; last write wins."""
        if self._scrubbing or not self._status.is_loaded:
            return
        if time is None or not math.isfinite(time):
            return
        position = max(0.0, time)
        if self._duration > 0:
            position = min(position, self._duration)
        self._set_time(position)

    def on_engine_completed(self) -> None:
        track = self._current_track
        if track is None or not self._status.is_loaded:
            return

        logger.info(LogTemplates.COMPLETED, track.title, self._mode.value)
        if self._mode == PlaybackMode.NORMAL:
            self.next_track()
        elif self._mode == PlaybackMode.REPEAT_ONE:
            self._engine.seek(0.0)
            self._engine.play()
            pending = [self._update_time(0.0), self._set_status(PlaybackStatus.PLAYING)]
            self._publish(*pending)
        else:
            index = self._queue.random_index()
            if index is not None:
                self.select_track(self._queue.track_at(index))

    # ── Mode and preferences ───────────────────────────────────────

    def cycle_playback_mode(self) -> PlaybackMode:
        old_mode = self._mode
        self._mode = old_mode.next_mode()
        logger.info(LogTemplates.MODE_CHANGED, old_mode.value, self._mode.value)
        self._publish(PlaybackModeChanged(old_mode=old_mode, new_mode=self._mode))
        self._haptic(FeedbackKind.SUCCESS)
        return self._mode

    def set_playback_source(self, source: PlaybackSource) -> bool:
        if source == self._source:
            return False
        old_source = self._source
        self._source = source
        logger.info(LogTemplates.SOURCE_CHANGED, old_source.value, source.value)
        self._publish(PlaybackSourceChanged(old_source=old_source, new_source=source))
        return True

    def toggle_like(self) -> bool | None:
        """Flip the liked flag of the current track; None when nothing is selected."""
        if self._current_track is None:
            return None
        self._liked = not self._liked
        self._publish(LikeToggled(track_id=self._current_track.id, liked=self._liked))
        self._haptic(FeedbackKind.IMPACT)
        return self._liked

    def add_to_favorites(self) -> bool:
        if self._current_track is None:
            return False
        self._haptic(FeedbackKind.SUCCESS)
        self._publish(FavoriteRequested(track_id=self._current_track.id))
        return True

    def download_current_track(self) -> bool:
        if self._current_track is None:
            return False
        self._haptic(FeedbackKind.SUCCESS)
        self._publish(
            DownloadRequested(
                track_id=self._current_track.id, source_url=self._current_track.source_url
            )
        )
        return True

    def show_route_picker(self) -> bool:
        if self._route_picker is None:
            logger.debug(LogTemplates.CAPABILITY_MISSING, "route picker")
            return False
        return self._invoke_capability("route picker", self._route_picker.present)

    def show_equalizer(self) -> bool:
        self._haptic(FeedbackKind.IMPACT)
        if self._equalizer is None:
            logger.debug(LogTemplates.CAPABILITY_MISSING, "equalizer")
            return False
        return self._invoke_capability("equalizer", self._equalizer.present)

    def _haptic(self, kind: FeedbackKind) -> None:
        if self._haptics is not None:
            self._invoke_capability("haptics", self._haptics.notify, kind)

    @staticmethod
    def _invoke_capability(name: str, fn: Callable[..., Any], *args: Any) -> bool:
        try:
            fn(*args)
        except Exception:
            logger.exception(LogTemplates.CAPABILITY_FAILED, name)
            return False
        return True

    # ── Sleep timer ────────────────────────────────────────────────

    def set_sleep_timer(self, minutes: float | None = None) -> None:
        """Pause playback after ``minutes`` (configured default when None)."""
        loop = self._require_loop("set sleep timer")
        if minutes is None:
            minutes = self._sleep_settings.default_minutes
        if not math.isfinite(minutes) or minutes <= 0:
            raise ValidationError("Sleep timer must be positive", field="minutes")

        self.cancel_sleep_timer()
        delay = minutes * 60.0
        self._sleep_handle = loop.call_later(delay, self._on_sleep_timer, delay)
        logger.info(LogTemplates.SLEEP_TIMER_SET, minutes)

    def cancel_sleep_timer(self) -> bool:
        if self._sleep_handle is None:
            return False
        self._sleep_handle.cancel()
        self._sleep_handle = None
        logger.debug(LogTemplates.SLEEP_TIMER_CANCELLED)
        return True

    def _on_sleep_timer(self, delay: float) -> None:
        self._sleep_handle = None
        logger.info(LogTemplates.SLEEP_TIMER_FIRED)
        paused_track_id = None
        if self._status == PlaybackStatus.PLAYING and self._current_track is not None:
            paused_track_id = self._current_track.id
            self._engine.pause()
            self._transition_to(PlaybackStatus.PAUSED)
        self._publish(SleepTimerFired(after_seconds=delay, paused_track_id=paused_track_id))

    # ── Queue editing ──────────────────────────────────────────────

    def replace_queue(self, tracks: Iterable[Track]) -> None:
        """Swap the catalog; whatever was loaded is stopped."""
        self._queue.replace(tracks)
        self._unload()
        self._publish_queue_changed()
        logger.info(LogTemplates.QUEUE_REPLACED, self._queue.length)

    def enqueue(self, track: Track, position: int | None = None) -> int:
        index = self._queue.insert(track, position)
        logger.debug(LogTemplates.TRACK_ENQUEUED, track.title, index)
        self._publish_queue_changed()
        return index

    def remove_track(self, track_id: TrackId | str) -> bool:
        """Remove a track; if it was playing, the clamped neighbour is selected."""
        removal = self._queue.remove(track_id)
        if removal is None:
            logger.warning(LogTemplates.TRACK_NOT_IN_QUEUE, track_id)
            return False

        logger.info(LogTemplates.TRACK_REMOVED, removal.track.title)

        current = self._current_track
        if current is not None and current.id == removal.track.id:
            replacement = self._queue.current_track
            if replacement is None:
                self._unload()
            else:
                self.select_track(replacement)
        self._publish_queue_changed()
        return True

    def _publish_queue_changed(self) -> None:
        self._publish(
            QueueChanged(queue_length=self._queue.length, current_index=self._queue.current_index)
        )

    # ── Internals ──────────────────────────────────────────────────

    def _require_loop(self, operation: str) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            raise InvalidOperationError(
                operation=operation,
                current_state="not started",
                message=ErrorMessages.SESSION_NOT_STARTED,
            )
        if self._closed:
            raise InvalidOperationError(operation=operation, current_state="closed")
        return self._loop

    def _unload(self) -> None:
        """Drop the current track and return to idle."""
        self._publish(*self._clear_track())

    def _clear_track(self) -> list[DomainEvent | None]:
        """Reset to idle without publishing; returns the events describing the change."""
        self._cancel_load()
        if self._status.is_loaded:
            self._engine.pause()

        had_track = self._current_track is not None
        self._current_track = None
        self._liked = False
        self._duration = 0.0
        pending: list[DomainEvent | None] = [self._update_time(0.0)]
        if had_track:
            pending.append(TrackChanged.from_track(None, self._queue.current_index))
        pending.append(self._set_status(PlaybackStatus.IDLE))
        return pending

    def _publish(self, *events: DomainEvent | None) -> None:
        """Publish in the order the changes were made.

        Events raised by a handler's own commands wait until the current batch
        has been delivered.
        """
        self._outbox.extend(event for event in events if event is not None)
        if self._publishing:
            return
        self._publishing = True
        try:
            while self._outbox:
                self._bus.publish(self._outbox.popleft())
        finally:
            self._publishing = False

    def _transition_to(self, new_status: PlaybackStatus) -> None:
        self._publish(self._set_status(new_status))

    def _set_status(self, new_status: PlaybackStatus) -> StatusChanged | None:
        old_status = self._status
        if old_status == new_status:
            return None
        if not old_status.can_transition_to(new_status):
            raise InvalidOperationError(
                operation=f"transition to {new_status.value}",
                current_state=old_status.value,
                message=f"Cannot transition from {old_status.value} to {new_status.value}",
            )
        self._status = new_status
        logger.debug(LogTemplates.STATUS_CHANGED, old_status.value, new_status.value)
        return StatusChanged(old_status=old_status, new_status=new_status)
