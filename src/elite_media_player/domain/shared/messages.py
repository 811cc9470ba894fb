"""Centralized message constants for error messages and log templates."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track Validation Errors
    EMPTY_TRACK_ID = "Track ID cannot be empty"
    DUPLICATE_TRACK = 'Track "{title}" is already in the queue'

    # Queue Validation Errors
    INVALID_QUEUE_POSITION = "Queue position {position} is out of range for a queue of {length}"

    # Session Errors
    SESSION_NOT_STARTED = "Playback session has not been started; call start() inside a running loop"
    SESSION_ALREADY_STARTED = "Playback session has already been started"
    LOAD_TIMED_OUT = "Timed out after {timeout:.1f}s waiting for the media engine"

    # Configuration Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_SLEEP_TIMER = "Sleep timer must be one of {choices} minutes"


class LogTemplates:
    """Log message templates.

    Use these with logger.info(), logger.error(), etc. and pass values as
    parameters for lazy formatting.
    """

    # Session Lifecycle
    SESSION_STARTED = "Playback session started with %d tracks"
    SESSION_CLOSED = "Playback session closed"
    SESSION_IGNORING_CLOSED = "Ignoring %s after session close"

    # Track Selection
    TRACK_SELECTED = "Selected '%s' (index %d)"
    TRACK_NOT_IN_QUEUE = "Track %s is not in the queue"
    TRACK_READY = "Track '%s' ready, duration %.1fs"
    TRACK_DURATION_UNKNOWN = "Engine reported no usable duration for '%s', using catalog value"
    STALE_LOAD_IGNORED = "Ignoring stale load %s for track %s"
    LOAD_FAILED = "Failed to load '%s': %s"
    LOAD_CANCELLED = "Load of '%s' superseded"

    # Transport
    STATUS_CHANGED = "Transport %s -> %s"
    TOGGLE_IGNORED = "Play/pause ignored while %s"
    SEEK = "Seek to %.2fs (requested %.2fs)"
    RESTART_CURRENT = "Restarting '%s' at %.2fs"
    QUEUE_EMPTY = "Navigation ignored: queue is empty"
    COMPLETED = "Track '%s' completed in %s mode"

    # Mode / Preferences
    MODE_CHANGED = "Playback mode %s -> %s"
    SOURCE_CHANGED = "Playback source %s -> %s"
    SLEEP_TIMER_SET = "Sleep timer set for %.1f minutes"
    SLEEP_TIMER_CANCELLED = "Sleep timer cancelled"
    SLEEP_TIMER_FIRED = "Sleep timer fired"

    # Queue Editing
    QUEUE_REPLACED = "Queue replaced with %d tracks"
    TRACK_ENQUEUED = "Enqueued '%s' at position %d"
    TRACK_REMOVED = "Removed '%s' from queue"

    # Capabilities
    CAPABILITY_FAILED = "Platform capability %s failed"
    CAPABILITY_MISSING = "No %s capability configured"

    # Event Bus
    EVENT_SUBSCRIBED = "Subscribed handler to: %s"
    EVENT_UNSUBSCRIBED = "Unsubscribed handler from %s"
    EVENT_HANDLER_FAILED = "Error in handler for %s"
