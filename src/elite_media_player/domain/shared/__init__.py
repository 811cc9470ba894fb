"""
Shared Domain Kernel

Contains exceptions, constrained types and the event bus shared by every
part of the player core.
"""

from elite_media_player.domain.shared.events import DomainEvent, EventBus
from elite_media_player.domain.shared.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    InvalidOperationError,
    MediaLoadError,
    ValidationError,
)

__all__ = [
    "DomainEvent",
    "EventBus",
    "DomainError",
    "ValidationError",
    "BusinessRuleViolationError",
    "InvalidOperationError",
    "MediaLoadError",
]
