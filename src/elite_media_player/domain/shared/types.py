"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once, so
models can simply annotate their fields::

    from elite_media_player.domain.shared.types import NonEmptyStr, Seconds

    class MyModel(BaseModel):
        title: NonEmptyStr
        duration: Seconds
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

from elite_media_player.domain.shared.datetime_utils import ensure_utc

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

Seconds = Annotated[float, Field(ge=0.0, allow_inf_nan=False)]
"""Finite, non-negative time offset or duration in seconds."""

PositiveSeconds = Annotated[float, Field(gt=0.0, allow_inf_nan=False)]
"""Finite time interval in seconds, strictly positive."""

QueueIndex = Annotated[int, Field(ge=0)]
"""Zero-based queue position."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""


# ── Datetime constraints ────────────────────────────────────────────

UtcDatetimeField = Annotated[datetime, BeforeValidator(ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""
