"""
Unit Tests for the Shared Domain Kernel

Tests for:
- Domain exception hierarchy and error codes
- Constrained Annotated types
- UTC datetime helpers
"""

from datetime import UTC, datetime, timedelta, timezone

import pydantic
import pytest
from pydantic import TypeAdapter

from elite_media_player.domain.shared.datetime_utils import ensure_utc, utcnow
from elite_media_player.domain.shared.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    InvalidOperationError,
    MediaLoadError,
    ValidationError,
)
from elite_media_player.domain.shared.types import (
    PositiveSeconds,
    QueueIndex,
    Seconds,
    TrackTitleStr,
    UtcDatetimeField,
)

# =============================================================================
# Exception Tests
# =============================================================================


class TestDomainExceptions:
    """Unit tests for the exception hierarchy."""

    def test_domain_error_defaults_code_to_class_name(self):
        """Should fall back to the class name as the error code."""
        error = DomainError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.code == "DomainError"

    def test_validation_error_records_field(self):
        """Should keep the offending field name."""
        error = ValidationError("Sleep timer must be positive", field="minutes")
        assert error.field == "minutes"
        assert error.code == "VALIDATION_ERROR"

    def test_business_rule_default_message(self):
        """Should describe the rule when no message is given."""
        error = BusinessRuleViolationError("NO_DUPLICATES")
        assert str(error) == "Business rule violated: NO_DUPLICATES"

    def test_invalid_operation_default_message(self):
        """Should describe the operation and the state it was refused in."""
        error = InvalidOperationError("select track", "closed")
        assert str(error) == "Cannot perform 'select track' in state 'closed'"
        assert error.code == "INVALID_OPERATION"

    def test_media_load_error_message(self):
        """Should name the URL and the reason."""
        error = MediaLoadError("https://example.com/a.mp3", "404 Not Found")
        assert str(error) == "Could not load 'https://example.com/a.mp3': 404 Not Found"
        assert error.code == "MEDIA_LOAD_FAILED"
        assert MediaLoadError("x").reason is None

    @pytest.mark.parametrize(
        "error",
        [
            ValidationError("v"),
            BusinessRuleViolationError("r"),
            InvalidOperationError("o", "s"),
            MediaLoadError("u"),
        ],
    )
    def test_all_errors_are_domain_errors(self, error):
        assert isinstance(error, DomainError)


# =============================================================================
# Annotated Type Tests
# =============================================================================


class TestConstrainedTypes:
    """Unit tests for shared Annotated types."""

    def test_seconds_accepts_zero(self):
        assert TypeAdapter(Seconds).validate_python(0) == 0.0

    @pytest.mark.parametrize("value", [-0.1, float("nan"), float("inf")])
    def test_seconds_rejects_negative_and_non_finite(self, value):
        with pytest.raises(pydantic.ValidationError):
            TypeAdapter(Seconds).validate_python(value)

    def test_positive_seconds_rejects_zero(self):
        with pytest.raises(pydantic.ValidationError):
            TypeAdapter(PositiveSeconds).validate_python(0.0)

    def test_queue_index_rejects_negative(self):
        with pytest.raises(pydantic.ValidationError):
            TypeAdapter(QueueIndex).validate_python(-1)

    def test_track_title_length(self):
        adapter = TypeAdapter(TrackTitleStr)
        assert adapter.validate_python("Starboy") == "Starboy"
        with pytest.raises(pydantic.ValidationError):
            adapter.validate_python("")
        with pytest.raises(pydantic.ValidationError):
            adapter.validate_python("x" * 501)


# =============================================================================
# Datetime Tests
# =============================================================================


class TestDatetimeUtils:
    """Unit tests for UTC helpers."""

    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo == UTC

    def test_ensure_utc_converts_offsets(self):
        """Should normalise any aware datetime to UTC."""
        local = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(local) == datetime(2024, 1, 1, 10, 0, tzinfo=UTC)
        assert ensure_utc(local).tzinfo == UTC

    def test_ensure_utc_rejects_naive(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            ensure_utc(datetime(2024, 1, 1))

    def test_utc_field_validates(self):
        """Naive datetimes should fail validation on event fields."""
        adapter = TypeAdapter(UtcDatetimeField)
        with pytest.raises(pydantic.ValidationError):
            adapter.validate_python(datetime(2024, 1, 1))
