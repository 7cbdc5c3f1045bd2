"""Unit tests for the Pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from showlist.models.dataset import ProcessingResult
from showlist.models.diagnostics import Diagnostic, DiagnosticType, ParseOutcome
from showlist.models.entities import (
    AgeRestriction,
    Artist,
    Event,
    EventTag,
    PriceInfo,
    VenueType,
)


def _event(**overrides) -> Event:
    fields = {
        "id": 1,
        "slug": "2024-08-23-rancid-gilman",
        "date": "2024-08-23",
        "date_epoch_ms": 1724396400000,
        "timezone": "America/Los_Angeles",
        "headliner_artist_id": 10,
        "artist_ids": [10],
        "venue_id": 20,
        "source_line_number": 1,
    }
    fields.update(overrides)
    return Event(**fields)


# ======================================================================
# Entities
# ======================================================================


class TestEnums:
    def test_values(self) -> None:
        assert AgeRestriction.OVER_21.value == "21+"
        assert VenueType("diy") == VenueType.DIY
        assert EventTag.LATE_SHOW.value == "late-show"

    def test_str_subclass(self) -> None:
        assert AgeRestriction.ALL_AGES == "all-ages"


class TestEvent:
    def test_defaults(self) -> None:
        event = _event()
        assert event.price == PriceInfo()
        assert event.tags == []
        assert event.notes is None

    def test_requires_an_artist(self) -> None:
        with pytest.raises(ValidationError):
            _event(artist_ids=[])

    def test_frozen(self) -> None:
        event = _event()
        with pytest.raises(ValidationError):
            event.date = "2024-08-24"

    def test_model_copy_update(self) -> None:
        event = _event()
        assert event.model_copy(update={"notes": "benefit"}).notes == "benefit"
        assert event.notes is None

    def test_camel_case_dump(self) -> None:
        payload = _event(tags=[EventTag.FREE]).model_dump(mode="json", by_alias=True)
        assert payload["dateEpochMs"] == 1724396400000
        assert payload["headlinerArtistId"] == 10
        assert payload["price"] == {"min": None, "max": None, "isFree": False}
        assert payload["tags"] == ["free"]

    def test_accepts_camel_case_input(self) -> None:
        payload = _event().model_dump(by_alias=True)
        assert Event.model_validate(payload) == _event()


class TestArtist:
    def test_counts_non_negative(self) -> None:
        with pytest.raises(ValidationError):
            Artist(id=1, name="X", slug="x", normalized_name="x", total_event_count=-1)


# ======================================================================
# Diagnostics
# ======================================================================


class TestDiagnostics:
    @pytest.mark.parametrize(
        ("diagnostic_type", "is_error"),
        [
            (DiagnosticType.CRITICAL, True),
            (DiagnosticType.VALIDATION, True),
            (DiagnosticType.DATA, True),
            (DiagnosticType.FORMAT, False),
            (DiagnosticType.INCOMPLETE, False),
            (DiagnosticType.DATA_QUALITY, False),
        ],
    )
    def test_severity(self, diagnostic_type: DiagnosticType, is_error: bool) -> None:
        assert Diagnostic(type=diagnostic_type, message="m").is_error is is_error

    def test_outcome_routes_by_severity(self) -> None:
        outcome = ParseOutcome()
        outcome.add(Diagnostic(type=DiagnosticType.VALIDATION, message="No artists found"))
        outcome.add(Diagnostic(type=DiagnosticType.INCOMPLETE, message="Incomplete"))
        assert [d.message for d in outcome.errors] == ["No artists found"]
        assert [d.message for d in outcome.warnings] == ["Incomplete"]

    def test_outcomes_do_not_share_lists(self) -> None:
        first = ParseOutcome()
        first.add(Diagnostic(type=DiagnosticType.DATA, message="x"))
        assert ParseOutcome().errors == []

    def test_serialized_type_value(self) -> None:
        diagnostic = Diagnostic(type=DiagnosticType.DATA_QUALITY, message="m", line_number=3)
        payload = diagnostic.model_dump(mode="json", by_alias=True, exclude_none=True)
        assert payload == {"type": "data-quality", "message": "m", "lineNumber": 3}


class TestProcessingResult:
    def test_failure_shape(self) -> None:
        result = ProcessingResult(
            success=False,
            errors=[Diagnostic(type=DiagnosticType.CRITICAL, message="ETL processing failed: x")],
        )
        assert result.manifest is None
        assert result.stats is None
        assert result.warnings == []
