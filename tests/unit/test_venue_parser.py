"""Unit tests for the venues file parser."""

from __future__ import annotations

from showlist.models.diagnostics import DiagnosticType
from showlist.parsing.venue_parser import INCOMPLETE_VENUE, parse_venue_record, parse_venues_file


class TestParseVenueRecord:
    def test_full_record(self) -> None:
        record = parse_venue_record(
            "Fox Theater, 1807 Telegraph Ave, Oakland, a/a, 510-302-2250", 3
        )
        assert record is not None
        assert record.name == "Fox Theater"
        assert record.address == "1807 Telegraph Ave"
        assert record.city == "Oakland"
        assert record.age_restriction == "a/a"
        assert record.phone == "510-302-2250"
        assert record.line_number == 3

    def test_parenthesised_phone_and_age(self) -> None:
        record = parse_venue_record(
            "Bottom of the Hill, 1233 17th St, San Francisco, 21+, (415) 621-4455", 1
        )
        assert record is not None
        assert record.city == "San Francisco"
        assert record.age_restriction == "21+"
        assert record.phone == "(415) 621-4455"

    def test_placeholder_line(self) -> None:
        record = parse_venue_record("The Chapel,,,,", 1)
        assert record is not None
        assert record.name == "The Chapel"
        assert record.address == ""
        assert record.city is None
        assert record.phone is None
        assert record.age_restriction == "a/a"

    def test_single_field_rejected(self) -> None:
        assert parse_venue_record("Lonely Name", 1) is None

    def test_empty_name_rejected(self) -> None:
        assert parse_venue_record(", 123 Main St", 1) is None


class TestParseVenuesFile:
    def test_physical_line_numbers_and_warnings(self) -> None:
        content = "Fox Theater, 1807 Telegraph Ave, Oakland\n\nLonely Name\nThe Chapel,,,,\n"
        result = parse_venues_file(content, source_file="venues.txt")

        assert [venue.name for venue in result.raw_venues] == ["Fox Theater", "The Chapel"]
        assert [venue.line_number for venue in result.raw_venues] == [1, 4]
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.type == DiagnosticType.INCOMPLETE
        assert warning.message == INCOMPLETE_VENUE
        assert warning.line_number == 3
        assert warning.source_file == "venues.txt"
        assert result.errors == []
