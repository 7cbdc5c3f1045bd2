"""Shared pytest fixtures for the showlist test suite."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import pytest
import structlog

from showlist.models.pipeline import PipelineOptions
from showlist.models.raw import RawEventData

# ---------------------------------------------------------------------------
# Sample listings
# ---------------------------------------------------------------------------

SAMPLE_EVENTS = """\
aug 23 fri The Strokes, Arctic Monkeys
Franz Ferdinand
at the Fox Theater, Oakland a/a $50.60 7pm/8pm #

aug 24 sat Rancid, Green Day at Gilman St, Berkeley a/a $10 3pm @

sep 2 mon Mountain Goats
at The Chapel, sf 21+ $25 8pm (sold out)

aug 23 fri the strokes
at Fox Theater, Oakland a/a $50.60 8pm

jul 25 thu Rancid
at 924 Gilman, Berkeley a/a free 4pm (hardcore matinee)
"""

SAMPLE_VENUES = """\
Fox Theater, 1807 Telegraph Ave, Oakland, a/a, 510-302-2250
924 Gilman, 924 Gilman St, Berkeley, a/a
The Chapel, 777 Valencia St, San Francisco, 21+, (415) 551-5157
Great American Music Hall, 859 O'Farrell St, San Francisco, a/a
"""


def make_raw_event(
    artist_line: str,
    venue_line: str = "at Gilman, Berkeley a/a $10 8pm",
    date_string: str = "aug 23 fri",
    line_number: int = 1,
) -> RawEventData:
    """Build a raw event block the way the events parser would."""
    raw_text = "\n".join(part for part in (f"{date_string} {artist_line}".strip(), venue_line))
    return RawEventData(
        date_string=date_string,
        artist_line=artist_line,
        venue_line=venue_line,
        raw_text=raw_text,
        line_number=line_number,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop logging config after each test so no logger keeps a closed capture stream."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def fixed_now() -> datetime:
    """Run clock for deterministic tests (naive, i.e. listing-local time)."""
    return datetime(2024, 8, 20, 12, 0)


@pytest.fixture
def options() -> PipelineOptions:
    return PipelineOptions(venue_aliases={"gilman st": "924 Gilman", "gilman": "924 Gilman"})


@pytest.fixture
def source_files(tmp_path: Path) -> tuple[Path, Path]:
    """Write the sample listings to disk and return (events, venues) paths."""
    events_path = tmp_path / "events.txt"
    venues_path = tmp_path / "venues.txt"
    events_path.write_text(SAMPLE_EVENTS, encoding="utf-8")
    venues_path.write_text(SAMPLE_VENUES, encoding="utf-8")
    return events_path, venues_path
