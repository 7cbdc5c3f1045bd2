"""Canonical domain entities for the showlist dataset.

Defines enums and Pydantic v2 models for artists, venues and events.  All
models use frozen config; the normalizer accumulates counts and backfills
addresses by storing ``model_copy(update=...)`` results back into its
registry rather than mutating instances in place.

Output-facing models serialize with camelCase aliases because the JSON
artifacts are read by a browser application.  Python code always uses the
snake_case attribute names.

Key relationships:
    - Event.artist_ids references Artist.id (headliner first)
    - Event.venue_id references Venue.id
    - Artist/Venue counts are derived from the final event set
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Shared config for every model that ends up in a JSON artifact.
OUTPUT_MODEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class AgeRestriction(str, Enum):  # noqa: UP042 - StrEnum requires Python 3.11+
    """Door policy of a show, ordered by detection priority."""

    ALL_AGES = "all-ages"
    OVER_21 = "21+"
    OVER_18 = "18+"
    OVER_16 = "16+"
    OVER_8 = "8+"
    OVER_6 = "6+"
    OVER_5 = "5+"


class VenueType(str, Enum):  # noqa: UP042
    """Venue classification.

    ``#`` after a listing marks a major venue, ``@`` a DIY space; anything
    else is inferred from the venue name and defaults to ``club``.
    """

    MAJOR = "major"
    DIY = "diy"
    CLUB = "club"


class EventTag(str, Enum):  # noqa: UP042
    """Fixed tag vocabulary.  Tags are additive, not mutually exclusive."""

    FREE = "free"
    SOLD_OUT = "sold-out"
    TRIBUTE = "tribute"
    HIP_HOP = "hip-hop"
    REGGAE = "reggae"
    FESTIVAL = "festival"
    OUTDOOR = "outdoor"
    MATINEE = "matinee"
    LATE_SHOW = "late-show"


class EventStatus(str, Enum):  # noqa: UP042
    CONFIRMED = "confirmed"
    SOLD_OUT = "sold-out"


# ---------------------------------------------------------------------------
# Value objects nested inside Event
# ---------------------------------------------------------------------------

class PriceInfo(BaseModel):
    """Ticket price.  No min/max and ``is_free=False`` means "unknown"."""

    model_config = OUTPUT_MODEL_CONFIG

    min: float | None = None
    max: float | None = None
    is_free: bool = False


class ShowTime(BaseModel):
    """Show and door times as zero-padded ``HH:MM`` strings."""

    model_config = OUTPUT_MODEL_CONFIG

    start_time: str | None = None
    door_time: str | None = None


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

class Artist(BaseModel):
    """A performer.  Identity is a pure function of ``normalized_name``."""

    model_config = OUTPUT_MODEL_CONFIG

    id: int
    name: str
    slug: str
    normalized_name: str
    aliases: list[str] = Field(default_factory=list)
    # Snapshot relative to the pipeline's run clock, recomputed at the end
    # of every run from the final event set.
    upcoming_event_count: int = Field(default=0, ge=0)
    total_event_count: int = Field(default=0, ge=0)


class Venue(BaseModel):
    """A place shows happen.  Identity is keyed on ``normalized_name`` only.

    Venues are first created from whichever source mentions them first
    (an event's venue line or the venues file).  ``address``, ``phone``
    and ``city`` are backfilled later when the existing value is empty.
    """

    model_config = OUTPUT_MODEL_CONFIG

    id: int
    name: str
    slug: str
    normalized_name: str
    city: str = ""
    address: str = ""
    phone: str | None = None
    neighborhood: str | None = None
    age_restriction: AgeRestriction = AgeRestriction.ALL_AGES
    venue_type: VenueType = VenueType.CLUB
    upcoming_event_count: int = Field(default=0, ge=0)
    total_event_count: int = Field(default=0, ge=0)
    source_line_number: int | None = None


class Event(BaseModel):
    """A single show on a single date at a single venue.

    Immutable once created by the normalizer.  ``id`` hashes the date,
    the normalized headliner and the normalized venue name.
    """

    model_config = OUTPUT_MODEL_CONFIG

    id: int
    slug: str
    date: str                                  # ISO date, e.g. "2024-08-15"
    date_epoch_ms: int                         # local midnight of `date`
    start_time_epoch_ms: int | None = None     # date + show time, when known
    timezone: str
    headliner_artist_id: int
    artist_ids: list[int] = Field(min_length=1)
    venue_id: int
    age_restriction: AgeRestriction = AgeRestriction.ALL_AGES
    price: PriceInfo = Field(default_factory=PriceInfo)
    time: ShowTime = Field(default_factory=ShowTime)
    status: EventStatus = EventStatus.CONFIRMED
    venue_type: VenueType = VenueType.CLUB
    tags: list[EventTag] = Field(default_factory=list)
    notes: str | None = None
    source_line_number: int
