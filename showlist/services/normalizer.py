"""Entity normalization: raw blocks and venue lines to canonical entities.

The normalizer folds raw records into an explicit :class:`EntityRegistry`
accumulator.  For each raw event it

1. parses the date and the venue line,
2. splits and repairs the artist names,
3. flags suspicious names (data-quality warnings only),
4. drops the event if its dedup key ``(date, venue, headliner)`` was
   already seen in this run,
5. resolves artist and venue identities and bumps their counts,
6. builds the immutable :class:`Event`.

Per-record failures never escape: each becomes a diagnostic and the
record is skipped.  Only events that are actually emitted contribute to
artist and venue counts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, Field

from showlist.models.diagnostics import Diagnostic, DiagnosticType, ParseOutcome
from showlist.models.entities import Artist, Event, EventStatus, EventTag, Venue
from showlist.models.pipeline import PipelineOptions
from showlist.models.raw import RawEventData, RawVenueData
from showlist.parsing.temporal import combine_epoch_ms, parse_date
from showlist.parsing.venue_line import (
    VenueLineInfo,
    determine_venue_type,
    parse_age_restriction,
    parse_venue_line,
)
from showlist.utils.errors import (
    DateFormatError,
    RecordValidationError,
    ShowlistError,
    VenueLineError,
)
from showlist.utils.hashing import artist_id, event_id, venue_id
from showlist.utils.logging import get_logger
from showlist.utils.text_normalizer import (
    create_slug,
    fuzzy_match,
    normalize_city,
    normalize_name,
    split_artist_names,
)

# ---------------------------------------------------------------------------
# Artist name repair and review heuristics
# ---------------------------------------------------------------------------

# Surname prefixes that legitimately produce camelCase ("McCarthy").
_LEGITIMATE_PREFIXES = frozenset({"Mc", "Mac", "De", "Di", "Du", "La", "Le", "Van"})
_CAMEL_SPLIT_PATTERN = re.compile(r"^([A-Z][a-z]+)([A-Z][a-z]+)$")

# Stylised names that trip the review heuristics but are spelled correctly.
_KNOWN_STYLISED = ("BADBADNOTGOOD", "3UpFront", "AC/DC")

_REVIEW_CHECKS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(r"^([A-Z][a-z]{3,})([A-Z][a-z]{3,})$"),
        'Possible concatenated artist name: "{name}" - might be two separate names',
    ),
    (
        re.compile(r"[A-Za-z]\d|\d[A-Za-z]"),
        'Artist name contains numbers: "{name}" - verify this is correct',
    ),
    (
        re.compile(r"^[A-Za-z]{15,}$"),
        'Unusually long single-word artist name: "{name}" - check for concatenation',
    ),
    (
        re.compile(r"^[a-z]+[A-Z][a-z]*$"),
        'Unusual capitalization in artist name: "{name}" - verify formatting',
    ),
]


def correct_artist_name(name: str) -> str:
    """Split an obvious two-word camelCase concatenation ("FeeFawfum").

    Short names and names starting with a surname prefix ("McCarthy",
    "DeAngelo") are left alone.
    """
    match = _CAMEL_SPLIT_PATTERN.match(name)
    if match and len(name) > 8 and match.group(1) not in _LEGITIMATE_PREFIXES:
        return f"{match.group(1)} {match.group(2)}"
    return name


def review_artist_name(name: str) -> str | None:
    """Return a review message for a suspicious artist name, or None.

    At most one message per name; the first matching heuristic wins.
    """
    if any(stylised in name for stylised in _KNOWN_STYLISED):
        return None
    for pattern, template in _REVIEW_CHECKS:
        if pattern.search(name):
            return template.format(name=name)
    return None


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@dataclass
class EntityRegistry:
    """Accumulator threaded through one normalization pass.

    Entities are frozen models; updates replace the stored instance with
    a ``model_copy``.  Dicts preserve first-mention order, which is the
    order entities are written out in.
    """

    artists: dict[str, Artist] = field(default_factory=dict)
    venues: dict[str, Venue] = field(default_factory=dict)
    event_keys: set[tuple[str, str, str]] = field(default_factory=set)
    duplicate_events: int = 0
    duplicate_artists: int = 0
    duplicate_venues: int = 0

    def resolve_artist(self, name: str) -> Artist:
        """Return the artist for *name*, creating it on first mention."""
        key = normalize_name(name)
        artist = self.artists.get(key)
        if artist is None:
            artist = Artist(
                id=artist_id(key),
                name=name.strip(),
                slug=create_slug(name),
                normalized_name=key,
            )
            self.artists[key] = artist
        return artist

    def resolve_venue(self, name: str, info: VenueLineInfo, line_number: int) -> Venue:
        """Return the venue for *name*, creating it from an event's venue line."""
        key = normalize_name(name)
        venue = self.venues.get(key)
        if venue is None:
            venue = Venue(
                id=venue_id(key),
                name=name.strip(),
                slug=create_slug(name),
                normalized_name=key,
                city=info.city,
                age_restriction=info.age_restriction,
                venue_type=info.venue_type,
                source_line_number=line_number,
            )
            self.venues[key] = venue
        elif not venue.city and info.city:
            venue = venue.model_copy(update={"city": info.city})
            self.venues[key] = venue
        return venue

    def count_event(self, artist_keys: list[str], venue_key: str) -> None:
        for key in artist_keys:
            artist = self.artists[key]
            self.artists[key] = artist.model_copy(
                update={"total_event_count": artist.total_event_count + 1}
            )
        venue = self.venues[venue_key]
        self.venues[venue_key] = venue.model_copy(
            update={"total_event_count": venue.total_event_count + 1}
        )

    def recount(self, events: list[Event], now_ms: int) -> None:
        """Recompute total and upcoming counts from the final event set.

        "Upcoming" means ``date_epoch_ms > now_ms``; the counts are a
        snapshot of the run clock.
        """
        totals: dict[int, int] = {}
        upcoming: dict[int, int] = {}
        for event in events:
            is_upcoming = event.date_epoch_ms > now_ms
            for entity_id in (*event.artist_ids, event.venue_id):
                totals[entity_id] = totals.get(entity_id, 0) + 1
                if is_upcoming:
                    upcoming[entity_id] = upcoming.get(entity_id, 0) + 1

        for key, artist in self.artists.items():
            self.artists[key] = artist.model_copy(
                update={
                    "total_event_count": totals.get(artist.id, 0),
                    "upcoming_event_count": upcoming.get(artist.id, 0),
                }
            )
        for key, venue in self.venues.items():
            self.venues[key] = venue.model_copy(
                update={
                    "total_event_count": totals.get(venue.id, 0),
                    "upcoming_event_count": upcoming.get(venue.id, 0),
                }
            )


class NormalizationResult(ParseOutcome):
    events: list[Event] = Field(default_factory=list)
    venues: list[Venue] = Field(default_factory=list)


class _Rejected(Exception):
    """Internal signal carrying the diagnostic for a skipped record."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------

class EntityNormalizer:
    """Turns raw records into canonical artists, venues and events.

    Parameters
    ----------
    options:
        Pipeline options (timezone, rollover window, thresholds, aliases).
    now:
        Run clock used for year inference.
    """

    def __init__(self, options: PipelineOptions | None = None, now: datetime | None = None) -> None:
        self._options = options or PipelineOptions()
        self._now = now
        self._venue_aliases = {
            normalize_name(alias): canonical
            for alias, canonical in self._options.venue_aliases.items()
        }
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def normalize_events(
        self,
        raw_events: list[RawEventData],
        registry: EntityRegistry,
        source_file: str | None = None,
    ) -> NormalizationResult:
        """Normalize every raw event block into *registry*.

        Returns
        -------
        NormalizationResult
            Emitted events in input order plus all diagnostics.
        """
        result = NormalizationResult()

        for raw in raw_events:
            try:
                event = self.normalize_event(registry, raw, result, source_file)
            except _Rejected as rejected:
                result.add(rejected.diagnostic)
                continue
            except Exception as exc:
                self._logger.error(
                    "event_normalization_failed",
                    line_number=raw.line_number,
                    error=str(exc),
                )
                result.add(
                    self._diagnostic(
                        DiagnosticType.DATA,
                        f"Normalization error: {exc}",
                        raw,
                        source_file,
                    )
                )
                continue
            if event is not None:
                result.events.append(event)

        self._logger.info(
            "events_normalized",
            raw_events=len(raw_events),
            events=len(result.events),
            artists=len(registry.artists),
            duplicates=registry.duplicate_events,
            errors=len(result.errors),
            warnings=len(result.warnings),
        )
        return result

    def normalize_event(
        self,
        registry: EntityRegistry,
        raw: RawEventData,
        outcome: ParseOutcome,
        source_file: str | None = None,
    ) -> Event | None:
        """Normalize one raw block.

        Non-fatal findings are added to *outcome*.  Returns None when the
        event is a duplicate.  Raises ``_Rejected`` for records that cannot
        be turned into an event.
        """
        options = self._options
        try:
            parsed_date = parse_date(
                raw.date_string,
                now=self._now,
                tz=options.timezone,
                rollover_days=options.rollover_days,
            )
        except DateFormatError as exc:
            raise self._reject(DiagnosticType.FORMAT, exc, raw, source_file) from exc

        try:
            info = parse_venue_line(raw.venue_line, city_aliases=options.city_aliases)
        except VenueLineError as exc:
            raise self._reject(DiagnosticType.FORMAT, exc, raw, source_file) from exc

        try:
            names = self._artist_names(raw)
        except RecordValidationError as exc:
            raise self._reject(DiagnosticType.VALIDATION, exc, raw, source_file) from exc

        venue_name = self._canonical_venue_name(info.venue)
        venue_key = normalize_name(venue_name)
        headliner = names[0]
        headliner_key = normalize_name(headliner)

        dedup_key = (parsed_date.date, venue_key, headliner_key)
        if dedup_key in registry.event_keys:
            registry.duplicate_events += 1
            outcome.add(
                self._diagnostic(
                    DiagnosticType.DATA_QUALITY,
                    f"Duplicate event detected: {headliner} at {venue_name}",
                    raw,
                    source_file,
                )
            )
            self._logger.debug(
                "duplicate_event_dropped",
                line_number=raw.line_number,
                date=parsed_date.date,
                headliner=headliner,
                venue=venue_name,
            )
            return None
        registry.event_keys.add(dedup_key)

        if info.time_error:
            outcome.add(self._diagnostic(DiagnosticType.FORMAT, info.time_error, raw, source_file))

        names = self._review_names(names, raw, outcome, registry, source_file)
        self._flag_near_duplicates(names, raw, outcome, registry, source_file)

        artists = [registry.resolve_artist(name) for name in names]
        venue = registry.resolve_venue(venue_name, info, raw.line_number)
        registry.count_event([artist.normalized_name for artist in artists], venue_key)

        start_time_epoch_ms = None
        if info.time.start_time:
            start_time_epoch_ms = combine_epoch_ms(
                parsed_date.date, info.time.start_time, options.timezone
            )

        status = (
            EventStatus.SOLD_OUT if EventTag.SOLD_OUT in info.tags else EventStatus.CONFIRMED
        )

        return Event(
            id=event_id(parsed_date.date, headliner_key, venue_key),
            slug=create_slug(f"{parsed_date.date}-{headliner}-{venue_name}"),
            date=parsed_date.date,
            date_epoch_ms=parsed_date.epoch_ms,
            start_time_epoch_ms=start_time_epoch_ms,
            timezone=options.timezone,
            headliner_artist_id=artists[0].id,
            artist_ids=[artist.id for artist in artists],
            venue_id=venue.id,
            age_restriction=info.age_restriction,
            price=info.price,
            time=info.time,
            status=status,
            venue_type=info.venue_type,
            tags=info.tags,
            notes=info.notes,
            source_line_number=raw.line_number,
        )

    # ------------------------------------------------------------------
    # Venues file
    # ------------------------------------------------------------------

    def normalize_venues(
        self,
        raw_venues: list[RawVenueData],
        registry: EntityRegistry,
        source_file: str | None = None,
    ) -> NormalizationResult:
        """Merge venues-file records into *registry*.

        Existing venues (first seen in an event) get address, phone and
        city backfilled when empty.  Repeated lines for the same venue are
        dropped with a data-quality warning.  ``result.venues`` holds every
        venue the registry knows, events-only venues included.
        """
        result = NormalizationResult()
        seen: set[str] = set()

        for raw in raw_venues:
            name = self._canonical_venue_name(raw.name)
            key = normalize_name(name)
            if key in seen:
                registry.duplicate_venues += 1
                result.add(
                    Diagnostic(
                        type=DiagnosticType.DATA_QUALITY,
                        message=f"Duplicate venue: {raw.name}",
                        source_file=source_file,
                        line_number=raw.line_number,
                        raw_data=raw.raw_text or f"{raw.name}, {raw.address}",
                    )
                )
                continue
            seen.add(key)

            city = normalize_city(raw.city, self._options.city_aliases) if raw.city else ""
            existing = registry.venues.get(key)
            if existing is not None:
                update = {}
                if not existing.address and raw.address:
                    update["address"] = raw.address
                if not existing.phone and raw.phone:
                    update["phone"] = raw.phone
                if not existing.city and city:
                    update["city"] = city
                if update:
                    registry.venues[key] = existing.model_copy(update=update)
                continue

            registry.venues[key] = Venue(
                id=venue_id(key),
                name=name.strip(),
                slug=create_slug(name),
                normalized_name=key,
                city=city,
                address=raw.address,
                phone=raw.phone,
                age_restriction=parse_age_restriction(raw.age_restriction),
                venue_type=determine_venue_type("", name),
                source_line_number=raw.line_number,
            )

        result.venues = list(registry.venues.values())
        self._logger.info(
            "venues_normalized",
            raw_venues=len(raw_venues),
            venues=len(result.venues),
            duplicates=registry.duplicate_venues,
        )
        return result

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _artist_names(self, raw: RawEventData) -> list[str]:
        names = [correct_artist_name(name) for name in split_artist_names(raw.artist_line)]
        names = [name for name in names if name]
        if not names:
            raise RecordValidationError("No artists found", line_number=raw.line_number)
        return names

    def _review_names(
        self,
        names: list[str],
        raw: RawEventData,
        outcome: ParseOutcome,
        registry: EntityRegistry,
        source_file: str | None,
    ) -> list[str]:
        """Emit review warnings and drop repeat mentions within the event."""
        unique: list[str] = []
        seen: set[str] = set()
        for name in names:
            message = review_artist_name(name)
            if message:
                outcome.add(self._diagnostic(DiagnosticType.DATA_QUALITY, message, raw, source_file))

            key = normalize_name(name)
            if key in seen:
                registry.duplicate_artists += 1
                outcome.add(
                    self._diagnostic(
                        DiagnosticType.DATA_QUALITY,
                        f'Potential duplicate artist in same event: "{name}"',
                        raw,
                        source_file,
                    )
                )
                continue
            seen.add(key)
            unique.append(name)

        limit = self._options.max_artists_per_event
        if len(names) > limit:
            outcome.add(
                self._diagnostic(
                    DiagnosticType.DATA_QUALITY,
                    f"Event has {len(names)} artists - verify parsing is correct",
                    raw,
                    source_file,
                )
            )
        return unique

    def _flag_near_duplicates(
        self,
        names: list[str],
        raw: RawEventData,
        outcome: ParseOutcome,
        registry: EntityRegistry,
        source_file: str | None,
    ) -> None:
        """Warn when a new artist is nearly identical to a known one."""
        known = list(registry.artists)
        if not known:
            return
        for name in names:
            key = normalize_name(name)
            if key in registry.artists:
                continue
            match = fuzzy_match(key, known, threshold=self._options.artist_similarity_threshold)
            if match is None:
                continue
            similar_key, score = match
            outcome.add(
                self._diagnostic(
                    DiagnosticType.DATA_QUALITY,
                    f'Artist "{name}" is very similar to existing artist '
                    f'"{registry.artists[similar_key].name}" ({score:.0%})',
                    raw,
                    source_file,
                )
            )

    def _canonical_venue_name(self, name: str) -> str:
        return self._venue_aliases.get(normalize_name(name), name)

    @staticmethod
    def _diagnostic(
        diagnostic_type: DiagnosticType,
        message: str,
        raw: RawEventData,
        source_file: str | None,
    ) -> Diagnostic:
        return Diagnostic(
            type=diagnostic_type,
            message=message,
            source_file=source_file,
            line_number=raw.line_number,
            raw_data=raw.raw_text,
        )

    def _reject(
        self,
        diagnostic_type: DiagnosticType,
        exc: ShowlistError,
        raw: RawEventData,
        source_file: str | None,
    ) -> _Rejected:
        return _Rejected(self._diagnostic(diagnostic_type, exc.message, raw, source_file))
