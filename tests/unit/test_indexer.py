"""Unit tests for the secondary indexes and aggregates."""

from __future__ import annotations

from showlist.models.dataset import PriceBuckets, SearchIndexInfo
from showlist.models.entities import AgeRestriction, Artist, Event, PriceInfo, Venue
from showlist.services.indexer import DataIndexer

DAY_MS = 86_400_000
NOW_MS = 1_724_180_400_000  # 2024-08-20 12:00 America/Los_Angeles


def _venue(venue_id: int, name: str, city: str = "") -> Venue:
    return Venue(
        id=venue_id,
        name=name,
        slug=name.lower().replace(" ", "-"),
        normalized_name=name.lower(),
        city=city,
    )


def _event(
    event_id: int,
    venue_id: int = 1,
    *,
    days_from_now: int = 1,
    artists: tuple[int, ...] = (100,),
    price: PriceInfo | None = None,
    age: AgeRestriction = AgeRestriction.ALL_AGES,
) -> Event:
    return Event(
        id=event_id,
        slug=f"event-{event_id}",
        date=f"2024-08-{20 + days_from_now:02d}",
        date_epoch_ms=NOW_MS + days_from_now * DAY_MS,
        timezone="America/Los_Angeles",
        headliner_artist_id=artists[0],
        artist_ids=list(artists),
        venue_id=venue_id,
        price=price or PriceInfo(),
        age_restriction=age,
        source_line_number=event_id,
    )


def _search_info() -> SearchIndexInfo:
    return SearchIndexInfo(indexed_at=NOW_MS, total_documents=0, fields=["title"], size=0)


# ======================================================================
# build_price_range_info
# ======================================================================


class TestPriceRangeInfo:
    def test_buckets_count_min_and_max_values(self) -> None:
        events = [
            _event(1, price=PriceInfo(is_free=True)),
            _event(2, price=PriceInfo(min=10, max=10)),
            _event(3, price=PriceInfo(min=25, max=60)),
            _event(4, price=PriceInfo(min=75, max=75)),
            _event(5, price=PriceInfo(min=150, max=150)),
            _event(6),
        ]
        info = DataIndexer.build_price_range_info(events)

        assert info.buckets == PriceBuckets(free=1, under20=2, under50=1, under100=3, over100=2)
        assert info.min == 10
        assert info.max == 150

    def test_price_span_lands_in_both_bands(self) -> None:
        info = DataIndexer.build_price_range_info([_event(1, price=PriceInfo(min=15, max=60))])
        assert info.buckets == PriceBuckets(under20=1, under100=1)

    def test_zero_price_is_in_no_band(self) -> None:
        info = DataIndexer.build_price_range_info([_event(1, price=PriceInfo(min=0, max=5))])
        assert info.buckets == PriceBuckets(under20=1)
        assert info.min == 0

    def test_boundaries(self) -> None:
        events = [
            _event(1, price=PriceInfo(min=20, max=20)),
            _event(2, price=PriceInfo(min=50, max=50)),
            _event(3, price=PriceInfo(min=100, max=100)),
        ]
        buckets = DataIndexer.build_price_range_info(events).buckets
        assert (buckets.under20, buckets.under50, buckets.under100, buckets.over100) == (0, 2, 2, 2)

    def test_no_prices(self) -> None:
        info = DataIndexer.build_price_range_info([_event(1)])
        assert info.min == 0
        assert info.max == 0
        assert info.buckets == PriceBuckets()


# ======================================================================
# build_city_info
# ======================================================================


class TestCityInfo:
    def test_counts_and_ordering(self) -> None:
        venues = [
            _venue(1, "Fox Theater", "Oakland"),
            _venue(2, "Eli's", "Oakland"),
            _venue(3, "The Chapel", "San Francisco"),
            _venue(4, "Mystery Spot"),
        ]
        events = [
            _event(1, 3, days_from_now=1),
            _event(2, 3, days_from_now=-1),
            _event(3, 1),
            _event(4, 4),
        ]
        cities = DataIndexer(NOW_MS).build_city_info(events, venues)

        assert [city.name for city in cities] == ["San Francisco", "Oakland"]
        sf, oakland = cities
        assert sf.slug == "san-francisco"
        assert (sf.event_count, sf.venue_count, sf.upcoming_event_count) == (2, 1, 1)
        assert (oakland.event_count, oakland.venue_count, oakland.upcoming_event_count) == (1, 2, 1)

    def test_ties_sorted_by_name(self) -> None:
        venues = [_venue(1, "A", "Oakland"), _venue(2, "B", "Berkeley")]
        cities = DataIndexer(NOW_MS).build_city_info([], venues)
        assert [city.name for city in cities] == ["Berkeley", "Oakland"]


# ======================================================================
# build_indexes
# ======================================================================


class TestBuildIndexes:
    def test_lookup_tables(self) -> None:
        venues = [_venue(1, "Fox Theater", "Oakland"), _venue(2, "Mystery Spot")]
        artists = [
            Artist(id=100, name="Rancid", slug="rancid", normalized_name="rancid"),
            Artist(id=101, name="Green Day", slug="green-day", normalized_name="green day"),
        ]
        events = [
            _event(1, 1, artists=(100, 101), age=AgeRestriction.OVER_21),
            _event(2, 2, artists=(100,)),
            _event(3, 1, days_from_now=2, artists=(101,)),
        ]
        indexes = DataIndexer(NOW_MS).build_indexes(events, artists, venues, _search_info())

        assert indexes.events_by_date == {"2024-08-21": [1, 2], "2024-08-22": [3]}
        assert indexes.events_by_venue == {"1": [1, 3], "2": [2]}
        assert indexes.events_by_artist == {"100": [1, 2], "101": [1, 3]}
        assert indexes.events_by_city == {"Oakland": [1, 3]}
        assert indexes.artists_by_name == {"rancid": 100, "green day": 101}
        assert indexes.venues_by_name == {"fox theater": 1, "mystery spot": 2}
        assert indexes.venues_by_city == {"Oakland": [1]}
        assert indexes.age_restrictions == ["21+", "all-ages"]
        assert indexes.search_index == _search_info()

    def test_serializes_with_camel_case(self) -> None:
        indexes = DataIndexer(NOW_MS).build_indexes([], [], [], _search_info())
        payload = indexes.model_dump(mode="json", by_alias=True)
        assert "eventsByDate" in payload
        assert payload["priceRanges"]["buckets"]["under20"] == 0
        assert payload["searchIndex"]["indexedAt"] == NOW_MS
