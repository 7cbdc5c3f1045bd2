"""Secondary lookup structures and aggregates over the final dataset.

One pass over events, artists and venues produces:

- primary indexes: date / venue / artist / city -> event ids
- reverse-name indexes: normalized artist / venue name -> id, city -> venue ids
- city aggregates sorted by event count (ties by name)
- a five-band price histogram over every known min and max price
- the distinct age restrictions present

"Upcoming" means ``date_epoch_ms > now_ms``, the run clock.
"""

from __future__ import annotations

from showlist.models.dataset import (
    CityInfo,
    DataIndexes,
    PriceBuckets,
    PriceRangeInfo,
    SearchIndexInfo,
)
from showlist.models.entities import Artist, Event, Venue
from showlist.utils.logging import get_logger
from showlist.utils.text_normalizer import create_slug

logger = get_logger(__name__)


class DataIndexer:
    """Builds :class:`DataIndexes` relative to a fixed run clock.

    Parameters
    ----------
    now_ms:
        Run clock in epoch milliseconds.
    """

    def __init__(self, now_ms: int) -> None:
        self._now_ms = now_ms

    def build_indexes(
        self,
        events: list[Event],
        artists: list[Artist],
        venues: list[Venue],
        search_index: SearchIndexInfo,
    ) -> DataIndexes:
        venues_by_id = {venue.id: venue for venue in venues}

        events_by_date: dict[str, list[int]] = {}
        events_by_venue: dict[str, list[int]] = {}
        events_by_artist: dict[str, list[int]] = {}
        events_by_city: dict[str, list[int]] = {}

        for event in events:
            events_by_date.setdefault(event.date, []).append(event.id)
            events_by_venue.setdefault(str(event.venue_id), []).append(event.id)
            for artist_id in event.artist_ids:
                events_by_artist.setdefault(str(artist_id), []).append(event.id)

            venue = venues_by_id.get(event.venue_id)
            if venue is not None and venue.city:
                events_by_city.setdefault(venue.city, []).append(event.id)

        artists_by_name = {artist.normalized_name: artist.id for artist in artists}
        venues_by_name: dict[str, int] = {}
        venues_by_city: dict[str, list[int]] = {}
        for venue in venues:
            venues_by_name[venue.normalized_name] = venue.id
            if venue.city:
                venues_by_city.setdefault(venue.city, []).append(venue.id)

        indexes = DataIndexes(
            events_by_date=events_by_date,
            events_by_venue=events_by_venue,
            events_by_artist=events_by_artist,
            events_by_city=events_by_city,
            artists_by_name=artists_by_name,
            venues_by_name=venues_by_name,
            venues_by_city=venues_by_city,
            cities=self.build_city_info(events, venues),
            age_restrictions=sorted({event.age_restriction.value for event in events}),
            price_ranges=self.build_price_range_info(events),
            search_index=search_index,
        )
        logger.info(
            "indexes_built",
            dates=len(events_by_date),
            venues=len(events_by_venue),
            artists=len(events_by_artist),
            cities=len(indexes.cities),
        )
        return indexes

    def build_city_info(self, events: list[Event], venues: list[Venue]) -> list[CityInfo]:
        """Per-city event, venue and upcoming-event counts.

        Venues without a city are not counted.  Sorted by event count
        descending, then city name.
        """
        stats: dict[str, dict[str, int]] = {}

        def bucket(city: str) -> dict[str, int]:
            return stats.setdefault(
                city, {"event_count": 0, "venue_count": 0, "upcoming_event_count": 0}
            )

        for venue in venues:
            if venue.city:
                bucket(venue.city)["venue_count"] += 1

        venues_by_id = {venue.id: venue for venue in venues}
        for event in events:
            venue = venues_by_id.get(event.venue_id)
            if venue is None or not venue.city:
                continue
            city_stats = bucket(venue.city)
            city_stats["event_count"] += 1
            if event.date_epoch_ms > self._now_ms:
                city_stats["upcoming_event_count"] += 1

        cities = [
            CityInfo(name=city, slug=create_slug(city), **counts) for city, counts in stats.items()
        ]
        cities.sort(key=lambda info: (-info.event_count, info.name))
        return cities

    @staticmethod
    def build_price_range_info(events: list[Event]) -> PriceRangeInfo:
        """Overall min/max price and the five-band histogram.

        Free events count in ``free`` only.  The bands count price values,
        not events: every known ``min`` and ``max`` of a priced event lands
        in its band (<20, 20-50, 50-100, >=100), so a single-price event
        contributes twice.  A zero price falls in no band.
        """
        free = 0
        prices: list[float] = []
        for event in events:
            price = event.price
            if price.is_free:
                free += 1
                continue
            prices.extend(amount for amount in (price.min, price.max) if amount is not None)

        buckets = PriceBuckets(
            free=free,
            under20=sum(1 for p in prices if 0 < p < 20),
            under50=sum(1 for p in prices if 20 <= p < 50),
            under100=sum(1 for p in prices if 50 <= p < 100),
            over100=sum(1 for p in prices if p >= 100),
        )
        return PriceRangeInfo(
            min=min(prices) if prices else 0,
            max=max(prices) if prices else 0,
            buckets=buckets,
        )
