"""Minimal inverted search index over events, artists and venues.

Documents are numbered sequentially from 0: all events first, then all
artists, then all venues.  Terms are lower-cased word tokens of at least
three characters taken from a document's title and content; each term maps
to the ids of the documents containing it, each id at most once, in
ascending order.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

from showlist.models.dataset import SearchDocument
from showlist.models.entities import Artist, Event, Venue
from showlist.utils.logging import get_logger

logger = get_logger(__name__)

_WORD_PATTERN = re.compile(r"\w+")
MIN_TERM_LENGTH = 3
SEARCH_FIELDS = ["title", "content", "city", "tags"]


def tokenize(text: str) -> list[str]:
    """Distinct indexable terms of *text*, in first-occurrence order."""
    terms: dict[str, None] = {}
    for word in _WORD_PATTERN.findall(text.lower()):
        if len(word) >= MIN_TERM_LENGTH:
            terms.setdefault(word, None)
    return list(terms)


class SearchIndex(BaseModel):
    model_config = ConfigDict(frozen=True)

    documents: list[SearchDocument]
    terms: dict[str, list[int]]


class SearchIndexBuilder:
    """Builds search documents and the term -> document-id map."""

    def build_search_index(
        self,
        events: list[Event],
        artists: list[Artist],
        venues: list[Venue],
    ) -> SearchIndex:
        artists_by_id = {artist.id: artist for artist in artists}
        venues_by_id = {venue.id: venue for venue in venues}

        documents: list[SearchDocument] = []

        for event in events:
            headliner = artists_by_id.get(event.headliner_artist_id)
            venue = venues_by_id.get(event.venue_id)
            headliner_name = headliner.name if headliner else "Unknown Artist"
            city = venue.city if venue else ""
            content_parts = [
                headliner.name if headliner else "",
                venue.name if venue else "",
                city,
                " ".join(tag.value for tag in event.tags),
                event.notes or "",
            ]
            documents.append(
                SearchDocument(
                    id=len(documents),
                    type="event",
                    entity_id=str(event.id),
                    title=headliner_name,
                    content=" ".join(part for part in content_parts if part),
                    city=city,
                    date=event.date,
                    tags=event.tags,
                )
            )

        for artist in artists:
            documents.append(
                SearchDocument(
                    id=len(documents),
                    type="artist",
                    entity_id=str(artist.id),
                    title=artist.name,
                    content=" ".join([artist.name, *artist.aliases]),
                )
            )

        for venue in venues:
            content_parts = [venue.name, venue.address, venue.city, venue.neighborhood or ""]
            documents.append(
                SearchDocument(
                    id=len(documents),
                    type="venue",
                    entity_id=str(venue.id),
                    title=venue.name,
                    content=" ".join(part for part in content_parts if part),
                    city=venue.city,
                )
            )

        terms: dict[str, list[int]] = {}
        for document in documents:
            for term in tokenize(f"{document.title} {document.content}"):
                terms.setdefault(term, []).append(document.id)

        logger.info("search_index_built", documents=len(documents), terms=len(terms))
        return SearchIndex(documents=documents, terms=terms)
