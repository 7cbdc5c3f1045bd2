"""Monthly partitioning of events into size-bounded chunk artifacts.

Events are grouped by the calendar month of ``date_epoch_ms`` in the
listing timezone, so a show at local midnight on the 1st never leaks into
the previous month.  Every event lands in exactly one chunk.

Each chunk is serialized here, in its final on-disk form, so the
``ChunkInfo`` size and checksum describe the exact bytes the writer will
put on disk.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from showlist.models.dataset import ChunkInfo, ChunkStats, DateRange, EventChunk
from showlist.models.entities import Event
from showlist.parsing.temporal import DEFAULT_TIMEZONE, year_month
from showlist.services.artifact_writer import dump_json
from showlist.utils.hashing import checksum
from showlist.utils.logging import get_logger

logger = get_logger(__name__)


def chunk_filename(chunk_id: str) -> str:
    return f"events-{chunk_id}.json"


class ChunkedEvents(BaseModel):
    """Chunks, their manifest records, and the bytes to write for each."""

    model_config = ConfigDict(frozen=True)

    chunks: list[EventChunk]
    infos: list[ChunkInfo]
    payloads: dict[str, bytes]

    def stats(self) -> ChunkStats:
        sizes = [len(chunk.events) for chunk in self.chunks]
        if not sizes:
            return ChunkStats()
        return ChunkStats(
            total=len(sizes),
            average_size=sum(sizes) / len(sizes),
            largest_size=max(sizes),
        )


class DataChunker:
    """Splits events into ``YYYY-MM`` chunks.

    Parameters
    ----------
    timezone:
        IANA timezone used to decide which month an event belongs to.
    """

    def __init__(self, timezone: str = DEFAULT_TIMEZONE) -> None:
        self._timezone = timezone

    def chunk_events_by_month(self, events: list[Event]) -> ChunkedEvents:
        """Group, sort and serialize events per month.

        Within a chunk events are sorted ascending by ``date_epoch_ms``
        (stable, so same-day events keep input order).  Chunks and infos
        are ordered by their start timestamp.
        """
        groups: dict[str, list[Event]] = {}
        for event in events:
            groups.setdefault(year_month(event.date_epoch_ms, self._timezone), []).append(event)

        chunks: list[EventChunk] = []
        for chunk_id, month_events in groups.items():
            ordered = sorted(month_events, key=lambda event: event.date_epoch_ms)
            chunks.append(
                EventChunk(
                    chunk_id=chunk_id,
                    date_range=DateRange(
                        start_epoch_ms=ordered[0].date_epoch_ms,
                        end_epoch_ms=ordered[-1].date_epoch_ms,
                    ),
                    events=ordered,
                )
            )
        chunks.sort(key=lambda chunk: chunk.date_range.start_epoch_ms)

        infos: list[ChunkInfo] = []
        payloads: dict[str, bytes] = {}
        for chunk in chunks:
            filename = chunk_filename(chunk.chunk_id)
            data = dump_json(chunk)
            payloads[filename] = data
            infos.append(
                ChunkInfo(
                    filename=filename,
                    chunk_id=chunk.chunk_id,
                    size=len(data),
                    checksum=checksum(data),
                    event_count=len(chunk.events),
                    date_range=chunk.date_range,
                )
            )

        logger.info("events_chunked", chunks=len(chunks), events=len(events))
        return ChunkedEvents(chunks=chunks, infos=infos, payloads=payloads)
