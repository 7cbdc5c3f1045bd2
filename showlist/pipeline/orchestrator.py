"""Central orchestrator for the listings ETL pipeline.

Sequences the stages of one batch run over the two source files:

    READ → PARSE → NORMALIZE → RECOUNT → SEARCH → INDEX → CHUNK → WRITE

Each stage consumes the complete output of the previous one.  Per-record
problems are collected as diagnostics and never stop the run; a missing or
unreadable source file, a failed write, or any unexpected exception is a
``critical`` error that aborts the run with ``success=False`` and no
manifest or stats.

The run clock ``now`` is injectable.  Given the same ``now`` and the same
input files, every artifact is byte-identical across runs: IDs are pure
hashes, ordering follows input order, and every timestamp written comes
from the run clock.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path

import structlog

from showlist.models.dataset import (
    DataManifest,
    ManifestChunks,
    ManifestDateRange,
    ProcessingResult,
    ProcessingStats,
    SearchIndexInfo,
    SourceFileInfo,
    SourceFiles,
)
from showlist.models.diagnostics import Diagnostic, DiagnosticType
from showlist.models.entities import Artist, Event, Venue
from showlist.models.pipeline import PipelineOptions, PipelineStage
from showlist.parsing.event_parser import parse_events_file
from showlist.parsing.temporal import iso_date, resolve_timezone
from showlist.parsing.venue_parser import parse_venues_file
from showlist.pipeline.progress_tracker import ProgressTracker
from showlist.services.artifact_writer import ArtifactWriter, dump_json, file_info
from showlist.services.chunker import ChunkedEvents, DataChunker
from showlist.services.indexer import DataIndexer
from showlist.services.normalizer import EntityNormalizer, EntityRegistry
from showlist.services.search_index import SEARCH_FIELDS, SearchIndexBuilder
from showlist.utils.errors import SourceFileError
from showlist.utils.hashing import checksum
from showlist.utils.logging import get_logger

MANIFEST_VERSION = "1.0.0"

ARTISTS_FILE = "artists.json"
VENUES_FILE = "venues.json"
INDEXES_FILE = "indexes.json"
SEARCH_DOCUMENTS_FILE = "search-documents.json"
SEARCH_TERMS_FILE = "search-terms.json"
MANIFEST_FILE = "manifest.json"


class PipelineOrchestrator:
    """Runs the listings ETL end to end.

    Parameters
    ----------
    options:
        Pipeline options; defaults apply when omitted.
    now:
        Run clock.  Naive datetimes are taken to be in the configured
        timezone; defaults to the current time.
    tracker:
        Optional progress tracker notified at every stage.
    run_id:
        Identifier used for progress updates.
    """

    def __init__(
        self,
        options: PipelineOptions | None = None,
        now: datetime | None = None,
        tracker: ProgressTracker | None = None,
        run_id: str = "etl",
    ) -> None:
        self._options = options or PipelineOptions()
        zone = resolve_timezone(self._options.timezone)
        if now is None:
            now = datetime.now(tz=zone)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=zone)
        self._now = now
        self._now_ms = int(now.timestamp() * 1000)
        self._tracker = tracker
        self._run_id = run_id
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def now_ms(self) -> int:
        return self._now_ms

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def run(
        self,
        events_path: str | Path,
        venues_path: str | Path,
        output_dir: str | Path,
    ) -> ProcessingResult:
        """Run every stage and write the artifacts into *output_dir*.

        Returns
        -------
        ProcessingResult
            ``success=True`` with manifest, stats and all diagnostics, or
            ``success=False`` with a leading ``critical`` error.
        """
        started = time.perf_counter()
        errors: list[Diagnostic] = []
        warnings: list[Diagnostic] = []

        try:
            self._logger.info(
                "pipeline_start",
                events_path=str(events_path),
                venues_path=str(venues_path),
                output_dir=str(output_dir),
            )

            # --- Read ---
            self._progress(PipelineStage.READ, 5.0, "Reading source files...")
            events_text, events_info = self._read_source(Path(events_path))
            venues_text, venues_info = self._read_source(Path(venues_path))

            # --- Parse ---
            self._progress(PipelineStage.PARSE, 15.0, "Parsing listings...")
            event_parse = parse_events_file(events_text, source_file=events_info.filename)
            venue_parse = parse_venues_file(venues_text, source_file=venues_info.filename)
            for outcome in (event_parse, venue_parse):
                errors.extend(outcome.errors)
                warnings.extend(outcome.warnings)

            # --- Normalize ---
            self._progress(PipelineStage.NORMALIZE, 35.0, "Normalizing entities...")
            registry = EntityRegistry()
            normalizer = EntityNormalizer(self._options, now=self._now)
            event_result = normalizer.normalize_events(
                event_parse.raw_events, registry, source_file=events_info.filename
            )
            venue_result = normalizer.normalize_venues(
                venue_parse.raw_venues, registry, source_file=venues_info.filename
            )
            for outcome in (event_result, venue_result):
                errors.extend(outcome.errors)
                warnings.extend(outcome.warnings)
            events = event_result.events

            # --- Recount ---
            self._progress(PipelineStage.RECOUNT, 50.0, "Recounting upcoming events...")
            registry.recount(events, self._now_ms)
            artists = list(registry.artists.values())
            venues = list(registry.venues.values())

            # --- Search ---
            self._progress(PipelineStage.SEARCH, 60.0, "Building search index...")
            search = SearchIndexBuilder().build_search_index(events, artists, venues)
            documents_bytes = dump_json(search.documents)
            terms_bytes = dump_json(search.terms)

            # --- Index ---
            self._progress(PipelineStage.INDEX, 70.0, "Building indexes...")
            search_info = SearchIndexInfo(
                indexed_at=self._now_ms,
                total_documents=len(search.documents),
                fields=SEARCH_FIELDS,
                size=len(documents_bytes) + len(terms_bytes),
            )
            indexes = DataIndexer(self._now_ms).build_indexes(events, artists, venues, search_info)

            # --- Chunk ---
            self._progress(PipelineStage.CHUNK, 80.0, "Chunking events by month...")
            chunked = DataChunker(self._options.timezone).chunk_events_by_month(events)

            # --- Write ---
            self._progress(PipelineStage.WRITE, 90.0, "Writing output files...")
            manifest = self._write_artifacts(
                Path(output_dir),
                events=events,
                artists=artists,
                venues=venues,
                indexes_bytes=dump_json(indexes),
                documents_bytes=documents_bytes,
                terms_bytes=terms_bytes,
                chunked=chunked,
                source_files=SourceFiles(events=events_info, venues=venues_info),
            )

            stats = ProcessingStats(
                source_events=len(event_parse.raw_events),
                source_venues=len(venue_parse.raw_venues),
                parsed_events=len(events),
                parsed_venues=len(venues),
                parsed_artists=len(artists),
                duplicate_events_removed=registry.duplicate_events,
                duplicate_artists_removed=registry.duplicate_artists,
                duplicate_venues_removed=registry.duplicate_venues,
                validation_errors=sum(
                    1 for error in errors if error.type == DiagnosticType.VALIDATION
                ),
                validation_warnings=len(warnings),
                processing_time_ms=int((time.perf_counter() - started) * 1000),
                chunks=chunked.stats(),
            )
        except Exception as exc:
            self._logger.error("pipeline_failed", error=str(exc), error_type=type(exc).__name__)
            critical = Diagnostic(
                type=DiagnosticType.CRITICAL,
                message=f"ETL processing failed: {exc}",
            )
            return ProcessingResult(success=False, errors=[critical, *errors], warnings=warnings)

        self._progress(PipelineStage.DONE, 100.0, "Done")
        self._logger.info(
            "pipeline_complete",
            events=stats.parsed_events,
            artists=stats.parsed_artists,
            venues=stats.parsed_venues,
            chunks=stats.chunks.total,
            errors=len(errors),
            warnings=len(warnings),
            processing_time_ms=stats.processing_time_ms,
        )
        return ProcessingResult(
            success=True,
            manifest=manifest,
            stats=stats,
            errors=errors,
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _read_source(self, path: Path) -> tuple[str, SourceFileInfo]:
        """Read a source file and fingerprint it.

        Raises
        ------
        SourceFileError
            When the file is missing, unreadable or not UTF-8.
        """
        if not path.is_file():
            raise SourceFileError(f"Source file not found: {path}")
        try:
            data = path.read_bytes()
            content = data.decode("utf-8")
            modified = path.stat().st_mtime
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceFileError(f"Could not read {path}: {exc}") from exc

        info = SourceFileInfo(
            filename=path.name,
            size=len(data),
            last_modified=int(modified * 1000),
            line_count=len(content.split("\n")),
            checksum=checksum(data),
        )
        self._logger.debug("source_file_read", filename=path.name, size=info.size)
        return content, info

    def _write_artifacts(
        self,
        output_dir: Path,
        *,
        events: list[Event],
        artists: list[Artist],
        venues: list[Venue],
        indexes_bytes: bytes,
        documents_bytes: bytes,
        terms_bytes: bytes,
        chunked: ChunkedEvents,
        source_files: SourceFiles,
    ) -> DataManifest:
        """Write every artifact, the manifest last, then drop stale chunks."""
        writer = ArtifactWriter(output_dir)
        writer.write_all(chunked.payloads.items())

        artists_bytes = dump_json(artists)
        venues_bytes = dump_json(venues)
        writer.write_all(
            [
                (ARTISTS_FILE, artists_bytes),
                (VENUES_FILE, venues_bytes),
                (INDEXES_FILE, indexes_bytes),
                (SEARCH_DOCUMENTS_FILE, documents_bytes),
                (SEARCH_TERMS_FILE, terms_bytes),
            ]
        )

        manifest = DataManifest(
            version=MANIFEST_VERSION,
            dataset_version=self._options.dataset_version_label or self._iso_now(),
            last_updated=self._now_ms,
            total_events=len(events),
            total_artists=len(artists),
            total_venues=len(venues),
            date_range=self._date_range(events),
            chunks=ManifestChunks(
                events=chunked.infos,
                artists=file_info(ARTISTS_FILE, artists_bytes, len(artists)),
                venues=file_info(VENUES_FILE, venues_bytes, len(venues)),
                indexes=file_info(INDEXES_FILE, indexes_bytes),
            ),
            processed_at=self._now_ms,
            source_files=source_files,
            schema_version=self._options.schema_version,
        )
        writer.write_bytes(MANIFEST_FILE, dump_json(manifest))
        # Old chunks go only once the new manifest no longer references them.
        writer.remove_stale("events-*.json", keep=set(chunked.payloads))
        self._logger.info("artifacts_written", files=len(writer.written), output_dir=str(output_dir))
        return manifest

    def _date_range(self, events: list[Event]) -> ManifestDateRange:
        """Span of event dates; collapses to the run clock when there are none."""
        if events:
            start = min(event.date_epoch_ms for event in events)
            end = max(event.date_epoch_ms for event in events)
        else:
            start = end = self._now_ms
        tz = self._options.timezone
        return ManifestDateRange(
            start_epoch_ms=start,
            end_epoch_ms=end,
            start_date=iso_date(start, tz),
            end_date=iso_date(end, tz),
        )

    def _iso_now(self) -> str:
        utc = self._now.astimezone(timezone.utc)  # noqa: UP017
        return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def _progress(self, stage: PipelineStage, progress: float, message: str) -> None:
        if self._tracker is not None:
            self._tracker.update(self._run_id, stage, progress, message)
