"""Merging a fresh listings drop into the events and venues source files.

New listings arrive as a text file in the events-file format.  Merging

1. splits both the new text and the existing events file into blocks
   (a date line plus everything up to the next date line),
2. appends the blocks not already present, comparing trimmed non-blank
   lines,
3. extracts the venue of every appended block, maps it through the venue
   aliases, and appends venues unknown to the venues file as
   ``"Name,,,,"`` placeholder lines for a human to fill in.

Source files are only ever appended to; existing lines are never
rewritten.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from showlist.models.pipeline import PipelineOptions
from showlist.parsing.event_parser import match_date_line, parse_events_file
from showlist.parsing.venue_line import parse_venue_line
from showlist.utils.errors import SourceFileError, VenueLineError
from showlist.utils.logging import get_logger
from showlist.utils.text_normalizer import normalize_name


class MergePlan(BaseModel):
    """What a merge would append, before anything is written."""

    new_blocks: list[str] = Field(default_factory=list)
    skipped_blocks: int = 0
    new_venues: list[str] = Field(default_factory=list)


def split_event_blocks(text: str) -> list[str]:
    """Split events-file text into blocks, each normalized to trimmed lines.

    Anything before the first date line is ignored.
    """
    blocks: list[list[str]] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if match_date_line(line) is not None:
            blocks.append([line])
        elif blocks:
            blocks[-1].append(line)
    return ["\n".join(block) for block in blocks]


def venue_names_in(text: str) -> list[str]:
    """Venue names mentioned by the event blocks in *text*, first-seen order."""
    names: dict[str, None] = {}
    for raw_event in parse_events_file(text).raw_events:
        try:
            info = parse_venue_line(raw_event.venue_line)
        except VenueLineError:
            continue
        names.setdefault(info.venue, None)
    return list(names)


class SourceMerger:
    """Appends new event blocks and unknown venues to the source files.

    Parameters
    ----------
    options:
        Pipeline options; only ``venue_aliases`` is used.
    """

    def __init__(self, options: PipelineOptions | None = None) -> None:
        self._options = options or PipelineOptions()
        self._venue_aliases = {
            normalize_name(alias): canonical
            for alias, canonical in self._options.venue_aliases.items()
        }
        self._logger = get_logger(__name__)

    def plan(self, new_text: str, events_text: str, venues_text: str) -> MergePlan:
        existing_blocks = set(split_event_blocks(events_text))
        plan = MergePlan()
        for block in split_event_blocks(new_text):
            if block in existing_blocks:
                plan.skipped_blocks += 1
                continue
            existing_blocks.add(block)
            plan.new_blocks.append(block)

        known_venues = {
            normalize_name(line.split(",")[0])
            for line in venues_text.splitlines()
            if line.strip()
        }
        candidates: dict[str, str] = {}
        for name in venue_names_in("\n".join(plan.new_blocks)):
            canonical = self._venue_aliases.get(normalize_name(name), name)
            key = normalize_name(canonical)
            if key and key not in known_venues:
                candidates.setdefault(key, canonical)
        plan.new_venues = sorted(candidates.values())
        return plan

    def merge(self, new_file: str | Path, events_file: str | Path, venues_file: str | Path) -> MergePlan:
        """Apply a merge to the files on disk and return what was appended.

        Raises
        ------
        SourceFileError
            If any of the three files cannot be read or written.
        """
        new_text = _read(new_file)
        events_text = _read(events_file)
        venues_text = _read(venues_file)

        plan = self.plan(new_text, events_text, venues_text)
        if plan.new_blocks:
            _append(events_file, events_text, "\n\n".join(plan.new_blocks), separator="\n")
        if plan.new_venues:
            _append(venues_file, venues_text, "\n".join(f"{name},,,," for name in plan.new_venues))

        self._logger.info(
            "sources_merged",
            new_events=len(plan.new_blocks),
            skipped_events=plan.skipped_blocks,
            new_venues=len(plan.new_venues),
        )
        return plan


def _read(path: str | Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceFileError(f"Could not read {path}: {exc}") from exc


def _append(path: str | Path, existing: str, addition: str, separator: str = "") -> None:
    prefix = ""
    if existing and not existing.endswith("\n"):
        prefix = "\n"
    if existing.strip():
        prefix += separator
    try:
        with open(path, "a", encoding="utf-8") as handle:
            handle.write(f"{prefix}{addition}\n")
    except OSError as exc:
        raise SourceFileError(f"Could not write {path}: {exc}") from exc
