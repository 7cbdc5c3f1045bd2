"""Unit tests for merging new listings into the source files."""

from __future__ import annotations

from pathlib import Path

import pytest

from showlist.models.pipeline import PipelineOptions
from showlist.services.source_merger import SourceMerger, split_event_blocks, venue_names_in
from showlist.utils.errors import SourceFileError

EXISTING_EVENTS = "aug 23 fri Rancid\nat Gilman, Berkeley a/a $10"
EXISTING_VENUES = "924 Gilman, 924 Gilman St, Berkeley, a/a\n"
NEW_LISTINGS = """\
aug 23 fri Rancid
  at Gilman, Berkeley a/a $10

aug 30 Green Day
at The Chapel, sf 21+ $25

sep 1 Op Ivy
at Gilman St, Berkeley a/a
"""


@pytest.fixture
def merger() -> SourceMerger:
    return SourceMerger(PipelineOptions(venue_aliases={"gilman st": "924 Gilman"}))


class TestSplitEventBlocks:
    def test_blocks_are_trimmed_lines(self) -> None:
        text = "Shows this week\naug 23 Rancid\n\n  at Gilman, Berkeley  \naug 24 Green Day\n"
        assert split_event_blocks(text) == [
            "aug 23 Rancid\nat Gilman, Berkeley",
            "aug 24 Green Day",
        ]

    def test_empty(self) -> None:
        assert split_event_blocks("") == []


class TestVenueNamesIn:
    def test_first_seen_order_without_repeats(self) -> None:
        text = "aug 23 A\nat Gilman, Berkeley\naug 24 B\nat Elbo Room, sf\naug 25 C\nat Gilman, Berkeley\n"
        assert venue_names_in(text) == ["Gilman", "Elbo Room"]


class TestPlan:
    def test_skips_known_blocks_and_venues(self, merger: SourceMerger) -> None:
        plan = merger.plan(NEW_LISTINGS, EXISTING_EVENTS, EXISTING_VENUES)

        assert plan.skipped_blocks == 1
        assert plan.new_blocks == [
            "aug 30 Green Day\nat The Chapel, sf 21+ $25",
            "sep 1 Op Ivy\nat Gilman St, Berkeley a/a",
        ]
        # "Gilman St" is an alias of the known "924 Gilman".
        assert plan.new_venues == ["The Chapel"]

    def test_repeated_new_block_added_once(self, merger: SourceMerger) -> None:
        block = "aug 30 Green Day\nat The Chapel, sf\n"
        plan = merger.plan(block + "\n" + block, "", "")
        assert len(plan.new_blocks) == 1


class TestMerge:
    """Tests for SourceMerger.merge against files on disk."""

    def _files(self, tmp_path: Path) -> tuple[Path, Path, Path]:
        new_file = tmp_path / "new.txt"
        events_file = tmp_path / "events.txt"
        venues_file = tmp_path / "venues.txt"
        new_file.write_text(NEW_LISTINGS, encoding="utf-8")
        events_file.write_text(EXISTING_EVENTS, encoding="utf-8")
        venues_file.write_text(EXISTING_VENUES, encoding="utf-8")
        return new_file, events_file, venues_file

    def test_appends_blocks_and_placeholders(self, merger: SourceMerger, tmp_path: Path) -> None:
        new_file, events_file, venues_file = self._files(tmp_path)
        merger.merge(new_file, events_file, venues_file)

        assert events_file.read_text(encoding="utf-8") == (
            EXISTING_EVENTS
            + "\n\naug 30 Green Day\nat The Chapel, sf 21+ $25"
            + "\n\nsep 1 Op Ivy\nat Gilman St, Berkeley a/a\n"
        )
        assert venues_file.read_text(encoding="utf-8") == EXISTING_VENUES + "The Chapel,,,,\n"

    def test_second_merge_is_a_no_op(self, merger: SourceMerger, tmp_path: Path) -> None:
        new_file, events_file, venues_file = self._files(tmp_path)
        merger.merge(new_file, events_file, venues_file)
        events_after = events_file.read_text(encoding="utf-8")
        venues_after = venues_file.read_text(encoding="utf-8")

        plan = merger.merge(new_file, events_file, venues_file)

        assert plan.new_blocks == []
        assert plan.new_venues == []
        assert plan.skipped_blocks == 3
        assert events_file.read_text(encoding="utf-8") == events_after
        assert venues_file.read_text(encoding="utf-8") == venues_after

    def test_missing_file(self, merger: SourceMerger, tmp_path: Path) -> None:
        new_file, events_file, _ = self._files(tmp_path)
        with pytest.raises(SourceFileError):
            merger.merge(new_file, events_file, tmp_path / "missing.txt")
