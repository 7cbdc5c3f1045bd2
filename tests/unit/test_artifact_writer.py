"""Unit tests for JSON serialization and artifact writing."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from showlist.models.entities import Artist, Venue
from showlist.services.artifact_writer import ArtifactWriter, dump_json, file_info, to_jsonable
from showlist.utils.errors import PipelineError
from showlist.utils.hashing import checksum


def _artist(name: str = "Björk") -> Artist:
    return Artist(id=1, name=name, slug="bjork", normalized_name="björk")


class TestDumpJson:
    def test_camel_case_and_utf8(self) -> None:
        data = dump_json(_artist())
        assert "Björk".encode("utf-8") in data
        payload = json.loads(data)
        assert payload["normalizedName"] == "björk"
        assert payload["upcomingEventCount"] == 0

    def test_two_space_indent(self) -> None:
        assert dump_json({"a": 1}) == b'{\n  "a": 1\n}'

    def test_unset_optionals_omitted(self) -> None:
        venue = Venue(id=1, name="Elbo Room", slug="elbo-room", normalized_name="elbo room")
        payload = json.loads(dump_json(venue))
        assert "phone" not in payload
        assert payload["address"] == ""

    def test_dict_keys_become_strings(self) -> None:
        assert to_jsonable({1: [_artist()]})["1"][0]["name"] == "Björk"


class TestFileInfo:
    def test_describes_bytes(self) -> None:
        info = file_info("artists.json", b"[]", record_count=0)
        assert info.size == 2
        assert info.checksum == checksum(b"[]")
        assert info.record_count == 0


class TestArtifactWriter:
    """Tests for ArtifactWriter."""

    def test_write_creates_directory(self, tmp_path: Path) -> None:
        writer = ArtifactWriter(tmp_path / "out" / "data")
        payload = dump_json([_artist()])
        path = writer.write_bytes("artists.json", payload)

        assert path == tmp_path / "out" / "data" / "artists.json"
        data = path.read_bytes()
        assert data == payload
        assert file_info("artists.json", payload, 1).checksum == checksum(data)
        assert writer.written == ["artists.json"]

    def test_write_all(self, tmp_path: Path) -> None:
        writer = ArtifactWriter(tmp_path)
        writer.write_all([("a.json", b"{}"), ("b.json", b"[]")])
        assert (tmp_path / "b.json").read_bytes() == b"[]"
        assert writer.written == ["a.json", "b.json"]

    def test_unwritable_directory(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(PipelineError):
            ArtifactWriter(blocker).write_bytes("manifest.json", b"{}")

    def test_remove_stale(self, tmp_path: Path) -> None:
        for name in ("events-2024-07.json", "events-2024-08.json", "artists.json"):
            (tmp_path / name).write_bytes(b"[]")

        removed = ArtifactWriter(tmp_path).remove_stale(
            "events-*.json", keep={"events-2024-08.json"}
        )

        assert removed == ["events-2024-07.json"]
        assert sorted(path.name for path in tmp_path.iterdir()) == [
            "artists.json",
            "events-2024-08.json",
        ]

    def test_remove_stale_missing_directory(self, tmp_path: Path) -> None:
        assert ArtifactWriter(tmp_path / "nope").remove_stale("events-*.json", keep=set()) == []
