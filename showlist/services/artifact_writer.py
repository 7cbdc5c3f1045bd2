"""Serialization and writing of the JSON output artifacts.

Every artifact is serialized exactly once by :func:`dump_json`; the bytes
that are checksummed are the bytes that land on disk.  Output is UTF-8,
two-space indented, camelCase, and omits unset optional fields.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from showlist.models.dataset import FileInfo
from showlist.utils.errors import PipelineError
from showlist.utils.hashing import checksum
from showlist.utils.logging import get_logger


def to_jsonable(payload: Any) -> Any:
    """Convert models (or lists / dicts of models) into JSON-ready data."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(payload, dict):
        return {str(key): to_jsonable(value) for key, value in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [to_jsonable(item) for item in payload]
    return payload


def dump_json(payload: Any) -> bytes:
    return json.dumps(to_jsonable(payload), indent=2, ensure_ascii=False).encode("utf-8")


def file_info(filename: str, data: bytes, record_count: int | None = None) -> FileInfo:
    return FileInfo(
        filename=filename,
        size=len(data),
        checksum=checksum(data),
        record_count=record_count,
    )


class ArtifactWriter:
    """Writes serialized artifacts into one output directory.

    Parameters
    ----------
    output_dir:
        Destination directory; created on first write.
    """

    def __init__(self, output_dir: str | Path) -> None:
        self._output_dir = Path(output_dir)
        self._written: list[str] = []
        self._logger = get_logger(__name__)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def written(self) -> list[str]:
        return list(self._written)

    def write_bytes(self, filename: str, data: bytes) -> Path:
        """Write pre-serialized bytes and return the file path.

        Raises
        ------
        PipelineError
            When the directory or file cannot be written.
        """
        path = self._output_dir / filename
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise PipelineError(f"Could not write {path}: {exc}") from exc

        self._written.append(filename)
        self._logger.debug("artifact_written", filename=filename, size=len(data))
        return path

    def write_all(self, artifacts: Iterable[tuple[str, bytes]]) -> None:
        for filename, data in artifacts:
            self.write_bytes(filename, data)

    def remove_stale(self, pattern: str, keep: set[str]) -> list[str]:
        """Delete files matching *pattern* that are not in *keep*.

        Used for monthly chunks left over from a previous run whose months
        no longer have events.
        """
        if not self._output_dir.is_dir():
            return []
        removed: list[str] = []
        for path in sorted(self._output_dir.glob(pattern)):
            if path.name in keep:
                continue
            try:
                path.unlink()
            except OSError as exc:
                raise PipelineError(f"Could not remove stale artifact {path}: {exc}") from exc
            removed.append(path.name)
        if removed:
            self._logger.info("stale_artifacts_removed", files=removed)
        return removed
