#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#


import datetime
import io
from pathlib import Path
import zipfile

import pytest

from archivebuilder.progress import BuildProgress


class _EntryBuffer(io.BytesIO):
    """Entry stream that hands its content to the writer when closed."""

    def __init__(self, writer: "RecordingWriter", name: str) -> None:
        super().__init__()
        self._writer = writer
        self._name = name

    def close(self) -> None:
        if not self.closed:
            self._writer.entries[self._name] = self.getvalue()
        super().close()


class RecordingWriter:
    """In-memory ArchiveWriter that remembers what the builder did with it."""

    def __init__(self, destination: Path) -> None:
        self.destination = destination
        self.created: list[str] = []
        self.modified: dict[str, datetime.datetime | None] = {}
        self.entries: dict[str, bytes] = {}
        self.close_calls: list[bool] = []

    def create_entry(self, name: str, modified: datetime.datetime | None = None) -> io.BytesIO:
        self.created.append(name)
        self.modified[name] = modified
        return _EntryBuffer(self, name)

    def close(self, discard: bool = False) -> None:
        self.close_calls.append(discard)


@pytest.fixture
def recording_writers() -> list[RecordingWriter]:
    """Writers created by the ``recording_writer_factory`` fixture, in order."""
    return []


@pytest.fixture
def recording_writer_factory(recording_writers: list[RecordingWriter]):
    def _factory(destination: Path) -> RecordingWriter:
        writer = RecordingWriter(destination)
        recording_writers.append(writer)
        return writer

    return _factory


@pytest.fixture
def progress_events() -> list[BuildProgress]:
    return []


@pytest.fixture
def archive_path(tmp_path: Path) -> Path:
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    return out_dir / "archive.zip"


@pytest.fixture
def leftover_partials(archive_path: Path):
    """Lists temporary archive files left next to the destination."""

    def _list() -> list[Path]:
        return sorted(archive_path.parent.glob(".*.partial"))

    return _list


@pytest.fixture
def read_zip():
    """Returns a reader giving the entries of a ZIP archive as {name: content}."""

    def _read(path: Path) -> dict[str, bytes]:
        with zipfile.ZipFile(path) as zf:
            return {info.filename: zf.read(info) for info in zf.infolist()}

    return _read


# 🗜️📁🔚
