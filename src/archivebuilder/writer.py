#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Archive writers and the handle returned by a build."""

import datetime
import os
from pathlib import Path
from types import TracebackType
from typing import BinaryIO, Protocol
import zipfile

from provide.foundation import logger
from provide.foundation.file import safe_delete, secure_temp_file

from archivebuilder.errors import ArchiveWriteError

COMPRESSION_METHODS: dict[str, int] = {
    "stored": zipfile.ZIP_STORED,
    "deflated": zipfile.ZIP_DEFLATED,
    "bzip2": zipfile.ZIP_BZIP2,
    "lzma": zipfile.ZIP_LZMA,
}

_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
_ZIP_LAST = (2107, 12, 31, 23, 59, 58)


class ArchiveWriter(Protocol):
    """Sink that turns (name, bytes) pairs into archive entries."""

    def create_entry(self, name: str, modified: datetime.datetime | None = None) -> BinaryIO: ...

    def close(self, discard: bool = False) -> None: ...


def _zip_date_time(modified: datetime.datetime | None) -> tuple[int, int, int, int, int, int]:
    if modified is None:
        modified = datetime.datetime.now()
    elif modified.tzinfo is not None:
        modified = modified.astimezone()
    stamp = modified.timetuple()[:6]
    # DOS timestamps only cover 1980 through 2107
    return min(max(stamp, _ZIP_EPOCH), _ZIP_LAST)  # type: ignore[return-value]


class ZipArchiveWriter:
    """Writes a ZIP archive next to its destination and moves it into place on close.

    Entry names are given to ``zipfile`` exactly as received; non-ASCII names are
    stored with the UTF-8 flag. Nothing appears at the destination until
    ``close()`` succeeds, and ``close(discard=True)`` removes the partial file.
    """

    def __init__(
        self,
        destination: str | Path,
        compression: int = zipfile.ZIP_DEFLATED,
    ) -> None:
        self.destination = Path(destination)
        self.compression = compression
        self.entry_names: list[str] = []
        self.closed = False

        try:
            fd, self._temp_path = secure_temp_file(
                suffix=".partial",
                prefix=f".{self.destination.name}.",
                dir=self.destination.parent,
            )
        except OSError as e:
            raise ArchiveWriteError(f"Cannot create archive next to {self.destination}: {e}") from e

        self._file = os.fdopen(fd, "w+b")
        try:
            self._zip = zipfile.ZipFile(self._file, "w", compression=compression)
        except (RuntimeError, NotImplementedError) as e:
            self._file.close()
            self._remove_temp()
            raise ArchiveWriteError(f"Unsupported compression method {compression}: {e}") from e

        logger.debug("archive.writer.open", destination=str(self.destination), temp=str(self._temp_path))

    def create_entry(self, name: str, modified: datetime.datetime | None = None) -> BinaryIO:
        """Start a new archive entry and return a stream for its content.

        Raises:
            ArchiveWriteError: If the writer is closed or the entry cannot be created
        """
        if self.closed:
            raise ArchiveWriteError(f"Cannot add '{name}': archive {self.destination} is closed.")

        info = zipfile.ZipInfo(name, date_time=_zip_date_time(modified))
        info.compress_type = self.compression
        info.external_attr = 0o644 << 16

        try:
            stream = self._zip.open(info, "w", force_zip64=True)
        except (OSError, ValueError) as e:
            raise ArchiveWriteError(f"Cannot create archive entry '{name}': {e}") from e

        self.entry_names.append(name)
        logger.debug("archive.entry.created", name=name)
        return stream  # type: ignore[return-value]

    def close(self, discard: bool = False) -> None:
        """Finalize the archive, or throw it away.

        Args:
            discard: Remove the partial archive instead of publishing it

        Raises:
            ArchiveWriteError: If finalizing or moving the archive fails
        """
        if self.closed:
            return
        self.closed = True

        if discard:
            try:
                self._zip.close()
            except (OSError, ValueError) as e:
                logger.warning("archive.discard.close_failed", path=str(self._temp_path), error=str(e))
            finally:
                self._file.close()
                self._remove_temp()
            logger.info("archive.discarded", destination=str(self.destination))
            return

        try:
            self._zip.close()
            self._file.flush()
            os.fsync(self._file.fileno())
        except (OSError, ValueError) as e:
            self._file.close()
            self._remove_temp()
            raise ArchiveWriteError(f"Failed to finalize archive {self.destination}: {e}") from e
        self._file.close()

        try:
            self._temp_path.chmod(0o644)
            os.replace(self._temp_path, self.destination)
        except OSError as e:
            self._remove_temp()
            raise ArchiveWriteError(f"Failed to move archive into place at {self.destination}: {e}") from e

        logger.info(
            "archive.write.success",
            path=str(self.destination),
            entries=len(self.entry_names),
            size_bytes=self.destination.stat().st_size,
        )

    def _remove_temp(self) -> None:
        try:
            safe_delete(self._temp_path, missing_ok=True)
        except OSError as e:
            logger.warning("archive.temp.remove_failed", path=str(self._temp_path), error=str(e))


class ArchiveHandle:
    """Open archive produced by a build.

    Owns the archive writer. The archive is only complete once the handle is
    closed, either explicitly or by leaving a ``with`` block.
    """

    def __init__(
        self,
        writer: ArchiveWriter,
        path: Path,
        entry_names: list[str],
        ignored_names: list[str],
        total_bytes: int,
        *,
        failures: int = 0,
        retries: int = 0,
    ) -> None:
        self.writer = writer
        self.path = path
        self.entry_names = entry_names
        self.ignored_names = ignored_names
        self.total_bytes = total_bytes
        self.failures = failures
        self.retries = retries
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.writer.close()
        logger.debug("archive.handle.closed", path=str(self.path))

    def __enter__(self) -> "ArchiveHandle":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"ArchiveHandle({str(self.path)!r}, entries={len(self.entry_names)}, {state})"


# 🗜️📁🔚
