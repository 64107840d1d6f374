#
# SPDX-FileCopyrightText: Copyright (c) provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Archive building: queue entries, copy them into an archive, report progress."""

from collections.abc import Callable, Sequence
from pathlib import Path
import time

from provide.foundation import logger

from archivebuilder.copier import DEFAULT_CHUNK_SIZE, StreamCopier
from archivebuilder.entries import DirectoryEntry, FileEntry, FileSystemEntry, flatten
from archivebuilder.errors import ArchiveBuildError, ArchiveWriteError, BuildAbortedError, InvalidEntryError
from archivebuilder.progress import BuildProgress, CancelPredicate, ProgressCallback
from archivebuilder.recovery import ErrorHandler, RecoveryController
from archivebuilder.writer import ArchiveHandle, ArchiveWriter, ZipArchiveWriter

WriterFactory = Callable[[Path], ArchiveWriter]


def _as_callbacks(on_progress: ProgressCallback | Sequence[ProgressCallback] | None) -> tuple[ProgressCallback, ...]:
    if on_progress is None:
        return ()
    if callable(on_progress):
        return (on_progress,)
    return tuple(on_progress)


class ArchiveBuilder:
    """Collects files and directories and writes them into one archive.

    Files added directly keep their own name at the archive root. Directories
    are flattened at build time; their own name becomes the first path
    component of every file below them. Entries are written in the order they
    were added. One builder runs one build at a time.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        writer_factory: WriterFactory = ZipArchiveWriter,
    ) -> None:
        self.copier = StreamCopier(chunk_size)
        self.writer_factory = writer_factory
        self._queue: list[FileSystemEntry] = []
        self._building = False

    @property
    def queued(self) -> list[FileSystemEntry]:
        return list(self._queue)

    def add_file(self, entry: FileEntry) -> None:
        """Queue a single file under its own name.

        Raises:
            InvalidEntryError: If entry is None or not a file entry
        """
        if entry is None:
            raise InvalidEntryError("File entry cannot be None.")
        if not isinstance(entry, FileEntry):
            raise InvalidEntryError(f"Expected a FileEntry, got {type(entry).__name__}.")
        self._queue.append(entry)
        logger.debug("archive.queue.file", path=entry.full_name)

    def add_directory(self, entry: DirectoryEntry) -> None:
        """Queue a directory to be added recursively.

        Raises:
            InvalidEntryError: If entry is None or not a directory entry
        """
        if entry is None:
            raise InvalidEntryError("Directory entry cannot be None.")
        if not isinstance(entry, DirectoryEntry):
            raise InvalidEntryError(f"Expected a DirectoryEntry, got {type(entry).__name__}.")
        self._queue.append(entry)
        logger.debug("archive.queue.directory", path=entry.full_name)

    def add(self, entry: FileSystemEntry) -> None:
        if isinstance(entry, FileEntry):
            self.add_file(entry)
        elif isinstance(entry, DirectoryEntry):
            self.add_directory(entry)
        else:
            raise InvalidEntryError(f"Expected a file or directory entry, got {type(entry).__name__}.")

    def _collect(self) -> list[tuple[str, FileEntry]]:
        """Flatten the queue into (archive_name, file) pairs in queue order."""
        items: list[tuple[str, FileEntry]] = []
        for queued in self._queue:
            if isinstance(queued, FileEntry):
                items.append((queued.name, queued))
            else:
                items.extend(flatten(queued))

        seen: set[str] = set()
        for archive_name, entry in items:
            if archive_name in seen:
                raise InvalidEntryError(f"Duplicate archive entry name '{archive_name}' ({entry.full_name}).")
            seen.add(archive_name)
        return items

    def build(
        self,
        destination: str | Path,
        *,
        on_progress: ProgressCallback | Sequence[ProgressCallback] | None = None,
        on_error: ErrorHandler | None = None,
        should_cancel: CancelPredicate | None = None,
    ) -> ArchiveHandle:
        """Write every queued entry into an archive at ``destination``.

        Args:
            destination: Path of the archive to create
            on_progress: Callback, or callbacks, receiving every BuildProgress
            on_error: Handler choosing a RecoveryAction when a file cannot be opened
            should_cancel: Checked after every progress notification; True aborts

        Returns:
            Handle owning the archive; close it to finalize the file

        Raises:
            EntryIOError: A file could not be opened and no handler is set
            EntryReadError: A file failed while it was being copied
            BuildAbortedError: The handler chose ABORT or the build was cancelled
            ArchiveWriteError: The archive could not be written
        """
        if self._building:
            raise ArchiveBuildError("A build is already running on this builder.")

        callbacks = _as_callbacks(on_progress)
        destination = Path(destination)
        self._building = True
        try:
            items = self._collect()
            expected_total = sum(entry.length or 0 for _, entry in items)
            logger.info(
                "archive.build.start",
                destination=str(destination),
                file_count=len(items),
                expected_bytes=expected_total,
            )

            start_time = time.monotonic()
            recovery = RecoveryController(on_error)
            writer = self.writer_factory(destination)
            written: list[str] = []
            total = 0

            try:
                for index, (archive_name, entry) in enumerate(items):
                    copied = self._add_entry(
                        writer,
                        recovery,
                        index,
                        archive_name,
                        entry,
                        total,
                        expected_total,
                        callbacks,
                        should_cancel,
                    )
                    if copied is None:
                        continue
                    total += copied
                    written.append(archive_name)
            except BaseException:
                logger.error(
                    "archive.build.failure",
                    destination=str(destination),
                    written=len(written),
                    total_bytes=total,
                )
                writer.close(discard=True)
                raise

            logger.info(
                "archive.build.complete",
                destination=str(destination),
                written=len(written),
                ignored=len(recovery.ignored),
                retries=recovery.retries,
                total_bytes=total,
                duration_seconds=time.monotonic() - start_time,
            )
            return ArchiveHandle(
                writer,
                destination,
                written,
                list(recovery.ignored),
                total,
                failures=recovery.failures,
                retries=recovery.retries,
            )
        finally:
            self._building = False

    def _add_entry(
        self,
        writer: ArchiveWriter,
        recovery: RecoveryController,
        index: int,
        archive_name: str,
        entry: FileEntry,
        base_total: int,
        expected_total: int,
        callbacks: tuple[ProgressCallback, ...],
        should_cancel: CancelPredicate | None,
    ) -> int | None:
        """Copy one file into the archive.

        Returns:
            Bytes copied, or None if the file was ignored after a failure
        """
        stream = recovery.open(entry, archive_name, index)
        if stream is None:
            return None

        def report(file_bytes: int) -> None:
            progress = BuildProgress(
                total_bytes=base_total + file_bytes,
                file_bytes=file_bytes,
                file_index=index,
                file_full_name=entry.full_name,
                archive_name=archive_name,
                expected_total=expected_total,
            )
            for callback in callbacks:
                callback(progress)
            if should_cancel is not None and should_cancel(progress):
                logger.warning("archive.build.cancelled", name=archive_name, total_bytes=progress.total_bytes)
                raise BuildAbortedError(f"Build cancelled while adding '{archive_name}'.")

        with stream:
            try:
                target = writer.create_entry(archive_name, entry.last_write_time)
                with target:
                    copied = self.copier.copy(stream, target, report)
            except OSError as e:
                raise ArchiveWriteError(f"Failed to write archive entry '{archive_name}': {e}") from e

        logger.debug("archive.entry.written", name=archive_name, index=index, size_bytes=copied)
        return copied


# 🗜️📁🔚
