#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Chunked stream copying with per-chunk progress callbacks."""

from collections.abc import Callable
from typing import BinaryIO

from provide.foundation import logger

from archivebuilder.errors import ArchiveWriteError, ChunkSizeError, EntryReadError

DEFAULT_CHUNK_SIZE = 64 * 1024

CopyProgressCallback = Callable[[int], None]


class StreamCopier:
    """Copies a byte stream into another one chunk by chunk.

    The callback receives the number of bytes copied so far for the current
    stream. It is called after every chunk and once more when the source is
    exhausted, so an empty source produces exactly one call with ``0``.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if not isinstance(chunk_size, int) or chunk_size <= 0:
            raise ChunkSizeError(f"Chunk size must be a positive integer, got {chunk_size!r}.")
        self.chunk_size = chunk_size

    def copy(
        self,
        source: BinaryIO,
        destination: BinaryIO,
        on_progress: CopyProgressCallback | None = None,
    ) -> int:
        """Copy all bytes from source to destination.

        Args:
            source: Readable binary stream
            destination: Writable binary stream
            on_progress: Called with the running byte count

        Returns:
            Number of bytes copied

        Raises:
            EntryReadError: If reading from source fails
            ArchiveWriteError: If writing to destination fails
        """
        copied = 0
        while True:
            try:
                chunk = source.read(self.chunk_size)
            except OSError as e:
                raise EntryReadError(f"Read failed after {copied} bytes: {e}") from e

            if not chunk:
                break

            try:
                destination.write(chunk)
            except OSError as e:
                raise ArchiveWriteError(f"Write failed after {copied} bytes: {e}") from e

            copied += len(chunk)
            if on_progress is not None:
                on_progress(copied)

        if on_progress is not None:
            on_progress(copied)

        logger.debug("copy.complete", bytes=copied, chunk_size=self.chunk_size)
        return copied


# 🗜️📁🔚
