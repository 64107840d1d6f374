#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Error types for archivebuilder operations."""

from provide.foundation import FoundationError


class ArchiveBuildError(FoundationError):
    """Base error for all archive building operations."""

    pass


class InvalidEntryError(ArchiveBuildError):
    """Invalid argument passed to a builder operation (missing or wrong-typed entry)."""

    pass


class ChunkSizeError(InvalidEntryError):
    """Invalid copy chunk size."""

    pass


class EntryIOError(ArchiveBuildError):
    """Failed to open a file entry for reading."""

    pass


class EntryReadError(EntryIOError):
    """Failed while reading a file entry that was already opened."""

    pass


class BuildAbortedError(ArchiveBuildError):
    """The build was aborted by the error handler or by cancellation."""

    pass


class ArchiveWriteError(ArchiveBuildError):
    """Failed to write into or finalize the archive."""

    pass


class ConfigurationError(ArchiveBuildError):
    """Error in archivebuilder configuration."""

    pass


class InvalidPathError(ConfigurationError):
    """Invalid or unusable file path."""

    pass


class ExclusionError(ArchiveBuildError):
    """Failed to compile exclusion patterns."""

    pass


# 🗜️📁🔚
