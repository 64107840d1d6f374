#
# SPDX-FileCopyrightText: Copyright (c) provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""archivebuilder: Build compressed archives from file trees on disk or in memory.

Integrated with provide-foundation for logging, configuration and errors.
"""

from provide.foundation import get_hub, logger
from provide.foundation.utils.versioning import get_version

from archivebuilder.builder import ArchiveBuilder
from archivebuilder.config import ArchiveConfig
from archivebuilder.copier import DEFAULT_CHUNK_SIZE, StreamCopier
from archivebuilder.core import ArchiveSummary, build_archive
from archivebuilder.entries import (
    DirectoryEntry,
    DiskDirectoryEntry,
    DiskFileEntry,
    FileEntry,
    FileSystemEntry,
    InMemoryDirectoryEntry,
    InMemoryFileEntry,
    flatten,
)
from archivebuilder.errors import (
    ArchiveBuildError,
    ArchiveWriteError,
    BuildAbortedError,
    EntryIOError,
    EntryReadError,
    InvalidEntryError,
)
from archivebuilder.exclusions import ExclusionFilter
from archivebuilder.progress import BuildProgress, ProgressReporter
from archivebuilder.recovery import FileFailure, RecoveryAction, RecoveryController, retry_then
from archivebuilder.writer import ArchiveHandle, ArchiveWriter, ZipArchiveWriter

# Initialize the Foundation Hub (available for advanced usage)
_hub = get_hub()

logger.debug(
    "archivebuilder.init",
    foundation_hub_available=True,
    components_available=["ArchiveBuilder", "StreamCopier", "RecoveryController", "ZipArchiveWriter"],
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    # Errors
    "ArchiveBuildError",
    # Building
    "ArchiveBuilder",
    "ArchiveConfig",
    "ArchiveHandle",
    "ArchiveSummary",
    "ArchiveWriteError",
    "ArchiveWriter",
    "BuildAbortedError",
    "BuildProgress",
    # Entries
    "DirectoryEntry",
    "DiskDirectoryEntry",
    "DiskFileEntry",
    "EntryIOError",
    "EntryReadError",
    "ExclusionFilter",
    "FileEntry",
    # Recovery
    "FileFailure",
    "FileSystemEntry",
    "InMemoryDirectoryEntry",
    "InMemoryFileEntry",
    "InvalidEntryError",
    "ProgressReporter",
    "RecoveryAction",
    "RecoveryController",
    "StreamCopier",
    "ZipArchiveWriter",
    "build_archive",
    "flatten",
    # Foundation integration
    "get_hub",
    "retry_then",
]

__version__ = get_version("archivebuilder", caller_file=__file__)

# 🗜️📁🔚
