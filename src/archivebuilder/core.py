#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Core orchestration for building archives from paths on disk."""

from collections.abc import Iterable
from pathlib import Path
import time

import attrs
from provide.foundation import logger
from provide.foundation.console import pout
from provide.foundation.context import CLIContext

from archivebuilder.builder import ArchiveBuilder
from archivebuilder.config import ArchiveConfig
from archivebuilder.entries import DiskDirectoryEntry, DiskFileEntry, FileSystemEntry
from archivebuilder.errors import ConfigurationError
from archivebuilder.exclusions import ExclusionFilter
from archivebuilder.progress import ProgressReporter, ProgressStatus
from archivebuilder.recovery import (
    ErrorHandler,
    FileFailure,
    RecoveryAction,
    abort_on_error,
    ignore_on_error,
    retry_then,
)
from archivebuilder.writer import ZipArchiveWriter


@attrs.define(frozen=True, kw_only=True)
class ArchiveSummary:
    """Outcome of a finished build."""

    output_file: Path
    written: list[str]
    ignored: list[str]
    total_bytes: int
    failures: int
    retries: int
    duration_seconds: float


class ReportingErrorHandler:
    """Wraps a recovery policy and reports each decision on the console."""

    _STATUS: dict[RecoveryAction, ProgressStatus] = {
        RecoveryAction.ABORT: "aborted",
        RecoveryAction.IGNORE: "ignored",
        RecoveryAction.RETRY: "retry",
    }

    def __init__(self, policy: ErrorHandler, progress: ProgressReporter) -> None:
        self.policy = policy
        self.progress = progress

    def __call__(self, failure: FileFailure) -> RecoveryAction:
        action = self.policy(failure)
        self.progress.file_progress(
            failure.archive_name,
            self._STATUS[action],
            details=f"attempt {failure.attempt}: {failure.error}",
        )
        return action


def make_error_policy(config: ArchiveConfig) -> ErrorHandler:
    """Map the configured error mode to a recovery policy."""
    if config.on_error == "ignore":
        return ignore_on_error
    if config.on_error == "retry":
        return retry_then(config.max_retries, fallback=RecoveryAction.ABORT)
    return abort_on_error


def collect_entries(config: ArchiveConfig, sources: Iterable[str | Path]) -> list[FileSystemEntry]:
    """Turn source paths into entries. Directories are added recursively.

    Paths that are not directories become file entries even if they do not
    exist, so that a missing file goes through the configured recovery policy.
    """
    exclusions = ExclusionFilter(config.exclude_patterns)
    entries: list[FileSystemEntry] = []
    for source in sources:
        path = Path(source)
        if path.is_dir():
            entries.append(
                DiskDirectoryEntry(path, exclusions=exclusions, follow_symlinks=config.follow_symlinks)
            )
        else:
            entries.append(DiskFileEntry(path))
        logger.debug("archive.source.added", path=str(path))
    return entries


def build_archive(
    config: ArchiveConfig,
    sources: Iterable[str | Path],
    cli_context: CLIContext | None = None,
) -> ArchiveSummary:
    """Build an archive from files and directories on disk.

    Args:
        config: Configuration for the build
        sources: Files and directories to add, in order
        cli_context: Optional CLI context for JSON output

    Returns:
        Summary of the finished archive

    Raises:
        ConfigurationError: If no output file is configured
        ArchiveBuildError: If the build fails or is aborted
    """
    if config.output_file is None:
        raise ConfigurationError("Output file path cannot be None for building an archive.")

    output_file = config.output_file
    logger.info("archive.start", output_file=str(output_file))
    start_time = time.monotonic()

    progress = ProgressReporter(enabled=config.show_progress, cli_context=cli_context)
    compression = config.compression_method
    builder = ArchiveBuilder(
        chunk_size=config.chunk_size,
        writer_factory=lambda destination: ZipArchiveWriter(destination, compression=compression),
    )

    progress.operation_start("Collecting sources")
    entries = collect_entries(config, sources)
    for entry in entries:
        builder.add(entry)
    progress.operation_end("Source collection", len(entries))

    handler = ReportingErrorHandler(make_error_policy(config), progress)

    progress.operation_start("Building archive")
    with builder.build(output_file, on_progress=progress.build_progress, on_error=handler) as handle:
        written = list(handle.entry_names)
        ignored = list(handle.ignored_names)
        total_bytes = handle.total_bytes
        failures = handle.failures
        retries = handle.retries
    progress.operation_end("Archive build", len(written))

    summary = ArchiveSummary(
        output_file=output_file,
        written=written,
        ignored=ignored,
        total_bytes=total_bytes,
        failures=failures,
        retries=retries,
        duration_seconds=time.monotonic() - start_time,
    )
    logger.info("archive.complete", duration_seconds=summary.duration_seconds)
    log_archive_summary(summary, cli_context=cli_context)
    return summary


def log_archive_summary(summary: ArchiveSummary, cli_context: CLIContext | None = None) -> None:
    """Log archive summary statistics.

    Args:
        summary: Summary of the finished build
        cli_context: Optional CLI context for JSON output
    """
    logger.info(
        "archive.summary",
        output_file=str(summary.output_file),
        written=len(summary.written),
        ignored=len(summary.ignored),
        total_bytes=summary.total_bytes,
        failures=summary.failures,
        retries=summary.retries,
    )

    if cli_context and cli_context.json_output:
        summary_data = {
            "output_file": str(summary.output_file),
            "written_files": len(summary.written),
            "ignored_files": summary.ignored,
            "total_size_bytes": summary.total_bytes,
            "failures": summary.failures,
            "retries": summary.retries,
            "duration_seconds": round(summary.duration_seconds, 3),
        }
        pout(summary_data, json_key="archive_summary", ctx=cli_context)


# 🗜️📁🔚
