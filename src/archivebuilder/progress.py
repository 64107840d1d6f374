#
# SPDX-FileCopyrightText: Copyright (c) provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Build progress values and console progress reporting."""

from collections.abc import Callable
import time
from typing import Literal

import attrs
from provide.foundation.console import pout
from provide.foundation.context import CLIContext

ProgressStatus = Literal["adding", "ignored", "retry", "aborted"]


@attrs.define(frozen=True, kw_only=True, slots=True)
class BuildProgress:
    """Snapshot delivered to progress callbacks during a build.

    Attributes:
        total_bytes: Bytes copied into the archive so far, across all files.
        file_bytes: Bytes copied so far for the current file.
        file_index: Zero-based position of the current file in the build.
            Ignored files keep their position, so the indices seen by a
            callback can have gaps.
        file_full_name: Full name of the current file entry.
        archive_name: Name of the current file inside the archive.
        expected_total: Sum of the known file lengths when the build started.
    """

    total_bytes: int
    file_bytes: int
    file_index: int
    file_full_name: str
    archive_name: str
    expected_total: int = 0


ProgressCallback = Callable[[BuildProgress], None]
CancelPredicate = Callable[[BuildProgress], bool]


class ProgressReporter:
    """Reports per-file progress on the console while an archive is built.

    Uses Foundation's pout() for output. Automatically disabled in JSON mode.
    Respects the no_emoji setting from CLIContext.
    """

    def __init__(self, enabled: bool = True, cli_context: CLIContext | None = None) -> None:
        self.enabled = enabled
        self.cli_context = cli_context
        self.current_operation: str | None = None
        self.operation_start_time: float = 0.0
        self._last_index: int | None = None

        if cli_context and cli_context.json_output:
            self.enabled = False

    def _should_output(self) -> bool:
        return self.enabled and not (self.cli_context and self.cli_context.json_output)

    def _get_status_symbol(self, status: ProgressStatus) -> str:
        no_emoji = self.cli_context and self.cli_context.no_emoji

        symbols = {
            "adding": "→" if not no_emoji else ">",
            "ignored": "⊘" if not no_emoji else "-",
            "retry": "↻" if not no_emoji else "~",
            "aborted": "✗" if not no_emoji else "X",
        }
        return symbols.get(status, "?")

    def _get_status_color(self, status: ProgressStatus) -> str:
        colors = {
            "adding": "cyan",
            "ignored": "yellow",
            "retry": "yellow",
            "aborted": "red",
        }
        return colors.get(status, "white")

    def operation_start(self, operation_name: str) -> None:
        if not self._should_output():
            return

        self.current_operation = operation_name
        self.operation_start_time = time.monotonic()
        pout(f"\n{operation_name}...", color="cyan", bold=True, ctx=self.cli_context)

    def operation_end(self, operation_name: str, count: int, elapsed: float | None = None) -> None:
        if not self._should_output():
            return

        if elapsed is None and self.operation_start_time > 0:
            elapsed = time.monotonic() - self.operation_start_time

        elapsed_str = f" in {elapsed:.1f}s" if elapsed else ""
        pout(f"{operation_name} complete: {count} files{elapsed_str}", color="cyan", ctx=self.cli_context)

        self.current_operation = None
        self.operation_start_time = 0.0

    def file_progress(self, archive_name: str, status: ProgressStatus, details: str | None = None) -> None:
        """Report a status change for a single archive entry.

        Args:
            archive_name: Name of the entry inside the archive
            status: New status of the entry
            details: Optional additional details to display
        """
        if not self._should_output():
            return

        symbol = self._get_status_symbol(status)
        color = self._get_status_color(status)
        details_str = f" ({details})" if details else ""
        pout(
            f"  {symbol} {status.capitalize()}: {archive_name}{details_str}",
            color=color,
            ctx=self.cli_context,
        )

    def build_progress(self, progress: BuildProgress) -> None:
        """Progress callback for ArchiveBuilder.build(); announces each file once."""
        if progress.file_index == self._last_index:
            return
        self._last_index = progress.file_index
        self.file_progress(progress.archive_name, "adding")


# 🗜️📁🔚
