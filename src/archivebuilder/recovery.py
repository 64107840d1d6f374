#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Per-file failure recovery: abort, ignore or retry."""

from collections.abc import Callable
import enum
from typing import BinaryIO

import attrs
from provide.foundation import logger

from archivebuilder.entries import FileEntry
from archivebuilder.errors import BuildAbortedError, EntryIOError, InvalidEntryError


class RecoveryAction(enum.Enum):
    """What to do after a file could not be opened."""

    ABORT = "abort"
    IGNORE = "ignore"
    RETRY = "retry"


@attrs.define(frozen=True, kw_only=True)
class FileFailure:
    """A single failed attempt to open a file entry.

    Attributes:
        entry: The file that failed.
        archive_name: Name the file would have inside the archive.
        index: Zero-based position of the file in the build.
        attempt: One-based attempt number for this file.
        error: The error raised by the open attempt.
    """

    entry: FileEntry
    archive_name: str
    index: int
    attempt: int
    error: EntryIOError


ErrorHandler = Callable[[FileFailure], RecoveryAction]


class RecoveryController:
    """Opens file entries, consulting an error handler when opening fails.

    Without a handler every failure is fatal and the EntryIOError propagates.
    With a handler, each failed attempt is reported once and the returned
    action decides the outcome. Retries are unbounded here; the handler is
    expected to switch to IGNORE or ABORT when it has retried enough.
    """

    def __init__(self, handler: ErrorHandler | None = None) -> None:
        self.handler = handler
        self.failures = 0
        self.retries = 0
        self.ignored: list[str] = []

    def open(self, entry: FileEntry, archive_name: str, index: int) -> BinaryIO | None:
        """Open the entry, recovering from failures according to the handler.

        Args:
            entry: File to open
            archive_name: Name of the file inside the archive
            index: Zero-based position of the file in the build

        Returns:
            An open stream, or None if the handler chose to ignore the file

        Raises:
            EntryIOError: If opening fails and no handler is registered
            BuildAbortedError: If the handler chose to abort
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                stream = entry.open()
            except EntryIOError as e:
                self.failures += 1
                logger.warning(
                    "recovery.open.failure",
                    path=entry.full_name,
                    attempt=attempt,
                    error=str(e),
                )
                if self.handler is None:
                    raise

                action = self._ask_handler(
                    self.handler,
                    FileFailure(entry=entry, archive_name=archive_name, index=index, attempt=attempt, error=e),
                )
                if action is RecoveryAction.ABORT:
                    logger.error("recovery.action.abort", path=entry.full_name, attempt=attempt)
                    raise BuildAbortedError(f"Build aborted while opening {entry.full_name}: {e}") from e
                if action is RecoveryAction.IGNORE:
                    logger.info("recovery.action.ignore", path=entry.full_name, attempt=attempt)
                    self.ignored.append(archive_name)
                    return None

                self.retries += 1
                logger.info("recovery.action.retry", path=entry.full_name, attempt=attempt)
                continue

            if attempt > 1:
                logger.info("recovery.open.recovered", path=entry.full_name, attempts=attempt)
            return stream

    def _ask_handler(self, handler: ErrorHandler, failure: FileFailure) -> RecoveryAction:
        action = handler(failure)
        if not isinstance(action, RecoveryAction):
            raise InvalidEntryError(
                f"Error handler must return a RecoveryAction, got {action!r} for {failure.entry.full_name}."
            )
        return action


# --- Ready-made handlers ---


def abort_on_error(failure: FileFailure) -> RecoveryAction:
    return RecoveryAction.ABORT


def ignore_on_error(failure: FileFailure) -> RecoveryAction:
    return RecoveryAction.IGNORE


def retry_then(max_retries: int, fallback: RecoveryAction = RecoveryAction.ABORT) -> ErrorHandler:
    """Build a handler that retries each file up to ``max_retries`` times.

    Args:
        max_retries: Number of retries per file before falling back
        fallback: Action taken once the retries are used up

    Returns:
        An error handler
    """
    if max_retries < 0:
        raise InvalidEntryError(f"max_retries must be non-negative, got {max_retries}.")
    if fallback is RecoveryAction.RETRY:
        raise InvalidEntryError("Fallback action cannot be RETRY.")

    def handler(failure: FileFailure) -> RecoveryAction:
        if failure.attempt <= max_retries:
            return RecoveryAction.RETRY
        return fallback

    return handler


# 🗜️📁🔚
