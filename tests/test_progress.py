#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Tests for console progress reporting."""

import pytest
from provide.foundation.context import CLIContext

from archivebuilder import progress as progress_module
from archivebuilder.progress import BuildProgress, ProgressReporter


@pytest.fixture
def messages(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    captured: list[str] = []
    monkeypatch.setattr(progress_module, "pout", lambda message, **kwargs: captured.append(message))
    return captured


def _progress(index: int, name: str, file_bytes: int = 0) -> BuildProgress:
    return BuildProgress(
        total_bytes=file_bytes,
        file_bytes=file_bytes,
        file_index=index,
        file_full_name=name,
        archive_name=name,
    )


def test_build_progress_announces_each_file_once(messages: list[str]):
    reporter = ProgressReporter(enabled=True)
    for event in (_progress(0, "a", 1), _progress(0, "a", 2), _progress(1, "b"), _progress(1, "b")):
        reporter.build_progress(event)
    assert messages == ["  → Adding: a", "  → Adding: b"]


def test_file_progress_with_details_and_no_emoji(messages: list[str]):
    cli_context = CLIContext()
    cli_context.no_emoji = True
    reporter = ProgressReporter(enabled=True, cli_context=cli_context)
    reporter.file_progress("x.bin", "ignored", details="attempt 1: denied")
    reporter.file_progress("y.bin", "retry")
    assert messages == ["  - Ignored: x.bin (attempt 1: denied)", "  ~ Retry: y.bin"]


def test_operation_messages(messages: list[str]):
    reporter = ProgressReporter(enabled=True)
    reporter.operation_start("Building archive")
    reporter.operation_end("Archive build", 3, elapsed=0.0)
    assert messages == ["\nBuilding archive...", "Archive build complete: 3 files"]
    assert reporter.current_operation is None


def test_disabled_reporter_is_silent(messages: list[str]):
    reporter = ProgressReporter(enabled=False)
    reporter.operation_start("Building archive")
    reporter.build_progress(_progress(0, "a"))
    reporter.file_progress("a", "ignored")
    assert messages == []


def test_json_mode_disables_reporter(messages: list[str]):
    cli_context = CLIContext()
    cli_context.json_output = True
    reporter = ProgressReporter(enabled=True, cli_context=cli_context)
    assert reporter.enabled is False
    reporter.file_progress("a", "adding")
    assert messages == []


def test_build_progress_defaults():
    event = _progress(2, "name", 5)
    assert event.expected_total == 0
    with pytest.raises(AttributeError):
        event.total_bytes = 10  # type: ignore[misc]


# 🗜️📁🔚
