#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#


import io
from pathlib import Path

import pytest

from archivebuilder.entries import InMemoryDirectoryEntry

SAMPLE_SIZE = 8191


class FlakyOpener:
    """Opener that fails a fixed number of times before returning the data."""

    def __init__(self, data: bytes, failures: int = 1, error: type[OSError] = PermissionError) -> None:
        self.data = data
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self) -> io.BytesIO:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error(f"simulated failure #{self.calls}")
        return io.BytesIO(self.data)


@pytest.fixture
def sample_bytes() -> bytes:
    return bytes(i % 256 for i in range(SAMPLE_SIZE))


@pytest.fixture
def memory_tree() -> InMemoryDirectoryEntry:
    """
    root
      file1 (10), file2 (20)
      dir1/
      dir2/ file1 (30), file2 (40)
        dir2/ file1 (50), file2 (60)
          dir2/ file1 (70), file2 (80)
      dir3/ file1 (90)
    """
    root = InMemoryDirectoryEntry("root")
    root.add_file("file1", bytes(10))
    root.add_file("file2", bytes(20))
    root.add_directory("dir1")

    level = root
    size = 30
    for _ in range(3):
        level = level.add_directory("dir2")
        level.add_file("file1", bytes(size))
        level.add_file("file2", bytes(size + 10))
        size += 20

    root.add_directory("dir3").add_file("file1", bytes(90))
    return root


@pytest.fixture
def nested_tree(sample_bytes: bytes) -> InMemoryDirectoryEntry:
    """root/{file1, dir1/{file2, file3}, dir2/{dir2/dir2/{file1, file2}}}"""
    root = InMemoryDirectoryEntry("root")
    root.add_file("file1", sample_bytes)
    dir1 = root.add_directory("dir1")
    dir1.add_file("file2", sample_bytes)
    dir1.add_file("file3", b"")
    deepest = root.add_directory("dir2").add_directory("dir2").add_directory("dir2")
    deepest.add_file("file1", b"one")
    deepest.add_file("file2", b"two")
    return root


@pytest.fixture
def disk_tree(tmp_path: Path, sample_bytes: bytes) -> Path:
    """
    complex/
      file1
      Directory1/ file2, file3
      Directory2/ file6
        Directory3 Ä/ file4, file5
    """
    root = tmp_path / "complex"
    directory3 = root / "Directory2" / "Directory3 Ä"
    directory3.mkdir(parents=True)
    (root / "Directory1").mkdir()

    (root / "file1").write_bytes(sample_bytes)
    (root / "Directory1" / "file2").write_bytes(sample_bytes)
    (root / "Directory1" / "file3").write_bytes(sample_bytes)
    (directory3 / "file4").write_bytes(sample_bytes)
    (directory3 / "file5").write_bytes(sample_bytes)
    (root / "Directory2" / "file6").write_bytes(sample_bytes)
    return root


# 🗜️📁🔚
