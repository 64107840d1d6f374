#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Tests for gitignore-style exclusion filtering."""

import pytest

from archivebuilder.config import _get_default_exclude_patterns
from archivebuilder.exclusions import ExclusionFilter


def test_empty_filter_excludes_nothing():
    exclusions = ExclusionFilter(["", "   "])
    assert not exclusions
    assert exclusions.patterns == []
    assert exclusions.is_excluded("anything.txt") is False


@pytest.mark.parametrize(
    ("path", "is_dir", "expected"),
    [
        (".git", True, True),
        ("src/__pycache__", True, True),
        ("src/module.pyc", False, True),
        ("notes.swp", False, True),
        ("src/module.py", False, False),
        ("README.md", False, False),
    ],
)
def test_default_patterns(path: str, is_dir: bool, expected: bool):
    exclusions = ExclusionFilter(_get_default_exclude_patterns())
    assert exclusions.is_excluded(path, is_dir=is_dir) is expected


def test_directory_patterns_only_match_directories():
    exclusions = ExclusionFilter(["build/"])
    assert exclusions.is_excluded("build", is_dir=True)
    assert not exclusions.is_excluded("build", is_dir=False)


def test_anchored_and_negated_patterns():
    exclusions = ExclusionFilter(["/top.log", "*.log", "!keep.log"])
    assert exclusions.is_excluded("top.log")
    assert exclusions.is_excluded("nested/other.log")
    assert not exclusions.is_excluded("keep.log")


def test_excluded_paths_are_recorded():
    exclusions = ExclusionFilter(["*.tmp", "cache/"])
    exclusions.is_excluded("a.tmp")
    exclusions.is_excluded("cache", is_dir=True)
    exclusions.is_excluded("kept.txt")
    assert exclusions.excluded == ["a.tmp", "cache/"]


# 🗜️📁🔚
