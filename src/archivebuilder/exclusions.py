#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Exclusion filtering for directories read from disk."""

from collections.abc import Iterable
from pathlib import PurePosixPath

import pathspec
from provide.foundation import logger

from archivebuilder.errors import ExclusionError


class ExclusionFilter:
    """Decides whether a path below a registered directory is left out of the archive.

    Patterns use .gitignore syntax. Paths are matched relative to the directory
    that was registered with the builder, with ``/`` separators. Directory paths
    are checked with a trailing slash so that ``build/`` style patterns only match
    directories.
    """

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self.patterns: list[str] = [p for p in patterns if p and p.strip()]
        try:
            self._spec = pathspec.PathSpec.from_lines("gitwildmatch", self.patterns)
        except (ValueError, TypeError) as e:
            raise ExclusionError(f"Invalid exclusion pattern: {e}") from e
        self.excluded: list[str] = []
        logger.debug("exclusion.patterns.compiled", count=len(self.patterns))

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def is_excluded(self, relative_path: str, is_dir: bool = False) -> bool:
        """Check a root-relative path against the compiled patterns.

        Args:
            relative_path: Path relative to the registered directory
            is_dir: Whether the path names a directory

        Returns:
            True if the path should be skipped
        """
        if not self.patterns:
            return False

        candidate = PurePosixPath(relative_path).as_posix()
        if is_dir:
            candidate += "/"

        if self._spec.match_file(candidate):
            logger.debug("exclusion.path.matched", path=candidate)
            self.excluded.append(candidate)
            return True
        return False


# 🗜️📁🔚
