#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""File system entry model: files and directories on disk or in memory."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
import datetime
import io
import os
from pathlib import Path, PurePosixPath
import re
from typing import TYPE_CHECKING, BinaryIO, TypeAlias
import weakref

from provide.foundation import logger

from archivebuilder.errors import EntryIOError, InvalidEntryError

if TYPE_CHECKING:
    from archivebuilder.exclusions import ExclusionFilter

_SEPARATORS = re.compile(r"[\\/]")


def _last_component(full_name: str) -> str:
    parts = [p for p in _SEPARATORS.split(full_name) if p]
    return parts[-1] if parts else full_name


def _from_timestamp(value: float | None) -> datetime.datetime | None:
    if value is None:
        return None
    return datetime.datetime.fromtimestamp(value, tz=datetime.UTC)


class _Entry(ABC):
    """Shared naming and parent navigation for files and directories."""

    def __init__(
        self,
        full_name: str,
        parent: "DirectoryEntry | None" = None,
        name: str | None = None,
    ) -> None:
        self._full_name = full_name
        self._name = name
        self._parent_ref: weakref.ref[DirectoryEntry] | None = None
        if parent is not None:
            self._set_parent(parent)

    def _set_parent(self, parent: "DirectoryEntry") -> None:
        self._parent_ref = weakref.ref(parent)

    @property
    def full_name(self) -> str:
        return self._full_name

    @property
    def name(self) -> str:
        if self._name is not None:
            return self._name
        return _last_component(self._full_name)

    @property
    def parent(self) -> "DirectoryEntry | None":
        """Containing directory, if it is still alive. Navigation only."""
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def directory_name(self) -> str | None:
        parent = self.parent
        if parent is not None:
            return parent.full_name
        stripped = self._full_name.rstrip("\\/")
        cut = max(stripped.rfind("/"), stripped.rfind("\\"))
        return stripped[:cut] if cut > 0 else None

    @property
    def creation_time(self) -> datetime.datetime | None:
        return None

    @property
    def last_access_time(self) -> datetime.datetime | None:
        return None

    @property
    def last_write_time(self) -> datetime.datetime | None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._full_name!r})"


class FileEntry(_Entry):
    """A single file that can be added to an archive."""

    @property
    @abstractmethod
    def length(self) -> int | None:
        """Size in bytes, or None if it cannot be known before opening."""

    @property
    def extension(self) -> str:
        return PurePosixPath(self.name).suffix

    @property
    def exists(self) -> bool:
        return True

    @property
    def is_read_only(self) -> bool:
        return True

    @abstractmethod
    def open(self) -> BinaryIO:
        """Open a new readable byte stream over the file content.

        Raises:
            EntryIOError: If the file cannot be opened
        """


class DirectoryEntry(_Entry):
    """A directory whose files and subdirectories are added recursively."""

    @property
    @abstractmethod
    def files(self) -> list[FileEntry]:
        """Child files in traversal order."""

    @property
    @abstractmethod
    def directories(self) -> list["DirectoryEntry"]:
        """Child directories in traversal order."""

    @property
    def exists(self) -> bool:
        return True


FileSystemEntry: TypeAlias = FileEntry | DirectoryEntry


# --- Disk-backed entries ---


class DiskFileEntry(FileEntry):
    """File read from the local filesystem."""

    def __init__(self, path: str | Path, parent: DirectoryEntry | None = None) -> None:
        self.path = Path(path)
        super().__init__(str(self.path), parent)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def length(self) -> int | None:
        try:
            return self.path.stat().st_size
        except OSError as e:
            logger.debug("entry.file.stat_failed", path=str(self.path), error=str(e))
            return None

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    @property
    def is_read_only(self) -> bool:
        return not os.access(self.path, os.W_OK)

    def _stat(self) -> os.stat_result | None:
        try:
            return self.path.stat()
        except OSError:
            return None

    @property
    def creation_time(self) -> datetime.datetime | None:
        st = self._stat()
        if st is None:
            return None
        return _from_timestamp(getattr(st, "st_birthtime", st.st_ctime))

    @property
    def last_access_time(self) -> datetime.datetime | None:
        st = self._stat()
        return _from_timestamp(st.st_atime) if st is not None else None

    @property
    def last_write_time(self) -> datetime.datetime | None:
        st = self._stat()
        return _from_timestamp(st.st_mtime) if st is not None else None

    def open(self) -> BinaryIO:
        try:
            return self.path.open("rb")
        except OSError as e:
            raise EntryIOError(f"Cannot open {self.path}: {e}") from e


class DiskDirectoryEntry(DirectoryEntry):
    """Directory on the local filesystem.

    Children are listed once, on first access, and sorted by name so that
    traversal order does not depend on the order the OS returns entries in.
    Symbolic links are skipped unless ``follow_symlinks`` is set.
    """

    def __init__(
        self,
        path: str | Path,
        parent: DirectoryEntry | None = None,
        *,
        exclusions: "ExclusionFilter | None" = None,
        follow_symlinks: bool = False,
        root: Path | None = None,
    ) -> None:
        self.path = Path(path)
        super().__init__(str(self.path), parent)
        self.exclusions = exclusions
        self.follow_symlinks = follow_symlinks
        self._root = root if root is not None else self.path
        self._files: list[FileEntry] | None = None
        self._directories: list[DirectoryEntry] | None = None

    @property
    def name(self) -> str:
        return self.path.name or self.path.resolve().name

    @property
    def exists(self) -> bool:
        return self.path.is_dir()

    @property
    def last_write_time(self) -> datetime.datetime | None:
        try:
            return _from_timestamp(self.path.stat().st_mtime)
        except OSError:
            return None

    @property
    def files(self) -> list[FileEntry]:
        if self._files is None:
            self._scan()
        return list(self._files or [])

    @property
    def directories(self) -> list[DirectoryEntry]:
        if self._directories is None:
            self._scan()
        return list(self._directories or [])

    def _is_excluded(self, item_path: str, is_dir: bool) -> bool:
        if not self.exclusions:
            return False
        relative = Path(item_path).relative_to(self._root).as_posix()
        return self.exclusions.is_excluded(relative, is_dir=is_dir)

    def _scan(self) -> None:
        files: list[FileEntry] = []
        directories: list[DirectoryEntry] = []

        try:
            with os.scandir(self.path) as it:
                items = sorted(it, key=lambda item: item.name)
        except OSError as e:
            raise EntryIOError(f"Cannot list directory {self.path}: {e}") from e

        for item in items:
            if item.is_dir(follow_symlinks=self.follow_symlinks):
                if self._is_excluded(item.path, is_dir=True):
                    continue
                directories.append(
                    DiskDirectoryEntry(
                        item.path,
                        self,
                        exclusions=self.exclusions,
                        follow_symlinks=self.follow_symlinks,
                        root=self._root,
                    )
                )
            elif item.is_file(follow_symlinks=self.follow_symlinks):
                if self._is_excluded(item.path, is_dir=False):
                    continue
                files.append(DiskFileEntry(item.path, self))
            else:
                logger.debug("entry.directory.item_skipped", path=item.path)

        self._files = files
        self._directories = directories
        logger.debug(
            "entry.directory.scanned",
            path=str(self.path),
            files=len(files),
            directories=len(directories),
        )


# --- In-memory entries ---


class InMemoryFileEntry(FileEntry):
    """File held in memory.

    Backed either by ``data`` (every ``open()`` returns a fresh, independent
    stream) or by an ``opener`` callable whose result is returned as-is. With an
    opener the length may be unknown, in which case ``length`` is None.
    """

    def __init__(
        self,
        full_name: str,
        data: bytes | None = None,
        *,
        opener: Callable[[], BinaryIO] | None = None,
        length: int | None = None,
        parent: DirectoryEntry | None = None,
        name: str | None = None,
        created: datetime.datetime | None = None,
        accessed: datetime.datetime | None = None,
        modified: datetime.datetime | None = None,
    ) -> None:
        if data is not None and opener is not None:
            raise InvalidEntryError("Pass either data or opener, not both.")
        if length is not None and length < 0:
            raise InvalidEntryError(f"Length must be non-negative, got {length}.")
        super().__init__(full_name, parent, name)

        self._data = bytes(data) if data is not None else (b"" if opener is None else None)
        self._opener = opener
        self._length = len(self._data) if self._data is not None else length

        now = datetime.datetime.now(datetime.UTC)
        self._created = created or now
        self._accessed = accessed or now
        self._modified = modified or now

    @property
    def length(self) -> int | None:
        return self._length

    @property
    def creation_time(self) -> datetime.datetime | None:
        return self._created

    @property
    def last_access_time(self) -> datetime.datetime | None:
        return self._accessed

    @property
    def last_write_time(self) -> datetime.datetime | None:
        return self._modified

    def open(self) -> BinaryIO:
        if self._opener is None:
            return io.BytesIO(self._data or b"")
        try:
            return self._opener()
        except OSError as e:
            raise EntryIOError(f"Cannot open {self.full_name}: {e}") from e


class InMemoryDirectoryEntry(DirectoryEntry):
    """Directory tree built in memory, useful for synthetic archives and tests."""

    def __init__(
        self,
        full_name: str,
        parent: DirectoryEntry | None = None,
        *,
        name: str | None = None,
        created: datetime.datetime | None = None,
        modified: datetime.datetime | None = None,
    ) -> None:
        super().__init__(full_name, parent, name)
        self._files: list[FileEntry] = []
        self._directories: list[DirectoryEntry] = []
        now = datetime.datetime.now(datetime.UTC)
        self._created = created or now
        self._modified = modified or now

    @property
    def files(self) -> list[FileEntry]:
        return list(self._files)

    @property
    def directories(self) -> list[DirectoryEntry]:
        return list(self._directories)

    @property
    def creation_time(self) -> datetime.datetime | None:
        return self._created

    @property
    def last_write_time(self) -> datetime.datetime | None:
        return self._modified

    def _child_path(self, name: str) -> str:
        return f"{self.full_name}/{name}"

    def add(self, entry: FileSystemEntry) -> FileSystemEntry:
        """Append a child entry, keeping names unique within this directory.

        Raises:
            InvalidEntryError: If a child with the same name already exists
            TypeError: If entry is neither a file nor a directory
        """
        taken = {child.name for child in self._files} | {child.name for child in self._directories}
        if entry.name in taken:
            raise InvalidEntryError(f"Duplicate entry name '{entry.name}' in directory '{self.full_name}'.")

        if isinstance(entry, FileEntry):
            self._files.append(entry)
        elif isinstance(entry, DirectoryEntry):
            self._directories.append(entry)
        else:
            raise TypeError(f"Unsupported entry type: {type(entry).__name__}")

        if entry.parent is None:
            entry._set_parent(self)
        return entry

    def add_file(self, name: str, data: bytes = b"", **kwargs: object) -> InMemoryFileEntry:
        """Create a file named exactly ``name`` in this directory."""
        entry = InMemoryFileEntry(
            self._child_path(name), data, parent=self, name=name, **kwargs  # type: ignore[arg-type]
        )
        self.add(entry)
        return entry

    def add_directory(self, name: str) -> "InMemoryDirectoryEntry":
        entry = InMemoryDirectoryEntry(self._child_path(name), parent=self, name=name)
        self.add(entry)
        return entry


def flatten(directory: DirectoryEntry, prefix: str | None = None) -> Iterator[tuple[str, FileEntry]]:
    """Walk a directory depth-first and yield ``(archive_name, file)`` pairs.

    Each directory yields its own files before descending into its
    subdirectories; both follow the order of the child collections. The archive
    name joins the directory names from ``directory`` downwards with ``/``.

    Args:
        directory: Directory registered with the builder
        prefix: Archive path of the directory's parent, if any

    Yields:
        Tuples of (archive_name, file_entry)
    """
    base = directory.name if not prefix else f"{prefix}/{directory.name}"
    for file_entry in directory.files:
        yield f"{base}/{file_entry.name}", file_entry
    for subdirectory in directory.directories:
        yield from flatten(subdirectory, base)


# 🗜️📁🔚
