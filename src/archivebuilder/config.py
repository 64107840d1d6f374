#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#


from pathlib import Path

import attrs
from provide.foundation import logger
from provide.foundation.config.base import BaseConfig, field

from archivebuilder.copier import DEFAULT_CHUNK_SIZE
from archivebuilder.errors import ConfigurationError, InvalidPathError
from archivebuilder.writer import COMPRESSION_METHODS

ERROR_MODES: tuple[str, ...] = ("abort", "ignore", "retry")
DEFAULT_COMPRESSION = "deflated"
DEFAULT_MAX_RETRIES = 3
DEFAULT_EXCLUDE_PATTERNS: list[str] = [
    ".git/",
    "__pycache__/",
    "*.py[co]",
    "*.swp",
]


def _get_default_exclude_patterns() -> list[str]:
    return list(DEFAULT_EXCLUDE_PATTERNS)


def _convert_optional_path(value: str | Path | None) -> Path | None:
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    try:
        return Path(value)
    except TypeError as e:
        raise TypeError(f"Cannot convert value of type {type(value)} to Path or None.") from e


@attrs.define(kw_only=True, slots=True)
class ArchiveConfig(BaseConfig):
    output_file: Path | None = field(  # noqa: RUF009
        default=None,
        converter=_convert_optional_path,
        validator=attrs.validators.optional(attrs.validators.instance_of(Path)),
        description="Archive file to create",
        env_var="ARCHIVEBUILDER_OUTPUT",
    )
    chunk_size: int = field(
        default=DEFAULT_CHUNK_SIZE,
        converter=int,
        description="Bytes copied per progress step",
        env_var="ARCHIVEBUILDER_CHUNK_SIZE",
    )
    compression: str = field(
        default=DEFAULT_COMPRESSION,
        validator=attrs.validators.instance_of(str),
        description="ZIP compression method (stored, deflated, bzip2, lzma)",
        env_var="ARCHIVEBUILDER_COMPRESSION",
    )
    on_error: str = field(
        default="abort",
        validator=attrs.validators.instance_of(str),
        description="What to do when a file cannot be opened (abort, ignore, retry)",
        env_var="ARCHIVEBUILDER_ON_ERROR",
    )
    max_retries: int = field(
        default=DEFAULT_MAX_RETRIES,
        converter=int,
        description="Retries per file when on_error is 'retry'",
        env_var="ARCHIVEBUILDER_MAX_RETRIES",
    )
    exclude_patterns: list[str] = field(  # noqa: RUF009
        factory=_get_default_exclude_patterns,
        validator=attrs.validators.deep_iterable(
            member_validator=attrs.validators.instance_of(str),
            iterable_validator=attrs.validators.instance_of(list),
        ),
        description="Gitignore-style patterns skipped when reading directories",
    )
    follow_symlinks: bool = field(
        default=False,
        description="Follow symbolic links when reading directories",
        env_var="ARCHIVEBUILDER_FOLLOW_SYMLINKS",
    )
    show_progress: bool = field(
        default=False,
        description="Show per-file progress while building",
        env_var="ARCHIVEBUILDER_SHOW_PROGRESS",
    )

    def __attrs_post_init__(self) -> None:
        super().__attrs_post_init__()
        self.validate()

    @property
    def compression_method(self) -> int:
        return COMPRESSION_METHODS[self.compression]

    def validate(self) -> None:
        if self.chunk_size <= 0:
            raise ConfigurationError(f"Chunk size must be positive, got {self.chunk_size}.")
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be non-negative, got {self.max_retries}.")

        self.compression = self.compression.lower()
        if self.compression not in COMPRESSION_METHODS:
            raise ConfigurationError(
                f"Unknown compression '{self.compression}'. Choose one of: {', '.join(COMPRESSION_METHODS)}."
            )

        self.on_error = self.on_error.lower()
        if self.on_error not in ERROR_MODES:
            raise ConfigurationError(
                f"Unknown error mode '{self.on_error}'. Choose one of: {', '.join(ERROR_MODES)}."
            )

        if self.output_file is not None:
            try:
                self.output_file = self.output_file.resolve()
            except OSError as e:
                raise ConfigurationError(f"Output path issue: {e}") from e
            if not self.output_file.parent.is_dir():
                raise InvalidPathError(f"Output directory '{self.output_file.parent}' not found.")
            if self.output_file.is_dir():
                raise InvalidPathError(f"Output path '{self.output_file}' is a directory.")
        else:
            logger.debug("config.output_file.none")
        logger.debug("config.initialized", config=str(self))


# 🗜️📁🔚
