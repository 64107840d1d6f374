#!/usr/bin/env python3
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#


from pathlib import Path

import click
from provide.foundation import logger
from provide.foundation.cli.decorators import output_options
from provide.foundation.console import perr, pout
from provide.foundation.context import CLIContext

from archivebuilder.config import (
    DEFAULT_COMPRESSION,
    DEFAULT_MAX_RETRIES,
    ERROR_MODES,
    ArchiveConfig,
    _get_default_exclude_patterns,
)
from archivebuilder.copier import DEFAULT_CHUNK_SIZE
from archivebuilder.core import build_archive
from archivebuilder.errors import ArchiveBuildError, BuildAbortedError, ConfigurationError
from archivebuilder.writer import COMPRESSION_METHODS

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("archivebuilder")
except (ImportError, PackageNotFoundError):
    __version__ = "unknown"

EXIT_FAILURE = 1
EXIT_ABORTED = 2


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(
    version=__version__, package_name="archivebuilder", message="%(package)s version %(version)s"
)
def cli() -> None:
    """archivebuilder: build ZIP archives from files and directories."""


@cli.command(name="build", context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("sources", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Archive file to create.",
)
@click.option(
    "--on-error",
    type=click.Choice(ERROR_MODES, case_sensitive=False),
    default="abort",
    show_default=True,
    help="What to do when a file cannot be opened.",
)
@click.option(
    "--max-retries",
    type=click.IntRange(min=0),
    default=DEFAULT_MAX_RETRIES,
    show_default=True,
    help="Retries per file with --on-error retry before aborting.",
)
@click.option(
    "--chunk-size",
    type=click.IntRange(min=1),
    default=DEFAULT_CHUNK_SIZE,
    show_default=True,
    help="Bytes copied per progress step.",
)
@click.option(
    "--compression",
    type=click.Choice(list(COMPRESSION_METHODS), case_sensitive=False),
    default=DEFAULT_COMPRESSION,
    show_default=True,
    help="ZIP compression method.",
)
@click.option(
    "--exclude",
    "-e",
    multiple=True,
    type=str,
    help="Gitignore-style pattern skipped inside directories. Use multiple times.",
)
@click.option(
    "--no-default-excludes",
    is_flag=True,
    default=False,
    help="Do not apply the built-in exclusion patterns (.git/, __pycache__/, ...).",
)
@click.option(
    "--follow-symlinks",
    is_flag=True,
    default=False,
    help="Follow symbolic links inside directories.",
)
@click.option(
    "--progress/--no-progress",
    default=True,
    help="Show per-file progress while building.",
)
@output_options
@click.pass_context
def build_command(
    ctx: click.Context,
    sources: tuple[Path, ...],
    output: Path,
    on_error: str,
    max_retries: int,
    chunk_size: int,
    compression: str,
    exclude: tuple[str, ...],
    no_default_excludes: bool,
    follow_symlinks: bool,
    progress: bool,
    json_output: bool | None,
    no_color: bool,
    no_emoji: bool,
) -> None:
    """Builds a ZIP archive from SOURCES (files and directories)."""
    if not hasattr(ctx, "obj") or ctx.obj is None:
        ctx.obj = CLIContext()
    cli_context = ctx.obj
    if json_output is not None:
        cli_context.json_output = json_output
    if no_color:
        cli_context.no_color = no_color
    if no_emoji:
        cli_context.no_emoji = no_emoji

    logger.debug(
        "cli.build.arguments",
        sources=[str(s) for s in sources],
        output=str(output),
        on_error=on_error,
        max_retries=max_retries,
        chunk_size=chunk_size,
        compression=compression,
        exclude=list(exclude),
        no_default_excludes=no_default_excludes,
        follow_symlinks=follow_symlinks,
        progress=progress,
    )

    try:
        exclude_patterns = [] if no_default_excludes else _get_default_exclude_patterns()
        exclude_patterns.extend(exclude)

        config = ArchiveConfig(
            output_file=output,
            chunk_size=chunk_size,
            compression=compression,
            on_error=on_error,
            max_retries=max_retries,
            exclude_patterns=exclude_patterns,
            follow_symlinks=follow_symlinks,
            show_progress=progress,
        )

        summary = build_archive(config, sources, cli_context=cli_context)
        if not (cli_context and cli_context.json_output):
            ignored_str = f", {len(summary.ignored)} ignored" if summary.ignored else ""
            pout(
                f"Archive created: {summary.output_file} ({len(summary.written)} files{ignored_str})",
                ctx=cli_context,
            )
    except ConfigurationError as e:
        logger.critical("cli.build.configuration_error", error=str(e))
        perr(f"Error: {e}")
        raise SystemExit(EXIT_FAILURE) from None
    except BuildAbortedError as e:
        logger.error("cli.build.aborted", error=str(e))
        perr(f"Aborted: {e}")
        raise SystemExit(EXIT_ABORTED) from None
    except ArchiveBuildError as e:
        logger.error("cli.build.failure", error=str(e))
        perr(f"Error: {e}")
        raise SystemExit(EXIT_FAILURE) from None
    except OSError as e:  # pragma: no cover
        logger.critical("cli.build.os_error", error=str(e))
        perr(f"Error: {e}")
        raise SystemExit(EXIT_FAILURE) from None


if __name__ == "__main__":  # pragma: no cover
    cli()

# 🗜️📁🔚
