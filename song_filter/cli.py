"""
Command-line interface for song-filter.

This module implements the CLI using Click, exposing the duplicate song
filter to shell scripts and download wrappers.
rich-click is used for the output colors.

Commands:
    songfilter check <title>...         Tell whether titles are already downloaded
    songfilter register <title>...      Add titles to the downloaded-songs list
    songfilter import <path>            Register titles from a text file or a music folder
    songfilter dedupe <file>            Remove similar titles from a list
    songfilter compare <a> <b>          Show the similarity of two titles
    songfilter stats                    Show the downloaded-songs list statistics
    songfilter clear                    Empty the downloaded-songs list

Options:
    --config <path>                     Use this config.yaml instead of ./config.yaml
    --verbose                           Also show debug messages

Usage:
    # Skip a download if the song is already there
    songfilter check "Daft Punk - One More Time (Official Video)"

    # Record what was downloaded
    songfilter register "Daft Punk - One More Time"

    # Seed the list from an existing music folder
    songfilter import ~/Desktop/MUSICA

    # Show clusters of similar titles in a playlist export
    songfilter dedupe playlist.txt --groups

Exit Codes:
    0   Success
    1   Configuration or storage error
    130 Interrupted by user
"""

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.COMMAND_GROUPS = {
    "songfilter": [
        {
            "name": "Duplicate Checks",
            "commands": ["check", "compare", "dedupe"],
        },
        {
            "name": "Downloaded Songs",
            "commands": ["register", "import", "stats", "clear"],
        },
    ],
}

from song_filter import __version__
from song_filter.core import (
    ConfigError,
    SongFilterError,
    StorageError,
    get_logger,
    load_config,
    log_skipped_duplicate,
    setup_logging,
    shutdown_logging,
)
from song_filter.core.progress import ImportProgressBar
from song_filter.filter import SongFilterService
from song_filter.utils import ensure_directory, extract_song_title, list_audio_files

logger = get_logger(__name__)


@click.group(invoke_without_command=True)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml)"
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show debug messages"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    verbose: bool,
    version: bool
) -> None:
    """
    song-filter: Skip songs you have already downloaded.

    Compares song titles against the list of downloaded songs, ignoring
    case, punctuation, word order and tags like [Official Video].

    \b
    BASIC USAGE:
        songfilter check "Artist - Song (Official Video)"
        songfilter register "Artist - Song"
        songfilter import ~/Desktop/MUSICA
    """
    if version:
        click.echo(f"song-filter {__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


@contextmanager
def _open_service(ctx: click.Context) -> Iterator[SongFilterService]:
    """
    Load configuration, set up logging and build the filter service.

    Errors raised while the service is in use are reported the same way
    as setup errors.

    Raises:
        SystemExit: On configuration/storage errors (exit code 1) or
                    Ctrl+C (exit code 130).
    """
    options = ctx.obj or {}

    try:
        config = load_config(options.get("config_path"))

        try:
            ensure_directory(config.output.directory)
        except OSError as e:
            raise StorageError(
                f"Cannot create output directory: {config.output.directory}",
                details={"path": str(config.output.directory), "error": str(e)}
            ) from e

        setup_logging(config.output.directory, verbose=options.get("verbose", False))
        yield SongFilterService.from_config(config)

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except SongFilterError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(1)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    finally:
        shutdown_logging()


def _read_titles(path: Path) -> list[str]:
    """
    Read one title per line from a UTF-8 text file, skipping blank lines.

    Raises:
        SongFilterError: If the file cannot be read.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise SongFilterError(
            f"Cannot read titles from {path}",
            details={"path": str(path), "error": str(e)}
        ) from e

    return [line.strip() for line in lines if line.strip()]


def _collect_import_titles(path: Path) -> list[str]:
    """Titles to import: lines of a text file, or audio file names in a folder."""
    if path.is_dir():
        return [extract_song_title(file.name) for file in list_audio_files(path)]
    return _read_titles(path)


# =============================================================================
# DUPLICATE CHECKS
# =============================================================================

@cli.command()
@click.argument("titles", nargs=-1, required=True)
@click.pass_context
def check(ctx: click.Context, titles: tuple[str, ...]) -> None:
    """Tell whether each TITLE is already downloaded."""
    with _open_service(ctx) as service:
        for title in titles:
            if not service.is_duplicate_song(title):
                click.echo(f"NEW        {title}")
                continue

            match, score = service.find_match_with_score(title)
            if match is not None:
                click.echo(f"DUPLICATE  {title}  ~ {match} ({score:.2f})")
            else:
                click.echo(f"DUPLICATE  {title}")


@cli.command()
@click.argument("title_a")
@click.argument("title_b")
@click.pass_context
def compare(ctx: click.Context, title_a: str, title_b: str) -> None:
    """Show how similar TITLE_A and TITLE_B are."""
    with _open_service(ctx) as service:
        breakdown = service.similarity_breakdown(title_a, title_b)
        similar = service.are_similar(title_a, title_b)

        click.echo(f"Edit distance:  {breakdown.edit:.4f}")
        click.echo(f"Token overlap:  {breakdown.jaccard:.4f}")
        click.echo(f"Containment:    {breakdown.containment:.4f}")
        click.echo(f"Combined score: {breakdown.combined:.4f}")
        click.echo(
            f"Same song:      {'yes' if similar else 'no'} "
            f"(threshold {service.similarity_threshold:.2f})"
        )


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--groups",
    is_flag=True,
    help="Show groups of similar titles instead of the deduplicated list"
)
@click.pass_context
def dedupe(ctx: click.Context, file: Path, groups: bool) -> None:
    """Remove similar titles from FILE (one title per line)."""
    with _open_service(ctx) as service:
        titles = _read_titles(file)

        if groups:
            similar_groups = service.group_similar_songs(titles)
            if not similar_groups:
                click.echo("No similar titles found")
            for key, members in similar_groups.items():
                click.echo(key)
                for member in members[1:]:
                    click.echo(f"    ~ {member}")
            return

        finder = service.cache.finder
        for title in finder.remove_duplicates(titles):
            click.echo(title)

        stats = finder.calculate_duplicate_stats(titles)
        click.echo(
            f"Kept {stats.unique_titles} of {stats.total_titles} titles "
            f"({stats.duplicate_percentage:.1f}% duplicates, "
            f"{stats.duplicate_groups} groups)",
            err=True
        )


# =============================================================================
# DOWNLOADED SONGS
# =============================================================================

@cli.command()
@click.argument("titles", nargs=-1, required=True)
@click.option(
    "--force",
    is_flag=True,
    help="Register even if a similar song is already downloaded"
)
@click.pass_context
def register(ctx: click.Context, titles: tuple[str, ...], force: bool) -> None:
    """Add each TITLE to the downloaded-songs list."""
    with _open_service(ctx) as service:
        for title in titles:
            if not title.strip():
                continue

            if not force and service.is_duplicate_song(title):
                match, score = service.find_match_with_score(title)
                log_skipped_duplicate(logger, title, match, score if match else None)
                click.echo(f"Skipped (already downloaded): {title}")
                continue

            service.register_downloaded_song(title)
            click.echo(f"Registered: {title.strip()}")


@cli.command(name="import")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def import_songs(ctx: click.Context, path: Path) -> None:
    """
    Register every title from PATH, skipping duplicates.

    PATH is either a text file with one title per line or a folder of
    downloaded audio files (titles are taken from the file names).
    """
    with _open_service(ctx) as service:
        titles = _collect_import_titles(path)
        if not titles:
            click.echo(f"No titles found in {path}")
            return

        logger.info(f"Importing {len(titles)} titles from {path}")

        with ImportProgressBar(total=len(titles)) as progress:
            for title in titles:
                if service.is_duplicate_song(title):
                    match, score = service.find_match_with_score(title)
                    log_skipped_duplicate(logger, title, match, score if match else None)
                    progress.update(registered=False)
                else:
                    service.register_downloaded_song(title)
                    progress.update(registered=True)

        click.echo(
            f"Imported {progress.registered} songs, "
            f"skipped {progress.skipped} duplicates"
        )


@cli.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show statistics of the downloaded-songs list."""
    with _open_service(ctx) as service:
        songs = service.load_downloaded_songs()
        statistics = service.get_statistics()

        last_update = (
            statistics.last_cache_update.strftime("%Y-%m-%d %H:%M:%S")
            if statistics.last_cache_update is not None
            else "never"
        )

        click.echo(f"Downloaded songs:  {len(songs)}")
        click.echo(f"Threshold:         {statistics.similarity_threshold:.2f}")
        click.echo(f"Cache TTL:         {statistics.cache_ttl_seconds:g}s")
        click.echo(f"Last reload:       {last_update}")


@cli.command()
@click.option(
    "--yes",
    is_flag=True,
    help="Do not ask for confirmation"
)
@click.pass_context
def clear(ctx: click.Context, yes: bool) -> None:
    """Empty the downloaded-songs list."""
    if not yes:
        click.confirm("Forget every downloaded song?", abort=True)

    with _open_service(ctx) as service:
        service.reset()
        click.echo("Downloaded songs list cleared")


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `songfilter` from the command line.
    It invokes the Click CLI group.
    """
    cli()


if __name__ == "__main__":
    main()
