"""CLI entry point for resolving URLs and queries into track metadata."""

import json
from pathlib import Path

import click
from loguru import logger

from .config import SearchConfig
from .engine import SearchEngine
from .errors import SearchError
from .models import Track

log = logger.bind(stage="cli")


def _find_config_file() -> Path | None:
    """Look for .env next to the package or in cwd."""
    pkg_dir = Path(__file__).resolve().parent
    for candidate in [
        pkg_dir.parent.parent / ".env",  # dev: src/../.env
        Path.cwd() / ".env",
    ]:
        if candidate.is_file():
            return candidate
    return None


def _format_duration(seconds: int) -> str:
    m, s = divmod(seconds, 60)
    h, m = divmod(m, 60)
    return f"{h}:{m:02d}:{s:02d}" if h else f"{m}:{s:02d}"


def _format_track(track: Track) -> str:
    artist = track.artist or "?"
    title = track.track or "?"
    return f"[{track.source}] {artist} - {title} ({_format_duration(track.duration)}) {track.url}"


@click.command()
@click.argument("inputs", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Print tracks as a JSON array.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True),
    default=None,
    help="Path to .env file.",
)
def main(
    inputs: tuple[str, ...],
    as_json: bool,
    verbose: bool,
    config_file: str | None,
) -> None:
    """Resolve media URLs or "!yt"/"!sc" queries into track metadata.

    Nothing is downloaded: only metadata is fetched.
    """
    env_file = Path(config_file) if config_file else _find_config_file()

    config_kwargs: dict[str, bool | str] = {}
    if verbose:
        config_kwargs["log_level"] = "DEBUG"
    config = SearchConfig(_env_file=env_file, **config_kwargs)  # type: ignore[arg-type]
    config.setup_logging()
    config.warn_if_unconfigured()
    if env_file:
        log.debug(f"Loaded config from {env_file}")

    try:
        config.ensure_dirs()
    except SearchError as e:
        raise click.ClickException(str(e)) from e

    engine = SearchEngine(config)
    try:
        tracks = engine.resolve_batch(inputs)
    except SearchError as e:
        raise click.ClickException(str(e)) from e
    finally:
        engine.close()

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in tracks], indent=2))
        return
    if not tracks:
        click.echo("No match")
        return
    for track in tracks:
        click.echo(_format_track(track))
