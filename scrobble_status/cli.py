from __future__ import annotations

import json
import logging
from typing import Tuple

import typer

from .cache import clear_cache, load_cache
from .errors import ConfigError
from .lastfm_client import LastFmClient
from .runner import TickOutcome, run_tick
from .scheduler import DEFAULT_INTERVAL_SECONDS, Scheduler
from .settings import Settings, load_settings
from .twitter_client import TwitterProfileClient

app = typer.Typer(help="Mirror your latest Last.fm scrobble into your Twitter profile description.")

_OUTCOME_COLORS = {
    TickOutcome.CHANGED: typer.colors.GREEN,
    TickOutcome.UNCHANGED_FALLBACK: typer.colors.CYAN,
    TickOutcome.UNCHANGED_ACTIVE: typer.colors.YELLOW,
}


def _settings_or_exit() -> Settings:
    try:
        settings = load_settings()
    except ConfigError as exc:
        typer.secho(f"PEBCAK: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    return settings


def _clients(settings: Settings, dry_run: bool) -> Tuple[LastFmClient, TwitterProfileClient]:
    fetcher = LastFmClient.from_credentials(settings.lastfm, timeout=settings.http_timeout)
    profile = TwitterProfileClient.from_credentials(
        settings.twitter, timeout=settings.http_timeout, dry_run=dry_run
    )
    return fetcher, profile


@app.command()
def run(
    interval: float = typer.Option(DEFAULT_INTERVAL_SECONDS, min=1.0, help="Seconds between ticks."),
    dry_run: bool = typer.Option(False, help="Log the description instead of sending it to Twitter."),
) -> None:
    """Poll Last.fm every interval and keep the profile description in sync."""

    settings = _settings_or_exit()
    fetcher, profile = _clients(settings, dry_run)
    scheduler = Scheduler(lambda: run_tick(settings, fetcher, profile), interval=interval)
    typer.secho(
        f"Watching {settings.target_user} every {interval:g}s (fallback after "
        f"{settings.fallback_timeout_minutes} min).",
        fg=typer.colors.GREEN,
    )
    try:
        scheduler.run()
    except KeyboardInterrupt:
        typer.echo("Stopped.")


@app.command()
def tick(
    dry_run: bool = typer.Option(False, help="Log the description instead of sending it to Twitter."),
) -> None:
    """Run the sync routine once and report what happened."""

    settings = _settings_or_exit()
    fetcher, profile = _clients(settings, dry_run)
    outcome = run_tick(settings, fetcher, profile)
    typer.secho(f"Tick finished: {outcome.value}", fg=_OUTCOME_COLORS.get(outcome, typer.colors.RED))


@app.command("show-cache")
def show_cache() -> None:
    """Print the cached track record."""

    settings = _settings_or_exit()
    typer.echo(json.dumps(load_cache(settings.cache_path).to_json(), indent=2))


@app.command("reset-cache")
def reset_cache() -> None:
    """Forget the cached track so the next tick pushes again."""

    settings = _settings_or_exit()
    if clear_cache(settings.cache_path):
        typer.secho(f"Removed {settings.cache_path}", fg=typer.colors.GREEN)
    else:
        typer.secho("No cache file to remove.", fg=typer.colors.YELLOW)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
