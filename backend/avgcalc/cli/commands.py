"""Click CLI commands for the average calculator."""

from __future__ import annotations

import asyncio
import sys

import click
import httpx
from pydantic import ValidationError

from avgcalc.config import AppConfig
from avgcalc.providers.types import NumberKind
from avgcalc.utils.logging import get_logger, setup_logging


def _load_config(**overrides: object) -> AppConfig:
    """Load AppConfig with CLI flags on top.

    Override keys use the env var nesting, e.g. ``web__port=9000``.
    None values are skipped. Init kwargs are deep-merged with env and
    .env sources, so unrelated nested fields keep their env values.
    """
    update: dict[str, dict[str, object]] = {}
    for dotted, value in overrides.items():
        if value is None:
            continue
        section, field = dotted.split("__", 1)
        update.setdefault(section, {})[field] = value
    try:
        return AppConfig(**update)  # type: ignore[arg-type]
    except ValidationError as e:
        raise click.ClickException(str(e)) from e


@click.group()
def cli() -> None:
    """Average calculator: windowed averages over upstream number generators."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Listen port (default: 9876).")
@click.option(
    "--capacity", default=None, type=int, help="Window capacity (default: 10)."
)
def serve(host: str | None, port: int | None, capacity: int | None) -> None:
    """Run the average calculator service until interrupted."""
    from avgcalc.web.server import StartupError, serve_forever

    cfg = _load_config(web__host=host, web__port=port, window__capacity=capacity)
    setup_logging(level=cfg.log_level, log_format=cfg.log_format)
    logger = get_logger("avgcalc.cli")

    try:
        asyncio.run(serve_forever(cfg))
    except StartupError as e:
        logger.critical("startup_failed", error=str(e))
        click.echo(f"Startup failed: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("kind")
@click.option("--host", default="127.0.0.1", help="Service host.")
@click.option("--port", default=None, type=int, help="Service port.")
def fetch(kind: str, host: str, port: int | None) -> None:
    """Request /numbers/KIND from a running service and print the JSON."""
    cfg = _load_config(web__port=port)
    url = f"http://{host}:{cfg.web.port}/numbers/{kind}"
    try:
        resp = httpx.get(url, timeout=5.0)
    except (httpx.ConnectError, httpx.ReadError, httpx.TimeoutException):
        click.echo("Service is not running (could not connect).")
        sys.exit(1)
    click.echo(resp.text)
    if resp.status_code != 200:
        sys.exit(1)


@cli.command()
def config() -> None:
    """Show current configuration."""
    cfg = _load_config()

    click.echo("=== Average Calculator Configuration ===\n")

    click.echo(f"Log Level:    {cfg.log_level}")
    click.echo(f"Log Format:   {cfg.log_format}")
    click.echo("")

    click.echo("[Web]")
    click.echo(f"  Host:       {cfg.web.host}")
    click.echo(f"  Port:       {cfg.web.port}")
    click.echo("")

    click.echo("[Window]")
    click.echo(f"  Capacity:   {cfg.window.capacity}")
    click.echo("")

    click.echo("[Provider]")
    click.echo(f"  Base URL:   {cfg.provider.base_url}")
    click.echo(f"  Timeout:    {cfg.provider.timeout_seconds}s")
    click.echo(f"  Token Set:  {bool(cfg.provider.bearer_token)}")
    click.echo("")

    click.echo(f"Kinds:        {', '.join(k.value for k in NumberKind)}")
