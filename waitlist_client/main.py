"""
CoachGG waitlist client - command line entry point.

Submits signups to the waitlist service, or to the local fallback store
when the service cannot be reached.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click

from waitlist_client.config import ClientConfig
from waitlist_client.logging_config import setup_logging
from waitlist_client.signup import SignupClient
from waitlist_client.stores import SignupForm


def load_config(config_path: Optional[Path]) -> ClientConfig:
    if config_path:
        return ClientConfig.from_yaml(config_path)
    return ClientConfig()


@click.group()
@click.option("--config", "-c", type=click.Path(exists=True, path_type=Path), help="Config file path")
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], debug: bool) -> None:
    """CoachGG waitlist client."""
    ctx.ensure_object(dict)
    cfg = load_config(config)
    setup_logging("DEBUG" if debug else cfg.log_level)
    ctx.obj["config"] = cfg


@cli.command()
@click.argument("email")
@click.option("--gamertag", "-g", default="", help="Gamertag (optional)")
@click.option("--game", "primary_game", default="", help="Primary game (optional)")
@click.option("--consent/--no-consent", default=False, help="Accept the privacy policy")
@click.pass_context
def join(ctx: click.Context, email: str, gamertag: str, primary_game: str, consent: bool) -> None:
    """Join the waitlist with EMAIL."""
    form = SignupForm(email=email, gamertag=gamertag, primary_game=primary_game, consent=consent)

    async def _join():
        client = SignupClient(ctx.obj["config"])
        try:
            await client.start()
            return await client.submit(form), client.displayed_count
        finally:
            await client.remote.close()

    result, count = asyncio.run(_join())
    click.echo(result.message)
    if not result.success:
        sys.exit(1)
    click.echo(f"{count:,} people on the waitlist")


@cli.command()
@click.pass_context
def count(ctx: click.Context) -> None:
    """Show the number of people on the waitlist."""

    async def _count():
        client = SignupClient(ctx.obj["config"])
        try:
            await client.start()
            return client.displayed_count
        finally:
            await client.remote.close()

    click.echo(f"{asyncio.run(_count()):,}")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show whether signups go to the service or the local store."""

    async def _status():
        client = SignupClient(ctx.obj["config"])
        try:
            await client.start()
            return client
        finally:
            await client.remote.close()

    client = asyncio.run(_status())
    config = ctx.obj["config"]
    if client.use_remote:
        click.echo(f"Connected to {config.api.url}")
    else:
        click.echo(f"Service unavailable, using local store {config.local.path}")
    click.echo(f"Waitlist count: {client.displayed_count:,}")


if __name__ == "__main__":
    cli()
