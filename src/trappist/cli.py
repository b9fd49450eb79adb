"""
Trappist CLI

Command-line interface for the Trappist task spammer: creates
TrappistServiceManager tasks with random names on a local chain.

Commands:
  run          - Create a task every interval until interrupted
  create-task  - Create a single task
  name         - Print random task names
  whoami       - Show the signer address
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .errors import CredentialError
from .signer.eth import get_address, load_env_file, load_private_key
from .names import generate_name


@click.group()
@click.version_option(version=__version__, prog_name="trappist")
def cli() -> None:
    """Trappist - periodic task creation for the Trappist AVS."""


from .commands.run import run
from .commands.create import create_task

cli.add_command(run)
cli.add_command(create_task)


@cli.command()
@click.option("-n", "--count", type=click.IntRange(min=1), default=1, show_default=True)
def name(count: int) -> None:
    """Print random task names."""
    for _ in range(count):
        click.echo(generate_name())


@cli.command()
@click.option(
    "--env-file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help=".env file to load [default: search from cwd]",
)
def whoami(env_file: Optional[Path]) -> None:
    """Show the address that signs task transactions."""
    try:
        load_env_file(env_file)
        address = get_address(load_private_key())
    except CredentialError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        click.echo("No signer configured.")
        sys.exit(exc.exit_code)
    click.echo(f"Address: {address}")
