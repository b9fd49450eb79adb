"""
Create Task - Send a single createNewTask transaction.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from ..chain.client import ChainClient
from ..errors import ConfirmationError, TrappistError
from ..log import configure_logging
from ..names import generate_name
from ..submitter import TaskSubmitter
from ._common import chain_options, load_settings


@click.command("create-task")
@click.argument("name", required=False)
@chain_options
def create_task(
    name: Optional[str],
    rpc_url: Optional[str],
    deployment_path: Optional[Path],
    env_file: Optional[Path],
    gas_limit: Optional[int],
    receipt_timeout: Optional[float],
    log_level: str,
) -> None:
    """
    Create one task and wait for it to be mined.

    NAME defaults to a random name such as QuickFox42.
    """
    configure_logging(log_level)
    settings = load_settings(
        env_file,
        rpc_url=rpc_url,
        deployment_path=deployment_path,
        gas_limit=gas_limit,
        receipt_timeout=receipt_timeout,
    )
    name = name or generate_name()

    with ChainClient.from_settings(settings) as client:
        click.echo(f"  Sender: {client.address}")
        click.echo(f"  Task: {name}")
        click.echo("")

        try:
            receipt = TaskSubmitter.from_settings(client, settings).submit(name)
        except ConfirmationError as exc:
            click.secho(f"FAILED: {exc}", fg="red")
            click.echo(f"  TX: {exc.tx_hash or 'unknown'}")
            sys.exit(exc.exit_code)
        except TrappistError as exc:
            click.secho(f"FAILED: {exc}", fg="red")
            sys.exit(exc.exit_code)

    click.secho("SUCCESS: Transaction confirmed!", fg="green")
    click.echo(f"  TX: {receipt.tx_hash}")
    if receipt.block_number is not None:
        click.echo(f"  Block: {receipt.block_number}")
