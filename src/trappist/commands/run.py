"""
Run - Create a new task every interval until interrupted.

SIGINT / SIGTERM stop the loop after the in-flight submission resolves.
"""

from __future__ import annotations

import signal
from pathlib import Path
from typing import Optional

import click

from ..chain.client import ChainClient
from ..log import configure_logging
from ..scheduler import Scheduler
from ..submitter import TaskSubmitter
from ._common import chain_options, load_settings


@click.command()
@click.option(
    "--interval",
    type=float,
    envvar="TASK_INTERVAL",
    default=None,
    help="Seconds between ticks [default: 15]",
)
@click.option(
    "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many ticks (default: run forever)",
)
@chain_options
def run(
    interval: Optional[float],
    count: Optional[int],
    rpc_url: Optional[str],
    deployment_path: Optional[Path],
    env_file: Optional[Path],
    gas_limit: Optional[int],
    receipt_timeout: Optional[float],
    log_level: str,
) -> None:
    """
    Create a TrappistServiceManager task every interval.

    Each tick generates a random name and sends createNewTask(name).
    Failures are logged and the loop carries on.
    """
    configure_logging(log_level)
    settings = load_settings(
        env_file,
        rpc_url=rpc_url,
        deployment_path=deployment_path,
        interval=interval,
        gas_limit=gas_limit,
        receipt_timeout=receipt_timeout,
    )

    with ChainClient.from_settings(settings) as client:
        click.echo(f"  Sender: {client.address}")
        click.echo(f"  RPC: {settings.rpc_url}")
        click.echo(f"  Deployment: {settings.deployment_path}")
        click.echo("")

        scheduler = Scheduler(
            TaskSubmitter.from_settings(client, settings),
            interval=settings.interval,
        )

        def _handle_signal(signum: int, frame: object) -> None:
            scheduler.stop()

        previous = {
            sig: signal.signal(sig, _handle_signal)
            for sig in (signal.SIGINT, signal.SIGTERM)
        }
        try:
            stats = scheduler.run(max_ticks=count)
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

    click.echo(
        f"Stopped after {stats.ticks} ticks: "
        f"{stats.succeeded} succeeded, {stats.failed} failed"
    )
