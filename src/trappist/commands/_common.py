from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click

from ..config import Settings
from ..errors import TrappistError
from ..signer.eth import get_account


def chain_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that talks to the chain."""
    options = [
        click.option(
            "--rpc-url",
            envvar="RPC_URL",
            default=None,
            help="JSON-RPC endpoint [default: http://localhost:8545]",
        ),
        click.option(
            "--deployment",
            "deployment_path",
            type=click.Path(path_type=Path, dir_okay=False),
            envvar="TRAPPIST_DEPLOYMENT",
            default=None,
            help="Deployment JSON with addresses.trappistServiceManager",
        ),
        click.option(
            "--env-file",
            type=click.Path(path_type=Path, dir_okay=False),
            default=None,
            help=".env file to load [default: search from cwd]",
        ),
        click.option("--gas-limit", type=int, default=None, help="Gas limit (default: estimate)"),
        click.option(
            "--receipt-timeout",
            type=float,
            default=None,
            help="Seconds to wait for a receipt [default: 120]",
        ),
        click.option(
            "--log-level",
            type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
            default="INFO",
            envvar="LOG_LEVEL",
            show_default=True,
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def load_settings(env_file: Optional[Path], **overrides: Any) -> Settings:
    """Resolve settings, exiting the process on a fatal config error."""
    try:
        settings = Settings.from_env(env_file=env_file, **overrides)
        get_account(settings.private_key.get_secret_value())
        return settings
    except TrappistError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(exc.exit_code)
