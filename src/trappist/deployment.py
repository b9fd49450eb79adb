"""
Deployment metadata.

Reads the contract addresses written by the deployment scripts, e.g.
``contracts/deployments/trappist/31337.json``::

    {"addresses": {"trappistServiceManager": "0x...", "stakeRegistry": "0x..."}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from eth_utils import is_address, to_checksum_address

from .errors import ConfigError

SERVICE_MANAGER_KEY = "trappistServiceManager"


@dataclass(frozen=True)
class Deployment:
    service_manager: str


def parse_address(value: object, field_name: str = SERVICE_MANAGER_KEY) -> str:
    """Validate an address and return it EIP-55 checksummed."""
    if not isinstance(value, str) or not is_address(value):
        raise ConfigError(f"Malformed address for {field_name}: {value!r}")
    return to_checksum_address(value)


def load_deployment(path: Path) -> Deployment:
    """
    Load deployment metadata from a JSON file.

    Args:
        path: Path to the deployment JSON

    Returns:
        Deployment with the checksummed service manager address

    Raises:
        ConfigError: If the file is unreadable, not JSON, or lacks a valid
            ``addresses.trappistServiceManager`` entry
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read deployment file {path}: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Deployment file {path} is not valid JSON: {exc}") from exc

    addresses = data.get("addresses") if isinstance(data, dict) else None
    if not isinstance(addresses, dict):
        raise ConfigError(f"Deployment file {path} has no 'addresses' object")
    if SERVICE_MANAGER_KEY not in addresses:
        raise ConfigError(
            f"Deployment file {path} is missing addresses.{SERVICE_MANAGER_KEY}"
        )

    return Deployment(service_manager=parse_address(addresses[SERVICE_MANAGER_KEY]))
