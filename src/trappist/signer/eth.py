"""
ECDSA / secp256k1 key handling.

The signing key comes from the ``PRIVATE_KEY`` environment variable, which
may be populated from a ``.env`` file via python-dotenv. The key is only
ever handed to eth-account; it is never logged or echoed.

Dependencies: eth-account, python-dotenv
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_keys.exceptions import ValidationError as KeyValidationError

from ..errors import ConfigError, CredentialError

PRIVATE_KEY_ENV = "PRIVATE_KEY"

_KEY_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def load_env_file(env_file: Optional[Path] = None) -> Optional[Path]:
    """
    Load a ``.env`` file into ``os.environ`` without overriding set values.

    Args:
        env_file: Explicit path. If None, search from the current directory.

    Returns:
        Path of the loaded file, or None if no file was found

    Raises:
        ConfigError: If an explicit env_file does not exist
    """
    if env_file is not None:
        if not env_file.is_file():
            raise ConfigError(f"Env file not found: {env_file}")
        load_dotenv(env_file, override=False)
        return env_file

    found = find_dotenv(usecwd=True)
    if not found:
        return None
    load_dotenv(found, override=False)
    return Path(found)


def normalize_private_key(raw: str) -> str:
    """
    Normalize a hex private key to 0x-prefixed form.

    Raises:
        CredentialError: If the key is not 32 bytes of hex
    """
    key = raw.strip()
    if not key.startswith("0x"):
        key = "0x" + key
    if not _KEY_RE.match(key):
        raise CredentialError(
            f"{PRIVATE_KEY_ENV} is malformed: expected 32 bytes of hex"
        )
    return key


def load_private_key(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Read the private key from the environment.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        0x-prefixed hex private key

    Raises:
        CredentialError: If PRIVATE_KEY is unset or malformed
    """
    environ = os.environ if environ is None else environ
    raw = environ.get(PRIVATE_KEY_ENV)
    if not raw:
        raise CredentialError(
            f"{PRIVATE_KEY_ENV} not set. Export it or add it to a .env file."
        )
    return normalize_private_key(raw)


def get_account(private_key: str) -> LocalAccount:
    """
    Build an eth-account LocalAccount from a private key.

    Raises:
        CredentialError: If the key is not a valid secp256k1 scalar
    """
    try:
        return Account.from_key(private_key)
    except (ValueError, TypeError, KeyValidationError) as exc:
        raise CredentialError(f"Invalid {PRIVATE_KEY_ENV}: {type(exc).__name__}") from exc


def get_address(private_key: str) -> str:
    """Return the checksummed address for a private key."""
    return get_account(private_key).address
