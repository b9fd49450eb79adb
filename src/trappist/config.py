"""
Runtime settings.

Settings are resolved once at startup and passed explicitly to the chain
client, submitter and scheduler. Precedence: explicit overrides (CLI
options) > process environment > ``.env`` file > defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError, CredentialError, TrappistError
from .signer.eth import PRIVATE_KEY_ENV, normalize_private_key

DEFAULT_RPC_URL = "http://localhost:8545"
DEFAULT_DEPLOYMENT_PATH = Path("contracts/deployments/trappist/31337.json")
DEFAULT_INTERVAL = 15.0
DEFAULT_RECEIPT_TIMEOUT = 120.0
DEFAULT_POLL_INTERVAL = 1.0


class Settings(BaseSettings):
    """
    Task spammer settings.

    Each field is read from the environment variable named by its alias
    (and from ``.env``). The private key is a ``SecretStr`` so it never
    shows up in reprs or validation messages.
    """

    private_key: SecretStr = Field(alias=PRIVATE_KEY_ENV)
    rpc_url: str = Field(DEFAULT_RPC_URL, alias="RPC_URL", min_length=1)
    deployment_path: Path = Field(DEFAULT_DEPLOYMENT_PATH, alias="TRAPPIST_DEPLOYMENT")
    interval: float = Field(DEFAULT_INTERVAL, alias="TASK_INTERVAL", gt=0, allow_inf_nan=False)
    gas_limit: Optional[int] = Field(None, alias="TASK_GAS_LIMIT", gt=0)
    receipt_timeout: float = Field(
        DEFAULT_RECEIPT_TIMEOUT, alias="RECEIPT_TIMEOUT", ge=0, allow_inf_nan=False
    )
    poll_interval: float = Field(
        DEFAULT_POLL_INTERVAL, alias="POLL_INTERVAL", ge=0, allow_inf_nan=False
    )
    chain_id: Optional[int] = Field(None, alias="CHAIN_ID", gt=0)

    # Pydantic-Settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    @field_validator("private_key", mode="before")
    @classmethod
    def _normalize_private_key(cls, value: Any) -> str:
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        if not isinstance(value, str):
            raise ValueError(f"{PRIVATE_KEY_ENV} must be a hex string")
        try:
            return normalize_private_key(value)
        except CredentialError as exc:
            raise ValueError(str(exc)) from None

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None, **overrides: Any) -> "Settings":
        """
        Resolve settings from the environment.

        Args:
            env_file: ``.env`` file to load (default: ``.env`` in the cwd)
            **overrides: Field values that win over the environment;
                None values are ignored

        Raises:
            CredentialError: If PRIVATE_KEY is missing or malformed
            ConfigError: If any other value is malformed
        """
        unknown = set(overrides) - set(cls.model_fields)
        if unknown:
            raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")

        # Pass overrides by alias so they take precedence over the same env name
        kwargs: dict[str, Any] = {
            cls.model_fields[k].alias or k: v for k, v in overrides.items() if v is not None
        }
        if env_file is not None:
            if not env_file.is_file():
                raise ConfigError(f"Env file not found: {env_file}")
            kwargs["_env_file"] = env_file

        try:
            return cls(**kwargs)
        except ValidationError as exc:
            raise _settings_error(exc) from None


def _env_names() -> dict[str, str]:
    names = {}
    for name, info in Settings.model_fields.items():
        env_name = info.alias or name.upper()
        names[name.lower()] = env_name
        names[env_name.lower()] = env_name
    return names


def _settings_error(exc: ValidationError) -> TrappistError:
    """Turn a pydantic ValidationError into a ConfigError or CredentialError.

    Only locations and messages are used; inputs may hold the private key.
    """
    env_names = _env_names()
    credential = False
    messages = []
    for error in exc.errors():
        field_name = str(error["loc"][0]) if error["loc"] else "settings"
        env_name = env_names.get(field_name.lower(), field_name)
        if env_name == PRIVATE_KEY_ENV:
            credential = True
            if error["type"] == "missing":
                messages.append(f"{PRIVATE_KEY_ENV} not set. Export it or add it to a .env file.")
                continue
        messages.append(f"{env_name}: {error['msg']}")

    message = "; ".join(messages)
    return CredentialError(message) if credential else ConfigError(message)
