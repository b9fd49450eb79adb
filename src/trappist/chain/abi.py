"""
ABI Loader - Loads contract ABIs and encodes function calls.

ABIs ship as JSON artifacts in ``trappist/chain/abis/``. An alternative
directory (e.g. Foundry's ``contracts/out``) can be passed explicitly.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from eth_abi import encode
from eth_hash.auto import keccak

ABI_DIR = Path(__file__).resolve().parent / "abis"

SERVICE_MANAGER = "TrappistServiceManager"


@lru_cache(maxsize=16)
def load_abi(contract_name: str, abi_dir: Optional[Path] = None) -> list[dict[str, Any]]:
    """
    Load the ABI for a contract.

    Args:
        contract_name: Contract name (e.g., "TrappistServiceManager")
        abi_dir: Directory holding ``<name>.json`` or Foundry's
            ``<name>.sol/<name>.json`` (default: bundled ABIs)

    Returns:
        ABI as a list of dicts

    Raises:
        FileNotFoundError: If no artifact exists for the contract
    """
    base = abi_dir or ABI_DIR
    candidates = [
        base / f"{contract_name}.json",
        base / f"{contract_name}.sol" / f"{contract_name}.json",
    ]
    for path in candidates:
        if path.is_file():
            with path.open("r", encoding="utf-8") as f:
                artifact = json.load(f)
            # Foundry artifacts wrap the ABI; raw ABI files are a bare list
            return artifact["abi"] if isinstance(artifact, dict) else artifact

    raise FileNotFoundError(f"ABI not found for {contract_name} in {base}")


def service_manager_abi() -> list[dict[str, Any]]:
    """Load the TrappistServiceManager ABI."""
    return load_abi(SERVICE_MANAGER)


def function_signature(abi: list[dict[str, Any]], function_name: str) -> tuple[str, list[str]]:
    """Return the canonical signature and input types of a function."""
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            input_types = [_canonical_type(inp) for inp in entry.get("inputs", [])]
            return f"{function_name}({','.join(input_types)})", input_types
    raise ValueError(f"Function {function_name} not found in ABI")


def function_selector(signature: str) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(signature.encode("utf-8"))[:4]


def encode_call(abi: list[dict[str, Any]], function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    signature, input_types = function_signature(abi, function_name)
    encoded_args = encode(input_types, args) if input_types else b""
    return "0x" + function_selector(signature).hex() + encoded_args.hex()


def _canonical_type(param: dict[str, Any]) -> str:
    kind = param["type"]
    if kind.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param.get("components", []))
        return f"({inner}){kind[len('tuple'):]}"
    return kind
