"""
JSON-RPC Client.

Lightweight alternative to web3.py: a single ``httpx.Client`` kept open for
the life of the process. Transport, HTTP and JSON-RPC failures all surface
as :class:`RpcError`.
"""

from __future__ import annotations

import itertools
import logging
import re
import time
from typing import Any, Callable, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_HEX_RE = re.compile(r"^0x[0-9a-fA-F]+$")


class RpcError(RuntimeError):
    """A JSON-RPC call failed (transport, HTTP status, or error object)."""

    def __init__(self, method: str, message: str, code: Optional[int] = None) -> None:
        super().__init__(f"{method}: {message}")
        self.method = method
        self.code = code


class RpcClient:
    """Minimal Ethereum JSON-RPC client over HTTP."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._ids = itertools.count(1)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def call(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the request fails or the node returns an error
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }

        try:
            response = self._client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise RpcError(method, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise RpcError(method, f"invalid JSON response: {exc}") from exc

        if not isinstance(data, dict):
            raise RpcError(method, f"unexpected response: {data!r}")

        if "error" in data:
            error = data["error"]
            if isinstance(error, dict):
                raise RpcError(method, str(error.get("message", error)), error.get("code"))
            raise RpcError(method, str(error))

        return data.get("result")

    # ---------------------------------------------------------------------
    # eth_* helpers
    # ---------------------------------------------------------------------

    def chain_id(self) -> int:
        return _quantity("eth_chainId", self.call("eth_chainId", []))

    def get_nonce(self, address: str, block: str = "pending") -> int:
        method = "eth_getTransactionCount"
        return _quantity(method, self.call(method, [address, block]))

    def gas_price(self) -> int:
        return _quantity("eth_gasPrice", self.call("eth_gasPrice", []))

    def estimate_gas(self, tx: dict[str, Any]) -> int:
        return _quantity("eth_estimateGas", self.call("eth_estimateGas", [tx]))

    def send_raw_transaction(self, raw_tx: str) -> str:
        """
        Send a signed raw transaction.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        tx_hash = self.call("eth_sendRawTransaction", [raw_tx])
        if not tx_hash:
            raise RpcError("eth_sendRawTransaction", "node returned no transaction hash")
        if not isinstance(tx_hash, str) or not _HEX_RE.match(tx_hash):
            raise RpcError("eth_sendRawTransaction", f"malformed transaction hash: {tx_hash!r}")
        return tx_hash

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        receipt = self.call("eth_getTransactionReceipt", [tx_hash])
        if receipt is not None and not isinstance(receipt, dict):
            raise RpcError("eth_getTransactionReceipt", f"unexpected receipt: {receipt!r}")
        return receipt

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120.0,
        poll_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> dict:
        """
        Wait for a transaction receipt.

        Polls at least once, then every ``poll_interval`` seconds until the
        receipt appears or ``timeout`` elapses.

        Raises:
            TimeoutError: If receipt not found within timeout
            RpcError: If polling fails
        """
        deadline = clock() + timeout
        while True:
            receipt = self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if clock() >= deadline:
                break
            logger.debug("Receipt for %s not available yet", tx_hash)
            sleep(poll_interval)

        raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")


def _quantity(method: str, value: Any) -> int:
    """Decode a hex QUANTITY result, e.g. ``"0x1a"``."""
    if not isinstance(value, str) or not _HEX_RE.match(value):
        raise RpcError(method, f"expected a hex quantity, got {value!r}")
    return int(value, 16)
