"""
Chain Client - Build, sign, and send contract transactions.

Holds the signing account and the RPC connection for the whole process.
Ticks run strictly one after another, so the client is never used
concurrently.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

import httpx
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from ..signer.eth import get_account
from .rpc import RpcClient

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


class ChainClient:
    def __init__(
        self,
        account: LocalAccount,
        rpc: RpcClient,
        chain_id: Optional[int] = None,
    ) -> None:
        self.account = account
        self.rpc = rpc
        self._chain_id = chain_id

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "ChainClient":
        """
        Build a client from resolved settings.

        Raises:
            CredentialError: If the private key is not usable
        """
        account = get_account(settings.private_key.get_secret_value())
        rpc = RpcClient(settings.rpc_url, transport=transport)
        return cls(account, rpc, chain_id=settings.chain_id)

    @property
    def address(self) -> str:
        return self.account.address

    @property
    def chain_id(self) -> int:
        """Chain ID, queried from the node on first use."""
        if self._chain_id is None:
            self._chain_id = self.rpc.chain_id()
            logger.debug("Connected to chain %d via %s", self._chain_id, self.rpc.url)
        return self._chain_id

    def close(self) -> None:
        self.rpc.close()

    def __enter__(self) -> "ChainClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def build_transaction(
        self,
        to: str,
        data: str,
        value: int = 0,
        gas_limit: Optional[int] = None,
    ) -> dict[str, Any]:
        """
        Build an unsigned legacy transaction.

        Args:
            to: Contract address
            data: 0x-prefixed calldata
            value: ETH value in wei
            gas_limit: Gas limit (default: eth_estimateGas)

        Returns:
            Unsigned transaction dict

        Raises:
            RpcError: If any of the nonce, gas or chain queries fail
        """
        to = to_checksum_address(to)
        if gas_limit is None:
            gas_limit = self.rpc.estimate_gas(
                {"from": self.address, "to": to, "data": data, "value": hex(value)}
            )

        return {
            "to": to,
            "data": data,
            "value": value,
            "nonce": self.rpc.get_nonce(self.address),
            "gas": gas_limit,
            "gasPrice": self.rpc.gas_price(),
            "chainId": self.chain_id,
        }

    def sign_and_send(self, tx: dict[str, Any]) -> str:
        """
        Sign a transaction and broadcast it.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        signed = self.account.sign_transaction(tx)
        raw_tx = "0x" + bytes(signed.raw_transaction).hex()
        return self.rpc.send_raw_transaction(raw_tx)

    def send_transaction(
        self,
        to: str,
        data: str,
        value: int = 0,
        gas_limit: Optional[int] = None,
    ) -> str:
        """Build, sign and broadcast a contract call; return its hash."""
        tx = self.build_transaction(to, data, value=value, gas_limit=gas_limit)
        return self.sign_and_send(tx)

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120.0,
        poll_interval: float = 1.0,
    ) -> dict:
        return self.rpc.wait_for_receipt(tx_hash, timeout=timeout, poll_interval=poll_interval)
