"""
Task Submitter - Create one task on the TrappistServiceManager.

One call to :meth:`TaskSubmitter.submit` sends exactly one
``createNewTask(name)`` transaction and waits for its receipt. There is no
retry; a failed step raises and the caller decides what to do next.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .chain.abi import encode_call, service_manager_abi
from .chain.client import ChainClient
from .chain.rpc import RpcError
from .config import DEFAULT_POLL_INTERVAL, DEFAULT_RECEIPT_TIMEOUT, Settings
from .deployment import load_deployment
from .errors import ConfirmationError, SubmissionError

logger = logging.getLogger(__name__)

CREATE_TASK_FUNCTION = "createNewTask"


@dataclass(frozen=True)
class TaskReceipt:
    task_name: str
    tx_hash: str
    block_number: Optional[int]
    gas_used: Optional[int]
    status: int

    @classmethod
    def from_rpc(cls, task_name: str, tx_hash: str, receipt: dict[str, Any]) -> "TaskReceipt":
        return cls(
            task_name=task_name,
            tx_hash=receipt.get("transactionHash") or tx_hash,
            block_number=_hex_int(receipt.get("blockNumber")),
            gas_used=_hex_int(receipt.get("gasUsed")),
            status=_hex_int(receipt.get("status")) if receipt.get("status") else 1,
        )


class TaskSubmitter:
    def __init__(
        self,
        client: ChainClient,
        deployment_path: Path,
        *,
        abi: Optional[list[dict[str, Any]]] = None,
        gas_limit: Optional[int] = None,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.client = client
        self.deployment_path = deployment_path
        self.abi = abi if abi is not None else service_manager_abi()
        self.gas_limit = gas_limit
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval

    @classmethod
    def from_settings(cls, client: ChainClient, settings: Settings) -> "TaskSubmitter":
        return cls(
            client,
            settings.deployment_path,
            gas_limit=settings.gas_limit,
            receipt_timeout=settings.receipt_timeout,
            poll_interval=settings.poll_interval,
        )

    def submit(self, name: str) -> TaskReceipt:
        """
        Create a new task named ``name`` and wait for confirmation.

        The deployment file is re-read on every call, so a redeploy is
        picked up without a restart.

        Raises:
            ConfigError: Deployment file missing or malformed (no network I/O)
            SubmissionError: Build, sign or broadcast failed
            ConfirmationError: Timed out or reverted after broadcast
        """
        deployment = load_deployment(self.deployment_path)
        contract = deployment.service_manager
        calldata = encode_call(self.abi, CREATE_TASK_FUNCTION, [name])

        try:
            tx_hash = self.client.send_transaction(contract, calldata, gas_limit=self.gas_limit)
        except (RpcError, ValueError, TypeError) as exc:
            # ValueError/TypeError come from eth-account rejecting the built transaction
            raise SubmissionError(f"Failed to submit task {name!r} to {contract}: {exc}") from exc

        logger.debug("Task %s broadcast as %s", name, tx_hash)

        try:
            receipt = self.client.wait_for_receipt(
                tx_hash,
                timeout=self.receipt_timeout,
                poll_interval=self.poll_interval,
            )
        except TimeoutError as exc:
            raise ConfirmationError(str(exc), tx_hash=tx_hash) from exc
        except RpcError as exc:
            raise ConfirmationError(
                f"Failed to fetch receipt for {tx_hash}: {exc}", tx_hash=tx_hash
            ) from exc

        try:
            result = TaskReceipt.from_rpc(name, tx_hash, receipt)
        except (ValueError, TypeError) as exc:
            raise ConfirmationError(
                f"Malformed receipt for {tx_hash}: {exc}", tx_hash=tx_hash
            ) from exc

        if result.status != 1:
            raise ConfirmationError(f"Transaction {tx_hash} reverted", tx_hash=tx_hash)
        return result


def _hex_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    return int(value, 16)
