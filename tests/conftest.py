"""Shared fixtures: keys, deployment files and an in-memory JSON-RPC node."""

from __future__ import annotations

import json
import logging
import os
import secrets
from pathlib import Path
from typing import Any, Iterable, Optional
from unittest.mock import patch

import httpx
import pytest
from eth_account import Account

from trappist.chain.client import ChainClient
from trappist.chain.rpc import RpcClient
from trappist.config import Settings

SERVICE_MANAGER = "0x5fbdb2315678afecb367f032d93f642f64180aa3"
TX_HASH = "0x" + "ab" * 32


class FakeNode:
    """Answers the handful of eth_* methods the submitter uses."""

    def __init__(
        self,
        chain_id: int = 31337,
        reject: Iterable[str] = (),
        receipt_status: str = "0x1",
        pending_polls: int = 0,
        tx_hash: Optional[str] = TX_HASH,
        http_status: int = 200,
        results: Optional[dict[str, Any]] = None,
    ) -> None:
        self.chain_id = chain_id
        self.reject = set(reject)
        self.receipt_status = receipt_status
        self.pending_polls = pending_polls
        self.tx_hash = tx_hash
        self.http_status = http_status
        self.results = dict(results or {})
        self.calls: list[tuple[str, list]] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def params(self, method: str) -> list[list]:
        return [params for m, params in self.calls if m == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method, params = body["method"], body["params"]
        self.calls.append((method, params))

        if self.http_status != 200:
            return httpx.Response(self.http_status, text="unavailable")
        if method in self.reject:
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": body["id"],
                    "error": {"code": -32000, "message": f"{method} rejected"},
                },
            )
        return httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "result": self._result(method)}
        )

    def _result(self, method: str) -> Any:
        if method in self.results:
            return self.results[method]
        if method == "eth_chainId":
            return hex(self.chain_id)
        if method == "eth_getTransactionCount":
            return "0x3"
        if method == "eth_gasPrice":
            return hex(1_000_000_000)
        if method == "eth_estimateGas":
            return hex(100_000)
        if method == "eth_sendRawTransaction":
            return self.tx_hash
        if method == "eth_getTransactionReceipt":
            if self.pending_polls > 0:
                self.pending_polls -= 1
                return None
            return {
                "transactionHash": self.tx_hash,
                "blockNumber": "0x10",
                "gasUsed": "0x1a2b",
                "status": self.receipt_status,
            }
        raise AssertionError(f"unexpected RPC method {method}")


def write_deployment(path: Path, address: str = SERVICE_MANAGER) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(
            {
                "lastUpdate": {"timestamp": "1718000000", "block_number": "12"},
                "addresses": {
                    "trappistServiceManager": address,
                    "stakeRegistry": "0xe7f1725e7734ce288f8367e1bb143e90bb3f0512",
                },
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def private_key() -> str:
    return "0x" + secrets.token_hex(32)


@pytest.fixture()
def environ(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Empty process environment, run from a directory without a .env file."""
    monkeypatch.chdir(tmp_path)
    with patch.dict(os.environ, {}, clear=True):
        yield os.environ


@pytest.fixture()
def settings(environ, private_key: str) -> Settings:
    return Settings.from_env(private_key=private_key, poll_interval=0)


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def deployment_file(tmp_path: Path) -> Path:
    return write_deployment(tmp_path / "deployments" / "trappist" / "31337.json")


@pytest.fixture()
def client(private_key: str, node: FakeNode):
    rpc = RpcClient("http://anvil.test:8545", transport=node.transport)
    with ChainClient(Account.from_key(private_key), rpc) as chain_client:
        yield chain_client


@pytest.fixture(autouse=True)
def _detach_log_handler():
    """Drop the CLI's stderr handler so it never outlives CliRunner's streams."""
    yield
    from trappist import log

    if log._handler is not None:
        logging.getLogger("trappist").removeHandler(log._handler)
        log._handler = None
