"""
CLI integration tests using Click's test runner.

Chain access goes through an in-memory httpx transport; no node is needed.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from eth_account import Account

from trappist import __version__
from trappist.chain.client import ChainClient
from trappist.cli import cli
from trappist.names import NAME_PATTERN

from conftest import TX_HASH, FakeNode


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def clean_env(tmp_path: Path):
    """Run with an empty environment from a directory without a .env file."""
    cwd = os.getcwd()
    os.chdir(tmp_path)
    try:
        with patch.dict(os.environ, {}, clear=True):
            yield tmp_path
    finally:
        os.chdir(cwd)


def _client_factory(node: FakeNode):
    class _Factory:
        @staticmethod
        def from_settings(settings):
            return ChainClient.from_settings(settings, transport=node.transport)

    return _Factory


class TestBasics:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_name(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["name", "-n", "5"])
        assert result.exit_code == 0
        names = result.output.split()
        assert len(names) == 5
        assert all(NAME_PATTERN.match(n) for n in names)


class TestWhoami:
    def test_whoami_with_key(self, runner: CliRunner, clean_env: Path, private_key: str) -> None:
        with patch.dict(os.environ, {"PRIVATE_KEY": private_key}):
            result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 0
        assert f"Address: {Account.from_key(private_key).address}" in result.output
        assert private_key[2:] not in result.output

    def test_whoami_from_env_file(self, runner: CliRunner, clean_env: Path, private_key: str) -> None:
        env_file = clean_env / "operator.env"
        env_file.write_text(f"PRIVATE_KEY={private_key}\n", encoding="utf-8")
        result = runner.invoke(cli, ["whoami", "--env-file", str(env_file)])
        assert result.exit_code == 0
        assert "Address:" in result.output

    def test_whoami_without_key(self, runner: CliRunner, clean_env: Path) -> None:
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 2
        assert "No signer configured" in result.output


class TestRun:
    def test_missing_key_is_fatal(self, runner: CliRunner, clean_env: Path) -> None:
        result = runner.invoke(cli, ["run", "--count", "1"])
        assert result.exit_code == 2
        assert "PRIVATE_KEY" in result.output

    def test_failed_tick_does_not_crash(
        self, runner: CliRunner, clean_env: Path, private_key: str
    ) -> None:
        node = FakeNode()
        with patch.dict(os.environ, {"PRIVATE_KEY": private_key}), \
                patch("trappist.commands.run.ChainClient", _client_factory(node)):
            result = runner.invoke(
                cli, ["run", "--count", "1", "--deployment", str(clean_env / "missing.json")]
            )
        assert result.exit_code == 0, result.output
        assert "Stopped after 1 ticks: 0 succeeded, 1 failed" in result.output
        assert node.calls == []

    def test_run_submits_each_tick(
        self, runner: CliRunner, clean_env: Path, private_key: str, deployment_file: Path
    ) -> None:
        node = FakeNode()
        with patch.dict(os.environ, {"PRIVATE_KEY": private_key}), \
                patch("trappist.commands.run.ChainClient", _client_factory(node)):
            result = runner.invoke(
                cli,
                [
                    "run",
                    "--count", "2",
                    "--interval", "0.01",
                    "--deployment", str(deployment_file),
                ],
            )
        assert result.exit_code == 0, result.output
        assert "2 succeeded, 0 failed" in result.output
        assert node.methods().count("eth_sendRawTransaction") == 2


class TestCreateTask:
    def test_create_named_task(
        self, runner: CliRunner, clean_env: Path, private_key: str, deployment_file: Path
    ) -> None:
        node = FakeNode()
        with patch.dict(os.environ, {"PRIVATE_KEY": private_key}), \
                patch("trappist.commands.create.ChainClient", _client_factory(node)):
            result = runner.invoke(
                cli, ["create-task", "QuickFox7", "--deployment", str(deployment_file)]
            )
        assert result.exit_code == 0, result.output
        assert "Task: QuickFox7" in result.output
        assert f"TX: {TX_HASH}" in result.output
        assert "Block: 16" in result.output

    def test_create_rejected(
        self, runner: CliRunner, clean_env: Path, private_key: str, deployment_file: Path
    ) -> None:
        node = FakeNode(reject={"eth_sendRawTransaction"})
        with patch.dict(os.environ, {"PRIVATE_KEY": private_key}), \
                patch("trappist.commands.create.ChainClient", _client_factory(node)):
            result = runner.invoke(cli, ["create-task", "--deployment", str(deployment_file)])
        assert result.exit_code == 3
        assert "FAILED" in result.output

    def test_create_reverted(
        self, runner: CliRunner, clean_env: Path, private_key: str, deployment_file: Path
    ) -> None:
        node = FakeNode(receipt_status="0x0")
        with patch.dict(os.environ, {"PRIVATE_KEY": private_key}), \
                patch("trappist.commands.create.ChainClient", _client_factory(node)):
            result = runner.invoke(cli, ["create-task", "--deployment", str(deployment_file)])
        assert result.exit_code == 4
        assert f"TX: {TX_HASH}" in result.output


class TestMalformedInput:
    def test_create_with_malformed_node_reply(
        self, runner: CliRunner, clean_env: Path, private_key: str, deployment_file: Path
    ) -> None:
        node = FakeNode(results={"eth_getTransactionCount": None})
        with patch.dict(os.environ, {"PRIVATE_KEY": private_key}), \
                patch("trappist.commands.create.ChainClient", _client_factory(node)):
            result = runner.invoke(cli, ["create-task", "--deployment", str(deployment_file)])
        assert result.exit_code == 3, result.output
        assert "FAILED" in result.output
        assert not isinstance(result.exception, TypeError)

    @pytest.mark.parametrize("interval", ["nan", "inf"])
    def test_run_rejects_non_finite_interval(
        self, runner: CliRunner, clean_env: Path, private_key: str, interval: str
    ) -> None:
        with patch.dict(os.environ, {"PRIVATE_KEY": private_key}):
            result = runner.invoke(cli, ["run", "--count", "1", "--interval", interval])
        assert result.exit_code == 2
        assert "TASK_INTERVAL" in result.output
