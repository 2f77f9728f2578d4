"""Tests for the command-line interface."""

from __future__ import annotations

from typing import Callable
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from kubeglance import cli
from kubeglance.exceptions import ConfigurationError, TransportError
from kubeglance.models import NamespaceInfo, PodRecord


class _StopWatch(Exception):
    """Ends a watch loop in tests."""


@pytest.fixture
def api() -> MagicMock:
    mock = MagicMock()
    mock.list_namespaces = AsyncMock(return_value=[NamespaceInfo("prod", "Active")])
    mock.list_pods = AsyncMock(return_value=[])
    mock.get_pod_descriptor = AsyncMock(return_value="kind: Pod\n")
    return mock


class TestBuildParser:
    """Tests for argument parsing."""

    def test_pods_defaults(self) -> None:
        args = cli.build_parser().parse_args(["pods"])
        assert args.namespace == "all"
        assert args.watch is None
        assert args.collapse == []

    def test_watch_without_value(self) -> None:
        args = cli.build_parser().parse_args(["pods", "--watch"])
        assert args.watch == -1.0

    def test_env_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KUBEGLANCE_URL", "http://glance:9000")
        monkeypatch.setenv("KUBEGLANCE_PORT", "9001")
        parser = cli.build_parser()
        assert parser.parse_args(["namespaces"]).url == "http://glance:9000"
        assert parser.parse_args(["serve"]).port == "9001"

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


class TestServerConfig:
    """Tests for serve option validation."""

    def test_defaults(self) -> None:
        config = cli._server_config(cli.build_parser().parse_args(["serve", "--port", "9090"]))
        assert config.port == 9090
        assert config.namespace is None
        assert config.cors_origins == ["http://localhost:5173", "http://localhost:3000"]

    def test_namespace_and_origins(self) -> None:
        args = cli.build_parser().parse_args(
            ["serve", "--namespace", "prod", "--cors-origin", "https://ui.example.com"])
        config = cli._server_config(args)
        assert config.namespace == "prod"
        assert config.cors_origins == ["https://ui.example.com"]

    def test_no_cors(self) -> None:
        config = cli._server_config(cli.build_parser().parse_args(["serve", "--no-cors"]))
        assert config.cors_origins == []

    def test_bad_port(self) -> None:
        with pytest.raises(ConfigurationError):
            cli._server_config(cli.build_parser().parse_args(["serve", "--port", "http"]))

    def test_main_exits_2_on_bad_config(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["serve", "--port", "70000"])
        assert exc_info.value.code == 2


class TestShowPods:
    """Tests for the pods command."""

    @pytest.mark.asyncio
    async def test_prints_overview(self, api: MagicMock, capsys: pytest.CaptureFixture,
                                   make_record: Callable[..., PodRecord]) -> None:
        api.list_pods.return_value = [
            make_record("web", "prod", cpu_request="100m", cpu_limit="200m"),
            make_record("job", "prod", "Completed"),
        ]

        code = await cli.show_pods(api, "prod", None, set())

        out = capsys.readouterr()
        assert code == 0
        assert out.out.splitlines()[0].startswith("2 pods in 1 namespace")
        assert "v prod (2 pods)  1 running" in out.out
        assert "100m / 200m (50%)" in out.out
        assert out.err == ""

    @pytest.mark.asyncio
    async def test_unknown_namespace_warns(self, api: MagicMock, capsys: pytest.CaptureFixture) -> None:
        await cli.show_pods(api, "staging", None, set())
        assert "namespace staging is not in the namespace list" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_failure_without_data(self, api: MagicMock, capsys: pytest.CaptureFixture) -> None:
        api.list_pods.side_effect = TransportError("Failed to fetch pods: connection refused")

        code = await cli.show_pods(api, "all", None, set())

        assert code == 1
        out = capsys.readouterr().out
        assert "Error: Failed to fetch pods: connection refused" in out
        assert "No pods found" in out

    @pytest.mark.asyncio
    async def test_watch_repeats_refresh(self, api: MagicMock, make_record: Callable[..., PodRecord]) -> None:
        api.list_pods.side_effect = [[make_record("a", "prod")], TransportError("Failed to fetch pods: boom")]
        sleep = AsyncMock(side_effect=[None, _StopWatch()])

        with patch("kubeglance.cli.asyncio.sleep", sleep):
            with pytest.raises(_StopWatch):
                await cli.show_pods(api, "all", 2.0, set())

        assert api.list_pods.await_count == 2
        sleep.assert_awaited_with(2.0)


class TestOtherCommands:
    """Tests for namespaces and describe."""

    @pytest.mark.asyncio
    async def test_namespaces(self, api: MagicMock, capsys: pytest.CaptureFixture) -> None:
        assert await cli.show_namespaces(api) == 0
        assert "prod  Active" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_namespaces_failure(self, api: MagicMock) -> None:
        api.list_namespaces.side_effect = TransportError("Failed to fetch namespaces: boom")
        assert await cli.show_namespaces(api) == 1

    @pytest.mark.asyncio
    async def test_describe(self, api: MagicMock, capsys: pytest.CaptureFixture) -> None:
        assert await cli.describe_pod(api, "prod", "web") == 0
        assert capsys.readouterr().out == "kind: Pod\n"
        api.get_pod_descriptor.assert_awaited_once_with("prod", "web")

    @pytest.mark.asyncio
    async def test_describe_failure(self, api: MagicMock, capsys: pytest.CaptureFixture) -> None:
        api.get_pod_descriptor.side_effect = TransportError("Failed to fetch pod YAML: Pod prod/x not found")
        assert await cli.describe_pod(api, "prod", "x") == 1
        assert "not found" in capsys.readouterr().err
