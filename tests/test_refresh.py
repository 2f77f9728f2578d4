"""Tests for the pod refresh controller and the namespace catalog."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from kubeglance.exceptions import TransportError
from kubeglance.models import NamespaceInfo, PodRecord
from kubeglance.refresh import NamespaceCatalog, PodRefreshController

T1 = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
T2 = datetime(2025, 3, 1, 12, 0, 5, tzinfo=timezone.utc)


@pytest.fixture
def api() -> MagicMock:
    """Mock API client with async list methods."""
    mock = MagicMock()
    mock.list_pods = AsyncMock(return_value=[])
    mock.list_namespaces = AsyncMock(return_value=[])
    return mock


def _clock(*instants: datetime) -> Callable[[], datetime]:
    it = iter(instants)
    return lambda: next(it)


class TestPodRefreshController:
    """Tests for PodRefreshController."""

    def test_initial_state(self, api: MagicMock) -> None:
        controller = PodRefreshController(api)
        state = controller.state
        assert controller.scope == "all"
        assert state.pods == ()
        assert state.is_loading is False
        assert state.last_error is None
        assert state.last_success is None

    @pytest.mark.asyncio
    async def test_success_replaces_pods(self, api: MagicMock, make_record: Callable[..., PodRecord]) -> None:
        pod = make_record("a", "prod")
        api.list_pods.return_value = [pod]
        controller = PodRefreshController(api, "prod", clock=_clock(T1))

        await controller.refresh()

        api.list_pods.assert_awaited_once_with("prod")
        state = controller.state
        assert state.pods == (pod,)
        assert state.last_success == T1
        assert state.last_error is None
        assert state.is_loading is False

    @pytest.mark.asyncio
    async def test_loading_flag_during_fetch(self, api: MagicMock) -> None:
        controller = PodRefreshController(api)
        seen = {}

        def _list_pods(scope: str) -> list:
            seen["loading"] = controller.state.is_loading
            seen["error"] = controller.state.last_error
            return []

        api.list_pods.side_effect = TransportError("Failed to fetch pods: boom")
        await controller.refresh()
        assert controller.state.last_error == "Failed to fetch pods: boom"

        api.list_pods.side_effect = _list_pods
        await controller.refresh()
        assert seen == {"loading": True, "error": None}
        assert controller.state.is_loading is False

    @pytest.mark.asyncio
    async def test_failure_keeps_stale_pods(self, api: MagicMock, make_record: Callable[..., PodRecord]) -> None:
        pods = [make_record("a", "prod"), make_record("b", "prod")]
        api.list_pods.return_value = pods
        controller = PodRefreshController(api, clock=_clock(T1))
        await controller.refresh()

        api.list_pods.side_effect = TransportError("Failed to fetch pods: Internal Server Error", status_code=500)
        await controller.refresh()

        state = controller.state
        assert state.pods == tuple(pods)
        assert state.last_error == "Failed to fetch pods: Internal Server Error"
        assert state.last_success == T1
        assert state.is_loading is False

    @pytest.mark.asyncio
    async def test_recovery_clears_error_and_drops_absent_pods(
        self, api: MagicMock, make_record: Callable[..., PodRecord]
    ) -> None:
        old = [make_record("a", "prod"), make_record("b", "prod")]
        new = [make_record("c", "prod")]
        controller = PodRefreshController(api, clock=_clock(T1, T2))

        api.list_pods.return_value = old
        await controller.refresh()
        api.list_pods.side_effect = TransportError("Failed to fetch pods: timeout")
        await controller.refresh()
        api.list_pods.side_effect = None
        api.list_pods.return_value = new
        await controller.refresh()

        state = controller.state
        assert state.pods == tuple(new)
        assert state.last_error is None
        assert state.last_success == T2

    @pytest.mark.asyncio
    async def test_scope_change_keeps_stale_pods_until_success(
        self, api: MagicMock, make_record: Callable[..., PodRecord]
    ) -> None:
        prod_pod = make_record("a", "prod")
        api.list_pods.return_value = [prod_pod]
        controller = PodRefreshController(api, "prod")
        await controller.refresh()

        api.list_pods.side_effect = TransportError("Failed to fetch pods: boom")
        await controller.refresh("dev")

        assert controller.scope == "dev"
        api.list_pods.assert_awaited_with("dev")
        assert controller.state.pods == (prod_pod,)

    @pytest.mark.asyncio
    async def test_empty_scope_means_all(self, api: MagicMock) -> None:
        controller = PodRefreshController(api, "prod")
        await controller.refresh("")
        assert controller.scope == "all"
        api.list_pods.assert_awaited_once_with("all")

    @pytest.mark.asyncio
    async def test_overlapping_refreshes_last_applied_wins(
        self, api: MagicMock, make_record: Callable[..., PodRecord]
    ) -> None:
        """A slow earlier fetch is not cancelled and overwrites a faster later one."""
        slow_pod = make_record("slow", "a")
        fast_pod = make_record("fast", "b")
        gate = asyncio.Event()

        async def _list_pods(scope: str) -> list:
            if scope == "a":
                await gate.wait()
                return [slow_pod]
            return [fast_pod]

        api.list_pods.side_effect = _list_pods
        controller = PodRefreshController(api)

        slow = asyncio.create_task(controller.refresh("a"))
        await asyncio.sleep(0)
        await controller.refresh("b")
        assert controller.state.pods == (fast_pod,)

        gate.set()
        await slow
        assert controller.state.pods == (slow_pod,)
        assert controller.state.is_loading is False

    @pytest.mark.asyncio
    async def test_state_is_a_snapshot(self, api: MagicMock) -> None:
        controller = PodRefreshController(api)
        snapshot = controller.state
        snapshot.last_error = "tampered"
        assert controller.state.last_error is None

    @pytest.mark.asyncio
    async def test_groups(self, api: MagicMock, make_record: Callable[..., PodRecord]) -> None:
        api.list_pods.return_value = [make_record("b", "y"), make_record("a", "x", "Failed")]
        controller = PodRefreshController(api)
        await controller.refresh()

        groups = controller.groups()

        assert [g.name for g in groups] == ["x", "y"]
        assert groups[0].summary.failed == 1

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, api: MagicMock) -> None:
        api.list_pods.side_effect = RuntimeError("bug")
        controller = PodRefreshController(api)

        with pytest.raises(RuntimeError):
            await controller.refresh()
        assert controller.state.is_loading is False


class TestNamespaceCatalog:
    """Tests for NamespaceCatalog."""

    def test_loading_on_construction(self, api: MagicMock) -> None:
        catalog = NamespaceCatalog(api)
        assert catalog.is_loading is True
        assert catalog.namespaces == []
        assert catalog.error is None

    @pytest.mark.asyncio
    async def test_load_success(self, api: MagicMock) -> None:
        api.list_namespaces.return_value = [NamespaceInfo("default", "Active"), NamespaceInfo("prod", "Active")]
        catalog = NamespaceCatalog(api)

        await catalog.load()

        assert catalog.is_loading is False
        assert catalog.error is None
        assert catalog.names() == ["default", "prod"]

    @pytest.mark.asyncio
    async def test_load_failure(self, api: MagicMock) -> None:
        api.list_namespaces.side_effect = TransportError("Failed to fetch namespaces: Forbidden", status_code=403)
        catalog = NamespaceCatalog(api)

        await catalog.load()

        assert catalog.is_loading is False
        assert catalog.namespaces == []
        assert catalog.error == "Failed to fetch namespaces: Forbidden"

    @pytest.mark.asyncio
    async def test_catalog_failure_does_not_affect_pods(
        self, api: MagicMock, make_record: Callable[..., PodRecord]
    ) -> None:
        api.list_namespaces.side_effect = TransportError("Failed to fetch namespaces: boom")
        api.list_pods.return_value = [make_record("a")]
        catalog = NamespaceCatalog(api)
        controller = PodRefreshController(api)

        await asyncio.gather(catalog.load(), controller.refresh())

        assert catalog.error is not None
        assert controller.state.last_error is None
        assert len(controller.state.pods) == 1
