"""Shared fixtures for Kubeglance tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

import pytest
from kubernetes import client

from kubeglance.models import PodRecord


@pytest.fixture
def make_record() -> Callable[..., PodRecord]:
    """Factory for pod records with sensible defaults."""

    def _make(name: str, namespace: str = "default", status: str = "Running", **kwargs: Any) -> PodRecord:
        return PodRecord(name=name, namespace=namespace, status=status, **kwargs)

    return _make


@pytest.fixture
def make_k8s_pod() -> Callable[..., client.V1Pod]:
    """Factory for kubernetes V1Pod objects with one or more containers."""

    def _make(
        name: str = "api-1",
        namespace: str = "prod",
        phase: str = "Running",
        containers: list | None = None,
        statuses: list | None = None,
        created: datetime | None = None,
    ) -> client.V1Pod:
        if containers is None:
            containers = [
                client.V1Container(
                    name="app",
                    image="nginx:1.25",
                    resources=client.V1ResourceRequirements(
                        requests={"cpu": "100m", "memory": "128Mi"},
                        limits={"cpu": "500m", "memory": "256Mi"},
                    ),
                )
            ]
        if statuses is None:
            statuses = [
                client.V1ContainerStatus(
                    name="app",
                    image="nginx:1.25",
                    image_id="",
                    ready=True,
                    restart_count=2,
                    state=client.V1ContainerState(running=client.V1ContainerStateRunning()),
                )
            ]
        return client.V1Pod(
            metadata=client.V1ObjectMeta(
                name=name,
                namespace=namespace,
                creation_timestamp=created or datetime(2024, 1, 1, tzinfo=timezone.utc),
                managed_fields=[client.V1ManagedFieldsEntry(manager="kubectl", operation="Apply")],
            ),
            spec=client.V1PodSpec(containers=containers, node_name="node-1"),
            status=client.V1PodStatus(phase=phase, pod_ip="10.0.0.5", container_statuses=statuses),
        )

    return _make
