"""
Data models for Kubeglance.

This module defines the data structures shared by the backend, the API client
and the refresh controllers.

Key Models:
- PodRecord: One pod's observed state as served by /api/pods
- NamespaceInfo: A namespace and its phase as served by /api/namespaces
- NamespaceSummary: Per-namespace pod counts
- NamespaceGroup: A namespace with its summary and member pods
- RefreshState: Working set and lifecycle flags of a pod refresh controller
- ServerConfig: Server configuration parameters

Pod records are immutable snapshots; a refresh replaces the whole set instead
of mutating records in place. The wire format uses camelCase keys, the Python
attributes use snake_case.

Example:
    ```python
    pod = PodRecord.from_dict({"name": "api-1", "namespace": "prod", "status": "Running"})
    pod.key  # ("prod", "api-1")
    ```
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

# (attribute, wire key) pairs for the string fields of a pod record
_POD_TEXT_FIELDS = (
    ('name', 'name'),
    ('namespace', 'namespace'),
    ('status', 'status'),
    ('ready', 'ready'),
    ('age', 'age'),
    ('cpu_request', 'cpuRequest'),
    ('cpu_limit', 'cpuLimit'),
    ('mem_request', 'memRequest'),
    ('mem_limit', 'memLimit'),
    ('node_name', 'nodeName'),
    ('pod_ip', 'podIP'),
)


@dataclass(frozen=True)
class PodRecord:
    """
    Observed state of a single pod.

    Attributes:
        name: Pod name
        namespace: Kubernetes namespace
        status: Raw status (pod phase or container waiting/terminated reason)
        ready: Ready containers over total containers, e.g. "1/2"
        restarts: Total restarts over all containers
        age: Compact age text such as "3d" or "45s"
        cpu_request: CPU request quantity, empty when unset
        cpu_limit: CPU limit quantity, empty when unset
        mem_request: Memory request quantity, empty when unset
        mem_limit: Memory limit quantity, empty when unset
        node_name: Node the pod is scheduled on
        pod_ip: Pod IP address

    Example:
        ```python
        pod = PodRecord(
            name="api-server-123",
            namespace="default",
            status="Running",
            ready="1/1",
            restarts=0,
            age="2h",
            cpu_request="100m",
            mem_limit="256Mi",
        )
        ```
    """
    name: str
    namespace: str
    status: str = ""
    ready: str = ""
    restarts: int = 0
    age: str = ""
    cpu_request: str = ""
    cpu_limit: str = ""
    mem_request: str = ""
    mem_limit: str = ""
    node_name: str = ""
    pod_ip: str = ""

    @property
    def key(self) -> Tuple[str, str]:
        return (self.namespace, self.name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PodRecord":
        """Build a record from its wire form; missing text fields become ''."""
        values = {attr: str(data.get(wire) or '') for attr, wire in _POD_TEXT_FIELDS}
        try:
            restarts = int(data.get('restarts') or 0)
        except (TypeError, ValueError):
            restarts = 0
        values['restarts'] = max(restarts, 0)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {wire: getattr(self, attr) for attr, wire in _POD_TEXT_FIELDS}
        data['restarts'] = self.restarts
        return data


@dataclass(frozen=True)
class NamespaceInfo:
    """A namespace and its phase (Active, Terminating)."""
    name: str
    status: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NamespaceInfo":
        return cls(name=str(data.get('name') or ''), status=str(data.get('status') or ''))

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'status': self.status}


@dataclass(frozen=True)
class NamespaceSummary:
    """
    Pod counts for one namespace.

    Derived from the pod records on every aggregation call and never stored
    on its own.

    Attributes:
        name: Namespace name
        total: Number of pods, whatever their status
        running: Pods classified as running
        failed: Pods classified as failed
    """
    name: str
    total: int
    running: int
    failed: int


@dataclass(frozen=True)
class NamespaceGroup:
    """A namespace, its summary and its pods ordered by name."""
    name: str
    summary: NamespaceSummary
    pods: Tuple[PodRecord, ...]


@dataclass
class RefreshState:
    """
    Working set of a pod refresh controller.

    Attributes:
        pods: Pods from the last successful refresh
        is_loading: True while a refresh is in flight
        last_error: Message of the last failed refresh, cleared when a refresh starts
        last_success: Completion time of the last successful refresh
    """
    pods: Tuple[PodRecord, ...] = ()
    is_loading: bool = False
    last_error: Optional[str] = None
    last_success: Optional[datetime] = None


@dataclass
class ServerConfig:
    """
    Server configuration parameters.

    Attributes:
        host: Server bind host
        port: Server port
        namespace: Restrict listings to this namespace (None serves every namespace)
        cors_origins: Origins allowed to call the API from a browser
        log_level: Application log level
        uvicorn_log_level: Uvicorn server log level

    Example:
        ```python
        config = ServerConfig(host="0.0.0.0", port=8080)
        ```
    """
    host: str
    port: int
    namespace: Optional[str] = None
    cors_origins: List[str] = field(default_factory=list)
    log_level: str = "INFO"
    uvicorn_log_level: str = "info"
