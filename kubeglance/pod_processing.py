"""
Pod data processing and transformation utilities.

This module turns Kubernetes API objects into the records served by the
backend: flat pod records for listings, namespace records for the namespace
filter, and a YAML descriptor for the single-pod view.

Key Functions:
- format_age: Compact age text ("3d", "5h", "12m", "40s")
- pod_status: Status shown for a pod (phase or container reason)
- ready_ratio: Ready containers over declared containers
- extract_pod_resources: CPU/memory requests and limits of a pod
- pod_to_record: Convert a Kubernetes pod object to a PodRecord
- namespace_to_info: Convert a Kubernetes namespace object to a NamespaceInfo
- pod_to_yaml: Serialize a pod to YAML without managed fields

Example:
    ```python
    record = pod_to_record(k8s_pod_object)
    print(f"{record.name} is {record.status} ({record.ready})")
    ```
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import yaml

from .models import NamespaceInfo, PodRecord


def format_age(created: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Format time since creation using its largest whole unit."""
    if created is None:
        return ""
    now = now or datetime.now(timezone.utc)
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    seconds = max(int((now - created).total_seconds()), 0)
    days, rem = divmod(seconds, 86400)
    if days:
        return f"{days}d"
    hours, rem = divmod(rem, 3600)
    if hours:
        return f"{hours}h"
    minutes, seconds = divmod(rem, 60)
    if minutes:
        return f"{minutes}m"
    return f"{seconds}s"


def pod_status(p: Any) -> str:
    """
    Get the status shown for a pod.

    The pod phase, unless a container is waiting or terminated with a reason
    (CrashLoopBackOff, ContainerCreating, Completed...), in which case the
    first such reason wins.
    """
    status = p.status.phase or ""
    for cstat in p.status.container_statuses or []:
        state = cstat.state
        if state is None:
            continue
        if state.waiting and state.waiting.reason:
            return state.waiting.reason
        if state.terminated and state.terminated.reason:
            return state.terminated.reason
    return status


def ready_ratio(p: Any) -> str:
    ready = sum(1 for c in p.status.container_statuses or [] if c.ready)
    total = len(getattr(p.spec, 'containers', None) or [])
    return f"{ready}/{total}"


def extract_pod_resources(pod_spec: Any) -> Dict[str, str]:
    """
    Extract CPU and memory requests and limits from a pod spec.

    Each value is taken from the last container that sets it; unset values
    are empty strings.
    """
    res = {'cpu_request': '', 'cpu_limit': '', 'mem_request': '', 'mem_limit': ''}
    for container in getattr(pod_spec, 'containers', None) or []:
        resources = getattr(container, 'resources', None)
        if not resources:
            continue
        rq = resources.requests or {}
        lm = resources.limits or {}
        if rq.get('cpu'):
            res['cpu_request'] = str(rq['cpu'])
        if lm.get('cpu'):
            res['cpu_limit'] = str(lm['cpu'])
        if rq.get('memory'):
            res['mem_request'] = str(rq['memory'])
        if lm.get('memory'):
            res['mem_limit'] = str(lm['memory'])
    return res


def pod_to_record(p: Any, now: Optional[datetime] = None) -> PodRecord:
    """Convert Kubernetes pod object to a pod record."""
    restarts = sum(c.restart_count or 0 for c in p.status.container_statuses or [])
    return PodRecord(
        name=p.metadata.name,
        namespace=p.metadata.namespace,
        status=pod_status(p),
        ready=ready_ratio(p),
        restarts=restarts,
        age=format_age(p.metadata.creation_timestamp, now),
        node_name=getattr(p.spec, 'node_name', None) or '',
        pod_ip=p.status.pod_ip or '',
        **extract_pod_resources(p.spec),
    )


def namespace_to_info(ns: Any) -> NamespaceInfo:
    phase = ns.status.phase if ns.status else None
    return NamespaceInfo(name=ns.metadata.name, status=phase or '')


def pod_to_yaml(p: Any, api_client: Any) -> str:
    """
    Serialize a pod to YAML.

    Managed fields are dropped for a cleaner document. ``api_client`` is a
    kubernetes ApiClient, used to convert the model to its camelCase wire form.
    """
    data = api_client.sanitize_for_serialization(p)
    data.get('metadata', {}).pop('managedFields', None)
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
