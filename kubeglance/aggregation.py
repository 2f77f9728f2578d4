"""
Namespace aggregation of pod records.

Groups a flat list of pod records by namespace and counts running and failed
pods per group. Aggregation works off the observed records only, so a
namespace appears as soon as one of its pods does, whether or not the
namespace catalog has loaded it.

Example:
    ```python
    for group in aggregate_by_namespace(pods):
        print(group.name, group.summary.total, [p.name for p in group.pods])
    ```
"""

from typing import Dict, Iterable, List, Sequence

from .models import NamespaceGroup, NamespaceSummary, PodRecord
from .status import is_failed, is_running


def summarize_namespace(name: str, pods: Sequence[PodRecord]) -> NamespaceSummary:
    """Count total, running and failed pods of one namespace."""
    return NamespaceSummary(
        name=name,
        total=len(pods),
        running=sum(1 for p in pods if is_running(p.status)),
        failed=sum(1 for p in pods if is_failed(p.status)),
    )


def aggregate_by_namespace(pods: Iterable[PodRecord]) -> List[NamespaceGroup]:
    """
    Group pods by namespace.

    Namespaces are matched by exact string equality. Groups are ordered by
    namespace name and pods within a group by pod name, so the result does
    not depend on input order.

    Args:
        pods: Pod records in any order

    Returns:
        List[NamespaceGroup]: One group per observed namespace
    """
    grouped: Dict[str, List[PodRecord]] = {}
    for pod in pods:
        grouped.setdefault(pod.namespace, []).append(pod)

    groups = []
    for name in sorted(grouped):
        members = tuple(sorted(grouped[name], key=lambda p: p.name))
        groups.append(NamespaceGroup(name=name, summary=summarize_namespace(name, members), pods=members))
    return groups


def count_pods(groups: Iterable[NamespaceGroup]) -> int:
    return sum(g.summary.total for g in groups)
