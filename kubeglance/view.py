"""
Plain-text rendering of the pod overview.

Presentation state (which namespaces are collapsed) is passed in by the
caller; nothing here is stored between calls.
"""

from datetime import datetime
from typing import Collection, List, Optional, Sequence

from .aggregation import count_pods
from .models import NamespaceGroup, PodRecord, RefreshState
from .quantity import CPU, MEMORY, parse_quantity, usage_percentage
from .refresh import NamespaceCatalog
from .status import status_style

_COLUMNS = ('NAME', 'STATUS', 'READY', 'RESTARTS', 'CPU', 'MEMORY', 'AGE')

_STATUS_MARKERS = {
    'green': '+',
    'yellow': '~',
    'blue': '=',
    'red': '!',
    'orange': '-',
    'gray': '?',
}


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def format_resource(request: str, limit: str, kind: str) -> str:
    """Format "request / limit" with the request share of the limit."""
    if not request and not limit:
        return "Not set"
    text = f"{request or '-'} / {limit or '-'}"
    if parse_quantity(limit, kind) > 0:
        text += f" ({usage_percentage(request, limit, kind):.0f}%)"
    return text


def format_status(status: str) -> str:
    style = status_style(status)
    return f"{_STATUS_MARKERS[style.color]} {status or 'Unknown'}"


def pod_row(pod: PodRecord) -> List[str]:
    return [
        pod.name,
        format_status(pod.status),
        pod.ready,
        str(pod.restarts),
        format_resource(pod.cpu_request, pod.cpu_limit, CPU),
        format_resource(pod.mem_request, pod.mem_limit, MEMORY),
        pod.age,
    ]


def render_table(pods: Sequence[PodRecord], indent: str = "  ") -> List[str]:
    rows = [list(_COLUMNS)] + [pod_row(p) for p in pods]
    widths = [max(len(row[i]) for row in rows) for i in range(len(_COLUMNS))]
    return [indent + "  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip() for row in rows]


def render_group_header(group: NamespaceGroup, collapsed: bool) -> str:
    summary = group.summary
    line = f"{'>' if collapsed else 'v'} {group.name} ({_plural(summary.total, 'pod')})"
    if summary.running:
        line += f"  {summary.running} running"
    if summary.failed:
        line += f"  {summary.failed} failed"
    return line


def render_header(state: RefreshState, groups: Sequence[NamespaceGroup]) -> str:
    line = f"{_plural(count_pods(groups), 'pod')} in {_plural(len(groups), 'namespace')}"
    if state.last_success is not None:
        line += f"  Last updated: {format_timestamp(state.last_success)}"
    if state.last_error:
        line += f"  Error: {state.last_error}"
    return line


def render_overview(
    state: RefreshState,
    groups: Sequence[NamespaceGroup],
    collapsed: Collection[str] = (),
) -> str:
    """
    Render the grouped pod overview.

    Args:
        state: Refresh state snapshot (header line)
        groups: Aggregated namespaces
        collapsed: Namespaces whose pod table is hidden

    Returns:
        str: Multi-line text
    """
    lines = [render_header(state, groups)]
    if not groups:
        lines.append("Loading pods..." if state.is_loading else "No pods found")
        return "\n".join(lines)
    for group in groups:
        is_collapsed = group.name in collapsed
        lines.append("")
        lines.append(render_group_header(group, is_collapsed))
        if not is_collapsed:
            lines.extend(render_table(group.pods))
    return "\n".join(lines)


def render_namespaces(catalog: NamespaceCatalog) -> str:
    if catalog.error:
        return f"Failed to load namespaces: {catalog.error}"
    if not catalog.namespaces:
        return "Loading namespaces..." if catalog.is_loading else "No namespaces found"
    rows = [('NAME', 'STATUS')] + [(ns.name, ns.status) for ns in catalog.namespaces]
    width = max(len(name) for name, _ in rows)
    return "\n".join(f"{name.ljust(width)}  {status}".rstrip() for name, status in rows)


def format_timestamp(value: Optional[datetime]) -> str:
    return value.astimezone().strftime('%H:%M:%S') if value else "never"
