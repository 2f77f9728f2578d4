"""
Pod status classification.

Raw pod status strings come from the pod phase or from a container's waiting or
terminated reason, so there are many of them. This module folds them into a
fixed set of categories, each with a stable display rank and style.

Key Functions:
- classify_status: Map a raw status string to a PodStatus
- is_running / is_failed: Predicates used for namespace counts
- status_style: Display style for a raw status string

Example:
    ```python
    classify_status("CrashLoopBackOff")  # PodStatus.FAILED
    classify_status("")                  # PodStatus.UNKNOWN
    ```
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class PodStatus(str, Enum):
    RUNNING = "Running"
    PENDING = "Pending"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    TERMINATING = "Terminating"
    UNKNOWN = "Unknown"


_STATUS_MAP: Dict[str, PodStatus] = {
    'running': PodStatus.RUNNING,
    'pending': PodStatus.PENDING,
    'containercreating': PodStatus.PENDING,
    'succeeded': PodStatus.SUCCEEDED,
    'completed': PodStatus.SUCCEEDED,
    'failed': PodStatus.FAILED,
    'error': PodStatus.FAILED,
    'crashloopbackoff': PodStatus.FAILED,
    'imagepullbackoff': PodStatus.FAILED,
    'errimagepull': PodStatus.FAILED,
    'terminating': PodStatus.TERMINATING,
}


@dataclass(frozen=True)
class StatusStyle:
    """
    Display style of a status category.

    Attributes:
        rank: Sort priority, lower needs attention first
        color: Badge color name
        pulse: Whether the badge indicator animates (transitional states)
    """
    rank: int
    color: str
    pulse: bool


STATUS_STYLES: Dict[PodStatus, StatusStyle] = {
    PodStatus.FAILED: StatusStyle(rank=0, color='red', pulse=False),
    PodStatus.TERMINATING: StatusStyle(rank=1, color='orange', pulse=True),
    PodStatus.PENDING: StatusStyle(rank=2, color='yellow', pulse=True),
    PodStatus.RUNNING: StatusStyle(rank=3, color='green', pulse=True),
    PodStatus.SUCCEEDED: StatusStyle(rank=4, color='blue', pulse=False),
    PodStatus.UNKNOWN: StatusStyle(rank=5, color='gray', pulse=False),
}


def classify_status(status: Optional[str]) -> PodStatus:
    """Classify a raw status string, case-insensitively."""
    if not status:
        return PodStatus.UNKNOWN
    return _STATUS_MAP.get(status.lower(), PodStatus.UNKNOWN)


def is_running(status: Optional[str]) -> bool:
    return classify_status(status) is PodStatus.RUNNING


def is_failed(status: Optional[str]) -> bool:
    return classify_status(status) is PodStatus.FAILED


def status_style(status: Optional[str]) -> StatusStyle:
    """Get the display style for a raw status string."""
    return STATUS_STYLES[classify_status(status)]
