"""
Resource quantity parsing utilities.

This module converts Kubernetes resource quantity strings into integer
magnitudes that can be compared and turned into percentages. CPU quantities
are normalized to millicores, memory quantities to bytes.

Key Functions:
- parse_cpu_value: Parse CPU values from Kubernetes format to millicores
- parse_memory_value: Parse memory values from Kubernetes format to bytes
- parse_quantity: Dispatch on resource kind ("cpu" or "memory")
- usage_percentage: Request as a percentage of limit, capped at 100

Missing resource specs are the normal case for unconstrained workloads, so an
empty or malformed quantity parses to 0 instead of raising.

Example:
    ```python
    parse_quantity("500m", "cpu")      # 500
    parse_quantity("128Mi", "memory")  # 134217728
    usage_percentage("64Mi", "128Mi", "memory")  # 50.0
    ```
"""

from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

CPU = "cpu"
MEMORY = "memory"

# Binary suffixes must be checked before their decimal counterparts.
MEMORY_UNITS: List[Tuple[str, int]] = [
    ('Ki', 1024),
    ('Mi', 1024 ** 2),
    ('Gi', 1024 ** 3),
    ('K', 1000),
    ('M', 1000 ** 2),
    ('G', 1000 ** 3),
]


def _is_plain_int(text: str) -> bool:
    return text.isascii() and text.isdigit()


def parse_cpu_value(value: Optional[str]) -> int:
    """Parse CPU value from Kubernetes format to millicores."""
    if not value or '_' in value:
        return 0
    if value.endswith('m'):
        return int(value[:-1]) if _is_plain_int(value[:-1]) else 0
    try:
        return int(Decimal(value) * 1000)  # cores -> m
    except (InvalidOperation, ValueError, OverflowError):
        return 0


def parse_memory_value(value: Optional[str]) -> int:
    """Parse memory value from Kubernetes format to bytes."""
    if not value:
        return 0
    for suffix, multiplier in MEMORY_UNITS:
        if value.endswith(suffix):
            value, scale = value[:-len(suffix)], multiplier
            break
    else:
        scale = 1
    if not _is_plain_int(value):
        return 0
    return int(value) * scale


def parse_quantity(value: Optional[str], kind: str) -> int:
    """
    Parse a resource quantity into its base unit.

    Args:
        value: Quantity string such as "250m", "2", "512Mi" or "1G"
        kind: Either "cpu" (result in millicores) or "memory" (result in bytes)

    Returns:
        int: Magnitude in the base unit of ``kind``; 0 for empty or malformed input

    Raises:
        ValueError: If ``kind`` is not a known resource kind
    """
    if kind == CPU:
        return parse_cpu_value(value)
    if kind == MEMORY:
        return parse_memory_value(value)
    raise ValueError(f"Unknown resource kind: {kind!r}")


def usage_percentage(request: Optional[str], limit: Optional[str], kind: str) -> float:
    """Calculate request as a percentage of limit, capped at 100."""
    request_value = parse_quantity(request, kind)
    limit_value = parse_quantity(limit, kind)
    if limit_value <= 0:
        return 0.0
    return round(min(request_value / limit_value * 100, 100.0), 1)
