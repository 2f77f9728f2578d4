"""
Input validation and sanitization for Kubeglance.

This module provides validation functions for user inputs and configuration
values: network settings, the backend URL, refresh intervals and namespace
scopes.

Key Functions:
- validate_port: Validates port numbers (1-65535)
- validate_host: Validates host strings
- validate_api_url: Validates the backend base URL
- validate_watch_interval: Validates the periodic refresh interval
- validate_scope: Validates a namespace scope ("all" or a namespace name)
- is_all_namespaces: Whether a scope selects every namespace

All validation functions raise ConfigurationError with a descriptive message
when validation fails.

Example:
    ```python
    try:
        port = validate_port(8080)
        scope = validate_scope("kube-system")
    except ConfigurationError as e:
        print(f"Validation failed: {e}")
    ```
"""

import re
from typing import Optional
from urllib.parse import urlparse

from .constants import ALL_NAMESPACES, MAX_HOST_LENGTH, MAX_NAMESPACE_LENGTH, MIN_WATCH_INTERVAL_SECONDS
from .exceptions import ConfigurationError

_NAMESPACE_RE = re.compile(r'^[a-z0-9]([-a-z0-9]*[a-z0-9])?$')


def is_all_namespaces(scope: Optional[str]) -> bool:
    return not scope or scope == ALL_NAMESPACES


def validate_port(port: int) -> int:
    """
    Validate port number for server binding.

    Args:
        port: Port number to validate (must be integer)

    Returns:
        int: The validated port number (unchanged if valid)

    Raises:
        ConfigurationError: If port is not an integer or outside valid range
    """
    if not isinstance(port, int) or port < 1 or port > 65535:
        raise ConfigurationError(f"Port must be an integer between 1 and 65535, got: {port}")
    return port


def validate_host(host: str) -> str:
    """
    Validate host string for server binding.

    Args:
        host: Host string to validate (e.g., "localhost", "0.0.0.0", "example.com")

    Returns:
        str: The validated and trimmed host string

    Raises:
        ConfigurationError: If host is empty or too long
    """
    if not host or not host.strip():
        raise ConfigurationError("Host cannot be empty")

    host = host.strip()

    if len(host) > MAX_HOST_LENGTH:
        raise ConfigurationError("Host name too long")

    return host


def validate_api_url(url: str) -> str:
    """Validate the backend base URL; only http and https are accepted."""
    if not url or not url.strip():
        raise ConfigurationError("Backend URL cannot be empty")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ConfigurationError(f"Backend URL must be an http(s) URL, got: {url}")
    return url.rstrip('/')


def validate_watch_interval(interval: float) -> float:
    """
    Validate the periodic refresh interval.

    Raises:
        ConfigurationError: If interval is not a number, not positive, or too small
    """
    if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval <= 0:
        raise ConfigurationError(f"Refresh interval must be a positive number, got: {interval}")

    if interval < MIN_WATCH_INTERVAL_SECONDS:
        raise ConfigurationError("Refresh interval should be at least 1 second to avoid overwhelming the API")

    return float(interval)


def validate_scope(scope: Optional[str]) -> str:
    """
    Validate a namespace scope.

    Args:
        scope: "all", None/empty (both meaning every namespace) or a namespace name

    Returns:
        str: "all" or the trimmed namespace name

    Raises:
        ConfigurationError: If the name is not a valid DNS-1123 label
    """
    if scope is None or not scope.strip():
        return ALL_NAMESPACES
    scope = scope.strip()
    if scope == ALL_NAMESPACES:
        return scope
    if len(scope) > MAX_NAMESPACE_LENGTH or not _NAMESPACE_RE.match(scope):
        raise ConfigurationError(f"Invalid namespace name: {scope}")
    return scope
