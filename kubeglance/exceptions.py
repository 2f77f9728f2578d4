"""
Custom exceptions for Kubeglance.

This module defines the exception classes used throughout Kubeglance. Only
configuration and connection problems are fatal; everything that goes wrong
while talking to the backend degrades into a recorded error message on the
controller that made the request.

Exception Hierarchy:
- KubeglanceError: Base exception for all Kubeglance-specific errors
  - KubernetesConnectionError: Raised when unable to connect to Kubernetes cluster
  - TransportError: Raised when the backend API cannot be reached or answers non-2xx
  - PodNotFoundError: Raised when a requested pod is not found
  - ConfigurationError: Raised when there's a configuration issue

Example:
    ```python
    try:
        pods = await client.list_pods("default")
    except TransportError as e:
        print(f"Refresh failed: {e}")
    ```
"""

from typing import Optional


class KubeglanceError(Exception):
    """Base exception for Kubeglance errors."""
    pass


class KubernetesConnectionError(KubeglanceError):
    """Raised when unable to connect to Kubernetes cluster."""
    pass


class TransportError(KubeglanceError):
    """
    Raised when a backend request fails.

    Covers network faults, non-2xx responses and response bodies that are not
    the expected JSON. ``status_code`` is None when no response was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PodNotFoundError(KubeglanceError):
    """Raised when a requested pod is not found."""
    pass


class ConfigurationError(KubeglanceError):
    """Raised when there's a configuration issue."""
    pass
