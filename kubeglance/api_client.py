"""
HTTP client for the Kubeglance backend API.

This module wraps an ``httpx.AsyncClient`` around the three backend endpoints.
Every failure (network fault, non-2xx response, unreadable body) is raised as
a TransportError carrying a human-readable message, which the refresh
controllers record as their last error.

Key Components:
- pods_path: Build the pod listing path for a scope
- descriptor_path: Build the single-pod descriptor path
- ApiClient: Async client for namespaces, pods and pod descriptors

Example:
    ```python
    async with ApiClient("http://localhost:8080") as api:
        namespaces = await api.list_namespaces()
        pods = await api.list_pods("prod")
    ```
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .constants import ALL_NAMESPACES, DEFAULT_REQUEST_TIMEOUT_SECONDS, NAMESPACES_PATH, PODS_PATH
from .exceptions import TransportError
from .models import NamespaceInfo, PodRecord
from .validation import is_all_namespaces

log = logging.getLogger('kubeglance.client')


def pods_path(scope: Optional[str]) -> str:
    """Pod listing path; the namespace parameter is omitted for every namespace."""
    if is_all_namespaces(scope):
        return PODS_PATH
    return f"{PODS_PATH}?namespace={quote(scope, safe='')}"


def descriptor_path(namespace: str, name: str) -> str:
    return f"{PODS_PATH}/{quote(namespace, safe='')}/{quote(name, safe='')}"


def _error_detail(response: httpx.Response) -> str:
    """Extract the error message of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        detail = body.get('detail') or body.get('error')
        if detail:
            return str(detail)
    return response.reason_phrase or f"HTTP {response.status_code}"


class ApiClient:
    """
    Async client for the Kubeglance backend.

    The underlying ``httpx.AsyncClient`` is created on construction unless one
    is passed in (tests pass a client with a mock transport). Use the instance
    as an async context manager, or call ``aclose`` when done.

    Attributes:
        base_url: Backend root URL, e.g. "http://localhost:8080"
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self._http = http or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get(self, path: str, what: str) -> httpx.Response:
        try:
            response = await self._http.get(path)
        except httpx.HTTPError as e:
            log.debug(f"[client] GET {path} failed: {e.__class__.__name__}: {e}")
            raise TransportError(f"Failed to fetch {what}: {e}") from e
        if response.is_error:
            detail = _error_detail(response)
            log.debug(f"[client] GET {path} -> {response.status_code} {detail}")
            raise TransportError(f"Failed to fetch {what}: {detail}", status_code=response.status_code)
        return response

    async def _get_json_list(self, path: str, what: str) -> List[Dict[str, Any]]:
        response = await self._get(path, what)
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(f"Failed to fetch {what}: invalid JSON response") from e
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise TransportError(f"Failed to fetch {what}: expected a JSON array of objects")
        return data

    async def list_namespaces(self) -> List[NamespaceInfo]:
        data = await self._get_json_list(NAMESPACES_PATH, 'namespaces')
        return [NamespaceInfo.from_dict(item) for item in data]

    async def list_pods(self, scope: Optional[str] = ALL_NAMESPACES) -> List[PodRecord]:
        """
        Fetch the pods of a scope.

        Args:
            scope: Namespace name, or "all" / None for every namespace

        Returns:
            List[PodRecord]: Pods in the order the backend returned them

        Raises:
            TransportError: If the request fails or the body is not a pod list
        """
        data = await self._get_json_list(pods_path(scope), 'pods')
        return [PodRecord.from_dict(item) for item in data]

    async def get_pod_descriptor(self, namespace: str, name: str) -> str:
        """Fetch the YAML descriptor of one pod."""
        response = await self._get(descriptor_path(namespace, name), 'pod YAML')
        return response.text
