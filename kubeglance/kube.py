"""
Kubernetes client and API interactions for Kubeglance.

This module is the only place where Kubeglance talks to the Kubernetes API.
The official client is synchronous, so every call runs in the default
executor to keep the server's event loop free.

Key Components:
- KubeContext: Container for Kubernetes API clients
- load_kube: Initialize Kubernetes client with config loading
- list_namespaces: List every namespace
- list_pods: List pods of one namespace or of the whole cluster
- read_pod: Retrieve a single pod

The module supports both external kubeconfig files and in-cluster
configuration, with automatic fallback from the former to the latter.

Example:
    ```python
    kube = await load_kube(kubeconfig=None, context=None)
    pods = await list_pods(kube.core, "default")
    ```
"""

from __future__ import annotations
import asyncio
from typing import Any, List, Optional
from kubernetes import client, config
from kubernetes.client import ApiException

from .validation import is_all_namespaces


class KubeContext:
    """
    Container for Kubernetes API clients.

    Attributes:
        core: CoreV1Api client for pod and namespace operations
        api_client: ApiClient used to serialize API objects
    """

    def __init__(self, core: client.CoreV1Api, api_client: Optional[client.ApiClient] = None):
        self.core = core
        self.api_client = api_client or client.ApiClient()


async def load_kube(kubeconfig: Optional[str], context: Optional[str]) -> KubeContext:
    """
    Load and initialize Kubernetes API clients.

    An explicit kubeconfig or context is loaded as given. Otherwise the default
    kubeconfig is tried first, then the in-cluster service account.

    Args:
        kubeconfig: Path to kubeconfig file (optional, uses default if None)
        context: Kubernetes context name (optional, uses current context if None)

    Returns:
        KubeContext: Initialized context with the API clients

    Raises:
        Exception: If Kubernetes configuration cannot be loaded
    """
    def _load():
        if kubeconfig or context:
            config.load_kube_config(config_file=kubeconfig, context=context)
        else:
            try:
                config.load_kube_config()
            except config.ConfigException:
                config.load_incluster_config()
        api_client = client.ApiClient()
        return client.CoreV1Api(api_client), api_client
    loop = asyncio.get_event_loop()
    core, api_client = await loop.run_in_executor(None, _load)
    return KubeContext(core, api_client)


async def list_namespaces(core: client.CoreV1Api) -> List[Any]:
    loop = asyncio.get_event_loop()
    result = await loop.run_in_executor(None, core.list_namespace)
    return list(result.items or [])


async def list_pods(core: client.CoreV1Api, namespace: Optional[str]) -> List[Any]:
    """
    List pods of a namespace, or of every namespace.

    Args:
        core: CoreV1Api client for Kubernetes operations
        namespace: Namespace name; None, "" or "all" lists the whole cluster

    Returns:
        List[V1Pod]: Pods as returned by the API

    Raises:
        ApiException: For any API error
    """
    loop = asyncio.get_event_loop()
    def _list():
        if is_all_namespaces(namespace):
            return core.list_pod_for_all_namespaces()
        return core.list_namespaced_pod(namespace=namespace)
    result = await loop.run_in_executor(None, _list)
    return list(result.items or [])


async def read_pod(core: client.CoreV1Api, namespace: str, name: str) -> Optional[Any]:
    """
    Fetch a specific pod by name and namespace.

    Returns None if the pod is not found (404 error), but raises other API
    exceptions.
    """
    loop = asyncio.get_event_loop()
    def _get():
        try:
            return core.read_namespaced_pod(name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                return None
            raise
    return await loop.run_in_executor(None, _get)
