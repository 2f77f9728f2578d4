"""
FastAPI server for Kubeglance.

This module provides the backend that the Kubeglance client reads from. It
lists namespaces and pods as flat JSON records and serves the YAML descriptor
of a single pod.

Key Components:
- Cluster: Server-side state (Kubernetes clients, optional namespace pin)
- FastAPI routes: /api/namespaces, /api/pods, /api/pods/{namespace}/{name}
- run_server: Main server startup and configuration

Every listing is read from the cluster on request; nothing is cached between
requests.

Example:
    ```python
    # Start server programmatically
    await run_server(ServerConfig(host="0.0.0.0", port=8080), kubeconfig=None, context=None)
    ```
"""

import logging
import os
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from kubernetes.client import ApiException

from .constants import DEFAULT_LOG_LEVEL, YAML_MEDIA_TYPE
from .exceptions import KubernetesConnectionError, PodNotFoundError
from .kube import KubeContext, list_namespaces, list_pods, load_kube, read_pod
from .models import ServerConfig
from .pod_processing import namespace_to_info, pod_to_record, pod_to_yaml
from .validation import is_all_namespaces

# Logging setup (level via KUBEGLANCE_LOG_LEVEL env or default INFO)
logging.basicConfig(
    level=getattr(logging, os.getenv('KUBEGLANCE_LOG_LEVEL', DEFAULT_LOG_LEVEL).upper(), logging.INFO),
    format='[%(asctime)s] %(levelname)s %(message)s'
)
log = logging.getLogger('kubeglance')


# Helper for safe exception logging
def _log_exception(msg: str, exc: Exception, level: int = logging.WARNING):
    """Log an exception with proper formatting."""
    log.log(level, f"{msg}: {exc.__class__.__name__}: {exc}")


class Cluster:
    """
    Server-side state.

    Attributes:
        kube: Kubernetes API clients, set by run_server
        namespace: When set, only this namespace is served
    """

    def __init__(self):
        self.kube: Optional[KubeContext] = None
        self.namespace: Optional[str] = None

    def require_kube(self) -> KubeContext:
        if self.kube is None:
            raise HTTPException(status_code=503, detail="Kubernetes client not initialized")
        return self.kube

    def resolve_scope(self, namespace: Optional[str]) -> Optional[str]:
        """Map a requested namespace onto the served one; None lists every namespace."""
        if self.namespace is None:
            return None if is_all_namespaces(namespace) else namespace
        if is_all_namespaces(namespace) or namespace == self.namespace:
            return self.namespace
        raise HTTPException(status_code=403, detail=f"Namespace {namespace} is not served")


def _api_error(action: str, exc: Exception) -> HTTPException:
    """Translate a Kubernetes client failure into an HTTP error."""
    _log_exception(f"[api] {action} failed", exc)
    if isinstance(exc, ApiException) and exc.status and exc.status >= 400:
        return HTTPException(status_code=exc.status, detail=exc.reason or str(exc))
    return HTTPException(status_code=500, detail=str(exc) or exc.__class__.__name__)


cluster = Cluster()
app = FastAPI(title="kubeglance")


@app.exception_handler(PodNotFoundError)
async def pod_not_found_handler(request: Request, exc: PodNotFoundError):
    return JSONResponse(status_code=404, content={'detail': str(exc)})


@app.get("/api/namespaces")
async def get_namespaces() -> List[Dict[str, str]]:
    kube = cluster.require_kube()
    try:
        items = await list_namespaces(kube.core)
    except Exception as e:
        raise _api_error("list namespaces", e)
    result = [namespace_to_info(ns).to_dict() for ns in items]
    if cluster.namespace is not None:
        result = [ns for ns in result if ns['name'] == cluster.namespace]
    log.debug(f"[namespaces] served {len(result)}")
    return result


@app.get("/api/pods")
async def get_pods(namespace: Optional[str] = None) -> List[Dict[str, Any]]:
    kube = cluster.require_kube()
    scope = cluster.resolve_scope(namespace)
    try:
        items = await list_pods(kube.core, scope)
    except Exception as e:
        raise _api_error(f"list pods namespace={scope or 'all'}", e)
    log.debug(f"[pods] served {len(items)} namespace={scope or 'all'}")
    return [pod_to_record(p).to_dict() for p in items]


@app.get("/api/pods/{namespace}/{name}")
async def get_pod_yaml(namespace: str, name: str):
    kube = cluster.require_kube()
    namespace = cluster.resolve_scope(namespace) or namespace
    try:
        pod = await read_pod(kube.core, namespace, name)
    except Exception as e:
        raise _api_error(f"read pod {namespace}/{name}", e)
    if pod is None:
        raise PodNotFoundError(f"Pod {namespace}/{name} not found")
    return Response(content=pod_to_yaml(pod, kube.api_client), media_type=YAML_MEDIA_TYPE)


async def run_server(server_config: ServerConfig, kubeconfig: Optional[str], context: Optional[str]) -> None:
    """Run the Kubeglance server with proper error handling."""
    try:
        kube = await load_kube(kubeconfig, context)
    except Exception as e:
        _log_exception("[server] Failed to load Kubernetes configuration", e)
        raise KubernetesConnectionError(f"Failed to connect to Kubernetes: {e}")

    log.setLevel(getattr(logging, server_config.log_level.upper(), logging.INFO))
    cluster.kube = kube
    cluster.namespace = server_config.namespace
    log.info(f"[server] serving namespace={server_config.namespace or 'all'}")

    if server_config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(server_config.cors_origins),
            allow_methods=["GET", "OPTIONS"],
            allow_headers=["Origin", "Content-Type"],
            allow_credentials=True,
        )
        log.info(f"[server] CORS origins={','.join(server_config.cors_origins)}")

    import uvicorn
    config = uvicorn.Config(app, host=server_config.host, port=server_config.port, log_level=server_config.uvicorn_log_level)
    server = uvicorn.Server(config)
    await server.serve()
