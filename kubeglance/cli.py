"""
Command-line interface for Kubeglance.

This module provides the command-line interface for the Kubeglance application,
handling argument parsing, input validation, and dispatch to the backend
server or to the text client.

Key Functions:
- build_parser: Create and configure the argument parser
- main: Main entry point for the CLI application

Subcommands:
- serve: Run the backend API against the current Kubernetes context
- pods: Show pods grouped by namespace, once or every N seconds
- namespaces: List the namespaces known to the backend
- describe: Print the YAML descriptor of one pod

Example:
    ```bash
    # Backend
    kubeglance serve --port 8080

    # Client
    kubeglance pods --namespace prod --watch 5
    kubeglance describe prod api-7d9f
    ```
"""

import argparse
import asyncio
import os
import sys
from typing import Optional

from .api_client import ApiClient
from .constants import (
    ALL_NAMESPACES, DEFAULT_API_URL, DEFAULT_CORS_ORIGINS, DEFAULT_HOST, DEFAULT_LOG_LEVEL,
    DEFAULT_PORT, DEFAULT_REQUEST_TIMEOUT_SECONDS, DEFAULT_UVICORN_LOG_LEVEL,
    DEFAULT_WATCH_INTERVAL_SECONDS
)
from .exceptions import ConfigurationError, KubernetesConnectionError, TransportError
from .models import ServerConfig
from .refresh import NamespaceCatalog, PodRefreshController
from .validation import (
    is_all_namespaces, validate_api_url, validate_host, validate_port, validate_scope,
    validate_watch_interval
)
from .view import render_namespaces, render_overview


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got: {os.getenv(name)}")


def build_parser() -> argparse.ArgumentParser:
    """
    Build and configure the command-line argument parser.

    Environment variables are used as defaults where appropriate; flags
    override them.

    Returns:
        argparse.ArgumentParser: Configured argument parser with all options

    Environment Variables:
        KUBEGLANCE_HOST: Default host to bind to (default: localhost)
        KUBEGLANCE_PORT: Default port to bind to (default: 8080)
        KUBEGLANCE_URL: Default backend URL for client commands
        KUBEGLANCE_REFRESH_SEC: Default interval for --watch without a value
    """
    env_host = os.getenv('KUBEGLANCE_HOST', DEFAULT_HOST)
    env_port = os.getenv('KUBEGLANCE_PORT', str(DEFAULT_PORT))
    env_url = os.getenv('KUBEGLANCE_URL', DEFAULT_API_URL)

    p = argparse.ArgumentParser("kubeglance", description="Live Kubernetes pod overview grouped by namespace")
    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the backend API")
    serve.add_argument("--namespace", default=None, help="Only serve this namespace (default: all)")
    serve.add_argument("--kubeconfig", default=None, help="Path to kubeconfig (defaults to kube rules)")
    serve.add_argument("--context", default=None, help="Kubecontext override")
    serve.add_argument("--host", default=env_host, help="Host to bind (env: KUBEGLANCE_HOST)")
    serve.add_argument("--port", default=env_port, help="Port for HTTP server (env: KUBEGLANCE_PORT)")
    serve.add_argument("--cors-origin", action="append", dest="cors_origins", default=None,
                       help="Allowed browser origin, repeatable (default: local dev servers)")
    serve.add_argument("--no-cors", action="store_true", help="Do not add CORS headers")

    def add_client_args(cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument("--url", default=env_url, help="Backend URL (env: KUBEGLANCE_URL)")
        cmd.add_argument("--timeout", type=float, default=DEFAULT_REQUEST_TIMEOUT_SECONDS, help="Request timeout seconds")

    pods = sub.add_parser("pods", help="Show pods grouped by namespace")
    add_client_args(pods)
    pods.add_argument("--namespace", "-n", default=ALL_NAMESPACES, help="Namespace to show, or 'all' (default)")
    pods.add_argument("--watch", "-w", nargs="?", type=float, const=-1.0, default=None, metavar="SECONDS",
                      help="Refresh every SECONDS until interrupted (env: KUBEGLANCE_REFRESH_SEC)")
    pods.add_argument("--collapse", action="append", default=[], metavar="NAMESPACE",
                      help="Hide the pod table of a namespace, repeatable")

    namespaces = sub.add_parser("namespaces", help="List namespaces")
    add_client_args(namespaces)

    describe = sub.add_parser("describe", help="Print the YAML of one pod")
    add_client_args(describe)
    describe.add_argument("namespace", help="Pod namespace")
    describe.add_argument("name", help="Pod name")
    return p


async def show_pods(api: ApiClient, scope: str, interval: Optional[float], collapsed: set) -> int:
    """
    Refresh and print the pod overview.

    The namespace catalog loads alongside the first refresh and is only used
    to warn about a namespace the cluster does not know. With an interval the
    refresh repeats until interrupted.

    Returns:
        int: Exit code, 1 when the last refresh failed and no pods are available
    """
    controller = PodRefreshController(api, scope)
    catalog = NamespaceCatalog(api)
    await asyncio.gather(catalog.load(), controller.refresh())
    if not is_all_namespaces(scope) and not catalog.error and scope not in catalog.names():
        print(f"Warning: namespace {scope} is not in the namespace list", file=sys.stderr)

    while True:
        print(render_overview(controller.state, controller.groups(), collapsed), flush=True)
        if interval is None:
            break
        await asyncio.sleep(interval)
        print()
        await controller.refresh()

    state = controller.state
    return 1 if state.last_error and not state.pods else 0


async def show_namespaces(api: ApiClient) -> int:
    catalog = NamespaceCatalog(api)
    await catalog.load()
    print(render_namespaces(catalog))
    return 1 if catalog.error else 0


async def describe_pod(api: ApiClient, namespace: str, name: str) -> int:
    try:
        print(await api.get_pod_descriptor(namespace, name), end="")
    except TransportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


async def run_client(args: argparse.Namespace) -> int:
    url = validate_api_url(args.url)
    if args.timeout <= 0:
        raise ConfigurationError(f"Timeout must be a positive number, got: {args.timeout}")

    if args.command == 'pods':
        scope = validate_scope(args.namespace)
        interval = args.watch
        if interval is not None:
            if interval < 0:
                interval = _env_float('KUBEGLANCE_REFRESH_SEC', DEFAULT_WATCH_INTERVAL_SECONDS)
            interval = validate_watch_interval(interval)
        async with ApiClient(url, timeout=args.timeout) as api:
            return await show_pods(api, scope, interval, set(args.collapse))

    async with ApiClient(url, timeout=args.timeout) as api:
        if args.command == 'namespaces':
            return await show_namespaces(api)
        return await describe_pod(api, validate_scope(args.namespace), args.name)


def _server_config(args: argparse.Namespace) -> ServerConfig:
    try:
        port = int(args.port)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Port must be an integer between 1 and 65535, got: {args.port}")
    namespace = validate_scope(args.namespace)
    if args.no_cors:
        origins = []
    else:
        origins = list(args.cors_origins or DEFAULT_CORS_ORIGINS)
    return ServerConfig(
        host=validate_host(args.host),
        port=validate_port(port),
        namespace=None if is_all_namespaces(namespace) else namespace,
        cors_origins=origins,
        log_level=os.getenv('KUBEGLANCE_LOG_LEVEL', DEFAULT_LOG_LEVEL),
        uvicorn_log_level=os.getenv('KUBEGLANCE_UVICORN_LEVEL', DEFAULT_UVICORN_LOG_LEVEL),
    )


def main(argv=None) -> None:
    """
    Main entry point for the Kubeglance CLI application.

    Raises:
        SystemExit: On configuration errors (exit code 2), server errors
            (exit code 1) or with the exit code of a client command
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == 'serve':
        try:
            server_config = _server_config(args)
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            sys.exit(2)

        from .server import run_server
        try:
            asyncio.run(run_server(server_config, kubeconfig=args.kubeconfig, context=args.context))
        except KeyboardInterrupt:
            print("\nShutting down...", file=sys.stderr)
        except KubernetesConnectionError as e:
            print(f"Server error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    try:
        code = asyncio.run(run_client(args))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        code = 0
    sys.exit(code)


if __name__ == "__main__":  # pragma: no cover
    main()
