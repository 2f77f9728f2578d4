"""
Kubeglance - Live Kubernetes Pod Overview.

Kubeglance shows the pods of a cluster grouped by namespace: status, readiness,
restart count, resource requests/limits and age. A small FastAPI backend reads
the cluster and serves plain JSON; the client side fetches that JSON, refreshes
it on demand or periodically, and summarizes it per namespace.

Key Features:
- Pod listing across all namespaces or a single one
- Per-namespace totals with running and failed counts
- CPU and memory quantity normalization (milli-cores and bytes)
- Status classification into a fixed set of categories
- Stale-but-available refresh: a failed refresh keeps the last good data
- YAML descriptor of a single pod

Example:
    Start the backend:
    ```bash
    kubeglance serve
    ```

    Watch every namespace, refreshing every 5 seconds:
    ```bash
    kubeglance pods --watch 5
    ```

    Show one namespace:
    ```bash
    kubeglance pods --namespace prod
    ```
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
