"""
Constants and configuration for Kubeglance.

This module contains the configuration constants used throughout the Kubeglance
application: server and client defaults, refresh intervals, logging levels
and the wire-level names shared by the backend and the client.

Constants are organized by category:
- Scope: The sentinel that selects every namespace
- Polling intervals: Defaults for the externally layered periodic refresh
- Server defaults: Default host, port and CORS origins
- Client defaults: Backend URL and request timeout
- Logging: Default log levels
- API paths: Endpoint paths served by the backend
"""

# Scope
ALL_NAMESPACES = "all"

# Polling intervals (in seconds)
DEFAULT_WATCH_INTERVAL_SECONDS = 5.0
MIN_WATCH_INTERVAL_SECONDS = 1.0

# Server defaults
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://localhost:3000")

# Client defaults
DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0

# Logging
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_UVICORN_LOG_LEVEL = "info"

# API paths
NAMESPACES_PATH = "/api/namespaces"
PODS_PATH = "/api/pods"
YAML_MEDIA_TYPE = "application/x-yaml"

# Kubernetes naming
MAX_HOST_LENGTH = 253  # DNS name length limit
MAX_NAMESPACE_LENGTH = 63  # DNS-1123 label length limit
