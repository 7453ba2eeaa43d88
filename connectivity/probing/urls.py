"""Derive liveness endpoints from an API base URL."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

API_SEGMENT = "api"


def derive_endpoint_url(api_url: str, segment: str) -> str:
    """Swap a trailing ``/api`` path segment for ``segment``.

    ``http://10.0.0.5:5001/api`` -> ``http://10.0.0.5:5001/ping``. A base URL
    without a trailing ``api`` segment gets ``segment`` appended instead.
    Query strings and fragments are dropped.
    """
    parts = urlsplit(api_url)
    path = parts.path.rstrip("/")
    head, _, last = path.rpartition("/")
    if last == API_SEGMENT:
        path = f"{head}/{segment}"
    else:
        path = f"{path}/{segment}"
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def derive_ping_url(api_url: str) -> str:
    return derive_endpoint_url(api_url, "ping")


def derive_health_url(api_url: str) -> str:
    return derive_endpoint_url(api_url, "health")
