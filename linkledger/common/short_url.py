"""Helpers for turning a code into a public short URL."""

from typing import Mapping, Optional


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Pick the scheme and host clients used to reach us.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host (set by a reverse proxy)
    2. Request scheme + Host header
    3. Configured BASE_URL

    Returns:
        Base URL without trailing slash (e.g. https://example.com)
    """
    proto = _header(headers, "x-forwarded-proto")
    host = _header(headers, "x-forwarded-host")
    if proto and host:
        return f"{proto}://{host}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def forwarded_path_prefix(headers: Mapping[str, str]) -> str:
    """Return X-Forwarded-Prefix normalized to '/prefix', or '' if absent."""
    value = _header(headers, "x-forwarded-prefix")
    if not value:
        return ""
    prefix = value.strip().strip("/")
    return "/" + prefix if prefix else ""


def build_short_url(code: str, base_url: str, path_prefix: str = "") -> str:
    """Join base URL, optional path prefix and code.

    >>> build_short_url("abc123", "https://example.com/", "/s")
    'https://example.com/s/abc123'
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{code}"
    return f"{base}/{code}"
