"""URL canonicalization and domain membership."""

from typing import Optional
from urllib.parse import urlsplit

import httpx

from sitegraph.exceptions import MalformedLink


def normalize_url(url: str, base_url: str) -> Optional[str]:
    """Resolve a URL against a base and reduce it to canonical form.

    Relative references are resolved against the base's origin: ``/path``
    becomes ``origin/path`` and a bare ``path`` becomes ``origin/path``.
    Fragment-only references never name a new resource and yield None.

    The canonical form is built by ``httpx.URL``, which removes ``.`` and
    ``..`` path segments, percent-encodes the path and query, lowercases
    scheme and host, and drops default ports.

    Args:
        url: Absolute or relative URL (usually a raw href)
        base_url: URL of the page the reference was found on

    Returns:
        ``scheme://host`` + path + query (no fragment), or None if the
        reference is fragment-only or cannot be parsed
    """
    if not isinstance(url, str):
        return None

    url = url.strip()
    if not url:
        return None

    try:
        if not url.startswith("http"):
            if url.startswith("#"):
                return None
            origin = _origin(base_url)
            if origin is None:
                return None
            if url.startswith("/"):
                url = origin + url
            else:
                url = origin + "/" + url

        parsed = httpx.URL(url)
    except (httpx.InvalidURL, ValueError):
        return None

    if parsed.scheme not in ("http", "https") or not parsed.host:
        return None

    # raw_path carries the query and is "/" for an empty path
    path = parsed.raw_path.decode("ascii")
    return f"{parsed.scheme}://{_host(parsed)}{path}"


def resolve_link(href: str, page_url: str) -> str:
    """Canonical URL of an href found on page_url.

    Raises:
        MalformedLink: If the href is fragment-only or cannot be normalized
    """
    normalized = normalize_url(href, page_url)
    if normalized is None:
        raise MalformedLink(f"Cannot normalize link {href!r} on {page_url}")
    return normalized


def same_domain(url: str, base_url: str) -> bool:
    """Return True if both URLs share exactly the same host."""
    try:
        host = urlsplit(url).hostname
        base_host = urlsplit(base_url).hostname
    except ValueError:
        return False
    return host is not None and host == base_host


def title_from_url(url: str) -> str:
    """Derive a page title from the last non-empty path segment.

    Falls back to the hostname, then to "Page".
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return "Page"

    segments = [segment for segment in parts.path.split("/") if segment]
    if segments:
        return segments[-1]
    return parts.hostname or "Page"


def _origin(url: str) -> Optional[str]:
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    host = f"[{parts.hostname}]" if ":" in parts.hostname else parts.hostname
    if port is not None:
        host = f"{host}:{port}"
    return f"{parts.scheme}://{host}"


def _host(parsed: httpx.URL) -> str:
    # httpx reports default ports as None
    host = parsed.host
    if ":" in host:
        host = f"[{host}]"
    if parsed.port is not None:
        host = f"{host}:{parsed.port}"
    return host
