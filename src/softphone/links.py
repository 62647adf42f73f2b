"""URL conventions of the dialer page."""

from __future__ import annotations

from urllib.parse import parse_qs, urljoin, urlsplit

LOCAL_TOKEN_ENDPOINT = "http://localhost:3001/token"
DEPLOYED_TOKEN_ENDPOINT = "/api/token"


def page_origin(url: str) -> str | None:
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}"


def number_from_url(url: str) -> str | None:
    """Destination from a deep link such as ``/?number=%2B14155551212``."""

    values = parse_qs(urlsplit(url).query).get("number") or []
    number = values[0].strip() if values else ""
    return number or None


def resolve_token_endpoint(page_origin: str | None, configured: str | None = None) -> str:
    # A configured endpoint pointing at the local dev server is ignored so a
    # deployed page never calls back into localhost.
    if configured and "localhost:3001" not in configured:
        return configured
    if page_origin and "localhost" in page_origin:
        return LOCAL_TOKEN_ENDPOINT
    return DEPLOYED_TOKEN_ENDPOINT


def token_endpoint_for_page(page_url: str, configured: str | None = None) -> str:
    """Absolute token endpoint, resolving relative paths against the page origin."""

    origin = page_origin(page_url)
    endpoint = resolve_token_endpoint(origin, configured)
    return urljoin(f"{origin}/", endpoint) if origin else endpoint
