"""
URL helpers shared by the DOM adapter and the resolvers.
"""

from __future__ import annotations

from urllib.parse import urljoin, urlparse

WEB_SCHEMES = ("http", "https")


def resolve_http_url(base_url: str, href: str) -> str:
    """Resolve ``href`` against ``base_url``; return "" unless the result is http(s).

    Examples:
        >>> resolve_http_url("https://example.com/book/1/", "2.html")
        'https://example.com/book/1/2.html'

        >>> resolve_http_url("https://example.com/", "javascript:void(0)")
        ''
    """
    href = (href or "").strip()
    if not href:
        return ""
    resolved = urljoin(base_url, href) if base_url else href
    parsed = urlparse(resolved)
    if parsed.scheme not in WEB_SCHEMES or not parsed.netloc:
        return ""
    return resolved
