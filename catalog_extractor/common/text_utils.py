"""
Text Utilities

Helper functions for text cleanup and link normalization.
"""

from __future__ import annotations

from urllib.parse import urljoin, urlsplit, urlunsplit


def clean_text(text) -> str:
    """Collapse whitespace and strip. Non-strings become ''."""
    if not text or not isinstance(text, str):
        return ""
    return ' '.join(text.split()).strip()


def absolute_url(href: str | None, base_url: str = "") -> str:
    """
    Resolve a possibly relative or protocol-relative link.

    Args:
        href: Link as found in the document ("/produto/p", "//cdn/x.jpg")
        base_url: Page or store URL used to resolve relative links

    Returns:
        Absolute URL, or '' when href is empty or cannot be made absolute
    """
    href = clean_text(href)
    if not href or href.startswith(('javascript:', 'mailto:', '#', 'data:')):
        return ""

    if href.startswith('//'):
        return f"https:{href}"

    if href.startswith(('http://', 'https://')):
        return href

    if base_url:
        return urljoin(base_url, href)

    return ""


def canonical_link(url: str | None) -> str:
    """
    Canonical form of a product link, used as an identity key.

    Drops query string and fragment (tracking and SKU selectors), lowercases
    scheme and host, and removes the trailing slash.
    """
    if not url:
        return ""

    parts = urlsplit(url.strip())
    if not parts.scheme or not parts.netloc:
        return url.strip()

    path = parts.path.rstrip('/')
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, "", ""))


def category_path_from_url(url: str | None, default: str = "") -> str:
    """
    Extract the category path from a pasted category link.

    "https://www.climario.com.br/ar-condicionado/multi-split"
        -> "ar-condicionado/multi-split"

    Args:
        url: Category page link
        default: Returned when the link is unusable

    Returns:
        Path without leading slashes, or default
    """
    url = clean_text(url)
    if not url:
        return default

    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return default

    path = parts.path.lstrip('/')
    return path or default
