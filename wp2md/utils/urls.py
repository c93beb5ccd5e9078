from __future__ import annotations

from urllib.parse import unquote, urljoin, urlparse


def filename_from_url(url: str) -> str:
    """Return the percent-decoded basename of the URL path.

    Used for cover images, gallery references and downloaded files alike so
    that all three agree on the same name.
    """
    path = urlparse(url).path
    return unquote(path.rstrip("/").split("/")[-1])


def resolve_url(src: str, base: str) -> str:
    """Resolve ``src`` (possibly relative) against the page URL ``base``."""
    return urljoin(base or "", src)


def markdown_image(url: str) -> str:
    return f"![](images/{filename_from_url(url)})"
