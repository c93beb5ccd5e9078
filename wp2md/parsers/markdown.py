"""
WordPress HTML → markdown conversion.

Post bodies in a WordPress export are not plain HTML: paragraphs are
separated by blank lines (WordPress adds ``<p>`` tags at render time),
captions are wrapped in ``[caption]`` shortcodes and embeds arrive as raw
``<iframe>`` elements.  :func:`html_to_markdown` normalizes those before
handing the HTML to ``markdownify``.

Gallery shortcodes are left in the text on purpose; they are expanded later
by :mod:`wp2md.resolvers.cross_reference`, once images are known.
"""

from __future__ import annotations

import re
from typing import Dict

from bs4 import BeautifulSoup
from markdownify import markdownify

from wp2md.utils.urls import filename_from_url

__all__ = ["html_to_markdown", "get_post_content", "localize_image_sources"]

MARKDOWNIFY_OPTIONS = {
    "heading_style": "ATX",
    "bullets": "-",
    # leave shortcode brackets and attributes untouched for the resolver
    "escape_misc": False,
}

_BLOCK_START_RE = re.compile(
    r"^\s*<(?:p|div|h[1-6]|ul|ol|li|blockquote|pre|table|figure|iframe|hr|dl|address|section|form|embed)\b",
    re.IGNORECASE,
)
_IMAGE_SRC_RE = re.compile(r"\.(gif|jpe?g|png)$", re.IGNORECASE)


def _wpautop(html: str) -> str:
    """Wrap blank-line separated chunks in ``<p>`` like WordPress does on render."""
    html = html.replace("\r\n", "\n")
    chunks = re.split(r"\n\s*\n", html)
    out = []
    for chunk in chunks:
        chunk = chunk.strip()
        if not chunk:
            continue
        if _BLOCK_START_RE.match(chunk):
            out.append(chunk)
        else:
            out.append("<p>" + chunk.replace("\n", "<br />\n") + "</p>")
    return "\n".join(out)


def html_to_markdown(html: str) -> str:
    """Convert a WordPress post body to markdown."""
    if not html or not html.strip():
        return ""

    # Pre-process to remove WordPress shortcodes like [caption]
    content = re.sub(r"\[/?caption[^\]]*\]", "", html, flags=re.IGNORECASE)

    # Keep embeds as raw HTML: markdownify would reduce them to nothing
    embeds: Dict[str, str] = {}

    def save_embed(match: "re.Match[str]") -> str:
        placeholder = f"WPMDEMBED{len(embeds)}X"
        embeds[placeholder] = match.group(0)
        return placeholder

    content = re.sub(r"<iframe\b.*?</iframe>", save_embed, content, flags=re.DOTALL | re.IGNORECASE)

    # Remove scripts/styles
    soup = BeautifulSoup(content, "html.parser")
    for bad in soup.find_all(["script", "style"]):
        bad.decompose()

    content = markdownify(_wpautop(str(soup)), **MARKDOWNIFY_OPTIONS)

    # clean up extra spaces in list items
    content = re.sub(r"^(\s*)(-|\d+\.) +", r"\1\2 ", content, flags=re.MULTILINE)
    # trailing spaces and excessive blank lines
    content = re.sub(r"[ \t]+\n", "\n", content)
    content = re.sub(r"\n{3,}", "\n\n", content).strip()

    for placeholder, embed in embeds.items():
        content = content.replace(placeholder, embed)
    return content


def localize_image_sources(html: str) -> str:
    """Point every raster ``<img src>`` at the post's local ``images/`` folder."""
    soup = BeautifulSoup(html, "html.parser")
    changed = False
    for img in soup.find_all("img"):
        src = img.get("src")
        if isinstance(src, list):
            src = src[0] if src else None
        if src and _IMAGE_SRC_RE.search(src):
            img["src"] = f"images/{filename_from_url(src)}"
            changed = True
    return str(soup) if changed else html


def get_post_content(html: str, save_scraped_images: bool = True) -> str:
    """Markdown body of a post; scraped images point at local copies when saved."""
    if save_scraped_images and html:
        html = localize_image_sources(html)
    return html_to_markdown(html)
