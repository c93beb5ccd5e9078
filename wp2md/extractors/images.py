from __future__ import annotations

import re
from typing import Any, Dict, List

from wp2md.models import SCRAPED_IMAGE_ID, Image
from wp2md.utils.urls import resolve_url

from .export_reader import first, get_items_of_type

IMAGE_EXTENSION_RE = re.compile(r"\.(gif|jpe?g|png)$", re.IGNORECASE)
IMG_TAG_RE = re.compile(r'<img[^>]*src="(.+?\.(?:gif|jpe?g|png))"[^>]*>', re.IGNORECASE)


def collect_attached_images(tree: Dict[str, Any]) -> List[Image]:
    """Images uploaded as attachments, keyed by their attachment id."""
    images: List[Image] = []
    for attachment in get_items_of_type(tree, "attachment"):
        url = first(attachment, "attachment_url", "")
        # only raster image file types
        if not url or not IMAGE_EXTENSION_RE.search(url):
            continue
        images.append(
            Image(
                id=first(attachment, "post_id"),
                post_id=first(attachment, "post_parent", "0"),
                url=url,
            )
        )
    return images


def collect_scraped_images(tree: Dict[str, Any]) -> List[Image]:
    """Images found in ``<img>`` tags of each post body, in document order.

    Relative ``src`` values are resolved against the post's permalink, so the
    same relative path in two posts yields two different URLs.
    """
    images: List[Image] = []
    for post in get_items_of_type(tree, "post"):
        post_id = first(post, "post_id")
        encoded = post.get("encoded") or [""]
        post_link = first(post, "link", "")
        for match in IMG_TAG_RE.finditer(encoded[0] or ""):
            images.append(
                Image(
                    id=SCRAPED_IMAGE_ID,
                    post_id=post_id,
                    url=resolve_url(match.group(1), post_link),
                )
            )
    return images
