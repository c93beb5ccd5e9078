"""
Cross-referencing of posts, images and galleries.

Two passes run in a fixed order:

1. :func:`merge_images_into_posts` attaches every collected image to the
   post that owns it, recording the cover image and the URLs to download.
2. :func:`merge_galleries_into_posts` expands gallery shortcodes in the
   markdown content into image references.  It needs the full image table
   from the collectors, and it adds URLs on top of what pass 1 recorded.

Lookup tables are built on every call from the lists passed in; nothing is
cached between runs.

Two shortcode forms are handled::

    [foogallery id="355"]               -> resolved through a Gallery record
    [gallery columns="4" ids="301,302"] -> image ids listed inline

Both may appear with markdown-escaped brackets (``\\[`` ``\\]``) depending on
how the HTML converter treated them.  Each form is replaced by one
``![](images/<filename>)`` line per image, in gallery order.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Tuple

from wp2md.models import Gallery, Image, Post
from wp2md.utils.errors import UnresolvedImageError, report_error, report_warning
from wp2md.utils.urls import filename_from_url, markdown_image

FOOGALLERY_RE = re.compile(r'\\?\[foogallery id="(\d+)"\\?\]', re.IGNORECASE)
GALLERY_IDS_RE = re.compile(r'\\?\[gallery\b[^\]]*?\bids="([\d,\s]+)"[^\]]*\]', re.IGNORECASE)


def index_posts(posts: Iterable[Post]) -> Dict[str, List[Post]]:
    """Map a source post id to all of its language variants."""
    lookup: Dict[str, List[Post]] = {}
    for post in posts:
        lookup.setdefault(post.id, []).append(post)
    return lookup


def index_images(images: Iterable[Image]) -> Dict[str, Image]:
    """Map attachment id to image; scraped images have no id and are left out."""
    return {image.id: image for image in images if not image.is_scraped}


def index_galleries(galleries: Iterable[Gallery]) -> Dict[str, Gallery]:
    return {gallery.id: gallery for gallery in galleries}


def merge_images_into_posts(images: Iterable[Image], posts: List[Post]) -> None:
    """Pass 1: record cover images and image URLs on the owning posts."""
    posts_lookup = index_posts(posts)

    for image in images:
        owners = posts_lookup.get(image.post_id)
        if not owners:
            report_warning("ORPHAN_IMAGE", None, {"image_id": image.id, "post_id": image.post_id, "url": image.url})
            continue
        for post in owners:
            if image.id == post.cover_image_id:
                post.cover = "./images/" + filename_from_url(image.url)
            # save (unique) full image URLs for downloading later
            post.add_image_url(image.url)


def _expand_foogalleries(
    post: Post,
    content: str,
    image_urls: List[str],
    gallery_lookup: Dict[str, Gallery],
    image_lookup: Dict[str, Image],
) -> str:
    for match in FOOGALLERY_RE.finditer(content):
        gallery_id = match.group(1)
        gallery = gallery_lookup.get(gallery_id)
        if gallery is None:
            report_warning("GALLERY_NOT_FOUND", post, {"gallery_id": gallery_id, "shortcode": match.group(0)})
            continue

        img_tags = []
        for image_id in gallery.attachment_ids:
            image = image_lookup.get(image_id)
            if image is None:
                report_warning("IMAGE_NOT_FOUND", post, {"gallery_id": gallery_id, "image_id": image_id})
                continue
            if image.url not in image_urls:
                image_urls.append(image.url)
            img_tags.append(markdown_image(image.url))

        # first literal occurrence only
        content = content.replace(match.group(0), "\n".join(img_tags), 1)
    return content


def _expand_id_galleries(
    content: str,
    image_urls: List[str],
    image_lookup: Dict[str, Image],
) -> str:
    for match in GALLERY_IDS_RE.finditer(content):
        image_ids = [image_id.strip() for image_id in match.group(1).split(",") if image_id.strip()]
        img_tags = []
        for image_id in image_ids:
            image = image_lookup.get(image_id)
            if image is None:
                raise UnresolvedImageError(image_id, match.group(0))
            if image.url not in image_urls:
                image_urls.append(image.url)
            img_tags.append(markdown_image(image.url))
        content = content.replace(match.group(0), "\n".join(img_tags), 1)
    return content


def resolve_post_galleries(
    post: Post,
    gallery_lookup: Dict[str, Gallery],
    image_lookup: Dict[str, Image],
) -> Tuple[str, List[str]]:
    """Expand the gallery shortcodes of one post without touching the post.

    Returns the new content and image URL list; the caller commits them.

    Raises:
        UnresolvedImageError: If an inline ``ids="..."`` gallery lists an
            image that does not exist.
    """
    image_urls = list(post.image_urls)
    content = _expand_foogalleries(post, post.content, image_urls, gallery_lookup, image_lookup)
    content = _expand_id_galleries(content, image_urls, image_lookup)
    return content, image_urls


def merge_galleries_into_posts(
    galleries: Iterable[Gallery],
    images: Iterable[Image],
    posts: List[Post],
) -> List[Post]:
    """Pass 2: expand gallery shortcodes in every post.

    A post whose inline gallery lists a missing image is reported and left
    out of the returned list; every other post is updated in place and
    returned in its original order.
    """
    gallery_lookup = index_galleries(galleries)
    image_lookup = index_images(images)

    resolved: List[Post] = []
    for post in posts:
        try:
            content, image_urls = resolve_post_galleries(post, gallery_lookup, image_lookup)
        except UnresolvedImageError as e:
            report_error("GALLERY_IMAGE_REQUIRED", post, e)
            continue
        post.content = content
        post.image_urls = image_urls
        resolved.append(post)
    return resolved
