"""
Writing of resolved posts to a static-site content tree.

Each post ends up in ``<output>/<language>/<slug>/index.md`` with a YAML
frontmatter block, and the images it depends on are downloaded next to it
into ``images/`` so the ``./images/...`` cover and ``images/...`` references
produced by the resolver work as relative paths.
"""

from __future__ import annotations

import os
from typing import Dict, Optional

import requests
import yaml

from wp2md.models import Post
from wp2md.utils.downloads import RateLimiter, download_image
from wp2md.utils.errors import report_error


def render_post(post: Post) -> str:
    frontmatter = yaml.safe_dump(
        post.frontmatter(),
        allow_unicode=True,
        sort_keys=False,
        default_flow_style=False,
    )
    return f"---\n{frontmatter}---\n\n{post.content}\n"


def post_directory(post: Post, output_dir: str) -> str:
    return os.path.join(output_dir, post.language, post.export_path or post.id)


def write_post(post: Post, output_dir: str) -> str:
    """Write ``index.md`` for ``post`` and return the post directory."""
    post_dir = post_directory(post, output_dir)
    os.makedirs(post_dir, exist_ok=True)
    with open(os.path.join(post_dir, "index.md"), "w", encoding="utf-8") as f:
        f.write(render_post(post))
    return post_dir


def download_images(
    post: Post,
    post_dir: str,
    *,
    limiter: Optional[RateLimiter] = None,
    session: Optional[requests.Session] = None,
) -> Dict[str, int]:
    """
    Fetch every URL in ``post.image_urls`` into ``<post_dir>/images``.

    Failures are reported per image and counted; they never stop the run.

    :return: counts of ``downloaded``, ``skipped`` (already on disk) and
        ``failed`` images.
    """
    counts = {"downloaded": 0, "skipped": 0, "failed": 0}
    images_dir = os.path.join(post_dir, "images")
    for url in post.image_urls:
        try:
            written = download_image(url, images_dir, limiter=limiter, session=session)
        except (requests.RequestException, OSError) as e:
            report_error("IMAGE_DOWNLOAD", post, e)
            counts["failed"] += 1
            continue
        if written is None:
            counts["skipped"] += 1
        else:
            counts["downloaded"] += 1
    return counts
