"""
High-level orchestration of the WordPress → markdown conversion.

This module defines a :class:`WordPressConversionTool` class that ties
together the extractors, parsers, resolvers and writers into a complete
pipeline.  It reads a WordPress WXR export, builds one post per language
variant, collects attached and scraped images and FooGallery definitions,
resolves the references between them, writes markdown files with
frontmatter and downloads the images every post depends on.

Configuration is supplied via a JSON file path or directly as a
dictionary.  The ``export`` section holds ``input`` and ``output``;
``images`` toggles the two image sources and the download step;
``languages`` lists the language variants to extract.
"""

from __future__ import annotations

import copy
import json
import os
from datetime import datetime
from functools import partial
from typing import Any, Dict, List, Optional

from wp2md.extractors import (
    DEFAULT_LANGUAGES,
    collect_attached_images,
    collect_foo_galleries,
    collect_posts,
    collect_scraped_images,
    load_export,
)
from wp2md.models import Image, Post
from wp2md.parsers.markdown import get_post_content
from wp2md.resolvers import merge_galleries_into_posts, merge_images_into_posts
from wp2md.utils.downloads import RateLimiter
from wp2md.utils.errors import report_ok
from wp2md.utils.pre_flight_checks import run_pre_flight_checks
from wp2md.writers import download_images, write_post


class WordPressConversionTool:
    """
    Encapsulates all state and behavior required to convert a WordPress
    export into markdown posts.  This class is responsible for reading
    configuration, running the parse/resolve pipeline and writing its
    output.  Per-post problems are recorded using the
    :mod:`wp2md.utils.errors` module.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        config_file: Optional[str] = None,
        log_dir: str = os.path.join("reports", "conversion"),
    ) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            # Default configuration
            config = {}

        # Ensure essential keys exist to prevent KeyErrors
        config.setdefault("export", {})
        config["export"].setdefault("input", os.getenv("WP2MD_INPUT", "export.xml"))
        config["export"].setdefault("output", os.getenv("WP2MD_OUTPUT", "output"))

        config.setdefault("images", {})
        config["images"].setdefault("save_attached", True)
        config["images"].setdefault("save_scraped", True)
        config["images"].setdefault("download", True)
        config["images"].setdefault("requests_per_minute", 120)

        config.setdefault("languages", copy.deepcopy(DEFAULT_LANGUAGES))

        self.config = config
        self.log_dir = log_dir

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        # Append to log file
        os.makedirs(self.log_dir, exist_ok=True)
        with open(os.path.join(self.log_dir, "conversion.log"), "a", encoding="utf-8") as f:
            f.write(f"{datetime.now().isoformat(timespec='seconds')} {level}: {message}\n")

    def parse_export(self, input_path: Optional[str] = None) -> List[Post]:
        """
        Run extraction, collection and resolution over an export file.

        The stages run in a fixed order because each one consumes the
        output of the previous: posts, then images (attached first, then
        scraped), then the image merge, then galleries.

        :param input_path: Export file; defaults to ``export.input``.
        :return: The resolved posts.
        :raises InvalidExportError: if the export cannot be parsed or a
            post has a malformed date.
        """
        input_path = input_path or self.config["export"]["input"]
        images_cfg = self.config["images"]

        self.log_message(f"Parsing {input_path}")
        tree = load_export(input_path)

        converter = partial(get_post_content, save_scraped_images=images_cfg["save_scraped"])
        posts = collect_posts(tree, self.config["languages"], converter)
        self.log_message(f"{len(posts)} posts found.")

        images: List[Image] = []
        if images_cfg["save_attached"]:
            attached = collect_attached_images(tree)
            self.log_message(f"{len(attached)} attached images found.")
            images.extend(attached)
        if images_cfg["save_scraped"]:
            scraped = collect_scraped_images(tree)
            self.log_message(f"{len(scraped)} images scraped from post body content.")
            images.extend(scraped)
        merge_images_into_posts(images, posts)

        galleries = collect_foo_galleries(tree)
        self.log_message(f"{len(galleries)} FooGalleries found.")
        resolved = merge_galleries_into_posts(galleries, images, posts)
        if len(resolved) != len(posts):
            self.log_message(
                f"{len(posts) - len(resolved)} posts skipped because of unresolved gallery images.",
                level="WARNING",
            )
        return resolved

    def write_posts(self, posts: List[Post], output_dir: Optional[str] = None) -> Dict[str, int]:
        """
        Write every post and, unless disabled, download its images.

        :return: Totals of written posts and downloaded/skipped/failed images.
        """
        output_dir = output_dir or self.config["export"]["output"]
        images_cfg = self.config["images"]
        limiter = RateLimiter(int(images_cfg["requests_per_minute"]))
        totals = {"posts": 0, "downloaded": 0, "skipped": 0, "failed": 0}

        for post in posts:
            post_dir = write_post(post, output_dir)
            totals["posts"] += 1
            if images_cfg["download"] and post.image_urls:
                counts = download_images(post, post_dir, limiter=limiter)
                for key, value in counts.items():
                    totals[key] += value
            report_ok("POST_WRITTEN", post, {"path": post_dir, "images": len(post.image_urls)})
        return totals

    def run(self) -> Dict[str, int]:
        """Check configuration, parse the export and write the result."""
        run_pre_flight_checks(self.config)
        posts = self.parse_export()
        totals = self.write_posts(posts)
        self.log_message(
            f"Wrote {totals['posts']} posts to {self.config['export']['output']} "
            f"({totals['downloaded']} images downloaded, {totals['skipped']} already present, "
            f"{totals['failed']} failed)."
        )
        return totals
