"""
Output writers: markdown files with frontmatter and their downloaded images.
"""

from .markdown_writer import download_images, render_post, write_post

__all__ = ["download_images", "render_post", "write_post"]
