"""
Parsers and converters used by the conversion pipeline.

Currently this subpackage exposes ``html_to_markdown`` and
``get_post_content`` from :mod:`wp2md.parsers.markdown`.
"""

from .markdown import get_post_content, html_to_markdown

__all__ = ["get_post_content", "html_to_markdown"]
