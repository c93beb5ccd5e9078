"""
Extractors for WordPress export files.

This subpackage reads a WXR export into a generic record tree and maps its
items onto the typed records used by the resolver: one :class:`Post` per
language variant, :class:`Image` records from attachments and scraped
``<img>`` tags, and :class:`Gallery` records from FooGallery items.
"""

from .export_reader import get_items, get_items_of_type, load_export, load_export_string
from .galleries import collect_foo_galleries, parse_foogallery_attachments
from .images import collect_attached_images, collect_scraped_images
from .wordpress_extractor import DEFAULT_LANGUAGES, collect_posts

__all__ = [
    "DEFAULT_LANGUAGES",
    "collect_attached_images",
    "collect_foo_galleries",
    "collect_posts",
    "collect_scraped_images",
    "get_items",
    "get_items_of_type",
    "load_export",
    "load_export_string",
    "parse_foogallery_attachments",
]
