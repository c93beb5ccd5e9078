from __future__ import annotations

import re
from typing import Any, Dict, List

from wp2md.models import Gallery

from .export_reader import Record, first, get_items_of_type
from .wordpress_extractor import get_meta_value

# Serialized PHP array, e.g. a:3:{i:0;s:3:"255";i:1;s:3:"254";i:2;s:3:"253";}
QUOTED_ID_RE = re.compile(r'(?<=")(\d+)(?=")')


def parse_foogallery_attachments(item: Record) -> List[str]:
    """Attachment ids of a FooGallery item, in gallery order.

    Only the quoted numeric tokens are read; the envelope is not validated,
    so a malformed value yields whatever tokens it contains.
    """
    value = get_meta_value(item, "foogallery_attachments") or ""
    return QUOTED_ID_RE.findall(value)


def collect_foo_galleries(tree: Dict[str, Any]) -> List[Gallery]:
    return [
        Gallery(
            id=first(gallery, "post_id"),
            title=first(gallery, "title"),
            attachment_ids=parse_foogallery_attachments(gallery),
        )
        for gallery in get_items_of_type(tree, "foogallery")
    ]
