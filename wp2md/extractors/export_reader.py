"""
Reading of WordPress WXR export files into a generic record tree.

Every XML element becomes a plain Python value so the extractors never touch
ElementTree objects:

* a leaf element without attributes becomes its stripped text;
* a leaf element with attributes becomes a dict of its attributes plus a
  ``text`` key (``<category nicename="x">X</category>``);
* an element with children becomes a dict mapping each child's local tag
  name to the list of child records, in document order.

Namespace prefixes are dropped, so ``wp:post_id`` is read as ``post_id`` and
both ``content:encoded`` and ``excerpt:encoded`` land in ``encoded`` (content
first, excerpt second).
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Dict, List

from wp2md.utils.errors import InvalidExportError

Record = Dict[str, List[Any]]


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def element_to_record(element: ET.Element) -> Any:
    children = list(element)
    text = (element.text or "").strip()
    if not children:
        if element.attrib:
            record = {_local_name(k): v for k, v in element.attrib.items()}
            record["text"] = text
            return record
        return text

    record: Dict[str, Any] = {}
    for child in children:
        record.setdefault(_local_name(child.tag), []).append(element_to_record(child))
    return record


def load_export(file_path: str) -> Dict[str, Any]:
    """Parse a WXR export file into a record tree.

    Args:
        file_path (str): Path to the ``.xml`` export.

    Returns:
        dict: The ``<rss>`` element as a record; ``tree["channel"][0]["item"]``
        holds the export items.

    Raises:
        InvalidExportError: If the file cannot be read, is not well-formed
            XML or has no ``<channel>`` element.
    """
    try:
        root = ET.parse(file_path).getroot()
    except OSError as e:
        raise InvalidExportError(f"Cannot read export file {file_path}: {e}") from e
    except ET.ParseError as e:
        raise InvalidExportError(f"Export file {file_path} is not valid XML: {e}") from e
    return _checked(element_to_record(root), file_path)


def load_export_string(xml_text: str) -> Dict[str, Any]:
    """Same as :func:`load_export` for an in-memory document."""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise InvalidExportError(f"Export is not valid XML: {e}") from e
    return _checked(element_to_record(root), "<string>")


def _checked(tree: Any, source: str) -> Dict[str, Any]:
    if not isinstance(tree, dict) or not tree.get("channel") or not isinstance(tree["channel"][0], dict):
        raise InvalidExportError(f"Export {source} has no <channel> element")
    return tree


def get_items(tree: Dict[str, Any]) -> List[Record]:
    return tree["channel"][0].get("item", [])


def get_items_of_type(tree: Dict[str, Any], post_type: str) -> List[Record]:
    return [item for item in get_items(tree) if first(item, "post_type") == post_type]


def first(item: Record, key: str, default: Any = None) -> Any:
    """Return the first value of ``key`` in ``item`` or ``default``."""
    values = item.get(key)
    if not values:
        return default
    return values[0]
