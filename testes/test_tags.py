import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from wp2md.utils.tags import dedupe_labels


def test_labels_html_entities_and_whitespace():
    assert dedupe_labels(["reizen &amp; eten", "  tips  ", "wandel   routes"]) == [
        "reizen & eten",
        "tips",
        "wandel routes",
    ]


def test_labels_drop_empty_values():
    assert dedupe_labels(["", None, "   ", "travel"]) == ["travel"]


def test_labels_deduplicate_case_insensitive_preserve_first():
    assert dedupe_labels(["Travel", "travel", "TRAVEL", "photo"]) == ["Travel", "photo"]
