import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from wp2md.extractors.export_reader import load_export
from wp2md.extractors.wordpress_extractor import (
    collect_posts,
    excerpt_from,
    extract_post_variants,
    get_author,
    get_meta_value,
    get_post_date,
    get_tags,
)
from wp2md.utils.errors import InvalidExportError

LANGUAGES = [
    {"code": "nl", "name": "Nederlands", "meta_prefix": None},
    {"code": "de", "name": "Deutsch", "meta_prefix": "_de_"},
]


def identity(html):
    return html


def make_item(**fields):
    item = {
        "post_id": ["1"],
        "post_type": ["post"],
        "status": ["publish"],
        "title": ["Titel"],
        "post_name": ["titel"],
        "pubDate": ["Mon, 01 Jul 2019 12:00:00 +0000"],
        "creator": ["anna"],
        "encoded": ["<p>Inhoud</p>", ""],
        "link": ["https://example.com/titel/"],
        "postmeta": [],
    }
    item.update({k: v if isinstance(v, list) else [v] for k, v in fields.items()})
    return item


def meta(key, value):
    return {"meta_key": [key], "meta_value": [value]}


def tree_of(*items):
    return {"channel": [{"item": list(items)}]}


def test_author_is_capitalized_on_first_character_only():
    assert get_author(make_item(creator="anna-maria")) == "Anna-maria"
    assert get_author(make_item(creator="jAN")) == "JAN"
    assert get_author(make_item(creator="")) == ""


def test_date_is_converted_to_utc_calendar_date():
    assert get_post_date(make_item(pubDate="Wed, 06 Mar 2019 00:30:00 +0100")) == "2019-03-05"
    assert get_post_date(make_item(pubDate="Sat, 31 Dec 2022 23:59:59 -0200")) == "2023-01-01"
    assert get_post_date(make_item(pubDate="Mon, 01 Jul 2019 12:00:00 GMT")) == "2019-07-01"


@pytest.mark.parametrize("value", ["not a date", ""])
def test_malformed_date_is_fatal(value):
    with pytest.raises(InvalidExportError):
        get_post_date(make_item(pubDate=value))


def test_missing_date_is_fatal():
    item = make_item()
    del item["pubDate"]
    with pytest.raises(InvalidExportError):
        get_post_date(item)


def test_tags_from_category_nicenames_deduplicated():
    item = make_item(
        category=[
            {"domain": "category", "nicename": "reizen", "text": "Reizen"},
            {"domain": "post_tag", "nicename": "foto", "text": "Foto"},
            {"domain": "post_tag", "nicename": "reizen", "text": "Reizen"},
        ]
    )
    assert get_tags(item) == ["reizen", "foto"]
    assert get_tags(make_item()) == []


def test_meta_value_lookup():
    item = make_item(postmeta=[meta("_thumbnail_id", "42"), meta("_thumbnail_id", "43")])
    assert get_meta_value(item, "_thumbnail_id") == "42"
    assert get_meta_value(item, "_missing") is None
    no_meta = make_item()
    del no_meta["postmeta"]
    assert get_meta_value(no_meta, "_thumbnail_id") is None


def test_excerpt_prefers_explicit_field():
    assert excerpt_from("Kort", "Lang<!--more-->verhaal") == "Kort"


def test_excerpt_before_more_marker_is_trimmed():
    prefix = "  Dit is de inleiding van het verhaal.  "
    assert len(prefix) == 40
    body = prefix + "<!--more-->De rest volgt hier."
    assert body.index("<!--more-->") == 40
    assert excerpt_from("", body) == prefix[:40].strip()


def test_excerpt_empty_without_marker():
    assert excerpt_from(None, "<p>Geen marker</p>") == ""
    assert excerpt_from(None, None) == ""


def test_language_variants_and_reciprocal_translations():
    item = make_item(
        postmeta=[
            meta("_thumbnail_id", "7"),
            meta("_de_post_title", "Titel DE"),
            meta("_de_post_name", "titel-de"),
            meta("_de_post_content", "<p>Inhalt</p><!--more-->Rest"),
            meta("_de_post_excerpt", ""),
        ]
    )
    nl, de = extract_post_variants(item, LANGUAGES, identity)

    assert (nl.language, nl.title, nl.slug, nl.content) == ("nl", "Titel", "titel", "<p>Inhoud</p>")
    assert (de.language, de.title, de.slug) == ("de", "Titel DE", "titel-de")
    assert de.description == "<p>Inhalt</p>"
    assert nl.description == ""
    assert nl.id == de.id == "1"
    assert nl.cover_image_id == de.cover_image_id == "7"
    assert nl.export_path == "titel"
    assert nl.image_urls == [] and de.image_urls == []

    assert [t.model_dump() for t in nl.translations] == [
        {"link": "/titel-de", "hreflang": "de", "language": "Deutsch"}
    ]
    assert [t.model_dump() for t in de.translations] == [
        {"link": "/titel", "hreflang": "nl", "language": "Nederlands"}
    ]


def test_missing_second_language_content_yields_empty_fields():
    nl, de = extract_post_variants(make_item(), LANGUAGES, identity)
    assert de.title is None
    assert de.content == ""
    assert de.description == ""


def test_single_language_has_no_translations():
    (post,) = extract_post_variants(make_item(), LANGUAGES[:1], identity)
    assert post.translations == []


def test_draft_and_trashed_posts_are_excluded():
    tree = tree_of(
        make_item(post_id="1", status="publish"),
        make_item(post_id="2", status="draft"),
        make_item(post_id="3", status="trash"),
        make_item(post_id="4", status="private"),
        make_item(post_id="5", post_type="page"),
    )
    posts = collect_posts(tree, LANGUAGES, identity)
    assert [(p.id, p.language) for p in posts] == [("1", "nl"), ("1", "de"), ("4", "nl"), ("4", "de")]


def test_malformed_date_aborts_collection():
    tree = tree_of(make_item(post_id="1"), make_item(post_id="2", pubDate="gisteren"))
    with pytest.raises(InvalidExportError):
        collect_posts(tree, LANGUAGES, identity)


def test_collect_posts_from_export_file(export_path):
    posts = collect_posts(load_export(export_path), LANGUAGES, identity)
    assert [(p.id, p.language, p.slug) for p in posts] == [
        ("10", "nl", "hallo-wereld"),
        ("10", "de", "hallo-welt"),
    ]
    nl, de = posts
    assert nl.date == "2019-03-05"
    assert nl.author == "Jan"
    assert nl.tags == ["travel", "photo"]
    assert de.description == "Einleitung zur Reise."
