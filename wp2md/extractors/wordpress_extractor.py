from __future__ import annotations

from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from wp2md.models import Post, Translation
from wp2md.parsers.markdown import html_to_markdown
from wp2md.utils.errors import InvalidExportError
from wp2md.utils.tags import dedupe_labels

from .export_reader import Record, first, get_items_of_type

EXCLUDED_STATUSES = ("trash", "draft")
MORE_MARKER = "<!--more-->"

# One entry per language variant.  ``meta_prefix`` None means the variant is
# read from the item's native fields; any other variant is read from postmeta
# keys named ``<meta_prefix>post_title``, ``<meta_prefix>post_name`` etc.
DEFAULT_LANGUAGES: List[Dict[str, Optional[str]]] = [
    {"code": "nl", "name": "Nederlands", "meta_prefix": None},
    {"code": "de", "name": "Deutsch", "meta_prefix": "_de_"},
]

ContentConverter = Callable[[str], str]


def get_meta_value(item: Record, key: str) -> Optional[str]:
    """Retorna o valor do primeiro ``postmeta`` com a chave ``key``.

    Itens sem ``postmeta`` (ou sem a chave) retornam ``None``.
    """
    for postmeta in item.get("postmeta") or []:
        if first(postmeta, "meta_key") == key:
            return first(postmeta, "meta_value", "")
    return None


def get_post_id(item: Record) -> str:
    return first(item, "post_id")


def get_author(item: Record) -> str:
    author = first(item, "creator", "") or ""
    return author[:1].upper() + author[1:]


def get_post_date(item: Record) -> str:
    """Converte a data RFC 2822 do item (``pubDate``) em ``YYYY-MM-DD`` (UTC).

    Raises:
        InvalidExportError: Se a data estiver ausente ou malformada.
    """
    raw = first(item, "pubDate")
    if not raw:
        raise InvalidExportError(f"Missing pubDate on post {get_post_id(item)}")
    try:
        parsed = parsedate_to_datetime(raw)
    except (TypeError, ValueError, IndexError) as e:
        raise InvalidExportError(f"Invalid pubDate {raw!r} on post {get_post_id(item)}") from e
    if parsed is None:
        raise InvalidExportError(f"Invalid pubDate {raw!r} on post {get_post_id(item)}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).date().isoformat()


def get_tags(item: Record) -> List[str]:
    return dedupe_labels(
        category.get("nicename") for category in item.get("category") or [] if isinstance(category, dict)
    )


def get_post_cover_image_id(item: Record) -> Optional[str]:
    return get_meta_value(item, "_thumbnail_id") or None


def excerpt_from(explicit: Optional[str], content: Optional[str]) -> str:
    """Resumo do post: o campo explícito, senão o trecho antes de ``<!--more-->``."""
    if explicit:
        return explicit
    content = content or ""
    more = content.find(MORE_MARKER)
    if more != -1:
        return content[:more].strip()
    return ""


def _language_fields(item: Record, meta_prefix: Optional[str]) -> Dict[str, Optional[str]]:
    """Lê título, slug, conteúdo e resumo de uma variante de idioma."""
    if not meta_prefix:
        encoded = item.get("encoded") or []
        return {
            "title": first(item, "title"),
            "slug": first(item, "post_name"),
            "content": encoded[0] if len(encoded) > 0 else "",
            "excerpt": encoded[1] if len(encoded) > 1 else "",
        }
    return {
        "title": get_meta_value(item, f"{meta_prefix}post_title"),
        "slug": get_meta_value(item, f"{meta_prefix}post_name"),
        "content": get_meta_value(item, f"{meta_prefix}post_content") or "",
        "excerpt": get_meta_value(item, f"{meta_prefix}post_excerpt"),
    }


def extract_post_variants(
    item: Record,
    languages: Sequence[Dict[str, Any]],
    content_converter: ContentConverter,
) -> List[Post]:
    """Extrai um :class:`Post` por idioma configurado a partir de um item.

    Cada variante recebe as demais como traduções (com dois idiomas, o
    vínculo é recíproco e único).

    Args:
        item (dict): Item ``post`` da árvore de exportação.
        languages (list): Configuração de idiomas (``code``, ``name``,
            ``meta_prefix``).
        content_converter (callable): Converte o HTML do post em markdown.

    Returns:
        list: Os posts, na ordem dos idiomas configurados.

    Raises:
        InvalidExportError: Se a data do item for inválida.
    """
    post_id = get_post_id(item)
    date = get_post_date(item)
    author = get_author(item)
    tags = get_tags(item)
    cover_image_id = get_post_cover_image_id(item)

    posts: List[Post] = []
    for language in languages:
        fields = _language_fields(item, language.get("meta_prefix"))
        posts.append(
            Post(
                id=post_id,
                export_path=fields["slug"],
                cover_image_id=cover_image_id,
                language=language["code"],
                title=fields["title"],
                slug=fields["slug"],
                date=date,
                author=author,
                tags=list(tags),
                description=excerpt_from(fields["excerpt"], fields["content"]),
                content=content_converter(fields["content"] or ""),
            )
        )

    names = {language["code"]: language.get("name") or language["code"] for language in languages}
    for post in posts:
        post.translations = [
            Translation(link=f"/{other.slug or ''}", hreflang=other.language, language=names[other.language])
            for other in posts
            if other is not post
        ]
    return posts


def collect_posts(
    tree: Dict[str, Any],
    languages: Optional[Sequence[Dict[str, Any]]] = None,
    content_converter: Optional[ContentConverter] = None,
) -> List[Post]:
    """Coleta os posts publicáveis da exportação.

    Itens com status ``trash`` ou ``draft`` são ignorados antes da extração.

    Raises:
        InvalidExportError: Se algum item tiver data malformada.
    """
    languages = languages or DEFAULT_LANGUAGES
    content_converter = content_converter or html_to_markdown

    posts: List[Post] = []
    for item in get_items_of_type(tree, "post"):
        if first(item, "status") in EXCLUDED_STATUSES:
            continue
        posts.extend(extract_post_variants(item, languages, content_converter))
    return posts
