"""
Article services - query engine and mutations.

Query:
- query_articles: filter → sort → paginate over the whole collection
- get_article: lookup by id

Mutations (one read, in-memory change, one write):
- create_article
- update_article
- delete_article
- patch_article_status
"""

import math
from datetime import datetime
from typing import Any

from editorial.core.errors import ValidationError
from editorial.core.types import (
    Article,
    ArticleCreate,
    ArticleFilters,
    ArticleStatus,
    ArticleUpdate,
    Page,
    SortDirection,
    SortField,
    StatusPatch,
)
from editorial.core.utils import generate_id, slugify, touch, unique_slug
from editorial.services.base import (
    find_index,
    logger,
    parse_input,
    validate_references,
)
from editorial.storage.document import DocumentStore


_SORT_ATTRIBUTES = {
    SortField.CREATED_AT.value: "created_at",
    SortField.UPDATED_AT.value: "updated_at",
    SortField.PUBLISHED_AT.value: "published_at",
    SortField.TITLE.value: "title",
}


# ============================================
# Query
# ============================================

def _sort_value(value: Any) -> str:
    """
    String form used for ordering; null sorts as the empty string.

    Text is case-folded so "apple" and "Zebra" order alphabetically.
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value).casefold()


def _matches_search(article: Article, query: str) -> bool:
    return (
        query in article.title.lower()
        or query in article.excerpt.lower()
        or query in article.author_name.lower()
    )


def filter_articles(articles: list[Article], filters: ArticleFilters) -> Page[Article]:
    """
    Apply filters, sort and pagination to an in-memory collection.

    Predicates run in order: search, status, categories (the article must
    carry ALL requested ids), network, featured. ``total`` and
    ``total_pages`` describe the filtered set before slicing; a page past
    the end is empty.
    """
    items = list(articles)

    if filters.search:
        query = filters.search.lower()
        items = [a for a in items if _matches_search(a, query)]

    if filters.status:
        items = [a for a in items if a.status == filters.status]

    if filters.category_ids:
        required = filters.category_ids
        items = [a for a in items if all(cid in a.category_ids for cid in required)]

    if filters.network_id:
        items = [a for a in items if a.network_id == filters.network_id]

    if filters.featured is not None:
        items = [a for a in items if a.featured == filters.featured]

    attribute = _SORT_ATTRIBUTES[SortField(filters.sort_by).value]
    items.sort(
        key=lambda a: _sort_value(getattr(a, attribute)),
        reverse=filters.sort_dir == SortDirection.DESC,
    )

    total = len(items)
    offset = (filters.page - 1) * filters.limit
    return Page[Article](
        items=items[offset:offset + filters.limit],
        page=filters.page,
        limit=filters.limit,
        total=total,
        total_pages=math.ceil(total / filters.limit),
    )


def query_articles(
    store: DocumentStore,
    filters: ArticleFilters | dict[str, Any] | None = None,
) -> Page[Article]:
    """Return one page of articles matching ``filters``."""
    filters = parse_input(ArticleFilters, filters if filters is not None else {})
    db = store.read()
    return filter_articles(db.articles, filters)


def get_article(store: DocumentStore, article_id: str) -> Article:
    db = store.read()
    return db.articles[find_index(db.articles, article_id, "Article")]


# ============================================
# Mutations
# ============================================

def create_article(store: DocumentStore, data: ArticleCreate | dict[str, Any]) -> Article:
    """
    Create an article.

    The slug is derived from the title and suffixed (-1, -2, ...) until it
    is unique. ``published_at`` defaults to now when the article is created
    as published, otherwise stays null unless given explicitly.

    Raises:
        ValidationError: malformed input or unknown category/network id
    """
    payload = parse_input(ArticleCreate, data)
    db = store.read()

    validate_references(db, payload.category_ids, payload.network_id)

    slug = unique_slug(slugify(payload.title), {a.slug for a in db.articles})
    now = touch()

    published_at = payload.published_at
    if published_at is None and payload.status == ArticleStatus.PUBLISHED:
        published_at = now

    article = Article(
        **payload.model_dump(exclude={"published_at"}),
        id=generate_id("art"),
        slug=slug,
        published_at=published_at,
        created_at=now,
        updated_at=now,
    )

    db.articles.append(article)
    store.write(db)
    logger.info(f"Created article {article.id} ({article.slug})")
    return article


def update_article(
    store: DocumentStore,
    article_id: str,
    data: ArticleUpdate | dict[str, Any],
) -> Article:
    """
    Merge the supplied fields onto an existing article.

    The slug is recomputed only when the title changes to one with a
    different slug; the article's own slug never counts as a collision.

    Raises:
        NotFoundError: no article with ``article_id``
        ValidationError: malformed input, unknown category/network id, or
            clearing the publication date of a published article
    """
    payload = parse_input(ArticleUpdate, data)
    db = store.read()
    index = find_index(db.articles, article_id, "Article")
    changes = payload.changes()

    validate_references(db, changes.get("category_ids"), changes.get("network_id"))

    existing = db.articles[index]

    status = changes.get("status", existing.status)
    if (
        "published_at" in changes
        and changes["published_at"] is None
        and existing.published_at is not None
        and status == ArticleStatus.PUBLISHED
    ):
        raise ValidationError(
            "Validation error",
            details={"publishedAt": ["cannot be cleared on a published article"]},
        )

    now = touch(existing.updated_at)

    merged = existing.model_dump()
    merged.update(changes)
    merged["updated_at"] = now

    title = changes.get("title")
    if title is not None and title != existing.title:
        base = slugify(title)
        if base != existing.slug:
            taken = {a.slug for a in db.articles if a.id != article_id}
            merged["slug"] = unique_slug(base, taken)

    if changes.get("status") == ArticleStatus.PUBLISHED and merged["published_at"] is None:
        merged["published_at"] = now

    updated = Article.model_validate(merged)
    db.articles[index] = updated
    store.write(db)
    logger.info(f"Updated article {article_id} ({', '.join(changes) or 'no fields'})")
    return updated


def delete_article(store: DocumentStore, article_id: str) -> None:
    db = store.read()
    index = find_index(db.articles, article_id, "Article")
    del db.articles[index]
    store.write(db)
    logger.info(f"Deleted article {article_id}")


def patch_article_status(
    store: DocumentStore,
    article_id: str,
    status: ArticleStatus | str,
) -> Article:
    """
    Change only the status. Publishing stamps ``published_at`` the first
    time; an existing publication date is never changed or cleared.
    """
    status = parse_input(StatusPatch, {"status": status}).status
    db = store.read()
    index = find_index(db.articles, article_id, "Article")

    existing = db.articles[index]
    now = touch(existing.updated_at)

    published_at = existing.published_at
    if status == ArticleStatus.PUBLISHED and published_at is None:
        published_at = now

    updated = existing.model_copy(update={
        "status": status,
        "published_at": published_at,
        "updated_at": now,
    })
    db.articles[index] = updated
    store.write(db)
    logger.info(f"Article {article_id} status -> {status}")
    return updated
