"""
Category services.

A category's slug is derived from its name and must be unique; a
colliding name is a conflict. Deleting a category strips its id from
every article but never deletes an article.
"""

from typing import Any

from editorial.core.errors import ConflictError
from editorial.core.types import Category, CategoryCreate, CategoryUpdate
from editorial.core.utils import generate_id, slugify, touch
from editorial.services.base import find_index, logger, parse_input
from editorial.storage.document import DocumentStore


def _ensure_name_free(categories: list[Category], name: str, exclude_id: str | None = None) -> str:
    slug = slugify(name)
    if any(c.slug == slug and c.id != exclude_id for c in categories):
        raise ConflictError(f'A category with the name "{name}" already exists')
    return slug


def list_categories(store: DocumentStore) -> list[Category]:
    return store.read().categories


def get_category(store: DocumentStore, category_id: str) -> Category:
    db = store.read()
    return db.categories[find_index(db.categories, category_id, "Category")]


def create_category(store: DocumentStore, data: CategoryCreate | dict[str, Any]) -> Category:
    payload = parse_input(CategoryCreate, data)
    db = store.read()

    slug = _ensure_name_free(db.categories, payload.name)
    now = touch()
    category = Category(
        **payload.model_dump(),
        id=generate_id("cat"),
        slug=slug,
        created_at=now,
        updated_at=now,
    )

    db.categories.append(category)
    store.write(db)
    logger.info(f"Created category {category.id} ({category.slug})")
    return category


def update_category(
    store: DocumentStore,
    category_id: str,
    data: CategoryUpdate | dict[str, Any],
) -> Category:
    payload = parse_input(CategoryUpdate, data)
    db = store.read()
    index = find_index(db.categories, category_id, "Category")
    existing = db.categories[index]
    changes = payload.changes()

    if "name" in changes and changes["name"] != existing.name:
        changes["slug"] = _ensure_name_free(db.categories, changes["name"], exclude_id=category_id)

    updated = existing.model_copy(update={**changes, "updated_at": touch(existing.updated_at)})
    db.categories[index] = updated
    store.write(db)
    logger.info(f"Updated category {category_id}")
    return updated


def delete_category(store: DocumentStore, category_id: str) -> None:
    """Delete a category and remove it from every article's category set."""
    db = store.read()
    index = find_index(db.categories, category_id, "Category")

    detached = 0
    for i, article in enumerate(db.articles):
        if category_id in article.category_ids:
            remaining = [cid for cid in article.category_ids if cid != category_id]
            db.articles[i] = article.model_copy(update={"category_ids": remaining})
            detached += 1

    del db.categories[index]
    store.write(db)
    logger.info(f"Deleted category {category_id} (detached from {detached} articles)")
