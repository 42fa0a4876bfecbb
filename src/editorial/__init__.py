"""
Editorial backend

CRUD over articles, categories, networks and notifications stored in a
single JSON document, with a filtering/paginating article query engine
and a partial-failure bulk import pipeline.
"""

__version__ = "0.1.0"

from editorial.core.config import settings
from editorial.core.types import (
    Article,
    ArticleStatus,
    Category,
    Network,
    Notification,
)
from editorial.storage.document import DocumentStore

__all__ = [
    "settings",
    "Article",
    "ArticleStatus",
    "Category",
    "Network",
    "Notification",
    "DocumentStore",
]
