"""
Core module - Configuration, types, errors and identifier/slug utilities.
"""

from editorial.core.config import settings
from editorial.core.errors import (
    ConflictError,
    EditorialError,
    NotFoundError,
    PayloadShapeError,
    ValidationError,
)
from editorial.core.types import (
    Article,
    ArticleStatus,
    Category,
    Database,
    Network,
    Notification,
    NotificationType,
)
from editorial.core.utils import generate_id, slugify, unique_slug

__all__ = [
    "settings",
    "EditorialError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "PayloadShapeError",
    "Article",
    "ArticleStatus",
    "Category",
    "Database",
    "Network",
    "Notification",
    "NotificationType",
    "generate_id",
    "slugify",
    "unique_slug",
]
