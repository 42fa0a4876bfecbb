"""
Services - every operation on the editorial document.

Each function takes the DocumentStore handle as its first argument and
performs one read and at most one write.
"""

from editorial.services.articles import (
    create_article,
    delete_article,
    filter_articles,
    get_article,
    patch_article_status,
    query_articles,
    update_article,
)
from editorial.services.categories import (
    create_category,
    delete_category,
    get_category,
    list_categories,
    update_category,
)
from editorial.services.importer import import_articles, parse_payload
from editorial.services.networks import (
    create_network,
    delete_network,
    get_network,
    list_networks,
    update_network,
)
from editorial.services.notifications import (
    create_notification,
    list_notifications,
    notify_article,
    render_article_email,
)

__all__ = [
    # Articles
    "query_articles",
    "filter_articles",
    "get_article",
    "create_article",
    "update_article",
    "delete_article",
    "patch_article_status",
    # Import
    "import_articles",
    "parse_payload",
    # Categories
    "list_categories",
    "get_category",
    "create_category",
    "update_category",
    "delete_category",
    # Networks
    "list_networks",
    "get_network",
    "create_network",
    "update_network",
    "delete_network",
    # Notifications
    "create_notification",
    "list_notifications",
    "notify_article",
    "render_article_email",
]
