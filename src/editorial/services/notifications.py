"""
Notification services.

- create_notification: append a notification (newest first)
- list_notifications: all notifications, newest first
- notify_article: render an article email, hand it to an optional
  sender, and record the outcome as notification metadata
"""

from collections.abc import Callable
from datetime import datetime
from html import escape

from editorial.core.config import settings
from editorial.core.types import (
    Article,
    Database,
    DeliveryStatus,
    Notification,
    NotificationType,
    NotifyResult,
)
from editorial.core.utils import generate_id, utcnow
from editorial.services.base import find_index, logger
from editorial.storage.document import DocumentStore


Sender = Callable[[list[str], str, str], None]
"""Delivers an email: ``sender(recipients, subject, html)``. Raises on failure."""


def _add_notification(
    db: Database,
    type: NotificationType | str,
    title: str,
    message: str,
    article_id: str | None = None,
    recipients: list[str] | None = None,
    subject: str | None = None,
    html: str | None = None,
    sent_at: datetime | None = None,
    status: DeliveryStatus | str | None = None,
) -> Notification:
    """Put a new notification at the head of the in-memory feed."""
    notification = Notification(
        id=generate_id("notif"),
        type=type,
        title=title,
        message=message,
        article_id=article_id,
        read=False,
        created_at=utcnow(),
        recipients=recipients,
        recipient_count=len(recipients) if recipients is not None else None,
        subject=subject,
        html=html,
        sent_at=sent_at,
        status=status,
    )

    db.notifications.insert(0, notification)
    logger.info(f"Created {notification.type} notification {notification.id}")
    return notification


def create_notification(
    store: DocumentStore,
    type: NotificationType | str,
    title: str,
    message: str,
    article_id: str | None = None,
    recipients: list[str] | None = None,
    subject: str | None = None,
    html: str | None = None,
    sent_at: datetime | None = None,
    status: DeliveryStatus | str | None = None,
) -> Notification:
    """Record a notification. Delivery fields are optional metadata."""
    db = store.read()
    notification = _add_notification(
        db,
        type=type,
        title=title,
        message=message,
        article_id=article_id,
        recipients=recipients,
        subject=subject,
        html=html,
        sent_at=sent_at,
        status=status,
    )
    store.write(db)
    return notification


def list_notifications(store: DocumentStore) -> list[Notification]:
    return sorted(store.read().notifications, key=lambda n: n.created_at, reverse=True)


def render_article_email(
    article: Article,
    network_name: str | None = None,
    base_url: str | None = None,
    heading: str = "New editorial publication",
) -> str:
    """Build the HTML body announcing an article."""
    base_url = (base_url or settings.public_base_url).rstrip("/")
    article_url = f"{base_url}/articles/{article.slug}"
    published = (article.published_at or utcnow()).strftime("%d %B %Y")
    network_line = (
        f'<p class="network">{escape(network_name)}</p>' if network_name else ""
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <title>{escape(heading)}</title>
</head>
<body>
  <div class="wrapper">
    <div class="header">
      <h1>{escape(heading)}</h1>
      {network_line}
    </div>
    <div class="body">
      <h2>{escape(article.title)}</h2>
      <p class="meta">By {escape(article.author_name)} &middot; {published}</p>
      <p class="excerpt">{escape(article.excerpt)}</p>
      <a class="cta" href="{escape(article_url, quote=True)}">Read the article</a>
    </div>
  </div>
</body>
</html>
"""


def notify_article(
    store: DocumentStore,
    article_id: str,
    recipients: list[str] | None = None,
    sender: Sender | None = None,
) -> NotifyResult:
    """
    Announce an article.

    The notification is recorded whatever happens downstream: ``sent`` when
    the sender succeeds, ``failed`` when it raises, ``pending`` when there is
    no sender or no recipient.

    Raises:
        NotFoundError: unknown article id
    """
    db = store.read()
    article = db.articles[find_index(db.articles, article_id, "Article")]

    network_name = None
    if article.network_id:
        network_name = next(
            (n.name for n in db.networks if n.id == article.network_id), None
        )

    subject = f"New publication: {article.title}"
    html = render_article_email(article, network_name)

    status = DeliveryStatus.PENDING
    sent_at = None
    if sender is not None and recipients:
        try:
            sender(recipients, subject, html)
            status = DeliveryStatus.SENT
            sent_at = utcnow()
        except Exception as e:
            logger.warning(f"Sending notification for article {article_id} failed: {e}")
            status = DeliveryStatus.FAILED

    notification = _add_notification(
        db,
        type=NotificationType.SUCCESS if status != DeliveryStatus.FAILED else NotificationType.ERROR,
        title="Notification sent" if status == DeliveryStatus.SENT else "Notification recorded",
        message=f'A notification was created for the article "{article.title}"',
        article_id=article.id,
        recipients=recipients,
        subject=subject,
        html=html,
        sent_at=sent_at,
        status=status,
    )
    store.write(db)

    return NotifyResult(
        message="Notification created successfully",
        notification=notification,
        email_preview=html,
    )
