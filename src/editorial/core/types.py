"""
Core type definitions for the editorial backend.

These types represent the persisted document:
- Article, Category, Network, Notification (records)
- Database (the whole-store snapshot)

plus the validated inputs accepted by the services and the result
shapes they return. Attributes are snake_case; the persisted document and
HTTP payloads use camelCase aliases.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, ClassVar, Generic, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# ============================================
# Enums
# ============================================

class ArticleStatus(str, Enum):
    """Editorial lifecycle of an article."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class DeliveryStatus(str, Enum):
    """Outcome of handing a notification email to a sender."""
    SENT = "sent"
    FAILED = "failed"
    PENDING = "pending"


class SortField(str, Enum):
    """Article fields the query engine can sort on."""
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    PUBLISHED_AT = "publishedAt"
    TITLE = "title"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ============================================
# Field helpers
# ============================================

_http_url = TypeAdapter(HttpUrl)
_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _check_url(value: str) -> str:
    """Validate an http(s) URL but keep the caller's spelling."""
    try:
        _http_url.validate_python(value)
    except PydanticValidationError:
        raise ValueError("must be a valid URL") from None
    return value


def _check_color(value: str) -> str:
    if not _HEX_COLOR.match(value):
        raise ValueError("Color must be a valid hex code (e.g. #FF0000)")
    return value


def _as_utc(value: datetime) -> datetime:
    # naive timestamps are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError("timestamp out of range") from None


UrlStr = Annotated[str, AfterValidator(_check_url)]
HexColor = Annotated[str, AfterValidator(_check_color)]
Timestamp = Annotated[datetime, AfterValidator(_as_utc)]


class CamelModel(BaseModel):
    """Base for every model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )


class PartialModel(CamelModel):
    """
    Base for partial-update inputs.

    Fields listed in ``NON_NULLABLE`` may be omitted but not sent as null.
    """

    NON_NULLABLE: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in self.NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def changes(self) -> dict:
        """Fields explicitly supplied by the caller."""
        return self.model_dump(exclude_unset=True)


# ============================================
# Records
# ============================================

class Category(CamelModel):
    """A topical category articles can be filed under."""

    id: str
    name: str
    slug: str
    description: str | None = None
    color: str | None = None
    created_at: Timestamp
    updated_at: Timestamp


class Network(CamelModel):
    """A publication network an article can belong to."""

    id: str
    name: str
    slug: str
    description: str | None = None
    logo_url: str | None = None
    created_at: Timestamp
    updated_at: Timestamp


class Article(CamelModel):
    """An editorial article."""

    id: str
    title: str
    slug: str
    """Unique across all articles."""

    excerpt: str
    content: str
    status: ArticleStatus = ArticleStatus.DRAFT
    featured: bool = False

    category_ids: list[str] = Field(default_factory=list)
    """Every id must resolve to an existing category."""

    network_id: str | None = None
    author_name: str
    cover_image_url: str | None = None

    published_at: Timestamp | None = None
    """Set the first time the article is published; never cleared afterwards."""

    created_at: Timestamp
    updated_at: Timestamp


class Notification(CamelModel):
    """An entry in the notification feed, with optional delivery metadata."""

    id: str
    type: NotificationType
    title: str
    message: str
    article_id: str | None = None
    read: bool = False
    created_at: Timestamp

    recipients: list[str] | None = None
    recipient_count: int | None = None
    subject: str | None = None
    html: str | None = None
    sent_at: Timestamp | None = None
    status: DeliveryStatus | None = None


class Database(CamelModel):
    """The whole-store snapshot: read and written as one unit."""

    categories: list[Category] = Field(default_factory=list)
    networks: list[Network] = Field(default_factory=list)
    articles: list[Article] = Field(default_factory=list)
    notifications: list[Notification] = Field(default_factory=list)


# ============================================
# Inputs
# ============================================

class ArticleCreate(CamelModel):
    title: str = Field(min_length=3, max_length=300)
    excerpt: str = Field(min_length=10, max_length=1000)
    content: str = Field(min_length=10)
    status: ArticleStatus = ArticleStatus.DRAFT
    featured: bool = False
    category_ids: list[str] = Field(default_factory=list)
    network_id: str | None = None
    author_name: str = Field(min_length=2, max_length=200)
    cover_image_url: UrlStr | None = None
    published_at: Timestamp | None = None


class ArticleUpdate(PartialModel):
    NON_NULLABLE = (
        "title", "excerpt", "content", "status",
        "featured", "category_ids", "author_name",
    )

    title: str | None = Field(None, min_length=3, max_length=300)
    excerpt: str | None = Field(None, min_length=10, max_length=1000)
    content: str | None = Field(None, min_length=10)
    status: ArticleStatus | None = None
    featured: bool | None = None
    category_ids: list[str] | None = None
    network_id: str | None = None
    author_name: str | None = Field(None, min_length=2, max_length=200)
    cover_image_url: UrlStr | None = None
    published_at: Timestamp | None = None


class StatusPatch(CamelModel):
    status: ArticleStatus


class ArticleFilters(CamelModel):
    """Query parameters for the article list."""

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    search: str | None = None
    status: ArticleStatus | None = None
    category_ids: list[str] | None = None
    """Article must carry ALL of these categories."""

    network_id: str | None = None
    featured: bool | None = None
    sort_by: SortField = SortField.CREATED_AT
    sort_dir: SortDirection = SortDirection.DESC

    @field_validator("category_ids", mode="before")
    @classmethod
    def split_csv(cls, value):
        # "a,b" from a query string
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


class CategoryCreate(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    description: str | None = Field(None, max_length=500)
    color: HexColor | None = None


class CategoryUpdate(PartialModel):
    NON_NULLABLE = ("name",)

    name: str | None = Field(None, min_length=2, max_length=100)
    description: str | None = Field(None, max_length=500)
    color: HexColor | None = None


class NetworkCreate(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    slug: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    logo_url: UrlStr | None = None


class NetworkUpdate(PartialModel):
    NON_NULLABLE = ("name", "slug")

    name: str | None = Field(None, min_length=2, max_length=100)
    slug: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    logo_url: UrlStr | None = None


# ============================================
# Results
# ============================================

T = TypeVar("T")


class Page(CamelModel, Generic[T]):
    """One page of a filtered, sorted collection."""

    items: list[T]
    page: int
    limit: int
    total: int
    """Size of the filtered set before pagination."""

    total_pages: int


class ImportRecordError(CamelModel):
    index: int
    """Position of the rejected record in the submitted list."""

    error: str


class ImportResult(CamelModel):
    imported: int
    skipped: int
    total: int
    errors: list[ImportRecordError] = Field(default_factory=list)
    articles: list[Article] = Field(default_factory=list)


class NotifyResult(CamelModel):
    message: str
    notification: Notification
    email_preview: str
