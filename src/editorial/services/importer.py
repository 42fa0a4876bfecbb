"""
Bulk article import.

The pipeline runs in three stages:

1. parse_payload   - accept a bare list of records or an object wrapping
                     one under "articles"; anything else (or an empty list)
                     fails the whole call with PayloadShapeError.
2. ImportRecord    - coerce each record's boundary spellings into the
                     canonical article fields (see the model for every rule).
3. import_articles - validate each record on its own, resolve references,
                     assign a slug that is unique against the store AND the
                     records accepted earlier in the batch, fill missing
                     excerpt/author, and persist all accepted records with a
                     single write.

A rejected record never affects the others; its position in the submitted
list and the reason come back in ``ImportResult.errors``.
"""

from dataclasses import dataclass
from typing import Annotated, Any, Literal

from pydantic import (
    BeforeValidator,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
)

from editorial.core.errors import (
    PayloadShapeError,
    ValidationError,
    summarize_validation_errors,
)
from editorial.core.types import (
    Article,
    ArticleStatus,
    CamelModel,
    Database,
    ImportRecordError,
    ImportResult,
    Timestamp,
    UrlStr,
)
from editorial.core.utils import (
    generate_id,
    slugify,
    strip_markup,
    touch,
    unique_slug,
)
from editorial.services.base import logger, validate_references
from editorial.storage.document import DocumentStore


EXCERPT_LENGTH = 200
"""Characters kept when an excerpt is derived from the content."""

DEFAULT_AUTHOR = "Import"
"""Author name given to imported records that carry none."""


# ============================================
# Stage 1: payload shape
# ============================================

@dataclass
class RawPayload:
    """The accepted payload shapes, tagged."""

    shape: Literal["list", "wrapped"]
    records: list[Any]


def parse_payload(payload: Any) -> RawPayload:
    """
    Detect the payload shape.

    Raises:
        PayloadShapeError: not a list / {"articles": [...]}, or no records
    """
    if isinstance(payload, list):
        raw = RawPayload(shape="list", records=payload)
    elif isinstance(payload, dict) and isinstance(payload.get("articles"), list):
        raw = RawPayload(shape="wrapped", records=payload["articles"])
    else:
        raise PayloadShapeError(
            'Invalid import payload: expected a list of articles or an object with an "articles" list'
        )

    if not raw.records:
        raise PayloadShapeError("Invalid import payload: at least one article is required")
    return raw


# ============================================
# Stage 2: per-record coercion
# ============================================

def _to_reference(value: Any) -> Any:
    """Identifiers may arrive as numbers; 3 and 3.0 both become "3"."""
    if isinstance(value, bool):
        raise ValueError("must be a string or a number")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    return value


Reference = Annotated[str, BeforeValidator(_to_reference)]


class ImportRecord(CamelModel):
    """
    One import record after coercion.

    Coercion rules:
    - excerpt, summary, authorName, slug, imageUrl, coverImageUrl,
      publishedAt, networkId, categoryId: "" is treated as absent
    - status: absent or null means draft
    - featured: bool as is; number -> != 0; string -> "true" or "1";
      absent or null -> False
    - categoryId: string or number -> string
    - categoryIds: list of strings/numbers, a single string/number, or null
      -> list of strings
    - networkId: string or number -> string
    - imageUrl is the fallback spelling of coverImageUrl
    """

    title: str = Field(min_length=3, max_length=300)
    content: str = Field(min_length=10)

    excerpt: str | None = None
    summary: str | None = None
    author_name: str | None = None
    slug: str | None = None

    status: ArticleStatus = ArticleStatus.DRAFT
    featured: bool = False

    category_id: Reference | None = None
    category_ids: list[Reference] = Field(default_factory=list)
    network_id: Reference | None = None

    image_url: UrlStr | None = None
    cover_image_url: UrlStr | None = None
    published_at: Timestamp | None = None

    @field_validator(
        "excerpt", "summary", "author_name", "slug", "image_url",
        "cover_image_url", "published_at", "network_id", "category_id",
        mode="before",
    )
    @classmethod
    def blank_as_missing(cls, value):
        if isinstance(value, str) and value == "":
            return None
        return value

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value):
        return ArticleStatus.DRAFT if value is None else value

    @field_validator("featured", mode="before")
    @classmethod
    def coerce_featured(cls, value):
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        if isinstance(value, str):
            return value in ("true", "1")
        raise ValueError("must be a boolean, a number or a string")

    @field_validator("category_ids", mode="before")
    @classmethod
    def coerce_category_ids(cls, value):
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]

    def resolved_category_ids(self) -> list[str]:
        """Explicit list first, then the singular reference, else none."""
        if self.category_ids:
            return list(self.category_ids)
        if self.category_id:
            return [self.category_id]
        return []

    def resolved_excerpt(self) -> str:
        for candidate in (self.excerpt, self.summary):
            if candidate and candidate.strip():
                return candidate.strip()
        return strip_markup(self.content)[:EXCERPT_LENGTH].strip()

    def resolved_author(self) -> str:
        if self.author_name and self.author_name.strip():
            return self.author_name.strip()
        return DEFAULT_AUTHOR


def coerce_record(item: Any) -> ImportRecord:
    """Stage 2 for one record; failures become a one-line ValidationError."""
    try:
        return ImportRecord.model_validate(item)
    except PydanticValidationError as e:
        raise ValidationError(summarize_validation_errors(e)) from e


# ============================================
# Stage 3: build and persist
# ============================================

def build_article(record: ImportRecord, db: Database, taken_slugs: set[str]) -> Article:
    """
    Turn a coerced record into an article.

    ``taken_slugs`` must hold the stored slugs plus those assigned earlier in
    the batch; the caller adds the returned article's slug once accepted.

    Raises:
        ValidationError: unknown category or network reference
    """
    category_ids = record.resolved_category_ids()
    validate_references(db, category_ids, record.network_id)

    base = slugify(record.slug) if record.slug else slugify(record.title)
    slug = unique_slug(base, taken_slugs)

    now = touch()
    published_at = record.published_at
    if published_at is None and record.status == ArticleStatus.PUBLISHED:
        published_at = now

    return Article(
        id=generate_id("art"),
        title=record.title,
        slug=slug,
        excerpt=record.resolved_excerpt(),
        content=record.content,
        status=record.status,
        featured=record.featured,
        category_ids=category_ids,
        network_id=record.network_id,
        author_name=record.resolved_author(),
        cover_image_url=record.cover_image_url or record.image_url,
        published_at=published_at,
        created_at=now,
        updated_at=now,
    )


def import_articles(store: DocumentStore, payload: Any) -> ImportResult:
    """
    Import a batch of articles with per-record failure isolation.

    The store is read once, and written once after the loop only if at
    least one record was accepted.

    Raises:
        PayloadShapeError: the payload as a whole is unusable; nothing is
            read or written
    """
    raw = parse_payload(payload)
    db = store.read()

    taken_slugs = {a.slug for a in db.articles}
    accepted: list[Article] = []
    errors: list[ImportRecordError] = []

    for index, item in enumerate(raw.records):
        try:
            record = coerce_record(item)
            article = build_article(record, db, taken_slugs)
        except ValidationError as e:
            logger.warning(f"Import record {index} rejected: {e.message}")
            errors.append(ImportRecordError(index=index, error=e.message))
            continue

        taken_slugs.add(article.slug)
        db.articles.append(article)
        accepted.append(article)

    if accepted:
        store.write(db)

    logger.info(
        f"Import finished ({raw.shape} payload): {len(accepted)} imported, "
        f"{len(errors)} skipped of {len(raw.records)}"
    )

    return ImportResult(
        imported=len(accepted),
        skipped=len(errors),
        total=len(raw.records),
        errors=errors,
        articles=accepted,
    )
