"""
FastAPI backend for the editorial UI.

Provides REST endpoints for:
- Articles (list/filter/paginate, CRUD, status patch, notify)
- Categories and networks
- Notifications
- Bulk import

Every endpoint delegates to editorial.services with the store returned by
``get_store``; error kinds map onto HTTP status codes.
"""

from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from editorial import __version__
from editorial.core.config import settings, get_logger
from editorial.core.errors import EditorialError, ValidationError
from editorial.core.types import (
    Article,
    ArticleCreate,
    ArticleUpdate,
    Category,
    CategoryCreate,
    CategoryUpdate,
    ImportResult,
    Network,
    NetworkCreate,
    NetworkUpdate,
    Notification,
    NotificationType,
    NotifyResult,
    Page,
    StatusPatch,
)
from editorial.core.utils import utcnow
from editorial import services
from editorial.services.notifications import Sender
from editorial.storage.document import DocumentStore

logger = get_logger("api")

# Initialize app
app = FastAPI(
    title="Editorial API",
    description="Articles, categories, networks, notifications and bulk import",
    version=__version__,
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


STATUS_CODES = {
    "not_found": 404,
    "validation": 400,
    "conflict": 409,
    "payload_shape": 400,
}


def get_store() -> DocumentStore:
    """Store handle for one request. Overridden in tests."""
    return DocumentStore(settings.data_file)


def get_sender() -> Sender | None:
    """Email sender for article notifications. None records them as pending."""
    return None


def _http_error(e: EditorialError) -> HTTPException:
    return HTTPException(status_code=STATUS_CODES[e.kind], detail=e.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed bodies and query params like any other validation error."""
    details: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
        details.setdefault(".".join(loc) or "root", []).append(error["msg"])
    error = ValidationError("Validation failed", details)
    return JSONResponse(status_code=STATUS_CODES[error.kind], content={"detail": error.to_dict()})


# ==========================================
# Request Models
# ==========================================

class NotifyRequest(BaseModel):
    recipients: list[str] | None = None


# ==========================================
# Health
# ==========================================

@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "timestamp": utcnow().isoformat()}


# ==========================================
# Article Endpoints
# ==========================================

@app.get("/api/articles")
def list_articles(
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    status: str | None = None,
    category_ids: str | None = Query(None, alias="categoryIds"),
    network_id: str | None = Query(None, alias="networkId"),
    featured: bool | None = None,
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_dir: str = Query("desc", alias="sortDir"),
    store: DocumentStore = Depends(get_store),
) -> Page[Article]:
    """List articles with filters, sort and pagination."""
    filters = {
        "page": page,
        "limit": limit,
        "search": search,
        "status": status,
        "category_ids": category_ids,
        "network_id": network_id,
        "featured": featured,
        "sort_by": sort_by,
        "sort_dir": sort_dir,
    }
    try:
        return services.query_articles(store, filters)
    except EditorialError as e:
        raise _http_error(e)


@app.get("/api/articles/{article_id}")
def get_article(article_id: str, store: DocumentStore = Depends(get_store)) -> Article:
    try:
        return services.get_article(store, article_id)
    except EditorialError as e:
        raise _http_error(e)


@app.post("/api/articles", status_code=201)
def create_article(request: ArticleCreate, store: DocumentStore = Depends(get_store)) -> Article:
    try:
        return services.create_article(store, request)
    except EditorialError as e:
        raise _http_error(e)


@app.put("/api/articles/{article_id}")
def update_article(
    article_id: str,
    request: ArticleUpdate,
    store: DocumentStore = Depends(get_store),
) -> Article:
    try:
        return services.update_article(store, article_id, request)
    except EditorialError as e:
        raise _http_error(e)


@app.delete("/api/articles/{article_id}", status_code=204)
def delete_article(article_id: str, store: DocumentStore = Depends(get_store)):
    try:
        services.delete_article(store, article_id)
    except EditorialError as e:
        raise _http_error(e)
    return Response(status_code=204)


@app.patch("/api/articles/{article_id}/status")
def patch_article_status(
    article_id: str,
    request: StatusPatch,
    store: DocumentStore = Depends(get_store),
) -> Article:
    try:
        return services.patch_article_status(store, article_id, request.status)
    except EditorialError as e:
        raise _http_error(e)


@app.post("/api/articles/{article_id}/notify")
def notify_article(
    article_id: str,
    request: NotifyRequest | None = None,
    store: DocumentStore = Depends(get_store),
    sender: Sender | None = Depends(get_sender),
) -> NotifyResult:
    """Record a notification for an article and return the email preview."""
    recipients = request.recipients if request else None
    try:
        return services.notify_article(store, article_id, recipients=recipients, sender=sender)
    except EditorialError as e:
        raise _http_error(e)


# ==========================================
# Category Endpoints
# ==========================================

@app.get("/api/categories")
def list_categories(store: DocumentStore = Depends(get_store)) -> list[Category]:
    return services.list_categories(store)


@app.get("/api/categories/{category_id}")
def get_category(category_id: str, store: DocumentStore = Depends(get_store)) -> Category:
    try:
        return services.get_category(store, category_id)
    except EditorialError as e:
        raise _http_error(e)


@app.post("/api/categories", status_code=201)
def create_category(request: CategoryCreate, store: DocumentStore = Depends(get_store)) -> Category:
    try:
        return services.create_category(store, request)
    except EditorialError as e:
        raise _http_error(e)


@app.put("/api/categories/{category_id}")
def update_category(
    category_id: str,
    request: CategoryUpdate,
    store: DocumentStore = Depends(get_store),
) -> Category:
    try:
        return services.update_category(store, category_id, request)
    except EditorialError as e:
        raise _http_error(e)


@app.delete("/api/categories/{category_id}", status_code=204)
def delete_category(category_id: str, store: DocumentStore = Depends(get_store)):
    try:
        services.delete_category(store, category_id)
    except EditorialError as e:
        raise _http_error(e)
    return Response(status_code=204)


# ==========================================
# Network Endpoints
# ==========================================

@app.get("/api/networks")
def list_networks(store: DocumentStore = Depends(get_store)) -> list[Network]:
    return services.list_networks(store)


@app.get("/api/networks/{network_id}")
def get_network(network_id: str, store: DocumentStore = Depends(get_store)) -> Network:
    try:
        return services.get_network(store, network_id)
    except EditorialError as e:
        raise _http_error(e)


@app.post("/api/networks", status_code=201)
def create_network(request: NetworkCreate, store: DocumentStore = Depends(get_store)) -> Network:
    try:
        return services.create_network(store, request)
    except EditorialError as e:
        raise _http_error(e)


@app.put("/api/networks/{network_id}")
def update_network(
    network_id: str,
    request: NetworkUpdate,
    store: DocumentStore = Depends(get_store),
) -> Network:
    try:
        return services.update_network(store, network_id, request)
    except EditorialError as e:
        raise _http_error(e)


@app.delete("/api/networks/{network_id}", status_code=204)
def delete_network(network_id: str, store: DocumentStore = Depends(get_store)):
    try:
        services.delete_network(store, network_id)
    except EditorialError as e:
        raise _http_error(e)
    return Response(status_code=204)


# ==========================================
# Notification Endpoints
# ==========================================

@app.get("/api/notifications")
def list_notifications(store: DocumentStore = Depends(get_store)) -> list[Notification]:
    return services.list_notifications(store)


# ==========================================
# Import Endpoint
# ==========================================

@app.post("/api/import")
def import_articles(
    payload: Any = Body(...),
    store: DocumentStore = Depends(get_store),
) -> ImportResult:
    """Import a batch of articles; rejected records are reported, not raised."""
    try:
        result = services.import_articles(store, payload)
    except EditorialError as e:
        logger.warning(f"Import rejected: {e.message}")
        raise _http_error(e)

    services.create_notification(
        store,
        type=NotificationType.SUCCESS if not result.errors else NotificationType.WARNING,
        title="Article import finished",
        message=f"{result.imported} article(s) imported. {result.skipped} skipped.",
    )
    return result


# ==========================================
# Run with uvicorn
# ==========================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
