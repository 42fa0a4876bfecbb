"""
Error taxonomy shared by every service.

Each error carries a ``kind`` so bindings (HTTP, CLI) can branch on it
without inspecting message text:

- not_found      → an id does not resolve to a record
- validation     → malformed field or unknown foreign-key reference
- conflict       → uniqueness collision, or a delete blocked by references
- payload_shape  → an import payload that is not a (wrapped) non-empty list

Per-record import failures are never raised; see ``ImportRecordError``.
"""

from typing import Literal

from pydantic import ValidationError as PydanticValidationError


ErrorKind = Literal["not_found", "validation", "conflict", "payload_shape"]


class EditorialError(Exception):
    """Base class for all errors surfaced by the services."""

    kind: ErrorKind = "validation"

    def __init__(self, message: str, details: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "kind": self.kind}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(EditorialError):
    kind = "not_found"


class ValidationError(EditorialError):
    kind = "validation"


class ConflictError(EditorialError):
    kind = "conflict"


class PayloadShapeError(EditorialError):
    kind = "payload_shape"


def format_validation_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    """Group pydantic error messages by dotted field path."""
    formatted: dict[str, list[str]] = {}
    for error in exc.errors():
        key = ".".join(str(part) for part in error["loc"]) or "root"
        formatted.setdefault(key, []).append(error["msg"])
    return formatted


def summarize_validation_errors(exc: PydanticValidationError) -> str:
    """One-line summary of a pydantic error, e.g. ``[title] String should ...``."""
    return "; ".join(
        f"[{field}] {message}"
        for field, messages in format_validation_errors(exc).items()
        for message in messages
    )
