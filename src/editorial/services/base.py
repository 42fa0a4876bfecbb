"""
Services - Base module with input parsing and shared lookups.

This module provides the foundation for all services:
- parse_input: turn caller data into a validated input model
- find_index: locate a record by id or raise NotFoundError
- validate_references: foreign-key checks for articles
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from editorial.core.config import get_logger
from editorial.core.errors import (
    NotFoundError,
    ValidationError,
    format_validation_errors,
)
from editorial.core.types import Database

logger = get_logger("services")

M = TypeVar("M", bound=BaseModel)


def parse_input(model: type[M], data: M | dict[str, Any]) -> M:
    """
    Validate caller data against an input model.

    Already-validated instances pass through unchanged. Pydantic failures
    become a ValidationError whose details are keyed by field path.
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            "Validation error",
            details=format_validation_errors(e),
        ) from e


def find_index(items: list, record_id: str, label: str) -> int:
    """Position of the record with ``record_id`` in ``items``."""
    for index, item in enumerate(items):
        if item.id == record_id:
            return index
    raise NotFoundError(f'{label} with id "{record_id}" not found')


def validate_references(
    db: Database,
    category_ids: list[str] | None,
    network_id: str | None,
) -> None:
    """
    Check that every category id and the network id resolve.

    Raises:
        ValidationError naming the unknown id(s)
    """
    if category_ids:
        known = {c.id for c in db.categories}
        invalid = [cid for cid in category_ids if cid not in known]
        if invalid:
            raise ValidationError(f"Invalid category id(s): {', '.join(invalid)}")

    if network_id and not any(n.id == network_id for n in db.networks):
        raise ValidationError(f'Invalid network id: "{network_id}"')
