"""Pure validators for product identifiers and payloads."""

from __future__ import annotations

import logging
from typing import Any

from bson import ObjectId
from pydantic import ValidationError

from src.models.outcomes import ValidationFailure
from src.models.product import FieldError, ValidatedProduct

logger = logging.getLogger(__name__)

_FIELD_LABELS = {
    "title": "Title",
    "description": "Description",
    "imageUrl": "Image URL",
    "creator": "Creator",
    "price": "Price",
    "category": "Category",
}
_REQUIRED_ERROR_TYPES = {"missing", "string_too_short"}


def is_valid_id(raw: Any) -> bool:
    """Return True when ``raw`` is a 24 character hexadecimal ObjectId string."""

    return isinstance(raw, str) and ObjectId.is_valid(raw)


def validate_product(payload: Any) -> ValidatedProduct | ValidationFailure:
    """Validate a decoded JSON body against the product schema.

    All violations are collected, one ``FieldError`` per offending field.
    Values are never coerced: ``"2000"`` is not a valid price.
    """

    if not isinstance(payload, dict):
        return ValidationFailure(
            errors=(FieldError(field="body", message="Expected a JSON object"),)
        )

    try:
        return ValidatedProduct.model_validate(payload)
    except ValidationError as exc:
        errors = tuple(_to_field_error(error) for error in exc.errors())
        logger.debug("Product payload rejected: %s", errors)
        return ValidationFailure(errors=errors)


def _to_field_error(error: dict[str, Any]) -> FieldError:
    location = error.get("loc") or ("body",)
    field = str(location[0])
    label = _FIELD_LABELS.get(field)

    if label and error["type"] in _REQUIRED_ERROR_TYPES:
        return FieldError(field=field, message=f"{label} is required")
    return FieldError(field=field, message=error["msg"])
