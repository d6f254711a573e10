"""Product domain models and API schemas."""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

_URL_ADAPTER = TypeAdapter(AnyUrl)

RequiredText = Annotated[str, Field(min_length=1, strict=True)]


class ProductCategory(str, Enum):
    """Fixed set of catalog categories."""

    MEN = "men"
    WOMEN = "women"
    ELECTRONICS = "electronics"
    JEWELRY = "jewelry"


class ProductFields(BaseModel):
    """User-supplied product attributes, keyed by their camelCase wire names."""

    model_config = ConfigDict(alias_generator=to_camel)

    title: RequiredText = Field(..., description="The title of the product")
    description: RequiredText = Field(..., description="The content of the product")
    category: ProductCategory
    image_url: RequiredText = Field(..., description="The URL of the product's image")
    price: int | float = Field(..., description="The price of the product")
    creator: RequiredText = Field(..., description="The creator of the product")

    @field_validator("image_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        # Keep the caller's spelling; AnyUrl would normalise it.
        try:
            _URL_ADAPTER.validate_python(value)
        except ValidationError as exc:
            raise PydanticCustomError("invalid_url", "Invalid url") from exc
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _check_price(cls, value: Any) -> int | float:
        # No coercion: bools and numeric strings are rejected, ints stay ints.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PydanticCustomError("number_type", "Input should be a valid number")
        if not math.isfinite(value):
            raise PydanticCustomError("finite_number", "Input should be a finite number")
        if value < 1:
            raise PydanticCustomError(
                "greater_than_equal", "Input should be greater than or equal to 1"
            )
        return value


class ValidatedProduct(ProductFields):
    """Immutable payload that passed schema validation."""

    model_config = ConfigDict(alias_generator=to_camel, frozen=True)

    def to_document(self) -> dict[str, Any]:
        """Return the fields as they are stored in MongoDB."""
        return self.model_dump(mode="json", by_alias=True)


class Product(ProductFields):
    """A persisted product as returned by the API."""

    id: str = Field(..., description="The ID of the product")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> Product:
        data = dict(document)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class FieldError(BaseModel):
    """A validation failure tied to a single input field."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="The field that caused the validation error")
    message: str = Field(..., description="The validation error message")


class ErrorResponse(BaseModel):
    """Generic error envelope."""

    error: str


class ValidationErrorResponse(BaseModel):
    """Envelope returned when a payload fails schema validation."""

    errors: list[FieldError]


class ProductUpdatedResponse(BaseModel):
    message: str
    product: Product


class ProductDeletedResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel)

    message: str
    deleted_product: Product
