"""Routes for creating, reading, updating and deleting products."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse

from src.models.outcomes import NotFound, ValidationFailure
from src.models.product import (
    ErrorResponse,
    FieldError,
    Product,
    ProductDeletedResponse,
    ProductUpdatedResponse,
    ValidatedProduct,
    ValidationErrorResponse,
)
from src.services.product_repository import RepositoryDependency
from src.services.storage.mongo_connection import ConnectionDependency
from src.services.validation import is_valid_id, validate_product

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])

_BAD_ID = {"model": ErrorResponse, "description": "Invalid ID format"}
_NOT_FOUND = {"model": ErrorResponse, "description": "Product not found"}
_INVALID_BODY = {
    "model": ValidationErrorResponse,
    "description": "Validation error",
}
_SERVER_ERROR = {"model": ErrorResponse, "description": "Internal server error"}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _field_errors(errors: tuple[FieldError, ...]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": [error.model_dump() for error in errors]},
    )


def _not_found() -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, "Product not found")


def _invalid_id() -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid ID format")


async def _read_product(request: Request) -> ValidatedProduct | JSONResponse:
    """Decode the JSON body and run it through the schema validator."""
    try:
        body: Any = await request.json()
    except ValueError:
        return _error(status.HTTP_400_BAD_REQUEST, "Request body must be valid JSON")

    result = validate_product(body)
    if isinstance(result, ValidationFailure):
        logger.info(
            "Rejected product payload",
            extra={"fields": [error.field for error in result.errors]},
        )
        return _field_errors(result.errors)
    return result


@router.get(
    "",
    response_model=list[Product],
    summary="Retrieve all products",
    responses={500: _SERVER_ERROR},
)
async def list_products(
    connection: ConnectionDependency,
    repository: RepositoryDependency,
) -> JSONResponse:
    """Fetch every product; an empty catalog yields an empty array."""
    if await connection.ensure_connected() is not None:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to retrieve products")

    products = await repository.list_all()
    if not isinstance(products, list):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to retrieve products")

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=[product.to_response() for product in products],
    )


@router.post(
    "",
    response_model=str,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    responses={400: _INVALID_BODY, 500: _SERVER_ERROR},
)
async def create_product(
    request: Request,
    connection: ConnectionDependency,
    repository: RepositoryDependency,
) -> JSONResponse:
    """Validate the payload and persist it as a new product."""
    validated = await _read_product(request)
    if isinstance(validated, JSONResponse):
        return validated

    if await connection.ensure_connected() is not None:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create product")

    created = await repository.create(validated)
    if not isinstance(created, Product):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create product")

    return JSONResponse(
        status_code=status.HTTP_201_CREATED, content="product has been created"
    )


@router.delete(
    "",
    summary="Reject deletes without a product ID",
    responses={400: {"model": ErrorResponse, "description": "ID is required"}},
)
async def delete_without_id() -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, "ID is required")


@router.get(
    "/dashboard",
    response_model=list[Product],
    summary="Retrieve a list of products by creator",
    description=(
        "Fetches products filtered by the specified creator. "
        "If no creator is provided, all products are returned."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Empty creator parameter"},
        500: _SERVER_ERROR,
    },
)
async def list_products_by_creator(
    connection: ConnectionDependency,
    repository: RepositoryDependency,
    creator: str | None = Query(None, description="The creator to filter by"),
) -> JSONResponse:
    if creator == "":
        return _error(status.HTTP_400_BAD_REQUEST, "Creator is required")

    if await connection.ensure_connected() is not None:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch products")

    products = await repository.list_by_creator(creator)
    if not isinstance(products, list):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch products")

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=[product.to_response() for product in products],
    )


@router.get(
    "/{product_id}",
    response_model=Product,
    summary="Retrieve a product by ID",
    responses={400: _BAD_ID, 404: _NOT_FOUND, 500: _SERVER_ERROR},
)
async def get_product(
    product_id: str,
    connection: ConnectionDependency,
    repository: RepositoryDependency,
) -> JSONResponse:
    if not is_valid_id(product_id):
        return _invalid_id()

    if await connection.ensure_connected() is not None:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch product")

    product = await repository.get_by_id(product_id)
    if isinstance(product, NotFound):
        return _not_found()
    if not isinstance(product, Product):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch product")

    return JSONResponse(status_code=status.HTTP_200_OK, content=product.to_response())


@router.put(
    "/{product_id}",
    response_model=ProductUpdatedResponse,
    summary="Update a product by ID",
    responses={
        400: {"description": "Invalid input or ID format"},
        404: _NOT_FOUND,
        500: _SERVER_ERROR,
    },
)
async def update_product(
    product_id: str,
    request: Request,
    connection: ConnectionDependency,
    repository: RepositoryDependency,
) -> JSONResponse:
    """Replace the supplied fields of a product.

    The identifier is checked before the body is read, and the body must
    satisfy the full product schema.
    """
    if not is_valid_id(product_id):
        return _invalid_id()

    validated = await _read_product(request)
    if isinstance(validated, JSONResponse):
        return validated

    if await connection.ensure_connected() is not None:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    updated = await repository.update_by_id(product_id, validated.to_document())
    if isinstance(updated, NotFound):
        return _not_found()
    if not isinstance(updated, Product):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "message": "Product updated successfully",
            "product": updated.to_response(),
        },
    )


@router.delete(
    "/{product_id}",
    response_model=ProductDeletedResponse,
    summary="Delete a product by ID",
    responses={400: _BAD_ID, 404: _NOT_FOUND, 500: _SERVER_ERROR},
)
async def delete_product(
    product_id: str,
    connection: ConnectionDependency,
    repository: RepositoryDependency,
) -> JSONResponse:
    """Remove a product and echo the document as it was before deletion."""
    if not product_id.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "ID is required")

    if not is_valid_id(product_id):
        return _invalid_id()

    if await connection.ensure_connected() is not None:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    deleted = await repository.delete_by_id(product_id)
    if isinstance(deleted, NotFound):
        return _not_found()
    if not isinstance(deleted, Product):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "message": "Product deleted successfully",
            "deletedProduct": deleted.to_response(),
        },
    )
