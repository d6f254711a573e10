"""MongoDB-backed persistence for products."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Annotated, Any

from bson import ObjectId
from fastapi import Depends
from pydantic import ValidationError
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from src.config import settings
from src.models.outcomes import NotFound, RepositoryFailure
from src.models.product import Product, ValidatedProduct
from src.services.storage.mongo_connection import (
    ConnectionDependency,
    MongoConnectionManager,
)

logger = logging.getLogger(__name__)


class ProductRepository:
    """CRUD operations on the products collection.

    Callers must have a successful ``ensure_connected()`` on the connection
    manager before invoking any method. Identifiers are expected to be
    valid ObjectId strings.
    """

    def __init__(self, connection: MongoConnectionManager, collection_name: str):
        self._connection = connection
        self._collection_name = collection_name

    @property
    def _collection(self):
        return self._connection.database[self._collection_name]

    async def list_all(self) -> list[Product] | RepositoryFailure:
        return await self.list_by_creator(None)

    async def list_by_creator(
        self, creator: str | None
    ) -> list[Product] | RepositoryFailure:
        """Return products whose creator matches exactly; no filter returns all."""
        query = {"creator": creator} if creator else {}
        try:
            documents = await self._collection.find(query).to_list(length=None)
            return [Product.from_document(document) for document in documents]
        except (PyMongoError, ValidationError) as exc:
            return self._failure("list", exc)

    async def get_by_id(self, product_id: str) -> Product | NotFound | RepositoryFailure:
        try:
            document = await self._collection.find_one({"_id": ObjectId(product_id)})
        except PyMongoError as exc:
            return self._failure("get", exc)
        if document is None:
            return NotFound(product_id=product_id)
        return self._decode("get", document)

    async def create(self, validated: ValidatedProduct) -> Product | RepositoryFailure:
        now = datetime.now(UTC)
        document = {**validated.to_document(), "createdAt": now, "updatedAt": now}
        try:
            result = await self._collection.insert_one(document)
        except PyMongoError as exc:
            return self._failure("create", exc)
        document["_id"] = result.inserted_id
        logger.info("Created product %s", result.inserted_id)
        return self._decode("create", document)

    async def update_by_id(
        self, product_id: str, fields: Mapping[str, Any]
    ) -> Product | NotFound | RepositoryFailure:
        """Merge ``fields`` onto the stored document and return the updated product."""
        changes = {**fields, "updatedAt": datetime.now(UTC)}
        changes.pop("_id", None)
        try:
            document = await self._collection.find_one_and_update(
                {"_id": ObjectId(product_id)},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            return self._failure("update", exc)
        if document is None:
            return NotFound(product_id=product_id)
        logger.info("Updated product %s", product_id)
        return self._decode("update", document)

    async def delete_by_id(
        self, product_id: str
    ) -> Product | NotFound | RepositoryFailure:
        """Delete a product and return it as it was before removal."""
        try:
            document = await self._collection.find_one_and_delete(
                {"_id": ObjectId(product_id)}
            )
        except PyMongoError as exc:
            return self._failure("delete", exc)
        if document is None:
            return NotFound(product_id=product_id)
        logger.info("Deleted product %s", product_id)
        return self._decode("delete", document)

    def _decode(
        self, operation: str, document: Mapping[str, Any]
    ) -> Product | RepositoryFailure:
        # Stored documents are not schema-enforced by MongoDB itself.
        try:
            return Product.from_document(document)
        except ValidationError as exc:
            return self._failure(operation, exc)

    @staticmethod
    def _failure(operation: str, exc: Exception) -> RepositoryFailure:
        logger.error("Product %s failed: %s", operation, exc, exc_info=True)
        return RepositoryFailure(operation=operation, reason=str(exc))


def get_product_repository(connection: ConnectionDependency) -> ProductRepository:
    """FastAPI dependency factory."""

    return ProductRepository(connection, settings.MONGODB_COLLECTION)


RepositoryDependency = Annotated[ProductRepository, Depends(get_product_repository)]
