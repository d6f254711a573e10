"""Explicit outcome values returned by the validation and storage layers."""

from __future__ import annotations

from dataclasses import dataclass

from src.models.product import FieldError


@dataclass(frozen=True)
class ValidationFailure:
    """The payload was rejected; every offending field is listed."""

    errors: tuple[FieldError, ...]


@dataclass(frozen=True)
class NotFound:
    """No product exists with the requested identifier."""

    product_id: str


@dataclass(frozen=True)
class ConnectionFailure:
    """The document store could not be reached."""

    reason: str


@dataclass(frozen=True)
class RepositoryFailure:
    """A store operation failed after the connection was established."""

    operation: str
    reason: str
