"""System-level routes such as health checks."""

from __future__ import annotations

from fastapi import APIRouter

from src.config import settings
from src.services.storage.mongo_connection import ConnectionDependency

router = APIRouter(tags=["system"])


@router.get("/")
async def read_root() -> dict[str, str]:
    """Hello World endpoint used by smoke tests."""

    return {"message": "Product catalog API running"}


@router.get("/health")
async def health_check(connection: ConnectionDependency) -> dict[str, str]:
    """Health check endpoint with MongoDB connectivity check."""

    failure = await connection.ensure_connected()
    database_status = "connected" if failure is None else "disconnected"

    return {
        "status": "healthy",
        "database": database_status,
        "environment": settings.ENVIRONMENT,
    }
