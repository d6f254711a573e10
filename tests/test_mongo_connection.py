"""Tests for the lazily initialised MongoDB connection manager."""

import asyncio

import pytest

from src.models.outcomes import ConnectionFailure
from src.services.storage.mongo_connection import MongoConnectionManager


@pytest.mark.asyncio
async def test_ensure_connected_dials_once(connection_manager, mongo_client):
    """Test that repeated calls reuse the first connection."""
    # Act
    first = await connection_manager.ensure_connected()
    second = await connection_manager.ensure_connected()

    # Assert
    assert first is None
    assert second is None
    assert connection_manager.is_connected
    assert mongo_client.factory_calls == 1
    assert mongo_client.pings == 1
    assert mongo_client.options["tz_aware"] is True


@pytest.mark.asyncio
async def test_concurrent_first_callers_share_one_attempt(
    connection_manager, mongo_client
):
    """Test that racing first requests produce a single connection."""
    # Act
    results = await asyncio.gather(
        *(connection_manager.ensure_connected() for _ in range(10))
    )

    # Assert
    assert results == [None] * 10
    assert mongo_client.factory_calls == 1


@pytest.mark.asyncio
async def test_unreachable_store_returns_connection_failure(
    connection_manager, mongo_client
):
    """Test that a failed ping is reported and the client is closed."""
    # Arrange
    mongo_client.unreachable = True

    # Act
    result = await connection_manager.ensure_connected()

    # Assert
    assert isinstance(result, ConnectionFailure)
    assert not connection_manager.is_connected
    assert mongo_client.closed


@pytest.mark.asyncio
async def test_failed_attempt_is_retried_on_next_call(connection_manager, mongo_client):
    """Test that a failure is not cached."""
    # Arrange
    mongo_client.unreachable = True
    assert isinstance(await connection_manager.ensure_connected(), ConnectionFailure)
    mongo_client.unreachable = False

    # Act
    result = await connection_manager.ensure_connected()

    # Assert
    assert result is None
    assert mongo_client.factory_calls == 2


@pytest.mark.asyncio
async def test_missing_uri_returns_connection_failure(mongo_client):
    """Test that a manager without a URI never dials."""
    # Arrange
    manager = MongoConnectionManager(None, "catalog", client_factory=mongo_client.factory)

    # Act
    result = await manager.ensure_connected()

    # Assert
    assert isinstance(result, ConnectionFailure)
    assert mongo_client.factory_calls == 0


def test_database_requires_connection(connection_manager):
    """Test that the database handle is unavailable before connecting."""
    # Act / Assert
    with pytest.raises(RuntimeError):
        connection_manager.database


@pytest.mark.asyncio
async def test_close_releases_client(connection_manager, mongo_client):
    """Test that close tears down the shared client."""
    # Arrange
    await connection_manager.ensure_connected()

    # Act
    await connection_manager.close()

    # Assert
    assert mongo_client.closed
    assert not connection_manager.is_connected


@pytest.mark.asyncio
async def test_close_without_connection_is_noop(connection_manager, mongo_client):
    """Test that closing an unused manager does nothing."""
    # Act
    await connection_manager.close()

    # Assert
    assert mongo_client.factory_calls == 0
