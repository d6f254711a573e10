"""ASGI entry point for the product catalog API."""

from src.application import create_app

app = create_app()

__all__ = ["app"]
