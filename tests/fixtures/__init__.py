"""Test fixtures package."""

from .mock_client import MockRequestClient

__all__ = [
    "MockRequestClient",
]
