"""Testing utilities for folio applications."""

from folio.testing.client import TestClient, TestResponse

__all__ = ["TestClient", "TestResponse"]
