"""Test utilities for queen applications.

    from queen.testing import TestClient, encode_multipart
"""

from queen.testing.client import TestClient, TestResponse, encode_multipart

__all__ = ["TestClient", "TestResponse", "encode_multipart"]
