"""Test utilities for wren applications.

Provides an in-process test client and response assertions::

    from wren.testing import TestClient, assert_status
"""

from wren.testing.assertions import assert_attachment, assert_json, assert_status
from wren.testing.client import TestClient, encode_multipart

__all__ = [
    "TestClient",
    "assert_attachment",
    "assert_json",
    "assert_status",
    "encode_multipart",
]
