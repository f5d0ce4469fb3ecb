"""Password digests and constant-time comparison."""

import hashlib
from typing import Callable

Digest = Callable[[bytes], str]


def sha256_hex(data: bytes) -> str:
    """Lowercase hex SHA-256 digest, 64 characters long."""
    return hashlib.sha256(data).hexdigest()


def timing_safe_equal(a: str, b: str) -> bool:
    """Compare two strings without short-circuiting on the first mismatch.

    Strings of different length are rejected straight away; the length of
    a hex digest is not secret. For equal lengths every position is visited
    and the differences are OR-ed together, so the running time does not
    depend on where or how often the strings differ.
    """
    if len(a) != len(b):
        return False
    result = 0
    for x, y in zip(a, b):
        result |= ord(x) ^ ord(y)
    return result == 0
