from __future__ import annotations

import hashlib


def hash_identifier(identifier: str, algorithm: str = "sha1") -> str:
    """Return a stable hex digest of the identifier string (not of the content)."""
    return hashlib.new(algorithm, identifier.encode("utf-8")).hexdigest()
