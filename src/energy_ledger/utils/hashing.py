"""Hashing utilities for document identity."""

from __future__ import annotations

import hashlib


def compute_file_hash(file_bytes: bytes) -> str:
    """Return the SHA-256 hex digest of raw file bytes.

    Used as the document identifier: the same bill downloaded twice or
    renamed keeps its cache entry and is accumulated once.
    """
    return hashlib.sha256(file_bytes).hexdigest()
