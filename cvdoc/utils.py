"""
Utility functions for cvdoc.
"""

import hashlib


def _sha(text: str) -> str:
    """Computes SHA256 hash of a string."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def is_embedded_image(value) -> bool:
    """True for a local ``data:`` URI photo (never uploaded, never compared)."""
    return isinstance(value, str) and value.startswith("data:")
