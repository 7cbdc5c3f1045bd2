"""Deterministic identity hashing and content checksums.

Entity IDs are a pure function of a normalized composite key such as
``"artist:the strokes"``.  The hash is 64-bit FNV-1a, xor-folded down to
53 bits so every ID survives a round-trip through JSON consumers that
store numbers as IEEE-754 doubles.

Checksums for output artifacts and source files use SHA-256 from
``hashlib`` and are rendered as ``"sha256-<hex>"``.
"""

from __future__ import annotations

import hashlib

_FNV_OFFSET_BASIS = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK_64 = (1 << 64) - 1
_MASK_53 = (1 << 53) - 1


def stable_hash(key: str) -> int:
    """Return a stable non-negative 53-bit integer for *key*.

    Identical input always yields the identical integer, across runs and
    interpreters (unlike the built-in ``hash``, which is salted).
    """
    value = _FNV_OFFSET_BASIS
    for byte in key.encode("utf-8"):
        value ^= byte
        value = (value * _FNV_PRIME) & _MASK_64
    return (value >> 53) ^ (value & _MASK_53)


def artist_id(normalized_name: str) -> int:
    return stable_hash(f"artist:{normalized_name}")


def venue_id(normalized_name: str) -> int:
    return stable_hash(f"venue:{normalized_name}")


def event_id(date: str, normalized_headliner: str, normalized_venue: str) -> int:
    return stable_hash(f"event:{date}:{normalized_headliner}:{normalized_venue}")


def checksum(data: bytes | str) -> str:
    """Return the ``sha256-<hex>`` checksum of *data* (str is UTF-8 encoded)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return f"sha256-{hashlib.sha256(data).hexdigest()}"
