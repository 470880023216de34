"""Order-independent payload fingerprinting.

Each key/value pair is hashed on its own with 64-bit FNV-1a (key bytes, then
the value's canonical text) and the pair hashes are XORed together, so the
result does not depend on the order in which keys were received.
"""

import json
from typing import Any, Mapping

FNV_OFFSET_64 = 14695981039346656037
FNV_PRIME_64 = 1099511628211
_MASK_64 = 0xFFFFFFFFFFFFFFFF


def hash_new() -> int:
    """Return an empty FNV-1a state."""
    return FNV_OFFSET_64


def hash_add(state: int, text: str) -> int:
    """Fold the UTF-8 bytes of text into an FNV-1a state."""
    for byte in text.encode("utf-8"):
        state ^= byte
        state = (state * FNV_PRIME_64) & _MASK_64
    return state


def canonical_value(value: Any) -> str:
    """Render a payload value as the text used for hashing.

    Strings are used as-is. Anything else is rendered as compact JSON with
    sorted keys (``true``, ``null``, ``1.5``, ``{"a":1}``). Objects JSON has
    no encoding for are encoded as the JSON string of their ``str()``.
    """
    if isinstance(value, str):
        return value
    try:
        return json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        )
    except (TypeError, ValueError):
        return str(value)


def calculate_fingerprint(data: Mapping[str, Any]) -> str:
    """Hash a mapping of contributing fields into a decimal fingerprint."""
    if not data:
        return str(hash_new())

    result = 0
    for key, value in data.items():
        pair = hash_add(hash_new(), key)
        pair = hash_add(pair, canonical_value(value))
        result ^= pair
    return str(result)
