"""ROT13 over ASCII letters. Encode and decode are the same function."""
from __future__ import annotations

import string

SHIFT = 13

_ROT13 = str.maketrans(
    string.ascii_uppercase + string.ascii_lowercase,
    string.ascii_uppercase[SHIFT:] + string.ascii_uppercase[:SHIFT]
    + string.ascii_lowercase[SHIFT:] + string.ascii_lowercase[:SHIFT],
)


def encode_text(plain: str) -> str:
    return plain.translate(_ROT13)


def decode_text(encoded: str) -> str:
    # shift is half the alphabet, so the rotation is its own inverse
    return encoded.translate(_ROT13)
