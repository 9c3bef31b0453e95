"""Randomised byte reordering with an explicit index table.

``shuffle`` draws a Fisher-Yates permutation from the OS CSPRNG and places
``data[table[i]]`` at position ``i``. The table is not a secret: it travels
next to the ciphertext and is required to undo the shuffle.
"""
from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

import numpy as np

_SYSTEM_RANDOM = random.SystemRandom()


def random_permutation(n: int, rng: Optional[random.Random] = None) -> List[int]:
    """Return a random permutation of ``range(n)``.

    ``rng`` defaults to :class:`random.SystemRandom`. A seeded
    ``random.Random`` may be passed for reproducible tests.
    """
    rng = rng or _SYSTEM_RANDOM
    table = list(range(n))
    for i in range(n - 1, 0, -1):
        j = rng.randrange(i + 1)
        table[i], table[j] = table[j], table[i]
    return table


def is_permutation(table: Sequence[int], n: int) -> bool:
    try:
        arr = np.asarray(table)
    except (ValueError, TypeError, OverflowError):
        return False
    if arr.shape != (n,):
        return False
    if n == 0:
        return True
    if arr.dtype.kind not in "iu":
        return False
    if arr.min() < 0 or arr.max() >= n:
        return False
    return bool(np.all(np.bincount(arr.astype(np.intp), minlength=n) == 1))


def shuffle(data: bytes, rng: Optional[random.Random] = None) -> Tuple[bytes, List[int]]:
    buf = np.frombuffer(bytes(data), dtype=np.uint8)
    table = random_permutation(len(buf), rng)
    if not table:
        return b"", table
    return buf[np.asarray(table, dtype=np.intp)].tobytes(), table


def unshuffle(data: bytes, table: Sequence[int], *, validate: bool = True) -> bytes:
    """Scatter ``data[i]`` back to ``table[i]``.

    Pass ``validate=False`` only for a table that was already checked with
    :func:`is_permutation`.
    """
    buf = np.frombuffer(bytes(data), dtype=np.uint8)
    if validate and not is_permutation(table, len(buf)):
        raise ValueError(f"Index table is not a permutation of range({len(buf)})")
    if len(buf) == 0:
        return b""
    original = np.empty_like(buf)
    original[np.asarray(table, dtype=np.intp)] = buf
    return original.tobytes()
