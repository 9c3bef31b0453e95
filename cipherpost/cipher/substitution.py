"""Pairwise substitution over fixed 16x16 byte matrices.

Each matrix is a bijection between a byte value and a (row, col) cell.
A pair of bytes is transformed by locating both values in the matrix:

- same row:    both columns advance cyclically (+1 encode, -1 decode)
- same column: both rows advance cyclically (+1 encode, -1 decode)
- otherwise:   the two columns are swapped, each value keeping its row

The swap case is its own inverse. Buffers are processed in
non-overlapping pairs; an odd trailing byte passes through unchanged.

The matrices are fixed and public. This is obfuscation, not encryption.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

SIZE = 16


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class SubstitutionMatrix:
    name: str
    grid: np.ndarray  # shape (16, 16), uint8, (row, col) -> value
    rows: np.ndarray  # shape (256,), intp, value -> row
    cols: np.ndarray  # shape (256,), intp, value -> col

    @classmethod
    def from_grid(cls, name: str, grid: np.ndarray) -> "SubstitutionMatrix":
        grid = np.asarray(grid, dtype=np.uint8)
        if grid.shape != (SIZE, SIZE):
            raise ValueError(f"Substitution grid must be {SIZE}x{SIZE}, got {grid.shape}")
        flat = grid.ravel()
        if len(np.unique(flat)) != SIZE * SIZE:
            raise ValueError(f"Substitution grid {name!r} is not a bijection over 0..255")

        cells = np.arange(SIZE * SIZE, dtype=np.intp)
        rows = np.empty(SIZE * SIZE, dtype=np.intp)
        cols = np.empty(SIZE * SIZE, dtype=np.intp)
        rows[flat] = cells // SIZE
        cols[flat] = cells % SIZE
        return cls(
            name=name,
            grid=_readonly(grid.copy()),
            rows=_readonly(rows),
            cols=_readonly(cols),
        )

    def locate(self, value: int) -> Tuple[int, int]:
        if not 0 <= value <= 255:
            raise ValueError(f"Byte value out of range: {value}")
        return int(self.rows[value]), int(self.cols[value])

    def at(self, row: int, col: int) -> int:
        return int(self.grid[row, col])


_CELLS = np.arange(SIZE * SIZE, dtype=np.uint8).reshape(SIZE, SIZE)

# Masc[row][col] = row*16 + col
ASCENDING = SubstitutionMatrix.from_grid("ascending", _CELLS)
# Mdesc[row][col] = 255 - (row*16 + col)
DESCENDING = SubstitutionMatrix.from_grid("descending", 255 - _CELLS)


def _pair(matrix: SubstitutionMatrix, a: int, b: int, step: int) -> Tuple[int, int]:
    r1, c1 = matrix.locate(a)
    r2, c2 = matrix.locate(b)

    if r1 == r2:
        return matrix.at(r1, (c1 + step) % SIZE), matrix.at(r2, (c2 + step) % SIZE)
    if c1 == c2:
        return matrix.at((r1 + step) % SIZE, c1), matrix.at((r2 + step) % SIZE, c2)
    return matrix.at(r1, c2), matrix.at(r2, c1)


def transform(matrix: SubstitutionMatrix, a: int, b: int) -> Tuple[int, int]:
    """Encode-direction transform of a single byte pair."""
    return _pair(matrix, a, b, +1)


def inverse_transform(matrix: SubstitutionMatrix, a: int, b: int) -> Tuple[int, int]:
    """Decode-direction transform of a single byte pair."""
    return _pair(matrix, a, b, -1)


def _apply(matrix: SubstitutionMatrix, data: bytes, step: int) -> bytes:
    buf = np.frombuffer(bytes(data), dtype=np.uint8)
    n = len(buf) - len(buf) % 2
    if n == 0:
        return buf.tobytes()

    first, second = buf[0:n:2], buf[1:n:2]
    r1, c1 = matrix.rows[first], matrix.cols[first]
    r2, c2 = matrix.rows[second], matrix.cols[second]

    same_row = r1 == r2
    same_col = (c1 == c2) & ~same_row

    nr1 = np.where(same_col, (r1 + step) % SIZE, r1)
    nr2 = np.where(same_col, (r2 + step) % SIZE, r2)
    nc1 = np.where(same_row, (c1 + step) % SIZE, np.where(same_col, c1, c2))
    nc2 = np.where(same_row, (c2 + step) % SIZE, np.where(same_col, c2, c1))

    out = buf.copy()
    out[0:n:2] = matrix.grid[nr1, nc1]
    out[1:n:2] = matrix.grid[nr2, nc2]
    return out.tobytes()


def transform_buffer(matrix: SubstitutionMatrix, data: bytes) -> bytes:
    """Apply :func:`transform` over consecutive pairs of ``data``."""
    return _apply(matrix, data, +1)


def inverse_transform_buffer(matrix: SubstitutionMatrix, data: bytes) -> bytes:
    """Apply :func:`inverse_transform` over consecutive pairs of ``data``."""
    return _apply(matrix, data, -1)
