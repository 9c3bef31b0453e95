import random

import numpy as np
import pytest

from cipherpost.cipher.substitution import (
    ASCENDING,
    DESCENDING,
    SubstitutionMatrix,
    inverse_transform,
    inverse_transform_buffer,
    transform,
    transform_buffer,
)

MATRICES = [ASCENDING, DESCENDING]


def _all_pairs() -> bytes:
    a = np.repeat(np.arange(256, dtype=np.uint8), 256)
    b = np.tile(np.arange(256, dtype=np.uint8), 256)
    out = np.empty(a.size * 2, dtype=np.uint8)
    out[0::2] = a
    out[1::2] = b
    return out.tobytes()


def test_matrices_are_bijections():
    assert sorted(ASCENDING.grid.ravel().tolist()) == list(range(256))
    assert sorted(DESCENDING.grid.ravel().tolist()) == list(range(256))
    assert ASCENDING.at(0, 0) == 0 and ASCENDING.at(15, 15) == 255
    assert DESCENDING.at(0, 0) == 255 and DESCENDING.at(15, 15) == 0


@pytest.mark.parametrize("matrix", MATRICES, ids=lambda m: m.name)
def test_locate_and_at_agree(matrix):
    for value in range(256):
        row, col = matrix.locate(value)
        assert matrix.at(row, col) == value


def test_locate_values():
    assert ASCENDING.locate(0x12) == (1, 2)
    assert DESCENDING.locate(255) == (0, 0)
    assert DESCENDING.locate(0) == (15, 15)


def test_same_row_advances_columns_cyclically():
    assert transform(ASCENDING, 0x10, 0x1F) == (0x11, 0x10)
    assert inverse_transform(ASCENDING, 0x11, 0x10) == (0x10, 0x1F)
    # 255 at (0,0), 254 at (0,1) in the descending grid
    assert transform(DESCENDING, 255, 254) == (254, 253)


def test_same_column_advances_rows_cyclically():
    assert transform(ASCENDING, 0x03, 0xF3) == (0x13, 0x03)
    assert inverse_transform(ASCENDING, 0x13, 0x03) == (0x03, 0xF3)


def test_different_row_and_column_swaps_columns():
    assert transform(ASCENDING, 0x12, 0x34) == (0x14, 0x32)
    assert inverse_transform(ASCENDING, 0x14, 0x32) == (0x12, 0x34)


def test_equal_pair_is_same_row():
    assert transform(ASCENDING, 5, 5) == (6, 6)
    assert transform(ASCENDING, 0x0F, 0x0F) == (0x00, 0x00)


@pytest.mark.parametrize("matrix", MATRICES, ids=lambda m: m.name)
def test_inverse_undoes_transform_for_every_pair(matrix):
    data = _all_pairs()
    assert inverse_transform_buffer(matrix, transform_buffer(matrix, data)) == data


@pytest.mark.parametrize("matrix", MATRICES, ids=lambda m: m.name)
def test_buffer_matches_pairwise_rule(matrix):
    rng = random.Random(1337)
    data = bytes(rng.randrange(256) for _ in range(1000))
    out = transform_buffer(matrix, data)
    for i in range(0, len(data), 2):
        assert tuple(out[i:i + 2]) == transform(matrix, data[i], data[i + 1])


def test_odd_trailing_byte_untouched():
    data = bytes([0x12, 0x34, 0x99])
    out = transform_buffer(ASCENDING, data)
    assert out[:2] == bytes([0x14, 0x32])
    assert out[2] == 0x99
    assert inverse_transform_buffer(ASCENDING, out) == data


@pytest.mark.parametrize("data", [b"", b"\x07"])
def test_short_buffers_pass_through(data):
    assert transform_buffer(ASCENDING, data) == data
    assert inverse_transform_buffer(DESCENDING, data) == data


def test_descending_pass_undoes_ascending_pass():
    # The descending grid is the ascending one mirrored on both axes, so
    # the second encode pass cancels the first for every pair.
    data = _all_pairs()
    assert transform_buffer(DESCENDING, transform_buffer(ASCENDING, data)) == data


def test_out_of_range_value_rejected():
    with pytest.raises(ValueError):
        transform(ASCENDING, 256, 0)
    with pytest.raises(ValueError):
        transform(ASCENDING, 0, -1)


def test_non_bijective_grid_rejected():
    grid = np.zeros((16, 16), dtype=np.uint8)
    with pytest.raises(ValueError):
        SubstitutionMatrix.from_grid("zeros", grid)
    with pytest.raises(ValueError):
        SubstitutionMatrix.from_grid("small", np.arange(16).reshape(4, 4))


def test_tables_are_read_only():
    with pytest.raises(ValueError):
        ASCENDING.grid[0, 0] = 1
    with pytest.raises(ValueError):
        DESCENDING.rows[0] = 3
