import random

import pytest

from cipherpost.cipher.permutation import (
    is_permutation,
    random_permutation,
    shuffle,
    unshuffle,
)


@pytest.mark.parametrize("length", [0, 1, 2, 3, 17, 1000])
def test_unshuffle_inverts_shuffle(length):
    rng = random.Random(length)
    data = bytes(rng.randrange(256) for _ in range(length))
    shuffled, table = shuffle(data)
    assert len(shuffled) == length
    assert is_permutation(table, length)
    assert unshuffle(shuffled, table) == data


def test_shuffled_position_takes_byte_from_table():
    data = bytes(range(50))
    shuffled, table = shuffle(data)
    for i, src in enumerate(table):
        assert shuffled[i] == data[src]


def test_seeded_rng_is_reproducible():
    data = b"reproducible payload"
    assert shuffle(data, random.Random(7)) == shuffle(data, random.Random(7))


def test_default_source_is_unpredictable():
    assert random_permutation(64) != random_permutation(64)


def test_accepts_bytearray_and_list():
    shuffled, table = shuffle(bytearray(b"abc"))
    assert unshuffle(shuffled, table) == b"abc"
    shuffled, table = shuffle([1, 2, 3, 4])
    assert unshuffle(shuffled, table) == bytes([1, 2, 3, 4])


@pytest.mark.parametrize(
    "table",
    [
        [0, 0, 1],      # duplicate
        [0, 1],         # too short
        [0, 1, 3],      # out of range
        [0, 1, -1],     # negative
        [True, False, True],  # bools are not indices
    ],
)
def test_unshuffle_rejects_invalid_tables(table):
    with pytest.raises(ValueError):
        unshuffle(b"abc", table)


def test_is_permutation():
    assert is_permutation([], 0)
    assert is_permutation([2, 0, 1], 3)
    assert not is_permutation([2, 0, 1], 4)
    assert not is_permutation([1.0, 0], 2)


def test_is_permutation_rejects_non_integer_tables():
    assert not is_permutation(["0", "1"], 2)
    assert not is_permutation([[0, 1]], 2)
    assert not is_permutation([0, [1]], 2)
    assert not is_permutation([2 ** 70, 0], 2)


def test_is_permutation_large_table():
    table = list(range(200_000))
    table[0], table[-1] = table[-1], table[0]
    assert is_permutation(table, 200_000)
    table[1] = 0
    assert not is_permutation(table, 200_000)


def test_unshuffle_can_skip_validation_for_checked_tables():
    shuffled, table = shuffle(b"already checked", random.Random(5))
    assert unshuffle(shuffled, table, validate=False) == b"already checked"
