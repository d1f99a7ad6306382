import pytest

from transform import (
    KEY_B_SEED,
    MAGIC_SEED,
    MASK32,
    ROUNDS,
    add_mod32,
    bitwise_transform,
    rotate_left,
    rotate_right,
    round_keys,
    round_shifts,
    transform_round,
)


TEST_WORDS = [
    0x00000000,
    0x00000001,
    0x80000000,
    0x12345678,
    0xDEADBEEF,
    0xFEEDFACE,
    0xFFFFFFFF,
]


@pytest.mark.parametrize(
    "value,n,expected",
    [
        (1, 1, 2),
        (0x80000000, 1, 1),
        (0x12345678, 4, 0x23456781),
        (0x12345678, 8, 0x34567812),
        (0x12345678, 36, 0x23456781),
    ],
)
def test_rotate_left_known_values(value, n, expected):
    assert rotate_left(value, n) == expected


@pytest.mark.parametrize(
    "value,n,expected",
    [
        (2, 1, 1),
        (1, 1, 0x80000000),
        (0x12345678, 4, 0x81234567),
        (0x12345678, 40, 0x78123456),
    ],
)
def test_rotate_right_known_values(value, n, expected):
    assert rotate_right(value, n) == expected


@pytest.mark.parametrize("value", TEST_WORDS)
def test_rotation_by_zero_and_32_is_identity(value):
    assert rotate_left(value, 0) == value
    assert rotate_left(value, 32) == value
    assert rotate_right(value, 0) == value
    assert rotate_right(value, 32) == value


@pytest.mark.parametrize("value", TEST_WORDS)
def test_rotate_right_undoes_rotate_left(value):
    """rotate_right(rotate_left(v, n), n) == v for every n in [0, 31]."""
    for n in range(32):
        assert rotate_right(rotate_left(value, n), n) == value, f"failed at n={n}"


def test_add_mod32_wraps():
    assert add_mod32(1, 1) == 2
    assert add_mod32(0, 0) == 0
    assert add_mod32(0xFFFFFFFF, 1) == 0
    assert add_mod32(0xFFFFFFFF, 0xFFFFFFFF) == 0xFFFFFFFE


def test_round_keys_at_origin_are_the_seeds():
    """With index 0 and round 0 both key offsets vanish."""
    assert round_keys(0, 0) == (MAGIC_SEED, KEY_B_SEED)
    assert KEY_B_SEED == 0x409AC756


def test_round_keys_stay_in_range_for_large_index():
    key_a, key_b = round_keys(10**9, ROUNDS - 1)
    assert 0 <= key_a <= MASK32
    assert 0 <= key_b <= MASK32


def test_round_shifts_are_complementary():
    for round_ in range(ROUNDS):
        left, right = round_shifts(round_)
        assert 1 <= left <= 16
        assert left + right == 32


@pytest.mark.parametrize("word", TEST_WORDS)
def test_bitwise_transform_is_all_rounds(word):
    """bitwise_transform is exactly ROUNDS applications of transform_round."""
    expected = word
    for round_ in range(ROUNDS):
        expected = transform_round(expected, 5, round_)
    assert bitwise_transform(word, 5) == expected


@pytest.mark.parametrize("word", TEST_WORDS)
def test_bitwise_transform_is_deterministic_and_in_range(word):
    for index in (0, 1, 7, 1000):
        result = bitwise_transform(word, index)
        assert result == bitwise_transform(word, index)
        assert 0 <= result <= MASK32


def test_bitwise_transform_is_position_sensitive():
    assert bitwise_transform(0x12345678, 0) != bitwise_transform(0x12345678, 1)


def test_bitwise_transform_masks_oversized_input():
    assert bitwise_transform(0x1_0000_0000 | 0xABCDEF01, 3) == bitwise_transform(0xABCDEF01, 3)
