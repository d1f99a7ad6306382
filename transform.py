"""Per-word round transform.

This implements the 12-round mixing function applied to every 32-bit word of
the encoded ``salt || 0x00 || password`` string.

Given a word `w` and its position `index`, each round `r` computes:

    keyA = MAGIC_SEED + (index * K1 + r * K2)
    keyB = (MAGIC_SEED ^ 0xDEADBEEF) + (r * K3 + index * K4)

    w = w ^ keyA
    w = rotl(w, (r % 16) + 1)
    w = w + keyB
    w = w ^ ~keyA
    w = rotr(w, 32 - ((r % 16) + 1))

All additions are performed modulo 2**32.
"""

from __future__ import annotations

from typing import Tuple


MASK32 = 0xFFFFFFFF

# Number of mixing rounds applied per word.
ROUNDS = 12

# Golden-ratio constant, floor(2**32 / phi).
MAGIC_SEED = 0x9E3779B9

# Round-key multipliers: K1, K2 feed keyA and K3, K4 feed keyB.
K_VALUES: Tuple[int, int, int, int] = (
    0x517CC1B7,
    0x6ED9EBA1,
    0x8F1BBCDC,
    0xA4D1C2EF,
)

KEY_B_SEED = MAGIC_SEED ^ 0xDEADBEEF


def rotate_left(value: int, n: int) -> int:
    """Left-rotate a 32-bit word `value` by `n` bits (taken modulo 32)."""
    value &= MASK32
    n &= 31
    if n == 0:
        return value
    return ((value << n) | (value >> (32 - n))) & MASK32


def rotate_right(value: int, n: int) -> int:
    """Right-rotate a 32-bit word `value` by `n` bits (taken modulo 32)."""
    value &= MASK32
    n &= 31
    if n == 0:
        return value
    return ((value >> n) | (value << (32 - n))) & MASK32


def add_mod32(a: int, b: int) -> int:
    """Return (a + b) mod 2**32."""
    return ((a & MASK32) + (b & MASK32)) & MASK32


def round_shifts(round_: int) -> Tuple[int, int]:
    """Return the (left, right) rotation amounts used in round `round_`."""
    left = (round_ % 16) + 1
    return left, 32 - left


def round_keys(index: int, round_: int) -> Tuple[int, int]:
    """Derive the (keyA, keyB) pair for word position `index` and round `round_`.

    Parameters
    ----------
    index : int
        Position of the word in the sequence being processed (>= 0).
    round_ : int
        Round counter in ``range(ROUNDS)``.

    Returns
    -------
    (key_a, key_b) : tuple[int, int]
        Both keys reduced modulo 2**32.
    """
    k1, k2, k3, k4 = K_VALUES
    key_a = add_mod32(MAGIC_SEED, (index * k1 + round_ * k2) & MASK32)
    key_b = add_mod32(KEY_B_SEED, (round_ * k3 + index * k4) & MASK32)
    return key_a, key_b


def transform_round(w: int, index: int, round_: int) -> int:
    """Perform one mixing round on the word `w`."""
    key_a, key_b = round_keys(index, round_)
    left, right = round_shifts(round_)

    # 1. XOR with keyA
    w = (w ^ key_a) & MASK32

    # 2. Left-rotate by 1..16 bits
    w = rotate_left(w, left)

    # 3. Modular addition of keyB
    w = add_mod32(w, key_b)

    # 4. XOR with complemented keyA
    w = (w ^ (~key_a & MASK32)) & MASK32

    # 5. Right-rotate by the complementary amount
    return rotate_right(w, right)


def bitwise_transform(word: int, index: int) -> int:
    """Run all `ROUNDS` mixing rounds on one word.

    Parameters
    ----------
    word : int
        32-bit word to transform.
    index : int
        Position of the word in its sequence. Identical words at different
        positions are mixed with different round keys.

    Returns
    -------
    int
        Transformed 32-bit word.
    """
    w = word & MASK32
    for round_ in range(ROUNDS):
        w = transform_round(w, index, round_)
    return w
