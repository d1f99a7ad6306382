"""Inverse of the per-word round transform

Here we assume the input word is the *post-transform* value at a known
position `index`, and we walk the rounds backwards to recover the original
word. Every round is a bijection on 32-bit words for a fixed (index, round),
so the recovery is exact.
"""

from __future__ import annotations

from typing import List, Sequence

from transform import (
    MASK32,
    ROUNDS,
    rotate_left,
    rotate_right,
    round_keys,
    round_shifts,
)


def transform_round_inv(w: int, index: int, round_: int) -> int:
    """Undo one mixing round performed by `transform_round`."""
    key_a, key_b = round_keys(index, round_)
    left, right = round_shifts(round_)

    # 5. Undo the right-rotation
    w = rotate_left(w & MASK32, right)

    # 4. Undo the XOR with complemented keyA
    w = (w ^ (~key_a & MASK32)) & MASK32

    # 3. Undo the modular addition
    w = (w - key_b) & MASK32

    # 2. Undo the left-rotation
    w = rotate_right(w, left)

    # 1. Undo the XOR with keyA
    return (w ^ key_a) & MASK32


def bitwise_transform_inv(word: int, index: int) -> int:
    """Recover the input of `bitwise_transform` from its output.

    Parameters
    ----------
    word : int
        Transformed 32-bit word.
    index : int
        Position the word was transformed at.

    Returns
    -------
    int
        Original 32-bit word.
    """
    w = word & MASK32
    for round_ in reversed(range(ROUNDS)):
        w = transform_round_inv(w, index, round_)
    return w


def recover_words(transformed: Sequence[int]) -> List[int]:
    """Invert a whole transformed sequence, word `i` at position `i`."""
    return [bitwise_transform_inv(w, i) for i, w in enumerate(transformed)]
