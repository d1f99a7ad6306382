"""Salted password digest built on `bitwise_transform` from `transform.py`.

This module provides:

- `hash_password(password: str, salt: str) -> str`: the 64-character hex
  digest of `salt || "\\x00" || password`.
- `generate_salt(length: int = 16) -> str`: a random alphanumeric salt.
- CLI usage: `python hasher_cli.py "password" "salt"` prints the hex digest.

The construction is educational only and makes no security claims.
"""

from __future__ import annotations

import secrets
import string
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple

from transform import MAGIC_SEED, MASK32, add_mod32, bitwise_transform, rotate_left


STATE_SIZE = 8

# Per-slot step for the initial accumulator, so an all-zero input still
# yields a non-trivial state.
STATE_STEP = 0x27D4EB2F

SEPARATOR = "\x00"

SALT_CHARSET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def _utf8_bytes(text: str) -> bytes:
    """Encode `text` as UTF-8, tolerating UTF-16 surrogate code units.

    Valid surrogate pairs are joined into one code point; lone surrogates are
    encoded as their 3-byte form.
    """
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError:
        joined = text.encode("utf-16-le", "surrogatepass").decode(
            "utf-16-le", "surrogatepass"
        )
        return joined.encode("utf-8", "surrogatepass")


def _pad_bytes(data: bytes) -> bytes:
    """Zero-pad `data` on the right to a multiple of 4 bytes."""
    padded = bytearray(data)
    while len(padded) % 4 != 0:
        padded.append(0x00)
    return bytes(padded)


def _chunks(data: Sequence, size: int) -> Iterable[Sequence]:
    """Yield successive `size`-item chunks from `data`."""
    for i in range(0, len(data), size):
        yield data[i : i + size]


def string_to_uint32_array(text: str) -> List[int]:
    """Convert `text` into big-endian 32-bit words.

    The string is UTF-8 encoded and zero-padded to a multiple of four bytes;
    bytes [4i, 4i+4) form word i. An empty string gives an empty list.
    """
    padded = _pad_bytes(_utf8_bytes(text))
    return [int.from_bytes(chunk, byteorder="big") for chunk in _chunks(padded, 4)]


def _transform_range(words: Sequence[int], start: int) -> List[int]:
    return [bitwise_transform(w, start + i) for i, w in enumerate(words)]


def transform_words(words: Sequence[int], workers: int = 1) -> List[int]:
    """Apply `bitwise_transform` to every word at its own index.

    Each word depends only on its value and position, so with ``workers > 1``
    contiguous slices are transformed on a thread pool and concatenated in
    order. The result is identical to the serial one.

    The work is pure-Python integer arithmetic, so the GIL serialises the
    threads: ``workers > 1`` shows the independent per-word structure but
    adds pool overhead rather than speed.
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    if workers == 1 or len(words) < 2:
        return _transform_range(words, 0)

    size = -(-len(words) // workers)  # Ceiling division
    starts = list(range(0, len(words), size))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        parts = pool.map(lambda s: _transform_range(words[s : s + size], s), starts)
        transformed: List[int] = []
        for part in parts:
            transformed.extend(part)
    return transformed


def initial_state() -> List[int]:
    """Return the 8-word accumulator before any word is folded in."""
    return [add_mod32(MAGIC_SEED, s * STATE_STEP) for s in range(STATE_SIZE)]


def fold_words(
    transformed: Sequence[int], state: Optional[Sequence[int]] = None
) -> List[int]:
    """Fold the transformed words into an 8-word state.

    Folding starts from a copy of `state`, or from `initial_state()` when no
    state is given.

    Word i is XORed into slot ``i % 8`` and, rotated left by
    ``(i % 31) + 1``, added into the following slot.
    """
    state = initial_state() if state is None else [w & MASK32 for w in state]
    for i, t in enumerate(transformed):
        slot = i % STATE_SIZE
        neighbor = (slot + 1) % STATE_SIZE

        state[slot] = (state[slot] ^ t) & MASK32
        state[neighbor] = add_mod32(state[neighbor], rotate_left(t, (i % 31) + 1))
    return state


def finalize_state(state: List[int], n_words: int) -> List[int]:
    """Re-transform every slot in place using indices ``n_words .. n_words + 7``.

    These indices never overlap the ones used for the folded words.
    """
    for s in range(STATE_SIZE):
        state[s] = bitwise_transform(state[s], s + n_words)
    return state


def state_to_hex(state: Sequence[int]) -> str:
    """Render the 8-word state as a 64-character lowercase hex string."""
    return "".join(f"{word & MASK32:08x}" for word in state)


def _validate_inputs(password, salt) -> None:
    if not isinstance(password, str):
        raise TypeError(f"password must be a string, got {type(password).__name__}")
    if not isinstance(salt, str):
        raise TypeError(f"salt must be a string, got {type(salt).__name__}")
    if len(password) == 0:
        raise ValueError("password must not be empty")
    if len(salt) == 0:
        raise ValueError("salt must not be empty")


def hash_password_before(
    password: str, salt: str, workers: int = 1
) -> Tuple[List[int], List[int]]:
    """High-level helper that prepares everything before the fold.

    This performs:
    - Validation of both inputs.
    - Encoding of ``salt || "\\x00" || password`` into words.
    - The per-word round transform.

    It returns:
    - The initial 8-word state, and
    - The list of transformed words.

    With this, a custom fold can be plugged in:

        state0, transformed = hash_password_before(pw, salt)
        state = my_fold(transformed, state0)   # e.g. fold_words
        digest = hash_password_after(state, len(transformed))
    """
    _validate_inputs(password, salt)

    # Salt first, so it shifts every password word rather than a fixed suffix.
    words = string_to_uint32_array(salt + SEPARATOR + password)
    return initial_state(), transform_words(words, workers=workers)


def hash_password_after(state: Sequence[int], n_words: int) -> str:
    """Finalise a folded state and encode it as the hex digest."""
    return state_to_hex(finalize_state(list(state), n_words))


def hash_password(password: str, salt: str, *, workers: int = 1) -> str:
    """Hash `password` with `salt` and return a 64-character hex digest.

    Raises
    ------
    TypeError
        If `password` or `salt` is not a string.
    ValueError
        If `password` or `salt` is empty.
    """
    state0, transformed = hash_password_before(password, salt, workers=workers)
    state = fold_words(transformed, state0)
    return hash_password_after(state, len(transformed))


def hash_password_with_state_tracking(password: str, salt: str) -> Tuple[str, List[int]]:
    """Compute the digest while also returning the folded, pre-finalisation state.

    Returns:
        (digest_hex, folded_state)
    """
    state0, transformed = hash_password_before(password, salt)
    folded = fold_words(transformed, state0)
    return hash_password_after(folded, len(transformed)), folded


def generate_salt(length: int = 16) -> str:
    """Return a random alphanumeric salt of `length` characters."""
    if isinstance(length, bool) or not isinstance(length, int):
        raise TypeError(f"salt length must be an int, got {type(length).__name__}")
    if length < 1:
        raise ValueError(f"salt length must be a positive integer, got {length}")
    return "".join(secrets.choice(SALT_CHARSET) for _ in range(length))


_USAGE = (
    "Usage:\n"
    "  python hasher_cli.py \"password\" \"salt\"\n"
    "  python hasher_cli.py \"password\"            (random salt)\n"
    "  python hasher_cli.py -f path/to/file \"salt\"\n"
)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    With a password and a salt, the digest is printed to stdout. With only a
    password, a fresh 16-character salt is generated and ``salt digest`` is
    printed. With `-f`, the UTF-8 text of the named file is the password.
    """
    if argv is None:
        argv = sys.argv[1:]

    if not argv:
        sys.stderr.write(_USAGE)
        return 1

    # File mode: `-f <filename> <salt>`
    if argv[0] == "-f":
        if len(argv) != 3:
            sys.stderr.write("Usage: python hasher_cli.py -f path/to/file \"salt\"\n")
            return 1
        filename, salt = argv[1], argv[2]
        try:
            with open(filename, "rb") as f:
                password = f.read().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            sys.stderr.write(f"Error reading file '{filename}': {e}\n")
            return 1
        try:
            print(hash_password(password, salt))
        except ValueError as e:
            sys.stderr.write(f"Error: {e}\n")
            return 1
        return 0

    if len(argv) > 2:
        sys.stderr.write(_USAGE)
        return 1

    password = argv[0]
    try:
        if len(argv) == 2:
            print(hash_password(password, argv[1]))
        else:
            salt = generate_salt()
            print(f"{salt} {hash_password(password, salt)}")
    except ValueError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
