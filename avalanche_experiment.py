"""Quick experiment: measure how far small input changes spread through the digest.

We:
- Run the hashing pipeline on a password/salt pair, printing the encoded
  words, the transformed words and the folded state.
- Invert the per-word transform with `recover_words` and check that the
  original words come back.
- Flip every input bit of a word and count how many output bits of
  `bitwise_transform` change (ideal: 16 of 32).
- Change every password character in turn and count how many digest bits
  change (ideal: 128 of 256).
"""

from __future__ import annotations

import argparse
import sys
from statistics import mean
from typing import Dict, List, Sequence

import yaml

from hasher_cli import (
    SEPARATOR,
    fold_words,
    hash_password,
    hash_password_after,
    string_to_uint32_array,
    transform_words,
)
from transform import bitwise_transform
from transform_inv import recover_words


DIGEST_BITS = 256
WORD_BITS = 32


def hamming_distance_hex(a: str, b: str) -> int:
    """Return the number of differing bits between two equal-length hex strings."""
    if len(a) != len(b):
        raise ValueError(f"hex strings differ in length: {len(a)} != {len(b)}")
    return bin(int(a, 16) ^ int(b, 16)).count("1")


def word_avalanche(word: int, index: int) -> List[int]:
    """For each of the 32 input bits, count output bits changed by flipping it."""
    base = bitwise_transform(word, index)
    return [
        bin(base ^ bitwise_transform(word ^ (1 << bit), index)).count("1")
        for bit in range(WORD_BITS)
    ]


def password_avalanche(password: str, salt: str) -> List[int]:
    """For each password position, count digest bits changed by altering that character.

    The character at each position is replaced by the one whose code point
    differs in the lowest bit.
    """
    base = hash_password(password, salt)
    distances = []
    for i, ch in enumerate(password):
        altered = password[:i] + chr(ord(ch) ^ 1) + password[i + 1 :]
        distances.append(hamming_distance_hex(base, hash_password(altered, salt)))
    return distances


def summarize(distances: Sequence[int], total_bits: int) -> Dict:
    """Return min/mean/max of `distances` and the mean as a fraction of `total_bits`."""
    if not distances:
        return {"count": 0, "min": 0, "mean": 0.0, "max": 0, "ratio": 0.0}
    avg = mean(distances)
    return {
        "count": len(distances),
        "min": min(distances),
        "mean": round(avg, 3),
        "max": max(distances),
        "ratio": round(avg / total_bits, 4),
    }


def _format_words(words: Sequence[int]) -> List[str]:
    """Return hex lines of at most 8 words each."""
    lines = []
    for i in range(0, len(words), 8):
        chunk = words[i : i + 8]
        hex_chunk = " ".join(f"{w:08x}" for w in chunk)
        lines.append(f"w[{i:3d}..{i+len(chunk)-1:3d}]: {hex_chunk}")
    return lines


def run_experiment(password: str, salt: str) -> Dict:
    """Run the full experiment, print a report and return the results."""
    # Raises before anything is printed if either input is invalid.
    direct = hash_password(password, salt)

    words = string_to_uint32_array(salt + SEPARATOR + password)
    transformed = transform_words(words)

    print("=== Pipeline ===")
    print("encoded words (salt || 00 || password):")
    for line in _format_words(words):
        print("  ", line)
    print("transformed words:")
    for line in _format_words(transformed):
        print("  ", line)

    # The inverse transform must hand back exactly the encoded words.
    recovered = recover_words(transformed)
    print("inverse recovers encoded words:", recovered == words)

    folded = fold_words(transformed)
    print("folded state:")
    print("  ", " ".join(f"{w:08x}" for w in folded))

    digest = hash_password_after(folded, len(transformed))
    print("digest              :", digest)
    print("direct hash_password:", direct)
    print("direct == pipeline  :", direct == digest)

    print()
    print("=== Word avalanche (bitwise_transform) ===")
    word_results = []
    for index, word in enumerate(words):
        counts = word_avalanche(word, index)
        stats = summarize(counts, WORD_BITS)
        word_results.append({"index": index, "word": f"{word:08x}", **stats})
        print(
            f"  w[{index:3d}] {word:08x}: min={stats['min']:2d} "
            f"mean={stats['mean']:6.2f} max={stats['max']:2d} (ideal {WORD_BITS // 2})"
        )

    print()
    print("=== Password avalanche (hash_password) ===")
    distances = password_avalanche(password, salt)
    for i, d in enumerate(distances):
        print(f"  position {i:3d}: {d:3d} / {DIGEST_BITS} bits changed")
    pw_stats = summarize(distances, DIGEST_BITS)
    print(
        f"summary: min={pw_stats['min']} mean={pw_stats['mean']} max={pw_stats['max']} "
        f"ratio={pw_stats['ratio']} (ideal 0.5)"
    )

    return {
        "password": password,
        "salt": salt,
        "digest_hex": digest,
        "inverse_ok": recovered == words,
        "word_avalanche": word_results,
        "password_avalanche": {"distances": distances, **pw_stats},
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Measure avalanche behaviour of the password digest"
    )
    parser.add_argument("password", help="Password to analyse")
    parser.add_argument(
        "--salt",
        default="salt",
        help="Salt to hash with (default: salt)",
    )
    parser.add_argument(
        "--yaml",
        dest="yaml_path",
        default=None,
        help="Also write the results to this YAML file",
    )
    args = parser.parse_args()

    try:
        results = run_experiment(args.password, args.salt)
    except ValueError as e:
        sys.stderr.write(f"Error: {e}\n")
        sys.exit(1)

    if args.yaml_path:
        with open(args.yaml_path, "w", encoding="utf-8") as f:
            yaml.dump(results, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        print(f"\nResults written to {args.yaml_path}")
