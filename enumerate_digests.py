"""Enumerate all passwords of a given length and record folded states and digests.

For short passwords over a small alphabet, this script:
1. Generates all possible passwords (len(alphabet)^N for length N)
2. Hashes each with a fixed salt, keeping the folded (pre-finalisation) state
3. Saves results to data/length/N.yaml or N.db (SQLite)
4. Reports how many distinct digests were produced (collision check)

Usage:
    python enumerate_digests.py <password_length>
    python enumerate_digests.py 1                    # 2 passwords ("0", "1")
    python enumerate_digests.py 8                    # 256 passwords
    python enumerate_digests.py 4 --alphabet abcdef  # 1296 passwords
    python enumerate_digests.py 3 --salt pepper

    # Output to SQLite database instead of YAML
    python enumerate_digests.py 16 --format sqlite

SQLite Schema:
    - metadata: password_length, alphabet, salt, total_messages, distinct_digests
    - messages: id, password, password_hex, digest_hex
    - states: message_id, slot_index, state_value
"""

from __future__ import annotations

import argparse
import itertools
import os
import sqlite3
import sys
from typing import Dict, Generator, List

import yaml

from hasher_cli import hash_password_with_state_tracking


def enumerate_passwords(length: int, alphabet: str) -> Generator[str, None, None]:
    """Generate all passwords of `length` characters over `alphabet`.

    Passwords are yielded in lexicographic order of alphabet positions.
    """
    if length < 1:
        raise ValueError(f"password length must be >= 1, got {length}")
    if not alphabet:
        raise ValueError("alphabet must not be empty")

    for chars in itertools.product(alphabet, repeat=length):
        yield "".join(chars)


def main():
    parser = argparse.ArgumentParser(
        description="Enumerate all passwords of a given length and record folded states"
    )
    parser.add_argument(
        "length",
        type=int,
        help="Password length in characters (WARNING: len(alphabet)^length passwords will be generated)",
    )
    parser.add_argument(
        "--alphabet",
        type=str,
        default="01",
        help="Characters to build passwords from (default: 01)",
    )
    parser.add_argument(
        "--salt",
        type=str,
        default="salt",
        help="Salt used for every password (default: salt)",
    )
    parser.add_argument(
        "--max-messages",
        type=int,
        default=1_000_000,
        help="Maximum number of passwords to process (default: 1,000,000)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="data/length",
        help="Output directory (default: data/length)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["yaml", "sqlite"],
        default="yaml",
        help="Output format: yaml or sqlite (default: yaml)",
    )
    args = parser.parse_args()

    if args.length < 1:
        print(f"ERROR: Password length must be >= 1 (got {args.length})")
        sys.exit(1)
    if not args.alphabet:
        print("ERROR: Alphabet must not be empty")
        sys.exit(1)
    if not args.salt:
        print("ERROR: Salt must not be empty")
        sys.exit(1)

    # Duplicate alphabet characters would only produce duplicate passwords.
    alphabet = "".join(dict.fromkeys(args.alphabet))
    total_messages = len(alphabet) ** args.length

    print(f"Password length: {args.length} characters")
    print(f"Alphabet: {alphabet!r} ({len(alphabet)} symbols)")
    print(f"Salt: {args.salt!r}")
    print(f"Total possible passwords: {total_messages:,}")

    if total_messages > args.max_messages:
        print(f"ERROR: Too many passwords ({total_messages:,} > {args.max_messages:,})")
        print(f"Use --max-messages to increase limit if you really want to proceed")
        sys.exit(1)

    # Create output directory
    os.makedirs(args.output_dir, exist_ok=True)

    if args.format == "sqlite":
        output_path = process_to_sqlite(args.output_dir, args.length, alphabet, args.salt)
    else:
        output_path = process_to_yaml(args.output_dir, args.length, alphabet, args.salt)

    print(f"Done! Saved {total_messages:,} password entries to {output_path}")


def process_to_yaml(output_dir: str, length: int, alphabet: str, salt: str) -> str:
    """Process passwords and save to YAML format. Returns the output path."""
    total_messages = len(alphabet) ** length
    results: Dict = {
        "password_length": length,
        "alphabet": alphabet,
        "salt": salt,
        "total_messages": total_messages,
        "distinct_digests": 0,
        "messages": [],
    }

    print(f"Processing {total_messages:,} passwords...")

    digests = set()
    sample_entries = []
    for idx, password in enumerate(enumerate_passwords(length, alphabet)):
        if idx > 0 and idx % 10000 == 0:
            print(f"  Progress: {idx:,} / {total_messages:,} ({100*idx/total_messages:.1f}%)")

        digest_hex, folded = hash_password_with_state_tracking(password, salt)
        digests.add(digest_hex)

        entry = {
            "password": password,
            "password_hex": password.encode("utf-8").hex(),
            "digest_hex": digest_hex,
            "folded_state": [f"{w:08x}" for w in folded],
        }
        results["messages"].append(entry)

        if idx < 4:
            sample_entries.append(entry)

    results["distinct_digests"] = len(digests)

    # Write to YAML file
    output_path = os.path.join(output_dir, f"{length}.yaml")
    print(f"Writing results to {output_path}...")

    with open(output_path, "w", encoding="utf-8") as f:
        yaml.dump(results, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    _print_samples(sample_entries)
    _print_collisions(total_messages, len(digests))
    return output_path


def process_to_sqlite(output_dir: str, length: int, alphabet: str, salt: str) -> str:
    """Process passwords and save to SQLite database. Returns the output path."""
    total_messages = len(alphabet) ** length
    output_path = os.path.join(output_dir, f"{length}.db")
    print(f"Processing {total_messages:,} passwords to SQLite database...")

    # Remove existing database if present
    if os.path.exists(output_path):
        os.remove(output_path)

    conn = sqlite3.connect(output_path)
    cursor = conn.cursor()

    # Create tables
    cursor.executescript("""
        CREATE TABLE metadata (
            password_length INTEGER NOT NULL,
            alphabet TEXT NOT NULL,
            salt TEXT NOT NULL,
            total_messages INTEGER NOT NULL,
            distinct_digests INTEGER NOT NULL
        );

        CREATE TABLE messages (
            id INTEGER PRIMARY KEY,
            password TEXT NOT NULL,
            password_hex TEXT NOT NULL,
            digest_hex TEXT NOT NULL
        );

        CREATE TABLE states (
            message_id INTEGER NOT NULL,
            slot_index INTEGER NOT NULL,
            state_value TEXT NOT NULL,
            FOREIGN KEY (message_id) REFERENCES messages(id)
        );

        CREATE INDEX idx_states_message ON states(message_id);
        CREATE INDEX idx_messages_digest ON messages(digest_hex);
    """)

    # Process passwords in batches for better performance
    BATCH_SIZE = 1000
    message_batch = []
    state_batch = []
    sample_entries = []
    digests = set()

    for idx, password in enumerate(enumerate_passwords(length, alphabet)):
        if idx > 0 and idx % 10000 == 0:
            print(f"  Progress: {idx:,} / {total_messages:,} ({100*idx/total_messages:.1f}%)")

        digest_hex, folded = hash_password_with_state_tracking(password, salt)
        digests.add(digest_hex)

        password_hex = password.encode("utf-8").hex()
        message_batch.append((idx, password, password_hex, digest_hex))

        for slot_idx, value in enumerate(folded):
            state_batch.append((idx, slot_idx, f"{value:08x}"))

        if idx < 4:
            sample_entries.append({
                "password": password,
                "password_hex": password_hex,
                "digest_hex": digest_hex,
            })

        # Commit batch periodically
        if len(message_batch) >= BATCH_SIZE:
            cursor.executemany("INSERT INTO messages VALUES (?, ?, ?, ?)", message_batch)
            cursor.executemany("INSERT INTO states VALUES (?, ?, ?)", state_batch)
            conn.commit()
            message_batch = []
            state_batch = []

    # Insert remaining batch
    if message_batch:
        cursor.executemany("INSERT INTO messages VALUES (?, ?, ?, ?)", message_batch)
        cursor.executemany("INSERT INTO states VALUES (?, ?, ?)", state_batch)

    # Metadata last, once the distinct digest count is known
    cursor.execute(
        "INSERT INTO metadata VALUES (?, ?, ?, ?, ?)",
        (length, alphabet, salt, total_messages, len(digests)),
    )
    conn.commit()
    conn.close()

    _print_samples(sample_entries)
    _print_collisions(total_messages, len(digests))
    return output_path


def _print_samples(sample_entries: List[Dict]) -> None:
    """Print sample entries from the results."""
    print("\nSample entries:")
    for i, sample in enumerate(sample_entries):
        print(f"  [{i}] password={sample['password']:<16} hex={sample['password_hex']:<8} digest={sample['digest_hex'][:16]}...")


def _print_collisions(total_messages: int, distinct: int) -> None:
    """Print the digest collision summary."""
    print(f"\nDistinct digests: {distinct:,} / {total_messages:,}")
    if distinct != total_messages:
        print(f"  WARNING: {total_messages - distinct:,} digest collision(s) found")


if __name__ == "__main__":
    main()
