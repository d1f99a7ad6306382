"""Run enumerate_digests.py for a range of password lengths.

This script takes a start and end number and runs enumerate_digests.py
for each value in the range [start, end] (inclusive). Any further options
(e.g. --alphabet, --salt, --format) are passed through unchanged.

Usage:
    python run_enumerate_range.py <start> <end> [enumerate_digests options]
    python run_enumerate_range.py 1 8                     # Lengths 1, 2, ..., 8
    python run_enumerate_range.py 2 4 --alphabet abc      # Lengths 2, 3, 4
    python run_enumerate_range.py 1 6 --keep-going        # Report failures at the end
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from typing import List


SCRIPT = os.path.join(os.path.dirname(os.path.abspath(__file__)), "enumerate_digests.py")


def build_command(length: int, extra_args: list[str]) -> list[str]:
    """Return the subprocess argv for one password length."""
    return [sys.executable, SCRIPT, str(length), *extra_args]


def run_lengths(start: int, end: int, extra_args: list[str], keep_going: bool = False) -> List[int]:
    """Enumerate every length in [start, end]; return the lengths that failed.

    Without `keep_going`, the first failing length stops the run.
    """
    failed: List[int] = []
    for length in range(start, end + 1):
        print(f"--- password length {length} ({length - start + 1}/{end - start + 1}) ---")
        result = subprocess.run(build_command(length, extra_args))
        if result.returncode != 0:
            print(f"length {length}: enumerate_digests.py exited with status {result.returncode}\n")
            failed.append(length)
            if not keep_going:
                break
        else:
            print(f"length {length}: ok\n")
    return failed


def main():
    parser = argparse.ArgumentParser(
        description="Run enumerate_digests.py for a range of password lengths"
    )
    parser.add_argument(
        "start",
        type=int,
        help="Shortest password length (inclusive, >= 1)",
    )
    parser.add_argument(
        "end",
        type=int,
        help="Longest password length (inclusive)",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue with the next length when one fails",
    )
    args, extra_args = parser.parse_known_args()

    if args.start < 1:
        print(f"ERROR: Passwords must be at least 1 character (got start={args.start})")
        sys.exit(1)

    if args.end < args.start:
        print(f"ERROR: Empty length range (start={args.start}, end={args.end})")
        sys.exit(1)

    try:
        failed = run_lengths(args.start, args.end, extra_args, keep_going=args.keep_going)
    except KeyboardInterrupt:
        print("\nInterrupted")
        sys.exit(1)

    if failed:
        print(f"Failed lengths: {', '.join(str(n) for n in failed)}")
        sys.exit(1)
    print(f"Enumerated password lengths {args.start}..{args.end}")


if __name__ == "__main__":
    main()
