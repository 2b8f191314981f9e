#!/usr/bin/env python3
"""Standalone verification of the engine against ground truth.

This script does NOT trust the bit-serial datapath. It checks every engine
result against a * b * R^-1 mod n computed with an exact modular inverse:

  1. Exhaustive: every odd n and every (a, b) in [0, 2^w) at a small width.
  2. Sampled: seeded random triples at larger widths.
  3. Timing: done after exactly WIDTH + 2 ticks for every sample.

Run: python -m monpro verify
"""

import random
import sys

from monpro.engine import MonproEngine
from monpro.monpro_math import montgomery_oracle, radix

MAX_REPORTED = 20


def check_one(engine, a, b, n):
    """Return a mismatch description, or None if the engine is correct."""
    got = engine.compute(a, b, n)
    want = montgomery_oracle(a, b, n, engine.width)
    if engine.cycles != engine.width + 2:
        return f"a=0x{a:x} b=0x{b:x} n=0x{n:x}: {engine.cycles} cycles, expected {engine.width + 2}"
    if got % n != want:
        return f"a=0x{a:x} b=0x{b:x} n=0x{n:x}: got 0x{got:x}, expected 0x{want:x} (mod n)"
    if b < n and not 0 <= got < n:
        return f"a=0x{a:x} b=0x{b:x} n=0x{n:x}: result 0x{got:x} not reduced"
    return None


def verify_exhaustive(width=5):
    """All odd n, all a, b at the given width."""
    engine = MonproEngine(width)
    errors = 0
    checked = 0
    r = radix(width)
    for n in range(1, r, 2):
        for a in range(r):
            for b in range(r):
                problem = check_one(engine, a, b, n)
                if problem:
                    print(f"MISMATCH: {problem}")
                    errors += 1
                    if errors >= MAX_REPORTED:
                        print(f"... stopping after {MAX_REPORTED} errors")
                        return errors
                checked += 1
    print(f"exhaustive width={width}: {checked:,} triples checked, {errors} errors")
    return errors


def verify_sampled(widths=(8, 16, 32, 64, 256), n_samples=2000, seed=99):
    """Random (a, b, odd n) triples per width."""
    rng = random.Random(seed)
    errors = 0
    for width in widths:
        engine = MonproEngine(width)
        for _ in range(n_samples):
            n = rng.getrandbits(width) | 1
            a = rng.getrandbits(width)
            b = rng.randrange(n)
            problem = check_one(engine, a, b, n)
            if problem:
                print(f"MISMATCH width={width}: {problem}")
                errors += 1
                if errors >= MAX_REPORTED:
                    return errors
        print(f"sampled width={width}: {n_samples:,} triples, {errors} errors so far")
    return errors


def main(width=5, n_samples=2000, seed=99):
    total_errors = 0

    print("=" * 60)
    print("Montgomery engine vs exact big-integer ground truth")
    print("=" * 60)

    print(f"\n--- 1. exhaustive, width {width} ---")
    total_errors += verify_exhaustive(width)

    print("\n--- 2. sampled, widths 8..256 ---")
    total_errors += verify_sampled(n_samples=n_samples, seed=seed)

    print("\n" + "=" * 60)
    if total_errors == 0:
        print("ALL CHECKS PASSED")
    else:
        print(f"FAILED: {total_errors} total errors")
    print("=" * 60)

    return 1 if total_errors else 0


if __name__ == "__main__":
    sys.exit(main())
