"""Checks of the bit-serial arithmetic against exact big-integer ground truth."""

import random

from monpro.monpro_math import (
    cond_sub_n,
    cond_sub_n_truncated,
    from_montgomery,
    mask,
    monpro_reference,
    monpro_trace,
    montgomery_oracle,
    radix,
    reduction_step,
    select_bit,
    shift_register_bits,
    step_terms,
    to_montgomery,
)


def test_reduction_step_by_hand():
    # s=85 is odd, a_bit=1, b[0]=0  ->  qi = 1 ^ 0 = 1
    terms = step_terms(85, 1, 0xAA, 0xFD)
    assert terms.qi == 1
    assert terms.y == 0xAA
    assert terms.z == 0xFD
    assert terms.t == 85 + 0xAA + 0xFD == 508
    assert reduction_step(85, 1, 0xAA, 0xFD) == 254

    # a_bit=0 adds nothing from b; even s needs no n
    assert step_terms(212, 0, 0xAA, 0xFD) == (0, 0, 0, 212)
    assert reduction_step(212, 0, 0xAA, 0xFD) == 106


def test_quotient_bit_makes_sum_even():
    """For odd n the shift never drops a set bit."""
    rng = random.Random(42)
    for _ in range(10_000):
        width = rng.randint(1, 64)
        n = rng.getrandbits(width) | 1
        b = rng.getrandbits(width)
        s = rng.randrange(radix(width + 1))
        a_bit = rng.getrandbits(1)
        assert step_terms(s, a_bit, b, n).t & 1 == 0


def test_bit_selection_strategies_agree():
    rng = random.Random(7)
    for _ in range(1000):
        width = rng.randint(1, 128)
        a = rng.getrandbits(width)
        indexed = [select_bit(a, i) for i in range(width)]
        assert list(shift_register_bits(a, width)) == indexed
    assert list(shift_register_bits(0b1101, 4)) == [1, 0, 1, 1]


def test_cond_sub_n():
    assert cond_sub_n(0, 7) == 0
    assert cond_sub_n(6, 7) == 6
    assert cond_sub_n(7, 7) == 0
    assert cond_sub_n(13, 7) == 6


def test_cond_sub_n_truncated_drops_top_bit():
    # 282 = 0x11A: full compare subtracts, low 8 bits (0x1A) do not
    assert cond_sub_n(282, 0xFD) == 29
    assert cond_sub_n_truncated(282, 0xFD, 8) == 0x1A
    # below 2^width both comparators agree
    for s in range(256):
        assert cond_sub_n_truncated(s, 0xFD, 8) == cond_sub_n(s, 0xFD)


def test_exhaustive_small_width():
    """Every odd n and every (a, b) at width 4."""
    width = 4
    r = radix(width)
    for n in range(1, r, 2):
        for a in range(r):
            for b in range(r):
                s = monpro_reference(a, b, n, width)
                assert s % n == montgomery_oracle(a, b, n, width), (a, b, n)
                assert 0 <= s <= mask(width)
                if b < n:
                    assert s < n, (a, b, n)


def test_sampled_wide():
    rng = random.Random(1234)
    for width in (16, 64, 255, 256, 1024):
        for _ in range(50):
            n = rng.getrandbits(width) | 1
            a = rng.getrandbits(width)
            b = rng.randrange(n)
            assert monpro_reference(a, b, n, width) == montgomery_oracle(a, b, n, width)


def test_concrete_width8_scenario():
    a, b, n = 0xFF, 0xAA, 0xFD
    expected = (a * b * pow(2**8, -1, n)) % n
    assert expected == 0x1D
    assert monpro_reference(a, b, n, 8) == expected


def test_trace_rows():
    rows = list(monpro_trace(0xFF, 0xAA, 0xFD, 8))
    assert [r.i for r in rows] == list(range(8))
    assert all(r.a_bit == 1 for r in rows)
    assert [r.s for r in rows] == [85, 254, 212, 191, 307, 365, 394, 282]
    assert [r.qi for r in rows] == [0, 1, 0, 0, 1, 1, 1, 0]


def test_accumulator_fits_width_plus_one():
    rng = random.Random(5)
    for _ in range(500):
        width = rng.randint(1, 64)
        a = rng.getrandbits(width)
        b = rng.getrandbits(width)
        n = rng.getrandbits(width) | 1
        for row in monpro_trace(a, b, n, width):
            assert row.s < radix(width + 1)
            assert row.t < radix(width + 2)


def test_legacy_even_modulus_golden():
    # recorded output of the unmodified datapath for an even modulus
    assert monpro_reference(0xFF, 0xAA, 0xFE, 8, truncate=True) == 0x1A
    assert monpro_reference(0xFF, 0xAA, 0xFD, 8, truncate=True) == 0x1A


def test_residue_conversion():
    rng = random.Random(3)
    for _ in range(200):
        width = rng.randint(2, 128)
        n = rng.getrandbits(width) | 1
        x = rng.randrange(n)
        assert from_montgomery(to_montgomery(x, n, width), n, width) == x


def test_composability():
    """Montgomery products compose across residues."""
    rng = random.Random(11)
    for _ in range(200):
        width = rng.randint(2, 128)
        n = rng.getrandbits(width) | 1
        a = rng.randrange(n)
        b = rng.randrange(n)
        a_res = to_montgomery(a, n, width)
        b_res = to_montgomery(b, n, width)
        # one residue in: plain product out
        assert monpro_reference(a_res, b, n, width) == a * b % n
        # two residues in: residue of the product out
        assert monpro_reference(a_res, b_res, n, width) == to_montgomery(a * b % n, n, width)
