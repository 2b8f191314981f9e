"""Python reference arithmetic for the bit-serial Montgomery multiplier.

Used as the datapath of the engine model and as test oracle. The exact
big-integer functions at the bottom (montgomery_oracle and the residue
conversions) never touch the bit-serial loop, so they can be trusted as
ground truth for it.
"""

from typing import Iterator, NamedTuple


def mask(width: int) -> int:
    """All-ones value of the given bit width."""
    return (1 << width) - 1


def radix(width: int) -> int:
    """Montgomery radix R = 2^width."""
    return 1 << width


class StepTerms(NamedTuple):
    """Combinational signals of one reduction step."""
    qi: int
    y: int
    z: int
    t: int


def step_terms(s: int, a_bit: int, b: int, n: int) -> StepTerms:
    """Evaluate the combinational terms of one iteration.

        qi = s[0] ^ (a_bit & b[0])
        y  = b if a_bit else 0
        z  = n if qi else 0
        t  = s + y + z          # WIDTH+2 bits, exact
    """
    assert a_bit in (0, 1), f"a_bit={a_bit} is not a single bit"
    qi = (s & 1) ^ (a_bit & b & 1)
    y = b if a_bit else 0
    z = n if qi else 0
    return StepTerms(qi, y, z, s + y + z)


def reduction_step(s: int, a_bit: int, b: int, n: int) -> int:
    """One Montgomery iteration: s' = (s + a_bit*b + qi*n) >> 1.

    For odd n, qi makes t even, so the shift never drops a set bit.
    """
    return step_terms(s, a_bit, b, n).t >> 1


def select_bit(a: int, i: int) -> int:
    """Indexed bit selection: bit i of the stationary operand."""
    return (a >> i) & 1


def shift_register_bits(a: int, width: int) -> Iterator[int]:
    """Shift-register bit selection: test bit 0, then shift right.

    Yields bit i of the original operand on the i-th draw, because the
    shift happens only after the bit has been extracted.
    """
    reg = a
    for _ in range(width):
        yield reg & 1
        reg >>= 1


def cond_sub_n(s: int, n: int) -> int:
    """Final correction: subtract n once if s >= n (full-width compare)."""
    return s - n if s >= n else s


def cond_sub_n_truncated(s: int, n: int, width: int) -> int:
    """Correction on the low `width` bits of s only.

    This is what a result register of exactly `width` bits does with the
    WIDTH+1-bit accumulator: the top bit is lost before the comparison.
    """
    low = s & mask(width)
    return low - n if low >= n else low


def monpro_reference(a: int, b: int, n: int, width: int, truncate: bool = False) -> int:
    """Bit-serial Montgomery product, run as a plain loop.

    Shares reduction_step with the engine but selects bits through a shift
    register instead of the engine's indexed selection.
    """
    assert 0 <= a < radix(width), f"a={a} out of range for width {width}"
    assert 0 <= b < radix(width), f"b={b} out of range for width {width}"
    assert 0 <= n < radix(width), f"n={n} out of range for width {width}"
    s = 0
    for a_bit in shift_register_bits(a, width):
        s = reduction_step(s, a_bit, b, n)
    if truncate:
        return cond_sub_n_truncated(s, n, width)
    return cond_sub_n(s, n)


class TraceRow(NamedTuple):
    i: int
    a_bit: int
    qi: int
    y: int
    z: int
    t: int
    s: int


def monpro_trace(a: int, b: int, n: int, width: int) -> Iterator[TraceRow]:
    """Yield every iteration's signals; s is the accumulator after the step."""
    assert 0 <= a < radix(width), f"a={a} out of range for width {width}"
    assert 0 <= b < radix(width), f"b={b} out of range for width {width}"
    assert 0 <= n < radix(width), f"n={n} out of range for width {width}"
    s = 0
    for i in range(width):
        a_bit = select_bit(a, i)
        terms = step_terms(s, a_bit, b, n)
        s = terms.t >> 1
        yield TraceRow(i, a_bit, terms.qi, terms.y, terms.z, terms.t, s)


# Exact big-integer ground truth

def montgomery_oracle(a: int, b: int, n: int, width: int) -> int:
    """a * b * R^-1 mod n, computed with an exact modular inverse."""
    assert n % 2 == 1, f"n={n} must be odd"
    return a * b * pow(radix(width), -1, n) % n


def to_montgomery(x: int, n: int, width: int) -> int:
    """Montgomery residue x * R mod n."""
    return x * radix(width) % n


def from_montgomery(x: int, n: int, width: int) -> int:
    """Inverse of to_montgomery: x * R^-1 mod n."""
    assert n % 2 == 1, f"n={n} must be odd"
    return x * pow(radix(width), -1, n) % n
