"""Command-line front end.

    python -m monpro compute 0xFF 0xAA 0xFD --width 8
    python -m monpro trace 0xFF 0xAA 0xFD --width 8
    python -m monpro verify --width 5
"""

import argparse
import logging
import sys

from monpro import verify
from monpro.config import DEFAULT_WIDTH, EngineConfig, HandshakePolicy, ModulusCheck, check_width
from monpro.engine import MonproEngine
from monpro.errors import EvenModulus, MonproError
from monpro.monpro_math import cond_sub_n, cond_sub_n_truncated, monpro_trace
from monpro.snapshot import RegisterSnapshot


def int_arg(text):
    """Decimal or 0x-prefixed integer."""
    return int(text, 0)


def build_parser():
    parser = argparse.ArgumentParser(prog="monpro", description=__doc__.splitlines()[0])
    parser.add_argument("-v", "--verbose", action="store_true", help="log state transitions")
    sub = parser.add_subparsers(dest="command", required=True)

    def operands(p):
        p.add_argument("a", type=int_arg)
        p.add_argument("b", type=int_arg)
        p.add_argument("n", type=int_arg)
        p.add_argument("-w", "--width", type=int, default=DEFAULT_WIDTH)

    p = sub.add_parser("compute", help="run one computation through the engine")
    operands(p)
    p.add_argument("--policy", choices=[x.value for x in HandshakePolicy],
                   default=HandshakePolicy.PULSE.value)
    p.add_argument("--legacy", action="store_true",
                   help="legacy-parity datapath: accept even moduli, truncated correction")

    p = sub.add_parser("trace", help="print the signals of every iteration")
    operands(p)
    p.add_argument("--legacy", action="store_true",
                   help="accept even moduli and show the truncated correction")

    p = sub.add_parser("verify", help="check the engine against exact arithmetic")
    p.add_argument("-w", "--width", type=int, default=5, help="width for the exhaustive pass")
    p.add_argument("--samples", type=int, default=2000)
    p.add_argument("--seed", type=int, default=99)
    return parser


def cmd_compute(args):
    config = EngineConfig(
        width=args.width,
        policy=args.policy,
        modulus_check=ModulusCheck.LEGACY if args.legacy else ModulusCheck.STRICT,
    )
    engine = MonproEngine.from_config(config)
    result = engine.compute(args.a, args.b, args.n)
    digits = (args.width + 3) // 4
    print(f"S = 0x{result:0{digits}x} ({result})")
    print(f"cycles: {engine.cycles}")
    return 0


def cmd_trace(args):
    width = check_width(args.width)
    snap = RegisterSnapshot.capture(args.a, args.b, args.n, width)
    if snap.n % 2 == 0 and not args.legacy:
        raise EvenModulus(snap.n)

    digits = (width + 4) // 4 + 1
    print(f"{'i':>4} a qi {'y':>{digits}} {'z':>{digits}} {'t':>{digits}} {'S':>{digits}}")
    s = 0
    for row in monpro_trace(snap.a, snap.b, snap.n, width):
        print(f"{row.i:>4} {row.a_bit} {row.qi:>2} {row.y:>{digits}x} {row.z:>{digits}x} "
              f"{row.t:>{digits}x} {row.s:>{digits}x}")
        s = row.s
    if args.legacy:
        corrected = cond_sub_n_truncated(s, snap.n, width)
    else:
        corrected = cond_sub_n(s, snap.n)
    print(f"corrected: 0x{corrected:x}")
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s: %(message)s")

    try:
        if args.command == "compute":
            return cmd_compute(args)
        if args.command == "trace":
            return cmd_trace(args)
        return verify.main(width=args.width, n_samples=args.samples, seed=args.seed)
    except MonproError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
