"""Operand capture and operand-change observation."""

import operator
from dataclasses import dataclass
from typing import Optional, Tuple

from monpro.errors import OperandOutOfRange


@dataclass(frozen=True)
class RegisterSnapshot:
    """Engine-owned copy of A, B and N taken when a request is accepted."""
    a: int
    b: int
    n: int
    width: int

    @classmethod
    def capture(cls, a, b, n, width: int) -> "RegisterSnapshot":
        """Copy the caller's operands, rejecting anything that does not fit.

        Operands must be integers (anything supporting __index__); they are
        never truncated to the register width.
        """
        values = {}
        for name, value in (("a", a), ("b", b), ("n", n)):
            try:
                v = operator.index(value)
            except TypeError:
                raise OperandOutOfRange(name, value, width) from None
            if not 0 <= v < (1 << width):
                raise OperandOutOfRange(name, value, width)
            values[name] = v
        return cls(width=width, **values)

    def operands(self) -> Tuple[int, int, int]:
        return (self.a, self.b, self.n)


class ChangeDetector:
    """Compares caller-side operands against an armed snapshot.

    Observation only: nothing in the engine restarts on a change. Callers
    that want an auto-restart policy reset and re-request themselves.
    """

    def __init__(self):
        self._armed: Optional[RegisterSnapshot] = None

    @property
    def armed(self) -> bool:
        return self._armed is not None

    def arm(self, snapshot: RegisterSnapshot):
        self._armed = snapshot

    def clear(self):
        self._armed = None

    def changed(self, a, b, n) -> bool:
        """True if (a, b, n) differs from the armed snapshot.

        Always False while nothing is armed.
        """
        if self._armed is None:
            return False
        return (a, b, n) != self._armed.operands()
