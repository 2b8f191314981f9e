"""Control state machine of the bit-serial Montgomery multiplier.

One call to step() is one clock edge:

    IDLE ──accept──> LOAD ──> ITERATE (x WIDTH) ──> CORRECT ──> PUBLISHED
      ^                                                            │
      └────────────────────────── retire ──────────────────────────┘

Every step reads the current registers, computes the next ones and commits
them together, so a step never sees its own partial updates.
"""

import enum
import logging
from typing import Optional

from monpro.monpro_math import cond_sub_n, cond_sub_n_truncated, reduction_step, select_bit
from monpro.snapshot import RegisterSnapshot

log = logging.getLogger(__name__)


class EngineState(enum.Enum):
    IDLE = 0
    LOAD = 1
    ITERATE = 2
    CORRECT = 3
    PUBLISHED = 4


BUSY_STATES = frozenset({EngineState.LOAD, EngineState.ITERATE, EngineState.CORRECT})


class ControlStateMachine:
    """Registers and sequencing for one computation at a time.

    truncate_correction selects the legacy-parity comparator, which looks at
    the low WIDTH bits of the accumulator only.
    """

    def __init__(self, width: int, truncate_correction: bool = False):
        self.width = width
        self.truncate_correction = truncate_correction
        self.clear()

    def clear(self):
        """Return to IDLE with every register zeroed and the snapshot dropped."""
        self.state = EngineState.IDLE
        self.accumulator = 0
        self.counter = 0
        self.snapshot: Optional[RegisterSnapshot] = None
        self.result: Optional[int] = None

    @property
    def busy(self) -> bool:
        return self.state in BUSY_STATES

    def accept(self, snapshot: RegisterSnapshot) -> bool:
        """Take a new computation. Ignored (False) unless IDLE."""
        if self.state is not EngineState.IDLE:
            return False
        assert snapshot.width == self.width, (
            f"snapshot width {snapshot.width} != engine width {self.width}"
        )
        self.snapshot = snapshot
        self._goto(EngineState.LOAD)
        return True

    def step(self):
        """Advance one clock edge. IDLE and PUBLISHED hold."""
        state = self.state
        acc = self.accumulator
        counter = self.counter
        result = self.result

        if state is EngineState.LOAD:
            acc = 0
            counter = 0
            state = EngineState.ITERATE

        elif state is EngineState.ITERATE:
            snap = self.snapshot
            acc = reduction_step(acc, select_bit(snap.a, counter), snap.b, snap.n)
            if counter == self.width - 1:
                state = EngineState.CORRECT
            else:
                counter += 1

        elif state is EngineState.CORRECT:
            if self.truncate_correction:
                acc = cond_sub_n_truncated(acc, self.snapshot.n, self.width)
            else:
                acc = cond_sub_n(acc, self.snapshot.n)
            result = acc
            state = EngineState.PUBLISHED

        # commit
        self.accumulator = acc
        self.counter = counter
        self.result = result
        if state is not self.state:
            self._goto(state)

    def retire(self) -> bool:
        """Release a published result and return to IDLE."""
        if self.state is not EngineState.PUBLISHED:
            return False
        self.clear()
        log.debug("PUBLISHED -> IDLE")
        return True

    def _goto(self, state: EngineState):
        log.debug("%s -> %s", self.state.name, state.name)
        self.state = state
