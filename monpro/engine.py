"""Tick-accurate Montgomery multiplier engine with a request/done handshake.

The engine wraps ControlStateMachine with one of two handshake policies
(see HandshakePolicy). Timing matches the hardware: once a request is
accepted, done rises after exactly WIDTH + 2 ticks:

    1 tick   LOAD      clear accumulator and counter
    WIDTH    ITERATE   one reduction step per operand bit
    1 tick   CORRECT   final conditional subtraction

Example (pulse policy):

    eng = MonproEngine(8)
    eng.request(0xFF, 0xAA, 0xFD)
    while not eng.done:
        eng.tick()
    s = eng.poll().result
    eng.acknowledge()
"""

import enum
import logging
from typing import NamedTuple, Optional

from monpro.config import EngineConfig, HandshakePolicy, ModulusCheck
from monpro.errors import EngineBusy, EvenModulus, HandshakeError
from monpro.fsm import ControlStateMachine, EngineState
from monpro.snapshot import ChangeDetector, RegisterSnapshot

log = logging.getLogger(__name__)


class RequestOutcome(enum.Enum):
    ACCEPTED = "accepted"
    BUSY = "busy"


class Poll(NamedTuple):
    done: bool
    result: Optional[int]


class MonproEngine:
    """Software model of one Montgomery multiplier instance.

    Not thread-safe. One computation may be in flight; a request made while
    the engine is not IDLE is ignored and reported as BUSY, never queued.
    """

    def __init__(self, width: int, policy=HandshakePolicy.PULSE,
                 modulus_check=ModulusCheck.STRICT):
        self.config = EngineConfig(width, policy, modulus_check)
        self._fsm = ControlStateMachine(
            width, truncate_correction=self.config.modulus_check is ModulusCheck.LEGACY
        )
        self._watch = ChangeDetector()
        self._request_line = False
        self._cycles = 0

    @classmethod
    def from_config(cls, config: EngineConfig) -> "MonproEngine":
        return cls(config.width, config.policy, config.modulus_check)

    def __repr__(self):
        return (f"MonproEngine(width={self.width}, policy={self.policy.value}, "
                f"mode={self.config.modulus_check.value}, state={self.state.name})")

    # =====================================================================
    # Observable registers
    # =====================================================================

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def policy(self) -> HandshakePolicy:
        return self.config.policy

    @property
    def state(self) -> EngineState:
        return self._fsm.state

    @property
    def done(self) -> bool:
        return self._fsm.state is EngineState.PUBLISHED

    @property
    def accumulator(self) -> int:
        return self._fsm.accumulator

    @property
    def counter(self) -> int:
        return self._fsm.counter

    @property
    def snapshot(self) -> Optional[RegisterSnapshot]:
        return self._fsm.snapshot

    @property
    def cycles(self) -> int:
        """Ticks spent on the current or most recent computation.

        Counts from acceptance to done, so it reads WIDTH + 2 once published.
        The count is kept after acknowledge() or release(); only the next
        accepted request or reset() clears it.
        """
        return self._cycles

    @property
    def request_line(self) -> bool:
        """Level of the hold-policy request signal (always False for pulse)."""
        return self._request_line

    # =====================================================================
    # Handshake
    # =====================================================================

    def request(self, a, b, n) -> RequestOutcome:
        """Ask the engine to compute a * b * R^-1 mod n.

        Operands are copied on acceptance. Raises OperandOutOfRange for values
        that do not fit in WIDTH bits, and EvenModulus for an even n in strict
        mode; in both cases the engine stays IDLE.
        """
        if self._fsm.state is not EngineState.IDLE:
            log.debug("request ignored: engine is %s", self._fsm.state.name)
            return RequestOutcome.BUSY

        snapshot = RegisterSnapshot.capture(a, b, n, self.width)
        if snapshot.n % 2 == 0 and self.config.modulus_check is ModulusCheck.STRICT:
            raise EvenModulus(snapshot.n)

        self._fsm.accept(snapshot)
        self._watch.arm(snapshot)
        if self.policy is HandshakePolicy.HOLD:
            self._request_line = True
        self._cycles = 0
        log.info("accepted a=0x%x b=0x%x n=0x%x", snapshot.a, snapshot.b, snapshot.n)
        return RequestOutcome.ACCEPTED

    def tick(self):
        """One clock edge."""
        state = self._fsm.state
        if state is EngineState.IDLE:
            return
        if state is EngineState.PUBLISHED:
            if self.policy is HandshakePolicy.HOLD and not self._request_line:
                self._retire()
            return

        self._fsm.step()
        self._cycles += 1
        if self._fsm.state is EngineState.PUBLISHED:
            log.info("published result=0x%x after %d cycles", self._fsm.result, self._cycles)

    def poll(self) -> Poll:
        """Read done and, while PUBLISHED, the result."""
        if self.done:
            return Poll(True, self._fsm.result)
        return Poll(False, None)

    def acknowledge(self) -> bool:
        """Pulse policy: consume the published result and return to IDLE.

        Returns False (and does nothing) unless the engine is PUBLISHED.
        """
        if self.policy is not HandshakePolicy.PULSE:
            raise HandshakeError("acknowledge() is only valid with the pulse policy")
        if not self.done:
            return False
        self._retire()
        return True

    def release(self) -> bool:
        """Hold policy: drop the request line.

        Returns True if the engine went back to IDLE right away (it was
        PUBLISHED). Dropped earlier, the engine still finishes and returns to
        IDLE on the first tick after publishing.
        """
        if self.policy is not HandshakePolicy.HOLD:
            raise HandshakeError("release() is only valid with the hold policy")
        self._request_line = False
        if not self.done:
            return False
        self._retire()
        return True

    def reset(self):
        """Clear all state and return to IDLE, discarding any computation."""
        if self._fsm.state is not EngineState.IDLE:
            log.info("reset in state %s", self._fsm.state.name)
        self._fsm.clear()
        self._watch.clear()
        self._request_line = False
        self._cycles = 0

    def operands_changed(self, a, b, n) -> bool:
        """True if (a, b, n) differs from the operands of the current computation.

        Informational; the engine never restarts on its own.
        """
        return self._watch.changed(a, b, n)

    # =====================================================================
    # Convenience
    # =====================================================================

    def compute(self, a, b, n) -> int:
        """Run one full computation through the normal tick path.

        Raises EngineBusy if a computation is already in flight or waiting
        to be consumed.
        """
        if self._fsm.state is not EngineState.IDLE:
            raise EngineBusy(f"engine is {self._fsm.state.name}")
        self.request(a, b, n)
        while not self.done:
            self.tick()
        result = self.poll().result
        if self.policy is HandshakePolicy.HOLD:
            self.release()
        else:
            self.acknowledge()
        return result

    def _retire(self):
        self._fsm.retire()
        self._watch.clear()
