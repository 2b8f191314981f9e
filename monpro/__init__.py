"""Tick-accurate software model of a bit-serial Montgomery multiplier."""

from monpro.config import EngineConfig, HandshakePolicy, ModulusCheck
from monpro.engine import MonproEngine, Poll, RequestOutcome
from monpro.errors import (
    EngineBusy,
    EvenModulus,
    HandshakeError,
    InvalidWidth,
    MonproError,
    OperandOutOfRange,
)
from monpro.fsm import EngineState
from monpro.monpro_math import (
    from_montgomery,
    monpro_reference,
    montgomery_oracle,
    reduction_step,
    to_montgomery,
)

__version__ = "0.1.0"
