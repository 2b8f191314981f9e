"""Engine configuration: operand width, handshake policy and modulus checking.

The RTL testbench and its Makefile agree on WIDTH through the environment,
so the same settings can be read back with EngineConfig.from_env().
"""

import enum
import os
from dataclasses import dataclass

from monpro.errors import InvalidWidth

DEFAULT_WIDTH = 8

ENV_WIDTH = "MONPRO_WIDTH"
ENV_POLICY = "MONPRO_POLICY"
ENV_MODE = "MONPRO_MODE"


class HandshakePolicy(enum.Enum):
    """How a caller starts a computation and releases its result.

    HOLD:  request is a level; the engine leaves PUBLISHED when it drops.
    PULSE: request is an edge; the engine leaves PUBLISHED on acknowledge.
    """
    HOLD = "hold"
    PULSE = "pulse"


class ModulusCheck(enum.Enum):
    """STRICT rejects even moduli; LEGACY reproduces the raw datapath."""
    STRICT = "strict"
    LEGACY = "legacy"


def check_width(width) -> int:
    # bool is an int subclass but never a meaningful width
    if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
        raise InvalidWidth(width)
    return width


@dataclass(frozen=True)
class EngineConfig:
    width: int = DEFAULT_WIDTH
    policy: HandshakePolicy = HandshakePolicy.PULSE
    modulus_check: ModulusCheck = ModulusCheck.STRICT

    def __post_init__(self):
        check_width(self.width)
        # accept plain strings, e.g. from argparse choices
        object.__setattr__(self, "policy", HandshakePolicy(self.policy))
        object.__setattr__(self, "modulus_check", ModulusCheck(self.modulus_check))

    @classmethod
    def from_env(cls, environ=None):
        """Build a config from MONPRO_WIDTH / MONPRO_POLICY / MONPRO_MODE."""
        env = os.environ if environ is None else environ
        raw_width = env.get(ENV_WIDTH, str(DEFAULT_WIDTH))
        try:
            width = int(raw_width, 0)
        except ValueError:
            raise InvalidWidth(raw_width) from None
        return cls(
            width=width,
            policy=env.get(ENV_POLICY, HandshakePolicy.PULSE.value).lower(),
            modulus_check=env.get(ENV_MODE, ModulusCheck.STRICT.value).lower(),
        )
