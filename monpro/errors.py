"""Exceptions raised by the Montgomery multiplier model."""


class MonproError(Exception):
    """Base class for all engine errors."""


class InvalidWidth(MonproError, ValueError):
    """Operand width is not a positive integer."""

    def __init__(self, width):
        super().__init__(f"operand width must be a positive integer, got {width!r}")
        self.width = width


class EvenModulus(MonproError, ValueError):
    """Modulus is even, so Montgomery reduction is undefined.

    Only raised in strict mode. Legacy-parity engines run the datapath anyway.
    """

    def __init__(self, n):
        super().__init__(f"modulus 0x{n:x} is even; Montgomery reduction needs an odd modulus")
        self.n = n


class OperandOutOfRange(MonproError, ValueError):
    """Operand does not fit in the engine's register width."""

    def __init__(self, name, value, width):
        super().__init__(f"operand {name}={value!r} out of range [0, 2^{width})")
        self.name = name
        self.value = value
        self.width = width


class HandshakeError(MonproError, RuntimeError):
    """Handshake call that does not belong to the engine's policy."""


class EngineBusy(MonproError, RuntimeError):
    """A computation is already in flight or waiting to be acknowledged."""
