"""Summary: Wrapping pad counter shared by both parties.

Importance: Keeps the synchronization index in lockstep arithmetic on both sides.
Alternatives: Use an unbounded counter and accept larger encodings.
"""

from __future__ import annotations

from entangle.errors import PadError, PadErrorKind

COUNTER_MODULUS = 256


class PadCounter:
    """Summary: Unsigned 8-bit counter that wraps at 256.

    Importance: Indexes the keystream; every issued pad consumes one value.
    Alternatives: Track issued pads in a set and refuse reuse.
    """

    def __init__(self, value: int = 0) -> None:
        self._value = check_counter(value)

    @property
    def value(self) -> int:
        return self._value

    def advance(self) -> int:
        """Summary: Post-increment the counter with wraparound.

        Importance: Returns the value that was current before the increment, which is
        the value the just-issued pad was derived from.
        Alternatives: Pre-increment and derive pads from the new value.
        """

        issued = self._value
        self._value = (self._value + 1) % COUNTER_MODULUS
        return issued

    def set(self, value: int) -> None:
        self._value = check_counter(value)

    def reset(self) -> None:
        self._value = 0


def check_counter(value: int) -> int:
    if not 0 <= value < COUNTER_MODULUS:
        raise PadError(
            PadErrorKind.COUNTER_OUT_OF_RANGE,
            f"Counter must be between 0 and {COUNTER_MODULUS - 1}, got {value}",
        )
    return value
