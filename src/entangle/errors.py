"""Summary: Error types raised by the entangle core.

Importance: Gives callers an enumerated failure kind per operation instead of free-form messages.
Alternatives: Return result tuples or raise bare ValueError instances.
"""

from __future__ import annotations

from enum import Enum


class SeedErrorKind(Enum):
    TOO_SHORT = "too_short"
    INVALID_CODE = "invalid_code"


class PadErrorKind(Enum):
    NOT_ENTANGLED = "not_entangled"
    LENGTH_OUT_OF_RANGE = "length_out_of_range"
    COUNTER_OUT_OF_RANGE = "counter_out_of_range"


class CipherErrorKind(Enum):
    PAD_TOO_SHORT = "pad_too_short"
    INVALID_ENCODING = "invalid_encoding"
    DECODE_MISMATCH = "decode_mismatch"


class EntangleError(Exception):
    """Summary: Base class for deterministic validation failures.

    Importance: Lets outer layers catch every core failure in one place.
    Alternatives: Catch each family separately at every call site.
    """

    def __init__(self, kind: Enum, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class SeedError(EntangleError):
    """Summary: Raised when raw seed material or a share code is rejected."""

    kind: SeedErrorKind


class PadError(EntangleError):
    """Summary: Raised when a pad cannot be issued for the current session state."""

    kind: PadErrorKind


class CipherError(EntangleError):
    """Summary: Raised when a message cannot be combined with the supplied pad."""

    kind: CipherErrorKind
