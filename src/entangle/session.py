"""Summary: Session object bundling the shared secret with its pad counter.

Importance: Owns the only mutable state in the core and serializes pad issuance.
Alternatives: Keep the secret and counter in module-level globals.
"""

from __future__ import annotations

import hashlib
import threading
from typing import Callable

from entangle.counter import PadCounter
from entangle.errors import PadError, PadErrorKind, SeedError, SeedErrorKind
from entangle.health import pad_health
from entangle.keystream import SECRET_SIZE, KeystreamGenerator
from entangle.models import PadHealth, SessionState

MIN_SEED_LENGTH = 16
DEFAULT_PAD_LENGTH = 32


def reduce_sha256(raw: bytes) -> bytes:
    return hashlib.sha256(raw).digest()


def reduce_xor_fold(raw: bytes) -> bytes:
    """Summary: Fold raw bytes into 32 bytes with a repeating XOR.

    Importance: Matches partners still running the legacy reduction.
    Alternatives: Use reduce_sha256, which is sensitive to byte order and collisions.

    Weak: swapping two bytes that land on different slots can cancel out, and
    inputs whose folded XOR is equal collide.
    """

    folded = bytearray(SECRET_SIZE)
    for index, value in enumerate(raw):
        folded[index % SECRET_SIZE] ^= value
    return bytes(folded)


SEED_REDUCTIONS: dict[str, Callable[[bytes], bytes]] = {
    "sha256": reduce_sha256,
    "xor-fold": reduce_xor_fold,
}


class Session:
    """Summary: One entanglement between two parties.

    Importance: Replaces hidden global state so several sessions can live side by side.
    Alternatives: Use a process-wide singleton store.
    """

    def __init__(self, generator: KeystreamGenerator, reduction: str = "sha256") -> None:
        """Summary: Bind the session to a keystream strategy and seed reduction.

        Importance: Both parties must agree on these two choices to derive matching pads.
        Alternatives: Negotiate the strategy at entanglement time.
        """

        if reduction not in SEED_REDUCTIONS:
            raise ValueError(f"Unknown seed reduction: {reduction}")
        self._generator = generator
        self._reduce = SEED_REDUCTIONS[reduction]
        self._secret: bytes | None = None
        self._counter = PadCounter()
        self._lock = threading.Lock()

    def set_seed(self, raw: bytes) -> None:
        """Summary: Reduce raw seed bytes to the 32-byte secret and reset the counter.

        Importance: Establishes the shared root both parties derive pads from.
        Alternatives: Use the raw bytes directly as the secret.
        """

        if raw is None or len(raw) < MIN_SEED_LENGTH:
            raise SeedError(
                SeedErrorKind.TOO_SHORT,
                f"Seed must be at least {MIN_SEED_LENGTH} bytes",
            )
        secret = self._reduce(bytes(raw))
        with self._lock:
            self._secret = secret
            self._counter.reset()

    def reset(self) -> None:
        with self._lock:
            self._secret = None
            self._counter.reset()

    def state(self) -> SessionState:
        with self._lock:
            return SessionState(has_secret=self._secret is not None, counter=self._counter.value)

    def next_pad(self, length: int = DEFAULT_PAD_LENGTH) -> bytes:
        return self.issue(length)[0]

    def issue(self, length: int = DEFAULT_PAD_LENGTH) -> tuple[bytes, int]:
        """Summary: Derive the pad for the current counter and advance the counter.

        Importance: Read, derive, and advance happen under one lock so no two callers
        are issued the same counter value. Returns the pad with the counter it used.
        Alternatives: Hand out counter values from a separate allocator.
        """

        with self._lock:
            if self._secret is None:
                raise PadError(PadErrorKind.NOT_ENTANGLED, "No seed set; entangle first")
            pad = self._generator.derive(self._secret, self._counter.value, length)
            return pad, self._counter.advance()

    def resync(self, counter: int) -> None:
        """Summary: Move the counter to an agreed value.

        Importance: Lets partners recover lockstep after a dropped message.
        Alternatives: Re-entangle with a fresh seed.
        """

        with self._lock:
            if self._secret is None:
                raise PadError(PadErrorKind.NOT_ENTANGLED, "No seed set; entangle first")
            self._counter.set(counter)

    def health(self) -> PadHealth:
        return pad_health(self.state().counter)
