"""Summary: Value types shared by the session, health, and API layers.

Importance: Keeps introspection results immutable and easy to serialize.
Alternatives: Pass plain dicts between layers.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionState:
    """Summary: Read-only snapshot of a session's secret and counter.

    Importance: Feeds health and debugging views without exposing the secret.
    Alternatives: Expose the session internals directly.
    """

    has_secret: bool
    counter: int

    @property
    def entangled(self) -> bool:
        return self.has_secret


@dataclass(frozen=True)
class PadHealth:
    """Summary: Advisory pad-supply status derived from the counter.

    Importance: Tells users how close a session is to counter wraparound.
    Alternatives: Show the raw counter only.
    """

    counter: int
    pads_remaining: int
    health_percent: float
    status: str

    def as_dict(self) -> dict[str, object]:
        return {
            "counter": self.counter,
            "pads_remaining": self.pads_remaining,
            "health_percent": self.health_percent,
            "status": self.status,
        }
