"""Summary: Pad supply health derived from the counter.

Importance: Warns users before counter wraparound starts reusing pads.
Alternatives: Show only the raw counter value.
"""

from __future__ import annotations

from entangle.counter import COUNTER_MODULUS, check_counter
from entangle.models import PadHealth

HEALTHY_THRESHOLD = 20
WARNING_THRESHOLD = 5


def pad_health(counter: int) -> PadHealth:
    """Summary: Compute remaining pads, percentage, and a status label.

    Importance: Advisory only; the cipher never consults it.
    Alternatives: Expose a boolean "needs re-entanglement" flag.
    """

    pads_remaining = COUNTER_MODULUS - check_counter(counter)
    health_percent = pads_remaining / COUNTER_MODULUS * 100
    if health_percent > HEALTHY_THRESHOLD:
        status = "healthy"
    elif health_percent > WARNING_THRESHOLD:
        status = "warning"
    else:
        status = "critical"
    return PadHealth(
        counter=counter,
        pads_remaining=pads_remaining,
        health_percent=health_percent,
        status=status,
    )
