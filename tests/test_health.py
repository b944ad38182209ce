"""Summary: Tests for pad supply health.

Importance: Checks the exact boundary arithmetic behind the advisory status.
Alternatives: Assert qualitative labels only.
"""

from __future__ import annotations

import pytest

from entangle.errors import PadError
from entangle.health import pad_health
from entangle.keystream import ArithmeticKeystream
from entangle.session import Session


def test_fresh_session_is_healthy() -> None:
    report = pad_health(0)
    assert report.pads_remaining == 256
    assert report.health_percent == 100.0
    assert report.status == "healthy"


@pytest.mark.parametrize(
    ("counter", "remaining", "percent", "status"),
    [
        (204, 52, 20.3125, "healthy"),
        (205, 51, 19.921875, "warning"),
        (243, 13, 5.078125, "warning"),
        (244, 12, 4.6875, "critical"),
        (255, 1, 0.390625, "critical"),
    ],
)
def test_health_boundaries(counter: int, remaining: int, percent: float, status: str) -> None:
    report = pad_health(counter)
    assert report.counter == counter
    assert report.pads_remaining == remaining
    assert report.health_percent == percent
    assert report.status == status


def test_health_rejects_out_of_range_counter() -> None:
    with pytest.raises(PadError):
        pad_health(256)


def test_session_health_tracks_counter() -> None:
    session = Session(ArithmeticKeystream())
    session.set_seed(bytes(range(32)))
    session.resync(205)
    assert session.health().status == "warning"
    assert session.health().as_dict() == {
        "counter": 205,
        "pads_remaining": 51,
        "health_percent": 19.921875,
        "status": "warning",
    }
