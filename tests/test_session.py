"""Summary: Tests for session seeding, pad issuance, and counter handling.

Importance: The session owns the only mutable state both partners must keep in lockstep.
Alternatives: Test pad issuance only through the service layer.
"""

from __future__ import annotations

import hashlib
import threading

import pytest

from entangle.counter import PadCounter
from entangle.errors import PadError, PadErrorKind, SeedError, SeedErrorKind
from entangle.keystream import ArithmeticKeystream, TwinKeystream
from entangle.session import Session, reduce_sha256, reduce_xor_fold

RAW_SEED = bytes(range(100, 132))


def _session(reduction: str = "sha256") -> Session:
    return Session(ArithmeticKeystream(), reduction=reduction)


def test_set_seed_too_short() -> None:
    with pytest.raises(SeedError) as excinfo:
        _session().set_seed(bytes(10))
    assert excinfo.value.kind is SeedErrorKind.TOO_SHORT


def test_set_seed_accepts_sixteen_bytes() -> None:
    session = _session()
    session.set_seed(bytes(16))
    assert session.state().has_secret


def test_next_pad_before_seed_is_not_entangled() -> None:
    with pytest.raises(PadError) as excinfo:
        _session().next_pad(32)
    assert excinfo.value.kind is PadErrorKind.NOT_ENTANGLED


def test_partners_derive_identical_pads() -> None:
    """Summary: Two sessions seeded alike issue the same pad sequence.

    Importance: This is the whole point of entanglement.
    Alternatives: Compare a single pad only.
    """

    for generator in (ArithmeticKeystream(), TwinKeystream()):
        alice = Session(generator)
        bob = Session(type(generator)())
        alice.set_seed(RAW_SEED)
        bob.set_seed(RAW_SEED)
        for _ in range(5):
            assert alice.next_pad(32) == bob.next_pad(32)


def test_first_pad_uses_counter_zero() -> None:
    session = _session()
    session.set_seed(RAW_SEED)
    pad, counter = session.issue(32)
    assert counter == 0
    assert pad == ArithmeticKeystream().derive(reduce_sha256(RAW_SEED), 0, 32)


def test_counter_after_n_pads_wraps() -> None:
    session = _session()
    session.set_seed(RAW_SEED)
    for _ in range(300):
        session.next_pad()
    assert session.state().counter == 300 % 256


def test_wraparound_reuses_keystream() -> None:
    session = _session()
    session.set_seed(RAW_SEED)
    first = session.next_pad()
    for _ in range(255):
        session.next_pad()
    assert session.state().counter == 0
    assert session.next_pad() == first


def test_failed_issue_does_not_advance_counter() -> None:
    session = _session()
    session.set_seed(RAW_SEED)
    with pytest.raises(PadError) as excinfo:
        session.next_pad(1025)
    assert excinfo.value.kind is PadErrorKind.LENGTH_OUT_OF_RANGE
    assert session.state().counter == 0


def test_set_seed_resets_counter() -> None:
    session = _session()
    session.set_seed(RAW_SEED)
    session.next_pad()
    session.next_pad()
    session.set_seed(bytes(range(20)))
    assert session.state().counter == 0


def test_reset_clears_secret() -> None:
    session = _session()
    session.set_seed(RAW_SEED)
    session.next_pad()
    session.reset()
    state = session.state()
    assert not state.has_secret
    assert not state.entangled
    assert state.counter == 0
    with pytest.raises(PadError):
        session.next_pad()


def test_resync_moves_counter() -> None:
    session = _session()
    session.set_seed(RAW_SEED)
    session.resync(42)
    _pad, counter = session.issue()
    assert counter == 42
    with pytest.raises(PadError) as excinfo:
        session.resync(256)
    assert excinfo.value.kind is PadErrorKind.COUNTER_OUT_OF_RANGE


def test_resync_requires_secret() -> None:
    with pytest.raises(PadError) as excinfo:
        _session().resync(3)
    assert excinfo.value.kind is PadErrorKind.NOT_ENTANGLED


def test_concurrent_issues_never_share_a_counter() -> None:
    """Summary: Parallel pad requests each receive a distinct counter.

    Importance: Two messages must never share one pad.
    Alternatives: Require single-threaded hosts.
    """

    session = _session()
    session.set_seed(RAW_SEED)
    issued: list[int] = []
    issued_lock = threading.Lock()

    def worker() -> None:
        for _ in range(32):
            _pad, counter = session.issue(16)
            with issued_lock:
                issued.append(counter)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert sorted(issued) == list(range(256))


def test_seed_reductions() -> None:
    assert reduce_sha256(RAW_SEED) == hashlib.sha256(RAW_SEED).digest()
    assert reduce_xor_fold(bytes(range(64))) == bytes([32] * 32)
    assert reduce_xor_fold(bytes(16)) == bytes(32)


def test_reduction_is_sensitive_to_every_byte() -> None:
    base = bytearray(RAW_SEED)
    for index in range(len(base)):
        changed = bytearray(base)
        changed[index] ^= 1
        assert reduce_sha256(bytes(changed)) != reduce_sha256(bytes(base))
        assert reduce_xor_fold(bytes(changed)) != reduce_xor_fold(bytes(base))


def test_reductions_produce_different_pads() -> None:
    legacy = _session("xor-fold")
    modern = _session("sha256")
    legacy.set_seed(RAW_SEED)
    modern.set_seed(RAW_SEED)
    assert legacy.next_pad() != modern.next_pad()


def test_unknown_reduction() -> None:
    with pytest.raises(ValueError):
        Session(ArithmeticKeystream(), reduction="md5")


def test_pad_counter_post_increments() -> None:
    counter = PadCounter(255)
    assert counter.advance() == 255
    assert counter.value == 0
    with pytest.raises(PadError):
        PadCounter(-1)
