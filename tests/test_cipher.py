"""Summary: Tests for the XOR stream cipher and its transport codec.

Importance: Validates round-trips, error kinds, and desync detection.
Alternatives: Exercise the cipher only through the HTTP API.
"""

from __future__ import annotations

import pytest

from entangle.cipher import decrypt, encrypt, from_transport, to_transport
from entangle.errors import CipherError, CipherErrorKind
from entangle.keystream import ArithmeticKeystream, TwinKeystream
from entangle.session import reduce_sha256

MESSAGES = ["", "x", "hi", "hello world", "héllo wörld", "🔐 entangled", "a" * 32]


def test_encrypt_known_vector() -> None:
    assert encrypt("A", b"\x01") == "QA=="
    assert decrypt("QA==", b"\x01") == "A"


def test_round_trip_for_many_seeds_and_counters() -> None:
    """Summary: decrypt(encrypt(m, pad), pad) == m.

    Importance: Both partners read exactly what was sent when in sync.
    Alternatives: Test a single fixed message only.
    """

    generator = ArithmeticKeystream()
    for seed_index in range(8):
        secret = reduce_sha256(bytes([seed_index]) * 20)
        for counter in (0, 1, 100, 255):
            pad = generator.derive(secret, counter, 64)
            for message in MESSAGES:
                assert decrypt(encrypt(message, pad), pad) == message


def test_ciphertext_is_base64_of_message_length() -> None:
    pad = bytes(range(32))
    ciphertext = encrypt("hello world", pad)
    assert len(from_transport(ciphertext)) == len("hello world")


def test_encrypt_pad_too_short() -> None:
    with pytest.raises(CipherError) as excinfo:
        encrypt("hello world", bytes(10))
    assert excinfo.value.kind is CipherErrorKind.PAD_TOO_SHORT


def test_encrypt_counts_utf8_bytes() -> None:
    with pytest.raises(CipherError) as excinfo:
        encrypt("ééé", bytes(5))
    assert excinfo.value.kind is CipherErrorKind.PAD_TOO_SHORT


def test_decrypt_pad_too_short() -> None:
    ciphertext = encrypt("hello world", bytes(32))
    with pytest.raises(CipherError) as excinfo:
        decrypt(ciphertext, bytes(4))
    assert excinfo.value.kind is CipherErrorKind.PAD_TOO_SHORT


@pytest.mark.parametrize("ciphertext", ["not-valid-base64!!", "abc", "é==="])
def test_decrypt_invalid_encoding(ciphertext: str) -> None:
    with pytest.raises(CipherError) as excinfo:
        decrypt(ciphertext, bytes(32))
    assert excinfo.value.kind is CipherErrorKind.INVALID_ENCODING


def test_decrypt_rejects_invalid_utf8() -> None:
    """Summary: Invalid UTF-8 after XOR is reported, not replaced.

    Importance: Desynchronization must be visible to the caller.
    Alternatives: Decode with replacement characters.
    """

    with pytest.raises(CipherError) as excinfo:
        decrypt(to_transport(b"\xff"), b"\x00")
    assert excinfo.value.kind is CipherErrorKind.DECODE_MISMATCH


def test_mismatched_counters_never_reproduce_message() -> None:
    """Summary: Decrypting with the next counter's pad never yields the original.

    Importance: Shows desync is either an error or visibly different text.
    Alternatives: Add a checksum to every ciphertext.
    """

    for generator in (ArithmeticKeystream(), TwinKeystream()):
        for seed_index in range(16):
            secret = reduce_sha256(bytes([seed_index, 7]) * 10)
            for counter in list(range(0, 256, 15)) + [255]:
                sent_pad = generator.derive(secret, counter, 48)
                wrong_pad = generator.derive(secret, (counter + 1) % 256, 48)
                for message in MESSAGES[1:] + ["ok"]:
                    ciphertext = encrypt(message, sent_pad)
                    try:
                        received = decrypt(ciphertext, wrong_pad)
                    except CipherError as exc:
                        assert exc.kind is CipherErrorKind.DECODE_MISMATCH
                    else:
                        assert received != message
