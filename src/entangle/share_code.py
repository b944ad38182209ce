"""Summary: Share codes used to hand raw seed material to a partner.

Importance: Gives both parties the same raw seed to feed into their sessions.
Alternatives: Exchange seeds via QR codes or a key agreement protocol.
"""

from __future__ import annotations

import base64
import binascii
import secrets

from entangle.errors import SeedError, SeedErrorKind

SHARE_CODE_BYTES = 32
MIN_CODE_LENGTH = 10


def generate_share_code() -> str:
    """Summary: Create a base64 share code from fresh random bytes.

    Importance: Provides the seed one party reads out or copies to the other.
    Alternatives: Let users choose a passphrase.
    """

    return base64.b64encode(secrets.token_bytes(SHARE_CODE_BYTES)).decode("ascii")


def parse_share_code(code: str) -> bytes:
    """Summary: Turn a pasted share code back into raw seed bytes.

    Importance: Rejects truncated or mistyped codes before a session is seeded.
    Alternatives: Accept any string and hash it into a seed.
    """

    cleaned = code.strip()
    if len(cleaned) < MIN_CODE_LENGTH:
        raise SeedError(SeedErrorKind.INVALID_CODE, "Code too short")
    try:
        raw = base64.b64decode(cleaned.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise SeedError(SeedErrorKind.INVALID_CODE, "Code is not valid base64") from exc
    if len(raw) != SHARE_CODE_BYTES:
        raise SeedError(
            SeedErrorKind.INVALID_CODE,
            f"Invalid code length: {len(raw)} bytes (expected {SHARE_CODE_BYTES})",
        )
    return raw


def decode_raw_seed(text: str) -> bytes:
    """Summary: Decode base64 seed material of any length.

    Importance: Lets callers seed from their own material; length rules are applied by the session.
    Alternatives: Only accept generated share codes.
    """

    try:
        return base64.b64decode(text.strip().encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise SeedError(SeedErrorKind.INVALID_CODE, "Seed is not valid base64") from exc
