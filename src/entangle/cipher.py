"""Summary: XOR stream cipher over issued pads with a base64 transport codec.

Importance: Masks short messages so they can travel over any text channel.
Alternatives: Use an authenticated cipher such as AES-GCM.
"""

from __future__ import annotations

import base64
import binascii

from entangle.errors import CipherError, CipherErrorKind


def encrypt(message: str, pad: bytes) -> str:
    """Summary: XOR the UTF-8 message with the pad and base64 the result.

    Importance: Produces ciphertext safe to paste into chat or send over HTTP.
    Alternatives: Return raw bytes and let the transport encode them.
    """

    raw = message.encode("utf-8")
    if len(raw) > len(pad):
        raise CipherError(
            CipherErrorKind.PAD_TOO_SHORT,
            f"Message is {len(raw)} bytes but pad is only {len(pad)}",
        )
    return to_transport(_combine(raw, pad))


def decrypt(ciphertext: str, pad: bytes) -> str:
    """Summary: Decode base64 ciphertext, XOR with the pad, and decode UTF-8 strictly.

    Importance: A pad mismatch surfaces as DECODE_MISMATCH instead of replacement characters.
    Alternatives: Decode with errors="replace" and let users spot garbage.
    """

    raw = from_transport(ciphertext)
    if len(raw) > len(pad):
        raise CipherError(
            CipherErrorKind.PAD_TOO_SHORT,
            f"Ciphertext is {len(raw)} bytes but pad is only {len(pad)}",
        )
    try:
        return _combine(raw, pad).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CipherError(
            CipherErrorKind.DECODE_MISMATCH,
            "Decrypted bytes are not valid UTF-8; pads are likely out of sync",
        ) from exc


def to_transport(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def from_transport(text: str) -> bytes:
    """Summary: Strictly decode standard base64 text.

    Importance: Rejects stray characters rather than silently dropping them.
    Alternatives: Use the lenient default decoder.
    """

    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise CipherError(
            CipherErrorKind.INVALID_ENCODING,
            "Ciphertext is not valid base64",
        ) from exc


def _combine(data: bytes, pad: bytes) -> bytes:
    return bytes(b ^ k for b, k in zip(data, pad))
