"""Summary: Session orchestration services for entangle.

Importance: Manages many concurrent sessions and logs their lifecycle for the API and CLI.
Alternatives: Let each entrypoint hold a single session object directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import secrets
import threading

from entangle.cipher import decrypt, encrypt, from_transport
from entangle.counter import COUNTER_MODULUS
from entangle.keystream import KeystreamGenerator
from entangle.models import PadHealth, SessionState
from entangle.session import Session
from entangle.share_code import parse_share_code


logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Summary: Raised when a session id is not registered."""


@dataclass(frozen=True)
class PadIssue:
    """Summary: A freshly issued pad with the counter it was derived from.

    Importance: Lets callers tell their partner which counter to resync to.
    Alternatives: Return the pad bytes only.
    """

    pad: bytes
    counter: int


@dataclass(frozen=True)
class SessionService:
    """Summary: Registry of live sessions keyed by opaque id.

    Importance: Replaces a single global seed with explicit, independent sessions.
    Alternatives: Store sessions in an external cache such as Redis.
    """

    generator: KeystreamGenerator
    seed_reduction: str
    default_pad_length: int
    _sessions: dict[str, Session] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def create_session(self) -> str:
        """Summary: Register a new, unentangled session.

        Importance: Gives each conversation its own secret and counter.
        Alternatives: Derive session ids from the share code.
        """

        session_id = secrets.token_urlsafe(12)
        session = Session(self.generator, reduction=self.seed_reduction)
        with self._lock:
            self._sessions[session_id] = session
        logger.info("Created session %s.", session_id)
        return session_id

    def get_session(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete_session(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)
        logger.info("Deleted session %s.", session_id)

    def list_sessions(self) -> list[str]:
        with self._lock:
            return sorted(self._sessions)

    def set_seed(self, session_id: str, raw: bytes) -> SessionState:
        """Summary: Seed a session from raw bytes.

        Importance: Establishes the shared secret and resets the counter.
        Alternatives: Require a share code for every seeding.
        """

        session = self.get_session(session_id)
        session.set_seed(raw)
        logger.info("Seeded session %s.", session_id)
        return session.state()

    def entangle(self, session_id: str, code: str) -> SessionState:
        """Summary: Seed a session from a partner's share code.

        Importance: Matches the setup flow where one party pastes the other's code.
        Alternatives: Accept only raw seed bytes.
        """

        return self.set_seed(session_id, parse_share_code(code))

    def next_pad(self, session_id: str, length: int | None = None) -> PadIssue:
        """Summary: Issue the next pad for a session.

        Importance: Every message consumes exactly one pad.
        Alternatives: Pre-generate a batch of pads.
        """

        session = self.get_session(session_id)
        pad, counter = session.issue(self.default_pad_length if length is None else length)
        logger.info("Issued %s-byte pad for session %s at counter %s.", len(pad), session_id, counter)
        if counter == COUNTER_MODULUS - 1:
            logger.warning("Counter wrapped for session %s; pads will now repeat.", session_id)
        return PadIssue(pad=pad, counter=counter)

    def encrypt_message(self, session_id: str, message: str) -> tuple[str, int]:
        """Summary: Encrypt a message with the session's next pad.

        Importance: Sizes the pad to the message so long messages fit when allowed.
        Alternatives: Require callers to fetch and pass pads explicitly.
        """

        length = max(self.default_pad_length, len(message.encode("utf-8")))
        issued = self.next_pad(session_id, length)
        return encrypt(message, issued.pad), issued.counter

    def decrypt_message(self, session_id: str, ciphertext: str) -> tuple[str, int]:
        """Summary: Decrypt a partner's message with the session's next pad.

        Importance: Rejects malformed ciphertext before a pad is consumed.
        Alternatives: Consume a pad even for unreadable input.
        """

        length = max(self.default_pad_length, len(from_transport(ciphertext)))
        issued = self.next_pad(session_id, length)
        return decrypt(ciphertext, issued.pad), issued.counter

    def resync(self, session_id: str, counter: int) -> SessionState:
        session = self.get_session(session_id)
        session.resync(counter)
        logger.info("Resynced session %s to counter %s.", session_id, counter)
        return session.state()

    def reset(self, session_id: str) -> SessionState:
        session = self.get_session(session_id)
        session.reset()
        logger.info("Reset session %s.", session_id)
        return session.state()

    def state(self, session_id: str) -> SessionState:
        return self.get_session(session_id).state()

    def health(self, session_id: str) -> PadHealth:
        """Summary: Report pad supply health for a session.

        Importance: Surfaces approaching wraparound to the UI.
        Alternatives: Compute health client-side from the counter.
        """

        report = self.get_session(session_id).health()
        if report.status != "healthy":
            logger.warning(
                "Session %s pad supply is %s (%s pads remaining).",
                session_id,
                report.status,
                report.pads_remaining,
            )
        return report

