"""Summary: FastAPI application for entangle.

Importance: Exposes session setup, pad issuance, and the cipher to UI clients over HTTP.
Alternatives: Use a CLI-only workflow or a different web framework.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import Any, Iterator

from fastapi import Depends, FastAPI, Header, HTTPException
from pydantic import BaseModel, Field

from entangle.app import build_services
from entangle.cipher import decrypt, encrypt, from_transport, to_transport
from entangle.config import AppConfig
from entangle.errors import EntangleError, PadError, PadErrorKind
from entangle.keystream import MAX_PAD_LENGTH, MIN_PAD_LENGTH
from entangle.models import SessionState
from entangle.services import SessionNotFoundError
from entangle.share_code import decode_raw_seed, generate_share_code


class SeedRequest(BaseModel):
    """Summary: Request payload for seeding a session.

    Importance: Accepts either a partner's share code or raw base64 seed material.
    Alternatives: Use separate endpoints per seed format.
    """

    code: str | None = None
    seed_b64: str | None = None


class PadRequest(BaseModel):
    """Summary: Request payload for issuing a pad.

    Importance: Allows voice-style callers to request longer pads.
    Alternatives: Always issue the configured default length.
    """

    length: int | None = Field(default=None, ge=MIN_PAD_LENGTH, le=MAX_PAD_LENGTH)


class ResyncRequest(BaseModel):
    counter: int = Field(ge=0, le=255)


class SessionEncryptRequest(BaseModel):
    message: str


class SessionDecryptRequest(BaseModel):
    ciphertext: str


class PadEncryptRequest(BaseModel):
    """Summary: Request payload for stateless encryption with a caller-held pad.

    Importance: Supports clients that manage their own pads.
    Alternatives: Require a server-side session for every message.
    """

    message: str
    pad_b64: str


class PadDecryptRequest(BaseModel):
    ciphertext: str
    pad_b64: str


def create_app(config: AppConfig) -> FastAPI:
    """Summary: Create a FastAPI app wired to entangle services.

    Importance: Ensures the API layer shares the same configuration and sessions.
    Alternatives: Instantiate services globally outside the factory.
    """

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = FastAPI(title="entangle API", version="0.1.0")
    services = build_services(config)
    sessions = services.sessions

    def require_api_key(x_api_key: str | None = Header(default=None)) -> None:
        """Summary: Enforce API key authentication when configured.

        Importance: Adds a minimal security layer for local and private deployments.
        Alternatives: Use OAuth or session-based authentication.
        """

        if not config.api_key:
            return
        if x_api_key != config.api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "keystream": services.generator.name}

    @app.post("/share-code", dependencies=[Depends(require_api_key)])
    def share_code() -> dict[str, str]:
        """Summary: Generate a fresh share code.

        Importance: Starts the entanglement flow for the inviting party.
        Alternatives: Generate codes on the client.
        """

        return {"code": generate_share_code()}

    @app.post("/sessions", dependencies=[Depends(require_api_key)])
    def create_session() -> dict[str, Any]:
        session_id = sessions.create_session()
        return {"session_id": session_id, **_state_payload(sessions.state(session_id))}

    @app.get("/sessions/{session_id}", dependencies=[Depends(require_api_key)])
    def get_session(session_id: str) -> dict[str, Any]:
        with _translate_errors():
            return {"session_id": session_id, **_state_payload(sessions.state(session_id))}

    @app.delete("/sessions/{session_id}", dependencies=[Depends(require_api_key)])
    def delete_session(session_id: str) -> dict[str, str]:
        with _translate_errors():
            sessions.delete_session(session_id)
        return {"status": "deleted"}

    @app.post("/sessions/{session_id}/seed", dependencies=[Depends(require_api_key)])
    def seed_session(session_id: str, payload: SeedRequest) -> dict[str, Any]:
        """Summary: Entangle a session from a share code or raw seed.

        Importance: Resets the counter so both partners start in lockstep.
        Alternatives: Seed sessions at creation time only.
        """

        if (payload.code is None) == (payload.seed_b64 is None):
            raise HTTPException(status_code=400, detail="Provide exactly one of code or seed_b64")
        with _translate_errors():
            if payload.code is not None:
                state = sessions.entangle(session_id, payload.code)
            else:
                state = sessions.set_seed(session_id, decode_raw_seed(payload.seed_b64 or ""))
        return _state_payload(state)

    @app.post("/sessions/{session_id}/pads", dependencies=[Depends(require_api_key)])
    def issue_pad(session_id: str, payload: PadRequest) -> dict[str, Any]:
        with _translate_errors():
            issued = sessions.next_pad(session_id, payload.length)
        return {"pad": to_transport(issued.pad), "counter": issued.counter, "length": len(issued.pad)}

    @app.post("/sessions/{session_id}/resync", dependencies=[Depends(require_api_key)])
    def resync_session(session_id: str, payload: ResyncRequest) -> dict[str, Any]:
        with _translate_errors():
            return _state_payload(sessions.resync(session_id, payload.counter))

    @app.post("/sessions/{session_id}/reset", dependencies=[Depends(require_api_key)])
    def reset_session(session_id: str) -> dict[str, Any]:
        with _translate_errors():
            return _state_payload(sessions.reset(session_id))

    @app.get("/sessions/{session_id}/pad-health", dependencies=[Depends(require_api_key)])
    def pad_health(session_id: str) -> dict[str, Any]:
        with _translate_errors():
            return sessions.health(session_id).as_dict()

    @app.post("/sessions/{session_id}/encrypt", dependencies=[Depends(require_api_key)])
    def encrypt_with_session(session_id: str, payload: SessionEncryptRequest) -> dict[str, Any]:
        """Summary: Encrypt a message with the session's next pad.

        Importance: The partner decrypts with the same counter on their side.
        Alternatives: Fetch a pad and encrypt client-side.
        """

        with _translate_errors():
            ciphertext, counter = sessions.encrypt_message(session_id, payload.message)
        return {"ciphertext": ciphertext, "counter": counter}

    @app.post("/sessions/{session_id}/decrypt", dependencies=[Depends(require_api_key)])
    def decrypt_with_session(session_id: str, payload: SessionDecryptRequest) -> dict[str, Any]:
        with _translate_errors():
            message, counter = sessions.decrypt_message(session_id, payload.ciphertext)
        return {"message": message, "counter": counter}

    @app.post("/encrypt", dependencies=[Depends(require_api_key)])
    def encrypt_with_pad(payload: PadEncryptRequest) -> dict[str, str]:
        with _translate_errors():
            return {"ciphertext": encrypt(payload.message, from_transport(payload.pad_b64))}

    @app.post("/decrypt", dependencies=[Depends(require_api_key)])
    def decrypt_with_pad(payload: PadDecryptRequest) -> dict[str, str]:
        with _translate_errors():
            return {"message": decrypt(payload.ciphertext, from_transport(payload.pad_b64))}

    return app


@contextmanager
def _translate_errors() -> Iterator[None]:
    """Summary: Map core errors onto HTTP status codes.

    Importance: Keeps the error kind visible to clients as a machine-readable field.
    Alternatives: Register global exception handlers on the app.
    """

    try:
        yield
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Session not found") from exc
    except PadError as exc:
        status_code = 409 if exc.kind is PadErrorKind.NOT_ENTANGLED else 400
        raise HTTPException(
            status_code=status_code, detail={"kind": exc.kind.value, "message": str(exc)}
        ) from exc
    except EntangleError as exc:
        raise HTTPException(
            status_code=400, detail={"kind": exc.kind.value, "message": str(exc)}
        ) from exc


def _state_payload(state: SessionState) -> dict[str, Any]:
    return {"entangled": state.entangled, "has_secret": state.has_secret, "counter": state.counter}
