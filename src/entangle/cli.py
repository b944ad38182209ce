"""Summary: Command-line interface for entangle.

Importance: Lets a user derive pads and encrypt or decrypt messages from a shared code locally.
Alternatives: Use the HTTP API from a browser client.
"""

from __future__ import annotations

import argparse
import logging
import sys

from entangle.app import build_services
from entangle.cipher import to_transport
from entangle.config import AppConfig
from entangle.errors import EntangleError
from entangle.health import pad_health
from entangle.services import SessionService
from entangle.share_code import generate_share_code


def build_parser() -> argparse.ArgumentParser:
    """Summary: Build the CLI argument parser.

    Importance: Defines supported commands for local operation.
    Alternatives: Use a CLI framework like Typer or Click.
    """

    parser = argparse.ArgumentParser(description="entangle CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("share-code", help="Generate a share code for a partner")

    pad = subparsers.add_parser("pad", help="Print the pad for a counter")
    _add_session_arguments(pad)
    pad.add_argument("--length", type=int, default=None)

    encrypt = subparsers.add_parser("encrypt", help="Encrypt a message")
    _add_session_arguments(encrypt)
    encrypt.add_argument("message", type=str)

    decrypt = subparsers.add_parser("decrypt", help="Decrypt a partner's message")
    _add_session_arguments(decrypt)
    decrypt.add_argument("ciphertext", type=str)

    health = subparsers.add_parser("health", help="Show pad supply health for a counter")
    health.add_argument("--counter", type=int, default=0)

    return parser


def _add_session_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--code", type=str, required=True, help="Shared code")
    parser.add_argument("--counter", type=int, default=0, help="Counter to derive from")


def _open_session(sessions: SessionService, args: argparse.Namespace) -> str:
    session_id = sessions.create_session()
    sessions.entangle(session_id, args.code)
    if args.counter:
        sessions.resync(session_id, args.counter)
    return session_id


def run_cli(argv: list[str] | None = None) -> None:
    """Summary: Execute CLI commands based on arguments.

    Importance: Drives local workflows without a server.
    Alternatives: Invoke services via the HTTP API.
    """

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "share-code":
        print(generate_share_code())
        return

    try:
        if args.command == "health":
            report = pad_health(args.counter)
            for key, value in report.as_dict().items():
                print(f"{key}: {value}")
            return

        sessions = build_services(AppConfig.from_env()).sessions
        session_id = _open_session(sessions, args)

        if args.command == "pad":
            issued = sessions.next_pad(session_id, args.length)
            print(f"{issued.counter}: {to_transport(issued.pad)}")
            return

        if args.command == "encrypt":
            ciphertext, counter = sessions.encrypt_message(session_id, args.message)
            print(f"{counter}: {ciphertext}")
            return

        if args.command == "decrypt":
            message, _counter = sessions.decrypt_message(session_id, args.ciphertext)
            print(message)
            return
    except EntangleError as exc:
        print(f"error ({exc.kind.value}): {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    run_cli()
