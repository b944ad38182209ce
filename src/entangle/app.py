"""Summary: Application factory wiring core services.

Importance: Centralizes dependency creation for the CLI and API layers.
Alternatives: Instantiate services manually in each entrypoint.
"""

from __future__ import annotations

from dataclasses import dataclass

from entangle.config import AppConfig
from entangle.keystream import KeystreamFactory, KeystreamGenerator
from entangle.services import SessionService
from entangle.session import SEED_REDUCTIONS


@dataclass(frozen=True)
class AppServices:
    """Summary: Bundle of core services for entangle.

    Importance: Simplifies passing dependencies to UI or API layers.
    Alternatives: Use a dependency injection container.
    """

    config: AppConfig
    generator: KeystreamGenerator
    sessions: SessionService


def build_services(config: AppConfig) -> AppServices:
    """Summary: Build core services from configuration.

    Importance: The keystream tables are built here once, before any pad is requested.
    Alternatives: Build the generator lazily on the first pad request.
    """

    if config.seed_reduction not in SEED_REDUCTIONS:
        raise ValueError(f"Unknown seed reduction: {config.seed_reduction}")
    generator = KeystreamFactory(config).build()
    sessions = SessionService(
        generator=generator,
        seed_reduction=config.seed_reduction,
        default_pad_length=config.default_pad_length,
    )
    return AppServices(config=config, generator=generator, sessions=sessions)
