"""Summary: Application configuration for entangle.

Importance: Centralizes environment, .env, and config defaults so both partners run matching settings.
Alternatives: Use a dedicated settings library like Pydantic Settings.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    """Summary: Holds keystream, seed, and HTTP settings.

    Importance: Ensures all services derive settings from a single source of truth.
    Alternatives: Pass settings as arguments to every entrypoint.
    """

    keystream_strategy: str
    seed_reduction: str
    default_pad_length: int
    api_host: str
    api_port: int
    api_key: str

    @staticmethod
    def from_env() -> "AppConfig":
        """Summary: Build configuration from defaults, .env, and environment.

        Importance: Keeps all variables defined in config defaults while allowing overrides.
        Alternatives: Parse only environment variables without a defaults file.
        """

        defaults = load_defaults(Path("config") / "defaults.json")
        load_dotenv(Path(".env"))
        return AppConfig(
            keystream_strategy=os.getenv("ENTANGLE_KEYSTREAM", defaults["keystream_strategy"]),
            seed_reduction=os.getenv("ENTANGLE_SEED_REDUCTION", defaults["seed_reduction"]),
            default_pad_length=int(
                os.getenv("ENTANGLE_PAD_LENGTH", defaults["default_pad_length"])
            ),
            api_host=os.getenv("ENTANGLE_API_HOST", defaults["api_host"]),
            api_port=int(os.getenv("ENTANGLE_API_PORT", defaults["api_port"])),
            api_key=os.getenv("ENTANGLE_API_KEY", defaults["api_key"]),
        )


def load_defaults(path: Path) -> dict[str, str]:
    """Summary: Load configuration defaults from JSON.

    Importance: Ensures all variables exist in a single config file.
    Alternatives: Inline defaults in the AppConfig initializer.
    """

    if not path.exists():
        raise FileNotFoundError(f"Defaults file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def load_dotenv(path: Path) -> None:
    """Summary: Load key-value pairs from a .env file into the environment.

    Importance: Keeps local overrides out of code.
    Alternatives: Use python-dotenv or OS-specific secret stores.
    """

    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())
