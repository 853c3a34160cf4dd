"""Centralised settings for the depgraph client.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _optional_env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Graph API
    # ------------------------------------------------------------------
    api_base_url: str | None = field(
        default_factory=lambda: _optional_env("DEPGRAPH_API_BASE_URL")
    )
    api_path_prefix: str = field(
        default_factory=lambda: os.environ.get(
            "DEPGRAPH_API_PATH_PREFIX", "/brum-proxy/graph"
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("DEPGRAPH_REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Credentials / scoping
    # ------------------------------------------------------------------
    api_token: str | None = field(
        default_factory=lambda: _optional_env("DEPGRAPH_API_TOKEN")
    )
    # Shell command printing a fresh bearer token on stdout; run once per
    # request and preferred over ``api_token`` when both are set.
    token_command: str | None = field(
        default_factory=lambda: _optional_env("DEPGRAPH_TOKEN_COMMAND")
    )
    context_id: str | None = field(
        default_factory=lambda: _optional_env("DEPGRAPH_CONTEXT_ID")
    )

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    layout_direction: str = field(
        default_factory=lambda: os.environ.get("DEPGRAPH_LAYOUT_DIRECTION", "LR")
    )

    # ------------------------------------------------------------------
    # CLI
    # ------------------------------------------------------------------
    cli_config_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("DEPGRAPH_CLI_DIR", Path.home() / ".depgraph_cli")
        )
    )


# Module-level singleton, import this everywhere:
#   from depgraph.config import settings
settings = Settings()
