"""Persistent state for the depgraph CLI.

Remembers which context (the dataset graph queries are scoped to) is active
and the last query text sent, so `depgraph graph run` can replay or edit it.
Stored in `~/.depgraph_cli/context.json`.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from depgraph.config import settings


@dataclass
class CliContext:
    active_context_id: str | None = None
    active_context_name: str | None = None
    last_query: str | None = None
    user_preferences: dict[str, Any] = field(default_factory=dict)

    @property
    def effective_context_id(self) -> str | None:
        """Saved context id, falling back to ``DEPGRAPH_CONTEXT_ID``."""
        return self.active_context_id or settings.context_id

    def describe(self) -> str | None:
        """Display label for the effective context, or ``None`` when unscoped."""
        context_id = self.effective_context_id
        if not context_id:
            return None
        if self.active_context_name and self.active_context_id:
            return f"{self.active_context_name} ({context_id})"
        return context_id

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2)

    @classmethod
    def from_json(cls, data: str) -> CliContext:
        try:
            return cls(**json.loads(data))
        except (json.JSONDecodeError, TypeError):
            return cls()


def _context_path() -> Path:
    return settings.cli_config_dir / "context.json"


def load_context() -> CliContext:
    """Saved CLI state, or defaults when the file is missing or unreadable."""
    path = _context_path()
    if not path.exists():
        return CliContext()
    try:
        return CliContext.from_json(path.read_text(encoding="utf-8"))
    except OSError:
        return CliContext()


def save_context(ctx: CliContext) -> None:
    settings.cli_config_dir.mkdir(parents=True, exist_ok=True)
    _context_path().write_text(ctx.to_json(), encoding="utf-8")


def remember_query(text: str) -> None:
    """Store *text* as the query `graph run` replays by default."""
    if not text.strip():
        return
    ctx = load_context()
    ctx.last_query = text
    save_context(ctx)
