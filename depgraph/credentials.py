"""Bearer-token suppliers.

A token provider is any zero-argument callable, sync or async, returning a
token string or ``None``.  The controller calls it once per action and
never caches the result.
"""

from __future__ import annotations

import inspect
import shlex
import subprocess
from typing import Awaitable, Callable, Optional, Union

from depgraph.config import Settings, settings

TokenProvider = Callable[[], Union[Optional[str], Awaitable[Optional[str]]]]


async def resolve_token(provider: TokenProvider | None) -> str | None:
    """Call *provider* (awaiting it if needed); blank tokens become ``None``.

    A provider that raises counts as no credential available.
    """
    if provider is None:
        return None
    try:
        token = provider()
        if inspect.isawaitable(token):
            token = await token
    except Exception as exc:
        print(f"[graph] token provider failed: {type(exc).__name__}: {exc}")
        return None
    if not token or not str(token).strip():
        return None
    return str(token).strip()


def settings_token_provider(config: Settings = settings) -> TokenProvider:
    """Token provider backed by ``DEPGRAPH_TOKEN_COMMAND`` / ``DEPGRAPH_API_TOKEN``.

    The command, when configured, is executed on every call so short-lived
    tokens stay fresh.  A failing command surfaces as an exception, which
    :func:`resolve_token` reports as no credential.
    """

    def provide() -> str | None:
        if config.token_command:
            result = subprocess.run(
                shlex.split(config.token_command),
                capture_output=True,
                text=True,
                check=True,
                timeout=config.request_timeout,
            )
            return result.stdout.strip() or None
        return config.api_token

    return provide
