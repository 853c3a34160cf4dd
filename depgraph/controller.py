"""Query/search controller for the dependency-graph view.

State machine, tracked independently for two action families::

    Idle --submit--> Loading --2xx--> Populated --submit--> Loading ...
                        \\--error--> Errored  --submit--> Loading ...

* **search** (:meth:`GraphController.submit`) — a field-name impact trace,
  or in AI mode a natural-language question that also returns the
  generated query text.
* **run** (:meth:`GraphController.run_query`) — executes the (possibly
  hand-edited) query text.

Both actions clear the snapshot and any previous error synchronously when
they start, so stale results never sit under a loading indicator, and
replace the snapshot wholesale on success.

Every request takes a ticket from a monotonically increasing counter.
Responses whose ticket is no longer the latest are dropped, so a slow
superseded request can never overwrite fresher state.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

import httpx

from depgraph.client import DEFAULT_PATH_PREFIX, GraphApiClient, GraphApiError
from depgraph.config import Settings
from depgraph.credentials import TokenProvider, resolve_token, settings_token_provider
from depgraph.graph.layout import LayeredLayout, LayoutEngine, layout_snapshot, validate_direction
from depgraph.graph.models import GraphSnapshot
from depgraph.graph.timeline import SLIDER_MAX, SLIDER_MIN
from depgraph.graph.transform import transform_payload
from depgraph.graph.view import GraphView, build_view

SEARCH = "search"
RUN = "run"

GENERATING_STATUS = "Generating Query..."
SEARCH_FAILED = "Could not load graph"
RUN_FAILED = "Execution failed"


class GraphController:
    """Holds one graph view's snapshot, UI state and request lifecycle."""

    def __init__(
        self,
        base_url: str | None,
        token_provider: TokenProvider | None,
        context_id: str | None = None,
        *,
        path_prefix: str = DEFAULT_PATH_PREFIX,
        timeout: float = 30.0,
        layout_engine: LayoutEngine | None = None,
        direction: str = "LR",
        client_factory: Callable[[], GraphApiClient] | None = None,
    ) -> None:
        self.base_url = base_url
        self.token_provider = token_provider
        self.context_id = context_id
        self.path_prefix = path_prefix
        self.timeout = timeout
        self.layout_engine = layout_engine or LayeredLayout()
        self.direction = validate_direction(direction)
        self._client_factory = client_factory

        self.snapshot = GraphSnapshot()
        self.search_term = ""
        self.query_text = ""
        self.ai_mode = False
        self.show_query_editor = False
        self.hovered_node_id: str | None = None
        self.timeline_value = SLIDER_MAX

        self.loading = False
        self.running_query = False
        self.ai_status: str | None = None
        self.search_error: str | None = None
        self.run_error: str | None = None

        self._generation = 0
        self._latest = {SEARCH: 0, RUN: 0}

    @classmethod
    def from_settings(
        cls,
        config: Settings,
        token_provider: TokenProvider | None = None,
        **kwargs: Any,
    ) -> GraphController:
        """Build a controller wired to *config* (token provider included)."""
        return cls(
            base_url=config.api_base_url,
            token_provider=token_provider or settings_token_provider(config),
            context_id=config.context_id,
            path_prefix=config.api_path_prefix,
            timeout=config.request_timeout,
            direction=config.layout_direction,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # UI state
    # ------------------------------------------------------------------

    @property
    def error(self) -> str | None:
        return self.run_error or self.search_error

    def set_search_term(self, term: str) -> None:
        self.search_term = term

    def set_ai_mode(self, enabled: bool) -> None:
        self.ai_mode = enabled

    def set_query_text(self, text: str) -> None:
        self.query_text = text

    def open_query_editor(self) -> None:
        self.show_query_editor = True

    def close_query_editor(self) -> None:
        self.show_query_editor = False

    def hover(self, node_id: str | None) -> None:
        self.hovered_node_id = node_id or None

    def unhover(self) -> None:
        self.hovered_node_id = None

    def set_timeline(self, value: int) -> None:
        self.timeline_value = max(SLIDER_MIN, min(SLIDER_MAX, int(value)))

    def view(self, now: datetime | None = None) -> GraphView:
        return build_view(
            self.snapshot,
            hovered_node_id=self.hovered_node_id,
            timeline_value=self.timeline_value,
            now=now,
            ai_mode=self.ai_mode,
        )

    def state(self) -> dict[str, Any]:
        return {
            "searchTerm": self.search_term,
            "aiMode": self.ai_mode,
            "aiStatus": self.ai_status,
            "queryText": self.query_text,
            "showQueryEditor": self.show_query_editor,
            "loading": self.loading,
            "runningQuery": self.running_query,
            "error": self.error,
            "hoveredNodeId": self.hovered_node_id,
            "timelineValue": self.timeline_value,
        }

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def submit(self) -> bool:
        """Run a field search, or an AI question in AI mode.

        Returns:
            ``True`` if a request was issued; ``False`` when the term is
            blank, no base URL is configured or no token is available.
        """
        term = self.search_term.strip()
        if not term or not self.base_url:
            return False
        token = await resolve_token(self.token_provider)
        if not token:
            return False

        ai_mode = self.ai_mode
        ticket = self._begin(SEARCH)
        self.loading = True
        self.ai_status = GENERATING_STATUS if ai_mode else None
        print(f"[graph] {'ask' if ai_mode else 'impact'} {term!r} (request #{ticket})")

        client = self._client()
        try:
            if ai_mode:
                payload = await client.ask(term, token)
            else:
                payload = await client.impact(term, token)
            snapshot = layout_snapshot(
                transform_payload(payload), self.layout_engine, self.direction
            )
        except GraphApiError as exc:
            self._fail(ticket, SEARCH, exc.message)
        except (httpx.HTTPError, ValueError) as exc:
            print(f"[graph] request #{ticket} failed: {exc!r}")
            self._fail(ticket, SEARCH, SEARCH_FAILED)
        else:
            if self._is_current(ticket):
                self.snapshot = snapshot
                cypher = _query_text_of(payload)
                if cypher:
                    self.query_text = cypher
                    if ai_mode:
                        self.show_query_editor = True
                print(
                    f"[graph] request #{ticket} ✓ {len(snapshot.nodes)} node(s), "
                    f"{len(snapshot.edges)} edge(s)."
                )
            else:
                print(f"[graph] request #{ticket} superseded; response dropped.")
        finally:
            if self._latest[SEARCH] == ticket:
                self.loading = False
                self.ai_status = None
        return True

    async def run_query(self) -> bool:
        """Execute the current query text against the raw-query endpoint.

        Returns:
            ``True`` if a request was issued; ``False`` for blank query text,
            a missing base URL or no token.
        """
        query = self.query_text
        if not query.strip() or not self.base_url:
            return False
        token = await resolve_token(self.token_provider)
        if not token:
            return False

        ticket = self._begin(RUN)
        self.running_query = True
        print(f"[graph] raw query (request #{ticket})")

        client = self._client()
        try:
            payload = await client.run_raw(query, token)
            snapshot = layout_snapshot(
                transform_payload(payload), self.layout_engine, self.direction
            )
        except GraphApiError as exc:
            self._fail(ticket, RUN, exc.message)
        except (httpx.HTTPError, ValueError) as exc:
            print(f"[graph] request #{ticket} failed: {exc!r}")
            self._fail(ticket, RUN, RUN_FAILED)
        else:
            if self._is_current(ticket):
                self.snapshot = snapshot
                cleaned = _query_text_of(payload)
                if cleaned:
                    self.query_text = cleaned
                print(
                    f"[graph] request #{ticket} ✓ {len(snapshot.nodes)} node(s), "
                    f"{len(snapshot.edges)} edge(s)."
                )
            else:
                print(f"[graph] request #{ticket} superseded; response dropped.")
        finally:
            if self._latest[RUN] == ticket:
                self.running_query = False
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _client(self) -> GraphApiClient:
        if self._client_factory is not None:
            return self._client_factory()
        return GraphApiClient(
            self.base_url or "",
            context_id=self.context_id,
            path_prefix=self.path_prefix,
            timeout=self.timeout,
        )

    def _begin(self, family: str) -> int:
        """Take a ticket and reset to a clean slate."""
        self._generation += 1
        self._latest[family] = self._generation
        self.snapshot = GraphSnapshot()
        self.search_error = None
        self.run_error = None
        return self._generation

    def _is_current(self, ticket: int) -> bool:
        return ticket == self._generation

    def _fail(self, ticket: int, family: str, message: str) -> None:
        if not self._is_current(ticket):
            print(f"[graph] request #{ticket} superseded; error dropped.")
            return
        print(f"[graph] request #{ticket} ✗ {message}")
        if family == SEARCH:
            self.search_error = message
        else:
            self.run_error = message


def _query_text_of(payload: Any) -> str | None:
    if isinstance(payload, dict):
        cypher = payload.get("cypher")
        if isinstance(cypher, str) and cypher.strip():
            return cypher
    return None
