"""depgraph CLI — entry-point for graph queries.

Usage:
    python cli/main.py --help

Sub-command groups:
    graph     → trace / ask / run against the graph API
    context   → choose the context queries are scoped to
    serve     → run the viewer service for a rendering surface
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from depgraph.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import typer

from cli.commands.context import context_app
from cli.commands.graph import graph_app

app = typer.Typer(
    name="depgraph",
    help="Dependency-graph explorer CLI.",
    no_args_is_help=True,
)

app.add_typer(graph_app, name="graph")
app.add_typer(context_app, name="context")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Port."),
) -> None:
    """Serve the graph view over HTTP for a rendering surface."""
    import uvicorn

    typer.echo(f"[serve] Viewer on http://{host}:{port}/graph")
    uvicorn.run("depgraph.api.app:app", host=host, port=port)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
