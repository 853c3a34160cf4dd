"""Commands that query the dependency graph and print the result."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from depgraph.config import settings
from depgraph.controller import GraphController
from cli.context import load_context, remember_query
from cli.editor import edit_query_text
from cli.rendering import render_json, render_list, render_tree

graph_app = typer.Typer(help="Trace field impact, ask questions and run graph queries.")

_RENDERERS = {
    "list": render_list,
    "tree": render_tree,
    "json": render_json,
}


def _build_controller() -> GraphController:
    """Controller from ``settings``, scoped to the saved active context."""
    controller = GraphController.from_settings(settings)
    controller.context_id = load_context().effective_context_id
    return controller


def _check_ready(controller: GraphController, text: str) -> None:
    if not text.strip():
        typer.echo("❌ Nothing to send: the input is empty.")
        raise typer.Exit(code=1)
    if not controller.base_url:
        typer.echo("❌ No graph API configured. Set DEPGRAPH_API_BASE_URL.")
        raise typer.Exit(code=1)


def _show(
    controller: GraphController,
    issued: bool,
    output: str,
    timeline: int,
    hover: Optional[str],
) -> None:
    """Report errors, remember the query text and print the view."""
    if not issued:
        typer.echo("❌ Nothing was sent: no credential available (DEPGRAPH_API_TOKEN / DEPGRAPH_TOKEN_COMMAND).")
        raise typer.Exit(code=1)
    if controller.error:
        typer.echo(f"❌ {controller.error}")
        raise typer.Exit(code=1)

    remember_query(controller.query_text)

    controller.set_timeline(timeline)
    controller.hover(hover)
    renderer = _RENDERERS[output]
    typer.echo(renderer(controller.view()))

    if controller.show_query_editor and output != "json":
        typer.echo("")
        typer.echo("Generated query:")
        typer.echo(controller.query_text)


def _validate_format(value: str) -> str:
    if value not in _RENDERERS:
        raise typer.BadParameter(f"Use one of: {', '.join(_RENDERERS)}")
    return value


_FORMAT = typer.Option("tree", "--format", help="Output format: tree | list | json", callback=_validate_format)
_TIMELINE = typer.Option(100, "--timeline", min=0, max=100, help="Timeline position (100 = today).")
_HOVER = typer.Option(None, "--hover", help="Node id to spotlight.")


@graph_app.command("trace")
def graph_trace(
    field_name: str = typer.Argument(..., help="Field to trace, e.g. Account.Status."),
    output: str = _FORMAT,
    timeline: int = _TIMELINE,
    hover: Optional[str] = _HOVER,
) -> None:
    """Trace everything that depends on a field."""
    controller = _build_controller()
    _check_ready(controller, field_name)
    controller.set_search_term(field_name)
    issued = asyncio.run(controller.submit())
    _show(controller, issued, output, timeline, hover)


@graph_app.command("ask")
def graph_ask(
    question: str = typer.Argument(..., help="Natural-language question about the metadata."),
    output: str = _FORMAT,
    timeline: int = _TIMELINE,
    hover: Optional[str] = _HOVER,
) -> None:
    """Ask a question; the server generates and runs a graph query."""
    controller = _build_controller()
    _check_ready(controller, question)
    controller.set_ai_mode(True)
    controller.set_search_term(question)
    typer.echo("✨ Generating query…")
    issued = asyncio.run(controller.submit())
    _show(controller, issued, output, timeline, hover)


@graph_app.command("run")
def graph_run(
    query: Optional[str] = typer.Argument(None, help="Query text (defaults to the last query)."),
    edit: bool = typer.Option(False, "--edit", help="Open the query in $EDITOR before running."),
    output: str = _FORMAT,
    timeline: int = _TIMELINE,
    hover: Optional[str] = _HOVER,
) -> None:
    """Execute a raw graph query."""
    text = query if query is not None else (load_context().last_query or "")
    if edit:
        edited = edit_query_text(text)
        if edited is not None:
            text = edited
    controller = _build_controller()
    _check_ready(controller, text)
    controller.set_query_text(text)
    issued = asyncio.run(controller.run_query())
    _show(controller, issued, output, timeline, hover)
