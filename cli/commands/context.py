"""Active-context commands (which dataset graph queries are scoped to)."""

import typer

from cli.context import CliContext, load_context, save_context

context_app = typer.Typer(help="Manage the active context for graph queries.")


@context_app.command("set")
def context_set(
    context_id: str = typer.Argument(..., help="Context identifier sent as curriculumId."),
    name: str = typer.Option(None, "--name", help="Friendly name for display."),
) -> None:
    """Switch the active context."""
    ctx = load_context()
    ctx.active_context_id = context_id
    ctx.active_context_name = name
    save_context(ctx)
    typer.echo(f"📂 Switched to context: {name or context_id}")


@context_app.command("show")
def context_show() -> None:
    """Show the active context and the remembered query."""
    ctx = load_context()
    label = ctx.describe()
    if label is None:
        typer.echo("No active context. Queries are sent unscoped.")
    else:
        typer.echo(f"Active context: {label}")
    if ctx.last_query:
        typer.echo("Last query:")
        typer.echo(ctx.last_query)


@context_app.command("clear")
def context_clear() -> None:
    """Forget the active context and last query (preferences are kept)."""
    ctx = load_context()
    save_context(CliContext(user_preferences=ctx.user_preferences))
    typer.echo("✅ Context cleared.")
