"""Main CLI entry point for Knowcards."""

import json

import typer
from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError
from rich import print as rprint
from rich.panel import Panel
from rich.table import Table

from knowcards.cli.helpers import console, get_store, open_in_editor
from knowcards.core import config
from knowcards.core.errors import CardStoreError
from knowcards.core.models import Card, CardInput

load_dotenv()

app = typer.Typer(
    name="knowcards",
    help="Manage knowledge cards and serve the card site.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log store activity to stderr",
    ),
) -> None:
    if verbose:
        config.configure_logging("DEBUG")


def _fail(exc: CardStoreError) -> typer.Exit:
    rprint(f"[red]{exc}[/red]")
    return typer.Exit(1)


def _display_card(card: Card) -> None:
    """Display a card in a formatted panel."""
    content = (
        f"[bold]Core:[/bold] {card.core}\n\n"
        f"[bold]Boundary:[/bold] {card.boundary}\n\n"
        f"[bold]Signal:[/bold] {card.signal}\n\n"
        f"[bold]Action:[/bold] {card.action}"
    )
    content += f"\n\n[dim]ID: {card.id}[/dim]"
    content += f"\n[dim]Category: {card.category}[/dim]"
    if card.aliases:
        content += f"\n[dim]Aliases: {', '.join(card.aliases)}[/dim]"

    console.print(Panel(content, title=card.term, border_style="blue"))


# ============================================================================
# INIT command
# ============================================================================


@app.command()
def init() -> None:
    """Create the data file if it doesn't exist yet."""
    store = get_store()
    try:
        store.ensure_initialized()
    except CardStoreError as e:
        raise _fail(e)
    rprint(f"[green]Card store ready:[/green] {store.data_file}")


# ============================================================================
# LIST command
# ============================================================================


@app.command("list")
def list_cards(
    category: str | None = typer.Option(
        None,
        "--category",
        "-c",
        help="Only show cards in this category",
    ),
) -> None:
    """List all cards."""
    try:
        cards = get_store().read_all()
    except CardStoreError as e:
        raise _fail(e)

    if category:
        cards = [c for c in cards if c.category == category]

    if not cards:
        rprint("[dim]No cards found.[/dim]")
        return

    table = Table(title=f"Cards ({len(cards)} total)")
    table.add_column("ID", style="dim")
    table.add_column("Term", style="bold")
    table.add_column("Category", style="cyan")
    table.add_column("Core", max_width=50)

    for card in cards:
        table.add_row(
            card.id,
            card.term,
            card.category,
            card.core[:50] + "..." if len(card.core) > 50 else card.core,
        )

    console.print(table)


# ============================================================================
# SHOW command
# ============================================================================


@app.command()
def show(
    card_id: str = typer.Argument(..., help="Card ID"),
) -> None:
    """Show details of a specific card."""
    try:
        card = get_store().get(card_id)
    except CardStoreError as e:
        raise _fail(e)
    _display_card(card)


# ============================================================================
# ADD command
# ============================================================================


@app.command()
def add(
    term: str = typer.Option(..., "--term", "-t", help="Headword of the card"),
    category: str = typer.Option(..., "--category", "-c", help="Category"),
    core: str = typer.Option(..., "--core", help="What the term is"),
    boundary: str = typer.Option(..., "--boundary", help="Where it stops applying"),
    signal: str = typer.Option(..., "--signal", help="How to recognise it"),
    action: str = typer.Option(..., "--action", help="What to do about it"),
    alias: list[str] = typer.Option(
        [],
        "--alias",
        "-a",
        help="Alternative name (repeatable)",
    ),
    card_id: str = typer.Option(
        "",
        "--id",
        help="Explicit ID (defaults to a slug of the term)",
    ),
) -> None:
    """Add a new card."""
    card_input = CardInput(
        id=card_id,
        term=term,
        category=category,
        core=core,
        boundary=boundary,
        signal=signal,
        action=action,
        aliases=alias,
    )
    try:
        card = get_store().create(card_input)
    except CardStoreError as e:
        raise _fail(e)

    rprint("\n[green]Card saved![/green]")
    rprint(f"  ID: {card.id}")


# ============================================================================
# EDIT command
# ============================================================================


@app.command()
def edit(
    card_id: str = typer.Argument(..., help="Card ID to edit"),
) -> None:
    """Edit a card in your editor."""
    store = get_store()
    try:
        card = store.get(card_id)
    except CardStoreError as e:
        raise _fail(e)

    # The ID is fixed by the path, so it's not offered for editing
    editable = card.model_dump(exclude={"id"})
    content = json.dumps(editable, indent=2, ensure_ascii=False)
    edited_content = open_in_editor(content, suffix=".json")

    if not edited_content.strip():
        rprint("[yellow]Edit cancelled (empty content).[/yellow]")
        return

    try:
        card_input = CardInput.model_validate_json(edited_content)
    except PydanticValidationError as e:
        rprint(f"[red]Invalid JSON: {e}[/red]")
        raise typer.Exit(1)

    try:
        card = store.update(card_id, card_input)
    except CardStoreError as e:
        raise _fail(e)

    rprint(f"[green]Card updated:[/green] {card.id}")


# ============================================================================
# DELETE command
# ============================================================================


@app.command()
def delete(
    card_id: str = typer.Argument(..., help="Card ID to delete"),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Delete a card."""
    store = get_store()
    if not yes:
        typer.confirm(f"Delete card {card_id}?", abort=True)

    try:
        removed = store.delete(card_id)
    except CardStoreError as e:
        raise _fail(e)

    rprint(f"[green]Deleted:[/green] {removed.id} ({removed.term})")


# ============================================================================
# SERVE command
# ============================================================================


@app.command()
def serve(
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to run the server on (default: $PORT or 8080)",
    ),
    host: str = typer.Option(
        "127.0.0.1",
        "--host",
        "-h",
        help="Host to bind to",
    ),
    reload: bool = typer.Option(
        False,
        "--reload",
        "-r",
        help="Enable auto-reload for development",
    ),
) -> None:
    """Start the web server."""
    import uvicorn

    if port is None:
        port = config.port()

    site_dir = config.site_dir()
    if (site_dir / "dist").is_dir():
        rprint("[dim]Serving production build from dist/[/dim]")
    else:
        rprint("[dim]dist/ not found, serving from the site root[/dim]")

    rprint("\n[bold]Starting Knowcards server[/bold]")
    rprint(f"  URL: http://{host}:{port}")
    rprint(f"  Admin: http://{host}:{port}/admin")
    rprint(f"  API: http://{host}:{port}/api/cards")
    rprint("\n[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "knowcards.web.app:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
