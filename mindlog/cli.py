"""
Main CLI entry point for Mindlog.

This module provides the command-line interface for running the server and
for searching a local data file.
"""

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from mindlog import __version__
from mindlog.core import build_mind_map, search_logs, with_related_titles
from mindlog.errors import MindlogError
from mindlog.schemas import LogRecord
from mindlog.server import ServerConfig, create_app
from mindlog.store import JSONFileDocumentStore, StoreType
from mindlog.utils.logger import get_logger

app = typer.Typer(
    name="mindlog",
    help="Mindlog - notes linked into a mind map",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

DataOption = Annotated[
    Path,
    typer.Option(
        "--data",
        "-d",
        help="Path to the JSON data file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
]


@app.command()
def serve(
    store: Annotated[
        StoreType,
        typer.Option(
            "--store",
            "-s",
            help="Document store to use",
        ),
    ] = StoreType.JSON,
    data_path: Annotated[
        Path,
        typer.Option(
            "--data",
            "-d",
            help="Path to the JSON data file (for the json store)",
        ),
    ] = Path(".mindlog_data/mindlog.json"),
    host: Annotated[
        str,
        typer.Option(
            "--host",
            help="Server host",
        ),
    ] = "127.0.0.1",
    port: Annotated[
        int,
        typer.Option(
            "--port",
            "-p",
            help="Server port",
        ),
    ] = 8000,
    session_ttl: Annotated[
        int,
        typer.Option(
            "--session-ttl",
            help="Session lifetime in minutes",
        ),
    ] = 12 * 60,
    cors_origin: Annotated[
        list[str] | None,
        typer.Option(
            "--cors-origin",
            help="Allowed CORS origin (repeatable)",
        ),
    ] = None,
) -> None:
    """
    Start the Mindlog API server.

    Examples:

        # Persist to the default data file
        mindlog serve

        # Throwaway in-memory server on another port
        mindlog serve --store memory --port 9000
    """
    try:
        console.print("[bold blue]Mindlog - API Server[/bold blue]")
        console.print(f"Store: {store.value}" + (f" ({data_path})" if store == StoreType.JSON else ""))
        console.print(
            "[yellow]No identity provider configured: sign-in is refused. "
            "Embed create_app(config, verify_identity=...) to enable it.[/yellow]"
        )
        console.print()

        config_kwargs: dict[str, Any] = {
            "host": host,
            "port": port,
            "store_type": store,
            "data_path": data_path,
            "session_ttl_minutes": session_ttl,
        }
        if cors_origin:
            config_kwargs["cors_origins"] = cors_origin
        config = ServerConfig(**config_kwargs)

        fastapi_app = create_app(config)

        import uvicorn

        console.print(f"Server will run at http://{host}:{port}")
        console.print(f"   - API Docs: http://{host}:{port}/docs")
        console.print()
        console.print("Press Ctrl+C to stop")
        console.print()

        uvicorn.run(
            fastapi_app,
            host=host,
            port=port,
            log_level="info",
        )

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        logger.error(f"Server error: {e}", exc_info=True)
        raise typer.Exit(1) from None


def _load_logs(
    data: Path,
    owner: str | None,
    public_only: bool,
) -> list[LogRecord]:
    store = JSONFileDocumentStore(data)
    logs = store.list_logs(owner_id=owner, is_public=True if public_only else None)
    logs.sort(key=lambda log: log.updated_at, reverse=True)
    return [with_related_titles(log, store.get_log) for log in logs]


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Text to search for")],
    data: DataOption,
    owner: Annotated[
        str | None,
        typer.Option(
            "--owner",
            "-o",
            help="Only search logs created by this user id",
        ),
    ] = None,
    public_only: Annotated[
        bool,
        typer.Option(
            "--public",
            help="Only search public logs",
        ),
    ] = False,
) -> None:
    """
    Search logs in a data file.

    Direct matches (query in title or description) are listed first,
    followed by logs linked to them.

    Examples:

        mindlog search "apple" --data .mindlog_data/mindlog.json

        mindlog search "apple" --data mindlog.json --public
    """
    try:
        logs = _load_logs(data, owner, public_only)
        results = search_logs(query, logs)
    except MindlogError as e:
        console.print(f"[bold red]Error:[/bold red] {e.message}")
        raise typer.Exit(1) from None

    if not results:
        console.print("[yellow]No logs match your search.[/yellow]")
        raise typer.Exit(0)

    needle = query.strip().lower()
    table = Table(title=f"Search results for '{query}'")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Match")
    table.add_column("Visibility")
    table.add_column("Related")

    for log in results:
        direct = needle in log.title.lower() or needle in (log.description or "").lower()
        table.add_row(
            log.id,
            log.title,
            "direct" if direct else "[dim]related[/dim]",
            "public" if log.is_public else "private",
            ", ".join(log.related_log_titles),
        )

    console.print(table)
    console.print(f"Found {len(results)} log(s)")


@app.command()
def show(
    log_id: Annotated[str, typer.Argument(help="Id of the log at the centre of the map")],
    data: DataOption,
) -> None:
    """
    Print the mind map around a log.

    Examples:

        mindlog show 3f2a9c --data .mindlog_data/mindlog.json
    """
    try:
        store = JSONFileDocumentStore(data)
    except MindlogError as e:
        console.print(f"[bold red]Error:[/bold red] {e.message}")
        raise typer.Exit(1) from None

    root = store.get_log(log_id)
    if root is None:
        console.print(f"[bold red]Error:[/bold red] Log '{log_id}' not found")
        raise typer.Exit(1)

    root = with_related_titles(root, store.get_log)
    neighbours = {
        related_id: related
        for related_id in root.related_log_ids
        if (related := store.get_log(related_id)) is not None
    }
    mind_map = build_mind_map(root, neighbours)

    nodes = {node.id: node for node in mind_map.nodes}
    tree = Tree(f"[bold]{root.title}[/bold] [dim]({root.id})[/dim]")
    for edge in mind_map.edges:
        node = nodes[edge.target]
        label = node.title if node.resolved else f"[red]{node.title}[/red]"
        tree.add(f"{label} [dim]({node.id})[/dim]")

    console.print(tree)


@app.command()
def version() -> None:
    """Display version information."""
    console.print(f"[bold]Mindlog[/bold] version {__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
