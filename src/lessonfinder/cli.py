"""Command line interface for LessonFinder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from lessonfinder.chat.fallback import build_fallback_reply, classify_failure
from lessonfinder.config import AppConfig
from lessonfinder.index.search import Searcher, build_searcher
from lessonfinder.models import ChunkKind
from lessonfinder.utils.text import collapse_whitespace, truncate
from lessonfinder.web.app import app as web_app


console = Console()
app = typer.Typer(help="LessonFinder - offline search over lessons and app help")

CURRICULUM_OPTION = typer.Option(None, "--curriculum", help="Curriculum JSON (defaults to bundled)")
HELP_TOPICS_OPTION = typer.Option(None, "--help-topics", help="Help topics JSON (defaults to bundled)")
THRESHOLD_OPTION = typer.Option(AppConfig().threshold, help="Fuzzy match threshold (0 = exact)")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Verbose logging")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_searcher(curriculum: Path | None, help_topics: Path | None, threshold: float) -> Searcher:
    config = AppConfig(curriculum_path=curriculum, help_path=help_topics, threshold=threshold)
    try:
        return build_searcher(config, base_dir=Path.cwd())
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    curriculum: Optional[Path] = CURRICULUM_OPTION,
    help_topics: Optional[Path] = HELP_TOPICS_OPTION,
    threshold: float = THRESHOLD_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Search offline lessons and help topics."""
    _setup_logging(verbose)
    searcher = _load_searcher(curriculum, help_topics, threshold)

    results = searcher.search(query)
    if not results:
        console.print("[yellow]No offline matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Kind")
    table.add_column("Title")
    table.add_column("Snippet")

    for rank, chunk in enumerate(results, start=1):
        snippet = truncate(collapse_whitespace(chunk.text), 180)
        table.add_row(str(rank), chunk.kind.value, chunk.title, snippet)

    console.print(table)


@app.command()
def chunks(
    kind: Optional[ChunkKind] = typer.Option(None, "--kind", help="Only list one kind"),
    curriculum: Optional[Path] = CURRICULUM_OPTION,
    help_topics: Optional[Path] = HELP_TOPICS_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """List the flattened corpus in index order."""
    _setup_logging(verbose)
    searcher = _load_searcher(curriculum, help_topics, AppConfig().threshold)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Position")
    table.add_column("Kind")
    table.add_column("Title")

    shown = 0
    for position, chunk in enumerate(searcher.corpus):
        if kind is not None and chunk.kind != kind:
            continue
        table.add_row(str(position), chunk.kind.value, chunk.title)
        shown += 1

    console.print(table)
    console.print(f"{shown} of {len(searcher.corpus)} chunks")


@app.command()
def reply(
    query: str = typer.Argument(..., help="Student message"),
    failure_status: Optional[int] = typer.Option(
        None,
        "--failure-status",
        help="HTTP status of a failed assistant call; omit to compose the offline reply",
    ),
    curriculum: Optional[Path] = CURRICULUM_OPTION,
    help_topics: Optional[Path] = HELP_TOPICS_OPTION,
    threshold: float = THRESHOLD_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print the fallback chat reply for a message."""
    _setup_logging(verbose)
    searcher = _load_searcher(curriculum, help_topics, threshold)

    if failure_status is None:
        fallback = build_fallback_reply(searcher, query, offline=True)
    else:
        fallback = build_fallback_reply(
            searcher, query, offline=False, failure=classify_failure(failure_status)
        )

    console.print(f"[bold]mode:[/bold] {fallback.mode}")
    console.print(fallback.text, markup=False)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    curriculum: Optional[Path] = CURRICULUM_OPTION,
    help_topics: Optional[Path] = HELP_TOPICS_OPTION,
    threshold: float = THRESHOLD_OPTION,
) -> None:
    """Start the HTTP interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    web_app.state.config = AppConfig(
        curriculum_path=curriculum.resolve() if curriculum else None,
        help_path=help_topics.resolve() if help_topics else None,
        threshold=threshold,
    )
    console.print(f"Starting web interface on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
