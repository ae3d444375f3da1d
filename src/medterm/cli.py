"""Typer-based CLI for MedTerm."""

import logging

import typer
from rich.console import Console
from rich.table import Table

from .config import MedTermConfig
from .ledger import VoteLedger
from .llm import get_suggestion_provider
from .lookup import LookupSession, NoCandidatesError
from .models.activity import ActivityAction
from .models.votes import Category, InteractionKind
from .paths import DataPaths
from .store import FileStore
from .validation import InvalidUserSuggestion, validate_user_suggestion

app = typer.Typer(
    name="medterm",
    help="MedTerm - crowdsourced Chinese/English medical term translator",
    add_completion=False,
)

console = Console()

DATA_DIR_HELP = "Path to data directory (default: MEDTERM_DATA_DIR env or ./medterm_data)"

CATEGORY_CHOICES = {
    "clinical": Category.CLINICAL,
    "literal": Category.LITERAL,
    "descriptive": Category.DESCRIPTIVE,
    "user": Category.USER,
}


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Look up medical terms and vote on their translations."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(data_dir: str | None) -> tuple[MedTermConfig, VoteLedger]:
    config = MedTermConfig.from_env(cli_data_dir=data_dir)
    store = FileStore(DataPaths.from_config(config))
    ledger = VoteLedger(store)
    ledger.activity.limit = config.activity_limit
    return config, ledger


def _parse_category(value: str | None) -> Category | None:
    if value is None:
        return None
    category = CATEGORY_CHOICES.get(value.strip().lower())
    if category is None:
        console.print(f"[red]Error: Unknown category '{value}'[/red]")
        console.print(f"[yellow]Choose one of: {', '.join(CATEGORY_CHOICES)}[/yellow]")
        raise typer.Exit(code=1)
    return category


@app.command()
def lookup(
    term: str = typer.Argument(..., help="Medical term in Chinese or English"),
    engine: str = typer.Option(
        None,
        "--engine",
        "-e",
        help="Suggestion engine: auto, fake, gemini, openai (default: from config)",
    ),
    data_dir: str = typer.Option(None, "--data-dir", "-d", help=DATA_DIR_HELP),
):
    """Rank translation candidates for a term.

    Merges provider suggestions with community vote history.
    """
    config, ledger = _load(data_dir)

    try:
        provider = get_suggestion_provider(engine or config.suggest.provider, config.suggest)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    session = LookupSession(
        ledger,
        provider,
        max_candidates=config.max_candidates,
        reject_threshold=config.reject_threshold,
    )

    try:
        result = session.search(term)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    except NoCandidatesError as e:
        console.print(f"[yellow]{e}[/yellow]")
        raise typer.Exit(code=1)

    if result.corrected:
        console.print(f"[cyan]Note:[/cyan] Corrected to \"{result.correction}\".")

    if not result.candidates:
        console.print("[dim]No suitable suggestions found. Use 'medterm suggest' to add one.[/dim]")
        return

    table = Table(title=f"Suggestions for \"{result.term}\"")
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Term", style="bold")
    table.add_column("Category", style="magenta")
    table.add_column("Selects", style="green", justify="right")
    table.add_column("Rejects", style="red", justify="right")
    table.add_column("Score", style="cyan", justify="right")
    table.add_column("Context", style="dim")

    for i, candidate in enumerate(result.candidates, 1):
        table.add_row(
            str(i),
            candidate.term,
            candidate.category.badge,
            str(candidate.selects),
            str(candidate.rejects),
            str(candidate.score),
            candidate.context,
        )

    console.print(table)


@app.command()
def select(
    original: str = typer.Argument(..., help="Original search term"),
    translation: str = typer.Argument(..., help="Chosen translation"),
    category: str = typer.Option(None, "--category", "-c", help="clinical, literal, descriptive or user"),
    data_dir: str = typer.Option(None, "--data-dir", "-d", help=DATA_DIR_HELP),
):
    """Record that a translation was chosen."""
    _, ledger = _load(data_dir)
    record = ledger.record_interaction(original, translation, InteractionKind.SELECT, _parse_category(category))
    console.print(f"[green]Verified:[/green] {original} → {translation} ({record.selects} selects)")


@app.command()
def reject(
    original: str = typer.Argument(..., help="Original search term"),
    translation: str = typer.Argument(..., help="Dismissed translation"),
    data_dir: str = typer.Option(None, "--data-dir", "-d", help=DATA_DIR_HELP),
):
    """Record that a translation was dismissed."""
    config, ledger = _load(data_dir)
    record = ledger.record_interaction(original, translation, InteractionKind.REJECT)
    console.print(f"[yellow]Rejected:[/yellow] {original} → {translation} ({record.rejects} rejects)")
    if record.rejects > config.reject_threshold:
        console.print("[dim]This translation is now hidden for this term.[/dim]")


@app.command()
def unselect(
    original: str = typer.Argument(..., help="Original search term"),
    translation: str = typer.Argument(..., help="Translation to retract"),
    data_dir: str = typer.Option(None, "--data-dir", "-d", help=DATA_DIR_HELP),
):
    """Retract a previous selection."""
    _, ledger = _load(data_dir)
    record = ledger.remove_vote(original, translation)
    if record is None:
        console.print(f"[dim]No vote recorded for {original} → {translation}[/dim]")
        return
    console.print(f"[green]Retracted:[/green] {original} → {translation} ({record.selects} selects)")


@app.command()
def switch(
    original: str = typer.Argument(..., help="Original search term"),
    old: str = typer.Argument(..., help="Previously chosen translation"),
    new: str = typer.Argument(..., help="Newly chosen translation"),
    category: str = typer.Option("user", "--category", "-c", help="Category of the new translation"),
    data_dir: str = typer.Option(None, "--data-dir", "-d", help=DATA_DIR_HELP),
):
    """Move a selection from one translation to another."""
    _, ledger = _load(data_dir)
    if not ledger.change_vote(original, old, new, _parse_category(category)):
        console.print(f"[yellow]No history for '{original}'; nothing to switch[/yellow]")
        raise typer.Exit(code=1)
    console.print(f"[green]Switched:[/green] {original}: {old} → {new}")


@app.command()
def suggest(
    original: str = typer.Argument(..., help="Original search term"),
    text: str = typer.Argument(..., help="Your translation"),
    data_dir: str = typer.Option(None, "--data-dir", "-d", help=DATA_DIR_HELP),
):
    """Suggest a new translation and select it."""
    _, ledger = _load(data_dir)
    try:
        term = validate_user_suggestion(original, text)
    except InvalidUserSuggestion as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    ledger.submit_suggestion(original, term)
    console.print(f"[green]Suggested:[/green] {original} → {term}")


@app.command()
def activity(
    data_dir: str = typer.Option(None, "--data-dir", "-d", help=DATA_DIR_HELP),
):
    """Show recent community contributions."""
    _, ledger = _load(data_dir)
    items = ledger.get_recent_activity()

    if not items:
        console.print("[dim]No recent contributions.[/dim]")
        return

    table = Table(title="Community Training Data")
    table.add_column("Time (UTC)", style="cyan", no_wrap=True)
    table.add_column("Original")
    table.add_column("Translation", style="bold")
    table.add_column("Action")

    for item in items:
        label = (
            "[green]Verified by User[/green]"
            if item.action == ActivityAction.VERIFIED
            else "[magenta]New Suggestion[/magenta]"
        )
        table.add_row(item.timestamp.strftime("%Y-%m-%d %H:%M"), item.original, item.translation, label)

    console.print(table)


@app.command()
def stats(
    data_dir: str = typer.Option(None, "--data-dir", "-d", help=DATA_DIR_HELP),
):
    """Show the total number of contributions."""
    _, ledger = _load(data_dir)
    console.print(f"[bold]Contributions:[/bold] {ledger.get_total_contributions()}")


@app.command()
def history(
    original: str = typer.Argument(..., help="Original search term"),
    data_dir: str = typer.Option(None, "--data-dir", "-d", help=DATA_DIR_HELP),
):
    """Show stored vote records for a term."""
    _, ledger = _load(data_dir)
    records = ledger.get_term_history(original)

    if not records:
        console.print(f"[dim]No history for '{original}'[/dim]")
        return

    table = Table(title=f"Vote history for \"{original}\"")
    table.add_column("Translation", style="bold")
    table.add_column("Category", style="magenta")
    table.add_column("Origin")
    table.add_column("Selects", style="green", justify="right")
    table.add_column("Rejects", style="red", justify="right")
    table.add_column("Last Updated (UTC)", style="cyan")

    for translation, record in records.items():
        table.add_row(
            translation,
            record.category.badge,
            record.origin.value,
            str(record.selects),
            str(record.rejects),
            record.last_updated.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)


if __name__ == "__main__":
    app()
