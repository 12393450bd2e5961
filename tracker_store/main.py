from __future__ import annotations

import sys
from collections import Counter

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from tracker_store.config import get_settings
from tracker_store.errors import StoreError
from tracker_store.gateway.postgres import PgSqlClient
from tracker_store.infrastructure.db_factory import get_sync_connection
from tracker_store.infrastructure.schema import apply_schema
from tracker_store.retry import retry_on_connectivity
from tracker_store.utils.logging import configure_logging

app = typer.Typer(help="Tracker store CLI.")


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"batch={settings.batch_size} pool=({settings.pool_min_size},{settings.pool_max_size}) | "
        f"first_agc_epoch_second={settings.first_agc_epoch_second} "
        f"unrated_state={settings.unrated_state!r}"
    )


@app.command("init-db")
def init_db() -> None:
    """
    Create the store tables if they do not exist.
    """
    with get_sync_connection() as conn:
        apply_schema(conn)
    typer.echo("Schema applied.")


@app.command("pending-contests")
def pending_contests() -> None:
    """
    List rating-eligible contests that have no performances recorded yet.
    """
    client = PgSqlClient.from_settings()
    pending = set(retry_on_connectivity(client.get_contests_without_performances))
    contests = [c for c in retry_on_connectivity(client.get_contests) if c.id in pending]

    console = Console()
    if not contests:
        console.print("[yellow]No contests waiting for rating.[/yellow]")
        return

    table = Table(title="Contests Without Performances", box=box.ROUNDED)
    table.add_column("Contest", style="cyan", no_wrap=True)
    table.add_column("Start (epoch s)", justify="right", style="magenta")
    table.add_column("Rate Change", style="green")
    table.add_column("Title")
    for contest in sorted(contests, key=lambda c: c.start_epoch_second):
        table.add_row(
            contest.id, str(contest.start_epoch_second), contest.rate_change, contest.title
        )
    console.print(table)


@app.command()
def submissions(user_id: str = typer.Argument(..., help="User whose submissions to count.")) -> None:
    """
    Summarize a user's stored submissions by result.
    """
    client = PgSqlClient.from_settings()
    rows = retry_on_connectivity(client.get_submissions, user_id)
    by_result = Counter(row.result for row in rows)

    table = Table(title=f"Submissions of {user_id} ({len(rows):,})", box=box.ROUNDED)
    table.add_column("Result", style="cyan")
    table.add_column("Count", justify="right", style="magenta")
    for result, count in by_result.most_common():
        table.add_row(result, f"{count:,}")
    Console().print(table)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
    except StoreError as exc:
        typer.echo(f"Store error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
