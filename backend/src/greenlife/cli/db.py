"""Database management CLI commands."""

import subprocess
import sys
from pathlib import Path

import typer
from rich.console import Console

console = Console()
app = typer.Typer(help="Database management commands")

# alembic.ini lives in backend/
BACKEND_DIR = Path(__file__).resolve().parents[3]


def _alembic(*args: str) -> int:
    result = subprocess.run(
        [sys.executable, "-m", "alembic", *args],
        cwd=BACKEND_DIR,
        check=False,
    )
    return result.returncode


def _finish(returncode: int, done: str, failed: str) -> None:
    if returncode == 0:
        console.print(f"[green]{done}[/green]")
    else:
        console.print(f"[red]{failed}[/red]")
        raise typer.Exit(1)


@app.command("migrate")
def migrate(
    revision: str = typer.Argument("head", help="Target revision (default: head)"),
):
    """Apply migrations up to a revision."""
    console.print(f"[dim]Upgrading to {revision}...[/dim]")
    _finish(_alembic("upgrade", revision), "Migrations complete!", "Migration failed!")


@app.command("rollback")
def rollback(
    revision: str = typer.Argument("-1", help="Target revision (default: one step back)"),
):
    """Revert migrations down to a revision."""
    console.print(f"[dim]Downgrading to {revision}...[/dim]")
    _finish(_alembic("downgrade", revision), "Rollback complete!", "Rollback failed!")


@app.command("current")
def current():
    """Show the revision the database is at."""
    _alembic("current")


@app.command("revision")
def revision(
    message: str = typer.Argument(..., help="Migration message"),
    autogenerate: bool = typer.Option(
        True, "--autogenerate/--empty", help="Diff the models against the database"
    ),
):
    """Create a new migration script."""
    args = ["revision", "-m", message]
    if autogenerate:
        args.append("--autogenerate")
    _finish(_alembic(*args), "Migration created!", "Failed to create migration!")
