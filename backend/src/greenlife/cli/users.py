"""User management CLI commands."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table
from sqlmodel import select

from greenlife.database import get_session_context
from greenlife.models import Role, User
from greenlife.services.auth import create_token, token_lifetime
from greenlife.services.passwords import hash_password

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="User management commands")


async def _find(session, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


@app.command("list")
def list_users():
    """List all users."""

    async def _list():
        async with get_session_context() as session:
            result = await session.execute(select(User).order_by(User.email))
            users = result.scalars().all()

        table = Table(title="Users")
        table.add_column("ID", style="cyan")
        table.add_column("Username")
        table.add_column("Email", style="green")
        table.add_column("Role", style="magenta")
        table.add_column("Created", style="dim")

        for user in users:
            created = user.created_at.strftime("%Y-%m-%d") if user.created_at else "-"
            table.add_row(user.id, user.username, user.email, user.role.value, created)

        console.print(table)

    asyncio.run(_list())


@app.command("create")
def create_user(
    email: str = typer.Argument(..., help="User email"),
    username: str = typer.Option(..., "--username", "-u", help="Display name"),
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password"
    ),
    admin: bool = typer.Option(False, "--admin", help="Make user an admin"),
):
    """Create a new user."""
    if len(password) < 8:
        console.print("[red]Error:[/red] Password must be at least 8 characters")
        raise typer.Exit(1)

    async def _create():
        async with get_session_context() as session:
            if await _find(session, email):
                console.print(f"[red]Error:[/red] User {email} already exists")
                raise typer.Exit(1)

            user = User(
                username=username,
                email=email.lower(),
                password_hash=hash_password(password),
                role=Role.ADMIN if admin else Role.USER,
            )
            session.add(user)
            await session.commit()
            console.print(f"[green]Created user:[/green] {user.email} ({user.role.value})")

    asyncio.run(_create())


@app.command("grant-admin")
def grant_admin(email: str = typer.Argument(..., help="User email")):
    """Grant admin privileges to a user.

    Tokens issued before the change still carry the old role until they expire.
    """

    async def _grant():
        async with get_session_context() as session:
            user = await _find(session, email)
            if not user:
                console.print(f"[red]Error:[/red] User {email} not found")
                raise typer.Exit(1)

            if user.is_admin:
                console.print(f"[yellow]Warning:[/yellow] User {email} is already an admin")
                return

            user.role = Role.ADMIN
            await session.commit()
            console.print(f"[green]Granted admin to:[/green] {email}")

    asyncio.run(_grant())


@app.command("token")
def issue_token(email: str = typer.Argument(..., help="User email")):
    """Print a signed access token for a user, for scripting against the API."""

    async def _issue():
        async with get_session_context() as session:
            user = await _find(session, email)
            if not user:
                console.print(f"[red]Error:[/red] User {email} not found")
                raise typer.Exit(1)

        typer.echo(create_token(user))
        err_console.print(f"[dim]Valid for {token_lifetime()}[/dim]")

    asyncio.run(_issue())
