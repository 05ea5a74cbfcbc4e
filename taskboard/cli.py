"""Taskboard CLI: database and user administration."""

from datetime import timedelta
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from taskboard.core.auth.identity import create_identity_token
from taskboard.core.auth.permissions import Role, role_label
from taskboard.core.db.session import Base, SessionLocal, engine
from taskboard.core.exceptions import InvariantViolationError
from taskboard.core.logging import configure_logging

app = typer.Typer(
    name="taskboard",
    help="Taskboard CLI - database and user administration",
    add_completion=False,
)
db_app = typer.Typer(help="Database management commands")
users_app = typer.Typer(help="User management commands")
app.add_typer(db_app, name="db")
app.add_typer(users_app, name="users")

console = Console()

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


@db_app.command("init")
def db_init() -> None:
    """Create all tables directly from the models (development databases)."""
    import taskboard.models  # noqa: F401  (register tables on Base.metadata)

    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Error creating tables: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Tables created[/green]")


@db_app.command("upgrade")
def db_upgrade(
    revision: str = typer.Argument("head", help="Target revision"),
) -> None:
    """Apply Alembic migrations up to a revision."""
    from alembic import command
    from alembic.config import Config

    if not ALEMBIC_INI.exists():
        console.print(f"[red]✗ alembic.ini not found at {ALEMBIC_INI}[/red]")
        raise typer.Exit(1)

    command.upgrade(Config(str(ALEMBIC_INI)), revision)
    console.print(f"[green]✓ Database upgraded to {revision}[/green]")


@users_app.command("list")
def users_list() -> None:
    """List users with their roles."""
    from taskboard.services.user_service import UserService

    db = SessionLocal()
    try:
        users = UserService(db).get_all_users()
        if not users:
            console.print("[yellow]No users[/yellow]")
            return

        table = Table(title="Users")
        table.add_column("ID", justify="right")
        table.add_column("Display name")
        table.add_column("Email")
        table.add_column("Role")
        for user in users:
            table.add_row(str(user.id), user.display_name, user.email, role_label(user.role))
        console.print(table)
    finally:
        db.close()


@users_app.command("grant")
def users_grant(
    email: str = typer.Argument(..., help="Email of the user"),
    role: Role = typer.Argument(..., help="Role to assign"),
) -> None:
    """Assign a role to a user."""
    from taskboard.services.permission_service import PermissionService
    from taskboard.services.user_service import UserService

    db = SessionLocal()
    try:
        user = UserService(db).get_user_by_email(email)
        if user is None:
            console.print(f"[red]✗ No user with email {email}[/red]")
            raise typer.Exit(1)

        try:
            PermissionService(db).assign_role(user.id, role)
        except (InvariantViolationError, SQLAlchemyError) as e:
            console.print(f"[red]✗ Error: {e}[/red]")
            raise typer.Exit(1)

        console.print(f"[green]✓ {email} is now {role_label(role)}[/green]")
    finally:
        db.close()


@app.command("token")
def token(
    uid: str = typer.Argument(..., help="Identity-provider user id"),
    email: str = typer.Argument(..., help="Email claim"),
    name: str = typer.Option(None, "--name", "-n", help="Display name claim"),
    hours: int = typer.Option(1, "--hours", help="Token lifetime in hours"),
) -> None:
    """Mint a development ID token signed with the configured identity secret."""
    console.print(
        create_identity_token(uid, email, name=name, expires_delta=timedelta(hours=hours)),
        soft_wrap=True,
    )


def main() -> None:
    """Main entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
