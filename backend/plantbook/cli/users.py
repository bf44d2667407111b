"""Flask CLI commands for account administration."""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from plantbook.api.deps import token_service
from plantbook.services._shared.errors import NotFoundError
from plantbook.services.identity.service import IdentityService


@click.group("users")
def users_cli() -> None:
    """Account administration commands."""


@users_cli.command("deactivate")
@click.argument("user_id", type=int)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@with_appcontext
def deactivate_command(user_id: int, yes: bool) -> None:
    """Deactivate USER_ID and revoke all of its refresh sessions."""
    if not yes:
        click.confirm(f"Deactivate user {user_id} and sign out every device?", abort=True)
    service = IdentityService(
        tokens=token_service(),
        blobs=current_app.extensions["blob_store"],
    )
    try:
        revoked = service.deactivate(user_id)
    except NotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"User {user_id} deactivated; {revoked} session(s) revoked.")


@users_cli.command("sessions")
@click.argument("user_id", type=int)
@with_appcontext
def sessions_command(user_id: int) -> None:
    """List the live refresh sessions of USER_ID, oldest first."""
    sessions = token_service().sessions(user_id)
    if not sessions:
        click.echo("  (no sessions)")
        return
    for session in sessions:
        device = session.device or "unknown device"
        click.echo(
            f"  {device}  issued={session.issued_at.isoformat()}"
            f"  expires={session.expires_at.isoformat()}"
        )
