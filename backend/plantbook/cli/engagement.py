"""Flask CLI commands for reconciling denormalised post counters."""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from plantbook.services._shared.errors import NotFoundError
from plantbook.services.engagement.dto import RecountOut
from plantbook.services.engagement.service import EngagementService


def _echo_recount(result: RecountOut) -> None:
    click.echo(
        f"  post {result.post_id}:"
        f" likes {result.likes_before} -> {result.likes_count},"
        f" comments {result.comments_before} -> {result.comments_count}"
    )


@click.group("engagement")
def engagement_cli() -> None:
    """Maintenance commands for likes and comments."""


@engagement_cli.command("recount")
@click.option("--post-id", type=int, default=None, help="Only recount this post.")
@with_appcontext
def recount_command(post_id: int | None) -> None:
    """Recompute likes and comments counters from the source tables."""
    service = EngagementService(comment_max_length=int(current_app.config["COMMENT_MAX_LENGTH"]))

    if post_id is not None:
        try:
            result = service.recount(post_id)
        except NotFoundError as exc:
            raise click.ClickException(str(exc)) from exc
        if result.drifted:
            click.echo("Counters repaired:")
            _echo_recount(result)
        else:
            click.echo(f"Post {post_id}: counters already consistent.")
        return

    drifted = service.recount_all()
    if not drifted:
        click.echo("All counters consistent.")
        return
    click.echo(f"Counters repaired on {len(drifted)} post(s):")
    for result in drifted:
        _echo_recount(result)
