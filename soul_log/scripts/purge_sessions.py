"""Expired session cleanup CLI.

Usage examples:
    flask purge-sessions
    flask purge-sessions --dry-run
    python -m soul_log.scripts.purge_sessions --dry-run
"""

from __future__ import annotations

import sys
from datetime import datetime

import click
from flask.cli import with_appcontext

from soul_log.core.auth.session_repository import SessionRepository
from soul_log.core.errors import DependencyUnavailable


@click.command("purge-sessions")
@click.option("--dry-run", is_flag=True, help="Only report how many sessions would be removed")
@with_appcontext
def purge_sessions_command(dry_run: bool):
    """Delete session rows whose expiry has passed."""
    repository = SessionRepository()
    now = datetime.utcnow()
    try:
        if dry_run:
            count = repository.count_expired(now)
            click.echo(f"purge-sessions dry run: {count} expired session(s) would be removed")
            return
        count = repository.purge_expired(now)
    except DependencyUnavailable as exc:
        click.echo(f"Session store unavailable: {exc.message}", err=True)
        raise click.Abort()
    click.echo(f"purge-sessions ok: removed {count} expired session(s)")


def register_commands(app) -> None:
    """Register CLI commands with the Flask app."""
    app.cli.add_command(purge_sessions_command)


def main(argv: list[str] | None = None) -> int:
    """Entry point for python -m soul_log.scripts.purge_sessions."""
    from soul_log import create_app

    app = create_app()
    with app.app_context():
        try:
            purge_sessions_command.main(standalone_mode=False, args=argv)
        except SystemExit as exc:  # click may raise SystemExit
            return exc.code if isinstance(exc.code, int) else 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
