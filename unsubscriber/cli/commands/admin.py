"""
Admin commands for the inbox unsubscriber.

Handles database initialization and the default whitelist.
"""

import click
from sqlalchemy.exc import SQLAlchemyError

from unsubscriber.safety import WhitelistStore


@click.command('init')
@click.pass_context
def init(ctx):
    """
    Initialize the database.

    Creates the schema and seeds the default whitelist domains
    when the whitelist is empty.

    Example:
        unsubscriber init
    """
    session_manager = ctx.obj['session_manager']
    try:
        with session_manager.get_session() as session:
            seeded = WhitelistStore(session).seed_defaults()
    except SQLAlchemyError as e:
        click.secho(f"✗ Error initializing database: {e}", fg='red')
        raise click.Abort()

    click.secho("✓ Database initialized successfully", fg='green')
    click.echo(f"Database location: {session_manager.db_manager.database_url}")
    if seeded:
        click.echo(f"Seeded {seeded} default whitelist domain(s)")
