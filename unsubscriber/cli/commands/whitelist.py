"""
Whitelist commands for the inbox unsubscriber.

Senders on the whitelist are never unsubscribed from.
"""

import click

from unsubscriber.database.models import ENTRY_KINDS, ENTRY_PATTERN
from unsubscriber.safety import WhitelistStore


@click.group('whitelist')
def whitelist():
    """Manage senders that must never be unsubscribed from."""
    pass


@whitelist.command('add')
@click.argument('value')
@click.option('--pattern', is_flag=True, help='Treat VALUE as a regular expression')
@click.pass_context
def add(ctx, value, pattern):
    """
    Add an address, domain or pattern to the whitelist.

    Values containing '@' are stored as addresses, others as domains.

    Example:
        unsubscriber whitelist add mybank.com
        unsubscriber whitelist add friend@example.com
        unsubscriber whitelist add --pattern '.*@corp\\.example$'
    """
    with ctx.obj['session_manager'].get_session() as session:
        try:
            entry = WhitelistStore(session).add(value, kind=ENTRY_PATTERN if pattern else None)
        except ValueError as e:
            click.secho(f"✗ Error: {e}", fg='red')
            raise click.Abort()
        click.secho(f"✓ Whitelisted {entry.kind}: {entry.value}", fg='green')


@whitelist.command('remove')
@click.argument('value')
@click.option('--kind', type=click.Choice(ENTRY_KINDS), default=None, help='Only remove entries of this kind')
@click.pass_context
def remove(ctx, value, kind):
    """
    Remove an entry from the whitelist.

    Example:
        unsubscriber whitelist remove mybank.com
    """
    with ctx.obj['session_manager'].get_session() as session:
        if not WhitelistStore(session).remove(value, kind=kind):
            click.secho(f"✗ Error: {value} is not whitelisted", fg='red')
            raise click.Abort()
        click.secho(f"✓ Removed {value} from whitelist", fg='green')


@whitelist.command('list')
@click.pass_context
def list_entries(ctx):
    """List whitelist entries."""
    with ctx.obj['session_manager'].get_session() as session:
        entries = WhitelistStore(session).list_entries()
        if not entries:
            click.echo("Whitelist is empty")
            return

        click.echo(f"\n{'Kind':<10} {'Value'}")
        click.echo("-" * 50)
        for entry in entries:
            click.echo(f"{entry.kind:<10} {entry.value}")
