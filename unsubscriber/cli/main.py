"""
Main CLI group for the inbox unsubscriber.

Integrates all commands into a single CLI application.
"""

import click

from unsubscriber import __version__
from unsubscriber.cli_session import CLISessionManager
from unsubscriber.config import load_config_from_env_file
from .commands.admin import init
from .commands.run import run
from .commands.whitelist import whitelist


@click.group()
@click.version_option(version=__version__, prog_name='Inbox Unsubscriber')
@click.option('--database-url', envvar='DATABASE_URL', default=None, help='SQLAlchemy database URL')
@click.option('--env-file', default='.env', show_default=True, help='dotenv file to load')
@click.pass_context
def cli(ctx, database_url, env_file):
    """
    Inbox Unsubscriber - find and execute unsubscribe links in marketing email.

    Runs in dry-run mode unless --live is given or DRY_RUN=false is set.
    """
    load_config_from_env_file(env_file)
    ctx.ensure_object(dict)
    if 'session_manager' not in ctx.obj:
        ctx.obj['session_manager'] = CLISessionManager(database_url)


cli.add_command(init, name='init')
cli.add_command(run, name='run')
cli.add_command(whitelist, name='whitelist')


if __name__ == '__main__':
    cli()
