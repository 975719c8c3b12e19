"""
Command line front end for svnbackup.

Exit codes: 0 on success (or --help), 1 on bad arguments or a failed run.
"""

import logging
import sys

import click

from svnbackup import __version__, configure_logging
from svnbackup.config import config as configurations, get_config
from svnbackup.models import BackupConfiguration, parse_skip_list
from svnbackup.notify import NotificationError, send_error_email
from svnbackup.runner import run_backup


CONTEXT_SETTINGS = {'help_option_names': ['--help', '-?']}


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option('-r', '--repository-root', required=True,
              type=click.Path(file_okay=False, path_type=str),
              help='A repository or a directory of repositories to back up.')
@click.option('-b', '--backup-root', required=True,
              type=click.Path(file_okay=False, path_type=str),
              help='Directory that receives the backups.')
@click.option('-t', '--threads', default=1, show_default=True, type=click.IntRange(min=1),
              help='Number of repositories backed up in parallel.')
@click.option('-c', '--compress', is_flag=True, help='Zip each backup and remove the copy.')
@click.option('-v', '--verify', is_flag=True, help='Verify each repository before copying it.')
@click.option('-n', '--history', default=0, show_default=True, type=int,
              help='Backups to keep per repository (0 keeps all).')
@click.option('-s', '--skip', 'skip', default='',
              help='Comma-separated repository names to skip (case-insensitive).')
@click.option('--svn-path', type=click.Path(file_okay=False, path_type=str),
              help='Directory containing svnadmin and svnlook.')
@click.option('--env', 'env_name', default=None, type=click.Choice(list(configurations)),
              help='Configuration name (development or production).')
@click.version_option(__version__, prog_name='SvnBackup')
def cli(repository_root, backup_root, threads, compress, verify, history, skip, svn_path, env_name):
    """Back up Subversion repositories with svnadmin hotcopy."""
    try:
        settings = get_config(env_name)
    except ValueError as e:
        # SVNBACKUP_ENV is not validated by the --env choice
        raise click.UsageError(str(e)) from e
    logger = configure_logging(settings)

    config = BackupConfiguration(
        repository_root=repository_root,
        backup_root=backup_root,
        threads=threads,
        compress=compress,
        verify=verify,
        history=history,
        skip_repositories=parse_skip_list(skip),
        svn_path=svn_path
    )

    try:
        run_backup(config, logger=logger)
    except Exception as e:
        logger.error(f"Backup failed: {e}")
        _notify(e, settings, logger)
        return 1

    return 0


def _notify(exc: Exception, settings, logger: logging.Logger):
    try:
        send_error_email(exc, settings)
    except NotificationError as e:
        logger.warning(f"Error email not sent: {e}")


def main(argv=None) -> int:
    """Run the command line interface and return the process exit code."""
    try:
        result = cli.main(args=argv, prog_name='svnbackup', standalone_mode=False)
    except click.ClickException as e:
        e.show()
        return 1
    except click.Abort:
        click.echo('Aborted!', err=True)
        return 1

    return result if isinstance(result, int) else 0


if __name__ == '__main__':
    sys.exit(main())
