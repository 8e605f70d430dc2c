import click
from flask.cli import AppGroup

from app.extensions import audio
from .services import find_missing_recordings, find_orphaned_recordings, prune_orphaned_recordings

recordings_cli = AppGroup('recordings', help='Check the recordings directory against the diary.')

grace_option = click.option(
    '--grace-seconds', type=int, default=None,
    help='Skip unreferenced recordings modified within this many seconds; they may '
         'belong to a draft that is still open. Defaults to ORPHAN_GRACE_SECONDS.',
)


@recordings_cli.command('check')
@grace_option
def check_recordings(grace_seconds):
    """Report orphaned and missing recordings."""
    orphans = find_orphaned_recordings(audio, grace_seconds)
    missing = find_missing_recordings(audio)

    for name in orphans:
        click.echo(f'orphaned: {name}')
    for name in missing:
        click.echo(f'missing: {name}')

    if not orphans and not missing:
        click.echo('Recordings are consistent with the diary.')
    else:
        click.echo(f'{len(orphans)} orphaned, {len(missing)} missing')
        raise SystemExit(1)


@recordings_cli.command('prune')
@click.option('--dry-run', is_flag=True, help='Only list the recordings that would be deleted.')
@grace_option
def prune_recordings(dry_run, grace_seconds):
    """Delete recordings that no entry references.

    Recordings in a draft that has not been saved yet are not referenced by
    any entry. Only recent ones are protected by the grace period, so run
    this while no draft is open.
    """
    if dry_run:
        orphans = find_orphaned_recordings(audio, grace_seconds)
    else:
        orphans = prune_orphaned_recordings(audio, grace_seconds)

    for name in orphans:
        click.echo(f'{"would delete" if dry_run else "deleted"}: {name}')
    click.echo(f'{len(orphans)} orphaned recording(s)')
