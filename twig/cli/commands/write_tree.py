"""Snapshot a directory into tree objects."""

import click
from twig.core.errors import TwigError
from twig.core.repository import Repository
from twig.cli.output import error


@click.command('write-tree')
@click.option('--no-follow-symlinks', 'preserve_symlinks', is_flag=True,
              help='Store symbolic links as links instead of following them')
@click.argument('path', required=False, type=click.Path(exists=True, file_okay=False))
def write_tree_cmd(preserve_symlinks, path):
    """
    Snapshot a directory and print its tree address.

    Every file becomes a blob and every directory a tree. Entries named in
    .gitignore (one literal name per line) are skipped, as is .git itself.
    PATH defaults to the repository root.

    Examples:
        twig write-tree              # Snapshot the whole work tree
        twig write-tree src          # Snapshot only src/
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a twig repository"))
        raise click.Abort()

    follow_symlinks = False if preserve_symlinks else None

    try:
        address = repo.snapshot_directory(path, follow_symlinks=follow_symlinks)
    except TwigError as e:
        click.echo(error(f"write-tree failed: {e}"))
        raise click.Abort()

    click.echo(address)
