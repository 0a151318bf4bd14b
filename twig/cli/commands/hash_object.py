"""Compute the address of a file as a blob."""

import click
from pathlib import Path
from twig.core.errors import TwigError
from twig.core.hash import DEFAULT_ALGORITHM
from twig.core.objects import Blob
from twig.core.repository import Repository
from twig.cli.output import error


@click.command('hash-object')
@click.option('-w', '--write', is_flag=True, help='Write the blob into the object database')
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def hash_object_cmd(write, file):
    """
    Print the blob address of FILE.

    Without -w nothing is stored and no repository is needed.

    Examples:
        twig hash-object notes.txt       # Print the address only
        twig hash-object -w notes.txt    # Store the blob as well
    """
    repo = Repository.find_repository()
    if write and not repo:
        click.echo(error("Not a twig repository"))
        raise click.Abort()

    try:
        algorithm = repo.algorithm if repo else DEFAULT_ALGORITHM
        blob = Blob.from_file(file, algorithm)
        address = repo.write_object(blob) if write else blob.hash
    except OSError as e:
        click.echo(error(f"Cannot read {file}: {e}"))
        raise click.Abort()
    except TwigError as e:
        click.echo(error(f"hash-object failed: {e}"))
        raise click.Abort()

    click.echo(address)
