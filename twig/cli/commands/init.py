"""Initialize a new Twig repository."""

import click
from pathlib import Path
from twig.core.errors import TwigError
from twig.core.hash import ALGORITHMS
from twig.core.repository import Repository
from twig.cli.output import success, error, info


@click.command('init')
@click.argument('path', default='.')
@click.option('--object-format', type=click.Choice(sorted(ALGORITHMS)), default=None,
              help='Hash algorithm for object addresses (default: sha1)')
def init_cmd(path, object_format):
    """
    Initialize a new Twig repository.

    Creates a .git directory with an empty object database.

    Examples:
        twig init                           # Initialize in current directory
        twig init my-project                # Initialize in my-project directory
        twig init --object-format sha256    # Use 64-character addresses
    """
    repo_path = Path(path).resolve()

    if (repo_path / '.git').exists():
        click.echo(error(f"Repository already exists at {repo_path}"))
        click.echo(info("Use an empty directory or different path"))
        raise click.Abort()

    try:
        if not repo_path.exists():
            repo_path.mkdir(parents=True)
            click.echo(info(f"Created directory {repo_path}"))

        repo = Repository(str(repo_path))
        repo.init(object_format=object_format)
    except PermissionError:
        click.echo(error(f"Permission denied: Cannot create repository at {path}"))
        raise click.Abort()
    except TwigError as e:
        click.echo(error(f"Failed to initialize repository: {e}"))
        raise click.Abort()

    click.echo(success(f"Initialized empty Twig repository in {repo.git_dir}"))
