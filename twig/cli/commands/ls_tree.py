"""Inspect stored objects: list trees, show objects, count the database."""

import click
from twig.core.errors import TwigError
from twig.core.objects import Blob, ObjectKind, Tree, decode
from twig.core.repository import Repository
from twig.cli.output import error
from colorama import Fore, Style


def find_repository_or_abort() -> Repository:
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a twig repository"))
        raise click.Abort()
    return repo


def format_entry(entry, path: str) -> str:
    """One ls-tree line: zero-padded mode, kind, address, path."""
    mode = entry.mode.value.rjust(6, '0')
    return f"{mode} {entry.type} {Fore.YELLOW}{entry.address}{Style.RESET_ALL}\t{path}"


@click.command('ls-tree')
@click.option('-r', '--recursive', is_flag=True, help='Recurse into sub-trees')
@click.option('-t', '--tree', 'show_trees', is_flag=True,
              help='Show tree entries even when going into subtrees')
@click.option('--name-only', is_flag=True, help='Show only file names')
@click.argument('address')
def ls_tree_cmd(recursive, show_trees, name_only, address):
    """
    List the entries of a tree object.

    ADDRESS is a full tree address or a unique prefix of at least 4
    characters, as printed by write-tree.

    Examples:
        twig ls-tree 4b825dc6              # Top-level entries
        twig ls-tree -r 4b825dc6           # Every file, recursively
        twig ls-tree --name-only 4b825dc6  # Only names
    """
    repo = find_repository_or_abort()

    try:
        tree_obj = repo.read_object(repo.resolve_address(address))
        if not isinstance(tree_obj, Tree):
            click.echo(error(f"Not a tree object: {address}"))
            raise click.Abort()

        display_tree(repo, tree_obj, "", recursive, show_trees, name_only)
    except TwigError as e:
        click.echo(error(f"ls-tree failed: {e}"))
        raise click.Abort()


def display_tree(repo, tree_obj, prefix, recursive, show_trees, name_only):
    """Display tree entries with optional recursion."""
    for entry in tree_obj.entries:
        full_path = f"{prefix}{entry.name}"

        if entry.is_tree and recursive:
            if show_trees:
                click.echo(full_path if name_only else format_entry(entry, full_path))
            subtree = repo.read_object(entry.address)
            display_tree(repo, subtree, full_path + "/", recursive, show_trees, name_only)
        else:
            click.echo(full_path if name_only else format_entry(entry, full_path))


@click.command('cat-file')
@click.option('-t', '--type', 'show_type', is_flag=True, help='Show object type')
@click.option('-s', '--size', 'show_size', is_flag=True, help='Show object size')
@click.option('-p', '--pretty', is_flag=True, help='Pretty-print object content')
@click.argument('address')
def cat_file_cmd(show_type, show_size, pretty, address):
    """
    Show object content, type, or size.

    Blob content is written out unchanged; tree entries are listed one
    per line.

    Examples:
        twig cat-file -t abc123     # Show object type
        twig cat-file -s abc123     # Show object size
        twig cat-file -p abc123     # Pretty-print object content
    """
    if [show_type, show_size, pretty].count(True) != 1:
        click.echo(error("Specify exactly one of -t, -s or -p"))
        raise click.Abort()

    repo = find_repository_or_abort()

    try:
        full_address = repo.resolve_address(address)
        encoded = repo.read(full_address)
        kind, payload = decode(encoded, full_address)

        if show_type:
            click.echo(kind.value)
        elif show_size:
            click.echo(len(payload))
        elif kind is ObjectKind.BLOB:
            click.echo(payload, nl=False)
        else:
            tree_obj = Tree(repo.algorithm)
            tree_obj.deserialize(payload)
            for entry in tree_obj.entries:
                click.echo(format_entry(entry, entry.name))
    except TwigError as e:
        click.echo(error(f"cat-file failed: {e}"))
        raise click.Abort()


@click.command('count-objects')
@click.option('-v', '--verbose', is_flag=True, help='Show detailed information')
def count_objects_cmd(verbose):
    """
    Count objects in the repository.

    Examples:
        twig count-objects          # Show object counts
        twig count-objects -v       # Break down by kind
    """
    repo = find_repository_or_abort()

    total_objects = 0
    total_size = 0
    kind_counts = {'tree': 0, 'blob': 0}

    try:
        for address in repo.iter_objects():
            total_objects += 1
            total_size += repo.object_path(address).stat().st_size

            if verbose:
                obj = repo.read_object(address)
                kind_counts['blob' if isinstance(obj, Blob) else 'tree'] += 1
    except (OSError, TwigError) as e:
        click.echo(error(f"count-objects failed: {e}"))
        raise click.Abort()

    if verbose:
        click.echo(f"{Fore.CYAN}Object Statistics:{Style.RESET_ALL}")
        click.echo(f"  Trees:   {Fore.YELLOW}{kind_counts['tree']}{Style.RESET_ALL}")
        click.echo(f"  Blobs:   {Fore.YELLOW}{kind_counts['blob']}{Style.RESET_ALL}")
        click.echo()

    size_kb = total_size / 1024
    click.echo(f"{total_objects} objects, {size_kb:.2f} KB")
