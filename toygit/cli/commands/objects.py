"""Plumbing commands - create, inspect and list objects."""

import click
from colorama import Fore, Style

from toygit.core.repository import Repository, ToygitError
from toygit.core.objects import Blob, Tree, Commit, GitObject
from toygit.core.config import get_config
from toygit.core.hash import to_hex, from_hex
from toygit.cli.output import error, highlight_hash


def require_repository() -> Repository:
    """Return the enclosing repository or abort."""
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a toygit repository"))
        raise click.Abort()
    return repo


def resolve_object(repo: Repository, name: str) -> str:
    """Expand a full or abbreviated hash to the stored object id, or abort."""
    full_hash = repo.resolve_prefix(name)
    if not full_hash:
        click.echo(error(f"Object not found: {name}"))
        raise click.Abort()
    return full_hash


def load_object(repo: Repository, name: str) -> GitObject:
    """Read the object named by a full or abbreviated hash, or abort."""
    try:
        return repo.read_object(resolve_object(repo, name))
    except ToygitError as e:
        click.echo(error(str(e)))
        raise click.Abort()


@click.command('hash-object')
@click.option('-w', '--write', is_flag=True, help='Write the blob into the object database')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def hash_object_cmd(write, file):
    """
    Compute the object id of a file's contents as a blob.

    Examples:
        toygit hash-object notes.txt      # Print the blob id
        toygit hash-object -w notes.txt   # Print and store the blob
    """
    blob = Blob.from_file(file)
    if blob is None:
        click.echo(error(f"{file} is not UTF-8 text"))
        raise click.Abort()

    if write:
        repo = require_repository()
        click.echo(repo.write_object(blob))
    else:
        click.echo(to_hex(blob.calc_hash()))


@click.command('cat-file')
@click.option('-t', '--type', 'show_type', is_flag=True, help='Show object type')
@click.option('-s', '--size', 'show_size', is_flag=True, help='Show object size')
@click.option('-p', '--pretty', is_flag=True, help='Pretty-print object content')
@click.argument('object_hash')
def cat_file_cmd(show_type, show_size, pretty, object_hash):
    """
    Show object content, type, or size.

    Examples:
        toygit cat-file -t abc123     # Show object type
        toygit cat-file -s abc123     # Show object size
        toygit cat-file -p abc123     # Pretty-print object content
    """
    repo = require_repository()
    obj = load_object(repo, object_hash)

    if show_type:
        click.echo(obj.kind)
        return

    if show_size:
        click.echo(len(obj.body()))
        return

    value = obj.value
    if isinstance(value, Blob):
        click.echo(value.content, nl=False)
    elif not pretty:
        click.echo(error("Use -p to pretty-print non-blob objects"))
        raise click.Abort()
    elif isinstance(value, Tree):
        for entry in value:
            click.echo(format_entry(entry, entry.hex, entry.name))
    elif isinstance(value, Commit):
        click.echo(f"{Fore.YELLOW}tree {value.tree}{Style.RESET_ALL}")
        if value.parent is not None:
            click.echo(f"{Fore.YELLOW}parent {value.parent}{Style.RESET_ALL}")
        click.echo(f"author {value.author}")
        click.echo(f"committer {value.committer}")
        click.echo()
        click.echo(value.message)


def format_entry(entry, hash_display: str, path: str) -> str:
    """Format a tree entry as ``<mode> <type> <hash><TAB><path>``."""
    obj_type = 'tree' if entry.is_tree else 'blob'
    return f"{entry.mode:06d} {obj_type} {highlight_hash(hash_display)}\t{path}"


@click.command('ls-tree')
@click.option('-r', '--recursive', is_flag=True, help='Recurse into sub-trees')
@click.option('--name-only', is_flag=True, help='Show only file names')
@click.option('--abbrev', type=int, default=0, help='Abbreviate hash to N characters')
@click.argument('treeish')
def ls_tree_cmd(recursive, name_only, abbrev, treeish):
    """
    List contents of a tree object.

    TREEISH is the hash of a tree, or of a commit whose tree is listed.

    Examples:
        toygit ls-tree abc123            # List a tree
        toygit ls-tree -r abc123         # Recursively list all files
        toygit ls-tree --name-only abc1  # Only show file names
    """
    repo = require_repository()
    obj = load_object(repo, treeish)

    if isinstance(obj.value, Commit):
        obj = load_object(repo, obj.value.tree)
    if not isinstance(obj.value, Tree):
        click.echo(error(f"Not a valid tree-ish: {treeish}"))
        raise click.Abort()

    display_tree(repo, obj.value, '', recursive, name_only, abbrev)


def display_tree(repo, tree, prefix, recursive, name_only, abbrev):
    """Display tree entries with optional recursion."""
    for entry in tree:
        full_path = f"{prefix}{entry.name}"

        if entry.is_tree and recursive:
            subtree = load_object(repo, entry.hex)
            if isinstance(subtree.value, Tree):
                display_tree(repo, subtree.value, full_path + '/', recursive, name_only, abbrev)
            continue

        if name_only:
            click.echo(full_path)
        else:
            hash_display = entry.hex[:abbrev] if abbrev else entry.hex
            click.echo(format_entry(entry, hash_display, full_path))


@click.command('mktree')
@click.argument('listing', type=click.File('r'), default='-')
def mktree_cmd(listing):
    """
    Build a tree object from ls-tree formatted lines.

    Each line reads "<mode> <type> <hash><TAB><name>". Entries keep the
    order they are given in.

    Examples:
        toygit ls-tree abc123 | toygit mktree
        toygit mktree listing.txt
    """
    repo = require_repository()
    tree = Tree()

    for lineno, line in enumerate(listing, start=1):
        line = line.rstrip('\n')
        if not line:
            continue
        try:
            meta, name = line.split('\t', 1)
            mode, _obj_type, hex_hash = meta.split()
            if not mode.isdigit():
                raise ValueError(f"invalid mode {mode!r}")
            tree.add_entry(int(mode), name, from_hex(hex_hash))
        except ValueError as e:
            click.echo(error(f"Line {lineno}: {e}"))
            raise click.Abort()

    click.echo(repo.write_object(tree))


@click.command('commit-tree')
@click.argument('tree')
@click.option('-p', '--parent', help='Parent commit')
@click.option('-m', '--message', required=True, help='Commit message')
def commit_tree_cmd(tree, parent, message):
    """
    Create a commit object for a tree.

    Author and committer come from user.name and user.email.

    Examples:
        toygit commit-tree abc123 -m "Initial commit"
        toygit commit-tree def456 -p abc789 -m "Second commit"
    """
    repo = require_repository()

    name, email = get_config(repo).get_user_identity()
    if not name or not email:
        click.echo(error("Please set user.name and user.email"))
        click.echo("  toygit config set user.name \"Your Name\"")
        click.echo("  toygit config set user.email \"you@example.com\"")
        raise click.Abort()

    tree_hash = resolve_object(repo, tree)
    tree_obj = load_object(repo, tree_hash)
    if not isinstance(tree_obj.value, Tree):
        click.echo(error(f"Not a tree: {tree}"))
        raise click.Abort()

    parent_hash = None
    if parent:
        parent_hash = resolve_object(repo, parent)
        parent_obj = load_object(repo, parent_hash)
        if not isinstance(parent_obj.value, Commit):
            click.echo(error(f"Not a commit: {parent}"))
            raise click.Abort()

    try:
        commit = Commit.create(tree_hash, parent_hash, name, email, message)
    except ValueError as e:
        click.echo(error(f"Cannot create commit: {e}"))
        raise click.Abort()

    click.echo(repo.write_object(commit))
