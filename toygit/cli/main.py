"""Main CLI entry point for toygit."""

import click
from colorama import init

from toygit import __version__
from toygit.cli.commands import (init_cmd, config_cmd, hash_object_cmd, cat_file_cmd,
                                 ls_tree_cmd, mktree_cmd, commit_tree_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)


@click.group()
@click.version_option(version=__version__)
def cli():
    """toygit - read and write git's blob, tree and commit objects."""
    pass


cli.add_command(init_cmd)
cli.add_command(config_cmd)
cli.add_command(hash_object_cmd)
cli.add_command(cat_file_cmd)
cli.add_command(ls_tree_cmd)
cli.add_command(mktree_cmd)
cli.add_command(commit_tree_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
