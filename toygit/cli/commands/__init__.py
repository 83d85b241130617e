"""CLI commands for toygit."""

from toygit.cli.commands.init import init_cmd
from toygit.cli.commands.config import config_cmd
from toygit.cli.commands.objects import (hash_object_cmd, cat_file_cmd, ls_tree_cmd,
                                         mktree_cmd, commit_tree_cmd)

__all__ = ['init_cmd', 'config_cmd', 'hash_object_cmd', 'cat_file_cmd', 'ls_tree_cmd',
           'mktree_cmd', 'commit_tree_cmd']
