"""CLI commands for Twig."""

from twig.cli.commands.init import init_cmd
from twig.cli.commands.hash_object import hash_object_cmd
from twig.cli.commands.ls_tree import ls_tree_cmd, cat_file_cmd, count_objects_cmd
from twig.cli.commands.write_tree import write_tree_cmd

__all__ = ['init_cmd', 'hash_object_cmd', 'ls_tree_cmd', 'cat_file_cmd',
           'count_objects_cmd', 'write_tree_cmd']
