"""Utilities module.

This module contains:
- The literal-name ignore list (.gitignore)
"""

from twig.utils.ignore import IgnoreList, get_ignore_list

__all__ = [
    'IgnoreList', 'get_ignore_list',
]
