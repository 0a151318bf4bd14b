"""Core functionality for Twig.

This module contains:
- Object encoding and the Blob/Tree types
- The object repository
- The directory snapshot builder
- Configuration management
- Hashing utilities

For the ignore list, see twig.utils
"""

from twig.core.errors import (
    TwigError,
    ObjectNotFoundError,
    CorruptObjectError,
    MalformedInputError,
    ObjectIOError,
    RepositoryExistsError,
)
from twig.core.objects import TwigObject, Blob, Tree, TreeEntry, ObjectKind, FileMode, encode, decode
from twig.core.repository import Repository
from twig.core.snapshot import TreeBuilder
from twig.core.hash import hash_object, validate_address
from twig.core.config import Config, get_config

__all__ = [
    'TwigError',
    'ObjectNotFoundError',
    'CorruptObjectError',
    'MalformedInputError',
    'ObjectIOError',
    'RepositoryExistsError',
    'TwigObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'ObjectKind',
    'FileMode',
    'encode',
    'decode',
    'Repository',
    'TreeBuilder',
    'Config',
    'get_config',
    'hash_object',
    'validate_address',
]
