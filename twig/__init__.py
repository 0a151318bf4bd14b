"""Twig - a minimal content-addressable object store with directory snapshots."""

__version__ = '0.1.0'

from twig.core.repository import Repository
from twig.core.objects import TwigObject, Blob, Tree, ObjectKind, FileMode

__all__ = [
    'Repository',
    'TwigObject',
    'Blob',
    'Tree',
    'ObjectKind',
    'FileMode',
]
