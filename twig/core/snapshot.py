"""Directory snapshots.

A snapshot turns a directory into a graph of objects: one blob per file
and one tree per directory, written bottom-up so a tree is only encoded
once every child address is known. Visiting a directory returns its Tree;
nothing about the walk is kept outside the call stack.

Nesting depth is bounded by the interpreter's recursion limit. Hitting it
aborts the snapshot with an ObjectIOError naming the root directory.
"""

import logging
import os
from pathlib import Path
from typing import Callable, FrozenSet, Tuple

from .errors import MalformedInputError, ObjectIOError
from .objects import Blob, FileMode, Tree
from twig.utils.ignore import IgnoreList

logger = logging.getLogger(__name__)


class TreeBuilder:
    """
    Builds tree objects from a directory on disk.

    Entries named in the ignore list are left out of their parent's tree
    and never descended into. Any filesystem error aborts the whole
    snapshot; objects already written stay in the store, where a later
    run can reuse them.
    """

    def __init__(self, repo, ignore=None, follow_symlinks: bool = True):
        """
        Initialize builder.

        Args:
            repo: Repository the objects are written to
            ignore: IgnoreList consulted for every entry (nothing is
                skipped when None)
            follow_symlinks: If True a link is snapshotted as whatever it
                points at; if False it is stored as a 120000 entry whose
                blob holds the link target
        """
        self.repo = repo
        self.ignore = ignore if ignore is not None else IgnoreList()
        self.follow_symlinks = follow_symlinks
        self.algorithm = repo.algorithm

    def build(self, directory) -> str:
        """
        Snapshot a directory.

        Args:
            directory: Path of the directory to snapshot

        Returns:
            str: Address of the directory's tree object

        Raises:
            ObjectIOError: If any entry cannot be listed, stat'ed or read
            MalformedInputError: If directory is not a directory
        """
        root = Path(directory)
        st = self._stat(root, follow=True)
        if FileMode.from_stat(st.st_mode) is not FileMode.DIRECTORY:
            raise MalformedInputError(f"'{root}' is not a directory")

        try:
            tree = self._visit(root, frozenset([(st.st_dev, st.st_ino)]))
        except RecursionError as e:
            raise ObjectIOError('walk', root, e) from None

        address = self.repo.write_object(tree)
        logger.info("Snapshot of %s is tree %s", root, address)
        return address

    def _visit(self, directory: Path, ancestors: FrozenSet[Tuple[int, int]]) -> Tree:
        tree = Tree(self.algorithm)

        for path in self._list(directory):
            name = path.name
            if self.ignore.should_skip(name):
                logger.debug("Skipping ignored entry %s", path)
                continue

            st = self._stat(path, follow=self.follow_symlinks)
            try:
                mode = FileMode.from_stat(st.st_mode)
            except MalformedInputError:
                logger.warning("Skipping %s: not a regular file, directory or symlink", path)
                continue

            if mode is FileMode.DIRECTORY:
                key = (st.st_dev, st.st_ino)
                if key in ancestors:
                    raise ObjectIOError('walk', path, OSError("symbolic link cycle"))
                subtree = self._visit(path, ancestors | {key})
                address = self.repo.write_object(subtree)
            elif mode is FileMode.SYMLINK:
                address = self._store_blob(path, Blob.from_symlink)
            else:
                address = self._store_blob(path, Blob.from_file)

            tree.add_entry(mode, name, address)

        logger.debug("Built tree for %s with %d entries", directory, len(tree))
        return tree

    def _list(self, directory: Path) -> list:
        try:
            return list(directory.iterdir())
        except OSError as e:
            raise ObjectIOError('list directory', directory, e)

    def _stat(self, path: Path, follow: bool) -> os.stat_result:
        try:
            return path.stat() if follow else path.lstat()
        except OSError as e:
            raise ObjectIOError('stat', path, e)

    def _store_blob(self, path: Path, reader: Callable[..., Blob]) -> str:
        try:
            blob = reader(path, self.algorithm)
        except OSError as e:
            raise ObjectIOError('read', path, e)
        return self.repo.write_object(blob)
