"""Literal-name ignore list for snapshots.

Each non-blank, non-comment line of the ignore file names one directory
entry to skip. Matching is exact equality on the entry's own name: there
is no glob, prefix or path syntax, so ``build`` skips every entry called
``build`` at any depth and ``*.log`` only skips an entry literally named
``*.log``.
"""

import logging
from pathlib import Path
from typing import Iterable, Set

from twig.core.errors import ObjectIOError

logger = logging.getLogger(__name__)

REPOSITORY_DIR = '.git'


class IgnoreList:
    """Set of entry names the snapshot builder must skip."""

    def __init__(self, names: Iterable[str] = ()):
        self.names: Set[str] = set()
        for name in names:
            self.add_name(name)

    def add_name(self, line: str) -> bool:
        """
        Add one line of an ignore file.

        Blank lines and lines starting with '#' are not names.

        Returns:
            True if the line added a name
        """
        name = line.strip()
        if not name or name.startswith('#'):
            return False
        self.names.add(name)
        return True

    def load_file(self, path: Path) -> bool:
        """
        Load names from an ignore file.

        Args:
            path: Path to the ignore file

        Returns:
            True if the file existed and was read

        Raises:
            ObjectIOError: If the file exists but cannot be read
        """
        path = Path(path)
        try:
            content = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return False
        except (OSError, UnicodeDecodeError) as e:
            raise ObjectIOError('read ignore file', path, e)

        added = sum(1 for line in content.splitlines() if self.add_name(line))
        logger.debug("Loaded %d ignore names from %s", added, path)
        return True

    def should_skip(self, name: str) -> bool:
        """Return True if an entry with this exact name must be skipped."""
        return name in self.names

    def __contains__(self, name: str) -> bool:
        return self.should_skip(name)

    def __len__(self) -> int:
        return len(self.names)

    def __repr__(self) -> str:
        return f"IgnoreList({sorted(self.names)})"


def get_ignore_list(repo_root: Path, filename: str = '.gitignore') -> IgnoreList:
    """
    Build the ignore list for a repository.

    Always skips the repository directory itself, then adds the names
    from the ignore file at the work tree root, if there is one.

    Args:
        repo_root: Path to the work tree root
        filename: Name of the ignore file

    Returns:
        IgnoreList instance
    """
    ignore = IgnoreList([REPOSITORY_DIR])
    ignore.load_file(Path(repo_root) / filename)
    return ignore
