"""Repository management for Twig."""

import logging
import os
import tempfile
import zlib
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .config import Config, get_config
from .errors import (
    CorruptObjectError,
    MalformedInputError,
    ObjectIOError,
    ObjectNotFoundError,
    RepositoryExistsError,
)
from .hash import DEFAULT_ALGORITHM, address_length, hash_object, is_hex, validate_address
from .objects import ObjectKind, TwigObject, decode, encode, object_from_bytes

logger = logging.getLogger(__name__)

MIN_PREFIX_LENGTH = 4

# Loose objects are read-only once written, as in git
OBJECT_FILE_MODE = 0o444


class Repository:
    """
    Represents a Twig repository.

    A repository owns the .git directory and provides a write-once,
    read-many object database keyed by content address.
    """

    def __init__(self, path: str = '.'):
        """
        Initialize repository.

        Args:
            path: Path to repository root (defaults to current directory)
        """
        self.work_tree = Path(path).resolve()
        self.git_dir = self.work_tree / '.git'
        self.objects_dir = self.git_dir / 'objects'
        self.refs_dir = self.git_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.tags_dir = self.refs_dir / 'tags'
        self.head_file = self.git_dir / 'HEAD'
        self.config_file = self.git_dir / 'config'

        self._config = None

    @property
    def config(self) -> Config:
        """Get Config instance."""
        if self._config is None:
            self._config = get_config(self)
        return self._config

    @property
    def algorithm(self) -> str:
        """Hash algorithm used for addresses in this repository."""
        return self.config.object_format

    def init(self, object_format: Optional[str] = None) -> 'Repository':
        """
        Initialize a new repository.

        Creates the .git directory structure:
        .git/
        ├── objects/       # Object database
        ├── refs/
        │   ├── heads/
        │   └── tags/
        ├── HEAD           # Current branch
        └── config         # Repository configuration

        Args:
            object_format: Hash algorithm to record in the config
                (defaults to sha1)

        Returns:
            Repository: self for method chaining

        Raises:
            RepositoryExistsError: If the .git directory already exists
        """
        if self.git_dir.exists():
            raise RepositoryExistsError(self.git_dir)

        if object_format is not None:
            address_length(object_format)

        try:
            self.git_dir.mkdir(parents=True)
            self.objects_dir.mkdir()
            self.refs_dir.mkdir()
            self.heads_dir.mkdir()
            self.tags_dir.mkdir()

            self.head_file.write_text('ref: refs/heads/main\n')

            self.config_file.write_text(self._initial_config(object_format))
        except OSError as e:
            raise ObjectIOError('init', self.git_dir, e)

        self._config = None
        logger.info("Initialized repository in %s", self.git_dir)
        return self

    @staticmethod
    def _initial_config(object_format: Optional[str]) -> str:
        # git only reads a non-sha1 format from extensions.objectformat, and
        # only when repositoryformatversion is 1
        if object_format in (None, DEFAULT_ALGORITHM):
            return '[core]\n\trepositoryformatversion = 0\n'
        return (
            '[core]\n\trepositoryformatversion = 1\n'
            f'[extensions]\n\tobjectformat = {object_format}\n'
        )

    @classmethod
    def find_repository(cls, path: str = '.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Args:
            path: Starting path for search

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / '.git').is_dir():
                return cls(str(current))

            if current == current.parent:
                return None

            current = current.parent

    def object_path(self, address: str) -> Path:
        """
        Get filesystem path for an object.

        Objects are sharded by the first 2 characters of the address, with
        the remaining characters as the filename.

        Args:
            address: Full hex address

        Returns:
            Path: Full path to object file
        """
        return self.objects_dir / address[:2] / address[2:]

    def exists(self, address: str) -> bool:
        """
        Check if an object exists.

        Args:
            address: Full hex address

        Returns:
            bool: True if the object is stored
        """
        address = validate_address(address, self.algorithm)
        return self.object_path(address).is_file()

    def read(self, address: str) -> bytes:
        """
        Read the encoded bytes of an object.

        Args:
            address: Full hex address

        Returns:
            bytes: The object's canonical encoding (decompressed)

        Raises:
            ObjectNotFoundError: If nothing is stored at the address
            CorruptObjectError: If the stored bytes do not decompress
            ObjectIOError: If the file cannot be read
        """
        address = validate_address(address, self.algorithm)
        path = self.object_path(address)

        try:
            compressed = path.read_bytes()
        except FileNotFoundError:
            raise ObjectNotFoundError(address) from None
        except OSError as e:
            raise ObjectIOError('read object', path, e)

        try:
            return zlib.decompress(compressed)
        except zlib.error as e:
            raise CorruptObjectError(f"decompression failed ({e})", address) from e

    def write(self, address: str, encoded: bytes) -> str:
        """
        Store an encoded object under its address.

        Writing an address that already exists is a no-op. New objects are
        compressed into a temporary file in the shard directory and renamed
        onto the final path, so a partial file is never visible there.

        Args:
            address: Full hex address of encoded
            encoded: Canonical encoding of the object

        Returns:
            str: The address

        Raises:
            ObjectIOError: If the filesystem write fails
        """
        address = validate_address(address, self.algorithm)
        path = self.object_path(address)

        if path.exists():
            logger.debug("Object %s already stored", address)
            return address

        compressed = zlib.compress(encoded, self.config.compression_level)

        temp_path = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=str(path.parent), prefix='.tmp_')
            with os.fdopen(fd, 'wb') as f:
                f.write(compressed)
            os.chmod(temp_path, OBJECT_FILE_MODE)
            os.replace(temp_path, path)
            temp_path = None
        except OSError as e:
            raise ObjectIOError('write object', path, e)
        finally:
            if temp_path is not None and os.path.exists(temp_path):
                os.unlink(temp_path)

        logger.debug("Wrote object %s (%d bytes)", address, len(encoded))
        return address

    def write_object(self, obj: TwigObject) -> str:
        """
        Write a Blob or Tree to the repository.

        Args:
            obj: Object to write

        Returns:
            str: Address of the object
        """
        if obj.algorithm != self.algorithm:
            raise MalformedInputError(
                f"object uses {obj.algorithm} but repository uses {self.algorithm}"
            )
        return self.write(obj.hash, obj.encode())

    def read_object(self, address: str) -> TwigObject:
        """
        Read and decode an object.

        Args:
            address: Full hex address

        Returns:
            TwigObject: Blob or Tree
        """
        return object_from_bytes(self.read(address), self.algorithm, address)

    def put_blob(self, data: bytes) -> str:
        """
        Store bytes as a blob.

        Args:
            data: Blob payload

        Returns:
            str: Address of the blob
        """
        encoded = encode(ObjectKind.BLOB, data)
        return self.write(hash_object(encoded, self.algorithm), encoded)

    def get_object(self, address: str) -> Tuple[ObjectKind, bytes]:
        """
        Look up an object's kind and payload.

        Args:
            address: Full hex address

        Returns:
            Tuple of (kind, payload)

        Raises:
            MalformedInputError: If the address has the wrong shape
            ObjectNotFoundError: If nothing is stored at the address
            CorruptObjectError: If the stored object does not decode
        """
        address = validate_address(address, self.algorithm)
        return decode(self.read(address), address)

    def snapshot_directory(self, path=None, follow_symlinks: Optional[bool] = None) -> str:
        """
        Snapshot a directory into blob and tree objects.

        Args:
            path: Directory to snapshot (defaults to the work tree)
            follow_symlinks: Override core.symlinks; when False links are
                stored as links

        Returns:
            str: Address of the root tree
        """
        from .snapshot import TreeBuilder
        from twig.utils.ignore import get_ignore_list

        if follow_symlinks is None:
            follow_symlinks = not self.config.preserve_symlinks

        ignore = get_ignore_list(self.work_tree, self.config.ignore_filename)
        builder = TreeBuilder(self, ignore, follow_symlinks=follow_symlinks)
        return builder.build(self.work_tree if path is None else path)

    def iter_objects(self) -> Iterator[str]:
        """
        Yield the address of every stored object.

        Temporary files left by an interrupted write are not objects and
        are not yielded.
        """
        if not self.objects_dir.is_dir():
            return
        tail_length = address_length(self.algorithm) - 2
        for shard in sorted(self.objects_dir.iterdir()):
            if not shard.is_dir() or len(shard.name) != 2 or not is_hex(shard.name):
                continue
            for obj_file in sorted(shard.iterdir()):
                if len(obj_file.name) == tail_length and is_hex(obj_file.name):
                    yield shard.name + obj_file.name

    def resolve_address(self, prefix: str) -> str:
        """
        Expand an abbreviated address.

        Args:
            prefix: Full address, or a unique prefix of at least 4 hex characters

        Returns:
            str: Full address

        Raises:
            MalformedInputError: If the prefix is too short, not hex, or ambiguous
            ObjectNotFoundError: If no object starts with the prefix
        """
        prefix = prefix.strip().lower()
        if len(prefix) == address_length(self.algorithm):
            return validate_address(prefix, self.algorithm)

        if len(prefix) < MIN_PREFIX_LENGTH or not is_hex(prefix):
            raise MalformedInputError(
                f"'{prefix}' is not an address or a prefix of at least {MIN_PREFIX_LENGTH} hex characters"
            )

        shard = self.objects_dir / prefix[:2]
        matches = []
        if shard.is_dir():
            for obj_file in shard.iterdir():
                if obj_file.name.startswith(prefix[2:]):
                    matches.append(prefix[:2] + obj_file.name)

        if not matches:
            raise ObjectNotFoundError(prefix)
        if len(matches) > 1:
            raise MalformedInputError(f"ambiguous address prefix '{prefix}'")
        return matches[0]

    def __repr__(self) -> str:
        return f"Repository(path={self.work_tree})"
