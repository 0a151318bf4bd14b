"""Object encoding and object types for Twig.

Every object is stored as ``<kind> <size>\\0<payload>``; its address is the
hex digest of that whole encoding. Only two kinds exist: blobs (opaque
file content) and trees (sorted directory listings).
"""

import os
import stat
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Tuple

from .errors import CorruptObjectError, MalformedInputError
from .hash import DEFAULT_ALGORITHM, address_length, hash_object, validate_address


class ObjectKind(str, Enum):
    """Object type tags as written in the encoding header."""

    BLOB = 'blob'
    TREE = 'tree'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value) -> 'ObjectKind':
        """Return the kind for a tag, raising MalformedInputError if unknown."""
        try:
            return cls(value)
        except ValueError:
            raise MalformedInputError(f"unsupported object kind '{value}'") from None


class FileMode(str, Enum):
    """
    Tree entry modes.

    The directory token is written as ``40000`` (no leading zero), which is
    how git itself spells it inside tree objects.
    """

    REGULAR = '100644'
    EXECUTABLE = '100755'
    SYMLINK = '120000'
    DIRECTORY = '40000'

    def __str__(self) -> str:
        return self.value

    @property
    def object_kind(self) -> ObjectKind:
        """Kind of object an entry with this mode points at."""
        return ObjectKind.TREE if self is FileMode.DIRECTORY else ObjectKind.BLOB

    @classmethod
    def parse(cls, token: str) -> 'FileMode':
        """
        Parse a mode token from a tree entry.

        Accepts the zero-padded ``040000`` spelling for directories.

        Raises:
            MalformedInputError: If the token is not one of the four modes
        """
        if token == '040000':
            return cls.DIRECTORY
        try:
            return cls(token)
        except ValueError:
            raise MalformedInputError(f"unsupported mode '{token}'") from None

    @classmethod
    def from_stat(cls, st_mode: int) -> 'FileMode':
        """
        Map a stat() mode to a tree entry mode.

        A directory is always DIRECTORY whatever its permission bits; a
        regular file with any execute bit set is EXECUTABLE.
        """
        if stat.S_ISDIR(st_mode):
            return cls.DIRECTORY
        if stat.S_ISLNK(st_mode):
            return cls.SYMLINK
        if stat.S_ISREG(st_mode):
            if st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH):
                return cls.EXECUTABLE
            return cls.REGULAR
        raise MalformedInputError(f"unsupported file type (mode {oct(st_mode)})")


def encode(kind, payload: bytes) -> bytes:
    """
    Build the canonical encoding of an object.

    Args:
        kind: 'blob' or 'tree' (or an ObjectKind)
        payload: Raw object content

    Returns:
        bytes: ``<kind> <len(payload)>\\0<payload>``
    """
    kind = ObjectKind.parse(kind)
    return f"{kind.value} {len(payload)}\0".encode() + payload


def decode(encoded: bytes, address: Optional[str] = None) -> Tuple[ObjectKind, bytes]:
    """
    Split an encoded object into its kind and payload.

    Args:
        encoded: Bytes produced by encode()
        address: Address the bytes were read from, used in error messages

    Returns:
        Tuple of (kind, payload)

    Raises:
        CorruptObjectError: If the header is missing or malformed, the kind
            is unknown, or the payload length disagrees with the header
    """
    null_idx = encoded.find(b'\0')
    if null_idx == -1:
        raise CorruptObjectError("no header terminator", address)

    try:
        header = encoded[:null_idx].decode('ascii')
    except UnicodeDecodeError:
        raise CorruptObjectError("header is not ASCII", address) from None

    kind_str, _, size_str = header.partition(' ')
    if not size_str.isdigit():
        raise CorruptObjectError(f"invalid object header '{header}'", address)

    try:
        kind = ObjectKind(kind_str)
    except ValueError:
        raise CorruptObjectError(f"unknown object kind '{kind_str}'", address) from None

    payload = encoded[null_idx + 1:]
    size = int(size_str)
    if len(payload) != size:
        raise CorruptObjectError(
            f"size mismatch: header says {size}, payload has {len(payload)}", address
        )
    return kind, payload


class TwigObject(ABC):
    """Base class for all Twig objects."""

    kind: ObjectKind

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM):
        self.algorithm = algorithm
        self._hash: Optional[str] = None

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize the object payload.

        Returns:
            bytes: Payload without the encoding header
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Load the object from a payload.

        Args:
            data: Payload without the encoding header
        """
        pass

    @property
    def type(self) -> str:
        """Object kind tag ('blob' or 'tree')."""
        return self.kind.value

    def encode(self) -> bytes:
        """Full canonical encoding, header included."""
        return encode(self.kind, self.serialize())

    def compute_hash(self) -> str:
        """
        Compute and cache the object's address.

        Returns:
            str: Hex digest of the canonical encoding
        """
        if self._hash is None:
            self._hash = hash_object(self.encode(), self.algorithm)
        return self._hash

    @property
    def hash(self) -> str:
        return self.compute_hash()


class Blob(TwigObject):
    """
    Opaque file content.

    A blob holds only bytes: no filename, no permissions.
    """

    kind = ObjectKind.BLOB

    def __init__(self, data: Optional[bytes] = None, algorithm: str = DEFAULT_ALGORITHM):
        super().__init__(algorithm)
        self.data = data or b''

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = data
        self._hash = None

    @classmethod
    def from_file(cls, filepath, algorithm: str = DEFAULT_ALGORITHM) -> 'Blob':
        """
        Create a blob from a file's content.

        Args:
            filepath: Path to file
            algorithm: Hash algorithm name

        Returns:
            Blob: New blob holding the file's bytes
        """
        with open(filepath, 'rb') as f:
            return cls(f.read(), algorithm)

    @classmethod
    def from_symlink(cls, linkpath, algorithm: str = DEFAULT_ALGORITHM) -> 'Blob':
        """Create a blob whose payload is a symbolic link's target path."""
        return cls(os.fsencode(os.readlink(linkpath)), algorithm)

    def __repr__(self) -> str:
        return f"Blob(hash={self.hash[:7]}, size={len(self.data)})"


class TreeEntry:
    """
    A single entry in a tree: mode, name and the address it points at.
    """

    def __init__(self, mode, name: str, address: str):
        """
        Initialize tree entry.

        Args:
            mode: FileMode or mode token ('100644', '100755', '120000', '40000')
            name: Entry name (a single path component)
            address: Hex address of the blob or tree
        """
        self.mode = FileMode.parse(mode) if not isinstance(mode, FileMode) else mode
        self.name = name
        self.address = address

    @property
    def type(self) -> str:
        """Kind of the referenced object."""
        return self.mode.object_kind.value

    @property
    def is_tree(self) -> bool:
        return self.mode is FileMode.DIRECTORY

    def sort_key(self) -> bytes:
        """Byte-wise name, with a trailing '/' for directories."""
        key = os.fsencode(self.name)
        if self.is_tree:
            key += b'/'
        return key

    def serialize(self) -> bytes:
        """Serialize as ``<mode> <name>\\0<raw digest>``."""
        return (
            self.mode.value.encode() + b' ' + os.fsencode(self.name)
            + b'\0' + bytes.fromhex(self.address)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeEntry):
            return NotImplemented
        return (self.mode, self.name, self.address) == (other.mode, other.name, other.address)

    def __lt__(self, other: 'TreeEntry') -> bool:
        return self.sort_key() < other.sort_key()

    def __repr__(self) -> str:
        return f"TreeEntry({self.mode.value} {self.type} {self.address[:7]} {self.name})"


class Tree(TwigObject):
    """
    A directory listing.

    Entries always serialize in canonical order, whatever order they were
    added in.
    """

    kind = ObjectKind.TREE

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM):
        super().__init__(algorithm)
        self.entries: list[TreeEntry] = []

    def add_entry(self, mode, name: str, address: str) -> TreeEntry:
        """
        Add an entry to the tree.

        Args:
            mode: Entry mode
            name: Entry name; must not be empty or contain '/' or NUL
            address: Address of the referenced object

        Returns:
            TreeEntry: The new entry

        Raises:
            MalformedInputError: On a bad mode, name or address
        """
        if not name or '/' in name or '\0' in name:
            raise MalformedInputError(f"invalid tree entry name '{name}'")
        address = validate_address(address, self.algorithm)

        entry = TreeEntry(mode, name, address)
        self.entries.append(entry)
        self._hash = None
        return entry

    def serialize(self) -> bytes:
        return b''.join(entry.serialize() for entry in sorted(self.entries))

    def deserialize(self, data: bytes) -> None:
        """
        Parse a binary tree payload.

        Raises:
            CorruptObjectError: If an entry is truncated
            MalformedInputError: If an entry carries an unknown mode
        """
        digest_size = address_length(self.algorithm) // 2
        entries = []
        pos = 0

        while pos < len(data):
            space_pos = data.find(b' ', pos)
            null_pos = data.find(b'\0', space_pos + 1) if space_pos != -1 else -1
            if space_pos == -1 or null_pos == -1 or null_pos + 1 + digest_size > len(data):
                raise CorruptObjectError(f"truncated tree entry at offset {pos}")

            try:
                mode = data[pos:space_pos].decode('ascii')
            except UnicodeDecodeError:
                raise CorruptObjectError(f"invalid mode at offset {pos}") from None

            name = os.fsdecode(data[space_pos + 1:null_pos])
            address = data[null_pos + 1:null_pos + 1 + digest_size].hex()
            entries.append(TreeEntry(mode, name, address))

            pos = null_pos + 1 + digest_size

        self.entries = entries
        self._hash = None

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"


OBJECT_CLASSES = {
    ObjectKind.BLOB: Blob,
    ObjectKind.TREE: Tree,
}


def object_from_bytes(encoded: bytes, algorithm: str = DEFAULT_ALGORITHM,
                      address: Optional[str] = None) -> TwigObject:
    """
    Decode encoded bytes into a Blob or Tree.

    Args:
        encoded: Canonical encoding of the object
        algorithm: Hash algorithm of the repository the bytes came from
        address: Address the bytes were read from, for error messages

    Returns:
        TwigObject: Blob or Tree instance
    """
    kind, payload = decode(encoded, address)
    obj = OBJECT_CLASSES[kind](algorithm=algorithm)
    obj.deserialize(payload)
    return obj
