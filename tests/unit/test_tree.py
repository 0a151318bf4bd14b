"""Tree object tests."""

import pytest
from twig.core.errors import CorruptObjectError, MalformedInputError
from twig.core.objects import Tree, TreeEntry, Blob, FileMode

EMPTY_TREE = '4b825dc642cb6eb9a060e54bf8d69288fbee4904'


def test_tree_entry_creation():
    """Test creating a tree entry."""
    entry = TreeEntry('100644', 'file.txt', 'a' * 40)
    assert entry.mode is FileMode.REGULAR
    assert entry.type == 'blob'
    assert entry.address == 'a' * 40
    assert entry.name == 'file.txt'


def test_tree_entry_directory_type():
    entry = TreeEntry('40000', 'src', 'a' * 40)
    assert entry.type == 'tree'
    assert entry.is_tree


def test_tree_entry_sorting():
    """Test tree entries sort by name."""
    entry1 = TreeEntry('100644', 'zebra.txt', 'a' * 40)
    entry2 = TreeEntry('100644', 'apple.txt', 'b' * 40)
    assert entry2 < entry1


def test_directory_sorts_with_trailing_slash():
    """Test a directory 'foo' sorts after a file 'foo.txt' ('/' > '.')."""
    directory = TreeEntry(FileMode.DIRECTORY, 'foo', 'a' * 40)
    dotted = TreeEntry(FileMode.REGULAR, 'foo.txt', 'b' * 40)
    dashed = TreeEntry(FileMode.REGULAR, 'foo-bar', 'c' * 40)
    assert sorted([directory, dotted, dashed]) == [dashed, dotted, directory]


def test_directory_and_file_with_same_prefix():
    """Test 'foo' as a file sorts before 'foo.c', but as a directory after it."""
    file_entry = TreeEntry(FileMode.REGULAR, 'foo', 'a' * 40)
    dir_entry = TreeEntry(FileMode.DIRECTORY, 'foo', 'a' * 40)
    dotted = TreeEntry(FileMode.REGULAR, 'foo.c', 'b' * 40)
    zero = TreeEntry(FileMode.REGULAR, 'foo0', 'c' * 40)
    assert file_entry < dotted
    assert sorted([zero, dir_entry, dotted]) == [dotted, dir_entry, zero]


def test_tree_creation():
    """Test creating empty tree."""
    tree = Tree()
    assert len(tree.entries) == 0
    assert tree.type == 'tree'


def test_empty_tree_hash_matches_git():
    assert Tree().hash == EMPTY_TREE
    assert Tree().serialize() == b''


def test_tree_add_entry():
    """Test adding entry to tree."""
    tree = Tree()
    tree.add_entry('100644', 'file.txt', 'a' * 40)
    assert len(tree.entries) == 1
    assert tree.entries[0].name == 'file.txt'


def test_tree_add_entry_resets_hash():
    tree = Tree()
    empty = tree.hash
    tree.add_entry('100644', 'file.txt', 'a' * 40)
    assert tree.hash != empty


@pytest.mark.parametrize('name', ['', 'a/b', 'nul\0name'])
def test_tree_add_entry_rejects_bad_name(name):
    with pytest.raises(MalformedInputError):
        Tree().add_entry('100644', name, 'a' * 40)


def test_tree_add_entry_rejects_bad_mode():
    with pytest.raises(MalformedInputError):
        Tree().add_entry('100600', 'file.txt', 'a' * 40)


def test_tree_add_entry_rejects_bad_address():
    with pytest.raises(MalformedInputError):
        Tree().add_entry('100644', 'file.txt', 'abc')


def test_tree_serialize():
    """Test tree serialization uses binary addresses."""
    tree = Tree()
    tree.add_entry('100644', 'file.txt', 'ab' * 20)
    assert tree.serialize() == b'100644 file.txt\0' + bytes.fromhex('ab' * 20)


def test_tree_serialize_directory_mode():
    """Test directories are written as 40000, git's spelling."""
    tree = Tree()
    tree.add_entry('040000', 'sub', 'cd' * 20)
    assert tree.serialize().startswith(b'40000 sub\0')


def test_tree_serialize_order_independent():
    """Test insertion order does not affect the encoding."""
    tree1 = Tree()
    tree1.add_entry('100644', 'b.txt', 'b' * 40)
    tree1.add_entry('40000', 'a', 'c' * 40)
    tree1.add_entry('100755', 'a.sh', 'a' * 40)

    tree2 = Tree()
    tree2.add_entry('100755', 'a.sh', 'a' * 40)
    tree2.add_entry('100644', 'b.txt', 'b' * 40)
    tree2.add_entry('40000', 'a', 'c' * 40)

    assert tree1.serialize() == tree2.serialize()
    assert tree1.hash == tree2.hash


def test_tree_roundtrip():
    """Test tree serialize/deserialize cycle."""
    tree1 = Tree()
    tree1.add_entry('100644', 'file1.txt', 'a' * 40)
    tree1.add_entry('100755', 'script.sh', 'b' * 40)
    tree1.add_entry('120000', 'link', 'd' * 40)
    tree1.add_entry('40000', 'subdir', 'c' * 40)

    tree2 = Tree()
    tree2.deserialize(tree1.serialize())

    assert [(e.mode, e.name, e.address) for e in tree2.entries] == [
        (FileMode.REGULAR, 'file1.txt', 'a' * 40),
        (FileMode.SYMLINK, 'link', 'd' * 40),
        (FileMode.EXECUTABLE, 'script.sh', 'b' * 40),
        (FileMode.DIRECTORY, 'subdir', 'c' * 40),
    ]
    assert tree2.hash == tree1.hash


def test_tree_deserialize_truncated():
    """Test a cut-off entry is reported as corrupt."""
    tree = Tree()
    tree.add_entry('100644', 'file.txt', 'a' * 40)
    with pytest.raises(CorruptObjectError):
        Tree().deserialize(tree.serialize()[:-5])


def test_tree_deserialize_unknown_mode():
    with pytest.raises(MalformedInputError):
        Tree().deserialize(b'100600 file\0' + b'\x00' * 20)


def test_tree_sha256_addresses():
    """Test sha256 trees carry 32-byte addresses."""
    blob = Blob(b'data', algorithm='sha256')
    tree = Tree(algorithm='sha256')
    tree.add_entry('100644', 'data.bin', blob.hash)

    parsed = Tree(algorithm='sha256')
    parsed.deserialize(tree.serialize())
    assert parsed.entries[0].address == blob.hash


@pytest.mark.parametrize('st_mode, expected', [
    (0o100644, FileMode.REGULAR),
    (0o100600, FileMode.REGULAR),
    (0o100755, FileMode.EXECUTABLE),
    (0o100744, FileMode.EXECUTABLE),
    (0o100654, FileMode.EXECUTABLE),
    (0o100645, FileMode.EXECUTABLE),
    (0o040755, FileMode.DIRECTORY),
    (0o040000, FileMode.DIRECTORY),
    (0o120777, FileMode.SYMLINK),
])
def test_file_mode_from_stat(st_mode, expected):
    """Test any execute bit makes a file executable; directories ignore permissions."""
    assert FileMode.from_stat(st_mode) is expected


def test_file_mode_from_stat_fifo():
    with pytest.raises(MalformedInputError):
        FileMode.from_stat(0o010644)
