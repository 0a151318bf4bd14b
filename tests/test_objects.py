"""Object encoding and blob tests."""

import pytest
from twig.core.errors import CorruptObjectError, MalformedInputError
from twig.core.objects import Blob, ObjectKind, encode, decode, object_from_bytes

EMPTY_BLOB = 'e69de29bb2d1d6434b8b29ae775ad8c2e48c5391'


def test_encode_blob():
    """Test the encoding header carries kind and decimal length."""
    assert encode('blob', b'hi\n') == b'blob 3\0hi\n'


def test_encode_empty_tree():
    assert encode(ObjectKind.TREE, b'') == b'tree 0\0'


def test_encode_unknown_kind():
    """Test only blob and tree can be encoded."""
    with pytest.raises(MalformedInputError):
        encode('commit', b'data')


@pytest.mark.parametrize('kind', ['blob', 'tree'])
@pytest.mark.parametrize('payload', [b'', b'\0\0binary\xff', b'x' * 5000])
def test_decode_inverts_encode(kind, payload):
    """Test decode(encode(kind, P)) == (kind, P)."""
    assert decode(encode(kind, payload)) == (kind, payload)


def test_decode_returns_object_kind():
    kind, _ = decode(b'tree 0\0')
    assert kind is ObjectKind.TREE


def test_decode_length_mismatch():
    """Test a payload shorter than declared is corrupt."""
    with pytest.raises(CorruptObjectError, match='size mismatch'):
        decode(b'blob 10\0short')


def test_decode_missing_null():
    with pytest.raises(CorruptObjectError):
        decode(b'blob 3 hi\n')


@pytest.mark.parametrize('encoded', [b'blob\0', b'blob -1\0', b'blob x\0', b'commit 0\0'])
def test_decode_bad_header(encoded):
    """Test malformed headers and unknown kinds are corrupt."""
    with pytest.raises(CorruptObjectError):
        decode(encoded)


def test_blob_creation():
    """Test blob creation with data."""
    blob = Blob(b'hello world')
    assert blob.data == b'hello world'
    assert blob.type == 'blob'


def test_blob_hash_matches_git():
    """Test blob addresses match git hash-object."""
    assert Blob(b'hello world\n').hash == '3b18e512dba79e4c8300dd08aeb37f8e728b8dad'
    assert Blob(b'').hash == EMPTY_BLOB


def test_blob_hash_deterministic():
    """Test blob hash determinism."""
    assert Blob(b'same data').compute_hash() == Blob(b'same data').compute_hash()


def test_blob_deserialize_resets_hash():
    blob = Blob(b'one')
    first = blob.hash
    blob.deserialize(b'two')
    assert blob.hash != first
    assert blob.hash == Blob(b'two').hash


def test_blob_from_file(tmp_path):
    """Test blob creation from file."""
    path = tmp_path / 'file.bin'
    path.write_bytes(b'file\0content')
    assert Blob.from_file(path).data == b'file\0content'


def test_blob_from_symlink(tmp_path):
    """Test a link blob holds the link target, not the file content."""
    (tmp_path / 'target.txt').write_text('content')
    link = tmp_path / 'link'
    link.symlink_to('target.txt')
    assert Blob.from_symlink(link).data == b'target.txt'


def test_object_from_bytes_blob():
    obj = object_from_bytes(b'blob 3\0hi\n')
    assert isinstance(obj, Blob)
    assert obj.data == b'hi\n'
