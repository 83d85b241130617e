"""Blob tests."""

import hashlib
import pytest
import tempfile
from pathlib import Path
from toygit.core.objects import Blob


def test_blob_creation():
    """Test blob creation with content."""
    blob = Blob('hello world')
    assert blob.content == 'hello world'
    assert blob.size == 11
    assert blob.type == 'blob'


def test_blob_size_counts_bytes():
    """Test size is the encoded length, not the character count."""
    blob = Blob('héllo')
    assert blob.size == 6


def test_blob_as_bytes():
    """Test blob encoding with header."""
    assert Blob('hi').as_bytes() == b'blob 2\0hi'


def test_empty_blob_as_bytes():
    """Test empty blob encoding."""
    assert Blob('').as_bytes() == b'blob 0\0'


def test_blob_hash_is_sha1_of_encoding():
    """Test hash covers the header and the content."""
    assert Blob('hi').calc_hash() == hashlib.sha1(b'blob 2\0hi').digest()
    assert len(Blob('hi').calc_hash()) == 20


def test_blob_hash_matches_git():
    """Test ids agree with git hash-object."""
    assert Blob('').calc_hash().hex() == 'e69de29bb2d1d6434b8b29ae775ad8c2e48c5391'
    assert Blob('hello\n').calc_hash().hex() == 'ce013625030ba8dba906f756967f9e9ca394464a'


def test_blob_hash_deterministic():
    """Test blob hash determinism."""
    blob1 = Blob('same data')
    blob2 = Blob('same data')
    assert blob1.as_bytes() == blob2.as_bytes()
    assert blob1.calc_hash() == blob2.calc_hash()


def test_blob_hash_changes_with_content():
    """Test a single changed byte changes the hash."""
    assert Blob('data1').calc_hash() != Blob('data2').calc_hash()


def test_blob_decode():
    """Test decoding raw content."""
    blob = Blob.decode(b'test content')
    assert blob == Blob('test content')
    assert blob.size == 12


def test_blob_decode_invalid_utf8():
    """Test non-text content is rejected."""
    assert Blob.decode(b'\xff\xfe\x00') is None


def test_blob_roundtrip_without_header():
    """Test decoding the body of an encoded blob gives back the content."""
    blob = Blob('line one\nline two\n')
    encoded = blob.as_bytes()
    body = encoded[encoded.index(b'\0') + 1:]
    assert Blob.decode(body).content == blob.content


def test_blob_from_file():
    """Test blob creation from file."""
    with tempfile.NamedTemporaryFile(mode='w', delete=False) as f:
        f.write('file content')
        temp_path = f.name

    try:
        blob = Blob.from_file(temp_path)
        assert blob.content == 'file content'
    finally:
        Path(temp_path).unlink()


def test_blob_from_binary_file():
    """Test binary files do not make a blob."""
    with tempfile.NamedTemporaryFile(mode='wb', delete=False) as f:
        f.write(b'\x89PNG\r\n\x1a\n\xff')
        temp_path = f.name

    try:
        assert Blob.from_file(temp_path) is None
    finally:
        Path(temp_path).unlink()
