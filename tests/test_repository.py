"""Repository and object storage tests."""

import pytest
import tempfile
import shutil
import zlib
from toygit.core.repository import (
    Repository,
    RepositoryExistsError,
    ObjectNotFoundError,
    InvalidObjectError,
)
from toygit.core.objects import Blob, GitObject


@pytest.fixture
def temp_repo():
    """Create temporary repository for testing."""
    temp_dir = tempfile.mkdtemp()
    repo = Repository(temp_dir)
    yield repo
    shutil.rmtree(temp_dir)


def test_repository_init(temp_repo):
    """Test repository initialization creates structure."""
    temp_repo.init()
    assert temp_repo.toygit_dir.exists()
    assert temp_repo.objects_dir.exists()
    assert temp_repo.config_file.exists()


def test_repository_config_content(temp_repo):
    """Test config file contains version."""
    temp_repo.init()
    assert 'repositoryformatversion' in temp_repo.config_file.read_text()


def test_repository_already_exists(temp_repo):
    """Test duplicate init raises error."""
    temp_repo.init()
    with pytest.raises(RepositoryExistsError, match="already exists"):
        temp_repo.init()


def test_find_repository_from_subdirectory(temp_repo):
    """Test the repository is found from a nested directory."""
    temp_repo.init()
    nested = temp_repo.work_tree / 'a' / 'b'
    nested.mkdir(parents=True)

    found = Repository.find_repository(str(nested))
    assert found.work_tree == temp_repo.work_tree


def test_find_repository_none(temp_dir):
    """Test None outside any repository."""
    assert Repository.find_repository(str(temp_dir)) is None


def test_object_path(temp_repo):
    """Test objects fan out by the first two hex characters."""
    path = temp_repo.object_path('ab' + 'c' * 38)
    assert path == temp_repo.objects_dir / 'ab' / ('c' * 38)


def test_write_and_read_blob(temp_repo):
    """Test blob storage and retrieval."""
    temp_repo.init()
    blob = Blob('test data')
    hash_value = temp_repo.write_object(blob)

    assert hash_value == blob.calc_hash().hex()
    obj = temp_repo.read_object(hash_value)
    assert obj.kind == 'blob'
    assert obj.value == blob


def test_write_stores_compressed_framed_bytes(temp_repo):
    """Test the on-disk form is zlib over the framed object."""
    temp_repo.init()
    hash_value = temp_repo.write_object(Blob('hi'))

    stored = temp_repo.object_path(hash_value).read_bytes()
    assert zlib.decompress(stored) == b'blob 2\0hi'


def test_write_and_read_tree_and_commit(repo, sample_blob, sample_tree, sample_commit):
    """Test every kind survives storage."""
    repo.write_object(sample_blob)
    tree_hash = repo.write_object(sample_tree)
    commit_hash = repo.write_object(GitObject(sample_commit))

    assert repo.read_object(tree_hash).value == sample_tree
    assert repo.read_object(commit_hash).value == sample_commit
    assert sample_commit.tree == tree_hash


def test_write_is_idempotent(repo):
    """Test writing the same object twice keeps one file."""
    first = repo.write_object(Blob('same'))
    second = repo.write_object(Blob('same'))

    assert first == second
    assert len(list((repo.objects_dir / first[:2]).iterdir())) == 1


def test_read_missing_object(repo):
    """Test a missing object raises."""
    with pytest.raises(ObjectNotFoundError):
        repo.read_object('0' * 40)


def test_read_corrupt_object(repo):
    """Test stored garbage raises instead of returning a partial object."""
    hash_value = 'f' * 40
    path = repo.object_path(hash_value)
    path.parent.mkdir(parents=True)

    path.write_bytes(b'not zlib')
    with pytest.raises(InvalidObjectError):
        repo.read_object(hash_value)

    path.write_bytes(zlib.compress(b'tree 5\0trunc'))
    with pytest.raises(InvalidObjectError):
        repo.read_object(hash_value)


def test_object_exists(repo):
    """Test existence checks."""
    hash_value = repo.write_object(Blob('present'))
    assert repo.object_exists(hash_value)
    assert not repo.object_exists('0' * 40)


def test_resolve_prefix(repo):
    """Test abbreviated hashes expand to the full hash."""
    hash_value = repo.write_object(Blob('prefix me'))

    assert repo.resolve_prefix(hash_value) == hash_value
    assert repo.resolve_prefix(hash_value[:7]) == hash_value
    assert repo.resolve_prefix(hash_value[:7].upper()) == hash_value
    assert repo.resolve_prefix(hash_value[:3]) is None
    assert repo.resolve_prefix('0' * 40) is None


def test_resolve_prefix_rejects_non_hex(repo):
    """Test names that are not hex never reach the filesystem."""
    repo.write_object(Blob('prefix me'))

    assert repo.resolve_prefix('..co') is None
    assert repo.resolve_prefix('../config') is None
    assert repo.resolve_prefix('zzzz') is None
    assert repo.resolve_prefix('') is None
