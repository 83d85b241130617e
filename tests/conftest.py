"""Shared pytest fixtures for toygit tests."""

import pytest
import tempfile
import shutil
from datetime import datetime, timezone
from pathlib import Path
from toygit.core.repository import Repository
from toygit.core.objects import Blob, Tree, Commit, Identity


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at an empty directory so no global config leaks in."""
    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.delenv('TOYGIT_USER_NAME', raising=False)
    monkeypatch.delenv('TOYGIT_USER_EMAIL', raising=False)
    return home


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository."""
    repo = Repository(str(temp_dir))
    repo.init()
    return repo


@pytest.fixture
def repo_with_config(repo, isolated_home):
    """Create a repository with user identity configured."""
    repo.config_file.write_text("""[user]
\tname = Test User
\temail = test@example.com
""")
    return repo


@pytest.fixture
def sample_identity():
    """An identity five hours west of UTC."""
    return Identity(
        'Test User',
        'test@example.com',
        datetime.fromtimestamp(1698660000, tz=timezone.utc),
        -300,
    )


@pytest.fixture
def sample_blob():
    """Create a sample blob object."""
    return Blob("Hello, World!\n")


@pytest.fixture
def sample_tree(sample_blob):
    """Create a sample tree with one blob."""
    tree = Tree()
    tree.add_entry(100644, 'test.txt', sample_blob.calc_hash())
    return tree


@pytest.fixture
def sample_commit(sample_tree, sample_identity):
    """Root commit pointing at the sample tree."""
    return Commit(
        sample_tree.calc_hash().hex(),
        sample_identity,
        sample_identity,
        "Test commit",
    )
