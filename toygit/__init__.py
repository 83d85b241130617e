"""toygit - git's object format (blobs, trees, commits) in Python."""

__version__ = '0.1.0'

from toygit.core.repository import Repository
from toygit.core.objects import GitObject, Blob, Tree, Entry, Commit, Identity

__all__ = [
    'Repository',
    'GitObject',
    'Blob',
    'Tree',
    'Entry',
    'Commit',
    'Identity',
]
