"""Core functionality for toygit.

This module contains:
- Git objects (Blob, Tree, Commit) and their building blocks
  (Entry, Identity), wrapped by the GitObject union
- Loose object storage
- Configuration management
- Hashing utilities
"""

from toygit.core.objects import GitObject, Blob, Tree, Entry, Commit, Identity
from toygit.core.repository import (
    Repository,
    ToygitError,
    RepositoryExistsError,
    ObjectNotFoundError,
    InvalidObjectError,
)
from toygit.core.hash import digest, hash_object, to_hex, from_hex
from toygit.core.config import Config, get_config

__all__ = [
    'GitObject',
    'Blob',
    'Tree',
    'Entry',
    'Commit',
    'Identity',
    'Repository',
    'ToygitError',
    'RepositoryExistsError',
    'ObjectNotFoundError',
    'InvalidObjectError',
    'Config',
    'get_config',
    'digest',
    'hash_object',
    'to_hex',
    'from_hex',
]
