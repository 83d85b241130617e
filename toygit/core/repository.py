"""Repository and loose object storage for toygit."""

import zlib
from pathlib import Path
from typing import Optional, Union

from .objects import GitObject, ObjectValue


HEX_DIGITS = set('0123456789abcdef')


class ToygitError(Exception):
    """Base class for repository errors."""


class RepositoryExistsError(ToygitError):
    """Raised when initializing over an existing repository."""


class ObjectNotFoundError(ToygitError):
    """Raised when no object is stored under a hash."""


class InvalidObjectError(ToygitError):
    """Raised when stored bytes do not decode to a valid object."""


class Repository:
    """
    Represents a toygit repository.

    A repository manages the .toygit directory and maps object hashes to
    zlib-compressed files in the object database.
    """

    def __init__(self, path: str = '.'):
        """
        Initialize repository.

        Args:
            path: Path to repository root (defaults to current directory)
        """
        self.work_tree = Path(path).resolve()
        self.toygit_dir = self.work_tree / '.toygit'
        self.objects_dir = self.toygit_dir / 'objects'
        self.config_file = self.toygit_dir / 'config'

    def init(self) -> 'Repository':
        """
        Initialize a new repository.

        Creates the .toygit directory structure:
        .toygit/
        ├── objects/       # Object database
        └── config         # Repository configuration

        Returns:
            Repository: self for method chaining

        Raises:
            RepositoryExistsError: If repository already exists
        """
        if self.toygit_dir.exists():
            raise RepositoryExistsError(f"Repository already exists at {self.toygit_dir}")

        self.toygit_dir.mkdir()
        self.objects_dir.mkdir()
        self.config_file.write_text('[core]\n\trepositoryformatversion = 0\n')

        return self

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
            if (current / '.toygit').is_dir():
                return cls(str(current))

            # Reached filesystem root
            if current == current.parent:
                return None

            current = current.parent

    def object_path(self, hash: str) -> Path:
        """
        Get filesystem path for an object.

        Objects are stored in subdirectories named by the first 2 characters
        of the hash, with the remaining 38 characters as the filename.

        Args:
            hash: 40-character hex hash

        Returns:
            Path: Full path to object file
        """
        return self.objects_dir / hash[:2] / hash[2:]

    def write_object(self, obj: Union[GitObject, ObjectValue]) -> str:
        """
        Write object to repository.

        The framed ``<type> <size>\\0<body>`` bytes are stored zlib
        compressed. Writing an object that already exists is a no-op.

        Args:
            obj: Object to write, wrapped or bare

        Returns:
            str: 40-character hex hash of the object
        """
        if not isinstance(obj, GitObject):
            obj = GitObject(obj)

        hash = obj.hex_hash
        path = self.object_path(hash)
        if path.exists():
            return hash

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(zlib.compress(obj.encode()))

        return hash

    def read_object(self, hash: str) -> GitObject:
        """
        Read object from repository.

        Args:
            hash: 40-character hex hash

        Returns:
            GitObject: Decoded object

        Raises:
            ObjectNotFoundError: If no object is stored under hash
            InvalidObjectError: If the stored bytes are corrupt
        """
        path = self.object_path(hash)
        if len(hash) < 3 or not path.is_file():
            raise ObjectNotFoundError(f"Object {hash} not found")

        try:
            content = zlib.decompress(path.read_bytes())
        except zlib.error as e:
            raise InvalidObjectError(f"Object {hash} is not zlib data: {e}") from e

        obj = GitObject.decode(content)
        if obj is None:
            raise InvalidObjectError(f"Object {hash} has an invalid format")
        return obj

    def object_exists(self, hash: str) -> bool:
        """
        Check if object exists in repository.

        Args:
            hash: 40-character hex hash

        Returns:
            bool: True if object exists
        """
        return len(hash) > 2 and self.object_path(hash).is_file()

    def resolve_prefix(self, prefix: str) -> Optional[str]:
        """
        Expand an abbreviated hash to the single object it names.

        Args:
            prefix: At least 4 leading hex characters of a hash

        Returns:
            Full hash, or None if nothing or more than one object matches
        """
        prefix = prefix.lower()
        if not prefix or any(c not in HEX_DIGITS for c in prefix):
            return None
        if len(prefix) == 40:
            return prefix if self.object_exists(prefix) else None
        if len(prefix) < 4:
            return None

        subdir = self.objects_dir / prefix[:2]
        if not subdir.is_dir():
            return None

        matches = [
            prefix[:2] + obj_file.name
            for obj_file in subdir.iterdir()
            if obj_file.name.startswith(prefix[2:])
        ]
        if len(matches) == 1:
            return matches[0]
        return None

    def __repr__(self) -> str:
        """String representation of repository."""
        return f"Repository(path={self.work_tree})"
