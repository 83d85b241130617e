"""Git objects for toygit.

Each object kind owns its canonical byte encoding, its decoder and its
hash. Decoders never raise: anything that is not a valid object of their
kind comes back as None. Constructors reject values the format cannot
represent, so encoding is always total.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterator, List, Optional, Tuple, Union

from .hash import HASH_SIZE, digest, hash_object, to_hex

# Git writes directory entries without the leading zero.
TREE_MODE = 40000

_MAX_OFFSET_MINUTES = 99 * 60 + 59


def frame(obj_type: str, body: bytes) -> bytes:
    """Prefix body with the ``<type> <size>\\0`` object header."""
    return f"{obj_type} {len(body)}\0".encode() + body


def parse_header(data: bytes) -> Optional[Tuple[str, bytes]]:
    """
    Split a framed object into its type name and body.

    Args:
        data: Bytes of the form ``<type> <size>\\0<body>``

    Returns:
        (type, body) if the header is well formed and the declared size
        matches the body length, None otherwise
    """
    null_idx = data.find(b'\0')
    if null_idx == -1:
        return None

    try:
        header = data[:null_idx].decode('ascii')
    except UnicodeDecodeError:
        return None

    parts = header.split(' ')
    if len(parts) != 2 or not _is_decimal(parts[1]):
        return None
    # A zero-padded size would hash differently from the canonical header.
    if len(parts[1]) > 1 and parts[1].startswith('0'):
        return None

    body = data[null_idx + 1:]
    if len(body) != int(parts[1]):
        return None
    return parts[0], body


def _is_decimal(text: str) -> bool:
    return text.isascii() and text.isdigit()


def _check_text(field: str, value: str, forbidden: str) -> None:
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string, got {type(value).__name__}")
    for char in forbidden:
        if char in value:
            raise ValueError(f"{field} must not contain {char!r}: {value!r}")


def _check_ref(field: str, value: str) -> None:
    _check_text(field, value, '\n\0')
    if not value:
        raise ValueError(f"{field} reference must not be empty")


def _parse_offset(token: str) -> Optional[Tuple[int, bool]]:
    """Parse ``+HHMM``/``-HHMM`` into (minutes east of UTC, negative zero)."""
    if len(token) != 5 or token[0] not in '+-' or not _is_decimal(token[1:]):
        return None

    hours, minutes = divmod(int(token[1:]), 100)
    if minutes >= 60:
        return None

    offset = hours * 60 + minutes
    if token[0] == '-':
        return -offset, offset == 0
    return offset, False


class Identity:
    """
    An author or committer line.

    Encoded as ``Name <email> <unix seconds> <+HHMM>``. The timestamp is an
    absolute UTC instant; utc_offset (minutes east of UTC) is kept only to
    display local time and to re-encode the line exactly as it was read.
    A ``-0000`` offset is remembered through negative_utc.
    """

    def __init__(
        self,
        name: str,
        email: str,
        timestamp: datetime,
        utc_offset: int = 0,
        negative_utc: bool = False
    ):
        """
        Initialize an identity.

        Args:
            name: Display name, without angle brackets or surrounding spaces
            email: Email address without angle brackets
            timestamp: Timezone-aware point in time
            utc_offset: Offset from UTC in minutes (e.g. -300 for -0500)
            negative_utc: Encode a zero offset as ``-0000``

        Raises:
            ValueError: If a field cannot be represented in an identity line
        """
        _check_text('name', name, '<>\n\0')
        if name != name.strip():
            raise ValueError(f"name must not have surrounding whitespace: {name!r}")
        _check_text('email', email, '<>\n\0')
        if any(char.isspace() for char in email):
            raise ValueError(f"email must not contain whitespace: {email!r}")
        if timestamp.tzinfo is None:
            raise ValueError("timestamp must be timezone-aware")
        if abs(utc_offset) > _MAX_OFFSET_MINUTES:
            raise ValueError(f"UTC offset out of range: {utc_offset} minutes")

        self.name = name
        self.email = email
        self.timestamp = timestamp.astimezone(timezone.utc).replace(microsecond=0)
        self.utc_offset = utc_offset
        self.negative_utc = negative_utc and utc_offset == 0

    @classmethod
    def now(cls, name: str, email: str) -> 'Identity':
        """Create an identity stamped with the current time and local offset."""
        local = datetime.now(timezone.utc).astimezone()
        offset = local.utcoffset() // timedelta(minutes=1)
        return cls(name, email, local, offset)

    @classmethod
    def decode(cls, data: bytes) -> Optional['Identity']:
        """
        Parse an identity line.

        The name is everything before the first ``<``; the rest holds the
        email, the timestamp and the offset, separated by whitespace.

        Args:
            data: Identity line without the author/committer label

        Returns:
            Identity, or None if the line is malformed
        """
        bracket = data.find(b'<')
        if bracket == -1:
            return None

        try:
            name = data[:bracket].decode('utf-8').strip()
            info = data[bracket:].decode('utf-8')
        except UnicodeDecodeError:
            return None

        tokens = info.split(None, 2)
        if len(tokens) != 3:
            return None
        email_token, time_token, offset_token = tokens

        if not email_token.endswith('>') or len(email_token) < 2:
            return None
        if not _is_decimal(time_token):
            return None
        offset = _parse_offset(offset_token)
        if offset is None:
            return None

        try:
            timestamp = datetime.fromtimestamp(int(time_token), tz=timezone.utc)
            return cls(name, email_token[1:-1], timestamp, *offset)
        except (OverflowError, OSError, ValueError):
            return None

    @property
    def unix_seconds(self) -> int:
        """Seconds since the Unix epoch."""
        return int(self.timestamp.timestamp())

    @property
    def local_time(self) -> datetime:
        """Timestamp expressed in the identity's own UTC offset."""
        return self.timestamp.astimezone(timezone(timedelta(minutes=self.utc_offset)))

    def format_offset(self) -> str:
        """Return the offset as ``+HHMM`` or ``-HHMM``."""
        sign = '-' if self.utc_offset < 0 or self.negative_utc else '+'
        hours, minutes = divmod(abs(self.utc_offset), 60)
        return f"{sign}{hours:02d}{minutes:02d}"

    def encode(self) -> bytes:
        """Encode the identity line."""
        return str(self).encode()

    def __str__(self) -> str:
        return f"{self.name} <{self.email}> {self.unix_seconds} {self.format_offset()}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Identity):
            return NotImplemented
        # The offset only changes how the instant is written, not which one it is.
        return (self.name, self.email, self.timestamp) == (other.name, other.email, other.timestamp)

    def __repr__(self) -> str:
        return f"Identity({str(self)!r})"


class Entry:
    """
    A single tree row: mode, name and the raw 20-byte hash of the target.

    Encoded as ``<mode> <name>\\0`` followed by the hash bytes.
    """

    def __init__(self, mode: int, name: str, hash: bytes):
        """
        Initialize tree entry.

        Args:
            mode: File mode as a decimal number (e.g. 100644, 100755, 40000)
            name: Entry name, free of whitespace and NUL bytes
            hash: Raw 20-byte hash of the referenced object

        Raises:
            ValueError: If any field cannot be encoded
        """
        if isinstance(mode, bool) or not isinstance(mode, int) or mode < 0:
            raise ValueError(f"mode must be a non-negative integer: {mode!r}")
        _check_text('name', name, '\0')
        if not name or any(char.isspace() for char in name):
            raise ValueError(f"Invalid entry name: {name!r}")
        if len(hash) != HASH_SIZE:
            raise ValueError(f"hash must be {HASH_SIZE} bytes, got {len(hash)}")

        self.mode = mode
        self.name = name
        self.hash = bytes(hash)

    @classmethod
    def decode(cls, header: bytes, hash: bytes) -> Optional['Entry']:
        """
        Build an entry from its ``<mode> <name>`` header and hash bytes.

        Returns:
            Entry, or None if the header does not parse
        """
        try:
            tokens = header.decode('utf-8').split()
        except UnicodeDecodeError:
            return None

        if len(tokens) != 2 or not _is_decimal(tokens[0]):
            return None

        try:
            return cls(int(tokens[0]), tokens[1], hash)
        except ValueError:
            return None

    def encode(self) -> bytes:
        """Encode the entry header followed by its raw hash."""
        return f"{self.mode} {self.name}\0".encode() + self.hash

    @property
    def hex(self) -> str:
        """Hash of the referenced object as 40 hex characters."""
        return to_hex(self.hash)

    @property
    def is_tree(self) -> bool:
        return self.mode == TREE_MODE

    def __eq__(self, other) -> bool:
        if not isinstance(other, Entry):
            return NotImplemented
        return (self.mode, self.name, self.hash) == (other.mode, other.name, other.hash)

    def __repr__(self) -> str:
        return f"Entry({self.mode} {self.hex[:7]} {self.name})"


class Blob:
    """
    Represents file content.

    A blob stores the text of a file without any metadata like filename
    or permissions.
    """

    type = 'blob'

    def __init__(self, content: str = ''):
        """
        Initialize a blob.

        Args:
            content: File content as text
        """
        self.content = content

    @property
    def size(self) -> int:
        """Length of the content in encoded bytes."""
        return len(self.serialize())

    @classmethod
    def decode(cls, data: bytes) -> Optional['Blob']:
        """
        Build a blob from raw, headerless content.

        Returns:
            Blob, or None if data is not valid UTF-8
        """
        try:
            return cls(data.decode('utf-8'))
        except UnicodeDecodeError:
            return None

    @classmethod
    def from_file(cls, filepath: str) -> Optional['Blob']:
        """
        Create blob from file.

        Args:
            filepath: Path to file

        Returns:
            Blob containing the file's text, or None for binary files
        """
        with open(filepath, 'rb') as f:
            return cls.decode(f.read())

    def serialize(self) -> bytes:
        """Return the raw content bytes."""
        return self.content.encode('utf-8')

    def as_bytes(self) -> bytes:
        """Encode as ``blob <size>\\0<content>``."""
        return frame(self.type, self.serialize())

    def calc_hash(self) -> bytes:
        """Return the 20-byte SHA-1 of ``as_bytes()``."""
        return digest(self.as_bytes())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Blob):
            return NotImplemented
        return self.content == other.content

    def __repr__(self) -> str:
        return f"Blob(size={self.size})"


class Tree:
    """
    Represents a directory listing.

    Entries keep the order in which they were added or parsed; the same
    sequence always encodes to the same bytes.
    """

    type = 'tree'

    def __init__(self, entries: Optional[List[Entry]] = None):
        """Initialize a tree, empty unless entries are given."""
        self.entries: List[Entry] = list(entries or [])

    def add_entry(self, mode: int, name: str, hash: bytes) -> Entry:
        """
        Append an entry to the tree.

        Args:
            mode: File mode
            name: Entry name
            hash: Raw 20-byte object hash

        Returns:
            Entry: The appended entry
        """
        entry = Entry(mode, name, hash)
        self.entries.append(entry)
        return entry

    @classmethod
    def decode(cls, data: bytes) -> Optional['Tree']:
        """
        Parse a tree from its ``tree <length>\\0`` framed encoding.

        Returns:
            Tree, or None if the header or any entry is malformed
        """
        parsed = parse_header(data)
        if parsed is None or parsed[0] != cls.type:
            return None
        return cls.decode_body(parsed[1])

    @classmethod
    def decode_body(cls, body: bytes) -> Optional['Tree']:
        """
        Parse the entries of a tree body.

        Each entry is a NUL-terminated ``<mode> <name>`` header followed
        by exactly 20 hash bytes, with the next header starting right
        after them.

        Returns:
            Tree, or None on a bad header or a truncated hash
        """
        entries = []
        pos = 0

        while pos < len(body):
            null_idx = body.find(b'\0', pos)
            if null_idx == -1:
                return None

            hash_start = null_idx + 1
            hash_end = hash_start + HASH_SIZE
            if hash_end > len(body):
                return None

            entry = Entry.decode(body[pos:null_idx], body[hash_start:hash_end])
            if entry is None:
                return None
            entries.append(entry)
            pos = hash_end

        return cls(entries)

    def serialize(self) -> bytes:
        """Concatenate the encoded entries."""
        return b''.join(entry.encode() for entry in self.entries)

    def as_bytes(self) -> bytes:
        """Encode as ``tree <length>\\0`` followed by every entry."""
        return frame(self.type, self.serialize())

    def calc_hash(self) -> bytes:
        return digest(self.as_bytes())

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tree):
            return NotImplemented
        return self.entries == other.entries

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"


def _labelled(lines: List[str], pos: int, label: str) -> Optional[str]:
    """Return the text after ``label `` on lines[pos], or None."""
    if pos >= len(lines):
        return None
    prefix = label + ' '
    if not lines[pos].startswith(prefix):
        return None
    return lines[pos][len(prefix):]


class Commit:
    """
    Represents a commit with metadata.

    A commit captures:
    - Snapshot of project (tree reference)
    - Optional parent commit (absent for a root commit)
    - Author and committer identities
    - Commit message

    The encoding carries no object header:

        tree <ref>
        parent <ref>            (only when there is a parent)
        author <identity>
        committer <identity>

        <message>
    """

    type = 'commit'

    def __init__(
        self,
        tree: str,
        author: Identity,
        committer: Identity,
        message: str = '',
        parent: Optional[str] = None
    ):
        """
        Initialize a commit.

        Args:
            tree: Reference to the tree object, as text
            author: Who wrote the change
            committer: Who recorded the commit
            message: Commit message, may span several lines
            parent: Reference to the parent commit, None for a root commit

        Raises:
            ValueError: If a reference cannot be encoded on a single line
        """
        _check_ref('tree', tree)
        if parent is not None:
            _check_ref('parent', parent)

        self.tree = tree
        self.parent = parent
        self.author = author
        self.committer = committer
        self.message = message

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hash: Optional[str],
        name: str,
        email: str,
        message: str
    ) -> 'Commit':
        """
        Create a new commit authored and committed by the same person now.

        Args:
            tree_hash: Hash of tree object
            parent_hash: Hash of the parent commit, or None
            name: Author and committer name
            email: Author and committer email
            message: Commit message

        Returns:
            Commit: New commit object
        """
        identity = Identity.now(name, email)
        return cls(tree_hash, identity, identity, message, parent=parent_hash)

    @classmethod
    def decode(cls, data: bytes) -> Optional['Commit']:
        """
        Parse a commit from its headerless encoding.

        Returns:
            Commit, or None if a required line is missing or malformed
        """
        try:
            lines = data.decode('utf-8').split('\n')
        except UnicodeDecodeError:
            return None

        tree = _labelled(lines, 0, 'tree')
        if tree is None:
            return None
        pos = 1

        # Peek at one line for the optional parent. It is consumed only when
        # the label matches; otherwise the same line is read as the author.
        parent = _labelled(lines, pos, 'parent')
        if parent is not None:
            pos += 1

        author_text = _labelled(lines, pos, 'author')
        if author_text is None:
            return None
        pos += 1

        committer_text = _labelled(lines, pos, 'committer')
        if committer_text is None:
            return None
        pos += 1

        if pos < len(lines):
            if lines[pos]:
                return None
            pos += 1
        message = '\n'.join(lines[pos:])

        author = Identity.decode(author_text.encode('utf-8'))
        committer = Identity.decode(committer_text.encode('utf-8'))
        if author is None or committer is None:
            return None

        try:
            return cls(tree, author, committer, message, parent=parent)
        except ValueError:
            return None

    def serialize(self) -> bytes:
        """Encode the commit lines followed by the message."""
        lines = [f'tree {self.tree}']
        if self.parent is not None:
            lines.append(f'parent {self.parent}')
        lines.append(f'author {self.author}')
        lines.append(f'committer {self.committer}')
        lines.append('')
        lines.append(self.message)
        return '\n'.join(lines).encode('utf-8')

    def as_bytes(self) -> bytes:
        """Encode the commit; commits carry no object header."""
        return self.serialize()

    def calc_hash(self) -> bytes:
        """Return the 20-byte SHA-1 of the commit framed as a stored object."""
        return digest(frame(self.type, self.serialize()))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Commit):
            return NotImplemented
        return (
            self.tree == other.tree
            and self.parent == other.parent
            and self.author == other.author
            and self.committer == other.committer
            and self.message == other.message
        )

    def __repr__(self) -> str:
        parent_info = f", parent={self.parent[:7]}" if self.parent else ""
        msg_preview = self.message.split('\n')[0][:50]
        return f"Commit(tree={self.tree[:7]}{parent_info}, msg='{msg_preview}')"


ObjectValue = Union[Blob, Tree, Commit]


class GitObject:
    """
    Tagged union over Blob, Tree and Commit.

    Stored objects are framed as ``<type> <size>\\0<body>`` whatever their
    kind; this is the form the object store writes and hashes.
    """

    def __init__(self, value: ObjectValue):
        if not isinstance(value, (Blob, Tree, Commit)):
            raise TypeError(f"Not a git object: {type(value).__name__}")
        self.value = value

    @property
    def kind(self) -> str:
        """Object type: 'blob', 'tree' or 'commit'."""
        return self.value.type

    @classmethod
    def decode(cls, data: bytes) -> Optional['GitObject']:
        """
        Parse a framed object of any kind.

        Returns:
            GitObject, or None if the header or the body is malformed
        """
        parsed = parse_header(data)
        if parsed is None:
            return None
        obj_type, body = parsed

        if obj_type == Blob.type:
            value = Blob.decode(body)
        elif obj_type == Tree.type:
            value = Tree.decode_body(body)
        elif obj_type == Commit.type:
            value = Commit.decode(body)
        else:
            return None

        if value is None:
            return None
        return cls(value)

    def body(self) -> bytes:
        """Object content without the header."""
        return self.value.serialize()

    def encode(self) -> bytes:
        """Framed bytes, as stored and hashed."""
        return frame(self.kind, self.body())

    def calc_hash(self) -> bytes:
        return digest(self.encode())

    @property
    def hex_hash(self) -> str:
        """40-character hex object id."""
        return hash_object(self.encode())

    def __eq__(self, other) -> bool:
        if not isinstance(other, GitObject):
            return NotImplemented
        return self.value == other.value

    def __repr__(self) -> str:
        return f"GitObject({self.value!r})"
