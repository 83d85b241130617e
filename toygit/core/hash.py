"""Hash utilities for toygit."""

import hashlib

HASH_SIZE = 20


def digest(data: bytes) -> bytes:
    """
    Compute the raw SHA-1 digest of data.
    
    Args:
        data: Bytes to hash
        
    Returns:
        20-byte digest
    """
    return hashlib.sha1(data).digest()


def hash_object(data: bytes) -> str:
    """
    Compute SHA-1 hash of data.
    
    Args:
        data: Bytes to hash
        
    Returns:
        40-character hex string
    """
    return hashlib.sha1(data).hexdigest()


def to_hex(raw: bytes) -> str:
    """Convert a 20-byte digest to its 40-character hex form."""
    return raw.hex()


def from_hex(text: str) -> bytes:
    """
    Convert a 40-character hex hash to raw bytes.
    
    Raises:
        ValueError: If text is not a full-length hex hash
    """
    raw = bytes.fromhex(text)
    if len(raw) != HASH_SIZE:
        raise ValueError(f"Expected a {HASH_SIZE * 2}-character hash, got {text!r}")
    return raw
