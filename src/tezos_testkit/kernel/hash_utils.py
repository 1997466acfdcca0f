"""Content hashing for contract sources.

Rules:
- SHA-256 over the raw bytes of the file, never over decoded text
- A str argument is encoded as UTF-8 (convenience for callers holding text)
- Lowercase hex digest, no prefix, 64 characters
- No timestamps or file metadata: identical content always hashes the same
"""

import hashlib
from typing import Union

_SHA256_PREFIX = "sha256:"


def hash_source(content: Union[str, bytes]) -> str:
    """Compute the content hash of a contract source.

    Args:
        content: Source text or raw bytes

    Returns:
        SHA256 hash as hex string (no prefix)
    """
    if isinstance(content, str):
        content_bytes = content.encode("utf-8")
    else:
        content_bytes = content

    return hashlib.sha256(content_bytes).hexdigest()


def strip_hash_prefix(digest: str) -> str:
    """Drop an optional "sha256:" prefix so prefixed records still compare equal."""
    if digest.startswith(_SHA256_PREFIX):
        return digest[len(_SHA256_PREFIX):]
    return digest
