"""SHA-256 fingerprints of paths and file contents."""

import hashlib
from pathlib import Path

_CHUNK_SIZE = 1024 * 1024


def get_path_hash(path: str) -> str:
    """Hash a path string, ignoring case.

    Returns:
        Lower-case hex SHA-256 digest of the lower-cased, UTF-8 encoded path.
    """
    return hashlib.sha256(path.lower().encode("utf-8")).hexdigest()


def get_file_hash(path: str | Path) -> str:
    """Hash the contents of a file, streaming it in chunks.

    Returns:
        Lower-case hex SHA-256 digest of the file contents.

    Raises:
        OSError: If the file cannot be read.
    """
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
