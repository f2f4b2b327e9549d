from __future__ import annotations

from typing import TYPE_CHECKING

from file_forge.config import SNIFF_BYTES, TEXT_CONTROL_BYTES
from file_forge.exceptions import FileReadError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


def join_rel(parent: str, name: str) -> str:
    """Join a root-relative directory path and an entry name."""
    return f"{parent}/{name}" if parent else name


def is_binary_sample(chunk: bytes) -> bool:
    """Apply the text heuristic to a byte sample.

    A sample is binary when it holds a NUL byte or any control byte below
    0x20 other than tab, newline and carriage return.

    Args:
        chunk (bytes): the sample, usually the first bytes of a file

    Returns:
        bool: True if the sample looks binary
    """
    return any(b < 0x20 and b not in TEXT_CONTROL_BYTES for b in chunk)  # noqa: PLR2004


def sniff_binary(path: Path, nbytes: int = SNIFF_BYTES) -> bool:
    """Check whether a file looks binary from its first bytes.

    Args:
        path (Path): the file to test
        nbytes (int, optional): number of bytes to sample. Defaults to SNIFF_BYTES.

    Raises:
        FileReadError: if the file cannot be opened or read

    Returns:
        bool: True if the sample fails the text heuristic
    """
    try:
        with path.open("rb") as f:
            chunk = f.read(nbytes)
    except OSError as e:
        raise FileReadError(path=path, reason=e.strerror or str(e)) from e
    return is_binary_sample(chunk)


def read_text_file(path: Path) -> str:
    """Read a text file as UTF-8, dropping undecodable bytes.

    Args:
        path (Path): the file to read

    Raises:
        FileReadError: if the file cannot be read

    Returns:
        str: the file content
    """
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        raise FileReadError(path=path, reason=e.strerror or str(e)) from e


def name_matches_any(name: str, terms: Sequence[str]) -> bool:
    """Case-insensitive check that a file name contains any of `terms`."""
    low = name.lower()
    return any(t.lower() in low for t in terms)


def content_matches_any(content: str, terms: Sequence[str]) -> bool:
    """Case-insensitive check that `content` contains any of `terms`."""
    low = content.lower()
    return any(t.lower() in low for t in terms)


def content_matches_all(content: str, terms: Sequence[str]) -> bool:
    """Case-insensitive check that `content` contains all of `terms` (False when empty)."""
    if not terms:
        return False
    low = content.lower()
    return all(t.lower() in low for t in terms)


def format_size_mb(size: int) -> str:
    """Format a byte count as megabytes with two decimals (e.g. "1.50 MB")."""
    return f"{size / 1024 / 1024:.2f} MB"
