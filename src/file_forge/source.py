"""Resolve a user-supplied source into a local root path."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import unquote, urlparse

from file_forge.exceptions import SourceNotFoundError, UnsupportedSourceError
from file_forge.logging import logger

_REMOTE_PATTERNS = (
    re.compile(r"^https?://", re.IGNORECASE),
    re.compile(r"^(www\.)?github\.com/", re.IGNORECASE),
    re.compile(r"^git@[^:]+:"),
    re.compile(r"^(ssh|git)://", re.IGNORECASE),
)


def is_remote_source(source: str) -> bool:
    """Check whether a source string designates a remote repository.

    Args:
        source (str): the source as given on the command line

    Returns:
        bool: True for http(s), ssh, git and `github.com/...` sources
    """
    s = source.strip()
    return any(p.match(s) for p in _REMOTE_PATTERNS)


def resolve_source(source: str | Path | None) -> Path:
    """Turn a path or `file://` URL into an existing absolute path.

    Args:
        source (str | Path | None): the source; None or "" means the current directory

    Raises:
        UnsupportedSourceError: if the source is a remote repository
        SourceNotFoundError: if the resolved path does not exist

    Returns:
        Path: the absolute, resolved local path
    """
    if source is None or (isinstance(source, str) and not source.strip()):
        return Path.cwd().resolve()
    if isinstance(source, str):
        raw = source.strip()
        if is_remote_source(raw):
            raise UnsupportedSourceError(source=raw)
        if raw.startswith("file://"):
            raw = unquote(urlparse(raw).path)
        path = Path(raw)
    else:
        path = source

    resolved = path.expanduser().resolve()
    if not resolved.exists():
        raise SourceNotFoundError(path=resolved)
    logger.debug("Resolved source %s to %s", source, resolved)
    return resolved
