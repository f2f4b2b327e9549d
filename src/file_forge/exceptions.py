from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FileForgeError(Exception):
    """Base exception for errors in the file_forge package."""

    message: str = "file_forge error."

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class SourceNotFoundError(FileForgeError):
    """Raised when the scan root or source path does not exist."""

    path: Path = Path()
    message: str = "The specified path does not exist."

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"


@dataclass(frozen=True)
class NotAFileError(FileForgeError):
    """Raised when the scan root is neither a directory nor a regular file."""

    path: Path = Path()
    message: str = "The specified path is neither a directory nor a regular file."

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"


@dataclass(frozen=True)
class RootAccessError(FileForgeError):
    """Raised when the scan root exists but cannot be listed or read."""

    path: Path = Path()
    reason: str = ""
    message: str = "The specified path cannot be accessed."

    def __str__(self) -> str:
        return f"{self.message} ({self.path}): {self.reason}" if self.reason else f"{self.message} ({self.path})"


@dataclass(frozen=True)
class UnsupportedSourceError(FileForgeError):
    """Raised for remote sources, which must be cloned before scanning."""

    source: str = ""
    message: str = "Remote repositories are not supported; clone it and pass the local path."

    def __str__(self) -> str:
        return f"{self.message} ({self.source})"


@dataclass(frozen=True)
class FileReadError(FileForgeError):
    """Raised when a single file cannot be read."""

    path: Path = Path()
    reason: str = ""
    message: str = "The file cannot be read."

    def __str__(self) -> str:
        return f"{self.message} ({self.path}): {self.reason}"


@dataclass(frozen=True)
class ConfigFileError(FileForgeError):
    """Raised when the persisted configuration file is malformed."""

    path: Path = Path()
    reason: str = ""
    message: str = "The configuration file is invalid."

    def __str__(self) -> str:
        return f"{self.message} ({self.path}): {self.reason}"
