from __future__ import annotations

from enum import StrEnum, auto
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

APP_NAME = "file-forge"
APP_COMMAND = "ffg"
APP_DISPLAY_NAME = "File Forge"
APP_ANALYSIS_HEADER = f"{APP_DISPLAY_NAME} Analysis"

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MiB
DIR_MAX_DEPTH = 20
DIR_MAX_FILES = 10_000
DIR_MAX_TOTAL_SIZE = 500 * 1024 * 1024  # 500 MiB
SNIFF_BYTES = 1024

# Control bytes that may legitimately appear in text files.
TEXT_CONTROL_BYTES = frozenset({0x09, 0x0A, 0x0D})

# Dependency directories, caches and compiled output.
ARTIFACT_DIRS = [
    ".git/",
    "node_modules/",
    "bower_components/",
    "__pycache__/",
    ".pytest_cache/",
    ".mypy_cache/",
    ".ruff_cache/",
    ".tox/",
    ".venv/",
    "venv/",
    "dist/",
    "build/",
    ".ipynb_checkpoints/",
]

# Lockfiles, minified bundles, media, archives and office documents.
ARTIFACT_FILES = [
    "package-lock.json",
    "pnpm-lock.yaml",
    "yarn.lock",
    ".coverage",
    ".DS_Store",
    "*.pyc",
    "*.pyo",
    "*.pyd",
    "*.min.js",
    "*.bundle.js",
    "*.chunk.js",
    "*.map",
    "*.mp4",
    "*.mov",
    "*.avi",
    "*.mkv",
    "*.iso",
    "*.tar",
    "*.tar.gz",
    "*.zip",
    "*.rar",
    "*.7z",
    "*.sqlite",
    "*.db",
    "*.pdf",
    "*.docx",
    "*.xlsx",
    "*.pptx",
]

ARTIFACT_PATTERNS = [*ARTIFACT_DIRS, *ARTIFACT_FILES]

EXT2LANG = {
    ".py": "python",
    ".toml": "toml",
    ".md": "markdown",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".html": "html",
    ".css": "css",
    ".js": "javascript",
    ".mjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "zsh",
    ".rs": "rust",
    ".go": "go",
    ".php": "php",
    ".sql": "sql",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".xml": "xml",
    ".ini": "ini",
    ".cfg": "ini",
    ".conf": "ini",
}


class NodeKind(StrEnum):
    """Kind of a scanned filesystem entry."""

    FILE = auto()
    DIRECTORY = auto()


def split_terms(values: list[str]) -> list[str]:
    """Split comma-separated search terms, dropping blanks.

    Args:
        values (list[str]): raw terms, each possibly holding several comma-separated terms

    Returns:
        list[str]: the individual, stripped, non-empty terms
    """
    out: list[str] = []
    for value in values:
        out.extend(t.strip() for t in value.split(",") if t.strip())
    return out


class ScanOptions(BaseModel):
    """Rule-set for a single directory scan.

    Attributes:
        include: Glob patterns a file must match (when non-empty).
        exclude: Glob patterns removing files and directories unconditionally.
        find: Case-insensitive terms; a file matches if its name or text contains any.
        require: Case-insensitive terms; a file matches if its text contains all.
        respect_gitignore: Apply `.gitignore` files found during the walk.
        skip_artifacts: Apply the built-in deny-list of build and dependency artifacts.
        max_file_size: Files above this size are kept but never read.
        include_content: Keep text content on file nodes (verbose mode).
        max_depth: Directories deeper than this are not descended.
        max_files: Stop adding files once this many survived.
        max_total_size: Stop adding files once their cumulative size reaches this.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    include: tuple[str, ...] = Field(default=(), description="Include globs")
    exclude: tuple[str, ...] = Field(default=(), description="Exclude globs")
    find: tuple[str, ...] = Field(default=(), description="OR search terms")
    require: tuple[str, ...] = Field(default=(), description="AND search terms")
    respect_gitignore: bool = Field(default=True, description="Honor .gitignore files")
    skip_artifacts: bool = Field(default=True, description="Skip build and dependency artifacts")
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=0, description="Max bytes read per file")
    include_content: bool = Field(default=False, description="Store file contents on nodes")
    max_depth: int = Field(default=DIR_MAX_DEPTH, ge=0, description="Max directory depth")
    max_files: int = Field(default=DIR_MAX_FILES, ge=0, description="Max number of files")
    max_total_size: int = Field(default=DIR_MAX_TOTAL_SIZE, ge=0, description="Max cumulative file size")

    @field_validator("find", "require", mode="before")
    @classmethod
    def _split_terms(cls, value: object) -> object:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple)):
            return tuple(split_terms([str(v) for v in value]))
        return value

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _as_tuple(cls, value: object) -> object:
        if isinstance(value, str):
            return (value,)
        if isinstance(value, list):
            return tuple(value)
        return value

    @property
    def has_search(self) -> bool:
        """Whether a find or require filter is active."""
        return bool(self.find or self.require)


def guess_language(path: Path) -> str:
    """Get the suggested code fence language for a file.

    Args:
        path (Path): the file path (only its name and suffix are used)

    Returns:
        str: a language name such as "python", or "" if unknown
    """
    name = path.name.lower()
    if name == "dockerfile":
        return "dockerfile"
    if name == "makefile":
        return "makefile"
    return EXT2LANG.get(path.suffix.lower(), "")
