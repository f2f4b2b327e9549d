"""Cascading `.gitignore` rules and the built-in artifact deny-list."""

from __future__ import annotations

from functools import cache
from typing import TYPE_CHECKING

from pathspec import GitIgnoreSpec

from file_forge.config import ARTIFACT_PATTERNS
from file_forge.logging import logger

if TYPE_CHECKING:
    from pathlib import Path

GITIGNORE_FILENAME = ".gitignore"


def _as_spec_path(rel_path: str, *, is_dir: bool) -> str:
    # gitignore directory patterns ("build/") only match paths ending with "/".
    return rel_path + "/" if is_dir else rel_path


def load_ignore_file(path: Path) -> GitIgnoreSpec | None:
    """Parse an ignore file with gitignore semantics.

    An unreadable or malformed file contributes no rules: the problem is
    logged and None is returned.

    Args:
        path (Path): the ignore file to parse

    Returns:
        GitIgnoreSpec | None: the compiled rules, or None if the file holds no usable rule
    """
    try:
        lines = path.read_text(encoding="utf-8", errors="ignore").splitlines()
        spec = GitIgnoreSpec.from_lines(lines)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unusable ignore file %s: %s", path, e)
        return None
    if not any(p.include is not None for p in spec.patterns):
        return None
    return spec


@cache
def artifact_spec() -> GitIgnoreSpec:
    """Return the compiled built-in deny-list of build and dependency artifacts."""
    return GitIgnoreSpec.from_lines(ARTIFACT_PATTERNS)


def is_artifact(rel_path: str, *, is_dir: bool) -> bool:
    """Check whether a root-relative path is a build or dependency artifact.

    Args:
        rel_path (str): the path relative to the scan root, with POSIX separators
        is_dir (bool): whether the path is a directory

    Returns:
        bool: True if the built-in deny-list matches the path
    """
    return artifact_spec().match_file(_as_spec_path(rel_path, is_dir=is_dir))


class IgnoreRules:
    """Gitignore rules in effect for one directory of the walk.

    Each level holds the rules of the `.gitignore` found in its directory
    (if any) and a link to the level of the parent directory. Lookups go
    from the deepest level to the shallowest; the first level whose
    patterns decide on the path wins, so deeper files override shallower
    ones and a negation re-includes a path ignored higher up.
    """

    __slots__ = ("base", "parent", "spec")

    def __init__(
        self,
        base: str = "",
        spec: GitIgnoreSpec | None = None,
        parent: IgnoreRules | None = None,
    ) -> None:
        self.base = base
        self.spec = spec
        self.parent = parent

    @classmethod
    def root(cls, directory: Path) -> IgnoreRules:
        """Build the rules of the scan root from its own `.gitignore`."""
        return cls(base="", spec=cls._read(directory), parent=None)

    @staticmethod
    def _read(directory: Path) -> GitIgnoreSpec | None:
        candidate = directory / GITIGNORE_FILENAME
        if not candidate.is_file():
            return None
        return load_ignore_file(candidate)

    def descend(self, directory: Path, rel_dir: str) -> IgnoreRules:
        """Return the rules in effect inside a subdirectory.

        Args:
            directory (Path): the absolute path of the subdirectory
            rel_dir (str): the subdirectory path relative to the scan root

        Returns:
            IgnoreRules: a new level if the subdirectory holds a usable `.gitignore`, else self
        """
        spec = self._read(directory)
        if spec is None:
            return self
        return IgnoreRules(base=rel_dir, spec=spec, parent=self)

    def is_ignored(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check whether a root-relative path is ignored.

        Args:
            rel_path (str): the path relative to the scan root, with POSIX separators
            is_dir (bool, optional): whether the path is a directory. Defaults to False.

        Returns:
            bool: True if the nearest deciding `.gitignore` ignores the path
        """
        level: IgnoreRules | None = self
        while level is not None:
            if level.spec is not None:
                local = rel_path[len(level.base) + 1 :] if level.base else rel_path
                result = level.spec.check_file(_as_spec_path(local, is_dir=is_dir))
                if result.include is not None:
                    return bool(result.include)
            level = level.parent
        return False
