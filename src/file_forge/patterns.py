"""Glob matching for include and exclude rules.

Patterns are matched against paths relative to the scan root, with POSIX
separators:

- `*` and `?` never cross a `/`; `**` as a whole segment spans any number
  of segments (`**/*.ts` matches `a.ts` and `src/c.ts`, `*.ts` only `a.ts`),
- `{a,b}` brace lists expand, and may nest,
- a leading `!` turns a pattern into a negation,
- a trailing `/` restricts a pattern to directories.
"""

from __future__ import annotations

import glob
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split `text` on `sep`, ignoring separators nested inside braces.

    Args:
        text (str): the text to split
        sep (str, optional): a single-character separator. Defaults to ",".

    Returns:
        list[str]: the pieces, in order (empty pieces are kept)
    """
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch == "{":
            depth += 1
        elif ch == "}" and depth:
            depth -= 1
        if ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return parts


def expand_braces(pattern: str) -> list[str]:
    """Expand brace lists in a glob pattern.

    A brace group without a top-level comma (e.g. `{x}`) is kept literally.

    Args:
        pattern (str): the pattern to expand

    Returns:
        list[str]: the expanded patterns, in order of appearance, without duplicates
    """
    depth = 0
    start = 0
    for idx, ch in enumerate(pattern):
        if ch == "{":
            if depth == 0:
                start = idx
            depth += 1
        elif ch == "}" and depth:
            depth -= 1
            if depth:
                continue
            options = split_top_level(pattern[start + 1 : idx])
            if len(options) < 2:  # noqa: PLR2004
                continue
            prefix, suffix = pattern[:start], pattern[idx + 1 :]
            out: list[str] = []
            for option in options:
                for expanded in expand_braces(prefix + option + suffix):
                    if expanded not in out:
                        out.append(expanded)
            return out
    return [pattern]


def normalize_globs(globs: Iterable[str]) -> list[str]:
    """Normalize a sequence of path glob patterns.

    Normalize a sequence of glob patterns by stripping whitespace and
    replacing backslashes with forward slashes. Empty patterns are dropped.

    Args:
        globs (Iterable[str]): the glob patterns to normalize

    Returns:
        list[str]: the normalized glob patterns
    """
    out: list[str] = []
    for g in globs:
        g2 = (g or "").strip()
        if not g2:
            continue
        out.append(g2.replace("\\", "/"))
    return out


@dataclass(frozen=True)
class CompiledGlob:
    """A single brace-free glob compiled to a regular expression."""

    source: str
    regex: re.Pattern[str]
    dir_only: bool = False
    literal: bool = False

    @classmethod
    def compile(cls, pattern: str) -> CompiledGlob:
        dir_only = pattern.endswith("/")
        body = pattern.rstrip("/")
        while body.startswith("./"):
            body = body[2:]
        body = body.lstrip("/") or "**"
        regex = glob.translate(body, recursive=True, include_hidden=True, seps="/")
        literal = not any(ch in body for ch in "*?[")
        return cls(source=pattern, regex=re.compile(regex), dir_only=dir_only, literal=literal)

    def match(self, rel_path: str, *, is_dir: bool = False) -> bool:
        if self.dir_only and not is_dir:
            return False
        return self.regex.match(rel_path) is not None


class GlobSet:
    """A set of glob patterns with negation support.

    A path matches when it matches at least one positive pattern and no
    negated one. A set holding only negations matches every path that no
    negation matches.
    """

    def __init__(self, patterns: Sequence[str] = ()) -> None:
        self.patterns = normalize_globs(patterns)
        self._positive: list[CompiledGlob] = []
        self._negative: list[CompiledGlob] = []
        for pattern in self.patterns:
            negated = pattern.startswith("!")
            body = pattern[1:] if negated else pattern
            if not body:
                continue
            target = self._negative if negated else self._positive
            target.extend(CompiledGlob.compile(p) for p in expand_braces(body))

    def __bool__(self) -> bool:
        return bool(self._positive or self._negative)

    def __repr__(self) -> str:
        return f"GlobSet({self.patterns!r})"

    def match(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check a root-relative POSIX path against the set.

        Args:
            rel_path (str): the path relative to the scan root
            is_dir (bool, optional): whether the path is a directory. Defaults to False.

        Returns:
            bool: True if the path matches the set, False otherwise (always False for an empty set)
        """
        if not self:
            return False
        rel = rel_path.strip("/")
        if self._positive and not any(g.match(rel, is_dir=is_dir) for g in self._positive):
            return False
        return not self.is_negated(rel, is_dir=is_dir)

    def is_negated(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check whether a negated pattern of the set matches a path."""
        rel = rel_path.strip("/")
        return any(g.match(rel, is_dir=is_dir) for g in self._negative)

    def match_directory_target(self, rel_path: str) -> bool:
        """Check whether a directory is named by a wildcard-free positive pattern.

        `docs`, `docs/` and `src/lib` name a directory whose whole subtree is
        wanted; wildcard patterns (`src/*`, `*`) only ever select files.

        Args:
            rel_path (str): the directory path relative to the scan root

        Returns:
            bool: True if a literal positive pattern matches and no negation does
        """
        rel = rel_path.strip("/")
        if not any(g.literal and g.match(rel, is_dir=True) for g in self._positive):
            return False
        return not self.is_negated(rel, is_dir=True)
