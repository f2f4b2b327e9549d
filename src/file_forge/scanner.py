"""Directory scanner: walk a root, filter its entries and build the tree.

Each entry goes through the filter stages in a fixed order, so that the
expensive content reads only happen for files every cheaper stage kept:

1. built-in artifact deny-list,
2. cascading `.gitignore` rules,
3. user exclude globs,
4. user include globs (a directory matching one keeps its whole subtree),
5. find/require terms on names and contents.

Directories are listed before files and each group is sorted
case-insensitively, so the output does not depend on the order the
filesystem returns entries in.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from file_forge.config import NodeKind, ScanOptions
from file_forge.exceptions import FileReadError, NotAFileError, RootAccessError, SourceNotFoundError
from file_forge.file_manipulation import (
    content_matches_all,
    content_matches_any,
    join_rel,
    name_matches_any,
    read_text_file,
    sniff_binary,
)
from file_forge.ignore_rules import IgnoreRules, is_artifact
from file_forge.logging import logger
from file_forge.models import ScanStats, TreeNode
from file_forge.patterns import GlobSet

if TYPE_CHECKING:
    from collections.abc import Sequence


def _entry_sort_key(item: tuple[os.DirEntry[str], bool]) -> tuple[int, str, str]:
    entry, is_dir = item
    return (0 if is_dir else 1, entry.name.lower(), entry.name)


class DirectoryScanner:
    """Single-use scanner bound to one root and one rule-set."""

    def __init__(self, options: ScanOptions, stats: ScanStats) -> None:
        self.options = options
        self.stats = stats
        self.includes = GlobSet(options.include)
        self.excludes = GlobSet(options.exclude)
        self._halted = False

    # ------------------------------------------------------------------ roots

    def scan(self, root: Path) -> TreeNode | None:
        try:
            st = root.stat()
        except (FileNotFoundError, NotADirectoryError) as e:
            raise SourceNotFoundError(path=root) from e
        except OSError as e:
            raise RootAccessError(path=root, reason=e.strerror or str(e)) from e

        if stat.S_ISDIR(st.st_mode):
            return self._scan_root_directory(root)
        if stat.S_ISREG(st.st_mode):
            return self._scan_root_file(root)
        raise NotAFileError(path=root)

    def _scan_root_directory(self, root: Path) -> TreeNode | None:
        try:
            entries = self._list_directory(root)
        except OSError as e:
            raise RootAccessError(path=root, reason=e.strerror or str(e)) from e

        ignore = IgnoreRules.root(root) if self.options.respect_gitignore else None
        children = self._scan_entries(entries, "", ignore, depth=1, include_all=False)
        if not children:
            logger.info("No entries survived filtering under %s", root)
            return None
        return self._make_directory(root.name or str(root), "", children)

    def _scan_root_file(self, root: Path) -> TreeNode | None:
        name = root.name
        if not self._passes_exclusion_rules(name, is_dir=False, ignore=None):
            logger.info("Root file %s is excluded by filters", root)
            return None
        if self.includes and not self.includes.match(name):
            logger.info("Root file %s does not match include patterns", root)
            return None
        return self._scan_file(root, name)

    # -------------------------------------------------------------- traversal

    @staticmethod
    def _list_directory(directory: Path) -> list[tuple[os.DirEntry[str], bool]]:
        out: list[tuple[os.DirEntry[str], bool]] = []
        with os.scandir(directory) as it:
            for entry in it:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        out.append((entry, True))
                    elif entry.is_file():
                        out.append((entry, False))
                    else:
                        logger.debug("Skipping special entry %s", entry.path)
                except OSError as e:
                    logger.warning("Skipping %s: %s", entry.path, e)
        return sorted(out, key=_entry_sort_key)

    def _walk_directory(
        self,
        directory: Path,
        rel: str,
        ignore: IgnoreRules | None,
        *,
        depth: int,
        include_all: bool,
        explicit: bool,
    ) -> TreeNode | None:
        if depth > self.options.max_depth:
            logger.warning("Max depth reached, not descending into %s", rel)
            self.stats.truncated = True
            return None
        try:
            entries = self._list_directory(directory)
        except OSError as e:
            reason = e.strerror or str(e)
            logger.warning("Cannot list directory %s: %s", directory, reason)
            return self._make_directory(directory.name, rel, [], error=reason)

        if ignore is not None:
            ignore = ignore.descend(directory, rel)
        children = self._scan_entries(entries, rel, ignore, depth=depth + 1, include_all=include_all)
        if not children and not explicit:
            logger.debug("Pruning empty directory %s", rel)
            return None
        return self._make_directory(directory.name, rel, children)

    def _scan_entries(
        self,
        entries: Sequence[tuple[os.DirEntry[str], bool]],
        rel: str,
        ignore: IgnoreRules | None,
        *,
        depth: int,
        include_all: bool,
    ) -> list[TreeNode]:
        children: list[TreeNode] = []
        for entry, is_dir in entries:
            if self._halted:
                break
            child_rel = join_rel(rel, entry.name)
            if not self._passes_exclusion_rules(child_rel, is_dir=is_dir, ignore=ignore):
                self.stats.skipped += 1
                continue

            if is_dir:
                explicit = not include_all and self.includes.match_directory_target(child_rel)
                node = self._walk_directory(
                    Path(entry.path),
                    child_rel,
                    ignore,
                    depth=depth,
                    include_all=include_all or explicit,
                    explicit=explicit,
                )
            else:
                if self.includes and not self._is_included(child_rel, include_all=include_all):
                    logger.debug("Skipping %s (not included)", child_rel)
                    self.stats.skipped += 1
                    continue
                node = self._scan_file(Path(entry.path), child_rel)

            if node is not None:
                children.append(node)
        return children

    def _passes_exclusion_rules(self, rel: str, *, is_dir: bool, ignore: IgnoreRules | None) -> bool:
        if self.options.skip_artifacts and is_artifact(rel, is_dir=is_dir):
            logger.debug("Skipping %s (artifact)", rel)
            return False
        if ignore is not None and ignore.is_ignored(rel, is_dir=is_dir):
            logger.debug("Skipping %s (gitignore)", rel)
            return False
        if self.excludes and self.excludes.match(rel, is_dir=is_dir):
            logger.debug("Skipping %s (excluded)", rel)
            return False
        return True

    def _is_included(self, rel: str, *, include_all: bool) -> bool:
        # Inside an included directory only the negated patterns still apply.
        if include_all:
            return not self.includes.is_negated(rel)
        return self.includes.match(rel)

    # ------------------------------------------------------------------ files

    def _scan_file(self, path: Path, rel: str) -> TreeNode | None:
        opts = self.options
        try:
            size = path.stat().st_size
        except OSError as e:
            reason = e.strerror or str(e)
            logger.warning("Cannot stat %s: %s", path, reason)
            if opts.has_search:
                self.stats.skipped += 1
                return None
            return self._add_file(TreeNode(name=path.name, path=rel, kind=NodeKind.FILE, error=reason))

        too_large = size > opts.max_file_size
        is_binary = False
        error: str | None = None
        text: str | None = None

        if not too_large:
            try:
                is_binary = sniff_binary(path)
                if not is_binary and self._needs_text(path.name):
                    text = read_text_file(path)
            except FileReadError as e:
                logger.warning("Cannot read %s: %s", path, e.reason)
                error = e.reason

        if opts.has_search and not self._matches_search(path.name, text):
            logger.debug("Skipping %s (no search match)", rel)
            self.stats.skipped += 1
            return None

        if self.stats.total_files >= opts.max_files or self.stats.total_size + size > opts.max_total_size:
            logger.warning(
                "File limit reached after %d files (%d bytes), stopping at %s",
                self.stats.total_files,
                self.stats.total_size,
                rel,
            )
            self.stats.truncated = True
            self._halted = True
            return None

        return self._add_file(
            TreeNode(
                name=path.name,
                path=rel,
                kind=NodeKind.FILE,
                size=size,
                content=text if opts.include_content else None,
                too_large=too_large,
                is_binary=is_binary,
                error=error,
            ),
        )

    def _needs_text(self, name: str) -> bool:
        opts = self.options
        if opts.include_content or opts.require:
            return True
        return bool(opts.find) and not name_matches_any(name, opts.find)

    def _matches_search(self, name: str, text: str | None) -> bool:
        find, require = self.options.find, self.options.require
        if find and (name_matches_any(name, find) or (text is not None and content_matches_any(text, find))):
            return True
        return bool(require) and text is not None and content_matches_all(text, require)

    # ------------------------------------------------------------------ nodes

    def _add_file(self, node: TreeNode) -> TreeNode:
        self.stats.total_files += 1
        self.stats.total_size += node.size
        return node

    def _make_directory(
        self,
        name: str,
        rel: str,
        children: list[TreeNode],
        *,
        error: str | None = None,
    ) -> TreeNode:
        node = TreeNode(
            name=name,
            path=rel,
            kind=NodeKind.DIRECTORY,
            children=tuple(children),
            file_count=sum(c.file_count + (1 if c.is_file else 0) for c in children),
            dir_count=sum(c.dir_count + (1 if c.is_dir else 0) for c in children),
            error=error,
        )
        for child in children:
            child.parent = node
        if rel:
            self.stats.total_dirs += 1
        return node


def scan(
    root_path: str | os.PathLike[str],
    options: ScanOptions | None = None,
    stats: ScanStats | None = None,
) -> TreeNode | None:
    """Scan a directory (or a single file) into a filtered tree.

    Args:
        root_path (str | os.PathLike[str]): the directory or file to scan
        options (ScanOptions | None, optional): the rule-set. Defaults to ScanOptions().
        stats (ScanStats | None, optional): accumulator filled with post-filter totals.

    Raises:
        SourceNotFoundError: if the root does not exist
        NotAFileError: if the root is neither a directory nor a regular file
        RootAccessError: if the root cannot be accessed

    Returns:
        TreeNode | None: the root node, or None if nothing survived the filters
    """
    root = Path(root_path).expanduser().resolve()
    scanner = DirectoryScanner(options or ScanOptions(), stats if stats is not None else ScanStats())
    logger.debug("Scanning %s", root)
    node = scanner.scan(root)
    logger.debug(
        "Scan finished for %s: files=%d size=%d dirs=%d skipped=%d",
        root,
        scanner.stats.total_files,
        scanner.stats.total_size,
        scanner.stats.total_dirs,
        scanner.stats.skipped,
    )
    return node
