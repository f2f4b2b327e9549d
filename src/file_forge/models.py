from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from file_forge.config import NodeKind

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(eq=False, slots=True)
class TreeNode:
    """One filesystem entry that survived the scan filters.

    Nodes are created by the scanner during a single walk and are not
    modified once `scan` returns. `parent` is a traversal back-reference
    only and takes no part in equality or repr.

    Attributes:
        name: Base name of the entry.
        path: Path relative to the scan root, with POSIX separators.
        kind: File or directory, fixed at creation.
        size: Size in bytes (0 for directories).
        children: Surviving children, directories first, then files.
        content: Text content, only set in verbose mode for readable text files.
        file_count: Surviving descendant files.
        dir_count: Surviving descendant directories.
        too_large: The file exceeds the configured maximum size.
        is_binary: The file failed the text heuristic.
        error: Placeholder note for a soft failure (unreadable file or directory).
        parent: The enclosing directory node, None for the root.
    """

    name: str
    path: str
    kind: NodeKind
    size: int = 0
    children: tuple[TreeNode, ...] = ()
    content: str | None = None
    file_count: int = 0
    dir_count: int = 0
    too_large: bool = False
    is_binary: bool = False
    error: str | None = None
    parent: TreeNode | None = field(default=None, repr=False)

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    def iter_nodes(self) -> Iterator[TreeNode]:
        """Yield this node and its descendants in tree (pre-)order."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def iter_files(self) -> Iterator[TreeNode]:
        """Yield the file nodes of this subtree in tree order."""
        return (n for n in self.iter_nodes() if n.is_file)

    def ancestors(self) -> Iterator[TreeNode]:
        """Yield the enclosing directory nodes, nearest first."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def shape(self) -> tuple:
        """Structural fingerprint of the subtree, ignoring parent links."""
        return (
            self.name,
            self.path,
            str(self.kind),
            self.size,
            self.too_large,
            self.is_binary,
            self.error,
            tuple(child.shape() for child in self.children),
        )


@dataclass(slots=True)
class ScanStats:
    """Aggregate statistics over the surviving file nodes of a scan.

    Attributes:
        total_files: Number of surviving files.
        total_size: Cumulative size of surviving files in bytes.
        total_dirs: Number of surviving directories, root excluded.
        skipped: Entries removed by any filter stage.
        truncated: A depth, file-count or total-size limit stopped the walk.
    """

    total_files: int = 0
    total_size: int = 0
    total_dirs: int = 0
    skipped: int = 0
    truncated: bool = False
