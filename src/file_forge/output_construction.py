from __future__ import annotations

import io
from datetime import UTC, datetime
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from file_forge.config import APP_ANALYSIS_HEADER, guess_language
from file_forge.file_manipulation import format_size_mb

if TYPE_CHECKING:
    from file_forge.models import ScanStats, TreeNode
    from file_forge.settings import Settings

TOO_LARGE_PLACEHOLDER = "[Content ignored: file too large]"
BINARY_PLACEHOLDER = "[Content ignored: binary file]"
AI_INSTRUCTIONS = (
    "When I provide a set of files with paths and content, please return **one single shell script**",
    "Use `#!/usr/bin/env bash` at the start",
)


def read_error_placeholder(reason: str) -> str:
    """Placeholder for a file whose content could not be read."""
    return f"[Error reading file: {reason}]"


def too_large_marker(size: int) -> str:
    """Suffix appended to oversized files in the tree drawing."""
    return f" [{format_size_mb(size)} - too large]"


def now_iso() -> str:
    """Return the current date and time in ISO 8601 format with timezone.

    Returns:
        str: the current date and time in ISO 8601 format with timezone
    """
    return datetime.now(UTC).astimezone().isoformat(timespec="seconds")


def _node_label(node: TreeNode) -> str:
    label = node.name + ("/" if node.is_dir else "")
    if node.too_large:
        label += too_large_marker(node.size)
    if node.error:
        label += f" [error: {node.error}]"
    return label


def build_tree_lines(root: TreeNode) -> list[str]:
    """Build a visual tree representation of a scanned tree.

    Children are drawn in the order the scanner produced them (directories
    first, then files, case-insensitively sorted).

    Args:
        root (TreeNode): the root of the scanned tree

    Returns:
        list[str]: a list of strings representing the tree structure, suitable for printing
    """
    lines: list[str] = [_node_label(root)]

    def walk(node: TreeNode, prefix: str) -> None:
        for idx, child in enumerate(node.children):
            last = idx == len(node.children) - 1
            branch = "└── " if last else "├── "
            lines.append(prefix + branch + _node_label(child))
            if child.is_dir:
                ext = "    " if last else "│   "
                walk(child, prefix + ext)

    walk(root, "")
    return lines


def file_body(node: TreeNode) -> str:
    """Return the report body of a file node, or the placeholder replacing it.

    Args:
        node (TreeNode): a file node

    Returns:
        str: the file content, or a placeholder for oversized, binary and unreadable files
    """
    if node.too_large:
        return TOO_LARGE_PLACEHOLDER
    if node.error:
        return read_error_placeholder(node.error)
    if node.is_binary:
        return BINARY_PLACEHOLDER
    return node.content or ""


def build_summary(source: str, stats: ScanStats, settings: Settings) -> str:
    """Build the plain-text summary block of a report.

    Args:
        source (str): the analyzed source, as displayed
        stats (ScanStats): the post-filter totals of the scan
        settings (Settings): the settings the scan ran with

    Returns:
        str: the summary, one fact per line
    """
    lines = [
        f"Analyzing: {source}",
        f"Max file size: {settings.max_size // 1024}KB",
    ]
    if settings.skip_artifacts:
        lines.append("Skipping build artifacts and generated files")
    if not settings.ignore:
        lines.append("Ignoring .gitignore rules")
    if settings.find:
        lines.append(f"Finding files containing: {', '.join(settings.find)}")
    if settings.require:
        lines.append(f"Requiring files to contain: {', '.join(settings.require)}")
    lines.append(f"Files analyzed: {stats.total_files}")
    lines.append(f"Total size: {stats.total_size} bytes")
    if stats.truncated:
        lines.append("Scan limits reached: the tree is incomplete")
    return "\n".join(lines)


def build_markdown(
    source: str,
    root: TreeNode,
    stats: ScanStats,
    *,
    settings: Settings,
) -> str:
    """Build a markdown report of a scanned tree.

    The report holds a header, a summary, the directory tree and, when the
    tree carries contents (verbose mode), one fenced section per file.

    Args:
        source (str): the analyzed source, as displayed
        root (TreeNode): the root of the scanned tree
        stats (ScanStats): the post-filter totals of the scan
        settings (Settings): configuration settings, including:
            - name: custom report title
            - verbose: whether file sections are rendered
            - bulk: whether AI processing instructions are appended
            - max_size, skip_artifacts, ignore, find, require: echoed in the summary

    Returns:
        str: the generated markdown report
    """
    out = io.StringIO()
    out.write(f"# {settings.name or APP_ANALYSIS_HEADER}\n\n")
    out.write(f"**Source**: `{source}`\n\n")
    out.write(f"**Timestamp**: {now_iso()}\n\n")

    out.write("## Summary\n\n")
    out.write(build_summary(source, stats, settings))
    out.write("\n\n")

    out.write("## Directory Structure\n\n")
    out.write("```text\n")
    out.write("\n".join(build_tree_lines(root)))
    out.write("\n```\n\n")

    if settings.verbose:
        out.write("## Files Content\n\n")
        for node in root.iter_files():
            label = node.path or node.name
            lang = guess_language(PurePosixPath(node.name)) or "text"
            out.write(f"### {label}\n\n")
            out.write(f"```{lang}\n{file_body(node).rstrip()}\n```\n\n")

    if settings.bulk:
        out.write("## AI Instructions\n\n")
        out.write("\n".join(AI_INSTRUCTIONS))
        out.write("\n")

    return out.getvalue().rstrip() + "\n"
