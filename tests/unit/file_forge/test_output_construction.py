from __future__ import annotations

import pytest

from file_forge.config import NodeKind
from file_forge.models import ScanStats, TreeNode
from file_forge.output_construction import (
    AI_INSTRUCTIONS,
    BINARY_PLACEHOLDER,
    TOO_LARGE_PLACEHOLDER,
    build_markdown,
    build_summary,
    build_tree_lines,
    file_body,
    read_error_placeholder,
    too_large_marker,
)
from file_forge.settings import Settings


def _file(path: str, **kwargs: object) -> TreeNode:
    return TreeNode(name=path.rsplit("/", 1)[-1], path=path, kind=NodeKind.FILE, **kwargs)  # type: ignore[arg-type]


def _dir(path: str, name: str, *children: TreeNode) -> TreeNode:
    return TreeNode(name=name, path=path, kind=NodeKind.DIRECTORY, children=children)


def _sample_tree() -> TreeNode:
    return _dir(
        "",
        "repo",
        _dir("src", "src", _file("src/app.py", size=9, content="print(1)\n"), _file("src/util.py", size=1, content="x")),
        _file("big.log", size=3 * 1024 * 1024, too_large=True),
        _file("logo.png", size=4, is_binary=True),
    )


@pytest.mark.unit
def test_build_tree_lines_draws_branches() -> None:
    lines = build_tree_lines(_sample_tree())

    assert lines == [
        "repo/",
        "├── src/",
        "│   ├── app.py",
        "│   └── util.py",
        "├── big.log [3.00 MB - too large]",
        "└── logo.png",
    ]


@pytest.mark.unit
def test_build_tree_lines_shows_errors() -> None:
    root = _dir("", "repo", _dir("locked", "locked"), _file("a.txt"))
    root.children[0].error = "Permission denied"

    assert build_tree_lines(root)[1] == "├── locked/ [error: Permission denied]"


@pytest.mark.unit
def test_file_body_placeholders() -> None:
    assert file_body(_file("a.txt", content="hi")) == "hi"
    assert file_body(_file("a.txt")) == ""
    assert file_body(_file("big", too_large=True)) == TOO_LARGE_PLACEHOLDER
    assert file_body(_file("img", is_binary=True)) == BINARY_PLACEHOLDER
    assert file_body(_file("bad", error="Permission denied")) == read_error_placeholder("Permission denied")


@pytest.mark.unit
def test_too_large_marker() -> None:
    assert too_large_marker(1024 * 1024) == " [1.00 MB - too large]"


@pytest.mark.unit
def test_build_summary_echoes_filters() -> None:
    settings = Settings(max_size=2048, ignore=False, find=["todo"], require=["a", "b"])
    stats = ScanStats(total_files=2, total_size=10, truncated=True)

    summary = build_summary("./repo", stats, settings).splitlines()

    assert summary == [
        "Analyzing: ./repo",
        "Max file size: 2KB",
        "Skipping build artifacts and generated files",
        "Ignoring .gitignore rules",
        "Finding files containing: todo",
        "Requiring files to contain: a, b",
        "Files analyzed: 2",
        "Total size: 10 bytes",
        "Scan limits reached: the tree is incomplete",
    ]


@pytest.mark.unit
def test_build_markdown_tree_only() -> None:
    md = build_markdown("./repo", _sample_tree(), ScanStats(total_files=4), settings=Settings())

    assert md.startswith("# File Forge Analysis\n\n**Source**: `./repo`")
    assert "**Timestamp**: " in md
    assert "## Summary" in md
    assert "## Directory Structure\n\n```text\nrepo/\n" in md
    assert "## Files Content" not in md
    assert md.endswith("\n")


@pytest.mark.unit
def test_build_markdown_verbose_renders_file_sections() -> None:
    md = build_markdown("./repo", _sample_tree(), ScanStats(), settings=Settings(name="Demo", verbose=True))

    assert md.startswith("# Demo\n")
    assert "### src/app.py\n\n```python\nprint(1)\n```" in md
    assert f"### big.log\n\n```text\n{TOO_LARGE_PLACEHOLDER}\n```" in md
    assert f"### logo.png\n\n```text\n{BINARY_PLACEHOLDER}\n```" in md
    assert md.index("### src/app.py") < md.index("### src/util.py") < md.index("### big.log")


@pytest.mark.unit
def test_build_markdown_bulk_appends_ai_instructions() -> None:
    plain = build_markdown("./repo", _sample_tree(), ScanStats(), settings=Settings())
    bulk = build_markdown("./repo", _sample_tree(), ScanStats(), settings=Settings(bulk=True))

    assert "## AI Instructions" not in plain
    assert bulk.endswith("## AI Instructions\n\n" + "\n".join(AI_INSTRUCTIONS) + "\n")
