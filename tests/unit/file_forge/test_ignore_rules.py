from pathlib import Path

import pytest

from file_forge.ignore_rules import IgnoreRules, is_artifact, load_ignore_file
from file_forge.scanner import scan


@pytest.mark.unit
@pytest.mark.parametrize(
    ("rel", "is_dir", "expected"),
    [
        ("node_modules", True, True),
        ("packages/web/node_modules", True, True),
        ("__pycache__", True, True),
        ("package-lock.json", False, True),
        ("src/app.min.js", False, True),
        ("src/mod.pyc", False, True),
        ("src/app.js", False, False),
        ("dist", False, False),
        ("dist", True, True),
    ],
)
def test_is_artifact(rel: str, is_dir: bool, expected: bool) -> None:  # noqa: FBT001
    assert is_artifact(rel, is_dir=is_dir) is expected


@pytest.mark.unit
def test_load_ignore_file_without_rules_returns_none(tmp_path: Path) -> None:
    path = tmp_path / ".gitignore"
    path.write_text("# only a comment\n\n", encoding="utf-8")

    assert load_ignore_file(path) is None


@pytest.mark.unit
def test_load_ignore_file_unreadable_returns_none(tmp_path: Path) -> None:
    assert load_ignore_file(tmp_path / "missing") is None


@pytest.mark.unit
def test_root_rules_ignore_matching_paths(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("*.log\nsecret/\n", encoding="utf-8")
    rules = IgnoreRules.root(tmp_path)

    assert rules.is_ignored("app.log")
    assert rules.is_ignored("logs/deep/app.log")
    assert rules.is_ignored("secret", is_dir=True)
    assert not rules.is_ignored("secret", is_dir=False)
    assert not rules.is_ignored("main.py")


@pytest.mark.unit
def test_root_without_gitignore_ignores_nothing(tmp_path: Path) -> None:
    rules = IgnoreRules.root(tmp_path)

    assert rules.spec is None
    assert not rules.is_ignored("anything.log")


@pytest.mark.unit
def test_descend_without_gitignore_reuses_level(tmp_path: Path) -> None:
    (tmp_path / "sub").mkdir()
    rules = IgnoreRules.root(tmp_path)

    assert rules.descend(tmp_path / "sub", "sub") is rules


@pytest.mark.unit
def test_nested_gitignore_overrides_parent(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("*.log\n", encoding="utf-8")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".gitignore").write_text("!keep.log\n*.tmp\n", encoding="utf-8")

    root_rules = IgnoreRules.root(tmp_path)
    sub_rules = root_rules.descend(sub, "sub")

    assert sub_rules is not root_rules
    assert not sub_rules.is_ignored("sub/keep.log")
    assert sub_rules.is_ignored("sub/other.log")
    assert sub_rules.is_ignored("sub/x.tmp")
    # Rules of a subdirectory do not leak to siblings.
    assert not root_rules.is_ignored("x.tmp")


@pytest.mark.unit
def test_nested_patterns_are_relative_to_their_directory(tmp_path: Path) -> None:
    sub = tmp_path / "pkg"
    sub.mkdir()
    (sub / ".gitignore").write_text("/generated.py\n", encoding="utf-8")

    rules = IgnoreRules.root(tmp_path).descend(sub, "pkg")

    assert rules.is_ignored("pkg/generated.py")
    assert not rules.is_ignored("pkg/inner/generated.py")


@pytest.mark.unit
def test_invalid_pattern_makes_the_file_unusable(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("!\n", encoding="utf-8")
    (tmp_path / "x.py").write_text("x", encoding="utf-8")

    assert load_ignore_file(tmp_path / ".gitignore") is None
    root = scan(tmp_path)
    assert root is not None
    assert [n.path for n in root.iter_files()] == [".gitignore", "x.py"]
