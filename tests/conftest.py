from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the persisted configuration to a throwaway location."""
    cfg = tmp_path_factory.mktemp("config") / "config.yaml"
    monkeypatch.setenv("FILE_FORGE_CONFIG", str(cfg))
    monkeypatch.delenv("FILE_FORGE_LOG_FILE", raising=False)
    return cfg


@pytest.fixture
def make_tree(tmp_path: Path):
    """Create files under tmp_path from a {relative path: content} mapping."""

    def _make(files: dict[str, str | bytes], root: Path | None = None) -> Path:
        base = root or tmp_path
        for rel, content in files.items():
            target = base / rel
            if rel.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return base

    return _make
