from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from file_forge import cli
from file_forge.models import ScanStats


@pytest.mark.integration
def test_main_passes_merged_rules_to_scanner(tmp_path: Path, mocker: MockerFixture) -> None:
    (tmp_path / "a.ts").write_text("export {}", encoding="utf-8")
    scan = mocker.patch.object(cli, "scan", wraps=cli.scan)

    exit_code = cli.main([str(tmp_path), "-i", "**/*.ts", "-f", "export", "--no-ignore", "-o", str(tmp_path / "o.md")])

    assert exit_code == 0
    root_path, options, stats = scan.call_args.args
    assert root_path == tmp_path.resolve()
    assert options.include == ("**/*.ts",)
    assert options.find == ("export",)
    assert options.respect_gitignore is False
    assert isinstance(stats, ScanStats)
    assert stats.total_files == 1


@pytest.mark.integration
def test_main_accepts_file_url_and_single_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "notes.md"
    target.write_text("# Notes\n", encoding="utf-8")

    exit_code = cli.main([target.as_uri(), "--verbose"])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "```text\nnotes.md\n```" in out
    assert "### notes.md\n\n```markdown\n# Notes\n```" in out


@pytest.mark.integration
def test_main_logs_to_file_from_environment(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    log_file = tmp_path / "logs" / "ffg.log"
    log_file.parent.mkdir()
    monkeypatch.setenv("FILE_FORGE_LOG_FILE", str(log_file))
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.py").write_text("a", encoding="utf-8")

    try:
        exit_code = cli.main([str(tmp_path / "src"), "--debug", "-o", str(tmp_path / "out.md")])
    finally:
        from file_forge.logging import setup_logging  # noqa: PLC0415

        setup_logging(force=True)

    assert exit_code == 0
    assert "Scan finished" in log_file.read_text(encoding="utf-8")
