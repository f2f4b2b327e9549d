import json
import logging
from pathlib import Path

import pytest

from file_forge.logging import setup_logging


@pytest.mark.unit
def test_setup_logging_writes_json_lines_to_file(tmp_path: Path) -> None:
    log_file = tmp_path / "ffg.log"
    try:
        log = setup_logging(log_file, debug=True, force=True)
        log.debug("Scanning %s", "repo", files=3)
        logging.getLogger().handlers[0].flush()

        record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert record["event"] == "Scanning repo"
        assert record["files"] == 3  # noqa: PLR2004
        assert record["level"] == "debug"
        assert "timestamp" in record
    finally:
        setup_logging(force=True)


@pytest.mark.unit
def test_setup_logging_is_configured_once_without_force(tmp_path: Path) -> None:
    log_file = tmp_path / "ignored.log"

    setup_logging(log_file)

    assert not log_file.exists()
