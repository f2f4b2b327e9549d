from pathlib import Path

import pytest

from file_forge.exceptions import FileReadError
from file_forge.file_manipulation import (
    content_matches_all,
    content_matches_any,
    format_size_mb,
    is_binary_sample,
    join_rel,
    name_matches_any,
    read_text_file,
    sniff_binary,
)


@pytest.mark.unit
def test_join_rel() -> None:
    assert join_rel("", "a.py") == "a.py"
    assert join_rel("src", "a.py") == "src/a.py"


@pytest.mark.unit
def test_is_binary_sample() -> None:
    assert not is_binary_sample(b"hello\tworld\r\n")
    assert not is_binary_sample("héllo".encode())
    assert not is_binary_sample(b"")
    assert is_binary_sample(b"abc\x00def")
    assert is_binary_sample(b"\x1b[0m")


@pytest.mark.unit
def test_sniff_binary_reads_only_the_head(tmp_path: Path) -> None:
    f = tmp_path / "late.bin"
    f.write_bytes(b"a" * 2048 + b"\x00")

    assert not sniff_binary(f)
    assert sniff_binary(f, nbytes=4096)


@pytest.mark.unit
def test_read_errors_raise_file_read_error(tmp_path: Path) -> None:
    missing = tmp_path / "missing.txt"

    with pytest.raises(FileReadError) as exc_info:
        read_text_file(missing)
    assert exc_info.value.path == missing
    assert exc_info.value.reason

    with pytest.raises(FileReadError):
        sniff_binary(missing)


@pytest.mark.unit
def test_read_text_file_drops_undecodable_bytes(tmp_path: Path) -> None:
    f = tmp_path / "mixed.txt"
    f.write_bytes(b"ok\xff\xfe!")

    assert read_text_file(f) == "ok!"


@pytest.mark.unit
def test_term_matching_is_case_insensitive() -> None:
    assert name_matches_any("UserService.ts", ["service"])
    assert not name_matches_any("main.py", ["service"])
    assert content_matches_any("Console.log('x')", ["debug", "CONSOLE"])
    assert content_matches_all("import React; useState()", ["react", "usestate"])
    assert not content_matches_all("import React", ["react", "usestate"])
    assert not content_matches_all("anything", [])


@pytest.mark.unit
def test_format_size_mb() -> None:
    assert format_size_mb(1536 * 1024) == "1.50 MB"
