"""Test class BatchReplayer."""
from multiprocessing import Pipe, Process
from pathlib import Path
import tarfile
import zipfile

import py7zr
from pydantic import ValidationError
import pytest

from keypad_calculator.runner.batch import BatchReplayer


@pytest.fixture
def tmp_output_file(tmp_path: Path) -> Path:
    """Create a temporary output file path."""
    return tmp_path / "results.txt"


@pytest.fixture
def keys_file(tmp_path: Path) -> Path:
    """Write a small key-sequence file."""
    path = tmp_path / "keys.txt"
    path.write_text("2 + 3 =\n\n4 x 5 =\n1 % 2\n")
    return path


def test_max_workers_must_be_positive(tmp_output_file: Path) -> None:
    """max_workers below 1 raises a ValidationError."""
    with pytest.raises(ValidationError):
        BatchReplayer(output_file=tmp_output_file, max_workers=0)


def test_load_lines_skips_blank_lines(tmp_output_file: Path, keys_file: Path) -> None:
    """_load_lines returns the non-empty key sequences."""
    replayer = BatchReplayer(output_file=tmp_output_file)
    assert replayer._load_lines(keys_file) == ["2 + 3 =", "4 x 5 =", "1 % 2"]


def test_load_lines_upper_case_extension(tmp_path: Path, tmp_output_file: Path) -> None:
    """A .TXT file is read as plain text, not as an archive."""
    path = tmp_path / "KEYS.TXT"
    path.write_text("7 x 6 =\n")
    replayer = BatchReplayer(output_file=tmp_output_file)
    assert replayer._load_lines(path) == ["7 x 6 ="]


def test_spawn_worker_returns_process_and_pipe(tmp_output_file: Path) -> None:
    """_spawn_worker returns a Process and a parent Pipe."""
    replayer = BatchReplayer(output_file=tmp_output_file)
    proc, parent_pipe = replayer._spawn_worker("1 + 1 =", 1)
    assert parent_pipe.recv()["display"] == "2"
    proc.join()
    parent_pipe.close()


def test_collect_finished_workers_writes_results(tmp_output_file: Path) -> None:
    """_collect_finished_workers writes displays or errors to file."""
    replayer = BatchReplayer(output_file=tmp_output_file)

    def dummy_run():
        pass

    active_workers = []
    for payload in (
        {"line": 1, "keys": "2 + 3 =", "display": "5"},
        {"line": 2, "keys": "1 % 2", "error": "Unknown key: '%'"},
    ):
        parent_conn, child_conn = Pipe()
        child_conn.send(payload)
        child_conn.close()
        proc = Process(target=dummy_run)
        proc.start()
        proc.join()
        active_workers.append((proc, parent_conn))

    with tmp_output_file.open("w") as f_out:
        replayer._collect_finished_workers(active_workers, f_out)

    assert active_workers == []
    content = tmp_output_file.read_text()
    assert "2 + 3 = -> 5" in content
    assert "1 % 2 -> ERROR: Unknown key: '%'" in content


def test_replay_file(tmp_output_file: Path, keys_file: Path) -> None:
    """replay_file writes one result line per key sequence."""
    replayer = BatchReplayer(output_file=tmp_output_file, max_workers=2)
    assert replayer.replay_file(keys_file) == tmp_output_file

    lines = sorted(tmp_output_file.read_text().splitlines())
    assert lines == [
        "1 % 2 -> ERROR: Unknown key: '%'",
        "2 + 3 = -> 5",
        "4 x 5 = -> 20",
    ]


def test_replay_empty_file(tmp_path: Path, tmp_output_file: Path) -> None:
    """An input without key sequences produces an empty results file."""
    empty = tmp_path / "empty.txt"
    empty.write_text("\n\n")
    BatchReplayer(output_file=tmp_output_file).replay_file(empty)
    assert tmp_output_file.read_text() == ""


def test_extract_zip(tmp_path: Path, tmp_output_file: Path) -> None:
    """Check that a .zip archive can be extracted and read correctly."""
    zip_path = tmp_path / "keys.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr("keys.txt", "3 + 3 =\n")

    replayer = BatchReplayer(output_file=tmp_output_file)
    assert replayer._extract_archive(zip_path) == "3 + 3 =\n"


def test_extract_tar_xz(tmp_path: Path, tmp_output_file: Path) -> None:
    """Check that a .tar.xz archive can be extracted and read correctly."""
    txt = tmp_path / "keys.txt"
    txt.write_text("4 x 4 =\n")

    tar_path = tmp_path / "keys.tar.xz"
    with tarfile.open(tar_path, "w:xz") as tf:
        tf.add(txt, arcname="keys.txt")

    replayer = BatchReplayer(output_file=tmp_output_file)
    assert replayer._extract_archive(tar_path) == "4 x 4 =\n"


def test_extract_7z(tmp_path: Path, tmp_output_file: Path) -> None:
    """Check that a .7z archive can be extracted and read correctly."""
    txt = tmp_path / "keys.txt"
    txt.write_text("5 - 2 =\n")

    archive_path = tmp_path / "keys.7z"
    with py7zr.SevenZipFile(archive_path, "w") as archive:
        archive.write(txt, arcname="keys.txt")

    replayer = BatchReplayer(output_file=tmp_output_file)
    assert replayer._extract_archive(archive_path) == "5 - 2 =\n"


def test_replay_archive(tmp_path: Path, tmp_output_file: Path) -> None:
    """replay_file reads key sequences out of an archive."""
    zip_path = tmp_path / "keys.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr("keys.txt", "9 / 3 =\n")

    BatchReplayer(output_file=tmp_output_file).replay_file(zip_path)
    assert tmp_output_file.read_text() == "9 / 3 = -> 3\n"


def test_extract_archive_no_txt(tmp_path: Path, tmp_output_file: Path) -> None:
    """Verify that extraction fails if no .txt file exists in the archive."""
    zip_path = tmp_path / "empty.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr("data.bin", b"\x00\x01")

    replayer = BatchReplayer(output_file=tmp_output_file)
    with pytest.raises(ValueError):
        replayer._extract_archive(zip_path)


def test_extract_unsupported_format(tmp_path: Path, tmp_output_file: Path) -> None:
    """Ensure unsupported archive formats raise a ValueError."""
    file_path = tmp_path / "keys.rar"
    file_path.write_text("1 + 1 =")

    replayer = BatchReplayer(output_file=tmp_output_file)
    with pytest.raises(ValueError, match="Unsupported archive format"):
        replayer._extract_archive(file_path)
