"""Replay files of key sequences using worker processes."""
from multiprocessing import Pipe, Process, cpu_count
from multiprocessing.connection import Connection, wait
from pathlib import Path
import tarfile
import tempfile
from typing import List, TextIO, Tuple
import zipfile

import py7zr
from pydantic import BaseModel, Field, FilePath

from keypad_calculator.common.logger import logger
from keypad_calculator.runner.worker import ReplayWorker


class BatchReplayer(BaseModel):
    """
    Replays every line of a key-sequence file on its own calculator.

    Features:
        - Reads a plain .txt file or the first .txt inside a .zip, .tar.xz or .7z archive.
        - Spawns one worker process per line, at most ``max_workers`` at once.
        - Writes each outcome to disk as soon as its worker finishes.
    """

    output_file: Path = Field(..., description="Path to write replay results")
    max_workers: int = Field(default_factory=cpu_count, ge=1, description="Maximum simultaneous workers")

    def replay_file(self, input_file: FilePath) -> Path:
        """
        Replay all key sequences of ``input_file`` and write one result line per sequence.

        :param FilePath input_file: Path to the input file or archive

        :return: Path of the written results
        :rtype: Path
        :raises ValueError: If the archive format is unsupported or contains no .txt file
        """
        lines: List[str] = self._load_lines(Path(input_file))
        logger.info(f"📄 Replaying {len(lines)} key sequences from {input_file}")

        with self.output_file.open("w", encoding="utf-8") as f_out:
            max_workers: int = min(self.max_workers, len(lines))
            active_workers: List[Tuple[Process, Connection]] = []

            for line_number, keys in enumerate(lines, start=1):
                # Wait until a worker slot is available
                while len(active_workers) >= max_workers:
                    self._collect_finished_workers(active_workers, f_out)

                active_workers.append(self._spawn_worker(keys, line_number))

            while active_workers:
                self._collect_finished_workers(active_workers, f_out)

        logger.info(f"💾 Results written to {self.output_file}")
        return self.output_file

    def _load_lines(self, input_file: Path) -> List[str]:
        """
        Read the key sequences from a text file or archive, dropping blank lines.

        :param Path input_file: Path to the input file or archive

        :return: List of non-empty key sequences
        :rtype: List[str]
        """
        if input_file.suffix.lower() == ".txt":
            content = input_file.read_text()
        else:
            content = self._extract_archive(input_file)
        return [line.strip() for line in content.splitlines() if line.strip()]

    def _spawn_worker(self, keys: str, line_number: int) -> Tuple[Process, Connection]:
        """
        Spawn a ReplayWorker for the given key sequence and return process and pipe.

        :param str keys: Key sequence
        :param int line_number: Line number of the sequence in the input

        :return: Tuple of (Process, parent_pipe)
        :rtype: Tuple[Process, Connection]
        """
        parent_conn, child_conn = Pipe()
        worker = ReplayWorker(conn=child_conn, keys=keys, line_number=line_number)
        process = Process(target=worker.run)
        process.start()
        return process, parent_conn

    def _collect_finished_workers(
        self, active_workers: List[Tuple[Process, Connection]], f_out: TextIO
    ) -> None:
        """
        Block until at least one worker ends, then write the results of all finished workers.

        Finished workers are removed from the active_workers list.

        :param list active_workers: List of tuples (Process, Pipe)
        :param TextIO f_out: Open file handle for writing results
        """
        wait([proc.sentinel for proc, _ in active_workers])

        # Iterate in reverse to safely remove finished workers while iterating
        for i in reversed(range(len(active_workers))):
            proc, pipe_conn = active_workers[i]
            if proc.is_alive():
                continue

            proc.join()
            active_workers.pop(i)
            try:
                payload = pipe_conn.recv()
            except EOFError:
                logger.error(f"👷❌ Worker exited with code {proc.exitcode} before reporting")
                continue
            finally:
                pipe_conn.close()

            if "display" in payload:
                f_out.write(f"{payload['keys']} -> {payload['display']}\n")
            else:
                f_out.write(f"{payload['keys']} -> ERROR: {payload['error']}\n")
            f_out.flush()

    def _extract_archive(self, archive_path: Path) -> str:
        """
        Extract the first .txt file found in a supported archive and return its content.

        Supported formats:
        - .zip
        - .tar.xz
        - .7z

        :param Path archive_path: Path to the archive file

        :return: Content of the extracted .txt file
        :rtype: str
        :raises ValueError: If no .txt file is found or format is unsupported
        """
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)

            if archive_path.suffix == ".zip":
                with zipfile.ZipFile(archive_path, "r") as zf:
                    names = [name for name in zf.namelist() if name.endswith(".txt")]
                    if not names:
                        raise ValueError("📄❌ No .txt file found in zip archive")
                    return zf.read(names[0]).decode()

            if archive_path.suffixes[-2:] == [".tar", ".xz"]:
                with tarfile.open(archive_path, "r:xz") as tf:
                    members = [m for m in tf.getmembers() if m.isfile() and m.name.endswith(".txt")]
                    if not members:
                        raise ValueError("📄❌ No .txt file found in tar.xz archive")
                    tf.extract(members[0], path=tmpdir_path, filter="data")
                    return (tmpdir_path / members[0].name).read_text()

            if archive_path.suffix == ".7z":
                with py7zr.SevenZipFile(archive_path, mode="r") as archive:
                    names = [name for name in archive.getnames() if name.endswith(".txt")]
                    if not names:
                        raise ValueError("📄❌ No .txt file found in 7z archive")
                    archive.extract(path=tmpdir_path, targets=[names[0]])
                    return (tmpdir_path / names[0]).read_text()

        raise ValueError(f"📄❌ Unsupported archive format: {archive_path.suffix}")
