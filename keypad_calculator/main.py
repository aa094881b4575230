"""
Command-line host for the keypad calculator.

Two modes:
- With a FILE argument, replays every line of key presses in the file (or
  archive) on a fresh calculator and prints the resulting display lines.
- Without it, runs an interactive loop: each line typed on stdin is pressed
  on the same calculator and the display is printed back.
"""

import argparse
from pathlib import Path
import sys
from typing import Literal, Optional, TextIO

from pydantic import BaseModel, Field, FilePath, ValidationError

from keypad_calculator.common.keypad import KeypadParser
from keypad_calculator.common.logger import configure_logging, logger
from keypad_calculator.common.session import CalculatorSession
from keypad_calculator.runner.batch import BatchReplayer

QUIT_COMMANDS: frozenset[str] = frozenset({"quit", "exit"})


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    file_path : Optional[FilePath]
        File of key sequences to replay; interactive mode when omitted.
    output : Optional[Path]
        Where to write replay results; derived from file_path when omitted.
    log_level : str
        Logging level of the package logger.
    """

    file_path: Optional[FilePath] = None
    output: Optional[Path] = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="WARNING")


def parse_args(argv: Optional[list[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments to parse, defaults to ``sys.argv[1:]``
    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(description="Four-function keypad calculator")

    parser.add_argument(
        "file_path",
        nargs="?",
        help="File (.txt, .zip, .tar.xz or .7z) with one key sequence per line",
    )
    parser.add_argument("-o", "--output", help="Path of the results file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    args = parser.parse_args(argv)

    try:
        return CliArgs(file_path=args.file_path, output=args.output, log_level=args.log_level)
    except ValidationError as exc:
        parser.error(str(exc))


def build_output_path(input_path: Path) -> Path:
    """
    Construct the results path next to the input file.

    Examples
    --------
    input: resources/keys.7z
    output: resources/keys_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    return input_path.with_name(f"{input_path.name.split('.')[0]}{suffix_safe}_results.txt")


def run_batch(input_path: Path, output_path: Path, out: Optional[TextIO] = None) -> None:
    """
    Replay a file of key sequences and echo the results.

    :param input_path: File or archive of key sequences
    :param output_path: Where to write the results
    :param out: Stream receiving the results
    """
    out = out or sys.stdout
    replayer = BatchReplayer(output_file=output_path)
    replayer.replay_file(input_path)
    out.write(output_path.read_text(encoding="utf-8"))


def run_interactive(
    stdin: Optional[TextIO] = None, out: Optional[TextIO] = None
) -> CalculatorSession:
    """
    Read key lines until EOF or a quit command, printing the display after each.

    :param stdin: Stream of key lines, defaults to stdin
    :param out: Stream receiving the display, defaults to stdout
    :return: The session, in its final state
    :rtype: CalculatorSession
    """
    stdin = stdin or sys.stdin
    out = out or sys.stdout
    session = CalculatorSession()
    for line in stdin:
        if line.strip().lower() in QUIT_COMMANDS:
            break
        try:
            session.feed(KeypadParser.parse(line))
        except ValueError as exc:
            out.write(f"error: {exc}\n")
            continue
        out.write(f"{session.display}\n")
    return session


def main(argv: Optional[list[str]] = None) -> None:
    """
    Entry point of the ``keypad-calculator`` command.
    """
    cli_args = parse_args(argv)
    configure_logging(cli_args.log_level)

    if cli_args.file_path is None:
        logger.info("⌨️ Interactive mode")
        run_interactive()
        return

    input_path: Path = Path(cli_args.file_path)
    output_path: Path = cli_args.output or build_output_path(input_path)
    try:
        run_batch(input_path, output_path)
    except ValueError as exc:
        logger.error(f"📄❌ {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
