"""Command-line interface for the YPBank record converter.

WHY: Users need to convert files between CSV, TXT and BIN, and to check
that two files (possibly in different formats) hold the same
transactions, without writing Python.

HOW: argparse with two subcommands. ``convert`` decodes one stream and
re-encodes it in another format; ``compare`` decodes two files and
prints a tx_id-keyed diff. Both go through the dispatcher only. Status
messages go to stderr so converted output can be piped from stdout.

RULES:
- convert: --input/--output default to stdin/stdout
- Formats come from --input-format/--output-format, else from the file
  extension, else DEFAULT_FORMAT
- compare: --file1 and --file2 are required; exit 0 if identical, 1 if not
- Unknown flags are rejected by argparse (exit 2)
- Any ParserError or OSError prints "Error: ..." to stderr and exits 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from typing import BinaryIO, List, Optional

from ypbank_converter import __version__
from ypbank_converter.codecs.base import RecordFormat
from ypbank_converter.compare import CHANGED, MISSING_RIGHT, RecordDiff, compare_records
from ypbank_converter.config import DEFAULT_FORMAT, LOG_LEVEL
from ypbank_converter.dispatch import decode, encode_bytes, format_from_filename
from ypbank_converter.errors import ParserError

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr (stdout may carry converted data)."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_format(explicit: Optional[str], path: Optional[str]) -> str:
    if explicit:
        return explicit
    if path:
        return format_from_filename(path)
    return DEFAULT_FORMAT


def _describe_diff(diff: RecordDiff, name1: str, name2: str) -> List[str]:
    if diff.kind == CHANGED:
        return [
            "Difference found for TX_ID {}:".format(diff.tx_id),
            "  {}: {}".format(name1, diff.left),
            "  {}: {}".format(name2, diff.right),
        ]
    if diff.kind == MISSING_RIGHT:
        return ["Record with TX_ID {} found in '{}' but not in '{}'".format(diff.tx_id, name1, name2)]
    return ["Record with TX_ID {} found in '{}' but not in '{}'".format(diff.tx_id, name2, name1)]


def run_convert(args: argparse.Namespace) -> int:
    """Decode the input stream and re-encode it in the output format.

    The input is fully decoded and re-encoded in memory before the
    output file is opened, so neither a bad input nor an encode failure
    truncates an existing output file.
    """
    input_format = RecordFormat.resolve(_resolve_format(args.input_format, args.input))
    output_format = RecordFormat.resolve(_resolve_format(args.output_format, args.output))
    _status("Input: {} ({})".format(args.input or "<stdin>", input_format.value))
    _status("Output: {} ({})".format(args.output or "<stdout>", output_format.value))

    with ExitStack() as stack:
        if args.input:
            reader: BinaryIO = stack.enter_context(open(args.input, "rb"))
        else:
            reader = sys.stdin.buffer
        records = decode(reader, input_format)
    _status("  Decoded {} record(s)".format(len(records)))
    data = encode_bytes(records, output_format)

    with ExitStack() as stack:
        if args.output:
            writer: BinaryIO = stack.enter_context(open(args.output, "wb"))
        else:
            writer = sys.stdout.buffer
        writer.write(data)
        writer.flush()
    _status("  Wrote {} record(s)".format(len(records)))
    return 0


def run_compare(args: argparse.Namespace) -> int:
    """Diff two record files by tx_id and print every difference."""
    format1 = _resolve_format(args.format1, args.file1)
    format2 = _resolve_format(args.format2, args.file2)

    with open(args.file1, "rb") as f1:
        records1 = decode(f1, format1)
    with open(args.file2, "rb") as f2:
        records2 = decode(f2, format2)
    logger.info("Comparing %d vs %d records", len(records1), len(records2))

    diffs = compare_records(records1, records2)
    for diff in diffs:
        for line in _describe_diff(diff, args.file1, args.file2):
            print(line)

    if not diffs:
        print("The transaction records in '{}' and '{}' are identical.".format(args.file1, args.file2))
        return 0
    print("Total differences found: {}".format(len(diffs)))
    return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Kept separate from main() so tests can inspect the parser without
    touching any files.
    """
    parser = argparse.ArgumentParser(
        prog="ypbank_converter",
        description="Convert and compare YPBank transaction files (CSV, TXT, BIN).",
    )
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Convert records between formats.")
    convert.add_argument("--input", default=None, help="Input file (default: stdin).")
    convert.add_argument(
        "--input-format",
        default=None,
        help="Input format: csv, txt or bin (default: from extension, else %s)." % DEFAULT_FORMAT,
    )
    convert.add_argument("--output", default=None, help="Output file (default: stdout).")
    convert.add_argument(
        "--output-format",
        default=None,
        help="Output format: csv, txt or bin (default: from extension, else %s)." % DEFAULT_FORMAT,
    )
    convert.set_defaults(handler=run_convert)

    compare = subparsers.add_parser("compare", help="Compare two record files by TX_ID.")
    compare.add_argument("--file1", required=True, help="First record file.")
    compare.add_argument("--format1", default=None, help="Format of --file1 (default: from extension).")
    compare.add_argument("--file2", required=True, help="Second record file.")
    compare.add_argument("--format2", default=None, help="Format of --file2 (default: from extension).")
    compare.set_defaults(handler=run_compare)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for ``python -m ypbank_converter`` and the console script.

    argv=None means use sys.argv; an explicit list is for testing.
    Returns the process exit code.
    """
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        return args.handler(args)
    except ParserError as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1
    except OSError as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
