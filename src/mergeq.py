import argparse
import logging
import sys
from typing import BinaryIO, List, Optional

from cli_common import ToolArgumentParser, add_common_arguments, run_tool
from data_structures import STDIN_SENTINEL
from pipeline import PipelineResult, process_file
from quality_errors import UsageError
from record_walker import DEFAULT_MAX_LINE_LENGTH
from transform_strategies import TransformKind, build_transform

logger = logging.getLogger(__name__)


def merge_file(input_path: str, secondary: BinaryIO, output_path: Optional[str] = None,
               max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> PipelineResult:
    """
    Replace the quality string of every record in input_path with the next line of secondary.
    Inverse of qsxtract: merging a file with its own extracted scores reproduces it.
    """
    transform = build_transform(TransformKind.MERGE_INJECT, secondary=secondary,
                                max_line_length=max_line_length)
    result = process_file(input_path, transform, output_path, max_line_length)
    logger.info(f"Merged {transform.lines_used:,} quality lines into {result.records_seen:,} records")
    return result


def build_parser() -> ToolArgumentParser:
    parser = ToolArgumentParser(
        prog="mergeq",
        description="Merge quality scores (one per line, read from stdin) into a FASTQ or SAM file.\n"
                    "The merged file is written to standard output.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("input_path",
                        metavar="FILE",
                        help="Path of .fastq or SAM file")
    add_common_arguments(parser)
    return parser


def _run(args: argparse.Namespace) -> None:
    if args.input_path == STDIN_SENTINEL:
        raise UsageError("stdin carries the quality scores, the input must be a file")
    merge_file(args.input_path, sys.stdin.buffer, max_line_length=args.max_line)


def main(argv: Optional[List[str]] = None) -> int:
    return run_tool(build_parser(), _run, argv)


if __name__ == "__main__":
    raise SystemExit(main())
