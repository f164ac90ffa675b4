import argparse
import logging
from typing import List, Optional

from cli_common import ToolArgumentParser, add_common_arguments, run_tool
from pipeline import PipelineResult, process_file
from record_walker import DEFAULT_MAX_LINE_LENGTH
from transform_strategies import TransformKind, build_transform

logger = logging.getLogger(__name__)


def extract_file(input_path: str, output_path: Optional[str] = None,
                 max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> PipelineResult:
    """
    Write the quality string of every record, one per line.
    SAM header lines and lines without a quality column produce no output.
    """
    transform = build_transform(TransformKind.EXTRACT)
    result = process_file(input_path, transform, output_path, max_line_length)
    logger.info(f"Extracted quality scores from {result.records_seen:,} records")
    return result


def build_parser() -> ToolArgumentParser:
    parser = ToolArgumentParser(
        prog="qsxtract",
        description="Extract quality scores from FASTQ or SAM files, one line per record.\n"
                    "Use '-' to read FASTQ from standard input.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("input_path",
                        metavar="FILE",
                        help="Path of .fastq or SAM file, or '-' for FASTQ on stdin")

    output_group = parser.add_argument_group("OUTPUT")
    output_group.add_argument("-o", dest="output_path", metavar="FILE", default=None,
                              help="Output file path [stdout]")

    add_common_arguments(parser)
    return parser


def _run(args: argparse.Namespace) -> None:
    extract_file(args.input_path, args.output_path, max_line_length=args.max_line)


def main(argv: Optional[List[str]] = None) -> int:
    return run_tool(build_parser(), _run, argv)


if __name__ == "__main__":
    raise SystemExit(main())
