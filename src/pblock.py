import argparse
import logging
from typing import List, Optional

from cli_common import ToolArgumentParser, add_common_arguments, non_negative_int, run_tool
from pipeline import PipelineResult, process_file
from record_walker import DEFAULT_MAX_LINE_LENGTH
from transform_strategies import TransformKind, build_transform

logger = logging.getLogger(__name__)


def compress_file(input_path: str, two_p: int, output_path: Optional[str] = None,
                  max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> PipelineResult:
    """
    P-Block lossy compression of every quality span in input_path
    (Canovas et al., Bioinformatics 2014, 30(15):2130-6).
    """
    transform = build_transform(TransformKind.COMPRESS, two_p=two_p)
    result = process_file(input_path, transform, output_path, max_line_length)
    logger.info(f"P-Block (two_p={two_p}) applied to {result.records_seen:,} records")
    return result


def build_parser() -> ToolArgumentParser:
    parser = ToolArgumentParser(
        prog="pblock",
        description="P-Block modification of quality scores in FASTQ or SAM files.\n"
                    "The result is written to standard output.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("input_path",
                        metavar="FILE",
                        help="Path of .fastq or SAM file")
    parser.add_argument("two_p",
                        metavar="TWO_P",
                        type=non_negative_int,
                        help="Largest allowed max-min spread of quality scores within one block")
    add_common_arguments(parser)
    return parser


def _run(args: argparse.Namespace) -> None:
    compress_file(args.input_path, args.two_p, max_line_length=args.max_line)


def main(argv: Optional[List[str]] = None) -> int:
    return run_tool(build_parser(), _run, argv)


if __name__ == "__main__":
    raise SystemExit(main())
