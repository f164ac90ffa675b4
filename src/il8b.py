import argparse
import logging
from typing import List, Optional

from cli_common import ToolArgumentParser, add_common_arguments, run_tool
from pipeline import PipelineResult, process_file
from quality_errors import InvalidCommandError
from quality_processing import IL8B, QualityTable
from record_walker import DEFAULT_MAX_LINE_LENGTH
from transform_strategies import TransformKind, VerifyTransform, build_transform

logger = logging.getLogger(__name__)

COMMANDS = ("convert", "check")


def quantize_file(input_path: str, output_path: Optional[str] = None,
                  table: QualityTable = IL8B,
                  max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> PipelineResult:
    """Rewrite every quality span of input_path with the table's representatives."""
    transform = build_transform(TransformKind.QUANTIZE, table=table)
    result = process_file(input_path, transform, output_path, max_line_length)
    logger.info(f"Quantized {result.records_seen:,} records with {table.name}")
    if output_path is not None:
        logger.info(f"Output saved to: {output_path}")
    return result


def check_file(input_path: str, table: QualityTable = IL8B,
               max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> VerifyTransform:
    """
    Check whether input_path is already quantized with the table.
    Reading stops at the first non-conforming quality byte, so the verdict is file-level.
    Returns: the finished VerifyTransform (conformant, failed_record, failed_offset)
    """
    transform = build_transform(TransformKind.VERIFY, table=table)
    result = process_file(input_path, transform, max_line_length=max_line_length)
    logger.info(f"Checked {result.records_seen:,} records")
    return transform


def format_verdict(input_path: str, conformant: bool, table: QualityTable = IL8B) -> str:
    if conformant:
        return f"{table.name}:YES - File {input_path} has been quantized with Illumina 8bin"
    return f"{table.name}:NO - File {input_path} is NOT quantized with Illumina 8bin"


def build_parser() -> ToolArgumentParser:
    parser = ToolArgumentParser(
        prog="il8b",
        description="Illumina 8-bin quantisation of quality scores in FASTQ or SAM files.\n"
                    "Files ending in .fastq are read as FASTQ, anything else as SAM.",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    # Positional Arguments
    parser.add_argument("command",
                        metavar="CMD",
                        help="convert: quantize quality scores with Illumina 8-bin\n"
                             "check: report whether the file is already quantized")
    parser.add_argument("input_path",
                        metavar="FILE",
                        help="Path of .fastq or SAM file")

    output_group = parser.add_argument_group("OUTPUT")
    output_group.add_argument("-o", dest="output_path", metavar="FILE", default=None,
                              help="Output file path, convert only [stdout]")

    add_common_arguments(parser)
    return parser


def _run(args: argparse.Namespace) -> None:
    if args.command not in COMMANDS:
        raise InvalidCommandError(f"Invalid command: {args.command}")

    if args.command == "convert":
        quantize_file(args.input_path, args.output_path, max_line_length=args.max_line)
        return

    if args.output_path is not None:
        logger.warning(f"-o {args.output_path} is ignored by check")
    verifier = check_file(args.input_path, max_line_length=args.max_line)
    if not verifier.conformant:
        logger.debug(f"First non-conforming record: {verifier.failed_record} "
                     f"(quality offset {verifier.failed_offset})")
    print(format_verdict(args.input_path, verifier.conformant), flush=True)


def main(argv: Optional[List[str]] = None) -> int:
    return run_tool(build_parser(), _run, argv)


if __name__ == "__main__":
    raise SystemExit(main())
