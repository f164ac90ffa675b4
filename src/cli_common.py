import argparse
import logging
import sys
import time
from typing import Callable, List, Optional

from quality_errors import InvalidCommandError, QualityToolError, UsageError
from record_walker import DEFAULT_MAX_LINE_LENGTH

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


class ToolArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message)


def non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}")
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}")
    return parsed


def positive_int(value: str) -> int:
    parsed = non_negative_int(value)
    if parsed == 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return parsed


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    common_group = parser.add_argument_group("LOGGING & LIMITS")
    common_group.add_argument(
        "--max_line",
        type=positive_int,
        metavar="INT",
        default=DEFAULT_MAX_LINE_LENGTH,
        help=f"Longest accepted input line in bytes [{DEFAULT_MAX_LINE_LENGTH}]",
    )
    common_group.add_argument(
        "--verbose",
        type=int,
        metavar="INT",
        default=0,
        choices=[0, 1],
        help="Enable verbose logging (0/1) [0]",
    )


def parse_tool_args(parser: argparse.ArgumentParser, argv: Optional[List[str]] = None):
    """Parse argv, turning leftover options or positionals into InvalidCommandError."""
    args, extras = parser.parse_known_args(argv)
    if extras:
        raise InvalidCommandError(f"Invalid command option: {extras[0]}")
    return args


def run_tool(parser: argparse.ArgumentParser, body: Callable[[argparse.Namespace], None],
             argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments and run body, mapping tool errors to a logged message and exit status 1.
    Returns: process exit status
    """
    start_time = time.perf_counter()
    try:
        args = parse_tool_args(parser, argv)
        if args.verbose == 1:
            logging.getLogger().setLevel(logging.DEBUG)
        else:
            logging.getLogger().setLevel(logging.INFO)
        body(args)
    except (UsageError, InvalidCommandError) as e:
        logger.error(f"{parser.prog}: {e}")
        parser.print_usage(sys.stderr)
        return 1
    except QualityToolError as e:
        logger.error(str(e))
        return 1

    end_time = time.perf_counter()
    logger.info(f"Task completed in {end_time - start_time:.4f} seconds")
    return 0
