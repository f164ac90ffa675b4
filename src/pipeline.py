import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Iterator, Optional

from data_structures import STDIN_SENTINEL, QualityRecord, detect_file_type
from quality_errors import IoOpenError
from record_walker import DEFAULT_MAX_LINE_LENGTH, walk_records
from transform_strategies import QualityTransform

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    records_seen: int
    stopped_early: bool


@contextmanager
def open_input(path: str) -> Iterator[BinaryIO]:
    """Open an input path for binary reading; '-' is stdin and is left open."""
    if path == STDIN_SENTINEL:
        yield sys.stdin.buffer
        return
    try:
        handle = open(path, "rb")
    except OSError as e:
        raise IoOpenError("input", path, e.strerror or str(e)) from e
    with handle:
        yield handle


@contextmanager
def open_output(path: Optional[str]) -> Iterator[BinaryIO]:
    """Open an output path for binary writing; None is stdout and is left open."""
    if path is None:
        yield sys.stdout.buffer
        return
    try:
        handle = open(path, "wb")
    except OSError as e:
        raise IoOpenError("output", path, e.strerror or str(e)) from e
    with handle:
        yield handle


def run_pipeline(records: Iterable[QualityRecord], transform: QualityTransform,
                 out: BinaryIO) -> PipelineResult:
    """
    Feed records through the transform in input order, writing to out.
    Stops as soon as the transform asks to.
    """
    records_seen = 0
    stopped_early = False
    for record in records:
        records_seen += 1
        if not transform.process(record, out):
            stopped_early = True
            break

    transform.finish(out)
    out.flush()

    logger.debug(f"{transform.kind.value}: {records_seen:,} records processed"
                 + (" (stopped early)" if stopped_early else ""))
    return PipelineResult(records_seen=records_seen, stopped_early=stopped_early)


def process_file(input_path: str, transform: QualityTransform, output_path: Optional[str] = None,
                 max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> PipelineResult:
    """
    Run the transform over input_path, picking FASTQ or SAM from its name.
    The input is opened before the output so a bad input path never truncates an output file.
    Both handles are released on every exit path.
    """
    file_type = detect_file_type(input_path)
    logger.info(f"Processing {input_path} as {file_type.name} ({transform.kind.value})")
    with open_input(input_path) as infile, open_output(output_path) as out:
        records = walk_records(infile, file_type, max_line_length)
        return run_pipeline(records, transform, out)
