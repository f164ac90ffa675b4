import logging
from typing import BinaryIO, Iterator, Optional, Tuple

import numpy as np

from data_structures import QualityRecord, SeqFileType
from quality_errors import LineTooLongError, MalformedRecordError

logger = logging.getLogger(__name__)

# 1-indexed SAM column carrying the quality string
SAM_QUALITY_COLUMN = 11
SAM_HEADER_PREFIX = b"@"
FASTQ_LINES_PER_RECORD = 4
DEFAULT_MAX_LINE_LENGTH = 1 << 20

_TAB = ord("\t")
_SPACE = ord(" ")


class LineReader:
    """
    Line reader over a binary stream that refuses lines above max_line_length
    instead of truncating them.
    """

    def __init__(self, stream: BinaryIO, max_line_length: int = DEFAULT_MAX_LINE_LENGTH):
        if max_line_length <= 0:
            raise ValueError(f"max_line_length must be positive, got {max_line_length}")
        self.stream = stream
        self.max_line_length = max_line_length
        self.line_number = 0

    def readline(self) -> bytes:
        """Returns: the next line with its terminator, or b'' at end of stream"""
        # Room for max_line_length content bytes plus a \r\n terminator
        line = self.stream.readline(self.max_line_length + 2)
        if not line:
            return line
        self.line_number += 1
        if content_end(line) > self.max_line_length:
            raise LineTooLongError(self.line_number, self.max_line_length)
        return line


def content_end(line: bytes) -> int:
    """Offset where the line's terminator (\\n or \\r\\n) starts."""
    if line.endswith(b"\r\n"):
        return len(line) - 2
    if line.endswith(b"\n"):
        return len(line) - 1
    return len(line)


def locate_sam_quality(line: bytes) -> Optional[Tuple[int, int]]:
    """
    Locate the 11th whitespace-delimited field of a SAM data line.
    Fields are separated by runs of tabs or spaces; the line terminator ends the last field.
    Returns: (start, end) byte offsets, or None when the line has fewer than 11 fields
    """
    end = content_end(line)
    if end == 0:
        return None

    body = np.frombuffer(line, dtype=np.uint8, count=end)
    is_delim = (body == _TAB) | (body == _SPACE)
    prev_delim = np.empty_like(is_delim)
    prev_delim[0] = True
    prev_delim[1:] = is_delim[:-1]

    field_starts = np.flatnonzero(~is_delim & prev_delim)
    if field_starts.size < SAM_QUALITY_COLUMN:
        return None

    start = int(field_starts[SAM_QUALITY_COLUMN - 1])
    following = np.flatnonzero(is_delim[start:])
    stop = start + int(following[0]) if following.size else end
    return start, stop


def _fastq_records(reader: LineReader) -> Iterator[QualityRecord]:
    index = 0
    while True:
        header = reader.readline()
        if not header:
            return
        lines = [header]
        for _ in range(FASTQ_LINES_PER_RECORD - 1):
            line = reader.readline()
            if not line:
                raise MalformedRecordError(
                    f"Failed to read fastq entry {index}: stream ended after "
                    f"{len(lines)} of {FASTQ_LINES_PER_RECORD} lines (header {header.rstrip()!r})"
                )
            lines.append(line)

        qual_line = FASTQ_LINES_PER_RECORD - 1
        yield QualityRecord(
            index=index,
            lines=lines,
            qual_line=qual_line,
            qual_start=0,
            qual_end=content_end(lines[qual_line]),
        )
        index += 1


def _sam_records(reader: LineReader) -> Iterator[QualityRecord]:
    index = 0
    while True:
        line = reader.readline()
        if not line:
            return
        record = QualityRecord(index=index, lines=[line])
        if not line.startswith(SAM_HEADER_PREFIX):
            span = locate_sam_quality(line)
            if span is not None:
                record.qual_line = 0
                record.qual_start, record.qual_end = span
            else:
                logger.debug(f"SAM line {reader.line_number} has fewer than "
                             f"{SAM_QUALITY_COLUMN} fields, passing through")
        yield record
        index += 1


def walk_records(stream: BinaryIO, file_type: SeqFileType,
                 max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> Iterator[QualityRecord]:
    """
    Lazily walk a FASTQ or SAM stream, one QualityRecord per FASTQ block or SAM line.
    SAM header lines and short data lines are yielded without a quality span.
    """
    reader = LineReader(stream, max_line_length)
    if file_type == SeqFileType.FASTQ:
        return _fastq_records(reader)
    return _sam_records(reader)
