import logging
from enum import Enum
from typing import BinaryIO, Optional

from data_structures import QualityRecord
from pblock_engine import pblock
from quality_errors import MalformedRecordError
from quality_processing import IL8B, QualityTable, decode_phred33, encode_phred33
from record_walker import DEFAULT_MAX_LINE_LENGTH, LineReader, content_end

logger = logging.getLogger(__name__)


class TransformKind(Enum):
    QUANTIZE = "quantize"
    VERIFY = "verify"
    COMPRESS = "compress"
    EXTRACT = "extract"
    MERGE_INJECT = "merge_inject"


class QualityTransform:
    """
    Per-record behaviour plugged into the pipeline.

    process() handles one record and returns False to stop reading the input.
    finish() runs once after the last record.
    """
    kind: TransformKind

    def process(self, record: QualityRecord, out: BinaryIO) -> bool:
        raise NotImplementedError

    def finish(self, out: BinaryIO) -> None:
        pass


class QuantizeTransform(QualityTransform):
    kind = TransformKind.QUANTIZE

    def __init__(self, table: QualityTable = IL8B):
        self.table = table

    def process(self, record, out):
        if record.has_quality:
            out.write(record.with_quality(self.table.quantize(record.quality, record.index)))
        else:
            out.write(record.to_bytes())
        return True


class VerifyTransform(QualityTransform):
    """Checks every span against the table and stops at the first non-conforming byte."""
    kind = TransformKind.VERIFY

    def __init__(self, table: QualityTable = IL8B):
        self.table = table
        self.conformant = True
        self.failed_record: Optional[int] = None
        self.failed_offset: Optional[int] = None

    def process(self, record, out):
        if not record.has_quality:
            return True
        offset = self.table.first_mismatch(record.quality, record.index)
        if offset is None:
            return True
        self.conformant = False
        self.failed_record = record.index
        self.failed_offset = offset
        logger.debug(f"Record {record.index} is not {self.table.name}-quantized "
                     f"(quality offset {offset})")
        return False


class CompressTransform(QualityTransform):
    kind = TransformKind.COMPRESS

    def __init__(self, two_p: int):
        if two_p < 0:
            raise ValueError(f"two_p must be a non-negative integer, got {two_p}")
        self.two_p = two_p

    def process(self, record, out):
        if record.has_quality:
            quals = decode_phred33(record.quality, record.index)
            out.write(record.with_quality(encode_phred33(pblock(quals, self.two_p))))
        else:
            out.write(record.to_bytes())
        return True


class ExtractTransform(QualityTransform):
    """Writes only the quality span of each record, one line per record."""
    kind = TransformKind.EXTRACT

    def process(self, record, out):
        if record.has_quality:
            out.write(record.quality)
            out.write(b"\n")
        return True


class MergeInjectTransform(QualityTransform):
    """
    Swaps each record's quality span for the next line of a second stream.
    Both streams must be aligned one quality line per record with a span.
    """
    kind = TransformKind.MERGE_INJECT

    def __init__(self, secondary: BinaryIO, max_line_length: int = DEFAULT_MAX_LINE_LENGTH):
        self.secondary = LineReader(secondary, max_line_length)
        self.lines_used = 0

    def process(self, record, out):
        if not record.has_quality:
            out.write(record.to_bytes())
            return True
        line = self.secondary.readline()
        if not line:
            raise MalformedRecordError(
                f"Failed to read quality score entry for record {record.index}: "
                f"secondary stream ended after {self.lines_used} lines"
            )
        self.lines_used += 1
        out.write(record.with_quality(line[:content_end(line)]))
        return True

    def finish(self, out):
        if self.secondary.readline():
            logger.warning(f"Secondary stream has unused quality lines after "
                           f"{self.lines_used} merged records")


def build_transform(kind: TransformKind, **options) -> QualityTransform:
    """
    Select the handler for a transform kind once, at startup.
    Options: table (QUANTIZE/VERIFY), two_p (COMPRESS), secondary and max_line_length (MERGE_INJECT)
    """
    if kind == TransformKind.QUANTIZE:
        return QuantizeTransform(options.get("table", IL8B))
    elif kind == TransformKind.VERIFY:
        return VerifyTransform(options.get("table", IL8B))
    elif kind == TransformKind.COMPRESS:
        return CompressTransform(options["two_p"])
    elif kind == TransformKind.EXTRACT:
        return ExtractTransform()
    elif kind == TransformKind.MERGE_INJECT:
        return MergeInjectTransform(
            options["secondary"],
            options.get("max_line_length", DEFAULT_MAX_LINE_LENGTH),
        )
    raise ValueError(f"Unknown transform kind: {kind}")
