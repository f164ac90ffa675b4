from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class SeqFileType(Enum):
    SAM = "sam"
    FASTQ = "fastq"


STDIN_SENTINEL = "-"


@dataclass
class QualityRecord:
    index: int
    lines: List[bytes] = field(default_factory=list)
    qual_line: Optional[int] = None
    qual_start: int = 0
    qual_end: int = 0

    @property
    def has_quality(self) -> bool:
        return self.qual_line is not None

    @property
    def quality(self) -> bytes:
        """Raw Phred+33 bytes of the located quality span (empty when there is none)"""
        if self.qual_line is None:
            return b""
        return self.lines[self.qual_line][self.qual_start:self.qual_end]

    def to_bytes(self) -> bytes:
        return b"".join(self.lines)

    def with_quality(self, new_quality: bytes) -> bytes:
        """
        Rebuild the record with the quality span swapped for new_quality.
        Everything outside the span is written back byte for byte.
        """
        if self.qual_line is None:
            return self.to_bytes()
        line = self.lines[self.qual_line]
        rebuilt = line[:self.qual_start] + new_quality + line[self.qual_end:]
        return b"".join(
            rebuilt if i == self.qual_line else other for i, other in enumerate(self.lines)
        )


@dataclass
class PBlockRun:
    start: int
    end: int
    representative: int

    def __len__(self) -> int:
        return self.end - self.start


def detect_file_type(path: str) -> SeqFileType:
    """
    Pick the record layout from the input name.
    Stdin is always read as FASTQ, otherwise only a '.fastq' suffix (case-sensitive) means FASTQ.
    """
    if path == STDIN_SENTINEL:
        return SeqFileType.FASTQ
    if path.endswith(".fastq"):
        return SeqFileType.FASTQ
    return SeqFileType.SAM
