from typing import Optional, Sequence

import numpy as np

from quality_errors import QualityRangeError

PHRED_OFFSET = 33
PHRED_ALPHABET_SIZE = 64

# Illumina 8-bin (qualimetry) representatives, indexed by raw Phred score 0-63
ILLUMINA_8BIN = (
    0, 1, 6, 6, 6, 6, 6, 6, 6, 6, 15, 15, 15, 15, 15, 15,
    15, 15, 15, 15, 22, 22, 22, 22, 22, 27, 27, 27, 27, 27, 33, 33,
    33, 33, 33, 37, 37, 37, 37, 37, 40, 40, 40, 40, 40, 40, 40, 40,
    40, 40, 40, 40, 40, 40, 40, 40, 40, 40, 40, 40, 40, 40, 40, 40,
)


def _quality_bytes(quality: bytes, phred_offset: int, record_index: int) -> np.ndarray:
    """
    View a quality span as uint8 and reject anything outside the 64-symbol alphabet.
    Returns: np.ndarray of the raw ASCII bytes
    """
    if not quality:
        return np.zeros(0, dtype=np.uint8)
    raw = np.frombuffer(quality, dtype=np.uint8)
    out_of_range = np.flatnonzero(
        (raw < phred_offset) | (raw >= phred_offset + PHRED_ALPHABET_SIZE)
    )
    if out_of_range.size:
        pos = int(out_of_range[0])
        raise QualityRangeError(record_index, pos, int(raw[pos]))
    return raw


def decode_phred33(quality: bytes, record_index: int = 0) -> np.ndarray:
    """Convert a Phred+33 span into integer quality scores (0-63)"""
    raw = _quality_bytes(quality, PHRED_OFFSET, record_index)
    return raw.astype(np.int64) - PHRED_OFFSET


def encode_phred33(quality_scores: np.ndarray) -> bytes:
    return (np.asarray(quality_scores, dtype=np.int64) + PHRED_OFFSET).astype(np.uint8).tobytes()


class QualityTable:
    """
    Fixed mapping from raw quality score to its bin representative.

    The lookup arrays are built once and marked read-only, so a table can be
    shared by every transform in the process.
    """

    def __init__(self, name: str, values: Sequence[int], phred_offset: int = PHRED_OFFSET):
        table = np.array(values, dtype=np.int64)
        if table.shape != (PHRED_ALPHABET_SIZE,):
            raise ValueError(f"Quality table {name} needs {PHRED_ALPHABET_SIZE} entries, got {table.size}")
        if np.any(table < 0) or np.any(table >= PHRED_ALPHABET_SIZE):
            raise ValueError(f"Quality table {name} has representatives outside 0-63")

        self.name = name
        self.phred_offset = phred_offset
        self.table = table.astype(np.uint8)
        self.table.setflags(write=False)

        # ASCII byte -> quantized ASCII byte, identity outside the alphabet
        byte_map = np.arange(256, dtype=np.uint8)
        byte_map[phred_offset:phred_offset + PHRED_ALPHABET_SIZE] = self.table + phred_offset
        byte_map.setflags(write=False)
        self.byte_map = byte_map

    def __repr__(self) -> str:
        return f"QualityTable({self.name!r}, bins={sorted(set(self.table.tolist()))})"

    def representative(self, score: int) -> int:
        return int(self.table[score])

    def quantize_byte(self, value: int) -> int:
        if value < self.phred_offset or value >= self.phred_offset + PHRED_ALPHABET_SIZE:
            raise QualityRangeError(0, 0, value)
        return int(self.byte_map[value])

    def quantize(self, quality: bytes, record_index: int = 0) -> bytes:
        raw = _quality_bytes(quality, self.phred_offset, record_index)
        return self.byte_map[raw].tobytes()

    def first_mismatch(self, quality: bytes, record_index: int = 0) -> Optional[int]:
        """
        Find the first byte that is not already a bin representative.
        Returns: offset within the span, or None when the span conforms
        """
        if not quality:
            return None
        raw = np.frombuffer(quality, dtype=np.uint8)
        out_of_range = (raw < self.phred_offset) | (raw >= self.phred_offset + PHRED_ALPHABET_SIZE)
        # Bytes after the first mismatch are never range-checked
        mismatches = np.flatnonzero((self.byte_map[raw] != raw) | out_of_range)
        if mismatches.size == 0:
            return None
        pos = int(mismatches[0])
        if out_of_range[pos]:
            raise QualityRangeError(record_index, pos, int(raw[pos]))
        return pos

    def conforms(self, quality: bytes, record_index: int = 0) -> bool:
        return self.first_mismatch(quality, record_index) is None


IL8B = QualityTable("IL8B", ILLUMINA_8BIN)
