"""Overlap detection and merging of paired-end reads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .read import Read
from .sequence import reverse_complement

_COMPLETE_COMPARE_REQUIRE = 50


@dataclass(frozen=True)
class OverlapResult:
    """Where read 2's reverse complement lies against read 1."""

    overlapped: bool
    offset: int
    overlap_len: int
    diff: int


def _compare(a: str, a_start: int, b: str, b_start: int, length: int, limit: int) -> tuple[int, int]:
    """Count mismatches; stop early only within the first bases compared.

    Returns the mismatch count and the position reached.
    """
    diff = 0
    for i in range(length):
        if a[a_start + i] != b[b_start + i]:
            diff += 1
            if diff > limit and i < _COMPLETE_COMPARE_REQUIRE:
                return diff, i
    return diff, length


def _accepted(diff: int, limit: int, reached: int) -> bool:
    return diff <= limit or reached > _COMPLETE_COMPARE_REQUIRE


def analyze(
    seq1: str,
    seq2: str,
    diff_limit: int,
    overlap_require: int,
    diff_percent_limit: float,
) -> OverlapResult:
    """Find the overlap of ``seq1`` with the reverse complement of ``seq2``."""
    rc2 = reverse_complement(seq2)
    len1, len2 = len(seq1), len(rc2)

    offset = 0
    while offset < len1 - overlap_require:
        overlap_len = min(len1 - offset, len2)
        limit = min(diff_limit, int(overlap_len * diff_percent_limit))
        diff, reached = _compare(seq1, offset, rc2, 0, overlap_len, limit)
        if _accepted(diff, limit, reached):
            return OverlapResult(True, offset, overlap_len, diff)
        offset += 1

    # Insert shorter than the read length: read-through into the adapter.
    offset = 0
    while offset > -(len2 - overlap_require):
        overlap_len = min(len1, len2 - abs(offset))
        limit = min(diff_limit, int(overlap_len * diff_percent_limit))
        diff, reached = _compare(seq1, 0, rc2, -offset, overlap_len, limit)
        if _accepted(diff, limit, reached):
            return OverlapResult(True, offset, overlap_len, diff)
        offset -= 1

    return OverlapResult(False, 0, 0, 0)


def analyze_reads(
    r1: Read,
    r2: Read,
    diff_limit: int,
    overlap_require: int,
    diff_percent_limit: float,
) -> OverlapResult:
    """Run :func:`analyze` on the sequences of two reads."""
    return analyze(r1.seq, r2.seq, diff_limit, overlap_require, diff_percent_limit)


def merge(r1: Read, r2: Read, ov: OverlapResult) -> Optional[Read]:
    """Merge an overlapped pair into one read, or return None."""
    if not ov.overlapped:
        return None
    ol = ov.overlap_len
    len1 = ol + max(0, ov.offset)
    len2 = len(r2) - ol if ov.offset > 0 else 0

    rr2 = r2.reverse_complement()
    merged_seq = r1.seq[:len1]
    merged_qual = r1.quality[:len1]
    if ov.offset > 0:
        merged_seq += rr2.seq[ol:ol + len2]
        merged_qual += rr2.quality[ol:ol + len2]

    name = f"{r1.name} merged_{len1}_{len2}"
    return Read(name, merged_seq, r1.strand, merged_qual)