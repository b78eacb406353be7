"""Trimming of polyG and generic polyX tails."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .read import Read

_ALLOW_ONE_MISMATCH_FOR_EACH = 8
_MAX_MISMATCH = 5
_BASES = "ATCG"


@dataclass(frozen=True)
class PolyXTrim:
    """A polyX tail that was trimmed: its base and how many bases were cut."""

    base: str
    length: int


def trim_poly_g(read: Read, compare_req: int) -> int:
    """Trim a 3' polyG tail in place and return the number of bases removed."""
    data = read.seq
    rlen = len(data)
    mismatch = 0
    first_g_pos = rlen - 1
    reached = rlen
    for i in range(rlen):
        pos = rlen - i - 1
        if data[pos] != "G":
            mismatch += 1
        else:
            first_g_pos = pos
        allowed = (i + 1) // _ALLOW_ONE_MISMATCH_FOR_EACH
        if mismatch > _MAX_MISMATCH or (mismatch > allowed and i >= compare_req - 1):
            reached = i
            break

    if reached >= compare_req:
        before = len(read)
        read.resize(first_g_pos)
        return before - len(read)
    return 0


def trim_poly_g_pair(r1: Read, r2: Read, compare_req: int) -> tuple[int, int]:
    """Trim polyG tails from both reads of a pair."""
    return trim_poly_g(r1, compare_req), trim_poly_g(r2, compare_req)


def trim_poly_x(read: Read, compare_req: int) -> Optional[PolyXTrim]:
    """Trim a 3' homopolymer tail of any base in place.

    Returns what was trimmed, or None if no polyX tail was found.
    """
    data = read.seq
    rlen = len(data)
    counts = dict.fromkeys(_BASES, 0)

    pos = rlen
    for p in range(rlen):
        base = data[rlen - p - 1]
        if base == "N":
            for b in _BASES:
                counts[b] += 1
        elif base in counts:
            counts[base] += 1

        cmp = p + 1
        allowed = min(_MAX_MISMATCH, cmp // _ALLOW_ONE_MISMATCH_FOR_EACH)
        need_to_break = all(cmp - counts[b] > allowed for b in _BASES)
        if need_to_break and (p >= _ALLOW_ONE_MISMATCH_FOR_EACH or p + 1 >= compare_req - 1):
            pos = p
            break

    if pos + 1 < compare_req:
        return None

    poly_base = max(_BASES, key=lambda b: counts[b])
    while pos >= 0 and (pos >= rlen or data[rlen - pos - 1] != poly_base):
        pos -= 1

    read.resize(rlen - pos - 1)
    return PolyXTrim(poly_base, pos + 1)


def trim_poly_x_pair(
    r1: Read, r2: Read, compare_req: int
) -> tuple[Optional[PolyXTrim], Optional[PolyXTrim]]:
    """Trim polyX tails from both reads of a pair."""
    return trim_poly_x(r1, compare_req), trim_poly_x(r2, compare_req)