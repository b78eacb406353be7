"""Per-cycle quality, base content, k-mer and overrepresentation statistics."""

from __future__ import annotations

import math
from typing import Optional

from .options import Options
from .read import Read

KMER_LEN = 5
KMER_BUF_LEN = 2 << (KMER_LEN * 2)

_Q20 = "5"
_Q30 = "?"
_BASE_VALUES = {"A": 0, "T": 1, "C": 2, "G": 3}
_KMER_BASES = "ATCG"
_CURVE_BASES = "ATCGN"
_LONG_READ_CYCLES = 300


def base2val(base: str) -> int:
    """Return the 2-bit code of an upper-case base, or -1 for anything else."""
    return _BASE_VALUES.get(base, -1)


def kmer3(val: int) -> str:
    """Decode the first three bases of a 5-mer from the high bits of ``val``."""
    return (
        _KMER_BASES[(val & 0x30) >> 4]
        + _KMER_BASES[(val & 0x0C) >> 2]
        + _KMER_BASES[val & 0x03]
    )


def kmer2(val: int) -> str:
    """Decode the last two bases of a 5-mer from the low bits of ``val``."""
    return _KMER_BASES[(val & 0x0C) >> 2] + _KMER_BASES[val & 0x03]


def _bucket(base: str) -> int:
    # A/T/C/G/N fall into distinct buckets by their lowest three bits.
    return ord(base) & 0x07


def _add_prefix(target: list[int], source: list[int], n: int) -> None:
    target[:n] = [a + b for a, b in zip(target[:n], source[:n])]


class Stats:
    """Statistics over the reads of one end (read 1 or read 2)."""

    def __init__(
        self,
        options: Options,
        is_read2: bool = False,
        guessed_cycles: int = 0,
        buffer_margin: int = 1024,
    ) -> None:
        self.options = options
        self.is_read2 = is_read2
        self.evaluated_seq_len = options.seq_len2 if is_read2 else options.seq_len1
        if guessed_cycles == 0:
            guessed_cycles = self.evaluated_seq_len

        buf_len = guessed_cycles + buffer_margin
        self._cycles = guessed_cycles
        self._cycle_q30 = [[0] * buf_len for _ in range(8)]
        self._cycle_q20 = [[0] * buf_len for _ in range(8)]
        self._cycle_contents = [[0] * buf_len for _ in range(8)]
        self._cycle_base_qual = [[0] * buf_len for _ in range(8)]
        self._cycle_total_base = [0] * buf_len
        self._cycle_total_qual = [0] * buf_len

        self.kmer = [0] * KMER_BUF_LEN
        self.kmer_buf_len = KMER_BUF_LEN
        self.kmer_min = 0
        self.kmer_max = 0

        self._reads = 0
        self._length_sum = 0
        self._bases = 0
        self._q20_total = 0
        self._q30_total = 0
        self.q20_bases = [0] * 8
        self.q30_bases = [0] * 8
        self.base_contents = [0] * 8

        self.quality_curves: dict[str, list[float]] = {}
        self.content_curves: dict[str, list[float]] = {}

        seeds = options.over_rep_seqs2 if is_read2 else options.over_rep_seqs1
        self.over_rep_seq: dict[str, int] = {seq: 0 for seq in seeds}
        self.over_rep_seq_dist: dict[str, list[int]] = {
            seq: [0] * self.evaluated_seq_len for seq in seeds
        }
        self._summarized = False

    def _extend_buffer(self, new_len: int) -> None:
        extra = new_len - len(self._cycle_total_base)
        if extra <= 0:
            return
        for arrays in (self._cycle_q30, self._cycle_q20, self._cycle_contents, self._cycle_base_qual):
            for arr in arrays:
                arr.extend([0] * extra)
        self._cycle_total_base.extend([0] * extra)
        self._cycle_total_qual.extend([0] * extra)

    def stat_read(self, read: Read) -> None:
        """Add one read to the statistics."""
        seq = read.seq
        length = len(seq)
        self._length_sum += length
        if len(self._cycle_total_base) < length:
            self._extend_buffer(max(length + 100, int(length * 1.5)))

        for i, (base, qual) in enumerate(zip(seq, read.quality)):
            b = _bucket(base)
            score = ord(qual) - 33
            if qual >= _Q30:
                self._cycle_q30[b][i] += 1
                self._cycle_q20[b][i] += 1
            elif qual >= _Q20:
                self._cycle_q20[b][i] += 1
            self._cycle_contents[b][i] += 1
            self._cycle_base_qual[b][i] += score
            self._cycle_total_base[i] += 1
            self._cycle_total_qual[i] += score

        self._count_kmers(seq)

        analysis = self.options.over_rep_analysis
        if analysis.enabled and self._reads % analysis.sampling == 0:
            self._count_over_rep(seq)

        self._reads += 1

    def _count_kmers(self, seq: str) -> None:
        for i in range(KMER_LEN - 1, len(seq)):
            window = seq[i - KMER_LEN + 1:i + 1]
            value = 0
            for base in window:
                code = _BASE_VALUES.get(base)
                if code is None:
                    break
                value = (value << 2) | code
            else:
                self.kmer[value] += 1

    def _count_over_rep(self, seq: str) -> None:
        length = len(seq)
        steps = (10, 20, 40, 100, min(150, self.evaluated_seq_len - 2))
        for step in steps:
            i = 0
            while i < length - step:
                sub = seq[i:i + step]
                if sub in self.over_rep_seq:
                    self.over_rep_seq[sub] += 1
                    dist = self.over_rep_seq_dist[sub]
                    for p in range(i, min(i + len(sub), self.evaluated_seq_len)):
                        dist[p] += 1
                    i += step
                i += 1

    def summarize(self, forced: bool = False) -> None:
        """Compute totals and curves from the per-cycle counters."""
        if self._summarized and not forced:
            return

        totals = self._cycle_total_base
        cycles = next((c for c, t in enumerate(totals) if t == 0), len(totals))
        self._cycles = cycles
        self._bases = sum(totals[:cycles])

        for i in range(8):
            self.q20_bases[i] = sum(self._cycle_q20[i][:cycles])
            self.q30_bases[i] = sum(self._cycle_q30[i][:cycles])
            self.base_contents[i] = sum(self._cycle_contents[i][:cycles])
        self._q20_total = sum(self.q20_bases)
        self._q30_total = sum(self.q30_bases)

        total_base = totals[:cycles]
        mean_curve = [q / t for q, t in zip(self._cycle_total_qual[:cycles], total_base)]
        self.quality_curves = {"mean": mean_curve}
        self.content_curves = {}

        for base in _CURVE_BASES:
            b = _bucket(base)
            counts = self._cycle_contents[b][:cycles]
            quals = self._cycle_base_qual[b][:cycles]
            self.quality_curves[base] = [
                mean if count == 0 else q / count
                for mean, q, count in zip(mean_curve, quals, counts)
            ]
            self.content_curves[base] = [count / t for count, t in zip(counts, total_base)]

        g_counts = self._cycle_contents[_bucket("G")][:cycles]
        c_counts = self._cycle_contents[_bucket("C")][:cycles]
        self.content_curves["GC"] = [
            (g + c) / t for g, c, t in zip(g_counts, c_counts, total_base)
        ]

        self.kmer_min = min(self.kmer)
        self.kmer_max = max(self.kmer)
        self._summarized = True

    @classmethod
    def merge(cls, stats_list: list[Stats]) -> Optional[Stats]:
        """Combine the statistics of several workers into one, or None if empty."""
        if not stats_list:
            return None

        for stats in stats_list:
            stats.summarize()
        cycles = max(0, *(stats.cycles() for stats in stats_list))

        first = stats_list[0]
        merged = cls(first.options, first.is_read2, cycles, 0)

        for other in stats_list:
            n = min(cycles, other.cycles())
            merged._reads += other._reads
            merged._length_sum += other._length_sum

            for i in range(8):
                _add_prefix(merged._cycle_q30[i], other._cycle_q30[i], n)
                _add_prefix(merged._cycle_q20[i], other._cycle_q20[i], n)
                _add_prefix(merged._cycle_contents[i], other._cycle_contents[i], n)
                _add_prefix(merged._cycle_base_qual[i], other._cycle_base_qual[i], n)
            _add_prefix(merged._cycle_total_base, other._cycle_total_base, n)
            _add_prefix(merged._cycle_total_qual, other._cycle_total_qual, n)

            merged.kmer = [a + b for a, b in zip(merged.kmer, other.kmer)]

            for seq in merged.over_rep_seq:
                merged.over_rep_seq[seq] += other.over_rep_seq.get(seq, 0)
                dist = other.over_rep_seq_dist.get(seq)
                if dist:
                    _add_prefix(
                        merged.over_rep_seq_dist[seq],
                        dist,
                        min(merged.evaluated_seq_len, len(dist)),
                    )

        merged.summarize()
        return merged

    def cycles(self) -> int:
        if not self._summarized:
            self.summarize()
        return self._cycles

    def reads(self) -> int:
        if not self._summarized:
            self.summarize()
        return self._reads

    def bases(self) -> int:
        if not self._summarized:
            self.summarize()
        return self._bases

    def q20(self) -> int:
        if not self._summarized:
            self.summarize()
        return self._q20_total

    def q30(self) -> int:
        if not self._summarized:
            self.summarize()
        return self._q30_total

    def gc_number(self) -> int:
        if not self._summarized:
            self.summarize()
        return self.base_contents[_bucket("G")] + self.base_contents[_bucket("C")]

    def mean_length(self) -> int:
        """Mean read length, truncated to an integer; 0 if no reads were seen."""
        if self._reads == 0:
            return 0
        return self._length_sum // self._reads

    def summary_text(self) -> str:
        """The short human-readable summary of totals and Q20/Q30 rates."""
        if not self._summarized:
            self.summarize()

        def percent(count: int) -> str:
            value = count * 100.0 / self._bases if self._bases else math.nan
            return f"{value:g}"

        return (
            f"total reads: {self._reads}\n"
            f"total bases: {self._bases}\n"
            f"Q20 bases: {self._q20_total}({percent(self._q20_total)}%)\n"
            f"Q30 bases: {self._q30_total}({percent(self._q30_total)}%)\n"
        )

    def is_long_read(self) -> bool:
        return self._cycles > _LONG_READ_CYCLES

    def over_rep_passed(self, seq: str, count: int) -> bool:
        """Whether a sampled count is high enough to report ``seq`` as overrepresented."""
        scaled = self.options.over_rep_analysis.sampling * count
        thresholds = {10: 500, 20: 200, 40: 100, 100: 50}
        return scaled > thresholds.get(len(seq), 20)