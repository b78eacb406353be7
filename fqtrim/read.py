"""FASTQ read records and simple paired-read merging."""

from __future__ import annotations

from dataclasses import InitVar, dataclass
from typing import Optional

from .sequence import reverse_complement

_MIN_FAST_MERGE_OVERLAP = 30
_HIGH_QUAL = "?"  # Q30
_LOW_QUAL = "0"  # Q15


@dataclass
class Read:
    """A single sequencing read: name, bases, strand line and qualities."""

    name: str
    seq: str
    strand: str = "+"
    quality: str = ""
    phred64: InitVar[bool] = False

    def __post_init__(self, phred64: bool) -> None:
        if phred64:
            self.convert_phred64_to_33()

    def __len__(self) -> int:
        return len(self.seq)

    def convert_phred64_to_33(self) -> None:
        """Shift Phred+64 quality characters to Phred+33, clamping at '!'."""
        self.quality = "".join(chr(max(33, ord(q) - 31)) for q in self.quality)

    def reverse_complement(self) -> Read:
        """Return a new read with reverse-complemented bases and flipped strand."""
        strand = "-" if self.strand == "+" else "+"
        return Read(self.name, reverse_complement(self.seq), strand, self.quality[::-1])

    def last_index(self) -> str:
        """Return the text after the last ':' or '+' in the name."""
        if len(self.name) < 5:
            return ""
        for i in range(len(self.name) - 3, -1, -1):
            if self.name[i] in ":+":
                return self.name[i + 1:]
        return ""

    def first_index(self) -> str:
        """Return the first index of a dual-index name (between ':' and '+')."""
        if len(self.name) < 5:
            return ""
        end = len(self.name)
        for i in range(len(self.name) - 3, -1, -1):
            if self.name[i] == "+":
                end = i - 1
            if self.name[i] == ":":
                return self.name[i + 1:end + 1]
        return ""

    def low_qual_count(self, qual: int = 20) -> int:
        """Count bases whose quality is below ``qual``."""
        threshold = qual + 33
        return sum(1 for q in self.quality if ord(q) < threshold)

    def to_fastq(self) -> str:
        return f"{self.name}\n{self.seq}\n{self.strand}\n{self.quality}\n"

    def to_fastq_with_tag(self, tag: str) -> str:
        return f"{self.name} {tag}\n{self.seq}\n{self.strand}\n{self.quality}\n"

    def resize(self, length: int) -> None:
        """Truncate the read to ``length``; out-of-range values are ignored."""
        if length > len(self) or length < 0:
            return
        self.seq = self.seq[:length]
        self.quality = self.quality[:length]

    def trim_front(self, length: int) -> None:
        """Remove up to ``length`` leading bases, always keeping at least one."""
        length = min(len(self) - 1, length)
        if length < 0:
            raise ValueError("cannot trim the front of an empty read")
        self.seq = self.seq[length:]
        self.quality = self.quality[length:]

    def fix_mgi(self) -> bool:
        """Separate a trailing '/1' or '/2' from the name with a space."""
        if len(self.name) >= 2 and self.name[-1] in "12" and self.name[-2] == "/":
            self.name = f"{self.name[:-2]} {self.name[-2:]}"
            return True
        return False


@dataclass
class ReadPair:
    """Read 1 and read 2 of a paired-end fragment."""

    left: Read
    right: Read

    def fast_merge(self) -> Optional[Read]:
        """Merge the pair by a strict tail overlap, or return None.

        At least 30 bases must overlap. Mismatches are only tolerated where
        one base is high quality and the other low quality, and then fewer
        than three of them.
        """
        rc_right = self.right.reverse_complement()
        str1, qual1 = self.left.seq, self.left.quality
        str2, qual2 = rc_right.seq, rc_right.quality
        len1, len2 = len(str1), len(str2)

        olen = _MIN_FAST_MERGE_OVERLAP
        diff = 0
        overlapped = False
        while olen <= min(len1, len2):
            diff = 0
            low_qual_diff = 0
            ok = True
            offset = len1 - olen
            for i in range(olen):
                if str1[offset + i] == str2[i]:
                    continue
                diff += 1
                q1, q2 = qual1[offset + i], qual2[i]
                if (q1 >= _HIGH_QUAL and q2 <= _LOW_QUAL) or (q1 <= _LOW_QUAL and q2 >= _HIGH_QUAL):
                    low_qual_diff += 1
                if diff > low_qual_diff or low_qual_diff >= 3:
                    ok = False
                    break
            if ok:
                overlapped = True
                break
            olen += 1

        if not overlapped:
            return None

        offset = len1 - olen
        name = f"{self.left.name} merged offset:{offset} overlap:{olen} diff:{diff}"
        merged_seq = list(str1[:offset] + str2)
        merged_qual = list(qual1[:offset] + qual2)
        for i in range(olen):
            b1, b2 = str1[offset + i], str2[i]
            q1, q2 = qual1[offset + i], qual2[i]
            if b1 != b2:
                if q1 >= _HIGH_QUAL and q2 <= _LOW_QUAL:
                    merged_seq[offset + i], merged_qual[offset + i] = b1, q1
                else:
                    merged_seq[offset + i], merged_qual[offset + i] = b2, q2
            else:
                merged_qual[offset + i] = chr(ord(q1) + ord(q2) - 33)
        return Read(name, "".join(merged_seq), "+", "".join(merged_qual))