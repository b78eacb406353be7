"""Run-time options for read trimming, filtering and reporting."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path

_BARCODE_BASES = frozenset("ATCG")


class OptionsError(ValueError):
    """Raised when options are inconsistent or an input file is unusable."""


class UmiLocation(IntEnum):
    """Where a UMI is taken from."""

    NONE = 0
    INDEX1 = 1
    INDEX2 = 2
    READ1 = 3
    READ2 = 4
    PER_INDEX = 5
    PER_READ = 6


@dataclass
class MergeOptions:
    enabled: bool = False
    include_unmerged: bool = False
    out: str = ""


@dataclass
class DuplicationOptions:
    enabled: bool = True
    keylen: int = 12
    hist_size: int = 32


@dataclass
class IndexFilterOptions:
    blacklist1: list[str] = field(default_factory=list)
    blacklist2: list[str] = field(default_factory=list)
    enabled: bool = False
    threshold: int = 0


@dataclass
class LowComplexityFilterOptions:
    enabled: bool = False
    threshold: float = 0.3


@dataclass
class OverrepresentedSequenceAnalysisOptions:
    enabled: bool = False
    sampling: int = 20


@dataclass
class PolyGTrimmerOptions:
    enabled: bool = False
    min_len: int = 10


@dataclass
class PolyXTrimmerOptions:
    enabled: bool = False
    min_len: int = 10


@dataclass
class UMIOptions:
    enabled: bool = False
    location: UmiLocation = UmiLocation.NONE
    length: int = 0
    skip: int = 0
    prefix: str = ""
    separator: str = ""


@dataclass
class CorrectionOptions:
    enabled: bool = False


@dataclass
class QualityCutOptions:
    """Sliding-window quality cutting at the 5' end, 3' end and aggressively."""

    enabled_front: bool = False
    enabled_tail: bool = False
    enabled_right: bool = False
    window_size_shared: int = 4
    quality_shared: int = 20
    window_size_front: int = 4
    quality_front: int = 20
    window_size_tail: int = 4
    quality_tail: int = 20
    window_size_right: int = 4
    quality_right: int = 20


@dataclass
class SplitOptions:
    """Splitting the output into several files."""

    enabled: bool = False
    number: int = 0
    size: int = 0
    digits: int = 4
    need_evaluation: bool = False
    by_file_number: bool = False
    by_file_lines: bool = False


@dataclass
class AdapterOptions:
    enabled: bool = True
    sequence: str = ""
    sequence_r2: str = ""
    detected_adapter1: str = ""
    detected_adapter2: str = ""
    seqs_in_fasta: list[str] = field(default_factory=list)
    fasta_file: str = ""
    has_seq_r1: bool = False
    has_seq_r2: bool = False
    has_fasta: bool = False
    detect_adapter_for_pe: bool = False


@dataclass
class TrimmingOptions:
    front1: int = 0
    tail1: int = 0
    front2: int = 0
    tail2: int = 0
    max_len1: int = 0
    max_len2: int = 0


@dataclass
class QualityFilteringOptions:
    """Per-read quality filter; ``qualified_qual`` is a Phred+33 character."""

    enabled: bool = True
    qualified_qual: str = "0"  # Q15
    unqualified_percent_limit: int = 40
    n_base_limit: int = 5
    avg_qual_req: int = 0


@dataclass
class ReadLengthFilteringOptions:
    enabled: bool = False
    required_length: int = 15
    max_length: int = 0


def load_barcode_list(path: str | Path) -> list[str]:
    """Read one A/T/C/G barcode per line from ``path``."""
    path = Path(path)
    print(f"filter by index, loading {path}", file=sys.stderr)
    try:
        text = path.read_text(newline="")
    except OSError as exc:
        raise OptionsError(f"cannot read {path}: {exc}") from exc

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    barcodes = []
    for line in lines:
        if len(line) >= 2 and line[-1] in "\r\n":
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        if not set(line) <= _BARCODE_BASES:
            raise OptionsError(
                f"processing {path}, each line should be one barcode, "
                "which can only contain A/T/C/G"
            )
        print(line, file=sys.stderr)
        barcodes.append(line)
    print(file=sys.stderr)
    return barcodes


def _check_file_valid(path: str) -> None:
    p = Path(path)
    if not p.exists():
        raise OptionsError(f"{path} does not exist")
    if p.is_dir():
        raise OptionsError(f"{path} is a directory, not a file")


@dataclass
class Options:
    """All settings of one processing run."""

    in1: str = ""
    in2: str = ""
    out1: str = ""
    out2: str = ""
    unpaired1: str = ""
    unpaired2: str = ""
    failed_out: str = ""
    overlapped_out: str = ""
    json_file: str = ""
    html_file: str = ""
    report_title: str = "fqtrim report"
    compression: int = 2
    phred64: bool = False
    dont_overwrite: bool = False
    input_from_stdin: bool = False
    output_to_stdout: bool = False
    interleaved_input: bool = False
    reads_to_process: int = 0
    fix_mgi: bool = False
    thread: int = 1
    trim: TrimmingOptions = field(default_factory=TrimmingOptions)
    qualfilter: QualityFilteringOptions = field(default_factory=QualityFilteringOptions)
    length_filter: ReadLengthFilteringOptions = field(default_factory=ReadLengthFilteringOptions)
    adapter: AdapterOptions = field(default_factory=AdapterOptions)
    split: SplitOptions = field(default_factory=SplitOptions)
    quality_cut: QualityCutOptions = field(default_factory=QualityCutOptions)
    correction: CorrectionOptions = field(default_factory=CorrectionOptions)
    umi: UMIOptions = field(default_factory=UMIOptions)
    poly_g_trim: PolyGTrimmerOptions = field(default_factory=PolyGTrimmerOptions)
    poly_x_trim: PolyXTrimmerOptions = field(default_factory=PolyXTrimmerOptions)
    over_rep_analysis: OverrepresentedSequenceAnalysisOptions = field(
        default_factory=OverrepresentedSequenceAnalysisOptions
    )
    over_rep_seqs1: dict[str, int] = field(default_factory=dict)
    over_rep_seqs2: dict[str, int] = field(default_factory=dict)
    seq_len1: int = 151
    seq_len2: int = 151
    complexity_filter: LowComplexityFilterOptions = field(default_factory=LowComplexityFilterOptions)
    index_filter: IndexFilterOptions = field(default_factory=IndexFilterOptions)
    duplicate: DuplicationOptions = field(default_factory=DuplicationOptions)
    insert_size_max: int = 512
    overlap_require: int = 30
    overlap_diff_limit: int = 5
    overlap_diff_percent_limit: int = 20
    verbose: bool = False
    merge: MergeOptions = field(default_factory=MergeOptions)

    def is_paired(self) -> bool:
        return bool(self.in2) or self.interleaved_input

    def adapter_cutting_enabled(self) -> bool:
        return self.adapter.enabled and (self.is_paired() or bool(self.adapter.sequence))

    def poly_x_trimming_enabled(self) -> bool:
        return self.poly_x_trim.enabled

    def shall_detect_adapter(self, is_r2: bool = False) -> bool:
        """Whether the adapter of read 1 (or read 2) is to be detected automatically."""
        if not self.adapter.enabled:
            return False
        if is_r2:
            return (
                self.is_paired()
                and self.adapter.detect_adapter_for_pe
                and self.adapter.sequence_r2 == "auto"
            )
        if self.is_paired():
            return self.adapter.detect_adapter_for_pe and self.adapter.sequence == "auto"
        return self.adapter.sequence == "auto"

    def adapter1_name(self) -> str:
        if self.adapter.sequence in ("", "auto"):
            return "unspecified"
        return self.adapter.sequence

    def adapter2_name(self) -> str:
        if self.adapter.sequence_r2 in ("", "auto"):
            return "unspecified"
        return self.adapter.sequence_r2

    def init_index_filtering(
        self, blacklist_file1: str = "", blacklist_file2: str = "", threshold: int = 0
    ) -> None:
        """Load index blacklists and enable index filtering if any barcode was given."""
        if not blacklist_file1 and not blacklist_file2:
            return
        if blacklist_file1:
            _check_file_valid(blacklist_file1)
            self.index_filter.blacklist1 = load_barcode_list(blacklist_file1)
        if blacklist_file2:
            _check_file_valid(blacklist_file2)
            self.index_filter.blacklist2 = load_barcode_list(blacklist_file2)
        if not self.index_filter.blacklist1 and not self.index_filter.blacklist2:
            return
        self.index_filter.enabled = True
        self.index_filter.threshold = threshold