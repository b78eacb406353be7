# fqtrim

Building blocks for preprocessing FASTQ sequencing reads, in plain Python
with no third-party dependencies.

## Modules

- `fqtrim.sequence` — `reverse_complement(seq)` returns the reverse
  complement of a DNA string. Lower-case bases are complemented to upper
  case; any other character becomes `N`.
- `fqtrim.read` — `Read` is one FASTQ record (`name`, `seq`, `strand`,
  `quality`; pass `phred64=True` to convert qualities to Phred+33 on
  creation). It supports `len()`, `reverse_complement()`, `resize()`,
  `trim_front()`, `convert_phred64_to_33()`, `low_qual_count()`,
  `first_index()` / `last_index()` for barcodes in the read name,
  `fix_mgi()` for `/1` and `/2` name suffixes, and `to_fastq()` /
  `to_fastq_with_tag()`. `ReadPair.fast_merge()` merges a pair by a strict
  overlap of at least 30 bases, using base qualities to resolve mismatches,
  and returns `None` when the pair does not overlap.
- `fqtrim.overlap` — `analyze(seq1, seq2, diff_limit, overlap_require,
  diff_percent_limit)` and `analyze_reads(r1, r2, ...)` find where the
  reverse complement of read 2 lies against read 1 and return an
  `OverlapResult` (`overlapped`, `offset`, `overlap_len`, `diff`).
  `merge(r1, r2, ov)` builds one merged read, or returns `None`.
- `fqtrim.polyx` — `trim_poly_g(read, compare_req)` trims a 3' polyG tail in
  place and returns the number of bases removed; `trim_poly_x(read,
  compare_req)` trims a 3' homopolymer tail of any base and returns a
  `PolyXTrim` (`base`, `length`) or `None`. `trim_poly_g_pair` and
  `trim_poly_x_pair` do the same for both reads of a pair.
- `fqtrim.options` — the `Options` dataclass with its option groups
  (`TrimmingOptions`, `QualityFilteringOptions`, `AdapterOptions`,
  `SplitOptions`, `UMIOptions`, `MergeOptions` and others), the `UmiLocation`
  enum, `load_barcode_list(path)` for index blacklists, and `OptionsError`.
- `fqtrim.validation` — `validate(options)` checks an `Options` object,
  normalises it in place (dropping settings that do not apply, with a
  warning on stderr) and raises `OptionsError` on conflicting or
  out-of-range settings.
- `fqtrim.stats` — `Stats` collects per-cycle quality, base content,
  Q20/Q30, 5-mer and overrepresented-sequence counts; `Stats.merge`
  combines several `Stats` objects and `summary_text()` gives a short
  text summary.
- `fqtrim.statsreport` — `report_json` writes a JSON object fragment and
  `report_html` (with `report_html_quality`, `report_html_contents`,
  `report_html_kmer`, `report_html_ora`) writes HTML sections for a
  `Stats` object to any text stream.

## Example

```python
from fqtrim.read import Read
from fqtrim.polyx import trim_poly_x
from fqtrim.sequence import reverse_complement

print(reverse_complement("AAAATTTTCCCCGGGG"))  # CCCCGGGGAAAATTTT

seq = "ATTTTAAAAAAAAAATAAAAAAAAAAAAACAAAAAAAAAAAAAAAAAAAAAAAAAT"
read = Read("@name", seq, "+", "E" * len(seq))
trimmed = trim_poly_x(read, 10)
print(read.seq)                       # ATTTT
print(trimmed.base, trimmed.length)   # A 51
```

## What it does not do

The package has no command-line program and does not read or write FASTQ
files itself. It has no processing pipeline that runs reads through
trimming, filtering and output, no adapter detection or adapter trimming,
no read filtering by quality, length or index, and no duplication or
insert-size analysis. The report functions write fragments for one set of
statistics; assembling a complete JSON or HTML report is left to the caller.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```