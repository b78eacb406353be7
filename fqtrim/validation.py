"""Consistency checks and normalisation of run options."""

from __future__ import annotations

import sys
from pathlib import Path

from .options import Options, OptionsError, UmiLocation

_ADAPTER_BASES = frozenset("ATCG")
_UMI_LOCATIONS_WITH_LENGTH = (UmiLocation.READ1, UmiLocation.READ2, UmiLocation.PER_READ)
_MAX_THREADS = 16


def _warn(message: str = "") -> None:
    print(message, file=sys.stderr)


def _require_input_file(path: str) -> None:
    p = Path(path)
    if not p.exists():
        raise OptionsError(f"{path} does not exist")
    if p.is_dir():
        raise OptionsError(f"{path} is a directory, not a file")


def _exists(path: str) -> bool:
    return bool(path) and Path(path).exists()


def _refuse_overwrite(options: Options, path: str) -> None:
    if options.dont_overwrite and _exists(path):
        raise OptionsError(
            f"{path} already exists and you have set to not rewrite output files by --dont_overwrite"
        )


def _check_range(value: int, low: int, high: int, message: str) -> None:
    if value < low or value > high:
        raise OptionsError(message)


def _validate_inputs(options: Options) -> None:
    if not options.in1:
        if options.in2:
            raise OptionsError(
                "read2 input is specified by <in2>, but read1 input is not specified by <in1>"
            )
        if not options.input_from_stdin:
            raise OptionsError(
                "read1 input should be specified by --in1, or enable --stdin if you want to read STDIN"
            )
        options.in1 = "/dev/stdin"
    else:
        _require_input_file(options.in1)
    if options.in2:
        _require_input_file(options.in2)


def _validate_merge(options: Options) -> None:
    merge = options.merge
    if not merge.enabled:
        if merge.out:
            _warn(
                "You haven't enabled merging mode (-m/--merge), ignoring argument "
                f"--merged_out = {merge.out}"
            )
            merge.out = ""
        return

    if options.split.enabled:
        raise OptionsError("splitting mode cannot work with merging mode")
    if not options.in2 and not options.interleaved_input:
        raise OptionsError("read2 input should be specified by --in2 for merging mode")
    options.correction.enabled = True

    if not merge.out and not options.output_to_stdout and options.out1 and not options.out2:
        _warn(
            "You specified --out1, but haven't specified --merged_out in merging mode. "
            "Using --out1 to store the merged reads to be compatible with fastp 0.19.8"
        )
        _warn()
        merge.out = options.out1
        options.out1 = ""

    if merge.include_unmerged:
        for attr, flag in (
            ("out1", "--out1"),
            ("out2", "--out2"),
            ("unpaired1", "--unpaired1"),
            ("unpaired2", "--unpaired2"),
        ):
            value = getattr(options, attr)
            if value:
                _warn(
                    "You specified --include_unmerged in merging mode. "
                    f"Ignoring argument {flag} = {value}"
                )
                setattr(options, attr, "")

    if not merge.out and not options.output_to_stdout:
        raise OptionsError(
            "In merging mode, you should either specify --merged_out or enable --stdout"
        )
    if merge.out:
        for other, flag in (
            (options.out1, "--out1"),
            (options.out2, "--out2"),
            (options.unpaired1, "--unpaired1"),
            (options.unpaired2, "--unpaired2"),
        ):
            if merge.out == other:
                raise OptionsError(f"--merged_out and {flag} shouldn't have same file name")


def _validate_stdout(options: Options) -> None:
    if not options.output_to_stdout:
        return
    if options.split.enabled:
        raise OptionsError("splitting mode cannot work with stdout mode")
    if options.merge.enabled:
        kind = "merged"
    elif options.is_paired():
        kind = "interleaved"
    else:
        kind = ""
    _warn(f"Streaming uncompressed {kind} reads to STDOUT...")
    if options.is_paired() and not options.merge.enabled:
        _warn("Enable interleaved output mode for paired-end input.")
    _warn()


def _validate_outputs(options: Options) -> None:
    if not options.in2 and not options.interleaved_input and options.out2:
        raise OptionsError(
            "read2 output is specified (--out2), but neighter read2 input is not specified "
            "(--in2), nor read1 is interleaved."
        )

    if options.in2 or options.interleaved_input:
        if options.out1 and not options.out2:
            raise OptionsError(
                "paired-end input, read1 output should be specified together with "
                "read2 output (--out2 needed) "
            )
        if not options.out1 and options.out2 and not options.merge.enabled:
            raise OptionsError(
                "paired-end input, read1 output should be specified (--out1 needed) "
                "together with read2 output "
            )

    if options.in2 and options.interleaved_input:
        raise OptionsError(
            "<in2> is not allowed when <in1> is specified as interleaved mode by (--interleaved_in)"
        )

    if options.out1:
        if options.out1 == options.out2:
            raise OptionsError(
                "read1 output (--out1) and read1 output (--out2) should be different"
            )
        _refuse_overwrite(options, options.out1)
    if options.out2:
        _refuse_overwrite(options, options.out2)
    if options.overlapped_out:
        _refuse_overwrite(options, options.overlapped_out)

    if not options.is_paired():
        for attr, flag in (
            ("unpaired1", "--unpaired1"),
            ("unpaired2", "--unpaired2"),
            ("overlapped_out", "--overlapped_out"),
        ):
            value = getattr(options, attr)
            if value:
                _warn(f"Not paired-end mode. Ignoring argument {flag} = {value}")
                setattr(options, attr, "")

    if options.split.enabled:
        for attr, flag in (("unpaired1", "--unpaired1"), ("unpaired2", "--unpaired2")):
            value = getattr(options, attr)
            if value:
                _warn(
                    "Outputing unpaired reads is not supported in splitting mode. "
                    f"Ignoring argument {flag} = {value}"
                )
                setattr(options, attr, "")

    for attr, flag in (("unpaired1", "--unpaired1"), ("unpaired2", "--unpaired2")):
        value = getattr(options, attr)
        if not value:
            continue
        _refuse_overwrite(options, value)
        if value == options.out1:
            raise OptionsError(f"{flag} and --out1 shouldn't have same file name")
        if value == options.out2:
            raise OptionsError(f"{flag} and --out2 shouldn't have same file name")

    failed = options.failed_out
    if failed:
        _refuse_overwrite(options, failed)
        for other, flag in (
            (options.out1, "--out1"),
            (options.out2, "--out2"),
            (options.unpaired1, "--unpaired1"),
            (options.unpaired2, "--unpaired2"),
            (options.merge.out, "--merged_out"),
        ):
            if failed == other:
                raise OptionsError(f"--failed_out and {flag} shouldn't have same file name")

    if options.dont_overwrite:
        _refuse_overwrite(options, options.json_file)
        _refuse_overwrite(options, options.html_file)


def _validate_numbers(options: Options) -> None:
    _check_range(
        options.compression, 1, 9,
        "compression level (--compression) should be between 1 ~ 9, 1 for fastest, 9 for smallest",
    )
    if options.reads_to_process < 0:
        raise OptionsError(
            "the number of reads to process (--reads_to_process) cannot be negative"
        )

    if options.thread < 1:
        options.thread = 1
    elif options.thread > _MAX_THREADS:
        _warn(f"WARNING: fastp uses up to 16 threads although you specified {options.thread}")
        options.thread = _MAX_THREADS

    trim = options.trim
    _check_range(trim.front1, 0, 30, "trim_front1 (--trim_front1) should be 0 ~ 30, suggest 0 ~ 4")
    _check_range(trim.tail1, 0, 100, "trim_tail1 (--trim_tail1) should be 0 ~ 100, suggest 0 ~ 4")
    _check_range(trim.front2, 0, 30, "trim_front2 (--trim_front2) should be 0 ~ 30, suggest 0 ~ 4")
    _check_range(trim.tail2, 0, 100, "trim_tail2 (--trim_tail2) should be 0 ~ 100, suggest 0 ~ 4")

    qf = options.qualfilter
    _check_range(
        ord(qf.qualified_qual) - 33, 0, 93,
        "qualitified phred (--qualified_quality_phred) should be 0 ~ 93, suggest 10 ~ 20",
    )
    _check_range(
        qf.avg_qual_req, 0, 93,
        "average quality score requirement (--average_qual) should be 0 ~ 93, suggest 20 ~ 30",
    )
    _check_range(
        qf.unqualified_percent_limit, 0, 100,
        "unqualified percent limit (--unqualified_percent_limit) should be 0 ~ 100, suggest 20 ~ 60",
    )
    _check_range(
        qf.n_base_limit, 0, 50,
        "N base limit (--n_base_limit) should be 0 ~ 50, suggest 3 ~ 10",
    )
    if options.length_filter.required_length < 0:
        raise OptionsError(
            "length requirement (--length_required) should be >0, suggest 15 ~ 100"
        )
    _check_range(
        options.overlap_diff_percent_limit, 0, 100,
        "the maximum percentage of mismatched bases to detect overlapped region "
        "(--overlap_diff_percent_limit) should be 0 ~ 100, suggest 20 ~ 60",
    )


def _validate_split(options: Options) -> None:
    split = options.split
    if not split.enabled:
        return
    _check_range(
        split.digits, 0, 10,
        "you have enabled splitting output to multiple files, the digits number of file name "
        "prefix (--split_prefix_digits) should be 0 ~ 10.",
    )
    if split.by_file_number:
        if split.number < 2 or split.number >= 1000:
            raise OptionsError(
                "you have enabled splitting output by file number, the number of files "
                "(--split) should be 2 ~ 999."
            )
        options.thread = min(options.thread, split.number)
    if split.by_file_lines and split.size < 1000 // 4:
        raise OptionsError(
            "you have enabled splitting output by file lines, the file lines "
            "(--split_by_lines) should be >= 1000."
        )


def _validate_quality_cut(options: Options) -> None:
    qc = options.quality_cut
    if not (qc.enabled_front or qc.enabled_tail or qc.enabled_right):
        return
    window_msg = (
        "the sliding window size for cutting by quality ({flag}) should be between 1~1000."
    )
    quality_msg = (
        "the mean quality requirement for cutting by quality ({flag}) should be 1 ~ 30, "
        "suggest {hint}."
    )
    for window, quality, suffix, hint in (
        (qc.window_size_shared, qc.quality_shared, "", "15 ~ 20"),
        (qc.window_size_front, qc.quality_front, "front_", "15 ~ 20"),
        (qc.window_size_tail, qc.quality_tail, "tail_", "13 ~ 20"),
        (qc.window_size_right, qc.quality_right, "right_", "15 ~ 20"),
    ):
        _check_range(window, 1, 1000, window_msg.format(flag=f"--cut_{suffix}window_size"))
        _check_range(
            quality, 1, 30, quality_msg.format(flag=f"--cut_{suffix}mean_quality", hint=hint)
        )


def _check_adapter(sequence: str, option_name: str, label: str) -> bool:
    if sequence == "auto" or not sequence:
        return False
    if len(sequence) <= 3:
        raise OptionsError(f"the sequence of <{option_name}> should be longer than 3")
    if not set(sequence) <= _ADAPTER_BASES:
        raise OptionsError(
            f"the adapter <{option_name}> can only have bases in {{A, T, C, G}}, "
            f"but the given {label} is: {sequence}"
        )
    return True


def _validate_umi(options: Options) -> None:
    umi = options.umi
    if not umi.enabled:
        return
    if umi.location in _UMI_LOCATIONS_WITH_LENGTH:
        _check_range(umi.length, 1, 100, "UMI length should be 1~100")
        _check_range(umi.skip, 0, 100, "The base number to skip after UMI <umi_skip> should be 0~100")
    else:
        if umi.skip > 0:
            raise OptionsError(
                "Only if the UMI location is in read1/read2/per_read, you can skip bases after UMI"
            )
        if umi.length > 0:
            raise OptionsError(
                "Only if the UMI location is in read1/read2/per_read, you can set the UMI length"
            )
    if umi.prefix:
        if len(umi.prefix) >= 10:
            raise OptionsError("UMI prefix should be shorter than 10")
        if not all(c.isascii() and c.isalnum() for c in umi.prefix):
            raise OptionsError(
                f"UMI prefix can only have characters and numbers, but the given is: {umi.prefix}"
            )
    if umi.separator:
        if len(umi.separator) > 10:
            raise OptionsError("UMI separator cannot be longer than 10 base pairs")
        if not set(umi.separator) <= _ADAPTER_BASES:
            raise OptionsError(
                "UMI separator can only have bases in {A, T, C, G}, "
                f"but the given sequence is: {umi.separator}"
            )


def validate(options: Options) -> bool:
    """Check ``options`` for consistency, normalising them in place.

    Conflicting or out-of-range settings raise :class:`OptionsError`; settings
    that merely do not apply are dropped with a warning on stderr.
    """
    _validate_inputs(options)
    _validate_merge(options)
    _validate_stdout(options)
    _validate_outputs(options)
    _validate_numbers(options)
    _validate_split(options)
    _validate_quality_cut(options)

    if _check_adapter(options.adapter.sequence, "adapter_sequence", "sequence"):
        options.adapter.has_seq_r1 = True
    if _check_adapter(options.adapter.sequence_r2, "adapter_sequence_r2", "sequenceR2"):
        options.adapter.has_seq_r2 = True

    if options.correction.enabled and not options.is_paired():
        _warn(
            "WARNING: base correction is only appliable for paired end data, "
            "ignoring -c/--correction"
        )
        options.correction.enabled = False

    _validate_umi(options)

    _check_range(
        options.over_rep_analysis.sampling, 1, 10000,
        "overrepresentation_sampling should be 1~10000",
    )
    return True