import pytest

from fqtrim.options import Options, OptionsError, UmiLocation
from fqtrim.validation import validate


@pytest.fixture
def inputs(tmp_path):
    r1 = tmp_path / "r1.fq"
    r2 = tmp_path / "r2.fq"
    r1.write_text("@a\nACGT\n+\nIIII\n")
    r2.write_text("@a\nACGT\n+\nIIII\n")
    return str(r1), str(r2)


@pytest.fixture
def se(inputs):
    return Options(in1=inputs[0])


@pytest.fixture
def pe(inputs):
    return Options(in1=inputs[0], in2=inputs[1])


def test_defaults_single_end_pass(se):
    assert validate(se) is True


def test_missing_in1_raises():
    with pytest.raises(OptionsError, match="read1 input should be specified"):
        validate(Options())


def test_in2_without_in1_raises(inputs):
    with pytest.raises(OptionsError, match="read1 input is not specified"):
        validate(Options(in2=inputs[1]))


def test_stdin_sets_in1():
    opt = Options(input_from_stdin=True)
    validate(opt)
    assert opt.in1 == "/dev/stdin"


def test_nonexistent_input_raises(tmp_path):
    with pytest.raises(OptionsError):
        validate(Options(in1=str(tmp_path / "missing.fq")))


def test_directory_input_raises(tmp_path):
    with pytest.raises(OptionsError):
        validate(Options(in1=str(tmp_path)))


def test_thread_clamped(se):
    se.thread = 0
    validate(se)
    assert se.thread == 1


def test_thread_upper_bound(se):
    se.thread = 40
    validate(se)
    assert se.thread == 16


@pytest.mark.parametrize("level", [0, 10])
def test_compression_out_of_range(se, level):
    se.compression = level
    with pytest.raises(OptionsError, match="compression level"):
        validate(se)


def test_negative_reads_to_process(se):
    se.reads_to_process = -1
    with pytest.raises(OptionsError, match="cannot be negative"):
        validate(se)


def test_merge_with_split_raises(pe):
    pe.merge.enabled = True
    pe.split.enabled = True
    with pytest.raises(OptionsError, match="splitting mode cannot work with merging"):
        validate(pe)


def test_merge_needs_read2(se):
    se.merge.enabled = True
    with pytest.raises(OptionsError, match="merging mode"):
        validate(se)


def test_merge_uses_out1_as_merged_out(pe, tmp_path):
    out = str(tmp_path / "merged.fq")
    pe.merge.enabled = True
    pe.out1 = out
    validate(pe)
    assert pe.merge.out == out
    assert pe.out1 == ""
    assert pe.correction.enabled is True


def test_merge_include_unmerged_clears_outputs(pe, tmp_path):
    pe.merge.enabled = True
    pe.merge.include_unmerged = True
    pe.merge.out = str(tmp_path / "m.fq")
    pe.out1 = str(tmp_path / "o1.fq")
    pe.out2 = str(tmp_path / "o2.fq")
    pe.unpaired1 = str(tmp_path / "u1.fq")
    validate(pe)
    assert (pe.out1, pe.out2, pe.unpaired1) == ("", "", "")


def test_merge_requires_output(pe):
    pe.merge.enabled = True
    with pytest.raises(OptionsError, match="--merged_out or enable --stdout"):
        validate(pe)


def test_merged_out_same_as_out1(pe, tmp_path):
    pe.merge.enabled = True
    pe.merge.out = str(tmp_path / "x.fq")
    pe.out1 = pe.merge.out
    pe.out2 = str(tmp_path / "y.fq")
    with pytest.raises(OptionsError, match="--merged_out and --out1"):
        validate(pe)


def test_merged_out_dropped_without_merge(se, tmp_path):
    se.merge.out = str(tmp_path / "m.fq")
    validate(se)
    assert se.merge.out == ""


def test_stdout_with_split_raises(se):
    se.output_to_stdout = True
    se.split.enabled = True
    with pytest.raises(OptionsError, match="stdout mode"):
        validate(se)


def test_out2_without_read2_raises(se, tmp_path):
    se.out2 = str(tmp_path / "o2.fq")
    with pytest.raises(OptionsError, match="--out2"):
        validate(se)


def test_paired_out1_needs_out2(pe, tmp_path):
    pe.out1 = str(tmp_path / "o1.fq")
    with pytest.raises(OptionsError, match="--out2 needed"):
        validate(pe)


def test_paired_out2_needs_out1(pe, tmp_path):
    pe.out2 = str(tmp_path / "o2.fq")
    with pytest.raises(OptionsError, match="--out1 needed"):
        validate(pe)


def test_in2_with_interleaved_raises(pe):
    pe.interleaved_input = True
    with pytest.raises(OptionsError, match="interleaved"):
        validate(pe)


def test_out1_equal_out2_raises(pe, tmp_path):
    pe.out1 = pe.out2 = str(tmp_path / "o.fq")
    with pytest.raises(OptionsError, match="should be different"):
        validate(pe)


def test_dont_overwrite_existing_output(se, tmp_path):
    existing = tmp_path / "exists.fq"
    existing.write_text("")
    se.out1 = str(existing)
    se.dont_overwrite = True
    with pytest.raises(OptionsError, match="already exists"):
        validate(se)


def test_dont_overwrite_existing_json(se, tmp_path):
    report = tmp_path / "report.json"
    report.write_text("{}")
    se.json_file = str(report)
    se.dont_overwrite = True
    with pytest.raises(OptionsError, match="--dont_overwrite"):
        validate(se)


def test_single_end_drops_paired_outputs(se, tmp_path):
    se.unpaired1 = str(tmp_path / "u1.fq")
    se.unpaired2 = str(tmp_path / "u2.fq")
    se.overlapped_out = str(tmp_path / "ov.fq")
    validate(se)
    assert (se.unpaired1, se.unpaired2, se.overlapped_out) == ("", "", "")


def test_unpaired_same_as_out1(pe, tmp_path):
    pe.out1 = str(tmp_path / "o1.fq")
    pe.out2 = str(tmp_path / "o2.fq")
    pe.unpaired1 = pe.out1
    with pytest.raises(OptionsError, match="--unpaired1 and --out1"):
        validate(pe)


def test_failed_out_same_as_out1(se, tmp_path):
    se.out1 = str(tmp_path / "o1.fq")
    se.failed_out = se.out1
    with pytest.raises(OptionsError, match="--failed_out and --out1"):
        validate(se)


@pytest.mark.parametrize(
    "attr,value",
    [("front1", 31), ("tail1", 101), ("front2", -1), ("tail2", 101)],
)
def test_trim_ranges(se, attr, value):
    setattr(se.trim, attr, value)
    with pytest.raises(OptionsError, match="trim_"):
        validate(se)


def test_qualified_quality_out_of_range(se):
    se.qualfilter.qualified_qual = " "
    with pytest.raises(OptionsError, match="qualified_quality_phred"):
        validate(se)


def test_n_base_limit_out_of_range(se):
    se.qualfilter.n_base_limit = 51
    with pytest.raises(OptionsError, match="n_base_limit"):
        validate(se)


def test_split_by_file_number_limits_threads(se):
    se.split.enabled = True
    se.split.by_file_number = True
    se.split.number = 3
    se.thread = 8
    validate(se)
    assert se.thread == se.split.number


def test_split_file_number_too_small(se):
    se.split.enabled = True
    se.split.by_file_number = True
    se.split.number = 1
    with pytest.raises(OptionsError, match="2 ~ 999"):
        validate(se)


def test_split_by_lines_too_small(se):
    se.split.enabled = True
    se.split.by_file_lines = True
    se.split.size = 10
    with pytest.raises(OptionsError, match="split_by_lines"):
        validate(se)


def test_quality_cut_window_out_of_range(se):
    se.quality_cut.enabled_front = True
    se.quality_cut.window_size_front = 0
    with pytest.raises(OptionsError, match="--cut_front_window_size"):
        validate(se)


def test_quality_cut_tail_quality_out_of_range(se):
    se.quality_cut.enabled_tail = True
    se.quality_cut.quality_tail = 31
    with pytest.raises(OptionsError, match="--cut_tail_mean_quality"):
        validate(se)


def test_adapter_too_short(se):
    se.adapter.sequence = "ACG"
    with pytest.raises(OptionsError, match="longer than 3"):
        validate(se)


def test_adapter_bad_base(se):
    se.adapter.sequence = "ACGTN"
    with pytest.raises(OptionsError, match="can only have bases"):
        validate(se)


def test_adapter_valid_sets_flag(pe):
    pe.adapter.sequence = "AGATCGGAAGAGC"
    pe.adapter.sequence_r2 = "auto"
    validate(pe)
    assert pe.adapter.has_seq_r1 is True
    assert pe.adapter.has_seq_r2 is False


def test_correction_disabled_for_single_end(se):
    se.correction.enabled = True
    validate(se)
    assert se.correction.enabled is False


def test_correction_kept_for_paired(pe):
    pe.correction.enabled = True
    validate(pe)
    assert pe.correction.enabled is True


def test_umi_length_required_in_read(se):
    se.umi.enabled = True
    se.umi.location = UmiLocation.READ1
    with pytest.raises(OptionsError, match="UMI length"):
        validate(se)


def test_umi_length_not_allowed_for_index(se):
    se.umi.enabled = True
    se.umi.location = UmiLocation.INDEX1
    se.umi.length = 8
    with pytest.raises(OptionsError, match="set the UMI length"):
        validate(se)


def test_umi_prefix_invalid(se):
    se.umi.enabled = True
    se.umi.location = UmiLocation.INDEX1
    se.umi.prefix = "UMI-"
    with pytest.raises(OptionsError, match="UMI prefix"):
        validate(se)


def test_umi_separator_invalid(se):
    se.umi.enabled = True
    se.umi.location = UmiLocation.READ1
    se.umi.length = 8
    se.umi.separator = "XX"
    with pytest.raises(OptionsError, match="UMI separator"):
        validate(se)


def test_umi_valid(se):
    se.umi.enabled = True
    se.umi.location = UmiLocation.READ1
    se.umi.length = 8
    se.umi.prefix = "UMI"
    se.umi.separator = "ACG"
    assert validate(se) is True


@pytest.mark.parametrize("sampling", [0, 10001])
def test_overrep_sampling_range(se, sampling):
    se.over_rep_analysis.sampling = sampling
    with pytest.raises(OptionsError, match="overrepresentation_sampling"):
        validate(se)