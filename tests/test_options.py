import pytest

from fqtrim.options import (
    AdapterOptions,
    OptionsError,
    Options,
    QualityCutOptions,
    load_barcode_list,
)


def test_defaults_from_source():
    opt = Options()
    assert opt.thread == 1
    assert opt.compression == 2
    assert opt.insert_size_max == 512
    assert opt.overlap_require == 30
    assert opt.qualfilter.qualified_qual == "0"
    assert opt.duplicate.hist_size == 32


def test_quality_cut_windows_share_defaults():
    qc = QualityCutOptions()
    assert qc.window_size_front == qc.window_size_shared == qc.window_size_tail
    assert qc.quality_right == qc.quality_shared


def test_nested_options_are_independent():
    a, b = Options(), Options()
    a.adapter.seqs_in_fasta.append("AGATCGGAAGAGC")
    assert b.adapter.seqs_in_fasta == []


def test_is_paired():
    opt = Options(in1="a.fq")
    assert opt.is_paired() is False
    opt.in2 = "b.fq"
    assert opt.is_paired() is True
    assert Options(in1="a.fq", interleaved_input=True).is_paired() is True


def test_adapter_cutting_enabled():
    assert Options(in1="a.fq").adapter_cutting_enabled() is False
    assert Options(in1="a.fq", adapter=AdapterOptions(sequence="AGATCG")).adapter_cutting_enabled() is True
    assert Options(in1="a.fq", in2="b.fq").adapter_cutting_enabled() is True
    opt = Options(in1="a.fq", in2="b.fq")
    opt.adapter.enabled = False
    assert opt.adapter_cutting_enabled() is False


def test_poly_x_trimming_enabled():
    opt = Options()
    assert opt.poly_x_trimming_enabled() is False
    opt.poly_x_trim.enabled = True
    assert opt.poly_x_trimming_enabled() is True


def test_shall_detect_adapter_single_end():
    opt = Options(in1="a.fq", adapter=AdapterOptions(sequence="auto"))
    assert opt.shall_detect_adapter() is True
    assert opt.shall_detect_adapter(True) is False
    opt.adapter.enabled = False
    assert opt.shall_detect_adapter() is False


def test_shall_detect_adapter_paired_requires_flag():
    opt = Options(in1="a.fq", in2="b.fq", adapter=AdapterOptions(sequence="auto", sequence_r2="auto"))
    assert opt.shall_detect_adapter() is False
    assert opt.shall_detect_adapter(True) is False
    opt.adapter.detect_adapter_for_pe = True
    assert opt.shall_detect_adapter() is True
    assert opt.shall_detect_adapter(True) is True


@pytest.mark.parametrize("seq", ["", "auto"])
def test_adapter_names_unspecified(seq):
    opt = Options(adapter=AdapterOptions(sequence=seq, sequence_r2=seq))
    assert opt.adapter1_name() == "unspecified"
    assert opt.adapter2_name() == "unspecified"


def test_adapter_names_given():
    opt = Options(adapter=AdapterOptions(sequence="AGATCGGAAGAGC", sequence_r2="AGATCGGAAGAGT"))
    assert opt.adapter1_name() == "AGATCGGAAGAGC"
    assert opt.adapter2_name() == "AGATCGGAAGAGT"


def test_load_barcode_list(tmp_path):
    path = tmp_path / "bl.txt"
    path.write_bytes(b"ACGT\nTTGGCC\r\nGGGG")
    assert load_barcode_list(path) == ["ACGT", "TTGGCC", "GGGG"]


def test_load_barcode_list_empty_file(tmp_path):
    path = tmp_path / "bl.txt"
    path.write_bytes(b"")
    assert load_barcode_list(path) == []


def test_load_barcode_list_rejects_bad_bases(tmp_path):
    path = tmp_path / "bl.txt"
    path.write_text("ACGT\nACNT\n")
    with pytest.raises(OptionsError):
        load_barcode_list(path)


def test_init_index_filtering(tmp_path):
    f1 = tmp_path / "a.txt"
    f1.write_text("AAAA\nCCCC\n")
    opt = Options()
    opt.init_index_filtering(str(f1), "", 2)
    assert opt.index_filter.enabled is True
    assert opt.index_filter.threshold == 2
    assert opt.index_filter.blacklist1 == ["AAAA", "CCCC"]
    assert opt.index_filter.blacklist2 == []


def test_init_index_filtering_nothing_given():
    opt = Options()
    opt.init_index_filtering("", "", 3)
    assert opt.index_filter.enabled is False
    assert opt.index_filter.threshold == 0


def test_init_index_filtering_empty_lists_stay_disabled(tmp_path):
    f2 = tmp_path / "b.txt"
    f2.write_text("")
    opt = Options()
    opt.init_index_filtering("", str(f2), 1)
    assert opt.index_filter.enabled is False


def test_init_index_filtering_missing_file(tmp_path):
    opt = Options()
    with pytest.raises(OptionsError):
        opt.init_index_filtering(str(tmp_path / "missing.txt"), "", 0)


def test_init_index_filtering_directory(tmp_path):
    opt = Options()
    with pytest.raises(OptionsError):
        opt.init_index_filtering("", str(tmp_path), 0)