"""JSON and HTML report sections for :class:`~fqtrim.stats.Stats`."""

from __future__ import annotations

import math
from typing import Sequence, TextIO, Union

from .stats import Stats, kmer2, kmer3

Number = Union[int, float]

_FULL_SAMPLING = 40
_QUALITY_NAMES = ("A", "T", "C", "G", "mean")
_QUALITY_COLORS = (
    "rgba(128,128,0,1.0)",
    "rgba(128,0,128,1.0)",
    "rgba(0,255,0,1.0)",
    "rgba(0,0,255,1.0)",
    "rgba(20,20,20,1.0)",
)
_CONTENT_NAMES = ("A", "T", "C", "G", "N", "GC")
_CONTENT_COLORS = (
    "rgba(128,128,0,1.0)",
    "rgba(128,0,128,1.0)",
    "rgba(0,255,0,1.0)",
    "rgba(0,0,255,1.0)",
    "rgba(255, 0, 0, 1.0)",
    "rgba(20,20,20,1.0)",
)

_ORA_SCRIPT = """for (seq in orp_dist) {
    var cvs = document.getElementById(seq);
    var ctx = cvs.getContext('2d'); 
    var data = orp_dist[seq];
    var w = 240;
    var h = 20;
    ctx.fillStyle='#cccccc';
    ctx.fillRect(0, 0, w, h);
    ctx.fillStyle='#0000FF';
    var maxVal = 0;
    for(d=0; d<seqlen; d++) {
        if(data[d]>maxVal) maxVal = data[d];
    }
    var step = (seqlen-1) /  (w-1);
    for(x=0; x<w; x++){
        var target = step * x;
        var val = data[Math.floor(target)];
        var y = Math.floor((val / maxVal) * h);
        ctx.fillRect(x,h-1, 1, -y);
    }
}
</script>
"""


def _fmt(value: Number) -> str:
    """Format a number the way a default-precision stream does."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return f"{value:g}"


def _fixed(value: float) -> str:
    return f"{value:.6f}"


def _ratio(numerator: float, denominator: float) -> float:
    if denominator:
        return numerator / denominator
    if numerator == 0:
        return math.nan
    return math.copysign(math.inf, numerator)


def list_to_string(values: Sequence[Number]) -> str:
    """Join numbers with commas."""
    return ",".join(_fmt(v) for v in values)


def list_to_string_binned(values: Sequence[float], coords: Sequence[int]) -> str:
    """Average ``values`` over the bins ending at each of ``coords``.

    The first bin starts at 0; every later bin starts where the previous ended.
    An empty bin is written as ``0.0``.
    """
    parts = []
    start = 0
    for end in coords:
        if end == start:
            parts.append("0.0")
        else:
            total = sum(values[start:end], 0.0)
            parts.append(_fmt(total / (end - start)))
        start = end
    return ",".join(parts)


def cycle_positions(cycles: int, long_read: bool) -> list[int]:
    """1-based cycle positions to plot; long reads are sampled geometrically."""
    if not long_read:
        return list(range(1, cycles + 1))
    positions = list(range(1, min(_FULL_SAMPLING, cycles) + 1))
    if cycles > _FULL_SAMPLING:
        pos = float(_FULL_SAMPLING)
        while True:
            pos *= 1.05
            if pos >= cycles:
                break
            positions.append(int(pos))
        if positions[-1] != cycles:
            positions.append(cycles)
    return positions


def _div_name(subsection: str) -> str:
    return subsection.replace(" ", "_").replace(":", "_")


def _section_title(out: TextIO, subsection: str, div_name: str) -> None:
    out.write(
        "<div class='subsection_title'><a title='click to hide/show' "
        f"onclick=showOrHide('{div_name}')>{subsection}</a></div>\n"
    )


def make_kmer_td(stats: Stats, i: int, j: int) -> str:
    """One shaded table cell of the 5-mer table."""
    val = stats.kmer[(i << 4) + j]
    kmer = kmer3(i) + kmer2(j)
    mean_bases = (stats.bases() + 1) / stats.kmer_buf_len
    prop = val / mean_bases
    frac = 0.5
    if prop > 2.0:
        frac = (prop - 2.0) / 20.0 + 0.5
    elif prop < 0.5:
        frac = prop
    frac = max(0.01, min(1.0, frac))
    shade = int((1.0 - frac) * 255)
    colour = f"{shade:02x}" * 3
    return (
        f"<td style='background:#{colour}' title='{kmer}: {val}\n"
        f"{_fmt(prop)} times as mean value'>{kmer}</td>"
    )


def _write_curves(out: TextIO, padding: str, curves: dict, names: Sequence[str], cycles: int) -> None:
    for index, name in enumerate(names):
        curve = curves.get(name, [])
        out.write(f'{padding}\t\t"{name}":[{list_to_string(curve[:cycles])}]')
        if index != len(names) - 1:
            out.write(",")
        out.write("\n")


def report_json(stats: Stats, out: TextIO, padding: str) -> None:
    """Write the statistics as a JSON object fragment."""
    stats.summarize()
    cycles = stats.cycles()
    out.write("{\n")
    out.write(f'{padding}\t"total_reads": {stats.reads()},\n')
    out.write(f'{padding}\t"total_bases": {stats.bases()},\n')
    out.write(f'{padding}\t"q20_bases": {stats.q20()},\n')
    out.write(f'{padding}\t"q30_bases": {stats.q30()},\n')
    out.write(f'{padding}\t"total_cycles": {cycles},\n')

    out.write(f'{padding}\t"quality_curves": {{\n')
    _write_curves(out, padding, stats.quality_curves, _QUALITY_NAMES, cycles)
    out.write(f"{padding}\t}},\n")

    out.write(f'{padding}\t"content_curves": {{\n')
    _write_curves(out, padding, stats.content_curves, _CONTENT_NAMES, cycles)
    out.write(f"{padding}\t}},\n")

    out.write(f'{padding}\t"kmer_count": {{\n')
    for i in range(64):
        first = kmer3(i)
        entries = [
            f'{padding}\t\t"{first}{kmer2(j)}":{stats.kmer[(i << 4) + j]}' for j in range(16)
        ]
        out.write(",".join(entries))
        out.write(",\n" if i != 63 else "\n")
    out.write(f"{padding}\t}},\n")

    out.write(f'{padding}\t"overrepresented_sequences": {{\n')
    entries = [
        f'{padding}\t\t"{seq}":{count}'
        for seq, count in sorted(stats.over_rep_seq.items())
        if stats.over_rep_passed(seq, count)
    ]
    out.write(",\n".join(entries))
    out.write(f"{padding}\t}}\n")
    out.write(f"{padding}}},\n")


def report_html(stats: Stats, out: TextIO, filtering_type: str, read_name: str) -> None:
    """Write all HTML sections for these statistics."""
    report_html_quality(stats, out, filtering_type, read_name)
    report_html_contents(stats, out, filtering_type, read_name)
    report_html_kmer(stats, out, filtering_type, read_name)
    if stats.options.over_rep_analysis.enabled:
        report_html_ora(stats, out, filtering_type, read_name)


def _plot_section(
    stats: Stats,
    out: TextIO,
    subsection: str,
    series: list[tuple[str, str, list[float], str]],
    y_title: str,
) -> None:
    div_name = _div_name(subsection)
    _section_title(out, subsection, div_name)
    out.write(f"<div id='{div_name}'>\n")
    out.write("<div class='sub_section_tips'>Value of each position will be shown on mouse over.</div>\n")
    out.write(f"<div class='figure' id='plot_{div_name}'></div>\n")
    out.write("</div>\n")
    out.write('\n<script type="text/javascript">\n')

    long_read = stats.is_long_read()
    x = cycle_positions(stats.cycles(), long_read)
    xs = list_to_string(x)
    parts = ["var data=["]
    for key, name, curve, colour in series:
        parts.append(
            "{"
            f"x:[{xs}],"
            f"y:[{list_to_string_binned(curve, x)}],"
            f"name: '{name}',"
            "mode:'lines',"
            f"line:{{color:'{colour}', width:1}}\n"
            "},"
        )
    parts.append("];\n")
    parts.append("var layout={title:'', xaxis:{title:'position'")
    if long_read:
        parts.append(",type:'log'")
    parts.append(f"}}, yaxis:{{title:'{y_title}'}}}};\n")
    parts.append(f"Plotly.newPlot('plot_{div_name}', data, layout);\n")
    out.write("".join(parts))
    out.write("</script>\n")


def report_html_quality(stats: Stats, out: TextIO, filtering_type: str, read_name: str) -> None:
    """Write the per-cycle quality plot section."""
    stats.summarize()
    series = [
        (name, name, stats.quality_curves.get(name, []), colour)
        for name, colour in zip(_QUALITY_NAMES, _QUALITY_COLORS)
    ]
    _plot_section(stats, out, f"{filtering_type}: {read_name}: quality", series, "quality")


def report_html_contents(stats: Stats, out: TextIO, filtering_type: str, read_name: str) -> None:
    """Write the per-cycle base content plot section."""
    stats.summarize()
    bases = stats.bases()
    series = []
    for name, colour in zip(_CONTENT_NAMES, _CONTENT_COLORS):
        if len(name) == 1:
            count = stats.base_contents[ord(name) & 0x07]
        else:
            count = stats.gc_number()
        percentage = _fixed(_ratio(count * 100.0, bases))[:5]
        series.append((name, f"{name}({percentage}%)", stats.content_curves.get(name, []), colour))
    _plot_section(
        stats, out, f"{filtering_type}: {read_name}: base contents", series, "base content ratios"
    )


def report_html_kmer(stats: Stats, out: TextIO, filtering_type: str, read_name: str) -> None:
    """Write the 5-mer counting table section."""
    stats.summarize()
    subsection = f"{filtering_type}: {read_name}: KMER counting"
    div_name = _div_name(subsection)
    _section_title(out, subsection, div_name)
    out.write(f"<div  id='{div_name}'>\n")
    out.write(
        "<div class='sub_section_tips'>Darker background means larger counts. "
        "The count will be shown on mouse over.</div>\n"
    )
    out.write("<table class='kmer_table' style='width:680px;'>\n")
    out.write("<tr><td></td>")
    out.write("".join(f"<td style='color:#333333'>{kmer2(h)}</td>" for h in range(16)))
    out.write("</tr>\n")
    for i in range(64):
        cells = "".join(make_kmer_td(stats, i, j) for j in range(16))
        out.write(f"<tr><td style='color:#333333'>{kmer3(i)}</td>{cells}</tr>\n")
    out.write("</table>\n")
    out.write("</div>\n")


def report_html_ora(stats: Stats, out: TextIO, filtering_type: str, read_name: str) -> None:
    """Write the overrepresented sequences section."""
    stats.summarize()
    bases = float(stats.bases())
    sampling = stats.options.over_rep_analysis.sampling
    seq_len = stats.evaluated_seq_len
    subsection = f"{filtering_type}: {read_name}: overrepresented sequences"
    div_name = _div_name(subsection)
    passed = [
        (seq, count)
        for seq, count in sorted(stats.over_rep_seq.items())
        if stats.over_rep_passed(seq, count)
    ]

    _section_title(out, subsection, div_name)
    out.write(f"<div  id='{div_name}'>\n")
    out.write(f"<div class='sub_section_tips'>Sampling rate: 1 / {sampling}</div>\n")
    out.write("<table class='summary_table'>\n")
    out.write(
        "<tr style='font-weight:bold;'><td>overrepresented sequence</td><td>count (% of bases)"
        f"</td><td>distribution: cycle 1 ~ cycle {seq_len}</td></tr>\n"
    )
    for seq, count in passed:
        percent = _ratio(100.0 * count * len(seq) * sampling, bases)
        out.write(
            "<tr>"
            f"<td width='400' style='word-break:break-all;font-size:8px;'>{seq}</td>"
            f"<td width='200'>{count} ({_fixed(percent)}%)</td>"
            f"<td width='250'><canvas id='{div_name}_{seq}' width='240' height='20'></td>"
            "</tr>\n"
        )
    if not passed:
        out.write("<tr><td style='text-align:center' colspan='3'>not found</td></tr>\n")
    out.write("</table>\n")
    out.write("</div>\n")

    out.write("<script language='javascript'>\n")
    out.write(f"var seqlen = {seq_len};\n")
    out.write("var orp_dist = {\n")
    entries = []
    for seq, _count in passed:
        dist = stats.over_rep_seq_dist.get(seq, [])
        values = [dist[i] if i < len(dist) else 0 for i in range(seq_len)]
        entries.append(f'\t"{div_name}_{seq}":[{list_to_string(values)}]')
    out.write(",\n".join(entries))
    out.write("\n};\n")
    out.write(_ORA_SCRIPT)