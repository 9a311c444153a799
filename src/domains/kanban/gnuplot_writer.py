from collections.abc import Sequence

from domains.kanban.series_codec import header

SECONDS_PER_DAY = 86400


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def cumulative_column(column: int, last_column: int) -> str:
    """gnuplot expression ``$c+$c+1+...+$last`` so each stage is stacked on the ones after it."""
    return "+".join(f"${index}" for index in range(column, last_column + 1))


class GnuplotScriptWriter:
    """Builds a gnuplot script rendering one project's series file as a three-panel PNG:
    stacked cumulative flow, P90 age in days, and throughput.
    """

    def render(self, label: str, title: str, data_file_name: str, cfd_states: Sequence[str], done_states: Sequence[str]) -> str:
        columns = header(cfd_states)
        stage_count = len(cfd_states)
        # gnuplot columns are 1-based; column 1 is the week
        first_count, last_count = 2, 1 + stage_count
        first_p90 = last_count + 1
        throughput_column = len(columns)
        data = _quote(data_file_name)

        lines = [
            'set terminal png enhanced font "Arial,10" fontscale 1.0 size 1024,768',
            f"set output {_quote(label + '.png')}",
            'set datafile separator ","',
            "set datafile missing NaN",
            "set xdata time",
            'set timefmt "%Y-%m-%dT%H:%M:%S"',
            'set format x "%Y-%m-%d"',
            f"set multiplot layout 3,1 title {_quote(title)}",
            "",
            "# Cumulative flow",
            'set title "Items in Stage - Count"',
            "set key left top outside",
        ]
        if stage_count:
            plots = [
                f"{data} every ::1 using 1:({cumulative_column(column, last_count)}) with filledcurve x1 "
                f"title {_quote(stage)}"
                for column, stage in zip(range(first_count, last_count + 1), cfd_states)
            ]
            lines.append("plot " + ", ".join(plots))

        lines += ["", "# P90 age", 'set title "P90 Age of Items in Stage - Days"', "set key left top outside"]
        if stage_count:
            plots = [
                f"{data} every ::1 using 1:(valid({column}) ? ${column}/{SECONDS_PER_DAY}.0 : NaN) with linespoints "
                f"title {_quote(stage)}"
                for column, stage in zip(range(first_p90, first_p90 + stage_count), cfd_states)
            ]
            lines.append("plot " + ", ".join(plots))

        lines += [
            "",
            "# Throughput",
            f"set title {_quote('Throughput - Items Entering ' + ', '.join(done_states) + ' - Count')}",
            "unset key",
            f"plot {data} every ::1 using 1:{throughput_column} with filledcurve x1",
            "",
            "unset multiplot",
            "",
        ]
        return "\n".join(lines)
