from domains.kanban.gnuplot_writer import GnuplotScriptWriter, cumulative_column


def test_cumulative_column_stacks_following_stages():
    assert cumulative_column(2, 4) == "$2+$3+$4"
    assert cumulative_column(4, 4) == "$4"


def test_render_three_panels():
    script = GnuplotScriptWriter().render(
        label="board",
        title='Team "A" Board',
        data_file_name="board_metrics.csv",
        cfd_states=["Backlog", "Doing"],
        done_states=["Done"],
    )

    assert 'set output "board.png"' in script
    assert 'set multiplot layout 3,1 title "Team \\"A\\" Board"' in script
    assert '"board_metrics.csv" every ::1 using 1:($2+$3) with filledcurve x1 title "Backlog"' in script
    assert '"board_metrics.csv" every ::1 using 1:($3) with filledcurve x1 title "Doing"' in script
    assert "$4/86400.0" in script
    assert "using 1:6 with filledcurve x1" in script
    assert "Items Entering Done" in script
    assert script.rstrip().endswith("unset multiplot")
