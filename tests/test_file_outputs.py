import json

from utils.data.json_manager import JSONManager
from utils.output_manager import OutputManager


def test_json_round_trip_and_backup(tmp_path):
    path = tmp_path / "nested" / "data.json"

    JSONManager.write_json({"a": 1}, str(path))
    JSONManager.write_json({"a": 2}, str(path), backup=True)

    assert JSONManager.read_json(str(path)) == {"a": 2}
    assert json.loads((tmp_path / "nested" / "data.json.bak").read_text(encoding="utf-8")) == {"a": 1}


def test_read_json_default_for_missing_file(tmp_path):
    assert JSONManager.read_json(str(tmp_path / "missing.json"), default={}) == {}


def test_output_manager_uses_stable_names(tmp_path):
    output_dir = str(tmp_path / "out")

    json_path = OutputManager.save_json_report({"ok": True}, "run_summary", output_dir)
    text_path = OutputManager.save_text_report("a,b\n", "board_metrics", "csv", output_dir)

    assert json_path.endswith("run_summary.json")
    assert text_path.endswith("board_metrics.csv")
    with open(text_path, encoding="utf-8", newline="") as file:
        assert file.read() == "a,b\n"
