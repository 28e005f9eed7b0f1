import json

from ofc_analyzer.run_logger import log_step, summarize_results


def test_log_step_appends_json_lines(tmp_path):
    log_dir = tmp_path / "runs"
    log_step(log_dir, "analyze", {"inns": ["1"]})
    log_step(log_dir, "analyze", {"inns": ["2"]})

    lines = (log_dir / "run.log").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    entry = json.loads(lines[1])
    assert entry["step"] == "analyze"
    assert entry["payload"] == {"inns": ["2"]}
    assert "ts" in entry


def test_log_step_is_disabled_without_directory(tmp_path):
    log_step(None, "analyze", {"inns": ["1"]})
    assert list(tmp_path.iterdir()) == []


def test_summarize_results():
    results = [
        {
            "inn": "1",
            "error": None,
            "periods": [
                {"label": "2022", "metrics": {"ofc": {}}},
                {"label": "2023", "metrics": None},
            ],
        },
        {"inn": "2", "error": "boom", "periods": []},
    ]
    assert summarize_results(results) == [
        {"inn": "1", "error": None, "computed": ["2022"], "missing": ["2023"]},
        {"inn": "2", "error": "boom", "computed": [], "missing": []},
    ]
