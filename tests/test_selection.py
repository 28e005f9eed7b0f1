from ofc_analyzer.periods import Period
from ofc_analyzer.selection import select_report


def test_annual_target_prefers_report_without_quarter():
    reports = [
        {"year": 2022, "tag": "2022"},
        {"year": 2023, "quarter": 4, "tag": "2023Q4"},
        {"year": 2023, "tag": "2023"},
    ]
    assert select_report(reports, Period(2023))["tag"] == "2023"


def test_annual_target_falls_back_to_latest_quarter():
    reports = [
        {"year": 2023, "quarter": 2, "tag": "Q2"},
        {"year": 2023, "quarter": 3, "tag": "Q3"},
        {"year": 2023, "quarter": 1, "tag": "Q1"},
    ]
    assert select_report(reports, Period(2023))["tag"] == "Q3"


def test_quarter_target_requires_exact_match():
    reports = [
        {"year": 2023, "quarter": 1, "tag": "Q1"},
        {"period": {"year": 2023, "quarter": 2}, "tag": "Q2"},
        {"year": 2023, "tag": "annual"},
    ]
    assert select_report(reports, Period(2023, 2))["tag"] == "Q2"
    assert select_report(reports, Period(2023, 4)) is None


def test_year_is_matched_after_coercion():
    assert select_report([{"year": "2021", "tag": "x"}], Period(2021))["tag"] == "x"


def test_no_match_returns_none():
    assert select_report([], Period(2023)) is None
    assert select_report([{"year": 2020}], Period(2023)) is None
    assert select_report(["junk", None, 5], Period(2023)) is None
