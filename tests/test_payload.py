from ofc_analyzer.payload import locate_reports, looks_like_reports


def test_locates_nested_items_array():
    response = {"data": {"items": [{"year": 2023, "balance_sheet": {}}]}}
    assert locate_reports(response) == [{"year": 2023, "balance_sheet": {}}]


def test_root_array_is_eligible():
    reports = [{"period": {"year": 2022}}]
    result = locate_reports(reports)
    assert result == reports
    assert result is not reports


def test_priority_keys_are_searched_before_other_keys():
    response = {
        "meta": {"history": [{"year": 1999}]},
        "finances": [{"year": 2023}],
    }
    assert locate_reports(response) == [{"year": 2023}]


def test_breadth_first_prefers_shallower_arrays():
    response = {
        "data": {"deep": {"deeper": {"reports": [{"year": 2001}]}}},
        "other": [{"income_statement": {"revenue": 1}}],
    }
    assert locate_reports(response) == [{"income_statement": {"revenue": 1}}]


def test_skips_arrays_without_report_markers():
    response = {"data": {"owners": [{"name": "A"}], "results": [{"balance": {}}]}}
    assert locate_reports(response) == [{"balance": {}}]


def test_returns_empty_list_when_nothing_matches():
    assert locate_reports({"data": {"message": "not found"}}) == []
    assert locate_reports(None) == []
    assert locate_reports("text") == []


def test_survives_cycles():
    response = {"data": {}}
    response["data"]["self"] = response
    response["data"]["loop"] = [response]
    assert locate_reports(response) == []


def test_looks_like_reports():
    assert looks_like_reports([1, "x", {"year": 2020}])
    assert not looks_like_reports([{"name": "x"}, 3])
    assert not looks_like_reports([])
