from datetime import date

import pytest

from ofc_analyzer.errors import QuotaExceededError
from ofc_analyzer.quota import RequestQuota


def test_quota_counts_consumed_requests():
    quota = RequestQuota(10, today_fn=lambda: date(2024, 3, 1))
    quota.consume(4)
    snapshot = quota.consume(3)
    assert snapshot == {"used": 7, "limit": 10, "remaining": 3, "day": "2024-03-01"}


def test_quota_rejects_requests_over_the_limit():
    quota = RequestQuota(5, today_fn=lambda: date(2024, 3, 1))
    quota.consume(4)
    with pytest.raises(QuotaExceededError) as excinfo:
        quota.consume(2)
    assert excinfo.value.required == 2
    assert excinfo.value.remaining == 1
    assert quota.snapshot()["used"] == 4


def test_quota_resets_on_new_day():
    today = {"value": date(2024, 3, 1)}
    quota = RequestQuota(5, today_fn=lambda: today["value"])
    quota.consume(5)
    assert quota.snapshot()["remaining"] == 0

    today["value"] = date(2024, 3, 2)
    assert quota.snapshot() == {"used": 0, "limit": 5, "remaining": 5, "day": "2024-03-02"}
