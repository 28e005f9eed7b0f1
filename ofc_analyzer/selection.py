from typing import Any, Dict, Iterable, Optional

from .periods import Period, detect_period


def select_report(reports: Iterable[Any], target: Period) -> Optional[Dict[str, Any]]:
    """Pick the report for ``target`` from a provider's list of period reports.

    A quarterly target needs an exact quarter match. An annual target prefers a
    report without a quarter and otherwise falls back to the latest quarter of
    that year.
    """
    matches = []
    for report in reports:
        if not isinstance(report, dict):
            continue
        year, quarter = detect_period(report)
        if year == target.year:
            matches.append((report, quarter))

    if not target.is_annual:
        for report, quarter in matches:
            if quarter == target.quarter:
                return report
        return None

    for report, quarter in matches:
        if not quarter:
            return report

    best = None
    best_quarter = 0
    for report, quarter in matches:
        if best is None or quarter > best_quarter:
            best, best_quarter = report, quarter
    return best
