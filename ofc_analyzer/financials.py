import json
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .checko_client import CheckoClient
from .errors import MissingDataError
from .payload import locate_reports
from .periods import Period
from .ratio_calculator import calculate_metrics, explain_undefined_ratios, filter_sections
from .selection import select_report


logger = logging.getLogger(__name__)


def parse_inns(value: Any) -> List[str]:
    if isinstance(value, str):
        items: Iterable[Any] = re.split(r"[\n,;]", value)
    else:
        items = value or []
    inns: List[str] = []
    for item in items:
        inn = str(item).strip()
        if inn and inn not in inns:
            inns.append(inn)
    return inns


def resolve_periods(
    year: Any = None,
    quarter: Any = None,
    previous_year: Any = None,
    periods: Optional[Sequence[Dict[str, Any]]] = None,
) -> Tuple[List[Period], Optional[Period]]:
    """Turn request parameters into (requested periods, chaining base period).

    Explicit ``periods`` take precedence. Otherwise ``year``/``quarter`` name a
    single period whose "previous" report comes from ``previous_year`` (annual)
    or from the period right before it.
    """
    if periods:
        requested = sorted({Period.parse(p.get("year"), p.get("quarter")) for p in periods})
    elif year not in (None, ""):
        requested = [Period.parse(year, quarter)]
    else:
        raise ValueError("At least one reporting period is required")

    first = requested[0]
    if previous_year not in (None, ""):
        base = Period.parse(previous_year)
    else:
        base = first.previous()
    if not base < first:
        raise ValueError(f"Previous period {base.label} must precede {first.label}")
    return requested, base


def estimate_requests(
    inns: Sequence[str], requested: Sequence[Period], base: Optional[Period] = None
) -> int:
    years = {period.year for period in requested}
    if base is not None:
        years.add(base.year)
    return len(parse_inns(inns)) * len(years)


@lru_cache(maxsize=8)
def load_sample_reports(path: str) -> Tuple[Dict[str, Any], ...]:
    content = json.loads(Path(path).read_text(encoding="utf-8"))
    return tuple(report for report in locate_reports(content) if isinstance(report, dict))


class SampleReportSource:
    name = "sample"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def reports_for(self, inn: str) -> List[Dict[str, Any]]:
        reports = load_sample_reports(str(self.path))
        matching = [r for r in reports if str(r.get("inn", "")).strip() == inn]
        if matching:
            return matching
        return [r for r in reports if "inn" not in r]

    def fetch(self, inn: str, year: int) -> Dict[str, Any]:
        return {"inn": inn, "finances": self.reports_for(inn)}


class CheckoReportSource:
    name = "checko"

    def __init__(self, client: CheckoClient) -> None:
        self.client = client

    def fetch(self, inn: str, year: int) -> Any:
        return self.client.fetch_financials(inn, year)


def _period_entry(period: Period, previous: Optional[Period]) -> Dict[str, Any]:
    return {
        "period": period.as_dict(),
        "label": period.label,
        "previous": previous.label if previous is not None else None,
        "metrics": None,
        "notes": [],
        "error": None,
    }


def analyze_company(
    inn: str,
    requested: Sequence[Period],
    source,
    base: Optional[Period] = None,
    sections: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    timeline = sorted(set(requested) | ({base} if base is not None else set()))
    wanted = set(requested)

    reports_by_year: Dict[int, List[Any]] = {}
    previous_report: Optional[Dict[str, Any]] = None
    previous_period: Optional[Period] = None
    entries: List[Dict[str, Any]] = []

    for period in timeline:
        if period.year not in reports_by_year:
            reports_by_year[period.year] = locate_reports(source.fetch(inn, period.year))
        report = select_report(reports_by_year[period.year], period)

        if period in wanted:
            entry = _period_entry(period, previous_period if previous_report is not None else None)
            if report is None:
                entry["error"] = str(MissingDataError(inn, period.label))
                logger.info("No report for INN %s, period %s", inn, period.label)
            else:
                metrics = calculate_metrics(report, previous_report)
                entry["notes"] = explain_undefined_ratios(metrics)
                entry["metrics"] = filter_sections(metrics, sections)
            entries.append(entry)

        previous_report = report
        previous_period = period

    return {"inn": inn, "error": None, "periods": entries}


def analyze_companies(
    inns: Sequence[str],
    requested: Sequence[Period],
    source,
    base: Optional[Period] = None,
    sections: Optional[Iterable[str]] = None,
    max_workers: int = 4,
) -> List[Dict[str, Any]]:
    inns = parse_inns(inns)
    if not inns:
        return []

    def run(inn: str) -> Dict[str, Any]:
        try:
            return analyze_company(inn, requested, source, base=base, sections=sections)
        except Exception as exc:
            logger.exception("Analysis failed for INN %s", inn)
            return {"inn": inn, "error": str(exc), "periods": []}

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(inns)))) as executor:
        return list(executor.map(run, inns))
