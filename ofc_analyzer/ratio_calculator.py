import math
from typing import Any, Dict, Iterable, List, Optional

from .normalizer import normalize_field, normalize_report


DAYS_IN_YEAR = 365
METRIC_SECTIONS = ("ofc", "liquidity", "profitability", "stability")


def _finite(value: Optional[float]) -> Optional[float]:
    # Float overflow on extreme inputs leaves the ratio undefined.
    if value is None or not math.isfinite(value):
        return None
    return value


def average(current: Any, previous: Any = None) -> float:
    if previous is None:
        return normalize_field(current)
    return (normalize_field(current) + normalize_field(previous)) / 2


def safe_divide(numerator: Any, denominator: Any) -> Optional[float]:
    den = normalize_field(denominator)
    if den == 0:
        return None
    return _finite(normalize_field(numerator) / den)


def _ratio(numerator: float, denominator: float) -> Optional[float]:
    if denominator == 0:
        return None
    return _finite(numerator / denominator)


def _days(balance: float, flow: float) -> Optional[float]:
    if flow == 0:
        return None
    return _finite(DAYS_IN_YEAR * balance / flow)


class FinancialRatioCalculator:
    """Ratios for one normalized statement, averaged against the previous one when given."""

    def __init__(
        self, current: Dict[str, Any], previous: Optional[Dict[str, Any]] = None
    ) -> None:
        self.balance_sheet = current.get("balance_sheet", {}) or {}
        self.income_statement = current.get("income_statement", {}) or {}
        self.previous_balance_sheet = (
            (previous.get("balance_sheet", {}) or {}) if previous is not None else None
        )

    def _balance(self, field: str) -> float:
        return normalize_field(self.balance_sheet.get(field))

    def _income(self, field: str) -> float:
        return normalize_field(self.income_statement.get(field))

    def _previous(self, field: str) -> Optional[float]:
        if self.previous_balance_sheet is None:
            return None
        return normalize_field(self.previous_balance_sheet.get(field))

    def _average(self, field: str) -> float:
        return average(self._balance(field), self._previous(field))

    def calculate_ofc_cycle(self) -> Dict[str, Optional[float]]:
        cogs = self._income("cost_of_goods_sold")
        revenue = self._income("revenue")
        poi = _days(self._average("inventories"), cogs)
        ppd = _days(self._average("accounts_receivable"), revenue)
        ppa = _days(self._average("accounts_payable"), cogs)
        ofc = None if poi is None or ppd is None or ppa is None else _finite(poi + ppd - ppa)
        return {"poi": poi, "ppd": ppd, "ppa": ppa, "ofc": ofc}

    def calculate_liquidity_ratios(self) -> Dict[str, Optional[float]]:
        current_assets = self._balance("current_assets")
        current_liabilities = self._balance("current_liabilities")
        inventories = self._balance("inventories")
        cash = self._balance("cash_and_cash_equivalents")
        return {
            "current_ratio": _ratio(current_assets, current_liabilities),
            "quick_ratio": _ratio(current_assets - inventories, current_liabilities),
            "absolute_ratio": _ratio(cash, current_liabilities),
        }

    def calculate_profitability_ratios(self) -> Dict[str, Optional[float]]:
        net_income = self._income("net_income")
        revenue = self._income("revenue")
        cogs = self._income("cost_of_goods_sold")
        return {
            "roa": _ratio(net_income * 100, self._average("total_assets")),
            "roe": _ratio(net_income * 100, self._average("equity")),
            "gross_margin": _finite(None if revenue == 0 else (revenue - cogs) / revenue * 100),
            "net_margin": _finite(None if revenue == 0 else net_income / revenue * 100),
        }

    def calculate_stability_ratios(self) -> Dict[str, Optional[float]]:
        total_assets = self._balance("total_assets")
        total_liabilities = self._balance("total_liabilities")
        equity = self._balance("equity")
        return {
            "autonomy": _ratio(equity * 100, total_assets),
            "financial_leverage": _ratio(total_assets, equity),
            "debt_ratio": _ratio(total_liabilities * 100, total_assets),
            "debt_to_equity": _ratio(total_liabilities, equity),
        }

    def calculate_all_ratios(self) -> Dict[str, Any]:
        return {
            "ofc": self.calculate_ofc_cycle(),
            "liquidity": self.calculate_liquidity_ratios(),
            "profitability": self.calculate_profitability_ratios(),
            "stability": self.calculate_stability_ratios(),
        }


def calculate_metrics(current_report: Any, previous_report: Any = None) -> Dict[str, Any]:
    current = normalize_report(current_report)
    previous = normalize_report(previous_report) if previous_report is not None else None
    metrics = FinancialRatioCalculator(current, previous).calculate_all_ratios()
    metrics["normalized"] = {"current": current, "previous": previous}
    return metrics


# Denominator that leaves each ratio undefined when it is zero.
UNDEFINED_RATIO_REASONS = {
    "ofc": {
        "poi": "income_statement.cost_of_goods_sold=0",
        "ppd": "income_statement.revenue=0",
        "ppa": "income_statement.cost_of_goods_sold=0",
        "ofc": "one of poi/ppd/ppa is undefined",
    },
    "liquidity": {
        "current_ratio": "balance_sheet.current_liabilities=0",
        "quick_ratio": "balance_sheet.current_liabilities=0",
        "absolute_ratio": "balance_sheet.current_liabilities=0",
    },
    "profitability": {
        "roa": "average balance_sheet.total_assets=0",
        "roe": "average balance_sheet.equity=0",
        "gross_margin": "income_statement.revenue=0",
        "net_margin": "income_statement.revenue=0",
    },
    "stability": {
        "autonomy": "balance_sheet.total_assets=0",
        "financial_leverage": "balance_sheet.equity=0",
        "debt_ratio": "balance_sheet.total_assets=0",
        "debt_to_equity": "balance_sheet.equity=0",
    },
}


def explain_undefined_ratios(metrics: Dict[str, Any]) -> List[str]:
    notes: List[str] = []
    for section, reasons in UNDEFINED_RATIO_REASONS.items():
        values = metrics.get(section)
        if not isinstance(values, dict):
            continue
        for metric, reason in reasons.items():
            if metric in values and values[metric] is None:
                notes.append(f"{section}.{metric} not computed: {reason}")
    return notes


def filter_sections(metrics: Dict[str, Any], sections: Optional[Iterable[str]]) -> Dict[str, Any]:
    if sections is None:
        return metrics
    wanted = set(sections)
    unknown = wanted.difference(METRIC_SECTIONS)
    if unknown:
        raise ValueError(f"Unknown metric sections: {', '.join(sorted(unknown))}")
    filtered = {section: metrics[section] for section in METRIC_SECTIONS if section in wanted}
    filtered["normalized"] = metrics["normalized"]
    return filtered
