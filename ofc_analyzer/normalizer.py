import math
from typing import Any, Dict, Sequence

from .extraction import EQUITY_FALLBACK_KEYS, FIELD_SYNONYMS, extract_value
from .periods import detect_period


BALANCE_CONTAINER_KEYS = ("balance_sheet", "balance", "balanceSheet", "bs")
INCOME_CONTAINER_KEYS = (
    "income_statement",
    "income",
    "incomeStatement",
    "profit_and_loss",
    "pnl",
)


def normalize_field(value: Any) -> float:
    """Coerce a raw statement value to a finite float; anything unusable is 0."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return 0.0
        try:
            number = float(cleaned)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def _find_container(raw: Dict[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        candidate = raw.get(key)
        if isinstance(candidate, (dict, list)) and candidate:
            return candidate
    return raw


def _extract_section(container: Any, section: str) -> Dict[str, float]:
    return {
        field: normalize_field(extract_value(container, keys))
        for field, keys in FIELD_SYNONYMS[section].items()
    }


def normalize_report(raw: Any) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raw = {}

    balance = _find_container(raw, BALANCE_CONTAINER_KEYS)
    income = _find_container(raw, INCOME_CONTAINER_KEYS)
    assets = raw.get("assets") if isinstance(raw.get("assets"), (dict, list)) else {}

    balance_sheet = _extract_section(balance, "balance_sheet")
    equity = (
        extract_value(balance, FIELD_SYNONYMS["balance_sheet"]["equity"])
        or extract_value(assets, EQUITY_FALLBACK_KEYS)
        or extract_value(raw, EQUITY_FALLBACK_KEYS)
    )
    balance_sheet["equity"] = normalize_field(equity)

    year, quarter = detect_period(raw)
    return {
        "year": year,
        "quarter": quarter,
        "balance_sheet": balance_sheet,
        "income_statement": _extract_section(income, "income_statement"),
    }
