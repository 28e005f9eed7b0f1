from typing import Any, Dict, List, Sequence


# Source keys per canonical field, in priority order. Numeric keys are the
# line codes of the Russian accounting statements (forms 1 and 2).
FIELD_SYNONYMS: Dict[str, Dict[str, List[str]]] = {
    "balance_sheet": {
        "inventories": ["inventories", "inventory", "stocks", "zapasy", "1210"],
        "accounts_receivable": [
            "accounts_receivable",
            "receivables",
            "debtors",
            "debitors",
            "1230",
        ],
        "accounts_payable": ["accounts_payable", "payables", "creditors", "1520"],
        "current_assets": ["current_assets", "1200"],
        "current_liabilities": ["current_liabilities", "short_term_liabilities", "1500"],
        "cash_and_cash_equivalents": ["cash_and_cash_equivalents", "cash", "1250"],
        "total_assets": ["total_assets", "assets_total", "balance_total", "balance", "1600"],
        "total_liabilities": ["total_liabilities", "liabilities_total"],
        "equity": ["equity", "capital", "1300"],
    },
    "income_statement": {
        "revenue": ["revenue", "sales", "2110"],
        "cost_of_goods_sold": ["cost_of_goods_sold", "cogs", "prime_cost", "2120"],
        "gross_profit": ["gross_profit", "2100"],
        "net_income": ["net_income", "profit", "2400"],
    },
}

EQUITY_FALLBACK_KEYS = ["equity"]

ENTRY_KEY_FIELDS = ("code", "name")
ENTRY_VALUE_FIELDS = ("value", "amount", "sum", "total")


def _entry_value(entry: Dict[str, Any]) -> Any:
    for field in ENTRY_VALUE_FIELDS:
        if entry.get(field) is not None:
            return entry[field]
    return None


def build_entry_lookup(entries: Sequence[Any]) -> Dict[str, Any]:
    lookup: Dict[str, Any] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        value = _entry_value(entry)
        for key_field in ENTRY_KEY_FIELDS:
            key = entry.get(key_field)
            if key is None or key == "":
                continue
            lookup[str(key).strip()] = value
    return lookup


def _as_lookup(source: Any) -> Dict[str, Any]:
    if isinstance(source, list):
        return build_entry_lookup(source)
    if isinstance(source, dict):
        return {str(key): value for key, value in source.items()}
    return {}


def extract_value(source: Any, preferred_keys: Sequence[str]) -> Any:
    lookup = _as_lookup(source)
    for key in preferred_keys:
        value = lookup.get(str(key))
        if value is not None:
            return value
    return 0
