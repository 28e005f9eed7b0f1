import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


ANNUAL_QUARTER_SENTINEL = 5

NESTED_PERIOD_KEYS = ("period", "report_period")
YEAR_KEYS = ("report_year", "fiscal_year", "fy")
QUARTER_KEYS = ("report_quarter", "fiscal_quarter")


@dataclass(frozen=True)
class Period:
    year: int
    quarter: Optional[int] = None

    @classmethod
    def parse(cls, year: Any, quarter: Any = None) -> "Period":
        parsed_year = _coerce_int(year)
        if parsed_year is None or parsed_year <= 0:
            raise ValueError(f"Invalid reporting year: {year!r}")
        parsed_quarter = None
        if quarter not in (None, "", 0, "0"):
            parsed_quarter = _coerce_quarter(quarter)
            if parsed_quarter is None or not 1 <= parsed_quarter <= 4:
                raise ValueError(f"Invalid reporting quarter: {quarter!r}")
        return cls(parsed_year, parsed_quarter)

    @property
    def is_annual(self) -> bool:
        return not self.quarter

    @property
    def label(self) -> str:
        if self.is_annual:
            return str(self.year)
        return f"{self.year} Q{self.quarter}"

    def sort_key(self) -> Tuple[int, int]:
        return (self.year, self.quarter or ANNUAL_QUARTER_SENTINEL)

    def previous(self) -> "Period":
        if self.is_annual:
            return Period(self.year - 1)
        if self.quarter == 1:
            return Period(self.year - 1, 4)
        return Period(self.year, self.quarter - 1)

    def as_dict(self) -> Dict[str, Any]:
        return {"year": self.year, "quarter": self.quarter}

    def __lt__(self, other: "Period") -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return self.sort_key() < other.sort_key()


def _coerce_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if number != number or not number.is_integer():
        return None
    return int(number)


def _coerce_quarter(value: Any) -> Optional[int]:
    number = _coerce_int(value)
    if number is not None:
        return number
    if isinstance(value, str):
        match = re.fullmatch(r"\s*(?:Q|q)\s*([1-4])\s*", value)
        if match:
            return int(match.group(1))
    return None


def _first_valid(sources, keys, coerce) -> Any:
    for source in sources:
        for key in keys:
            value = coerce(source.get(key))
            if value is not None:
                return value
    return None


def detect_period(report: Any) -> Tuple[Optional[int], Optional[int]]:
    if not isinstance(report, dict):
        return None, None

    nested = [report[key] for key in NESTED_PERIOD_KEYS if isinstance(report.get(key), dict)]

    # Values that fail to coerce count as absent so the next source is tried.
    year = _first_valid([report], ["year"], _coerce_int)
    if year is None:
        year = _first_valid(nested, ["year"], _coerce_int)
    if year is None:
        scalar_period = report.get("period")
        if not isinstance(scalar_period, (dict, list)):
            year = _coerce_int(scalar_period)
    if year is None:
        year = _first_valid([report], YEAR_KEYS, _coerce_int)

    quarter = _first_valid([report], ["quarter"], _coerce_quarter)
    if quarter is None:
        quarter = _first_valid(nested, ["quarter"], _coerce_quarter)
    if quarter is None:
        quarter = _first_valid([report], QUARTER_KEYS, _coerce_quarter)

    return year, quarter
