from typing import Any, Dict, List, Optional, Tuple


class FakeSource:
    def __init__(
        self,
        reports: Optional[List[Dict[str, Any]]] = None,
        by_inn: Optional[Dict[str, Any]] = None,
        failing: Optional[Dict[str, Exception]] = None,
    ) -> None:
        self._reports = list(reports or [])
        self._by_inn = dict(by_inn or {})
        self._failing = dict(failing or {})
        self.calls: List[Tuple[str, int]] = []

    def fetch(self, inn: str, year: int) -> Any:
        self.calls.append((inn, year))
        if inn in self._failing:
            raise self._failing[inn]
        if inn in self._by_inn:
            return self._by_inn[inn]
        return {"data": {"finances": self._reports}}
