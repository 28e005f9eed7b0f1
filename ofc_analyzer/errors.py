from typing import Optional


class MissingDataError(LookupError):
    def __init__(self, inn: str, period: str) -> None:
        super().__init__(f"No financial report found for INN {inn}, period {period}")
        self.inn = inn
        self.period = period


class ProviderError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class QuotaExceededError(RuntimeError):
    def __init__(self, required: int, remaining: int) -> None:
        super().__init__(
            f"Daily request limit exceeded: {required} requests needed, {remaining} left"
        )
        self.required = required
        self.remaining = remaining
