import logging
import socket
import time
from typing import Any, Callable, Optional, Tuple
from urllib.parse import quote, urlparse

import requests

from .errors import ProviderError


logger = logging.getLogger(__name__)


class CheckoClient:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: int = 20,
        max_retries: int = 2,
        get_fn: Optional[Callable[..., Any]] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._get = get_fn or requests.get

    def fetch_financials(self, inn: str, year: int) -> Any:
        url = f"{self.base_url}/{quote(str(inn), safe='')}/financials"
        params = {"year": year, "key": self.api_key}
        return self._get_with_retry(url, params)

    def _get_with_retry(self, url: str, params: dict) -> Any:
        last_err: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            try:
                resp = self._get(url, params=params, timeout=self.timeout)
                resp.raise_for_status()
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as exc:
                last_err = exc
                logger.warning("Provider request failed (attempt %s): %s", attempt + 1, exc)
                if attempt < self.max_retries:
                    time.sleep(min(2 ** attempt, 4))
                continue
            except requests.exceptions.HTTPError as exc:
                status = getattr(exc.response, "status_code", None)
                raise ProviderError(f"Provider request failed with status {status}", status) from exc
            try:
                return resp.json()
            except ValueError as exc:
                raise ProviderError("Unable to parse provider response") from exc
        raise ProviderError(f"Provider unreachable: {last_err}")


def _probe_target(base_url: str) -> Tuple[str, int]:
    parsed = urlparse(base_url)
    host = parsed.hostname or ""
    port = parsed.port or (80 if parsed.scheme == "http" else 443)
    return host, port


def check_connection(
    base_url: str,
    timeout: float = 5.0,
    connect_fn: Optional[Callable[..., Any]] = None,
) -> Tuple[bool, Optional[str]]:
    host, port = _probe_target(base_url)
    if not host:
        return False, f"Invalid provider URL: {base_url!r}"
    connect = connect_fn or socket.create_connection
    try:
        conn = connect((host, port), timeout=timeout)
    except OSError as exc:
        return False, str(exc)
    conn.close()
    return True, None
